"""Top-level package for the tour planner.

Lets a user line up points of interest between a start and an optional
end location, keeps the map and the derived route in step with that
selection, and hands the finished trip off to external navigation.
"""
