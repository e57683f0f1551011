"""Route composition.

Derives the ordered route geometry and the navigation hand-off link from
the start, the end and the selected waypoints. Everything here is a pure
function of its arguments; the session calls it on every snapshot, so
the route can never drift from the model.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from ..domain.models import GeoPoint, LocationPoint, RoutePlan, Waypoint

NAVIGATION_BASE_URL = "https://www.google.com/maps/dir/?api=1"
TRAVEL_MODE = "driving"


def effective_end(
    start: LocationPoint, end: LocationPoint, use_different_end: bool
) -> LocationPoint:
    """Return the point the tour finishes at (the start for a round trip)."""
    return end if use_different_end else start


def route_points(
    start: LocationPoint,
    end: LocationPoint,
    use_different_end: bool,
    selection: Iterable[Waypoint],
) -> List[GeoPoint]:
    """Ordered geometry: start, each stop, then the destination.

    The destination is only appended once there is at least one stop,
    so an empty selection yields just the start.
    """
    stops = [waypoint.coords for waypoint in selection]
    destination = effective_end(start, end, use_different_end).coords

    points: List[GeoPoint] = []
    if start.coords is not None:
        points.append(start.coords)
    points.extend(stops)
    if destination is not None and stops:
        points.append(destination)
    return points


def is_actionable(
    start: LocationPoint,
    end: LocationPoint,
    use_different_end: bool,
    selection_size: int,
) -> bool:
    """Whether the trip can be handed to turn-by-turn navigation.

    Needs a resolved start and a resolved destination. Without stops the
    trip is only valid when the end point lies elsewhere than the start;
    a round trip, or an end at the very same coordinates, has nowhere to
    go.
    """
    if start.coords is None:
        return False
    destination = effective_end(start, end, use_different_end).coords
    if destination is None:
        return False
    if selection_size > 0:
        return True
    return use_different_end and destination != start.coords


def is_bookable(
    start: LocationPoint,
    end: LocationPoint,
    use_different_end: bool,
    selection_size: int,
) -> bool:
    """Whether transport can be requested: needs at least one real stop."""
    if start.coords is None or selection_size == 0:
        return False
    return not use_different_end or end.coords is not None


def navigation_url(
    origin: GeoPoint, destination: GeoPoint, stops: Iterable[GeoPoint]
) -> str:
    """Build the Google Maps directions link.

    Stops keep their order; the provider treats it as the itinerary.
    """
    url = (
        f"{NAVIGATION_BASE_URL}"
        f"&origin={origin.to_param()}"
        f"&destination={destination.to_param()}"
    )
    waypoints = "|".join(stop.to_param() for stop in stops)
    if waypoints:
        url += f"&waypoints={waypoints}"
    return url + f"&travelmode={TRAVEL_MODE}"


def compose_route(
    start: LocationPoint,
    end: LocationPoint,
    use_different_end: bool,
    selection: Iterable[Waypoint],
) -> RoutePlan:
    """Derive the full route plan.

    Never raises: an unresolved start simply yields a plan that is not
    actionable and carries no link.

    Args:
        start: Start location.
        end: End location, only used when ``use_different_end`` is set.
        use_different_end: Finish somewhere other than the start.
        selection: Selected waypoints in visiting order.

    Returns:
        The derived RoutePlan.
    """
    waypoints = tuple(selection)
    stops = tuple(waypoint.coords for waypoint in waypoints)
    destination: Optional[GeoPoint] = effective_end(
        start, end, use_different_end
    ).coords

    actionable = is_actionable(start, end, use_different_end, len(waypoints))
    url: Optional[str] = None
    if actionable:
        assert start.coords is not None and destination is not None
        url = navigation_url(start.coords, destination, stops)

    return RoutePlan(
        points=tuple(route_points(start, end, use_different_end, waypoints)),
        actionable=actionable,
        bookable=is_bookable(start, end, use_different_end, len(waypoints)),
        origin=start.coords,
        destination=destination,
        stops=stops,
        navigation_url=url,
    )
