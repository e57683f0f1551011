"""Waypoint source port - Read-only access to the points of interest."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence

if TYPE_CHECKING:
    from ..domain.models import Waypoint


class WaypointSourcePort(Protocol):
    """Port for loading the selectable waypoints.

    Implementations: adapters/waypoints/kml_source.py

    Called once at session start.
    """

    def list_waypoints(self) -> Sequence[Waypoint]:
        """Load every available waypoint.

        Returns:
            Resolved waypoints with stable ids.

        Raises:
            WaypointSourceError: If the data is unavailable or malformed.
        """
        ...
