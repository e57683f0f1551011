"""Domain models for the tour planner.

Value objects are frozen dataclasses with slots; a location is never
mutated in place, it is replaced by a new value on every edit. The only
mutable model is SelectionSet, whose single mutator is ``toggle``.
These models have no external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Iterator, Optional, Tuple, Union

# Label shown in the start field once the device position was used.
CURRENT_LOCATION_LABEL = "My Current Location"


class FieldId(Enum):
    """Location input fields that own an address search."""

    START = "start"
    END = "end"


class GeolocationFailure(Enum):
    """Why the device position could not be obtained."""

    PERMISSION_DENIED = auto()
    POSITION_UNAVAILABLE = auto()
    TIMEOUT = auto()
    UNSUPPORTED = auto()


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """GPS coordinates representing a geographic location."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        """Validate coordinate ranges."""
        if not -90 <= self.latitude <= 90:
            raise ValueError(
                f"Latitude must be between -90 and 90, got {self.latitude}"
            )
        if not -180 <= self.longitude <= 180:
            raise ValueError(
                f"Longitude must be between -180 and 180, got {self.longitude}"
            )

    def as_tuple(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)

    def to_param(self) -> str:
        """Format as ``lat,lon`` for URL parameters."""
        return f"{self.latitude},{self.longitude}"


@dataclass(frozen=True, slots=True)
class Suggestion:
    """A candidate address returned while the user is typing.

    Attributes:
        id: Provider identifier of the place
        label: Display name shown in the dropdown
        coords: Resolved coordinates of the place
    """

    id: str
    label: str
    coords: GeoPoint


@dataclass(frozen=True, slots=True)
class LocationPoint:
    """A user-controlled start or end location.

    Coordinates are only present when they came straight out of a
    resolution step (suggestion or device position); free-text edits
    always produce an unresolved point.

    Attributes:
        address: Free-text label, suggestion label or the current
            location sentinel
        coords: Resolved coordinates, or None
    """

    address: str = ""
    coords: Optional[GeoPoint] = None

    @property
    def is_resolved(self) -> bool:
        return self.coords is not None

    @property
    def is_current_location(self) -> bool:
        return self.address == CURRENT_LOCATION_LABEL

    @classmethod
    def from_text(cls, address: str) -> LocationPoint:
        return cls(address=address, coords=None)

    @classmethod
    def from_suggestion(cls, suggestion: Suggestion) -> LocationPoint:
        return cls(address=suggestion.label, coords=suggestion.coords)

    @classmethod
    def from_device(cls, coords: GeoPoint) -> LocationPoint:
        return cls(address=CURRENT_LOCATION_LABEL, coords=coords)


@dataclass(frozen=True, slots=True)
class Waypoint:
    """A point of interest that can be added to the tour.

    Attributes:
        id: Stable identifier from the source
        name: Display name
        address: Postal address, may be empty
        coords: Location of the point (always resolved)
    """

    id: str
    name: str
    address: str
    coords: GeoPoint


class SelectionSet:
    """Ordered set of selected waypoints, unique by id.

    Insertion order is the visiting order. ``toggle`` is the only way to
    change membership, so being selected and having a place in the
    itinerary can never disagree.
    """

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: Dict[str, Waypoint] = {}

    def toggle(self, waypoint: Waypoint) -> bool:
        """Remove the waypoint if selected, append it otherwise.

        Args:
            waypoint: The waypoint to toggle.

        Returns:
            True if the waypoint is selected after the call.
        """
        if waypoint.id in self._items:
            del self._items[waypoint.id]
            return False
        self._items[waypoint.id] = waypoint
        return True

    @property
    def items(self) -> Tuple[Waypoint, ...]:
        return tuple(self._items.values())

    @property
    def ids(self) -> Tuple[str, ...]:
        return tuple(self._items)

    def __contains__(self, item: Union[Waypoint, str]) -> bool:
        key = item.id if isinstance(item, Waypoint) else item
        return key in self._items

    def __iter__(self) -> Iterator[Waypoint]:
        return iter(tuple(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"SelectionSet({list(self._items)!r})"


@dataclass(frozen=True, slots=True)
class RoutePlan:
    """Route derived from the current start, end and selection.

    Attributes:
        points: Ordered geometry: start, stops, then the destination
            once there is at least one stop
        actionable: Enough is resolved to hand off to navigation
        bookable: Enough is resolved to request transport
        origin: Start coordinates, if resolved
        destination: Effective end coordinates, if resolved
        stops: Coordinates of the selected waypoints in visit order
        navigation_url: Directions link, only set when actionable
    """

    points: Tuple[GeoPoint, ...] = field(default_factory=tuple)
    actionable: bool = False
    bookable: bool = False
    origin: Optional[GeoPoint] = None
    destination: Optional[GeoPoint] = None
    stops: Tuple[GeoPoint, ...] = field(default_factory=tuple)
    navigation_url: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return len(self.points) == 0

    @property
    def has_path(self) -> bool:
        """A line can be drawn through the points."""
        return len(self.points) > 1


@dataclass(frozen=True, slots=True)
class Viewport:
    """Map region to display.

    Either ``bounds`` is set (fit the box with ``padding_px``) or the map
    falls back to ``center`` and ``zoom``.
    """

    center: GeoPoint
    zoom: int
    bounds: Optional[Tuple[GeoPoint, GeoPoint]] = None
    padding_px: int = 0

    @property
    def is_fitted(self) -> bool:
        return self.bounds is not None
