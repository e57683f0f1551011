"""Planner session - the single source of truth of the UI.

Owns the loaded waypoints, the start and end points, the selection, the
per-field suggestion state and the transient feedback (loading flag,
load banner, geolocation alert, toast). Views subscribe and receive an
immutable SessionSnapshot after every change; they change state only
through the session's operations. Route and viewport are derived from
the snapshot on demand and never stored.

All operations run on one asyncio event loop. No locking is needed:
the suggestion fields drop stale lookups, everything else is last write
wins.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from functools import cached_property
from typing import Callable, Dict, List, Optional, Tuple

from ..config import MapConfig, get_config
from ..domain.errors import GeolocationError, WaypointSourceError
from ..domain.models import (
    FieldId,
    GeolocationFailure,
    LocationPoint,
    RoutePlan,
    SelectionSet,
    Suggestion,
    Viewport,
    Waypoint,
)
from ..ports.positioning import PositionProviderPort
from ..ports.waypoints import WaypointSourcePort
from . import handoff
from .notifications import Notifier
from .route_composer import compose_route, effective_end
from .suggestions import AddressSuggestionService, SuggestionField
from .viewport import fit_viewport, visible_points

LOAD_ERROR_MESSAGE = (
    "Failed to load brewery data from the map. "
    "Please ensure the map is public and accessible."
)

GEOLOCATION_MESSAGES: Dict[GeolocationFailure, str] = {
    GeolocationFailure.PERMISSION_DENIED: (
        "Location permission denied. "
        "Please enable location services in your browser settings."
    ),
    GeolocationFailure.POSITION_UNAVAILABLE: (
        "Location information is unavailable. "
        "Please check your network connection and try again."
    ),
    GeolocationFailure.TIMEOUT: (
        "The request to get user location timed out. Please try again."
    ),
    GeolocationFailure.UNSUPPORTED: (
        "Geolocation is not supported by your browser. "
        "Please enter an address manually."
    ),
}
GEOLOCATION_FALLBACK_MESSAGE = (
    "Could not get your location. Please enter an address manually."
)


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the session at one point in time."""

    waypoints: Tuple[Waypoint, ...] = ()
    start: LocationPoint = LocationPoint()
    end: LocationPoint = LocationPoint()
    use_different_end: bool = False
    selection: Tuple[Waypoint, ...] = ()
    start_suggestions: Tuple[Suggestion, ...] = ()
    end_suggestions: Tuple[Suggestion, ...] = ()
    searching_start: bool = False
    searching_end: bool = False
    locating: bool = False
    is_loading: bool = False
    load_error: Optional[str] = None
    notification: Optional[str] = None

    @cached_property
    def route(self) -> RoutePlan:
        return compose_route(self.start, self.end, self.use_different_end, self.selection)

    @property
    def destination(self) -> LocationPoint:
        return effective_end(self.start, self.end, self.use_different_end)

    def viewport(self, config: Optional[MapConfig] = None) -> Viewport:
        """Map region covering every waypoint and the route."""
        return fit_viewport(visible_points(self.waypoints, self.route), config)

    def is_selected(self, waypoint_id: str) -> bool:
        return any(waypoint.id == waypoint_id for waypoint in self.selection)

    def suggestions(self, field_id: FieldId) -> Tuple[Suggestion, ...]:
        if field_id is FieldId.START:
            return self.start_suggestions
        return self.end_suggestions


Listener = Callable[[SessionSnapshot], None]


@dataclass
class PlannerSession:
    """State store and operations of one planning session.

    Attributes:
        waypoint_source: Where the selectable waypoints come from
        suggestion_service: Address lookups for the start and end fields
        position_provider: Device positioning, None when unsupported
        notifier: Toast slot
        booking_email: Recipient of transport booking requests
    """

    waypoint_source: WaypointSourcePort
    suggestion_service: AddressSuggestionService
    position_provider: Optional[PositionProviderPort] = None
    notifier: Notifier = field(default_factory=Notifier)
    booking_email: str = field(
        default_factory=lambda: get_config().notifications.booking_email
    )

    _waypoints: Tuple[Waypoint, ...] = field(default=(), init=False, repr=False)
    _start: LocationPoint = field(default=LocationPoint(), init=False, repr=False)
    _end: LocationPoint = field(default=LocationPoint(), init=False, repr=False)
    _use_different_end: bool = field(default=False, init=False, repr=False)
    _selection: SelectionSet = field(default_factory=SelectionSet, init=False, repr=False)
    _fields: Dict[FieldId, SuggestionField] = field(default_factory=dict, init=False, repr=False)
    _locating: bool = field(default=False, init=False, repr=False)
    _start_generation: int = field(default=0, init=False, repr=False)
    _is_loading: bool = field(default=False, init=False, repr=False)
    _load_error: Optional[str] = field(default=None, init=False, repr=False)
    _alert: Optional[str] = field(default=None, init=False, repr=False)
    _listeners: List[Listener] = field(default_factory=list, init=False, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        for field_id in FieldId:
            self._fields[field_id] = self.suggestion_service.field(
                field_id, on_change=self._publish
            )
        self.notifier.on_change = lambda _message: self._publish()

    # -- observation -------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def snapshot(self) -> SessionSnapshot:
        start_field = self._fields[FieldId.START]
        end_field = self._fields[FieldId.END]
        return SessionSnapshot(
            waypoints=self._waypoints,
            start=self._start,
            end=self._end,
            use_different_end=self._use_different_end,
            selection=self._selection.items,
            start_suggestions=start_field.suggestions,
            end_suggestions=end_field.suggestions,
            searching_start=start_field.searching,
            searching_end=end_field.searching,
            locating=self._locating,
            is_loading=self._is_loading,
            load_error=self._load_error,
            notification=self.notifier.message,
        )

    def suggestion_field(self, field_id: FieldId) -> SuggestionField:
        return self._fields[field_id]

    # -- waypoints ---------------------------------------------------------

    async def load_waypoints(self) -> None:
        """Fetch the waypoints once; failure leaves a banner, not a crash."""
        self._is_loading = True
        self._publish()
        try:
            waypoints = await asyncio.to_thread(self.waypoint_source.list_waypoints)
        except WaypointSourceError as e:
            self._logger.error("Failed to load waypoints", extra={"error": str(e)})
            self._waypoints = ()
            self._load_error = LOAD_ERROR_MESSAGE
        else:
            self._waypoints = tuple(waypoints)
            self._load_error = None
            self._logger.info("Session waypoints ready", extra={"count": len(waypoints)})
        finally:
            self._is_loading = False
            self._publish()

    def toggle_waypoint(self, waypoint: Waypoint) -> bool:
        """Add the waypoint at the end of the tour, or remove it.

        Returns:
            True if the waypoint is now selected.
        """
        selected = self._selection.toggle(waypoint)
        self._logger.debug(
            "Waypoint toggled",
            extra={"waypoint": waypoint.id, "selected": selected},
        )
        self._publish()
        return selected

    # -- locations ---------------------------------------------------------

    def set_from_text(self, field_id: FieldId, text: str) -> None:
        """Free-text edit: the point becomes unresolved and a lookup is queued.

        Must be called from the event loop thread.
        """
        self._set_point(field_id, LocationPoint.from_text(text))
        self._fields[field_id].update(text)

    def set_from_suggestion(self, field_id: FieldId, suggestion: Suggestion) -> None:
        self._fields[field_id].clear()
        self._set_point(field_id, LocationPoint.from_suggestion(suggestion))

    def dismiss_suggestions(self, field_id: FieldId) -> None:
        """The field lost focus."""
        self._fields[field_id].clear()

    def set_use_different_end(self, enabled: bool) -> None:
        self._use_different_end = enabled
        self._publish()

    async def use_device_location(self) -> None:
        """Resolve the start point from the device position.

        A call made while another one is pending does nothing. Failures
        leave the start point untouched and raise a one-time alert. A
        result that arrives after the start point was edited, or after the
        session was closed, is dropped along with its alert.
        """
        if self._locating:
            return

        generation = self._start_generation
        self._locating = True
        self._fields[FieldId.START].clear()
        self._publish()
        try:
            if self.position_provider is None:
                raise GeolocationError(
                    "No position provider configured",
                    reason=GeolocationFailure.UNSUPPORTED,
                )
            coords = await asyncio.to_thread(self.position_provider.current_position)
        except GeolocationError as e:
            if generation != self._start_generation:
                return
            self._logger.warning(
                "Error getting location",
                extra={"reason": e.reason.name, "error": str(e)},
            )
            self._alert = GEOLOCATION_MESSAGES.get(e.reason, GEOLOCATION_FALLBACK_MESSAGE)
        except Exception as e:
            if generation != self._start_generation:
                return
            self._logger.error("Unexpected positioning error", extra={"error": str(e)})
            self._alert = GEOLOCATION_FALLBACK_MESSAGE
        else:
            if generation != self._start_generation:
                self._logger.debug("Discarding stale device position")
                return
            self._start = LocationPoint.from_device(coords)
        finally:
            self._locating = False
            self._publish()

    def pop_alert(self) -> Optional[str]:
        """Return the pending alert once, then forget it."""
        alert, self._alert = self._alert, None
        return alert

    # -- hand-offs ---------------------------------------------------------

    def share_link(self, platform: handoff.SharePlatform) -> Optional[str]:
        return handoff.share_link(self.snapshot().route, platform)

    def submit_booking(self, request: handoff.BookingRequest) -> Optional[str]:
        """Build the booking e-mail and confirm with a toast.

        Returns:
            The ``mailto:`` link, or None if the route is not bookable.
        """
        snapshot = self.snapshot()
        link = handoff.booking_link(
            snapshot.route,
            request,
            snapshot.start,
            snapshot.destination,
            snapshot.selection,
            self.booking_email,
        )
        if link is None:
            self._logger.warning("Booking requested for a route that is not bookable")
            return None

        self._logger.info(
            "Booking request prepared",
            extra={"stops": len(snapshot.selection), "people": request.people_count},
        )
        self.notifier.show(handoff.BOOKING_CONFIRMATION)
        return link

    def close(self) -> None:
        """End the session: cancel lookups and timers."""
        self._start_generation += 1
        for suggestion_field in self._fields.values():
            suggestion_field.close()
        self.notifier.clear()
        self._listeners.clear()

    # -- internals ---------------------------------------------------------

    def _set_point(self, field_id: FieldId, point: LocationPoint) -> None:
        if field_id is FieldId.START:
            self._start_generation += 1
            self._start = point
        else:
            self._end = point
        self._publish()

    def _publish(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
