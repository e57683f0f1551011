"""Typed domain errors for the tour planner.

Adapters raise these instead of leaking transport or parser exceptions.
Services catch them at the boundary of the operation that issued the
call and turn them into session state (banner, alert, empty list).

All errors inherit from TourPlannerError and can optionally wrap a
root cause exception for debugging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .models import GeolocationFailure


@dataclass
class TourPlannerError(Exception):
    """Base error for the tour planner domain.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class WaypointSourceError(TourPlannerError):
    """The waypoint list could not be fetched or parsed.

    Attributes:
        source: URL or file path the waypoints were read from
    """

    source: str = ""


@dataclass
class AddressSearchError(TourPlannerError):
    """An address suggestion lookup failed.

    Attributes:
        query: The text that was searched
    """

    query: str = ""


@dataclass
class GeolocationError(TourPlannerError):
    """The device position could not be obtained.

    Attributes:
        reason: Why positioning failed
    """

    reason: GeolocationFailure = GeolocationFailure.POSITION_UNAVAILABLE


@dataclass
class RenderingError(TourPlannerError):
    """Map rendering failed.

    Attributes:
        output_path: Path where rendering was attempted
        renderer_type: Type of renderer that failed
    """

    output_path: Optional[str] = None
    renderer_type: str = ""


@dataclass
class BookingError(TourPlannerError):
    """A transport booking request is incomplete or invalid.

    Attributes:
        field_name: Name of the offending form field
    """

    field_name: str = ""


@dataclass
class ConfigurationError(TourPlannerError):
    """Invalid or missing configuration.

    Attributes:
        setting_name: Name of the problematic setting
        expected_type: Expected type or format
    """

    setting_name: str = ""
    expected_type: Optional[str] = None
