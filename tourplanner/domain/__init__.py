"""Domain layer - Core models and errors.

This module contains the domain models and typed errors used
throughout the application. No external dependencies.
"""

from .errors import (
    AddressSearchError,
    BookingError,
    ConfigurationError,
    GeolocationError,
    RenderingError,
    TourPlannerError,
    WaypointSourceError,
)
from .models import (
    CURRENT_LOCATION_LABEL,
    FieldId,
    GeolocationFailure,
    GeoPoint,
    LocationPoint,
    RoutePlan,
    SelectionSet,
    Suggestion,
    Viewport,
    Waypoint,
)

__all__ = [
    # Models
    "CURRENT_LOCATION_LABEL",
    "FieldId",
    "GeolocationFailure",
    "GeoPoint",
    "LocationPoint",
    "RoutePlan",
    "SelectionSet",
    "Suggestion",
    "Viewport",
    "Waypoint",
    # Errors
    "TourPlannerError",
    "WaypointSourceError",
    "AddressSearchError",
    "GeolocationError",
    "RenderingError",
    "BookingError",
    "ConfigurationError",
]
