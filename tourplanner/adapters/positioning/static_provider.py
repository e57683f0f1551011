"""Position providers that never touch the network."""

from __future__ import annotations

from dataclasses import dataclass

from ...domain.errors import GeolocationError
from ...domain.models import GeolocationFailure, GeoPoint


@dataclass(frozen=True)
class FixedPositionProvider:
    """Always reports the same position."""

    position: GeoPoint

    def current_position(self) -> GeoPoint:
        return self.position


@dataclass(frozen=True)
class NoPositionProvider:
    """Used when the platform offers no positioning at all."""

    def current_position(self) -> GeoPoint:
        raise GeolocationError(
            "Geolocation is not supported",
            reason=GeolocationFailure.UNSUPPORTED,
        )
