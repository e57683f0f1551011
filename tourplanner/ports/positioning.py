"""Positioning port - Abstraction for the device's current position."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..domain.models import GeoPoint


class PositionProviderPort(Protocol):
    """Port for single-shot positioning.

    Implementations: adapters/positioning/
    """

    def current_position(self) -> GeoPoint:
        """Return the current position of the device.

        Raises:
            GeolocationError: With the reason positioning failed
                (permission denied, position unavailable, timeout).
        """
        ...
