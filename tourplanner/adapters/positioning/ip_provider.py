"""IP geolocation adapter.

Approximates the device position by asking an IP geolocation service
(``ipapi.co`` by default). Transport failures are mapped onto the same
three causes a browser reports: permission denied, position unavailable
and timeout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import requests

from ...config import PositioningConfig, get_config
from ...domain.errors import GeolocationError
from ...domain.models import GeolocationFailure, GeoPoint

_DENIED_STATUSES = {401, 403}


def _read_coordinate(payload: Mapping[str, Any], *keys: str) -> Optional[float]:
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return float(value)
    return None


@dataclass
class IpPositionProvider:
    """PositionProviderPort backed by an HTTP JSON endpoint.

    Attributes:
        config: Positioning configuration
        session: HTTP session used for the lookup
    """

    config: PositioningConfig = field(default_factory=lambda: get_config().positioning)
    session: requests.Session = field(default_factory=requests.Session, repr=False)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def current_position(self) -> GeoPoint:
        """Look up the position of this machine.

        Raises:
            GeolocationError: With the reason the lookup failed.
        """
        url = self.config.ip_lookup_url
        try:
            response = self.session.get(url, timeout=self.config.timeout_seconds)
        except requests.Timeout as e:
            raise GeolocationError(
                "Position lookup timed out",
                reason=GeolocationFailure.TIMEOUT,
                cause=e,
            ) from e
        except requests.RequestException as e:
            raise GeolocationError(
                "Position lookup failed",
                reason=GeolocationFailure.POSITION_UNAVAILABLE,
                cause=e,
            ) from e

        if response.status_code in _DENIED_STATUSES:
            raise GeolocationError(
                f"Position lookup refused with HTTP {response.status_code}",
                reason=GeolocationFailure.PERMISSION_DENIED,
            )
        if not response.ok:
            raise GeolocationError(
                f"Position lookup failed with HTTP {response.status_code}",
                reason=GeolocationFailure.POSITION_UNAVAILABLE,
            )

        try:
            payload = response.json()
            latitude = _read_coordinate(payload, "latitude", "lat")
            longitude = _read_coordinate(payload, "longitude", "lon")
            if latitude is None or longitude is None:
                raise ValueError("response has no coordinates")
            position = GeoPoint(latitude=latitude, longitude=longitude)
        except (AttributeError, TypeError, ValueError) as e:
            raise GeolocationError(
                "Position lookup returned no usable coordinates",
                reason=GeolocationFailure.POSITION_UNAVAILABLE,
                cause=e,
            ) from e

        self._logger.debug(
            "Position resolved",
            extra={"lat": position.latitude, "lon": position.longitude},
        )
        return position
