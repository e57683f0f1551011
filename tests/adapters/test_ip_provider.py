"""Tests for the positioning adapters."""

from unittest.mock import MagicMock

import pytest
import requests

from tourplanner.adapters.positioning import (
    FixedPositionProvider,
    IpPositionProvider,
    NoPositionProvider,
)
from tourplanner.config import PositioningConfig
from tourplanner.domain.errors import GeolocationError
from tourplanner.domain.models import GeolocationFailure, GeoPoint


def _response(status_code=200, payload=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.json.return_value = payload or {}
    return response


def _provider(session):
    return IpPositionProvider(PositioningConfig(timeout_seconds=2.0), session=session)


class TestIpPositionProvider:
    """Test suite for IpPositionProvider."""

    def test_reads_latitude_longitude(self):
        session = MagicMock()
        session.get.return_value = _response(payload={"latitude": -33.92, "longitude": 18.42})

        assert _provider(session).current_position() == GeoPoint(-33.92, 18.42)
        session.get.assert_called_once_with("https://ipapi.co/json/", timeout=2.0)

    def test_accepts_short_keys(self):
        session = MagicMock()
        session.get.return_value = _response(payload={"lat": "-26.2", "lon": "28.04"})

        assert _provider(session).current_position() == GeoPoint(-26.2, 28.04)

    @pytest.mark.parametrize(
        "side_effect, reason",
        [
            (requests.Timeout("slow"), GeolocationFailure.TIMEOUT),
            (requests.ConnectionError("offline"), GeolocationFailure.POSITION_UNAVAILABLE),
        ],
    )
    def test_transport_failures(self, side_effect, reason):
        session = MagicMock()
        session.get.side_effect = side_effect

        with pytest.raises(GeolocationError) as exc_info:
            _provider(session).current_position()

        assert exc_info.value.reason is reason

    @pytest.mark.parametrize(
        "status_code, reason",
        [
            (403, GeolocationFailure.PERMISSION_DENIED),
            (401, GeolocationFailure.PERMISSION_DENIED),
            (429, GeolocationFailure.POSITION_UNAVAILABLE),
            (500, GeolocationFailure.POSITION_UNAVAILABLE),
        ],
    )
    def test_http_failures(self, status_code, reason):
        session = MagicMock()
        session.get.return_value = _response(status_code=status_code)

        with pytest.raises(GeolocationError) as exc_info:
            _provider(session).current_position()

        assert exc_info.value.reason is reason

    @pytest.mark.parametrize(
        "payload",
        [
            {"error": True, "reason": "RateLimited"},
            {"latitude": "north", "longitude": 18.0},
            {"latitude": 123.0, "longitude": 18.0},
        ],
    )
    def test_unusable_payload(self, payload):
        session = MagicMock()
        session.get.return_value = _response(payload=payload)

        with pytest.raises(GeolocationError) as exc_info:
            _provider(session).current_position()

        assert exc_info.value.reason is GeolocationFailure.POSITION_UNAVAILABLE


def test_fixed_provider_returns_its_position():
    position = GeoPoint(-33.9, 18.4)
    assert FixedPositionProvider(position).current_position() == position


def test_no_provider_is_unsupported():
    with pytest.raises(GeolocationError) as exc_info:
        NoPositionProvider().current_position()
    assert exc_info.value.reason is GeolocationFailure.UNSUPPORTED
