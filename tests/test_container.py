"""Tests for configuration loading and dependency wiring."""

import json
import logging

import pytest

from tourplanner.adapters.geocoding import NominatimAddressSearch
from tourplanner.adapters.positioning import (
    FixedPositionProvider,
    IpPositionProvider,
    NoPositionProvider,
)
from tourplanner.adapters.rendering import FoliumMapRenderer
from tourplanner.adapters.waypoints import KmlWaypointSource
from tourplanner.config import AppConfig, PositioningConfig, get_config, reset_config
from tourplanner.container import (
    Container,
    create_position_provider,
    get_container,
    reset_container,
)
from tourplanner.domain.errors import ConfigurationError
from tourplanner.domain.models import GeoPoint
from tourplanner.logging_config import JsonFormatter
from tourplanner.ports.geocoding import AddressSearchPort
from tourplanner.ports.positioning import PositionProviderPort
from tourplanner.ports.rendering import MapRendererPort
from tourplanner.ports.waypoints import WaypointSourcePort
from tourplanner.services import PlannerSession


@pytest.fixture(autouse=True)
def fresh_globals():
    reset_config()
    reset_container()
    yield
    reset_config()
    reset_container()


class TestConfig:
    def test_defaults(self):
        config = AppConfig()

        assert config.geocoding.country_codes == "za"
        assert config.geocoding.result_limit == 5
        assert config.geocoding.debounce_seconds == 0.5
        assert config.notifications.display_seconds == 5.0
        assert config.map.fit_padding_px == 50
        assert config.sessions.idle_seconds == 3600.0
        assert config.sessions.max_sessions == 500
        assert config.source.fetch_url.startswith("https://corsproxy.io/?https://www.google.com/maps/d/kml")

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("TOUR_GEO_RESULT_LIMIT", "3")
        monkeypatch.setenv("TOUR_POSITION_PROVIDER", "none")
        monkeypatch.setenv("TOUR_SESSION_MAX_SESSIONS", "20")

        config = get_config()

        assert config.geocoding.result_limit == 3
        assert config.positioning.provider == "none"
        assert config.sessions.max_sessions == 20

    def test_config_is_cached_until_reset(self):
        first = get_config()
        assert get_config() is first
        reset_config()
        assert get_config() is not first


class TestContainer:
    def test_register_and_resolve_singleton(self):
        container = Container(config=AppConfig())
        container.register(WaypointSourcePort, object)

        assert container.resolve(WaypointSourcePort) is container.resolve(WaypointSourcePort)

    def test_non_singleton_creates_new_instances(self):
        container = Container(config=AppConfig())
        container.register(WaypointSourcePort, object, singleton=False)

        assert container.resolve(WaypointSourcePort) is not container.resolve(
            WaypointSourcePort
        )

    def test_unregistered_type_raises(self):
        with pytest.raises(KeyError):
            Container(config=AppConfig()).resolve(MapRendererPort)

    def test_default_bindings(self):
        container = Container.create_default(AppConfig())

        assert isinstance(container.resolve(AddressSearchPort), NominatimAddressSearch)
        assert isinstance(container.resolve(WaypointSourcePort), KmlWaypointSource)
        assert isinstance(container.resolve(PositionProviderPort), IpPositionProvider)
        assert isinstance(container.resolve(MapRendererPort), FoliumMapRenderer)

    def test_each_session_is_independent(self):
        container = Container.create_default(AppConfig())

        first = container.resolve(PlannerSession)
        second = container.resolve(PlannerSession)

        assert first is not second
        assert first.waypoint_source is second.waypoint_source
        assert first.notifier is not second.notifier

    def test_global_container_is_shared(self):
        assert get_container() is get_container()


class TestPositionProviderSelection:
    def test_fixed(self):
        provider = create_position_provider(
            PositioningConfig(provider="fixed", fixed_latitude=-33.9, fixed_longitude=18.4)
        )
        assert isinstance(provider, FixedPositionProvider)
        assert provider.current_position() == GeoPoint(-33.9, 18.4)

    def test_fixed_without_coordinates(self):
        with pytest.raises(ConfigurationError):
            create_position_provider(PositioningConfig(provider="fixed"))

    def test_none(self):
        provider = create_position_provider(PositioningConfig(provider="none"))
        assert isinstance(provider, NoPositionProvider)


def test_json_formatter_includes_extras():
    record = logging.makeLogRecord(
        {"name": "tourplanner.test", "levelname": "INFO", "msg": "Waypoints loaded"}
    )
    record.waypoints = 12

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "Waypoints loaded"
    assert payload["waypoints"] == 12
    assert "msg" not in payload
