"""Wiring of ports to adapters.

The container maps a port type to a factory. Adapters are built on first
resolve and shared afterwards; the planner session is bound as a
per-resolve factory so every browser tab gets its own state.

    container = Container.create_default()
    session = container.resolve(PlannerSession)

Tests build an empty ``Container`` and bind fakes to the ports they need.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .config import AppConfig, PositioningConfig, get_config
from .domain.errors import ConfigurationError
from .domain.models import GeoPoint

_UNSET = object()


@dataclass
class _Binding:
    factory: Callable[[], Any]
    shared: bool
    instance: Any = _UNSET


@dataclass
class Container:
    """Port registry with lazily built, optionally shared instances.

    Attributes:
        config: Configuration handed to the default adapters
    """

    config: AppConfig = field(default_factory=get_config)

    _bindings: Dict[type[Any], _Binding] = field(default_factory=dict, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def register(
        self,
        port_type: type[Any],
        factory: Callable[[], Any],
        singleton: bool = True,
    ) -> None:
        """Bind ``port_type`` to ``factory``, replacing any earlier binding.

        Args:
            port_type: Key to resolve by, usually a Protocol.
            factory: Zero-argument callable building the implementation.
            singleton: Share the first instance instead of building one
                per resolve.
        """
        with self._lock:
            self._bindings[port_type] = _Binding(factory=factory, shared=singleton)

    def resolve(self, port_type: type[Any]) -> Any:
        """Return the implementation bound to ``port_type``.

        Raises:
            KeyError: If nothing is bound to the type.
        """
        with self._lock:
            binding = self._bindings.get(port_type)
            if binding is None:
                raise KeyError(f"Type not registered: {port_type}")
            if not binding.shared:
                return binding.factory()
            if binding.instance is _UNSET:
                binding.instance = binding.factory()
            return binding.instance

    def is_registered(self, port_type: type[Any]) -> bool:
        return port_type in self._bindings

    def clear_all(self) -> None:
        """Forget every binding and shared instance."""
        with self._lock:
            self._bindings.clear()

    @classmethod
    def create_default(cls, config: Optional[AppConfig] = None) -> Container:
        """Bind the production adapters.

        Args:
            config: Configuration to use instead of ``get_config()``.
        """
        from .adapters.cache import InMemoryCache
        from .adapters.geocoding import NominatimAddressSearch
        from .adapters.rendering import FoliumMapRenderer
        from .adapters.waypoints import KmlWaypointSource
        from .ports.geocoding import AddressSearchPort
        from .ports.positioning import PositionProviderPort
        from .ports.rendering import MapRendererPort
        from .ports.waypoints import WaypointSourcePort
        from .services import AddressSuggestionService, Notifier, PlannerSession

        config = config or get_config()
        container = cls(config=config)

        # One suggestion cache for every session
        suggestion_cache: InMemoryCache[Any] = InMemoryCache(
            name="suggestions",
            default_ttl_seconds=config.geocoding.cache_ttl_seconds,
            max_size=config.geocoding.cache_max_size,
        )
        container.register(
            AddressSearchPort,
            lambda: NominatimAddressSearch(config.geocoding, suggestion_cache),
        )
        container.register(
            AddressSuggestionService,
            lambda: AddressSuggestionService(
                container.resolve(AddressSearchPort), config.geocoding
            ),
        )
        container.register(WaypointSourcePort, lambda: KmlWaypointSource(config.source))
        container.register(
            PositionProviderPort, lambda: create_position_provider(config.positioning)
        )
        container.register(MapRendererPort, lambda: FoliumMapRenderer(config.map))

        def new_session() -> PlannerSession:
            return PlannerSession(
                waypoint_source=container.resolve(WaypointSourcePort),
                suggestion_service=container.resolve(AddressSuggestionService),
                position_provider=container.resolve(PositionProviderPort),
                notifier=Notifier(display_seconds=config.notifications.display_seconds),
                booking_email=config.notifications.booking_email,
            )

        container.register(PlannerSession, new_session, singleton=False)
        return container


def create_position_provider(config: PositioningConfig) -> Any:
    """Pick the position provider named in the configuration.

    Raises:
        ConfigurationError: If a fixed provider has no coordinates.
    """
    from .adapters.positioning import (
        FixedPositionProvider,
        IpPositionProvider,
        NoPositionProvider,
    )

    if config.provider == "fixed":
        if config.fixed_latitude is None or config.fixed_longitude is None:
            raise ConfigurationError(
                "Fixed positioning needs a latitude and a longitude",
                setting_name="TOUR_POSITION_FIXED_LATITUDE/LONGITUDE",
                expected_type="float",
            )
        return FixedPositionProvider(
            GeoPoint(latitude=config.fixed_latitude, longitude=config.fixed_longitude)
        )
    if config.provider == "none":
        return NoPositionProvider()
    return IpPositionProvider(config)


_app_container: Optional[Container] = None
_app_container_lock = threading.Lock()


def get_container() -> Container:
    """Return the process-wide container, building it on first use."""
    global _app_container
    with _app_container_lock:
        if _app_container is None:
            _app_container = Container.create_default()
        return _app_container


def reset_container() -> None:
    """Drop the process-wide container so the next call rebuilds it."""
    global _app_container
    with _app_container_lock:
        if _app_container is not None:
            _app_container.clear_all()
        _app_container = None
