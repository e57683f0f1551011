"""Centralized configuration using Pydantic Settings.

Every tunable of the planner lives here: address search, the waypoint
source, device positioning, map defaults, notifications and logging.

Configuration can be overridden via environment variables:
- TOUR_GEO_COUNTRY_CODES=za
- TOUR_GEO_DEBOUNCE_SECONDS=0.3
- TOUR_SOURCE_KML_PATH=/path/to/export.kml
- TOUR_POSITION_PROVIDER=fixed
- etc.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeocodingConfig(BaseSettings):
    """Address suggestion configuration.

    Environment variables prefixed with TOUR_GEO_.
    """

    model_config = SettingsConfigDict(env_prefix="TOUR_GEO_")

    user_agent: str = "tour-planner"
    timeout_seconds: int = 10
    country_codes: str = "za"
    result_limit: int = Field(default=5, ge=1)
    min_query_length: int = Field(default=3, ge=1)
    debounce_seconds: float = Field(default=0.5, ge=0.0)
    cache_ttl_seconds: Optional[float] = 600.0
    cache_max_size: Optional[int] = 256


class WaypointSourceConfig(BaseSettings):
    """Waypoint source configuration.

    Environment variables prefixed with TOUR_SOURCE_.
    """

    model_config = SettingsConfigDict(env_prefix="TOUR_SOURCE_")

    kml_url: str = (
        "https://www.google.com/maps/d/kml"
        "?mid=1HJtc-6GV8TMTTke3BAdM12QEQA7qHGs-&forcekml=1"
    )
    # Google refuses direct browser fetches, the export is read via a proxy.
    proxy_url: Optional[str] = "https://corsproxy.io/?{url}"
    timeout_seconds: int = 15
    kml_path: Optional[Path] = None

    @property
    def fetch_url(self) -> str:
        """URL actually requested for the KML export."""
        if self.proxy_url:
            return self.proxy_url.format(url=self.kml_url)
        return self.kml_url


class PositioningConfig(BaseSettings):
    """Device positioning configuration.

    Environment variables prefixed with TOUR_POSITION_.
    """

    model_config = SettingsConfigDict(env_prefix="TOUR_POSITION_")

    provider: Literal["ip", "fixed", "none"] = "ip"
    ip_lookup_url: str = "https://ipapi.co/json/"
    timeout_seconds: float = 10.0
    fixed_latitude: Optional[float] = None
    fixed_longitude: Optional[float] = None


class MapConfig(BaseSettings):
    """Map display configuration.

    Environment variables prefixed with TOUR_MAP_.
    """

    model_config = SettingsConfigDict(env_prefix="TOUR_MAP_")

    # Whole of South Africa
    default_center_lat: float = -28.94
    default_center_lon: float = 24.55
    default_zoom: int = 6
    fit_padding_px: int = 50
    settle_delay_ms: int = 100
    tiles: str = "OpenStreetMap"
    route_color: str = "#3b82f6"
    route_weight: int = 5


class SessionConfig(BaseSettings):
    """Lifetime of per-tab planner sessions.

    Environment variables prefixed with TOUR_SESSION_.
    """

    model_config = SettingsConfigDict(env_prefix="TOUR_SESSION_")

    idle_seconds: float = Field(default=3600.0, gt=0.0)
    max_sessions: int = Field(default=500, ge=1)


class NotificationConfig(BaseSettings):
    """Toast and booking hand-off configuration.

    Environment variables prefixed with TOUR_NOTIFY_.
    """

    model_config = SettingsConfigDict(env_prefix="TOUR_NOTIFY_")

    display_seconds: float = Field(default=5.0, gt=0.0)
    booking_email: str = "info@beerroute.co.za"


class ObservabilityConfig(BaseSettings):
    """Logging and observability configuration.

    Environment variables prefixed with TOUR_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="TOUR_LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = False  # Set True for JSON logging


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

    Sub-configurations are reached through attributes:

        config = get_config()
        print(config.geocoding.country_codes)
        print(config.map.default_zoom)

    Environment variables prefixed with TOUR_.
    """

    model_config = SettingsConfigDict(env_prefix="TOUR_")

    geocoding: GeocodingConfig = Field(default_factory=GeocodingConfig)
    source: WaypointSourceConfig = Field(default_factory=WaypointSourceConfig)
    positioning: PositioningConfig = Field(default_factory=PositioningConfig)
    map: MapConfig = Field(default_factory=MapConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    sessions: SessionConfig = Field(default_factory=SessionConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.

    Returns:
        The application configuration instance.
    """
    return AppConfig()


def reset_config() -> None:
    """Reset the configuration cache.

    Call this in tests to ensure a fresh configuration is loaded.
    """
    get_config.cache_clear()
