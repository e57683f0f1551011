"""Nominatim address search adapter.

Partial-address search against OpenStreetMap Nominatim through geopy.
Answers are cached per normalized query and geopy failures surface as
AddressSearchError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from geopy.exc import GeopyError
from geopy.geocoders import Nominatim

from ...config import GeocodingConfig, get_config
from ...domain.errors import AddressSearchError
from ...domain.models import GeoPoint, Suggestion
from ...ports.cache import CachePort
from ..cache.memory_cache import InMemoryCache


def _default_cache() -> InMemoryCache[List[Suggestion]]:
    config = get_config().geocoding
    return InMemoryCache(
        name="suggestions",
        default_ttl_seconds=config.cache_ttl_seconds,
        max_size=config.cache_max_size,
    )


@dataclass
class NominatimAddressSearch:
    """Nominatim-backed implementation of AddressSearchPort.

    Attributes:
        config: Geocoding configuration
        cache: Cache for suggestion lists
    """

    config: GeocodingConfig = field(default_factory=lambda: get_config().geocoding)
    cache: CachePort[List[Suggestion]] = field(default_factory=_default_cache)

    _geolocator: Optional[Nominatim] = field(default=None, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def _get_geolocator(self) -> Nominatim:
        """Get or initialize the geolocator."""
        if self._geolocator is None:
            self._logger.debug(
                "Initializing Nominatim geocoder",
                extra={
                    "user_agent": self.config.user_agent,
                    "timeout": self.config.timeout_seconds,
                },
            )
            self._geolocator = Nominatim(
                user_agent=self.config.user_agent,
                timeout=self.config.timeout_seconds,
            )
        return self._geolocator

    def lookup(self, query: str, country_codes: str, limit: int) -> List[Suggestion]:
        """Search Nominatim for places matching a partial address.

        Args:
            query: The text typed so far.
            country_codes: Comma-separated ISO country codes.
            limit: Maximum number of candidates.

        Returns:
            Up to ``limit`` suggestions in provider order.

        Raises:
            AddressSearchError: If the service fails or answers garbage.
        """
        cache_key = f"{query.strip().lower()}:{country_codes}:{limit}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            self._logger.debug("Suggestion cache hit", extra={"query": query})
            return list(cached)

        try:
            locations = self._get_geolocator().geocode(
                query,
                exactly_one=False,
                limit=limit,
                country_codes=country_codes,
            )
        except GeopyError as e:
            raise AddressSearchError(
                "Address search failed", query=query, cause=e
            ) from e

        suggestions = [self._to_suggestion(loc) for loc in (locations or [])][:limit]

        self._logger.debug(
            "Address search complete",
            extra={"query": query, "results": len(suggestions)},
        )
        self.cache.set(cache_key, suggestions)
        return suggestions

    def _to_suggestion(self, location: Any) -> Suggestion:
        raw = location.raw or {}
        try:
            coords = GeoPoint(
                latitude=float(location.latitude),
                longitude=float(location.longitude),
            )
        except (TypeError, ValueError) as e:
            raise AddressSearchError(
                "Malformed address search result",
                query=str(raw.get("display_name", "")),
                cause=e,
            ) from e

        return Suggestion(
            id=str(raw.get("place_id", location.address)),
            label=str(raw.get("display_name") or location.address),
            coords=coords,
        )
