"""Tests for the Nominatim address search adapter."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from geopy.exc import GeocoderTimedOut

from tourplanner.adapters.cache import InMemoryCache
from tourplanner.adapters.geocoding import NominatimAddressSearch
from tourplanner.config import GeocodingConfig
from tourplanner.domain.errors import AddressSearchError
from tourplanner.domain.models import GeoPoint


def _location(place_id, name, lat, lon):
    return SimpleNamespace(
        latitude=lat,
        longitude=lon,
        address=name,
        raw={"place_id": place_id, "display_name": name},
    )


@pytest.fixture
def geolocator():
    mock = MagicMock()
    mock.geocode.return_value = [
        _location(11, "Stellenbosch, Western Cape, South Africa", -33.93, 18.86),
        _location(12, "Stellenbosch Central, Stellenbosch", -33.94, 18.85),
    ]
    return mock


@pytest.fixture
def adapter(geolocator):
    return NominatimAddressSearch(
        config=GeocodingConfig(),
        cache=InMemoryCache(name="test"),
        _geolocator=geolocator,
    )


class TestNominatimAddressSearch:
    """Test suite for NominatimAddressSearch."""

    def test_lookup_maps_results(self, adapter, geolocator):
        suggestions = adapter.lookup("Stellenbosch", "za", 5)

        assert [s.id for s in suggestions] == ["11", "12"]
        assert suggestions[0].label == "Stellenbosch, Western Cape, South Africa"
        assert suggestions[0].coords == GeoPoint(-33.93, 18.86)
        geolocator.geocode.assert_called_once_with(
            "Stellenbosch", exactly_one=False, limit=5, country_codes="za"
        )

    def test_lookup_is_cached_per_normalized_query(self, adapter, geolocator):
        adapter.lookup("Stellenbosch", "za", 5)
        adapter.lookup("  stellenbosch ", "za", 5)

        assert geolocator.geocode.call_count == 1

    def test_no_match_returns_empty_list(self, adapter, geolocator):
        geolocator.geocode.return_value = None
        assert adapter.lookup("Nowhere at all", "za", 5) == []

    def test_results_are_capped(self, adapter, geolocator):
        geolocator.geocode.return_value = [
            _location(i, f"Place {i}", -33.0, 18.0) for i in range(7)
        ]
        assert len(adapter.lookup("Place", "za", 5)) == 5

    def test_geopy_error_becomes_search_error(self, adapter, geolocator):
        geolocator.geocode.side_effect = GeocoderTimedOut("slow")

        with pytest.raises(AddressSearchError) as exc_info:
            adapter.lookup("Stellenbosch", "za", 5)

        assert exc_info.value.query == "Stellenbosch"

    def test_malformed_result_becomes_search_error(self, adapter, geolocator):
        geolocator.geocode.return_value = [_location(1, "Bad", None, 18.0)]

        with pytest.raises(AddressSearchError):
            adapter.lookup("Bad place", "za", 5)
