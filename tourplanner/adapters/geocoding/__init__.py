"""Geocoding adapters - Implementations of AddressSearchPort.

Available implementations:
- NominatimAddressSearch: OpenStreetMap Nominatim address search
"""

from .nominatim_adapter import NominatimAddressSearch

__all__ = ["NominatimAddressSearch"]
