"""Geocoding port - Abstraction for address suggestions.

This protocol defines the contract for address resolution providers,
allowing different implementations (Nominatim, Google, etc.) to be used.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Protocol

if TYPE_CHECKING:
    from ..domain.models import Suggestion


class AddressSearchPort(Protocol):
    """Port for free-text address lookups.

    Implementation: adapters/geocoding/nominatim_adapter.py

    The call is blocking; the suggestion service runs it off the event
    loop and owns debouncing and cancellation.
    """

    def lookup(self, query: str, country_codes: str, limit: int) -> List[Suggestion]:
        """Return candidate places matching a partial address.

        Args:
            query: The text typed so far.
            country_codes: Comma-separated ISO country codes to search in.
            limit: Maximum number of candidates.

        Returns:
            Candidates ranked by the provider, at most ``limit`` long.

        Raises:
            AddressSearchError: If the provider could not be queried.
        """
        ...
