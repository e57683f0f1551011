"""Address suggestion service.

``AddressSuggestionService.search`` answers a single query; a
``SuggestionField`` wraps it for one input box and debounces keystrokes.

Each field owns a generation counter. Every keystroke, clear or close
bumps it and cancels the pending lookup; a lookup only touches the
field's state if its generation is still current when it resumes, so a
late answer for an old text is dropped instead of applied.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from ..config import GeocodingConfig, get_config
from ..domain.errors import AddressSearchError
from ..domain.models import CURRENT_LOCATION_LABEL, FieldId, Suggestion
from ..ports.geocoding import AddressSearchPort


@dataclass
class AddressSuggestionService:
    """Country-scoped, capped address lookups that never raise.

    Attributes:
        search_port: Provider used for the lookups
        config: Geocoding configuration (limit, scope, debounce delay)
    """

    search_port: AddressSearchPort
    config: GeocodingConfig = field(default_factory=lambda: get_config().geocoding)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def should_search(self, text: str) -> bool:
        """Short inputs and the current location label are never looked up."""
        return len(text) >= self.config.min_query_length and text != CURRENT_LOCATION_LABEL

    async def search(self, text: str) -> List[Suggestion]:
        """Look up suggestions for ``text``.

        The blocking provider call runs in a worker thread. Any failure is
        logged and answered with an empty list.

        Args:
            text: The text typed so far.

        Returns:
            At most ``config.result_limit`` suggestions.
        """
        if not self.should_search(text):
            return []

        limit = self.config.result_limit
        try:
            results = await asyncio.to_thread(
                self.search_port.lookup, text, self.config.country_codes, limit
            )
        except AddressSearchError as e:
            self._logger.warning(
                "Failed to fetch address suggestions",
                extra={"query": text, "error": str(e)},
            )
            return []
        except Exception as e:
            self._logger.error(
                "Unexpected error while fetching address suggestions",
                extra={"query": text, "error": str(e)},
            )
            return []

        return list(results)[:limit]

    def field(
        self, field_id: FieldId, on_change: Optional[Callable[[], None]] = None
    ) -> SuggestionField:
        """Create the debounced suggestion state for one input field."""
        return SuggestionField(field_id=field_id, service=self, on_change=on_change)


@dataclass
class SuggestionField:
    """Debounced suggestion state of one location input.

    Attributes:
        field_id: Which input this state belongs to
        service: Service performing the lookups
        on_change: Called whenever suggestions or the searching flag change
    """

    field_id: FieldId
    service: AddressSuggestionService
    on_change: Optional[Callable[[], None]] = None

    _suggestions: Tuple[Suggestion, ...] = field(default=(), init=False, repr=False)
    _searching: bool = field(default=False, init=False, repr=False)
    _generation: int = field(default=0, init=False, repr=False)
    _pending: Optional[asyncio.Task[None]] = field(default=None, init=False, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def suggestions(self) -> Tuple[Suggestion, ...]:
        return self._suggestions

    @property
    def searching(self) -> bool:
        return self._searching

    def update(self, text: str) -> None:
        """React to a keystroke: restart the debounce timer for ``text``.

        Must be called from the event loop thread.
        """
        self._supersede()
        if not self.service.should_search(text):
            self._apply(())
            return

        self._pending = asyncio.get_running_loop().create_task(
            self._lookup(text, self._generation),
            name=f"suggestions-{self.field_id.value}",
        )

    def clear(self) -> None:
        """Drop the suggestions, e.g. on blur or once one was picked."""
        self._supersede()
        self._apply(())

    def close(self) -> None:
        """Cancel pending work; nothing in flight may update this field."""
        self._supersede()

    async def settle(self) -> None:
        """Wait until the pending lookup, if any, has finished."""
        pending = self._pending
        if pending is None or pending.done():
            return
        try:
            await pending
        except asyncio.CancelledError:
            if not pending.cancelled():
                raise

    async def _lookup(self, text: str, generation: int) -> None:
        await asyncio.sleep(self.service.config.debounce_seconds)
        if generation != self._generation:
            return

        self._searching = True
        self._emit()
        results = await self.service.search(text)

        if generation != self._generation:
            self._logger.debug(
                "Discarding stale suggestions",
                extra={"field": self.field_id.value, "query": text},
            )
            return
        self._searching = False
        self._apply(tuple(results))

    def _supersede(self) -> None:
        self._generation += 1
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
        if self._searching:
            self._searching = False
            self._emit()

    def _apply(self, suggestions: Tuple[Suggestion, ...]) -> None:
        changed = suggestions != self._suggestions
        self._suggestions = suggestions
        if changed:
            self._emit()

    def _emit(self) -> None:
        if self.on_change is not None:
            self.on_change()
