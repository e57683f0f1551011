"""Per-client planner sessions.

A front end keeps one PlannerSession per browser tab. Tabs can vanish
without saying goodbye, so sessions idle for longer than
``idle_seconds`` are closed and forgotten, and the least recently used
session is closed once ``max_sessions`` are open.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, Tuple

from ..config import SessionConfig, get_config
from .session import PlannerSession


@dataclass
class SessionRegistry:
    """Session store keyed by client id with idle expiry and a size cap.

    Must be used from the event loop thread that runs the sessions.

    Attributes:
        factory: Builds a fresh session for an unknown client
        config: Idle timeout and capacity
        clock: Monotonic time source
    """

    factory: Callable[[], PlannerSession]
    config: SessionConfig = field(default_factory=lambda: get_config().sessions)
    clock: Callable[[], float] = time.monotonic

    _entries: "OrderedDict[str, Tuple[PlannerSession, float]]" = field(
        default_factory=OrderedDict, init=False, repr=False
    )
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def get(self, key: str) -> PlannerSession:
        """Return the client's session, creating it on first use."""
        now = self.clock()
        self._expire(now)

        entry = self._entries.pop(key, None)
        if entry is None:
            session = self.factory()
            self._logger.debug("Session opened", extra={"client": key})
        else:
            session = entry[0]
        self._entries[key] = (session, now)

        while len(self._entries) > self.config.max_sessions:
            oldest, (evicted, _) = self._entries.popitem(last=False)
            evicted.close()
            self._logger.info("Session evicted", extra={"client": oldest})
        return session

    def discard(self, key: str) -> None:
        """Close and forget the client's session, if any."""
        entry = self._entries.pop(key, None)
        if entry is not None:
            entry[0].close()
            self._logger.debug("Session closed", extra={"client": key})

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def _expire(self, now: float) -> None:
        # Entries are ordered by last use, so the idle ones sit at the front.
        while self._entries:
            key, (session, last_used) = next(iter(self._entries.items()))
            if now - last_used <= self.config.idle_seconds:
                break
            del self._entries[key]
            session.close()
            self._logger.info("Session expired", extra={"client": key})
