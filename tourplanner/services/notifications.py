"""Transient notification slot.

Holds at most one message. Showing a message (re)starts its auto-clear
timer, so the latest message always stays up for the full display time
counted from when it was shown.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

from ..config import get_config


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], TimerHandle]


def loop_scheduler(delay: float, callback: Callable[[], None]) -> TimerHandle:
    """Schedule on the running asyncio loop."""
    return asyncio.get_running_loop().call_later(delay, callback)


def _default_display_seconds() -> float:
    return get_config().notifications.display_seconds


@dataclass
class Notifier:
    """Single-message toast with timed auto-dismiss.

    Attributes:
        display_seconds: How long a message stays visible
        scheduler: ``call_later``-style timer factory
        on_change: Called with the new message (or None) on every change
    """

    display_seconds: float = field(default_factory=_default_display_seconds)
    scheduler: Scheduler = loop_scheduler
    on_change: Optional[Callable[[Optional[str]], None]] = None

    _message: Optional[str] = field(default=None, init=False, repr=False)
    _timer: Optional[TimerHandle] = field(default=None, init=False, repr=False)
    _token: int = field(default=0, init=False, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def message(self) -> Optional[str]:
        return self._message

    def show(self, message: str) -> None:
        """Display a message, replacing any current one."""
        self._cancel_timer()
        self._token += 1
        self._message = message
        self._timer = self.scheduler(
            self.display_seconds, functools.partial(self._expire, self._token)
        )
        self._logger.debug("Notification shown", extra={"notification": message})
        self._emit()

    def clear(self) -> None:
        """Dismiss the current message immediately."""
        self._cancel_timer()
        self._token += 1
        if self._message is not None:
            self._message = None
            self._emit()

    def _expire(self, token: int) -> None:
        # A timer that survived cancellation must not clear a newer message.
        if token != self._token:
            return
        self._timer = None
        self._message = None
        self._emit()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _emit(self) -> None:
        if self.on_change is not None:
            self.on_change(self._message)
