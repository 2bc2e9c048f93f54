"""Refresh timer that posts Tick events into the dashboard's event channel."""

from __future__ import annotations

import logging
import threading
from typing import Callable

from roborev_tui.events import Tick

logger = logging.getLogger(__name__)


class Ticker:
    """One-shot timer re-armed by each ``ScheduleTick`` command.

    The timer only posts a ``Tick``; the state machine decides what a tick
    fetches and whether to arm the next one.
    """

    def __init__(self, interval: float, post: Callable[[Tick], None]):
        self.interval = interval
        self._post = post
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._cancelled = False

    def arm(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.interval, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def _fire(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._timer = None
        self._post(Tick())

    def cancel(self) -> None:
        with self._lock:
            self._cancelled = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        logger.debug("ticker cancelled")

    @property
    def armed(self) -> bool:
        with self._lock:
            return self._timer is not None
