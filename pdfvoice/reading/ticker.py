"""Repeating progress ticker.

Responsibilities:
- Call a tick callback at a fixed interval on a daemon thread.
- Stop as soon as the callback returns `False` or `cancel()` is called.
"""

from __future__ import annotations

import threading
from typing import Callable

TickCallback = Callable[[], bool]
TickRunner = Callable[[TickCallback], bool]


class RepeatingTicker:
    """Interval timer that self-cancels once its callback reports it is done."""

    def __init__(
        self,
        interval_seconds: float,
        runner: TickRunner | None = None,
        name: str = "pdfvoice-ticker",
    ) -> None:
        """Configure the interval and an optional runner that executes each tick.

        `runner` lets callers hop every tick onto another thread (for example a
        serial executor) and must return the callback's result.
        """

        self.interval_seconds = interval_seconds
        self._runner = runner
        self._name = name
        self._cancelled = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._cancelled.is_set()

    def start(self, callback: TickCallback) -> None:
        if self._thread is not None:
            raise RuntimeError("Ticker was already started.")
        self._thread = threading.Thread(
            target=self._loop, args=(callback,), name=self._name, daemon=True
        )
        self._thread.start()

    def cancel(self) -> None:
        """Stop future ticks; a tick already running completes normally."""

        self._cancelled.set()

    def _loop(self, callback: TickCallback) -> None:
        while not self._cancelled.wait(self.interval_seconds):
            keep_running = self._runner(callback) if self._runner is not None else callback()
            if not keep_running:
                break
        self._cancelled.set()
