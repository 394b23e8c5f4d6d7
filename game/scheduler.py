"""Clocks and cancellable timers for the round timeline.

The timeline never sleeps or reads the clock directly. It asks a scheduler
for the current time and for one-shot or repeating timers, and cancels them
on every phase change. ``ThreadingScheduler`` backs the running app;
``ManualScheduler`` runs on virtual time so a whole game can be played
deterministically.
"""

import heapq
import itertools
import logging
import threading
import time
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class TimerHandle:
    """Handle returned by a scheduler; ``cancel`` is idempotent."""

    def __init__(self, on_cancel: Optional[Callback] = None):
        self._on_cancel = on_cancel
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._on_cancel:
            self._on_cancel()


class Scheduler:
    """Interface shared by the real and virtual schedulers."""

    def now(self) -> int:
        """Current time in milliseconds."""
        raise NotImplementedError

    def call_later(self, delay_ms: int, callback: Callback) -> TimerHandle:
        raise NotImplementedError

    def call_every(self, interval_ms: int, callback: Callback) -> TimerHandle:
        raise NotImplementedError


class ThreadingScheduler(Scheduler):
    """Wall-clock scheduler backed by ``threading`` timers."""

    def now(self) -> int:
        return int(time.monotonic() * 1000)

    def call_later(self, delay_ms: int, callback: Callback) -> TimerHandle:
        timer = threading.Timer(max(0, delay_ms) / 1000.0, callback)
        timer.daemon = True
        handle = TimerHandle(on_cancel=timer.cancel)
        timer.start()
        return handle

    def call_every(self, interval_ms: int, callback: Callback) -> TimerHandle:
        stopped = threading.Event()

        def _run():
            while not stopped.wait(interval_ms / 1000.0):
                try:
                    callback()
                except Exception:  # noqa: BLE001
                    logger.exception("Repeating timer callback failed")

        handle = TimerHandle(on_cancel=stopped.set)
        threading.Thread(target=_run, daemon=True).start()
        return handle


class ManualScheduler(Scheduler):
    """Virtual-time scheduler; time only moves when ``advance`` is called."""

    def __init__(self, start_ms: int = 0):
        self._now = start_ms
        self._counter = itertools.count()
        self._pending: List[Tuple[int, int, "_ManualTimer"]] = []

    def now(self) -> int:
        return self._now

    def call_later(self, delay_ms: int, callback: Callback) -> TimerHandle:
        timer = _ManualTimer(callback)
        self._push(self._now + max(0, delay_ms), timer)
        return timer.handle

    def call_every(self, interval_ms: int, callback: Callback) -> TimerHandle:
        timer = _ManualTimer(callback, interval_ms=max(1, interval_ms))
        self._push(self._now + timer.interval_ms, timer)
        return timer.handle

    @property
    def pending_count(self) -> int:
        """Number of live (not cancelled) timers."""
        return sum(1 for _, _, timer in self._pending if not timer.handle.cancelled)

    def advance(self, delta_ms: int) -> None:
        """Move virtual time forward, firing due timers in deadline order."""
        self.advance_to(self._now + delta_ms)

    def advance_to(self, target_ms: int) -> None:
        while self._pending and self._pending[0][0] <= target_ms:
            deadline, _, timer = heapq.heappop(self._pending)
            if timer.handle.cancelled:
                continue
            self._now = deadline
            if timer.interval_ms:
                self._push(deadline + timer.interval_ms, timer)
            timer.callback()
        self._now = max(self._now, target_ms)

    def _push(self, deadline: int, timer: "_ManualTimer") -> None:
        heapq.heappush(self._pending, (deadline, next(self._counter), timer))


class _ManualTimer:
    def __init__(self, callback: Callback, interval_ms: int = 0):
        self.callback = callback
        self.interval_ms = interval_ms
        self.handle = TimerHandle()
