"""Delayed execution of AI moves."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional


class ScheduledCall:
    """Handle returned by a scheduler; ``cancel`` stops a call that has not started."""

    def cancel(self) -> None:
        raise NotImplementedError

    @property
    def cancelled(self) -> bool:
        raise NotImplementedError


class Scheduler:
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        raise NotImplementedError


class _TimerCall(ScheduledCall):
    def __init__(self, timer: threading.Timer) -> None:
        self._timer = timer
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True
        self._timer.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class TimerScheduler(Scheduler):
    """Run callbacks on daemon ``threading.Timer`` threads."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return _TimerCall(timer)


@dataclass
class ManualCall(ScheduledCall):
    delay: float
    callback: Callable[[], None]
    _cancelled: bool = field(default=False, init=False)

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler(Scheduler):
    """Queue callbacks until ``run_pending`` is called.

    Used by tests and by headless simulation, where no real time passes.
    """

    def __init__(self) -> None:
        self._queue: List[ManualCall] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        call = ManualCall(delay, callback)
        self._queue.append(call)
        return call

    @property
    def pending(self) -> int:
        return sum(1 for call in self._queue if not call.cancelled)

    def run_next(self) -> bool:
        while self._queue:
            call = self._queue.pop(0)
            if not call.cancelled:
                call.callback()
                return True
        return False

    def run_pending(self, limit: Optional[int] = None) -> int:
        """Run queued calls, including ones they schedule, until idle."""
        ran = 0
        while limit is None or ran < limit:
            if not self.run_next():
                break
            ran += 1
        return ran
