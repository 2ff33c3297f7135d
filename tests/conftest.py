"""Shared fixtures: a manual clock/timer scheduler and a scriptable busy client."""

import asyncio
import os
import sys
from datetime import datetime

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from timeline import HOUR, BusyInterval, to_instant

# UTC-4, the browser offset convention is UTC minus local
TZ = 4 * HOUR


def local(year: int, month: int, day: int, hour: int = 0, minute: int = 0, tz: int = TZ) -> int:
    """Instant for a local wall-clock time under tz."""
    return to_instant(datetime(year, month, day, hour, minute), tz)


class _Timer:
    def __init__(self, when: float, fn):
        self.when = when
        self.fn = fn
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose clock only moves when advance() is called."""

    def __init__(self, start: float = 10_000.0):
        self.now = start
        self._timers: list[_Timer] = []

    def now_ms(self) -> float:
        return self.now

    def call_later(self, delay_ms: float, fn) -> _Timer:
        timer = _Timer(self.now + delay_ms, fn)
        self._timers.append(timer)
        return timer

    @property
    def pending(self) -> list[_Timer]:
        return [t for t in self._timers if not t.cancelled]

    def advance(self, ms: float) -> None:
        target = self.now + ms
        while True:
            due = [t for t in self.pending if t.when <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.when)
            self._timers.remove(timer)
            self.now = timer.when
            timer.fn()
        self.now = target


class FakeBusyClient:
    """
    Stand-in for BusyClient.

    By default every call returns self.intervals (or raises self.error).
    With hold=True each call parks on a future in self.waiting that the
    test resolves explicitly.
    """

    def __init__(self, intervals: list[BusyInterval] | None = None):
        self.intervals = intervals or []
        self.error: Exception | None = None
        self.hold = False
        self.waiting: list[asyncio.Future] = []
        self.calls: list[tuple[int, int]] = []
        self.closed = False

    async def get_busy_intervals(self, start: int, days: int) -> list[BusyInterval]:
        self.calls.append((start, days))
        if self.hold:
            future = asyncio.get_running_loop().create_future()
            self.waiting.append(future)
            return await future
        if self.error is not None:
            raise self.error
        return list(self.intervals)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def busy_client() -> FakeBusyClient:
    return FakeBusyClient()
