"""Viewport sizing and the debounce combinator shared by resize and fetch."""

import asyncio
from collections.abc import Callable
import time
from typing import Any, Protocol


def days_per_screen(width: float, min_col_px: int = 150,
                    min_days: int = 3, max_days: int = 7) -> int:
    """
    Number of day columns that fit in the available width.

    Args:
        width: Available horizontal space in pixels
        min_col_px: Narrowest allowed day column
        min_days: Lower clamp
        max_days: Upper clamp

    Returns:
        floor(width / min_col_px) clamped to [min_days, max_days]
    """
    count = int(width // min_col_px)
    return max(min_days, min(count, max_days))


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Clock and timer capability used by Debouncer."""

    def now_ms(self) -> float: ...

    def call_later(self, delay_ms: float, fn: Callable[[], Any]) -> TimerHandle: ...


class AsyncioScheduler:
    """Scheduler backed by the running asyncio loop and a monotonic clock."""

    def now_ms(self) -> float:
        return time.monotonic() * 1000

    def call_later(self, delay_ms: float, fn: Callable[[], Any]) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(delay_ms / 1000, fn)


class Debouncer:
    """
    Coalesce rapid calls into one trailing call.

    Every call cancels the pending timer. If the previous run was longer
    than delay_ms ago (or there was none) the function runs right away,
    otherwise it is scheduled delay_ms after this call with this call's
    arguments. The run records the time of the call that produced it.
    """

    def __init__(self, fn: Callable[..., Any], delay_ms: float,
                 scheduler: Scheduler | None = None):
        self.fn = fn
        self.delay_ms = delay_ms
        self.scheduler = scheduler or AsyncioScheduler()
        self.last_run: float | None = None
        self._timer: TimerHandle | None = None

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        self.cancel()
        now = self.scheduler.now_ms()

        def run() -> None:
            self._timer = None
            self.last_run = now
            self.fn(*args, **kwargs)

        if self.last_run is None or now - self.last_run > self.delay_ms:
            run()
        else:
            self._timer = self.scheduler.call_later(self.delay_ms, run)

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


def debounce(fn: Callable[..., Any], delay_ms: float,
             scheduler: Scheduler | None = None) -> Debouncer:
    return Debouncer(fn, delay_ms, scheduler)
