"""Navigation state machine composing layout, viewport policy and fetching."""

import asyncio
from collections.abc import Callable
import logging

from .config import TimelineConfig
from .fetch import BusyClient, FetchError, FetchScheduler
from .intervals import BusyInterval
from .layout import DisplayTree, render
from .state import ViewState
from .time_utils import DAY, dfloor, now_ms
from .viewport import Debouncer, Scheduler, days_per_screen

logger = logging.getLogger("timeline.controller")


class TimelineController:
    """
    Owns the view state and turns navigation intents into renders and fetches.

    Renders go to on_render synchronously. Fetches run as asyncio tasks
    behind a debouncer, so navigation methods that request one must be
    called from inside a running event loop.
    """

    def __init__(self, client: BusyClient, config: TimelineConfig | None = None, *,
                 width: float,
                 clock: Callable[[], int] | None = None,
                 scheduler: Scheduler | None = None,
                 on_render: Callable[[DisplayTree], None] | None = None,
                 on_scroll: Callable[[float], None] | None = None):
        self.config = config or TimelineConfig()
        self.clock = clock or now_ms
        self.on_render = on_render
        self.on_scroll = on_scroll
        self.fetcher = FetchScheduler(client, self.config.discard_stale_responses)

        self.state = ViewState(
            anchor_day=dfloor(self.clock(), self.config.tz_offset_ms),
            days_per_screen=self._days_for(width),
        )
        self._first_scrolled = False
        self._tasks: set[asyncio.Task] = set()

        self.resize = Debouncer(self._resize, self.config.resize_debounce_ms, scheduler)
        self.request_fetch = Debouncer(self._spawn_fetch, self.config.fetch_debounce_ms, scheduler)

    def _days_for(self, width: float) -> int:
        return days_per_screen(width, self.config.min_col_px,
                               self.config.min_days, self.config.max_days)

    def start(self) -> None:
        """Run the initial viewport evaluation: render, then fetch."""
        self.resize(None)

    def render(self) -> DisplayTree:
        tree = render(self.state, self.config, self.clock())
        if self.on_render is not None:
            self.on_render(tree)
        return tree

    def today(self) -> None:
        self.state.anchor_day = dfloor(self.clock(), self.config.tz_offset_ms)
        self.request_fetch()

    def shift(self, delta_days: int) -> None:
        self.state.anchor_day += delta_days * DAY
        # Render with stale data first, the fetch may take a while
        self.render()
        self.request_fetch()

    def prev_day(self) -> None:
        self.shift(-1)

    def next_day(self) -> None:
        self.shift(1)

    def prev_week(self) -> None:
        self.shift(-7)

    def next_week(self) -> None:
        self.shift(7)

    def _resize(self, width: float | None) -> None:
        if width is not None:
            self.state.days_per_screen = self._days_for(width)
        self.render()
        self.request_fetch()

    def _spawn_fetch(self) -> None:
        task = asyncio.get_running_loop().create_task(self.fetch())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def fetch(self) -> bool:
        """
        Fetch the visible range unless it was already fetched.

        Failures are logged and leave the state as it was, so the next
        navigation or resize retries.

        Returns:
            True if new data was applied
        """
        try:
            updated = await self.fetcher.fetch(self.state)
        except FetchError as exc:
            logger.warning("Fetching busy intervals failed: %s", exc)
            return False

        if updated:
            self.on_fetch_resolved(self.state.busy_intervals)
        return updated

    def on_fetch_resolved(self, intervals: list[BusyInterval]) -> None:
        self.state.busy_intervals = intervals
        self.render()

        if not self._first_scrolled:
            self._first_scrolled = True
            if self.on_scroll is not None:
                self.on_scroll(self.config.scroll_to_hour * self.config.hour_height_px)

    async def drain(self) -> None:
        """Wait for every fetch task spawned so far."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def aclose(self) -> None:
        self.resize.cancel()
        self.request_fetch.cancel()
        await self.drain()
        await self.fetcher.client.aclose()
