"""Fetch busy intervals from the calendar endpoint and merge them into view state."""

from datetime import datetime
import logging
from typing import Any

import httpx
import pydantic

from .intervals import BusyInterval
from .state import ViewState
from .time_utils import DAY, dfmt, to_instant

logger = logging.getLogger("timeline.fetch")


class TimelineError(Exception):
    """Base error for the timeline engine."""


class FetchError(TimelineError):
    """The busy endpoint could not be reached or returned unusable data."""


class _BusyPeriod(pydantic.BaseModel):
    start: datetime
    end: datetime


def flatten_calendars(payload: Any, tz_offset: int) -> list[BusyInterval]:
    """
    Flatten a free/busy response into one interval list.

    Calendar identity is discarded. Entries whose timestamps cannot be
    parsed, or that end before they start, are dropped with a warning.

    Args:
        payload: Decoded JSON body, {"calendars": {id: {"busy": [...]}}}
        tz_offset: UTC minus local time, used for naive timestamps

    Returns:
        Intervals in response order, calendar by calendar
    """
    calendars = payload.get('calendars') if isinstance(payload, dict) else None
    if not isinstance(calendars, dict):
        raise FetchError("Busy endpoint response is missing a 'calendars' mapping")

    intervals = []
    for calendar_id, calendar in calendars.items():
        busy = calendar.get('busy', []) if isinstance(calendar, dict) else None
        if not isinstance(busy, list):
            logger.warning("Skipping calendar %s: 'busy' is not a list", calendar_id)
            continue

        for raw in busy:
            try:
                period = _BusyPeriod.model_validate(raw)
                interval = BusyInterval(
                    start=to_instant(period.start, tz_offset),
                    end=to_instant(period.end, tz_offset),
                )
            except pydantic.ValidationError as exc:
                logger.warning("Dropping malformed busy interval %r from %s: %s",
                               raw, calendar_id, exc.errors()[0]['msg'])
                continue
            intervals.append(interval)

    return intervals


class BusyClient:
    """POSTs a time range to the busy endpoint and returns the flattened intervals."""

    def __init__(self, endpoint_url: str, tz_offset: int,
                 http_client: httpx.AsyncClient | None = None, timeout: float = 30.0):
        self.endpoint_url = endpoint_url
        self.tz_offset = tz_offset
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

    async def get_busy_intervals(self, start: int, days: int) -> list[BusyInterval]:
        body = {
            'timeMin': dfmt(start),
            'timeMax': dfmt(start + days * DAY),
        }
        try:
            response = await self._http_client.post(self.endpoint_url, json=body)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchError(f"Busy endpoint request failed: {exc}") from exc

        if response.status_code < 200 or response.status_code >= 300:
            raise FetchError(f"Busy endpoint returned status {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise FetchError("Busy endpoint returned invalid JSON") from exc

        return flatten_calendars(payload, self.tz_offset)

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http_client.aclose()


class FetchScheduler:
    """
    Decide when the visible range needs new data and merge it into the state.

    A fetch for the range that was last requested is a no-op, including
    while that request is still in flight. Requests for different ranges
    run concurrently; by default the last one to resolve overwrites the
    cache. With discard_stale set, a response for a range the state has
    since moved away from is dropped instead.
    """

    def __init__(self, client: BusyClient, discard_stale: bool = False):
        self.client = client
        self.discard_stale = discard_stale

    def needs_fetch(self, state: ViewState) -> bool:
        return state.last_fetched_range != state.fetch_range

    async def fetch(self, state: ViewState) -> bool:
        """
        Refresh the busy intervals for the state's visible range.

        The last-fetched markers are recorded before the request is awaited.
        If the request fails or is cancelled they are rolled back to the last
        range that actually loaded, unless a newer fetch replaced them
        meanwhile, so the next navigation retries.

        Args:
            state: View state to read the range from and write results to

        Returns:
            True if busy_intervals was replaced
        """
        if not self.needs_fetch(state):
            logger.debug("Skipping fetch, range %s already fetched", state.fetch_range)
            return False

        requested = state.fetch_range
        state.last_fetched_anchor, state.last_fetched_days_per_screen = requested
        logger.debug("Fetching busy intervals for %s (%d days)",
                     dfmt(requested[0]), requested[1])

        try:
            intervals = await self.client.get_busy_intervals(*requested)
        except BaseException:
            if state.last_fetched_range == requested:
                state.last_fetched_anchor, state.last_fetched_days_per_screen = state.last_loaded_range
            raise

        if self.discard_stale and state.fetch_range != requested:
            logger.debug("Discarding stale response for %s", dfmt(requested[0]))
            return False

        state.busy_intervals = intervals
        state.last_loaded_anchor, state.last_loaded_days_per_screen = requested
        return True
