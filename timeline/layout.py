"""Lay busy intervals out on an hour-scaled, day-bucketed pixel grid."""

from collections.abc import Iterable

import pydantic

from .config import TimelineConfig
from .intervals import BusyInterval, DayWindow, filter_overlapping
from .state import ViewState
from .time_utils import (
    DAY,
    dfloor,
    dhuman,
    now_ms,
    thuman,
    time_of_day,
    time_to_px,
    weekday_name,
)


class RenderedSlot(pydantic.BaseModel):
    start: int
    end: int
    top_px: float
    height_px: float
    label: str


class HourRow(pydantic.BaseModel):
    hour: int
    label: str | None = None


class NowMarker(pydantic.BaseModel):
    top_px: float
    label: str = 'now'


class DayColumn(pydantic.BaseModel):
    day: int
    weekday: str
    date_label: str
    is_today: bool
    width_pct: float
    hours: list[HourRow]
    slots: list[RenderedSlot]
    now_marker: NowMarker | None = None


class DisplayTree(pydantic.BaseModel):
    days: list[DayColumn]


def layout_slot(interval: BusyInterval, day: int, config: TimelineConfig) -> RenderedSlot:
    """
    Position one busy interval inside the column for a given day.

    The top offset is measured from the local midnight of the interval's own
    start day, shifted by the whole days between that midnight and the
    rendered day. An interval that started yesterday therefore gets a
    negative top and is clipped by the column above the header.

    Args:
        interval: Interval to position
        day: Local day anchor of the column
        config: Layout settings

    Returns:
        The positioned slot
    """
    tz_offset = config.tz_offset_ms
    start_of_day = time_of_day(interval.start, tz_offset)
    days_previous = (dfloor(interval.start, tz_offset) - day) // DAY

    top = time_to_px(start_of_day + days_previous * DAY, config.hour_height_px)
    # No validation here, so end < start comes out as a negative height
    height = time_to_px(interval.duration, config.hour_height_px)

    return RenderedSlot(
        start=interval.start,
        end=interval.end,
        top_px=top + config.header_height,
        height_px=height,
        label=f"{thuman(interval.start, tz_offset)} - {thuman(interval.end, tz_offset)}",
    )


def hour_label(hour: int) -> str | None:
    """
    Label for an hour gridline, or None for midnight.

    Noon is "12 PM " with a trailing space so it never collides with the
    midnight label.
    """
    if hour == 0:
        return None

    hh = hour % 12 or 12
    ampm = 'PM' if hour > 12 else 'AM'
    if hh == 12:
        ampm = 'PM ' if ampm == 'AM' else 'AM'
    return f"{hh} {ampm}"


def layout_hours() -> list[HourRow]:
    return [HourRow(hour=hour, label=hour_label(hour)) for hour in range(24)]


def layout_day(day: int, intervals: Iterable[BusyInterval], config: TimelineConfig,
               days_per_screen: int, now: int) -> DayColumn:
    """
    Build the column for one local day.

    Args:
        day: Local day anchor of the column
        intervals: The full busy-interval set, filtered here to the day
        config: Layout settings
        days_per_screen: Number of columns sharing the screen width
        now: Current instant, used for the today accent and now marker

    Returns:
        The day column
    """
    tz_offset = config.tz_offset_ms
    window = DayWindow.from_anchor(day)
    visible = filter_overlapping(window.day_start, window.day_end, intervals)
    is_today = dfloor(now, tz_offset) == day

    now_marker = None
    if is_today:
        now_marker = NowMarker(
            top_px=time_to_px(time_of_day(now, tz_offset), config.hour_height_px)
            + config.header_height
        )

    return DayColumn(
        day=day,
        weekday=weekday_name(day, tz_offset),
        date_label=dhuman(day, tz_offset, now),
        is_today=is_today,
        width_pct=100 / days_per_screen,
        hours=layout_hours(),
        slots=[layout_slot(interval, day, config) for interval in visible],
        now_marker=now_marker,
    )


def render(state: ViewState, config: TimelineConfig, now: int | None = None) -> DisplayTree:
    """
    Project the view state onto a display tree.

    Pure with respect to its arguments; rendering the same state twice gives
    equal trees.

    Args:
        state: Current view state
        config: Layout settings
        now: Current instant, defaults to the clock

    Returns:
        One column per visible day, starting at the anchor day
    """
    if now is None:
        now = now_ms()

    days = [
        layout_day(state.anchor_day + i * DAY, state.busy_intervals, config,
                   state.days_per_screen, now)
        for i in range(state.days_per_screen)
    ]
    return DisplayTree(days=days)
