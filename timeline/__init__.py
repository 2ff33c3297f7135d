"""Busy-calendar timeline engine."""

from .config import TimelineConfig
from .controller import TimelineController
from .fetch import (
    BusyClient,
    FetchError,
    FetchScheduler,
    TimelineError,
    flatten_calendars
)
from .intervals import BusyInterval, DayWindow, filter_overlapping
from .layout import (
    DayColumn,
    DisplayTree,
    HourRow,
    NowMarker,
    RenderedSlot,
    hour_label,
    layout_day,
    layout_slot,
    render
)
from .state import ViewState
from .time_utils import (
    DAY,
    HOUR,
    MINUTE,
    dfloor,
    dfmt,
    dhuman,
    thuman,
    time_to_px,
    to_instant
)
from .viewport import AsyncioScheduler, Debouncer, days_per_screen, debounce

__all__ = [
    'TimelineConfig',
    'TimelineController',
    'BusyClient',
    'FetchError',
    'FetchScheduler',
    'TimelineError',
    'flatten_calendars',
    'BusyInterval',
    'DayWindow',
    'filter_overlapping',
    'DayColumn',
    'DisplayTree',
    'HourRow',
    'NowMarker',
    'RenderedSlot',
    'hour_label',
    'layout_day',
    'layout_slot',
    'render',
    'ViewState',
    'DAY',
    'HOUR',
    'MINUTE',
    'dfloor',
    'dfmt',
    'dhuman',
    'thuman',
    'time_to_px',
    'to_instant',
    'AsyncioScheduler',
    'Debouncer',
    'days_per_screen',
    'debounce'
]
