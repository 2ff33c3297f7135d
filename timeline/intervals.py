"""Busy intervals and the day windows they are laid out against."""

from collections.abc import Iterable

import pydantic

from .time_utils import DAY


class BusyInterval(pydantic.BaseModel):
    """A half-open range [start, end) of epoch milliseconds."""

    model_config = pydantic.ConfigDict(frozen=True)

    start: int
    end: int

    @pydantic.model_validator(mode='after')
    def validate_time_order(self) -> 'BusyInterval':
        if self.end < self.start:
            raise ValueError('end must not be before start')
        return self

    @property
    def duration(self) -> int:
        return self.end - self.start


class DayWindow(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(frozen=True)

    day_start: int
    day_end: int

    @classmethod
    def from_anchor(cls, day: int) -> 'DayWindow':
        return cls(day_start=day, day_end=day + DAY)


def filter_overlapping(window_start: int, window_end: int,
                       intervals: Iterable[BusyInterval]) -> list[BusyInterval]:
    """
    Select the intervals that overlap a time window.

    The test is strict on both sides, so an interval that only touches the
    window boundary is left out. Input order is kept and the input does not
    need to be sorted.

    Args:
        window_start: Start of the window
        window_end: End of the window
        intervals: Intervals to scan

    Returns:
        Overlapping intervals in input order
    """
    return [
        interval for interval in intervals
        if window_start < interval.end and window_end > interval.start
    ]
