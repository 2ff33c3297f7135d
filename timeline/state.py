"""Mutable view state owned by the timeline controller."""

import pydantic

from .intervals import BusyInterval


class ViewState(pydantic.BaseModel):
    anchor_day: int
    days_per_screen: int
    busy_intervals: list[BusyInterval] = []
    last_fetched_anchor: int | None = None
    last_fetched_days_per_screen: int | None = None
    last_loaded_anchor: int | None = None
    last_loaded_days_per_screen: int | None = None

    @pydantic.field_validator('days_per_screen')
    @classmethod
    def validate_days_per_screen(cls, v: int) -> int:
        if v <= 0:
            raise ValueError('days_per_screen must be greater than 0')
        return v

    @property
    def fetch_range(self) -> tuple[int, int]:
        return self.anchor_day, self.days_per_screen

    @property
    def last_fetched_range(self) -> tuple[int | None, int | None]:
        return self.last_fetched_anchor, self.last_fetched_days_per_screen

    @property
    def last_loaded_range(self) -> tuple[int | None, int | None]:
        """Range of the last response that was applied to busy_intervals."""
        return self.last_loaded_anchor, self.last_loaded_days_per_screen
