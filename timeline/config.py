"""Layout and refresh-policy settings for the timeline."""

import pydantic

from .time_utils import HOUR_HEIGHT_PX, local_tz_offset


class TimelineConfig(pydantic.BaseModel):
    tz_offset_ms: int = pydantic.Field(default_factory=local_tz_offset)
    hour_height_px: float = HOUR_HEIGHT_PX
    header_px: float | None = None
    min_col_px: int = 150
    min_days: int = 3
    max_days: int = 7
    resize_debounce_ms: int = 600
    fetch_debounce_ms: int = 600
    scroll_to_hour: int = 8
    endpoint_url: str = 'http://localhost/data'
    request_timeout_s: float = 30.0
    discard_stale_responses: bool = False

    @pydantic.field_validator('hour_height_px', 'min_col_px', 'request_timeout_s')
    @classmethod
    def validate_positive(cls, v: float, info: pydantic.ValidationInfo) -> float:
        if v <= 0:
            raise ValueError(f'{info.field_name} must be greater than 0')
        return v

    @pydantic.field_validator('resize_debounce_ms', 'fetch_debounce_ms')
    @classmethod
    def validate_delay(cls, v: int, info: pydantic.ValidationInfo) -> int:
        if v < 0:
            raise ValueError(f'{info.field_name} cannot be negative')
        return v

    @pydantic.field_validator('scroll_to_hour')
    @classmethod
    def validate_scroll_hour(cls, v: int) -> int:
        if not 0 <= v <= 23:
            raise ValueError('scroll_to_hour must be between 0 and 23')
        return v

    @pydantic.model_validator(mode='after')
    def validate_day_range(self) -> 'TimelineConfig':
        if self.min_days < 1:
            raise ValueError('min_days must be at least 1')
        if self.max_days < self.min_days:
            raise ValueError('max_days must not be less than min_days')
        return self

    @property
    def header_height(self) -> float:
        """Height of the date header row, one hour row unless overridden."""
        if self.header_px is None:
            return self.hour_height_px
        return self.header_px
