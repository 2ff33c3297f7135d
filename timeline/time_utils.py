"""Timezone-adjusted day arithmetic and time formatting for the timeline."""

from datetime import datetime, timedelta, timezone
import time

MINUTE = 60 * 1000
HOUR = 60 * MINUTE
DAY = 24 * HOUR

HOUR_HEIGHT_PX = 50

DAYS_OF_WEEK = ('Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun')

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)


def local_tz_offset() -> int:
    """
    Read the host timezone offset once.

    Uses the browser convention: UTC minus local wall time, so a host at
    UTC-4 returns +4 hours. The value is meant to be captured at startup and
    passed around explicitly; it is never re-read per call.

    Returns:
        The offset in milliseconds
    """
    utcoffset = datetime.now().astimezone().utcoffset() or timedelta(0)
    return -int(utcoffset.total_seconds() * 1000)


def dfloor(t: int, tz_offset: int) -> int:
    """
    Round an instant down to the start of its local day.

    Args:
        t: Instant in epoch milliseconds
        tz_offset: UTC minus local time in milliseconds

    Returns:
        The instant of local midnight on the day containing t
    """
    local = t - tz_offset
    # Python's modulo is floored, so this also holds before the epoch
    return local - local % DAY + tz_offset


def time_to_px(duration: float, hour_height: float = HOUR_HEIGHT_PX) -> float:
    """Scale a duration in milliseconds to pixels on the hour grid."""
    return duration / HOUR * hour_height


def time_of_day(t: int, tz_offset: int) -> int:
    """Milliseconds elapsed since local midnight, always in [0, DAY)."""
    return (t - tz_offset) % DAY


def _local_datetime(t: int, tz_offset: int) -> datetime:
    # Wall-clock fields under a fixed offset, expressed as a UTC datetime
    return _EPOCH + timedelta(milliseconds=t - tz_offset)


def weekday_name(t: int, tz_offset: int) -> str:
    return DAYS_OF_WEEK[_local_datetime(t, tz_offset).weekday()]


def dhuman(t: int, tz_offset: int, now: int | None = None) -> str:
    """
    Humanize the local date of an instant.

    The year is left out when t falls in the same local year as now.

    Args:
        t: Instant to format
        tz_offset: UTC minus local time in milliseconds
        now: Reference instant for the current year, defaults to the clock

    Returns:
        "M/D" or "Y/M/D"
    """
    if now is None:
        now = now_ms()
    dt = _local_datetime(t, tz_offset)
    if dt.year == _local_datetime(now, tz_offset).year:
        return f"{dt.month}/{dt.day}"

    return f"{dt.year}/{dt.month}/{dt.day}"


def thuman(t: int, tz_offset: int) -> str:
    """
    Humanize the local time of an instant on a 12-hour clock.

    Minutes are dropped on the hour, so 09:00 is "9 AM" and 09:05 is
    "9:05 AM".
    """
    tod = time_of_day(t, tz_offset)
    hh = tod // HOUR % 12 or 12
    mm = tod % HOUR // MINUTE
    ampm = 'AM' if tod < DAY / 2 else 'PM'

    if mm == 0:
        return f"{hh} {ampm}"

    return f"{hh}:{mm:02d} {ampm}"


def dfmt(t: int) -> str:
    """Format an instant as an ISO-8601 UTC string, e.g. 2024-06-10T04:00:00.000Z."""
    dt = _EPOCH + timedelta(milliseconds=t)
    return dt.strftime('%Y-%m-%dT%H:%M:%S.') + f"{dt.microsecond // 1000:03d}Z"


def to_instant(dt: datetime, tz_offset: int) -> int:
    """
    Convert a datetime to epoch milliseconds.

    Naive datetimes are read as local wall time under tz_offset.
    """
    if dt.tzinfo is None:
        return to_instant(dt.replace(tzinfo=timezone.utc), tz_offset) + tz_offset
    return (dt - _EPOCH) // timedelta(milliseconds=1)
