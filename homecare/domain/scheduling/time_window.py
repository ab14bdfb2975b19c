"""
Day window arithmetic for the scheduling views.

Calendar days are naive local days: nothing here converts between timezones.
Minute-of-day values are offsets from local midnight.
"""

import re
from datetime import date, datetime, time, timedelta
from typing import NamedTuple, Optional, Union

MINUTES_PER_DAY = 24 * 60
DEFAULT_MIN_DISPLAY_MINUTES = 10

DateLike = Union[date, datetime]

_CLOCK_TIME = re.compile(r"^(\d{1,2}):(\d{2})$")


def as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def start_of_day(value: DateLike) -> datetime:
    return datetime.combine(as_date(value), time.min)


def end_of_day(value: DateLike) -> datetime:
    return datetime.combine(as_date(value), time.max)


def at_minute_of_day(value: DateLike, minutes: int) -> datetime:
    """Absolute instant `minutes` after local midnight of the given day"""
    return start_of_day(value) + timedelta(minutes=minutes)


def day_of_week(value: DateLike) -> int:
    """Weekday in the stored encoding: 0 = Sunday ... 6 = Saturday"""
    return (as_date(value).weekday() + 1) % 7


def week_start(value: DateLike) -> date:
    """Monday of the week containing the given day"""
    day = as_date(value)
    return day - timedelta(days=day.weekday())


def day_window(value: DateLike, start_hour: int, end_hour: int) -> tuple[datetime, datetime]:
    """Instants bounding [start_hour:00, end_hour:00) on the given day"""
    if not 0 <= start_hour < end_hour <= 24:
        raise ValueError(f"Invalid window hours {start_hour}-{end_hour}")
    midnight = start_of_day(value)
    return midnight + timedelta(hours=start_hour), midnight + timedelta(hours=end_hour)


def minutes_from_window_start(instant: datetime, window_start: datetime) -> int:
    """Whole minutes from window_start to instant, truncated toward zero, not clamped"""
    return int((instant - window_start) / timedelta(minutes=1))


class ClampedInterval(NamedTuple):
    """An interval expressed as minute offsets into a display window.

    start_offset/end_offset are the true clamped bounds. display_duration is
    floored so near-zero-length events stay visible; it is for rendering only
    and is never the length of the underlying event.
    """

    start_offset: int
    end_offset: int
    display_duration: int

    @property
    def duration(self) -> int:
        return self.end_offset - self.start_offset


def clamp_interval(
    start: datetime,
    end: datetime,
    window_start: datetime,
    window_end: datetime,
    min_display_minutes: int = DEFAULT_MIN_DISPLAY_MINUTES,
) -> Optional[ClampedInterval]:
    """Clamp [start, end) into the window; None when they do not intersect"""
    if end <= window_start or start >= window_end:
        return None

    window_length = minutes_from_window_start(window_end, window_start)
    start_offset = max(0, minutes_from_window_start(start, window_start))
    end_offset = min(window_length, minutes_from_window_start(end, window_start))
    end_offset = max(end_offset, start_offset)

    return ClampedInterval(
        start_offset=start_offset,
        end_offset=end_offset,
        display_duration=max(end_offset - start_offset, min_display_minutes),
    )


def parse_time_to_minutes(value) -> Optional[int]:
    """Parse a 24h "HH:MM" string into minutes after midnight; None if invalid"""
    if not isinstance(value, str):
        return None
    match = _CLOCK_TIME.match(value.strip())
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes


def format_minutes(minutes: int) -> str:
    """Minutes after midnight as "HH:MM" """
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
