"""Shared validation utilities

Every helper raises ValidationError naming the offending field, so the
request layer can report exactly what an operator typed wrong.
"""

import re
from datetime import date, datetime, timedelta
from typing import Optional

from ..domain.scheduling.time_window import parse_time_to_minutes, week_start
from ..exceptions import ValidationError

_DATE_ONLY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def require_id(value: Optional[str], field: str) -> str:
    """Validate a required record identifier"""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required", field=field)
    return value.strip()


def parse_iso_datetime(value: Optional[str], field: str) -> datetime:
    """
    Parse an ISO-8601 date or datetime string into a naive datetime.

    Args:
        value: "2024-03-01", "2024-03-01T09:30" or "2024-03-01T09:30:00Z"
        field: Name of the request field, used in the error message

    Returns:
        Naive datetime holding the wall-clock value as written. A timezone
        designator is accepted and dropped without conversion.

    Raises:
        ValidationError: If the value is missing or not a valid date
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required", field=field)

    raw = value.strip()
    try:
        if _DATE_ONLY_PATTERN.match(raw):
            parsed = datetime.combine(date.fromisoformat(raw), datetime.min.time())
        else:
            parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"Invalid {field}", field=field) from None

    return parsed.replace(tzinfo=None)


def parse_iso_date(value: Optional[str], field: str) -> date:
    """Parse an ISO-8601 date (or datetime, time-of-day ignored) into a date"""
    return parse_iso_datetime(value, field).date()


def parse_optional_date(value: Optional[str], field: str) -> Optional[date]:
    """Like parse_iso_date, but null or an empty string means "no date" """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_iso_date(value, field)


def parse_clock_time(value: Optional[str], field: str) -> int:
    """
    Validate a 24h "HH:MM" clock time.

    Returns:
        Minutes after midnight in [0, 1440)

    Raises:
        ValidationError: If the value is not a valid clock time
    """
    minutes = parse_time_to_minutes(value)
    if minutes is None:
        raise ValidationError(f"Invalid {field}, expected HH:MM", field=field)
    return minutes


def validate_day_of_week(value: Optional[int]) -> int:
    """Validate the stored weekday encoding (0 = Sunday ... 6 = Saturday)"""
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 6:
        raise ValidationError("dayOfWeek must be between 0 and 6", field="dayOfWeek")
    return value


def clean_optional_text(value: Optional[str]) -> Optional[str]:
    """Trim free text; blank becomes None"""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def resolve_target_day(week_start_value: Optional[str], day_index: Optional[int]) -> date:
    """
    Resolve day view parameters into the calendar day being viewed.

    weekStart may be any day of the week; it is normalized to that week's
    Monday before dayIndex (0-6) is added.
    """
    if week_start_value is None:
        raise ValidationError("weekStart is required", field="weekStart")
    if day_index is None:
        raise ValidationError("dayIndex is required", field="dayIndex")

    monday = week_start(parse_iso_date(week_start_value, "weekStart"))

    if isinstance(day_index, bool) or not isinstance(day_index, int) or not 0 <= day_index <= 6:
        raise ValidationError("dayIndex must be between 0 and 6", field="dayIndex")

    return monday + timedelta(days=day_index)
