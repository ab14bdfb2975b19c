"""
Materialize concrete occurrences of recurring weekly schedule rules.

A rule is one weekly slot (weekday + start/end minute of day) that holds
between its effective start date and optional effective end date, both
inclusive and compared as calendar dates.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional

from .time_window import DateLike, as_date, at_minute_of_day, day_of_week


@dataclass(frozen=True)
class Occurrence:
    rule_id: str
    client_id: str
    caregiver_id: str
    scheduled_start: datetime
    scheduled_end: datetime
    service_code: Optional[str] = None
    notes: Optional[str] = None


def rule_applies_on(
    rule,
    target_date: DateLike,
    client_id: Optional[str] = None,
    caregiver_id: Optional[str] = None,
) -> bool:
    """Whether the rule produces an occurrence on target_date"""
    target = as_date(target_date)

    if rule.day_of_week != day_of_week(target):
        return False
    if as_date(rule.effective_start_date) > target:
        return False
    if rule.effective_end_date is not None and as_date(rule.effective_end_date) < target:
        return False
    if client_id and rule.client_id != client_id:
        return False
    if caregiver_id and rule.caregiver_id != caregiver_id:
        return False
    return True


def resolve_occurrences(
    rules: Iterable,
    target_date: DateLike,
    client_id: Optional[str] = None,
    caregiver_id: Optional[str] = None,
) -> list[Occurrence]:
    """
    Build the occurrences active on target_date.

    Args:
        rules: Schedule rules (ORM rows or any object with the same attributes)
        target_date: Calendar day to resolve
        client_id: Only rules for this client, when given
        caregiver_id: Only rules for this caregiver, when given

    Returns:
        Occurrences ordered by start minute, ties broken by rule id, which is
        the order the lane packer expects.
    """
    target: date = as_date(target_date)
    matching = [
        rule for rule in rules if rule_applies_on(rule, target, client_id, caregiver_id)
    ]
    matching.sort(key=lambda rule: (rule.start_time_minutes, str(rule.id)))

    return [
        Occurrence(
            rule_id=rule.id,
            client_id=rule.client_id,
            caregiver_id=rule.caregiver_id,
            scheduled_start=at_minute_of_day(target, rule.start_time_minutes),
            scheduled_end=at_minute_of_day(target, rule.end_time_minutes),
            service_code=rule.service_code,
            notes=rule.notes,
        )
        for rule in matching
    ]
