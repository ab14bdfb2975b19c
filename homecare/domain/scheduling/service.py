"""Scheduling service - schedule rules, scheduled visits and day view layout"""

import logging
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...config import DAY_VIEW_END_HOUR, DAY_VIEW_START_HOUR, MIN_DISPLAY_MINUTES
from ...database import atomic, storage_read
from ...exceptions import NotFoundError, ValidationError
from ...models import ScheduleRule, generate_public_id
from ...shared.validators import (
    clean_optional_text,
    parse_clock_time,
    parse_iso_date,
    parse_optional_date,
    require_id,
    validate_day_of_week,
)
from .layout import TimedItem, layout_columns
from .repository import ScheduleRepository
from .rule_resolver import resolve_occurrences
from .schemas import (
    DayLayoutResponse,
    LayoutColumn,
    PositionedEvent,
    ScheduledVisit,
    ScheduleEvent,
    ScheduleRuleCreate,
    ScheduleRuleResponse,
)
from .time_window import day_window, format_minutes, start_of_day

logger = logging.getLogger(__name__)

LAYOUT_SOURCES = ("rules", "visits")


def rule_to_response(rule: ScheduleRule) -> ScheduleRuleResponse:
    return ScheduleRuleResponse(
        id=rule.id,
        clientId=rule.client_id,
        caregiverId=rule.caregiver_id,
        dayOfWeek=rule.day_of_week,
        startTimeMinutes=rule.start_time_minutes,
        endTimeMinutes=rule.end_time_minutes,
        startTime=format_minutes(rule.start_time_minutes),
        endTime=format_minutes(rule.end_time_minutes),
        effectiveStartDate=rule.effective_start_date,
        effectiveEndDate=rule.effective_end_date,
        serviceCode=rule.service_code,
        notes=rule.notes,
    )


class ScheduleService:
    """Service layer for scheduling business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ScheduleRepository()

    # ------------------------------------------------------------------
    # Schedule rules
    # ------------------------------------------------------------------

    def create_rule(self, data: ScheduleRuleCreate) -> ScheduleRuleResponse:
        """Create a weekly schedule rule after validating every field.

        Overlapping rules for the same caregiver are allowed; they show up as
        extra lanes in the day view.
        """
        client_id = require_id(data.clientId, "clientId")
        caregiver_id = require_id(data.caregiverId, "caregiverId")
        day = validate_day_of_week(data.dayOfWeek)

        start_minutes = parse_clock_time(data.startTime, "startTime")
        end_minutes = parse_clock_time(data.endTime, "endTime")
        if end_minutes <= start_minutes:
            logger.warning(
                f"Rejected schedule rule for client {client_id}: "
                f"endTime {data.endTime} is not after startTime {data.startTime}"
            )
            raise ValidationError("endTime must be after startTime", field="endTime")

        effective_start = parse_iso_date(data.effectiveStartDate, "effectiveStartDate")
        effective_end = parse_optional_date(data.effectiveEndDate, "effectiveEndDate")
        if effective_end is not None and effective_end < effective_start:
            raise ValidationError(
                "effectiveEndDate cannot be before effectiveStartDate", field="effectiveEndDate"
            )

        with atomic(self.db, "create schedule rule"):
            if not self.repo.get_client(self.db, client_id):
                raise NotFoundError("Client not found", field="clientId")
            if not self.repo.get_caregiver(self.db, caregiver_id):
                raise NotFoundError("Caregiver not found", field="caregiverId")

            rule = self.repo.add_rule(
                self.db,
                id=generate_public_id(),
                client_id=client_id,
                caregiver_id=caregiver_id,
                day_of_week=day,
                start_time_minutes=start_minutes,
                end_time_minutes=end_minutes,
                effective_start_date=effective_start,
                effective_end_date=effective_end,
                service_code=clean_optional_text(data.serviceCode),
                notes=clean_optional_text(data.notes),
            )
            response = rule_to_response(rule)

        logger.info(
            f"Created schedule rule {response.id} (client={client_id}, caregiver={caregiver_id}, "
            f"day={day}, {response.startTime}-{response.endTime})"
        )
        return response

    def delete_rule(self, rule_id: str) -> None:
        """Delete a schedule rule outright"""
        rule_id = require_id(rule_id, "id")
        with atomic(self.db, "delete schedule rule"):
            rule = self.repo.get_rule(self.db, rule_id)
            if not rule:
                raise NotFoundError("Schedule rule not found")
            self.repo.delete_rule(self.db, rule)

        logger.info(f"Deleted schedule rule {rule_id}")

    def get_rule_events(
        self,
        target_date: date,
        client_id: Optional[str] = None,
        caregiver_id: Optional[str] = None,
    ) -> list[ScheduleEvent]:
        """Occurrences of the schedule rules active on target_date"""
        with storage_read(self.db, "schedule rules"):
            rules = self.repo.find_rules_for_day(self.db, target_date, client_id, caregiver_id)
            rules_by_id = {rule.id: rule for rule in rules}

            events = []
            for occurrence in resolve_occurrences(rules, target_date, client_id, caregiver_id):
                rule = rules_by_id[occurrence.rule_id]
                events.append(
                    ScheduleEvent(
                        id=occurrence.rule_id,
                        clientId=occurrence.client_id,
                        clientName=rule.client.full_name if rule.client else "Unknown",
                        caregiverId=occurrence.caregiver_id,
                        caregiverName=rule.caregiver.full_name if rule.caregiver else "Unknown",
                        scheduledStart=occurrence.scheduled_start,
                        scheduledEnd=occurrence.scheduled_end,
                        serviceCode=occurrence.service_code,
                        notes=occurrence.notes,
                    )
                )
        return events

    # ------------------------------------------------------------------
    # Scheduled visits
    # ------------------------------------------------------------------

    def get_visit_events(
        self,
        target_date: date,
        client_id: Optional[str] = None,
        caregiver_id: Optional[str] = None,
    ) -> list[ScheduledVisit]:
        """Scheduled visits overlapping the calendar day"""
        day_start = start_of_day(target_date)
        day_end = day_start + timedelta(days=1)

        with storage_read(self.db, "scheduled visits"):
            visits = self.repo.find_visits_in_window(
                self.db, day_start, day_end, client_id, caregiver_id
            )
            return [
                ScheduledVisit(
                    id=v.id,
                    clientId=v.client_id,
                    clientName=v.client.full_name if v.client else "Unknown",
                    caregiverId=v.caregiver_id,
                    caregiverName=v.caregiver.full_name if v.caregiver else "Unknown",
                    scheduledStart=v.scheduled_start,
                    scheduledEnd=v.scheduled_end,
                    serviceCode=v.service_code,
                    notes=v.notes,
                    actualStart=v.actual_start,
                    actualEnd=v.actual_end,
                    hasIncident=bool(v.has_incident),
                )
                for v in visits
            ]

    def delete_visit(self, visit_id: str) -> str:
        """Delete a scheduled visit"""
        visit_id = require_id(visit_id, "id")
        with atomic(self.db, "delete scheduled visit"):
            visit = self.repo.get_visit(self.db, visit_id)
            if not visit:
                raise NotFoundError("Scheduled visit not found")
            self.repo.delete_visit(self.db, visit)

        logger.info(f"Deleted scheduled visit {visit_id}")
        return visit_id

    # ------------------------------------------------------------------
    # Day view layout
    # ------------------------------------------------------------------

    def get_day_layout(
        self,
        target_date: date,
        source: str = "rules",
        client_id: Optional[str] = None,
        caregiver_id: Optional[str] = None,
        start_hour: int = DAY_VIEW_START_HOUR,
        end_hour: int = DAY_VIEW_END_HOUR,
    ) -> DayLayoutResponse:
        """
        Position the day's events in per-caregiver columns.

        Every caregiver column is laid out from its complete event set; if
        any read fails the whole layout fails.
        """
        if source not in LAYOUT_SOURCES:
            raise ValidationError("source must be 'rules' or 'visits'", field="source")

        if source == "rules":
            events = self.get_rule_events(target_date, client_id, caregiver_id)
        else:
            events = self.get_visit_events(target_date, client_id, caregiver_id)

        with storage_read(self.db, "caregivers"):
            if caregiver_id:
                caregiver = self.repo.get_caregiver(self.db, caregiver_id)
                if not caregiver:
                    raise NotFoundError("Caregiver not found", field="caregiverId")
                caregivers = [caregiver]
            else:
                caregivers = self.repo.get_active_caregivers(self.db)
            names = {c.id: c.full_name for c in caregivers}

        for event in events:
            names.setdefault(event.caregiverId, event.caregiverName)

        window_start, window_end = day_window(target_date, start_hour, end_hour)
        columns = layout_columns(
            (TimedItem(e.id, e.caregiverId, e.scheduledStart, e.scheduledEnd) for e in events),
            window_start,
            window_end,
            resource_ids=names.keys(),
            min_display_minutes=MIN_DISPLAY_MINUTES,
        )

        events_by_id = {e.id: e for e in events}
        return DayLayoutResponse(
            day=target_date,
            source=source,
            windowStart=window_start,
            windowEnd=window_end,
            columns=[
                LayoutColumn(
                    caregiverId=resource_id,
                    caregiverName=names[resource_id],
                    laneCount=positioned[0].lane_count if positioned else 0,
                    events=[
                        PositionedEvent(
                            event=events_by_id[p.id],
                            top=p.top,
                            height=p.height,
                            lane=p.lane,
                            laneCount=p.lane_count,
                            startOffset=p.start_offset,
                            endOffset=p.end_offset,
                            durationMinutes=p.duration_minutes,
                        )
                        for p in positioned
                    ],
                )
                for resource_id, positioned in columns.items()
            ],
        )
