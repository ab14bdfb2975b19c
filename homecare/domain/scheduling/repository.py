"""Scheduling repository - Database operations for schedule rules and visits"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ...models import Caregiver, Client, ScheduleRule
from ...models_visit import VisitLog
from .time_window import day_of_week


class ScheduleRepository:
    """Repository for schedule rule and visit database operations"""

    @staticmethod
    def get_client(db: Session, client_id: str) -> Optional[Client]:
        return db.query(Client).filter(Client.id == client_id).first()

    @staticmethod
    def get_caregiver(db: Session, caregiver_id: str) -> Optional[Caregiver]:
        return db.query(Caregiver).filter(Caregiver.id == caregiver_id).first()

    @staticmethod
    def get_active_caregivers(db: Session) -> list[Caregiver]:
        return (
            db.query(Caregiver)
            .filter(Caregiver.status == "active")
            .order_by(Caregiver.last_name.asc(), Caregiver.first_name.asc())
            .all()
        )

    # Schedule rule methods
    @staticmethod
    def get_rule(db: Session, rule_id: str) -> Optional[ScheduleRule]:
        return db.query(ScheduleRule).filter(ScheduleRule.id == rule_id).first()

    @staticmethod
    def find_rules_for_day(
        db: Session,
        target_date: date,
        client_id: Optional[str] = None,
        caregiver_id: Optional[str] = None,
    ) -> list[ScheduleRule]:
        """Candidate rules for a day: same weekday and effective on that date"""
        query = (
            db.query(ScheduleRule)
            .options(joinedload(ScheduleRule.client), joinedload(ScheduleRule.caregiver))
            .filter(
                ScheduleRule.day_of_week == day_of_week(target_date),
                ScheduleRule.effective_start_date <= target_date,
                or_(
                    ScheduleRule.effective_end_date.is_(None),
                    ScheduleRule.effective_end_date >= target_date,
                ),
            )
        )
        if client_id:
            query = query.filter(ScheduleRule.client_id == client_id)
        if caregiver_id:
            query = query.filter(ScheduleRule.caregiver_id == caregiver_id)

        return query.order_by(ScheduleRule.start_time_minutes.asc(), ScheduleRule.id.asc()).all()

    @staticmethod
    def add_rule(db: Session, **rule_data) -> ScheduleRule:
        rule = ScheduleRule(**rule_data)
        db.add(rule)
        db.flush()
        return rule

    @staticmethod
    def delete_rule(db: Session, rule: ScheduleRule) -> None:
        db.delete(rule)

    # Visit methods
    @staticmethod
    def get_visit(db: Session, visit_id: str) -> Optional[VisitLog]:
        return db.query(VisitLog).filter(VisitLog.id == visit_id).first()

    @staticmethod
    def find_visits_in_window(
        db: Session,
        window_start: datetime,
        window_end: datetime,
        client_id: Optional[str] = None,
        caregiver_id: Optional[str] = None,
    ) -> list[VisitLog]:
        """Visits whose [scheduled_start, scheduled_end) intersects the window"""
        query = (
            db.query(VisitLog)
            .options(joinedload(VisitLog.client), joinedload(VisitLog.caregiver))
            .filter(
                VisitLog.scheduled_start.isnot(None),
                VisitLog.scheduled_end.isnot(None),
                VisitLog.scheduled_start < window_end,
                VisitLog.scheduled_end > window_start,
            )
        )
        if client_id:
            query = query.filter(VisitLog.client_id == client_id)
        if caregiver_id:
            query = query.filter(VisitLog.caregiver_id == caregiver_id)

        return query.order_by(VisitLog.scheduled_start.asc(), VisitLog.id.asc()).all()

    @staticmethod
    def delete_visit(db: Session, visit: VisitLog) -> None:
        db.delete(visit)
