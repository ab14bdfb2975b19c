"""Row builders shared by the database-backed tests"""

from datetime import date, datetime

from homecare.models import Caregiver, CaregiverAssignment, Client, ScheduleRule
from homecare.models_visit import VisitLog


def add_client(db, first_name="Rosa", last_name="Alvarez", **fields) -> Client:
    client = Client(first_name=first_name, last_name=last_name, **fields)
    db.add(client)
    db.commit()
    return client


def add_caregiver(db, first_name="Maya", last_name="Chen", **fields) -> Caregiver:
    caregiver = Caregiver(first_name=first_name, last_name=last_name, **fields)
    db.add(caregiver)
    db.commit()
    return caregiver


def add_assignment(db, client, caregiver, start_date, end_date=None, is_primary=False):
    assignment = CaregiverAssignment(
        client_id=client.id,
        caregiver_id=caregiver.id,
        start_date=start_date,
        end_date=end_date,
        is_primary=is_primary,
    )
    db.add(assignment)
    db.commit()
    return assignment


def add_rule(
    db,
    client,
    caregiver,
    day_of_week=1,
    start_time_minutes=9 * 60,
    end_time_minutes=12 * 60,
    effective_start_date=date(2024, 1, 1),
    effective_end_date=None,
    **fields,
) -> ScheduleRule:
    rule = ScheduleRule(
        client_id=client.id,
        caregiver_id=caregiver.id,
        day_of_week=day_of_week,
        start_time_minutes=start_time_minutes,
        end_time_minutes=end_time_minutes,
        effective_start_date=effective_start_date,
        effective_end_date=effective_end_date,
        **fields,
    )
    db.add(rule)
    db.commit()
    return rule


def add_visit(db, client, caregiver, scheduled_start, scheduled_end, **fields) -> VisitLog:
    visit = VisitLog(
        client_id=client.id,
        caregiver_id=caregiver.id,
        scheduled_start=scheduled_start,
        scheduled_end=scheduled_end,
        **fields,
    )
    db.add(visit)
    db.commit()
    return visit


def dt(value: str) -> datetime:
    return datetime.fromisoformat(value)
