from datetime import date, datetime

import pytest
from sqlalchemy.exc import OperationalError

from factories import add_caregiver, add_client, add_rule, add_visit
from homecare.domain.scheduling.schemas import ScheduleRuleCreate
from homecare.domain.scheduling.service import ScheduleService
from homecare.exceptions import NotFoundError, StorageUnavailable, ValidationError
from homecare.models import ScheduleRule
from homecare.models_visit import VisitLog

MONDAY = date(2024, 6, 10)


@pytest.fixture
def people(db):
    client = add_client(db, "Rosa", "Alvarez")
    caregiver = add_caregiver(db, "Maya", "Chen", middle_name="Li")
    return client, caregiver


def rule_payload(client, caregiver, **overrides):
    payload = {
        "clientId": client.id,
        "caregiverId": caregiver.id,
        "dayOfWeek": 1,
        "startTime": "09:00",
        "endTime": "12:00",
        "effectiveStartDate": "2024-06-01",
        "serviceCode": "PCS",
    }
    payload.update(overrides)
    return payload


# ---------------------------------------------------------------------------
# Schedule rules
# ---------------------------------------------------------------------------


def test_create_rule(api, db, people):
    client, caregiver = people

    response = api.post("/schedule-rules", json=rule_payload(client, caregiver))

    assert response.status_code == 201
    rule = response.json()["rule"]
    assert rule["dayOfWeek"] == 1
    assert rule["startTimeMinutes"] == 540
    assert rule["endTimeMinutes"] == 720
    assert rule["startTime"] == "09:00"
    assert rule["effectiveStartDate"] == "2024-06-01"
    assert rule["effectiveEndDate"] is None
    assert db.query(ScheduleRule).count() == 1


def test_end_before_start_is_rejected_without_writing(api, db, people):
    client, caregiver = people

    response = api.post(
        "/schedule-rules", json=rule_payload(client, caregiver, startTime="14:00", endTime="13:00")
    )

    assert response.status_code == 400
    assert response.json() == {"error": "endTime must be after startTime", "field": "endTime"}
    assert db.query(ScheduleRule).count() == 0


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"clientId": None}, "clientId is required"),
        ({"dayOfWeek": 7}, "dayOfWeek must be between 0 and 6"),
        ({"startTime": "9am"}, "Invalid startTime, expected HH:MM"),
        ({"endTime": "24:00"}, "Invalid endTime, expected HH:MM"),
        ({"startTime": "10:00", "endTime": "10:00"}, "endTime must be after startTime"),
        ({"effectiveStartDate": "someday"}, "Invalid effectiveStartDate"),
        ({"effectiveEndDate": "2024-13-01"}, "Invalid effectiveEndDate"),
        (
            {"effectiveEndDate": "2024-05-31"},
            "effectiveEndDate cannot be before effectiveStartDate",
        ),
    ],
)
def test_create_rule_validation(api, db, people, overrides, message):
    client, caregiver = people

    response = api.post("/schedule-rules", json=rule_payload(client, caregiver, **overrides))

    assert response.status_code == 400
    assert response.json()["error"] == message
    assert db.query(ScheduleRule).count() == 0


def test_create_rule_unknown_caregiver(api, people):
    client, _ = people
    response = api.post(
        "/schedule-rules",
        json={**rule_payload(client, people[1]), "caregiverId": "missing"},
    )
    assert response.status_code == 404
    assert response.json()["error"] == "Caregiver not found"


def test_overlapping_rules_are_allowed(db, people):
    client, caregiver = people
    service = ScheduleService(db)
    data = ScheduleRuleCreate(**rule_payload(client, caregiver))
    service.create_rule(data)
    service.create_rule(data.model_copy(update={"startTime": "10:00", "endTime": "11:00"}))

    assert len(service.get_rule_events(MONDAY)) == 2


def test_rule_day_view(api, db, people):
    client, caregiver = people
    rule = add_rule(db, client, caregiver, effective_start_date=date(2024, 6, 1), notes="keys under mat")

    # any day of the week resolves to that week's Monday
    response = api.get("/schedule-rules", params={"weekStart": "2024-06-12", "dayIndex": 0})

    assert response.status_code == 200
    events = response.json()["events"]
    assert events == [
        {
            "id": rule.id,
            "clientId": client.id,
            "clientName": "Rosa Alvarez",
            "caregiverId": caregiver.id,
            "caregiverName": "Maya Li Chen",
            "scheduledStart": "2024-06-10T09:00:00",
            "scheduledEnd": "2024-06-10T12:00:00",
            "serviceCode": None,
            "notes": "keys under mat",
        }
    ]

    tuesday = api.get("/schedule-rules", params={"weekStart": "2024-06-10", "dayIndex": 1})
    assert tuesday.json()["events"] == []


def test_rule_day_view_respects_effective_range(db, people):
    client, caregiver = people
    add_rule(db, client, caregiver, effective_start_date=MONDAY, effective_end_date=MONDAY)
    service = ScheduleService(db)

    assert len(service.get_rule_events(MONDAY)) == 1
    assert service.get_rule_events(date(2024, 6, 3)) == []
    assert service.get_rule_events(date(2024, 6, 17)) == []


def test_rule_day_view_filters(db, people):
    client, caregiver = people
    other_client = add_client(db, "Sam", "Brooks")
    add_rule(db, client, caregiver)
    add_rule(db, other_client, caregiver, start_time_minutes=13 * 60, end_time_minutes=14 * 60)
    service = ScheduleService(db)

    assert [e.clientId for e in service.get_rule_events(MONDAY, client_id=other_client.id)] == [
        other_client.id
    ]
    assert len(service.get_rule_events(MONDAY, caregiver_id=caregiver.id)) == 2
    assert service.get_rule_events(MONDAY, caregiver_id="nobody") == []


def test_rule_day_view_missing_params(api):
    response = api.get("/schedule-rules", params={"weekStart": "2024-06-10"})
    assert response.status_code == 400
    assert response.json() == {"error": "dayIndex is required", "field": "dayIndex"}

    response = api.get("/schedule-rules", params={"dayIndex": 0})
    assert response.status_code == 400
    assert response.json() == {"error": "weekStart is required", "field": "weekStart"}

    response = api.get("/schedule-rules", params={"weekStart": "2024-06-10", "dayIndex": 9})
    assert response.status_code == 400
    assert response.json() == {"error": "dayIndex must be between 0 and 6", "field": "dayIndex"}


def test_delete_rule(api, db, people):
    client, caregiver = people
    rule = add_rule(db, client, caregiver)

    response = api.delete(f"/schedule-rules/{rule.id}")
    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert db.query(ScheduleRule).count() == 0

    assert api.delete(f"/schedule-rules/{rule.id}").status_code == 404


def test_read_failure_is_storage_unavailable(db, monkeypatch):
    service = ScheduleService(db)

    def broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("canceling statement due to statement timeout"))

    monkeypatch.setattr(service.repo, "find_rules_for_day", broken)

    with pytest.raises(StorageUnavailable, match="Unable to load schedule rules"):
        service.get_rule_events(MONDAY)


# ---------------------------------------------------------------------------
# Scheduled visits
# ---------------------------------------------------------------------------


def test_visit_day_view_returns_overlapping_visits(api, db, people):
    client, caregiver = people
    overnight = add_visit(db, client, caregiver, datetime(2024, 6, 9, 22), datetime(2024, 6, 10, 2))
    morning = add_visit(
        db,
        client,
        caregiver,
        datetime(2024, 6, 10, 9),
        datetime(2024, 6, 10, 10),
        actual_start=datetime(2024, 6, 10, 9, 5),
        has_incident=True,
    )
    add_visit(db, client, caregiver, datetime(2024, 6, 9, 9), datetime(2024, 6, 10, 0))  # ends at midnight
    add_visit(db, client, caregiver, None, None)

    response = api.get("/schedule", params={"weekStart": "2024-06-10", "dayIndex": 0})

    assert response.status_code == 200
    visits = response.json()["visits"]
    assert [v["id"] for v in visits] == [overnight.id, morning.id]
    assert visits[1]["actualStart"] == "2024-06-10T09:05:00"
    assert visits[1]["hasIncident"] is True
    assert visits[1]["caregiverName"] == "Maya Li Chen"


def test_empty_caregiver_day(api, db, people):
    _, caregiver = people

    response = api.get(
        "/schedule", params={"weekStart": "2024-06-10", "dayIndex": 2, "caregiverId": caregiver.id}
    )
    assert response.status_code == 200
    assert response.json() == {"visits": []}

    layout = api.get(
        "/schedule/layout",
        params={
            "weekStart": "2024-06-10",
            "dayIndex": 2,
            "source": "visits",
            "caregiverId": caregiver.id,
        },
    )
    assert layout.status_code == 200
    columns = layout.json()["columns"]
    assert columns == [
        {"caregiverId": caregiver.id, "caregiverName": "Maya Li Chen", "laneCount": 0, "events": []}
    ]


def test_delete_visit(api, db, people):
    client, caregiver = people
    visit = add_visit(db, client, caregiver, datetime(2024, 6, 10, 9), datetime(2024, 6, 10, 10))

    response = api.delete(f"/schedule/{visit.id}")
    assert response.status_code == 200
    assert response.json() == {"id": visit.id}
    assert db.query(VisitLog).count() == 0
    assert api.delete(f"/schedule/{visit.id}").status_code == 404


# ---------------------------------------------------------------------------
# Day layout
# ---------------------------------------------------------------------------


def test_layout_from_rules(api, db, people):
    client, caregiver = people
    other = add_caregiver(db, "Ana", "Silva")
    first = add_rule(db, client, caregiver, start_time_minutes=6 * 60, end_time_minutes=7 * 60)
    second = add_rule(db, client, caregiver, start_time_minutes=6 * 60 + 30, end_time_minutes=7 * 60 + 30)
    third = add_rule(db, client, caregiver, start_time_minutes=7 * 60 + 40, end_time_minutes=8 * 60)

    response = api.get(
        "/schedule/layout", params={"weekStart": "2024-06-10", "dayIndex": 0, "source": "rules"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["day"] == "2024-06-10"
    assert body["windowStart"] == "2024-06-10T06:00:00"
    assert body["windowEnd"] == "2024-06-10T22:00:00"

    columns = {column["caregiverId"]: column for column in body["columns"]}
    assert set(columns) == {caregiver.id, other.id}
    assert columns[other.id]["events"] == []

    column = columns[caregiver.id]
    assert column["laneCount"] == 2
    lanes = {e["event"]["id"]: e["lane"] for e in column["events"]}
    assert lanes == {first.id: 0, second.id: 1, third.id: 0}
    assert column["events"][0]["top"] == 0
    assert column["events"][0]["durationMinutes"] == 60


def test_layout_clamps_visits_outside_window(db, people):
    client, caregiver = people
    add_visit(db, client, caregiver, datetime(2024, 6, 10, 5), datetime(2024, 6, 10, 7))
    add_visit(db, client, caregiver, datetime(2024, 6, 10, 2), datetime(2024, 6, 10, 4))

    layout = ScheduleService(db).get_day_layout(MONDAY, "visits", caregiver_id=caregiver.id)

    (column,) = layout.columns
    assert len(column.events) == 1
    assert column.events[0].startOffset == 0
    assert column.events[0].endOffset == 60


def test_layout_rejects_unknown_source(db):
    with pytest.raises(ValidationError):
        ScheduleService(db).get_day_layout(MONDAY, "calendar")


def test_layout_unknown_caregiver(db):
    with pytest.raises(NotFoundError):
        ScheduleService(db).get_day_layout(MONDAY, "rules", caregiver_id="missing")


def test_layout_source_query_is_validated(api):
    response = api.get(
        "/schedule/layout", params={"weekStart": "2024-06-10", "dayIndex": 0, "source": "calendar"}
    )
    assert response.status_code == 400
    assert response.json()["field"] == "source"
