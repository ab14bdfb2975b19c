from sqlalchemy import inspect

from homecare.database import Base


def test_health(api):
    response = api.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_database_health(api):
    response = api.get("/health/db")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_active_primary_index_is_created(session_factory):
    engine = session_factory.kw["bind"]
    indexes = {index["name"]: index for index in inspect(engine).get_indexes("caregiver_assignments")}
    assert indexes["uq_caregiver_assignments_active_primary"]["unique"]


def test_all_tables_registered():
    assert {"clients", "caregivers", "caregiver_assignments", "schedule_rules", "visit_logs"} <= set(
        Base.metadata.tables
    )
