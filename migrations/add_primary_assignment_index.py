"""
Add the single-active-primary unique index to caregiver_assignments

Index:
- uq_caregiver_assignments_active_primary ON caregiver_assignments (client_id)
  WHERE the assignment is primary and has no end date

Refuses to run while any client still has more than one active primary; end
the extra assignments first (the report lists them).
"""

# Ensure this script can be run directly from the repo root
import sys
from pathlib import Path

CURRENT_DIR = Path(__file__).resolve().parent
ROOT_DIR = CURRENT_DIR.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from sqlalchemy import text
from homecare.database import engine

INDEX_NAME = "uq_caregiver_assignments_active_primary"


def _active_primary_predicate() -> str:
    if engine.dialect.name == "sqlite":
        return "is_primary = 1 AND end_date IS NULL"
    return "is_primary AND end_date IS NULL"


def find_duplicate_primaries(conn):
    return conn.execute(
        text(
            f"""
            SELECT client_id, COUNT(*) AS active_primaries
            FROM caregiver_assignments
            WHERE {_active_primary_predicate()}
            GROUP BY client_id
            HAVING COUNT(*) > 1
            """
        )
    ).fetchall()


def upgrade():
    with engine.connect() as conn:
        duplicates = find_duplicate_primaries(conn)
        if duplicates:
            for client_id, count in duplicates:
                print(f"Client {client_id} has {count} active primary assignments")
            print(f"Migration aborted: {len(duplicates)} client(s) violate the single primary rule")
            sys.exit(1)

        conn.execute(
            text(
                f"""
                CREATE UNIQUE INDEX IF NOT EXISTS {INDEX_NAME}
                ON caregiver_assignments (client_id)
                WHERE {_active_primary_predicate()};
                """
            )
        )
        conn.commit()
        print("Migration add_primary_assignment_index applied successfully")


def downgrade():
    with engine.connect() as conn:
        conn.execute(text(f"DROP INDEX IF EXISTS {INDEX_NAME}"))
        conn.commit()
        print("Migration add_primary_assignment_index rolled back")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Manage the active primary assignment index")
    parser.add_argument("--down", action="store_true", help="Rollback the migration")
    args = parser.parse_args()

    if args.down:
        downgrade()
    else:
        upgrade()
