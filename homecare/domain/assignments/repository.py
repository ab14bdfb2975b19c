"""Assignment repository - Database operations for caregiver assignments

Nothing here commits; the service decides the transaction boundaries.
"""

from typing import Optional

from sqlalchemy import nullslast
from sqlalchemy.orm import Session, joinedload

from ...models import Caregiver, CaregiverAssignment, Client


class AssignmentRepository:
    """Repository for assignment database operations"""

    @staticmethod
    def lock_client(db: Session, client_id: str) -> Optional[Client]:
        """
        Load the client row with a row lock held until commit/rollback.

        Every primary promotion for a client goes through this lock, so two
        promotions for the same client serialize even when the client has no
        assignment rows yet to lock.
        """
        return db.query(Client).filter(Client.id == client_id).with_for_update().first()

    @staticmethod
    def get_caregiver(db: Session, caregiver_id: str) -> Optional[Caregiver]:
        return db.query(Caregiver).filter(Caregiver.id == caregiver_id).first()

    @staticmethod
    def get_assignment(db: Session, assignment_id: str) -> Optional[CaregiverAssignment]:
        return db.query(CaregiverAssignment).filter(CaregiverAssignment.id == assignment_id).first()

    @staticmethod
    def find_active_primaries(
        db: Session, client_id: str, exclude_id: Optional[str] = None
    ) -> list[CaregiverAssignment]:
        """Active primary assignments of a client, locked for update"""
        query = db.query(CaregiverAssignment).filter(
            CaregiverAssignment.client_id == client_id,
            CaregiverAssignment.is_primary.is_(True),
            CaregiverAssignment.end_date.is_(None),
        )
        if exclude_id is not None:
            query = query.filter(CaregiverAssignment.id != exclude_id)
        return query.order_by(CaregiverAssignment.start_date).with_for_update().all()

    @staticmethod
    def get_assignments_for_client(db: Session, client_id: str) -> list[CaregiverAssignment]:
        """Open assignments last, most recent start first"""
        return (
            db.query(CaregiverAssignment)
            .options(joinedload(CaregiverAssignment.caregiver))
            .filter(CaregiverAssignment.client_id == client_id)
            .order_by(
                nullslast(CaregiverAssignment.end_date.asc()),
                CaregiverAssignment.start_date.desc(),
            )
            .all()
        )

    @staticmethod
    def add_assignment(db: Session, **assignment_data) -> CaregiverAssignment:
        assignment = CaregiverAssignment(**assignment_data)
        db.add(assignment)
        db.flush()
        return assignment

    @staticmethod
    def delete_assignment(db: Session, assignment: CaregiverAssignment) -> None:
        db.delete(assignment)
