"""Directory repository - read-only queries over clients and caregivers"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ...models import Caregiver, CaregiverAssignment, Client


class DirectoryRepository:
    """Repository for client and caregiver listings"""

    @staticmethod
    def get_clients(
        db: Session, status: Optional[str] = None, search: Optional[str] = None
    ) -> list[Client]:
        query = db.query(Client)
        if status:
            query = query.filter(Client.status == status)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(Client.first_name.ilike(pattern), Client.last_name.ilike(pattern))
            )
        return query.order_by(Client.last_name.asc(), Client.first_name.asc()).all()

    @staticmethod
    def get_active_primaries(db: Session, client_ids: list[str]) -> list[CaregiverAssignment]:
        """Active primary assignments for the given clients, caregiver loaded"""
        if not client_ids:
            return []
        return (
            db.query(CaregiverAssignment)
            .options(joinedload(CaregiverAssignment.caregiver))
            .filter(
                CaregiverAssignment.client_id.in_(client_ids),
                CaregiverAssignment.is_primary.is_(True),
                CaregiverAssignment.end_date.is_(None),
            )
            .all()
        )

    @staticmethod
    def get_caregivers(
        db: Session, status: Optional[str] = None, search: Optional[str] = None
    ) -> list[Caregiver]:
        query = db.query(Caregiver)
        if status:
            query = query.filter(Caregiver.status == status)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(Caregiver.first_name.ilike(pattern), Caregiver.last_name.ilike(pattern))
            )
        return query.order_by(Caregiver.last_name.asc(), Caregiver.first_name.asc()).all()
