"""Assignment service - keeps a single active primary caregiver per client

A client's active primary assignment is the one with is_primary set and no
end date. Promoting a new primary ends the previous one inside the same
transaction, so the hand-off is never observable half done.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...database import atomic, storage_read
from ...exceptions import NotFoundError, ValidationError
from ...models import CaregiverAssignment, generate_public_id
from ...shared.validators import clean_optional_text, parse_iso_datetime, require_id
from .repository import AssignmentRepository
from .schemas import AssignmentCreate, AssignmentPatch, AssignmentResponse

logger = logging.getLogger(__name__)


class AssignmentService:
    """Service layer for caregiver assignment business logic"""

    def __init__(self, db: Session, now_fn=None):
        self.db = db
        self.repo = AssignmentRepository()
        self.now_fn = now_fn or datetime.now

    def list_assignments(self, client_id: Optional[str]) -> list[AssignmentResponse]:
        """Get all assignments of a client"""
        if not client_id:
            raise ValidationError("Missing clientId", field="clientId")

        with storage_read(self.db, "assignments"):
            assignments = self.repo.get_assignments_for_client(self.db, client_id)
            return [
                AssignmentResponse(
                    id=a.id,
                    caregiverId=a.caregiver_id,
                    caregiverName=a.caregiver.full_name if a.caregiver else "Unknown",
                    startDate=a.start_date,
                    endDate=a.end_date,
                    isPrimary=bool(a.is_primary),
                    notes=a.notes,
                )
                for a in assignments
            ]

    def active_primary(self, client_id: str) -> Optional[CaregiverAssignment]:
        """The client's current active primary assignment, if any"""
        primaries = self.repo.find_active_primaries(self.db, client_id)
        return primaries[0] if primaries else None

    def create_assignment(self, data: AssignmentCreate) -> str:
        """
        Create an assignment, handing over primary status when requested.

        When the new assignment is primary, the client's current active
        primary is ended exactly at the new assignment's start date. The end
        date is not required to follow the start date.

        Returns:
            The new assignment id
        """
        # Validate everything before the transaction opens
        client_id = require_id(data.clientId, "clientId")
        caregiver_id = require_id(data.caregiverId, "caregiverId")
        start = parse_iso_datetime(data.startDate, "startDate")
        end = parse_iso_datetime(data.endDate, "endDate") if data.endDate else None
        is_primary = bool(data.isPrimary)

        assignment_id = generate_public_id()

        with atomic(self.db, "create assignment"):
            if not self.repo.lock_client(self.db, client_id):
                raise NotFoundError("Client not found", field="clientId")
            if not self.repo.get_caregiver(self.db, caregiver_id):
                raise NotFoundError("Caregiver not found", field="caregiverId")

            if is_primary:
                self._end_active_primaries(client_id, end_at=start)

            self.repo.add_assignment(
                self.db,
                id=assignment_id,
                client_id=client_id,
                caregiver_id=caregiver_id,
                start_date=start,
                end_date=end,
                is_primary=is_primary,
                notes=clean_optional_text(data.notes),
            )

        logger.info(
            f"Created assignment {assignment_id} (client={client_id}, caregiver={caregiver_id}, "
            f"primary={is_primary})"
        )
        return assignment_id

    def patch_assignment(self, assignment_id: str, data: AssignmentPatch) -> str:
        """
        Update end date and/or primary flag of an assignment.

        Promoting to primary ends every other active primary of the same
        client at the current instant. Re-opening a primary assignment
        (explicit null end date) does the same, so the client never ends up
        with two active primaries.
        """
        new_end: Optional[datetime] = None
        if data.end_date_provided and data.endDate is not None:
            new_end = parse_iso_datetime(data.endDate, "endDate")

        with atomic(self.db, "update assignment"):
            assignment = self.repo.get_assignment(self.db, assignment_id)
            if not assignment:
                raise NotFoundError("Assignment not found")

            is_primary = data.isPrimary if data.isPrimary is not None else assignment.is_primary
            end_date = new_end if data.end_date_provided else assignment.end_date

            if data.isPrimary is True or (is_primary and end_date is None):
                self.repo.lock_client(self.db, assignment.client_id)
                self._end_active_primaries(
                    assignment.client_id, end_at=self.now_fn(), exclude_id=assignment.id
                )

            if data.isPrimary is not None:
                assignment.is_primary = data.isPrimary
            if data.end_date_provided:
                assignment.end_date = new_end

        logger.info(f"Updated assignment {assignment_id}")
        return assignment_id

    def delete_assignment(self, assignment_id: str) -> str:
        """Administrative removal. Unconditional: a removed primary simply vacates the slot."""
        with atomic(self.db, "delete assignment"):
            assignment = self.repo.get_assignment(self.db, assignment_id)
            if not assignment:
                raise NotFoundError("Assignment not found")
            self.repo.delete_assignment(self.db, assignment)

        logger.info(f"Deleted assignment {assignment_id}")
        return assignment_id

    def _end_active_primaries(
        self, client_id: str, end_at: datetime, exclude_id: Optional[str] = None
    ) -> None:
        previous = self.repo.find_active_primaries(self.db, client_id, exclude_id=exclude_id)
        for assignment in previous:
            assignment.end_date = end_at
            logger.info(
                f"Ending primary assignment {assignment.id} for client {client_id} at {end_at.isoformat()}"
            )
        if previous:
            # the old primary must be closed before another row can become primary
            self.db.flush()
