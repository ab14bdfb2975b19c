"""Assignment domain schemas - Pydantic models for request decoding"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, StrictBool


class AssignmentCreate(BaseModel):
    """Schema for creating a caregiver assignment"""

    clientId: Optional[str] = None
    caregiverId: Optional[str] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    isPrimary: Optional[StrictBool] = False
    notes: Optional[str] = None


class AssignmentPatch(BaseModel):
    """Schema for patching an assignment.

    isPrimary must be a JSON boolean. An explicit `"endDate": null` re-opens
    the assignment; leaving the key out keeps the current end date. Use
    `end_date_provided` to tell them apart.
    """

    endDate: Optional[str] = None
    isPrimary: Optional[StrictBool] = None

    @property
    def end_date_provided(self) -> bool:
        return "endDate" in self.model_fields_set


class AssignmentIdResponse(BaseModel):
    id: str


class AssignmentResponse(BaseModel):
    """Schema for an assignment row in a client's assignment list"""

    id: str
    caregiverId: str
    caregiverName: str
    startDate: datetime
    endDate: Optional[datetime] = None
    isPrimary: bool
    notes: Optional[str] = None


class AssignmentListResponse(BaseModel):
    assignments: list[AssignmentResponse]
