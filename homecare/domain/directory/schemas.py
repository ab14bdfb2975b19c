"""Directory schemas - Pydantic models for client and caregiver listings"""

from typing import Optional

from pydantic import BaseModel


class PrimaryCaregiver(BaseModel):
    assignmentId: str
    caregiverId: str
    caregiverName: str


class ClientSummary(BaseModel):
    id: str
    firstName: str
    lastName: str
    name: str
    city: Optional[str] = None
    state: Optional[str] = None
    status: str
    primaryCaregiver: Optional[PrimaryCaregiver] = None


class ClientListResponse(BaseModel):
    clients: list[ClientSummary]


class CaregiverSummary(BaseModel):
    id: str
    firstName: str
    middleName: Optional[str] = None
    lastName: str
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    status: str


class CaregiverListResponse(BaseModel):
    caregivers: list[CaregiverSummary]
