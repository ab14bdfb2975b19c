"""Directory router - client and caregiver listings for the scheduling screens"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db, storage_read
from .repository import DirectoryRepository
from .schemas import (
    CaregiverListResponse,
    CaregiverSummary,
    ClientListResponse,
    ClientSummary,
    PrimaryCaregiver,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Directory"])


@router.get("/clients", response_model=ClientListResponse)
async def get_clients(
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """List clients with their current primary caregiver"""
    with storage_read(db, "clients"):
        clients = DirectoryRepository.get_clients(db, status, search)
        primaries = {
            a.client_id: a
            for a in DirectoryRepository.get_active_primaries(db, [c.id for c in clients])
        }

        summaries = []
        for client in clients:
            primary = primaries.get(client.id)
            summaries.append(
                ClientSummary(
                    id=client.id,
                    firstName=client.first_name,
                    lastName=client.last_name,
                    name=client.full_name,
                    city=client.city,
                    state=client.state,
                    status=client.status,
                    primaryCaregiver=PrimaryCaregiver(
                        assignmentId=primary.id,
                        caregiverId=primary.caregiver_id,
                        caregiverName=primary.caregiver.full_name if primary.caregiver else "Unknown",
                    )
                    if primary
                    else None,
                )
            )

    return ClientListResponse(clients=summaries)


@router.get("/caregivers", response_model=CaregiverListResponse)
async def get_caregivers(
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    with storage_read(db, "caregivers"):
        caregivers = DirectoryRepository.get_caregivers(db, status, search)

    return CaregiverListResponse(
        caregivers=[
            CaregiverSummary(
                id=c.id,
                firstName=c.first_name,
                middleName=c.middle_name,
                lastName=c.last_name,
                name=c.full_name,
                phone=c.phone,
                email=c.email,
                city=c.city,
                state=c.state,
                status=c.status,
            )
            for c in caregivers
        ]
    )
