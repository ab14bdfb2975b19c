"""Assignment router - FastAPI endpoints for caregiver assignments"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from .schemas import (
    AssignmentCreate,
    AssignmentIdResponse,
    AssignmentListResponse,
    AssignmentPatch,
)
from .service import AssignmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assignments", tags=["Assignments"])


def get_assignment_service(db: Session = Depends(get_db)) -> AssignmentService:
    """Dependency injection for AssignmentService"""
    return AssignmentService(db)


@router.get("", response_model=AssignmentListResponse)
async def get_assignments(
    clientId: Optional[str] = Query(None),
    service: AssignmentService = Depends(get_assignment_service),
):
    """Get all assignments of a client, open ones last"""
    return AssignmentListResponse(assignments=service.list_assignments(clientId))


@router.post("", response_model=AssignmentIdResponse)
async def create_assignment(
    data: AssignmentCreate,
    service: AssignmentService = Depends(get_assignment_service),
):
    """Create an assignment; a primary one ends the client's current primary"""
    return AssignmentIdResponse(id=service.create_assignment(data))


@router.patch("/{assignment_id}", response_model=AssignmentIdResponse)
async def patch_assignment(
    assignment_id: str,
    data: AssignmentPatch,
    service: AssignmentService = Depends(get_assignment_service),
):
    """Update endDate and/or isPrimary of an assignment"""
    return AssignmentIdResponse(id=service.patch_assignment(assignment_id, data))


@router.delete("/{assignment_id}", response_model=AssignmentIdResponse)
async def delete_assignment(
    assignment_id: str,
    service: AssignmentService = Depends(get_assignment_service),
):
    """Remove an assignment"""
    return AssignmentIdResponse(id=service.delete_assignment(assignment_id))
