"""Scheduling router - FastAPI endpoints for schedule rules, visits and day layout"""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...shared.validators import resolve_target_day
from .schemas import (
    DayLayoutResponse,
    DeleteRuleResponse,
    DeleteVisitResponse,
    ScheduleEventsResponse,
    ScheduledVisitsResponse,
    ScheduleRuleCreate,
    ScheduleRuleCreatedResponse,
)
from .service import ScheduleService

logger = logging.getLogger(__name__)

rules_router = APIRouter(prefix="/schedule-rules", tags=["Schedule Rules"])
visits_router = APIRouter(prefix="/schedule", tags=["Schedule"])


def get_schedule_service(db: Session = Depends(get_db)) -> ScheduleService:
    """Dependency injection for ScheduleService"""
    return ScheduleService(db)


@rules_router.get("", response_model=ScheduleEventsResponse)
async def get_rule_day_view(
    weekStart: Optional[str] = Query(None),
    dayIndex: Optional[int] = Query(None),
    clientId: Optional[str] = Query(None),
    caregiverId: Optional[str] = Query(None),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Occurrences of the weekly rules on weekStart's Monday + dayIndex"""
    target = resolve_target_day(weekStart, dayIndex)
    return ScheduleEventsResponse(events=service.get_rule_events(target, clientId, caregiverId))


@rules_router.post("", response_model=ScheduleRuleCreatedResponse, status_code=201)
async def create_schedule_rule(
    data: ScheduleRuleCreate,
    service: ScheduleService = Depends(get_schedule_service),
):
    """Create a weekly schedule rule"""
    return ScheduleRuleCreatedResponse(rule=service.create_rule(data))


@rules_router.delete("/{rule_id}", response_model=DeleteRuleResponse)
async def delete_schedule_rule(
    rule_id: str,
    service: ScheduleService = Depends(get_schedule_service),
):
    service.delete_rule(rule_id)
    return DeleteRuleResponse(success=True)


@visits_router.get("", response_model=ScheduledVisitsResponse)
async def get_visit_day_view(
    weekStart: Optional[str] = Query(None),
    dayIndex: Optional[int] = Query(None),
    clientId: Optional[str] = Query(None),
    caregiverId: Optional[str] = Query(None),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Scheduled visits overlapping the viewed day"""
    target = resolve_target_day(weekStart, dayIndex)
    return ScheduledVisitsResponse(visits=service.get_visit_events(target, clientId, caregiverId))


@visits_router.get("/layout", response_model=DayLayoutResponse)
async def get_day_layout(
    weekStart: Optional[str] = Query(None),
    dayIndex: Optional[int] = Query(None),
    source: Literal["rules", "visits"] = Query("rules"),
    clientId: Optional[str] = Query(None),
    caregiverId: Optional[str] = Query(None),
    service: ScheduleService = Depends(get_schedule_service),
):
    """
    Day view positioned into caregiver columns and lanes.

    Each event carries top/height as percentages of the configured window
    plus its lane index and the column's lane count.
    """
    target = resolve_target_day(weekStart, dayIndex)
    return service.get_day_layout(target, source, clientId, caregiverId)


@visits_router.delete("/{visit_id}", response_model=DeleteVisitResponse)
async def delete_scheduled_visit(
    visit_id: str,
    service: ScheduleService = Depends(get_schedule_service),
):
    return DeleteVisitResponse(id=service.delete_visit(visit_id))
