"""Scheduling domain schemas - Pydantic models for schedule rules, visits and day views"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel


class ScheduleRuleCreate(BaseModel):
    """Schema for creating a weekly schedule rule.

    Only shapes are decoded here; ranges and clock formats are validated by
    the service so each failure names its field.
    """

    clientId: Optional[str] = None
    caregiverId: Optional[str] = None
    dayOfWeek: Optional[int] = None  # 0 = Sunday
    startTime: Optional[str] = None  # HH:MM
    endTime: Optional[str] = None  # HH:MM
    effectiveStartDate: Optional[str] = None
    effectiveEndDate: Optional[str] = None
    serviceCode: Optional[str] = None
    notes: Optional[str] = None


class ScheduleRuleResponse(BaseModel):
    id: str
    clientId: str
    caregiverId: str
    dayOfWeek: int
    startTimeMinutes: int
    endTimeMinutes: int
    startTime: str
    endTime: str
    effectiveStartDate: date
    effectiveEndDate: Optional[date] = None
    serviceCode: Optional[str] = None
    notes: Optional[str] = None


class ScheduleRuleCreatedResponse(BaseModel):
    rule: ScheduleRuleResponse


class ScheduleEvent(BaseModel):
    """One event on a day view, either a rule occurrence or a scheduled visit"""

    id: str
    clientId: str
    clientName: str
    caregiverId: str
    caregiverName: str
    scheduledStart: datetime
    scheduledEnd: datetime
    serviceCode: Optional[str] = None
    notes: Optional[str] = None


class ScheduledVisit(ScheduleEvent):
    actualStart: Optional[datetime] = None
    actualEnd: Optional[datetime] = None
    hasIncident: bool = False


class ScheduleEventsResponse(BaseModel):
    events: list[ScheduleEvent]


class ScheduledVisitsResponse(BaseModel):
    visits: list[ScheduledVisit]


class PositionedEvent(BaseModel):
    event: ScheduleEvent
    top: float  # percent of the window
    height: float  # percent, at least the minimum display duration
    lane: int
    laneCount: int
    startOffset: int  # minutes after window start
    endOffset: int
    durationMinutes: int  # true clamped duration


class LayoutColumn(BaseModel):
    caregiverId: str
    caregiverName: str
    laneCount: int  # 0 for an empty column
    events: list[PositionedEvent]


class DayLayoutResponse(BaseModel):
    day: date
    source: str
    windowStart: datetime
    windowEnd: datetime
    columns: list[LayoutColumn]


class DeleteRuleResponse(BaseModel):
    success: bool


class DeleteVisitResponse(BaseModel):
    id: str
