import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_public_id():
    """Generate a unique public ID used as the primary key of every record"""
    return str(uuid.uuid4())


def build_person_name(*parts) -> str:
    """Join the non-blank name parts with single spaces"""
    return " ".join(part.strip() for part in parts if part and part.strip())


class Client(Base):
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=generate_public_id)
    code = Column(String(50), nullable=True, unique=True)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    city = Column(String(255), nullable=True)
    state = Column(String(50), nullable=True)
    # active, on_hold, discharged - clients are never hard-deleted while referenced
    status = Column(String(50), default="active", nullable=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    assignments = relationship("CaregiverAssignment", back_populates="client")
    schedule_rules = relationship("ScheduleRule", back_populates="client")
    visits = relationship("VisitLog", back_populates="client")

    @property
    def full_name(self) -> str:
        return build_person_name(self.first_name, self.last_name)


class Caregiver(Base):
    __tablename__ = "caregivers"

    id = Column(String(36), primary_key=True, default=generate_public_id)
    employee_code = Column(String(50), nullable=True, unique=True)
    first_name = Column(String(255), nullable=False)
    middle_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    city = Column(String(255), nullable=True)
    state = Column(String(50), nullable=True)
    status = Column(String(50), default="active", nullable=False)  # active, inactive

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    assignments = relationship("CaregiverAssignment", back_populates="caregiver")
    schedule_rules = relationship("ScheduleRule", back_populates="caregiver")
    visits = relationship("VisitLog", back_populates="caregiver")

    @property
    def full_name(self) -> str:
        return build_person_name(self.first_name, self.middle_name, self.last_name)


class CaregiverAssignment(Base):
    """Coverage period of one caregiver for one client.

    A client has at most one active primary assignment (is_primary and no
    end_date). The service layer keeps this true transactionally; the partial
    unique index below rejects any writer that gets past it.
    """

    __tablename__ = "caregiver_assignments"
    __table_args__ = (
        Index(
            "uq_caregiver_assignments_active_primary",
            "client_id",
            unique=True,
            postgresql_where=text("is_primary AND end_date IS NULL"),
            sqlite_where=text("is_primary = 1 AND end_date IS NULL"),
        ),
    )

    id = Column(String(36), primary_key=True, default=generate_public_id)
    client_id = Column(String(36), ForeignKey("clients.id"), nullable=False, index=True)
    caregiver_id = Column(String(36), ForeignKey("caregivers.id"), nullable=False, index=True)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=True)  # null while the assignment is open
    is_primary = Column(Boolean, default=False, nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    client = relationship("Client", back_populates="assignments")
    caregiver = relationship("Caregiver", back_populates="assignments")

    @property
    def is_active_primary(self) -> bool:
        return bool(self.is_primary) and self.end_date is None


class ScheduleRule(Base):
    """Recurring weekly commitment: one slot on one weekday"""

    __tablename__ = "schedule_rules"
    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_schedule_rules_day_of_week"),
        CheckConstraint(
            "start_time_minutes >= 0 AND end_time_minutes < 1440 "
            "AND start_time_minutes < end_time_minutes",
            name="ck_schedule_rules_time_range",
        ),
        CheckConstraint(
            "effective_end_date IS NULL OR effective_end_date >= effective_start_date",
            name="ck_schedule_rules_effective_range",
        ),
        Index("ix_schedule_rules_day_lookup", "day_of_week", "effective_start_date"),
    )

    id = Column(String(36), primary_key=True, default=generate_public_id)
    client_id = Column(String(36), ForeignKey("clients.id"), nullable=False, index=True)
    caregiver_id = Column(String(36), ForeignKey("caregivers.id"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)  # 0 = Sunday
    start_time_minutes = Column(Integer, nullable=False)  # minutes after midnight
    end_time_minutes = Column(Integer, nullable=False)
    effective_start_date = Column(Date, nullable=False)
    effective_end_date = Column(Date, nullable=True)
    service_code = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())

    client = relationship("Client", back_populates="schedule_rules")
    caregiver = relationship("Caregiver", back_populates="schedule_rules")
