"""
Visit log model - planned and performed caregiver visits
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base
from .models import generate_public_id


class VisitLog(Base):
    """A planned visit (scheduled_*) and/or an actually performed one (actual_*).

    Only rows with both scheduled bounds take part in day view queries.
    """

    __tablename__ = "visit_logs"
    __table_args__ = (Index("ix_visit_logs_scheduled_window", "scheduled_start", "scheduled_end"),)

    id = Column(String(36), primary_key=True, default=generate_public_id)
    client_id = Column(String(36), ForeignKey("clients.id"), nullable=False, index=True)
    caregiver_id = Column(String(36), ForeignKey("caregivers.id"), nullable=False, index=True)

    # Planned window
    scheduled_start = Column(DateTime, nullable=True)
    scheduled_end = Column(DateTime, nullable=True)

    # Clock-in / clock-out
    actual_start = Column(DateTime, nullable=True)
    actual_end = Column(DateTime, nullable=True)

    service_code = Column(String(50), nullable=True)
    has_incident = Column(Boolean, default=False, nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    client = relationship("Client", back_populates="visits")
    caregiver = relationship("Caregiver", back_populates="visits")
