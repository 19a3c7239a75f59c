"""Event SQLAlchemy model"""

from sqlalchemy import Column, Integer, Text, Float, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum

from .base import Base, TagList


class EventStatus(str, enum.Enum):
    """Lifecycle states of a donor event"""
    DRAFT = "draft"
    PLANNED = "planned"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Event(Base):
    """Event model representing a fundraiser, gala or engagement activity.

    ``event_type`` holds the free-text tags the matching engine compares
    against donor interests.
    """
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    date = Column(DateTime(timezone=True), nullable=False)
    location = Column(Text, nullable=False)
    event_type = Column(TagList, nullable=False)
    target_amount = Column(Float, nullable=False, default=0)
    expected_attendees = Column(Integer, nullable=False, default=0)
    status = Column(Text, nullable=False, default=EventStatus.PLANNED.value)
    actual_amount = Column(Float, nullable=False, default=0)
    actual_attendees = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    event_donors = relationship("EventDonor", back_populates="event", cascade="all, delete-orphan")
