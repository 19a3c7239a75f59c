"""EventDonor SQLAlchemy model"""

from sqlalchemy import Column, Integer, Text, Float, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum

from .base import Base


class InvitationStatus(str, enum.Enum):
    """Response state of a donor invited to an event"""
    INVITED = "invited"
    CONFIRMED = "confirmed"
    ATTENDED = "attended"
    DECLINED = "declined"
    NO_RESPONSE = "no_response"


class EventDonor(Base):
    """Invitation of one donor to one event, with the score that suggested it."""
    __tablename__ = "event_donors"
    __table_args__ = (
        UniqueConstraint("event_id", "donor_id", name="uq_event_donors_event_donor"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False)
    donor_id = Column(Integer, ForeignKey("donors.id", ondelete="CASCADE"), nullable=False)
    status = Column(Text, nullable=False, default=InvitationStatus.INVITED.value)
    match_score = Column(Float, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    invited_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    responded_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    event = relationship("Event", back_populates="event_donors")
    donor = relationship("Donor", back_populates="event_donors")
