"""Donor SQLAlchemy model"""

from sqlalchemy import Column, Integer, Text, Float, Boolean, DateTime, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import Base, TagList


class Donor(Base):
    """Donor model representing an individual supporter.

    Donors marked ``exclude`` or ``deceased`` stay in the table for history
    but are never offered to the matching engine.
    """
    __tablename__ = "donors"
    __table_args__ = (
        Index("ix_donors_city", "city"),
        Index("ix_donors_active", "exclude", "deceased"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=True)
    phone = Column(Text, nullable=True)
    organization = Column(Text, nullable=True)
    address_line1 = Column(Text, nullable=False, server_default="")
    address_line2 = Column(Text, nullable=True)
    city = Column(Text, nullable=False, server_default="")
    province = Column(Text, nullable=False, server_default="")
    postal_code = Column(Text, nullable=False, server_default="")
    interests = Column(TagList, nullable=True)  # ordered list of tags
    total_donations = Column(Float, nullable=False, default=0, server_default="0")
    largest_gift = Column(Float, nullable=False, default=0, server_default="0")
    first_gift_date = Column(DateTime(timezone=True), nullable=True)
    last_gift_date = Column(DateTime(timezone=True), nullable=True)
    last_gift_amount = Column(Float, nullable=False, default=0, server_default="0")
    subscription_events_in_person = Column(Boolean, nullable=False, default=False)
    subscription_newsletter = Column(Boolean, nullable=False, default=False)
    exclude = Column(Boolean, nullable=False, default=False)
    deceased = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    event_donors = relationship("EventDonor", back_populates="donor", cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
