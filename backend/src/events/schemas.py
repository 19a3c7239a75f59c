"""Pydantic schemas for event and event invitation endpoints."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from models.event import EventStatus
from models.event_donor import InvitationStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Events
# =============================================================================

class EventCreateRequest(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, use_enum_values=True)

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    date: datetime
    location: str = Field(..., min_length=1)
    event_type: List[str] = Field(..., min_length=1)
    target_amount: float = Field(0, ge=0)
    expected_attendees: int = Field(0, ge=0)
    status: EventStatus = EventStatus.PLANNED.value
    notes: Optional[str] = None


class EventUpdateRequest(CamelModel):
    """Partial update. Only the fields present in the request body are applied."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, use_enum_values=True)

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    date: Optional[datetime] = None
    location: Optional[str] = Field(None, min_length=1)
    event_type: Optional[List[str]] = Field(None, min_length=1)
    target_amount: Optional[float] = Field(None, ge=0)
    expected_attendees: Optional[int] = Field(None, ge=0)
    status: Optional[EventStatus] = None
    actual_amount: Optional[float] = Field(None, ge=0)
    actual_attendees: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None

    @field_validator(
        "name", "date", "location", "event_type", "target_amount", "expected_attendees",
        "status", "actual_amount", "actual_attendees",
    )
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class EventResponse(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    date: datetime
    location: str
    event_type: List[str]
    target_amount: float
    expected_attendees: int
    status: str
    actual_amount: float
    actual_attendees: int
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class EventDeletedResponse(CamelModel):
    message: str


# =============================================================================
# Guest lists
# =============================================================================

class InviteDonorsRequest(CamelModel):
    """Donors to add to an event's guest list, usually taken from a match result."""
    donor_ids: List[int] = Field(default_factory=list)
    match_scores: Dict[int, float] = Field(default_factory=dict)


class InviteDonorsResponse(CamelModel):
    message: str
    count: int


class UpdateInvitationRequest(CamelModel):
    status: InvitationStatus
    notes: Optional[str] = None


class InvitationResponse(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    event_id: int
    donor_id: int
    status: str
    match_score: float
    notes: Optional[str] = None
    invited_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None


class RemoveInvitationResponse(CamelModel):
    message: str
    donor_id: int
    event_id: int
