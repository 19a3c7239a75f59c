"""Pydantic schemas for donor matching endpoints.

Request and response bodies use camelCase on the wire.
"""

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .ports import DEFAULT_TARGET_ATTENDEES, MatchingCriteria, ScoredDonor


def round_half_up(value: float, places: int = 0) -> float:
    """Round like a spreadsheet does (0.5 away from zero), not banker's rounding."""
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP))


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MatchingWeightsSchema(CamelModel):
    """Per-call weight overrides; omitted keys keep the profile's value."""
    interest_match: Optional[float] = Field(None, ge=0)
    location_match: Optional[float] = Field(None, ge=0)
    donation_history: Optional[float] = Field(None, ge=0)
    recency: Optional[float] = Field(None, ge=0)
    engagement: Optional[float] = Field(None, ge=0)
    capacity: Optional[float] = Field(None, ge=0)


class MatchRequestSchema(CamelModel):
    """Criteria for ranking donors against an event."""
    event_type: List[str] = Field(..., min_length=1, description="Event tags to match against donor interests")
    location: Optional[str] = Field(None, description="Event city")
    min_total_donations: float = Field(0, ge=0)
    target_attendees: int = Field(DEFAULT_TARGET_ATTENDEES, ge=1, le=10000)
    event_focus: str = Field("fundraising", description="fundraising | attendees | engagement")
    weights: Optional[MatchingWeightsSchema] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "eventType": ["arts", "gala"],
                "location": "Toronto",
                "minTotalDonations": 1000,
                "targetAttendees": 50,
                "eventFocus": "fundraising",
            }
        },
    )

    @field_validator("event_type")
    @classmethod
    def strip_event_types(cls, value: List[str]) -> List[str]:
        cleaned = [item.strip() for item in value if item and item.strip()]
        if not cleaned:
            raise ValueError("eventType must contain at least one non-blank tag")
        return cleaned

    @field_validator("location")
    @classmethod
    def blank_location_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    def to_criteria(self) -> MatchingCriteria:
        return MatchingCriteria(
            event_type=self.event_type,
            location=self.location,
            min_total_donations=self.min_total_donations,
            target_attendees=self.target_attendees,
            event_focus=self.event_focus,
        )

    def custom_weights(self) -> Optional[dict]:
        if self.weights is None:
            return None
        return self.weights.model_dump(exclude_none=True)


class DonorSummarySchema(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: Optional[str] = None
    organization: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    interests: List[str] = Field(default_factory=list)
    total_donations: float = 0
    largest_gift: float = 0
    last_gift_date: Optional[datetime] = None

    @field_validator("interests", mode="before")
    @classmethod
    def none_is_empty(cls, value):
        return value or []

    @field_validator("total_donations", "largest_gift", mode="before")
    @classmethod
    def none_is_zero(cls, value):
        return value or 0


class ScoreBreakdownSchema(BaseModel):
    """Sub-scores rounded to whole numbers for display."""
    interest: int
    location: int
    donation: int
    recency: int
    engagement: int
    capacity: int


class MatchedDonorSchema(CamelModel):
    donor: DonorSummarySchema
    score: float
    breakdown: ScoreBreakdownSchema
    match_reasons: List[str]

    @classmethod
    def from_scored(cls, scored: ScoredDonor) -> "MatchedDonorSchema":
        b = scored.breakdown
        return cls(
            donor=DonorSummarySchema.model_validate(scored.donor),
            score=round_half_up(scored.score, 2),
            breakdown=ScoreBreakdownSchema(
                interest=int(round_half_up(b.interest_score)),
                location=int(round_half_up(b.location_score)),
                donation=int(round_half_up(b.donation_score)),
                recency=int(round_half_up(b.recency_score)),
                engagement=int(round_half_up(b.engagement_score)),
                capacity=int(round_half_up(b.capacity_score)),
            ),
            match_reasons=scored.match_reasons,
        )


class MatchResponseSchema(CamelModel):
    matches: List[MatchedDonorSchema]
    criteria: MatchRequestSchema
    total_matches: int
