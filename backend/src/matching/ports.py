"""Value types for donor-to-event matching.

Donors are consumed through the ``DonorRecord`` protocol so the engine scores
ORM rows and plain objects alike.
"""

import enum
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from typing import Any, List, Mapping, Optional, Protocol, Sequence


class EventFocus(str, enum.Enum):
    """What an event optimizes for; selects the weight profile."""
    FUNDRAISING = "fundraising"
    ATTENDEES = "attendees"
    ENGAGEMENT = "engagement"


class DonorRecord(Protocol):
    """Attributes the scorer reads from a donor. All may be ``None``."""
    email: Optional[str]
    organization: Optional[str]
    city: Optional[str]
    interests: Optional[Sequence[str]]
    total_donations: Optional[float]
    largest_gift: Optional[float]
    first_gift_date: Optional[datetime]
    last_gift_date: Optional[datetime]
    subscription_events_in_person: Optional[bool]
    subscription_newsletter: Optional[bool]


@dataclass(frozen=True)
class MatchingWeights:
    """Multipliers applied to the six sub-scores.

    Profiles are designed to sum to 1.0 so the composite stays on the
    sub-score scale, but nothing rescales them.
    """
    interest_match: float
    location_match: float
    donation_history: float
    recency: float
    engagement: float
    capacity: float

    @classmethod
    def keys(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    def merged(self, overrides: Optional[Mapping[str, Any]]) -> "MatchingWeights":
        """Return a copy with recognized keys of ``overrides`` applied.

        Unknown keys and ``None`` values are ignored.
        """
        if not overrides:
            return self
        known = set(self.keys())
        changes = {
            key: float(value)
            for key, value in overrides.items()
            if key in known and value is not None
        }
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {key: getattr(self, key) for key in self.keys()}


WEIGHT_PROFILES = {
    EventFocus.FUNDRAISING: MatchingWeights(
        interest_match=0.25,
        location_match=0.15,
        donation_history=0.30,
        recency=0.10,
        engagement=0.10,
        capacity=0.10,
    ),
    EventFocus.ATTENDEES: MatchingWeights(
        interest_match=0.30,
        location_match=0.25,
        donation_history=0.10,
        recency=0.15,
        engagement=0.15,
        capacity=0.05,
    ),
    EventFocus.ENGAGEMENT: MatchingWeights(
        interest_match=0.20,
        location_match=0.15,
        donation_history=0.15,
        recency=0.20,
        engagement=0.25,
        capacity=0.05,
    ),
}

DEFAULT_TARGET_ATTENDEES = 100


@dataclass
class MatchingCriteria:
    """What the caller is looking for.

    Attributes:
        event_type: Event tags compared against donor interests
        location: City the event takes place in (None = any)
        min_total_donations: Donors below this lifetime total are skipped
        target_attendees: Maximum number of results
        event_focus: Weight profile selector; unknown values use fundraising
    """
    event_type: List[str]
    location: Optional[str] = None
    min_total_donations: float = 0
    target_attendees: int = DEFAULT_TARGET_ATTENDEES
    event_focus: Any = EventFocus.FUNDRAISING


@dataclass
class ScoreBreakdown:
    """Per-dimension scores on a nominal 0-100 scale (unweighted)."""
    interest_score: float
    location_score: float
    donation_score: float
    recency_score: float
    engagement_score: float
    capacity_score: float


@dataclass
class ScoredDonor:
    """A donor with its composite score and the reasons it was picked."""
    donor: Any
    score: float
    breakdown: ScoreBreakdown
    match_reasons: List[str] = field(default_factory=list)
