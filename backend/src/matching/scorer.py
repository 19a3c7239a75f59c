"""Donor match scoring across six weighted dimensions."""

from datetime import datetime, timezone
from typing import List, Optional, Sequence

from .ports import DonorRecord, MatchingWeights, ScoreBreakdown, ScoredDonor

SECONDS_PER_DAY = 60 * 60 * 24

# (upper bound in days, score); first bound the gift age falls under wins
RECENCY_STEPS = (
    (30, 100.0),
    (90, 80.0),
    (180, 60.0),
    (365, 40.0),
    (730, 20.0),
)

REASON_STRONG_INTEREST = "Strong interest alignment"
REASON_SAME_LOCATION = "Same location"
REASON_MAJOR_DONOR = "Major donor"
REASON_RECENT_DONOR = "Recent donor"
REASON_HIGHLY_ENGAGED = "Highly engaged"
REASON_HIGH_CAPACITY = "High capacity"


def _amount(value) -> float:
    return float(value) if value else 0.0


def _as_utc(value) -> datetime:
    # SQLite hands back naive datetimes; stored values are UTC
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class DonorScorer:
    """Calculate per-dimension donor scores and the weighted composite.

    Sub-scores (nominal 0-100, not clamped in the composite):
    - interest = min(100, match_ratio * 70 + interest_depth * 10)
    - location = 100 exact city | 70 substring | 0 no match | 50 no criterion
    - donation = min(100, total/100k*50) + min(100, largest/50k*30) + 20 if dated
    - recency = step function of days since last gift
    - engagement = min(100, 50 events + 30 newsletter + 20 email)
    - capacity = 20 organization + min(50, total/50k*50) + min(30, largest/25k*30)
    - score = sum(sub_score * weight)
    """

    def __init__(self, now: Optional[datetime] = None):
        """Initialize scorer.

        Args:
            now: Reference time for recency (defaults to current UTC time)
        """
        self.now = _as_utc(now) if now is not None else datetime.now(timezone.utc)

    def interest_score(self, donor: DonorRecord, event_types: Sequence[str]) -> float:
        interests = [str(i).lower() for i in (donor.interests or []) if i is not None]
        if not interests:
            return 0.0

        types = [str(t).lower() for t in event_types]
        if not types:
            return 0.0

        matches = [
            t for t in types
            if any(t in interest or interest in t for interest in interests)
        ]
        match_ratio = len(matches) / len(types)
        interest_depth = len([
            interest for interest in interests
            if any(t in interest for t in types)
        ])

        return min(100.0, match_ratio * 70 + interest_depth * 10)

    def location_score(self, donor: DonorRecord, location: Optional[str]) -> float:
        if not location:
            return 50.0
        if not donor.city:
            return 0.0

        city = donor.city.lower()
        wanted = location.lower()
        if city == wanted:
            return 100.0
        if wanted in city or city in wanted:
            return 70.0
        return 0.0

    def donation_score(self, donor: DonorRecord) -> float:
        total = _amount(donor.total_donations)
        largest = _amount(donor.largest_gift)

        total_score = min(100.0, (total / 100000) * 50)
        largest_gift_score = min(100.0, (largest / 50000) * 30)
        consistency_score = 20.0 if donor.first_gift_date and donor.last_gift_date else 0.0

        return total_score + largest_gift_score + consistency_score

    def recency_score(self, donor: DonorRecord) -> float:
        if not donor.last_gift_date:
            return 0.0

        days_since = (self.now - _as_utc(donor.last_gift_date)).total_seconds() / SECONDS_PER_DAY
        for bound, score in RECENCY_STEPS:
            if days_since < bound:
                return score
        return 0.0

    def engagement_score(self, donor: DonorRecord) -> float:
        score = 0.0
        if donor.subscription_events_in_person:
            score += 50
        if donor.subscription_newsletter:
            score += 30
        if donor.email:
            score += 20
        return min(100.0, score)

    def capacity_score(self, donor: DonorRecord) -> float:
        total = _amount(donor.total_donations)
        largest = _amount(donor.largest_gift)

        has_organization = 20.0 if donor.organization else 0.0
        donation_level = min(50.0, (total / 50000) * 50)
        gift_capacity = min(30.0, (largest / 25000) * 30)

        return has_organization + donation_level + gift_capacity

    def breakdown(
        self,
        donor: DonorRecord,
        event_types: Sequence[str],
        location: Optional[str],
    ) -> ScoreBreakdown:
        return ScoreBreakdown(
            interest_score=self.interest_score(donor, event_types),
            location_score=self.location_score(donor, location),
            donation_score=self.donation_score(donor),
            recency_score=self.recency_score(donor),
            engagement_score=self.engagement_score(donor),
            capacity_score=self.capacity_score(donor),
        )

    @staticmethod
    def composite(breakdown: ScoreBreakdown, weights: MatchingWeights) -> float:
        return (
            breakdown.interest_score * weights.interest_match
            + breakdown.location_score * weights.location_match
            + breakdown.donation_score * weights.donation_history
            + breakdown.recency_score * weights.recency
            + breakdown.engagement_score * weights.engagement
            + breakdown.capacity_score * weights.capacity
        )

    @staticmethod
    def match_reasons(breakdown: ScoreBreakdown) -> List[str]:
        """Short labels for every dimension past its threshold, in fixed order."""
        reasons = []
        if breakdown.interest_score > 70:
            reasons.append(REASON_STRONG_INTEREST)
        if breakdown.location_score == 100:
            reasons.append(REASON_SAME_LOCATION)
        if breakdown.donation_score > 80:
            reasons.append(REASON_MAJOR_DONOR)
        if breakdown.recency_score > 80:
            reasons.append(REASON_RECENT_DONOR)
        if breakdown.engagement_score > 70:
            reasons.append(REASON_HIGHLY_ENGAGED)
        if breakdown.capacity_score > 70:
            reasons.append(REASON_HIGH_CAPACITY)
        return reasons

    def score(
        self,
        donor: DonorRecord,
        event_types: Sequence[str],
        location: Optional[str],
        weights: MatchingWeights,
    ) -> ScoredDonor:
        breakdown = self.breakdown(donor, event_types, location)
        return ScoredDonor(
            donor=donor,
            score=self.composite(breakdown, weights),
            breakdown=breakdown,
            match_reasons=self.match_reasons(breakdown),
        )
