"""Donor matcher: ranks a donor pool against event criteria."""

from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional

from .ports import (
    EventFocus,
    MatchingCriteria,
    MatchingWeights,
    ScoredDonor,
    WEIGHT_PROFILES,
)
from .scorer import DonorScorer


def resolve_weights(
    event_focus: Any,
    custom_weights: Optional[Mapping[str, Any]] = None,
) -> MatchingWeights:
    """Pick the profile for ``event_focus`` and overlay ``custom_weights``.

    Unrecognized focus values fall back to the fundraising profile.
    """
    try:
        focus = EventFocus(event_focus)
    except ValueError:
        focus = EventFocus.FUNDRAISING
    return WEIGHT_PROFILES[focus].merged(custom_weights)


class DonorMatcher:
    """Score and rank donors for an event.

    Pipeline:
    1. Resolve weights from the event focus plus per-call overrides
    2. Drop donors below the minimum lifetime donation total
    3. Score each remaining donor on six dimensions
    4. Rank by composite score DESC (ties keep input order)
    5. Cap at target_attendees

    The matcher does no I/O. Callers pass in a pool that already excludes
    donors flagged ``exclude`` or ``deceased``.
    """

    def __init__(self, now: Optional[datetime] = None):
        """Initialize matcher.

        Args:
            now: Reference time for recency scoring (defaults to now, UTC)
        """
        self.scorer = DonorScorer(now=now)

    def find_matches(
        self,
        criteria: MatchingCriteria,
        donor_pool: Iterable[Any],
        custom_weights: Optional[Mapping[str, Any]] = None,
    ) -> List[ScoredDonor]:
        """Return the best-matching donors, highest score first.

        Args:
            criteria: Event matching criteria
            donor_pool: Donors to consider
            custom_weights: Optional per-dimension weight overrides

        Returns:
            At most ``criteria.target_attendees`` scored donors
        """
        weights = resolve_weights(criteria.event_focus, custom_weights)
        min_total = criteria.min_total_donations or 0

        eligible = [
            donor for donor in donor_pool
            if (donor.total_donations or 0) >= min_total
        ]

        scored = [
            self.scorer.score(donor, criteria.event_type, criteria.location, weights)
            for donor in eligible
        ]
        scored.sort(key=lambda s: s.score, reverse=True)

        return scored[:max(criteria.target_attendees, 0)]


def find_matches(
    criteria: MatchingCriteria,
    donor_pool: Iterable[Any],
    custom_weights: Optional[Mapping[str, Any]] = None,
    now: Optional[datetime] = None,
) -> List[ScoredDonor]:
    """Convenience wrapper around ``DonorMatcher(now).find_matches``."""
    return DonorMatcher(now=now).find_matches(criteria, donor_pool, custom_weights)
