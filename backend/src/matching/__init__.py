"""Donor matching module for DonorHub.

Ranks donors for an event using a weighted score over six dimensions:
interest alignment, location, donation history, recency, engagement and
giving capacity. The weight profile depends on the event's focus.
"""

from .ports import (
    DonorRecord,
    EventFocus,
    MatchingCriteria,
    MatchingWeights,
    ScoreBreakdown,
    ScoredDonor,
    WEIGHT_PROFILES,
)
from .scorer import DonorScorer
from .engine import DonorMatcher, find_matches, resolve_weights

__all__ = [
    "DonorRecord",
    "EventFocus",
    "MatchingCriteria",
    "MatchingWeights",
    "ScoreBreakdown",
    "ScoredDonor",
    "WEIGHT_PROFILES",
    "DonorScorer",
    "DonorMatcher",
    "find_matches",
    "resolve_weights",
]
