"""Donor matching service: loads the active donor pool and ranks it."""

import logging
import time
from typing import Any, List, Mapping, Optional

from sqlalchemy.orm import Session

from models.donor import Donor
from observability.metrics import (
    donor_match_duration_seconds,
    donor_match_requests_total,
    donor_match_results,
)
from .engine import DonorMatcher
from .ports import EventFocus, MatchingCriteria, ScoredDonor

logger = logging.getLogger(__name__)


class DonorMatchingService:
    """Run the donor matcher over every donor still eligible for outreach."""

    def __init__(self, db: Session, matcher: Optional[DonorMatcher] = None):
        """Initialize matching service.

        Args:
            db: Database session
            matcher: Matcher to use (a fresh one per call when omitted)
        """
        self.db = db
        self.matcher = matcher

    def load_active_donors(self) -> List[Donor]:
        """Donors that may be contacted: not excluded and not deceased."""
        return (
            self.db.query(Donor)
            .filter(Donor.exclude.is_(False), Donor.deceased.is_(False))
            .order_by(Donor.id)
            .all()
        )

    def find_matches(
        self,
        criteria: MatchingCriteria,
        custom_weights: Optional[Mapping[str, Any]] = None,
    ) -> List[ScoredDonor]:
        """Score the active donor pool against ``criteria``.

        Args:
            criteria: Event matching criteria
            custom_weights: Optional per-dimension weight overrides

        Returns:
            Ranked, capped list of scored donors
        """
        focus = criteria.event_focus
        focus_label = focus.value if isinstance(focus, EventFocus) else str(focus)
        donor_match_requests_total.labels(event_focus=focus_label).inc()

        start = time.perf_counter()
        donors = self.load_active_donors()
        matcher = self.matcher or DonorMatcher()
        matches = matcher.find_matches(criteria, donors, custom_weights)
        duration = time.perf_counter() - start

        donor_match_duration_seconds.observe(duration)
        donor_match_results.observe(len(matches))
        logger.info(
            f"Matched {len(matches)} of {len(donors)} active donors",
            extra={"event_focus": focus_label, "duration_ms": round(duration * 1000, 2)},
        )
        return matches
