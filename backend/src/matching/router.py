"""Donor matching API endpoints."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from .schemas import MatchRequestSchema, MatchResponseSchema, MatchedDonorSchema
from .service import DonorMatchingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/donors", tags=["matching"])


@router.post(
    "/match",
    response_model=MatchResponseSchema,
    summary="Find matching donors",
    description="Score active donors against event criteria and return the top matches.",
)
def match_donors(
    request: MatchRequestSchema,
    db: Session = Depends(get_db),
) -> MatchResponseSchema:
    """Rank active donors for an event.

    Args:
        request: Event criteria plus optional weight overrides
        db: Database session

    Returns:
        MatchResponseSchema: Ranked matches, echoed criteria and result count
    """
    service = DonorMatchingService(db)
    matches = service.find_matches(request.to_criteria(), request.custom_weights())

    return MatchResponseSchema(
        matches=[MatchedDonorSchema.from_scored(m) for m in matches],
        criteria=request,
        total_matches=len(matches),
    )
