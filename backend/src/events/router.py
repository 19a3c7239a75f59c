"""Event and guest-list API endpoints.

Mutations are recorded in the audit trail. The acting user is identified by
the optional ``X-Actor-Id`` header set by the fronting gateway.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from audit.request_ip import extract_request_ip
from database import get_db
from .schemas import (
    EventCreateRequest,
    EventDeletedResponse,
    EventResponse,
    EventUpdateRequest,
    InvitationResponse,
    InviteDonorsRequest,
    InviteDonorsResponse,
    RemoveInvitationResponse,
    UpdateInvitationRequest,
)
from .service import EventNotFoundError, EventService, InvitationNotFoundError, InvitationService

router = APIRouter(prefix="/api/v1/events", tags=["events"])


def get_event_service(
    request: Request,
    db: Session = Depends(get_db),
    actor_id: Optional[int] = Header(None, alias="X-Actor-Id"),
) -> EventService:
    return EventService(db, actor_id=actor_id, ip_address=extract_request_ip(request))


def get_invitation_service(
    request: Request,
    db: Session = Depends(get_db),
    actor_id: Optional[int] = Header(None, alias="X-Actor-Id"),
) -> InvitationService:
    return InvitationService(db, actor_id=actor_id, ip_address=extract_request_ip(request))


# =============================================================================
# Events
# =============================================================================

@router.get("", response_model=List[EventResponse])
def list_events(service: EventService = Depends(get_event_service)) -> List[EventResponse]:
    """List events, soonest first."""
    return [EventResponse.model_validate(event) for event in service.list_events()]


@router.get("/{event_id}", response_model=EventResponse)
def get_event(event_id: int, service: EventService = Depends(get_event_service)) -> EventResponse:
    try:
        event = service.get_event(event_id)
    except EventNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return EventResponse.model_validate(event)


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
def create_event(
    body: EventCreateRequest,
    service: EventService = Depends(get_event_service),
) -> EventResponse:
    event = service.create(body.model_dump())
    service.db.commit()
    service.db.refresh(event)
    return EventResponse.model_validate(event)


@router.put("/{event_id}", response_model=EventResponse)
def update_event(
    event_id: int,
    body: EventUpdateRequest,
    service: EventService = Depends(get_event_service),
) -> EventResponse:
    """Apply a partial update; only fields present in the body change."""
    updated_fields = list(body.model_dump(exclude_unset=True, by_alias=True))
    try:
        event = service.update(event_id, body.model_dump(exclude_unset=True), updated_fields)
    except EventNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    service.db.commit()
    service.db.refresh(event)
    return EventResponse.model_validate(event)


@router.delete("/{event_id}", response_model=EventDeletedResponse)
def delete_event(event_id: int, service: EventService = Depends(get_event_service)) -> EventDeletedResponse:
    """Delete an event together with its guest list."""
    service.delete(event_id)
    service.db.commit()
    return EventDeletedResponse(message="Event deleted successfully")


# =============================================================================
# Guest lists
# =============================================================================

@router.post("/{event_id}/donors", response_model=InviteDonorsResponse, status_code=status.HTTP_201_CREATED)
def invite_donors(
    event_id: int,
    body: InviteDonorsRequest,
    service: InvitationService = Depends(get_invitation_service),
) -> InviteDonorsResponse:
    """Add donors to an event's guest list, skipping those already invited."""
    if not body.donor_ids:
        return InviteDonorsResponse(message="No donors provided", count=0)

    try:
        invitations = service.invite(event_id, body.donor_ids, body.match_scores)
    except EventNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    if not invitations:
        return InviteDonorsResponse(message="All donors are already invited to this event", count=0)

    service.db.commit()
    return InviteDonorsResponse(message=f"Added {len(invitations)} donors to event", count=len(invitations))


@router.put("/{event_id}/donors/{donor_id}", response_model=InvitationResponse)
def update_invitation(
    event_id: int,
    donor_id: int,
    body: UpdateInvitationRequest,
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationResponse:
    """Record a donor's response to an invitation."""
    try:
        invitation = service.update_status(event_id, donor_id, body.status, body.notes)
    except InvitationNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    service.db.commit()
    service.db.refresh(invitation)
    return InvitationResponse.model_validate(invitation)


@router.delete("/{event_id}/donors/{donor_id}", response_model=RemoveInvitationResponse)
def remove_invitation(
    event_id: int,
    donor_id: int,
    service: InvitationService = Depends(get_invitation_service),
) -> RemoveInvitationResponse:
    """Remove a donor from an event's guest list."""
    service.remove(event_id, donor_id)
    service.db.commit()
    return RemoveInvitationResponse(message="Donor removed from event", donor_id=donor_id, event_id=event_id)
