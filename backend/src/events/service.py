"""Event and guest-list services with audit trail entries.

Every mutation is flushed first and then recorded in the audit trail on the
same session; the caller commits both together.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.orm import Session

from audit.schemas import AuditAction
from audit.service import AuditTrailService
from audit.snapshots import event_audit_snapshot, event_donor_audit_snapshot
from models.event import Event
from models.event_donor import EventDonor, InvitationStatus

logger = logging.getLogger(__name__)

EVENT_ENTITY_TYPE = "event"
INVITATION_ENTITY_TYPE = "event_donor"


class EventNotFoundError(LookupError):
    pass


class InvitationNotFoundError(LookupError):
    pass


class _AuditedService:
    """Shared request context: the acting user and client IP for audit entries."""

    def __init__(self, db: Session, actor_id: Optional[int] = None, ip_address: Optional[str] = None):
        self.db = db
        self.actor_id = actor_id
        self.ip_address = ip_address
        self.audit = AuditTrailService(db)

    def _actor_metadata(self) -> Dict[str, Any]:
        return {"actor": {"id": self.actor_id}} if self.actor_id is not None else {}

    def _log(self, action: AuditAction, entity_type: str, entity_id: int, **payload) -> None:
        self.audit.log(
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            user_id=self.actor_id,
            ip_address=self.ip_address,
            **payload,
        )

    def _get_event(self, event_id: int) -> Event:
        event = self.db.get(Event, event_id)
        if event is None:
            raise EventNotFoundError(f"Event {event_id} not found")
        return event


class EventService(_AuditedService):
    """Create, update and delete events."""

    def list_events(self) -> List[Event]:
        return self.db.query(Event).order_by(Event.date, Event.id).all()

    def get_event(self, event_id: int) -> Event:
        return self._get_event(event_id)

    def create(self, values: Mapping[str, Any]) -> Event:
        event = Event(**values)
        self.db.add(event)
        self.db.flush()
        self.db.refresh(event)

        self._log(
            AuditAction.CREATE,
            EVENT_ENTITY_TYPE,
            event.id,
            after=event_audit_snapshot(event),
            metadata={**self._actor_metadata(), "status": event.status},
        )
        logger.info(f"Created event {event.id}")
        return event

    def update(self, event_id: int, values: Mapping[str, Any], updated_fields: List[str]) -> Event:
        """Apply ``values`` to the event.

        Args:
            event_id: Event to update
            values: Column values to set
            updated_fields: Field names as the client sent them, recorded in metadata
        """
        event = self._get_event(event_id)
        before = event_audit_snapshot(event)

        for key, value in values.items():
            setattr(event, key, value)
        self.db.flush()
        # Reload so both snapshots carry values in the database's representation
        self.db.refresh(event)

        self._log(
            AuditAction.UPDATE,
            EVENT_ENTITY_TYPE,
            event_id,
            before=before,
            after=event_audit_snapshot(event),
            metadata={**self._actor_metadata(), "updatedFields": list(updated_fields)},
        )
        return event

    def delete(self, event_id: int) -> None:
        """Delete the event and its guest list. Deleting a missing event is a no-op that is still audited."""
        event = self.db.get(Event, event_id)
        before = event_audit_snapshot(event) if event is not None else None
        if event is not None:
            self.db.delete(event)
            self.db.flush()

        self._log(
            AuditAction.DELETE,
            EVENT_ENTITY_TYPE,
            event_id,
            before=before,
            metadata=self._actor_metadata(),
        )


class InvitationService(_AuditedService):
    """Manage which donors are invited to an event."""

    def _get_invitation(self, event_id: int, donor_id: int) -> Optional[EventDonor]:
        return (
            self.db.query(EventDonor)
            .filter(EventDonor.event_id == event_id, EventDonor.donor_id == donor_id)
            .first()
        )

    def invite(self, event_id: int, donor_ids: List[int], match_scores: Dict[int, float]) -> List[EventDonor]:
        """Invite donors not already on the guest list.

        Returns:
            The newly created invitations (empty if all were already invited)
        """
        self._get_event(event_id)
        if not donor_ids:
            return []

        existing = {
            donor_id for (donor_id,) in self.db.query(EventDonor.donor_id)
            .filter(EventDonor.event_id == event_id, EventDonor.donor_id.in_(donor_ids))
        }
        new_ids = [donor_id for donor_id in dict.fromkeys(donor_ids) if donor_id not in existing]
        if not new_ids:
            return []

        invitations = [
            EventDonor(
                event_id=event_id,
                donor_id=donor_id,
                status=InvitationStatus.INVITED.value,
                match_score=match_scores.get(donor_id) or 0,
            )
            for donor_id in new_ids
        ]
        self.db.add_all(invitations)
        self.db.flush()

        self._log(
            AuditAction.CREATE,
            INVITATION_ENTITY_TYPE,
            event_id,
            after={"added": [event_donor_audit_snapshot(inv) for inv in invitations]},
            metadata={**self._actor_metadata(), "source": "bulk_invite"},
        )
        logger.info(f"Invited {len(invitations)} donors to event {event_id}")
        return invitations

    def update_status(
        self,
        event_id: int,
        donor_id: int,
        status: InvitationStatus,
        notes: Optional[str] = None,
    ) -> EventDonor:
        invitation = self._get_invitation(event_id, donor_id)
        if invitation is None:
            raise InvitationNotFoundError(f"Donor {donor_id} is not invited to event {event_id}")

        before = event_donor_audit_snapshot(invitation)
        invitation.status = status.value
        if notes:
            invitation.notes = notes
        invitation.responded_at = datetime.now(timezone.utc)
        self.db.flush()

        self._log(
            AuditAction.UPDATE,
            INVITATION_ENTITY_TYPE,
            event_id,
            before=before,
            after=event_donor_audit_snapshot(invitation),
            metadata={**self._actor_metadata(), "donorId": donor_id},
        )
        return invitation

    def remove(self, event_id: int, donor_id: int) -> None:
        invitation = self._get_invitation(event_id, donor_id)
        before = event_donor_audit_snapshot(invitation) if invitation is not None else None
        if invitation is not None:
            self.db.delete(invitation)
            self.db.flush()

        self._log(
            AuditAction.DELETE,
            INVITATION_ENTITY_TYPE,
            event_id,
            before=before,
            metadata={**self._actor_metadata(), "donorId": donor_id},
        )
