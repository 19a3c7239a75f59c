"""Audit snapshots: the fields of each record that go into the audit trail.

Snapshots are plain dicts so the audit codec can diff and serialize them.
Only business fields are projected; timestamps managed by the database are left out.
"""

from typing import Any, Dict

from models.event import Event
from models.event_donor import EventDonor


def event_audit_snapshot(event: Event) -> Dict[str, Any]:
    return {
        "id": event.id,
        "name": event.name,
        "status": event.status,
        "date": event.date,
        "location": event.location,
        "targetAmount": event.target_amount,
        "actualAmount": event.actual_amount,
        "expectedAttendees": event.expected_attendees,
        "actualAttendees": event.actual_attendees,
    }


def event_donor_audit_snapshot(event_donor: EventDonor) -> Dict[str, Any]:
    return {
        "eventId": event_donor.event_id,
        "donorId": event_donor.donor_id,
        "status": event_donor.status,
        "matchScore": event_donor.match_score,
        "respondedAt": event_donor.responded_at,
        "notes": event_donor.notes,
    }
