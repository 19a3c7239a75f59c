"""SQLAlchemy Models for DonorHub"""

from .base import Base, TagList
from .user import User
from .donor import Donor
from .event import Event, EventStatus
from .event_donor import EventDonor, InvitationStatus
from .audit_log import AuditLog

__all__ = [
    "Base",
    "TagList",
    "User",
    "Donor",
    "Event",
    "EventStatus",
    "EventDonor",
    "InvitationStatus",
    "AuditLog",
]
