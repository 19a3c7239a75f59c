"""Audit trail service.

This service is the single entry point for writing and reading the audit
trail. Writes are best-effort: a failure to persist an audit entry is logged
and swallowed so it never aborts the business operation being audited.

Audit actions:
- create, update, delete: entity mutations
- login, logout: session events
- baseline: initial snapshot of pre-existing records
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.orm import Query, Session

from models.audit_log import AuditLog
from observability.metrics import (
    audit_entries_written_total,
    audit_payload_decode_failures_total,
    audit_write_failures_total,
)
from .codec import AuditCodec, AuditPayloadError, default_codec
from .schemas import AuditAction

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 25
MAX_LIMIT = 200


@dataclass
class AuditLogFilters:
    """Filters shared by list and export. ``None`` means no filter.

    ``start_date`` and ``end_date`` are inclusive bounds on ``created_at``.
    """
    action: Optional[AuditAction] = None
    entity_type: Optional[str] = None
    user_id: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


@dataclass
class AuditLogView:
    """Decoded audit entry as returned to readers."""
    id: int
    action: str
    entity_type: str
    entity_id: Optional[int]
    user_id: Optional[int]
    ip_address: Optional[str]
    created_at: datetime
    changes: Optional[Dict[str, Any]]


@dataclass
class AuditLogPage:
    items: List[AuditLogView] = field(default_factory=list)
    total: int = 0
    total_pages: int = 1
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT


def normalize_page(page: Optional[int]) -> int:
    """Pages are 1-indexed; missing or non-positive values mean page 1."""
    return page if page and page > 0 else DEFAULT_PAGE


def normalize_limit(limit: Optional[int]) -> int:
    """Limits outside 1..200 fall back to the default of 25 (no clamping)."""
    return limit if limit and 0 < limit <= MAX_LIMIT else DEFAULT_LIMIT


class AuditTrailService:
    """Write and query audit log entries.

    Args:
        db: Database session shared with the business operation being audited
        codec: Payload codec (redaction set is fixed at codec construction)
    """

    def __init__(self, db: Session, codec: AuditCodec = default_codec):
        self.db = db
        self.codec = codec

    def log(
        self,
        action: AuditAction,
        entity_type: str,
        entity_id: Optional[int] = None,
        user_id: Optional[int] = None,
        ip_address: Optional[str] = None,
        before: Optional[Mapping[str, Any]] = None,
        after: Optional[Mapping[str, Any]] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Optional[AuditLog]:
        """Record an audit entry without risking the caller's transaction.

        The insert runs inside a SAVEPOINT on the caller's session, so a
        failure rolls back only the audit row. The caller still owns the
        commit of the surrounding transaction.

        Args:
            action: What happened
            entity_type: Kind of record affected (e.g. "user", "event_donor")
            entity_id: ID of the affected record
            user_id: Acting user
            ip_address: Client IP of the request
            before: Snapshot prior to the change
            after: Snapshot after the change
            metadata: Extra context (actor, source, ...)

        Returns:
            AuditLog: The flushed entry, or None if it could not be persisted

        Example:
            AuditTrailService(db).log(
                action=AuditAction.UPDATE,
                entity_type="event_donor",
                entity_id=event.id,
                user_id=actor_id,
                before=before,
                after=event_donor_audit_snapshot(event_donor),
                metadata={"donorId": donor.id},
            )
        """
        action_value = action.value if isinstance(action, AuditAction) else action
        try:
            entry = AuditLog(
                user_id=user_id,
                action=action_value,
                entity_type=entity_type,
                entity_id=entity_id,
                changes=self.codec.build_changes(before, after, metadata),
                ip_address=ip_address,
            )
            with self.db.begin_nested():
                self.db.add(entry)
        except Exception as e:
            audit_write_failures_total.labels(error_type=type(e).__name__).inc()
            logger.error(
                f"Failed to persist audit trail entry: {type(e).__name__}: {e}",
                extra={"action": action_value, "entity_type": entity_type, "error_type": type(e).__name__},
                exc_info=True,
            )
            return None

        audit_entries_written_total.labels(action=action_value, entity_type=entity_type).inc()
        return entry

    def list(
        self,
        filters: Optional[AuditLogFilters] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> AuditLogPage:
        """Filtered page of entries, newest first.

        Args:
            filters: Optional filters
            page: 1-indexed page number (invalid values become 1)
            limit: Page size, 1..200 (invalid values become 25)

        Returns:
            AuditLogPage: Items plus total count and page metadata
        """
        page = normalize_page(page)
        limit = normalize_limit(limit)

        query = self._filtered_query(filters or AuditLogFilters())
        total = query.count()
        records = (
            self._ordered(query)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

        return AuditLogPage(
            items=[self.to_view(record) for record in records],
            total=total,
            total_pages=max(1, math.ceil(total / limit)),
            page=page,
            limit=limit,
        )

    def find_one(self, audit_log_id: int) -> Optional[AuditLogView]:
        record = self.db.get(AuditLog, audit_log_id)
        if record is None:
            return None
        return self.to_view(record)

    def export(self, filters: Optional[AuditLogFilters] = None) -> List[AuditLogView]:
        """Every entry matching ``filters``, newest first, unpaginated."""
        query = self._filtered_query(filters or AuditLogFilters())
        return [self.to_view(record) for record in self._ordered(query).all()]

    def to_view(self, record: AuditLog) -> AuditLogView:
        return AuditLogView(
            id=record.id,
            action=record.action,
            entity_type=record.entity_type,
            entity_id=record.entity_id,
            user_id=record.user_id,
            ip_address=record.ip_address,
            created_at=record.created_at,
            changes=self._decode(record),
        )

    def _decode(self, record: AuditLog) -> Optional[Dict[str, Any]]:
        try:
            return self.codec.decode(record.changes)
        except AuditPayloadError as e:
            audit_payload_decode_failures_total.inc()
            logger.warning(
                f"Unable to parse audit log changes payload for entry {record.id}: {e}",
                extra={"entity_type": record.entity_type, "entity_id": record.entity_id},
            )
            return None

    def _filtered_query(self, filters: AuditLogFilters) -> Query:
        query = self.db.query(AuditLog)

        if filters.action:
            action = filters.action.value if isinstance(filters.action, AuditAction) else filters.action
            query = query.filter(AuditLog.action == action)

        if filters.entity_type:
            query = query.filter(AuditLog.entity_type == filters.entity_type)

        if filters.user_id is not None:
            query = query.filter(AuditLog.user_id == filters.user_id)

        if filters.start_date is not None:
            query = query.filter(AuditLog.created_at >= filters.start_date)

        if filters.end_date is not None:
            query = query.filter(AuditLog.created_at <= filters.end_date)

        return query

    @staticmethod
    def _ordered(query: Query) -> Query:
        return query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
