"""CSV rendering of exported audit log entries."""

import csv
import io
import json
from datetime import datetime, timezone
from typing import Iterable, Optional

from .service import AuditLogView

CSV_HEADER = ["id", "action", "entityType", "entityId", "userId", "ipAddress", "createdAt", "changes"]


def export_filename(extension: str, now: Optional[datetime] = None) -> str:
    """Attachment name like ``audit-logs-2024-01-01T00-00-00.000Z.csv``."""
    now = now or datetime.now(timezone.utc)
    stamp = now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S.") + f"{now.microsecond // 1000:03d}Z"
    return f"audit-logs-{stamp}.{extension}"


def _iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def audit_logs_to_csv(items: Iterable[AuditLogView]) -> str:
    """Render entries as CSV with CRLF line endings.

    Fields containing quotes, commas or line breaks are quoted; ``changes``
    is embedded as JSON text.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\r\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(CSV_HEADER)

    for item in items:
        writer.writerow([
            item.id,
            item.action,
            item.entity_type,
            "" if item.entity_id is None else item.entity_id,
            "" if item.user_id is None else item.user_id,
            item.ip_address or "",
            _iso(item.created_at),
            json.dumps(item.changes, separators=(",", ":")) if item.changes else "",
        ])

    # No trailing line break after the last row
    return buffer.getvalue().rstrip("\r\n")
