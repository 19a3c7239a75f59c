"""Audit log query endpoints.

All endpoints in this router are read-only. Audit logs are immutable and
cannot be created, updated, or deleted through the API.

Entries can be filtered by:
- Action type (create, update, delete, login, logout, baseline)
- Entity type (user, event, event_donor, ...)
- Acting user id
- Date range (startDate, endDate; both inclusive)
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse, Response
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from database import get_db
from .export import audit_logs_to_csv, export_filename
from .schemas import AuditAction, AuditLogListResponse, AuditLogResponse
from .service import AuditLogFilters, AuditTrailService

router = APIRouter(prefix="/api/v1/admin/audit-logs", tags=["Audit Logs"])


def parse_user_id(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    try:
        return int(value.strip(), 10)
    except ValueError:
        return None


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp; unparseable input means no bound.

    Naive values are taken as UTC.
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def build_filters(
    action: Optional[str],
    entity_type: Optional[str],
    user_id: Optional[str],
    start_date: Optional[str],
    end_date: Optional[str],
) -> AuditLogFilters:
    return AuditLogFilters(
        action=AuditAction.parse(action),
        entity_type=(entity_type or "").strip() or None,
        user_id=parse_user_id(user_id),
        start_date=parse_timestamp(start_date),
        end_date=parse_timestamp(end_date),
    )


@router.get(
    "",
    response_model=AuditLogListResponse,
    summary="List audit log entries",
    description="Query audit logs with filtering and pagination, newest first.",
)
def list_audit_logs(
    db: Session = Depends(get_db),
    page: Optional[int] = Query(None, description="Page number (1-indexed)"),
    limit: Optional[int] = Query(None, description="Items per page (max 200, default 25)"),
    action: Optional[str] = Query(None, description="Filter by action type"),
    entity_type: Optional[str] = Query(None, alias="entityType", description="Filter by entity type"),
    user_id: Optional[str] = Query(None, alias="userId", description="Filter by actor user id"),
    start_date: Optional[str] = Query(None, alias="startDate", description="createdAt lower bound (ISO 8601)"),
    end_date: Optional[str] = Query(None, alias="endDate", description="createdAt upper bound (ISO 8601)"),
) -> AuditLogListResponse:
    """Query audit logs with filtering and pagination.

    Invalid filter values are ignored and out-of-range pagination falls back
    to the defaults (page 1, 25 per page).

    Example:
        GET /api/v1/admin/audit-logs?action=update&page=2&limit=10
    """
    filters = build_filters(action, entity_type, user_id, start_date, end_date)
    result = AuditTrailService(db).list(filters, page=page, limit=limit)

    return AuditLogListResponse(
        items=[AuditLogResponse.model_validate(item) for item in result.items],
        total=result.total,
        total_pages=result.total_pages,
        page=result.page,
        limit=result.limit,
    )


@router.get(
    "/export",
    summary="Export audit logs",
    description="Export every matching audit log entry as CSV (default) or JSON.",
)
def export_audit_logs(
    db: Session = Depends(get_db),
    format: str = Query("csv", description="Export format (csv|json)"),
    action: Optional[str] = Query(None),
    entity_type: Optional[str] = Query(None, alias="entityType"),
    user_id: Optional[str] = Query(None, alias="userId"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
) -> Response:
    filters = build_filters(action, entity_type, user_id, start_date, end_date)
    items = AuditTrailService(db).export(filters)

    if format.lower() == "json":
        body = [AuditLogResponse.model_validate(item).model_dump(by_alias=True) for item in items]
        return JSONResponse(
            content=jsonable_encoder(body),
            headers={"Content-Disposition": f'attachment; filename="{export_filename("json")}"'},
        )

    return Response(
        content=audit_logs_to_csv(items),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export_filename("csv")}"'},
    )


@router.get(
    "/{audit_log_id}",
    response_model=AuditLogResponse,
    summary="Get a single audit log entry",
    responses={404: {"description": "Audit log not found"}},
)
def get_audit_log(audit_log_id: int, db: Session = Depends(get_db)) -> AuditLogResponse:
    view = AuditTrailService(db).find_one(audit_log_id)
    if view is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Audit log not found")
    return AuditLogResponse.model_validate(view)
