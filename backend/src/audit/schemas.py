"""Pydantic schemas for audit log endpoints.

These schemas define the response contracts for audit log queries.
Audit logs are read-only over HTTP (no create/update/delete operations).
"""

import enum
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AuditAction(str, enum.Enum):
    """Kinds of events recorded in the audit trail"""
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    LOGIN = "login"
    LOGOUT = "logout"
    BASELINE = "baseline"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["AuditAction"]:
        """Case-insensitive lookup; unknown or empty values yield None."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class AuditLogResponse(BaseModel):
    """Response schema for audit log entries.

    Returned by audit log query endpoints. All fields are read-only.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "action": "update",
                "entityType": "user",
                "entityId": 42,
                "userId": 7,
                "ipAddress": "127.0.0.1",
                "createdAt": "2024-01-01T00:00:00Z",
                "changes": {"diff": {"role": {"before": "staff", "after": "admin"}}},
            }
        },
    )

    id: int = Field(..., description="Audit log entry identifier")
    action: str = Field(..., description="create | update | delete | login | logout | baseline")
    entity_type: str = Field(..., description="Type of entity affected (user, event, event_donor, ...)")
    entity_id: Optional[int] = Field(None, description="ID of affected entity")
    user_id: Optional[int] = Field(None, description="User who performed the action")
    ip_address: Optional[str] = Field(None, description="Client IP address")
    created_at: datetime = Field(..., description="Event timestamp")
    changes: Optional[Dict[str, Any]] = Field(None, description="Decoded before/after/diff/metadata payload")


class AuditLogListResponse(BaseModel):
    """Response schema for audit log queries, with pagination metadata."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    items: List[AuditLogResponse] = Field(..., description="Audit log entries on this page")
    total: int = Field(..., description="Total number of entries matching filters")
    total_pages: int = Field(..., description="Number of pages (at least 1)")
    page: int = Field(..., description="Current page number")
    limit: int = Field(..., description="Entries per page")
