"""Audit trail module for DonorHub.

Builds redacted, diffed audit payloads and stores/queries audit log entries.
"""

from .codec import AuditCodec, AuditPayloadError, REDACTED, DEFAULT_SENSITIVE_FIELDS, values_equal
from .schemas import AuditAction
from .service import AuditLogFilters, AuditLogPage, AuditLogView, AuditTrailService

__all__ = [
    "AuditCodec",
    "AuditPayloadError",
    "REDACTED",
    "DEFAULT_SENSITIVE_FIELDS",
    "values_equal",
    "AuditAction",
    "AuditLogFilters",
    "AuditLogPage",
    "AuditLogView",
    "AuditTrailService",
]
