"""Audit payload codec: redaction, snapshot diffing and (de)serialization.

A payload is a JSON object with up to four keys:

- ``before``: sanitized snapshot prior to the mutation
- ``after``: sanitized snapshot after the mutation
- ``diff``: ``{field: {"before": old, "after": new}}`` for every changed field,
  present only when both snapshots were given and something changed
- ``metadata``: sanitized free-form context, present only when non-empty
"""

import json
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional
from uuid import UUID


REDACTED = "[REDACTED]"

DEFAULT_SENSITIVE_FIELDS = frozenset({"password", "token", "secret", "salt", "apikey"})


class AuditPayloadError(ValueError):
    """Raised when a stored audit payload cannot be decoded."""


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def values_equal(a: Any, b: Any) -> bool:
    """Deep equality used for diffing snapshots.

    Timestamps compare by instant; mappings compare by key set and values;
    sequences compare element-wise. Values of different kinds never match,
    so ``1`` and ``True`` or ``"1"`` and ``1`` are reported as changes.
    """
    if a is b:
        return True

    if isinstance(a, datetime) and isinstance(b, datetime):
        if (a.tzinfo is None) != (b.tzinfo is None):
            return False
        return a == b

    if type(a) is not type(b):
        # int/float are one "number" kind; bool is not a number here
        numbers = (int, float, Decimal)
        if (
            isinstance(a, numbers) and isinstance(b, numbers)
            and not isinstance(a, bool) and not isinstance(b, bool)
        ):
            return a == b
        return False

    if isinstance(a, Mapping):
        if set(a.keys()) != set(b.keys()):
            return False
        return all(values_equal(a[key], b[key]) for key in a)

    if isinstance(a, (list, tuple)):
        if len(a) != len(b):
            return False
        return all(values_equal(x, y) for x, y in zip(a, b))

    return a == b


class AuditCodec:
    """Build and parse audit payloads.

    Args:
        sensitive_fields: Keys whose values are replaced by ``[REDACTED]``,
            matched case-insensitively at any nesting depth
    """

    def __init__(self, sensitive_fields: Iterable[str] = DEFAULT_SENSITIVE_FIELDS):
        self.sensitive_fields = frozenset(field.lower() for field in sensitive_fields)

    def is_sensitive(self, key: Any) -> bool:
        return isinstance(key, str) and key.lower() in self.sensitive_fields

    def sanitize(self, value: Any) -> Any:
        """Return a copy of ``value`` with sensitive keys redacted at every depth."""
        if isinstance(value, Mapping):
            sanitized = {}
            for key, item in value.items():
                if self.is_sensitive(key):
                    sanitized[key] = REDACTED
                else:
                    sanitized[key] = self.sanitize(item)
            return sanitized

        if isinstance(value, (list, tuple)):
            return [self.sanitize(item) for item in value]

        return value

    def compute_diff(
        self,
        before: Mapping[str, Any],
        after: Mapping[str, Any],
    ) -> Dict[str, Dict[str, Any]]:
        """Changed fields between two snapshots.

        Keys missing on one side are reported with ``None`` for that side.
        Keys keep first-seen order: ``before``'s keys, then new ones from ``after``.
        """
        diff = {}
        keys = list(before.keys()) + [key for key in after.keys() if key not in before]

        for key in keys:
            # A missing key reads as None, so {"a": None} vs {} is not a change
            old = before.get(key)
            new = after.get(key)
            if values_equal(old, new):
                continue
            diff[key] = {"before": old, "after": new}

        return diff

    def build_payload(
        self,
        before: Optional[Mapping[str, Any]] = None,
        after: Optional[Mapping[str, Any]] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        """Assemble the (unserialized) payload, or ``None`` when there is nothing to store."""
        sanitized_before = self.sanitize(before) if before is not None else None
        sanitized_after = self.sanitize(after) if after is not None else None
        body: Dict[str, Any] = {}

        if sanitized_before is not None:
            body["before"] = sanitized_before

        if sanitized_after is not None:
            body["after"] = sanitized_after

        if sanitized_before is not None and sanitized_after is not None:
            diff = self.compute_diff(sanitized_before, sanitized_after)
            if diff:
                body["diff"] = diff

        if metadata:
            body["metadata"] = self.sanitize(metadata)

        return body or None

    def build_changes(
        self,
        before: Optional[Mapping[str, Any]] = None,
        after: Optional[Mapping[str, Any]] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Optional[str]:
        """Serialize the payload for storage.

        Returns:
            JSON text, or ``None`` when no before/after/metadata was given
        """
        body = self.build_payload(before, after, metadata)
        if body is None:
            return None
        return json.dumps(body, default=_json_default)

    def decode(self, changes: Optional[str]) -> Optional[Dict[str, Any]]:
        """Decode stored payload text.

        Raises:
            AuditPayloadError: If the text is not a JSON object
        """
        if not changes:
            return None

        try:
            payload = json.loads(changes)
        except (TypeError, ValueError) as e:
            raise AuditPayloadError(f"{type(e).__name__}: {e}") from e

        if not isinstance(payload, dict):
            raise AuditPayloadError(f"Expected a JSON object, got {type(payload).__name__}")
        return payload


default_codec = AuditCodec()
