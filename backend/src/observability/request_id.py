"""Request ID management for request correlation.

The current request ID lives in a ContextVar so log records emitted anywhere
during a request (matching, audit writes, database errors) carry the same ID.
"""

import uuid
from contextvars import ContextVar, Token
from typing import Optional

NO_REQUEST_ID = "no-request-id"

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def generate_request_id() -> str:
    """Generate a new unique request ID (UUID4 string)."""
    return str(uuid.uuid4())


def get_request_id() -> str:
    """Get current request ID from context, or ``no-request-id`` outside a request."""
    return request_id_var.get() or NO_REQUEST_ID


def set_request_id(request_id: str) -> Token:
    """Bind a request ID to the current context.

    Returns:
        Token: Pass to ``reset_request_id`` to restore the previous value
    """
    return request_id_var.set(request_id)


def reset_request_id(token: Token) -> None:
    request_id_var.reset(token)
