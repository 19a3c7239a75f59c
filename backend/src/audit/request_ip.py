"""Client IP extraction for audit entries."""

from typing import Optional

from fastapi import Request


def extract_request_ip(request: Request) -> Optional[str]:
    """Return the originating client IP of ``request``.

    Behind a proxy the first non-empty entry of X-Forwarded-For is the
    original client; otherwise the socket peer address is used.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        for part in forwarded_for.split(","):
            ip = part.strip()
            if ip:
                return ip

    return request.client.host if request.client else None
