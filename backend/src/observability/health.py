"""Readiness check: DonorHub is serviceable when its database answers."""

import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class DatabaseHealth:
    ok: bool
    latency_ms: Optional[float] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": "healthy" if self.ok else "unhealthy",
            "latencyMs": self.latency_ms,
            "error": self.error,
        }


def check_database(db: Session) -> DatabaseHealth:
    """Run ``SELECT 1`` and time it. Driver errors are reported by class name only."""
    start = time.perf_counter()
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}", exc_info=True)
        return DatabaseHealth(ok=False, error=type(e).__name__)
    return DatabaseHealth(ok=True, latency_ms=round((time.perf_counter() - start) * 1000, 2))
