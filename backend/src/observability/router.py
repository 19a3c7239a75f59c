"""Observability API endpoints.

Provides Prometheus metrics and a database-backed health check.
"""

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from database import get_db
from .health import check_database

router = APIRouter(tags=["Observability"])


@router.get("/metrics", include_in_schema=False)
def metrics():
    """Expose Prometheus metrics in the text exposition format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@router.get("/health", summary="Health check endpoint")
def health_check(db: Session = Depends(get_db)):
    """200 when the database answers, 503 otherwise."""
    database = check_database(db)
    return JSONResponse(
        content={
            "status": "healthy" if database.ok else "unhealthy",
            "components": {"database": database.to_dict()},
        },
        status_code=status.HTTP_200_OK if database.ok else status.HTTP_503_SERVICE_UNAVAILABLE,
    )
