"""Health check endpoint with optional database connectivity check."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from sessionauth.core.config import settings
from sessionauth.core.database import check_db_connected, get_db
from sessionauth.schemas.health import HealthResponse
from sessionauth.services.sessions import count_live_sessions

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(db: Session = Depends(get_db)) -> HealthResponse:
    """
    Return service health status, database connectivity and live session count.
    Used by load balancers and monitoring.
    """
    if not check_db_connected(db):
        return HealthResponse(environment=settings.APP_ENV, database="disconnected")

    return HealthResponse(
        environment=settings.APP_ENV,
        database="connected",
        live_sessions=count_live_sessions(db),
    )
