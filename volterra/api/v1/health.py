"""Liveness probe for the admin API and its database."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from volterra.core.config import settings
from volterra.core.database import check_db_connected, get_db
from volterra.schemas.health import SERVICE_NAME, HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(response: Response, db: Session = Depends(get_db)) -> HealthResponse:
    """Report service status; answers 503 while the database is unreachable."""
    connected = check_db_connected(db)
    if not connected:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status="ok" if connected else "degraded",
        service=SERVICE_NAME,
        environment=settings.APP_ENV,
        database="connected" if connected else "disconnected",
    )
