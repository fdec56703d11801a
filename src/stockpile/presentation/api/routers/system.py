"""Health and status endpoints."""

import logging

from fastapi import APIRouter, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from stockpile.presentation.api.dependencies import DBSession
from stockpile.presentation.api.schemas.system import HealthResponse, StatusResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/health",
    summary="Health check",
    responses={
        200: {"description": "Service and database are healthy"},
        503: {"description": "Database is unreachable"},
    },
)
async def health(session: DBSession, response: Response) -> HealthResponse:
    """Check database connectivity."""
    try:
        await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Health check failed: %s", e)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="unhealthy", database="unreachable")

    return HealthResponse(status="healthy", database="ok")


@router.get("/status", summary="Liveness probe")
async def service_status() -> StatusResponse:
    """Report that the service is up, without touching the database."""
    return StatusResponse()
