"""System endpoint schemas."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Response schema for the health check."""

    status: str
    database: str


class StatusResponse(BaseModel):
    """Response schema for the liveness probe."""

    message: str = "success"
    status: str = "ok"
