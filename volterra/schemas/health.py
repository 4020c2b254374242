"""Schema for the health probe."""

from typing import Literal

from pydantic import BaseModel, Field

SERVICE_NAME = "volterra-admin"


class HealthResponse(BaseModel):
    """Body of GET /api/health."""

    status: Literal["ok", "degraded"] = Field(default="ok", description="Overall service status")
    service: str = Field(default=SERVICE_NAME)
    environment: str = Field(description="Current app environment (dev or prod)")
    database: Literal["connected", "disconnected"]
