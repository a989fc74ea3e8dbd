"""Schemas for the health check and discovery endpoints."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness plus database reachability, for load balancers and monitoring."""

    status: Literal["ok"] = "ok"
    environment: Literal["dev", "test", "prod"] = Field(description="APP_ENV of the running instance")
    database: Literal["connected", "disconnected"] = Field(
        description="Result of a SELECT 1 through the request's session",
    )
