"""
Health check DTOs for GET /api/v1/health.

The health endpoint is public and never fails: a down dependency is
reported as unhealthy, not as a 500.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class SubsystemStatus(BaseModel):
    """Status of a single dependency."""

    model_config = ConfigDict(from_attributes=True)

    name: str = Field(..., description="Subsystem identifier")
    healthy: bool = Field(..., description="Whether this subsystem is usable")
    detail: Optional[str] = Field(
        None,
        description="Human-readable status detail (error message, etc.)",
    )
    checked_at: datetime = Field(..., description="When this subsystem was checked")


class HealthResponse(BaseModel):
    """Aggregate service health.

    Redis being down is "degraded" -- requests are still served through the
    in-memory fallback cache. A missing API key is also "degraded" since
    cached entries may still be served.
    """

    model_config = ConfigDict(from_attributes=True)

    status: Literal["healthy", "degraded"] = Field(
        ..., description="Aggregate service health status"
    )
    subsystems: list[SubsystemStatus] = Field(
        ..., description="Per-subsystem health status"
    )
    fallback_entries: int = Field(
        ..., ge=0, description="Entries held in the in-memory fallback cache"
    )
    timestamp: datetime = Field(..., description="When this check was performed")
    version: str = Field(..., description="API server version string")
