"""
CanvasBoard — Shared API Schemas
==================================

What:  Base model and envelope schemas used by every endpoint.
How:   APIModel serializes snake_case attributes as camelCase JSON and reads
       straight from ORM objects (from_attributes). Request bodies accept
       either casing.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class DeleteResponse(APIModel):
    success: bool = True


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "conflict",
            "message": "These cards are already connected",
            "details": {"connection_id": "..."},
            "request_id": "550e8400-e29b-41d4-a716-446655440000"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer checks."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
