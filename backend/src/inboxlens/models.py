"""API-specific response models."""

from pydantic import BaseModel, Field


class ReceiverListResponse(BaseModel):
    """Response model for the receiver dropdown."""

    receiver_ids: list[str] = Field(default_factory=list)
    total: int


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    database_configured: bool
