"""Pydantic response models for the proxy."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Uniform error envelope returned when forwarding fails."""

    error: str


class HealthStatus(BaseModel):
    status: str
