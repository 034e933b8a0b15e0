"""Pydantic schemas for API request/response validation."""

from .person import (
    HealthResponse,
    LastSeenUpdate,
    PersonPayload,
    PersonResponse,
    PersonStats,
    ReadinessResponse,
    StatsPayload,
)

__all__ = [
    "HealthResponse",
    "LastSeenUpdate",
    "PersonPayload",
    "PersonResponse",
    "PersonStats",
    "ReadinessResponse",
    "StatsPayload",
]
