"""Pydantic schemas for the people API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class StatsPayload(BaseModel):
    """Inbound stats block. ``clearance`` is the legacy name of ``affiliation``."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    affiliation: str | None = None
    clearance: str | None = None
    threat: str | None = None
    loyalty: str | None = None


class PersonPayload(BaseModel):
    """Body for create and profile-update requests.

    Every field is optional at the schema level; which fields were actually
    sent matters for profile updates, so read them back with
    :meth:`present_fields`.
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: str | None = None
    callsign: str | None = None
    role: str | None = None
    workplace: str | None = Field(None, description="Canonical name for unit")
    unit: str | None = Field(None, description="Legacy alias of workplace")
    description: str | None = None
    image_url: str | None = None
    dossier_notes: str | None = None
    traits: list[Any] | str | None = Field(
        None, description="List of strings or comma-separated text"
    )
    proficiencies: list[Any] | str | None = Field(
        None, description="List of strings or comma-separated text"
    )
    stats: StatsPayload | None = None

    # Legacy top-level stat keys
    affiliation: str | None = None
    clearance: str | None = None
    threat: str | None = None
    loyalty: str | None = None

    def present_fields(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class LastSeenUpdate(BaseModel):
    """Body for a last-seen heartbeat. Coordinates are validated by the route."""

    lat: Any = None
    lng: Any = None
    notes: str | None = None


class PersonStats(BaseModel):
    affiliation: str
    threat: str
    loyalty: str


class PersonResponse(BaseModel):
    """Canonical person record returned by every endpoint."""

    id: int
    name: str
    callsign: str
    role: str
    workplace: str
    unit: str
    description: str
    image_url: str
    traits: list[str]
    proficiencies: list[str]
    dossier_notes: str
    affiliation: str
    stats: PersonStats
    last_seen_notes: str
    last_seen_lat: float | None
    last_seen_lng: float | None
    last_seen_timestamp: datetime | None


class HealthResponse(BaseModel):
    status: str


class ReadinessResponse(BaseModel):
    ready: bool
