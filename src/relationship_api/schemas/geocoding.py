"""Pydantic v2 schemas for geocoding operations."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from relationship_api.schemas.geography import GeographyUnitSummary


class CoordinateResponse(BaseModel):
    """A resolved city/state coordinate."""

    city: str
    state: str
    latitude: float
    longitude: float
    display_name: str | None = None


class AddressResolutionResponse(BaseModel):
    """A resolved address with the provider's breakdown and the matched county unit."""

    address: str
    latitude: float
    longitude: float
    display_name: str | None = None
    county: str | None = None
    state: str | None = None
    city: str | None = None
    provider: str
    unit: GeographyUnitSummary | None = None
    match_confidence: str | None = None


class BackfillRequest(BaseModel):
    """Request to run the county backfill in the background."""

    kinds: list[Literal["organization", "person"]] = Field(
        default_factory=lambda: ["organization", "person"],
        description="Entity kinds to backfill",
    )
    delay_seconds: float | None = Field(
        default=None, ge=0, description="Pause between provider calls; never below the provider rate limit"
    )


class BackgroundJobResponse(BaseModel):
    """Status of a queued background job."""

    job_id: str
    status: str
    error: str | None = None


class CacheStatsResponse(BaseModel):
    """Coordinate cache statistics."""

    size: int
    ttl_days: float
    keys: list[str]
    oldest_entry: datetime | None = None
    newest_entry: datetime | None = None
    providers: list[str]

