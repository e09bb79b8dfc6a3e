"""Pydantic v2 schemas for the geography reference."""

import uuid

from pydantic import BaseModel


class OptionResponse(BaseModel):
    """A select-list option."""

    value: str
    label: str


class GeographyUnitSummary(BaseModel):
    """County unit with its place in the hierarchy."""

    model_config = {"from_attributes": True}

    id: uuid.UUID
    county: str
    county_long: str | None = None
    state: str
    chapter: str
    chapter_code: str | None = None
    region: str
    region_code: str | None = None
    division: str
    division_code: str | None = None


class GeographyUnitResponse(GeographyUnitSummary):
    """Full county unit including chapter contact details."""

    geo_id: str
    fips: str | None = None
    address: str | None = None
    address_2: str | None = None
    city: str | None = None
    zip: str | None = None
    phone: str | None = None
    time_zone: str | None = None
    fema_region: str | None = None
