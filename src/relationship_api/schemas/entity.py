"""Pydantic v2 schemas for organizations and people."""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field

from relationship_api.schemas.common import PaginationMeta

OrganizationStatusLiteral = Literal["active", "inactive", "prospect"]


class LocatableFields(BaseModel):
    """Owner-entered address fields shared by organizations and people."""

    address: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=50)
    zip: str | None = Field(default=None, max_length=10)
    county_id: uuid.UUID | None = None


class OrganizationCreateRequest(LocatableFields):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    status: OrganizationStatusLiteral = "active"
    website: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=30)


class OrganizationUpdateRequest(BaseModel):
    """Partial update; only fields present in the request are applied."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    status: OrganizationStatusLiteral | None = None
    website: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=30)
    address: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=50)
    zip: str | None = Field(default=None, max_length=10)
    county_id: uuid.UUID | None = None


class OrganizationResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: uuid.UUID
    name: str
    description: str | None = None
    status: str
    website: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    county_id: uuid.UUID | None = None
    latitude: float | None = None
    longitude: float | None = None
    created_at: datetime
    updated_at: datetime


class PersonCreateRequest(LocatableFields):
    org_id: uuid.UUID | None = None
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    title: str | None = Field(default=None, max_length=150)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=30)
    notes: str | None = None


class PersonUpdateRequest(BaseModel):
    """Partial update; only fields present in the request are applied."""

    org_id: uuid.UUID | None = None
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    title: str | None = Field(default=None, max_length=150)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=30)
    notes: str | None = None
    address: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=50)
    zip: str | None = Field(default=None, max_length=10)
    county_id: uuid.UUID | None = None


class PersonResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: uuid.UUID
    org_id: uuid.UUID | None = None
    first_name: str | None = None
    last_name: str | None = None
    title: str | None = None
    email: str | None = None
    phone: str | None = None
    notes: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    county_id: uuid.UUID | None = None
    created_at: datetime
    updated_at: datetime


class OrganizationWriteResponse(OrganizationResponse):
    """Organization plus the background county-assignment job, when one was queued."""

    county_assignment_job_id: str | None = None


class PersonWriteResponse(PersonResponse):
    """Person plus the background county-assignment job, when one was queued."""

    county_assignment_job_id: str | None = None


class PaginatedOrganizationResponse(BaseModel):
    """Paginated list of organizations."""

    items: list[OrganizationResponse]
    pagination: PaginationMeta


class PaginatedPersonResponse(BaseModel):
    """Paginated list of people."""

    items: list[PersonResponse]
    pagination: PaginationMeta
