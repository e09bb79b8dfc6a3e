"""Pydantic v2 schemas for the map endpoint."""

import uuid

from pydantic import BaseModel


class MarkerOrganization(BaseModel):
    id: uuid.UUID
    name: str
    city: str | None = None
    state: str | None = None


class MarkerPerson(BaseModel):
    id: uuid.UUID
    org_id: uuid.UUID | None = None
    name: str


class MapMarkerResponse(BaseModel):
    position: tuple[float, float]
    city: str
    type: str
    count: int
    color: str
    size: int
    badge: int | None = None
    selected: bool
    organizations: list[MarkerOrganization]
    people: list[MarkerPerson]


class ViewportResponse(BaseModel):
    center: tuple[float, float]
    zoom: int | None = None
    bounds: tuple[tuple[float, float], tuple[float, float]] | None = None


class MapResponse(BaseModel):
    region: str
    display_mode: str
    markers: list[MapMarkerResponse]
    viewport: ViewportResponse
