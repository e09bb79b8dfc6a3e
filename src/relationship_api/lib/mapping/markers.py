"""Group organizations and people into map markers by resolved coordinate."""

import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol


class DisplayMode(StrEnum):
    """Which entity collections appear on the map."""

    ORGANIZATIONS = "organizations"
    PEOPLE = "people"
    BOTH = "both"


class MarkerType(StrEnum):
    ORGANIZATION = "organization"
    PERSON = "person"
    MIXED = "mixed"


MARKER_COLORS: dict[MarkerType, str] = {
    MarkerType.ORGANIZATION: "#dc2626",
    MarkerType.PERSON: "#10b981",
    MarkerType.MIXED: "#8b5cf6",
}

SELECTED_SIZE = 32
GROUP_SIZE = 24
SINGLE_SIZE = 16


class MappableOrganization(Protocol):
    id: uuid.UUID
    city: str | None
    state: str | None


class MappablePerson(Protocol):
    id: uuid.UUID
    org_id: uuid.UUID | None


# (city, state) -> (lat, lng)
CoordinateLookup = Callable[[str, str | None], tuple[float, float] | None]


@dataclass
class MapMarker:
    """One visually distinct point on the map."""

    position: tuple[float, float]
    city: str
    organizations: list[Any] = field(default_factory=list)
    people: list[Any] = field(default_factory=list)
    selected: bool = False

    @property
    def type(self) -> MarkerType:
        if self.organizations and self.people:
            return MarkerType.MIXED
        if self.people:
            return MarkerType.PERSON
        return MarkerType.ORGANIZATION

    @property
    def count(self) -> int:
        return len(self.organizations) + len(self.people)

    @property
    def color(self) -> str:
        return MARKER_COLORS[self.type]

    @property
    def size(self) -> int:
        if self.selected:
            return SELECTED_SIZE
        return GROUP_SIZE if self.count > 1 else SINGLE_SIZE

    @property
    def badge(self) -> int | None:
        """Numeric badge shown on grouped markers."""
        return self.count if self.count > 1 else None


def build_markers(
    organizations: Iterable[MappableOrganization],
    people: Iterable[MappablePerson],
    display_mode: DisplayMode | str,
    coordinate_lookup: CoordinateLookup,
    selected_organization_id: uuid.UUID | None = None,
) -> list[MapMarker]:
    """Aggregate entities into markers keyed by their exact resolved coordinate.

    People are placed at their organization's city. Entities whose city does
    not resolve are left off the map. Markers are returned in order of first
    appearance, organizations first.

    Args:
        organizations: Organizations to place (also used to locate people).
        people: People to place.
        display_mode: Which collections to include.
        coordinate_lookup: Resolves ``(city, state)`` to ``(lat, lng)``.
        selected_organization_id: Currently selected organization, if any.

    Returns:
        The markers, each entity in at most one of them.
    """
    mode = DisplayMode(display_mode)
    orgs = list(organizations)
    groups: dict[tuple[float, float], MapMarker] = {}

    def _marker_for(city: str, state: str | None) -> MapMarker | None:
        coords = coordinate_lookup(city, state)
        if coords is None:
            return None
        position = (float(coords[0]), float(coords[1]))
        marker = groups.get(position)
        if marker is None:
            marker = groups[position] = MapMarker(position=position, city=city)
        return marker

    if mode in (DisplayMode.ORGANIZATIONS, DisplayMode.BOTH):
        for org in orgs:
            if not org.city or not org.city.strip():
                continue
            marker = _marker_for(org.city, org.state)
            if marker is not None:
                marker.organizations.append(org)

    if mode in (DisplayMode.PEOPLE, DisplayMode.BOTH):
        orgs_by_id = {org.id: org for org in orgs}
        for person in people:
            owner = orgs_by_id.get(person.org_id) if person.org_id is not None else None
            if owner is None or not owner.city or not owner.city.strip():
                continue
            marker = _marker_for(owner.city, owner.state)
            if marker is not None:
                marker.people.append(person)

    markers = list(groups.values())
    if selected_organization_id is not None:
        for marker in markers:
            marker.selected = any(org.id == selected_organization_id for org in marker.organizations)
    return markers
