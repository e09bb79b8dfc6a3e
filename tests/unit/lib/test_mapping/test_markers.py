"""Unit tests for map marker aggregation."""

import uuid
from dataclasses import dataclass, field

import pytest

from relationship_api.lib.mapping.markers import (
    MARKER_COLORS,
    DisplayMode,
    MapMarker,
    MarkerType,
    build_markers,
)


@dataclass
class Org:
    city: str | None
    state: str | None = "FL"
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass
class Contact:
    org_id: uuid.UUID | None
    id: uuid.UUID = field(default_factory=uuid.uuid4)


TABLE = {
    "miami": (25.7617, -80.1918),
    "miami beach": (25.7617, -80.1918),
    "tampa": (27.9506, -82.4572),
}


def lookup(city: str, state: str | None) -> tuple[float, float] | None:
    return TABLE.get(city.lower())


class TestBuildMarkers:
    """Tests for build_markers grouping and display modes."""

    def test_colocated_organizations_share_a_marker(self) -> None:
        a, b, c = Org("Miami"), Org("Miami Beach"), Org("Tampa")
        markers = build_markers([a, b, c], [], DisplayMode.ORGANIZATIONS, lookup)

        assert len(markers) == 2
        assert markers[0].organizations == [a, b]
        assert markers[0].count == 2
        assert markers[0].badge == 2
        assert markers[1].organizations == [c]
        assert markers[1].badge is None

    def test_people_mode_ignores_organizations(self) -> None:
        orgs = [Org("Miami"), Org("Tampa")]
        markers = build_markers(orgs, [], DisplayMode.PEOPLE, lookup)
        assert markers == []

    def test_people_mode_places_people_at_org_city(self) -> None:
        org = Org("Tampa")
        person = Contact(org.id)
        markers = build_markers([org], [person], "people", lookup)

        assert len(markers) == 1
        assert markers[0].organizations == []
        assert markers[0].people == [person]
        assert markers[0].type == MarkerType.PERSON
        assert markers[0].position == (27.9506, -82.4572)

    def test_mixed_marker_when_org_and_person_colocated(self) -> None:
        org = Org("Miami")
        person = Contact(org.id)
        markers = build_markers([org], [person], DisplayMode.BOTH, lookup)

        assert len(markers) == 1
        assert markers[0].type == MarkerType.MIXED
        assert markers[0].color == MARKER_COLORS[MarkerType.MIXED]
        assert markers[0].count == 2

    def test_organizations_mode_ignores_people(self) -> None:
        org = Org("Miami")
        markers = build_markers([org], [Contact(org.id)], DisplayMode.ORGANIZATIONS, lookup)
        assert markers[0].people == []
        assert markers[0].type == MarkerType.ORGANIZATION

    def test_unresolved_and_blank_cities_dropped(self) -> None:
        orgs = [Org("Springfield", "XX"), Org(None), Org("  ")]
        assert build_markers(orgs, [], DisplayMode.BOTH, lookup) == []

    def test_person_without_known_org_dropped(self) -> None:
        markers = build_markers([Org("Miami")], [Contact(None), Contact(uuid.uuid4())], DisplayMode.PEOPLE, lookup)
        assert markers == []

    def test_each_entity_in_exactly_one_marker(self) -> None:
        orgs = [Org("Miami"), Org("Tampa"), Org("Miami Beach")]
        people = [Contact(orgs[0].id), Contact(orgs[1].id)]
        markers = build_markers(orgs, people, DisplayMode.BOTH, lookup)

        placed_orgs = [o.id for m in markers for o in m.organizations]
        placed_people = [p.id for m in markers for p in m.people]
        assert sorted(placed_orgs) == sorted(o.id for o in orgs)
        assert sorted(placed_people) == sorted(p.id for p in people)

    def test_selected_organization_marks_its_marker(self) -> None:
        miami, tampa = Org("Miami"), Org("Tampa")
        markers = build_markers([miami, tampa], [], DisplayMode.BOTH, lookup, selected_organization_id=tampa.id)

        assert [m.selected for m in markers] == [False, True]
        assert markers[1].size == 32

    def test_invalid_display_mode_rejected(self) -> None:
        with pytest.raises(ValueError):
            build_markers([], [], "everything", lookup)


class TestMapMarker:
    def test_single_marker_size_and_color(self) -> None:
        marker = MapMarker(position=(0.0, 0.0), city="Miami", organizations=[object()])
        assert marker.size == 16
        assert marker.color == "#dc2626"

    def test_group_marker_size(self) -> None:
        marker = MapMarker(position=(0.0, 0.0), city="Miami", people=[object(), object()])
        assert marker.size == 24
        assert marker.type == MarkerType.PERSON
        assert marker.color == "#10b981"
