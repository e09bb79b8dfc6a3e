"""Unit tests for the geography reference service."""

import uuid
from pathlib import Path

from relationship_api.models.organization import Organization
from relationship_api.services.geography_service import (
    get_organization_hierarchy,
    get_unit,
    import_geography_units,
    list_chapters,
    list_counties_by_state,
    list_divisions,
    list_regions,
    load_geography_csv,
    option_value,
)


class TestOptionValue:
    def test_lower_snake(self) -> None:
        assert option_value("Southeast and  Caribbean") == "southeast_and_caribbean"


class TestImportGeographyUnits:
    """Tests for import_geography_units."""

    async def test_inserts_then_upserts_by_geo_id(self, async_session) -> None:
        record = {
            "geo_id": "12086",
            "county": "Miami-Dade",
            "state": "FL",
            "division": "Southeast and Caribbean",
            "region": "South Florida",
            "chapter": "Greater Miami",
        }
        assert await import_geography_units(async_session, [record]) == 1

        renamed = {**record, "chapter": "Greater Miami and The Keys", "phone": "305-555-0100"}
        assert await import_geography_units(async_session, [renamed, {"county": "No GeoID"}]) == 1

        units = await list_counties_by_state(async_session, "Florida")
        assert len(units) == 1
        assert units[0].chapter == "Greater Miami and The Keys"
        assert units[0].phone == "305-555-0100"

    async def test_import_from_csv(self, async_session, tmp_path: Path) -> None:
        csv_path = tmp_path / "geo.csv"
        csv_path.write_text(
            "GeoID,FIPS,County,County_Long,State,Division,DCODE,Region,RCODE,Chapter,ECODE\n"
            "31055,31055,Douglas,Douglas County,ne,North Central,D03,Nebraska,R31,Heartland,E310\n",
            encoding="utf-8",
        )
        count = await import_geography_units(async_session, load_geography_csv(csv_path))

        assert count == 1
        units = await list_counties_by_state(async_session, "Nebraska")
        assert [u.county for u in units] == ["Douglas"]
        unit = units[0]
        assert unit.state == "NE"
        assert unit.division_code == "D03"


class TestOptions:
    """Tests for the division/region/chapter option lists."""

    async def test_divisions(self, async_session, geography_units) -> None:
        assert await list_divisions(async_session) == [
            {"value": "north_central", "label": "North Central"},
            {"value": "southeast_and_caribbean", "label": "Southeast and Caribbean"},
        ]

    async def test_regions_limited_to_map_region(self, async_session, geography_units) -> None:
        labels = [o["label"] for o in await list_regions(async_session, "FLORIDA")]
        assert labels == ["North Florida", "South Florida"]

    async def test_national_region_lists_everything(self, async_session, geography_units) -> None:
        assert len(await list_regions(async_session, "NATIONAL")) == 4

    async def test_chapters(self, async_session, geography_units) -> None:
        labels = [o["label"] for o in await list_chapters(async_session, "NEBRASKA_IOWA")]
        assert labels == ["Central Iowa", "Heartland"]


class TestLookups:
    async def test_counties_by_state_ordered(self, async_session, geography_units) -> None:
        units = await list_counties_by_state(async_session, "fl")
        assert [u.county for u in units] == ["Broward", "Miami-Dade", "Orange"]

    async def test_get_unit(self, async_session, geography_units) -> None:
        unit_id = geography_units["polk"].id
        unit = await get_unit(async_session, unit_id)
        assert unit is not None
        assert unit.county == "Polk"
        assert await get_unit(async_session, uuid.uuid4()) is None

    async def test_organization_hierarchy(self, async_session, geography_units) -> None:
        org = Organization(name="Acme", county_id=geography_units["douglas"].id)
        unassigned = Organization(name="Floating")
        async_session.add_all([org, unassigned])
        await async_session.commit()

        unit = await get_organization_hierarchy(async_session, org.id)
        assert unit is not None
        assert unit.chapter == "Heartland"
        assert unit.division == "North Central"
        assert await get_organization_hierarchy(async_session, unassigned.id) is None
        assert await get_organization_hierarchy(async_session, uuid.uuid4()) is None
