"""Unit tests for the hierarchy resolver (county name match, then state fallback)."""

from relationship_api.services.hierarchy_service import (
    MatchConfidence,
    find_unit,
    find_unit_by_county_name,
    find_unit_match,
    normalize_county_name,
)

MIAMI = (25.7617, -80.1918)
OMAHA = (41.2565, -95.9345)
HOUSTON = (29.7604, -95.3698)
SEATTLE = (47.6062, -122.3321)


class FixedStateLocator:
    def __init__(self, state: str | None) -> None:
        self.state = state

    def locate(self, latitude: float, longitude: float) -> str | None:
        return self.state


class TestNormalizeCountyName:
    def test_strips_county_suffix(self) -> None:
        assert normalize_county_name("Miami-Dade County") == "Miami-Dade"

    def test_case_insensitive_suffix(self) -> None:
        assert normalize_county_name("  Douglas COUNTY ") == "Douglas"

    def test_without_suffix_unchanged(self) -> None:
        assert normalize_county_name("Broward") == "Broward"


class TestFindUnitByCountyName:
    async def test_partial_match_within_state(self, async_session, geography_units) -> None:
        unit = await find_unit_by_county_name(async_session, "Dade", "FL")
        assert unit is not None
        assert unit.id == geography_units["miami_dade"].id

    async def test_same_name_other_state_not_matched(self, async_session, geography_units) -> None:
        assert await find_unit_by_county_name(async_session, "Douglas County", "Florida") is None

    async def test_blank_name(self, async_session, geography_units) -> None:
        assert await find_unit_by_county_name(async_session, "   ", "FL") is None

    async def test_like_wildcards_are_literal(self, async_session, geography_units) -> None:
        assert await find_unit_by_county_name(async_session, "%", "FL") is None


class TestFindUnitMatch:
    """Tests for find_unit_match tiers."""

    async def test_county_suffix_and_state_name_normalized(self, async_session, geography_units) -> None:
        match = await find_unit_match(async_session, *MIAMI, "Miami-Dade County", "Florida")

        assert match is not None
        assert match.unit.id == geography_units["miami_dade"].id
        assert match.unit.county == "Miami-Dade"
        assert match.confidence == MatchConfidence.EXACT

    async def test_name_match_beats_coordinate_fallback(self, async_session, geography_units) -> None:
        # The coordinate alone would fall back to Broward, the first Florida unit
        match = await find_unit_match(async_session, *MIAMI, "Orange County", "FL")
        assert match is not None
        assert match.unit.id == geography_units["orange"].id
        assert match.confidence == MatchConfidence.EXACT

    async def test_unknown_county_falls_back_to_first_unit_in_state(self, async_session, geography_units) -> None:
        match = await find_unit_match(async_session, *MIAMI, "Atlantis County", "Florida")
        assert match is not None
        assert match.unit.id == geography_units["broward"].id
        assert match.confidence == MatchConfidence.STATE_FALLBACK

    async def test_no_county_name_uses_coordinate(self, async_session, geography_units) -> None:
        match = await find_unit_match(async_session, *OMAHA)
        assert match is not None
        assert match.unit.id == geography_units["douglas"].id
        assert match.confidence == MatchConfidence.STATE_FALLBACK

    async def test_state_without_units_returns_none(self, async_session, geography_units) -> None:
        assert await find_unit_match(async_session, *HOUSTON, "Harris County", "Texas") is None

    async def test_outside_every_box_returns_none(self, async_session, geography_units) -> None:
        assert await find_unit_match(async_session, *SEATTLE, "King County", "Washington") is None

    async def test_no_coordinate_and_no_name_match(self, async_session, geography_units) -> None:
        assert await find_unit_match(async_session, None, None, "Atlantis County", "FL") is None

    async def test_custom_state_locator(self, async_session, geography_units) -> None:
        match = await find_unit_match(async_session, *MIAMI, state_locator=FixedStateLocator("IA"))
        assert match is not None
        assert match.unit.id == geography_units["polk"].id

    async def test_empty_reference_table(self, async_session) -> None:
        assert await find_unit_match(async_session, *MIAMI, "Miami-Dade County", "FL") is None


class TestFindUnit:
    async def test_returns_unit_only(self, async_session, geography_units) -> None:
        unit = await find_unit(async_session, *MIAMI, "Miami-Dade County", "Florida")
        assert unit is not None
        assert unit.id == geography_units["miami_dade"].id

    async def test_none_when_unmatched(self, async_session, geography_units) -> None:
        assert await find_unit(async_session, *SEATTLE) is None
