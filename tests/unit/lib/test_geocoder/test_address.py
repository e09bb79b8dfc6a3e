"""Unit tests for address building, state normalization, and the Locatable shape."""

import uuid
from dataclasses import dataclass

from relationship_api.lib.geocoder.address import (
    Locatable,
    build_address_string,
    coordinate_cache_key,
    locatable_address,
)
from relationship_api.lib.geocoder.states import normalize_state, state_variants
from relationship_api.models.organization import Organization
from relationship_api.models.person import Person


@dataclass
class PlainLocatable:
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    county_id: uuid.UUID | None = None


class TestBuildAddressString:
    def test_full_address(self) -> None:
        assert build_address_string("1 Flagler St", "Miami", "FL", "33130") == "1 Flagler St, Miami, FL, 33130"

    def test_blank_parts_skipped(self) -> None:
        assert build_address_string(None, "Miami", "", "33130") == "Miami, 33130"

    def test_whitespace_collapsed(self) -> None:
        assert build_address_string("  1   Flagler St ", " Miami ") == "1 Flagler St, Miami"

    def test_everything_blank(self) -> None:
        assert build_address_string() == ""


class TestNormalizeState:
    def test_full_name(self) -> None:
        assert normalize_state("Florida") == "FL"

    def test_multi_word_name(self) -> None:
        assert normalize_state("  district   of columbia ") == "DC"

    def test_code_passes_through(self) -> None:
        assert normalize_state("ne") == "NE"

    def test_unknown_upper_cased(self) -> None:
        assert normalize_state("xx") == "XX"


class TestStateVariants:
    def test_code_and_full_name(self) -> None:
        assert state_variants("fl") == {"FL", "FLORIDA"}
        assert state_variants("Nebraska") == {"NE", "NEBRASKA"}

    def test_unknown_state_is_its_own_variant(self) -> None:
        assert state_variants(" xx ") == {"XX"}


class TestCoordinateCacheKey:
    def test_key_lower_cased_with_state_code(self) -> None:
        assert coordinate_cache_key("Coral  Gables", "Florida") == "coral gables, fl"


class TestLocatable:
    def test_models_and_plain_objects_are_locatable(self) -> None:
        assert isinstance(Organization(name="Acme"), Locatable)
        assert isinstance(Person(first_name="Ana"), Locatable)
        assert isinstance(PlainLocatable(), Locatable)

    def test_locatable_address(self) -> None:
        entity = PlainLocatable(address="100 Main St", city="Omaha", state="NE", zip="68102")
        assert locatable_address(entity) == "100 Main St, Omaha, NE, 68102"
