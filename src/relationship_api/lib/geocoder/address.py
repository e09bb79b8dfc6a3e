"""Address string building and the shared Locatable shape.

Organizations and people both carry owner-entered address fields; the
resolver and the county-assignment workflow consume them through the
``Locatable`` protocol rather than branching on entity kind.
"""

import uuid
from typing import Protocol, runtime_checkable

from relationship_api.lib.geocoder.states import normalize_state


@runtime_checkable
class Locatable(Protocol):
    """Anything with a postal address and a resolvable county reference."""

    address: str | None
    city: str | None
    state: str | None
    zip: str | None
    county_id: uuid.UUID | None


def _clean(value: str | None) -> str:
    return " ".join(value.split()) if value else ""


def build_address_string(
    address: str | None = None,
    city: str | None = None,
    state: str | None = None,
    zip_code: str | None = None,
) -> str:
    """Join address components into a single geocodable string.

    Blank components are skipped; the rest are joined with ``", "`` in
    street, city, state, zip order.

    Returns:
        The address string, or ``""`` when every component is blank.
    """
    parts = [_clean(address), _clean(city), _clean(state), _clean(zip_code)]
    return ", ".join(p for p in parts if p)


def locatable_address(entity: Locatable) -> str:
    """Build the geocodable address string for a Locatable entity."""
    return build_address_string(entity.address, entity.city, entity.state, entity.zip)


def coordinate_cache_key(city: str, state: str) -> str:
    """Build the normalized ``"city, state"`` key used by the coordinate cache.

    The state is folded to its two-letter code so "Florida" and "FL" share
    an entry.
    """
    return f"{_clean(city)}, {normalize_state(state)}".lower()
