"""Served regions, their states, and their default map view."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RegionMapConfig:
    """Default map view for a region.

    An empty ``states`` tuple means the region covers every state.
    """

    code: str
    name: str
    center: tuple[float, float]
    zoom: int
    states: tuple[str, ...] = ()

    def covers_state(self, state_code: str | None) -> bool:
        return not self.states or state_code is None or state_code in self.states


REGION_MAP_CONFIG: dict[str, RegionMapConfig] = {
    "FLORIDA": RegionMapConfig("FLORIDA", "Florida", (27.6648, -81.5158), 7, ("FL",)),
    "NEBRASKA_IOWA": RegionMapConfig("NEBRASKA_IOWA", "Nebraska & Iowa", (41.5, -95.9), 6, ("NE", "IA")),
    "NATIONAL": RegionMapConfig("NATIONAL", "National", (39.8283, -98.5795), 4),
}

DEFAULT_REGION = "NATIONAL"


def get_region_config(region: str | None) -> RegionMapConfig:
    """Return the map config for a region code, falling back to NATIONAL."""
    if region:
        config = REGION_MAP_CONFIG.get(region.strip().upper())
        if config is not None:
            return config
    return REGION_MAP_CONFIG[DEFAULT_REGION]
