"""Map aggregation library — marker grouping, viewport fitting, and region defaults."""

from relationship_api.lib.mapping.city_coordinates import CITY_COORDINATES, get_city_coordinates
from relationship_api.lib.mapping.markers import (
    MARKER_COLORS,
    CoordinateLookup,
    DisplayMode,
    MapMarker,
    MarkerType,
    build_markers,
)
from relationship_api.lib.mapping.regions import REGION_MAP_CONFIG, RegionMapConfig, get_region_config
from relationship_api.lib.mapping.viewport import Viewport, fit_viewport

__all__ = [
    "CITY_COORDINATES",
    "MARKER_COLORS",
    "REGION_MAP_CONFIG",
    "CoordinateLookup",
    "DisplayMode",
    "MapMarker",
    "MarkerType",
    "RegionMapConfig",
    "Viewport",
    "build_markers",
    "fit_viewport",
    "get_city_coordinates",
    "get_region_config",
]
