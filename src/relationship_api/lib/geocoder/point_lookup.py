"""Coordinate-to-state lookup.

The default locator is a coarse approximation: an ordered list of
rectangular lat/lng boxes for the states currently served. It sits behind the
``StateLocator`` protocol so a real point-in-polygon index can replace it
without touching callers.
"""

from typing import NamedTuple, Protocol

from shapely.geometry import Point, Polygon, box


class StateLocator(Protocol):
    """Maps a coordinate to a two-letter state code."""

    def locate(self, latitude: float, longitude: float) -> str | None:
        """Return the state containing the point, or None when unknown."""
        ...


class StateBounds(NamedTuple):
    """Rectangular lat/lng extent of a state."""

    state: str
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float


# Order matters: boxes overlap (FL/TX, NE/IA, PA/MD/VA) and the first hit wins.
DEFAULT_STATE_BOUNDS: tuple[StateBounds, ...] = (
    StateBounds("FL", 25.0, 31.0, -87.0, -80.0),
    StateBounds("NE", 40.0, 43.0, -104.0, -95.5),
    StateBounds("IA", 40.5, 43.5, -96.5, -90.0),
    StateBounds("TX", 25.0, 37.0, -107.0, -93.0),
    StateBounds("PA", 39.7, 42.3, -80.5, -74.7),
    StateBounds("MD", 37.9, 39.7, -79.5, -75.0),
    StateBounds("VA", 36.5, 39.5, -83.7, -75.2),
)


class BoundingBoxStateLocator:
    """First-match state lookup over an ordered list of shapely boxes.

    Box edges are inclusive.
    """

    def __init__(self, bounds: tuple[StateBounds, ...] | list[StateBounds] = DEFAULT_STATE_BOUNDS) -> None:
        # shapely uses (x, y) = (lng, lat)
        self._boxes: list[tuple[str, Polygon]] = [
            (b.state, box(b.min_lng, b.min_lat, b.max_lng, b.max_lat)) for b in bounds
        ]

    @property
    def states(self) -> list[str]:
        return [state for state, _ in self._boxes]

    def locate(self, latitude: float, longitude: float) -> str | None:
        point = Point(longitude, latitude)
        for state, polygon in self._boxes:
            if polygon.covers(point):
                return state
        return None


DEFAULT_STATE_LOCATOR = BoundingBoxStateLocator()
