"""Viewport fitting for a set of map markers."""

from collections.abc import Sequence
from dataclasses import dataclass

from relationship_api.lib.mapping.markers import MapMarker

DEFAULT_CITY_ZOOM = 10
DEFAULT_PADDING = 0.1

Bounds = tuple[tuple[float, float], tuple[float, float]]


@dataclass(frozen=True)
class Viewport:
    """What the renderer should show.

    When ``bounds`` is set the renderer fits to it and ``zoom`` is None.
    """

    center: tuple[float, float]
    zoom: int | None
    bounds: Bounds | None = None


def fit_viewport(
    markers: Sequence[MapMarker],
    default_center: tuple[float, float],
    default_zoom: int,
    city_zoom: int = DEFAULT_CITY_ZOOM,
    padding: float = DEFAULT_PADDING,
) -> Viewport:
    """Pick a viewport for the markers.

    No markers: the caller's default view. One marker: centered at city zoom.
    Several: the bounding rectangle padded by ``padding`` of its span on each side.
    """
    if not markers:
        return Viewport(center=default_center, zoom=default_zoom)
    if len(markers) == 1:
        return Viewport(center=markers[0].position, zoom=city_zoom)

    lats = [m.position[0] for m in markers]
    lngs = [m.position[1] for m in markers]
    min_lat, max_lat = min(lats), max(lats)
    min_lng, max_lng = min(lngs), max(lngs)
    lat_pad = (max_lat - min_lat) * padding
    lng_pad = (max_lng - min_lng) * padding

    bounds: Bounds = ((min_lat - lat_pad, min_lng - lng_pad), (max_lat + lat_pad, max_lng + lng_pad))
    center = ((min_lat + max_lat) / 2, (min_lng + max_lng) / 2)
    return Viewport(center=center, zoom=None, bounds=bounds)
