"""Precomputed coordinates for cities in the served regions.

Consulted after a cache miss and before any provider call. Keys use the same
normalization as the coordinate cache (``"city, st"``, lower-case).
"""

from relationship_api.lib.geocoder.base import Coordinate

COORDINATE_TABLE: dict[str, Coordinate] = {
    # Florida
    "tampa, fl": Coordinate(27.953105, -82.4507037),
    "coral gables, fl": Coordinate(25.7078825, -80.2854433),
    "tallahassee, fl": Coordinate(30.4518, -84.27277),
    "miami, fl": Coordinate(25.7617, -80.1918),
    "big pine key, fl": Coordinate(24.6985, -81.3668),
    "st. augustine, fl": Coordinate(29.9012, -81.3124),
    "juno beach, fl": Coordinate(26.8942, -80.0581),
    "orlando, fl": Coordinate(28.5383, -81.3792),
    "lakeland, fl": Coordinate(28.0395, -81.9498),
    "hollywood, fl": Coordinate(26.0112, -80.1495),
    "gainesville, fl": Coordinate(29.6516, -82.3248),
    "bay lake, fl": Coordinate(28.3852, -81.5742),
    # Nebraska / Iowa
    "bellevue, ne": Coordinate(41.136583, -95.9089957),
    "lincoln, ne": Coordinate(40.8121584, -96.7001144),
    "omaha, ne": Coordinate(41.2569361, -95.9405804),
    "cedar rapids, ia": Coordinate(42.0032772, -91.7106529),
    "council bluffs, ia": Coordinate(41.2594718, -95.8506318),
    "des moines, ia": Coordinate(41.6149605, -93.6712262),
    "waterloo, ia": Coordinate(42.4928, -92.3426),
    # Mid-Atlantic
    "philadelphia, pa": Coordinate(39.9526, -75.1652),
    "baltimore, md": Coordinate(39.2904, -76.6122),
    "arlington, va": Coordinate(38.8816, -77.0910),
}
