"""Static per-region city coordinates used when nothing better is cached."""

from relationship_api.lib.mapping.regions import DEFAULT_REGION

CITY_COORDINATES: dict[str, dict[str, tuple[float, float]]] = {
    "FLORIDA": {
        "miami": (25.7617, -80.1918),
        "tampa": (27.9506, -82.4572),
        "orlando": (28.5383, -81.3792),
        "jacksonville": (30.3322, -81.6557),
        "tallahassee": (30.4518, -84.27277),
        "fort lauderdale": (26.1224, -80.1373),
        "st. petersburg": (27.7676, -82.6403),
        "saint petersburg": (27.7676, -82.6403),
        "gainesville": (29.6516, -82.3248),
        "west palm beach": (26.7153, -80.0534),
        "palm beach": (26.7153, -80.0534),
        "naples": (26.1420, -81.7948),
        "fort myers": (26.5628, -81.8495),
        "cape coral": (26.5629, -81.9495),
        "pensacola": (30.4213, -87.2169),
        "sarasota": (27.3364, -82.5307),
        "bradenton": (27.4989, -82.5748),
        "clearwater": (27.9659, -82.8001),
        "lakeland": (28.0395, -81.9498),
        "melbourne": (28.0836, -80.6081),
        "cocoa": (28.3861, -80.7420),
        "titusville": (28.6122, -80.8075),
        "key west": (24.5551, -81.7800),
        "marathon": (24.7140, -81.0890),
        "ocala": (29.1872, -82.1401),
        "panama city": (30.1588, -85.6602),
        "st. augustine": (29.9012, -81.3124),
        "sanford": (28.8028, -81.2695),
        "kissimmee": (28.2916, -81.4077),
        "port st. lucie": (27.2730, -80.3582),
        "stuart": (27.1973, -80.2528),
        "vero beach": (27.6386, -80.3977),
    },
    "NEBRASKA_IOWA": {
        "omaha": (41.2565, -95.9345),
        "lincoln": (40.8136, -96.7026),
        "bellevue": (41.1544, -95.9146),
        "grand island": (40.9264, -98.3420),
        "kearney": (40.6993, -99.0817),
        "hastings": (40.5862, -98.3889),
        "north platte": (41.1239, -100.7654),
        "columbus": (41.4297, -97.3684),
        "des moines": (41.5868, -93.6250),
        "cedar rapids": (41.9779, -91.6656),
        "davenport": (41.5236, -90.5776),
        "sioux city": (42.4963, -96.4049),
        "iowa city": (41.6611, -91.5302),
        "waterloo": (42.4928, -92.3426),
        "council bluffs": (41.2619, -95.8608),
        "ames": (42.0308, -93.6320),
        "dubuque": (42.5006, -90.6646),
        "ankeny": (41.7317, -93.6001),
        "west des moines": (41.5772, -93.7113),
        "cedar falls": (42.5349, -92.4453),
    },
}


def _table_for(region: str | None) -> dict[str, tuple[float, float]]:
    code = (region or DEFAULT_REGION).strip().upper()
    if code in CITY_COORDINATES:
        return CITY_COORDINATES[code]
    # National (and anything unknown) searches every region
    merged: dict[str, tuple[float, float]] = {}
    for table in CITY_COORDINATES.values():
        merged.update(table)
    return merged


def get_city_coordinates(city: str, region: str | None = None) -> tuple[float, float] | None:
    """Look up a city in the static table for a region.

    Tries an exact normalized match first, then a substring match in either
    direction ("Miami Beach" finds "miami"), in table order.

    Returns:
        ``(lat, lng)`` or None.
    """
    normalized = " ".join(city.split()).lower()
    if not normalized:
        return None
    table = _table_for(region)
    if normalized in table:
        return table[normalized]
    for name, coords in table.items():
        if name in normalized or normalized in name:
            return coords
    return None
