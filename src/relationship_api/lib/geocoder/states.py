"""US state name/code normalization."""

STATE_CODES: dict[str, str] = {
    "alabama": "AL",
    "alaska": "AK",
    "arizona": "AZ",
    "arkansas": "AR",
    "california": "CA",
    "colorado": "CO",
    "connecticut": "CT",
    "delaware": "DE",
    "district of columbia": "DC",
    "florida": "FL",
    "georgia": "GA",
    "hawaii": "HI",
    "idaho": "ID",
    "illinois": "IL",
    "indiana": "IN",
    "iowa": "IA",
    "kansas": "KS",
    "kentucky": "KY",
    "louisiana": "LA",
    "maine": "ME",
    "maryland": "MD",
    "massachusetts": "MA",
    "michigan": "MI",
    "minnesota": "MN",
    "mississippi": "MS",
    "missouri": "MO",
    "montana": "MT",
    "nebraska": "NE",
    "nevada": "NV",
    "new hampshire": "NH",
    "new jersey": "NJ",
    "new mexico": "NM",
    "new york": "NY",
    "north carolina": "NC",
    "north dakota": "ND",
    "ohio": "OH",
    "oklahoma": "OK",
    "oregon": "OR",
    "pennsylvania": "PA",
    "rhode island": "RI",
    "south carolina": "SC",
    "south dakota": "SD",
    "tennessee": "TN",
    "texas": "TX",
    "utah": "UT",
    "vermont": "VT",
    "virginia": "VA",
    "washington": "WA",
    "west virginia": "WV",
    "wisconsin": "WI",
    "wyoming": "WY",
}


def normalize_state(state: str) -> str:
    """Normalize a state name or code to its two-letter code.

    Args:
        state: Full state name ("Florida") or code ("fl").

    Returns:
        Upper-case two-letter code. Unknown input is returned trimmed and
        upper-cased unchanged, so codes pass through.
    """
    cleaned = " ".join(state.split())
    return STATE_CODES.get(cleaned.lower(), cleaned.upper())


def state_variants(state: str) -> set[str]:
    """Every upper-cased spelling stored rows may use for ``state``.

    ``state_variants("fl")`` is ``{"FL", "FLORIDA"}``, so a filter matches rows
    saved with either the code or the full name.
    """
    code = normalize_state(state)
    return {code} | {name.upper() for name, c in STATE_CODES.items() if c == code}
