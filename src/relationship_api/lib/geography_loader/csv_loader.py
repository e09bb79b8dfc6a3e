"""CSV loader for the county geography reference export.

Parses the county hierarchy export (one row per county with its chapter,
region, and division) into dicts ready for ``import_geography_units``.
Headers may use either the export's names (``GeoID``, ``DCODE``) or the
snake_case column names.
"""

import csv
from pathlib import Path

from loguru import logger

# Export header -> GeographyUnit column
COLUMN_MAP: dict[str, str] = {
    "GeoID": "geo_id",
    "FIPS": "fips",
    "County": "county",
    "County_Long": "county_long",
    "State": "state",
    "Division": "division",
    "DCODE": "division_code",
    "Region": "region",
    "RCODE": "region_code",
    "Chapter": "chapter",
    "ECODE": "chapter_code",
    "Address": "address",
    "Address_2": "address_2",
    "City": "city",
    "Zip": "zip",
    "Phone": "phone",
    "Time_Zone": "time_zone",
    "FEMA_Region": "fema_region",
}

REQUIRED_FIELDS: tuple[str, ...] = ("geo_id", "county", "state", "division", "region", "chapter")

_KNOWN_COLUMNS = frozenset(COLUMN_MAP.values())


def _column_for(header: str) -> str | None:
    header = header.strip()
    if header in COLUMN_MAP:
        return COLUMN_MAP[header]
    snake = header.lower()
    return snake if snake in _KNOWN_COLUMNS else None


def parse_geography_csv(file_path: Path) -> list[dict[str, str | None]]:
    """Parse a geography CSV export.

    Rows missing any of geo_id, county, state, division, region or chapter
    are skipped. Blank optional cells become None; state codes are
    upper-cased.

    Args:
        file_path: Path to the CSV file.

    Returns:
        List of record dicts keyed by GeographyUnit column name.

    Raises:
        ValueError: If the CSV has no header row or lacks a required column.
    """
    logger.info(f"Parsing geography CSV: {file_path}")

    records: list[dict[str, str | None]] = []
    skipped = 0

    with Path.open(file_path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)

        if reader.fieldnames is None:
            msg = f"CSV file has no header row: {file_path}"
            raise ValueError(msg)

        mapping = {header: column for header in reader.fieldnames if (column := _column_for(header))}
        missing = set(REQUIRED_FIELDS) - set(mapping.values())
        if missing:
            msg = f"CSV missing expected columns: {sorted(missing)}"
            raise ValueError(msg)

        for row in reader:
            record: dict[str, str | None] = {}
            for header, column in mapping.items():
                value = (row.get(header) or "").strip()
                record[column] = value or None
            if any(not record.get(name) for name in REQUIRED_FIELDS):
                skipped += 1
                continue
            record["state"] = record["state"].upper()  # type: ignore[union-attr]
            records.append(record)

    logger.info(f"Parsed {len(records)} geography records ({skipped} skipped)")
    return records
