"""Geography reference loader — parses the county hierarchy export."""

from relationship_api.lib.geography_loader.csv_loader import COLUMN_MAP, REQUIRED_FIELDS, parse_geography_csv

__all__ = ["COLUMN_MAP", "REQUIRED_FIELDS", "parse_geography_csv"]
