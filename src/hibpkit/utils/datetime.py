"""Datetime helpers for HIBP timestamp fields.

HIBP returns dates as "YYYY-MM-DD" and timestamps as ISO 8601 with a
"Z" suffix. Parsed values are always UTC-aware.
"""

from datetime import UTC, datetime


def parse_iso(iso_string: str) -> datetime:
    """Parse ISO 8601 datetime string.

    Args:
        iso_string: ISO 8601 formatted string

    Returns:
        Datetime object with UTC timezone
    """
    # Handle both "Z" suffix and "+00:00" format
    if iso_string.endswith("Z"):
        iso_string = iso_string[:-1] + "+00:00"
    dt = datetime.fromisoformat(iso_string)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def parse_hibp_date(value: str | None) -> datetime | None:
    """Parse an HIBP date or timestamp, returning None if unparseable."""
    if not value:
        return None
    try:
        return parse_iso(value)
    except ValueError:
        return None
