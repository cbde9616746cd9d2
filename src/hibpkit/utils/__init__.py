"""hibpkit utilities."""

from hibpkit.utils.datetime import parse_hibp_date, parse_iso

__all__ = [
    "parse_iso",
    "parse_hibp_date",
]
