"""Date manipulation utilities"""

import re
from datetime import date

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)

_MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def parse_iso_date(value: str) -> date | None:
    """Parse a strict YYYY-MM-DD string, None if malformed or not a real calendar day"""
    if not _ISO_DATE_RE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def format_display_date(value: date) -> str:
    """Format a date the way it is shown to consumers, e.g. 'Mar 1, 2025'"""
    return f"{_MONTH_ABBREVIATIONS[value.month - 1]} {value.day}, {value.year}"
