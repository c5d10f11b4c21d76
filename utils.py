"""Small parsing/formatting helpers shared by the blueprints and services."""

from datetime import datetime

# largest value an INTEGER column holds (signed 64-bit)
MAX_STORED_INT = 2**63 - 1


def parse_int(value):
    """Parse a form/JSON value into an int, or None if it is not a whole number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    s = str(value).strip()
    if not s:
        return None
    try:
        return int(s)
    except ValueError:
        return None


def clean_str(value) -> str:
    return str(value).strip() if value is not None else ""


def isoformat(dt: datetime | None) -> str | None:
    """ISO-8601 with a trailing Z; stored timestamps are naive UTC."""
    if dt is None:
        return None
    return dt.isoformat(timespec="milliseconds") + "Z"
