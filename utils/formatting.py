"""
Date and money formatting shared by the routes and the exporters.
"""
from datetime import date, datetime, timezone
from typing import Optional, Union

DateLike = Union[str, date, datetime, None]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_date_like(value: DateLike) -> Optional[datetime]:
    """Parse an ISO date/datetime string (or pass through date objects) to a datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def format_date(value: DateLike) -> str:
    """DD/MM/YYYY"""
    parsed = parse_date_like(value)
    if parsed is None:
        return "" if not value else str(value)
    return parsed.strftime("%d/%m/%Y")


def format_us_date(value: DateLike) -> str:
    """MM/DD/YYYY, used by the CSV export."""
    parsed = parse_date_like(value)
    if parsed is None:
        return "" if not value else str(value)
    return parsed.strftime("%m/%d/%Y")


def format_long_date(value: DateLike, empty: str = "N/A") -> str:
    """'May 1, 2025' style used by the PDFs and the KML export."""
    if not value:
        return empty
    parsed = parse_date_like(value)
    if parsed is None:
        return str(value)
    return f"{parsed.strftime('%b')} {parsed.day}, {parsed.year}"


def format_clock(value: DateLike) -> str:
    """HH:MM of a datetime, empty for plain dates."""
    parsed = parse_date_like(value)
    if parsed is None or (isinstance(value, str) and "T" not in value and " " not in value):
        return ""
    if isinstance(value, date) and not isinstance(value, datetime):
        return ""
    return parsed.strftime("%H:%M")


def plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"
