"""Datetime utilities for timezone-aware UTC timestamps and period dates.

Usage:
    from shop_dashboard.utils.datetime_utils import utc_now, parse_date

    # For SQLAlchemy Column defaults
    created_at = Column(DateTime, default=utc_now)
"""

from datetime import date, datetime, timezone
from typing import Optional, Union

DateLike = Union[date, datetime, str]


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def parse_date(value: Optional[DateLike]) -> Optional[date]:
    """
    Coerce a period boundary into a date.

    Accepts date and datetime objects and ISO-8601 strings
    ("2024-01-31" or "2024-01-31T09:00:00").

    Returns:
        The date, or None if the value cannot be interpreted
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def to_date_string(value: date) -> str:
    """Format a date as YYYY-MM-DD."""
    return value.strftime("%Y-%m-%d")
