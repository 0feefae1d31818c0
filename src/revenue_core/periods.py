"""Calendar period labels for revenue buckets.

Every sale is assigned a period label derived from its timestamp and the
requested granularity:

    yearly   -> "2024"
    monthly  -> "2024-01"
    weekly   -> "2024-01-14"  (date of the Sunday that starts the week)
    daily    -> "2024-01-15"

Labels are zero-padded so that sorting them as strings sorts them
chronologically. Calendar fields are read in the local calendar: naive
timestamps are taken as they are, timezone-aware ones are converted to the
local zone first.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Literal

from revenue_core.exceptions import ValidationError

Granularity = Literal["yearly", "monthly", "weekly", "daily"]

GRANULARITIES: tuple[str, ...] = ("yearly", "monthly", "weekly", "daily")
DEFAULT_GRANULARITY = "monthly"

# Plural unit names used by the dashboard metrics ("Across 3 months")
PERIOD_UNITS = {
    "yearly": "years",
    "monthly": "months",
    "weekly": "weeks",
    "daily": "days",
}


def validate_granularity(granularity: str | None) -> str:
    """Return a known granularity, defaulting to monthly when None.

    Raises:
        ValidationError: If granularity is not yearly, monthly, weekly or daily.

    """
    if granularity is None:
        return DEFAULT_GRANULARITY
    if granularity not in GRANULARITIES:
        raise ValidationError(
            f"Invalid granularity '{granularity}'. Must be one of: {', '.join(GRANULARITIES)}."
        )
    return granularity


def local_date(value: date | datetime) -> date:
    """Calendar date of a timestamp in the local calendar."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            # pandas Timestamps need a plain datetime for a no-arg astimezone()
            to_pydatetime = getattr(value, "to_pydatetime", None)
            if to_pydatetime is not None:
                value = to_pydatetime()
            value = value.astimezone()
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Expected a date or datetime, got {type(value).__name__}")


def week_start(d: date) -> date:
    """Sunday on or before d."""
    return d - timedelta(days=(d.weekday() + 1) % 7)


def format_period(timestamp: date | datetime, granularity: str) -> str:
    """Format a timestamp as the label of the period containing it.

    Args:
        timestamp: Sale timestamp (date, datetime or pandas Timestamp).
        granularity: One of yearly, monthly, weekly, daily.

    Returns:
        Period label, e.g. "2024", "2024-01", "2024-01-14", "2024-01-15".

    Raises:
        ValidationError: If granularity is unknown.

    Examples:
        >>> format_period(date(2024, 1, 17), "weekly")
        '2024-01-14'
        >>> format_period(datetime(2024, 1, 15, 23, 59), "monthly")
        '2024-01'

    """
    granularity = validate_granularity(granularity)
    d = local_date(timestamp)

    if granularity == "yearly":
        return f"{d.year:04d}"
    if granularity == "monthly":
        return f"{d.year:04d}-{d.month:02d}"
    if granularity == "weekly":
        d = week_start(d)
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def period_start(label: str, granularity: str) -> date:
    """Return the first calendar day of the period named by label.

    Raises:
        ValidationError: If the label does not match the granularity's format,
            or a weekly label does not name a Sunday.

    """
    granularity = validate_granularity(granularity)
    fmt = {"yearly": "%Y", "monthly": "%Y-%m"}.get(granularity, "%Y-%m-%d")
    try:
        start = datetime.strptime(label, fmt).date()
    except ValueError as e:
        raise ValidationError(f"Invalid {granularity} period label '{label}': {e}") from e

    if granularity == "weekly" and week_start(start) != start:
        raise ValidationError(f"Weekly period label '{label}' is not a Sunday")
    return start
