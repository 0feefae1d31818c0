"""Tests for period labels."""

import time
from datetime import date, datetime, timezone

import pandas as pd
import pytest

from revenue_core.exceptions import ValidationError
from revenue_core.periods import (
    GRANULARITIES,
    format_period,
    period_start,
    validate_granularity,
    week_start,
)


@pytest.fixture
def new_york_tz(monkeypatch: pytest.MonkeyPatch):
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset not available on this platform")
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.mark.parametrize(
    "granularity, expected",
    [
        ("yearly", "2024"),
        ("monthly", "2024-01"),
        ("weekly", "2024-01-14"),
        ("daily", "2024-01-15"),
    ],
)
def test_format_period_labels(granularity: str, expected: str) -> None:
    assert format_period(datetime(2024, 1, 15, 10, 30), granularity) == expected


def test_format_period_zero_pads() -> None:
    assert format_period(date(987, 3, 4), "daily") == "0987-03-04"
    assert format_period(date(2024, 9, 1), "monthly") == "2024-09"


def test_weekly_label_is_sunday_on_or_before() -> None:
    # 2024-01-07 is a Sunday, 2024-01-13 the following Saturday
    assert format_period(date(2024, 1, 7), "weekly") == "2024-01-07"
    assert format_period(date(2024, 1, 13), "weekly") == "2024-01-07"
    assert format_period(date(2024, 1, 14), "weekly") == "2024-01-14"


def test_weekly_label_crosses_year_boundary() -> None:
    # Monday 2024-01-01 belongs to the week starting Sunday 2023-12-31
    assert format_period(date(2024, 1, 1), "weekly") == "2023-12-31"
    assert format_period(date(2023, 12, 31), "weekly") == "2023-12-31"


def test_accepts_pandas_timestamp() -> None:
    assert format_period(pd.Timestamp("2024-02-29 23:59:59"), "daily") == "2024-02-29"


def test_time_of_day_does_not_change_bucket() -> None:
    start = datetime(2024, 1, 15, 0, 0, 0)
    end = datetime(2024, 1, 15, 23, 59, 59)
    for granularity in GRANULARITIES:
        assert format_period(start, granularity) == format_period(end, granularity)


def test_aware_timestamps_use_local_calendar(new_york_tz: None) -> None:
    # 03:00 UTC on Jan 1 is still Dec 31 in New York
    ts = datetime(2024, 1, 1, 3, 0, tzinfo=timezone.utc)
    assert format_period(ts, "daily") == "2023-12-31"
    assert format_period(ts, "yearly") == "2023"
    assert format_period(pd.Timestamp(ts), "monthly") == "2023-12"


@pytest.mark.parametrize("granularity", GRANULARITIES)
def test_lexicographic_order_is_chronological(granularity: str) -> None:
    days = pd.date_range("2023-11-20", "2024-02-10", freq="D")
    labels = [format_period(d, granularity) for d in days]
    # Labels never go backwards as time moves forward
    assert labels == sorted(labels)
    assert format_period(date(2023, 12, 31), granularity) <= format_period(
        date(2024, 1, 1), granularity
    )


def test_daily_year_boundary_sorts_chronologically() -> None:
    assert format_period(date(2023, 12, 31), "daily") < format_period(date(2024, 1, 1), "daily")


def test_unknown_granularity_is_rejected() -> None:
    with pytest.raises(ValidationError, match="Invalid granularity"):
        format_period(date(2024, 1, 1), "hourly")


def test_validate_granularity_defaults_to_monthly() -> None:
    assert validate_granularity(None) == "monthly"


def test_week_start_returns_sunday() -> None:
    for offset in range(7):
        d = date(2024, 3, 10 + offset)
        assert week_start(d).weekday() == 6
        assert 0 <= (d - week_start(d)).days < 7


@pytest.mark.parametrize(
    "label, granularity, expected",
    [
        ("2024", "yearly", date(2024, 1, 1)),
        ("2024-03", "monthly", date(2024, 3, 1)),
        ("2024-03-10", "weekly", date(2024, 3, 10)),
        ("2024-03-12", "daily", date(2024, 3, 12)),
    ],
)
def test_period_start(label: str, granularity: str, expected: date) -> None:
    assert period_start(label, granularity) == expected


def test_period_start_rejects_bad_labels() -> None:
    with pytest.raises(ValidationError):
        period_start("2024-W03", "weekly")
    with pytest.raises(ValidationError, match="not a Sunday"):
        period_start("2024-03-12", "weekly")
