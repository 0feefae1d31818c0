"""Headline numbers for a revenue series.

Summarizes the output of get_revenue_data into the dashboard's metric cards:
total, average per period, peak period, and the trend of the last period
against the one before it.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from revenue_core.models import RevenueDataPoint
from revenue_core.periods import PERIOD_UNITS, period_start, validate_granularity

ZERO = Decimal(0)


@dataclass(frozen=True)
class RevenueSummary:
    """Dashboard metrics for one revenue series.

    Attributes:
        total_revenue: Sum of all points.
        average_revenue: total_revenue / periods (0 when there are no points).
        peak_revenue: Highest single-period revenue (0 when there are no points).
        periods: Number of points.
        period_unit: "years", "months", "weeks" or "days".
        trend_percent: Change of the last point against the previous one, in
            percent. None with fewer than two points or a zero previous point.
        trend_direction: "up", "down" or "neutral".
    """

    total_revenue: Decimal
    average_revenue: Decimal
    peak_revenue: Decimal
    periods: int
    period_unit: str
    trend_percent: Decimal | None
    trend_direction: str


def summarize_revenue(
    points: Sequence[RevenueDataPoint],
    granularity: str,
) -> RevenueSummary:
    """Compute dashboard metrics for a revenue series.

    Args:
        points: Output of get_revenue_data. The trend compares the two
            chronologically last points whatever the input order.
        granularity: Granularity the series was computed with.

    Returns:
        RevenueSummary with Decimal amounts.

    Raises:
        ValidationError: If a period label does not belong to granularity.

    """
    granularity = validate_granularity(granularity)
    ordered = sorted(points, key=lambda p: period_start(p.period, granularity))
    revenues = [p.revenue for p in ordered]

    total = sum(revenues, ZERO)
    average = total / len(revenues) if revenues else ZERO
    peak = max(revenues) if revenues else ZERO

    trend_percent = None
    direction = "neutral"
    if len(revenues) >= 2 and revenues[-2] > 0:
        trend_percent = (revenues[-1] - revenues[-2]) / revenues[-2] * 100
        if trend_percent > 0:
            direction = "up"
        elif trend_percent < 0:
            direction = "down"

    return RevenueSummary(
        total_revenue=total,
        average_revenue=average,
        peak_revenue=peak,
        periods=len(revenues),
        period_unit=PERIOD_UNITS[granularity],
        trend_percent=trend_percent,
        trend_direction=direction,
    )
