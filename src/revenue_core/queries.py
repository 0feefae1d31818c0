"""Revenue queries for the dashboard.

Two read-only queries sit on top of the aggregator:

- get_revenue_data: one revenue series across the selected products.
- get_product_revenue_breakdown: one series per product.

Both accept the same filters, push them down to the store, aggregate the
returned rows and sort the points ascending by period (breakdown ties are
ordered by product_id). They are idempotent and keep no state between calls.

Example:
    >>> from revenue_core.queries import get_revenue_data
    >>> points = get_revenue_data(store, {"granularity": "daily", "product_ids": [1]})
    >>> [p.to_dict() for p in points]
    [{'period': '2024-01-15', 'revenue': Decimal('40.00'), 'product_id': 1, ...}]
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any

import pandas as pd

from revenue_core.aggregate import aggregate_revenue
from revenue_core.exceptions import ValidationError
from revenue_core.models import RevenueDataPoint
from revenue_core.periods import DEFAULT_GRANULARITY, local_date, validate_granularity
from revenue_core.store import SalesFilter, SalesStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RevenueQuery:
    """Validated filters for a revenue query.

    Attributes:
        product_ids: Restrict to these products. Empty means all products.
        start_date: Inclusive lower bound on the sale date.
        end_date: Inclusive upper bound on the sale date.
        granularity: yearly, monthly, weekly or daily (default: monthly).
    """

    product_ids: tuple[int, ...] = ()
    start_date: date | None = None
    end_date: date | None = None
    granularity: str = DEFAULT_GRANULARITY

    def to_filter(self) -> SalesFilter:
        return SalesFilter(
            product_ids=self.product_ids,
            start_date=self.start_date,
            end_date=self.end_date,
        )


def parse_date(value: Any, field_name: str) -> date | None:
    """Parse a date filter given as a date, datetime or ISO string. None passes through."""
    if value is None:
        return None
    if isinstance(value, date):
        return local_date(value)
    if not isinstance(value, str):
        raise ValidationError(f"Invalid {field_name}: {value!r}")
    try:
        parsed = pd.to_datetime(value)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"Invalid {field_name}: {value!r}") from e
    if pd.isna(parsed):
        raise ValidationError(f"Invalid {field_name}: {value!r}")
    return local_date(parsed)


def _parse_product_ids(value: Any) -> tuple[int, ...]:
    if value is None:
        return ()
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise ValidationError(f"product_ids must be a list of integers, got {value!r}")

    product_ids = []
    for product_id in value:
        if isinstance(product_id, bool) or not isinstance(product_id, int):
            raise ValidationError(f"product_ids must be integers, got {product_id!r}")
        product_ids.append(product_id)
    return tuple(product_ids)


def parse_query(payload: Mapping[str, Any]) -> RevenueQuery:
    """Validate raw query input (e.g. a decoded JSON body) into a RevenueQuery.

    Args:
        payload: Mapping with optional keys product_ids, start_date,
            end_date and granularity. Dates may be date objects or ISO strings.

    Returns:
        RevenueQuery with normalized values.

    Raises:
        ValidationError: If granularity is unknown, a date cannot be parsed,
            start_date is after end_date, or product_ids are not integers.

    """
    granularity = validate_granularity(payload.get("granularity"))
    start_date = parse_date(payload.get("start_date"), "start_date")
    end_date = parse_date(payload.get("end_date"), "end_date")

    if start_date is not None and end_date is not None and start_date > end_date:
        raise ValidationError(f"start_date {start_date} is after end_date {end_date}")

    return RevenueQuery(
        product_ids=_parse_product_ids(payload.get("product_ids")),
        start_date=start_date,
        end_date=end_date,
        granularity=granularity,
    )


def _coerce_query(query: RevenueQuery | Mapping[str, Any]) -> RevenueQuery:
    if isinstance(query, RevenueQuery):
        # Re-run validation for instances built directly
        return parse_query(
            {
                "product_ids": query.product_ids,
                "start_date": query.start_date,
                "end_date": query.end_date,
                "granularity": query.granularity,
            }
        )
    return parse_query(query)


def get_revenue_data(
    store: SalesStore,
    query: RevenueQuery | Mapping[str, Any],
) -> list[RevenueDataPoint]:
    """Total revenue per period across the selected products.

    Points carry product_id/product_name only when all matching sales belong
    to a single product.

    Args:
        store: Store providing fetch_sales.
        query: RevenueQuery or raw mapping of filters.

    Returns:
        Data points sorted ascending by period; empty when nothing matches.

    Raises:
        ValidationError: If the filters are invalid.

    """
    query = _coerce_query(query)
    logger.info(
        "Revenue query: granularity=%s products=%s range=%s..%s",
        query.granularity,
        list(query.product_ids) or "all",
        query.start_date,
        query.end_date,
    )

    rows = store.fetch_sales(query.to_filter())
    points = aggregate_revenue(rows, query.granularity, group_by_product=False)
    return sorted(points, key=lambda p: p.period)


def get_product_revenue_breakdown(
    store: SalesStore,
    query: RevenueQuery | Mapping[str, Any],
) -> list[RevenueDataPoint]:
    """Revenue per product and period.

    Args:
        store: Store providing fetch_sales.
        query: RevenueQuery or raw mapping of filters.

    Returns:
        Data points sorted ascending by period, then by product_id; every
        point carries its product. Empty when nothing matches.

    Raises:
        ValidationError: If the filters are invalid.

    """
    query = _coerce_query(query)
    logger.info(
        "Product breakdown query: granularity=%s products=%s range=%s..%s",
        query.granularity,
        list(query.product_ids) or "all",
        query.start_date,
        query.end_date,
    )

    rows = store.fetch_sales(query.to_filter())
    points = aggregate_revenue(rows, query.granularity, group_by_product=True)
    return sorted(points, key=lambda p: (p.period, p.product_id))


def to_frame(points: Iterable[RevenueDataPoint]) -> pd.DataFrame:
    """Tabular view of data points (period, revenue[, product_id, product_name])."""
    records = [p.to_dict() for p in points]
    if not records:
        return pd.DataFrame(columns=["period", "revenue"])
    return pd.DataFrame(records)
