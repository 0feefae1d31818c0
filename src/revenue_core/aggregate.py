"""Revenue aggregation: bucket sales into calendar periods and sum them.

This module turns sale rows (as returned by a SalesStore) into
RevenueDataPoint objects, either one series across all products or one
series per product. It never reads or writes a store.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import asdict
from decimal import Decimal

import pandas as pd

from revenue_core.exceptions import DataQualityError
from revenue_core.models import ProductTag, RevenueDataPoint, SaleRecord, to_decimal
from revenue_core.periods import format_period, validate_granularity

logger = logging.getLogger(__name__)

SALE_COLUMNS = ["product_id", "product_name", "amount", "sale_timestamp"]


def records_to_frame(records: Iterable[SaleRecord]) -> pd.DataFrame:
    """Build a sales frame (SALE_COLUMNS) from SaleRecord objects."""
    return pd.DataFrame([asdict(r) for r in records], columns=SALE_COLUMNS)


def _decimal_sum(values: pd.Series) -> Decimal:
    return sum(values, Decimal(0))


def _prepare_rows(rows: pd.DataFrame | Iterable[SaleRecord]) -> pd.DataFrame:
    """Validate sale rows and return a copy with Decimal amounts."""
    df = rows if isinstance(rows, pd.DataFrame) else records_to_frame(rows)

    missing_cols = [col for col in SALE_COLUMNS if col not in df.columns]
    if missing_cols:
        raise DataQualityError(
            f"Missing required columns in sales rows: {missing_cols}. Required: {SALE_COLUMNS}"
        )

    df = df[SALE_COLUMNS].copy()
    if df.empty:
        return df

    null_errors = []
    for col in SALE_COLUMNS:
        null_count = df[col].isna().sum()
        if null_count > 0:
            null_errors.append(f"{col}: {null_count} nulls")
    if null_errors:
        raise DataQualityError(f"Null values in sales rows: {', '.join(null_errors)}")

    try:
        df["amount"] = df["amount"].map(to_decimal)
    except ValueError as e:
        raise DataQualityError(str(e)) from e

    neg_count = sum(1 for amount in df["amount"] if amount < 0)
    if neg_count > 0:
        raise DataQualityError(f"amount: {neg_count} negative values")

    df["product_id"] = df["product_id"].astype("int64")
    df["product_name"] = df["product_name"].astype(str)
    return df


def aggregate_revenue(
    rows: pd.DataFrame | Iterable[SaleRecord],
    granularity: str,
    group_by_product: bool = False,
) -> list[RevenueDataPoint]:
    """Sum sale amounts per calendar period.

    Args:
        rows: Sales frame with columns product_id, product_name, amount,
            sale_timestamp, or an iterable of SaleRecord.
        granularity: One of yearly, monthly, weekly, daily.
        group_by_product: If False, one point per period across all products.
            If True, one point per (product, period).

    Returns:
        Data points in no particular order. Empty input gives an empty list.

        Without grouping, points carry the product only when every row in
        ``rows`` belongs to the same product. With grouping, every point
        carries its product.

    Raises:
        ValidationError: If granularity is unknown.
        DataQualityError: If columns are missing, values are null or an
            amount is negative.

    """
    granularity = validate_granularity(granularity)
    df = _prepare_rows(rows)
    if df.empty:
        return []

    df["period"] = df["sale_timestamp"].map(lambda ts: format_period(ts, granularity))

    keys = ["product_id", "period"] if group_by_product else ["period"]
    grouped = (
        df.groupby(keys, sort=False)
        .agg(revenue=("amount", _decimal_sum), product_name=("product_name", "first"))
        .reset_index()
    )

    if group_by_product:
        points = [
            RevenueDataPoint(
                period=row.period,
                revenue=row.revenue,
                product=ProductTag(int(row.product_id), row.product_name),
            )
            for row in grouped.itertuples(index=False)
        ]
    else:
        product = None
        if df["product_id"].nunique() == 1 and df["product_name"].nunique() == 1:
            product = ProductTag(int(df["product_id"].iloc[0]), df["product_name"].iloc[0])
        points = [
            RevenueDataPoint(period=row.period, revenue=row.revenue, product=product)
            for row in grouped.itertuples(index=False)
        ]

    logger.debug(
        "Aggregated %d sale rows into %d %s points (group_by_product=%s)",
        len(df),
        len(points),
        granularity,
        group_by_product,
    )
    return points
