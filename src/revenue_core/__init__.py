"""Revenue Core - time-bucketed revenue aggregates from a sales ledger.

This package computes the revenue series shown on a sales dashboard:

- **Period labels**: yearly (2024), monthly (2024-01), weekly (Sunday-start
  date, 2024-01-14) and daily (2024-01-15) buckets
- **Aggregation**: exact Decimal sums per period, or per product and period
- **Queries**: total revenue series and per-product breakdown, filtered by
  product ids and an inclusive date range
- **Metrics**: total, average, peak and trend of a series

Module Structure:
    revenue_core.periods: Granularities and period labels
    revenue_core.aggregate: Revenue aggregator
    revenue_core.queries: get_revenue_data, get_product_revenue_breakdown
    revenue_core.store: SalesStore contract, in-memory and CSV ledgers
    revenue_core.metrics: Dashboard summary metrics
    revenue_core.config: LedgerPaths configuration

Quick Start:
    >>> from revenue_core import InMemorySalesStore, get_revenue_data
    >>>
    >>> store = InMemorySalesStore()
    >>> coffee = store.create_product("Coffee", "3.50")
    >>> _ = store.create_sale(coffee.id, quantity=2, unit_price="3.50")
    >>>
    >>> points = get_revenue_data(store, {"granularity": "daily"})
    >>> points[0].revenue
    Decimal('7.00')
"""

__version__ = "0.1.0"

from revenue_core.aggregate import aggregate_revenue
from revenue_core.config import LedgerPaths
from revenue_core.exceptions import (
    ConfigError,
    DataQualityError,
    ProductNotFoundError,
    RevenueAPIError,
    StoreError,
    ValidationError,
)
from revenue_core.metrics import RevenueSummary, summarize_revenue
from revenue_core.models import ProductTag, RevenueDataPoint, SaleRecord
from revenue_core.periods import GRANULARITIES, format_period
from revenue_core.queries import (
    RevenueQuery,
    get_product_revenue_breakdown,
    get_revenue_data,
    parse_query,
)
from revenue_core.store import CsvSalesStore, InMemorySalesStore, SalesFilter, SalesStore

__all__ = [
    "GRANULARITIES",
    "ConfigError",
    "CsvSalesStore",
    "DataQualityError",
    "InMemorySalesStore",
    "LedgerPaths",
    "ProductNotFoundError",
    "ProductTag",
    "RevenueAPIError",
    "RevenueDataPoint",
    "RevenueQuery",
    "RevenueSummary",
    "SaleRecord",
    "SalesFilter",
    "SalesStore",
    "StoreError",
    "ValidationError",
    "__version__",
    "aggregate_revenue",
    "format_period",
    "get_product_revenue_breakdown",
    "get_revenue_data",
    "parse_query",
    "summarize_revenue",
]
