"""Example: Dashboard revenue series from a CSV ledger

This example records a few sales into a CSV ledger and prints the two
dashboard queries (total series and per-product breakdown) at weekly
granularity, followed by the headline metrics.

Prerequisites:
- Install the package: pip install -e .
- The ledger directory is created if it does not exist (modify path below)
"""

from datetime import date
from pathlib import Path

from revenue_core import CsvSalesStore, LedgerPaths, summarize_revenue
from revenue_core.queries import get_product_revenue_breakdown, get_revenue_data, to_frame

paths = LedgerPaths.from_root(Path("data") / "example_ledger")
store = CsvSalesStore(paths)

# Seed the ledger on first run
if not store.list_products():
    coffee = store.create_product("Coffee", "3.50", description="Drip coffee")
    bagel = store.create_product("Bagel", "2.25")
    store.create_sale(coffee.id, 2, "3.50", date(2024, 1, 14))
    store.create_sale(bagel.id, 1, "2.25", date(2024, 1, 15))
    store.create_sale(coffee.id, 1, "3.50", date(2024, 1, 22))
    store.create_sale(bagel.id, 4, "2.25", date(2024, 1, 27))

query = {"granularity": "weekly", "start_date": "2024-01-01", "end_date": "2024-01-31"}

print("Total revenue per week (weeks start on Sunday):")
points = get_revenue_data(store, query)
print(to_frame(points).to_string(index=False))

print("\nRevenue per product and week:")
print(to_frame(get_product_revenue_breakdown(store, query)).to_string(index=False))

summary = summarize_revenue(points, "weekly")
print(f"\nTotal:   {summary.total_revenue} across {summary.periods} {summary.period_unit}")
print(f"Average: {summary.average_revenue:.2f}")
print(f"Peak:    {summary.peak_revenue}")
print(f"Trend:   {summary.trend_direction}")
