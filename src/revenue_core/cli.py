"""Command-line interface for the revenue ledger.

Examples:
    revenue-core --data-root data add-product "Widget" --price 9.99
    revenue-core --data-root data add-sale 1 --quantity 3 --unit-price 9.99
    revenue-core --data-root data revenue --granularity weekly --summary
    revenue-core --data-root data revenue --breakdown --product-id 1 --product-id 2 --json

The data root defaults to $REVENUE_CORE_DATA, or "data" when unset.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Sequence

from revenue_core.config import LedgerPaths
from revenue_core.exceptions import RevenueAPIError, ValidationError
from revenue_core.metrics import summarize_revenue
from revenue_core.periods import DEFAULT_GRANULARITY, GRANULARITIES
from revenue_core.queries import (
    get_product_revenue_breakdown,
    get_revenue_data,
    parse_date,
    parse_query,
    to_frame,
)
from revenue_core.store import CsvSalesStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="revenue-core",
        description="Record sales and query time-bucketed revenue.",
    )
    parser.add_argument(
        "--data-root",
        type=str,
        help="Directory holding products.csv and sales.csv "
        "(default: $REVENUE_CORE_DATA or 'data')",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    revenue = subparsers.add_parser("revenue", help="Revenue per period")
    revenue.add_argument(
        "--granularity",
        default=DEFAULT_GRANULARITY,
        choices=GRANULARITIES,
        help=f"Period width (default: {DEFAULT_GRANULARITY})",
    )
    revenue.add_argument(
        "--product-id",
        dest="product_ids",
        type=int,
        action="append",
        help="Restrict to a product (repeatable)",
    )
    revenue.add_argument("--start-date", help="Inclusive start date (YYYY-MM-DD)")
    revenue.add_argument("--end-date", help="Inclusive end date (YYYY-MM-DD)")
    revenue.add_argument(
        "--breakdown",
        action="store_true",
        help="One series per product instead of a single total series",
    )
    revenue.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    revenue.add_argument(
        "--summary",
        action="store_true",
        help="Also print total, average, peak and trend",
    )

    add_product = subparsers.add_parser("add-product", help="Add a product")
    add_product.add_argument("name")
    add_product.add_argument("--price", required=True)
    add_product.add_argument("--description")

    add_sale = subparsers.add_parser("add-sale", help="Record a sale")
    add_sale.add_argument("product_id", type=int)
    add_sale.add_argument("--quantity", type=int, required=True)
    add_sale.add_argument("--unit-price", required=True)
    add_sale.add_argument("--sale-date", help="Sale date (YYYY-MM-DD); defaults to now")

    subparsers.add_parser("products", help="List products")
    return parser


def _run_revenue(store: CsvSalesStore, args: argparse.Namespace) -> None:
    query = parse_query(
        {
            "product_ids": args.product_ids,
            "start_date": args.start_date,
            "end_date": args.end_date,
            "granularity": args.granularity,
        }
    )
    if args.breakdown:
        points = get_product_revenue_breakdown(store, query)
    else:
        points = get_revenue_data(store, query)

    if args.json:
        print(json.dumps([p.to_dict() for p in points], default=str, indent=2))
    elif points:
        print(to_frame(points).to_string(index=False))
    else:
        print("No sales match the given filters.")

    if args.summary and not args.breakdown:
        summary = summarize_revenue(points, query.granularity)
        trend = (
            "No change"
            if summary.trend_percent is None
            else f"{abs(summary.trend_percent):.1f}% ({summary.trend_direction})"
        )
        print(f"\nTotal revenue:   {summary.total_revenue} across {summary.periods} "
              f"{summary.period_unit}")
        print(f"Average revenue: {summary.average_revenue:.2f}")
        print(f"Peak revenue:    {summary.peak_revenue}")
        print(f"Trend:           {trend}")


def _run_add_sale(store: CsvSalesStore, args: argparse.Namespace) -> None:
    sale_date = None
    if args.sale_date:
        sale_date = parse_date(args.sale_date, "sale_date")
    sale = store.create_sale(args.product_id, args.quantity, args.unit_price, sale_date)
    print(f"[OK] Sale {sale.id}: {sale.quantity} x {sale.unit_price} = {sale.total_amount}")


def main(argv: Sequence[str] | None = None) -> int:
    """Main CLI entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        paths = LedgerPaths.from_root(args.data_root) if args.data_root else LedgerPaths.from_env()
        store = CsvSalesStore(paths)

        if args.command == "revenue":
            _run_revenue(store, args)
        elif args.command == "add-product":
            product = store.create_product(args.name, args.price, args.description)
            print(f"[OK] Product {product.id}: {product.name} ({product.price})")
        elif args.command == "add-sale":
            _run_add_sale(store, args)
        else:  # products
            for product in store.list_products():
                print(f"{product.id}\t{product.name}\t{product.price}")

    except ValidationError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2
    except RevenueAPIError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
