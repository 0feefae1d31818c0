"""Sales ledger stores.

The aggregation engine only needs one capability from a store:
``fetch_sales(filters)`` returning sale rows joined with product names. This
module defines that contract (SalesStore) and two ledgers implementing it,
plus the product/sale creation operations that feed them:

- InMemorySalesStore: process-local lists, used by tests and embedding code.
- CsvSalesStore: products.csv / sales.csv under a LedgerPaths root.

Example:
    >>> from revenue_core.store import InMemorySalesStore, SalesFilter
    >>> store = InMemorySalesStore()
    >>> widget = store.create_product("Widget", "9.99")
    >>> _ = store.create_sale(widget.id, quantity=3, unit_price="9.99")
    >>> store.fetch_sales(SalesFilter(product_ids=(widget.id,)))["amount"].tolist()
    [Decimal('29.97')]
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import asdict, dataclass
from datetime import date, datetime
from pathlib import Path
from decimal import Decimal
from typing import Any, Protocol

import pandas as pd

from revenue_core.aggregate import SALE_COLUMNS
from revenue_core.config import LedgerPaths
from revenue_core.exceptions import ProductNotFoundError, StoreError, ValidationError
from revenue_core.models import Product, Sale, to_decimal
from revenue_core.periods import local_date

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = ["id", "name", "description", "price", "created_at"]
SALE_TABLE_COLUMNS = [
    "id",
    "product_id",
    "quantity",
    "unit_price",
    "total_amount",
    "sale_date",
    "created_at",
]


@dataclass(frozen=True)
class SalesFilter:
    """Predicates a store applies before returning sale rows.

    Attributes:
        product_ids: Restrict to these product ids. Empty means all products.
        start_date: Inclusive lower bound on the sale's calendar date.
        end_date: Inclusive upper bound on the sale's calendar date.
    """

    product_ids: tuple[int, ...] = ()
    start_date: date | None = None
    end_date: date | None = None


class SalesStore(Protocol):
    """Read capability the revenue queries depend on."""

    def fetch_sales(self, filters: SalesFilter | None = None) -> pd.DataFrame:
        """Return sale rows (SALE_COLUMNS) matching filters, in any order."""
        ...


def filter_sales(df: pd.DataFrame, filters: SalesFilter | None) -> pd.DataFrame:
    """Apply a SalesFilter to a sales frame with SALE_COLUMNS."""
    if filters is None or df.empty:
        return df

    if filters.product_ids:
        df = df[df["product_id"].isin(list(filters.product_ids))]

    if filters.start_date is not None or filters.end_date is not None:
        sale_dates = df["sale_timestamp"].map(local_date)
        mask = pd.Series(True, index=df.index)
        if filters.start_date is not None:
            mask &= sale_dates >= local_date(filters.start_date)
        if filters.end_date is not None:
            mask &= sale_dates <= local_date(filters.end_date)
        df = df[mask]

    return df


def _to_naive_local(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value
    return datetime(value.year, value.month, value.day)


class LedgerStore(ABC):
    """Product catalogue plus sales ledger.

    Subclasses provide the two tables as DataFrames and persist new rows;
    this class implements validation, id assignment and the joined
    ``fetch_sales`` read.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self._clock = clock

    @abstractmethod
    def _products_frame(self) -> pd.DataFrame:
        """All products with PRODUCT_COLUMNS."""

    @abstractmethod
    def _sales_frame(self) -> pd.DataFrame:
        """All sales with SALE_TABLE_COLUMNS."""

    @abstractmethod
    def _save_product(self, product: Product) -> None: ...

    @abstractmethod
    def _save_sale(self, sale: Sale) -> None: ...

    def list_products(self) -> list[Product]:
        df = self._products_frame()
        return [
            Product(
                id=int(row.id),
                name=str(row.name),
                description=_optional_text(row.description),
                price=row.price,
                created_at=pd.Timestamp(row.created_at).to_pydatetime(),
            )
            for row in df.itertuples(index=False)
        ]

    def get_product(self, product_id: int) -> Product | None:
        for product in self.list_products():
            if product.id == product_id:
                return product
        return None

    def create_product(
        self,
        name: str,
        price: Any,
        description: str | None = None,
    ) -> Product:
        """Add a product to the catalogue.

        Raises:
            ValidationError: If name is blank or price is not a positive amount.

        """
        if not name or not name.strip():
            raise ValidationError("Product name must not be empty")
        price = _positive_amount(price, "price")

        product = Product(
            id=_next_id(self._products_frame()),
            name=name,
            description=description,
            price=price,
            created_at=self._clock(),
        )
        self._save_product(product)
        logger.info("Created product %d (%s)", product.id, product.name)
        return product

    def create_sale(
        self,
        product_id: int,
        quantity: int,
        unit_price: Any,
        sale_date: date | datetime | None = None,
    ) -> Sale:
        """Record a sale of an existing product.

        total_amount is quantity x unit_price. sale_date defaults to now;
        timezone-aware values are stored as naive local time.

        Raises:
            ValidationError: If quantity is not a positive integer or
                unit_price is not a positive amount.
            ProductNotFoundError: If product_id does not exist.

        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError(f"quantity must be a positive integer, got {quantity!r}")
        unit_price = _positive_amount(unit_price, "unit_price")

        if self.get_product(product_id) is None:
            raise ProductNotFoundError(f"Product with id {product_id} does not exist")

        now = self._clock()
        sale = Sale(
            id=_next_id(self._sales_frame()),
            product_id=product_id,
            quantity=quantity,
            unit_price=unit_price,
            total_amount=quantity * unit_price,
            sale_date=_to_naive_local(sale_date) if sale_date is not None else now,
            created_at=now,
        )
        self._save_sale(sale)
        logger.info(
            "Recorded sale %d: product %d x%d = %s",
            sale.id,
            product_id,
            quantity,
            sale.total_amount,
        )
        return sale

    def fetch_sales(self, filters: SalesFilter | None = None) -> pd.DataFrame:
        """Return sales joined with product names, filtered.

        Sales whose product is missing from the catalogue are dropped by the
        inner join.
        """
        sales = self._sales_frame()
        if sales.empty:
            return pd.DataFrame(columns=SALE_COLUMNS)
        products = self._products_frame()[["id", "name"]].rename(
            columns={"id": "product_id", "name": "product_name"}
        )
        joined = sales.merge(products, on="product_id", how="inner").rename(
            columns={"total_amount": "amount", "sale_date": "sale_timestamp"}
        )
        result = filter_sales(joined[SALE_COLUMNS], filters)
        logger.debug("Fetched %d of %d sales", len(result), len(sales))
        return result.reset_index(drop=True)


def _optional_text(value: Any) -> str | None:
    if value is None or (isinstance(value, float) and pd.isna(value)) or value == "":
        return None
    return str(value)


def _positive_amount(value: Any, field_name: str) -> Decimal:
    try:
        amount = to_decimal(value)
    except ValueError as e:
        raise ValidationError(f"{field_name} must be a number, got {value!r}") from e
    if amount <= 0:
        raise ValidationError(f"{field_name} must be positive, got {amount}")
    return amount


def _next_id(df: pd.DataFrame) -> int:
    if df.empty:
        return 1
    return int(df["id"].max()) + 1


def _records_frame(records: Iterable[Any], columns: list[str]) -> pd.DataFrame:
    return pd.DataFrame([asdict(r) for r in records], columns=columns)


class InMemorySalesStore(LedgerStore):
    """Ledger kept in process memory."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        super().__init__(clock)
        self._products: list[Product] = []
        self._sales: list[Sale] = []

    def _products_frame(self) -> pd.DataFrame:
        return _records_frame(self._products, PRODUCT_COLUMNS)

    def _sales_frame(self) -> pd.DataFrame:
        return _records_frame(self._sales, SALE_TABLE_COLUMNS)

    def _save_product(self, product: Product) -> None:
        self._products.append(product)

    def _save_sale(self, sale: Sale) -> None:
        self._sales.append(sale)


class CsvSalesStore(LedgerStore):
    """Ledger persisted as products.csv and sales.csv.

    Money columns are read as text and converted to Decimal so that no
    float rounding enters the ledger.
    """

    def __init__(
        self,
        paths: LedgerPaths,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__(clock)
        self.paths = paths

    def _read_table(
        self,
        path: Path,
        columns: list[str],
        int_columns: list[str],
        money_columns: list[str],
        date_columns: list[str],
    ) -> pd.DataFrame:
        if not path.exists() or path.stat().st_size == 0:
            return pd.DataFrame(columns=columns)
        try:
            # Free text such as a product named "NA" must not become NaN
            df = pd.read_csv(
                path, dtype=str, keep_default_na=False, na_values=[], encoding="utf-8"
            )
        except (OSError, ValueError, pd.errors.ParserError) as e:
            raise StoreError(f"Could not read {path}: {e}") from e

        missing_cols = [col for col in columns if col not in df.columns]
        if missing_cols:
            raise StoreError(f"{path} is missing columns: {missing_cols}")

        df = df[columns].copy()
        try:
            for col in int_columns:
                df[col] = df[col].astype("int64")
            for col in money_columns:
                df[col] = df[col].map(to_decimal)
            for col in date_columns:
                df[col] = pd.to_datetime(df[col], format="ISO8601")
        except (ValueError, TypeError) as e:
            raise StoreError(f"Could not read {path}: {e}") from e
        return df

    def _append_row(self, path: Path, row: dict[str, Any], columns: list[str]) -> None:
        self.paths.ensure_dirs()
        header = not path.exists() or path.stat().st_size == 0
        try:
            pd.DataFrame([row], columns=columns).to_csv(
                path, mode="a", header=header, index=False, encoding="utf-8"
            )
        except OSError as e:
            raise StoreError(f"Could not write {path}: {e}") from e
        logger.debug("Appended row to %s", path)

    def _products_frame(self) -> pd.DataFrame:
        return self._read_table(
            self.paths.products_csv,
            PRODUCT_COLUMNS,
            int_columns=["id"],
            money_columns=["price"],
            date_columns=["created_at"],
        )

    def _sales_frame(self) -> pd.DataFrame:
        return self._read_table(
            self.paths.sales_csv,
            SALE_TABLE_COLUMNS,
            int_columns=["id", "product_id", "quantity"],
            money_columns=["unit_price", "total_amount"],
            date_columns=["sale_date", "created_at"],
        )

    def _save_product(self, product: Product) -> None:
        self._append_row(self.paths.products_csv, asdict(product), PRODUCT_COLUMNS)

    def _save_sale(self, sale: Sale) -> None:
        self._append_row(self.paths.sales_csv, asdict(sale), SALE_TABLE_COLUMNS)
