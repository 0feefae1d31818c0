"""Records exchanged between the store, the aggregator and callers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any


def to_decimal(value: Any) -> Decimal:
    """Convert a money value to an exact Decimal.

    Floats are converted through their shortest decimal form so that 0.1
    becomes Decimal("0.1") rather than the binary expansion.

    Raises:
        ValueError: If the value is not a finite number.

    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, float):
        result = Decimal(str(float(value)))
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise ValueError(f"Invalid amount: {value!r}") from e

    if not result.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return result


@dataclass(frozen=True)
class SaleRecord:
    """One sale joined with the name of its product.

    Attributes:
        product_id: Id of the product sold.
        product_name: Product name at query time.
        amount: Total amount of the sale (quantity x unit price), non-negative.
        sale_timestamp: When the sale happened.
    """

    product_id: int
    product_name: str
    amount: Decimal
    sale_timestamp: datetime | date


@dataclass(frozen=True)
class ProductTag:
    """Product attached to a data point when the point covers a single product."""

    product_id: int
    product_name: str


@dataclass(frozen=True)
class RevenueDataPoint:
    """Revenue of one period, optionally pinned to one product.

    ``product`` is None when the point sums sales of more than one product.
    In that case ``to_dict()`` leaves out product_id and product_name entirely
    instead of emitting nulls.
    """

    period: str
    revenue: Decimal
    product: ProductTag | None = None

    @property
    def product_id(self) -> int | None:
        return self.product.product_id if self.product else None

    @property
    def product_name(self) -> str | None:
        return self.product.product_name if self.product else None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"period": self.period, "revenue": self.revenue}
        if self.product is not None:
            data["product_id"] = self.product.product_id
            data["product_name"] = self.product.product_name
        return data


@dataclass(frozen=True)
class Product:
    id: int
    name: str
    description: str | None
    price: Decimal
    created_at: datetime


@dataclass(frozen=True)
class Sale:
    id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    total_amount: Decimal
    sale_date: datetime
    created_at: datetime
