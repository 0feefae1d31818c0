"""Configuration for the revenue ledger.

This module provides the LedgerPaths class, the single configuration object
used by the CSV-backed store and the command-line interface.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from revenue_core.exceptions import ConfigError

DATA_ROOT_ENV = "REVENUE_CORE_DATA"
DEFAULT_DATA_ROOT = "data"


@dataclass
class LedgerPaths:
    """All filesystem paths used by the CSV ledger.

    Attributes:
        data_root: Root directory holding the ledger files.

    Directory Structure:
        data_root/
        ├── products.csv     # id, name, description, price, created_at
        └── sales.csv        # id, product_id, quantity, unit_price,
                             # total_amount, sale_date, created_at

    """

    data_root: Path

    @classmethod
    def from_root(cls, data_root: str | Path) -> LedgerPaths:
        """Create LedgerPaths from a root directory.

        Args:
            data_root: Root directory for the ledger.

        Returns:
            LedgerPaths instance.

        Raises:
            ConfigError: If data_root is empty.

        Examples:
            >>> paths = LedgerPaths.from_root("data")
            >>> paths.sales_csv
            PosixPath('data/sales.csv')

        """
        if isinstance(data_root, str):
            if not data_root.strip():
                raise ConfigError("data_root must not be empty")
            data_root = Path(data_root)

        return cls(data_root=data_root)

    @classmethod
    def from_env(cls) -> LedgerPaths:
        """Create LedgerPaths from the REVENUE_CORE_DATA environment variable."""
        return cls.from_root(os.environ.get(DATA_ROOT_ENV, DEFAULT_DATA_ROOT))

    @property
    def products_csv(self) -> Path:
        """Product catalogue."""
        return self.data_root / "products.csv"

    @property
    def sales_csv(self) -> Path:
        """Sales ledger."""
        return self.data_root / "sales.csv"

    def ensure_dirs(self) -> None:
        """Create the ledger directory."""
        self.data_root.mkdir(parents=True, exist_ok=True)
