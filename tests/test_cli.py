"""Smoke tests for the revenue-core command line."""

import json
from pathlib import Path

import pytest

from revenue_core.cli import main


@pytest.fixture
def ledger(tmp_path: Path) -> str:
    root = str(tmp_path / "ledger")
    assert main(["--data-root", root, "add-product", "Coffee", "--price", "3.50"]) == 0
    assert main(["--data-root", root, "add-product", "Tea", "--price", "2.00"]) == 0
    for args in (
        ["1", "--quantity", "2", "--unit-price", "3.50", "--sale-date", "2024-01-15"],
        ["2", "--quantity", "1", "--unit-price", "2.00", "--sale-date", "2024-01-16"],
        ["1", "--quantity", "1", "--unit-price", "3.50", "--sale-date", "2024-02-01"],
    ):
        assert main(["--data-root", root, "add-sale", *args]) == 0
    return root


def test_revenue_json(ledger: str, capsys: pytest.CaptureFixture[str]) -> None:
    capsys.readouterr()
    assert main(["--data-root", ledger, "revenue", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload == [
        {"period": "2024-01", "revenue": "9.00"},
        {"period": "2024-02", "revenue": "3.50"},
    ]


def test_breakdown_json(ledger: str, capsys: pytest.CaptureFixture[str]) -> None:
    capsys.readouterr()
    args = ["--data-root", ledger, "revenue", "--breakdown", "--granularity", "yearly", "--json"]
    assert main(args) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload == [
        {"period": "2024", "revenue": "10.50", "product_id": 1, "product_name": "Coffee"},
        {"period": "2024", "revenue": "2.00", "product_id": 2, "product_name": "Tea"},
    ]


def test_revenue_table_with_summary(ledger: str, capsys: pytest.CaptureFixture[str]) -> None:
    capsys.readouterr()
    assert main(["--data-root", ledger, "revenue", "--product-id", "1", "--summary"]) == 0
    out = capsys.readouterr().out
    assert "Coffee" in out
    assert "Total revenue:   10.50 across 2 months" in out
    assert "Peak revenue:    7.00" in out


def test_no_matches(ledger: str, capsys: pytest.CaptureFixture[str]) -> None:
    capsys.readouterr()
    assert main(["--data-root", ledger, "revenue", "--start-date", "2025-01-01"]) == 0
    assert "No sales match" in capsys.readouterr().out


def test_invalid_range_exits_with_2(ledger: str, capsys: pytest.CaptureFixture[str]) -> None:
    args = ["--data-root", ledger, "revenue", "--start-date", "2024-03-01"]
    args += ["--end-date", "2024-01-01"]
    assert main(args) == 2
    assert "after end_date" in capsys.readouterr().err


def test_unknown_product_exits_with_1(ledger: str, capsys: pytest.CaptureFixture[str]) -> None:
    args = ["--data-root", ledger, "add-sale", "42", "--quantity", "1", "--unit-price", "1"]
    assert main(args) == 1
    assert "does not exist" in capsys.readouterr().err


def test_products_listing(ledger: str, capsys: pytest.CaptureFixture[str]) -> None:
    capsys.readouterr()
    assert main(["--data-root", ledger, "products"]) == 0
    assert capsys.readouterr().out.splitlines() == ["1\tCoffee\t3.50", "2\tTea\t2.00"]


def test_data_root_from_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("REVENUE_CORE_DATA", str(tmp_path / "env-ledger"))
    assert main(["add-product", "Cake", "--price", "5"]) == 0
    assert (tmp_path / "env-ledger" / "products.csv").exists()
