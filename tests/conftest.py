"""Pytest configuration and fixtures."""

from collections.abc import Callable
from typing import Any

import pytest

from munger_mcp.data import cache as cache_module
from munger_mcp.models import FinancialMetrics, FinancialRecord, InsiderTransaction


@pytest.fixture(autouse=True)
def no_response_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests off the on-disk response cache."""
    monkeypatch.setattr(cache_module, "response_cache", None)


@pytest.fixture
def make_record() -> Callable[..., FinancialRecord]:
    """Factory for line-item records; year N reports on N-12-31."""

    def _make(year: int, **values: Any) -> FinancialRecord:
        return FinancialRecord(ticker="TEST", report_period=f"{year}-12-31", **values)

    return _make


@pytest.fixture
def make_trade() -> Callable[..., InsiderTransaction]:
    def _make(transaction_type: str | None, filing_date: str = "2024-06-01") -> InsiderTransaction:
        return InsiderTransaction(
            ticker="TEST",
            name="Jane Doe",
            transaction_type=transaction_type,
            filing_date=filing_date,
        )

    return _make


@pytest.fixture
def metrics() -> list[FinancialMetrics]:
    """A single metrics record; analyzers only check that metrics exist."""
    return [FinancialMetrics(ticker="TEST", report_period="2024-12-31", market_cap=1_000_000.0)]


@pytest.fixture
def quality_records(make_record: Callable[..., FinancialRecord]) -> list[FinancialRecord]:
    """Six years of a steadily growing, cash-generative, low-capex business, oldest first."""
    records = []
    for i, year in enumerate(range(2019, 2025)):
        revenue = 1000.0 * (1.08**i)
        records.append(
            make_record(
                year,
                revenue=revenue,
                net_income=revenue * 0.20,
                operating_income=revenue * 0.25,
                operating_margin=0.25,
                gross_margin=0.50 + 0.01 * i,
                return_on_invested_capital=0.20,
                free_cash_flow=revenue * 0.24,
                capital_expenditure=-revenue * 0.03,
                cash_and_equivalents=revenue * 0.15,
                total_debt=200.0,
                shareholders_equity=1000.0,
                outstanding_shares=100.0 - 2 * i,
                research_and_development=50.0,
                goodwill_and_intangible_assets=300.0,
            )
        )
    return records
