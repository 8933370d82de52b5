"""Async Financial Datasets API client with bounded concurrency.

Four read operations keyed by ``(ticker, end_date)`` plus market-cap and
company-facts helpers. Every call either returns a (possibly empty)
collection or raises :class:`DataFetchError`; nothing is retried here.
"""

import asyncio
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any

import requests

from munger_mcp.data import cache as cache_module
from munger_mcp.models import (
    CompanyFacts,
    CompanyNews,
    FinancialMetrics,
    FinancialRecord,
    InsiderTransaction,
    MarketSnapshot,
)
from munger_mcp.utils.validators import cache_uri

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.financialdatasets.ai"

# Bounded concurrency for blocking HTTP calls
_max_workers = int(os.environ.get("FDS_MAX_WORKERS", "4"))
_executor = ThreadPoolExecutor(max_workers=_max_workers)
_fetch_semaphore = asyncio.Semaphore(_max_workers)

# Shutdown coordination
shutdown_event = asyncio.Event()


class ServerShuttingDownError(Exception):
    """Raised when server is shutting down."""

    pass


class DataFetchError(Exception):
    """Raised when the data API answers with a non-success status or is unreachable."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        status_text: str | None = None,
        endpoint: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.status_text = status_text
        self.endpoint = endpoint


@dataclass(frozen=True)
class HttpResult:
    """Status line and decoded body of one data-API response."""

    status_code: int
    status_text: str
    payload: dict[str, Any] | None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def _base_url() -> str:
    return os.environ.get("FINANCIAL_DATASETS_BASE_URL", DEFAULT_BASE_URL).rstrip("/")


def _headers() -> dict[str, str]:
    """Auth header when a key is configured; otherwise the request goes out unauthenticated."""
    headers: dict[str, str] = {}
    api_key = os.environ.get("FINANCIAL_DATASETS_API_KEY")
    if api_key:
        headers["X-API-KEY"] = api_key
    return headers


def _send(
    method: str,
    path: str,
    params: dict[str, Any] | None = None,
    json_body: dict[str, Any] | None = None,
) -> HttpResult:
    """Blocking HTTP call. Runs on the executor; the single seam tests patch."""
    timeout = float(os.environ.get("FDS_TIMEOUT", "30"))
    response = requests.request(
        method,
        f"{_base_url()}{path}",
        params={k: v for k, v in (params or {}).items() if v is not None},
        json=json_body,
        headers=_headers(),
        timeout=timeout,
    )

    payload: dict[str, Any] | None = None
    if response.ok and response.content:
        try:
            payload = response.json()
        except ValueError as e:
            raise DataFetchError(
                f"Invalid JSON from {path}: {e}",
                status_code=response.status_code,
                status_text=response.reason,
                endpoint=path,
            ) from e

    return HttpResult(
        status_code=response.status_code,
        status_text=response.reason or "",
        payload=payload,
    )


async def _fetch_json(
    what: str,
    method: str,
    path: str,
    params: dict[str, Any] | None = None,
    json_body: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Fetch one JSON document, serving from the response cache when possible.

    Args:
        what: Human-readable name for error messages (e.g. "financial metrics")
        method: HTTP method
        path: Endpoint path
        params: Query parameters
        json_body: JSON request body

    Returns:
        Decoded JSON object ({} for an empty success body)

    Raises:
        ServerShuttingDownError: If server is shutting down
        DataFetchError: On non-2xx status, transport failure or invalid JSON
    """
    if shutdown_event.is_set():
        raise ServerShuttingDownError("Server is shutting down")

    key_params: dict[str, Any] = dict(params or {})
    for k, v in (json_body or {}).items():
        key_params[k] = ",".join(map(str, v)) if isinstance(v, list) else v
    uri = cache_uri(path, key_params)

    response_cache = cache_module.response_cache
    if response_cache is not None:
        cached = response_cache.get(uri)
        if cached is not None:
            logger.debug(f"{what}: cache hit {uri}")
            return cached

    def _call() -> HttpResult:
        return _send(method, path, params, json_body)

    async with _fetch_semaphore:
        logger.debug(f"{what}: {method} {path} {key_params}")
        loop = asyncio.get_running_loop()
        try:
            result = await loop.run_in_executor(_executor, _call)
        except requests.RequestException as e:
            raise DataFetchError(f"Error fetching {what}: {e}", endpoint=path) from e

    if not result.ok:
        raise DataFetchError(
            f"Error fetching {what}: {result.status_code} - {result.status_text}",
            status_code=result.status_code,
            status_text=result.status_text,
            endpoint=path,
        )

    payload = result.payload or {}
    if response_cache is not None:
        response_cache.store(uri, payload)
    return payload


async def get_financial_metrics(
    ticker: str,
    end_date: str,
    period: str = "ttm",
    limit: int = 10,
) -> list[FinancialMetrics]:
    """
    Fetch ratio/metric records reported on or before end_date.

    Returns:
        Records in API order (most recent carries the market cap); [] if none
    """
    payload = await _fetch_json(
        "financial metrics",
        "GET",
        "/financial-metrics/",
        params={
            "ticker": ticker,
            "report_period_lte": end_date,
            "limit": limit,
            "period": period,
        },
    )
    rows = payload.get("financial_metrics") or []
    if not rows:
        logger.info(f"No financial metrics found for {ticker}")
        return []
    return [FinancialMetrics.from_api(row) for row in rows]


async def search_line_items(
    ticker: str,
    line_items: list[str],
    end_date: str,
    period: str = "ttm",
    limit: int = 10,
) -> list[FinancialRecord]:
    """
    Fetch the requested line items, one row per reporting period.

    Returns:
        Up to ``limit`` records in API order; [] if none
    """
    payload = await _fetch_json(
        "line items",
        "POST",
        "/financials/search/line-items",
        json_body={
            "tickers": [ticker],
            "line_items": list(line_items),
            "end_date": end_date,
            "period": period,
            "limit": limit,
        },
    )
    rows = payload.get("search_results") or []
    if not rows:
        logger.info(f"No line items found for {ticker}")
        return []
    return [FinancialRecord.from_api(row) for row in rows[:limit]]


async def get_insider_trades(
    ticker: str,
    end_date: str,
    start_date: str | None = None,
    limit: int = 1000,
) -> list[InsiderTransaction]:
    """
    Fetch insider trades filed on or before end_date.

    With a start_date, pages backward in time: each full page moves the
    window end to the day before its oldest filing date, until a page comes
    back short or the window reaches start_date. Without a start_date only
    the first page is fetched, even if it is full.

    Pages depend on each other and are fetched strictly one after another.
    """
    trades: list[InsiderTransaction] = []
    current_end = end_date

    while True:
        payload = await _fetch_json(
            "insider trades",
            "GET",
            "/insider-trades/",
            params={
                "ticker": ticker,
                "filing_date_lte": current_end,
                "filing_date_gte": start_date,
                "limit": limit,
            },
        )
        rows = payload.get("insider_trades") or []
        page = [InsiderTransaction.from_api(row) for row in rows]
        trades.extend(page)
        logger.debug(f"insider trades {ticker}: page of {len(page)} ending {current_end}")

        if not start_date or len(page) < limit:
            break

        filing_dates = [t.filing_date for t in page if t.filing_date]
        if not filing_dates:
            break
        next_end = (date.fromisoformat(min(filing_dates)) - timedelta(days=1)).isoformat()
        if next_end < start_date or next_end >= current_end:
            break
        current_end = next_end

    if not trades:
        logger.info(f"No insider trades found for {ticker}")
    return trades


async def get_company_news(
    ticker: str,
    end_date: str,
    start_date: str | None = None,
    limit: int = 1000,
) -> list[CompanyNews]:
    """Fetch a single page of news published on or before end_date."""
    payload = await _fetch_json(
        "company news",
        "GET",
        "/news/",
        params={
            "ticker": ticker,
            "end_date": end_date,
            "start_date": start_date,
            "limit": limit,
        },
    )
    rows = payload.get("news") or []
    if not rows:
        logger.info(f"No company news found for {ticker}")
        return []
    return [CompanyNews.from_api(row) for row in rows]


async def get_market_cap(ticker: str, end_date: str) -> MarketSnapshot:
    """Market cap from the most recent TTM metrics record (None when unreported)."""
    metrics = await get_financial_metrics(ticker, end_date, period="ttm", limit=1)
    if not metrics:
        return MarketSnapshot(ticker=ticker, end_date=end_date, market_cap=None)
    latest = max(metrics, key=lambda m: m.report_period)
    return MarketSnapshot(ticker=ticker, end_date=end_date, market_cap=latest.market_cap)


async def get_company_facts(ticker: str) -> CompanyFacts | None:
    """Descriptive company metadata, None when the API has none."""
    payload = await _fetch_json(
        "company facts",
        "GET",
        "/company/facts/",
        params={"ticker": ticker},
    )
    facts = payload.get("company_facts")
    if not facts:
        return None
    return CompanyFacts.from_api(facts)


async def shutdown_executor() -> None:
    """Cleanup on server shutdown."""
    shutdown_event.set()
    _executor.shutdown(wait=False, cancel_futures=True)
