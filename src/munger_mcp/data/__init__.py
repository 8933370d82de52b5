"""Data layer for fetching and caching financial data."""

from munger_mcp.data.cache import ResponseCache, response_cache
from munger_mcp.data.financial_datasets import (
    DataFetchError,
    HttpResult,
    ServerShuttingDownError,
    get_company_facts,
    get_company_news,
    get_financial_metrics,
    get_insider_trades,
    get_market_cap,
    search_line_items,
    shutdown_executor,
)

__all__ = [
    # Cache
    "ResponseCache",
    "response_cache",
    # Financial Datasets API
    "DataFetchError",
    "HttpResult",
    "ServerShuttingDownError",
    "get_company_facts",
    "get_company_news",
    "get_financial_metrics",
    "get_insider_trades",
    "get_market_cap",
    "search_line_items",
    "shutdown_executor",
]
