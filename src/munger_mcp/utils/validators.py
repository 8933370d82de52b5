"""Validation utilities and parameter classes."""

import re
from dataclasses import dataclass
from datetime import date
from typing import Any
from urllib.parse import urlencode

# Allowlists for cache key stability
VALID_PERIODS = {"annual", "quarterly", "ttm"}

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TICKER_PATTERN = re.compile(r"^[A-Z0-9.\-]{1,12}$")


def validate_date(value: str, name: str = "end_date") -> str:
    """Check a YYYY-MM-DD calendar date and return it stripped."""
    candidate = value.strip()
    if not _DATE_PATTERN.match(candidate):
        raise ValueError(f"Invalid {name} '{value}'. Expected YYYY-MM-DD")
    try:
        date.fromisoformat(candidate)
    except ValueError as e:
        raise ValueError(f"Invalid {name} '{value}': {e}") from e
    return candidate


def normalize_ticker(ticker: str) -> str:
    """Uppercase, strip whitespace and reject obviously malformed symbols."""
    symbol = ticker.upper().strip()
    if not _TICKER_PATTERN.match(symbol):
        raise ValueError(f"Invalid ticker '{ticker}'")
    return symbol


@dataclass(frozen=True)
class AnalysisRequest:
    """Immutable request parameters. Used for cache key + fetch."""

    ticker: str
    end_date: str
    period: str = "annual"
    limit: int = 10

    def __post_init__(self) -> None:
        object.__setattr__(self, "ticker", normalize_ticker(self.ticker))
        object.__setattr__(self, "end_date", validate_date(self.end_date))

        period = self.period.lower().strip()
        if period not in VALID_PERIODS:
            raise ValueError(f"Invalid period '{self.period}'. Must be one of: {VALID_PERIODS}")
        object.__setattr__(self, "period", period)

        if self.limit < 1:
            raise ValueError(f"Invalid limit {self.limit}. Must be >= 1")


def cache_uri(endpoint: str, params: dict[str, Any]) -> str:
    """
    Canonical URI for caching a data-API response.

    Query parameters are sorted and None values dropped, so equal requests
    map to the same key regardless of argument order.
    """
    query = urlencode(sorted((k, str(v)) for k, v in params.items() if v is not None))
    return f"fds://{endpoint.strip('/')}?{query}"
