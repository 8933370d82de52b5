"""Response envelope metadata: versions, timing and where the numbers came from."""

from typing import Any

from munger_mcp import SCHEMA_VERSION, SERVER_VERSION

DATA_SOURCE = "financialdatasets.ai"


def build_meta(
    tool: str,
    duration_ms: float | None = None,
    ticker: str | None = None,
    end_date: str | None = None,
) -> dict[str, Any]:
    """
    Metadata attached to every tool response.

    Args:
        tool: Tool name
        duration_ms: Wall time of the call, rounded to 0.1 ms
        ticker: Ticker as requested
        end_date: As-of date the data was fetched for

    Returns:
        Dict with server/schema versions, tool, data source and the request's as-of date
    """
    meta: dict[str, Any] = {
        "server_version": SERVER_VERSION,
        "schema_version": SCHEMA_VERSION,
        "tool": tool,
        "data_source": DATA_SOURCE,
    }
    if ticker is not None:
        meta["ticker"] = ticker.upper().strip()
    if end_date is not None:
        meta["as_of"] = end_date
    if duration_ms is not None:
        meta["duration_ms"] = round(duration_ms, 1)
    return meta
