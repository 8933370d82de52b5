"""Munger Analysis MCP Server using FastMCP."""

import asyncio
import json
import logging
import os
from datetime import date
from time import perf_counter
from typing import Any

from fastmcp import FastMCP

from munger_mcp import SCHEMA_VERSION, SERVER_VERSION
from munger_mcp.data.financial_datasets import shutdown_executor
from munger_mcp.llm.client import ChatModel
from munger_mcp.prompts.templates import get_prompt
from munger_mcp.tools import run_investment_memo, run_munger_analysis
from munger_mcp.utils.provenance import build_meta

# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=getattr(logging, log_level, logging.INFO))
logger = logging.getLogger(__name__)

# Create FastMCP server instance
mcp = FastMCP(
    name="munger-analysis",
)


def _respond(tool: str, result: dict[str, Any], start_time: float, ticker: str, end_date: str) -> str:
    duration_ms = (perf_counter() - start_time) * 1000
    meta = build_meta(tool, duration_ms, ticker=ticker, end_date=end_date)
    return json.dumps({**result, "meta": meta}, indent=2, default=str)


# ============================================================================
# TOOLS
# ============================================================================


@mcp.tool
async def analyze_munger(
    ticker: str,
    end_date: str | None = None,
    model: str | None = None,
) -> str:
    """
    Evaluate a stock the way Charlie Munger would.

    Scores moat strength, management quality, business predictability and
    owner-earnings valuation from up to ten annual periods, combines them into
    a weighted 0-10 score, and asks a language model to phrase the signal.

    Args:
        ticker: Stock ticker symbol (e.g., AAPL, MSFT)
        end_date: As-of date YYYY-MM-DD (default: today)
        model: Model name, e.g. kimi-k2, llama-3.3-70b-versatile (default: MUNGER_MODEL)

    Returns:
        JSON with signal (bullish/bearish/neutral), confidence 0-100, reasoning,
        and details holding every sub-score and its rationale
    """
    start_time = perf_counter()
    as_of = end_date or date.today().isoformat()
    result = await run_munger_analysis(
        ticker=ticker,
        end_date=as_of,
        model_call=ChatModel(model),
    )
    return _respond("analyze_munger", result, start_time, ticker, as_of)


@mcp.tool
async def investment_memo(
    ticker: str,
    end_date: str | None = None,
    include_sources: bool = True,
    extra_documents: list[str] | None = None,
    model: str | None = None,
) -> str:
    """
    Generate a markdown investment memo for a stock.

    Sections: Business Description, Competitive Landscape, Financial Analysis,
    Growth Prospects, Opportunities & Risks, preceded by an executive summary.

    Args:
        ticker: Stock ticker symbol
        end_date: As-of date YYYY-MM-DD (default: today)
        include_sources: Ask each section to cite its data sources (default: true)
        extra_documents: Additional document URLs or paths to reference
        model: Model name (default: MUNGER_MODEL)

    Returns:
        JSON with title, generation_date, content (full markdown), sections
        and summary, or an error field on failure
    """
    start_time = perf_counter()
    as_of = end_date or date.today().isoformat()
    result = await run_investment_memo(
        ticker=ticker,
        end_date=as_of,
        include_sources=include_sources,
        extra_documents=extra_documents,
        model_call=ChatModel(model),
    )
    return _respond("investment_memo", result, start_time, ticker, as_of)


# ============================================================================
# PROMPTS
# ============================================================================


@mcp.prompt
def munger_analysis(ticker: str) -> str:
    """Munger-style fundamental signal for a stock."""
    result = get_prompt("munger_analysis", {"ticker": ticker})
    if result:
        return result["messages"][0]["content"]
    return f"Analyze {ticker} using the analyze_munger tool."


@mcp.prompt(name="investment_memo")
def investment_memo_prompt(ticker: str) -> str:
    """Generate a multi-section investment memo for a stock."""
    result = get_prompt("investment_memo", {"ticker": ticker})
    if result:
        return result["messages"][0]["content"]
    return f"Write an investment memo for {ticker} using the investment_memo tool."


# ============================================================================
# ENTRY POINT
# ============================================================================


def main() -> None:
    """Run the MCP server."""
    logger.info(f"Starting Munger Analysis MCP Server v{SERVER_VERSION} (schema v{SCHEMA_VERSION})")
    try:
        mcp.run()
    finally:
        asyncio.run(shutdown_executor())


if __name__ == "__main__":
    main()
