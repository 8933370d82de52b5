"""Munger-style analysis tool."""

import logging
from typing import Any

from munger_mcp.data.financial_datasets import (
    get_financial_metrics,
    get_insider_trades,
    get_market_cap,
    search_line_items,
)
from munger_mcp.llm.client import ChatModel, ModelCall
from munger_mcp.models import LINE_ITEM_FIELDS
from munger_mcp.narrative.signal import generate_munger_output
from munger_mcp.scoring.aggregate import score_ticker
from munger_mcp.utils.validators import AnalysisRequest

logger = logging.getLogger(__name__)

INSIDER_TRADE_LIMIT = 100


async def run_munger_analysis(
    ticker: str,
    end_date: str,
    model_call: ModelCall | None = None,
) -> dict[str, Any]:
    """
    Analyze a stock on moat, management, predictability and valuation.

    Never raises: any failure becomes a neutral, zero-confidence result whose
    reasoning carries the error text.

    Args:
        ticker: Stock ticker symbol
        end_date: Analysis as-of date (YYYY-MM-DD)
        model_call: Language model used to phrase the signal (default: ChatModel())

    Returns:
        Dict with signal, confidence, reasoning and the aggregated analysis as details
    """
    try:
        request = AnalysisRequest(ticker=ticker, end_date=end_date, period="annual", limit=10)
        symbol = request.ticker

        metrics = await get_financial_metrics(symbol, request.end_date, request.period, request.limit)
        line_items = await search_line_items(
            symbol,
            list(LINE_ITEM_FIELDS),
            request.end_date,
            request.period,
            request.limit,
        )
        snapshot = await get_market_cap(symbol, request.end_date)
        insider_trades = await get_insider_trades(symbol, request.end_date, None, INSIDER_TRADE_LIMIT)

        analysis = score_ticker(symbol, metrics, line_items, insider_trades, snapshot.market_cap)
        logger.info(f"Munger analysis {symbol}: score={analysis.score:.2f} signal={analysis.signal}")

        output = await generate_munger_output(symbol, analysis, model_call or ChatModel())

        return {
            "signal": output.signal,
            "confidence": output.confidence,
            "reasoning": output.reasoning,
            "details": analysis.to_dict(),
        }
    except Exception as e:
        logger.exception(f"Error in Charlie Munger analysis for {ticker}")
        return {
            "signal": "neutral",
            "confidence": 0,
            "reasoning": f"Analysis failed: {e}",
            "details": {},
        }
