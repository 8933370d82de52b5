"""Investment memo tool."""

import logging
from datetime import datetime
from typing import Any

import pytz

from munger_mcp.data.financial_datasets import (
    DataFetchError,
    get_company_facts,
    get_company_news,
    get_financial_metrics,
    get_insider_trades,
    get_market_cap,
    search_line_items,
)
from munger_mcp.llm.client import ChatModel, ModelCall
from munger_mcp.models import LINE_ITEM_FIELDS, CompanyFacts
from munger_mcp.narrative.memo import MemoInputs, generate_investment_memo
from munger_mcp.utils.sanitize import sanitize_text
from munger_mcp.utils.validators import AnalysisRequest

logger = logging.getLogger(__name__)

INSIDER_TRADE_LIMIT = 100
NEWS_LIMIT = 100


async def _company_facts(ticker: str) -> CompanyFacts | None:
    """Company facts, or None when the lookup fails; the memo then uses the ticker as name."""
    try:
        return await get_company_facts(ticker)
    except DataFetchError as e:
        logger.warning(f"Company facts unavailable for {ticker}, using ticker as name: {e}")
        return None


async def run_investment_memo(
    ticker: str,
    end_date: str,
    include_sources: bool = True,
    extra_documents: list[str] | None = None,
    model_call: ModelCall | None = None,
) -> dict[str, Any]:
    """
    Generate a five-section investment memo with an executive summary.

    Args:
        ticker: Stock ticker symbol
        end_date: Memo as-of date (YYYY-MM-DD)
        include_sources: Ask each section to cite its data sources
        extra_documents: Additional document URLs/paths to reference
        model_call: Language model used for every section (default: ChatModel())

    Returns:
        Memo dict (ticker, title, generation_date, content, sections, summary)
        or {"error": message} on failure
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
        news = await get_company_news(symbol, request.end_date, None, NEWS_LIMIT)
        facts = await _company_facts(symbol)

        company_name = sanitize_text(facts.name, max_length=200) if facts and facts.name else symbol

        memo = await generate_investment_memo(
            MemoInputs(
                ticker=symbol,
                company_name=company_name,
                metrics=metrics,
                line_items=line_items,
                market_cap=snapshot.market_cap,
                insider_trades=insider_trades,
                news=news,
                facts=facts,
                extra_documents=list(extra_documents or []),
            ),
            model_call or ChatModel(),
            include_sources=include_sources,
        )
        logger.info(f"Investment memo {symbol}: {len(memo.content)} chars")

        return {
            "ticker": symbol,
            "title": f"Investment Memo: {memo.company_name} ({symbol})",
            "generation_date": datetime.now(pytz.UTC).isoformat(),
            "content": memo.content,
            "sections": memo.sections_as_dicts(),
            "summary": memo.summary,
        }
    except Exception as e:
        logger.exception(f"Error generating investment memo for {ticker}")
        return {"error": str(e) or "Unknown error generating memo"}
