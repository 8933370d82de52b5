"""Investment memo generation and markdown assembly."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from munger_mcp.llm.client import ModelCall
from munger_mcp.models import (
    MEMO_SECTION_TITLES,
    CompanyFacts,
    CompanyNews,
    FinancialMetrics,
    FinancialRecord,
    InsiderTransaction,
    InvestmentMemo,
    MemoSection,
)
from munger_mcp.prompts.templates import memo_section_prompts, memo_summary_prompts
from munger_mcp.utils.sanitize import sanitize_text

logger = logging.getLogger(__name__)

MAX_NEWS_ITEMS = 15
MAX_INSIDER_ITEMS = 15

GROWTH_FIELDS = ("revenue", "operating_income", "net_income", "free_cash_flow", "research_and_development")
GROWTH_METRICS = ("revenue_growth", "earnings_growth", "free_cash_flow_growth")


@dataclass(frozen=True)
class MemoInputs:
    """Everything fetched for one memo request."""

    ticker: str
    company_name: str
    metrics: list[FinancialMetrics] = field(default_factory=list)
    line_items: list[FinancialRecord] = field(default_factory=list)
    market_cap: float | None = None
    insider_trades: list[InsiderTransaction] = field(default_factory=list)
    news: list[CompanyNews] = field(default_factory=list)
    facts: CompanyFacts | None = None
    extra_documents: list[str] = field(default_factory=list)


def assemble_memo_content(
    company_name: str,
    ticker: str,
    summary: str,
    sections: list[MemoSection],
) -> str:
    """
    Markdown export of a memo.

    Title line, executive summary, then one heading per section, every block
    separated by a blank line.
    """
    blocks = [
        f"# Investment Memo: {company_name} ({ticker})",
        "## Executive Summary",
        summary,
    ]
    for section in sections:
        blocks.append(f"## {section.title}")
        blocks.append(section.content)
    return "\n\n".join(blocks)


def _company(inputs: MemoInputs) -> dict[str, Any]:
    if inputs.facts is None:
        return {"ticker": inputs.ticker, "name": inputs.company_name}
    return {
        k: sanitize_text(v, max_length=200) if isinstance(v, str) else v
        for k, v in inputs.facts.to_dict().items()
    }


def _recent_news(inputs: MemoInputs) -> list[dict[str, Any]]:
    items = sorted(inputs.news, key=lambda n: n.date or "", reverse=True)[:MAX_NEWS_ITEMS]
    return [
        {
            "date": n.date,
            "title": sanitize_text(n.title, max_length=200),
            "source": sanitize_text(n.source, max_length=50),
            "sentiment": n.sentiment,
            "url": n.url,
        }
        for n in items
    ]


def _line_items(inputs: MemoInputs, names: tuple[str, ...] | None = None) -> list[dict[str, Any]]:
    rows = sorted(inputs.line_items, key=lambda r: r.report_period, reverse=True)
    if names is None:
        return [r.to_dict() for r in rows]
    return [
        {"report_period": r.report_period, **{n: getattr(r, n) for n in names}}
        for r in rows
    ]


def _metrics(inputs: MemoInputs, names: tuple[str, ...] | None = None) -> list[dict[str, Any]]:
    rows = sorted(inputs.metrics, key=lambda m: m.report_period, reverse=True)
    if names is None:
        return [m.to_dict() for m in rows]
    return [
        {"report_period": m.report_period, **{n: getattr(m, n) for n in names}}
        for m in rows
    ]


def _insider_summary(inputs: MemoInputs) -> dict[str, Any]:
    trades = sorted(inputs.insider_trades, key=lambda t: t.filing_date or "", reverse=True)
    return {
        "buys": sum(1 for t in trades if t.side == "buy"),
        "sells": sum(1 for t in trades if t.side == "sell"),
        "recent": [
            {
                "filing_date": t.filing_date,
                "name": sanitize_text(t.name, max_length=100),
                "title": sanitize_text(t.title, max_length=100),
                "side": t.side,
                "quantity": t.quantity,
                "price": t.price,
            }
            for t in trades[:MAX_INSIDER_ITEMS]
        ],
    }


def section_payload(title: str, inputs: MemoInputs) -> dict[str, Any]:
    """Subset of the fetched data handed to the prompt for one section."""
    company = _company(inputs)

    if title == "Business Description":
        return {"company": company, "recent_news": _recent_news(inputs)}
    if title == "Competitive Landscape":
        return {
            "company": company,
            "financial_metrics": _metrics(
                inputs,
                ("gross_margin", "operating_margin", "net_margin", "return_on_invested_capital", "return_on_equity"),
            ),
            "line_items": _line_items(
                inputs, ("gross_margin", "research_and_development", "goodwill_and_intangible_assets")
            ),
        }
    if title == "Financial Analysis":
        return {
            "market_cap": inputs.market_cap,
            "line_items": _line_items(inputs),
            "financial_metrics": _metrics(inputs),
        }
    if title == "Growth Prospects":
        return {
            "line_items": _line_items(inputs, GROWTH_FIELDS),
            "financial_metrics": _metrics(inputs, GROWTH_METRICS),
            "recent_news": _recent_news(inputs),
        }
    if title == "Opportunities & Risks":
        return {
            "market_cap": inputs.market_cap,
            "insider_activity": _insider_summary(inputs),
            "financial_metrics": _metrics(
                inputs, ("debt_to_equity", "current_ratio", "interest_coverage", "price_to_earnings_ratio")
            ),
            "recent_news": _recent_news(inputs),
        }
    raise ValueError(f"Unknown memo section '{title}'")


async def generate_investment_memo(
    inputs: MemoInputs,
    model_call: ModelCall,
    include_sources: bool = True,
) -> InvestmentMemo:
    """
    Generate every memo section, then the executive summary over them.

    Section calls are independent and run concurrently; sections keep the
    fixed memo order whatever order the calls finish in. The first model
    error cancels the remaining section calls and propagates to the caller.
    """

    async def _write_section(title: str) -> MemoSection:
        system, user = memo_section_prompts(
            title,
            inputs.company_name,
            inputs.ticker,
            section_payload(title, inputs),
            include_sources=include_sources,
            extra_documents=inputs.extra_documents,
        )
        content = await model_call(system, user)
        logger.debug(f"memo {inputs.ticker}: section '{title}' {len(content)} chars")
        return MemoSection(title=title, content=content)

    tasks = [asyncio.create_task(_write_section(t)) for t in MEMO_SECTION_TITLES]
    try:
        sections = list(await asyncio.gather(*tasks))
    except BaseException:
        # First failure cancels the sibling calls still in flight
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    summary_system, summary_user = memo_summary_prompts(inputs.company_name, inputs.ticker, sections)
    summary = await model_call(summary_system, summary_user)

    return InvestmentMemo(
        company_name=inputs.company_name,
        ticker=inputs.ticker,
        summary=summary,
        content=assemble_memo_content(inputs.company_name, inputs.ticker, summary, sections),
        sections=sections,
    )
