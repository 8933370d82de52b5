"""Prompt templates for the Munger signal, memo sections and MCP prompts."""

from typing import Any

from munger_mcp.models import AggregatedAnalysis, MemoSection
from munger_mcp.utils.normalize import canonical_dumps

MUNGER_SYSTEM_PROMPT = """You are a Charlie Munger AI agent, making investment decisions using his principles:

1. Focus on the quality and predictability of the business.
2. Rely on mental models from multiple disciplines to analyze investments.
3. Look for strong, durable competitive advantages (moats).
4. Emphasize long-term thinking and patience.
5. Value management integrity and competence.
6. Prioritize businesses with high returns on invested capital.
7. Pay a fair price for wonderful businesses.
8. Never overpay, always demand a margin of safety.
9. Avoid complexity and businesses you don't understand.
10. "Invert, always invert" - focus on avoiding stupidity rather than seeking brilliance.

Rules:
- Praise businesses with predictable, consistent operations and cash flows.
- Value businesses with high ROIC and pricing power.
- Prefer simple businesses with understandable economics.
- Admire management with skin in the game and shareholder-friendly capital allocation.
- Focus on long-term economics rather than short-term metrics.
- Be skeptical of businesses with rapidly changing dynamics or excessive share dilution.
- Avoid excessive leverage or financial engineering.
- Provide a rational, data-driven recommendation (bullish, bearish, or neutral).

Respond with a single JSON object and nothing else."""


def munger_signal_prompt(ticker: str, analysis: AggregatedAnalysis) -> str:
    """User prompt embedding the aggregated analysis as canonical JSON."""
    payload = canonical_dumps({ticker: analysis}, indent=2)
    return f"""Based on the following analysis, create a Munger-style investment signal.

Analysis Data for {ticker}:
{payload}

Return the trading signal in this JSON format:
{{
  "signal": "bullish" | "bearish" | "neutral",
  "confidence": number between 0 and 100,
  "reasoning": "string"
}}"""


MEMO_SYSTEM_PROMPT = """You are a senior equity research analyst writing one section of an \
investment memo for {company_name} ({ticker}).

Write in clear, professional markdown. Do not add a top-level heading; the section title is \
added for you. Ground every claim in the data provided and say so plainly when the data is \
missing or thin. Avoid price targets and trading advice."""

# Per-section writing instructions, in memo order
SECTION_INSTRUCTIONS: dict[str, str] = {
    "Business Description": (
        "Describe what the company does, how it makes money, its main segments and customers, "
        "and where it sits in its industry."
    ),
    "Competitive Landscape": (
        "Assess the company's competitive position: moat sources, pricing power as shown by "
        "margins and returns on capital, key competitors, and threats to the position."
    ),
    "Financial Analysis": (
        "Analyze revenue, profitability, cash generation, balance sheet strength and capital "
        "allocation over the reported periods. Call out trends and anything unusual."
    ),
    "Growth Prospects": (
        "Assess the drivers of future growth, how durable recent growth has been, and what the "
        "reported trends and recent news imply for the next several years."
    ),
    "Opportunities & Risks": (
        "List the main opportunities and the main risks (business, financial, governance, "
        "valuation), including what insider activity suggests about management's view."
    ),
}


def memo_section_prompts(
    title: str,
    company_name: str,
    ticker: str,
    payload: dict[str, Any],
    include_sources: bool = True,
    extra_documents: list[str] | None = None,
) -> tuple[str, str]:
    """
    Build (system, user) prompts for one memo section.

    Args:
        title: Section title (one of SECTION_INSTRUCTIONS)
        company_name: Company display name
        ticker: Ticker symbol
        payload: Subset of fetched data relevant to this section
        include_sources: Ask the model to cite the data sets it used
        extra_documents: User-supplied document URLs/paths to reference

    Returns:
        Tuple of (system_prompt, user_prompt)
    """
    system = MEMO_SYSTEM_PROMPT.format(company_name=company_name, ticker=ticker)

    lines = [
        f"Write the \"{title}\" section of the investment memo for {company_name} ({ticker}).",
        "",
        SECTION_INSTRUCTIONS[title],
        "",
        "Data:",
        canonical_dumps(payload, indent=2),
    ]
    if extra_documents:
        lines += ["", "Additional documents supplied by the user (reference where relevant):"]
        lines += [f"- {doc}" for doc in extra_documents]
    if include_sources:
        lines += [
            "",
            "Cite the data set each figure comes from (e.g. line items, financial metrics, "
            "insider trades, news) and list any referenced news URLs at the end of the section.",
        ]
    return system, "\n".join(lines)


SUMMARY_SYSTEM_PROMPT = """You are a senior equity research analyst. Write the executive \
summary of an investment memo: three to five sentences covering what the business is, its \
quality, its financial condition, and the key risks. Plain prose, no headings, no lists."""


def memo_summary_prompts(
    company_name: str,
    ticker: str,
    sections: list[MemoSection],
) -> tuple[str, str]:
    """Build (system, user) prompts for the executive summary over finished sections."""
    body = "\n\n".join(f"## {s.title}\n\n{s.content}" for s in sections)
    user = (
        f"Summarize the following investment memo for {company_name} ({ticker}).\n\n{body}"
    )
    return SUMMARY_SYSTEM_PROMPT, user


# MCP prompt definitions
PROMPTS = {
    "munger_analysis": {
        "description": "Munger-style fundamental signal for a stock",
        "arguments": [{"name": "ticker", "required": True}],
    },
    "investment_memo": {
        "description": "Generate a multi-section investment memo for a stock",
        "arguments": [{"name": "ticker", "required": True}],
    },
}


def list_prompts() -> list[dict[str, Any]]:
    """List available prompts."""
    return [
        {
            "name": name,
            "description": info["description"],
            "arguments": info["arguments"],
        }
        for name, info in PROMPTS.items()
    ]


def get_prompt(name: str, arguments: dict[str, str]) -> dict[str, Any] | None:
    """
    Get a prompt by name with arguments filled in.

    Returns dict with 'messages' key for MCP GetPromptResult.
    """
    if name not in PROMPTS:
        return None

    ticker = arguments.get("ticker", "")

    if name == "munger_analysis":
        return {
            "messages": [
                {
                    "role": "user",
                    "content": f"""Evaluate {ticker} the way Charlie Munger would.

Call analyze_munger("{ticker}") and then report:
1. **Signal**: bullish / bearish / neutral with the confidence returned
2. **Moat**: what the moat score and its details say
3. **Management**: capital allocation, leverage, insider activity
4. **Predictability**: revenue, operating income, margins, cash flow
5. **Valuation**: FCF yield, intrinsic value range, margin of safety

Quote the tool's numbers. Do not invent data the tool did not return.""",
                }
            ]
        }

    if name == "investment_memo":
        return {
            "messages": [
                {
                    "role": "user",
                    "content": f"""Prepare an investment memo for {ticker}.

Call investment_memo("{ticker}") and present the executive summary first, then each \
section in the order returned. If the tool returns an error, report it verbatim.""",
                }
            ]
        }

    return None
