"""Signal aggregation over the four analyzer scores."""

from collections.abc import Sequence

from munger_mcp.models import (
    AggregatedAnalysis,
    AnalysisScore,
    FinancialMetrics,
    FinancialRecord,
    InsiderTransaction,
    Signal,
    ValuationResult,
)
from munger_mcp.scoring.management import analyze_management_quality
from munger_mcp.scoring.moat import analyze_moat_strength
from munger_mcp.scoring.predictability import analyze_predictability
from munger_mcp.scoring.valuation import calculate_munger_valuation

# Quality and predictability outweigh current price
WEIGHTS: dict[str, float] = {
    "moat": 0.35,
    "management": 0.25,
    "predictability": 0.25,
    "valuation": 0.15,
}

BULLISH_THRESHOLD = 7.5
BEARISH_THRESHOLD = 4.5
MAX_SCORE = 10


def weighted_score(
    moat: AnalysisScore,
    management: AnalysisScore,
    predictability: AnalysisScore,
    valuation: AnalysisScore,
) -> float:
    """Weighted total, clamped to 0-10."""
    total = (
        moat.score * WEIGHTS["moat"]
        + management.score * WEIGHTS["management"]
        + predictability.score * WEIGHTS["predictability"]
        + valuation.score * WEIGHTS["valuation"]
    )
    return max(0.0, min(float(MAX_SCORE), total))


def classify_score(total: float) -> Signal:
    """
    Map a total score to a signal.

    Both bands are inclusive: 7.5 is bullish, 4.5 is bearish.
    """
    if total >= BULLISH_THRESHOLD:
        return "bullish"
    if total <= BEARISH_THRESHOLD:
        return "bearish"
    return "neutral"


def aggregate_analysis(
    ticker: str,
    moat: AnalysisScore,
    management: AnalysisScore,
    predictability: AnalysisScore,
    valuation: ValuationResult,
) -> AggregatedAnalysis:
    """Combine analyzer outputs into the unit handed to the narrative step."""
    total = weighted_score(moat, management, predictability, valuation)
    return AggregatedAnalysis(
        ticker=ticker,
        signal=classify_score(total),
        score=total,
        max_score=MAX_SCORE,
        moat=moat,
        management=management,
        predictability=predictability,
        valuation=valuation,
    )


def score_ticker(
    ticker: str,
    metrics: Sequence[FinancialMetrics],
    line_items: Sequence[FinancialRecord],
    insider_trades: Sequence[InsiderTransaction],
    market_cap: float | None,
) -> AggregatedAnalysis:
    """Run all four analyzers over fetched data and aggregate them."""
    return aggregate_analysis(
        ticker,
        moat=analyze_moat_strength(metrics, line_items),
        management=analyze_management_quality(line_items, insider_trades),
        predictability=analyze_predictability(line_items),
        valuation=calculate_munger_valuation(line_items, market_cap),
    )
