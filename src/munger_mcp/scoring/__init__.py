"""Deterministic scoring engine."""

from munger_mcp.scoring.aggregate import (
    BEARISH_THRESHOLD,
    BULLISH_THRESHOLD,
    WEIGHTS,
    aggregate_analysis,
    classify_score,
    score_ticker,
    weighted_score,
)
from munger_mcp.scoring.management import analyze_management_quality
from munger_mcp.scoring.moat import analyze_moat_strength
from munger_mcp.scoring.predictability import analyze_predictability
from munger_mcp.scoring.valuation import calculate_munger_valuation

__all__ = [
    "BEARISH_THRESHOLD",
    "BULLISH_THRESHOLD",
    "WEIGHTS",
    "aggregate_analysis",
    "analyze_management_quality",
    "analyze_moat_strength",
    "analyze_predictability",
    "calculate_munger_valuation",
    "classify_score",
    "score_ticker",
    "weighted_score",
]
