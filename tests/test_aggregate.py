"""Tests for score weighting and signal classification."""

import pytest

from munger_mcp.models import AnalysisScore, ValuationResult
from munger_mcp.scoring.aggregate import (
    WEIGHTS,
    aggregate_analysis,
    classify_score,
    score_ticker,
    weighted_score,
)


def _scores(moat: float, management: float, predictability: float, valuation: float):
    return (
        AnalysisScore(score=moat),
        AnalysisScore(score=management),
        AnalysisScore(score=predictability),
        ValuationResult(score=valuation),
    )


class TestClassifyScore:
    """Tests for classify_score thresholds."""

    def test_bullish_threshold_inclusive(self) -> None:
        assert classify_score(7.5) == "bullish"

    def test_just_below_bullish_is_neutral(self) -> None:
        assert classify_score(7.49) == "neutral"

    def test_bearish_threshold_inclusive(self) -> None:
        assert classify_score(4.5) == "bearish"

    def test_just_above_bearish_is_neutral(self) -> None:
        assert classify_score(4.51) == "neutral"

    def test_extremes(self) -> None:
        assert classify_score(0.0) == "bearish"
        assert classify_score(10.0) == "bullish"


class TestWeightedScore:
    """Tests for weighted_score."""

    def test_weights_sum_to_one(self) -> None:
        assert sum(WEIGHTS.values()) == pytest.approx(1.0)

    def test_weighting(self) -> None:
        total = weighted_score(*_scores(10.0, 0.0, 0.0, 0.0))
        assert total == pytest.approx(3.5)

        total = weighted_score(*_scores(0.0, 0.0, 0.0, 10.0))
        assert total == pytest.approx(1.5)

    def test_clamped_to_range(self) -> None:
        assert weighted_score(*_scores(20.0, 20.0, 20.0, 20.0)) == 10.0
        assert weighted_score(*_scores(-5.0, -5.0, -5.0, -5.0)) == 0.0


class TestAggregateAnalysis:
    """Tests for aggregate_analysis and score_ticker."""

    def test_aggregate_fields(self) -> None:
        result = aggregate_analysis("TEST", *_scores(8.0, 8.0, 8.0, 8.0))

        assert result.score == pytest.approx(8.0)
        assert result.signal == "bullish"
        assert result.max_score == 10

    def test_to_dict_shape(self) -> None:
        data = aggregate_analysis("TEST", *_scores(5.0, 5.0, 5.0, 5.0)).to_dict()

        assert set(data) == {"signal", "score", "max_score", "moat", "management", "predictability", "valuation"}
        assert data["signal"] == "neutral"
        assert set(data["valuation"]) == {"score", "details", "intrinsic_value_range", "fcf_yield", "normalized_fcf"}

    def test_score_ticker_quality_business(self, metrics, quality_records) -> None:
        """Strong on every axis: moat 10, management 10*10/12, predictability 10, valuation 10."""
        result = score_ticker("TEST", metrics, quality_records, [], 1000.0)

        expected = 0.35 * 10 + 0.25 * (100 / 12) + 0.25 * 10 + 0.15 * 10
        assert result.score == pytest.approx(expected)
        assert result.signal == "bullish"

    def test_score_ticker_no_data_is_bearish(self) -> None:
        result = score_ticker("TEST", [], [], [], None)

        assert result.score == 0
        assert result.signal == "bearish"
        assert result.moat.details == ["Insufficient data to analyze moat strength"]
