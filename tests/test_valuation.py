"""Tests for the owner-earnings valuation analyzer."""

import pytest

from munger_mcp.scoring.valuation import calculate_munger_valuation


class TestMungerValuation:
    """Tests for calculate_munger_valuation."""

    @pytest.mark.parametrize("market_cap", [None, 0.0, -5.0])
    def test_market_cap_unavailable(self, quality_records, market_cap) -> None:
        result = calculate_munger_valuation(quality_records, market_cap)

        assert result.score == 0
        assert result.details == ["Insufficient data to perform valuation: market cap unavailable"]
        assert result.intrinsic_value_range is None

    def test_too_few_fcf_periods(self, make_record) -> None:
        records = [make_record(2023, free_cash_flow=10.0), make_record(2024, free_cash_flow=12.0)]
        result = calculate_munger_valuation(records, 1000.0)

        assert result.score == 0
        assert result.details == ["Insufficient free cash flow data for valuation"]

    def test_negative_normalized_fcf(self, make_record) -> None:
        """Cash burn cannot be valued; normalized FCF is still reported."""
        records = [make_record(2022 + i, free_cash_flow=v) for i, v in enumerate([-30.0, -20.0, -10.0])]
        result = calculate_munger_valuation(records, 1000.0)

        assert result.score == 0
        assert result.normalized_fcf == pytest.approx(-20.0)
        assert result.intrinsic_value_range is None
        assert result.details[0].startswith("Negative or zero normalized FCF")

    def test_cheap_growing_business(self, quality_records) -> None:
        """High FCF yield, large margin of safety and a rising FCF trend."""
        result = calculate_munger_valuation(quality_records, 1000.0)

        assert result.score == 10
        assert result.details[0].startswith("Excellent value")
        assert result.details[1].startswith("Large margin of safety")
        assert result.details[2] == "Growing FCF trend adds to intrinsic value"

    def test_intrinsic_value_multiples(self, quality_records) -> None:
        """Conservative/reasonable/optimistic are 10x/15x/20x normalized FCF."""
        result = calculate_munger_valuation(quality_records, 1000.0)
        fcf = result.normalized_fcf

        assert result.intrinsic_value_range.conservative == 10 * fcf
        assert result.intrinsic_value_range.reasonable == 15 * fcf
        assert result.intrinsic_value_range.optimistic == 20 * fcf
        assert result.fcf_yield == pytest.approx(fcf / 1000.0)

    def test_expensive_business(self, quality_records) -> None:
        """Low yield and a premium to value leave only the trend points."""
        result = calculate_munger_valuation(quality_records, 100_000.0)

        assert result.score == 3
        assert result.details[0].startswith("Expensive: only")
        assert result.details[1].startswith("Expensive:")

    def test_normalizes_most_recent_five_periods(self, make_record) -> None:
        """Normalized FCF averages the latest five periods whatever the input order."""
        values = [10.0, 10.0, 10.0, 100.0, 100.0, 100.0, 100.0]
        chronological = [make_record(2018 + i, free_cash_flow=v) for i, v in enumerate(values)]

        forward = calculate_munger_valuation(chronological, 10_000.0)
        backward = calculate_munger_valuation(list(reversed(chronological)), 10_000.0)

        assert forward.normalized_fcf == pytest.approx((4 * 100.0 + 10.0) / 5)
        assert backward == forward
        assert "Growing FCF trend adds to intrinsic value" in forward.details

    def test_declining_trend(self, make_record) -> None:
        values = [100.0, 90.0, 80.0]
        records = [make_record(2022 + i, free_cash_flow=v) for i, v in enumerate(values)]
        result = calculate_munger_valuation(records, 10_000.0)

        assert result.details[-1] == "Declining FCF trend is concerning"
