"""Tests for model entities."""

import pytest
from pydantic import ValidationError

from munger_mcp.models import InsiderTransaction, MungerSignal


def _side(transaction_type: str | None) -> str | None:
    return InsiderTransaction(ticker="TEST", transaction_type=transaction_type).side


class TestInsiderTransactionSide:
    """Tests for buy/sell classification of insider filings."""

    @pytest.mark.parametrize("value", ["buy", "Purchase", "  BUY "])
    def test_buy_words(self, value) -> None:
        assert _side(value) == "buy"

    @pytest.mark.parametrize("value", ["sell", "Sale", "SELL"])
    def test_sell_words(self, value) -> None:
        assert _side(value) == "sell"

    @pytest.mark.parametrize(
        "value",
        ["Buyback", "Wholesale gift", "Sell to cover after purchase", "gift", "", None],
    )
    def test_other_types_have_no_side(self, value) -> None:
        """Only whole-word matches count; types merely containing a keyword do not."""
        assert _side(value) is None

    def test_side_from_share_sign(self) -> None:
        """A filing without a type takes its side from the share count sign."""
        bought = InsiderTransaction.from_api({"ticker": "TEST", "transaction_shares": 500})
        sold = InsiderTransaction.from_api({"ticker": "TEST", "transaction_shares": -500})

        assert bought.side == "buy"
        assert sold.side == "sell"


class TestMungerSignal:
    """Tests for the MungerSignal model."""

    def test_neutral(self) -> None:
        signal = MungerSignal.neutral("no data")

        assert signal.to_dict() == {"signal": "neutral", "confidence": 0.0, "reasoning": "no data"}

    def test_frozen(self) -> None:
        signal = MungerSignal.neutral("no data")
        with pytest.raises(ValidationError):
            signal.confidence = 50.0  # type: ignore[misc]
