"""Tests for the Munger signal narrative step."""

import asyncio
import json

import pytest

from munger_mcp.llm.client import LLMResponseError
from munger_mcp.narrative.signal import FALLBACK_REASONING, generate_munger_output, parse_signal_response
from munger_mcp.scoring.aggregate import score_ticker


@pytest.fixture
def analysis(metrics, quality_records):
    return score_ticker("TEST", metrics, quality_records, [], 1000.0)


class TestParseSignalResponse:
    """Tests for parse_signal_response."""

    def test_plain_json(self) -> None:
        result = parse_signal_response('{"signal": "bullish", "confidence": 82, "reasoning": "Great moat."}')

        assert result.signal == "bullish"
        assert result.confidence == 82
        assert result.reasoning == "Great moat."

    def test_fenced_json(self) -> None:
        text = '```json\n{"signal": "Bearish", "confidence": 40.5, "reasoning": "Too expensive."}\n```'
        result = parse_signal_response(text)

        assert result.signal == "bearish"
        assert result.confidence == 40.5

    def test_confidence_clamped(self) -> None:
        result = parse_signal_response('{"signal": "neutral", "confidence": 150, "reasoning": "x"}')
        assert result.confidence == 100

        result = parse_signal_response('{"signal": "neutral", "confidence": -3, "reasoning": "x"}')
        assert result.confidence == 0

    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_confidence_rejected(self, literal) -> None:
        """A NaN or infinite confidence is a bad answer, never a maximum-confidence signal."""
        with pytest.raises(LLMResponseError):
            parse_signal_response(f'{{"signal": "bullish", "confidence": {literal}, "reasoning": "x"}}')

    @pytest.mark.parametrize(
        "text",
        [
            "not json",
            "[1, 2]",
            '{"signal": "strong buy", "confidence": 50, "reasoning": "x"}',
            '{"signal": "bullish", "confidence": "high", "reasoning": "x"}',
            '{"signal": "bullish", "confidence": 50}',
        ],
    )
    def test_invalid_responses_raise(self, text) -> None:
        with pytest.raises(LLMResponseError):
            parse_signal_response(text)

    def test_non_text_raises(self) -> None:
        with pytest.raises(LLMResponseError, match="Expected text"):
            parse_signal_response({"signal": "bullish"})


class TestGenerateMungerOutput:
    """Tests for generate_munger_output."""

    def test_uses_model_answer(self, analysis) -> None:
        prompts = []

        async def model(system: str, user: str) -> str:
            prompts.append((system, user))
            return json.dumps({"signal": "bullish", "confidence": 90, "reasoning": "Wonderful business."})

        result = asyncio.run(generate_munger_output("TEST", analysis, model))

        assert result.signal == "bullish"
        assert result.reasoning == "Wonderful business."
        system, user = prompts[0]
        assert "Charlie Munger" in system
        assert "Analysis Data for TEST" in user
        assert '"max_score": 10' in user

    def test_malformed_output_falls_back_to_neutral(self, analysis) -> None:
        async def model(system: str, user: str) -> str:
            return "I think it's a buy!"

        result = asyncio.run(generate_munger_output("TEST", analysis, model))

        assert result.signal == "neutral"
        assert result.confidence == 0
        assert result.reasoning == FALLBACK_REASONING

    def test_model_error_falls_back_to_neutral(self, analysis) -> None:
        async def model(system: str, user: str) -> str:
            raise RuntimeError("rate limited")

        result = asyncio.run(generate_munger_output("TEST", analysis, model))

        assert result.signal == "neutral"
        assert result.reasoning == FALLBACK_REASONING

    def test_non_finite_confidence_falls_back_to_neutral(self, analysis) -> None:
        async def model(system: str, user: str) -> str:
            return '{"signal": "bullish", "confidence": NaN, "reasoning": "Sure thing."}'

        result = asyncio.run(generate_munger_output("TEST", analysis, model))

        assert result.signal == "neutral"
        assert result.confidence == 0
        assert result.reasoning == FALLBACK_REASONING
