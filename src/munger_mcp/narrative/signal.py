"""LLM-phrased Munger signal from an aggregated analysis."""

import logging
from typing import Any

from pydantic import ValidationError

from munger_mcp.llm.client import LLMResponseError, ModelCall
from munger_mcp.models import AggregatedAnalysis, MungerSignal
from munger_mcp.prompts.templates import MUNGER_SYSTEM_PROMPT, munger_signal_prompt
from munger_mcp.utils.sanitize import strip_code_fences

logger = logging.getLogger(__name__)

FALLBACK_REASONING = "Error in analysis, defaulting to neutral"


def parse_signal_response(text: Any) -> MungerSignal:
    """
    Parse model output into a MungerSignal.

    Code fences around the JSON are tolerated. Confidence must be finite and
    is clamped to 0-100.

    Raises:
        LLMResponseError: If the text is not a JSON object with a valid
            signal, numeric confidence and string reasoning
    """
    if not isinstance(text, str):
        raise LLMResponseError(f"Expected text response, got {type(text).__name__}")

    try:
        return MungerSignal.model_validate_json(strip_code_fences(text))
    except ValidationError as e:
        raise LLMResponseError(f"Invalid signal JSON: {e}") from e


async def generate_munger_output(
    ticker: str,
    analysis: AggregatedAnalysis,
    model_call: ModelCall,
) -> MungerSignal:
    """
    Ask the model for a signal/confidence/reasoning over the analysis.

    Any failure (model error, non-text content, malformed JSON) yields the
    neutral zero-confidence fallback instead of an exception.
    """
    try:
        text = await model_call(MUNGER_SYSTEM_PROMPT, munger_signal_prompt(ticker, analysis))
        return parse_signal_response(text)
    except Exception as e:
        logger.warning(f"Munger narrative for {ticker} failed, defaulting to neutral: {e}")
        return MungerSignal.neutral(FALLBACK_REASONING)
