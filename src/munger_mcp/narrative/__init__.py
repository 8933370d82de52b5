"""Narrative generation: LLM signal and investment memo."""

from munger_mcp.narrative.memo import (
    MemoInputs,
    assemble_memo_content,
    generate_investment_memo,
    section_payload,
)
from munger_mcp.narrative.signal import (
    FALLBACK_REASONING,
    generate_munger_output,
    parse_signal_response,
)

__all__ = [
    "FALLBACK_REASONING",
    "MemoInputs",
    "assemble_memo_content",
    "generate_investment_memo",
    "generate_munger_output",
    "parse_signal_response",
    "section_payload",
]
