"""Text cleanup for untrusted upstream text and raw model output."""

import re

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_THINK_BLOCK = re.compile(r"<think>.*?</think>", re.DOTALL | re.IGNORECASE)
_FENCE_OPEN = re.compile(r"^\s*```[a-zA-Z0-9_-]*\s*\n?")
_FENCE_CLOSE = re.compile(r"\n?\s*```\s*$")


def sanitize_text(text: str | None, max_length: int = 500) -> str | None:
    """
    Sanitize untrusted text fields before they are embedded in prompts.

    Removes control characters (newlines and tabs survive, carriage returns
    do not) and truncates to max_length.
    Apply to: headlines, insider names/titles, company facts.

    Args:
        text: Text to sanitize (may be None)
        max_length: Maximum length before truncation

    Returns:
        Sanitized text or None if input was None
    """
    if text is None:
        return None

    text = _CONTROL_CHARS.sub("", text.replace("\r", ""))

    if len(text) > max_length:
        text = text[:max_length] + "..."

    return text.strip()


def strip_think_blocks(text: str) -> str:
    """Drop <think>...</think> reasoning emitted by reasoning models."""
    return _THINK_BLOCK.sub("", text).strip()


def strip_code_fences(text: str) -> str:
    """
    Remove a surrounding markdown code fence (```json ... ```).

    Text without a fence is returned stripped but otherwise unchanged.
    """
    stripped = text.strip()
    if not stripped.startswith("```"):
        return stripped
    stripped = _FENCE_OPEN.sub("", stripped, count=1)
    stripped = _FENCE_CLOSE.sub("", stripped, count=1)
    return stripped.strip()
