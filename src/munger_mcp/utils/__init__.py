"""Utility modules."""

from munger_mcp.utils.normalize import canonical_dumps, to_jsonable
from munger_mcp.utils.provenance import build_meta
from munger_mcp.utils.sanitize import sanitize_text, strip_code_fences, strip_think_blocks
from munger_mcp.utils.validators import AnalysisRequest, cache_uri, normalize_ticker, validate_date

__all__ = [
    "canonical_dumps",
    "to_jsonable",
    "build_meta",
    "sanitize_text",
    "strip_code_fences",
    "strip_think_blocks",
    "AnalysisRequest",
    "cache_uri",
    "normalize_ticker",
    "validate_date",
]
