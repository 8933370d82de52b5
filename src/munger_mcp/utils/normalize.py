"""Schema-stable JSON serialization for prompt payloads and tool output.

Prompt snapshots must be reproducible, so every nested analysis object goes
through one serializer:
1. Key ordering: sorted at every level
2. Lists: order preserved (rationale logs and memo sections are ordered)
3. NaN/inf: replaced with null for JSON safety
4. Dataclasses: expanded through their ``to_dict`` when present
"""

from __future__ import annotations

import dataclasses
import json
import math
from typing import Any


def to_jsonable(obj: Any) -> Any:
    """Recursively convert dataclasses/tuples and scrub NaN/inf values."""
    if hasattr(obj, "to_dict") and callable(obj.to_dict):
        return to_jsonable(obj.to_dict())
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return to_jsonable(dataclasses.asdict(obj))
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]
    if isinstance(obj, float) and (math.isnan(obj) or math.isinf(obj)):
        return None
    # numpy scalars from pandas reductions
    if hasattr(obj, "item") and callable(obj.item):
        return to_jsonable(obj.item())
    return obj


def canonical_dumps(obj: Any, indent: int | None = None) -> str:
    """Produce canonical JSON string with sorted keys.

    Compact separators by default; ``indent`` gives the same ordering in a
    human-readable layout for prompts. Uses allow_nan=False to fail fast if
    NaN/inf values slip through sanitization.
    """
    separators = (",", ":") if indent is None else (",", ": ")
    return json.dumps(
        to_jsonable(obj),
        sort_keys=True,
        indent=indent,
        separators=separators,
        ensure_ascii=False,
        allow_nan=False,
    )
