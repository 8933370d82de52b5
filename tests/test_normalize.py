"""Tests for normalize module."""

import json

import pandas as pd

from munger_mcp.models import AnalysisScore, IntrinsicValueRange, ValuationResult
from munger_mcp.utils.normalize import canonical_dumps, to_jsonable


class TestCanonicalDumps:
    """Tests for canonical_dumps function."""

    def test_sorted_keys(self):
        """Keys should be sorted at every level."""
        obj = {"z": 1, "a": 2, "m": {"z": 3, "a": 4}}
        assert canonical_dumps(obj) == '{"a":2,"m":{"a":4,"z":3},"z":1}'

    def test_minimal_separators(self):
        """Output should use minimal separators (no spaces)."""
        result = canonical_dumps({"a": [1, 2, 3]})
        assert result == '{"a":[1,2,3]}'
        assert " " not in result

    def test_indent_keeps_ordering(self):
        """Indented output parses back to the same document."""
        obj = {"b": [3, 1], "a": {"y": 1, "x": 2}}
        assert json.loads(canonical_dumps(obj, indent=2)) == obj
        assert canonical_dumps(obj, indent=2).index('"a"') < canonical_dumps(obj, indent=2).index('"b"')

    def test_unicode_preserved(self):
        """Unicode should be preserved (not escaped)."""
        assert "Nestlé" in canonical_dumps({"name": "Nestlé"})

    def test_nan_and_inf_become_null(self):
        assert canonical_dumps({"a": float("nan"), "b": float("-inf")}) == '{"a":null,"b":null}'

    def test_list_order_preserved(self):
        """Rationale logs keep evaluation order."""
        score = AnalysisScore(score=5.0, details=["second", "first"])
        assert canonical_dumps(score) == '{"details":["second","first"],"score":5.0}'


class TestToJsonable:
    """Tests for to_jsonable."""

    def test_nested_dataclasses(self):
        result = ValuationResult(
            score=7.0,
            details=["x"],
            intrinsic_value_range=IntrinsicValueRange(conservative=10.0, reasonable=15.0, optimistic=20.0),
            fcf_yield=0.06,
            normalized_fcf=1.0,
        )
        data = to_jsonable({"valuation": result})

        assert data["valuation"]["intrinsic_value_range"] == {
            "conservative": 10.0,
            "reasonable": 15.0,
            "optimistic": 20.0,
        }

    def test_numpy_scalars(self):
        """pandas reductions yield numpy scalars; they serialize as plain numbers."""
        value = pd.Series([1, 2]).sum()
        result = to_jsonable({"total": value})

        assert result == {"total": 3}
        assert type(result["total"]) is int

    def test_tuples_become_lists(self):
        assert to_jsonable((1, (2, 3))) == [1, [2, 3]]
