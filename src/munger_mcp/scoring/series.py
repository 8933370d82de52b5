"""Period-ordered views over financial records.

Every analyzer goes through :func:`period_frame` before any trend or
recency logic, so "most recent first" never depends on the order the data
API happened to return.
"""

from collections.abc import Sequence

import pandas as pd

from munger_mcp.models import LINE_ITEM_FIELDS, FinancialRecord

_COLUMNS = ["report_period", *LINE_ITEM_FIELDS]


def period_frame(records: Sequence[FinancialRecord]) -> pd.DataFrame:
    """
    Records as a DataFrame sorted by report period, most recent first.

    Args:
        records: Line-item records in any order

    Returns:
        DataFrame with one row per record and one column per line item;
        missing values are NaN
    """
    if not records:
        return pd.DataFrame(columns=_COLUMNS)
    frame = pd.DataFrame([r.to_dict() for r in records], columns=_COLUMNS)
    return frame.sort_values("report_period", ascending=False, kind="stable").reset_index(drop=True)


def field_series(frame: pd.DataFrame, name: str) -> pd.Series:
    """Non-null values of one line item, most recent first."""
    return frame[name].dropna().astype(float).reset_index(drop=True)


def paired_rows(frame: pd.DataFrame, *names: str) -> pd.DataFrame:
    """Rows where every named line item is present, most recent first."""
    return frame[list(names)].dropna().astype(float).reset_index(drop=True)


def mean_abs_deviation(values: pd.Series) -> float:
    """Mean absolute deviation from the mean."""
    return float((values - values.mean()).abs().mean())
