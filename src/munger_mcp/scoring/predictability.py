"""Business predictability analyzer."""

from collections.abc import Sequence

import pandas as pd

from munger_mcp.models import AnalysisScore, FinancialRecord
from munger_mcp.scoring.series import field_series, mean_abs_deviation, period_frame

MIN_PERIODS = 5
MIN_GROWTH_RATES = 4

# Max attainable raw points: revenue 3 + operating income 3 + margins 2 + FCF 2
MAX_RAW_SCORE = 10


def analyze_predictability(line_items: Sequence[FinancialRecord]) -> AnalysisScore:
    """
    Score how steady revenue, operating income, margins and cash flow have been.

    Needs five or more records overall, and five or more periods reporting the
    field each sub-check reads.
    """
    if len(line_items) < MIN_PERIODS:
        return AnalysisScore(
            score=0.0,
            details=["Insufficient data to analyze business predictability (need 5+ years)"],
        )

    frame = period_frame(line_items)
    raw = 0
    details: list[str] = []

    # 1. Revenue growth and its stability
    revenues = field_series(frame, "revenue")
    if len(revenues) >= MIN_PERIODS:
        values = revenues.tolist()
        # Recent-over-older growth for consecutive periods
        rates = pd.Series(
            [values[i] / values[i + 1] - 1 for i in range(len(values) - 1) if values[i + 1] > 0],
            dtype=float,
        )
        if len(rates) >= MIN_GROWTH_RATES:
            avg_growth = float(rates.mean())
            volatility = mean_abs_deviation(rates)
            if avg_growth > 0.05 and volatility < 0.10:
                raw += 3
                details.append(
                    f"Highly predictable revenue: {avg_growth:.1%} avg growth with low volatility"
                )
            elif avg_growth > 0 and volatility < 0.20:
                raw += 2
                details.append(
                    f"Moderately predictable revenue: {avg_growth:.1%} avg growth with some volatility"
                )
            elif avg_growth > 0:
                raw += 1
                details.append(
                    f"Growing but less predictable revenue: {avg_growth:.1%} avg growth "
                    f"with high volatility ({volatility:.1%})"
                )
            else:
                details.append(f"Declining or highly unpredictable revenue: {avg_growth:.1%} avg growth")
        else:
            details.append("Insufficient revenue growth history")
    else:
        details.append("Insufficient revenue history for predictability analysis")

    # 2. Operating income positivity
    op_income = field_series(frame, "operating_income")
    if len(op_income) >= MIN_PERIODS:
        periods = len(op_income)
        positive = int((op_income > 0).sum())
        if positive == periods:
            raw += 3
            details.append("Highly predictable operations: operating income positive in all periods")
        elif positive >= periods * 0.8:
            raw += 2
            details.append(f"Predictable operations: operating income positive in {positive}/{periods} periods")
        elif positive >= periods * 0.6:
            raw += 1
            details.append(
                f"Somewhat predictable operations: operating income positive in {positive}/{periods} periods"
            )
        else:
            details.append(
                f"Unpredictable operations: operating income positive in only {positive}/{periods} periods"
            )
    else:
        details.append("Insufficient operating income history")

    # 3. Operating margin stability
    margins = field_series(frame, "operating_margin")
    if len(margins) >= MIN_PERIODS:
        avg_margin = float(margins.mean())
        volatility = mean_abs_deviation(margins)
        if volatility < 0.03:
            raw += 2
            details.append(f"Highly predictable margins: {avg_margin:.1%} avg with minimal volatility")
        elif volatility < 0.07:
            raw += 1
            details.append(f"Moderately predictable margins: {avg_margin:.1%} avg with some volatility")
        else:
            details.append(
                f"Unpredictable margins: {avg_margin:.1%} avg with high volatility ({volatility:.1%})"
            )
    else:
        details.append("Insufficient margin history")

    # 4. Free cash flow positivity
    fcf = field_series(frame, "free_cash_flow")
    if len(fcf) >= MIN_PERIODS:
        periods = len(fcf)
        positive = int((fcf > 0).sum())
        if positive == periods:
            raw += 2
            details.append("Highly predictable cash generation: positive FCF in all periods")
        elif positive >= periods * 0.8:
            raw += 1
            details.append(f"Predictable cash generation: positive FCF in {positive}/{periods} periods")
        else:
            details.append(f"Unpredictable cash generation: positive FCF in only {positive}/{periods} periods")
    else:
        details.append("Insufficient free cash flow history")

    return AnalysisScore(score=float(min(MAX_RAW_SCORE, raw)), details=details)
