"""Moat strength analyzer."""

from collections.abc import Sequence

from munger_mcp.models import AnalysisScore, FinancialMetrics, FinancialRecord
from munger_mcp.scoring.series import field_series, paired_rows, period_frame

# Max attainable raw points: ROIC 3 + margins 2 + capex 2 + R&D 1 + intangibles 1
MAX_RAW_SCORE = 9

ROIC_THRESHOLD = 0.15


def analyze_moat_strength(
    metrics: Sequence[FinancialMetrics],
    line_items: Sequence[FinancialRecord],
) -> AnalysisScore:
    """
    Score the durability of the competitive advantage.

    Checks, each additive:
    - Consistently high returns on invested capital (ROIC > 15%)
    - Pricing power (improving or high gross margins)
    - Low capital requirements (capex / revenue)
    - Investment in R&D
    - Goodwill / intangible assets (brand, IP)

    Args:
        metrics: Financial metrics records (only checked for presence)
        line_items: Line-item records in any order

    Returns:
        AnalysisScore scaled to 0-10
    """
    if not metrics or not line_items:
        return AnalysisScore(score=0.0, details=["Insufficient data to analyze moat strength"])

    frame = period_frame(line_items)
    raw = 0
    details: list[str] = []

    # 1. ROIC
    roic = field_series(frame, "return_on_invested_capital")
    if roic.empty:
        details.append("No ROIC data available")
    else:
        periods = len(roic)
        high_roic = int((roic > ROIC_THRESHOLD).sum())
        share = high_roic / periods
        if share >= 0.8:
            raw += 3
            details.append(f"Excellent ROIC: >15% in {high_roic}/{periods} periods")
        elif share >= 0.5:
            raw += 2
            details.append(f"Good ROIC: >15% in {high_roic}/{periods} periods")
        elif high_roic > 0:
            raw += 1
            details.append(f"Mixed ROIC: >15% in only {high_roic}/{periods} periods")
        else:
            details.append(f"Poor ROIC: never exceeds 15% across {periods} periods")

    # 2. Gross margin trend (pricing power)
    margins = field_series(frame, "gross_margin")
    if len(margins) >= 3:
        values = margins.tolist()
        steps = len(values) - 1
        # newer >= older, walking back from the most recent period
        non_decreasing = sum(1 for newer, older in zip(values, values[1:]) if newer >= older)
        avg_margin = float(margins.mean())
        if non_decreasing / steps >= 0.7:
            raw += 2
            details.append(
                f"Strong pricing power: gross margins improving in {non_decreasing}/{steps} periods"
            )
        elif avg_margin > 0.30:
            raw += 1
            details.append(f"Good pricing power: average gross margin {avg_margin:.1%}")
        else:
            details.append(f"Limited pricing power: average gross margin {avg_margin:.1%} and not improving")
    else:
        details.append("Insufficient gross margin data")

    # 3. Capital intensity
    capex = paired_rows(frame, "capital_expenditure", "revenue")
    capex = capex[capex["revenue"] > 0]
    if len(capex) >= 3:
        # capex is usually reported negative
        avg_ratio = float((capex["capital_expenditure"].abs() / capex["revenue"]).mean())
        if avg_ratio < 0.05:
            raw += 2
            details.append(f"Low capital requirements: avg capex {avg_ratio:.1%} of revenue")
        elif avg_ratio < 0.10:
            raw += 1
            details.append(f"Moderate capital requirements: avg capex {avg_ratio:.1%} of revenue")
        else:
            details.append(f"High capital requirements: avg capex {avg_ratio:.1%} of revenue")
    else:
        details.append("Insufficient data for capital intensity analysis")

    # 4. R&D
    r_and_d = field_series(frame, "research_and_development")
    if not r_and_d.empty and float(r_and_d.sum()) > 0:
        raw += 1
        details.append("Invests in R&D, building intellectual property")
    else:
        details.append("No R&D investment reported")

    # 5. Goodwill / intangibles
    intangibles = field_series(frame, "goodwill_and_intangible_assets")
    if not intangibles.empty:
        raw += 1
        details.append("Significant goodwill/intangible assets, suggesting brand value or IP")
    else:
        details.append("No goodwill/intangible assets reported")

    return AnalysisScore(score=min(10.0, raw * 10 / MAX_RAW_SCORE), details=details)
