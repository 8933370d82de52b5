"""Owner-earnings valuation analyzer."""

from collections.abc import Sequence

from munger_mcp.models import FinancialRecord, IntrinsicValueRange, ValuationResult
from munger_mcp.scoring.series import field_series, period_frame

MIN_FCF_PERIODS = 3
NORMALIZATION_PERIODS = 5

# Fixed multiples of normalized FCF
CONSERVATIVE_MULTIPLE = 10
REASONABLE_MULTIPLE = 15
OPTIMISTIC_MULTIPLE = 20

# Max attainable raw points: FCF yield 4 + margin of safety 3 + trend 3
MAX_RAW_SCORE = 10


def calculate_munger_valuation(
    line_items: Sequence[FinancialRecord],
    market_cap: float | None,
) -> ValuationResult:
    """
    Value the business on normalized free cash flow ("owner earnings").

    FCF is sorted most recent first before normalizing, so the average covers
    the latest five reported periods whatever order the records arrive in.

    Args:
        line_items: Line-item records in any order
        market_cap: Market capitalization as of the analysis end date

    Returns:
        ValuationResult with intrinsic value range, FCF yield and normalized FCF
    """
    if market_cap is None or market_cap <= 0:
        return ValuationResult(
            score=0.0,
            details=["Insufficient data to perform valuation: market cap unavailable"],
        )

    fcf = field_series(period_frame(line_items), "free_cash_flow")
    if len(fcf) < MIN_FCF_PERIODS:
        return ValuationResult(
            score=0.0,
            details=["Insufficient free cash flow data for valuation"],
        )

    values = fcf.tolist()
    window = values[:NORMALIZATION_PERIODS]
    normalized_fcf = sum(window) / len(window)

    if normalized_fcf <= 0:
        return ValuationResult(
            score=0.0,
            details=[f"Negative or zero normalized FCF ({normalized_fcf:,.0f}), cannot value"],
            normalized_fcf=normalized_fcf,
        )

    raw = 0
    details: list[str] = []

    # 1. FCF yield
    fcf_yield = normalized_fcf / market_cap
    if fcf_yield > 0.08:
        raw += 4
        details.append(f"Excellent value: {fcf_yield:.1%} FCF yield")
    elif fcf_yield > 0.05:
        raw += 3
        details.append(f"Good value: {fcf_yield:.1%} FCF yield")
    elif fcf_yield > 0.03:
        raw += 1
        details.append(f"Fair value: {fcf_yield:.1%} FCF yield")
    else:
        details.append(f"Expensive: only {fcf_yield:.1%} FCF yield")

    # 2. Intrinsic value range and margin of safety
    value_range = IntrinsicValueRange(
        conservative=normalized_fcf * CONSERVATIVE_MULTIPLE,
        reasonable=normalized_fcf * REASONABLE_MULTIPLE,
        optimistic=normalized_fcf * OPTIMISTIC_MULTIPLE,
    )
    margin_of_safety = (value_range.reasonable - market_cap) / market_cap
    if margin_of_safety > 0.3:
        raw += 3
        details.append(f"Large margin of safety: {margin_of_safety:.1%} upside to reasonable value")
    elif margin_of_safety > 0.1:
        raw += 2
        details.append(f"Moderate margin of safety: {margin_of_safety:.1%} upside to reasonable value")
    elif margin_of_safety > -0.1:
        raw += 1
        details.append(f"Fair price: within 10% of reasonable value ({margin_of_safety:.1%})")
    else:
        details.append(f"Expensive: {-margin_of_safety:.1%} premium to reasonable value")

    # 3. Owner earnings trajectory
    recent_avg = sum(values[:3]) / 3
    older_avg = sum(values[-3:]) / 3 if len(values) >= 6 else values[-1]
    if recent_avg > older_avg * 1.2:
        raw += 3
        details.append("Growing FCF trend adds to intrinsic value")
    elif recent_avg > older_avg:
        raw += 2
        details.append("Stable to growing FCF supports valuation")
    else:
        details.append("Declining FCF trend is concerning")

    return ValuationResult(
        score=float(min(MAX_RAW_SCORE, raw)),
        details=details,
        intrinsic_value_range=value_range,
        fcf_yield=fcf_yield,
        normalized_fcf=normalized_fcf,
    )
