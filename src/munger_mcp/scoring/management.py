"""Management quality analyzer."""

from collections.abc import Sequence

from munger_mcp.models import AnalysisScore, FinancialRecord, InsiderTransaction
from munger_mcp.scoring.series import field_series, paired_rows, period_frame

# Max attainable raw points: cash conversion 3 + debt 3 + cash 2 + insiders 2 + share count 2
MAX_RAW_SCORE = 12


def analyze_management_quality(
    line_items: Sequence[FinancialRecord],
    insider_trades: Sequence[InsiderTransaction],
) -> AnalysisScore:
    """
    Score capital allocation and shareholder alignment.

    The debt and cash checks look at the most recent qualifying period only,
    while cash conversion averages across history. When no period carries
    the fields a check needs, that check adds a "missing data" line and no
    points instead of failing.

    Args:
        line_items: Line-item records in any order
        insider_trades: Insider filings; may be empty

    Returns:
        AnalysisScore clamped to 0-10 (penalties can push the raw score negative)
    """
    if not line_items:
        return AnalysisScore(score=0.0, details=["Insufficient data to analyze management quality"])

    frame = period_frame(line_items)
    raw = 0
    details: list[str] = []

    # 1. Cash conversion: FCF / net income over profitable periods
    conversion = paired_rows(frame, "free_cash_flow", "net_income")
    conversion = conversion[conversion["net_income"] > 0]
    if conversion.empty:
        details.append("Missing FCF or Net Income data")
    else:
        avg_ratio = float((conversion["free_cash_flow"] / conversion["net_income"]).mean())
        if avg_ratio > 1.1:
            raw += 3
            details.append(f"Excellent cash conversion: FCF/NI ratio of {avg_ratio:.2f}")
        elif avg_ratio > 0.9:
            raw += 2
            details.append(f"Good cash conversion: FCF/NI ratio of {avg_ratio:.2f}")
        elif avg_ratio > 0.7:
            raw += 1
            details.append(f"Moderate cash conversion: FCF/NI ratio of {avg_ratio:.2f}")
        else:
            details.append(f"Poor cash conversion: FCF/NI ratio of only {avg_ratio:.2f}")

    # 2. Debt: most recent period with both debt and equity
    leverage = paired_rows(frame, "total_debt", "shareholders_equity")
    if leverage.empty:
        details.append("Missing debt or equity data")
    else:
        latest = leverage.iloc[0]
        equity = float(latest["shareholders_equity"])
        if equity <= 0:
            details.append("Non-positive shareholders' equity: D/E ratio not meaningful")
        else:
            de_ratio = float(latest["total_debt"]) / equity
            if de_ratio < 0.3:
                raw += 3
                details.append(f"Conservative debt management: D/E ratio of {de_ratio:.2f}")
            elif de_ratio < 0.7:
                raw += 2
                details.append(f"Prudent debt management: D/E ratio of {de_ratio:.2f}")
            elif de_ratio < 1.5:
                raw += 1
                details.append(f"Moderate debt level: D/E ratio of {de_ratio:.2f}")
            else:
                details.append(f"High debt level: D/E ratio of {de_ratio:.2f}")

    # 3. Cash management: most recent period with cash and revenue
    cash = paired_rows(frame, "cash_and_equivalents", "revenue")
    if cash.empty:
        details.append("Insufficient cash or revenue data")
    else:
        latest = cash.iloc[0]
        revenue = float(latest["revenue"])
        cash_to_revenue = float(latest["cash_and_equivalents"]) / revenue if revenue > 0 else 0.0
        if 0.10 <= cash_to_revenue <= 0.25:
            raw += 2
            details.append(f"Prudent cash management: Cash/Revenue ratio of {cash_to_revenue:.2f}")
        elif 0.05 <= cash_to_revenue < 0.10 or 0.25 < cash_to_revenue <= 0.40:
            raw += 1
            details.append(f"Acceptable cash position: Cash/Revenue ratio of {cash_to_revenue:.2f}")
        elif cash_to_revenue > 0.40:
            details.append(f"Excess cash reserves: Cash/Revenue ratio of {cash_to_revenue:.2f}")
        else:
            details.append(f"Low cash reserves: Cash/Revenue ratio of {cash_to_revenue:.2f}")

    # 4. Insider activity
    if not insider_trades:
        details.append("No insider trading data available")
    else:
        buys = sum(1 for trade in insider_trades if trade.side == "buy")
        sells = sum(1 for trade in insider_trades if trade.side == "sell")
        total = buys + sells
        if total == 0:
            details.append("No recorded insider buy/sell transactions")
        else:
            buy_ratio = buys / total
            if buy_ratio > 0.7:
                raw += 2
                details.append(f"Strong insider buying: {buys}/{total} transactions are purchases")
            elif buy_ratio > 0.4:
                raw += 1
                details.append(f"Balanced insider trading: {buys}/{total} transactions are purchases")
            elif buy_ratio < 0.1 and sells > 5:
                raw -= 1
                details.append(f"Concerning insider selling: {sells}/{total} transactions are sales")
            else:
                details.append(f"Mixed insider activity: {buys}/{total} transactions are purchases")

    # 5. Share count: newest vs oldest period
    shares = field_series(frame, "outstanding_shares")
    if len(shares) >= 3:
        newest = float(shares.iloc[0])
        oldest = float(shares.iloc[-1])
        if newest < oldest * 0.95:
            raw += 2
            details.append("Shareholder-friendly: reducing share count over time")
        elif newest < oldest * 1.05:
            raw += 1
            details.append("Stable share count: limited dilution")
        elif newest > oldest * 1.2:
            raw -= 1
            details.append("Concerning dilution: share count increased significantly")
        else:
            details.append("Moderate share count increase over time")
    else:
        details.append("Insufficient share count data")

    return AnalysisScore(score=max(0.0, min(10.0, raw * 10 / MAX_RAW_SCORE)), details=details)
