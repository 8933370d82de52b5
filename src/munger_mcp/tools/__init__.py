"""Analysis tools."""

from munger_mcp.tools.memo import run_investment_memo
from munger_mcp.tools.munger import run_munger_analysis

__all__ = [
    "run_investment_memo",
    "run_munger_analysis",
]
