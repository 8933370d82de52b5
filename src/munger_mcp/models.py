"""Data model for financial inputs, analysis scores and memo output.

All entities are built fresh per request and never mutated after
construction. Numeric fields the upstream API omits stay ``None``; analyzers
read ``None`` as "insufficient data", never as zero.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Signal = Literal["bullish", "bearish", "neutral"]

# Line items requested for every analysis, in API field names
LINE_ITEM_FIELDS: tuple[str, ...] = (
    "revenue",
    "net_income",
    "operating_income",
    "return_on_invested_capital",
    "gross_margin",
    "operating_margin",
    "free_cash_flow",
    "capital_expenditure",
    "cash_and_equivalents",
    "total_debt",
    "shareholders_equity",
    "outstanding_shares",
    "research_and_development",
    "goodwill_and_intangible_assets",
)

BUY_TYPES = frozenset({"buy", "purchase"})
SELL_TYPES = frozenset({"sell", "sale"})

# Fixed section order; renderers depend on it
MEMO_SECTION_TITLES: tuple[str, ...] = (
    "Business Description",
    "Competitive Landscape",
    "Financial Analysis",
    "Growth Prospects",
    "Opportunities & Risks",
)


def _safe_float(value: Any) -> float | None:
    """Convert to float or return None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (ValueError, TypeError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def _safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class FinancialRecord:
    """One reporting period of financial statement line items."""

    ticker: str
    report_period: str
    period: str = "annual"
    currency: str | None = None
    revenue: float | None = None
    net_income: float | None = None
    operating_income: float | None = None
    return_on_invested_capital: float | None = None
    gross_margin: float | None = None
    operating_margin: float | None = None
    free_cash_flow: float | None = None
    capital_expenditure: float | None = None
    cash_and_equivalents: float | None = None
    total_debt: float | None = None
    shareholders_equity: float | None = None
    outstanding_shares: float | None = None
    research_and_development: float | None = None
    goodwill_and_intangible_assets: float | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> FinancialRecord:
        """Build from a search-line-items row, ignoring fields not modelled here."""
        numeric = {name: _safe_float(payload.get(name)) for name in LINE_ITEM_FIELDS}
        return cls(
            ticker=str(payload.get("ticker", "")).upper(),
            report_period=str(payload.get("report_period", ""))[:10],
            period=str(payload.get("period") or "annual"),
            currency=_safe_str(payload.get("currency")),
            **numeric,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class FinancialMetrics:
    """Ratio/metric record for one reporting period."""

    ticker: str
    report_period: str
    period: str = "ttm"
    currency: str | None = None
    market_cap: float | None = None
    enterprise_value: float | None = None
    price_to_earnings_ratio: float | None = None
    price_to_book_ratio: float | None = None
    price_to_sales_ratio: float | None = None
    free_cash_flow_yield: float | None = None
    gross_margin: float | None = None
    operating_margin: float | None = None
    net_margin: float | None = None
    return_on_equity: float | None = None
    return_on_invested_capital: float | None = None
    current_ratio: float | None = None
    debt_to_equity: float | None = None
    interest_coverage: float | None = None
    revenue_growth: float | None = None
    earnings_growth: float | None = None
    free_cash_flow_growth: float | None = None
    earnings_per_share: float | None = None
    free_cash_flow_per_share: float | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> FinancialMetrics:
        numeric = {
            f.name: _safe_float(payload.get(f.name))
            for f in fields(cls)
            if f.name not in ("ticker", "report_period", "period", "currency")
        }
        return cls(
            ticker=str(payload.get("ticker", "")).upper(),
            report_period=str(payload.get("report_period", ""))[:10],
            period=str(payload.get("period") or "ttm"),
            currency=_safe_str(payload.get("currency")),
            **numeric,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MarketSnapshot:
    """Market capitalization as of an end date."""

    ticker: str
    end_date: str
    market_cap: float | None = None


@dataclass(frozen=True)
class InsiderTransaction:
    """A single insider filing, normalized to a buy/sell side."""

    ticker: str
    name: str | None = None
    title: str | None = None
    transaction_type: str | None = None
    price: float | None = None
    quantity: float | None = None
    filing_date: str | None = None
    transaction_date: str | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> InsiderTransaction:
        quantity = _safe_float(payload.get("transaction_shares"))
        transaction_type = _safe_str(payload.get("transaction_type"))
        if transaction_type is None and quantity:
            transaction_type = "buy" if quantity > 0 else "sell"
        filing_date = _safe_str(payload.get("filing_date"))
        transaction_date = _safe_str(payload.get("transaction_date"))
        return cls(
            ticker=str(payload.get("ticker", "")).upper(),
            name=_safe_str(payload.get("name")),
            title=_safe_str(payload.get("title")),
            transaction_type=transaction_type,
            price=_safe_float(payload.get("transaction_price_per_share")),
            quantity=quantity,
            filing_date=filing_date[:10] if filing_date else None,
            transaction_date=transaction_date[:10] if transaction_date else None,
        )

    @property
    def side(self) -> Literal["buy", "sell"] | None:
        """Buy/sell side; the whole type must equal one of the known words, ignoring case."""
        if not self.transaction_type:
            return None
        kind = self.transaction_type.strip().lower()
        if kind in BUY_TYPES:
            return "buy"
        if kind in SELL_TYPES:
            return "sell"
        return None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["side"] = self.side
        return data


@dataclass(frozen=True)
class CompanyNews:
    """News headline for a ticker."""

    ticker: str
    title: str
    date: str | None = None
    source: str | None = None
    author: str | None = None
    url: str | None = None
    sentiment: str | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> CompanyNews:
        date = _safe_str(payload.get("date"))
        return cls(
            ticker=str(payload.get("ticker", "")).upper(),
            title=str(payload.get("title") or ""),
            date=date[:10] if date else None,
            source=_safe_str(payload.get("source")),
            author=_safe_str(payload.get("author")),
            url=_safe_str(payload.get("url")),
            sentiment=_safe_str(payload.get("sentiment")),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CompanyFacts:
    """Descriptive company metadata."""

    ticker: str
    name: str | None = None
    sector: str | None = None
    industry: str | None = None
    exchange: str | None = None
    website_url: str | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> CompanyFacts:
        return cls(
            ticker=str(payload.get("ticker", "")).upper(),
            name=_safe_str(payload.get("name")),
            sector=_safe_str(payload.get("sector")),
            industry=_safe_str(payload.get("industry")),
            exchange=_safe_str(payload.get("exchange")),
            website_url=_safe_str(payload.get("website_url")),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AnalysisScore:
    """Bounded 0-10 score plus the rationale log in evaluation order."""

    score: float
    details: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"score": self.score, "details": list(self.details)}


@dataclass(frozen=True)
class IntrinsicValueRange:
    conservative: float
    reasonable: float
    optimistic: float


@dataclass(frozen=True)
class ValuationResult(AnalysisScore):
    """Owner-earnings valuation score with the estimates behind it."""

    intrinsic_value_range: IntrinsicValueRange | None = None
    fcf_yield: float | None = None
    normalized_fcf: float | None = None

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["intrinsic_value_range"] = (
            asdict(self.intrinsic_value_range) if self.intrinsic_value_range else None
        )
        data["fcf_yield"] = self.fcf_yield
        data["normalized_fcf"] = self.normalized_fcf
        return data


@dataclass(frozen=True)
class AggregatedAnalysis:
    """Weighted combination of the four analyzer scores for one ticker."""

    ticker: str
    signal: Signal
    score: float
    moat: AnalysisScore
    management: AnalysisScore
    predictability: AnalysisScore
    valuation: ValuationResult
    max_score: int = 10

    def to_dict(self) -> dict[str, Any]:
        return {
            "signal": self.signal,
            "score": self.score,
            "max_score": self.max_score,
            "moat": self.moat.to_dict(),
            "management": self.management.to_dict(),
            "predictability": self.predictability.to_dict(),
            "valuation": self.valuation.to_dict(),
        }


class MungerSignal(BaseModel):
    """Final LLM-phrased signal, validated straight from the model's JSON."""

    model_config = ConfigDict(frozen=True)

    signal: Signal
    confidence: float = Field(allow_inf_nan=False)
    reasoning: str

    @field_validator("signal", mode="before")
    @classmethod
    def _normalize_signal(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("confidence")
    @classmethod
    def _clamp_confidence(cls, value: float) -> float:
        return max(0.0, min(100.0, value))

    @classmethod
    def neutral(cls, reasoning: str) -> MungerSignal:
        return cls(signal="neutral", confidence=0.0, reasoning=reasoning)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()


@dataclass(frozen=True)
class MemoSection:
    title: str
    content: str


@dataclass(frozen=True)
class InvestmentMemo:
    """Assembled memo; ``content`` is the markdown export."""

    company_name: str
    ticker: str
    summary: str
    content: str
    sections: list[MemoSection] = field(default_factory=list)

    def sections_as_dicts(self) -> list[dict[str, str]]:
        return [{"title": s.title, "content": s.content} for s in self.sections]
