"""
portal/models.py
----------------
Immutable value objects passed between the engines and the presentation
layer.  Engines never mutate these; updates produce new instances via
``dataclasses.replace``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import FrozenSet, List, Optional, Tuple

from portal.enums import Recommendation, RiskLevel, SortOrder


# ---------------------------------------------------------------------------
# Portfolio
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AllocationEntry:
    """One named slice of a portfolio."""
    name: str
    percentage: float
    risk_level: RiskLevel
    expected_return: float          # annual %
    color: str = ""
    description: str = ""


@dataclass(frozen=True)
class GrowthPoint:
    year: int
    portfolio_value: float
    contributions: float

    @property
    def gains(self) -> float:
        return self.portfolio_value - self.contributions


@dataclass(frozen=True)
class GrowthSummary:
    final_value: float
    total_gains: float
    total_contributions: float
    multiple: Optional[float]       # None when nothing was contributed


@dataclass(frozen=True)
class ScenarioProjection:
    scenario: str
    annual_return: float
    value: float
    multiple: Optional[float]


@dataclass(frozen=True)
class RiskMetrics:
    overall_risk: float             # 1 (all Low) .. 3 (all High)
    expected_volatility: float      # %
    max_position: float             # %
    diversification: int
    expected_return: float          # %
    sharpe_ratio: float


@dataclass(frozen=True)
class RiskRule:
    rule: str
    current: str
    limit: str
    passed: bool
    description: str


# ---------------------------------------------------------------------------
# Screener
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StockRecord:
    ticker: str
    name: str
    market: str
    sector: str
    market_cap: float               # USD millions
    price: float
    return_1m: float
    return_3m: float
    return_12m: float
    return_ytd: float
    pe_ratio: float
    pb_ratio: float
    ps_ratio: float
    debt_to_equity: float
    dividend_yield: float
    roe: float

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]


@dataclass(frozen=True)
class ScreeningFilters:
    markets: FrozenSet[str] = frozenset()
    sectors: FrozenSet[str] = frozenset()
    market_cap_min: float = 0.0
    market_cap_max: float = 10_000_000.0
    return_12m_min: float = -100.0
    return_12m_max: float = 1000.0
    pe_ratio_min: float = 0.0
    pe_ratio_max: float = 100.0
    dividend_yield_min: float = 0.0
    sort_by: str = "return_12m"
    sort_order: SortOrder = SortOrder.DESC


# ---------------------------------------------------------------------------
# Thesis
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CompanyProfile:
    name: str
    ticker: str
    industry: str
    sector: str
    business_model: str
    key_products: str
    recent_performance: str


@dataclass(frozen=True)
class Rationale:
    growth_drivers: str
    competitive_advantages: str
    industry_trends: str


@dataclass(frozen=True)
class RiskAssessment:
    risks: str
    mitigants: str


@dataclass(frozen=True)
class Valuation:
    current_price: int
    target_price: int
    method: str
    upside: int                     # %
    downside: int                   # %


@dataclass(frozen=True)
class Horizon:
    short_term: str
    long_term: str
    exit_criteria: str


@dataclass(frozen=True)
class ThesisRecord:
    company: CompanyProfile
    rationale: Rationale
    catalysts: Tuple[str, ...]
    risks: RiskAssessment
    valuation: Valuation
    horizon: Horizon
    final_thesis: str
    recommendation: Recommendation


@dataclass(frozen=True)
class PricePoint:
    label: str
    price: float
    volume: int


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PortfolioState:
    allocation: Tuple[AllocationEntry, ...]
    target_cagr: float
    initial_investment: float
    monthly_contribution: float
    years: int
    preset: str


@dataclass(frozen=True)
class ResearchState:
    filters: ScreeningFilters = field(default_factory=ScreeningFilters)
    last_thesis: Optional[ThesisRecord] = None
