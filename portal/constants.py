"""
portal/constants.py
-------------------
Business-logic constants shared across modules.

Placing these here keeps the formatting layer (ResponseGenerator) and the
engines aligned on a single source of truth without circular imports.
"""

from __future__ import annotations

from portal.enums import RiskLevel
from portal.models import AllocationEntry


# ---------------------------------------------------------------------------
# Default portfolio
# ---------------------------------------------------------------------------

DEFAULT_ALLOCATION: tuple = (
    AllocationEntry(
        name="Core Growth Equity",
        percentage=40.0,
        risk_level=RiskLevel.MEDIUM,
        expected_return=12.0,
        color="hsl(215 85% 25%)",
        description="Blue-chip growth stocks and ETFs",
    ),
    AllocationEntry(
        name="Swing/Algorithmic Trading",
        percentage=20.0,
        risk_level=RiskLevel.HIGH,
        expected_return=18.0,
        color="hsl(195 75% 35%)",
        description="Active trading strategies",
    ),
    AllocationEntry(
        name="Options Income Strategies",
        percentage=15.0,
        risk_level=RiskLevel.MEDIUM,
        expected_return=15.0,
        color="hsl(142 76% 36%)",
        description="Covered calls, cash-secured puts",
    ),
    AllocationEntry(
        name="Private/Alternative Investments",
        percentage=15.0,
        risk_level=RiskLevel.HIGH,
        expected_return=16.0,
        color="hsl(45 93% 47%)",
        description="REITs, commodities, crypto",
    ),
    AllocationEntry(
        name="Real Estate",
        percentage=10.0,
        risk_level=RiskLevel.LOW,
        expected_return=8.0,
        color="hsl(0 84% 60%)",
        description="Direct real estate, REITs",
    ),
)

DEFAULT_TARGET_CAGR: float = 13.5
DEFAULT_INITIAL_INVESTMENT: float = 100_000.0
DEFAULT_MONTHLY_CONTRIBUTION: float = 2_000.0
DEFAULT_PROJECTION_YEARS: int = 20
DEFAULT_PRESET: str = "balanced"


# ---------------------------------------------------------------------------
# Preset strategies
# ---------------------------------------------------------------------------
# Weights are positional: they line up with DEFAULT_ALLOCATION order.

PRESET_STRATEGIES: dict[str, dict] = {
    "conservative": {
        "name":        "Conservative Growth",
        "target_cagr": 12.0,
        "weights":     (50.0, 10.0, 20.0, 10.0, 10.0),
    },
    "balanced": {
        "name":        "Balanced Strategy",
        "target_cagr": 13.5,
        "weights":     (40.0, 20.0, 15.0, 15.0, 10.0),
    },
    "aggressive": {
        "name":        "Aggressive Growth",
        "target_cagr": 15.0,
        "weights":     (30.0, 30.0, 15.0, 20.0, 5.0),
    },
}


# ---------------------------------------------------------------------------
# Growth scenarios  (name, annual return %)
# ---------------------------------------------------------------------------

GROWTH_SCENARIOS: tuple = (
    ("Conservative", 12.0),
    ("Balanced",     13.5),
    ("Aggressive",   15.0),
)


# ---------------------------------------------------------------------------
# Screener
# ---------------------------------------------------------------------------

MARKETS: dict[str, str] = {
    "US": "United States",
    "UK": "United Kingdom",
    "EU": "Europe",
}

SECTORS: tuple = (
    "Technology", "Healthcare", "Financials", "Consumer Discretionary",
    "Communication Services", "Industrials", "Consumer Staples",
    "Energy", "Utilities", "Real Estate", "Materials",
)

# Each entry drives ResponseGenerator column headers and the set of fields
# ScreenerEngine accepts as ``sort_by``.  Keys match StockRecord attributes.
FIELD_REGISTRY: dict[str, dict] = {
    "market_cap":     {"display": "Market Cap",     "unit": "$M"},
    "price":          {"display": "Price",          "unit": "$"},
    "return_1m":      {"display": "1M Return",      "unit": "%"},
    "return_3m":      {"display": "3M Return",      "unit": "%"},
    "return_12m":     {"display": "12M Return",     "unit": "%"},
    "return_ytd":     {"display": "YTD Return",     "unit": "%"},
    "pe_ratio":       {"display": "P/E",            "unit": ""},
    "pb_ratio":       {"display": "P/B",            "unit": ""},
    "ps_ratio":       {"display": "P/S",            "unit": ""},
    "debt_to_equity": {"display": "Debt/Equity",    "unit": ""},
    "dividend_yield": {"display": "Dividend Yield", "unit": "%"},
    "roe":            {"display": "ROE",            "unit": "%"},
}

# User-facing aliases accepted by the command parser.
FIELD_ALIASES: dict[str, str] = {
    "cap":        "market_cap",
    "marketcap":  "market_cap",
    "price":      "price",
    "1m":         "return_1m",
    "3m":         "return_3m",
    "12m":        "return_12m",
    "return":     "return_12m",
    "ytd":        "return_ytd",
    "pe":         "pe_ratio",
    "pb":         "pb_ratio",
    "ps":         "ps_ratio",
    "de":         "debt_to_equity",
    "debt":       "debt_to_equity",
    "dividend":   "dividend_yield",
    "yield":      "dividend_yield",
    "roe":        "roe",
}

# Overrides merged onto the current filters by ``ScreenerEngine.apply_preset``.
SCREEN_PRESETS: dict[str, dict] = {
    "top performers": {
        "return_12m_min": 20.0,
        "sort_by":        "return_12m",
    },
    "value stocks": {
        "pe_ratio_max": 15.0,
        "sort_by":      "pe_ratio",
    },
    "dividend champions": {
        "dividend_yield_min": 3.0,
        "sort_by":            "dividend_yield",
    },
    "large cap growth": {
        "market_cap_min": 10_000.0,
        "return_12m_min": 15.0,
        "sort_by":        "market_cap",
    },
}
