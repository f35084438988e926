"""
portal/config.py
----------------
Shared financial configuration constants.

Keeping these separate from portal/constants.py (which holds presets and
display registries) keeps a clean boundary: this file owns tunable financial
parameters and runtime knobs that are independent of session logic.
"""

import os

# ---------------------------------------------------------------------------
# Risk-free rate
# ---------------------------------------------------------------------------
# Annual risk-free rate in percentage points, used as the Sharpe Ratio
# baseline.  Expected returns elsewhere are also in percent, so no scaling.

RISK_FREE_RATE: float = 3.0   # 3% p.a.

# ---------------------------------------------------------------------------
# Risk tier tables
# ---------------------------------------------------------------------------
# Keys are RiskLevel values.  RISK_WEIGHTS drives the 1-3 overall risk score;
# VOLATILITY_BY_RISK is the assumed annualised volatility per tier (in %).

RISK_WEIGHTS: dict = {
    "Low":    1.0,
    "Medium": 2.0,
    "High":   3.0,
}

VOLATILITY_BY_RISK: dict = {
    "Low":    8.0,
    "Medium": 15.0,
    "High":   25.0,
}

# Overall risk score boundaries for the qualitative label.
RISK_LABEL_CONSERVATIVE_MAX: float = 1.5
RISK_LABEL_MODERATE_MAX:     float = 2.5

# ---------------------------------------------------------------------------
# Risk rule limits
# ---------------------------------------------------------------------------

MAX_SINGLE_POSITION_PCT:  float = 5.0
SECTOR_CONCENTRATION_PCT: float = 15.0
MAX_HIGH_RISK_PCT:        float = 40.0
MIN_DIVERSIFICATION:      int   = 5

# ---------------------------------------------------------------------------
# Rebalancing tolerance
# ---------------------------------------------------------------------------
# Totals within this distance of 100 are treated as balanced.

TOTAL_TOLERANCE: float = 1e-9

# ---------------------------------------------------------------------------
# Simulated latency (seconds)
# ---------------------------------------------------------------------------
# The dashboard fakes network round-trips before returning mock results.

ANALYSIS_DELAY_SECONDS:  float = 3.0
SCREENING_DELAY_SECONDS: float = 1.5

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

LOG_LEVEL: str = os.environ.get("PORTAL_LOG_LEVEL", "WARNING").upper()
