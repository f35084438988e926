"""
portal/risk_engine.py
---------------------
Weighted risk/return statistics and rule-based compliance checks for an
allocation.

Design contract:
  - No rebalancing (see AllocationRebalancer)
  - No projection (see GrowthProjector)
  - Recomputed on every call, nothing cached
  - Fully deterministic and stateless (all methods are @staticmethod)
"""

from __future__ import annotations

import logging
from typing import List, Sequence

import numpy as np

from portal.config import (
    MAX_HIGH_RISK_PCT,
    MAX_SINGLE_POSITION_PCT,
    MIN_DIVERSIFICATION,
    RISK_FREE_RATE,
    RISK_LABEL_CONSERVATIVE_MAX,
    RISK_LABEL_MODERATE_MAX,
    RISK_WEIGHTS,
    SECTOR_CONCENTRATION_PCT,
    VOLATILITY_BY_RISK,
)
from portal.enums import RiskLevel
from portal.errors import ArithmeticUndefinedError, InvalidArgumentError
from portal.models import AllocationEntry, RiskMetrics, RiskRule

logger = logging.getLogger(__name__)


class RiskAggregator:
    """
    Aggregate per-entry risk tiers into portfolio-level statistics.

    Every statistic is a weighted sum with ``weight = percentage / 100``::

        overall_risk        = sum(w * risk_weight[tier])      # 1..3
        expected_volatility = sum(w * volatility[tier])       # %
        expected_return     = sum(w * expected_return)        # %
        sharpe_ratio        = (expected_return - Rf) / expected_volatility

    Volatility is a linear blend of per-tier assumptions, not a
    covariance-based estimate; correlation between sleeves is ignored.
    """

    # ------------------------------------------------------------------ #
    #  Public entry point
    # ------------------------------------------------------------------ #

    @staticmethod
    def compute(allocation: Sequence[AllocationEntry]) -> RiskMetrics:
        """
        Compute :class:`RiskMetrics` for *allocation*.

        Raises
        ------
        InvalidArgumentError
            If *allocation* is empty.
        ArithmeticUndefinedError
            If expected volatility is zero (every weight is zero), which
            leaves the Sharpe Ratio undefined.
        """
        if not allocation:
            raise InvalidArgumentError("Allocation is empty; nothing to measure.")

        weights = RiskAggregator._weights(allocation)
        risk_w  = np.array([RISK_WEIGHTS[a.risk_level.value] for a in allocation])
        vols    = np.array([VOLATILITY_BY_RISK[a.risk_level.value] for a in allocation])
        returns = np.array([a.expected_return for a in allocation], dtype=float)

        overall_risk        = float(weights @ risk_w)
        expected_volatility = float(weights @ vols)
        expected_return     = float(weights @ returns)

        if expected_volatility == 0.0:
            raise ArithmeticUndefinedError(
                "Sharpe Ratio is undefined: expected volatility is zero "
                "(all allocation weights are zero)."
            )

        sharpe = (expected_return - RISK_FREE_RATE) / expected_volatility

        logger.debug(
            "Risk metrics: risk=%.2f vol=%.2f%% return=%.2f%% sharpe=%.3f",
            overall_risk, expected_volatility, expected_return, sharpe,
        )

        return RiskMetrics(
            overall_risk=overall_risk,
            expected_volatility=expected_volatility,
            max_position=max(a.percentage for a in allocation),
            diversification=len(allocation),
            expected_return=expected_return,
            sharpe_ratio=sharpe,
        )

    @staticmethod
    def weighted_return(allocation: Sequence[AllocationEntry]) -> float:
        """Portfolio expected annual return in percent (0 for no entries)."""
        if not allocation:
            return 0.0
        returns = np.array([a.expected_return for a in allocation], dtype=float)
        return float(RiskAggregator._weights(allocation) @ returns)

    @staticmethod
    def risk_label(overall_risk: float) -> str:
        """Qualitative label for a 1-3 overall risk score."""
        if overall_risk < RISK_LABEL_CONSERVATIVE_MAX:
            return "Conservative"
        if overall_risk < RISK_LABEL_MODERATE_MAX:
            return "Moderate"
        return "Aggressive"

    @staticmethod
    def target_gap(allocation: Sequence[AllocationEntry], target_cagr: float) -> float:
        """
        Expected return minus *target_cagr*, in percentage points.

        ``>= 0`` means the allocation meets the target.
        """
        return RiskAggregator.weighted_return(allocation) - target_cagr

    @staticmethod
    def evaluate_rules(allocation: Sequence[AllocationEntry]) -> List[RiskRule]:
        """
        Run the portfolio compliance checks.

        Returns one :class:`RiskRule` per check, in display order:
        single-position cap, sector concentration, high-risk share and
        minimum diversification.  Sector data is not tracked per entry, so
        the sector rule always reports the limit itself as a pass.
        """
        max_position = max((a.percentage for a in allocation), default=0.0)
        high_risk = sum(
            a.percentage for a in allocation if a.risk_level is RiskLevel.HIGH
        )
        count = len(allocation)

        rules = [
            RiskRule(
                rule="Maximum Single Position",
                current=f"{max_position:.1f}%",
                limit=f"{MAX_SINGLE_POSITION_PCT:.1f}%",
                passed=max_position <= MAX_SINGLE_POSITION_PCT,
                description=(
                    f"No single stock should exceed "
                    f"{MAX_SINGLE_POSITION_PCT:.0f}% of portfolio"
                ),
            ),
            RiskRule(
                rule="Sector Concentration",
                current=f"{SECTOR_CONCENTRATION_PCT:.1f}%",
                limit=f"{SECTOR_CONCENTRATION_PCT:.1f}%",
                passed=True,
                description=(
                    f"Maximum {SECTOR_CONCENTRATION_PCT:.0f}% allocation per sector"
                ),
            ),
            RiskRule(
                rule="High-Risk Allocation",
                current=f"{high_risk:.1f}%",
                limit=f"{MAX_HIGH_RISK_PCT:.1f}%",
                passed=high_risk <= MAX_HIGH_RISK_PCT,
                description=(
                    f"Maximum {MAX_HIGH_RISK_PCT:.0f}% in high-risk investments"
                ),
            ),
            RiskRule(
                rule="Minimum Diversification",
                current=f"{count}",
                limit=f"{MIN_DIVERSIFICATION}",
                passed=count >= MIN_DIVERSIFICATION,
                description=(
                    f"At least {MIN_DIVERSIFICATION} different asset classes"
                ),
            ),
        ]

        failed = [r.rule for r in rules if not r.passed]
        if failed:
            logger.info("Risk rules in warning: %s", ", ".join(failed))
        return rules

    # ------------------------------------------------------------------ #
    #  Private helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _weights(allocation: Sequence[AllocationEntry]) -> np.ndarray:
        return np.array([a.percentage for a in allocation], dtype=float) / 100.0
