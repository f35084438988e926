"""
portal/growth_projector.py
--------------------------
Deterministic compound-growth simulator.

Design contract:
  - No allocation or risk awareness; takes the weighted return as a scalar
  - No rounding (display layers round)
  - Fully deterministic and stateless (all methods are @staticmethod)
"""

from __future__ import annotations

import logging
import math
import numbers
from typing import List, Optional

from portal.constants import GROWTH_SCENARIOS
from portal.errors import InvalidArgumentError
from portal.models import GrowthPoint, GrowthSummary, ScenarioProjection

logger = logging.getLogger(__name__)


class GrowthProjector:
    """
    Year-by-year portfolio value projection with annual compounding.

    Model::

        value[0]   = initial
        value[y]   = (value[y-1] + 12 * monthly) * (1 + r / 100)
        contrib[y] = initial + 12 * monthly * y

    Contributions for a year are added *before* that year's growth is
    applied, so each year's deposits compound for the full year.
    """

    # ------------------------------------------------------------------ #
    #  Public entry point
    # ------------------------------------------------------------------ #

    @staticmethod
    def project(
        initial_investment: float,
        monthly_contribution: float,
        annual_return_pct: float,
        years: int,
    ) -> List[GrowthPoint]:
        """
        Produce ``years + 1`` growth points for years ``0 .. years``.

        Parameters
        ----------
        initial_investment : float
            Starting balance, >= 0.
        monthly_contribution : float
            Amount added every month, >= 0.
        annual_return_pct : float
            Weighted portfolio return in percent (12 means 12%).
        years : int
            Projection length, a non-negative integer.

        Raises
        ------
        InvalidArgumentError
            On negative or non-integer years, negative amounts, or
            non-finite inputs.
        """
        GrowthProjector._validate(
            initial_investment, monthly_contribution, annual_return_pct, years
        )

        growth_factor = 1 + annual_return_pct / 100
        yearly_contribution = monthly_contribution * 12

        value = float(initial_investment)
        contributed = float(initial_investment)
        points = [GrowthPoint(0, value, contributed)]

        for year in range(1, int(years) + 1):
            contributed += yearly_contribution
            value = (value + yearly_contribution) * growth_factor
            points.append(GrowthPoint(year, value, contributed))

        logger.debug(
            "Projected %d years at %.2f%%: final value %.2f",
            years, annual_return_pct, value,
        )
        return points

    @staticmethod
    def summarize(points: List[GrowthPoint]) -> GrowthSummary:
        """Headline figures for the last point of a projection."""
        if not points:
            raise InvalidArgumentError("Cannot summarise an empty projection.")

        final = points[-1]
        multiple = (
            final.portfolio_value / final.contributions
            if final.contributions > 0 else None
        )
        return GrowthSummary(
            final_value=final.portfolio_value,
            total_gains=final.gains,
            total_contributions=final.contributions,
            multiple=multiple,
        )

    @staticmethod
    def scenario_analysis(
        initial_investment: float,
        monthly_contribution: float,
        years: int,
        scenarios=GROWTH_SCENARIOS,
    ) -> List[ScenarioProjection]:
        """
        Closed-form value for each ``(name, annual_return_pct)`` scenario.

        This is the quick "what if" estimate shown beside the chart: all
        contributions are treated as invested on day one and compounded for
        the whole horizon, so it overstates the year-by-year projection.
        """
        GrowthProjector._validate(
            initial_investment, monthly_contribution, 0.0, years
        )

        principal = initial_investment + monthly_contribution * 12 * years
        projections = []
        for name, rate in scenarios:
            value = principal * (1 + rate / 100) ** years
            projections.append(ScenarioProjection(
                scenario=name,
                annual_return=rate,
                value=value,
                multiple=value / principal if principal > 0 else None,
            ))
        return projections

    @staticmethod
    def implied_cagr(start_value: float, end_value: float, years: float) -> float:
        """
        Constant annual return (in %) that turns *start_value* into
        *end_value* over *years*.
        """
        if start_value <= 0 or end_value < 0:
            raise InvalidArgumentError(
                "CAGR needs a positive start value and non-negative end value."
            )
        if years <= 0:
            raise InvalidArgumentError("CAGR needs a positive number of years.")
        return ((end_value / start_value) ** (1 / years) - 1) * 100

    @staticmethod
    def multiple_label(multiple: Optional[float]) -> str:
        """Render a value/contribution multiple, e.g. ``3.4x``."""
        return "n/a" if multiple is None else f"{multiple:.1f}x"

    # ------------------------------------------------------------------ #
    #  Private helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _validate(
        initial_investment: float,
        monthly_contribution: float,
        annual_return_pct: float,
        years: int,
    ) -> None:
        # bool is an int subclass; reject it explicitly
        if isinstance(years, bool) or not isinstance(years, numbers.Integral):
            raise InvalidArgumentError(
                f"years must be a whole number (got {years!r})."
            )
        if years < 0:
            raise InvalidArgumentError(f"years must be >= 0 (got {years}).")

        for label, value in (
            ("initial_investment",   initial_investment),
            ("monthly_contribution", monthly_contribution),
            ("annual_return_pct",    annual_return_pct),
        ):
            if not math.isfinite(value):
                raise InvalidArgumentError(f"{label} must be finite (got {value}).")

        if initial_investment < 0:
            raise InvalidArgumentError(
                f"initial_investment must be >= 0 (got {initial_investment})."
            )
        if monthly_contribution < 0:
            raise InvalidArgumentError(
                f"monthly_contribution must be >= 0 (got {monthly_contribution})."
            )
