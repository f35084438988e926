"""
portal/thesis_generator.py
--------------------------
Mock investment-thesis generator for the stock-analysis page.

There is no research backend: the thesis text is a fixed template around the
ticker and the valuation numbers are drawn from uniform ranges.  Pass a seeded
``numpy.random.Generator`` for reproducible output.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

import numpy as np

from portal.config import ANALYSIS_DELAY_SECONDS
from portal.enums import Recommendation
from portal.errors import InvalidArgumentError
from portal.models import (
    CompanyProfile,
    Horizon,
    PricePoint,
    Rationale,
    RiskAssessment,
    ThesisRecord,
    Valuation,
)

logger = logging.getLogger(__name__)

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_CATALYSTS = (
    "Product launches and feature expansions",
    "Strategic acquisitions and partnerships",
    "Market expansion into new geographies",
    "AI and automation integration",
)


class ThesisMockGenerator:
    """
    Produces structurally fixed :class:`ThesisRecord` objects.

    Random fields and their ranges (half-open)::

        current_price   [50, 250)
        target_price    [100, 350)
        upside %        [10, 40)
        downside %      [5, 25)
        recommendation  BUY with p=0.7, else HOLD / SELL evenly
    """

    @staticmethod
    def generate(
        ticker: str,
        market: str,
        rng: Optional[np.random.Generator] = None,
    ) -> ThesisRecord:
        """
        Build a mock thesis for *ticker* on *market*.

        Raises
        ------
        InvalidArgumentError
            If *ticker* or *market* is blank.
        """
        if not ticker or not ticker.strip():
            raise InvalidArgumentError("Ticker must not be blank.")
        if not market or not market.strip():
            raise InvalidArgumentError("Market must not be blank.")

        rng = rng if rng is not None else np.random.default_rng()
        symbol = ticker.strip().upper()
        market = market.strip().upper()

        valuation = Valuation(
            current_price=int(rng.integers(50, 250)),
            target_price=int(rng.integers(100, 350)),
            method="DCF analysis and peer comparison methodology",
            upside=int(rng.integers(10, 40)),
            downside=int(rng.integers(5, 25)),
        )

        logger.debug("Generated mock thesis for %s (%s)", symbol, market)

        return ThesisRecord(
            company=CompanyProfile(
                name=f"{symbol} Corporation",
                ticker=symbol,
                industry="Technology",
                sector="Software & Services",
                business_model=(
                    "Leading technology company providing innovative solutions "
                    "across multiple segments with recurring revenue streams "
                    "and strong market position."
                ),
                key_products=(
                    "Cloud services, enterprise software, AI solutions, and "
                    "digital platforms serving millions of users globally."
                ),
                recent_performance=(
                    "Strong FY2024 performance with revenue growth of 15-25% "
                    "YoY, expanding margins, and solid cash generation. "
                    f"{market} market leadership maintained."
                ),
            ),
            rationale=Rationale(
                growth_drivers=(
                    "Digital transformation acceleration, cloud adoption, AI "
                    "integration, expanding market share in emerging segments."
                ),
                competitive_advantages=(
                    "Strong brand recognition, extensive ecosystem, R&D "
                    "capabilities, strategic partnerships, and market "
                    "leadership position."
                ),
                industry_trends=(
                    "Continued digital transformation, AI adoption, remote work "
                    "trends, and increasing demand for cloud-based solutions."
                ),
            ),
            catalysts=_CATALYSTS,
            risks=RiskAssessment(
                risks=(
                    "Market competition, regulatory changes, economic downturn "
                    "impact, technology disruption, and execution risks."
                ),
                mitigants=(
                    "Diversified revenue streams, strong balance sheet, "
                    "continuous innovation, strategic positioning, and risk "
                    "management frameworks."
                ),
            ),
            valuation=valuation,
            horizon=Horizon(
                short_term=(
                    "Continued execution on strategic initiatives with steady "
                    "performance expected over next 12 months."
                ),
                long_term=(
                    "Strong secular growth trends support long-term value "
                    "creation over 3-5 year horizon."
                ),
                exit_criteria=(
                    "Loss of competitive position, structural market changes, "
                    "or valuation reaching fair value targets."
                ),
            ),
            final_thesis=(
                f"{symbol} represents a compelling investment opportunity with "
                "strong fundamentals, clear growth catalysts, and attractive "
                "risk-reward profile in the current market environment."
            ),
            recommendation=ThesisMockGenerator._draw_recommendation(rng),
        )

    @staticmethod
    async def generate_async(
        ticker: str,
        market: str,
        rng: Optional[np.random.Generator] = None,
        delay: float = ANALYSIS_DELAY_SECONDS,
    ) -> ThesisRecord:
        """:meth:`generate` after a simulated network delay of *delay* seconds."""
        await asyncio.sleep(delay)
        return ThesisMockGenerator.generate(ticker, market, rng=rng)

    @staticmethod
    def price_history(
        current_price: float,
        rng: Optional[np.random.Generator] = None,
    ) -> List[PricePoint]:
        """
        Twelve monthly mock prices trending from 80% of *current_price* up
        to *current_price* (with +/-5% noise), followed by a ``Current`` point.
        """
        rng = rng if rng is not None else np.random.default_rng()
        start = current_price * 0.8

        points = []
        for i, month in enumerate(_MONTHS):
            variation = (rng.random() - 0.5) * 0.1
            price = start + (current_price - start) * (i / 11) + start * variation
            points.append(PricePoint(
                label=month,
                price=round(price, 2),
                volume=int(rng.integers(500_000, 1_500_000)),
            ))

        points.append(PricePoint(
            label="Current",
            price=float(current_price),
            volume=int(rng.integers(500_000, 1_500_000)),
        ))
        return points

    # ------------------------------------------------------------------ #
    #  Private helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _draw_recommendation(rng: np.random.Generator) -> Recommendation:
        if rng.random() > 0.3:
            return Recommendation.BUY
        return Recommendation.HOLD if rng.random() > 0.5 else Recommendation.SELL
