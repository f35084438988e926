"""
portal/screener_engine.py
-------------------------
Filters the static stock universe against a multi-field predicate set and
sorts the survivors by a selectable field.

Design decisions
----------------
* **Vectorised predicates** - every filter is a boolean mask over the
  DataFrame; the masks are AND-ed once, so the dataset is scanned a single
  time regardless of how many filters are active.
* **Stable sort** - ``numpy.argsort(kind="stable")``; descending order sorts
  the negated column so ties keep their input order in both directions.
* **Empty is valid** - zero matches returns an empty frame, never an error.
* **Filters are values** - helpers such as :meth:`toggle_market` and
  :meth:`apply_preset` return new :class:`ScreeningFilters`; nothing is
  mutated in place.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import List

import numpy as np
import pandas as pd

from portal.config import SCREENING_DELAY_SECONDS
from portal.constants import FIELD_REGISTRY, SCREEN_PRESETS
from portal.enums import Recommendation, SortOrder
from portal.errors import InvalidArgumentError
from portal.models import ScreeningFilters, StockRecord

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# ScreenerEngine
# ---------------------------------------------------------------------------

class ScreenerEngine:
    """
    Stock screener over an in-memory dataset.

    The dataset is any DataFrame with the :class:`StockRecord` columns
    (normally ``DataLoader().load_dataset()``).  It is treated as read-only.
    """

    # Ranges checked for min <= max: (label, min attr, max attr)
    _RANGES = (
        ("market cap",  "market_cap_min", "market_cap_max"),
        ("12M return",  "return_12m_min", "return_12m_max"),
        ("P/E ratio",   "pe_ratio_min",   "pe_ratio_max"),
    )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @staticmethod
    def screen(dataset: pd.DataFrame, filters: ScreeningFilters) -> pd.DataFrame:
        """
        Apply *filters* to *dataset* and sort the result.

        A row passes iff **all** hold:

        * ``markets`` empty or ``market`` in ``markets``
        * ``sectors`` empty or ``sector`` in ``sectors``
        * ``market_cap_min <= market_cap <= market_cap_max``
        * ``return_12m_min <= return_12m <= return_12m_max``
        * ``pe_ratio_min <= pe_ratio <= pe_ratio_max``
        * ``dividend_yield >= dividend_yield_min``

        Returns
        -------
        pd.DataFrame
            Matching rows sorted by ``filters.sort_by``, index reset to
            ``0..n-1``.  May be empty.

        Raises
        ------
        InvalidArgumentError
            If ``sort_by`` is not a numeric stock field or any range has
            ``min > max``.
        """
        ScreenerEngine.validate(filters)

        mask = (
            dataset["market_cap"].between(filters.market_cap_min, filters.market_cap_max)
            & dataset["return_12m"].between(filters.return_12m_min, filters.return_12m_max)
            & dataset["pe_ratio"].between(filters.pe_ratio_min, filters.pe_ratio_max)
            & (dataset["dividend_yield"] >= filters.dividend_yield_min)
        )
        if filters.markets:
            mask &= dataset["market"].isin(sorted(filters.markets))
        if filters.sectors:
            mask &= dataset["sector"].isin(sorted(filters.sectors))

        matched = dataset[mask]

        values = matched[filters.sort_by].to_numpy(dtype=float)
        if filters.sort_order is SortOrder.DESC:
            values = -values
        order = np.argsort(values, kind="stable")

        logger.debug(
            "Screened %d -> %d rows, sorted by %s %s",
            len(dataset), len(matched), filters.sort_by, filters.sort_order.value,
        )
        return matched.iloc[order].reset_index(drop=True)

    @staticmethod
    async def screen_async(
        dataset: pd.DataFrame,
        filters: ScreeningFilters,
        delay: float = SCREENING_DELAY_SECONDS,
    ) -> pd.DataFrame:
        """:meth:`screen` after a simulated network delay of *delay* seconds."""
        await asyncio.sleep(delay)
        return ScreenerEngine.screen(dataset, filters)

    @staticmethod
    def validate(filters: ScreeningFilters) -> None:
        """Raise :class:`InvalidArgumentError` for malformed *filters*."""
        if filters.sort_by not in FIELD_REGISTRY:
            raise InvalidArgumentError(
                f"Unknown sort field: {filters.sort_by!r}. "
                f"Valid options: {list(FIELD_REGISTRY)}"
            )
        if not isinstance(filters.sort_order, SortOrder):
            raise InvalidArgumentError(
                f"sort_order must be a SortOrder (got {filters.sort_order!r})."
            )
        for label, lo_attr, hi_attr in ScreenerEngine._RANGES:
            lo, hi = getattr(filters, lo_attr), getattr(filters, hi_attr)
            if lo > hi:
                raise InvalidArgumentError(
                    f"Invalid {label} range: min {lo} is greater than max {hi}."
                )

    @staticmethod
    def to_records(df: pd.DataFrame) -> List[StockRecord]:
        """Convert screener output rows into :class:`StockRecord` objects."""
        columns = StockRecord.field_names()
        return [
            StockRecord(**dict(zip(columns, row)))
            for row in df[columns].itertuples(index=False, name=None)
        ]

    # ------------------------------------------------------------------
    # Filter builders
    # ------------------------------------------------------------------

    @staticmethod
    def default_filters() -> ScreeningFilters:
        """The widest filter set (the "Reset Filters" state)."""
        return ScreeningFilters()

    @staticmethod
    def apply_preset(filters: ScreeningFilters, preset: str) -> ScreeningFilters:
        """
        Merge a named preset screen onto *filters*.

        Only the fields the preset names change; everything else, including
        market and sector selections, is kept.
        """
        overrides = SCREEN_PRESETS.get(preset.strip().lower())
        if overrides is None:
            raise InvalidArgumentError(
                f"Unknown screen preset: {preset!r}. "
                f"Choose from {', '.join(SCREEN_PRESETS)}."
            )
        return replace(filters, **overrides)

    @staticmethod
    def toggle_market(filters: ScreeningFilters, market: str) -> ScreeningFilters:
        """Add *market* to the selection, or remove it if already selected."""
        return replace(filters, markets=filters.markets ^ {market})

    @staticmethod
    def toggle_sector(filters: ScreeningFilters, sector: str) -> ScreeningFilters:
        """Add *sector* to the selection, or remove it if already selected."""
        return replace(filters, sectors=filters.sectors ^ {sector})

    # ------------------------------------------------------------------
    # Display helpers (per-record derived fields)
    # ------------------------------------------------------------------

    @staticmethod
    def recommendation(
        return_12m: float,
        pe_ratio: float,
        dividend_yield: float,
    ) -> Recommendation:
        """
        Heuristic badge for a screener row.

        BUY  - strong 12M return on a reasonable multiple
        HOLD - decent return or income
        SELL - deep 12M drawdown
        HOLD - everything else
        """
        if return_12m > 20 and pe_ratio < 25:
            return Recommendation.BUY
        if return_12m > 10 or dividend_yield > 3:
            return Recommendation.HOLD
        if return_12m < -20:
            return Recommendation.SELL
        return Recommendation.HOLD

    @staticmethod
    def format_market_cap(value: float) -> str:
        """Format a USD-millions market cap as ``$x.xT`` / ``$x.xB`` / ``$x.xM``."""
        if value >= 1_000_000:
            return f"${value / 1_000_000:.1f}T"
        if value >= 1_000:
            return f"${value / 1_000:.1f}B"
        return f"${value:.1f}M"

    @staticmethod
    def format_percentage(value: float) -> str:
        return f"+{value:.1f}%" if value >= 0 else f"{value:.1f}%"

    @staticmethod
    def performance_band(value: float) -> str:
        """Colour band for a return figure: strong / neutral / weak / poor."""
        if value >= 10:
            return "strong"
        if value >= 0:
            return "neutral"
        if value >= -10:
            return "weak"
        return "poor"
