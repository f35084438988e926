"""
portal/rebalancer.py
--------------------
Keeps an allocation summing to 100% when one entry's weight is changed.

Design contract:
  - Input sequences are never mutated; a new list is always returned
  - Output has the same length and ordering as the input
  - Fully deterministic and stateless (all methods are @staticmethod)
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import List, Sequence, Tuple

from portal.config import TOTAL_TOLERANCE
from portal.constants import PRESET_STRATEGIES
from portal.errors import InvalidArgumentError
from portal.models import AllocationEntry

logger = logging.getLogger(__name__)


class AllocationRebalancer:
    """
    Two-step slider rebalancing.

    1. **Proportional redistribution** - the change applied to one entry is
       taken from (or given to) every other entry in proportion to its
       current share of the other entries' total.  Entries are clamped at 0.
    2. **Residual equalisation** - if clamping (or an all-zero remainder)
       leaves the total off 100, the residual is spread equally across
       *all* entries, the edited one included.  This step is not clamped.

    Step 2 means the edited entry can end up slightly off the requested
    value when other entries hit the 0 floor.
    """

    # ------------------------------------------------------------------ #
    #  Public entry point
    # ------------------------------------------------------------------ #

    @staticmethod
    def rebalance(
        allocation: Sequence[AllocationEntry],
        index: int,
        new_percentage: float,
    ) -> List[AllocationEntry]:
        """
        Set entry *index* to *new_percentage* and rebalance the rest.

        Parameters
        ----------
        allocation : Sequence[AllocationEntry]
            Current allocation (left untouched).
        index : int
            Position of the entry being changed.
        new_percentage : float
            Requested weight for that entry, in [0, 100].

        Returns
        -------
        List[AllocationEntry]
            New allocation summing to 100.

        Raises
        ------
        InvalidArgumentError
            For an empty allocation, an out-of-range index, or a
            percentage outside [0, 100].
        """
        if not allocation:
            raise InvalidArgumentError("Cannot rebalance an empty allocation.")
        if isinstance(index, bool) or not 0 <= index < len(allocation):
            raise InvalidArgumentError(
                f"Index {index!r} out of range for {len(allocation)} entries."
            )
        if not math.isfinite(new_percentage) or not 0 <= new_percentage <= 100:
            raise InvalidArgumentError(
                f"Percentage must be between 0 and 100 (got {new_percentage})."
            )

        percentages = [a.percentage for a in allocation]
        difference  = new_percentage - percentages[index]
        percentages[index] = new_percentage

        # --- Step 1: proportional redistribution ------------------------
        others      = [i for i in range(len(percentages)) if i != index]
        total_other = sum(percentages[i] for i in others)

        if total_other > 0:
            for i in others:
                change = (percentages[i] / total_other) * difference
                percentages[i] = max(0.0, percentages[i] - change)
        elif others:
            logger.warning(
                "Rebalance of %r: other entries total 0, relying on "
                "equalisation only.", allocation[index].name,
            )

        # --- Step 2: residual equalisation ------------------------------
        total = sum(percentages)
        if abs(total - 100.0) > TOTAL_TOLERANCE:
            adjustment  = (100.0 - total) / len(percentages)
            percentages = [p + adjustment for p in percentages]
            logger.debug(
                "Residual %.6f spread as %.6f per entry.", 100.0 - total, adjustment
            )

        return [
            replace(entry, percentage=pct)
            for entry, pct in zip(allocation, percentages)
        ]

    @staticmethod
    def apply_preset(
        allocation: Sequence[AllocationEntry],
        preset: str,
    ) -> Tuple[List[AllocationEntry], float]:
        """
        Apply a named preset strategy positionally.

        Returns
        -------
        (allocation, target_cagr)
            The re-weighted allocation and the preset's target CAGR.

        Raises
        ------
        InvalidArgumentError
            If *preset* is unknown or its weights do not line up with
            *allocation*.
        """
        strategy = PRESET_STRATEGIES.get(preset.strip().lower())
        if strategy is None:
            raise InvalidArgumentError(
                f"Unknown preset: {preset!r}. "
                f"Choose from {', '.join(PRESET_STRATEGIES)}."
            )

        weights = strategy["weights"]
        if len(weights) != len(allocation):
            raise InvalidArgumentError(
                f"Preset {preset!r} defines {len(weights)} weights but the "
                f"allocation has {len(allocation)} entries."
            )

        new_allocation = [
            replace(entry, percentage=float(w))
            for entry, w in zip(allocation, weights)
        ]
        return new_allocation, strategy["target_cagr"]

    @staticmethod
    def total(allocation: Sequence[AllocationEntry]) -> float:
        """Sum of all entry percentages."""
        return sum(a.percentage for a in allocation)
