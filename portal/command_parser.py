import re
from typing import Optional

from portal.constants import FIELD_ALIASES, FIELD_REGISTRY, MARKETS, SECTORS
from portal.enums import Intent, SortOrder


# ---------------------------------------------------------------------------
# COMMAND_MAP: leading keyword phrase → intent.
# Order matters: multi-word phrases are checked before single words.
# ---------------------------------------------------------------------------
COMMAND_MAP: dict[Intent, list[str]] = {
    Intent.QUIT:           ["exit", "quit", "bye", "q"],
    Intent.HELP:           ["help", "commands", "?"],
    Intent.RESET_FILTERS:  ["reset filters", "reset"],
    Intent.FILTER_MARKET:  ["filter market"],
    Intent.FILTER_SECTOR:  ["filter sector"],
    Intent.FILTER_RANGE:   ["filter"],
    Intent.ANALYZE:        ["analyze", "analyse", "thesis"],
    Intent.SCREEN:         ["screen"],
    Intent.SORT:           ["sort"],
    Intent.SHOW_PORTFOLIO: ["portfolio", "risk", "projection"],
    Intent.SET_ALLOCATION: ["set"],
    Intent.APPLY_PRESET:   ["preset", "strategy"],
    Intent.SET_INITIAL:    ["invest", "initial"],
    Intent.SET_MONTHLY:    ["monthly"],
    Intent.SET_YEARS:      ["years"],
    Intent.SET_TARGET:     ["target"],
}

# Filter field alias → (min attribute, max attribute).  Dividend yield only
# has a lower bound.
RANGE_FIELDS: dict[str, tuple] = {
    "market_cap":     ("market_cap_min", "market_cap_max"),
    "return_12m":     ("return_12m_min", "return_12m_max"),
    "pe_ratio":       ("pe_ratio_min",   "pe_ratio_max"),
    "dividend_yield": ("dividend_yield_min", None),
}

_NUMBER = r"-?\d[\d,]*\.?\d*"


class CommandParser:
    """
    Parses one line of user input into an :class:`Intent` plus values.

    Detection is keyword-led: the first matching phrase from
    ``COMMAND_MAP`` at the start of the line decides the intent, then the
    matching ``extract_*`` method pulls its arguments.
    """

    # ------------------------------------------------------------------ #
    #  Public interface
    # ------------------------------------------------------------------ #

    def parse_intent(self, text: str) -> Intent:
        """Return the Intent for *text*."""
        normalized = " ".join(text.strip().lower().split())
        if not normalized:
            return Intent.UNKNOWN

        for intent, phrases in COMMAND_MAP.items():
            for phrase in phrases:
                if normalized == phrase or normalized.startswith(phrase + " "):
                    return intent
        return Intent.UNKNOWN

    # ------------------------------------------------------------------ #
    #  Research extractors
    # ------------------------------------------------------------------ #

    def extract_analysis_params(self, text: str) -> Optional[dict]:
        """
        ``analyze NVDA us`` → ``{"ticker": "NVDA", "market": "US"}``.

        Market defaults to US.  Returns ``None`` without a ticker.
        """
        tokens = text.strip().split()[1:]
        if not tokens:
            return None
        ticker = tokens[0].upper()
        if not re.match(r"^[A-Z0-9][A-Z0-9.\-]{0,9}$", ticker):
            return None
        market = tokens[1].upper() if len(tokens) > 1 else "US"
        if market not in MARKETS:
            return None
        return {"ticker": ticker, "market": market}

    def extract_screen_preset(self, text: str) -> Optional[str]:
        """``screen dividend champions`` → ``"dividend champions"``."""
        rest = " ".join(text.strip().lower().split()[1:])
        return rest or None

    def extract_market(self, text: str) -> Optional[str]:
        """``filter market uk`` → ``"UK"``."""
        tokens = text.strip().split()
        if len(tokens) < 3:
            return None
        market = tokens[2].upper()
        return market if market in MARKETS else None

    def extract_sector(self, text: str) -> Optional[str]:
        """``filter sector consumer staples`` → ``"Consumer Staples"``."""
        rest = " ".join(text.strip().lower().split()[2:])
        for sector in SECTORS:
            if sector.lower() == rest:
                return sector
        return None

    def extract_range_filter(self, text: str) -> Optional[dict]:
        """
        ``filter pe max 20`` → ``{"attribute": "pe_ratio_max", "value": 20.0}``.

        Returns ``None`` for unknown fields, a bound the field does not
        have, or a missing number.
        """
        match = re.match(
            rf"^\s*filter\s+(\w+)\s+(min|max)\s+({_NUMBER})\s*$", text, re.IGNORECASE
        )
        if not match:
            return None
        field = self._resolve_field(match.group(1))
        if field not in RANGE_FIELDS:
            return None
        lo_attr, hi_attr = RANGE_FIELDS[field]
        attribute = lo_attr if match.group(2).lower() == "min" else hi_attr
        if attribute is None:
            return None
        return {"attribute": attribute, "value": self._to_float(match.group(3))}

    def extract_sort_params(self, text: str) -> Optional[dict]:
        """``sort pe asc`` → ``{"sort_by": "pe_ratio", "sort_order": SortOrder.ASC}``."""
        tokens = text.strip().lower().split()[1:]
        if not tokens:
            return None
        field = self._resolve_field(tokens[0])
        if field is None:
            return None
        order = SortOrder.DESC
        if len(tokens) > 1:
            try:
                order = SortOrder(tokens[1])
            except ValueError:
                return None
        return {"sort_by": field, "sort_order": order}

    # ------------------------------------------------------------------ #
    #  Portfolio extractors
    # ------------------------------------------------------------------ #

    def extract_allocation_change(self, text: str) -> Optional[dict]:
        """
        ``set 2 30`` → ``{"index": 1, "percentage": 30.0}``.

        Positions are 1-based for the user, 0-based in the result.
        """
        match = re.match(rf"^\s*set\s+(\d+)\s+({_NUMBER})%?\s*$", text, re.IGNORECASE)
        if not match:
            return None
        return {
            "index":      int(match.group(1)) - 1,
            "percentage": self._to_float(match.group(2)),
        }

    def extract_preset(self, text: str) -> Optional[str]:
        tokens = text.strip().lower().split()
        return tokens[1] if len(tokens) > 1 else None

    def extract_amount(self, text: str) -> Optional[float]:
        """
        Extract a money amount (supports k/m suffixes), e.g. ``invest 100k``.

        The amount must be the whole argument: ``invest 2e5`` is ``None``.
        """
        match = re.match(
            rf"^\s*\S+\s+\$?\s*({_NUMBER})\s*(k|m)?\s*$", text, re.IGNORECASE
        )
        if not match:
            return None
        raw = self._to_float(match.group(1))
        suffix = (match.group(2) or "").lower()
        if suffix == "k":
            raw *= 1_000
        elif suffix == "m":
            raw *= 1_000_000
        return raw

    def extract_years(self, text: str) -> Optional[int]:
        """``years 20`` → ``20``.  A fractional value such as ``2.5`` is ``None``."""
        match = re.match(r"^\s*\S+\s+(-?\d+)\s*$", text)
        return int(match.group(1)) if match else None

    def extract_percentage(self, text: str) -> Optional[float]:
        match = re.match(rf"^\s*\S+\s+({_NUMBER})\s*%?\s*$", text)
        return self._to_float(match.group(1)) if match else None

    # ------------------------------------------------------------------ #
    #  Helpers
    # ------------------------------------------------------------------ #

    def _resolve_field(self, token: str) -> Optional[str]:
        token = token.lower()
        if token in FIELD_REGISTRY:
            return token
        return FIELD_ALIASES.get(token)

    @staticmethod
    def _to_float(raw: str) -> float:
        return float(raw.replace(",", ""))
