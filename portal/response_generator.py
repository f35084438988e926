from __future__ import annotations

from typing import List, Optional, Sequence

from portal.constants import FIELD_REGISTRY, MARKETS, PRESET_STRATEGIES, SCREEN_PRESETS
from portal.growth_projector import GrowthProjector
from portal.models import (
    AllocationEntry,
    GrowthSummary,
    PricePoint,
    RiskMetrics,
    RiskRule,
    ScenarioProjection,
    ScreeningFilters,
    StockRecord,
    ThesisRecord,
)
from portal.screener_engine import ScreenerEngine


class ResponseGenerator:
    """
    Builds the text the dashboard prints.

    **Formatting-only**: every number shown here was computed by one of the
    engines (:class:`GrowthProjector`, :class:`RiskAggregator`,
    :class:`AllocationRebalancer`, :class:`ScreenerEngine`,
    :class:`ThesisMockGenerator`) before it arrives.
    """

    # ------------------------------------------------------------------ #
    #  Conversational prompts
    # ------------------------------------------------------------------ #

    def greeting(self) -> str:
        return (
            "Welcome to **Thesis Portal**: portfolio projection and stock research.\n\n"
            "  • 'portfolio'            - allocation, risk and growth projection\n"
            "  • 'analyze <TICKER> US'  - generate an investment thesis\n"
            "  • 'screen'               - run the stock screener\n\n"
            "Type 'help' for every command."
        )

    def help(self) -> str:
        presets = ", ".join(PRESET_STRATEGIES)
        screens = ", ".join(SCREEN_PRESETS)
        markets = "|".join(MARKETS)
        return (
            "Portfolio\n"
            "  portfolio                   show allocation, risk and projection\n"
            "  set <n> <pct>               set position n to pct (others rebalance)\n"
            f"  preset <name>               apply a strategy ({presets})\n"
            "  invest <amount>             initial investment (e.g. 100k)\n"
            "  monthly <amount>            monthly contribution\n"
            "  years <n>                   projection horizon\n"
            "  target <pct>                target CAGR\n"
            "\nResearch\n"
            f"  analyze <TICKER> [{markets}]   mock investment thesis\n"
            f"  screen [preset]             run the screener ({screens})\n"
            "  filter market <M>           toggle a market\n"
            "  filter sector <S>           toggle a sector\n"
            "  filter <field> <min|max> <v>  cap, return, pe (dividend: min only)\n"
            "  sort <field> [asc|desc]     sort the screener output\n"
            "  reset filters               clear every filter\n"
            "\n  help | exit"
        )

    def unknown(self) -> str:
        return (
            "I didn't understand that. "
            "Type 'help' to see the available commands."
        )

    def usage(self, example: str) -> str:
        return f"Usage: {example}"

    def error(self, message: str) -> str:
        return f"⚠️  {message}"

    def quit_message(self) -> str:
        return "Thanks for using Thesis Portal. Goodbye!"

    # ------------------------------------------------------------------ #
    #  Portfolio confirmations
    # ------------------------------------------------------------------ #

    def confirm_allocation(self, entry: AllocationEntry, total: float) -> str:
        return (
            f"✅ {entry.name} set to **{entry.percentage:.1f}%**. "
            f"Other positions rebalanced (total {total:.1f}%)."
        )

    def confirm_preset(self, preset: str, target_cagr: float) -> str:
        name = PRESET_STRATEGIES[preset]["name"]
        return f"✅ Applied **{name}** (target CAGR {target_cagr:.1f}%)."

    def confirm_amount(self, label: str, amount: float) -> str:
        return f"✅ {label} set to **${amount:,.0f}**."

    def confirm_years(self, years: int) -> str:
        return f"✅ Projection horizon set to **{years} years**."

    def confirm_target(self, target: float) -> str:
        return f"✅ Target CAGR set to **{target:.1f}%**."

    # ------------------------------------------------------------------ #
    #  Portfolio view
    # ------------------------------------------------------------------ #

    def portfolio(
        self,
        allocation: Sequence[AllocationEntry],
        metrics: RiskMetrics,
        risk_label: str,
        rules: List[RiskRule],
        summary: GrowthSummary,
        scenarios: List[ScenarioProjection],
        years: int,
        target_cagr: float,
        target_gap: float,
    ) -> str:
        sections = [
            self._allocation_table(allocation),
            self._risk_section(metrics, risk_label, target_cagr, target_gap),
            self._rules_section(rules),
            self._growth_section(summary, scenarios, years),
        ]
        return "\n\n".join(sections)

    def _allocation_table(self, allocation: Sequence[AllocationEntry]) -> str:
        sep = "=" * 72
        lines = [
            sep,
            f"{'#':<3} {'POSITION':<34} {'WEIGHT':>8}  {'RISK':<7} {'EXP. RETURN':>11}",
            "-" * 72,
        ]
        for i, entry in enumerate(allocation, 1):
            lines.append(
                f"{i:<3} {entry.name:<34} {entry.percentage:>7.1f}%  "
                f"{entry.risk_level.value:<7} {entry.expected_return:>10.1f}%"
            )
        lines.append(sep)
        return "\n".join(lines)

    def _risk_section(
        self,
        metrics: RiskMetrics,
        risk_label: str,
        target_cagr: float,
        target_gap: float,
    ) -> str:
        gap = f"{target_gap:+.2f}%"
        return (
            "Risk & return\n"
            f"  Overall risk         {metrics.overall_risk:.2f} / 3  ({risk_label})\n"
            f"  Expected return      {metrics.expected_return:.2f}%  "
            f"(target {target_cagr:.1f}%, gap {gap})\n"
            f"  Expected volatility  {metrics.expected_volatility:.2f}%\n"
            f"  Sharpe ratio         {metrics.sharpe_ratio:.2f}\n"
            f"  Largest position     {metrics.max_position:.1f}%\n"
            f"  Positions            {metrics.diversification}"
        )

    def _rules_section(self, rules: List[RiskRule]) -> str:
        lines = ["Risk rules"]
        for rule in rules:
            mark = "PASS" if rule.passed else "FAIL"
            lines.append(
                f"  [{mark}] {rule.rule:<26} {rule.current:>8} (limit {rule.limit})"
            )
        return "\n".join(lines)

    def _growth_section(
        self,
        summary: GrowthSummary,
        scenarios: List[ScenarioProjection],
        years: int,
    ) -> str:
        lines = [
            f"Projection over {years} years",
            f"  Final value          ${summary.final_value:,.0f}",
            f"  Total contributions  ${summary.total_contributions:,.0f}",
            f"  Total gains          ${summary.total_gains:,.0f}",
            f"  Multiple             {GrowthProjector.multiple_label(summary.multiple)}",
            "",
            "Scenarios (lump-sum estimate)",
        ]
        for s in scenarios:
            lines.append(
                f"  {s.scenario:<13} {s.annual_return:>5.1f}%  "
                f"${s.value:>14,.0f}  {GrowthProjector.multiple_label(s.multiple)}"
            )
        return "\n".join(lines)

    # ------------------------------------------------------------------ #
    #  Research view
    # ------------------------------------------------------------------ #

    def analysing(self, ticker: str, market: str) -> str:
        return f"⏳ Generating investment thesis for {ticker} ({market})…"

    def thesis(
        self,
        record: ThesisRecord,
        history: Optional[List[PricePoint]] = None,
        stock: Optional[StockRecord] = None,
    ) -> str:
        """*stock* is the dataset row for the ticker, when there is one."""
        c, v, h = record.company, record.valuation, record.horizon
        lines = [
            "=" * 72,
            f"{c.name} ({c.ticker})   {c.industry} / {c.sector}",
            f"Recommendation: **{record.recommendation.value}**",
            "=" * 72,
            "",
            "Company profile",
            f"  Business model:      {c.business_model}",
            f"  Key products:        {c.key_products}",
            f"  Recent performance:  {c.recent_performance}",
        ]
        if stock is not None:
            lines.append(
                f"  Dataset record:      {stock.name} ({stock.sector}, {stock.market}), "
                f"last price ${stock.price:,.2f}, "
                f"12M return {ScreenerEngine.format_percentage(stock.return_12m)}"
            )
        lines += [
            "",
            "Investment rationale",
            f"  Growth drivers:          {record.rationale.growth_drivers}",
            f"  Competitive advantages:  {record.rationale.competitive_advantages}",
            f"  Industry trends:         {record.rationale.industry_trends}",
            "",
            "Catalysts",
        ]
        lines.extend(f"  • {cat}" for cat in record.catalysts)
        lines += [
            "",
            "Risks",
            f"  Key risks:  {record.risks.risks}",
            f"  Mitigants:  {record.risks.mitigants}",
            "",
            "Valuation",
            f"  Current price  ${v.current_price}",
            f"  Target price   ${v.target_price}",
            f"  Upside         +{v.upside}%",
            f"  Downside       -{v.downside}%",
            f"  Method         {v.method}",
            "",
            "Horizon",
            f"  Short term:     {h.short_term}",
            f"  Long term:      {h.long_term}",
            f"  Exit criteria:  {h.exit_criteria}",
        ]
        if history:
            lines += ["", "Price history"]
            lines.extend(
                f"  {p.label:<8} ${p.price:>9,.2f}  vol {p.volume:>10,}" for p in history
            )
        lines += ["", record.final_thesis]
        return "\n".join(lines)

    # ------------------------------------------------------------------ #
    #  Screener view
    # ------------------------------------------------------------------ #

    def screening(self) -> str:
        return "⏳ Running screen…"

    def filters_summary(self, filters: ScreeningFilters) -> str:
        markets = ", ".join(sorted(filters.markets)) or "all"
        sectors = ", ".join(sorted(filters.sectors)) or "all"
        sort_label = FIELD_REGISTRY[filters.sort_by]["display"]
        return (
            f"Markets: {markets} | Sectors: {sectors}\n"
            f"Market cap ${filters.market_cap_min:,.0f}M–${filters.market_cap_max:,.0f}M | "
            f"12M return {filters.return_12m_min:.0f}%–{filters.return_12m_max:.0f}% | "
            f"P/E {filters.pe_ratio_min:.0f}–{filters.pe_ratio_max:.0f} | "
            f"Dividend ≥ {filters.dividend_yield_min:.1f}%\n"
            f"Sorted by {sort_label} ({filters.sort_order.value})"
        )

    def screener_results(self, records: List[StockRecord], filters: ScreeningFilters) -> str:
        header = self.filters_summary(filters)
        if not records:
            return (
                header + "\n\n"
                "No stocks match your criteria. "
                "Try widening the filters or 'reset filters'."
            )

        fmt_pct = ScreenerEngine.format_percentage
        sep = "=" * 104
        lines = [
            header,
            sep,
            f"{'TICKER':<7} {'NAME':<26} {'MKT':<3} {'CAP':>8} {'PRICE':>9} "
            f"{'12M':>7} {'YTD':>7} {'P/E':>6} {'DIV':>6}  {'TREND':<7} {'SIGNAL':<4}",
            "-" * 104,
        ]
        for r in records:
            signal = ScreenerEngine.recommendation(r.return_12m, r.pe_ratio, r.dividend_yield)
            trend = ScreenerEngine.performance_band(r.return_12m)
            lines.append(
                f"{r.ticker:<7} {r.name[:26]:<26} {r.market:<3} "
                f"{ScreenerEngine.format_market_cap(r.market_cap):>8} "
                f"{r.price:>9,.2f} {fmt_pct(r.return_12m):>7} {fmt_pct(r.return_ytd):>7} "
                f"{r.pe_ratio:>6.1f} {r.dividend_yield:>5.2f}%  {trend:<7} {signal.value:<4}"
            )
        lines.append(sep)
        lines.append(f"{len(records)} stock(s) found.")
        return "\n".join(lines)

    def filter_updated(self, filters: ScreeningFilters) -> str:
        return "✅ Filters updated.\n" + self.filters_summary(filters)
