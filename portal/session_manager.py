"""
portal/session_manager.py
-------------------------
Routes one line of user input to the matching engine call and renders the
reply.

Design contract
---------------
* Every command is global: there is no questionnaire, so dispatch is a flat
  ``Intent -> handler`` table rather than a state machine.
* Engines raise :class:`PortalError` for bad input; this is the only layer
  that catches it, turning it into a printed message so the loop keeps going.
* The portfolio view projects growth at the allocation's weighted expected
  return; the target CAGR only feeds the gap shown beside it.
* Session state is swapped, never edited: handlers build a new
  :class:`PortfolioState` / :class:`ResearchState` through
  :class:`SessionContext`.
* The two simulated-latency calls (thesis generation, screening) are run
  with ``asyncio.run``; the delays come from ``portal.config`` and can be
  overridden per manager (tests pass 0).
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Optional

import numpy as np

from portal.command_parser import CommandParser
from portal.config import ANALYSIS_DELAY_SECONDS, SCREENING_DELAY_SECONDS
from portal.data_loader import DataLoader
from portal.enums import Intent
from portal.errors import PortalError
from portal.growth_projector import GrowthProjector
from portal.models import ScreeningFilters
from portal.rebalancer import AllocationRebalancer
from portal.response_generator import ResponseGenerator
from portal.risk_engine import RiskAggregator
from portal.screener_engine import ScreenerEngine
from portal.session_context import SessionContext
from portal.thesis_generator import ThesisMockGenerator

logger = logging.getLogger(__name__)


class SessionManager:
    """Command loop back-end used by ``main.py`` and the tests."""

    def __init__(
        self,
        loader: Optional[DataLoader] = None,
        rng: Optional[np.random.Generator] = None,
        analysis_delay: float = ANALYSIS_DELAY_SECONDS,
        screening_delay: float = SCREENING_DELAY_SECONDS,
    ):
        self.context = SessionContext()
        self.parser = CommandParser()
        self.generator = ResponseGenerator()
        self._loader = loader or DataLoader()
        self._rng = rng if rng is not None else np.random.default_rng()
        self._analysis_delay = analysis_delay
        self._screening_delay = screening_delay

        self._handlers = {
            Intent.HELP:           lambda t: self.generator.help(),
            Intent.SHOW_PORTFOLIO: self._handle_portfolio,
            Intent.SET_ALLOCATION: self._handle_set_allocation,
            Intent.APPLY_PRESET:   self._handle_preset,
            Intent.SET_INITIAL:    self._handle_initial,
            Intent.SET_MONTHLY:    self._handle_monthly,
            Intent.SET_YEARS:      self._handle_years,
            Intent.SET_TARGET:     self._handle_target,
            Intent.ANALYZE:        self._handle_analyze,
            Intent.SCREEN:         self._handle_screen,
            Intent.FILTER_MARKET:  self._handle_filter_market,
            Intent.FILTER_SECTOR:  self._handle_filter_sector,
            Intent.FILTER_RANGE:   self._handle_filter_range,
            Intent.SORT:           self._handle_sort,
            Intent.RESET_FILTERS:  self._handle_reset_filters,
        }

    # ------------------------------------------------------------------ #
    #  Public entry point (called by main.py)
    # ------------------------------------------------------------------ #

    def start(self) -> str:
        """Return the opening greeting without requiring user input."""
        return self.generator.greeting()

    def handle_message(self, user_input: str) -> str:
        """Process one command and return the reply."""
        text = user_input.strip()
        if not text:
            return "Please type a command, or 'help' to list them."

        intent = self.parser.parse_intent(text)
        logger.debug("Parsed %r as %s", text, intent.name)

        if intent == Intent.QUIT:
            self.context.done = True
            return self.generator.quit_message()

        handler = self._handlers.get(intent)
        if handler is None:
            return self.generator.unknown()

        try:
            return handler(text)
        except PortalError as exc:
            logger.info("%s rejected: %s", intent.name, exc)
            return self.generator.error(str(exc))

    # ------------------------------------------------------------------ #
    #  Portfolio handlers
    # ------------------------------------------------------------------ #

    def _handle_portfolio(self, text: str) -> str:
        state = self.context.portfolio
        allocation = state.allocation

        metrics = RiskAggregator.compute(allocation)
        points = GrowthProjector.project(
            state.initial_investment,
            state.monthly_contribution,
            metrics.expected_return,
            state.years,
        )
        return self.generator.portfolio(
            allocation=allocation,
            metrics=metrics,
            risk_label=RiskAggregator.risk_label(metrics.overall_risk),
            rules=RiskAggregator.evaluate_rules(allocation),
            summary=GrowthProjector.summarize(points),
            scenarios=GrowthProjector.scenario_analysis(
                state.initial_investment, state.monthly_contribution, state.years
            ),
            years=state.years,
            target_cagr=state.target_cagr,
            target_gap=RiskAggregator.target_gap(allocation, state.target_cagr),
        )

    def _handle_set_allocation(self, text: str) -> str:
        change = self.parser.extract_allocation_change(text)
        if change is None:
            return self.generator.usage("set <position> <percent>  (e.g. 'set 2 30')")

        allocation = AllocationRebalancer.rebalance(
            self.context.portfolio.allocation, change["index"], change["percentage"]
        )
        self.context.update_portfolio(allocation=tuple(allocation))
        return self.generator.confirm_allocation(
            allocation[change["index"]], AllocationRebalancer.total(allocation)
        )

    def _handle_preset(self, text: str) -> str:
        preset = self.parser.extract_preset(text)
        if preset is None:
            return self.generator.usage("preset <conservative|balanced|aggressive>")

        allocation, target = AllocationRebalancer.apply_preset(
            self.context.portfolio.allocation, preset
        )
        self.context.update_portfolio(
            allocation=tuple(allocation), target_cagr=target, preset=preset
        )
        return self.generator.confirm_preset(preset, target)

    def _handle_initial(self, text: str) -> str:
        amount = self.parser.extract_amount(text)
        if amount is None or amount < 0:
            return "Please enter a non-negative amount (e.g. 'invest 100k')."
        self.context.update_portfolio(initial_investment=amount)
        return self.generator.confirm_amount("Initial investment", amount)

    def _handle_monthly(self, text: str) -> str:
        amount = self.parser.extract_amount(text)
        if amount is None or amount < 0:
            return "Please enter a non-negative amount (e.g. 'monthly 2000')."
        self.context.update_portfolio(monthly_contribution=amount)
        return self.generator.confirm_amount("Monthly contribution", amount)

    def _handle_years(self, text: str) -> str:
        years = self.parser.extract_years(text)
        if years is None or years < 0:
            return "Please enter a whole number of years (e.g. 'years 20')."
        self.context.update_portfolio(years=years)
        return self.generator.confirm_years(years)

    def _handle_target(self, text: str) -> str:
        target = self.parser.extract_percentage(text)
        if target is None:
            return "Please enter a target CAGR in percent (e.g. 'target 13.5')."
        self.context.update_portfolio(target_cagr=target)
        return self.generator.confirm_target(target)

    # ------------------------------------------------------------------ #
    #  Research handlers
    # ------------------------------------------------------------------ #

    def _handle_analyze(self, text: str) -> str:
        params = self.parser.extract_analysis_params(text)
        if params is None:
            return self.generator.usage("analyze <TICKER> [US|UK|EU]  (e.g. 'analyze NVDA US')")

        logger.info("Generating thesis for %s (%s)", params["ticker"], params["market"])
        print(f"\n{self.generator.analysing(params['ticker'], params['market'])}\n")
        record = asyncio.run(ThesisMockGenerator.generate_async(
            params["ticker"], params["market"],
            rng=self._rng, delay=self._analysis_delay,
        ))
        history = ThesisMockGenerator.price_history(
            record.valuation.current_price, rng=self._rng
        )
        stock = None
        if self._loader.ticker_exists(params["ticker"]):
            stock = self._loader.get_stock(params["ticker"])
        self.context.update_research(last_thesis=record)
        return self.generator.thesis(record, history, stock=stock)

    def _handle_screen(self, text: str) -> str:
        preset = self.parser.extract_screen_preset(text)
        filters = self.context.research.filters
        if preset is not None:
            filters = ScreenerEngine.apply_preset(filters, preset)
            self.context.update_research(filters=filters)

        print(f"\n{self.generator.screening()}\n")
        results = asyncio.run(ScreenerEngine.screen_async(
            self._loader.load_dataset(), filters, delay=self._screening_delay
        ))
        return self.generator.screener_results(
            ScreenerEngine.to_records(results), filters
        )

    def _handle_filter_market(self, text: str) -> str:
        market = self.parser.extract_market(text)
        if market is None:
            return self.generator.usage("filter market <US|UK|EU>")
        return self._set_filters(
            ScreenerEngine.toggle_market(self.context.research.filters, market)
        )

    def _handle_filter_sector(self, text: str) -> str:
        sector = self.parser.extract_sector(text)
        if sector is None:
            return self.generator.usage("filter sector <name>  (e.g. 'filter sector Energy')")
        return self._set_filters(
            ScreenerEngine.toggle_sector(self.context.research.filters, sector)
        )

    def _handle_filter_range(self, text: str) -> str:
        params = self.parser.extract_range_filter(text)
        if params is None:
            return self.generator.usage(
                "filter <cap|return|pe|dividend> <min|max> <value>  (e.g. 'filter pe max 20')"
            )
        return self._set_filters(
            self._replace_filters(**{params["attribute"]: params["value"]})
        )

    def _handle_sort(self, text: str) -> str:
        params = self.parser.extract_sort_params(text)
        if params is None:
            return self.generator.usage("sort <field> [asc|desc]  (e.g. 'sort pe asc')")
        return self._set_filters(self._replace_filters(**params))

    def _handle_reset_filters(self, text: str) -> str:
        return self._set_filters(ScreenerEngine.default_filters())

    # ------------------------------------------------------------------ #
    #  Helpers
    # ------------------------------------------------------------------ #

    def _replace_filters(self, **changes) -> ScreeningFilters:
        return replace(self.context.research.filters, **changes)

    def _set_filters(self, filters: ScreeningFilters) -> str:
        """Validate *filters* before storing them so a bad range is never kept."""
        ScreenerEngine.validate(filters)
        self.context.update_research(filters=filters)
        return self.generator.filter_updated(filters)
