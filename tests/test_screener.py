"""
tests/test_screener.py
----------------------
Unit tests for ScreenerEngine against the bundled stock universe and small
synthetic frames.

Test coverage:
    screen()          - full-width filters, each predicate, inclusive bounds,
                        sorting, tie stability, idempotence, empty results
    validate()        - inverted ranges, unknown sort fields
    Filter builders   - presets, market / sector toggles, defaults
    Display helpers   - recommendation badge, market cap / percent formats,
                        performance bands
    screen_async()    - same result as screen()
"""

import unittest

import pandas as pd

from portal.data_loader import DataLoader
from portal.enums import Recommendation, SortOrder
from portal.errors import InvalidArgumentError
from portal.models import ScreeningFilters, StockRecord
from portal.screener_engine import ScreenerEngine


def _row(ticker: str, return_12m: float, **overrides) -> dict:
    """Return one synthetic stock row with neutral defaults."""
    row = {
        "ticker": ticker, "name": f"{ticker} Inc.", "market": "US",
        "sector": "Technology", "market_cap": 1_000.0, "price": 10.0,
        "return_1m": 0.0, "return_3m": 0.0, "return_12m": return_12m,
        "return_ytd": 0.0, "pe_ratio": 10.0, "pb_ratio": 1.0, "ps_ratio": 1.0,
        "debt_to_equity": 0.5, "dividend_yield": 1.0, "roe": 10.0,
    }
    row.update(overrides)
    return row


def _frame(*rows: dict) -> pd.DataFrame:
    return pd.DataFrame(list(rows), columns=StockRecord.field_names())


class _DatasetCase(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.dataset = DataLoader().load_dataset()

    def tickers(self, filters: ScreeningFilters) -> list:
        return ScreenerEngine.screen(self.dataset, filters)["ticker"].tolist()


# ===========================================================================
# 1. screen() on the bundled universe
# ===========================================================================

class TestScreenDataset(_DatasetCase):

    def test_full_width_returns_everything_sorted(self):
        result = ScreenerEngine.screen(self.dataset, ScreeningFilters())
        self.assertEqual(len(result), len(self.dataset))
        self.assertEqual(set(result["ticker"]), set(self.dataset["ticker"]))
        returns = result["return_12m"].tolist()
        self.assertEqual(returns, sorted(returns, reverse=True))
        self.assertEqual(result["ticker"].iloc[0], "NVDA")
        self.assertEqual(result["ticker"].iloc[-1], "BAYN")

    def test_index_is_reset(self):
        result = ScreenerEngine.screen(self.dataset, ScreeningFilters(markets=frozenset({"EU"})))
        self.assertEqual(result.index.tolist(), list(range(len(result))))

    def test_market_filter_ascending_pe(self):
        filters = ScreeningFilters(
            markets=frozenset({"UK"}), sort_by="pe_ratio", sort_order=SortOrder.ASC
        )
        self.assertEqual(self.tickers(filters), ["HSBA", "BARC", "RIO", "SHEL", "ULVR", "AZN"])

    def test_sector_filter(self):
        filters = ScreeningFilters(sectors=frozenset({"Energy"}))
        self.assertEqual(sorted(self.tickers(filters)), ["SHEL", "TTE", "XOM"])

    def test_market_and_sector_combine(self):
        filters = ScreeningFilters(markets=frozenset({"EU"}), sectors=frozenset({"Energy"}))
        self.assertEqual(self.tickers(filters), ["TTE"])

    def test_range_bounds_are_inclusive(self):
        filters = ScreeningFilters(pe_ratio_min=7.4, pe_ratio_max=7.6)
        self.assertEqual(sorted(self.tickers(filters)), ["HSBA", "TTE"])

    def test_dividend_minimum(self):
        filters = ScreeningFilters(dividend_yield_min=5.0)
        self.assertEqual(self.tickers(filters), ["HSBA", "RIO", "PFE"])

    def test_every_row_satisfies_filters(self):
        filters = ScreeningFilters(
            market_cap_min=100_000, return_12m_min=0, pe_ratio_max=40,
            dividend_yield_min=1.0,
        )
        result = ScreenerEngine.screen(self.dataset, filters)
        self.assertFalse(result.empty)
        self.assertTrue((result["market_cap"] >= 100_000).all())
        self.assertTrue((result["return_12m"] >= 0).all())
        self.assertTrue((result["pe_ratio"] <= 40).all())
        self.assertTrue((result["dividend_yield"] >= 1.0).all())

    def test_no_match_is_empty_not_error(self):
        result = ScreenerEngine.screen(self.dataset, ScreeningFilters(return_12m_min=500))
        self.assertTrue(result.empty)
        self.assertEqual(list(result.columns), StockRecord.field_names())

    def test_idempotent(self):
        filters = ScreeningFilters(markets=frozenset({"US"}), sort_by="market_cap")
        once = ScreenerEngine.screen(self.dataset, filters)
        twice = ScreenerEngine.screen(once, filters)
        pd.testing.assert_frame_equal(once, twice)

    def test_dataset_not_mutated(self):
        before = self.dataset.copy()
        ScreenerEngine.screen(self.dataset, ScreeningFilters(sort_by="roe", sort_order=SortOrder.ASC))
        pd.testing.assert_frame_equal(self.dataset, before)

    def test_to_records(self):
        result = ScreenerEngine.screen(self.dataset, ScreeningFilters(return_12m_min=100))
        records = ScreenerEngine.to_records(result)
        self.assertEqual(len(records), 1)
        self.assertIsInstance(records[0], StockRecord)
        self.assertEqual(records[0].ticker, "NVDA")
        self.assertAlmostEqual(records[0].return_12m, 168.5)


# ===========================================================================
# 2. Sorting on synthetic frames
# ===========================================================================

class TestSortStability(unittest.TestCase):

    def setUp(self):
        self.df = _frame(_row("AAA", 5.0), _row("BBB", 9.0), _row("CCC", 5.0), _row("DDD", 5.0))

    def test_ties_keep_input_order_descending(self):
        result = ScreenerEngine.screen(self.df, ScreeningFilters())
        self.assertEqual(result["ticker"].tolist(), ["BBB", "AAA", "CCC", "DDD"])

    def test_ties_keep_input_order_ascending(self):
        result = ScreenerEngine.screen(self.df, ScreeningFilters(sort_order=SortOrder.ASC))
        self.assertEqual(result["ticker"].tolist(), ["AAA", "CCC", "DDD", "BBB"])

    def test_empty_frame(self):
        result = ScreenerEngine.screen(_frame(), ScreeningFilters())
        self.assertTrue(result.empty)


# ===========================================================================
# 3. validate()
# ===========================================================================

class TestValidate(unittest.TestCase):

    def test_inverted_ranges_raise(self):
        for bad in (
            ScreeningFilters(market_cap_min=10, market_cap_max=5),
            ScreeningFilters(return_12m_min=50, return_12m_max=10),
            ScreeningFilters(pe_ratio_min=30, pe_ratio_max=20),
        ):
            with self.subTest(filters=bad):
                with self.assertRaises(InvalidArgumentError):
                    ScreenerEngine.validate(bad)

    def test_unknown_sort_field_raises(self):
        with self.assertRaises(InvalidArgumentError):
            ScreenerEngine.validate(ScreeningFilters(sort_by="volume"))

    def test_text_sort_field_rejected(self):
        with self.assertRaises(InvalidArgumentError):
            ScreenerEngine.validate(ScreeningFilters(sort_by="name"))

    def test_string_sort_order_rejected(self):
        with self.assertRaises(InvalidArgumentError):
            ScreenerEngine.validate(ScreeningFilters(sort_order="desc"))

    def test_screen_validates_first(self):
        with self.assertRaises(InvalidArgumentError):
            ScreenerEngine.screen(_frame(_row("AAA", 1.0)), ScreeningFilters(pe_ratio_min=50, pe_ratio_max=1))

    def test_equal_bounds_are_valid(self):
        ScreenerEngine.validate(ScreeningFilters(pe_ratio_min=15, pe_ratio_max=15))


# ===========================================================================
# 4. Filter builders
# ===========================================================================

class TestFilterBuilders(_DatasetCase):

    def test_default_filters(self):
        self.assertEqual(ScreenerEngine.default_filters(), ScreeningFilters())

    def test_top_performers(self):
        filters = ScreenerEngine.apply_preset(ScreeningFilters(), "top performers")
        self.assertEqual(filters.return_12m_min, 20.0)
        tickers = self.tickers(filters)
        self.assertEqual(len(tickers), 12)
        self.assertEqual(tickers[:3], ["NVDA", "BARC", "SAP"])

    def test_value_stocks(self):
        filters = ScreenerEngine.apply_preset(ScreeningFilters(), "Value Stocks")
        tickers = self.tickers(filters)
        self.assertEqual(len(tickers), 9)
        self.assertEqual(tickers[0], "XOM")
        self.assertEqual(tickers[-1], "TTE")

    def test_dividend_champions(self):
        filters = ScreenerEngine.apply_preset(ScreeningFilters(), "dividend champions")
        tickers = self.tickers(filters)
        self.assertEqual(len(tickers), 10)
        self.assertEqual(tickers[0], "HSBA")

    def test_large_cap_growth(self):
        filters = ScreenerEngine.apply_preset(ScreeningFilters(), "large cap growth")
        tickers = self.tickers(filters)
        self.assertEqual(len(tickers), 13)
        self.assertEqual(tickers[0], "AAPL")

    def test_preset_keeps_market_selection(self):
        base = ScreeningFilters(markets=frozenset({"UK"}))
        filters = ScreenerEngine.apply_preset(base, "top performers")
        self.assertEqual(filters.markets, frozenset({"UK"}))
        self.assertEqual(self.tickers(filters), ["BARC", "ULVR", "HSBA"])

    def test_unknown_preset_raises(self):
        with self.assertRaises(InvalidArgumentError):
            ScreenerEngine.apply_preset(ScreeningFilters(), "penny stocks")

    def test_toggle_market(self):
        once = ScreenerEngine.toggle_market(ScreeningFilters(), "US")
        self.assertEqual(once.markets, frozenset({"US"}))
        twice = ScreenerEngine.toggle_market(once, "US")
        self.assertEqual(twice.markets, frozenset())

    def test_toggle_sector(self):
        filters = ScreenerEngine.toggle_sector(ScreeningFilters(), "Energy")
        filters = ScreenerEngine.toggle_sector(filters, "Utilities")
        self.assertEqual(filters.sectors, frozenset({"Energy", "Utilities"}))


# ===========================================================================
# 5. Display helpers
# ===========================================================================

class TestDisplayHelpers(_DatasetCase):

    def test_recommendation_examples(self):
        self.assertEqual(ScreenerEngine.recommendation(25, 20, 0), Recommendation.BUY)
        self.assertEqual(ScreenerEngine.recommendation(12, 40, 4), Recommendation.HOLD)
        self.assertEqual(ScreenerEngine.recommendation(-30, 10, 1), Recommendation.SELL)

    def test_recommendation_boundaries(self):
        self.assertEqual(ScreenerEngine.recommendation(20, 10, 0), Recommendation.HOLD)
        self.assertEqual(ScreenerEngine.recommendation(30, 25, 0), Recommendation.HOLD)
        self.assertEqual(ScreenerEngine.recommendation(-20, 10, 0), Recommendation.HOLD)
        self.assertEqual(ScreenerEngine.recommendation(-30, 10, 3.5), Recommendation.HOLD)
        self.assertEqual(ScreenerEngine.recommendation(0, 10, 1), Recommendation.HOLD)

    def test_recommendation_on_dataset(self):
        by_ticker = {r.ticker: r for r in ScreenerEngine.to_records(self.dataset)}
        expected = {
            "BARC": Recommendation.BUY,
            "NVDA": Recommendation.HOLD,
            "PFE":  Recommendation.HOLD,
            "BAYN": Recommendation.SELL,
            "MC":   Recommendation.SELL,
        }
        for ticker, badge in expected.items():
            r = by_ticker[ticker]
            with self.subTest(ticker=ticker):
                self.assertEqual(
                    ScreenerEngine.recommendation(r.return_12m, r.pe_ratio, r.dividend_yield),
                    badge,
                )

    def test_format_market_cap(self):
        self.assertEqual(ScreenerEngine.format_market_cap(3_340_000), "$3.3T")
        self.assertEqual(ScreenerEngine.format_market_cap(42_000), "$42.0B")
        self.assertEqual(ScreenerEngine.format_market_cap(1_000), "$1.0B")
        self.assertEqual(ScreenerEngine.format_market_cap(999), "$999.0M")

    def test_format_percentage(self):
        self.assertEqual(ScreenerEngine.format_percentage(12.34), "+12.3%")
        self.assertEqual(ScreenerEngine.format_percentage(-5), "-5.0%")
        self.assertEqual(ScreenerEngine.format_percentage(0), "+0.0%")

    def test_performance_band(self):
        cases = [(10, "strong"), (9.9, "neutral"), (0, "neutral"),
                 (-0.1, "weak"), (-10, "weak"), (-10.1, "poor")]
        for value, band in cases:
            with self.subTest(value=value):
                self.assertEqual(ScreenerEngine.performance_band(value), band)


# ===========================================================================
# 6. screen_async()
# ===========================================================================

class TestScreenAsync(unittest.IsolatedAsyncioTestCase):

    async def test_matches_sync_result(self):
        dataset = DataLoader().load_dataset()
        filters = ScreeningFilters(markets=frozenset({"US"}))
        result = await ScreenerEngine.screen_async(dataset, filters, delay=0)
        pd.testing.assert_frame_equal(result, ScreenerEngine.screen(dataset, filters))

    async def test_errors_surface_after_delay(self):
        with self.assertRaises(InvalidArgumentError):
            await ScreenerEngine.screen_async(
                _frame(), ScreeningFilters(sort_by="bogus"), delay=0
            )


if __name__ == "__main__":
    unittest.main()
