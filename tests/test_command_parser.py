"""
tests/test_command_parser.py
----------------------------
Unit tests for CommandParser.

Test coverage:
    parse_intent()            - every command keyword, precedence, unknown
    Research extractors       - analyze, screen preset, market, sector,
                                range filters, sort
    Portfolio extractors      - set, preset, amounts with suffixes, years,
                                target percentage
"""

import unittest

from portal.command_parser import COMMAND_MAP, CommandParser
from portal.enums import Intent, SortOrder


# ===========================================================================
# 1. Intent detection
# ===========================================================================

class TestParseIntent(unittest.TestCase):

    def setUp(self):
        self.parser = CommandParser()

    def test_each_command(self):
        cases = {
            "analyze NVDA US":          Intent.ANALYZE,
            "thesis sap eu":            Intent.ANALYZE,
            "screen":                   Intent.SCREEN,
            "screen top performers":    Intent.SCREEN,
            "filter market UK":         Intent.FILTER_MARKET,
            "filter sector Energy":     Intent.FILTER_SECTOR,
            "filter pe max 20":         Intent.FILTER_RANGE,
            "sort pe asc":              Intent.SORT,
            "reset filters":            Intent.RESET_FILTERS,
            "portfolio":                Intent.SHOW_PORTFOLIO,
            "set 2 30":                 Intent.SET_ALLOCATION,
            "preset aggressive":        Intent.APPLY_PRESET,
            "invest 100k":              Intent.SET_INITIAL,
            "monthly 2000":             Intent.SET_MONTHLY,
            "years 20":                 Intent.SET_YEARS,
            "target 13.5":              Intent.SET_TARGET,
            "help":                     Intent.HELP,
            "exit":                     Intent.QUIT,
        }
        for text, intent in cases.items():
            with self.subTest(text=text):
                self.assertEqual(self.parser.parse_intent(text), intent)

    def test_case_and_whitespace_insensitive(self):
        self.assertEqual(self.parser.parse_intent("  FILTER   Market  us "), Intent.FILTER_MARKET)

    def test_keyword_must_be_whole_word(self):
        self.assertEqual(self.parser.parse_intent("settings"), Intent.UNKNOWN)
        self.assertEqual(self.parser.parse_intent("screening"), Intent.UNKNOWN)

    def test_unknown_and_empty(self):
        self.assertEqual(self.parser.parse_intent("buy me a yacht"), Intent.UNKNOWN)
        self.assertEqual(self.parser.parse_intent(""), Intent.UNKNOWN)

    def test_every_intent_but_unknown_is_mapped(self):
        self.assertEqual(set(COMMAND_MAP), set(Intent) - {Intent.UNKNOWN})


# ===========================================================================
# 2. Research extractors
# ===========================================================================

class TestResearchExtractors(unittest.TestCase):

    def setUp(self):
        self.parser = CommandParser()

    def test_analysis_params(self):
        self.assertEqual(
            self.parser.extract_analysis_params("analyze nvda uk"),
            {"ticker": "NVDA", "market": "UK"},
        )

    def test_analysis_market_defaults_to_us(self):
        self.assertEqual(
            self.parser.extract_analysis_params("analyze BRK.B"),
            {"ticker": "BRK.B", "market": "US"},
        )

    def test_analysis_invalid(self):
        self.assertIsNone(self.parser.extract_analysis_params("analyze"))
        self.assertIsNone(self.parser.extract_analysis_params("analyze AAPL JP"))
        self.assertIsNone(self.parser.extract_analysis_params("analyze $$$"))

    def test_screen_preset(self):
        self.assertEqual(
            self.parser.extract_screen_preset("screen  Dividend   Champions"),
            "dividend champions",
        )
        self.assertIsNone(self.parser.extract_screen_preset("screen"))

    def test_market(self):
        self.assertEqual(self.parser.extract_market("filter market eu"), "EU")
        self.assertIsNone(self.parser.extract_market("filter market JP"))
        self.assertIsNone(self.parser.extract_market("filter market"))

    def test_sector(self):
        self.assertEqual(
            self.parser.extract_sector("filter sector consumer staples"),
            "Consumer Staples",
        )
        self.assertIsNone(self.parser.extract_sector("filter sector crypto"))

    def test_range_filter(self):
        self.assertEqual(
            self.parser.extract_range_filter("filter pe max 20"),
            {"attribute": "pe_ratio_max", "value": 20.0},
        )
        self.assertEqual(
            self.parser.extract_range_filter("filter cap min 10,000"),
            {"attribute": "market_cap_min", "value": 10_000.0},
        )
        self.assertEqual(
            self.parser.extract_range_filter("filter return min -15.5"),
            {"attribute": "return_12m_min", "value": -15.5},
        )
        self.assertEqual(
            self.parser.extract_range_filter("filter dividend min 3"),
            {"attribute": "dividend_yield_min", "value": 3.0},
        )

    def test_range_filter_invalid(self):
        self.assertIsNone(self.parser.extract_range_filter("filter dividend max 3"))
        self.assertIsNone(self.parser.extract_range_filter("filter roe min 10"))
        self.assertIsNone(self.parser.extract_range_filter("filter pe max"))
        self.assertIsNone(self.parser.extract_range_filter("filter pe between 1 2"))

    def test_sort_params(self):
        self.assertEqual(
            self.parser.extract_sort_params("sort pe asc"),
            {"sort_by": "pe_ratio", "sort_order": SortOrder.ASC},
        )
        self.assertEqual(
            self.parser.extract_sort_params("sort market_cap"),
            {"sort_by": "market_cap", "sort_order": SortOrder.DESC},
        )

    def test_sort_params_invalid(self):
        self.assertIsNone(self.parser.extract_sort_params("sort"))
        self.assertIsNone(self.parser.extract_sort_params("sort name"))
        self.assertIsNone(self.parser.extract_sort_params("sort pe sideways"))


# ===========================================================================
# 3. Portfolio extractors
# ===========================================================================

class TestPortfolioExtractors(unittest.TestCase):

    def setUp(self):
        self.parser = CommandParser()

    def test_allocation_change_is_zero_based(self):
        self.assertEqual(
            self.parser.extract_allocation_change("set 2 30"),
            {"index": 1, "percentage": 30.0},
        )
        self.assertEqual(
            self.parser.extract_allocation_change("set 1 42.5%"),
            {"index": 0, "percentage": 42.5},
        )

    def test_allocation_change_invalid(self):
        self.assertIsNone(self.parser.extract_allocation_change("set two 30"))
        self.assertIsNone(self.parser.extract_allocation_change("set 2"))

    def test_preset(self):
        self.assertEqual(self.parser.extract_preset("preset Aggressive"), "aggressive")
        self.assertIsNone(self.parser.extract_preset("preset"))

    def test_amounts(self):
        cases = {
            "invest 100000":   100_000.0,
            "invest 100k":     100_000.0,
            "invest $1.5m":    1_500_000.0,
            "monthly 2,500":   2_500.0,
            "monthly 750.25":  750.25,
            "invest -5":       -5.0,
        }
        for text, amount in cases.items():
            with self.subTest(text=text):
                self.assertAlmostEqual(self.parser.extract_amount(text), amount)

    def test_amount_missing(self):
        self.assertIsNone(self.parser.extract_amount("invest lots"))

    def test_amount_must_be_whole_argument(self):
        for text in ("invest 2e5", "invest 100 dollars", "monthly 5k extra", "invest 1.2.3"):
            with self.subTest(text=text):
                self.assertIsNone(self.parser.extract_amount(text))

    def test_years(self):
        self.assertEqual(self.parser.extract_years("years 25"), 25)
        self.assertEqual(self.parser.extract_years("years -3"), -3)
        self.assertIsNone(self.parser.extract_years("years many"))

    def test_fractional_years_rejected(self):
        self.assertIsNone(self.parser.extract_years("years 2.5"))
        self.assertIsNone(self.parser.extract_years("years 10 or so"))

    def test_percentage(self):
        self.assertAlmostEqual(self.parser.extract_percentage("target 13.5%"), 13.5)
        self.assertAlmostEqual(self.parser.extract_percentage("target 12"), 12.0)
        self.assertIsNone(self.parser.extract_percentage("target high"))

    def test_percentage_must_be_whole_argument(self):
        self.assertIsNone(self.parser.extract_percentage("target 12x"))
        self.assertIsNone(self.parser.extract_percentage("target 1e2"))


if __name__ == "__main__":
    unittest.main()
