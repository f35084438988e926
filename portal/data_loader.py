from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

import pandas as pd

from portal.models import StockRecord


# Default dataset, resolved relative to this file.
_DEFAULT_PATH = Path(__file__).parent / "data" / "stocks.csv"

_TEXT_COLUMNS = ("ticker", "name", "market", "sector")


class DataLoader:
    """
    Loads the static screener universe from ``portal/data/stocks.csv``.

    The CSV has one row per stock and one column per :class:`StockRecord`
    field.  Market cap is in USD millions; returns, dividend yield and
    ROE are in percent.

    The dataset is reference data: every call hands back a fresh copy so a
    caller mutating its frame cannot affect anyone else.
    """

    def __init__(self, path: str | Path = _DEFAULT_PATH):
        self._path = Path(path)

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def load_dataset(self) -> pd.DataFrame:
        """
        Return the full stock universe in file order.

        Raises
        ------
        FileNotFoundError
            If the dataset file does not exist.
        ValueError
            If the file is empty or missing required columns.
        """
        return _load_cached(str(self._path)).copy()

    def list_tickers(self, market: Optional[str] = None) -> list[str]:
        """Return tickers in file order, optionally restricted to *market*."""
        df = self.load_dataset()
        if market is not None:
            df = df[df["market"] == market.upper()]
        return df["ticker"].tolist()

    def get_stock(self, ticker: str) -> StockRecord:
        """
        Return the :class:`StockRecord` for *ticker*.

        Raises
        ------
        KeyError
            If the ticker is not in the dataset.
        """
        df = self.load_dataset()
        match = df[df["ticker"] == ticker.strip().upper()]
        if match.empty:
            raise KeyError(f"Ticker '{ticker.upper()}' is not in the dataset.")
        return StockRecord(**match.iloc[0].to_dict())

    def ticker_exists(self, ticker: str) -> bool:
        """Return True if *ticker* is in the dataset."""
        return ticker.strip().upper() in set(self.list_tickers())


# ------------------------------------------------------------------
# Module-level cached loader (path is a plain string so it is hashable
# and works with ``lru_cache``).
# ------------------------------------------------------------------

@lru_cache(maxsize=8)
def _load_cached(path: str) -> pd.DataFrame:
    """Internal cached implementation of :meth:`DataLoader.load_dataset`."""
    csv_path = Path(path)
    if not csv_path.exists():
        raise FileNotFoundError(f"Stock dataset not found: {csv_path}")

    df = pd.read_csv(csv_path, dtype={c: str for c in _TEXT_COLUMNS})

    if df.empty:
        raise ValueError(f"Stock dataset {csv_path} contains no rows.")

    required = set(StockRecord.field_names())
    missing = required - set(df.columns)
    if missing:
        raise ValueError(
            f"Stock dataset {csv_path} is missing columns: {sorted(missing)}"
        )

    numeric = [c for c in StockRecord.field_names() if c not in _TEXT_COLUMNS]
    df[numeric] = df[numeric].astype(float)

    return df[StockRecord.field_names()].reset_index(drop=True)
