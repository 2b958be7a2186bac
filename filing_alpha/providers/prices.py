"""In-memory price provider backed by a long-format price table."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Optional

import pandas as pd

from filing_alpha.replay.validation import validate_prices

log = logging.getLogger(__name__)


class FramePriceProvider:
    """Exact-date close lookup over a ``date, ticker, close`` table.

    Guarantees:
    - dates are normalised to midnight, tickers upper-cased
    - no duplicate ``(date, ticker)`` rows
    - a missing row or NaN close reads as ``None``, never a nearby value
    """

    def __init__(self, df: pd.DataFrame) -> None:
        validate_prices(df)
        df = df.copy()
        df["date"] = pd.to_datetime(df["date"]).dt.normalize()
        df["ticker"] = df["ticker"].astype(str).str.upper()
        self._wide = df.pivot(index="date", columns="ticker", values="close").sort_index()

        log.info(
            "FramePriceProvider: %d tickers, %d dates, %s → %s",
            self._wide.shape[1],
            self._wide.shape[0],
            self._wide.index[0].date() if len(self._wide) else "-",
            self._wide.index[-1].date() if len(self._wide) else "-",
        )

    @classmethod
    def from_csv(cls, path: str | Path) -> FramePriceProvider:
        return cls(pd.read_csv(path))

    # -- public API --------------------------------------------------------

    @property
    def tickers(self) -> list[str]:
        return list(self._wide.columns)

    def price_on(self, ticker: str, date: pd.Timestamp) -> Optional[float]:
        try:
            value = self._wide.at[pd.Timestamp(date).normalize(), ticker.upper()]
        except KeyError:
            return None
        if value is None or math.isnan(value):
            return None
        return float(value)

    def history(self, ticker: str, end: pd.Timestamp) -> pd.DataFrame:
        """Closes for *ticker* on or before *end*, as a ``close`` frame."""
        ticker = ticker.upper()
        if ticker not in self._wide.columns:
            return pd.DataFrame(columns=["close"], dtype=float)
        closes = self._wide.loc[: pd.Timestamp(end).normalize(), ticker].dropna()
        return closes.to_frame(name="close")
