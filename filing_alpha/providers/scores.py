"""Deterministic fundamental / technical score providers.

Both providers only read data dated on or before ``as_of``; nothing in a
score can come from the future relative to the signal it feeds.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pandas as pd

from filing_alpha.indicators import EMA, RSI, SMA, FeaturePipeline, FeatureSpec
from .prices import FramePriceProvider


class TableScoreProvider:
    """As-of lookup into a ``ticker, date, score`` table.

    The latest score dated on or before ``as_of`` is returned. A ticker
    with no score yet raises ``LookupError``.
    """

    def __init__(self, df: pd.DataFrame, name: str = "table") -> None:
        missing = {"ticker", "date", "score"} - set(df.columns)
        if missing:
            raise ValueError(f"Score table missing columns: {sorted(missing)}")
        df = df.copy()
        df["ticker"] = df["ticker"].astype(str).str.upper()
        df["date"] = pd.to_datetime(df["date"]).dt.normalize()
        bad = df[(df["score"] < 0) | (df["score"] > 1) | df["score"].isna()]
        if not bad.empty:
            raise ValueError(f"{name} scores outside [0, 1]: {len(bad)} rows")

        self.name = name
        self._by_ticker = {
            t: g.sort_values("date", kind="mergesort").set_index("date")["score"]
            for t, g in df.groupby("ticker")
        }

    @classmethod
    def from_csv(cls, path: str | Path, name: str = "table") -> TableScoreProvider:
        return cls(pd.read_csv(path), name=name)

    def score(self, ticker: str, as_of: pd.Timestamp) -> float:
        series = self._by_ticker.get(ticker.upper())
        if series is None:
            raise LookupError(f"No {self.name} scores for {ticker}")
        known = series.loc[: pd.Timestamp(as_of).normalize()]
        if known.empty:
            raise LookupError(f"No {self.name} score for {ticker} on or before {as_of.date()}")
        return float(known.iloc[-1])


@dataclass(frozen=True)
class TechnicalScoreProvider:
    """Trend + momentum score from the close history up to ``as_of``.

    ``score = 0.5 * trend + 0.5 * rsi / 100`` where ``trend`` maps the
    fast/slow moving-average spread into [0, 1] (``0.5`` when equal,
    saturating at ±``spread_cap``).
    """

    prices: FramePriceProvider
    fast_period: int = 20
    slow_period: int = 50
    rsi_period: int = 14
    indicator_type: str = "sma"
    spread_cap: float = 0.05

    def _pipeline(self) -> tuple[FeaturePipeline, str, str, str]:
        if self.indicator_type == "ema":
            fast, slow = EMA(self.fast_period), EMA(self.slow_period)
        else:
            fast, slow = SMA(self.fast_period), SMA(self.slow_period)
        rsi = RSI(self.rsi_period)
        pipeline = FeaturePipeline([FeatureSpec(fast), FeatureSpec(slow), FeatureSpec(rsi)])
        return pipeline, fast.name, slow.name, rsi.name

    def score(self, ticker: str, as_of: pd.Timestamp) -> float:
        pipeline, fast_col, slow_col, rsi_col = self._pipeline()
        history = self.prices.history(ticker, as_of)
        if len(history) < pipeline.max_lookback:
            raise LookupError(
                f"Insufficient history for {ticker} at {pd.Timestamp(as_of).date()}: "
                f"{len(history)} < {pipeline.max_lookback} closes"
            )

        last = pipeline.transform(history).iloc[-1]
        if last[[fast_col, slow_col, rsi_col]].isna().any():
            raise LookupError(f"Indicators undefined for {ticker} at {pd.Timestamp(as_of).date()}")

        spread = last[fast_col] / last[slow_col] - 1.0
        trend = 0.5 + 0.5 * float(np.clip(spread / self.spread_cap, -1.0, 1.0))
        momentum = float(last[rsi_col]) / 100.0
        return float(np.clip(0.5 * trend + 0.5 * momentum, 0.0, 1.0))
