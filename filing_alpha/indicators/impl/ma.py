"""Moving averages of one price column, used for the trend component."""

from dataclasses import dataclass
from typing import ClassVar

import pandas as pd

from filing_alpha.indicators.core.interfaces import source_column


@dataclass(frozen=True)
class _MovingAverage:
    period: int
    src: str = "close"

    prefix: ClassVar[str] = ""

    @property
    def name(self) -> str:
        return f"{self.prefix}_{self.period}_{self.src}"

    @property
    def lookback(self) -> int:
        return self.period

    def compute(self, prices: pd.DataFrame) -> pd.DataFrame:
        series = self._average(source_column(prices, self.src))
        return series.to_frame(name=self.name)

    def _average(self, series: pd.Series) -> pd.Series:
        raise NotImplementedError


@dataclass(frozen=True)
class SMA(_MovingAverage):
    """Equal-weight mean of the last ``period`` closes; NaN until the window fills."""

    prefix: ClassVar[str] = "sma"

    def _average(self, series: pd.Series) -> pd.Series:
        return series.rolling(self.period, min_periods=self.period).mean()


@dataclass(frozen=True)
class EMA(_MovingAverage):
    """Recursive exponential mean, alpha = 2 / (period + 1)."""

    prefix: ClassVar[str] = "ema"

    def _average(self, series: pd.Series) -> pd.Series:
        return series.ewm(span=self.period, min_periods=self.period, adjust=False).mean()
