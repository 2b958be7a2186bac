from dataclasses import dataclass
import pandas as pd

from filing_alpha.indicators.core.interfaces import source_column


@dataclass(frozen=True)
class RSI:
    """Wilder's Relative Strength Index, 0–100."""

    period: int = 14
    src: str = "close"

    @property
    def name(self) -> str:
        return f"rsi_{self.period}_{self.src}"

    @property
    def lookback(self) -> int:
        return self.period + 1

    def compute(self, prices: pd.DataFrame) -> pd.DataFrame:
        delta = source_column(prices, self.src).diff()
        gain = delta.clip(lower=0.0)
        loss = -delta.clip(upper=0.0)

        alpha = 1.0 / self.period
        avg_gain = gain.ewm(alpha=alpha, min_periods=self.period, adjust=False).mean()
        avg_loss = loss.ewm(alpha=alpha, min_periods=self.period, adjust=False).mean()

        total = avg_gain + avg_loss
        # Flat window (no moves either way) reads as neutral 50.
        rsi = (100.0 * avg_gain / total).where(total > 0, 50.0)
        rsi = rsi.where(avg_gain.notna())

        return rsi.to_frame(name=self.name)
