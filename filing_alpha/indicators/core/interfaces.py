from typing import Protocol, runtime_checkable
import pandas as pd

@runtime_checkable
class Indicator(Protocol):
    """A column-producing calculation over one ticker's daily closes.

    ``compute`` returns a frame on the input index; ``lookback`` is the
    number of rows consumed before the first non-NaN value.
    """

    name: str
    lookback: int

    def compute(self, prices: pd.DataFrame) -> pd.DataFrame: ...


def source_column(prices: pd.DataFrame, src: str) -> pd.Series:
    if src not in prices.columns:
        raise ValueError(f"Source column '{src}' not found in price frame")
    return prices[src]


def require_close(df: pd.DataFrame) -> None:
    """Raise ValueError unless ``df`` has a numeric ``close`` column."""
    close = source_column(df, "close")
    if not pd.api.types.is_numeric_dtype(close):
        raise ValueError("Column 'close' must be numeric")
