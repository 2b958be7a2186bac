"""Protocol definitions for the external collaborators the core consumes."""

from __future__ import annotations

from typing import Optional, Protocol, Sequence, runtime_checkable

import numpy as np
import pandas as pd

from ._models import Document


@runtime_checkable
class DocumentSource(Protocol):
    """Abstraction over filing retrieval (EDGAR, local archive, mock)."""

    def fetch(self, url: str) -> Document: ...


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Maps a token sequence to a fixed-length, L2-normalised vector.

    Implementations must be deterministic for identical input and return
    vectors of length :attr:`dimension` for every call.
    """

    @property
    def dimension(self) -> int: ...

    def embed(self, tokens: Sequence[str]) -> np.ndarray: ...


@runtime_checkable
class ScoreProvider(Protocol):
    """Deterministic score in [0, 1] for a ticker as of a date."""

    def score(self, ticker: str, as_of: pd.Timestamp) -> float: ...


@runtime_checkable
class PriceProvider(Protocol):
    """Exact-date price lookup; ``None`` when no print exists for that date."""

    def price_on(self, ticker: str, date: pd.Timestamp) -> Optional[float]: ...


@runtime_checkable
class TradingCalendarLike(Protocol):
    """Trading-day arithmetic used to place executions after the buffer."""

    def add_trading_days(self, date: pd.Timestamp, n: int) -> pd.Timestamp: ...

    def sessions(self, start: pd.Timestamp, end: pd.Timestamp) -> pd.DatetimeIndex: ...
