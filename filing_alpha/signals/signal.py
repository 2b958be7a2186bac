"""Signal — output of the classification layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import pandas as pd


class Decision(str, Enum):
    BUY = "BUY"
    HOLD = "HOLD"
    SELL = "SELL"


@dataclass(frozen=True)
class SignalComponents:
    """Component scores on a 0–100 scale."""

    sentiment: int
    fundamental: int
    technical: int


@dataclass(frozen=True)
class Signal:
    """What the classifier believes about a ticker at a point in time.

    NOT an execution instruction: the backtest engine decides whether and
    when it can be acted on.

    Attributes
    ----------
    decision : Decision
        BUY / HOLD / SELL.
    confidence : int
        0–100, distance of the composite from 0.5.
    composite : float
        Weighted score the decision was derived from.
    reasoning : tuple of str
        Human-readable audit trail. Informational only.
    """

    ticker: str
    timestamp: pd.Timestamp
    decision: Decision
    confidence: int
    components: SignalComponents
    composite: float = 0.5
    reasoning: tuple[str, ...] = ()
