"""Pure-math drawdown utilities — no side effects, no I/O."""

from __future__ import annotations

import pandas as pd


def drawdown_series(equity: pd.Series) -> pd.Series:
    """Drawdown at every sample against the running peak so far."""
    if equity.empty:
        return equity.astype(float)
    running_max = equity.cummax()
    dd = (equity - running_max) / running_max.where(running_max > 0)
    return dd.fillna(0.0).clip(upper=0.0)


def max_drawdown(equity: pd.Series) -> float:
    """Deepest drawdown over the curve (``0.0`` for fewer than two samples)."""
    if len(equity) < 2:
        return 0.0
    return float(drawdown_series(equity).min())
