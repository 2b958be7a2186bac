"""Mean-variance allocation across high-confidence BUY signals.

Expected return per name is ``confidence / 100``; covariance is estimated
from trailing daily returns and annualised. Weights maximise the Sharpe
ratio under per-name bounds and a fully-invested constraint (SLSQP).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np
import pandas as pd
from scipy.optimize import minimize

from filing_alpha.errors import ConfigurationError, FilingAlphaError
from filing_alpha.metrics.performance import PERIODS_PER_YEAR
from filing_alpha.signals.signal import Decision, Signal

log = logging.getLogger(__name__)

LOOKBACK_DAYS = 252
_MIN_REPORTED_WEIGHT = 0.01


@dataclass(frozen=True)
class Allocation:
    weights: dict[str, float] = field(default_factory=dict)
    cash: float = 1.0
    expected_return: float = 0.0
    expected_volatility: float = 0.0

    def to_dict(self) -> dict:
        return {
            "weights": dict(self.weights),
            "cash": self.cash,
            "expected_return": self.expected_return,
            "expected_volatility": self.expected_volatility,
        }


def _candidates(signals: Sequence[Signal], min_confidence: int) -> dict[str, float]:
    """Latest qualifying BUY per ticker → expected return."""
    out: dict[str, float] = {}
    for s in signals:
        if s.decision is Decision.BUY and s.confidence > min_confidence:
            out[s.ticker] = s.confidence / 100.0
    return out


def optimize_portfolio(
    signals: Sequence[Signal],
    returns: pd.DataFrame,
    risk_free_rate: float = 0.0,
    min_weight: float = 0.02,
    max_weight: float = 0.20,
    min_confidence: int = 70,
    risk_budget: Optional[float] = None,
    lookback: int = LOOKBACK_DAYS,
) -> Allocation:
    """Allocate capital across BUY signals with confidence above *min_confidence*.

    Parameters
    ----------
    signals : sequence of Signal
        Candidate signals; only BUYs above the confidence cut are used.
    returns : pd.DataFrame
        Daily simple returns, one column per ticker, ascending index.
    risk_free_rate : float
        Annual rate subtracted from the portfolio return in the objective.
    min_weight, max_weight : float
        Per-position bounds.
    risk_budget : float, optional
        Upper limit on annualised portfolio variance.
    lookback : int
        Trailing rows of *returns* used for the covariance estimate.

    Returns
    -------
    Allocation
        ``cash`` is the unallocated fraction (non-zero only when the bounds
        cannot absorb the full budget).
    """
    if not 0 <= min_weight <= max_weight <= 1:
        raise ConfigurationError(
            f"weight bounds must satisfy 0 <= min <= max <= 1, got ({min_weight}, {max_weight})"
        )

    expected = _candidates(signals, min_confidence)
    if not expected:
        return Allocation()

    tickers = list(expected)
    missing = [t for t in tickers if t not in returns.columns]
    if missing:
        raise ConfigurationError(f"returns missing columns for {missing}")

    n = len(tickers)
    if n * min_weight > 1:
        raise ConfigurationError(
            f"{n} positions at min_weight={min_weight} exceed full investment"
        )

    mu = np.array([expected[t] for t in tickers], dtype=np.float64)
    window = returns[tickers].dropna().tail(lookback)
    if len(window) < 2:
        raise ConfigurationError("need at least two return rows to estimate covariance")
    sigma = window.cov().to_numpy() * PERIODS_PER_YEAR

    if n * max_weight < 1:
        w = np.full(n, max_weight)
        log.info("Bounds cap investment at %.0f%%; remainder held as cash", 100 * n * max_weight)
        return _allocation(tickers, w, mu, sigma)

    def neg_sharpe(w: np.ndarray) -> float:
        vol = np.sqrt(max(w @ sigma @ w, 1e-16))
        return -(w @ mu - risk_free_rate) / vol

    constraints = [{"type": "eq", "fun": lambda w: np.sum(w) - 1.0}]
    if risk_budget is not None:
        constraints.append({"type": "ineq", "fun": lambda w: risk_budget - w @ sigma @ w})

    result = minimize(
        neg_sharpe,
        np.full(n, 1.0 / n),
        method="SLSQP",
        bounds=[(min_weight, max_weight)] * n,
        constraints=constraints,
        options={"maxiter": 1000, "ftol": 1e-10},
    )
    if not result.success:
        raise FilingAlphaError(f"portfolio optimisation failed: {result.message}")

    w = np.clip(result.x, min_weight, max_weight)
    return _allocation(tickers, w, mu, sigma)


def _allocation(tickers: list[str], w: np.ndarray, mu: np.ndarray, sigma: np.ndarray) -> Allocation:
    invested = float(np.sum(w))
    return Allocation(
        weights={t: float(x) for t, x in zip(tickers, w) if x > _MIN_REPORTED_WEIGHT},
        cash=max(0.0, 1.0 - invested),
        expected_return=float(w @ mu),
        expected_volatility=float(np.sqrt(w @ sigma @ w)),
    )
