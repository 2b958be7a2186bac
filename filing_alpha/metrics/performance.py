"""Performance metrics over an equity curve and a trade log.

All functions are pure. The equity curve is a ``pd.Series`` of portfolio
value indexed by session date.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import pandas as pd

from filing_alpha.execution.models import Side, Trade
from .drawdown import max_drawdown

PERIODS_PER_YEAR = 252


@dataclass(frozen=True)
class RoundTrip:
    """Opening BUY(s) through the full-liquidation SELL of one ticker."""

    ticker: str
    entry_date: pd.Timestamp
    exit_date: pd.Timestamp
    cost: float
    proceeds: float

    @property
    def pnl(self) -> float:
        return self.proceeds - self.cost


@dataclass(frozen=True)
class PerformanceMetrics:
    sharpe_ratio: float
    max_drawdown: float
    win_rate: float
    alpha: float
    total_return: float
    annualized_return: float
    round_trips: int


def period_returns(equity: pd.Series) -> pd.Series:
    return equity.pct_change().dropna()


def sharpe_ratio(
    returns: pd.Series,
    risk_free_rate: float = 0.0,
    periods_per_year: int = PERIODS_PER_YEAR,
) -> float:
    """Annualised Sharpe ratio; ``0.0`` when volatility is zero or undefined.

    *risk_free_rate* is annual and is de-annualised per period.
    """
    if len(returns) < 2:
        return 0.0
    std = float(returns.std(ddof=1))
    if not math.isfinite(std) or std < 1e-15:
        return 0.0
    excess = float(returns.mean()) - risk_free_rate / periods_per_year
    return excess / std * math.sqrt(periods_per_year)


def total_return(equity: pd.Series) -> float:
    if len(equity) < 2 or equity.iloc[0] <= 0:
        return 0.0
    return float(equity.iloc[-1] / equity.iloc[0] - 1.0)


def annualized_return(equity: pd.Series, periods_per_year: int = PERIODS_PER_YEAR) -> float:
    """Geometric annualisation over ``len(equity) - 1`` periods."""
    n_periods = len(equity) - 1
    if n_periods < 1:
        return 0.0
    growth = 1.0 + total_return(equity)
    if growth <= 0:
        return -1.0
    return float(growth ** (periods_per_year / n_periods) - 1.0)


def alpha(
    equity: pd.Series,
    benchmark: Optional[pd.Series],
    periods_per_year: int = PERIODS_PER_YEAR,
) -> float:
    """Annualised strategy return minus annualised benchmark return.

    The benchmark is aligned to the strategy's dates first; ``0.0`` when no
    benchmark is supplied or fewer than two aligned samples remain.
    """
    if benchmark is None or benchmark.empty:
        return 0.0
    aligned = pd.concat([equity, benchmark], axis=1, join="inner").dropna()
    if len(aligned) < 2:
        return 0.0
    strat, bench = aligned.iloc[:, 0], aligned.iloc[:, 1]
    return annualized_return(strat, periods_per_year) - annualized_return(bench, periods_per_year)


def round_trips(trades: Sequence[Trade]) -> list[RoundTrip]:
    """Pair BUYs with the SELL that closes them, per ticker, in log order.

    Positions still open at the end of the log produce no round trip.
    """
    open_cost: dict[str, float] = {}
    open_since: dict[str, pd.Timestamp] = {}
    closed: list[RoundTrip] = []

    for t in trades:
        if t.side is Side.BUY:
            open_cost[t.ticker] = open_cost.get(t.ticker, 0.0) - t.cash_flow
            open_since.setdefault(t.ticker, t.execution_date)
        elif t.ticker in open_cost:
            closed.append(
                RoundTrip(
                    ticker=t.ticker,
                    entry_date=open_since.pop(t.ticker),
                    exit_date=t.execution_date,
                    cost=open_cost.pop(t.ticker),
                    proceeds=t.cash_flow,
                )
            )
    return closed


def win_rate(trades: Sequence[Trade]) -> float:
    """Share of closed round trips with strictly positive P&L (``0.0`` if none)."""
    trips = round_trips(trades)
    if not trips:
        return 0.0
    wins = sum(1 for rt in trips if rt.pnl > 1e-9)
    return wins / len(trips)


def compute_metrics(
    equity: pd.Series,
    trades: Sequence[Trade],
    benchmark: Optional[pd.Series] = None,
    risk_free_rate: float = 0.0,
    periods_per_year: int = PERIODS_PER_YEAR,
) -> PerformanceMetrics:
    rets = period_returns(equity)
    return PerformanceMetrics(
        sharpe_ratio=sharpe_ratio(rets, risk_free_rate, periods_per_year),
        max_drawdown=max_drawdown(equity),
        win_rate=win_rate(trades),
        alpha=alpha(equity, benchmark, periods_per_year),
        total_return=total_return(equity),
        annualized_return=annualized_return(equity, periods_per_year),
        round_trips=len(round_trips(trades)),
    )
