"""Metrics package — drawdown math and performance statistics."""

from filing_alpha.metrics.drawdown import drawdown_series, max_drawdown
from filing_alpha.metrics.performance import (
    PerformanceMetrics,
    RoundTrip,
    alpha,
    annualized_return,
    compute_metrics,
    period_returns,
    round_trips,
    sharpe_ratio,
    total_return,
    win_rate,
)

__all__ = [
    "drawdown_series",
    "max_drawdown",
    "PerformanceMetrics",
    "RoundTrip",
    "alpha",
    "annualized_return",
    "compute_metrics",
    "period_returns",
    "round_trips",
    "sharpe_ratio",
    "total_return",
    "win_rate",
]
