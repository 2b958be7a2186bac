"""BacktestResult — immutable run summary plus its JSON form."""

from __future__ import annotations

import json
from dataclasses import dataclass

import pandas as pd

from filing_alpha.execution.models import Trade, UnexecutedSignal


@dataclass(frozen=True)
class BacktestResult:
    """Outcome of one run.

    ``max_drawdown`` is a fraction <= 0. ``equity_curve`` holds one
    ``(session, equity)`` pair per marked session in ascending date order.
    ``cancelled`` runs carry metrics over the curve up to the cancellation
    checkpoint only.
    """

    sharpe_ratio: float
    max_drawdown: float
    win_rate: float
    alpha: float
    trades: tuple[Trade, ...]
    equity_curve: tuple[tuple[pd.Timestamp, float], ...]
    unexecuted: tuple[UnexecutedSignal, ...] = ()
    skipped_past_end: int = 0
    round_trips: int = 0
    initial_capital: float = 0.0
    final_equity: float = 0.0
    total_return: float = 0.0
    annualized_return: float = 0.0
    cancelled: bool = False

    @property
    def n_trades(self) -> int:
        return len(self.trades)

    @property
    def n_unexecuted(self) -> int:
        return len(self.unexecuted)

    @property
    def equity_series(self) -> pd.Series:
        if not self.equity_curve:
            return pd.Series(dtype=float, name="equity")
        dates, values = zip(*self.equity_curve)
        return pd.Series(values, index=pd.DatetimeIndex(dates, name="date"), name="equity")

    # -- serialisation -----------------------------------------------------

    def summary(self) -> dict:
        """Scalar metrics only — the body of ``metrics.json``."""
        return {
            "sharpe_ratio": self.sharpe_ratio,
            "max_drawdown": self.max_drawdown,
            "win_rate": self.win_rate,
            "alpha": self.alpha,
            "n_trades": self.n_trades,
            "round_trips": self.round_trips,
            "n_unexecuted": self.n_unexecuted,
            "skipped_past_end": self.skipped_past_end,
            "initial_capital": self.initial_capital,
            "final_equity": self.final_equity,
            "total_return": self.total_return,
            "annualized_return": self.annualized_return,
            "cancelled": self.cancelled,
        }

    def to_dict(self) -> dict:
        payload = self.summary()
        payload["trades"] = [t.to_dict() for t in self.trades]
        payload["unexecuted"] = [u.to_dict() for u in self.unexecuted]
        payload["equity_curve"] = [
            [date.isoformat(), equity] for date, equity in self.equity_curve
        ]
        return payload

    @classmethod
    def from_dict(cls, d: dict) -> BacktestResult:
        return cls(
            sharpe_ratio=float(d["sharpe_ratio"]),
            max_drawdown=float(d["max_drawdown"]),
            win_rate=float(d["win_rate"]),
            alpha=float(d["alpha"]),
            trades=tuple(Trade.from_dict(t) for t in d.get("trades", [])),
            equity_curve=tuple(
                (pd.Timestamp(date), float(equity)) for date, equity in d.get("equity_curve", [])
            ),
            unexecuted=tuple(UnexecutedSignal.from_dict(u) for u in d.get("unexecuted", [])),
            skipped_past_end=int(d.get("skipped_past_end", 0)),
            round_trips=int(d.get("round_trips", 0)),
            initial_capital=float(d.get("initial_capital", 0.0)),
            final_equity=float(d.get("final_equity", 0.0)),
            total_return=float(d.get("total_return", 0.0)),
            annualized_return=float(d.get("annualized_return", 0.0)),
            cancelled=bool(d.get("cancelled", False)),
        )

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, text: str) -> BacktestResult:
        return cls.from_dict(json.loads(text))
