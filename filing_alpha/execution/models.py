"""Execution-layer value objects and the per-run cash/position ledger."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

import pandas as pd


class Side(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class SkipReason(str, Enum):
    MISSING_PRICE = "missing_price"
    BEFORE_START_DATE = "before_start_date"


@dataclass(frozen=True)
class Trade:
    """One executed order — maps 1:1 to a trades.csv row.

    ``cash_flow`` is the signed cash movement including slippage
    (negative for buys).
    """

    ticker: str
    side: Side
    shares: int
    price: float
    execution_date: pd.Timestamp
    signal_date: pd.Timestamp
    cash_flow: float

    def to_dict(self) -> dict:
        return {
            "ticker": self.ticker,
            "side": self.side.value,
            "shares": self.shares,
            "price": self.price,
            "execution_date": self.execution_date.isoformat(),
            "signal_date": self.signal_date.isoformat(),
            "cash_flow": self.cash_flow,
        }

    @classmethod
    def from_dict(cls, d: Mapping) -> Trade:
        return cls(
            ticker=d["ticker"],
            side=Side(d["side"]),
            shares=int(d["shares"]),
            price=float(d["price"]),
            execution_date=pd.Timestamp(d["execution_date"]),
            signal_date=pd.Timestamp(d["signal_date"]),
            cash_flow=float(d["cash_flow"]),
        )


@dataclass(frozen=True)
class UnexecutedSignal:
    """A signal that reached its execution date but could not trade."""

    ticker: str
    decision: str
    signal_date: pd.Timestamp
    execution_date: pd.Timestamp
    reason: SkipReason

    def to_dict(self) -> dict:
        return {
            "ticker": self.ticker,
            "decision": self.decision,
            "signal_date": self.signal_date.isoformat(),
            "execution_date": self.execution_date.isoformat(),
            "reason": self.reason.value,
        }

    @classmethod
    def from_dict(cls, d: Mapping) -> UnexecutedSignal:
        return cls(
            ticker=d["ticker"],
            decision=d["decision"],
            signal_date=pd.Timestamp(d["signal_date"]),
            execution_date=pd.Timestamp(d["execution_date"]),
            reason=SkipReason(d["reason"]),
        )


@dataclass
class Ledger:
    """Cash and share counts for one backtest run.

    Mutated only through :meth:`buy` / :meth:`sell`. ``marks`` holds the
    last observed price per ticker and is used for valuation only, never
    as an execution price.
    """

    cash: float
    positions: dict[str, int] = field(default_factory=dict)
    marks: dict[str, float] = field(default_factory=dict)

    def holding(self, ticker: str) -> int:
        return self.positions.get(ticker, 0)

    def update_mark(self, ticker: str, price: float) -> None:
        self.marks[ticker] = price

    def equity(self, prices: Mapping[str, float] | None = None) -> float:
        """Cash plus positions valued at *prices*, falling back to marks."""
        prices = prices or {}
        value = self.cash
        for ticker, shares in self.positions.items():
            px = prices.get(ticker, self.marks.get(ticker))
            if px is None:
                raise KeyError(f"No price or mark available to value {ticker}")
            value += shares * px
        return value

    def buy(self, ticker: str, shares: int, cost: float) -> None:
        if shares <= 0:
            raise ValueError(f"shares must be positive, got {shares}")
        if cost > self.cash:
            raise ValueError(f"cost {cost:.2f} exceeds cash {self.cash:.2f}")
        self.cash -= cost
        self.positions[ticker] = self.holding(ticker) + shares

    def sell_all(self, ticker: str, proceeds: float) -> int:
        shares = self.positions.pop(ticker, 0)
        if shares <= 0:
            raise ValueError(f"No position in {ticker} to sell")
        self.cash += proceeds
        return shares
