"""Immutable configuration for a single backtest run."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Optional

import pandas as pd

from filing_alpha.errors import ConfigurationError


@dataclass(frozen=True)
class BacktestConfig:
    """Immutable bag of settings for a single backtest run.

    ``start_date`` / ``end_date`` are inclusive. ``risk_free_rate`` is
    annual. ``holidays`` extends the weekend-only trading calendar.
    """

    start_date: pd.Timestamp
    end_date: pd.Timestamp
    buffer_days: int = 3
    initial_capital: float = 100_000.0
    position_weight: float = 0.1
    slippage: float = 0.0
    risk_free_rate: float = 0.0
    periods_per_year: int = 252
    benchmark_ticker: Optional[str] = None
    holidays: tuple[pd.Timestamp, ...] = ()

    def __post_init__(self) -> None:
        # Frozen: normalise through object.__setattr__.
        object.__setattr__(self, "start_date", pd.Timestamp(self.start_date).normalize())
        object.__setattr__(self, "end_date", pd.Timestamp(self.end_date).normalize())
        object.__setattr__(
            self, "holidays", tuple(pd.Timestamp(h).normalize() for h in self.holidays)
        )
        self._validate()

    def _validate(self) -> None:
        if isinstance(self.buffer_days, bool) or not isinstance(self.buffer_days, numbers.Integral):
            raise ConfigurationError(f"buffer_days must be an int, got {self.buffer_days!r}")
        if self.buffer_days < 0:
            raise ConfigurationError(f"buffer_days must be >= 0, got {self.buffer_days}")
        if not math.isfinite(self.initial_capital) or self.initial_capital <= 0:
            raise ConfigurationError(f"initial_capital must be > 0, got {self.initial_capital}")
        if not 0 < self.position_weight <= 1:
            raise ConfigurationError(f"position_weight must be in (0, 1], got {self.position_weight}")
        if not math.isfinite(self.slippage) or self.slippage < 0:
            raise ConfigurationError(f"slippage must be >= 0, got {self.slippage}")
        if self.periods_per_year <= 0:
            raise ConfigurationError(f"periods_per_year must be > 0, got {self.periods_per_year}")
        if self.end_date < self.start_date:
            raise ConfigurationError(
                f"end_date {self.end_date.date()} precedes start_date {self.start_date.date()}"
            )

    @classmethod
    def from_dict(cls, cfg: dict) -> BacktestConfig:
        """Build from a YAML ``backtest:`` block."""
        for key in ("start_date", "end_date"):
            if key not in cfg:
                raise ConfigurationError(f"backtest config missing '{key}'")
        benchmark = cfg.get("benchmark_ticker")
        return cls(
            start_date=pd.Timestamp(cfg["start_date"]),
            end_date=pd.Timestamp(cfg["end_date"]),
            buffer_days=cfg.get("buffer_days", 3),
            initial_capital=float(cfg.get("initial_capital", 100_000.0)),
            position_weight=float(cfg.get("position_weight", 0.1)),
            slippage=float(cfg.get("slippage", 0.0)),
            risk_free_rate=float(cfg.get("risk_free_rate", 0.0)),
            periods_per_year=int(cfg.get("periods_per_year", 252)),
            benchmark_ticker=str(benchmark).upper() if benchmark else None,
            holidays=tuple(cfg.get("holidays") or ()),
        )

    def to_dict(self) -> dict:
        return {
            "start_date": self.start_date.date().isoformat(),
            "end_date": self.end_date.date().isoformat(),
            "buffer_days": self.buffer_days,
            "initial_capital": self.initial_capital,
            "position_weight": self.position_weight,
            "slippage": self.slippage,
            "risk_free_rate": self.risk_free_rate,
            "periods_per_year": self.periods_per_year,
            "benchmark_ticker": self.benchmark_ticker,
            "holidays": [h.date().isoformat() for h in self.holidays],
        }
