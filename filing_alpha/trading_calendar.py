"""Trading-day arithmetic — weekends plus an optional holiday list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

import pandas as pd
from pandas.tseries.offsets import CustomBusinessDay


@dataclass(frozen=True)
class TradingCalendar:
    """Mon–Fri sessions minus *holidays*.

    ``add_trading_days(date, n)`` returns the *n*-th session strictly after
    *date*. ``n = 0`` is treated as 1: a signal can never be acted on in
    the session it was produced in.
    """

    holidays: tuple[pd.Timestamp, ...] = ()

    @classmethod
    def from_dates(cls, holidays: Optional[Iterable] = None) -> TradingCalendar:
        days = sorted({pd.Timestamp(h).normalize() for h in (holidays or ())})
        return cls(holidays=tuple(days))

    @property
    def _offset(self) -> CustomBusinessDay:
        return CustomBusinessDay(holidays=list(self.holidays))

    def is_session(self, date: pd.Timestamp) -> bool:
        date = pd.Timestamp(date).normalize()
        return date.dayofweek < 5 and date not in self.holidays

    def add_trading_days(self, date: pd.Timestamp, n: int) -> pd.Timestamp:
        if n < 0:
            raise ValueError(f"n must be >= 0, got {n}")
        date = pd.Timestamp(date).normalize()
        return (date + max(n, 1) * self._offset).normalize()

    def sessions(self, start: pd.Timestamp, end: pd.Timestamp) -> pd.DatetimeIndex:
        """All sessions in ``[start, end]``."""
        return pd.bdate_range(
            pd.Timestamp(start).normalize(),
            pd.Timestamp(end).normalize(),
            freq="C",
            holidays=list(self.holidays),
        )
