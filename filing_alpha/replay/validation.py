"""Fail-fast integrity checks for signal streams and price tables."""

from __future__ import annotations

from typing import Sequence

import pandas as pd

from filing_alpha.errors import ConfigurationError
from filing_alpha.signals.signal import Signal


def validate_signals(signals: Sequence[Signal]) -> None:
    """Validate a signal stream *before* any ledger exists.

    Raises ``ConfigurationError`` on the first problem found so that an
    out-of-order stream never produces a misleading report.
    """

    # 1. Every signal carries a ticker and a timestamp ──────────────────
    for i, s in enumerate(signals):
        if not s.ticker:
            raise ConfigurationError(f"Signal {i} has an empty ticker")
        if s.timestamp is None or pd.isna(s.timestamp):
            raise ConfigurationError(f"Signal {i} ({s.ticker}) has no timestamp")

    # 2. Non-decreasing timestamps ──────────────────────────────────────
    for i in range(1, len(signals)):
        prev, cur = signals[i - 1], signals[i]
        if cur.timestamp < prev.timestamp:
            raise ConfigurationError(
                f"Signals not in chronological order at index {i}: "
                f"{cur.ticker} {cur.timestamp.date()} after "
                f"{prev.ticker} {prev.timestamp.date()}"
            )


def validate_prices(df: pd.DataFrame) -> None:
    """Validate a long-format ``date, ticker, close`` price table.

    Raises ``ValueError`` immediately on the first problem found.
    """

    # 1. Columns exist ──────────────────────────────────────────────────
    missing = {"date", "ticker", "close"} - set(df.columns)
    if missing:
        raise ValueError(f"Missing price columns: {sorted(missing)}")

    # 2. No null keys ───────────────────────────────────────────────────
    if df["date"].isna().any() or df["ticker"].isna().any():
        n = int(df["date"].isna().sum() + df["ticker"].isna().sum())
        raise ValueError(f"Null date/ticker found: {n} rows")

    # 3. One row per (date, ticker) ─────────────────────────────────────
    keys = pd.DataFrame({
        "date": pd.to_datetime(df["date"]).dt.normalize(),
        "ticker": df["ticker"].astype(str).str.upper(),
    })
    n_dupes = int(keys.duplicated().sum())
    if n_dupes > 0:
        raise ValueError(f"Duplicate (date, ticker) rows found: {n_dupes}")

    # 4. Prices are positive where present ──────────────────────────────
    non_positive = int((df["close"].dropna() <= 0).sum())
    if non_positive > 0:
        raise ValueError(f"Non-positive close found: {non_positive} rows")
