"""Tests for filing_alpha.trading_calendar.TradingCalendar."""

from __future__ import annotations

import pandas as pd
import pytest

from filing_alpha.trading_calendar import TradingCalendar

FRI = pd.Timestamp("2024-01-05")
MON = pd.Timestamp("2024-01-08")


def test_add_skips_weekend():
    cal = TradingCalendar()
    assert cal.add_trading_days(FRI, 1) == MON
    assert cal.add_trading_days(FRI, 3) == pd.Timestamp("2024-01-10")


def test_add_from_weekend_date():
    # Saturday + 1 session is Monday.
    assert TradingCalendar().add_trading_days(pd.Timestamp("2024-01-06"), 1) == MON


def test_zero_buffer_is_next_session():
    cal = TradingCalendar()
    assert cal.add_trading_days(FRI, 0) == MON
    assert cal.add_trading_days(MON, 0) > MON


def test_negative_rejected():
    with pytest.raises(ValueError, match="n must be >= 0"):
        TradingCalendar().add_trading_days(MON, -1)


def test_holidays_are_skipped():
    cal = TradingCalendar.from_dates(["2024-01-08"])
    assert cal.add_trading_days(FRI, 1) == pd.Timestamp("2024-01-09")
    assert not cal.is_session(MON)
    assert cal.is_session(pd.Timestamp("2024-01-09"))


def test_intraday_timestamp_is_normalised():
    cal = TradingCalendar()
    assert cal.add_trading_days(pd.Timestamp("2024-01-05 16:30"), 1) == MON


def test_execution_always_after_signal():
    cal = TradingCalendar.from_dates(["2024-01-15"])
    for day in pd.date_range("2024-01-01", "2024-01-31"):
        for n in range(0, 6):
            assert cal.add_trading_days(day, n) > day


def test_sessions_range():
    cal = TradingCalendar.from_dates(["2024-01-03"])
    sessions = cal.sessions(pd.Timestamp("2024-01-01"), pd.Timestamp("2024-01-08"))
    assert [d.day for d in sessions] == [1, 2, 4, 5, 8]
