"""BacktestResult / Signal persistence — what goes out comes back unchanged."""

from __future__ import annotations

import json

import pandas as pd
import pytest

from filing_alpha.engine import BacktestConfig, BacktestResult, run_backtest
from filing_alpha.providers import FramePriceProvider
from filing_alpha.signals import (
    Decision,
    Signal,
    SignalComponents,
    read_signals_csv,
    signals_from_frame,
    write_signals_csv,
)


def _prices() -> FramePriceProvider:
    dates = pd.bdate_range("2024-01-01", "2024-02-29")
    return FramePriceProvider(pd.DataFrame({
        "date": dates,
        "ticker": "X",
        "close": [20.0 + 0.1 * i for i in range(len(dates))],
    }))


def _signals() -> list[Signal]:
    comps = SignalComponents(sentiment=72, fundamental=65, technical=58)
    return [
        Signal("X", pd.Timestamp("2024-01-02"), Decision.BUY, 44, comps, 0.72,
               ("Strong positive sentiment detected in filings",)),
        Signal("X", pd.Timestamp("2024-01-03"), Decision.BUY, 44, comps, 0.72),
        Signal("X", pd.Timestamp("2024-01-25"), Decision.SELL, 30, comps, 0.35,
               ("Elevated negative sentiment in disclosures", "Weak technical indicators")),
        Signal("X", pd.Timestamp("2024-02-28"), Decision.BUY, 44, comps, 0.72),
    ]


@pytest.fixture
def result() -> BacktestResult:
    config = BacktestConfig(start_date="2024-01-01", end_date="2024-02-29", buffer_days=2)
    return run_backtest(_signals(), _prices(), config)


def test_result_dict_round_trip(result):
    assert result.n_trades > 0
    assert BacktestResult.from_dict(result.to_dict()) == result


def test_result_json_round_trip(result):
    text = result.to_json()
    assert json.loads(text)["n_trades"] == result.n_trades
    assert BacktestResult.from_json(text) == result


def test_result_with_unexecuted_round_trip():
    dates = [d for d in pd.bdate_range("2024-01-01", "2024-02-29") if d != pd.Timestamp("2024-01-04")]
    prices = FramePriceProvider(pd.DataFrame({"date": dates, "ticker": "X", "close": 20.0}))
    config = BacktestConfig(start_date="2024-01-01", end_date="2024-02-29", buffer_days=2)
    res = run_backtest(_signals(), prices, config)

    assert res.n_unexecuted == 1
    assert res.skipped_past_end == 1
    restored = BacktestResult.from_json(res.to_json())
    assert restored == res
    assert restored.unexecuted[0].execution_date == pd.Timestamp("2024-01-04")


def test_intraday_signal_time_survives_json():
    comps = SignalComponents(sentiment=72, fundamental=65, technical=58)
    signal = Signal("X", pd.Timestamp("2024-01-02 16:30"), Decision.BUY, 44, comps, 0.72)
    config = BacktestConfig(start_date="2024-01-01", end_date="2024-02-29", buffer_days=2)
    res = run_backtest([signal], _prices(), config)

    restored = BacktestResult.from_json(res.to_json())
    assert restored.trades == res.trades
    assert restored.trades[0].signal_date == pd.Timestamp("2024-01-02 16:30")
    assert restored.trades[0].execution_date == pd.Timestamp("2024-01-04")


def test_equity_series(result):
    series = result.equity_series
    assert series.index.is_monotonic_increasing
    assert series.iloc[-1] == pytest.approx(result.final_equity)


# ── signals CSV ──────────────────────────────────────────────────────────

def test_signals_csv_round_trip(tmp_path):
    path = tmp_path / "out" / "signals.csv"
    write_signals_csv(_signals(), path)
    assert read_signals_csv(path) == _signals()


def test_signals_from_minimal_frame():
    df = pd.DataFrame({
        "ticker": ["abc"],
        "timestamp": ["2024-05-01"],
        "decision": ["buy"],
    })
    (signal,) = signals_from_frame(df)
    assert signal.ticker == "ABC"
    assert signal.decision is Decision.BUY
    assert signal.reasoning == ()


def test_signals_csv_blank_cells_use_defaults(tmp_path):
    path = tmp_path / "signals.csv"
    path.write_text(
        "ticker,timestamp,decision,confidence,sentiment,fundamental,technical,composite,reasoning\n"
        "X,2024-01-02,BUY,,,61,,,\n"
    )
    (signal,) = read_signals_csv(path)
    assert signal.confidence == 0
    assert signal.components == SignalComponents(sentiment=50, fundamental=61, technical=50)
    assert signal.composite == 0.5
    assert signal.reasoning == ()


def test_signals_frame_requires_columns():
    with pytest.raises(ValueError, match="missing required columns"):
        signals_from_frame(pd.DataFrame({"ticker": ["A"]}))
