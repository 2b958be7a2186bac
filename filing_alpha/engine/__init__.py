"""Backtest engine package — config, core loop, result, runners."""

from filing_alpha.engine.config import BacktestConfig
from filing_alpha.engine.core import BacktestEngine, run_backtest
from filing_alpha.engine.result import BacktestResult

__all__ = ["BacktestConfig", "BacktestEngine", "BacktestResult", "run_backtest"]
