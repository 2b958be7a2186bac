"""Replay package — input integrity checks ahead of a backtest run."""

from .validation import validate_prices, validate_signals

__all__ = ["validate_prices", "validate_signals"]
