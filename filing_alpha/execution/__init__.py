"""Execution package — trades, skip records, ledger."""

from filing_alpha.execution.models import Ledger, Side, SkipReason, Trade, UnexecutedSignal

__all__ = ["Ledger", "Side", "SkipReason", "Trade", "UnexecutedSignal"]
