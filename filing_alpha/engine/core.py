"""BacktestEngine — buffered, signal-by-signal trade simulation.

Orchestrates the per-signal pipeline:
  schedule (timestamp + buffer) → boundary checks → price lookup
  → sizing → ledger mutation → daily mark-to-market

Every call to :meth:`BacktestEngine.run` builds a fresh ledger; nothing is
shared between runs, so parameter sweeps can reuse one engine.
"""

from __future__ import annotations

import logging
import math
import threading
from typing import Optional, Sequence

import pandas as pd

from filing_alpha.documents import PriceProvider, TradingCalendarLike
from filing_alpha.engine.config import BacktestConfig
from filing_alpha.engine.result import BacktestResult
from filing_alpha.errors import ProviderError
from filing_alpha.execution.models import Ledger, Side, SkipReason, Trade, UnexecutedSignal
from filing_alpha.metrics.performance import compute_metrics
from filing_alpha.replay.validation import validate_signals
from filing_alpha.signals.signal import Decision, Signal
from filing_alpha.trading_calendar import TradingCalendar

log = logging.getLogger(__name__)


class BacktestEngine:
    """Replays a Signal stream against historical prices.

    Parameters
    ----------
    price_provider : PriceProvider
        Exact-date price source. ``None`` means no print for that date.
    config : BacktestConfig
        Buffer, capital, sizing, slippage and run bounds.
    calendar : TradingCalendarLike, optional
        Defaults to weekends plus ``config.holidays``.
    """

    def __init__(
        self,
        price_provider: PriceProvider,
        config: BacktestConfig,
        calendar: Optional[TradingCalendarLike] = None,
    ) -> None:
        self.price_provider = price_provider
        self.config = config
        self.calendar = calendar or TradingCalendar.from_dates(config.holidays)

    def run(
        self,
        signals: Sequence[Signal],
        cancel_event: Optional[threading.Event] = None,
    ) -> BacktestResult:
        """Validate *signals*, simulate, and return the result.

        Configuration problems raise before any ledger exists. Setting
        *cancel_event* stops the run at the next signal boundary and returns
        a partial result over what has executed so far.
        """
        signals = list(signals)
        validate_signals(signals)
        return _BacktestRun(self, signals).execute(cancel_event)


class _BacktestRun:
    """Mutable state owned by exactly one run."""

    def __init__(self, engine: BacktestEngine, signals: list[Signal]) -> None:
        self._engine = engine
        self._cfg = engine.config
        self._signals = signals

        self.ledger = Ledger(cash=self._cfg.initial_capital)
        self.trades: list[Trade] = []
        self.unexecuted: list[UnexecutedSignal] = []
        self.skipped_past_end = 0
        self.curve: list[tuple[pd.Timestamp, float]] = []

        self._sessions = engine.calendar.sessions(self._cfg.start_date, self._cfg.end_date)
        self._next_session = 0

    # -- main loop ---------------------------------------------------------

    def execute(self, cancel_event: Optional[threading.Event]) -> BacktestResult:
        cfg = self._cfg
        cancelled = False
        checkpoint: Optional[pd.Timestamp] = None

        for execution_date, signal in self._schedule():
            if cancel_event is not None and cancel_event.is_set():
                cancelled = True
                log.warning("Backtest cancelled before %s %s", signal.ticker, signal.timestamp.date())
                break

            if execution_date > cfg.end_date:
                self.skipped_past_end += 1
                log.info(
                    "Skip %s %s: executes %s after end %s",
                    signal.decision.value, signal.ticker,
                    execution_date.date(), cfg.end_date.date(),
                )
                continue

            if execution_date < cfg.start_date:
                self._unexecuted(signal, execution_date, SkipReason.BEFORE_START_DATE)
                continue

            self._mark_sessions(before=execution_date)
            self._process(signal, execution_date)
            checkpoint = execution_date

        if cancelled:
            self._mark_sessions(through=checkpoint or cfg.start_date)
        else:
            self._mark_sessions(through=cfg.end_date)

        return self._finalize(cancelled)

    def _schedule(self) -> list[tuple[pd.Timestamp, Signal]]:
        """Pair each signal with its execution date; stable on equal dates."""
        buffer_days = self._cfg.buffer_days
        calendar = self._engine.calendar
        scheduled = [
            (calendar.add_trading_days(s.timestamp, buffer_days), s) for s in self._signals
        ]
        return sorted(scheduled, key=lambda pair: pair[0])

    # -- per-signal processing ---------------------------------------------

    def _process(self, signal: Signal, execution_date: pd.Timestamp) -> None:
        if signal.decision is Decision.HOLD:
            return

        price = self._price(signal.ticker, execution_date)
        if price is None:
            self._unexecuted(signal, execution_date, SkipReason.MISSING_PRICE)
            return
        self.ledger.update_mark(signal.ticker, price)

        if signal.decision is Decision.BUY:
            self._buy(signal, execution_date, price)
        else:
            self._sell(signal, execution_date, price)

    def _buy(self, signal: Signal, execution_date: pd.Timestamp, price: float) -> None:
        self._refresh_marks(execution_date)
        position_size = self.ledger.equity() * self._cfg.position_weight

        if self.ledger.cash < position_size:
            log.debug("BUY %s not executed: cash %.2f < size %.2f",
                      signal.ticker, self.ledger.cash, position_size)
            return

        shares = math.floor(position_size / price)
        if shares == 0:
            log.debug("BUY %s not executed: size %.2f below one share at %.2f",
                      signal.ticker, position_size, price)
            return

        cost = shares * price * (1.0 + self._cfg.slippage)
        if cost > self.ledger.cash:
            log.debug("BUY %s not executed: cost %.2f exceeds cash %.2f",
                      signal.ticker, cost, self.ledger.cash)
            return

        self.ledger.buy(signal.ticker, shares, cost)
        self._record(signal, Side.BUY, shares, price, execution_date, -cost)

    def _sell(self, signal: Signal, execution_date: pd.Timestamp, price: float) -> None:
        shares = self.ledger.holding(signal.ticker)
        if shares == 0:
            return

        proceeds = shares * price * (1.0 - self._cfg.slippage)
        self.ledger.sell_all(signal.ticker, proceeds)
        self._record(signal, Side.SELL, shares, price, execution_date, proceeds)

    def _record(
        self,
        signal: Signal,
        side: Side,
        shares: int,
        price: float,
        execution_date: pd.Timestamp,
        cash_flow: float,
    ) -> None:
        trade = Trade(
            ticker=signal.ticker,
            side=side,
            shares=shares,
            price=price,
            execution_date=execution_date,
            signal_date=signal.timestamp,
            cash_flow=cash_flow,
        )
        self.trades.append(trade)
        log.debug("%s %d %s @ %.4f on %s (cash %.2f)",
                  side.value, shares, signal.ticker, price, execution_date.date(), self.ledger.cash)

    def _unexecuted(self, signal: Signal, execution_date: pd.Timestamp, reason: SkipReason) -> None:
        self.unexecuted.append(
            UnexecutedSignal(
                ticker=signal.ticker,
                decision=signal.decision.value,
                signal_date=signal.timestamp,
                execution_date=execution_date,
                reason=reason,
            )
        )
        log.warning("Unexecuted %s %s for %s: %s",
                    signal.decision.value, signal.ticker, execution_date.date(), reason.value)

    # -- prices & marking --------------------------------------------------

    def _price(self, ticker: str, date: pd.Timestamp) -> Optional[float]:
        try:
            price = self._engine.price_provider.price_on(ticker, date)
        except ProviderError:
            raise
        except Exception as exc:
            raise ProviderError("price", f"{ticker} @ {date.date()}: {exc}") from exc

        if price is None or pd.isna(price):
            return None
        price = float(price)
        if price <= 0:
            raise ProviderError("price", f"{ticker} @ {date.date()}: non-positive price {price}")
        return price

    def _refresh_marks(self, date: pd.Timestamp) -> None:
        for ticker in list(self.ledger.positions):
            price = self._price(ticker, date)
            if price is not None:
                self.ledger.update_mark(ticker, price)

    def _mark_sessions(
        self,
        before: Optional[pd.Timestamp] = None,
        through: Optional[pd.Timestamp] = None,
    ) -> None:
        """Append curve samples for pending sessions ``< before`` or ``<= through``."""
        while self._next_session < len(self._sessions):
            session = self._sessions[self._next_session]
            if before is not None and session >= before:
                break
            if through is not None and session > through:
                break
            self._refresh_marks(session)
            self.curve.append((session, self.ledger.equity()))
            self._next_session += 1

    # -- finalize ----------------------------------------------------------

    def _benchmark(self, dates: pd.DatetimeIndex) -> Optional[pd.Series]:
        ticker = self._cfg.benchmark_ticker
        if ticker is None:
            return None
        closes = {d: self._price(ticker, d) for d in dates}
        series = pd.Series({d: p for d, p in closes.items() if p is not None}, dtype=float)
        if len(series) < 2:
            log.warning("Benchmark %s has fewer than two prices in range; alpha = 0", ticker)
        return series

    def _finalize(self, cancelled: bool) -> BacktestResult:
        cfg = self._cfg
        equity = pd.Series(
            [v for _, v in self.curve],
            index=pd.DatetimeIndex([d for d, _ in self.curve]),
            dtype=float,
        )
        metrics = compute_metrics(
            equity,
            self.trades,
            benchmark=self._benchmark(equity.index),
            risk_free_rate=cfg.risk_free_rate,
            periods_per_year=cfg.periods_per_year,
        )
        final_equity = self.curve[-1][1] if self.curve else self.ledger.equity()

        result = BacktestResult(
            sharpe_ratio=metrics.sharpe_ratio,
            max_drawdown=metrics.max_drawdown,
            win_rate=metrics.win_rate,
            alpha=metrics.alpha,
            trades=tuple(self.trades),
            equity_curve=tuple(self.curve),
            unexecuted=tuple(self.unexecuted),
            skipped_past_end=self.skipped_past_end,
            round_trips=metrics.round_trips,
            initial_capital=cfg.initial_capital,
            final_equity=final_equity,
            total_return=metrics.total_return,
            annualized_return=metrics.annualized_return,
            cancelled=cancelled,
        )
        log.info(
            "Backtest done: %d trades, %d unexecuted, %d past end, "
            "sharpe=%.3f maxDD=%.2f%% final=%.2f%s",
            result.n_trades, result.n_unexecuted, result.skipped_past_end,
            result.sharpe_ratio, 100 * result.max_drawdown, result.final_equity,
            " (cancelled)" if cancelled else "",
        )
        return result


def run_backtest(
    signals: Sequence[Signal],
    price_provider: PriceProvider,
    config: BacktestConfig | dict,
    calendar: Optional[TradingCalendarLike] = None,
    cancel_event: Optional[threading.Event] = None,
) -> BacktestResult:
    """Run one buffered backtest; *config* may be a ``backtest:`` dict."""
    if isinstance(config, dict):
        config = BacktestConfig.from_dict(config)
    engine = BacktestEngine(price_provider, config, calendar=calendar)
    return engine.run(signals, cancel_event=cancel_event)
