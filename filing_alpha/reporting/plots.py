"""Plotting utilities for backtest reporting."""

from __future__ import annotations

import logging
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402

log = logging.getLogger(__name__)


def plot_equity(equity_df: pd.DataFrame, out_path: str | Path) -> None:
    """Plot the equity curve above its drawdown and save as PNG.

    Parameters
    ----------
    equity_df : pd.DataFrame
        Must contain ``date``, ``equity`` and ``drawdown`` columns.
    out_path : str | Path
        Destination file path (e.g. ``plots/equity.png``).
    """
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    fig, (ax_eq, ax_dd) = plt.subplots(
        2, 1, figsize=(14, 7), sharex=True, gridspec_kw={"height_ratios": [3, 1]},
    )
    if equity_df.empty:
        ax_eq.set_title("Equity (no sessions in range)")
    else:
        dates = pd.to_datetime(equity_df["date"])
        ax_eq.plot(dates, equity_df["equity"], linewidth=1.0, color="#4682b4")
        ax_eq.set_title(f"Equity  ({dates.iloc[0].date()} → {dates.iloc[-1].date()})")
        ax_dd.fill_between(dates, 100 * equity_df["drawdown"], 0.0, color="#e74c3c", alpha=0.4)
    ax_eq.set_ylabel("Equity")
    ax_eq.grid(True, alpha=0.3)
    ax_dd.set_ylabel("Drawdown (%)")
    ax_dd.set_xlabel("Date")
    ax_dd.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(out_path, dpi=100)
    plt.close(fig)

    log.info("Saved equity plot → %s", out_path)
