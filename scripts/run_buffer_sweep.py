"""Buffer sweep: runs one backtest config at several buffer_days values and prints a comparison table."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import pandas as pd
import yaml

# Ensure repo root is importable
_REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_REPO_ROOT))

from filing_alpha.engine.runner import run_backtest_from_config

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger(__name__)

DEFAULT_BUFFERS = [0, 1, 2, 3, 5, 10]

METRIC_COLS = [
    "buffer_days",
    "run_id",
    "n_trades",
    "n_unexecuted",
    "skipped_past_end",
    "sharpe_ratio",
    "max_drawdown",
    "win_rate",
    "alpha",
    "final_equity",
]


def main(argv: list[str] | None = None) -> None:
    p = argparse.ArgumentParser(description="Compare backtests across execution buffers")
    p.add_argument("--config", required=True, help="Path to backtest YAML config")
    p.add_argument("--buffers", type=int, nargs="+", default=DEFAULT_BUFFERS)
    args = p.parse_args(argv)

    cfg_path = Path(args.config).resolve()
    with open(cfg_path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    runs_dir = cfg_path.parent / cfg.get("output_dir", "runs")

    rows: list[dict] = []
    for buffer_days in args.buffers:
        log.info("=" * 60)
        log.info("Running buffer_days=%d", buffer_days)
        log.info("=" * 60)

        try:
            run_id = run_backtest_from_config(cfg_path, overrides={"buffer_days": buffer_days})
        except Exception:
            log.exception("buffer_days=%d FAILED", buffer_days)
            continue

        with open(runs_dir / run_id / "metrics.json", "r", encoding="utf-8") as f:
            metrics = json.load(f)

        rows.append({"buffer_days": buffer_days, "run_id": run_id,
                     **{k: metrics[k] for k in METRIC_COLS[2:]}})

    if not rows:
        log.error("No runs completed successfully.")
        sys.exit(1)

    summary = pd.DataFrame(rows, columns=METRIC_COLS)

    print("\n" + "=" * 80)
    print("BUFFER SWEEP")
    print("=" * 80)
    print(summary.to_string(index=False))
    print("=" * 80 + "\n")

    out_path = runs_dir / "buffer_sweep_summary.csv"
    summary.to_csv(out_path, index=False)
    log.info("Summary saved to %s", out_path)


if __name__ == "__main__":
    main()
