"""Config-driven runners — extract signals, run backtests, write artifacts."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import pandas as pd
import yaml

from filing_alpha.documents import DirectoryDocumentSource
from filing_alpha.engine.config import BacktestConfig
from filing_alpha.engine.core import BacktestEngine
from filing_alpha.engine.result import BacktestResult
from filing_alpha.errors import ConfigurationError
from filing_alpha.metrics.drawdown import drawdown_series
from filing_alpha.nlp.features import FeatureExtractor
from filing_alpha.nlp.lexicon import LexiconScorer, NeutralPolicy
from filing_alpha.nlp.registry import build_embedding, build_lexicon
from filing_alpha.providers import FramePriceProvider, TableScoreProvider, TechnicalScoreProvider
from filing_alpha.reporting.plots import plot_equity
from filing_alpha.signals.classifier import ClassifierConfig, SignalClassifier
from filing_alpha.signals.generator import generate_signals
from filing_alpha.signals.io import read_signals_csv, write_signals_csv

log = logging.getLogger(__name__)


def _load_config(config_path: str | Path) -> tuple[Path, dict]:
    cfg_path = Path(config_path).resolve()
    with open(cfg_path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    return cfg_path, cfg


def _resolve(base: Path, value: str) -> Path:
    """Paths in a config are relative to the config file's directory."""
    path = Path(value)
    return path if path.is_absolute() else base / path


def _require(cfg: dict, key: str) -> str:
    if key not in cfg:
        raise ConfigurationError(f"config missing '{key}'")
    return cfg[key]


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

def run_extraction(config_path: str | Path) -> Path:
    """Documents → features.jsonl + signals.csv.

    Returns
    -------
    Path
        The written ``signals.csv``.
    """
    cfg_path, cfg = _load_config(config_path)
    base = cfg_path.parent

    source = DirectoryDocumentSource(_resolve(base, _require(cfg, "documents_dir")))
    prices = FramePriceProvider.from_csv(_resolve(base, _require(cfg, "prices_path")))
    fundamentals = TableScoreProvider.from_csv(
        _resolve(base, _require(cfg, "fundamentals_path")), name="fundamental",
    )
    technical = TechnicalScoreProvider(prices, **cfg.get("technical", {}))

    extractor = FeatureExtractor(
        scorer=LexiconScorer(
            lexicon=build_lexicon(cfg.get("lexicon")),
            neutral_policy=NeutralPolicy(cfg.get("neutral_policy", "raw")),
        ),
        embedder=build_embedding(cfg.get("embedding")),
    )
    classifier = SignalClassifier(ClassifierConfig.from_dict(cfg.get("classifier")))

    documents = source.load_all()
    signals, records = generate_signals(
        documents,
        fundamental=fundamentals,
        technical=technical,
        extractor=extractor,
        classifier=classifier,
        max_workers=cfg.get("max_workers"),
    )

    output_dir = _resolve(base, cfg.get("output_dir", "."))
    output_dir.mkdir(parents=True, exist_ok=True)

    features_path = output_dir / "features.jsonl"
    with open(features_path, "w", encoding="utf-8") as f:
        for record in records:
            f.write(json.dumps(record.to_dict()) + "\n")
    log.info("Wrote %s  (%d records)", features_path.name, len(records))

    signals_path = output_dir / "signals.csv"
    write_signals_csv(signals, signals_path)
    log.info("Wrote %s  (%d signals)", signals_path.name, len(signals))
    return signals_path


# ---------------------------------------------------------------------------
# Backtest
# ---------------------------------------------------------------------------

def run_backtest_from_config(
    config_path: str | Path,
    overrides: dict | None = None,
) -> str:
    """Execute a buffered backtest and write all run artifacts.

    Parameters
    ----------
    config_path : str | Path
        YAML file with ``signals_path``, ``prices_path``, ``output_dir`` and
        a ``backtest:`` block.
    overrides : dict, optional
        Keys merged over the ``backtest:`` block (used by parameter sweeps).

    Returns
    -------
    str
        The generated ``run_id``.
    """
    cfg_path, cfg = _load_config(config_path)
    base = cfg_path.parent

    signals_path = _resolve(base, _require(cfg, "signals_path"))
    prices_path = _resolve(base, _require(cfg, "prices_path"))
    bt_cfg = BacktestConfig.from_dict({**cfg.get("backtest", {}), **(overrides or {})})

    signals = read_signals_csv(signals_path)
    prices = FramePriceProvider.from_csv(prices_path)

    # ── Generate run_id ──────────────────────────────────────────────
    run_id = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
    run_dir = _resolve(base, cfg.get("output_dir", "runs")) / run_id
    (run_dir / "plots").mkdir(parents=True, exist_ok=True)

    log.info("Run ID   : %s", run_id)
    log.info("Output   : %s", run_dir)
    log.info("Signals  : %d", len(signals))
    log.info("Buffer   : %d trading days", bt_cfg.buffer_days)

    result = BacktestEngine(prices, bt_cfg).run(signals)

    _write_artifacts(run_dir, run_id, cfg_path, {**cfg, "backtest": bt_cfg.to_dict()}, bt_cfg, result)
    log.info("✓ Run complete: %s", run_dir)
    return run_id


def _write_artifacts(
    run_dir: Path,
    run_id: str,
    cfg_path: Path,
    effective_cfg: dict,
    bt_cfg: BacktestConfig,
    result: BacktestResult,
) -> None:
    # 1. config.yaml (with overrides applied)
    with open(run_dir / "config.yaml", "w", encoding="utf-8") as f:
        yaml.safe_dump(effective_cfg, f, sort_keys=False)

    # 2. equity.csv
    equity = result.equity_series
    equity_df = pd.DataFrame({
        "date": [d.date().isoformat() for d in equity.index],
        "equity": equity.to_numpy(),
        "drawdown": drawdown_series(equity).to_numpy(),
    })
    equity_df.to_csv(run_dir / "equity.csv", index=False)
    log.info("Wrote equity.csv  (%s rows)", f"{len(equity_df):,}")

    # 3. trades.csv / unexecuted.csv
    trade_cols = ["ticker", "side", "shares", "price", "execution_date", "signal_date", "cash_flow"]
    pd.DataFrame([t.to_dict() for t in result.trades], columns=trade_cols).to_csv(
        run_dir / "trades.csv", index=False,
    )
    log.info("Wrote trades.csv  (%s trades)", f"{result.n_trades:,}")

    skip_cols = ["ticker", "decision", "signal_date", "execution_date", "reason"]
    pd.DataFrame([u.to_dict() for u in result.unexecuted], columns=skip_cols).to_csv(
        run_dir / "unexecuted.csv", index=False,
    )

    # 4. metrics.json + result.json
    metrics = {"run_id": run_id, **result.summary(), "config": bt_cfg.to_dict()}
    (run_dir / "metrics.json").write_text(json.dumps(metrics, indent=2), encoding="utf-8")
    (run_dir / "result.json").write_text(result.to_json(), encoding="utf-8")
    log.info("Wrote metrics.json, result.json")

    # 5. plots
    plot_equity(equity_df, run_dir / "plots" / "equity.png")

    # 6. README.md
    readme_lines = [
        "Buffered Filing-Signal Backtest",
        f"Run ID: {run_id}",
        f"Range: {bt_cfg.start_date.date()} → {bt_cfg.end_date.date()}",
        f"Buffer: {bt_cfg.buffer_days} trading days, weight {bt_cfg.position_weight}, "
        f"slippage {bt_cfg.slippage}",
        f"Trades: {result.n_trades}, Unexecuted: {result.n_unexecuted}, "
        f"Final equity: {result.final_equity:.2f}",
        f"Reproduce: python -m filing_alpha backtest --config {cfg_path}",
    ]
    (run_dir / "README.md").write_text("\n".join(readme_lines) + "\n", encoding="utf-8")
