"""CSV persistence for Signal streams."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pandas as pd

from .signal import Decision, Signal, SignalComponents

SIGNAL_COLUMNS: list[str] = [
    "ticker", "timestamp", "decision", "confidence",
    "sentiment", "fundamental", "technical", "composite", "reasoning",
]

_REASON_SEP = " | "


def _cell(row: dict, key: str, default):
    """Optional column value, with blank or NaN cells read as ``default``."""
    value = row.get(key, default)
    return default if pd.isna(value) else value


def signals_to_frame(signals: Sequence[Signal]) -> pd.DataFrame:
    rows = [
        {
            "ticker": s.ticker,
            "timestamp": s.timestamp.date().isoformat(),
            "decision": s.decision.value,
            "confidence": s.confidence,
            "sentiment": s.components.sentiment,
            "fundamental": s.components.fundamental,
            "technical": s.components.technical,
            "composite": s.composite,
            "reasoning": _REASON_SEP.join(s.reasoning),
        }
        for s in signals
    ]
    return pd.DataFrame(rows, columns=SIGNAL_COLUMNS)


def signals_from_frame(df: pd.DataFrame) -> list[Signal]:
    """Rebuild Signals, preserving row order.

    Only ``ticker``, ``timestamp`` and ``decision`` are required; missing
    optional columns fall back to neutral values.
    """
    missing = {"ticker", "timestamp", "decision"} - set(df.columns)
    if missing:
        raise ValueError(f"Signal frame missing required columns: {sorted(missing)}")

    signals: list[Signal] = []
    for row in df.to_dict(orient="records"):
        reasoning = row.get("reasoning")
        signals.append(
            Signal(
                ticker=str(row["ticker"]).upper(),
                timestamp=pd.Timestamp(row["timestamp"]).normalize(),
                decision=Decision(str(row["decision"]).upper()),
                confidence=int(_cell(row, "confidence", 0)),
                components=SignalComponents(
                    sentiment=int(_cell(row, "sentiment", 50)),
                    fundamental=int(_cell(row, "fundamental", 50)),
                    technical=int(_cell(row, "technical", 50)),
                ),
                composite=float(_cell(row, "composite", 0.5)),
                reasoning=tuple(reasoning.split(_REASON_SEP)) if isinstance(reasoning, str) and reasoning else (),
            )
        )
    return signals


def write_signals_csv(signals: Sequence[Signal], path: str | Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    signals_to_frame(signals).to_csv(path, index=False)


def read_signals_csv(path: str | Path) -> list[Signal]:
    return signals_from_frame(pd.read_csv(path))
