"""Ensemble classifier — feature record + external scores → Signal.

::

    sentiment_score = clamp01((positive - negative + 50) / 100)
    composite       = w_s * sentiment + w_f * fundamental + w_t * technical
    decision        = BUY   if composite >= buy_threshold
                      HOLD  if composite >= sell_threshold
                      SELL  otherwise
    confidence      = round(clamp(0, 100, |composite - 0.5| * 200))
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

import pandas as pd

from filing_alpha.errors import ConfigurationError
from filing_alpha.nlp.features import FeatureRecord
from .signal import Decision, Signal, SignalComponents

# Composite is rounded before thresholding so that inputs sitting exactly
# on a boundary are not pushed across it by float accumulation.
COMPOSITE_DECIMALS = 12


@dataclass(frozen=True)
class EnsembleWeights:
    sentiment: float = 0.35
    fundamental: float = 0.35
    technical: float = 0.30

    def __post_init__(self) -> None:
        values = (self.sentiment, self.fundamental, self.technical)
        if any(w < 0 for w in values):
            raise ConfigurationError(f"Ensemble weights must be non-negative: {values}")
        if not math.isclose(sum(values), 1.0, abs_tol=1e-9):
            raise ConfigurationError(f"Ensemble weights must sum to 1.0, got {sum(values):.6f}")


@dataclass(frozen=True)
class ClassifierConfig:
    """Weights and decision thresholds (BUY at/above, SELL below)."""

    weights: EnsembleWeights = field(default_factory=EnsembleWeights)
    buy_threshold: float = 0.65
    sell_threshold: float = 0.40

    def __post_init__(self) -> None:
        if not 0.0 <= self.sell_threshold <= self.buy_threshold <= 1.0:
            raise ConfigurationError(
                "Thresholds must satisfy 0 <= sell_threshold <= buy_threshold <= 1, "
                f"got sell={self.sell_threshold} buy={self.buy_threshold}"
            )

    @classmethod
    def from_dict(cls, cfg: dict | None) -> ClassifierConfig:
        cfg = cfg or {}
        weights = EnsembleWeights(**cfg.get("weights", {}))
        return cls(
            weights=weights,
            buy_threshold=float(cfg.get("buy_threshold", 0.65)),
            sell_threshold=float(cfg.get("sell_threshold", 0.40)),
        )


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _check_unit_score(name: str, value: float) -> float:
    value = float(value)
    if math.isnan(value) or not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} score must be in [0, 1], got {value}")
    return value


def sentiment_score(record: FeatureRecord) -> float:
    return _clamp((record.sentiment.positive - record.sentiment.negative + 50.0) / 100.0, 0.0, 1.0)


def decide(composite: float, config: ClassifierConfig) -> Decision:
    """Map a composite to a decision — closed at each threshold from below."""
    if composite >= config.buy_threshold:
        return Decision.BUY
    if composite >= config.sell_threshold:
        return Decision.HOLD
    return Decision.SELL


def _reasoning(decision: Decision, fundamental: float, technical: float) -> tuple[str, ...]:
    notes: list[str] = []
    if decision is Decision.BUY:
        notes.append("Strong positive sentiment detected in filings")
        if fundamental > 0.7:
            notes.append("Solid fundamental metrics")
        if technical > 0.7:
            notes.append("Favorable technical setup")
    elif decision is Decision.HOLD:
        notes.append("Mixed signals from sentiment analysis")
        notes.append("Await clearer directional catalyst")
    else:
        notes.append("Elevated negative sentiment in disclosures")
        if fundamental < 0.4:
            notes.append("Deteriorating fundamentals")
        if technical < 0.4:
            notes.append("Weak technical indicators")
    return tuple(notes)


@dataclass(frozen=True)
class SignalClassifier:
    """Stateless; safe to share between runs and threads."""

    config: ClassifierConfig = field(default_factory=ClassifierConfig)

    def classify(
        self,
        ticker: str,
        record: FeatureRecord,
        fundamental_score: float,
        technical_score: float,
        timestamp: Optional[pd.Timestamp] = None,
    ) -> Signal:
        fundamental = _check_unit_score("fundamental", fundamental_score)
        technical = _check_unit_score("technical", technical_score)
        sentiment = sentiment_score(record)

        w = self.config.weights
        composite = round(
            w.sentiment * sentiment + w.fundamental * fundamental + w.technical * technical,
            COMPOSITE_DECIMALS,
        )
        decision = decide(composite, self.config)
        confidence = int(round(_clamp(abs(composite - 0.5) * 200.0, 0.0, 100.0)))

        ts = pd.Timestamp(timestamp).normalize() if timestamp is not None else pd.Timestamp.now().normalize()
        return Signal(
            ticker=ticker.upper(),
            timestamp=ts,
            decision=decision,
            confidence=confidence,
            components=SignalComponents(
                sentiment=int(round(sentiment * 100)),
                fundamental=int(round(fundamental * 100)),
                technical=int(round(technical * 100)),
            ),
            composite=composite,
            reasoning=_reasoning(decision, fundamental, technical),
        )


def classify(
    ticker: str,
    record: FeatureRecord,
    fundamental_score: float,
    technical_score: float,
    timestamp: Optional[pd.Timestamp] = None,
    config: Optional[ClassifierConfig] = None,
) -> Signal:
    """Convenience wrapper around :meth:`SignalClassifier.classify`."""
    classifier = SignalClassifier(config or ClassifierConfig())
    return classifier.classify(ticker, record, fundamental_score, technical_score, timestamp)
