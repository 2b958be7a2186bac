"""Tests for filing_alpha.signals.classifier — composite, thresholds, weights."""

from __future__ import annotations

import pandas as pd
import pytest

from filing_alpha.errors import ConfigurationError
from filing_alpha.nlp.features import FeatureRecord
from filing_alpha.nlp.lexicon import SentimentScores
from filing_alpha.signals import (
    ClassifierConfig,
    Decision,
    EnsembleWeights,
    SignalClassifier,
    classify,
    sentiment_score,
)

TS = pd.Timestamp("2024-03-01")


def _record(positive: float, negative: float) -> FeatureRecord:
    return FeatureRecord(
        document_id="doc",
        sentiment=SentimentScores(
            positive=positive,
            negative=negative,
            neutral=100.0 - positive - negative,
            uncertainty=0.0,
            confidence=50,
        ),
        embedding=(0.0,),
    )


# ── sentiment score ──────────────────────────────────────────────────────

@pytest.mark.parametrize("positive, negative, expected", [
    (0.0, 0.0, 0.5),
    (15.0, 0.0, 0.65),
    (0.0, 10.0, 0.4),
    (100.0, 0.0, 1.0),     # clamped from 1.5
    (0.0, 100.0, 0.0),     # clamped from -0.5
])
def test_sentiment_score(positive, negative, expected):
    assert sentiment_score(_record(positive, negative)) == pytest.approx(expected)


# ── thresholds ───────────────────────────────────────────────────────────

def test_composite_exactly_at_buy_threshold_is_buy():
    signal = classify("acme", _record(15.0, 0.0), 0.65, 0.65, timestamp=TS)
    assert signal.composite == 0.65
    assert signal.decision is Decision.BUY
    assert signal.confidence == 30


def test_composite_exactly_at_sell_threshold_is_hold():
    signal = classify("acme", _record(0.0, 10.0), 0.40, 0.40, timestamp=TS)
    assert signal.composite == 0.40
    assert signal.decision is Decision.HOLD
    assert signal.confidence == 20


def test_composite_below_sell_threshold_is_sell():
    signal = classify("acme", _record(0.0, 11.0), 0.39, 0.39, timestamp=TS)
    assert signal.decision is Decision.SELL


def test_composite_just_below_buy_threshold_is_hold():
    signal = classify("acme", _record(14.0, 0.0), 0.64, 0.64, timestamp=TS)
    assert signal.decision is Decision.HOLD


def test_custom_thresholds():
    config = ClassifierConfig(buy_threshold=0.55, sell_threshold=0.45)
    signal = classify("acme", _record(10.0, 0.0), 0.6, 0.6, timestamp=TS, config=config)
    assert signal.decision is Decision.BUY


# ── signal fields ────────────────────────────────────────────────────────

def test_all_max_scores():
    signal = classify("acme", _record(100.0, 0.0), 1.0, 1.0, timestamp=TS)

    assert signal.ticker == "ACME"
    assert signal.decision is Decision.BUY
    assert signal.confidence == 100
    assert (signal.components.sentiment, signal.components.fundamental,
            signal.components.technical) == (100, 100, 100)
    assert signal.reasoning == (
        "Strong positive sentiment detected in filings",
        "Solid fundamental metrics",
        "Favorable technical setup",
    )


def test_sell_reasoning():
    signal = classify("acme", _record(0.0, 100.0), 0.1, 0.1, timestamp=TS)
    assert signal.decision is Decision.SELL
    assert signal.reasoning == (
        "Elevated negative sentiment in disclosures",
        "Deteriorating fundamentals",
        "Weak technical indicators",
    )


def test_timestamp_is_normalised():
    signal = classify("acme", _record(0.0, 0.0), 0.5, 0.5,
                      timestamp=pd.Timestamp("2024-03-01 15:30"))
    assert signal.timestamp == TS


def test_confidence_bounds():
    for f in (0.0, 0.25, 0.5, 0.75, 1.0):
        signal = classify("acme", _record(20.0, 5.0), f, 1.0 - f, timestamp=TS)
        assert 0 <= signal.confidence <= 100


def test_classifier_is_deterministic():
    clf = SignalClassifier()
    a = clf.classify("acme", _record(12.0, 3.0), 0.7, 0.3, timestamp=TS)
    b = clf.classify("acme", _record(12.0, 3.0), 0.7, 0.3, timestamp=TS)
    assert a == b


@pytest.mark.parametrize("bad", [-0.1, 1.1, float("nan")])
def test_out_of_range_scores_rejected(bad):
    with pytest.raises(ValueError, match="score must be in"):
        classify("acme", _record(0.0, 0.0), bad, 0.5, timestamp=TS)


# ── configuration ────────────────────────────────────────────────────────

def test_weights_must_sum_to_one():
    with pytest.raises(ConfigurationError, match="sum to 1.0"):
        EnsembleWeights(sentiment=0.5, fundamental=0.5, technical=0.5)


def test_weights_must_be_non_negative():
    with pytest.raises(ConfigurationError, match="non-negative"):
        EnsembleWeights(sentiment=1.2, fundamental=-0.2, technical=0.0)


def test_thresholds_must_be_ordered():
    with pytest.raises(ConfigurationError, match="Thresholds"):
        ClassifierConfig(buy_threshold=0.3, sell_threshold=0.6)


def test_config_from_dict():
    config = ClassifierConfig.from_dict({
        "weights": {"sentiment": 0.5, "fundamental": 0.3, "technical": 0.2},
        "buy_threshold": 0.6,
    })
    assert config.weights == EnsembleWeights(0.5, 0.3, 0.2)
    assert config.buy_threshold == 0.6
    assert config.sell_threshold == 0.40


def test_config_from_dict_rejects_bad_weights():
    with pytest.raises(ConfigurationError):
        ClassifierConfig.from_dict({"weights": {"sentiment": 0.9}})


def test_weighting_changes_decision():
    record = _record(100.0, 0.0)     # sentiment 1.0
    heavy = ClassifierConfig(weights=EnsembleWeights(0.8, 0.1, 0.1))
    light = ClassifierConfig(weights=EnsembleWeights(0.1, 0.45, 0.45))

    assert classify("acme", record, 0.2, 0.2, timestamp=TS, config=heavy).decision is Decision.BUY
    assert classify("acme", record, 0.2, 0.2, timestamp=TS, config=light).decision is Decision.SELL
