from .signal import Decision, Signal, SignalComponents
from .classifier import (
    ClassifierConfig,
    EnsembleWeights,
    SignalClassifier,
    classify,
    decide,
    sentiment_score,
)
from .generator import generate_signals
from .io import read_signals_csv, signals_from_frame, signals_to_frame, write_signals_csv

__all__ = [
    "Decision",
    "Signal",
    "SignalComponents",
    "ClassifierConfig",
    "EnsembleWeights",
    "SignalClassifier",
    "classify",
    "decide",
    "sentiment_score",
    "generate_signals",
    "read_signals_csv",
    "signals_from_frame",
    "signals_to_frame",
    "write_signals_csv",
]
