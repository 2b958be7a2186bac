"""filing-alpha — filing text → trading signal → buffered backtest."""

from filing_alpha.engine.core import BacktestEngine, run_backtest
from filing_alpha.nlp.features import FeatureExtractor, extract_features
from filing_alpha.signals.classifier import SignalClassifier, classify

__version__ = "0.1.0"

__all__ = [
    "BacktestEngine",
    "FeatureExtractor",
    "SignalClassifier",
    "classify",
    "extract_features",
    "run_backtest",
]
