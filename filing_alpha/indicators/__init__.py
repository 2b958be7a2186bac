from .core.interfaces import Indicator
from .core.pipeline import FeaturePipeline, FeatureSpec
from .impl.ma import EMA, SMA
from .impl.rsi import RSI

__all__ = [
    "Indicator",
    "SMA",
    "EMA",
    "RSI",
    "FeaturePipeline",
    "FeatureSpec",
]
