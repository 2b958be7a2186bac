from dataclasses import dataclass
import pandas as pd
from typing import List, Optional
from .interfaces import Indicator, require_close

@dataclass(frozen=True)
class FeatureSpec:
    base: Indicator
    alias: Optional[str] = None

    @property
    def name(self) -> str:
        return self.alias or self.base.name

@dataclass(frozen=True)
class FeaturePipeline:
    """Runs a fixed set of indicators over one ticker's price history."""

    specs: List[FeatureSpec]

    def transform(self, prices: pd.DataFrame) -> pd.DataFrame:
        """One column per FeatureSpec on the input index, columns in alphabetical order."""
        require_close(prices)

        features = []
        for spec in self.specs:
            frame = spec.base.compute(prices)
            if len(frame.columns) == 1:
                frame.columns = [spec.name]
            features.append(frame)

        if not features:
            return pd.DataFrame(index=prices.index)

        out = pd.concat(features, axis=1)
        return out.reindex(sorted(out.columns), axis=1)

    @property
    def max_lookback(self) -> int:
        return max((spec.base.lookback for spec in self.specs), default=0)
