"""Documents → ordered Signal stream."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import pandas as pd

from filing_alpha.documents import Document, ScoreProvider
from filing_alpha.errors import ProviderError
from filing_alpha.nlp.features import FeatureExtractor, FeatureRecord
from .classifier import SignalClassifier
from .signal import Signal

log = logging.getLogger(__name__)


def score_as_of(provider: ScoreProvider, kind: str, ticker: str, as_of: pd.Timestamp) -> float:
    """Call a score provider, surfacing any failure as :class:`ProviderError`."""
    try:
        return float(provider.score(ticker, as_of))
    except ProviderError:
        raise
    except Exception as exc:
        raise ProviderError(kind, f"{ticker} @ {as_of.date()}: {exc}") from exc


def generate_signals(
    documents: Sequence[Document],
    fundamental: ScoreProvider,
    technical: ScoreProvider,
    extractor: Optional[FeatureExtractor] = None,
    classifier: Optional[SignalClassifier] = None,
    max_workers: Optional[int] = None,
) -> tuple[list[Signal], list[FeatureRecord]]:
    """Extract, score and classify every document.

    Feature extraction fans out over threads; classification is sequential.
    Signals are stamped with the filing date and returned in ascending
    timestamp order (stable for same-day filings). The feature records are
    returned in input order.
    """
    extractor = extractor or FeatureExtractor()
    classifier = classifier or SignalClassifier()

    records = extractor.extract_many(documents, max_workers=max_workers)

    signals: list[Signal] = []
    for doc, record in zip(documents, records):
        as_of = doc.filing_date
        signal = classifier.classify(
            doc.ticker,
            record,
            score_as_of(fundamental, "fundamental", doc.ticker, as_of),
            score_as_of(technical, "technical", doc.ticker, as_of),
            timestamp=as_of,
        )
        log.debug(
            "%s %s → %s (composite=%.3f, confidence=%d)",
            doc.ticker, doc.id, signal.decision.value, signal.composite, signal.confidence,
        )
        signals.append(signal)

    signals.sort(key=lambda s: s.timestamp)
    log.info("Generated %d signals from %d documents", len(signals), len(documents))
    return signals, records
