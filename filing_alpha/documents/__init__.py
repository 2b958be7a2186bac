"""
filing_alpha.documents — filing inputs and the collaborator contracts.

Filings are stored one JSON file per document::

    filings/
        10K-AAPL-2025.json
        10Q-MSFT-2025.json

Each file holds ``id``, ``ticker``, ``filing_type``, ``filing_date`` and
``text`` keys.
"""

from ._models import Document, FilingType
from ._protocols import (
    DocumentSource,
    EmbeddingProvider,
    PriceProvider,
    ScoreProvider,
    TradingCalendarLike,
)
from ._source import DirectoryDocumentSource

__all__ = [
    "Document",
    "FilingType",
    "DocumentSource",
    "EmbeddingProvider",
    "PriceProvider",
    "ScoreProvider",
    "TradingCalendarLike",
    "DirectoryDocumentSource",
]
