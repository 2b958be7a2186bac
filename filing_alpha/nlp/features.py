"""Document feature extraction.

Per-document pipeline::

    raw_text → tokens → sentiment (lexicon) → key phrases (bigrams)
             ↘ entities (patterns over raw text)
    tokens   → embedding (external provider)

Every call allocates its own token list and record, so independent
documents can be processed on worker threads.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np

from filing_alpha.documents import Document, EmbeddingProvider
from filing_alpha.errors import ProviderError
from .embedding import HashingEmbeddingProvider
from .entities import DEFAULT_PATTERNS, Entity, EntityPattern, extract_entities
from .lexicon import LexiconScorer, SentimentScores

log = logging.getLogger(__name__)

MIN_TOKEN_LENGTH = 3
MAX_KEY_PHRASES = 8
MIN_PHRASE_LENGTH = 7

_NON_WORD = re.compile(r"[^\w\s]", re.ASCII)


def tokenize(text: str) -> list[str]:
    """Lowercase, blank out punctuation, split, drop tokens shorter than 3."""
    if not text:
        return []
    cleaned = _NON_WORD.sub(" ", text.lower())
    return [t for t in cleaned.split() if len(t) >= MIN_TOKEN_LENGTH]


def extract_key_phrases(tokens: Sequence[str], limit: int = MAX_KEY_PHRASES) -> list[str]:
    """Repeated bigrams longer than 6 characters, most frequent first."""
    bigrams = Counter(f"{a} {b}" for a, b in zip(tokens, tokens[1:]))
    # Counter keeps first-seen order and sorted() is stable.
    kept = [(p, c) for p, c in bigrams.items() if c > 1 and len(p) >= MIN_PHRASE_LENGTH]
    kept.sort(key=lambda pc: -pc[1])
    return [p for p, _ in kept[:limit]]


@dataclass(frozen=True)
class FeatureRecord:
    """Everything extracted from one document."""

    document_id: str
    sentiment: SentimentScores
    embedding: tuple[float, ...]
    entities: tuple[Entity, ...] = ()
    key_phrases: tuple[str, ...] = ()
    n_tokens: int = 0

    @property
    def confidence(self) -> int:
        return self.sentiment.confidence

    def to_dict(self) -> dict:
        return {
            "document_id": self.document_id,
            "sentiment": self.sentiment.to_dict(),
            "confidence": self.confidence,
            "embedding": list(self.embedding),
            "entities": [e.to_dict() for e in self.entities],
            "key_phrases": list(self.key_phrases),
            "n_tokens": self.n_tokens,
        }


@dataclass(frozen=True)
class FeatureExtractor:
    """Turns a :class:`Document` into a :class:`FeatureRecord`.

    Parameters
    ----------
    scorer : LexiconScorer
        Lexicon and neutral-score policy.
    embedder : EmbeddingProvider
        External vectoriser; failures surface as :class:`ProviderError`.
    patterns : sequence of EntityPattern
        Ordered entity matchers applied to the raw text.
    """

    scorer: LexiconScorer = field(default_factory=LexiconScorer)
    embedder: EmbeddingProvider = field(default_factory=HashingEmbeddingProvider)
    patterns: Sequence[EntityPattern] = DEFAULT_PATTERNS

    def extract(self, document: Document) -> FeatureRecord:
        text = document.raw_text or ""
        tokens = tokenize(text)
        if not tokens:
            log.debug("Document %s has no usable tokens", document.id)

        return FeatureRecord(
            document_id=document.id,
            sentiment=self.scorer.score(tokens),
            embedding=self._embed(tokens),
            entities=tuple(extract_entities(text, self.patterns)),
            key_phrases=tuple(extract_key_phrases(tokens)),
            n_tokens=len(tokens),
        )

    def extract_many(
        self,
        documents: Sequence[Document],
        max_workers: Optional[int] = None,
    ) -> list[FeatureRecord]:
        """Extract in parallel; results keep the input order."""
        if max_workers == 1 or len(documents) <= 1:
            return [self.extract(d) for d in documents]
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            return list(pool.map(self.extract, documents))

    def _embed(self, tokens: list[str]) -> tuple[float, ...]:
        try:
            vec = np.asarray(self.embedder.embed(tokens), dtype=np.float64)
        except ProviderError:
            raise
        except Exception as exc:
            raise ProviderError("embedding", str(exc)) from exc

        if vec.shape != (self.embedder.dimension,):
            raise ProviderError(
                "embedding",
                f"expected vector of length {self.embedder.dimension}, got shape {vec.shape}",
            )
        if not np.isfinite(vec).all():
            raise ProviderError("embedding", "vector contains NaN or inf")
        return tuple(float(v) for v in vec)


def extract_features(
    document: Document,
    extractor: Optional[FeatureExtractor] = None,
) -> FeatureRecord:
    """Convenience wrapper around :meth:`FeatureExtractor.extract`."""
    return (extractor or FeatureExtractor()).extract(document)
