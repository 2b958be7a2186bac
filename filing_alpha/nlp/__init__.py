"""NLP layer — tokenisation, lexicon sentiment, entities, embeddings."""

from .embedding import HashingEmbeddingProvider
from .entities import DEFAULT_PATTERNS, Entity, EntityPattern, extract_entities
from .features import (
    FeatureExtractor,
    FeatureRecord,
    extract_features,
    extract_key_phrases,
    tokenize,
)
from .lexicon import (
    DEFAULT_LEXICON,
    Lexicon,
    LexiconScorer,
    NeutralPolicy,
    SentimentScores,
    stem,
)
from .registry import build_embedding, build_lexicon, register_embedding, register_lexicon

__all__ = [
    "DEFAULT_LEXICON",
    "DEFAULT_PATTERNS",
    "Entity",
    "EntityPattern",
    "FeatureExtractor",
    "FeatureRecord",
    "HashingEmbeddingProvider",
    "Lexicon",
    "LexiconScorer",
    "NeutralPolicy",
    "SentimentScores",
    "build_embedding",
    "build_lexicon",
    "extract_entities",
    "extract_features",
    "extract_key_phrases",
    "register_embedding",
    "register_lexicon",
    "stem",
    "tokenize",
]
