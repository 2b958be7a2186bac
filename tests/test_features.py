"""Tests for filing_alpha.nlp.features — tokenisation, entities, phrases, embeddings."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from filing_alpha.documents import Document, FilingType
from filing_alpha.errors import ProviderError
from filing_alpha.nlp.embedding import HashingEmbeddingProvider
from filing_alpha.nlp.entities import extract_entities
from filing_alpha.nlp.features import (
    FeatureExtractor,
    extract_features,
    extract_key_phrases,
    tokenize,
)
from filing_alpha.nlp.lexicon import SentimentScores
from filing_alpha.nlp.registry import build_embedding


def _doc(text: str, doc_id: str = "d1") -> Document:
    return Document(
        id=doc_id,
        ticker="ACME",
        filing_type=FilingType.FORM_10K,
        filing_date=pd.Timestamp("2024-02-15"),
        raw_text=text,
    )


SAMPLE = (
    "Revenue growth was strong in Q3 2024. Revenue growth reached $12.5 million, "
    "up 15% year over year. The CEO expects continued growth; the CFO noted risk "
    "from litigation filed on 03/14/2024."
)


# ── tokenisation ─────────────────────────────────────────────────────────

def test_tokenize_lowercases_and_drops_short_tokens():
    assert tokenize("The CEO, an Officer; of ACME.") == ["the", "ceo", "officer", "acme"]


def test_tokenize_replaces_punctuation_with_space():
    assert tokenize("year-over-year") == ["year", "over", "year"]


def test_tokenize_empty():
    assert tokenize("") == []


# ── key phrases ──────────────────────────────────────────────────────────

def test_key_phrases_keep_repeated_long_bigrams():
    tokens = tokenize(SAMPLE)
    phrases = extract_key_phrases(tokens)
    assert phrases[0] == "revenue growth"
    assert all(len(p) >= 7 for p in phrases)


def test_key_phrases_ties_keep_first_seen_order():
    tokens = ["alpha", "beta", "gamma", "delta", "alpha", "beta", "gamma", "delta"]
    # "delta alpha" appears once; the other three bigrams twice each.
    assert extract_key_phrases(tokens) == ["alpha beta", "beta gamma", "gamma delta"]


def test_key_phrases_limit():
    tokens = [f"word{i:02d}" for i in range(12)] * 2
    assert len(extract_key_phrases(tokens)) == 8


def test_key_phrases_drop_single_occurrences():
    assert extract_key_phrases(["revenue", "growth", "margin"]) == []


# ── entities ─────────────────────────────────────────────────────────────

def test_entities_types_and_counts():
    entities = {e.name: e for e in extract_entities(SAMPLE)}

    assert entities["$12.5 million"].type == "MONEY"
    assert entities["Q3 2024"].type == "FISCAL_PERIOD"
    assert entities["15%"].type == "PERCENTAGE"
    assert entities["03/14/2024"].type == "DATE"
    assert entities["CEO"].type == "ROLE"
    assert entities["CFO"].count == 1


def test_entities_sorted_by_count_then_position():
    text = "CFO said CEO. CEO again. 10% then 10% and 10%."
    names = [e.name for e in extract_entities(text)]
    assert names == ["10%", "CEO", "CFO"]


def test_entities_limit():
    text = " ".join(f"${i},000" for i in range(1, 20))
    assert len(extract_entities(text)) == 10


def test_role_requires_word_boundary():
    assert extract_entities("Directory listings and presidential notes") == []


# ── embeddings ───────────────────────────────────────────────────────────

def test_hashing_embedding_is_normalised_and_deterministic():
    provider = HashingEmbeddingProvider(64)
    v1 = provider.embed(["revenue", "growth", "risk"])
    v2 = provider.embed(["revenue", "growth", "risk"])

    assert v1.shape == (64,)
    np.testing.assert_array_equal(v1, v2)
    assert np.linalg.norm(v1) == pytest.approx(1.0)


def test_hashing_embedding_empty_is_zero():
    vec = HashingEmbeddingProvider(16).embed([])
    assert not vec.any()


def test_build_embedding_registry():
    provider = build_embedding({"type": "hashing", "dimension": 32})
    assert provider.dimension == 32
    assert build_embedding(None).dimension == 128


# ── extractor ────────────────────────────────────────────────────────────

def test_extract_full_record():
    record = extract_features(_doc(SAMPLE))

    assert record.document_id == "d1"
    assert record.n_tokens == len(tokenize(SAMPLE))
    assert len(record.embedding) == 128
    assert "revenue growth" in record.key_phrases
    assert 0 <= record.confidence <= 100
    assert record.sentiment.positive > 0


def test_extract_is_deterministic():
    extractor = FeatureExtractor()
    assert extractor.extract(_doc(SAMPLE)) == extractor.extract(_doc(SAMPLE))


def test_extract_empty_text_never_raises():
    record = extract_features(_doc(""))

    assert record.sentiment == SentimentScores(neutral=100.0, confidence=100)
    assert record.confidence == 100
    assert record.entities == ()
    assert record.key_phrases == ()
    assert record.n_tokens == 0


def test_extract_many_preserves_order():
    docs = [_doc(f"growth {i} " + SAMPLE, doc_id=f"d{i}") for i in range(6)]
    records = FeatureExtractor().extract_many(docs, max_workers=3)
    assert [r.document_id for r in records] == [d.id for d in docs]


def test_record_to_dict_is_plain():
    payload = extract_features(_doc(SAMPLE)).to_dict()
    assert set(payload) == {
        "document_id", "sentiment", "confidence", "embedding",
        "entities", "key_phrases", "n_tokens",
    }
    assert isinstance(payload["embedding"], list)


# ── provider failures ────────────────────────────────────────────────────

class _FailingEmbedder:
    dimension = 8

    def embed(self, tokens):
        raise ConnectionError("model server down")


class _WrongShapeEmbedder:
    dimension = 8

    def embed(self, tokens):
        return np.ones(4)


class _NanEmbedder:
    dimension = 2

    def embed(self, tokens):
        return np.array([np.nan, 1.0])


def test_embedding_failure_is_provider_error():
    extractor = FeatureExtractor(embedder=_FailingEmbedder())
    with pytest.raises(ProviderError, match="model server down") as exc_info:
        extractor.extract(_doc(SAMPLE))
    assert exc_info.value.provider == "embedding"


def test_embedding_wrong_shape_is_provider_error():
    with pytest.raises(ProviderError, match="expected vector of length 8"):
        FeatureExtractor(embedder=_WrongShapeEmbedder()).extract(_doc(SAMPLE))


def test_embedding_nan_is_provider_error():
    with pytest.raises(ProviderError, match="NaN"):
        FeatureExtractor(embedder=_NanEmbedder()).extract(_doc(SAMPLE))
