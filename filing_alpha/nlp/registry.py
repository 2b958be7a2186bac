"""Component registries — map ``type`` strings to builder functions.

Config blocks look like ``{"type": "loughran_mcdonald", "path": "..."}``;
``type`` selects the builder, the remaining keys are its params.
"""

from __future__ import annotations

from typing import Callable

from filing_alpha.documents import EmbeddingProvider
from .embedding import HashingEmbeddingProvider
from .lexicon import DEFAULT_LEXICON, Lexicon

LexiconBuilder = Callable[[dict], Lexicon]
EmbeddingBuilder = Callable[[dict], EmbeddingProvider]

_LEXICONS: dict[str, LexiconBuilder] = {}
_EMBEDDINGS: dict[str, EmbeddingBuilder] = {}


def register_lexicon(name: str, builder: LexiconBuilder) -> None:
    """Register a lexicon builder under the given name."""
    _LEXICONS[name] = builder


def register_embedding(name: str, builder: EmbeddingBuilder) -> None:
    """Register an embedding-provider builder under the given name."""
    _EMBEDDINGS[name] = builder


def _split_type(cfg: dict, kind: str, registry: dict) -> tuple[str, dict]:
    params = dict(cfg)  # shallow copy so we don't mutate caller's dict
    type_name = params.pop("type", None)
    if type_name is None:
        raise ValueError(f"{kind} config must contain a 'type' key")
    if type_name not in registry:
        raise ValueError(
            f"Unknown {kind} type '{type_name}'. "
            f"Registered: {sorted(registry)}"
        )
    return type_name, params


def build_lexicon(lexicon_cfg: dict | None) -> Lexicon:
    """Build a :class:`Lexicon` from a config block; ``None`` means default."""
    if lexicon_cfg is None:
        return DEFAULT_LEXICON
    type_name, params = _split_type(lexicon_cfg, "lexicon", _LEXICONS)
    return _LEXICONS[type_name](params)


def build_embedding(embedding_cfg: dict | None) -> EmbeddingProvider:
    """Build an embedding provider from a config block; ``None`` means hashing-128."""
    if embedding_cfg is None:
        return HashingEmbeddingProvider()
    type_name, params = _split_type(embedding_cfg, "embedding", _EMBEDDINGS)
    return _EMBEDDINGS[type_name](params)


def _build_words(params: dict) -> Lexicon:
    return Lexicon.from_words(
        positive=params.get("positive", ()),
        negative=params.get("negative", ()),
        uncertainty=params.get("uncertainty", ()),
        name=params.get("name", "words"),
    )


register_lexicon("default", lambda params: DEFAULT_LEXICON)
register_lexicon("loughran_mcdonald", lambda params: Lexicon.from_master_dictionary(params["path"]))
register_lexicon("words", _build_words)
register_embedding(
    "hashing", lambda params: HashingEmbeddingProvider(int(params.get("dimension", 128)))
)
