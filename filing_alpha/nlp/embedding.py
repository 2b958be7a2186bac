"""Reference embedding provider.

:class:`HashingEmbeddingProvider` is a deterministic bag-of-words vector
built with signed feature hashing. It satisfies the
:class:`~filing_alpha.documents.EmbeddingProvider` contract so the feature
extractor can run without a model; a transformer-backed provider only has
to expose the same ``dimension`` / ``embed`` pair.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Sequence

import numpy as np


@dataclass(frozen=True)
class HashingEmbeddingProvider:
    n_features: int = 128

    def __post_init__(self) -> None:
        if self.n_features <= 0:
            raise ValueError(f"n_features must be positive, got {self.n_features}")

    @property
    def dimension(self) -> int:
        return self.n_features

    @property
    def name(self) -> str:
        return f"hashing_{self.n_features}"

    def _bucket(self, token: str) -> tuple[int, float]:
        digest = hashlib.blake2b(token.encode("utf-8"), digest_size=8).digest()
        value = int.from_bytes(digest, "big")
        sign = 1.0 if value & 1 else -1.0
        return (value >> 1) % self.n_features, sign

    def embed(self, tokens: Sequence[str]) -> np.ndarray:
        """Return an L2-normalised vector; all zeros for an empty sequence."""
        vec = np.zeros(self.n_features, dtype=np.float64)
        for token in tokens:
            idx, sign = self._bucket(token)
            vec[idx] += sign

        norm = np.linalg.norm(vec)
        if norm > 0:
            vec /= norm
        return vec
