"""Lexicon scoring — pure category counts over a token sequence.

The three word sets are configuration data. :data:`DEFAULT_LEXICON` is a
small Loughran-McDonald subset; :meth:`Lexicon.from_master_dictionary`
loads the full master-dictionary CSV instead.

Aggregate scores for a sequence of ``N`` tokens (``N`` floored at 1)::

    positive   = 100 * n_pos / N
    negative   = 100 * n_neg / N
    neutral    = 100 - positive - negative      # may go below zero
    confidence = clamp(0, 100, |positive - negative| + 100 - 10 * n_unc)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Sequence

import pandas as pd

# Checked in this order; the first match wins.
SUFFIXES: tuple[str, ...] = ("ing", "ed", "ly", "ness", "ment", "tion", "sion", "ity")
MIN_STEM_LENGTH = 4


def stem(word: str) -> str:
    """Strip at most one suffix, keeping a stem of at least 4 characters."""
    for suffix in SUFFIXES:
        if word.endswith(suffix) and len(word) - len(suffix) >= MIN_STEM_LENGTH:
            return word[: -len(suffix)]
    return word


@dataclass(frozen=True)
class Lexicon:
    """Positive / negative / uncertainty word sets."""

    positive: frozenset[str]
    negative: frozenset[str]
    uncertainty: frozenset[str]
    name: str = "custom"

    @classmethod
    def from_words(
        cls,
        positive: Iterable[str] = (),
        negative: Iterable[str] = (),
        uncertainty: Iterable[str] = (),
        name: str = "custom",
    ) -> Lexicon:
        return cls(
            positive=frozenset(w.lower() for w in positive),
            negative=frozenset(w.lower() for w in negative),
            uncertainty=frozenset(w.lower() for w in uncertainty),
            name=name,
        )

    @classmethod
    def from_master_dictionary(cls, path: str | Path) -> Lexicon:
        """Load the Loughran-McDonald master dictionary CSV.

        A word belongs to a category when that category's column is non-zero
        (the dictionary stores the year the word was added).
        """
        df = pd.read_csv(path)
        missing = {"Word", "Positive", "Negative", "Uncertainty"} - set(df.columns)
        if missing:
            raise ValueError(f"Master dictionary missing columns: {sorted(missing)}")

        words = df["Word"].astype(str).str.lower()

        def _members(col: str) -> frozenset[str]:
            return frozenset(words[df[col].fillna(0) != 0])

        return cls(
            positive=_members("Positive"),
            negative=_members("Negative"),
            uncertainty=_members("Uncertainty"),
            name="loughran_mcdonald",
        )


DEFAULT_LEXICON = Lexicon.from_words(
    positive=[
        "achieve", "accomplishment", "advantage", "benefit", "breakthrough",
        "confident", "deliver", "enhance", "exceed", "excellent", "favorable",
        "gain", "growth", "improve", "innovation", "opportunity", "outperform",
        "positive", "profit", "progress", "recovery", "strength", "success",
        "superior", "upside", "value",
    ],
    negative=[
        "adverse", "challenge", "concern", "decline", "default", "deficit",
        "delay", "deteriorate", "difficult", "disappoint", "downgrade",
        "failure", "impair", "inability", "lawsuit", "liability", "litigation",
        "loss", "negative", "problem", "restructure", "risk", "shortfall",
        "threat", "uncertain", "weak",
    ],
    uncertainty=[
        "anticipate", "approximate", "assume", "believe", "could", "depend",
        "estimate", "expect", "forecast", "hope", "intend", "likely", "may",
        "might", "outlook", "plan", "possible", "potential", "predict",
        "probable", "project", "should",
    ],
    name="default",
)


class NeutralPolicy(str, Enum):
    """How the neutral share is reported when positive + negative > 100."""

    RAW = "raw"
    CLAMP = "clamp"


@dataclass(frozen=True)
class CategoryCounts:
    positive: int = 0
    negative: int = 0
    uncertainty: int = 0
    total: int = 0


@dataclass(frozen=True)
class SentimentScores:
    """Percent scores rounded to 2 dp; confidence is an integer in [0, 100]."""

    positive: float = 0.0
    negative: float = 0.0
    neutral: float = 0.0
    uncertainty: float = 0.0
    confidence: int = 0

    def to_dict(self) -> dict:
        return {
            "positive": self.positive,
            "negative": self.negative,
            "neutral": self.neutral,
            "uncertainty": self.uncertainty,
            "confidence": self.confidence,
        }


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


@dataclass(frozen=True)
class LexiconScorer:
    """Stateless scorer; one instance may be shared across threads."""

    lexicon: Lexicon = DEFAULT_LEXICON
    neutral_policy: NeutralPolicy = NeutralPolicy.RAW

    def categories(self, token: str) -> tuple[bool, bool, bool]:
        """Return (positive, negative, uncertainty) membership for one token."""
        stemmed = stem(token)
        lx = self.lexicon
        return (
            token in lx.positive or stemmed in lx.positive,
            token in lx.negative or stemmed in lx.negative,
            token in lx.uncertainty or stemmed in lx.uncertainty,
        )

    def count(self, tokens: Sequence[str]) -> CategoryCounts:
        pos = neg = unc = 0
        for token in tokens:
            is_pos, is_neg, is_unc = self.categories(token)
            pos += is_pos
            neg += is_neg
            unc += is_unc
        return CategoryCounts(positive=pos, negative=neg, uncertainty=unc, total=len(tokens))

    def score(self, tokens: Sequence[str]) -> SentimentScores:
        """Aggregate category counts into percentage scores."""
        counts = self.count(tokens)
        total = max(counts.total, 1)

        positive = 100.0 * counts.positive / total
        negative = 100.0 * counts.negative / total
        uncertainty = 100.0 * counts.uncertainty / total
        neutral = 100.0 - positive - negative
        if self.neutral_policy is NeutralPolicy.CLAMP:
            neutral = _clamp(neutral, 0.0, 100.0)

        confidence = abs(positive - negative) + (100 - 10 * counts.uncertainty)

        return SentimentScores(
            positive=round(positive, 2),
            negative=round(negative, 2),
            neutral=round(neutral, 2),
            uncertainty=round(uncertainty, 2),
            confidence=int(round(_clamp(confidence, 0.0, 100.0))),
        )
