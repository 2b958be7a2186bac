"""Immutable filing document."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import pandas as pd


class FilingType(str, Enum):
    FORM_10K = "10-K"
    FORM_10Q = "10-Q"
    FORM_8K = "8-K"


@dataclass(frozen=True)
class Document:
    """One regulatory filing as ingested; never mutated after creation."""

    id: str
    ticker: str
    filing_type: FilingType
    filing_date: pd.Timestamp
    raw_text: str = ""

    @classmethod
    def from_dict(cls, payload: dict) -> Document:
        """Build a Document from a JSON-style mapping.

        ``text`` and ``raw_text`` are both accepted for the body; a missing
        body yields an empty document rather than an error.
        """
        text = payload.get("raw_text", payload.get("text")) or ""
        return cls(
            id=str(payload["id"]),
            ticker=str(payload["ticker"]).upper(),
            filing_type=FilingType(payload["filing_type"]),
            filing_date=pd.Timestamp(payload["filing_date"]).normalize(),
            raw_text=str(text),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ticker": self.ticker,
            "filing_type": self.filing_type.value,
            "filing_date": self.filing_date.date().isoformat(),
            "text": self.raw_text,
        }
