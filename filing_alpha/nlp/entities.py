"""Pattern-based entity extraction over the original filing text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence

MAX_ENTITIES = 10


@dataclass(frozen=True)
class EntityPattern:
    type: str
    regex: re.Pattern


@dataclass(frozen=True)
class Entity:
    name: str
    type: str
    count: int

    def to_dict(self) -> dict:
        return {"name": self.name, "type": self.type, "count": self.count}


# Order matters: a substring first matched by an earlier pattern keeps that type.
DEFAULT_PATTERNS: tuple[EntityPattern, ...] = (
    EntityPattern(
        "MONEY",
        re.compile(r"\$[\d,]+(?:\.\d+)?(?:\s*(?:million|billion|M|B)\b)?", re.IGNORECASE),
    ),
    EntityPattern("FISCAL_PERIOD", re.compile(r"(?:Q[1-4]|FY)\s*\d{4}", re.IGNORECASE)),
    EntityPattern("DATE", re.compile(r"\d{1,2}[/-]\d{1,2}[/-]\d{2,4}")),
    EntityPattern("PERCENTAGE", re.compile(r"\d+(?:\.\d+)?\s*%")),
    EntityPattern(
        "ROLE",
        re.compile(r"\b(?:CEO|CFO|CTO|COO|President|Chairman|Director)\b", re.IGNORECASE),
    ),
)


def extract_entities(
    text: str,
    patterns: Sequence[EntityPattern] = DEFAULT_PATTERNS,
    limit: int = MAX_ENTITIES,
) -> list[Entity]:
    """Count distinct matched substrings and return the most frequent.

    Matches are deduplicated by their trimmed text. Ties on count keep the
    order in which the substring first appears in *text*.
    """
    if not text:
        return []

    # name -> [type, count, first offset]
    found: dict[str, list] = {}
    for pattern in patterns:
        for match in pattern.regex.finditer(text):
            name = match.group(0).strip()
            if not name:
                continue
            entry = found.get(name)
            if entry is None:
                found[name] = [pattern.type, 1, match.start()]
            else:
                entry[1] += 1
                entry[2] = min(entry[2], match.start())

    ranked = sorted(found.items(), key=lambda kv: (-kv[1][1], kv[1][2]))
    return [Entity(name=name, type=t, count=c) for name, (t, c, _) in ranked[:limit]]
