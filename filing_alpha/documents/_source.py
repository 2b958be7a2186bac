"""Local-archive document source — one JSON file per filing."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterator
from urllib.parse import urlparse

from ._models import Document

log = logging.getLogger(__name__)


class DirectoryDocumentSource:
    """Serves :class:`Document` objects from a directory of JSON files.

    ``fetch`` accepts an absolute path, a ``file://`` URL, a path relative
    to *root*, or a bare document id (``<root>/<id>.json``).
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)
        if not self._root.is_dir():
            raise FileNotFoundError(f"Document directory not found: {self._root}")

    # -- public API --------------------------------------------------------

    def fetch(self, url: str) -> Document:
        path = self._resolve(url)
        payload = json.loads(path.read_text(encoding="utf-8"))
        return Document.from_dict(payload)

    def __iter__(self) -> Iterator[Document]:
        for path in sorted(self._root.glob("*.json")):
            yield self.fetch(str(path))

    def load_all(self) -> list[Document]:
        documents = list(self)
        log.info("Loaded %d documents from %s", len(documents), self._root)
        return documents

    # -- helpers -----------------------------------------------------------

    def _resolve(self, url: str) -> Path:
        parsed = urlparse(url)
        if parsed.scheme == "file":
            return Path(parsed.path)

        candidate = Path(url)
        if candidate.is_absolute():
            return candidate
        if (self._root / candidate).exists():
            return self._root / candidate
        return self._root / f"{url}.json"
