"""LocalDocumentStore — documents as plain files under a data directory.

The default backend. The data directory defaults to `.elocompare` inside the
vault so ratings travel with the notes they describe. Configure via
.elocompare.yml: `data_dir: /path/to/dir`.
"""

from __future__ import annotations

import logging
from pathlib import Path

from elocompare_store.base import BaseDocumentStore

logger = logging.getLogger(__name__)


class LocalDocumentStore(BaseDocumentStore):
    """Reads and writes UTF-8 text files relative to a root directory."""

    def __init__(self, root: str | Path = ".elocompare"):
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, path: str) -> Path:
        return self._root / path

    def exists(self, path: str) -> bool:
        return self._resolve(path).exists()

    def read(self, path: str) -> str:
        return self._resolve(path).read_text(encoding="utf-8")

    def write(self, path: str, content: str) -> None:
        target = self._resolve(path)
        # Parent may be missing when write() is called without a prior mkdir().
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        logger.debug("Wrote %d chars to %s", len(content), target)

    def remove(self, path: str) -> None:
        self._resolve(path).unlink()

    def mkdir(self, path: str) -> None:
        self._resolve(path).mkdir(parents=True, exist_ok=True)
