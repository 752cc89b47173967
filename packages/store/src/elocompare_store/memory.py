"""In-memory document store — the backend when persistence is switched off.

Selected with `store: memory` in .elocompare.yml. A session still records
events and ratings, but nothing outlives the process. Using a real store
object rather than None lets the session always call write_store() without
conditional checks.
"""

from __future__ import annotations

from elocompare_store.base import BaseDocumentStore


class MemoryDocumentStore(BaseDocumentStore):
    """Keeps documents in a dict keyed by path."""

    def __init__(self, documents: dict[str, str] | None = None):
        self.documents: dict[str, str] = dict(documents or {})
        self.directories: set[str] = set()

    def exists(self, path: str) -> bool:
        return path in self.documents

    def read(self, path: str) -> str:
        try:
            return self.documents[path]
        except KeyError:
            raise FileNotFoundError(path) from None

    def write(self, path: str, content: str) -> None:
        self.documents[path] = content

    def remove(self, path: str) -> None:
        try:
            del self.documents[path]
        except KeyError:
            raise FileNotFoundError(path) from None

    def mkdir(self, path: str) -> None:
        self.directories.add(path)
