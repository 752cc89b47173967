"""Abstract document store interface.

The rating store persists JSON documents by path. Any backend (local
filesystem, in-memory, GitHub Gist) implements this interface; the core
depends on BaseDocumentStore — not on a concrete backend — so backends are
swappable without touching session or CLI code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseDocumentStore(ABC):
    """Path-keyed text document persistence.

    Paths are POSIX-style strings relative to the backend's root, e.g.
    ``history/events-books.json``. Implementations raise on I/O failure;
    callers decide whether a failure is fatal.
    """

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Return True if a document exists at path."""

    @abstractmethod
    def read(self, path: str) -> str:
        """Return the document's text content. Raises if it does not exist."""

    @abstractmethod
    def write(self, path: str, content: str) -> None:
        """Create or replace the document at path."""

    @abstractmethod
    def remove(self, path: str) -> None:
        """Delete the document at path."""

    @abstractmethod
    def mkdir(self, path: str) -> None:
        """Ensure a directory exists. Must succeed if it already exists."""

    def close(self) -> None:
        """Release any resources held by the store (connections, file handles).

        Optional — subclasses that need cleanup should override this.
        Default is a no-op so callers can always call close() safely.
        """
