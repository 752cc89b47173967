"""Comparable items and where they come from.

The session never touches the filesystem directly; it asks an item source
for the current candidates. VaultItemSource is the Markdown-folder source
used by the CLI. Tests and other hosts can supply their own BaseItemSource.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

import frontmatter

from elocompare_core.constants import DEFAULT_RATING

logger = logging.getLogger(__name__)


@dataclass
class Item:
    """One comparable note with its live rating state."""

    id: str  # vault-relative POSIX path; stable across sessions
    name: str
    rating: float = DEFAULT_RATING
    games: int = 0
    pool: str = "default"
    last: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class BaseItemSource(ABC):
    @abstractmethod
    def list_items(self) -> list[Item]:
        """Return the current comparable items. May raise; the session reports the error."""


def is_in_folder(item_id: str, folder: str, include_subfolders: bool) -> bool:
    """Return True if a vault-relative path falls inside the configured folder.

    An empty folder means no restriction. Without ``include_subfolders`` only
    files directly inside the folder match.
    """
    folder = folder.strip("/")
    if not folder:
        return True
    prefix = folder + "/"
    if not item_id.startswith(prefix):
        return False
    if include_subfolders:
        return True
    return "/" not in item_id[len(prefix) :]


def _has_rating_source(metadata: dict[str, Any], prop: str) -> bool:
    value = metadata.get(prop)
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


class VaultItemSource(BaseItemSource):
    """Lists Markdown notes in a vault folder that carry the rating-source property.

    Notes whose frontmatter lacks the property (or has it empty) are not
    comparable and are left out. Notes that cannot be read or parsed are
    logged and left out too — one broken file never blocks a session.
    """

    def __init__(
        self,
        vault_dir: str | Path,
        folder: str = "",
        frontmatter_property: str = "rating",
        include_subfolders: bool = False,
        pool: str = "default",
    ):
        self.vault_dir = Path(vault_dir)
        self.folder = folder
        self.frontmatter_property = frontmatter_property
        self.include_subfolders = include_subfolders
        self.pool = pool

    def _candidate_paths(self) -> list[Path]:
        paths = []
        for path in sorted(self.vault_dir.rglob("*.md")):
            rel = path.relative_to(self.vault_dir).as_posix()
            # Skip dot-directories such as .elocompare/ or .obsidian/.
            if any(part.startswith(".") for part in rel.split("/")[:-1]):
                continue
            if is_in_folder(rel, self.folder, self.include_subfolders):
                paths.append(path)
        return paths

    def list_items(self) -> list[Item]:
        if not self.vault_dir.is_dir():
            raise FileNotFoundError(f"Vault directory not found: {self.vault_dir}")

        items = []
        for path in self._candidate_paths():
            rel = path.relative_to(self.vault_dir).as_posix()
            try:
                post = frontmatter.load(path)
            except Exception as e:
                logger.warning("Skipping %s: could not parse frontmatter (%s: %s)", rel, type(e).__name__, e)
                continue

            metadata = dict(post.metadata) if isinstance(post.metadata, dict) else {}
            if not _has_rating_source(metadata, self.frontmatter_property):
                logger.debug("Skipping %s: no '%s' property", rel, self.frontmatter_property)
                continue

            items.append(Item(id=rel, name=path.stem, pool=self.pool, metadata=metadata))

        logger.debug("Loaded %d item(s) from %s", len(items), self.vault_dir)
        return items


def write_rating_snapshot(vault_dir: str | Path, item: Item) -> None:
    """Write the item's rating state into its note as an ``elo`` frontmatter mapping.

    Other frontmatter keys and the note body are preserved. Raises on I/O or
    parse failure; callers decide whether to continue with other notes.
    """
    path = Path(vault_dir) / item.id
    post = frontmatter.load(path)
    post["elo"] = {
        "pool": item.pool,
        "rating": item.rating,
        "games": item.games,
        "last": item.last or date.today().isoformat(),
    }
    path.write_text(frontmatter.dumps(post, sort_keys=False) + "\n", encoding="utf-8")
