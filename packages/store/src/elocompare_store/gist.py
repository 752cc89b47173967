"""GistDocumentStore — share ratings between machines via a GitHub Gist.

Why a Gist:
- Zero infra: no server or bucket, just a private Gist owned by the user.
- Versioned for free: every write is a Gist revision, so a bad session can
  be rolled back from the GitHub UI.
- Works anywhere a token is available (env var or `gh auth login`).

Gists are flat, so document paths are flattened into file names:
`history/events-books.json` is stored as `history__events-books.json`.
Directories do not exist on the Gist side; mkdir() is a no-op.
"""

from __future__ import annotations

import logging

from elocompare_store.base import BaseDocumentStore

logger = logging.getLogger(__name__)

_SEPARATOR = "__"


def gist_filename(path: str) -> str:
    """Map a document path to the Gist file name that holds it."""
    return path.strip("/").replace("/", _SEPARATOR)


class GistDocumentStore(BaseDocumentStore):
    """Stores each document as one file of a GitHub Gist.

    The Gist ID is stored in .elocompare.yml under `gist_id`. Running
    `elocompare init` creates the Gist and writes the ID automatically.
    Every call fetches the Gist fresh so two machines never act on a stale
    file listing.
    """

    def __init__(self, gist_id: str, token: str):
        try:
            from github import Github
        except ImportError:
            raise ImportError("PyGithub is required for GistDocumentStore. Install elocompare with its defaults.")
        self._gist_id = gist_id
        self._gh = Github(token)

    def _get_gist(self):
        return self._gh.get_gist(self._gist_id)

    def exists(self, path: str) -> bool:
        return gist_filename(path) in self._get_gist().files

    def read(self, path: str) -> str:
        name = gist_filename(path)
        file_obj = self._get_gist().files.get(name)
        if file_obj is None:
            raise FileNotFoundError(f"{name} not found in gist {self._gist_id}")
        return file_obj.content or ""

    def write(self, path: str, content: str) -> None:
        from github import InputFileContent

        name = gist_filename(path)
        self._get_gist().edit(files={name: InputFileContent(content)})
        logger.debug("Updated gist %s file %s", self._gist_id, name)

    def remove(self, path: str) -> None:
        name = gist_filename(path)
        gist = self._get_gist()
        if name not in gist.files:
            raise FileNotFoundError(f"{name} not found in gist {self._gist_id}")
        # A None entry deletes the file from the Gist.
        gist.edit(files={name: None})

    def mkdir(self, path: str) -> None:
        pass  # Gists have no directories
