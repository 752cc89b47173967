"""Build a loaded ComparisonSession from the click context."""

from __future__ import annotations

import click

from elocompare_core.config import get_type_config
from elocompare_core.items import VaultItemSource
from elocompare_core.session import ComparisonSession


def resolve_type(obj: dict, comparison_type: str | None) -> tuple[str, dict]:
    """Return (type_id, type_config), raising a UsageError for unknown types."""
    config = obj["config"]
    type_id = comparison_type or config.get("default_type") or "default"
    try:
        return type_id, get_type_config(config, type_id)
    except KeyError:
        known = ", ".join(config.get("types") or {}) or "default"
        raise click.UsageError(f"Unknown comparison type {type_id!r}. Known types: {known}.")


def open_session(obj: dict, comparison_type: str | None) -> ComparisonSession:
    type_id, type_config = resolve_type(obj, comparison_type)
    source = VaultItemSource(
        obj["config"].get("vault") or ".",
        folder=type_config["folder"] or "",
        frontmatter_property=type_config["property"],
        include_subfolders=bool(type_config["include_subfolders"]),
        pool=type_id,
    )
    session = ComparisonSession(source, obj["rating_store"], comparison_type=type_id)
    session.load()
    return session
