"""Comparison type management.

A comparison type is a named pool ("books", "movies") with its own folder
and rating-source settings and its own persisted store. Types live in the
`types:` mapping of .elocompare.yml; these helpers mutate a loaded config
dict in place and leave saving to the caller.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from elocompare_core.config import DEFAULT_TYPE_CONFIG

if TYPE_CHECKING:
    from elocompare_store.rating_store import RatingStore

logger = logging.getLogger(__name__)

_INVALID_CHARS_RE = re.compile(r"[^a-z0-9\-_]")


def sanitize_type_name(name: str) -> str:
    """Turn user input into a type id: lowercase, anything outside [a-z0-9-_] becomes '-'."""
    return _INVALID_CHARS_RE.sub("-", name.strip().lower())


def display_name_for(type_id: str) -> str:
    return type_id[:1].upper() + type_id[1:].replace("-", " ")


def list_types(config: dict) -> list[str]:
    types = config.get("types") or {}
    return list(types) if types else ["default"]


def create_type(config: dict, name: str, base_type: str | None = None) -> str:
    """Add a new type copying folder/property settings from base_type, and make it the default.

    Returns the new type id. Raises ValueError if the name sanitizes to
    nothing or the type already exists.
    """
    type_id = sanitize_type_name(name)
    types = config.setdefault("types", {})
    if not type_id or type_id in types:
        raise ValueError(f"Invalid type name or type already exists: {name!r}")

    base_id = base_type or config.get("default_type") or "default"
    base = types.get(base_id) or types.get("default") or DEFAULT_TYPE_CONFIG

    types[type_id] = {
        "display_name": display_name_for(type_id),
        "folder": base.get("folder", DEFAULT_TYPE_CONFIG["folder"]),
        "property": base.get("property", DEFAULT_TYPE_CONFIG["property"]),
        "include_subfolders": base.get("include_subfolders", DEFAULT_TYPE_CONFIG["include_subfolders"]),
    }
    config["default_type"] = type_id
    logger.debug("Created comparison type %s from %s", type_id, base_id)
    return type_id


def delete_type(config: dict, type_id: str, rating_store: RatingStore) -> str:
    """Delete a type's config entry and its persisted store.

    Returns the type that becomes the default. The last remaining type
    cannot be deleted.
    """
    types = config.get("types") or {}
    if type_id not in types:
        raise ValueError(f"Unknown comparison type: {type_id!r}")
    if len(types) <= 1:
        raise ValueError("Cannot delete the last comparison type")

    rating_store.delete_type_storage(type_id)
    del types[type_id]

    new_default = next(iter(types))
    config["default_type"] = new_default
    return new_default
