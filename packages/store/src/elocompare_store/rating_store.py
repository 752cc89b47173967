"""RatingStore — the event log and ratings table persisted as JSON documents.

Each comparison type owns two documents inside the `history/` directory of
the configured document store:

  events-<type>.json   — JSON array of {"t", "a", "b", "s"} objects
  ratings-<type>.json  — JSON object mapping item id → {"rating", "games", "pool", "last"?}

The documents are written one after the other. There is no transaction
spanning both: an interrupted write can leave the events newer than the
ratings (or vice versa). The ratings table stays authoritative for live
ratings; the event log is only replayed to display history.

Persisted JSON is untrusted input. Decoding validates shape and fails
closed: a document with the wrong top-level type decodes to the empty
default, and malformed entries inside a well-formed document are dropped.
"""

from __future__ import annotations

import json
import logging
import math
from typing import TYPE_CHECKING, Any

from elocompare_store.models import OUTCOMES, ComparisonEvent, RatingRecord, Store

if TYPE_CHECKING:
    from elocompare_store.base import BaseDocumentStore

logger = logging.getLogger(__name__)

DEFAULT_TYPE = "default"
HISTORY_DIR = "history"

# Single-pool layout written before comparison types existed.
_LEGACY_EVENTS_PATH = f"{HISTORY_DIR}/events.json"
_LEGACY_RATINGS_PATH = f"{HISTORY_DIR}/ratings.json"


def events_path(comparison_type: str = DEFAULT_TYPE) -> str:
    return f"{HISTORY_DIR}/events-{comparison_type}.json"


def ratings_path(comparison_type: str = DEFAULT_TYPE) -> str:
    return f"{HISTORY_DIR}/ratings-{comparison_type}.json"


class RatingStore:
    """Reads and writes per-type Stores through a BaseDocumentStore."""

    def __init__(self, documents: BaseDocumentStore):
        self._documents = documents

    @property
    def documents(self) -> BaseDocumentStore:
        return self._documents

    # ------------------------------------------------------------------ #
    # Whole-store operations                                               #
    # ------------------------------------------------------------------ #

    def read_store(self, comparison_type: str = DEFAULT_TYPE) -> Store:
        """Load the store for a comparison type.

        Returns an empty store if nothing is persisted yet or the documents
        cannot be decoded — never raises. For the default type, data in the
        legacy single-pool layout is migrated on first access.
        """
        events = self.read_events(comparison_type)
        ratings = self.read_ratings(comparison_type)
        if events or ratings:
            return Store(events=events, ratings=ratings)

        if comparison_type == DEFAULT_TYPE:
            migrated = self._migrate_legacy()
            if migrated is not None:
                return migrated

        return Store.empty()

    def write_store(self, store: Store, comparison_type: str = DEFAULT_TYPE) -> None:
        """Persist both documents. Raises on I/O failure."""
        self.write_events(store.events, comparison_type)
        self.write_ratings(store.ratings, comparison_type)

    def delete_type_storage(self, comparison_type: str) -> None:
        """Remove both documents for a comparison type, if present."""
        for path in (events_path(comparison_type), ratings_path(comparison_type)):
            try:
                if self._documents.exists(path):
                    self._documents.remove(path)
            except Exception as e:
                logger.warning("Failed to delete %s (%s): %s", path, type(e).__name__, e)

    # ------------------------------------------------------------------ #
    # Per-document operations                                              #
    # ------------------------------------------------------------------ #

    def read_events(self, comparison_type: str = DEFAULT_TYPE) -> list[ComparisonEvent]:
        data = self._read_json(events_path(comparison_type))
        return decode_events(data) if data is not None else []

    def read_ratings(self, comparison_type: str = DEFAULT_TYPE) -> dict[str, RatingRecord]:
        data = self._read_json(ratings_path(comparison_type))
        return decode_ratings(data) if data is not None else {}

    def write_events(self, events: list[ComparisonEvent], comparison_type: str = DEFAULT_TYPE) -> None:
        self._write_json(events_path(comparison_type), encode_events(events))

    def write_ratings(self, ratings: dict[str, RatingRecord], comparison_type: str = DEFAULT_TYPE) -> None:
        self._write_json(ratings_path(comparison_type), encode_ratings(ratings))

    # ------------------------------------------------------------------ #
    # Internals                                                            #
    # ------------------------------------------------------------------ #

    def _read_json(self, path: str) -> Any:
        """Return parsed JSON for path, or None if absent or unreadable."""
        try:
            if not self._documents.exists(path):
                return None
            return json.loads(self._documents.read(path))
        except Exception as e:
            logger.warning("Failed to read %s (%s): %s", path, type(e).__name__, e)
            return None

    def _write_json(self, path: str, payload: Any) -> None:
        self._documents.mkdir(HISTORY_DIR)
        self._documents.write(path, json.dumps(payload, indent=2))

    def _migrate_legacy(self) -> Store | None:
        """Copy legacy events.json / ratings.json into the default-type documents."""
        try:
            legacy_events = decode_events(self._read_json(_LEGACY_EVENTS_PATH))
            legacy_ratings = decode_ratings(self._read_json(_LEGACY_RATINGS_PATH))
            if legacy_events:
                self.write_events(legacy_events, DEFAULT_TYPE)
            if legacy_ratings:
                self.write_ratings(legacy_ratings, DEFAULT_TYPE)
            if not legacy_events and not legacy_ratings:
                return None
            logger.info(
                "Migrated %d legacy event(s) and %d rating(s) into the default comparison type",
                len(legacy_events),
                len(legacy_ratings),
            )
            # Re-read so the caller sees exactly what was persisted.
            events = self.read_events(DEFAULT_TYPE)
            ratings = self.read_ratings(DEFAULT_TYPE)
        except Exception as e:
            logger.warning("Failed to migrate legacy storage (%s): %s", type(e).__name__, e)
            return None
        if not events and not ratings:
            return None
        return Store(events=events, ratings=ratings)


# ---------------------------------------------------------------------- #
# JSON codec                                                               #
# ---------------------------------------------------------------------- #


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # json.loads accepts NaN and Infinity, and ints too large for a float.
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _decode_event(raw: Any) -> ComparisonEvent | None:
    if not isinstance(raw, dict):
        return None
    t, a, b, s = raw.get("t"), raw.get("a"), raw.get("b"), raw.get("s")
    if not _is_number(t) or not isinstance(a, str) or not isinstance(b, str):
        return None
    if not _is_number(s) or s not in OUTCOMES:
        return None
    return ComparisonEvent(timestamp=int(t), item_a=a, item_b=b, outcome=s)


def decode_events(data: Any) -> list[ComparisonEvent]:
    """Validate and convert a parsed events document. Non-lists decode to []."""
    if not isinstance(data, list):
        if data is not None:
            logger.warning("Events document is not a JSON array (%s); ignoring it", type(data).__name__)
        return []
    events = []
    for raw in data:
        event = _decode_event(raw)
        if event is None:
            logger.warning("Dropping malformed event: %r", raw)
            continue
        events.append(event)
    return events


def _decode_rating(raw: Any) -> RatingRecord | None:
    if not isinstance(raw, dict):
        return None
    rating, games, pool, last = raw.get("rating"), raw.get("games"), raw.get("pool"), raw.get("last")
    if not _is_number(rating):
        return None
    if not isinstance(games, int) or isinstance(games, bool) or games < 0:
        return None
    if not isinstance(pool, str):
        return None
    if last is not None and not isinstance(last, str):
        return None
    return RatingRecord(rating=rating, games=games, pool=pool, last=last)


def decode_ratings(data: Any) -> dict[str, RatingRecord]:
    """Validate and convert a parsed ratings document. Non-objects decode to {}."""
    if not isinstance(data, dict):
        if data is not None:
            logger.warning("Ratings document is not a JSON object (%s); ignoring it", type(data).__name__)
        return {}
    ratings = {}
    for item_id, raw in data.items():
        record = _decode_rating(raw)
        if record is None:
            logger.warning("Dropping malformed rating for %s: %r", item_id, raw)
            continue
        ratings[item_id] = record
    return ratings


def encode_events(events: list[ComparisonEvent]) -> list[dict]:
    return [{"t": e.timestamp, "a": e.item_a, "b": e.item_b, "s": e.outcome} for e in events]


def encode_ratings(ratings: dict[str, RatingRecord]) -> dict[str, dict]:
    encoded = {}
    for item_id, r in ratings.items():
        entry: dict[str, Any] = {"rating": r.rating, "games": r.games, "pool": r.pool}
        if r.last is not None:
            entry["last"] = r.last
        encoded[item_id] = entry
    return encoded
