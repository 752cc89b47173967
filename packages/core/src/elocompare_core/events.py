"""Event log operations and the per-comparison rating bookkeeping."""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Sequence

from elocompare_core.constants import K_FACTOR, MAX_AGE_MS, MAX_EVENTS
from elocompare_core.elo import elo_update
from elocompare_core.history import HistoryEntry
from elocompare_store.models import DRAW, WIN, ComparisonEvent, RatingRecord, Store

if TYPE_CHECKING:
    from elocompare_core.items import Item


def now_ms() -> int:
    return int(time.time() * 1000)


def today_iso() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def create_event(item_a: Item, item_b: Item, score_a: float, timestamp: int | None = None) -> ComparisonEvent:
    return ComparisonEvent(
        timestamp=now_ms() if timestamp is None else timestamp,
        item_a=item_a.id,
        item_b=item_b.id,
        outcome=score_a,
    )


def filter_recent_events(events: Sequence[ComparisonEvent], now: int | None = None) -> list[ComparisonEvent]:
    """Apply the retention policy: drop events older than MAX_AGE_MS, then keep the last MAX_EVENTS.

    History past either bound is gone for good; the ratings table still
    carries its cumulative effect.
    """
    now = now_ms() if now is None else now
    recent = [e for e in events if now - e.timestamp < MAX_AGE_MS]
    return recent[-MAX_EVENTS:]


def append_event(store: Store, event: ComparisonEvent, now: int | None = None) -> Store:
    """Return a new Store with event appended and the log trimmed. Ratings are carried over."""
    return Store(
        events=filter_recent_events([*store.events, event], now),
        ratings=dict(store.ratings),
        version=store.version,
    )


@dataclass
class ComparisonResult:
    items: list[Item]
    new_rating_a: int
    new_rating_b: int
    history_entry: HistoryEntry | None  # None for draws


def apply_comparison(
    items: Sequence[Item],
    a_index: int,
    b_index: int,
    score_a: float,
    k_factor: float = K_FACTOR,
    today: str | None = None,
) -> ComparisonResult:
    """Compute new ratings for items[a_index] vs items[b_index] and return updated copies.

    The input list and its items are left untouched.
    """
    item_a = items[a_index]
    item_b = items[b_index]
    new_a, new_b = elo_update(item_a.rating, item_b.rating, score_a, k_factor)
    today = today or today_iso()

    updated = list(items)
    updated[a_index] = replace(item_a, rating=new_a, games=item_a.games + 1, last=today)
    updated[b_index] = replace(item_b, rating=new_b, games=item_b.games + 1, last=today)

    entry = None
    if score_a != DRAW:
        a_won = score_a == WIN
        entry = HistoryEntry(
            winner=updated[a_index] if a_won else updated[b_index],
            loser=updated[b_index] if a_won else updated[a_index],
            winner_old_rating=item_a.rating if a_won else item_b.rating,
            winner_new_rating=new_a if a_won else new_b,
            loser_old_rating=item_b.rating if a_won else item_a.rating,
            loser_new_rating=new_b if a_won else new_a,
        )

    return ComparisonResult(items=updated, new_rating_a=new_a, new_rating_b=new_b, history_entry=entry)


def update_store_ratings(
    store: Store,
    item_a: Item,
    item_b: Item,
    new_rating_a: float,
    new_rating_b: float,
    today: str | None = None,
) -> dict[str, RatingRecord]:
    """Return a copy of store.ratings with exactly the two compared items updated.

    ``item_a`` and ``item_b`` are the items as they were before the comparison.
    """
    today = today or today_iso()
    ratings = dict(store.ratings)
    ratings[item_a.id] = RatingRecord(rating=new_rating_a, games=item_a.games + 1, pool=item_a.pool, last=today)
    ratings[item_b.id] = RatingRecord(rating=new_rating_b, games=item_b.games + 1, pool=item_b.pool, last=today)
    return ratings
