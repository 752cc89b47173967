"""Rebuild a readable win/loss history by replaying a store's event log."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Sequence

from elocompare_core.constants import DEFAULT_RATING, K_FACTOR
from elocompare_core.elo import elo_update
from elocompare_store.models import DRAW, WIN

if TYPE_CHECKING:
    from elocompare_core.items import Item
    from elocompare_store.models import Store


@dataclass
class HistoryEntry:
    winner: Item
    loser: Item
    winner_old_rating: float
    winner_new_rating: float
    loser_old_rating: float
    loser_new_rating: float
    timestamp: int | None = None

    def describe(self) -> str:
        return (
            f"{self.winner.name} beat {self.loser.name} — "
            f"({self.winner.name}: {self.winner_old_rating} → {self.winner_new_rating}, "
            f"{self.loser.name}: {self.loser_old_rating} → {self.loser_new_rating})"
        )


def replay_events(
    items: Sequence[Item],
    store: Store,
    k_factor: float = K_FACTOR,
) -> tuple[list[HistoryEntry], dict[str, Item]]:
    """Replay store.events against working copies of the items.

    Working copies start from the materialized ratings table (rating and
    games, or the defaults for items it does not know). Events naming an
    item outside ``items`` are skipped entirely, so the result is scoped to
    the current pool. Draws advance the working state but produce no entry.

    Returns the entries in chronological order and the working copies keyed
    by id as they stand after the last event. ``items`` is left untouched.
    """
    by_id = {item.id: item for item in items}
    working: dict[str, Item] = {}
    for item in items:
        stored = store.ratings.get(item.id)
        working[item.id] = replace(
            item,
            rating=stored.rating if stored is not None else DEFAULT_RATING,
            games=stored.games if stored is not None else 0,
        )

    entries = []
    for event in store.events:
        a = working.get(event.item_a)
        b = working.get(event.item_b)
        if a is None or b is None:
            continue

        new_a, new_b = elo_update(a.rating, b.rating, event.outcome, k_factor)

        if event.outcome != DRAW:
            a_won = event.outcome == WIN
            item_a, item_b = by_id[a.id], by_id[b.id]
            entries.append(
                HistoryEntry(
                    winner=item_a if a_won else item_b,
                    loser=item_b if a_won else item_a,
                    winner_old_rating=a.rating if a_won else b.rating,
                    winner_new_rating=new_a if a_won else new_b,
                    loser_old_rating=b.rating if a_won else a.rating,
                    loser_new_rating=new_b if a_won else new_a,
                    timestamp=event.timestamp,
                )
            )

        working[a.id] = replace(a, rating=new_a, games=a.games + 1)
        working[b.id] = replace(b, rating=new_b, games=b.games + 1)

    return entries, working


def reconstruct_history(
    items: Sequence[Item],
    store: Store,
    k_factor: float = K_FACTOR,
) -> list[HistoryEntry]:
    """Display history for ``items``: the entries of replay_events().

    Returns entries in chronological order; callers reverse for display.
    """
    if not items or not store.events:
        return []
    entries, _ = replay_events(items, store, k_factor)
    return entries
