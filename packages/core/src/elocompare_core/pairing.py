"""Next-pair selection, biased toward items that have been compared least."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from elocompare_core.items import Item


def _min_games_indices(items: Sequence[Item]) -> list[int]:
    if not items:
        return []
    minimum = min(item.games for item in items)
    return [i for i, item in enumerate(items) if item.games == minimum]


def pick_pair(items: Sequence[Item], rng=None) -> tuple[int, int]:
    """Return two distinct indices into items, or (0, 0) if fewer than two exist.

    The first pick is drawn uniformly from the items with the fewest games.
    The second is drawn from the lower half (by games played) of the rest, so
    under-compared items keep meeting each other without the pairing becoming
    a fixed cycle. This is a greedy per-pick preference, not a guarantee that
    every item ends up with the same number of games.

    ``rng`` defaults to the ``random`` module; tests pass a seeded
    ``random.Random``.
    """
    rng = rng or random
    if len(items) < 2:
        return 0, 0

    candidates = _min_games_indices(items)
    if not candidates:
        a = rng.randrange(len(items))
        b = rng.randrange(len(items) - 1)
        return a, b if b < a else b + 1

    first = rng.choice(candidates)

    others = sorted((i for i in range(len(items)) if i != first), key=lambda i: items[i].games)
    half = -(-len(others) // 2)  # ceiling division
    second = rng.choice(others[:half])

    return first, second
