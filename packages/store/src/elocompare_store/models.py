"""Comparison store data models.

Decoupled from elocompare_core so the store layer can be used on its own
(e.g. to inspect or migrate persisted history) without pulling in the
rating engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# Outcome values are the score for the first item of an event.
WIN = 1
LOSS = 0
DRAW = 0.5

OUTCOMES = (WIN, LOSS, DRAW)

STORE_VERSION = 1


@dataclass(frozen=True)
class ComparisonEvent:
    """A single recorded comparison. Immutable once created."""

    timestamp: int  # milliseconds since epoch
    item_a: str
    item_b: str
    outcome: float  # score for item_a: 1 win, 0 loss, 0.5 draw


@dataclass
class RatingRecord:
    """Materialized rating state for one item, keyed by item id in Store.ratings."""

    rating: float
    games: int
    pool: str
    last: str | None = None  # YYYY-MM-DD of the most recent comparison


@dataclass
class Store:
    """Event log plus materialized ratings for one comparison type."""

    events: list[ComparisonEvent] = field(default_factory=list)
    ratings: dict[str, RatingRecord] = field(default_factory=dict)
    version: int = STORE_VERSION

    @classmethod
    def empty(cls) -> Store:
        return cls()

    def is_empty(self) -> bool:
        return not self.events and not self.ratings
