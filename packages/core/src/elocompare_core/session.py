"""Comparison session orchestration.

A session owns the live state of one comparison type: the loaded items with
their merged ratings, the current pair, the display history and the store.
Lifecycle:

    UNINITIALIZED → LOADING → READY ⇄ COMPARING
                                   ↘ CLOSED (from any state)

load() fetches the store and the items concurrently and merges stored
ratings into the items exactly once per load. Decisions recorded afterwards
mutate the store and items directly; they never re-run the merge, so an
in-progress session is not overwritten by its own writes.

Persistence failures never interrupt a session. A failed read starts from an
empty store; a failed write is logged and the in-memory state carries on,
which means the decision is lost for the next session.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from enum import Enum
from typing import TYPE_CHECKING, Callable

from elocompare_core.constants import DEFAULT_RATING, K_FACTOR
from elocompare_core.events import (
    append_event,
    apply_comparison,
    create_event,
    now_ms,
    today_iso,
    update_store_ratings,
)
from elocompare_core.history import reconstruct_history
from elocompare_core.pairing import pick_pair
from elocompare_store.models import DRAW, LOSS, WIN, Store
from elocompare_store.rating_store import DEFAULT_TYPE

if TYPE_CHECKING:
    from elocompare_core.history import HistoryEntry
    from elocompare_core.items import BaseItemSource, Item
    from elocompare_store.rating_store import RatingStore

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    COMPARING = "comparing"
    CLOSED = "closed"


class ComparisonSession:
    """Stateful controller behind the compare/history/reset commands.

    ``rng``, ``clock`` (milliseconds since epoch) and ``today`` (ISO date)
    are injectable so tests can pin pair selection and timestamps.
    """

    def __init__(
        self,
        item_source: BaseItemSource,
        rating_store: RatingStore,
        comparison_type: str = DEFAULT_TYPE,
        k_factor: float = K_FACTOR,
        rng=None,
        clock: Callable[[], int] | None = None,
        today: Callable[[], str] | None = None,
    ):
        self.item_source = item_source
        self.rating_store = rating_store
        self.comparison_type = comparison_type
        self.k_factor = k_factor
        self._rng = rng
        self._clock = clock or now_ms
        self._today = today or today_iso
        self._cancelled = threading.Event()

        self.state = SessionState.UNINITIALIZED
        self.items: list[Item] = []
        self.pair: tuple[int, int] = (0, 0)
        self.history: list[HistoryEntry] = []  # most recent first
        self.store: Store | None = None
        self.error: str | None = None

    # ------------------------------------------------------------------ #
    # Loading                                                              #
    # ------------------------------------------------------------------ #

    @property
    def loading(self) -> bool:
        return self.state == SessionState.LOADING

    def load(self) -> None:
        """Load store and items in parallel, then merge stored ratings into the items."""
        if self.state == SessionState.CLOSED:
            return

        self.state = SessionState.LOADING
        self.error = None
        logger.debug("Loading comparison type %s", self.comparison_type)

        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="elocompare-load") as executor:
            store_future = executor.submit(self._read_store)
            items_future = executor.submit(self.item_source.list_items)
            store = store_future.result()
            error = None
            try:
                items = items_future.result()
            except Exception as e:
                logger.warning("Failed to load items (%s): %s", type(e).__name__, e)
                error = f"Error: {e}"
                items = []

        if self._cancelled.is_set():
            logger.debug("Session closed while loading; discarding results")
            return

        self.store = store
        self.error = error
        self._initialize(items)

    def _read_store(self) -> Store:
        try:
            return self.rating_store.read_store(self.comparison_type)
        except Exception as e:
            logger.warning("Failed to load store for %s (%s): %s", self.comparison_type, type(e).__name__, e)
            return Store.empty()

    def _initialize(self, items: list[Item]) -> None:
        self.items = [self._merge_stored_rating(item) for item in items]
        self.reconstruct_history()
        self.pair = pick_pair(self.items, self._rng)
        self.state = SessionState.READY
        logger.debug(
            "Session ready: %d item(s), %d event(s), %d history entr%s",
            len(self.items),
            len(self.store.events),
            len(self.history),
            "y" if len(self.history) == 1 else "ies",
        )

    def _merge_stored_rating(self, item: Item) -> Item:
        stored = self.store.ratings.get(item.id)
        if stored is None:
            return replace(item, rating=DEFAULT_RATING, games=0, last=None)
        return replace(item, rating=stored.rating, games=stored.games, pool=stored.pool, last=stored.last)

    # ------------------------------------------------------------------ #
    # Decisions                                                            #
    # ------------------------------------------------------------------ #

    def current_pair(self) -> tuple[Item, Item] | None:
        a, b = self.pair
        if len(self.items) < 2 or a == b:
            return None
        return self.items[a], self.items[b]

    def _can_decide(self) -> bool:
        if self.state != SessionState.READY or self.store is None:
            logger.debug("Ignoring decision: session is %s", self.state.value)
            return False
        return self.current_pair() is not None

    def record_outcome(self, winner_index: int) -> HistoryEntry | None:
        """Record that items[winner_index] beat the other item of the current pair.

        Does nothing (returns None) until the store has loaded, so a decision
        can never be applied to a store that is about to be replaced.
        """
        if not self._can_decide():
            return None
        a, b = self.pair
        if winner_index not in (a, b):
            raise ValueError(f"Winner index {winner_index} is not part of the current pair {self.pair}")
        return self._apply(WIN if winner_index == a else LOSS)

    def record_draw(self) -> bool:
        """Record a draw for the current pair. Draws are not shown in history.

        Returns False if the session was not ready to take a decision.
        """
        if not self._can_decide():
            return False
        self._apply(DRAW)
        return True

    def _apply(self, score_a: float) -> HistoryEntry | None:
        self.state = SessionState.COMPARING
        try:
            a, b = self.pair
            item_a, item_b = self.items[a], self.items[b]
            today = self._today()

            result = apply_comparison(self.items, a, b, score_a, self.k_factor, today)
            event = create_event(item_a, item_b, score_a, timestamp=self._clock())

            self.items = result.items
            entry = result.history_entry
            if entry is not None:
                entry.timestamp = event.timestamp
                self.history.insert(0, entry)

            store = append_event(self.store, event, now=event.timestamp)
            store.ratings = update_store_ratings(
                store, item_a, item_b, result.new_rating_a, result.new_rating_b, today
            )
            self.store = store
            self._persist()

            self.pair = pick_pair(self.items, self._rng)
            return entry
        finally:
            self.state = SessionState.READY

    def _persist(self) -> bool:
        try:
            self.rating_store.write_store(self.store, self.comparison_type)
        except Exception as e:
            # The in-memory session keeps going; only the next session loses this state.
            logger.warning("Failed to persist store for %s (%s): %s", self.comparison_type, type(e).__name__, e)
            return False
        return True

    # ------------------------------------------------------------------ #
    # Pair and item management                                             #
    # ------------------------------------------------------------------ #

    def skip(self) -> None:
        self.pair = pick_pair(self.items, self._rng)

    def swap(self) -> None:
        a, b = self.pair
        self.pair = (b, a)

    def remove_item(self, index: int) -> Item:
        """Drop an item from this session only. The persisted store is untouched."""
        removed = self.items.pop(index)
        self.pair = (0, 1) if len(self.items) >= 2 else (0, 0)
        return removed

    def reset(self, confirm: Callable[[], bool]) -> bool:
        """Wipe all ratings and history for this comparison type after confirmation.

        Returns False (and changes nothing) if confirm() declines.
        """
        if not confirm():
            return False

        self.store = Store.empty()
        self._persist()
        self.items = [replace(item, rating=DEFAULT_RATING, games=0, last=None) for item in self.items]
        self.history = []
        self.pair = pick_pair(self.items, self._rng)
        logger.info("Reset comparison type %s", self.comparison_type)
        return True

    # ------------------------------------------------------------------ #
    # Views                                                                #
    # ------------------------------------------------------------------ #

    def reconstruct_history(self) -> list[HistoryEntry]:
        """Rebuild the display history from the store's event log."""
        if self.store is None:
            self.history = []
        else:
            self.history = list(reversed(reconstruct_history(self.items, self.store, self.k_factor)))
        return self.history

    def rankings(self) -> list[Item]:
        return sorted(self.items, key=lambda item: (-item.rating, item.name))

    def close(self) -> None:
        self._cancelled.set()
        self.state = SessionState.CLOSED
