"""Tests for the comparison session controller."""

import json
import random
from unittest.mock import MagicMock

import pytest

from elocompare_core.items import BaseItemSource, Item
from elocompare_core.session import ComparisonSession, SessionState
from elocompare_store.memory import MemoryDocumentStore
from elocompare_store.models import DRAW, WIN, ComparisonEvent, RatingRecord, Store
from elocompare_store.rating_store import RatingStore, events_path, ratings_path

NOW = 1_790_000_000_000


class StaticItemSource(BaseItemSource):
    def __init__(self, ids, pool="default"):
        self.ids = ids
        self.pool = pool

    def list_items(self):
        return [Item(id=i, name=i.removesuffix(".md"), pool=self.pool) for i in self.ids]


class FailingItemSource(BaseItemSource):
    def list_items(self):
        raise FileNotFoundError("Vault directory not found: /nowhere")


def _session(ids=("a.md", "b.md"), documents=None, comparison_type="default", seed=0):
    documents = documents if documents is not None else MemoryDocumentStore()
    clock = iter(range(NOW, NOW + 10_000))
    return ComparisonSession(
        StaticItemSource(list(ids), pool=comparison_type),
        RatingStore(documents),
        comparison_type=comparison_type,
        rng=random.Random(seed),
        clock=lambda: next(clock),
        today=lambda: "2026-10-16",
    )


def _by_id(session):
    return {item.id: item for item in session.items}


class TestLoad:
    def test_fresh_store(self):
        session = _session()
        assert session.state == SessionState.UNINITIALIZED

        session.load()

        assert session.state == SessionState.READY
        assert not session.loading
        assert session.error is None
        assert session.store.is_empty()
        assert all(item.rating == 1000 and item.games == 0 for item in session.items)
        assert sorted(session.pair) == [0, 1]
        assert session.history == []

    def test_merges_stored_ratings(self):
        rating_store = RatingStore(MemoryDocumentStore())
        rating_store.write_store(
            Store(ratings={"a.md": RatingRecord(rating=1100, games=4, pool="default", last="2026-10-01")})
        )
        session = _session(documents=rating_store.documents)

        session.load()

        items = _by_id(session)
        assert (items["a.md"].rating, items["a.md"].games, items["a.md"].last) == (1100, 4, "2026-10-01")
        assert (items["b.md"].rating, items["b.md"].games, items["b.md"].last) == (1000, 0, None)

    def test_item_source_failure_sets_error(self):
        session = ComparisonSession(FailingItemSource(), RatingStore(MemoryDocumentStore()))

        session.load()

        assert session.state == SessionState.READY
        assert session.items == []
        assert session.error.startswith("Error: ")
        assert "not found" in session.error
        assert session.current_pair() is None

    def test_store_read_failure_starts_empty(self):
        rating_store = MagicMock(spec=RatingStore)
        rating_store.read_store.side_effect = RuntimeError("boom")
        session = ComparisonSession(StaticItemSource(["a.md", "b.md"]), rating_store)

        session.load()

        assert session.state == SessionState.READY
        assert session.store.is_empty()

    def test_closed_session_does_not_load(self):
        session = _session()
        session.close()
        session.load()
        assert session.state == SessionState.CLOSED
        assert session.items == []

    def test_close_during_load_discards_results(self):
        rating_store = RatingStore(MemoryDocumentStore())
        rating_store.write_store(Store(ratings={"a.md": RatingRecord(rating=1100, games=4, pool="default")}))

        class ClosingItemSource(StaticItemSource):
            def list_items(self):
                session.close()
                return super().list_items()

        session = ComparisonSession(ClosingItemSource(["a.md", "b.md"]), rating_store)

        session.load()

        assert session.state == SessionState.CLOSED
        assert session.items == []
        assert session.store is None
        assert session.history == []

    def test_non_finite_values_in_store_do_not_break_decisions(self):
        documents = MemoryDocumentStore(
            {
                events_path("default"): '[{"t": NaN, "a": "a.md", "b": "b.md", "s": 1}]',
                ratings_path("default"): (
                    '{"a.md": {"rating": NaN, "games": 2, "pool": "default"},'
                    ' "c.md": {"rating": 1050, "games": 3, "pool": "default"}}'
                ),
            }
        )
        session = _session(ids=("a.md", "b.md", "c.md"), documents=documents)

        session.load()

        assert session.store.events == []
        assert (_by_id(session)["a.md"].rating, _by_id(session)["a.md"].games) == (1000, 0)
        assert _by_id(session)["c.md"].rating == 1050

        entry = session.record_outcome(session.pair[0])

        assert entry is not None
        assert all(isinstance(item.rating, int) for item in session.items)
        # The valid rating survives the bad entries in both documents.
        assert "c.md" in json.loads(documents.read(ratings_path("default")))

    def test_single_item_has_no_pair(self):
        session = _session(ids=("a.md",))
        session.load()
        assert session.pair == (0, 0)
        assert session.current_pair() is None

    def test_legacy_layout_migrated_on_load(self):
        documents = MemoryDocumentStore(
            {
                "history/events.json": json.dumps([{"t": NOW, "a": "a.md", "b": "b.md", "s": 1}]),
                "history/ratings.json": json.dumps(
                    {
                        "a.md": {"rating": 1016, "games": 1, "pool": "default"},
                        "b.md": {"rating": 984, "games": 1, "pool": "default"},
                    }
                ),
            }
        )
        session = _session(documents=documents)

        session.load()

        assert _by_id(session)["a.md"].rating == 1016
        assert len(session.history) == 1
        assert documents.exists(events_path("default"))


class TestDecisions:
    def test_decision_before_load_is_ignored(self):
        session = _session()
        assert session.record_outcome(0) is None
        assert session.record_draw() is False
        assert session.store is None
        assert session.state == SessionState.UNINITIALIZED

    def test_record_outcome_updates_everything(self):
        documents = MemoryDocumentStore()
        session = _session(documents=documents)
        session.load()
        winner_index, loser_index = session.pair
        winner_id = session.items[winner_index].id
        loser_id = session.items[loser_index].id

        entry = session.record_outcome(winner_index)

        assert session.state == SessionState.READY
        assert entry.winner.id == winner_id
        assert (entry.winner_old_rating, entry.winner_new_rating) == (1000, 1016)
        assert entry.timestamp == NOW
        assert session.history == [entry]

        items = _by_id(session)
        assert (items[winner_id].rating, items[winner_id].games, items[winner_id].last) == (1016, 1, "2026-10-16")
        assert (items[loser_id].rating, items[loser_id].games) == (984, 1)

        assert session.store.events == [
            ComparisonEvent(timestamp=NOW, item_a=winner_id, item_b=loser_id, outcome=WIN)
        ]
        assert session.store.ratings[winner_id] == RatingRecord(
            rating=1016, games=1, pool="default", last="2026-10-16"
        )

        persisted = json.loads(documents.read(ratings_path("default")))
        assert persisted[winner_id]["rating"] == 1016
        assert persisted[loser_id]["rating"] == 984
        assert len(json.loads(documents.read(events_path("default")))) == 1

    def test_second_item_of_pair_can_win(self):
        session = _session()
        session.load()
        first, second = session.pair

        entry = session.record_outcome(second)

        assert entry.winner.id == session.items[second].id
        assert session.store.events[0].outcome == 0

    def test_winner_must_be_in_pair(self):
        session = _session(ids=("a.md", "b.md", "c.md"))
        session.load()
        outsider = ({0, 1, 2} - set(session.pair)).pop()
        with pytest.raises(ValueError):
            session.record_outcome(outsider)

    def test_draw_is_recorded_but_not_shown(self):
        session = _session()
        session.load()

        assert session.record_draw() is True

        assert session.history == []
        assert [e.outcome for e in session.store.events] == [DRAW]
        assert all(item.games == 1 for item in session.items)
        assert all(item.rating == 1000 for item in session.items)

    def test_new_pair_picked_after_decision(self):
        session = _session(ids=("a.md", "b.md", "c.md", "d.md"))
        session.load()
        session.record_outcome(session.pair[0])
        a, b = session.pair
        assert a != b
        # The two items that just played now have more games than the others.
        assert session.items[a].games == 0

    def test_persist_failure_keeps_session_going(self, caplog):
        rating_store = MagicMock(spec=RatingStore)
        rating_store.read_store.return_value = Store.empty()
        rating_store.write_store.side_effect = OSError("read-only")
        session = ComparisonSession(StaticItemSource(["a.md", "b.md"]), rating_store, rng=random.Random(0))
        session.load()

        entry = session.record_outcome(session.pair[0])

        assert entry is not None
        assert session.state == SessionState.READY
        assert len(session.store.events) == 1
        assert "Failed to persist" in caplog.text

    def test_reload_restores_ratings_and_history(self):
        documents = MemoryDocumentStore()
        first = _session(documents=documents)
        first.load()
        winner_id = first.items[first.pair[0]].id
        first.record_outcome(first.pair[0])
        first.close()

        second = _session(documents=documents)
        second.load()

        assert _by_id(second)[winner_id].rating == 1016
        assert _by_id(second)[winner_id].games == 1
        assert [e.winner.id for e in second.history] == [winner_id]

    def test_types_do_not_share_storage(self):
        documents = MemoryDocumentStore()
        books = _session(documents=documents, comparison_type="books")
        books.load()
        books.record_outcome(books.pair[0])

        movies = _session(documents=documents, comparison_type="movies")
        movies.load()

        assert movies.store.is_empty()
        assert all(item.rating == 1000 for item in movies.items)

    def test_history_most_recent_first(self):
        session = _session(ids=("a.md", "b.md", "c.md"))
        session.load()
        first = session.record_outcome(session.pair[0])
        second = session.record_outcome(session.pair[1])
        assert session.history == [second, first]
        assert second.timestamp > first.timestamp


class TestPairManagement:
    def test_swap(self):
        session = _session()
        session.load()
        a, b = session.pair
        session.swap()
        assert session.pair == (b, a)

    def test_skip_picks_valid_pair(self):
        session = _session(ids=("a.md", "b.md", "c.md"))
        session.load()
        session.skip()
        a, b = session.pair
        assert a != b

    def test_remove_item_is_session_only(self):
        documents = MemoryDocumentStore()
        session = _session(ids=("a.md", "b.md", "c.md"), documents=documents)
        session.load()
        session.record_outcome(session.pair[0])
        stored_before = documents.read(ratings_path("default"))

        removed = session.remove_item(0)

        assert removed.id not in _by_id(session)
        assert session.pair == (0, 1)
        assert documents.read(ratings_path("default")) == stored_before

    def test_remove_down_to_one_item(self):
        session = _session()
        session.load()
        session.remove_item(1)
        assert session.pair == (0, 0)
        assert session.current_pair() is None


class TestReset:
    def test_declined_reset_changes_nothing(self):
        session = _session()
        session.load()
        session.record_outcome(session.pair[0])
        events_before = list(session.store.events)

        assert session.reset(lambda: False) is False

        assert session.store.events == events_before
        assert len(session.history) == 1

    def test_reset_wipes_store_and_items(self):
        documents = MemoryDocumentStore()
        session = _session(documents=documents)
        session.load()
        session.record_outcome(session.pair[0])

        assert session.reset(lambda: True) is True

        assert session.store.is_empty()
        assert session.history == []
        assert all((i.rating, i.games, i.last) == (1000, 0, None) for i in session.items)
        assert json.loads(documents.read(events_path("default"))) == []
        assert json.loads(documents.read(ratings_path("default"))) == {}
        assert session.state == SessionState.READY

    def test_reset_then_reload_is_fresh(self):
        documents = MemoryDocumentStore()
        session = _session(documents=documents)
        session.load()
        session.record_outcome(session.pair[0])
        session.reset(lambda: True)

        again = _session(documents=documents)
        again.load()
        assert all(item.rating == 1000 for item in again.items)
        assert again.history == []


class TestViews:
    def test_rankings_sorted_by_rating_then_name(self):
        rating_store = RatingStore(MemoryDocumentStore())
        rating_store.write_store(
            Store(
                ratings={
                    "a.md": RatingRecord(rating=990, games=1, pool="default"),
                    "b.md": RatingRecord(rating=1040, games=2, pool="default"),
                }
            )
        )
        session = _session(ids=("c.md", "a.md", "b.md", "d.md"), documents=rating_store.documents)
        session.load()

        assert [i.id for i in session.rankings()] == ["b.md", "c.md", "d.md", "a.md"]

    def test_reconstruct_history_is_idempotent(self):
        session = _session(ids=("a.md", "b.md", "c.md"))
        session.load()
        for _ in range(3):
            session.record_outcome(session.pair[0])

        first = list(session.reconstruct_history())
        second = list(session.reconstruct_history())

        assert first == second
        assert len(first) == 3

    def test_close(self):
        session = _session()
        session.load()
        session.close()
        assert session.state == SessionState.CLOSED
        assert session.record_outcome(session.pair[0]) is None
