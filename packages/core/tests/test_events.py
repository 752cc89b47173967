"""Tests for event log retention and per-comparison bookkeeping."""

from elocompare_core.constants import MAX_AGE_MS, MAX_EVENTS
from elocompare_core.events import (
    append_event,
    apply_comparison,
    create_event,
    filter_recent_events,
    update_store_ratings,
)
from elocompare_core.items import Item
from elocompare_store.models import DRAW, LOSS, WIN, ComparisonEvent, RatingRecord, Store

NOW = 1_790_000_000_000


def _event(t, a="a.md", b="b.md", s=WIN):
    return ComparisonEvent(timestamp=t, item_a=a, item_b=b, outcome=s)


def _items():
    return [
        Item(id="a.md", name="a", rating=1000, games=0, pool="books"),
        Item(id="b.md", name="b", rating=1000, games=3, pool="books", last="2026-10-01"),
        Item(id="c.md", name="c", rating=1100, games=1, pool="books"),
    ]


class TestCreateEvent:
    def test_uses_item_ids(self):
        items = _items()
        event = create_event(items[0], items[1], LOSS, timestamp=123)
        assert event == ComparisonEvent(timestamp=123, item_a="a.md", item_b="b.md", outcome=LOSS)

    def test_defaults_to_current_time(self):
        items = _items()
        event = create_event(items[0], items[1], WIN)
        assert event.timestamp > 1_600_000_000_000


class TestRetention:
    def test_drops_events_at_or_past_max_age(self):
        events = [_event(NOW - MAX_AGE_MS), _event(NOW - MAX_AGE_MS + 1), _event(NOW)]
        kept = filter_recent_events(events, now=NOW)
        assert [e.timestamp for e in kept] == [NOW - MAX_AGE_MS + 1, NOW]

    def test_keeps_last_max_events(self):
        events = [_event(NOW - 1000 + i) for i in range(MAX_EVENTS + 25)]
        kept = filter_recent_events(events, now=NOW)
        assert len(kept) == MAX_EVENTS
        assert kept[-1] == events[-1]
        assert kept[0] == events[25]

    def test_append_keeps_newest_event(self):
        store = Store(events=[_event(NOW - 500 + i) for i in range(MAX_EVENTS)])
        newest = _event(NOW, a="x.md", b="y.md")

        updated = append_event(store, newest, now=NOW)

        assert len(updated.events) == MAX_EVENTS
        assert updated.events[-1] == newest

    def test_append_does_not_mutate_input(self):
        ratings = {"a.md": RatingRecord(rating=1000, games=0, pool="books")}
        store = Store(events=[_event(NOW - 10)], ratings=ratings)

        updated = append_event(store, _event(NOW), now=NOW)

        assert len(store.events) == 1
        assert updated.ratings == ratings
        assert updated.ratings is not store.ratings

    def test_append_ages_out_old_events(self):
        store = Store(events=[_event(NOW - MAX_AGE_MS - 1), _event(NOW - 5)])
        updated = append_event(store, _event(NOW), now=NOW)
        assert [e.timestamp for e in updated.events] == [NOW - 5, NOW]


class TestApplyComparison:
    def test_win_updates_both_items(self):
        items = _items()
        result = apply_comparison(items, 0, 1, WIN, today="2026-10-16")

        assert (result.new_rating_a, result.new_rating_b) == (1016, 984)
        assert result.items[0].rating == 1016
        assert result.items[0].games == 1
        assert result.items[0].last == "2026-10-16"
        assert result.items[1].rating == 984
        assert result.items[1].games == 4
        assert result.items[2] is items[2]

    def test_input_untouched(self):
        items = _items()
        apply_comparison(items, 0, 1, WIN, today="2026-10-16")
        assert items[0].rating == 1000
        assert items[0].games == 0

    def test_win_history_entry(self):
        result = apply_comparison(_items(), 0, 1, WIN, today="2026-10-16")
        entry = result.history_entry
        assert entry.winner.id == "a.md"
        assert entry.loser.id == "b.md"
        assert (entry.winner_old_rating, entry.winner_new_rating) == (1000, 1016)
        assert (entry.loser_old_rating, entry.loser_new_rating) == (1000, 984)

    def test_loss_makes_second_item_winner(self):
        result = apply_comparison(_items(), 0, 1, LOSS, today="2026-10-16")
        entry = result.history_entry
        assert entry.winner.id == "b.md"
        assert (entry.winner_old_rating, entry.winner_new_rating) == (1000, 1016)
        assert (entry.loser_old_rating, entry.loser_new_rating) == (1000, 984)

    def test_draw_has_no_history_entry(self):
        result = apply_comparison(_items(), 0, 2, DRAW, today="2026-10-16")
        assert result.history_entry is None
        assert result.items[0].games == 1
        assert result.items[2].games == 2


class TestUpdateStoreRatings:
    def test_updates_exactly_two_records(self):
        items = _items()
        other = RatingRecord(rating=1300, games=9, pool="books", last="2026-01-01")
        store = Store(ratings={"z.md": other})

        ratings = update_store_ratings(store, items[0], items[1], 1016, 984, today="2026-10-16")

        assert ratings["a.md"] == RatingRecord(rating=1016, games=1, pool="books", last="2026-10-16")
        assert ratings["b.md"] == RatingRecord(rating=984, games=4, pool="books", last="2026-10-16")
        assert ratings["z.md"] is other
        assert store.ratings == {"z.md": other}
