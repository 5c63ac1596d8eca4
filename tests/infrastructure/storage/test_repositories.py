import json
import threading
from datetime import date, datetime, timedelta, timezone

import pytest

from cardwise.domain.errors import DeckNotFoundError, StoreCorruptedError
from cardwise.domain.models import Card, DailyReviewCount, Deck
from cardwise.infrastructure.storage import JsonDeckRepository, JsonFileStore, JsonReviewLog


@pytest.fixture
def store(tmp_path):
    return JsonFileStore(tmp_path)


@pytest.fixture
def decks(store):
    return JsonDeckRepository(store)


@pytest.fixture
def review_log(store):
    return JsonReviewLog(store)


# --- Decks ---


def test_empty_store_has_no_decks(decks):
    assert decks.list_decks() == []


def test_save_and_load_deck(decks, make_card, make_deck, now):
    reviewed = make_card(due_in=2, interval=2.5, ease_factor=2.35)
    deck = make_deck(make_card(), reviewed)

    decks.save_deck(deck)

    assert decks.get_deck("d1") == deck
    assert decks.list_decks() == [deck]


def test_saved_format_uses_camelcase_keys(decks, store, tmp_path, now):
    card = Card(
        id="c1",
        front="hola",
        back="hello",
        next_review=datetime(2024, 3, 13, 12, 0, tzinfo=timezone.utc),
        last_reviewed=datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc),
        interval=3,
        ease_factor=2.5,
    )
    decks.save_deck(Deck(id="d1", name="Spanish", cards=(card,)))

    raw = json.loads((tmp_path / "flashcardDecks.json").read_text(encoding="utf-8"))
    assert raw == [
        {
            "id": "d1",
            "name": "Spanish",
            "cards": [
                {
                    "id": "c1",
                    "front": "hola",
                    "back": "hello",
                    "lastReviewed": "2024-03-10T12:00:00.000Z",
                    "nextReview": "2024-03-13T12:00:00.000Z",
                    "interval": 3.0,
                    "easeFactor": 2.5,
                }
            ],
        }
    ]


def test_reads_web_app_format(store, decks):
    store.set(
        "flashcardDecks",
        [
            {
                "id": "deck-1",
                "name": "Imported",
                "cards": [
                    {
                        "id": "card-1-0",
                        "front": "F",
                        "back": "B",
                        "lastReviewed": None,
                        "nextReview": "2024-03-10T09:15:00.123Z",
                        "interval": 0,
                        "easeFactor": 2.5,
                    }
                ],
            }
        ],
    )

    card = decks.get_deck("deck-1").cards[0]
    assert card.is_new
    assert card.next_review == datetime(2024, 3, 10, 9, 15, 0, 123000, tzinfo=timezone.utc)


def test_naive_timestamps_are_assumed_utc(store, decks):
    store.set(
        "flashcardDecks",
        [
            {
                "id": "d",
                "name": "N",
                "cards": [
                    {"id": "c", "front": "f", "back": "b", "nextReview": "2024-03-10T09:00:00"}
                ],
            }
        ],
    )

    card = decks.get_deck("d").cards[0]
    assert card.next_review.tzinfo is not None
    assert card.next_review.utcoffset() == timedelta(0)


def test_save_replaces_deck_with_same_id(decks, make_card, make_deck):
    decks.save_deck(make_deck(make_card(), deck_id="a", name="A"))
    decks.save_deck(make_deck(deck_id="b", name="B"))
    updated = make_deck(make_card(), make_card(), deck_id="a", name="A")

    decks.save_deck(updated)

    assert [d.id for d in decks.list_decks()] == ["a", "b"]
    assert decks.get_deck("a") == updated


def test_get_missing_deck_raises(decks):
    with pytest.raises(DeckNotFoundError) as exc_info:
        decks.get_deck("missing")
    assert "missing" in str(exc_info.value)


def test_invalid_deck_record_is_skipped(store, decks, caplog):
    store.set(
        "flashcardDecks",
        [
            {"id": "bad", "cards": []},
            {"id": "good", "name": "Good", "cards": []},
        ],
    )

    assert [d.id for d in decks.list_decks()] == ["good"]
    assert "Skipping invalid deck record #0" in caplog.text


def test_non_list_payload_is_ignored(store, decks):
    store.set("flashcardDecks", {"id": "oops"})
    assert decks.list_decks() == []


# --- Review log ---


def test_record_review_creates_then_increments(review_log):
    day = date(2024, 3, 10)

    assert review_log.record_review(day) == 1
    assert review_log.record_review(day) == 2
    assert review_log.get_review_logs() == [DailyReviewCount(day, 2)]


def test_days_are_independent(review_log, tmp_path):
    review_log.record_review(date(2024, 3, 10))
    review_log.record_review(date(2024, 3, 11))
    review_log.record_review(date(2024, 3, 10))

    raw = json.loads((tmp_path / "flashcardReviewLogs.json").read_text(encoding="utf-8"))
    assert raw == [
        {"date": "2024-03-10", "count": 2},
        {"date": "2024-03-11", "count": 1},
    ]


def test_reads_web_app_review_log_format(store, review_log):
    store.set("flashcardReviewLogs", [{"date": "2024-01-02", "count": 5}])

    assert review_log.get_review_logs() == [DailyReviewCount(date(2024, 1, 2), 5)]
    assert review_log.record_review(date(2024, 1, 2)) == 6


def test_concurrent_increments_are_not_lost(tmp_path):
    day = date(2024, 3, 10)
    # Separate store objects on one directory still share the lock.
    logs = [JsonReviewLog(JsonFileStore(tmp_path)) for _ in range(4)]

    def worker(log):
        for _ in range(25):
            log.record_review(day)

    threads = [threading.Thread(target=worker, args=(log,)) for log in logs]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert logs[0].get_review_logs() == [DailyReviewCount(day, 100)]


# --- Writes never drop stored data ---


def test_record_review_keeps_entries_it_cannot_parse(store, review_log, tmp_path):
    store.set(
        "flashcardReviewLogs",
        [{"date": "2024-03-09", "count": 4}, {"date": "bad", "count": 9}],
    )

    assert review_log.record_review(date(2024, 3, 10)) == 1
    assert review_log.record_review(date(2024, 3, 9)) == 5

    raw = json.loads((tmp_path / "flashcardReviewLogs.json").read_text(encoding="utf-8"))
    assert raw == [
        {"date": "2024-03-09", "count": 5},
        {"date": "bad", "count": 9},
        {"date": "2024-03-10", "count": 1},
    ]


def test_record_review_refuses_invalid_entry_for_same_day(store, review_log):
    store.set("flashcardReviewLogs", [{"date": "2024-03-10", "count": "many"}])

    with pytest.raises(StoreCorruptedError):
        review_log.record_review(date(2024, 3, 10))
    assert store.get("flashcardReviewLogs") == [{"date": "2024-03-10", "count": "many"}]


def test_record_review_leaves_corrupt_file_untouched(review_log, tmp_path):
    path = tmp_path / "flashcardReviewLogs.json"
    path.write_text('[{"date": "2024-03-09", "count": 4}, ', encoding="utf-8")

    with pytest.raises(StoreCorruptedError):
        review_log.record_review(date(2024, 3, 10))
    assert path.read_text(encoding="utf-8") == '[{"date": "2024-03-09", "count": 4}, '


def test_save_deck_leaves_corrupt_file_untouched(decks, tmp_path):
    path = tmp_path / "flashcardDecks.json"
    truncated = '[{"id": "d1", "name": "A", "cards": []}, '
    path.write_text(truncated, encoding="utf-8")

    with pytest.raises(StoreCorruptedError):
        decks.save_deck(Deck(id="d2", name="B"))
    assert path.read_text(encoding="utf-8") == truncated
    # Reads still degrade to empty
    assert decks.list_decks() == []


def test_save_deck_refuses_non_list_payload(store, decks):
    store.set("flashcardDecks", {"id": "d1"})

    with pytest.raises(StoreCorruptedError):
        decks.save_deck(Deck(id="d2", name="B"))
    assert store.get("flashcardDecks") == {"id": "d1"}


def test_save_deck_keeps_invalid_deck_records(store, decks):
    store.set("flashcardDecks", [{"id": "bad", "cards": []}])

    decks.save_deck(Deck(id="d2", name="B"))

    assert store.get("flashcardDecks")[0] == {"id": "bad", "cards": []}
    assert [d.id for d in decks.list_decks()] == ["d2"]


# --- Card invariants on load ---


def _deck_with_card(**card_fields):
    card = {"id": "c", "front": "f", "back": "b", "nextReview": "2024-03-10T09:00:00.000Z"}
    card.update(card_fields)
    return [{"id": "d", "name": "D", "cards": [card]}]


@pytest.mark.parametrize(
    "card_fields",
    [
        {"easeFactor": 1.2},
        {"interval": 3, "lastReviewed": None},
        {"interval": 0, "lastReviewed": "2024-03-07T09:00:00.000Z"},
        {"interval": 0.5, "lastReviewed": "2024-03-07T09:00:00.000Z"},
    ],
)
def test_card_breaking_invariants_is_skipped(store, decks, caplog, card_fields):
    store.set("flashcardDecks", _deck_with_card(**card_fields))

    assert decks.list_decks() == []
    assert "Skipping invalid deck record #0" in caplog.text


def test_card_at_ease_floor_loads(store, decks):
    store.set(
        "flashcardDecks",
        _deck_with_card(easeFactor=1.3, interval=1, lastReviewed="2024-03-09T09:00:00.000Z"),
    )

    card = decks.get_deck("d").cards[0]
    assert card.ease_factor == 1.3
    assert card.interval == 1
