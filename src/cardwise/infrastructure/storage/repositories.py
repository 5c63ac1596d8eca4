"""
JSON Repositories - Infrastructure adapters over JsonFileStore.

Implement the DeckRepository and ReviewLogRepository ports using the
same keys and record layout as the web app's local-storage format.
"""

import logging
from datetime import date
from typing import Any

from pydantic import ValidationError

from cardwise.domain.constants import DECKS_KEY, REVIEW_LOGS_KEY
from cardwise.domain.errors import DeckNotFoundError, StoreCorruptedError
from cardwise.domain.models import DailyReviewCount, Deck
from cardwise.domain.ports import DeckRepository, ReviewLogRepository

from .json_store import JsonFileStore
from .records import DeckRecord, ReviewLogRecord

logger = logging.getLogger(__name__)


def _load_list(store: JsonFileStore, key: str, strict: bool = False) -> list[Any]:
    """
    Read the raw list stored under ``key``.

    With ``strict`` (used before writing back), unreadable or non-list
    payloads raise StoreCorruptedError instead of reading as empty.
    """
    raw = store.get(key, [], strict=strict)
    if not isinstance(raw, list):
        logger.error(f"Expected a list under '{key}', got {type(raw).__name__}")
        if strict:
            raise StoreCorruptedError(key, store.path_for(key))
        return []
    return raw


class JsonDeckRepository(DeckRepository):
    """
    Stores all decks as a single JSON list.

    Records that fail validation are logged and skipped on read.
    """

    def __init__(self, store: JsonFileStore):
        self.store = store

    def _load_records(self) -> list[DeckRecord]:
        records: list[DeckRecord] = []
        for i, raw in enumerate(_load_list(self.store, DECKS_KEY)):
            try:
                records.append(DeckRecord.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping invalid deck record #{i}: {e}")
        return records

    def list_decks(self) -> list[Deck]:
        return [record.to_domain() for record in self._load_records()]

    def get_deck(self, deck_id: str) -> Deck:
        for record in self._load_records():
            if record.id == deck_id:
                return record.to_domain()
        raise DeckNotFoundError(deck_id)

    def save_deck(self, deck: Deck) -> None:
        with self.store.lock:
            raw_decks = _load_list(self.store, DECKS_KEY, strict=True)
            new_record = DeckRecord.from_domain(deck).dump()

            for i, raw in enumerate(raw_decks):
                if isinstance(raw, dict) and raw.get("id") == deck.id:
                    raw_decks[i] = new_record
                    break
            else:
                raw_decks.append(new_record)

            self.store.set(DECKS_KEY, raw_decks)
        logger.debug(f"Saved deck {deck.id} ({len(deck.cards)} cards)")


class JsonReviewLog(ReviewLogRepository):
    """
    Daily review counters stored as ``[{"date": "YYYY-MM-DD", "count": n}, ...]``.
    """

    def __init__(self, store: JsonFileStore):
        self.store = store

    def _load_records(self) -> list[ReviewLogRecord]:
        records: list[ReviewLogRecord] = []
        for i, raw in enumerate(_load_list(self.store, REVIEW_LOGS_KEY)):
            try:
                records.append(ReviewLogRecord.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping invalid review log record #{i}: {e}")
        return records

    def record_review(self, day: date) -> int:
        # Work on the raw entries so records this adapter cannot parse are
        # written back untouched.
        with self.store.lock:
            entries = _load_list(self.store, REVIEW_LOGS_KEY, strict=True)
            key = day.isoformat()
            for i, raw in enumerate(entries):
                if isinstance(raw, dict) and raw.get("date") == key:
                    try:
                        record = ReviewLogRecord.model_validate(raw)
                    except ValidationError as e:
                        logger.error(f"Invalid review log record #{i} for {key}: {e}")
                        raise StoreCorruptedError(
                            REVIEW_LOGS_KEY, self.store.path_for(REVIEW_LOGS_KEY)
                        ) from e
                    count = record.count + 1
                    raw["count"] = count
                    break
            else:
                entries.append(ReviewLogRecord(day=day, count=1).dump())
                count = 1

            self.store.set(REVIEW_LOGS_KEY, entries)
        return count

    def get_review_logs(self) -> list[DailyReviewCount]:
        return [record.to_domain() for record in self._load_records()]
