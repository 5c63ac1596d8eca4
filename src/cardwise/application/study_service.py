"""
Study Service - Application layer orchestrator for review sessions.

Loads decks through the DeckRepository port, runs sessions over them and
persists the committed result.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from cardwise.application.review_queue import ReviewSession, count_due_cards, run_session
from cardwise.domain.clock import Clock, utc_now
from cardwise.domain.models import Card, Deck, Rating
from cardwise.domain.ports import DeckRepository, ReviewRecorder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeckSummary:
    deck_id: str
    name: str
    total_cards: int
    due_cards: int


class StudyService:
    """
    Application service for studying decks.

    Depends on the DeckRepository and ReviewRecorder abstractions,
    not concrete adapter implementations.
    """

    def __init__(
        self,
        decks: DeckRepository,
        recorder: ReviewRecorder,
        clock: Clock | None = None,
    ):
        self._decks = decks
        self._recorder = recorder
        self._clock = clock or utc_now

    def deck_summaries(self) -> list[DeckSummary]:
        """Card and due counts for every stored deck."""
        now = self._clock()
        return [
            DeckSummary(
                deck_id=deck.id,
                name=deck.name,
                total_cards=len(deck.cards),
                due_cards=count_due_cards(deck.cards, now),
            )
            for deck in self._decks.list_decks()
        ]

    def start_session(self, deck_id: str) -> ReviewSession:
        """
        Open a session over the stored deck.

        Raises:
            DeckNotFoundError: If the deck does not exist.
        """
        deck = self._decks.get_deck(deck_id)
        return ReviewSession(deck, self._recorder, self._clock)

    def finish_session(self, session: ReviewSession) -> Deck:
        """Commit a completed session and persist the resulting deck."""
        deck = session.commit()
        self._decks.save_deck(deck)
        logger.info(f"Saved deck '{deck.name}' after {session.reviewed_count} reviews")
        return deck

    def study(self, deck_id: str, rate_card: Callable[[Card], Rating]) -> Deck:
        """Run a full session non-interactively and persist the result."""
        deck = run_session(
            self._decks.get_deck(deck_id), rate_card, self._recorder, self._clock
        )
        self._decks.save_deck(deck)
        return deck
