"""
Review queue controller for study sessions.

Drives a single pass through a deck's due cards:
1. Snapshot the due set (earliest-due first) from a private working copy
2. Walk the reviewer through it with reveal/rate actions
3. Hand the updated deck back only on commit
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import datetime
from enum import Enum

from cardwise.application.scheduler import schedule_review
from cardwise.domain.clock import Clock, utc_now
from cardwise.domain.errors import SessionStateError
from cardwise.domain.models import Card, Deck, Rating
from cardwise.domain.ports import ReviewRecorder

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    AWAITING_REVEAL = "awaiting_reveal"
    AWAITING_RATING = "awaiting_rating"
    COMPLETE = "complete"


def select_due_cards(cards: Iterable[Card], now: datetime) -> list[Card]:
    """
    Return the cards due at ``now``, earliest ``next_review`` first.

    The sort is stable, so ties keep their collection order.
    """
    return sorted((card for card in cards if card.is_due(now)), key=lambda c: c.next_review)


def count_due_cards(cards: Iterable[Card], now: datetime) -> int:
    return sum(1 for card in cards if card.is_due(now))


class ReviewSession:
    """
    Finite state machine for one study session over one deck.

    The due set is computed once at construction and never refreshed;
    cards rated Again are not requeued. The caller's deck is never
    touched: all updates go to a working copy returned by commit().
    """

    def __init__(
        self,
        deck: Deck,
        recorder: ReviewRecorder,
        clock: Clock | None = None,
    ):
        """
        Args:
            deck: Deck to study. Treated as read-only.
            recorder: Daily review counter, incremented once per rating.
            clock: Optional time source; uses UTC now if not provided.
        """
        self._deck = deck
        self._recorder = recorder
        self._clock = clock or utc_now

        self._cards = list(deck.cards)
        self._slots = {card.id: i for i, card in enumerate(self._cards)}
        self._due_ids = [card.id for card in select_due_cards(self._cards, self._clock())]
        self._position = 0

        if self._due_ids:
            self._state = SessionState.AWAITING_REVEAL
        else:
            self._state = SessionState.COMPLETE

        logger.info(
            f"Session started for deck '{deck.name}': {len(self._due_ids)} of "
            f"{len(self._cards)} cards due"
        )

    @property
    def deck_id(self) -> str:
        return self._deck.id

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_complete(self) -> bool:
        return self._state is SessionState.COMPLETE

    @property
    def position(self) -> int:
        """Zero-based index of the current card within the due set."""
        return self._position

    @property
    def due_count(self) -> int:
        return len(self._due_ids)

    @property
    def reviewed_count(self) -> int:
        return self._position

    @property
    def current_card(self) -> Card | None:
        if self.is_complete:
            return None
        return self._cards[self._slots[self._due_ids[self._position]]]

    def reveal(self) -> Card:
        """Show the answer of the current card. Repeating it changes nothing."""
        if self.is_complete:
            raise SessionStateError("No card to reveal: session is complete")
        self._state = SessionState.AWAITING_RATING
        return self.current_card

    def rate(self, rating: Rating) -> Card:
        """
        Rate the revealed card, schedule it and advance.

        Returns:
            The rescheduled card.

        Raises:
            SessionStateError: If the session is complete or the card was not revealed.
            InvalidRatingError: If ``rating`` is not a Rating member.
        """
        if self.is_complete:
            raise SessionStateError("Cannot rate: session is complete")
        if self._state is not SessionState.AWAITING_RATING:
            raise SessionStateError("Cannot rate before the answer is revealed")

        card = self.current_card
        result = schedule_review(card, rating, self._clock())
        self._recorder.record_review(result.event.day)
        self._cards[self._slots[card.id]] = result.card

        self._position += 1
        if self._position >= len(self._due_ids):
            self._state = SessionState.COMPLETE
            logger.info(f"Session complete for deck '{self._deck.name}': {self._position} reviewed")
        else:
            self._state = SessionState.AWAITING_REVEAL
        return result.card

    def commit(self) -> Deck:
        """Return the deck with all session updates applied."""
        if not self.is_complete:
            raise SessionStateError(
                f"Cannot commit: {self.due_count - self._position} due cards remain"
            )
        return replace(self._deck, cards=tuple(self._cards))


def run_session(
    deck: Deck,
    rate_card: Callable[[Card], Rating],
    recorder: ReviewRecorder,
    clock: Clock | None = None,
) -> Deck:
    """
    Study every due card of ``deck`` and return the committed deck.

    Args:
        deck: Deck to study.
        rate_card: Called with each revealed card; returns the reviewer's rating.
        recorder: Daily review counter.
        clock: Optional time source.
    """
    session = ReviewSession(deck, recorder, clock)
    while not session.is_complete:
        card = session.reveal()
        session.rate(rate_card(card))
    return session.commit()
