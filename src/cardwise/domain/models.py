"""
Domain models for cards, decks and reviews.

These are pure data structures with no I/O or external dependencies
beyond ULID generation for new identities.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import IntEnum

from ulid import ULID

from .constants import DEFAULT_EASE_FACTOR
from .errors import InvalidRatingError


class Rating(IntEnum):
    """Reviewer's self-assessed recall quality, ordered worst to best."""

    AGAIN = 0
    HARD = 1
    GOOD = 2
    EASY = 3

    @classmethod
    def from_name(cls, name: str) -> "Rating":
        """Look up a rating by case-insensitive name ("again", "Good", ...)."""
        try:
            return cls[name.strip().upper()]
        except (KeyError, AttributeError):
            raise InvalidRatingError(name) from None


@dataclass(frozen=True)
class Card:
    """
    A single fact to memorize.

    Attributes:
        id: Opaque identity, stable across updates.
        front: Prompt text.
        back: Answer text.
        next_review: Due date (aware UTC).
        last_reviewed: Time of the last review, None if never reviewed.
        interval: Days until the next review; 0 only before the first review.
        ease_factor: Interval growth multiplier, never below 1.3.
    """

    id: str
    front: str
    back: str
    next_review: datetime
    last_reviewed: datetime | None = None
    interval: float = 0
    ease_factor: float = DEFAULT_EASE_FACTOR

    @property
    def is_new(self) -> bool:
        return self.last_reviewed is None

    def is_due(self, now: datetime) -> bool:
        return self.next_review <= now


@dataclass(frozen=True)
class Deck:
    """A named collection of cards. Card ids are unique within a deck."""

    id: str
    name: str
    cards: tuple[Card, ...] = ()

    def __post_init__(self):
        # Accept any iterable of cards but store an immutable tuple.
        object.__setattr__(self, "cards", tuple(self.cards))


@dataclass(frozen=True)
class ReviewEvent:
    """Report that one card was rated; feeds the daily review counter."""

    card_id: str
    rating: Rating
    reviewed_at: datetime

    @property
    def day(self) -> date:
        return self.reviewed_at.astimezone(timezone.utc).date()


@dataclass(frozen=True)
class ScheduledReview:
    """Result of scheduling: the updated card plus the review it produced."""

    card: Card
    event: ReviewEvent
    review_event_occurred: bool = field(default=True, init=False)


@dataclass(frozen=True)
class DailyReviewCount:
    day: date
    count: int = 0


def generate_card_id() -> str:
    return f"card_{ULID()}"


def generate_deck_id() -> str:
    return f"deck_{ULID()}"


def new_card(front: str, back: str, now: datetime) -> Card:
    """Create a never-reviewed card that is due immediately."""
    return Card(id=generate_card_id(), front=front, back=back, next_review=now)


def new_deck(name: str, cards: Iterable[Card] = ()) -> Deck:
    return Deck(id=generate_deck_id(), name=name, cards=tuple(cards))
