# Domain Package
from .errors import (
    CardwiseError,
    DeckNotFoundError,
    InvalidRatingError,
    SessionStateError,
    StoreCorruptedError,
)
from .models import (
    Card,
    DailyReviewCount,
    Deck,
    Rating,
    ReviewEvent,
    ScheduledReview,
    new_card,
    new_deck,
)
from .ports import DeckRepository, ReviewLogRepository, ReviewRecorder

__all__ = [
    "Card",
    "Deck",
    "Rating",
    "ReviewEvent",
    "ScheduledReview",
    "DailyReviewCount",
    "new_card",
    "new_deck",
    "CardwiseError",
    "InvalidRatingError",
    "SessionStateError",
    "DeckNotFoundError",
    "StoreCorruptedError",
    "DeckRepository",
    "ReviewRecorder",
    "ReviewLogRepository",
]
