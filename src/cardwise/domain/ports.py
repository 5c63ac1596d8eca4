"""
Ports (interfaces) for the collaborators of the review core.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from datetime import date

from .models import DailyReviewCount, Deck


class DeckRepository(ABC):
    """
    Port for loading and persisting decks.

    Implementations:
        - JsonDeckRepository: Stores decks in a JSON key-value file.
    """

    @abstractmethod
    def list_decks(self) -> list[Deck]:
        """Return every stored deck, in storage order."""

    @abstractmethod
    def get_deck(self, deck_id: str) -> Deck:
        """
        Load a single deck.

        Raises:
            DeckNotFoundError: If no deck has the given id.
        """

    @abstractmethod
    def save_deck(self, deck: Deck) -> None:
        """Persist a deck, replacing any stored deck with the same id."""


class ReviewRecorder(ABC):
    """
    Port for the daily review counter.

    Exposes only the atomic increment; reading and writing are never
    offered separately so concurrent sessions cannot lose increments.
    """

    @abstractmethod
    def record_review(self, day: date) -> int:
        """
        Increment the counter for ``day``, creating it at 1 if missing.

        Returns:
            The counter value after the increment.
        """


class ReviewLogRepository(ReviewRecorder):
    """Review recorder that can also be read back for reporting."""

    @abstractmethod
    def get_review_logs(self) -> list[DailyReviewCount]:
        """Return all daily counters, in storage order."""
