"""
Review Stats Service - read-only reporting over decks and daily counters.

Never writes counters; those are only incremented by review sessions.
"""

from dataclasses import dataclass
from datetime import date, timedelta, timezone

from cardwise.application.review_queue import count_due_cards
from cardwise.domain.clock import Clock, utc_now
from cardwise.domain.constants import DEFAULT_ACTIVITY_DAYS
from cardwise.domain.models import DailyReviewCount
from cardwise.domain.ports import DeckRepository, ReviewLogRepository


@dataclass(frozen=True)
class StatsOverview:
    total_decks: int
    total_cards: int
    total_reviews: int
    due_cards: int


class StatsService:
    """
    Application service for progress reporting.

    Follows Dependency Inversion: depends on the repository ports,
    not concrete adapter implementations.
    """

    def __init__(
        self,
        decks: DeckRepository,
        review_log: ReviewLogRepository,
        clock: Clock | None = None,
    ):
        self._decks = decks
        self._log = review_log
        self._clock = clock or utc_now

    def overview(self) -> StatsOverview:
        now = self._clock()
        decks = self._decks.list_decks()
        return StatsOverview(
            total_decks=len(decks),
            total_cards=sum(len(deck.cards) for deck in decks),
            total_reviews=sum(entry.count for entry in self._log.get_review_logs()),
            due_cards=sum(count_due_cards(deck.cards, now) for deck in decks),
        )

    def recent_activity(self, days: int = DEFAULT_ACTIVITY_DAYS) -> list[DailyReviewCount]:
        """
        Review counts for the last ``days`` calendar days (UTC), oldest first.

        Days without a stored counter are reported as zero.
        """
        if days <= 0:
            return []

        counts: dict[date, int] = {}
        for entry in self._log.get_review_logs():
            counts[entry.day] = counts.get(entry.day, 0) + entry.count

        today = self._clock().astimezone(timezone.utc).date()
        return [
            DailyReviewCount(day=day, count=counts.get(day, 0))
            for day in (today - timedelta(days=offset) for offset in range(days - 1, -1, -1))
        ]
