"""
Spaced-repetition scheduler.

Maps a card's scheduling state and a performance rating to a new
scheduling state. This is a pure computation module with no I/O; the
review it produces is reported back to the caller, never written here.
"""

import logging
import math
from dataclasses import replace
from datetime import datetime, timedelta

from cardwise.domain.clock import utc_now
from cardwise.domain.constants import (
    AGAIN_EASE_PENALTY,
    AGAIN_INTERVAL_DAYS,
    EASY_EASE_BONUS,
    EASY_INTERVAL_MULTIPLIER,
    HARD_EASE_PENALTY,
    HARD_INTERVAL_MULTIPLIER,
    MIN_EASE_FACTOR,
    MIN_INTERVAL_DAYS,
)
from cardwise.domain.errors import InvalidRatingError
from cardwise.domain.models import Card, Rating, ReviewEvent, ScheduledReview

logger = logging.getLogger(__name__)

# Base interval (days) for the first successful review of a new card.
FIRST_REVIEW_INTERVALS = {
    Rating.HARD: 1,
    Rating.GOOD: 3,
    Rating.EASY: 5,
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (unlike round())."""
    return math.floor(value + 0.5)


def schedule_review(card: Card, rating: Rating, now: datetime | None = None) -> ScheduledReview:
    """
    Compute the next scheduling state for a card after a review.

    Args:
        card: The card being reviewed.
        rating: The reviewer's rating.
        now: Review time; defaults to the current UTC time.

    Returns:
        ScheduledReview with the updated card and the review event to record.

    Raises:
        InvalidRatingError: If ``rating`` is not a Rating member.
    """
    if not isinstance(rating, Rating):
        raise InvalidRatingError(rating)

    now = now or utc_now()
    interval, ease_factor = _next_interval_and_ease(card, rating)

    # The stored interval keeps the fractional value; only the due date
    # uses the rounded day offset. Both are clamped independently.
    due_in_days = max(MIN_INTERVAL_DAYS, round_half_up(interval))
    updated = replace(
        card,
        last_reviewed=now,
        next_review=now + timedelta(days=due_in_days),
        interval=max(MIN_INTERVAL_DAYS, interval),
        ease_factor=ease_factor,
    )

    logger.debug(
        f"Scheduled {card.id} rating={rating.name} interval={updated.interval:.2f} "
        f"ease={ease_factor:.2f} due_in={due_in_days}d"
    )
    return ScheduledReview(
        card=updated,
        event=ReviewEvent(card_id=card.id, rating=rating, reviewed_at=now),
    )


def _next_interval_and_ease(card: Card, rating: Rating) -> tuple[float, float]:
    if rating is Rating.AGAIN:
        return AGAIN_INTERVAL_DAYS, max(MIN_EASE_FACTOR, card.ease_factor - AGAIN_EASE_PENALTY)

    # Keyed on interval, not last_reviewed: a card reset to 0 counts as new.
    if card.interval == 0:
        interval = float(FIRST_REVIEW_INTERVALS[rating])
    else:
        interval = card.interval * card.ease_factor

    if rating is Rating.HARD:
        return (
            interval * HARD_INTERVAL_MULTIPLIER,
            max(MIN_EASE_FACTOR, card.ease_factor - HARD_EASE_PENALTY),
        )
    if rating is Rating.EASY:
        return interval * EASY_INTERVAL_MULTIPLIER, card.ease_factor + EASY_EASE_BONUS
    return interval, card.ease_factor
