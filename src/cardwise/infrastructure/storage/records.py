"""
Persistence records for the JSON store.

Field aliases keep the on-disk format compatible with the web app's
local storage (camelCase keys, ISO-8601 UTC timestamps ending in "Z").
"""

from datetime import date, datetime, timezone
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from cardwise.domain.constants import DEFAULT_EASE_FACTOR, MIN_EASE_FACTOR
from cardwise.domain.models import Card, DailyReviewCount, Deck


def format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class CardRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    front: str
    back: str
    last_reviewed: datetime | None = Field(default=None, alias="lastReviewed")
    next_review: datetime = Field(alias="nextReview")
    interval: float = Field(default=0, ge=0)
    ease_factor: float = Field(default=DEFAULT_EASE_FACTOR, ge=MIN_EASE_FACTOR, alias="easeFactor")

    @field_validator("last_reviewed", "next_review", mode="after")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode="after")
    def check_review_state(self) -> "CardRecord":
        # interval is 0 exactly while the card has never been reviewed
        if self.last_reviewed is None and self.interval != 0:
            raise ValueError("never-reviewed card must have interval 0")
        if self.last_reviewed is not None and self.interval < 1:
            raise ValueError("reviewed card must have interval >= 1")
        return self

    @field_serializer("last_reviewed", "next_review")
    def serialize_timestamp(self, v: datetime | None) -> str | None:
        return format_timestamp(v) if v is not None else None

    @classmethod
    def from_domain(cls, card: Card) -> "CardRecord":
        return cls(
            id=card.id,
            front=card.front,
            back=card.back,
            last_reviewed=card.last_reviewed,
            next_review=card.next_review,
            interval=card.interval,
            ease_factor=card.ease_factor,
        )

    def to_domain(self) -> Card:
        return Card(
            id=self.id,
            front=self.front,
            back=self.back,
            last_reviewed=self.last_reviewed,
            next_review=self.next_review,
            interval=self.interval,
            ease_factor=self.ease_factor,
        )


class DeckRecord(BaseModel):
    id: str
    name: str
    cards: list[CardRecord] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, deck: Deck) -> "DeckRecord":
        return cls(id=deck.id, name=deck.name, cards=[CardRecord.from_domain(c) for c in deck.cards])

    def to_domain(self) -> Deck:
        return Deck(id=self.id, name=self.name, cards=tuple(c.to_domain() for c in self.cards))

    def dump(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ReviewLogRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day: date = Field(alias="date")
    count: int = Field(ge=0)

    @classmethod
    def from_domain(cls, entry: DailyReviewCount) -> "ReviewLogRecord":
        return cls(day=entry.day, count=entry.count)

    def to_domain(self) -> DailyReviewCount:
        return DailyReviewCount(day=self.day, count=self.count)

    def dump(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
