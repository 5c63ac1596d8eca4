import itertools
from datetime import date, datetime, timedelta, timezone

import pytest

from cardwise.domain.models import Card, Deck
from cardwise.domain.ports import ReviewRecorder

NOW = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


class FakeRecorder(ReviewRecorder):
    """In-memory daily counter that also remembers call order."""

    def __init__(self):
        self.counts: dict[date, int] = {}
        self.calls: list[date] = []

    def record_review(self, day: date) -> int:
        self.calls.append(day)
        self.counts[day] = self.counts.get(day, 0) + 1
        return self.counts[day]


class MutableClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return MutableClock(NOW)


@pytest.fixture
def recorder():
    return FakeRecorder()


@pytest.fixture
def make_card():
    """Factory for cards due relative to NOW (``due_in`` in days, negative = overdue)."""
    ids = itertools.count(1)

    def _make(due_in: float = 0, interval: float = 0, ease_factor: float = 2.5, **kwargs) -> Card:
        n = next(ids)
        fields = {
            "id": f"c{n}",
            "front": f"front {n}",
            "back": f"back {n}",
            "next_review": NOW + timedelta(days=due_in),
            "interval": interval,
            "ease_factor": ease_factor,
        }
        if interval and "last_reviewed" not in kwargs:
            fields["last_reviewed"] = fields["next_review"] - timedelta(days=interval)
        fields.update(kwargs)
        return Card(**fields)

    return _make


@pytest.fixture
def make_deck():
    def _make(*cards: Card, deck_id: str = "d1", name: str = "Spanish") -> Deck:
        return Deck(id=deck_id, name=name, cards=cards)

    return _make


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir and clears CARDWISE_* env vars."""
    home = tmp_path / "home"
    home.mkdir()

    monkeypatch.setenv("HOME", str(home))
    for var in ("CARDWISE_DATA_DIR", "CARDWISE_ACTIVITY_DAYS", "CARDWISE_SERVER_PORT"):
        monkeypatch.delenv(var, raising=False)
    return home
