from unittest.mock import MagicMock

import pytest

from cardwise.application.study_service import DeckSummary, StudyService
from cardwise.domain.errors import DeckNotFoundError, SessionStateError
from cardwise.domain.models import Rating
from cardwise.domain.ports import DeckRepository


@pytest.fixture
def mock_repo():
    return MagicMock(spec=DeckRepository)


@pytest.fixture
def service(mock_repo, recorder, clock):
    return StudyService(decks=mock_repo, recorder=recorder, clock=clock)


def test_deck_summaries(service, mock_repo, make_card, make_deck):
    mock_repo.list_decks.return_value = [
        make_deck(make_card(due_in=-1), make_card(due_in=2), deck_id="d1", name="Spanish"),
        make_deck(deck_id="d2", name="Empty"),
    ]

    assert service.deck_summaries() == [
        DeckSummary(deck_id="d1", name="Spanish", total_cards=2, due_cards=1),
        DeckSummary(deck_id="d2", name="Empty", total_cards=0, due_cards=0),
    ]


def test_start_and_finish_session(service, mock_repo, make_card, make_deck, recorder):
    deck = make_deck(make_card(due_in=-1))
    mock_repo.get_deck.return_value = deck

    session = service.start_session("d1")
    session.reveal()
    session.rate(Rating.GOOD)
    saved = service.finish_session(session)

    mock_repo.get_deck.assert_called_once_with("d1")
    mock_repo.save_deck.assert_called_once_with(saved)
    assert saved.cards[0].interval == 3
    assert sum(recorder.counts.values()) == 1


def test_finish_incomplete_session_saves_nothing(service, mock_repo, make_card, make_deck):
    mock_repo.get_deck.return_value = make_deck(make_card(due_in=-1))
    session = service.start_session("d1")

    with pytest.raises(SessionStateError):
        service.finish_session(session)
    mock_repo.save_deck.assert_not_called()


def test_start_session_unknown_deck(service, mock_repo):
    mock_repo.get_deck.side_effect = DeckNotFoundError("nope")

    with pytest.raises(DeckNotFoundError):
        service.start_session("nope")


def test_study_runs_and_persists(service, mock_repo, make_card, make_deck):
    mock_repo.get_deck.return_value = make_deck(make_card(due_in=-1), make_card(due_in=-2))

    result = service.study("d1", lambda card: Rating.EASY)

    mock_repo.save_deck.assert_called_once_with(result)
    assert all(card.interval == pytest.approx(7.5) for card in result.cards)


def test_study_with_nothing_due_saves_unchanged_deck(service, mock_repo, make_card, make_deck):
    deck = make_deck(make_card(due_in=5))
    mock_repo.get_deck.return_value = deck

    assert service.study("d1", lambda card: Rating.GOOD) == deck
    mock_repo.save_deck.assert_called_once_with(deck)
