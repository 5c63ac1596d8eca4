"""
Storage Factory
Centralizes the wiring of concrete adapters behind the domain ports.
"""

from cardwise.application.config import AppConfig
from cardwise.application.stats import StatsService
from cardwise.application.study_service import StudyService
from cardwise.domain.ports import DeckRepository, ReviewLogRepository
from cardwise.infrastructure.storage import JsonDeckRepository, JsonFileStore, JsonReviewLog


def get_store(config: AppConfig) -> JsonFileStore:
    return JsonFileStore(config.data_dir)


def get_deck_repository(config: AppConfig) -> DeckRepository:
    return JsonDeckRepository(get_store(config))


def get_review_log(config: AppConfig) -> ReviewLogRepository:
    return JsonReviewLog(get_store(config))


def get_study_service(config: AppConfig) -> StudyService:
    """Returns a StudyService sharing one store between decks and the review log."""
    store = get_store(config)
    return StudyService(decks=JsonDeckRepository(store), recorder=JsonReviewLog(store))


def get_stats_service(config: AppConfig) -> StatsService:
    store = get_store(config)
    return StatsService(decks=JsonDeckRepository(store), review_log=JsonReviewLog(store))
