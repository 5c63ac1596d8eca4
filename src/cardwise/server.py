import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel

from cardwise.consts import VERSION
from cardwise.domain.errors import DeckNotFoundError

logger = logging.getLogger("cardwise.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"cardwise server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info("cardwise server shutting down...")


app = FastAPI(
    title="cardwise Server",
    description="Read-only status server for cardwise decks and review activity.",
    version=VERSION,
    lifespan=lifespan,
)

start_time = time.time()


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


class DeckSummaryResponse(BaseModel):
    id: str
    name: str
    total_cards: int
    due_cards: int


class DueCardResponse(BaseModel):
    id: str
    front: str
    next_review: str
    interval: float
    ease_factor: float


class ActivityEntry(BaseModel):
    date: str
    count: int


class StatsResponse(BaseModel):
    total_decks: int
    total_cards: int
    total_reviews: int
    due_cards: int
    activity: list[ActivityEntry]


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


@app.get("/decks", response_model=list[DeckSummaryResponse])
async def list_decks():
    """List decks with card and due counts."""
    from cardwise.application.config import resolve_config
    from cardwise.application.factory import get_study_service

    try:
        summaries = get_study_service(resolve_config()).deck_summaries()
    except Exception as e:
        logger.error(f"Deck listing failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e

    return [
        DeckSummaryResponse(
            id=s.deck_id, name=s.name, total_cards=s.total_cards, due_cards=s.due_cards
        )
        for s in summaries
    ]


@app.get("/decks/{deck_id}/due", response_model=list[DueCardResponse])
async def get_due_cards(deck_id: str):
    """Cards of a deck due now, in review order."""
    from cardwise.application.config import resolve_config
    from cardwise.application.factory import get_deck_repository
    from cardwise.application.review_queue import select_due_cards
    from cardwise.domain.clock import utc_now
    from cardwise.infrastructure.storage.records import format_timestamp

    try:
        deck = get_deck_repository(resolve_config()).get_deck(deck_id)
    except DeckNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except Exception as e:
        logger.error(f"Loading deck {deck_id} failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e

    return [
        DueCardResponse(
            id=card.id,
            front=card.front,
            next_review=format_timestamp(card.next_review),
            interval=card.interval,
            ease_factor=card.ease_factor,
        )
        for card in select_due_cards(deck.cards, utc_now())
    ]


@app.get("/stats", response_model=StatsResponse)
async def get_stats(days: int | None = Query(default=None, ge=1)):
    """Totals plus per-day review counts for the last ``days`` days."""
    from cardwise.application.config import resolve_config
    from cardwise.application.factory import get_stats_service

    try:
        config = resolve_config({"activity_days": days})
        service = get_stats_service(config)
        overview = service.overview()
        activity = service.recent_activity(config.activity_days)
    except Exception as e:
        logger.error(f"Stats failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e

    return StatsResponse(
        total_decks=overview.total_decks,
        total_cards=overview.total_cards,
        total_reviews=overview.total_reviews,
        due_cards=overview.due_cards,
        activity=[
            ActivityEntry(date=entry.day.isoformat(), count=entry.count) for entry in activity
        ],
    )
