"""cardwise CLI - deck listing, interactive review, stats and config."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer

from cardwise.application.config import AppConfig, resolve_config
from cardwise.domain.errors import CardwiseError, InvalidRatingError
from cardwise.domain.models import Rating

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="cardwise: Spaced-repetition flashcard review.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage cardwise configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]

# Keys accepted at the rating prompt, besides the rating names.
RATING_KEYS = {
    "1": Rating.AGAIN,
    "2": Rating.HARD,
    "3": Rating.GOOD,
    "4": Rating.EASY,
}
QUIT_KEYS = {"q", "quit"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _config(ctx: typer.Context, **overrides: Any) -> AppConfig:
    obj = ctx.obj or {}
    return resolve_config({"data_dir": obj.get("data_dir"), **overrides})


def parse_rating(answer: str) -> Rating:
    """Parse prompt input: 1-4 or a rating name."""
    key = answer.strip().lower()
    if key in RATING_KEYS:
        return RATING_KEYS[key]
    return Rating.from_name(key)


def _fail(error: CardwiseError) -> NoReturn:
    typer.secho(f"Error: {error}", fg="red", err=True)
    raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
    data_dir: Annotated[
        Path | None, typer.Option(help="Directory holding decks and review logs.")
    ] = None,
):
    """Global settings for cardwise."""
    ctx.ensure_object(dict)
    ctx.obj["data_dir"] = data_dir
    logging.getLogger().setLevel(LOG_LEVELS[min(verbose, len(LOG_LEVELS) - 1)])


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command("decks")
def decks(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List decks with their card and due counts."""
    from cardwise.application.factory import get_study_service

    summaries = get_study_service(_config(ctx)).deck_summaries()

    if json_output:
        typer.echo(
            json.dumps(
                [
                    {
                        "id": s.deck_id,
                        "name": s.name,
                        "cards": s.total_cards,
                        "due": s.due_cards,
                    }
                    for s in summaries
                ],
                indent=2,
            )
        )
        return

    if not summaries:
        typer.secho("No decks found.", fg="yellow")
        return

    for s in summaries:
        color = "green" if s.due_cards else None
        typer.secho(
            f"{s.deck_id}  {s.name}  ({s.total_cards} cards, {s.due_cards} due)", fg=color
        )


@app.command("review")
def review(
    ctx: typer.Context,
    deck_id: Annotated[str, typer.Argument(help="Id of the deck to study.")],
):
    """[bold green]Review[/bold green] the cards of a deck that are due now."""
    from cardwise.application.factory import get_study_service

    service = get_study_service(_config(ctx))
    try:
        session = service.start_session(deck_id)
    except CardwiseError as e:
        _fail(e)

    if session.is_complete:
        typer.secho("No cards due in this deck. Come back later!", fg="yellow")
        return

    while not session.is_complete:
        card = session.current_card
        typer.echo(f"\n[{session.position + 1} / {session.due_count}]")
        typer.secho(card.front, bold=True)
        answer = typer.prompt("Press Enter to show the answer", default="", show_default=False)
        if answer.strip().lower() in QUIT_KEYS:
            _abandon()

        typer.echo(session.reveal().back)
        while True:
            answer = typer.prompt("Rate (1) again (2) hard (3) good (4) easy, q to quit")
            if answer.strip().lower() in QUIT_KEYS:
                _abandon()
            try:
                rating = parse_rating(answer)
            except InvalidRatingError:
                typer.secho(f"Unknown rating '{answer}'.", fg="yellow")
                continue
            break
        try:
            session.rate(rating)
        except CardwiseError as e:
            _fail(e)

    try:
        service.finish_session(session)
    except CardwiseError as e:
        _fail(e)
    typer.secho(
        f"\nCongratulations! You've finished all {session.reviewed_count} due cards.",
        fg="green",
    )


def _abandon() -> NoReturn:
    typer.secho("Session abandoned; no changes saved.", fg="yellow")
    raise typer.Exit(0)


@app.command("stats")
def stats(
    ctx: typer.Context,
    days: Annotated[
        int | None, typer.Option(min=1, help="Days of review activity to show.")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show totals and recent review activity."""
    from cardwise.application.factory import get_stats_service

    config = _config(ctx, activity_days=days)
    service = get_stats_service(config)
    overview = service.overview()
    activity = service.recent_activity(config.activity_days)

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "total_decks": overview.total_decks,
                    "total_cards": overview.total_cards,
                    "total_reviews": overview.total_reviews,
                    "due_cards": overview.due_cards,
                    "activity": [
                        {"date": entry.day.isoformat(), "count": entry.count}
                        for entry in activity
                    ],
                },
                indent=2,
            )
        )
        return

    typer.echo(
        f"Decks: {overview.total_decks}  Cards: {overview.total_cards}"
        f"  Reviews: {overview.total_reviews}  Due: {overview.due_cards}"
    )
    typer.echo(f"\nReviews, last {len(activity)} days:")
    peak = max((entry.count for entry in activity), default=0)
    for entry in activity:
        bar = "#" * round(20 * entry.count / peak) if peak else ""
        typer.echo(f"  {entry.day:%a %Y-%m-%d}  {entry.count:>4}  {bar}")


@app.command("serve")
def serve(
    ctx: typer.Context,
    host: Annotated[str | None, typer.Option(help="Host to bind the server to.")] = None,
    port: Annotated[int | None, typer.Option(help="Port to bind the server to.")] = None,
    reload: Annotated[bool, typer.Option(help="Enable auto-reload.")] = False,
):
    """Start the read-only HTTP status server."""
    import os

    import uvicorn

    config = _config(ctx, server_host=host, server_port=port)
    # The server resolves its own config; pass the data directory through the env.
    os.environ["CARDWISE_DATA_DIR"] = str(config.data_dir)
    uvicorn.run(
        "cardwise.server:app", host=config.server_host, port=config.server_port, reload=reload
    )


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _config(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
