"""CLI commands for the home feed."""

import json
import logging
import sys
import uuid
from pathlib import Path

import click
import structlog

from src.cursor.codec import decode_cursor
from src.feed.orchestrator import FeedOrchestrator
from src.observability.logging import bind_request_context, configure_logging
from src.settings import FeedSettings, get_settings
from src.store.errors import FixtureLoadError
from src.store.memory import InMemoryFeedStore, load_fixture


logger = structlog.get_logger()

COMPONENT_CLI = "cli"


def _load_store(
    fixture_path: Path | None, settings: FeedSettings
) -> InMemoryFeedStore:
    """Load the fixture store or exit with an error.

    Args:
        fixture_path: Fixture given on the command line.
        settings: Settings providing the fallback ``fixture_path``.

    Returns:
        Populated store.
    """
    path = fixture_path or settings.fixture_path
    if path is None:
        click.echo("No fixture given (use --fixture or FEED_FIXTURE_PATH).", err=True)
        sys.exit(2)
    try:
        return load_fixture(path)
    except FixtureLoadError as e:
        click.echo(f"Failed to load fixture: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version="0.1.0")
def cli() -> None:
    """Home feed aggregation CLI."""


@cli.command()
@click.option(
    "--fixture",
    "fixture_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML or JSON fixture with threads, news and match data.",
)
@click.option(
    "--filter",
    "feed_filter",
    type=str,
    default="all",
    help="Content filter: all, threads, news, lol or status (default: all).",
)
@click.option(
    "--limit",
    type=str,
    default=None,
    help="Page size, clamped to the configured bounds (default: 20).",
)
@click.option(
    "--page",
    type=str,
    default="1",
    help="1-based page number (default: 1).",
)
@click.option(
    "--cursor",
    type=str,
    default=None,
    help="Cursor token returned by the previous page.",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=None,
    help="Use JSON format for logs (default: FEED_JSON_LOGS, true).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
def page(  # noqa: PLR0913
    fixture_path: Path | None,
    feed_filter: str,
    limit: str | None,
    page: str,
    cursor: str | None,
    json_logs: bool | None,
    verbose: bool,
) -> None:
    """Render one feed page from a fixture file and print it as JSON.

    Logs go to stderr; the page body goes to stdout. Exits non-zero when
    the page could not be served.
    """
    request_id = str(uuid.uuid4())
    settings = get_settings()
    configure_logging(
        level=logging.DEBUG if verbose else logging.INFO,
        json_format=settings.json_logs if json_logs is None else json_logs,
    )
    bind_request_context(request_id)

    store = _load_store(fixture_path, settings)

    log = logger.bind(component=COMPONENT_CLI, command="page")
    log.info("cli_page_started", filter=feed_filter, page=page, limit=limit)

    orchestrator = FeedOrchestrator(store, settings=settings, request_id=request_id)
    status_code, body = orchestrator.handle(
        {"page": page, "limit": limit, "cursor": cursor, "filter": feed_filter}
    )
    click.echo(json.dumps(body, indent=2, ensure_ascii=False))
    if status_code != 200:  # noqa: PLR2004
        sys.exit(1)


@cli.command("decode-cursor")
@click.argument("token")
def decode_cursor_command(token: str) -> None:
    """Print the watermarks held by a cursor token."""
    configure_logging(json_format=get_settings().json_logs)
    cursor = decode_cursor(token)
    if cursor is None:
        click.echo("Invalid cursor token.", err=True)
        sys.exit(1)

    click.echo(json.dumps(cursor.model_dump(by_alias=True), indent=2))


@cli.command()
@click.option(
    "--fixture",
    "fixture_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML or JSON fixture to serve.",
)
@click.option("--host", default="127.0.0.1", help="Bind address.")
@click.option("--port", type=int, default=8000, help="Bind port.")
@click.option(
    "--json-logs/--no-json-logs",
    default=None,
    help="Use JSON format for logs (default: FEED_JSON_LOGS, true).",
)
def serve(
    fixture_path: Path | None, host: str, port: int, json_logs: bool | None
) -> None:
    """Serve the feed API over HTTP from a fixture file."""
    import uvicorn

    from src.api.app import create_app

    settings = get_settings()
    configure_logging(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        json_format=settings.json_logs if json_logs is None else json_logs,
    )
    store = _load_store(fixture_path, settings)

    logger.info("cli_serve_started", component=COMPONENT_CLI, host=host, port=port)
    uvicorn.run(create_app(store, settings), host=host, port=port)


if __name__ == "__main__":
    cli()
