from __future__ import annotations

"""Command line for searching Board Game Atlas by game name."""

import json

import click
import requests

from bgatlas import __version__
from bgatlas.api_clients import BoardgameAtlasError, SearchResult, new_client
from bgatlas.config import DEFAULT_LIMIT, DEFAULT_SKIP, DEFAULT_TIMEOUT, ConfigError, SearchConfig
from bgatlas.utils import log_json
from bgatlas.utils.deadline import Deadline


def _label(text: str) -> str:
    return click.style(text, fg="bright_green", bold=True)


def render_text(result: SearchResult) -> str:
    """Three labelled lines per game, each game followed by a blank line."""
    lines: list[str] = []
    for game in result.games:
        lines.append(f"{_label('Name')}: {game.name}")
        lines.append(f"{_label('Description')}: {game.description}")
        lines.append(f"{_label('Url')}: {game.url}")
        lines.append("")
    return "\n".join(lines)


def render_json(result: SearchResult) -> str:
    return json.dumps(result.to_dict(), ensure_ascii=False, indent=2)


def run_search(config: SearchConfig, *, session: requests.Session | None = None) -> SearchResult:
    """Execute one search bounded by ``config.timeout`` seconds."""
    client = new_client(config.client_id, session=session)
    with Deadline(config.timeout) as deadline:
        return client.search(config.query, config.limit, config.skip, deadline=deadline)


@click.command()
@click.version_option(__version__)
@click.option("--query", default="", help="Boardgame name to search.")
@click.option("--clientId", "--client-id", "client_id", default="", help="Boardgame Atlas client_id.")
@click.option(
    "--limit",
    type=click.IntRange(min=0),
    default=DEFAULT_LIMIT,
    show_default=True,
    help="Limits the number of results returned.",
)
@click.option(
    "--skip",
    type=click.IntRange(min=0),
    default=DEFAULT_SKIP,
    show_default=True,
    help="Skips the number of results provided.",
)
@click.option(
    "--timeout",
    type=click.IntRange(min=0),
    default=DEFAULT_TIMEOUT,
    show_default=True,
    help="Request timeout in seconds.",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print results as JSON.")
@click.option("--color/--no-color", default=None, help="Force or disable styled labels.")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Level for structured logs written to stderr.",
)
def cli(
    query: str,
    client_id: str,
    limit: int,
    skip: int,
    timeout: int,
    as_json: bool,
    color: bool | None,
    log_level: str,
) -> None:
    """Search Board Game Atlas and print the matching games."""
    log_json.configure(log_level)
    try:
        config = SearchConfig.from_options(
            query=query, client_id=client_id, limit=limit, skip=skip, timeout=timeout
        )
    except ConfigError as exc:
        raise click.ClickException(str(exc))

    try:
        result = run_search(config)
    except BoardgameAtlasError as exc:
        raise click.ClickException(f"Cannot search for boardgame: {exc}")

    if as_json:
        click.echo(render_json(result))
    elif result.games:
        click.echo(render_text(result), color=color)


def main() -> None:  # pragma: no cover - CLI entrypoint
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
