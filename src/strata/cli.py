import asyncio
from typing import Any

import click
import httpx
from rich.console import Console
from rich.table import Table

from strata.clients.http import HttpFeedClient
from strata.core.config import FetchConfig
from strata.core.models import StreamQueryBatch
from strata.core.streams import DataStream
from strata.sources.jsonl import JsonlSource

console = Console()

MAX_COLUMNS = 8


def _render_batch(batch: StreamQueryBatch[dict[str, Any]], key_field: str, next_position: Any) -> None:
    columns: list[str] = [key_field]
    for item in batch.items:
        for name in item:
            if name not in columns and len(columns) < MAX_COLUMNS:
                columns.append(name)

    table = Table(title=f"{len(batch)} item(s) after {batch.cursor_position!r}")
    for name in columns:
        table.add_column(name, style="bold" if name == key_field else None)
    for item in batch.items:
        table.add_row(*("" if item.get(c) is None else str(item.get(c)) for c in columns))

    console.print(table)
    console.print(f"[bold]next cursor[/]: {next_position!r}")


async def _fetch_once(stream: DataStream[dict[str, Any]], cursor: Any, config: FetchConfig) -> None:
    query = stream.create_query(cursor, config.limit)
    batch = await query.next_batch()
    if not batch:
        console.print(f"[yellow]no items[/] after {batch.cursor_position!r}")
        return
    _render_batch(batch, config.key_field, query.cursor.position)


def _common_options(f):
    f = click.option("--limit", type=int, default=None, help="Max items to fetch (default: all)")(f)
    f = click.option("--after", type=str, default=None, help="Cursor position to resume after")(f)
    f = click.option("--key", "key_field", required=True, help="Item field holding the ordering key")(f)
    return f


@click.group()
def cli() -> None:
    """strata — resumable data streams, one batch at a time."""


@cli.command("fetch-file")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@_common_options
@click.option("--int-key/--str-key", default=False, show_default=True, help="Compare keys as integers")
def fetch_file_cmd(path: str, key_field: str, after: str | None, limit: int | None, int_key: bool) -> None:
    """Fetch one batch from an ordered JSONL file."""
    try:
        config = FetchConfig(source=path, key_field=key_field, after=after, limit=limit, int_key=int_key)
        source = JsonlSource(config.source, config.key_field, int_key=config.int_key)
        stream = source.stream(id=config.source)
        asyncio.run(_fetch_once(stream, source.new_cursor(config.start_position()), config))
    except (ValueError, OSError) as e:
        raise click.ClickException(str(e)) from e


@cli.command("fetch-url")
@click.argument("url")
@_common_options
@click.option("--int-key/--str-key", default=False, show_default=True, help="Compare keys as integers")
@click.option("--timeout", "timeout_s", type=int, default=20, show_default=True, help="Request timeout (s)")
def fetch_url_cmd(
    url: str,
    key_field: str,
    after: str | None,
    limit: int | None,
    int_key: bool,
    timeout_s: int,
) -> None:
    """Fetch one batch from a cursor-paginated JSON feed."""

    async def run(config: FetchConfig) -> None:
        async with HttpFeedClient(
            config.source,
            config.key_field,
            int_key=config.int_key,
            timeout_s=config.timeout_s,
        ) as client:
            stream = client.stream(id=config.source)
            await _fetch_once(stream, client.new_cursor(config.start_position()), config)

    try:
        config = FetchConfig(
            source=url, key_field=key_field, after=after, limit=limit, int_key=int_key, timeout_s=timeout_s
        )
        asyncio.run(run(config))
    except (ValueError, httpx.HTTPError) as e:
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":
    cli()
