"""docclerk CLI entry point."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

from docclerk import __version__

if TYPE_CHECKING:
    from docclerk.sync.controller import Indexer


def _load_indexer(ctx: click.Context) -> Indexer:
    from docclerk.settings import load_settings
    from docclerk.sync.controller import Indexer

    try:
        settings = load_settings(ctx.obj["config"])
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)
    return Indexer(settings)


@click.group()
@click.version_option(version=__version__, prog_name="docclerk")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output (errors only).")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Settings file (default: ./docclerk.yml).",
)
@click.pass_context
def main(ctx: click.Context, *, verbose: bool, quiet: bool, config_path: Path | None) -> None:
    """docclerk - documentation index builder."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config"] = config_path

    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


@main.command()
@click.option(
    "--static",
    "publish_static",
    is_flag=True,
    default=False,
    help="Also publish the static location index to config/index.json.",
)
@click.pass_context
def build(ctx: click.Context, *, publish_static: bool) -> None:
    """Rebuild the index from the docs on disk."""
    indexer = _load_indexer(ctx)

    result = asyncio.run(indexer.build())
    indexer.write(local_index=result.temp)
    if publish_static:
        indexer.write(result.static, static=True)

    if not ctx.obj["quiet"]:
        stats = indexer.store.stats()
        click.echo(f"Temp:    {len(result.temp.children)} librar(ies)")
        click.echo(f"Static:  {len(result.static.children)} librar(ies)")
        click.echo(f"Remote:  {stats['remote']} librar(ies)")
        click.echo(f"Merged:  {stats['merged']} librar(ies)")


@main.command()
@click.option("--force", is_flag=True, default=False, help="Fetch even if the index is fresh.")
@click.pass_context
def update(ctx: click.Context, *, force: bool) -> None:
    """Check the remote for a newer index and rebuild."""
    from rich.console import Console
    from rich.markup import escape

    from docclerk.errors import ParseError, RemoteError
    from docclerk.sync.remote import describe_remote_error

    indexer = _load_indexer(ctx)
    console = Console(stderr=True)

    try:
        result = asyncio.run(indexer.update(force=force))
    except (RemoteError, ParseError) as exc:
        message = describe_remote_error(exc, indexer.paths.remote_config)
        console.print(f"[yellow]{escape(message)}[/yellow]", highlight=False)
        sys.exit(1)

    if ctx.obj["quiet"]:
        return
    click.echo(result.message)
    if result.fetched:
        click.echo(f"Fetched: {', '.join(result.fetched)}")
    if result.rebuilt:
        click.echo("Rebuilt local index.")


@main.command()
@click.argument("lib", required=False)
@click.pass_context
def show(ctx: click.Context, lib: str | None) -> None:
    """Print the merged index, or one library, as JSON."""
    indexer = _load_indexer(ctx)

    index = indexer.index()
    if lib is not None:
        node = index.get(lib)
        if node is None:
            click.echo(f"Error: library '{lib}' not found in index.", err=True)
            sys.exit(1)
        index = node
    click.echo(json.dumps(index.to_dict(), indent=2, ensure_ascii=False))
