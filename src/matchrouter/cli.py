"""CLI entry point for matchrouter."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any

import click

from matchrouter import __version__


@click.group()
@click.version_option(version=__version__, prog_name="matchrouter")
def main() -> None:
    """Matchrouter: pattern-matching event router for chat bot updates."""
    pass


@main.command()
@click.argument("first")
@click.argument("second")
@click.option(
    "--case-sensitive",
    is_flag=True,
    help="Compare without lower-casing both strings",
)
def score(first: str, second: str, case_sensitive: bool) -> None:
    """Print edit distance and similarity between two strings."""
    from matchrouter.core.scoring import levenshtein, similarity

    if not case_sensitive:
        first, second = first.lower(), second.lower()

    click.echo(f"distance:   {levenshtein(first, second)}")
    click.echo(f"similarity: {similarity(first, second):.3f}")


@main.command()
@click.option(
    "-c",
    "--config",
    "config_path",
    default=None,
    help="Path to config file (default: ~/.matchrouter/config.yaml)",
)
def extractors(config_path: str | None) -> None:
    """List registered extractors and the event kinds they subscribe to."""
    from matchrouter.config import load_config
    from matchrouter.container import Container

    try:
        config = load_config(config_path)
    except Exception as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(1)

    container = Container.create_default(config)

    for name, descriptor in container.dispatcher.descriptors.items():
        click.echo(f"  {name}: {', '.join(sorted(descriptor.kinds))}")


@main.command()
@click.argument("updates_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-c",
    "--config",
    "config_path",
    default=None,
    help="Path to config file",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose (DEBUG) logging",
)
def replay(updates_file: str, config_path: str | None, verbose: bool) -> None:
    """Run a JSONL file of updates through the configured routes."""
    from matchrouter.adapters.jsonl_source import JsonlUpdateSource
    from matchrouter.config import RouteConfig, load_config
    from matchrouter.container import Container
    from matchrouter.runner import Runner

    try:
        config = load_config(config_path)
    except Exception as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(1)

    _setup_logging(verbose, config.log_level)

    def echo_match(route: RouteConfig) -> Any:
        def handler(event: Any, *values: Any) -> None:
            rendered = ", ".join(repr(v) for v in values)
            click.echo(f"[{route.name}] {route.extractor}: {rendered}")

        return handler

    container = Container.create_default(config)
    try:
        container.apply_routes(echo_match)
    except Exception as e:
        click.echo(f"Error binding routes: {e}", err=True)
        sys.exit(1)

    summary = asyncio.run(Runner(container).run(JsonlUpdateSource(updates_file)))
    click.echo(
        f"Replayed {summary.updates} updates: "
        f"{summary.fired} matches, {summary.errors} errors"
    )
    if summary.errors:
        sys.exit(2)


def _setup_logging(verbose: bool, level_name: str = "INFO") -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )
