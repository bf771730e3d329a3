#!/usr/bin/env python3
"""
Main CLI entry point for routesim.

- ``routesim forward SCRIPT``: populate a forwarding table and route packets
- ``routesim route SCRIPT``: feed routing updates to a distance-vector router

stdout carries only router output; logs and summaries go to stderr.
"""

import sys
from collections.abc import Iterable, Iterator
from typing import IO, Any

import click
from loguru import logger
from rich.console import Console
from rich.table import Table

from routesim.core.commands import run_forwarding_script, run_routing_script
from routesim.core.config import (
    DEFAULT_METRIC_UNREACHABLE,
    DEFAULT_NUM_NICS,
    RouterConfig,
)
from routesim.core.logging import configure_logging
from routesim.core.router import DistanceVectorRouter, ForwardingRouter
from routesim.errors import CommandParseError, ConfigurationError, RoutingError

console = Console(stderr=True)


def _flatten(prefix: str, values: dict[str, Any]) -> Iterator[tuple[str, str]]:
    for key, value in values.items():
        name = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            yield from _flatten(name, value)
        else:
            yield name, str(value)


def display_summary(title: str, snapshot: dict[str, Any]) -> None:
    table = Table(title=title)
    table.add_column("Counter", style="cyan", no_wrap=True)
    table.add_column("Value", justify="right", style="green")
    for name, value in _flatten("", snapshot):
        table.add_row(name, value)
    console.print(table)


def _emit(lines: Iterable[str]) -> None:
    for line in lines:
        click.echo(line)


@click.group()
@click.option(
    "--nics",
    type=click.IntRange(min=1),
    default=DEFAULT_NUM_NICS,
    show_default=True,
    help="Number of router interfaces",
)
@click.option(
    "--unreachable",
    type=click.IntRange(min=1),
    default=DEFAULT_METRIC_UNREACHABLE,
    show_default=True,
    help="Metric value meaning unreachable",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--debug-scope",
    "debug_scopes",
    multiple=True,
    help="Enable DEBUG logs for a module scope (e.g. core.distance_vector)",
)
@click.option("--summary", is_flag=True, help="Print statistics to stderr when done")
@click.pass_context
def cli(
    ctx,
    nics: int,
    unreachable: int,
    verbose: bool,
    debug_scopes: tuple[str, ...],
    summary: bool,
):
    """
    routesim router simulator.

    Drives a longest-prefix-match forwarding router or a distance-vector
    routing router from a line-oriented event script.
    """
    config = RouterConfig(
        num_nics=nics,
        metric_unreachable=unreachable,
        log_level="DEBUG" if verbose else "INFO",
    )
    try:
        configure_logging(config, debug_scopes=debug_scopes)
    except ConfigurationError as e:
        raise click.BadParameter(str(e), param_hint="--debug-scope") from e
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["summary"] = summary


@cli.command()
@click.argument("script", type=click.File("r"))
@click.pass_context
def forward(ctx, script: IO[str]):
    """Run a forwarding script (R/P/S lines)."""
    config: RouterConfig = ctx.obj["config"]
    with ForwardingRouter(config) as router:
        try:
            _emit(run_forwarding_script(router, script))
        except CommandParseError as e:
            raise click.ClickException(str(e)) from e
        logger.info("Forwarding script complete")
        if ctx.obj["summary"]:
            display_summary("Forwarding router", router.stats_snapshot())


@cli.command()
@click.argument("script", type=click.File("r"))
@click.pass_context
def route(ctx, script: IO[str]):
    """Run a routing-update script (U/S lines)."""
    config: RouterConfig = ctx.obj["config"]
    with DistanceVectorRouter(config) as router:
        try:
            _emit(run_routing_script(router, script))
        except CommandParseError as e:
            raise click.ClickException(str(e)) from e
        logger.info("Routing script complete")
        if ctx.obj["summary"]:
            display_summary("Distance-vector router", router.stats_snapshot())


def main():
    """Main CLI entry point."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(1)
    except RoutingError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
