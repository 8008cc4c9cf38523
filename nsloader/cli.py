"""nsloader CLI - inspect namespace mappings and class resolution."""

from __future__ import annotations

import logging
import sys

import click
from rich.console import Console
from rich.table import Table

from nsloader.config import load_config
from nsloader.resolver import ClassResolver


def _build_resolver(config_path: str) -> ClassResolver:
    try:
        return ClassResolver.from_config(load_config(config_path))
    except ValueError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option("--verbose", is_flag=True, help="Log every registration and probe")
def cli(verbose: bool) -> None:
    """nsloader - resolve class names to files by namespace prefix."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)


@cli.command("mappings")
@click.option("-c", "--config", "config_path", required=True,
              type=click.Path(exists=True, dir_okay=False), help="JSON loader configuration")
def mappings_cmd(config_path: str) -> None:
    """List the registered namespace prefixes."""
    resolver = _build_resolver(config_path)

    table = Table(title="Namespace Mappings", show_edge=False)
    table.add_column("Prefix", style="bold")
    table.add_column("Directory")
    table.add_column("Extension", justify="right")
    for mapping in resolver.registry.mappings():
        table.add_row(mapping.prefix, mapping.directory, mapping.extension)

    Console().print(table)


@cli.command("probe")
@click.argument("name")
@click.option("-c", "--config", "config_path", required=True,
              type=click.Path(exists=True, dir_okay=False), help="JSON loader configuration")
def probe_cmd(name: str, config_path: str) -> None:
    """Show the files probed for NAME, in order, without loading any."""
    resolver = _build_resolver(config_path)
    console = Console()
    plan = resolver.candidates(name)

    if not plan:
        console.print(f"[yellow]No registered prefix matches[/yellow] {name}")
        sys.exit(1)

    table = Table(title=f"Probe plan: {name}", show_edge=False)
    table.add_column("#", justify="right")
    table.add_column("Prefix", style="bold")
    table.add_column("Class")
    table.add_column("Path")
    table.add_column("Found", justify="center")

    found = None
    for i, candidate in enumerate(plan, start=1):
        exists = resolver.file_loader.exists(candidate.path)
        if exists and found is None:
            found = candidate.path
        table.add_row(
            str(i), candidate.prefix, candidate.relative_class, candidate.path,
            "[green]yes[/green]" if exists else "-",
        )
    console.print(table)

    if found is None:
        console.print(f"[red]Not found:[/red] {name}")
        sys.exit(1)
    console.print(f"[green]Resolves to:[/green] {found}")


if __name__ == "__main__":
    cli()
