"""Helpers shared by the CLI commands."""

from pathlib import Path

import click
from rich.markup import escape
from rich.panel import Panel

from marketpulse.cli.main import console

config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.config/marketpulse/config.toml).",
)


def fail(title: str, error: Exception) -> None:
    """Print an error panel and exit with status 1."""
    console.print(Panel(
        f"[red]✗[/red] {escape(str(error))}",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))
    raise SystemExit(1)
