"""Init command for MarketPulse CLI."""

from pathlib import Path
from typing import Optional

import click
from rich.panel import Panel

from marketpulse.cli.main import console
from marketpulse.config import DEFAULT_CONFIG_PATH, create_template_config


@click.command()
@click.option("--force", is_flag=True, help="Overwrite an existing config file.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Where to write the config (default: ~/.config/marketpulse/config.toml).",
)
def init(force: bool, config_path: Optional[Path]) -> None:
    """Write a template configuration file."""
    path = config_path or DEFAULT_CONFIG_PATH

    if path.exists() and not force:
        console.print(Panel(
            f"[yellow]⚠[/yellow] Config already exists at {path}\n\n"
            "[dim]Use --force to overwrite it.[/dim]",
            title="[bold yellow]Nothing Written[/bold yellow]",
            border_style="yellow",
        ))
        raise SystemExit(1)

    create_template_config(path)
    console.print(Panel(
        f"[green]✓[/green] Config written to {path}\n\n"
        "[dim]Fill in \\[telegram] bot_token and chat_id, or set the\n"
        "BOT_TOKEN and CHAT_ID environment variables.[/dim]",
        title="[bold green]Config Created[/bold green]",
        border_style="green",
    ))
