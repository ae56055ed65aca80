"""Intermarket command for MarketPulse CLI."""

from pathlib import Path
from typing import Optional

import click
from rich.panel import Panel
from rich.text import Text

from marketpulse.cli.common import config_option, fail
from marketpulse.cli.main import console
from marketpulse.config import load_config, require_telegram
from marketpulse.delivery import TelegramChannel
from marketpulse.errors import MarketPulseError
from marketpulse.intermarket import run_intermarket_job
from marketpulse.providers import BinanceProvider


@click.command()
@click.option("--dry-run", is_flag=True, help="Render the post without sending it.")
@config_option
def intermarket(dry_run: bool, config_path: Optional[Path]) -> None:
    """Send the BTC vs. gold intermarket flow post once."""
    try:
        config = load_config(config_path)
        channel = None
        if not dry_run:
            channel = TelegramChannel.from_config(require_telegram(config), config.http.timeout)

        provider = BinanceProvider(timeout=config.http.timeout)
        with console.status("[bold green]Collecting intermarket data..."):
            result = run_intermarket_job(
                config.intermarket,
                provider,
                channel,
                session=provider.session,
                timeout=config.http.timeout,
            )

        if result.sent:
            console.print("[green]✓[/green] Intermarket post sent to Telegram")
        else:
            console.print(Panel(Text(result.text), title="[bold]Intermarket preview[/bold]", border_style="blue"))

    except MarketPulseError as e:
        fail("Intermarket Failed", e)
