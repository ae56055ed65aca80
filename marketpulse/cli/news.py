"""News command for MarketPulse CLI."""

from pathlib import Path
from typing import Optional

import click
from rich.panel import Panel
from rich.text import Text

from marketpulse.cli.common import config_option, fail
from marketpulse.cli.main import console
from marketpulse.config import load_config, require_telegram
from marketpulse.db.store import DataStore
from marketpulse.delivery import TelegramChannel
from marketpulse.errors import MarketPulseError
from marketpulse.news import run_news_job

REASON_MESSAGES = {
    "no_candidates": "No new relevant news since the last digest.",
    "not_enough_relevant": "Not enough relevant news for a digest yet.",
}


@click.command()
@click.option("--dry-run", is_flag=True, help="Render the digest without sending or recording it.")
@config_option
def news(dry_run: bool, config_path: Optional[Path]) -> None:
    """Send the crypto news digest once.

    \b
    Examples:
      marketpulse news
      marketpulse news --dry-run
    """
    try:
        config = load_config(config_path)
        channel = None
        if not dry_run:
            channel = TelegramChannel.from_config(require_telegram(config), config.http.timeout)

        store = DataStore(config.news.db_path)
        with console.status("[bold green]Collecting news..."):
            result = run_news_job(config.news, store, channel, timeout=config.http.timeout)

        if result.sent:
            console.print(f"[green]✓[/green] Digest with {result.count} items sent to Telegram")
        elif result.text:
            console.print(Panel(Text(result.text), title="[bold]Digest preview[/bold]", border_style="blue"))
        else:
            message = REASON_MESSAGES.get(result.reason, result.reason)
            console.print(f"[yellow]⚠[/yellow] {message} ({result.count} candidates)")

    except MarketPulseError as e:
        fail("News Digest Failed", e)
