"""Analyze command for MarketPulse CLI.

Fetches daily and 4-hour candles, builds the technical-analysis report
and optionally delivers it to Telegram.
"""

from pathlib import Path
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from marketpulse.analysis import run_analysis
from marketpulse.cli.common import config_option, fail
from marketpulse.cli.main import console
from marketpulse.config import load_config, require_telegram
from marketpulse.delivery import TelegramChannel
from marketpulse.errors import MarketPulseError
from marketpulse.models import MarketState, Report, Trend
from marketpulse.providers import BinanceProvider
from marketpulse.render import fmt_price, render_report

TREND_COLORS = {
    Trend.UP: "green",
    Trend.DOWN: "red",
    Trend.SIDEWAYS: "yellow",
}

STATE_COLORS = {
    MarketState.BREAKOUT: "green",
    MarketState.ACCUMULATION: "cyan",
    MarketState.BREAKDOWN: "red",
    MarketState.DISTRIBUTION: "magenta",
    MarketState.NEUTRAL: "white",
}


def _report_table(report: Report) -> Table:
    """Build a rich table summarizing the report."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    trend_color = TREND_COLORS[report.trend]
    state_color = STATE_COLORS[report.state.state]

    table.add_row("Trend (1D)", f"[{trend_color}]{report.trend.value}[/{trend_color}]")
    table.add_row("H4 confirmation", report.h4_trend.value)
    table.add_row("Close", fmt_price(report.daily.close))
    table.add_row("EMA20 / EMA50", f"{fmt_price(report.daily.ema20)} / {fmt_price(report.daily.ema50)}")
    table.add_row("RSI(14)", f"{report.daily.rsi14:.1f} ({report.momentum.value})")
    table.add_row("Score", f"{report.score:.1f}/10")
    table.add_row("State", f"[{state_color}]{report.state.state.value}[/{state_color}]")
    table.add_row(
        "Resistance",
        " / ".join(fmt_price(level) for level in report.bands.resistance),
    )
    table.add_row(
        "Support",
        " / ".join(fmt_price(level) for level in report.bands.support),
    )
    table.add_row("ATR(14)", fmt_price(report.volatility))
    return table


@click.command()
@click.argument("symbol", required=False)
@click.option("--send", is_flag=True, help="Deliver the report to Telegram.")
@config_option
def analyze(symbol: Optional[str], send: bool, config_path: Optional[Path]) -> None:
    """Build the daily technical-analysis report.

    SYMBOL defaults to [analysis] symbol in the config (BTCUSDT).

    \b
    Examples:
      marketpulse analyze
      marketpulse analyze ETHUSDT
      marketpulse analyze BTCUSDT --send
    """
    try:
        config = load_config(config_path)
        settings = config.analysis
        symbol = (symbol or settings.symbol).upper()

        channel = None
        if send:
            channel = TelegramChannel.from_config(require_telegram(config), config.http.timeout)

        provider = BinanceProvider(timeout=config.http.timeout)
        with console.status(f"[bold green]Fetching {symbol} candles..."):
            daily = provider.get_series(symbol, settings.daily_interval, settings.limit)
            h4 = provider.get_series(symbol, settings.h4_interval, settings.limit)

        report = run_analysis(daily, h4, settings)

        console.print(Panel(
            _report_table(report),
            title=f"[bold]{symbol} - Technical Analysis[/bold]",
            subtitle=f"[dim]{report.state.rationale}[/dim]",
            border_style="blue",
        ))

        if channel is not None:
            channel.send(render_report(report))
            console.print("[green]✓[/green] Report sent to Telegram")

    except MarketPulseError as e:
        fail("Analysis Failed", e)
