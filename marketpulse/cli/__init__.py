"""CLI commands for MarketPulse.

Each command runs a single job: the TA report, the news digest or the
intermarket flow post.
"""

from marketpulse.cli.main import cli, main

__all__ = ["cli", "main"]
