"""MarketPulse - market-structure analysis and Telegram reporting worker."""
