"""Configuration for MarketPulse.

Settings live in a TOML file (``~/.config/marketpulse/config.toml`` by
default) and are validated into a frozen AppConfig. Jobs receive the config
object explicitly; only ``load_config`` looks at the process environment.
"""

import os
from pathlib import Path
from typing import Mapping, Optional

import toml
from pydantic import BaseModel, Field, ValidationError

from marketpulse.errors import ConfigError

CONFIG_DIR = Path.home() / ".config" / "marketpulse"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.toml"
DEFAULT_DB_PATH = CONFIG_DIR / "marketpulse.db"

DEFAULT_KEYWORDS = [
    "bitcoin", "btc", "ethereum", "eth", "solana", "sol", "xrp", "bnb", "doge",
    "crypto", "cryptocurrency", "etf", "sec", "fed", "binance", "coinbase",
    "hack", "exploit", "airdrop", "on-chain", "onchain", "layer 2", "l2",
    "gold", "xau", "paxg", "inflation", "rate",
]


class FeedSource(BaseModel):
    """An RSS/Atom feed to poll."""

    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)

    model_config = {"frozen": True}


DEFAULT_SOURCES = [
    FeedSource(name="CoinDesk", url="https://www.coindesk.com/arc/outboundfeeds/rss/"),
    FeedSource(name="CoinTelegraph", url="https://cointelegraph.com/rss"),
    FeedSource(name="Decrypt", url="https://decrypt.co/feed"),
]


class TelegramConfig(BaseModel):
    bot_token: str = Field(default="", description="Bot API token")
    chat_id: str = Field(default="", description="Target chat or channel id")

    model_config = {"frozen": True}

    @property
    def is_configured(self) -> bool:
        return bool(self.bot_token and self.chat_id)


class AnalysisConfig(BaseModel):
    symbol: str = Field(default="BTCUSDT", min_length=1)
    daily_interval: str = Field(default="1d")
    h4_interval: str = Field(default="4h")
    limit: int = Field(default=220, ge=60, le=1000, description="Candles fetched per series")
    timezone: str = Field(default="Asia/Ho_Chi_Minh")

    model_config = {"frozen": True}


class NewsConfig(BaseModel):
    max_items: int = Field(default=10, ge=1)
    min_items: int = Field(default=5, ge=1)
    translate: bool = Field(default=True)
    target_language: str = Field(default="vi")
    keywords: list[str] = Field(default_factory=lambda: list(DEFAULT_KEYWORDS))
    sources: list[FeedSource] = Field(default_factory=lambda: list(DEFAULT_SOURCES))
    db_path: Path = Field(default=DEFAULT_DB_PATH)

    model_config = {"frozen": True}


class IntermarketConfig(BaseModel):
    btc_symbol: str = Field(default="BTCUSDT", min_length=1)
    gold_symbol: str = Field(default="PAXGUSDT", min_length=1)
    silver_symbol: Optional[str] = Field(default=None)

    model_config = {"frozen": True}


class HttpConfig(BaseModel):
    timeout: float = Field(default=15.0, gt=0)

    model_config = {"frozen": True}


class AppConfig(BaseModel):
    """Complete application configuration."""

    telegram: TelegramConfig = Field(default_factory=TelegramConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    news: NewsConfig = Field(default_factory=NewsConfig)
    intermarket: IntermarketConfig = Field(default_factory=IntermarketConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)

    model_config = {"frozen": True}


# Environment variable -> (section, key)
ENV_OVERRIDES = {
    "BOT_TOKEN": ("telegram", "bot_token"),
    "CHAT_ID": ("telegram", "chat_id"),
    "TA_SYMBOL": ("analysis", "symbol"),
    "BTC_SPOT_SYMBOL": ("intermarket", "btc_symbol"),
    "GOLD_SYMBOL": ("intermarket", "gold_symbol"),
    "SILVER_SYMBOL": ("intermarket", "silver_symbol"),
}


def load_config(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """Load configuration from TOML, then apply environment overrides.

    A missing file yields the defaults.

    Args:
        path: Config file path (default ``~/.config/marketpulse/config.toml``).
        environ: Environment mapping (default ``os.environ``).

    Returns:
        Validated AppConfig.

    Raises:
        ConfigError: If the file cannot be parsed or fails validation.
    """
    path = path or DEFAULT_CONFIG_PATH
    environ = os.environ if environ is None else environ

    data: dict = {}
    if path.exists():
        try:
            data = toml.load(path)
        except (toml.TomlDecodeError, OSError) as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e

    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value:
            data.setdefault(section, {})[key] = value

    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e


def require_telegram(config: AppConfig) -> TelegramConfig:
    """Return Telegram settings, raising ConfigError if credentials are missing."""
    if not config.telegram.is_configured:
        raise ConfigError(
            "Missing Telegram credentials: set [telegram] bot_token/chat_id "
            "or the BOT_TOKEN/CHAT_ID environment variables"
        )
    return config.telegram


def create_template_config(path: Optional[Path] = None) -> Path:
    """Write a template configuration file and return its path."""
    path = path or DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    template = {
        "telegram": {
            "bot_token": "",  # Leave empty to use BOT_TOKEN env var
            "chat_id": "",  # Leave empty to use CHAT_ID env var
        },
        "analysis": AnalysisConfig().model_dump(),
        "news": {
            "max_items": 10,
            "min_items": 5,
            "translate": True,
            "target_language": "vi",
            "db_path": str(DEFAULT_DB_PATH),
            "sources": [s.model_dump() for s in DEFAULT_SOURCES],
        },
        "intermarket": {
            "btc_symbol": "BTCUSDT",
            "gold_symbol": "PAXGUSDT",
        },
        "http": HttpConfig().model_dump(),
    }

    with open(path, "w") as f:
        toml.dump(template, f)

    return path
