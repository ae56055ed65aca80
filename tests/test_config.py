"""Tests for TOML configuration loading."""

from pathlib import Path

import pytest
import toml

from marketpulse.config import (
    AppConfig,
    FeedSource,
    create_template_config,
    load_config,
    require_telegram,
)
from marketpulse.errors import ConfigError


class TestLoadConfig:

    def test_missing_file_gives_defaults(self, tmp_path: Path):
        config = load_config(tmp_path / "absent.toml", environ={})

        assert config == AppConfig()
        assert config.analysis.symbol == "BTCUSDT"
        assert config.analysis.limit == 220
        assert config.news.max_items == 10
        assert config.intermarket.gold_symbol == "PAXGUSDT"
        assert config.http.timeout == 15.0

    def test_file_values(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text(
            '[analysis]\nsymbol = "ETHUSDT"\nlimit = 300\n\n'
            '[news]\nmax_items = 6\nmin_items = 3\n'
            '[[news.sources]]\nname = "Example"\nurl = "https://example.com/rss"\n'
        )

        config = load_config(path, environ={})

        assert config.analysis.symbol == "ETHUSDT"
        assert config.analysis.limit == 300
        assert config.news.max_items == 6
        assert config.news.sources == [FeedSource(name="Example", url="https://example.com/rss")]

    def test_environment_overrides_file(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text('[telegram]\nbot_token = "file-token"\nchat_id = "1"\n')

        config = load_config(path, environ={"BOT_TOKEN": "env-token", "GOLD_SYMBOL": "XAUTUSDT"})

        assert config.telegram.bot_token == "env-token"
        assert config.telegram.chat_id == "1"
        assert config.intermarket.gold_symbol == "XAUTUSDT"

    def test_invalid_toml(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text("[analysis\nsymbol = ")
        with pytest.raises(ConfigError):
            load_config(path, environ={})

    def test_invalid_values(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text("[analysis]\nlimit = 10\n")
        with pytest.raises(ConfigError, match="Invalid config"):
            load_config(path, environ={})


class TestTelegramCredentials:

    def test_missing_credentials(self):
        with pytest.raises(ConfigError):
            require_telegram(AppConfig())

    def test_present_credentials(self):
        config = AppConfig.model_validate({"telegram": {"bot_token": "t", "chat_id": "c"}})
        assert require_telegram(config).is_configured


class TestTemplateConfig:

    def test_template_round_trips_through_loader(self, tmp_path: Path):
        path = create_template_config(tmp_path / "nested" / "config.toml")

        assert path.exists()
        assert "telegram" in toml.load(path)
        config = load_config(path, environ={})
        assert config.analysis == AppConfig().analysis
        assert config.news.sources == AppConfig().news.sources
