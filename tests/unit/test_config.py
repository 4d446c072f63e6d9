"""Tests for env-driven faultline settings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from faultline.config import FaultlineSettings
from faultline.models.routing import ChannelSinkConfig, FileSinkConfig, WebhookSinkConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "FAULTLINE_BOT_TOKEN",
        "FAULTLINE_CHANNEL_ID",
        "FAULTLINE_WEBHOOK_URL",
        "FAULTLINE_WEBHOOK_TOKEN",
        "FAULTLINE_FILE_PATH",
        "FAULTLINE_ENVIRONMENT",
    ):
        monkeypatch.delenv(name, raising=False)


class TestFaultlineSettings:
    def test_defaults(self):
        settings = FaultlineSettings(_env_file=None)
        assert settings.environment == "development"
        assert settings.max_message_length == 2000
        assert settings.concurrent_delivery is False
        assert settings.sink_configs() == []

    def test_is_production_when_set(self):
        assert FaultlineSettings(_env_file=None, environment="production").is_production

    def test_reads_environment(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("FAULTLINE_WEBHOOK_URL", "https://discord.com/api/webhooks/1/abc")
        monkeypatch.setenv("FAULTLINE_FILE_PATH", str(tmp_path / "errors.log"))
        settings = FaultlineSettings(_env_file=None)

        configs = settings.sink_configs()

        assert [type(c) for c in configs] == [WebhookSinkConfig, FileSinkConfig]
        assert configs[1].path == tmp_path / "errors.log"

    def test_sink_order_is_channel_webhook_file(self, tmp_path: Path):
        settings = FaultlineSettings(
            _env_file=None,
            file_path=tmp_path / "e.log",
            webhook_url="https://example.com/hook",
            bot_token="tok",
            channel_id="9",
        )
        assert [type(c) for c in settings.sink_configs()] == [
            ChannelSinkConfig,
            WebhookSinkConfig,
            FileSinkConfig,
        ]

    def test_empty_webhook_token_ignored(self):
        settings = FaultlineSettings(
            _env_file=None, webhook_url="https://example.com/hook", webhook_token=""
        )
        (config,) = settings.sink_configs()
        assert config.token is None

    def test_half_configured_channel_fails_fast(self):
        settings = FaultlineSettings(_env_file=None, bot_token="tok")
        with pytest.raises(ValidationError):
            settings.sink_configs()

    def test_file_create_flag_forwarded(self, tmp_path: Path):
        settings = FaultlineSettings(
            _env_file=None, file_path=tmp_path / "e.log", file_create=False
        )
        (config,) = settings.sink_configs()
        assert config.create is False
