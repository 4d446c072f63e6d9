"""Faultline settings — env-driven sink configuration.

Uses pydantic-settings so every option can come from a ``.env`` file or
``FAULTLINE_*`` environment variables.  The settings object only
describes sinks; the embedding application builds an ``ErrorDispatcher``
from it explicitly (there is no module-level dispatcher).
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from faultline.models.routing import (
    ChannelSinkConfig,
    FileSinkConfig,
    SinkConfig,
    WebhookSinkConfig,
)
from faultline.routing.formatter import DEFAULT_MESSAGE_LIMIT
from faultline.routing.sinks.channel import DISCORD_API_BASE


class FaultlineSettings(BaseSettings):
    """Error-reporting configuration with environment variable overrides.

    A sink is enabled by setting its connection data.

    Examples
    --------
    Override via environment::

        export FAULTLINE_BOT_TOKEN=...
        export FAULTLINE_CHANNEL_ID=123456789012345678
        export FAULTLINE_FILE_PATH=/var/log/myservice/errors.log

    Or via .env file::

        FAULTLINE_WEBHOOK_URL=https://discord.com/api/webhooks/1/abc
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="FAULTLINE_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"

    # Channel sink
    bot_token: str = ""
    channel_id: str = ""

    # Webhook sink
    webhook_url: str = ""
    webhook_token: str | None = None

    # File sink
    file_path: Path | None = None
    file_create: bool = True

    # Delivery
    discord_api_base: str = DISCORD_API_BASE
    max_message_length: int = DEFAULT_MESSAGE_LIMIT
    http_timeout_seconds: float = 10.0
    concurrent_delivery: bool = False
    echo_stderr: bool = False

    @property
    def is_production(self) -> bool:
        """Whether running in production mode."""
        return self.environment == "production"

    def sink_configs(self) -> list[SinkConfig]:
        """Build validated sink configs, ordered channel, webhook, file.

        The channel sink needs both a bot token and a channel id; setting
        only one of them is a configuration error.

        Raises
        ------
        pydantic.ValidationError
            If a partially configured sink has empty connection data.
        """
        configs: list[SinkConfig] = []
        if self.bot_token or self.channel_id:
            configs.append(
                ChannelSinkConfig(bot_token=self.bot_token, channel_id=self.channel_id)
            )
        if self.webhook_url:
            configs.append(
                WebhookSinkConfig(url=self.webhook_url, token=self.webhook_token or None)
            )
        if self.file_path is not None:
            configs.append(FileSinkConfig(path=self.file_path, create=self.file_create))
        return configs
