"""Channel message sink — posts error reports as Discord channel messages.

Uses the bot-authenticated message-creation endpoint::

    POST {api_base}/channels/{channel_id}/messages
    Authorization: Bot <token>

The HTTP client is supplied by the caller; timeouts are configured there.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict

from faultline.models.routing import ChannelSinkConfig, SinkKind
from faultline.routing.sinks._http import post_json

logger = logging.getLogger(__name__)

DISCORD_API_BASE = "https://discord.com/api/v10"


class MessagePayload(BaseModel):
    """A Discord create-message / execute-webhook JSON body."""

    model_config = ConfigDict(frozen=True)

    content: str
    allowed_mentions: dict[str, Any] = {"parse": []}


class ChannelMessageSink:
    """Creates a new message in the configured channel.

    Parameters
    ----------
    config:
        Validated channel sink configuration (bot token and channel id).
    client:
        The HTTP client used for the request.
    api_base:
        Base URL of the chat platform REST API.
    """

    def __init__(
        self,
        config: ChannelSinkConfig,
        client: httpx.Client,
        *,
        api_base: str = DISCORD_API_BASE,
    ) -> None:
        self._config = config
        self._client = client
        self._api_base = api_base.rstrip("/")

    @property
    def sink_name(self) -> str:
        return self._config.name

    @property
    def sink_kind(self) -> SinkKind:
        return SinkKind.CHANNEL

    def build_api_url(self) -> str:
        """Return the message-creation URL for the configured channel."""
        return f"{self._api_base}/channels/{self._config.channel_id}/messages"

    def deliver(self, message: str) -> None:
        """Post *message* to the channel.

        Raises ``TransportError``, ``RateLimitedError`` or ``RejectedError``.
        """
        payload = MessagePayload(content=message)
        post_json(
            self._client,
            self.build_api_url(),
            payload.model_dump(),
            headers={"Authorization": f"Bot {self._config.bot_token}"},
        )
        logger.debug(
            "ChannelMessageSink: posted report to channel %s",
            self._config.channel_id,
        )
