"""Webhook sink — executes a Discord webhook with the error report.

The webhook URL authenticates the request, so no Authorization header is
sent.  ``wait=true`` makes the platform confirm the message was created.
"""

from __future__ import annotations

import logging

import httpx

from faultline.models.routing import SinkKind, WebhookSinkConfig
from faultline.routing.sinks._http import post_json
from faultline.routing.sinks.channel import MessagePayload

logger = logging.getLogger(__name__)


class WebhookSink:
    """POSTs formatted reports to the configured webhook URL."""

    def __init__(self, config: WebhookSinkConfig, client: httpx.Client) -> None:
        self._config = config
        self._client = client

    @property
    def sink_name(self) -> str:
        return self._config.name

    @property
    def sink_kind(self) -> SinkKind:
        return SinkKind.WEBHOOK

    def deliver(self, message: str) -> None:
        payload = MessagePayload(content=message)
        post_json(
            self._client,
            self._config.target_url,
            payload.model_dump(),
            params={"wait": "true"},
        )
        logger.debug("WebhookSink: executed webhook %s", self.sink_name)
