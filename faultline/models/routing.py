"""Routing models — sink configuration and per-sink delivery outcomes."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated, Literal, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class SinkKind(str, Enum):
    """The closed set of sink variants."""

    CHANNEL = "channel"
    WEBHOOK = "webhook"
    FILE = "file"


# ---------------------------------------------------------------------------
# Sink configuration
# ---------------------------------------------------------------------------


def _require_text(value: str, field: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{field} must not be empty")
    return value


class ChannelSinkConfig(BaseModel):
    """Post a new message in a chat channel using a bot token."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["channel"] = "channel"
    name: str = "channel"
    bot_token: str
    channel_id: str

    @field_validator("bot_token", "channel_id")
    @classmethod
    def _not_empty(cls, value: str, info: ValidationInfo) -> str:
        return _require_text(value, info.field_name)


class WebhookSinkConfig(BaseModel):
    """Execute a chat-platform webhook.

    ``token`` is appended to the path of ``url`` as a segment when given,
    ahead of any query string, so both the full webhook URL and the
    ``(base url, token)`` split work.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["webhook"] = "webhook"
    name: str = "webhook"
    url: str
    token: str | None = None

    @field_validator("url")
    @classmethod
    def _valid_url(cls, value: str) -> str:
        value = _require_text(value, "url")
        if not value.startswith(("http://", "https://")):
            raise ValueError("url must be an http(s) URL")
        return value

    @field_validator("token")
    @classmethod
    def _token_not_blank(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _require_text(value, "token")

    @property
    def target_url(self) -> str:
        """The URL actually POSTed to."""
        if not self.token:
            return self.url
        url = httpx.URL(self.url)
        return str(url.copy_with(path=f"{url.path.rstrip('/')}/{self.token}"))


class FileSinkConfig(BaseModel):
    """Append plain-text records to a local file."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["file"] = "file"
    name: str = "file"
    path: Path
    create: bool = True  # create the file when absent

    @field_validator("path", mode="before")
    @classmethod
    def _path_not_empty(cls, value: object) -> object:
        if isinstance(value, str):
            return _require_text(value, "path")
        return value


SinkConfig = Annotated[
    Union[ChannelSinkConfig, WebhookSinkConfig, FileSinkConfig],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Delivery outcomes
# ---------------------------------------------------------------------------


class OutcomeStatus(str, Enum):
    DELIVERED = "delivered"
    FAILED = "failed"


class FailureKind(str, Enum):
    """Why a sink did not receive a report."""

    FORMAT = "format"
    TRANSPORT = "transport"
    RATE_LIMITED = "rate_limited"
    REJECTED = "rejected"
    IO = "io"
    UNEXPECTED = "unexpected"


class DeliveryOutcome(BaseModel):
    """The result of delivering one report to one sink.

    The dispatcher returns one outcome per configured sink, in
    configuration order.
    """

    model_config = ConfigDict(frozen=True)

    sink_name: str
    status: OutcomeStatus
    failure: FailureKind | None = None
    reason: str = ""
    retry_after: float | None = None
    status_code: int | None = None

    @property
    def delivered(self) -> bool:
        return self.status is OutcomeStatus.DELIVERED

    @property
    def failed(self) -> bool:
        return self.status is OutcomeStatus.FAILED

    @classmethod
    def ok(cls, sink_name: str) -> DeliveryOutcome:
        return cls(sink_name=sink_name, status=OutcomeStatus.DELIVERED)

    @classmethod
    def from_error(cls, sink_name: str, exc: BaseException) -> DeliveryOutcome:
        """Convert a format or delivery error into a failed outcome.

        Exceptions outside the faultline taxonomy are recorded as
        ``FailureKind.UNEXPECTED``.
        """
        failure = getattr(exc, "failure_kind", None)
        retry_after = getattr(exc, "retry_after", None)
        status_code = getattr(exc, "status", None)
        return cls(
            sink_name=sink_name,
            status=OutcomeStatus.FAILED,
            failure=failure if isinstance(failure, FailureKind) else FailureKind.UNEXPECTED,
            reason=str(exc) or type(exc).__name__,
            retry_after=float(retry_after) if isinstance(retry_after, (int, float)) else None,
            status_code=status_code if isinstance(status_code, int) else None,
        )
