"""Faultline data models — all Pydantic v2, all frozen (immutable)."""

from faultline.models.reports import ErrorCause, ErrorReport
from faultline.models.routing import (
    ChannelSinkConfig,
    DeliveryOutcome,
    FailureKind,
    FileSinkConfig,
    OutcomeStatus,
    SinkConfig,
    SinkKind,
    WebhookSinkConfig,
)

__all__ = [
    # reports
    "ErrorCause",
    "ErrorReport",
    # routing
    "SinkKind",
    "SinkConfig",
    "ChannelSinkConfig",
    "WebhookSinkConfig",
    "FileSinkConfig",
    "OutcomeStatus",
    "FailureKind",
    "DeliveryOutcome",
]
