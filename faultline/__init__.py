"""Faultline: error reporting to chat channels, webhooks and files.

Build an ``ErrorDispatcher`` once at startup from a list of sink
configurations (or from ``FaultlineSettings``), then call ``report`` or
``report_exception`` wherever an error is caught.  Reporting never raises;
each call returns one ``DeliveryOutcome`` per configured sink.
"""

__version__ = "0.1.0"
__description__ = "Error reporting to Discord channels, webhooks and local files"

from faultline.config import FaultlineSettings
from faultline.models import (
    ChannelSinkConfig,
    DeliveryOutcome,
    ErrorCause,
    ErrorReport,
    FailureKind,
    FileSinkConfig,
    SinkKind,
    WebhookSinkConfig,
)
from faultline.routing.dispatcher import ErrorDispatcher

__all__ = [
    "ErrorDispatcher",
    "ErrorReport",
    "ErrorCause",
    "DeliveryOutcome",
    "FailureKind",
    "SinkKind",
    "ChannelSinkConfig",
    "WebhookSinkConfig",
    "FileSinkConfig",
    "FaultlineSettings",
    "__version__",
]
