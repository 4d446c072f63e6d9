"""Faultline error taxonomy.

Formatting and delivery failures are raised as exceptions inside the
routing layer and converted to ``DeliveryOutcome`` entries by the
dispatcher.  None of these escape ``ErrorDispatcher.report``.
"""

from __future__ import annotations

from faultline.models.routing import FailureKind


class FaultlineError(RuntimeError):
    """Base class for all faultline errors."""


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


class FormatError(FaultlineError):
    """Raised when a report cannot be turned into a message."""

    failure_kind: FailureKind = FailureKind.FORMAT


class EmptyMessageError(FormatError):
    """Raised when a report has no message text."""

    def __init__(self) -> None:
        super().__init__("Error report message is empty")


# ---------------------------------------------------------------------------
# Delivery
# ---------------------------------------------------------------------------


class DeliveryError(FaultlineError):
    """Raised by a sink when a message could not be delivered."""

    failure_kind: FailureKind = FailureKind.UNEXPECTED


class TransportError(DeliveryError):
    """Network or HTTP-level failure before a response was received."""

    failure_kind = FailureKind.TRANSPORT


class RateLimitedError(DeliveryError):
    """The chat platform asked us to slow down."""

    failure_kind = FailureKind.RATE_LIMITED

    def __init__(self, retry_after: float | None) -> None:
        self.retry_after = retry_after
        if retry_after is None:
            super().__init__("Rate limited")
        else:
            super().__init__(f"Rate limited, retry after {retry_after:g}s")


class RejectedError(DeliveryError):
    """The chat platform answered with a non-2xx status."""

    failure_kind = FailureKind.REJECTED

    def __init__(self, status: int, body: str = "") -> None:
        self.status = status
        self.body = body
        detail = f": {body}" if body else ""
        super().__init__(f"HTTP {status}{detail}")


class IoError(DeliveryError):
    """A filesystem operation failed."""

    failure_kind = FailureKind.IO

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)
