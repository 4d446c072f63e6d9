"""Sink protocol for faultline error routing.

All sinks implement the ``BaseSink`` protocol: ``sink_name`` and
``sink_kind`` properties and a ``deliver(message)`` method.  The
dispatcher formats a report for each sink's kind and calls ``deliver``
on every configured sink.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from faultline.models.routing import SinkKind


@runtime_checkable
class BaseSink(Protocol):
    """Protocol that every faultline sink must implement.

    The set of implementations is closed: ``ChannelMessageSink``,
    ``WebhookSink`` and ``FileSink``.

    Attributes
    ----------
    sink_name : str
        Identifier reported in ``DeliveryOutcome.sink_name``.
    sink_kind : SinkKind
        Selects the message format produced for this sink.
    """

    @property
    def sink_name(self) -> str:
        """Return the identifier of this sink."""
        ...

    @property
    def sink_kind(self) -> SinkKind:
        """Return the kind of this sink."""
        ...

    def deliver(self, message: str) -> None:
        """Deliver one formatted message.

        Delivery is single-shot: no retry, no state kept between calls.

        Raises
        ------
        DeliveryError
            A subclass describing why the message was not delivered.
        """
        ...
