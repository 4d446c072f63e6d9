"""ErrorDispatcher — routes error reports to ALL configured sinks.

Every report is formatted once per sink and delivered to every sink in
configuration order.  A failing sink never prevents delivery to the
others, and ``report`` never raises: each sink's result is captured as a
``DeliveryOutcome``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import TypeAdapter
from rich.console import Console

from faultline.errors import DeliveryError, FormatError
from faultline.models.reports import ErrorReport
from faultline.models.routing import (
    ChannelSinkConfig,
    DeliveryOutcome,
    FileSinkConfig,
    SinkConfig,
    WebhookSinkConfig,
)
from faultline.routing.formatter import (
    DEFAULT_MESSAGE_LIMIT,
    format_file_record,
    format_report,
)
from faultline.routing.sinks.channel import DISCORD_API_BASE, ChannelMessageSink
from faultline.routing.sinks.local_file import FileSink
from faultline.routing.sinks.webhook import WebhookSink

if TYPE_CHECKING:
    from faultline.config import FaultlineSettings
    from faultline.routing.sinks import BaseSink

logger = logging.getLogger(__name__)

_SINK_CONFIGS = TypeAdapter(list[SinkConfig])

DEFAULT_HTTP_TIMEOUT = 10.0


def build_sink(
    config: SinkConfig,
    client: httpx.Client | None,
    *,
    api_base: str = DISCORD_API_BASE,
) -> BaseSink:
    """Build the sink described by *config*.

    Chat sinks require *client*; the file sink ignores it.
    """
    if isinstance(config, FileSinkConfig):
        return FileSink(config)
    if client is None:
        raise ValueError(f"Sink {config.name!r} needs an HTTP client")
    if isinstance(config, ChannelSinkConfig):
        return ChannelMessageSink(config, client, api_base=api_base)
    if isinstance(config, WebhookSinkConfig):
        return WebhookSink(config, client)
    raise TypeError(f"Unknown sink config: {type(config).__name__}")


class ErrorDispatcher:
    """Routes error reports to every configured sink.

    The sink list is fixed at construction.  An empty list is legal and
    turns ``report`` into a no-op.

    Parameters
    ----------
    configs:
        Sink configurations, in delivery order.  Plain dicts are accepted
        and validated; invalid configuration raises
        ``pydantic.ValidationError`` here rather than at report time.
    http_client:
        Client used by chat sinks.  When omitted and a chat sink is
        configured, the dispatcher creates one and closes it in
        ``close()``.
    max_message_length:
        Size limit applied to chat messages.
    concurrent:
        Deliver to sinks on a thread pool.  Outcomes keep configuration
        order either way.
    echo_stderr:
        Also write each report, and any delivery failures, to stderr.

    Usage
    -----
    >>> dispatcher = ErrorDispatcher([FileSinkConfig(path="errors.log")])
    >>> outcomes = dispatcher.report(ErrorReport(message="boom"))
    """

    def __init__(
        self,
        configs: Sequence[SinkConfig | dict[str, Any]] = (),
        *,
        http_client: httpx.Client | None = None,
        max_message_length: int = DEFAULT_MESSAGE_LIMIT,
        concurrent: bool = False,
        echo_stderr: bool = False,
        api_base: str = DISCORD_API_BASE,
        http_timeout: float = DEFAULT_HTTP_TIMEOUT,
    ) -> None:
        validated = _SINK_CONFIGS.validate_python(list(configs))

        self._owns_client = False
        needs_http = any(not isinstance(c, FileSinkConfig) for c in validated)
        if http_client is None and needs_http:
            http_client = httpx.Client(timeout=http_timeout)
            self._owns_client = True
        self._client = http_client

        self._sinks: tuple[BaseSink, ...] = tuple(
            build_sink(c, http_client, api_base=api_base) for c in validated
        )
        self._max_message_length = max_message_length
        self._concurrent = concurrent
        self._console = Console(stderr=True) if echo_stderr else None

        for sink in self._sinks:
            logger.info("Registered sink: %s (%s)", sink.sink_name, sink.sink_kind.value)

    @classmethod
    def from_settings(
        cls,
        settings: FaultlineSettings,
        *,
        http_client: httpx.Client | None = None,
    ) -> ErrorDispatcher:
        """Build a dispatcher from ``FaultlineSettings``.

        Logs a warning when no sink is configured.
        """
        configs = settings.sink_configs()
        if not configs:
            logger.warning("No error-reporting sinks configured — reports will be dropped")
        return cls(
            configs,
            http_client=http_client,
            max_message_length=settings.max_message_length,
            concurrent=settings.concurrent_delivery,
            echo_stderr=settings.echo_stderr,
            api_base=settings.discord_api_base,
            http_timeout=settings.http_timeout_seconds,
        )

    # ------------------------------------------------------------------
    # Introspection / lifecycle
    # ------------------------------------------------------------------

    @property
    def sinks(self) -> tuple[BaseSink, ...]:
        """The configured sinks, in delivery order."""
        return self._sinks

    def close(self) -> None:
        """Close the HTTP client if this dispatcher created it."""
        if self._owns_client and self._client is not None:
            self._client.close()

    def __enter__(self) -> ErrorDispatcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def report(self, report: ErrorReport) -> list[DeliveryOutcome]:
        """Deliver *report* to every configured sink.

        Returns one ``DeliveryOutcome`` per sink, in configuration order.
        Never raises.
        """
        if not self._sinks:
            return []

        if self._concurrent and len(self._sinks) > 1:
            outcomes = self._deliver_concurrently(report)
        else:
            outcomes = [self._deliver_one(sink, report) for sink in self._sinks]

        failed = [o for o in outcomes if o.failed]
        if failed:
            logger.warning(
                "Error report %r: %d/%d sinks succeeded, %d failed",
                report.message[:80],
                len(outcomes) - len(failed),
                len(outcomes),
                len(failed),
            )

        self._echo(report, failed)
        return outcomes

    def report_exception(
        self,
        exc: BaseException,
        *,
        context: dict[str, str] | None = None,
        message: str | None = None,
    ) -> list[DeliveryOutcome]:
        """Build an ``ErrorReport`` from *exc* and report it.

        Never raises.  If the report itself cannot be built, every sink
        gets a failed outcome.
        """
        try:
            report = ErrorReport.from_exception(exc, context=context, message=message)
        except Exception as build_exc:  # noqa: BLE001
            logger.exception("Could not build error report from %r", exc)
            return [DeliveryOutcome.from_error(s.sink_name, build_exc) for s in self._sinks]
        return self.report(report)

    def _deliver_concurrently(self, report: ErrorReport) -> list[DeliveryOutcome]:
        """Fan out on a thread pool, collecting outcomes in configuration order.

        A sink whose task cannot be submitted is delivered inline instead;
        every sink is attempted exactly once.
        """
        pending: list[Future[DeliveryOutcome] | DeliveryOutcome] = []
        with ThreadPoolExecutor(
            max_workers=len(self._sinks), thread_name_prefix="faultline"
        ) as pool:
            for sink in self._sinks:
                try:
                    pending.append(pool.submit(self._deliver_one, sink, report))
                except RuntimeError:
                    # e.g. interpreter shutdown: new threads can no longer be started
                    logger.warning(
                        "Thread pool unavailable, delivering to %s inline", sink.sink_name
                    )
                    pending.append(self._deliver_one(sink, report))
            return [p.result() if isinstance(p, Future) else p for p in pending]

    def _deliver_one(self, sink: BaseSink, report: ErrorReport) -> DeliveryOutcome:
        """Format and deliver to a single sink, capturing every failure."""
        try:
            message = format_report(
                report, sink.sink_kind, max_length=self._max_message_length
            )
        except FormatError as exc:
            logger.error("Sink %s: could not format report: %s", sink.sink_name, exc)
            return DeliveryOutcome.from_error(sink.sink_name, exc)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Sink %s: unexpected formatting failure", sink.sink_name)
            return DeliveryOutcome.from_error(sink.sink_name, exc)

        try:
            sink.deliver(message)
        except DeliveryError as exc:
            logger.error("Sink %s failed: %s", sink.sink_name, exc)
            return DeliveryOutcome.from_error(sink.sink_name, exc)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Sink %s: unexpected delivery failure", sink.sink_name)
            return DeliveryOutcome.from_error(sink.sink_name, exc)

        logger.debug("Sink %s: report delivered", sink.sink_name)
        return DeliveryOutcome.ok(sink.sink_name)

    def _echo(self, report: ErrorReport, failed: list[DeliveryOutcome]) -> None:
        """Write the report and any delivery failures to stderr."""
        console = self._console
        if console is None:
            return
        try:
            if report.message.strip():
                text = format_file_record(report).rstrip("\n")
            else:
                text = "(empty error report)"
            for outcome in failed:
                text += f"\n\nFailed to deliver to {outcome.sink_name}: {outcome.reason}"
            console.out(text, highlight=False)
        except Exception:  # noqa: BLE001
            logger.exception("Could not echo error report to stderr")
