"""Report formatting for faultline sinks.

Turns an ``ErrorReport`` into the message body a particular sink kind
expects.  Chat sinks get Discord markdown capped at the platform's
message-size limit; the file sink gets a plain-text record block.
Formatting is a pure transformation with no side effects.
"""

from __future__ import annotations

from faultline.errors import EmptyMessageError
from faultline.models.reports import ErrorReport
from faultline.models.routing import SinkKind

DEFAULT_MESSAGE_LIMIT = 2000
"""Discord's message content limit, in characters."""

TRUNCATION_MARKER = "…\n[message truncated]"

RECORD_SEPARATOR = "\n\n"
"""Terminates every record written by the file sink."""

CONTINUATION_INDENT = "    "


def format_report(
    report: ErrorReport,
    sink_kind: SinkKind,
    *,
    max_length: int = DEFAULT_MESSAGE_LIMIT,
) -> str:
    """Format *report* for a sink of *sink_kind*.

    Raises
    ------
    EmptyMessageError
        If the report message is empty or only whitespace.
    """
    if not report.message.strip():
        raise EmptyMessageError()

    if sink_kind is SinkKind.FILE:
        return format_file_record(report)
    return truncate(format_chat_message(report), max_length)


def format_chat_message(report: ErrorReport) -> str:
    """Render a report as a Discord markdown message (untruncated)."""
    lines: list[str] = [f"**{report.message}**"]

    causes = report.cause_chain()
    if causes:
        lines.append("")
        lines.append("Caused by:")
        lines.extend(
            f"{index}. {cause.describe()}"
            for index, cause in enumerate(causes, start=1)
        )

    context = format_context_lines(report)
    if context:
        lines.append("")
        lines.extend(context)

    lines.append("")
    lines.append(f"-# {report.timestamp.isoformat()}")
    return "\n".join(lines)


def format_file_record(report: ErrorReport) -> str:
    """Render a report as a plain-text record for the file sink.

    Layout::

        [<ISO-8601 timestamp>] <message>
          caused by: <ErrorType>: <message>
          <key>: <value>

    terminated by ``RECORD_SEPARATOR``.  Continuation lines of multi-line
    values are indented, so a record never contains the separator except
    at its end.
    """
    lines: list[str] = [f"[{report.timestamp.isoformat()}] {_continued(report.message)}"]
    lines.extend(
        f"  caused by: {_continued(cause.describe())}" for cause in report.cause_chain()
    )
    lines.extend(f"  {_continued(line)}" for line in format_context_lines(report))
    return "\n".join(lines) + RECORD_SEPARATOR


def _continued(text: str) -> str:
    """Indent every line of *text* after the first."""
    lines = text.splitlines() or [""]
    return ("\n" + CONTINUATION_INDENT).join(lines)


def format_context_lines(report: ErrorReport) -> list[str]:
    """Return ``key: value`` lines for the report context, sorted by key."""
    return [f"{key}: {value}" for key, value in sorted(report.context.items())]


def truncate(text: str, max_length: int) -> str:
    """Cap *text* at *max_length* characters.

    Over-long text is cut and ``TRUNCATION_MARKER`` appended so that the
    result still fits in *max_length*.  ``str`` slicing works on code
    points, so a character is never split.
    """
    if len(text) <= max_length:
        return text
    keep = max(max_length - len(TRUNCATION_MARKER), 0)
    return text[:keep] + TRUNCATION_MARKER
