"""Error report models — the unit of work handed to the dispatcher."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class ErrorCause(BaseModel):
    """One link in a chain of underlying causes.

    ``cause`` points at the next, deeper cause.  The outermost cause is
    the one attached directly to the report.
    """

    model_config = ConfigDict(frozen=True)

    message: str
    error_type: str = ""
    cause: ErrorCause | None = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> ErrorCause:
        """Build a cause chain from a raised exception.

        Follows ``__cause__`` first, then ``__context__`` unless the
        context was suppressed with ``raise ... from None``.  Cycles are
        cut at the first repeated exception.
        """
        chain: list[BaseException] = []
        seen: set[int] = set()
        current: BaseException | None = exc
        while current is not None and id(current) not in seen:
            seen.add(id(current))
            chain.append(current)
            if current.__cause__ is not None:
                current = current.__cause__
            elif not current.__suppress_context__:
                current = current.__context__
            else:
                current = None

        innermost, *outer = reversed(chain)
        link = cls._link(innermost)
        for item in outer:
            link = cls._link(item, cause=link)
        return link

    @classmethod
    def _link(cls, exc: BaseException, cause: ErrorCause | None = None) -> ErrorCause:
        return cls(
            message=str(exc) or type(exc).__name__,
            error_type=type(exc).__name__,
            cause=cause,
        )

    def chain(self) -> list[ErrorCause]:
        """Return this cause and every deeper cause, outermost first."""
        links: list[ErrorCause] = []
        current: ErrorCause | None = self
        while current is not None:
            links.append(current)
            current = current.cause
        return links

    def describe(self) -> str:
        """Render as ``ErrorType: message`` (or just the message)."""
        if self.error_type:
            return f"{self.error_type}: {self.message}"
        return self.message


class ErrorReport(BaseModel):
    """A single error to be reported to every configured sink.

    Created by the caller at the error site and never mutated.  ``context``
    is exposed as a read-only mapping.
    """

    model_config = ConfigDict(frozen=True)

    message: str
    source_error: ErrorCause | None = None
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    context: Mapping[str, str] = Field(default_factory=lambda: MappingProxyType({}))

    @field_validator("context")
    @classmethod
    def _freeze_context(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @field_serializer("context")
    def _dump_context(self, value: Mapping[str, str]) -> dict[str, str]:
        return dict(value)

    def cause_chain(self) -> list[ErrorCause]:
        """Return the underlying causes, outermost first."""
        if self.source_error is None:
            return []
        return self.source_error.chain()

    @classmethod
    def from_exception(
        cls,
        exc: BaseException,
        *,
        context: dict[str, str] | None = None,
        message: str | None = None,
    ) -> ErrorReport:
        """Build a report from a raised exception.

        The report message defaults to ``str(exc)``.  The cause chain
        starts at whatever *exc* was caused by, so the top-level error is
        not repeated in the chain.
        """
        cause_exc = exc.__cause__
        if cause_exc is None and not exc.__suppress_context__:
            cause_exc = exc.__context__
        return cls(
            message=message if message is not None else (str(exc) or type(exc).__name__),
            source_error=ErrorCause.from_exception(cause_exc) if cause_exc else None,
            context=context or {},
        )
