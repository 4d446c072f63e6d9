"""Shared test fixtures for faultline."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import httpx
import pytest

from faultline.models.reports import ErrorCause, ErrorReport
from faultline.models.routing import FileSinkConfig

FIXED_TIME = datetime(2026, 3, 14, 15, 9, 26, tzinfo=timezone.utc)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def log_path(tmp_dir: Path) -> Path:
    """Path of a not-yet-existing error log."""
    return tmp_dir / "errors.log"


@pytest.fixture
def file_config(log_path: Path) -> FileSinkConfig:
    return FileSinkConfig(path=log_path)


@pytest.fixture
def make_report() -> Callable[..., ErrorReport]:
    """Factory fixture: build an ErrorReport with sensible defaults."""

    def _factory(message: str = "Database connection lost", **overrides: Any) -> ErrorReport:
        defaults: dict[str, Any] = {
            "message": message,
            "source_error": ErrorCause(
                message="pool exhausted",
                error_type="PoolError",
                cause=ErrorCause(message="connection refused", error_type="OSError"),
            ),
            "timestamp": FIXED_TIME,
            "context": {"component": "billing", "request_id": "req-42"},
        }
        defaults.update(overrides)
        return ErrorReport(**defaults)

    return _factory


@pytest.fixture
def report(make_report: Callable[..., ErrorReport]) -> ErrorReport:
    """Convenience: a ready-made ErrorReport with test defaults."""
    return make_report()


@pytest.fixture
def make_client() -> Iterator[Callable[..., tuple[httpx.Client, RecordingTransport]]]:
    """Factory fixture: an httpx.Client backed by a recording MockTransport.

    The handler defaults to answering every request with 200 ``{}``.
    """
    clients: list[httpx.Client] = []

    def _factory(
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
    ) -> tuple[httpx.Client, RecordingTransport]:
        transport = RecordingTransport(handler or (lambda request: httpx.Response(200, json={})))
        client = httpx.Client(transport=transport)
        clients.append(client)
        return client, transport

    yield _factory
    for client in clients:
        client.close()
