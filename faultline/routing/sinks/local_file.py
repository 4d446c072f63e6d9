"""Local file sink — appends plain-text error records to a file.

Each delivery opens the file write-only for appending, writes one
whole record, flushes and closes it.  Writers targeting the same resolved path share
a process-wide lock, so concurrent reports never interleave records.
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path

from faultline.errors import IoError
from faultline.models.routing import FileSinkConfig, SinkKind

logger = logging.getLogger(__name__)

_registry_lock = threading.Lock()
_path_locks: dict[Path, threading.Lock] = {}


def _lock_for(path: Path) -> threading.Lock:
    """Return the shared write lock for *path*."""
    key = path.resolve()
    with _registry_lock:
        lock = _path_locks.get(key)
        if lock is None:
            lock = _path_locks[key] = threading.Lock()
        return lock


class FileSink:
    """Appends formatted records to a local file.

    Parameters
    ----------
    config:
        Validated file sink configuration.  With ``create=False`` a
        missing file is reported as an ``IoError`` instead of created.
    """

    def __init__(self, config: FileSinkConfig) -> None:
        self._config = config
        self._path = Path(config.path)

    @property
    def sink_name(self) -> str:
        return self._config.name

    @property
    def sink_kind(self) -> SinkKind:
        return SinkKind.FILE

    @property
    def path(self) -> Path:
        return self._path

    def deliver(self, message: str) -> None:
        """Append *message* to the file.

        The file is opened write-only, so appending needs write permission
        alone.

        Raises
        ------
        IoError
            On any filesystem error (missing directory, permission denied,
            disk full, symlink loop, or a missing file when creation is
            disabled).
        """
        flags = os.O_WRONLY | os.O_APPEND
        if self._config.create:
            flags |= os.O_CREAT
        try:
            lock = _lock_for(self._path)
        except (OSError, RuntimeError) as exc:
            # Path.resolve raises RuntimeError on a symlink loop before Python 3.13
            raise IoError(f"{type(exc).__name__}: {exc}") from exc

        try:
            with lock:
                fd = os.open(self._path, flags, 0o666)
                with open(fd, "a", encoding="utf-8") as fh:
                    fh.write(message)
                    fh.flush()
        except OSError as exc:
            raise IoError(f"{type(exc).__name__}: {exc}") from exc

        logger.debug("FileSink: appended record to %s", self._path)
