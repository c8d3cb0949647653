"""Exclusive lock around the local state file."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import IO, TYPE_CHECKING

from sysdig_provisioner.engine.errors import StateLockError

if TYPE_CHECKING:
    from types import TracebackType

if sys.platform == "win32":  # pragma: no cover
    import msvcrt

    def _lock(f: IO[str]) -> None:
        msvcrt.locking(f.fileno(), msvcrt.LK_LOCK, 1)

    def _unlock(f: IO[str]) -> None:
        msvcrt.locking(f.fileno(), msvcrt.LK_UNLCK, 1)

else:
    import fcntl

    def _lock(f: IO[str]) -> None:
        fcntl.flock(f.fileno(), fcntl.LOCK_EX)

    def _unlock(f: IO[str]) -> None:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)


class StateLock:
    """Hold ``<state>.lock`` exclusively while a block runs.

    Blocks until the lock is free; a second provisioner run against the same
    state waits rather than interleaving writes.
    """

    def __init__(self, state_path: Path) -> None:
        self._lock_path = Path(f"{state_path}.lock")
        self._file: IO[str] | None = None

    @property
    def path(self) -> Path:
        return self._lock_path

    def __enter__(self) -> StateLock:
        self._lock_path.parent.mkdir(parents=True, exist_ok=True)
        f = self._lock_path.open("a+", encoding="utf-8")
        try:
            _lock(f)
        except OSError as e:
            f.close()
            raise StateLockError(f"Cannot lock {self._lock_path}: {e}") from e
        self._file = f
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        f, self._file = self._file, None
        if f is None:
            return
        try:
            _unlock(f)
        finally:
            f.close()
