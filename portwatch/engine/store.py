"""In-memory status store: port name -> last verdict, guarded by a reader/writer lock."""

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, Optional, Union

from portwatch.core.rwlock import ReadWriteLock
from portwatch.engine.prober import Verdict

logger = logging.getLogger(__name__)


def _normalize(verdict: Union[Verdict, str]) -> str:
    """Return the plain 'Open'/'Closed' string; ValueError for anything else."""
    return Verdict(verdict).value


class CycleWriter:
    """Write handle valid only while StatusStore.write_cycle() holds the write lock."""

    def __init__(self, statuses: Dict[str, str]):
        self._statuses = statuses
        self._closed = False

    def write(self, name: str, verdict: Union[Verdict, str]) -> Optional[str]:
        """Set name's verdict; return the previous one (None if first time)."""
        if self._closed:
            raise RuntimeError("cycle writer used after write_cycle() exited")
        previous = self._statuses.get(name)
        self._statuses[name] = _normalize(verdict)
        return previous

    def close(self) -> None:
        self._closed = True


class StatusStore:
    """Thread-safe snapshot written by the poller and read by the reporter and HTTP layer."""

    def __init__(self):
        self._lock = ReadWriteLock()
        self._statuses: Dict[str, str] = {}

    def write(self, name: str, verdict: Union[Verdict, str]) -> None:
        value = _normalize(verdict)
        with self._lock.write_locked():
            self._statuses[name] = value

    @contextmanager
    def write_cycle(self) -> Iterator[CycleWriter]:
        """Hold the write lock for a whole cycle; readers wait until the block exits."""
        with self._lock.write_locked():
            writer = CycleWriter(self._statuses)
            try:
                yield writer
            finally:
                writer.close()

    def read_all(self) -> Dict[str, str]:
        """Copy of the current snapshot, taken under the shared read lock."""
        with self._lock.read_locked():
            return dict(self._statuses)

    def get(self, name: str) -> Optional[str]:
        with self._lock.read_locked():
            return self._statuses.get(name)

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._statuses)
