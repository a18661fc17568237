"""Thread-safe holder for the latest track snapshot."""

import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from .models import EMPTY_SNAPSHOT, TrackSnapshot


class ReadWriteLock:
    """Many concurrent readers or one writer, with writer preference.

    Once a writer is waiting, new readers queue behind it, so a steady
    stream of readers cannot starve the writer.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer_active = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer_active or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer_active or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer_active = True
        try:
            yield
        finally:
            with self._cond:
                self._writer_active = False
                self._cond.notify_all()


class SnapshotStore:
    """Holds exactly one TrackSnapshot, replaced wholesale by the poller.

    Snapshots are immutable tuples, so the locks only guard swapping and
    copying the reference. Callers serialize outside the lock.
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._snapshot: TrackSnapshot = EMPTY_SNAPSHOT
        self._updated_at: Optional[datetime] = None

    def replace(self, snapshot: TrackSnapshot) -> None:
        """Install a new snapshot, superseding the previous one."""
        snapshot = tuple(snapshot)
        updated_at = datetime.now(timezone.utc)
        with self._lock.write():
            self._snapshot = snapshot
            self._updated_at = updated_at

    def current(self) -> TrackSnapshot:
        """Return the latest snapshot (empty before the first replace)."""
        with self._lock.read():
            return self._snapshot

    def current_with_timestamp(self) -> tuple[TrackSnapshot, Optional[datetime]]:
        """Latest snapshot plus the UTC time it was installed (None if never)."""
        with self._lock.read():
            return self._snapshot, self._updated_at
