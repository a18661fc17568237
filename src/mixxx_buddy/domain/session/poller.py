"""
Background poller that keeps the snapshot store in sync with Mixxx.

Runs in a daemon thread: query the session, commit the snapshot, sleep,
repeat until stopped. A failed cycle keeps the previous snapshot and waits
the error backoff instead of the normal interval.
"""

import sqlite3
import threading
from typing import Callable, Optional

from loguru import logger

from .models import SessionResult
from .query import query_session
from .store import SnapshotStore

QueryFn = Callable[[sqlite3.Connection], SessionResult]


class SessionPoller:
    """Periodically queries the Mixxx database and publishes to a SnapshotStore."""

    def __init__(
        self,
        conn: sqlite3.Connection,
        store: SnapshotStore,
        interval_seconds: float = 2.0,
        error_backoff_seconds: float = 5.0,
        query: QueryFn = query_session,
    ):
        """
        Initialize the poller.

        Args:
            conn: Read-only database connection, used only by the poller thread
            store: Store receiving each successfully built snapshot
            interval_seconds: Wait after a successful cycle
            error_backoff_seconds: Wait after a failed cycle (replaces the interval)
            query: Session query function (injectable for tests)
        """
        self.conn = conn
        self.store = store
        self.interval_seconds = interval_seconds
        self.error_backoff_seconds = error_backoff_seconds
        self._query = query
        self._stop_event = threading.Event()
        self.thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self.thread is not None and self.thread.is_alive()

    def start(self) -> None:
        """Start polling in a background thread."""
        if self.running:
            return

        self._stop_event.clear()
        self.thread = threading.Thread(
            target=self._run, daemon=True, name="SessionPoller"
        )
        self.thread.start()
        logger.info(
            f"Session poller started (interval={self.interval_seconds}s, "
            f"error_backoff={self.error_backoff_seconds}s)"
        )

    def stop(self, timeout: float = 5.0) -> None:
        """Signal the loop to exit and wait for the thread to finish."""
        self._stop_event.set()
        if self.thread and self.thread.is_alive():
            self.thread.join(timeout=timeout)
            if self.thread.is_alive():
                logger.warning("Session poller did not stop within timeout")
        logger.info("Session poller stopped")

    def poll_once(self) -> Optional[SessionResult]:
        """Run one query-filter-commit cycle.

        Returns:
            The session result, or None if the query failed (store untouched)
        """
        try:
            result = self._query(self.conn)
        except sqlite3.Error as e:
            logger.warning(f"Error querying Mixxx database: {e}")
            return None
        except Exception:
            logger.exception("Unexpected error while polling Mixxx database")
            return None

        self.store.replace(result.snapshot)
        _log_outcome(result)
        return result

    def _run(self) -> None:
        while not self._stop_event.is_set():
            result = self.poll_once()
            delay = self.interval_seconds if result is not None else self.error_backoff_seconds
            # Event.wait doubles as an interruptible sleep
            self._stop_event.wait(delay)


def _log_outcome(result: SessionResult) -> None:
    """Log which of the three poll outcomes happened."""
    if result.snapshot:
        logger.info(
            f"Data updated: {len(result.snapshot)} tracks with BPM > 0 "
            f"in '{result.playlist_name}'"
        )
    elif result.rows_scanned > 0:
        logger.info(
            f"Found {result.rows_scanned} tracks in '{result.playlist_name}', "
            "but all have 0 BPM. Waiting for Mixxx to analyze them."
        )
    elif result.session_found:
        logger.info(f"Session playlist '{result.playlist_name}' has no tracks yet")
    else:
        logger.info("Waiting for history data (no date-named playlists found)...")
