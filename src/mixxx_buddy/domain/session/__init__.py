"""
Session domain module.

Finds the current DJ session playlist in the Mixxx database, keeps the
latest snapshot of its tracks, and polls for changes in the background.
"""

from .models import EMPTY_SNAPSHOT, SessionResult, TrackRecord, TrackSnapshot
from .poller import SessionPoller
from .query import build_snapshot, find_session_playlist, query_session
from .store import SnapshotStore

__all__ = [
    "EMPTY_SNAPSHOT",
    "SessionResult",
    "TrackRecord",
    "TrackSnapshot",
    "SessionPoller",
    "build_snapshot",
    "find_session_playlist",
    "query_session",
    "SnapshotStore",
]
