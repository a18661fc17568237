"""
Session domain models.

Contains the immutable records published to the display.
"""

from dataclasses import dataclass
from typing import Optional

UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_TITLE = "Unknown Title"


@dataclass(frozen=True)
class TrackRecord:
    """One analyzed track of the current session playlist."""

    bpm: float
    artist: str
    title: str
    duration: float
    crates: str  # ", "-joined crate names
    playlists: str  # ", "-joined non-session playlist names


# Ordered by position in the session playlist; tuples so a published
# snapshot can never be mutated after it is built.
TrackSnapshot = tuple[TrackRecord, ...]

EMPTY_SNAPSHOT: TrackSnapshot = ()


@dataclass(frozen=True)
class SessionResult:
    """Outcome of one session query.

    rows_scanned counts every track row read from the session playlist,
    including unanalyzed ones that were left out of the snapshot.
    """

    snapshot: TrackSnapshot
    rows_scanned: int
    playlist_name: Optional[str] = None

    @property
    def session_found(self) -> bool:
        return self.playlist_name is not None
