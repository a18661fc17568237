"""
Session query engine.

Selects the most recent date-stamped playlist from the Mixxx database and
returns its analyzed tracks, enriched with crate and playlist membership.
All statements are read-only.
"""

import sqlite3
from contextlib import contextmanager
from typing import Iterable, Iterator, Mapping, Optional

from loguru import logger

from .models import UNKNOWN_ARTIST, UNKNOWN_TITLE, SessionResult, TrackRecord, TrackSnapshot

_DATE_GLOB = "[0-9][0-9][0-9][0-9]-[0-9][0-9]-[0-9][0-9]"

# "2024-01-31", "2024-01-31 (live)", "2024-01-31 #2"
SESSION_NAME_GLOBS = {
    "exact": _DATE_GLOB,
    "paren": f"{_DATE_GLOB} (*)",
    "hash": f"{_DATE_GLOB} #*",
}

NAME_SEPARATOR = ", "

SESSION_PLAYLIST_SQL = """
    SELECT id, name
    FROM Playlists
    WHERE name GLOB :exact OR name GLOB :paren OR name GLOB :hash
    ORDER BY date_created DESC, id DESC
    LIMIT 1
"""

SESSION_TRACKS_SQL = """
    SELECT T.id, T.bpm, T.artist, T.title, T.duration
    FROM PlaylistTracks PT
    JOIN library T ON T.id = PT.track_id
    WHERE PT.playlist_id = :playlist_id
    ORDER BY PT."position" ASC, PT.id ASC
"""

SESSION_CRATES_SQL = """
    SELECT DISTINCT CT.track_id, C.name
    FROM crate_tracks CT
    JOIN crates C ON C.id = CT.crate_id
    WHERE CT.track_id IN (
        SELECT track_id FROM PlaylistTracks WHERE playlist_id = :playlist_id
    )
"""

# Hidden playlists and other session playlists are never reported as tags.
SESSION_TAG_PLAYLISTS_SQL = """
    SELECT DISTINCT PT.track_id, P.name
    FROM PlaylistTracks PT
    JOIN Playlists P ON P.id = PT.playlist_id
    WHERE PT.track_id IN (
        SELECT track_id FROM PlaylistTracks WHERE playlist_id = :playlist_id
    )
      AND P.hidden = 0
      AND NOT (P.name GLOB :exact OR P.name GLOB :paren OR P.name GLOB :hash)
"""


def find_session_playlist(conn: sqlite3.Connection) -> Optional[tuple[int, str]]:
    """Return (id, name) of the newest session playlist, or None."""
    row = conn.execute(SESSION_PLAYLIST_SQL, SESSION_NAME_GLOBS).fetchone()
    if row is None:
        return None
    return row[0], row[1]


def _collect_names(rows: Iterable[sqlite3.Row]) -> dict[int, str]:
    """Group (track_id, name) rows into sorted ", "-joined strings per track."""
    names: dict[int, set[str]] = {}
    for track_id, name in rows:
        if name:
            names.setdefault(track_id, set()).add(name)
    return {
        track_id: NAME_SEPARATOR.join(sorted(track_names))
        for track_id, track_names in names.items()
    }


def fetch_crates(conn: sqlite3.Connection, playlist_id: int) -> dict[int, str]:
    """Crate names for every track of a playlist, keyed by track id."""
    rows = conn.execute(SESSION_CRATES_SQL, {"playlist_id": playlist_id})
    return _collect_names(rows)


def fetch_tag_playlists(conn: sqlite3.Connection, playlist_id: int) -> dict[int, str]:
    """Non-hidden, non-session playlist names for every track of a playlist."""
    params = {"playlist_id": playlist_id, **SESSION_NAME_GLOBS}
    rows = conn.execute(SESSION_TAG_PLAYLISTS_SQL, params)
    return _collect_names(rows)


def to_track_record(
    row: Mapping, crates: str = "", playlists: str = ""
) -> Optional[TrackRecord]:
    """Build a TrackRecord from a library row.

    Pure function - returns None for tracks Mixxx has not analyzed yet
    (missing or non-positive BPM).
    """
    bpm = row["bpm"]
    if bpm is None or bpm <= 0:
        return None

    return TrackRecord(
        bpm=float(bpm),
        artist=row["artist"] or UNKNOWN_ARTIST,
        title=row["title"] or UNKNOWN_TITLE,
        duration=float(row["duration"] or 0.0),
        crates=crates or "",
        playlists=playlists or "",
    )


def build_snapshot(
    rows: Iterable[Mapping],
    crates_by_track: Mapping[int, str],
    playlists_by_track: Mapping[int, str],
) -> TrackSnapshot:
    """Assemble an ordered snapshot, dropping unanalyzed and malformed tracks."""
    records = []
    for row in rows:
        try:
            record = to_track_record(
                row,
                crates=crates_by_track.get(row["id"], ""),
                playlists=playlists_by_track.get(row["id"], ""),
            )
        except (TypeError, ValueError) as e:
            logger.warning(f"Skipping malformed library row {row['id']}: {e}")
            continue
        if record is not None:
            records.append(record)
    return tuple(records)


@contextmanager
def read_transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Run several reads against one consistent database state."""
    conn.execute("BEGIN")
    try:
        yield conn
    finally:
        # Nothing was written; ending the read transaction releases the lock
        conn.rollback()


def query_session(conn: sqlite3.Connection) -> SessionResult:
    """Query the current session playlist and build its snapshot.

    Args:
        conn: Read-only connection to the Mixxx database

    Returns:
        SessionResult (empty snapshot when no session playlist exists)

    Raises:
        sqlite3.Error: On any database failure (locked, missing tables, ...)
    """
    with read_transaction(conn):
        session = find_session_playlist(conn)
        if session is None:
            return SessionResult(snapshot=(), rows_scanned=0)

        playlist_id, playlist_name = session
        rows = conn.execute(SESSION_TRACKS_SQL, {"playlist_id": playlist_id}).fetchall()
        crates_by_track = fetch_crates(conn, playlist_id)
        playlists_by_track = fetch_tag_playlists(conn, playlist_id)

    snapshot = build_snapshot(rows, crates_by_track, playlists_by_track)
    logger.debug(
        f"Session '{playlist_name}': {len(rows)} rows scanned, {len(snapshot)} analyzed"
    )
    return SessionResult(
        snapshot=snapshot,
        rows_scanned=len(rows),
        playlist_name=playlist_name,
    )
