"""Shared fixtures: a throwaway Mixxx library database built with the Mixxx schema."""

import sqlite3
from pathlib import Path
from typing import Iterator, Optional

import pytest
from loguru import logger

from mixxx_buddy.core.database import open_readonly

# Subset of the Mixxx schema touched by the session queries
MIXXX_SCHEMA = """
CREATE TABLE library (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    artist varchar(64),
    title varchar(64),
    duration integer DEFAULT 0,
    bpm float
);
CREATE TABLE Playlists (
    id INTEGER PRIMARY KEY,
    name varchar(48),
    position INTEGER,
    hidden INTEGER DEFAULT 0 NOT NULL,
    date_created datetime,
    date_modified datetime,
    locked INTEGER DEFAULT 0
);
CREATE TABLE PlaylistTracks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    playlist_id INTEGER REFERENCES Playlists(id),
    track_id INTEGER REFERENCES library(id),
    position INTEGER,
    pl_datetime_added TEXT
);
CREATE TABLE crates (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name varchar(48) UNIQUE NOT NULL,
    count INTEGER DEFAULT 0,
    show INTEGER DEFAULT 1,
    locked INTEGER DEFAULT 0,
    autodj_source INTEGER DEFAULT 0
);
CREATE TABLE crate_tracks (
    crate_id INTEGER NOT NULL REFERENCES crates(id),
    track_id INTEGER NOT NULL REFERENCES library(id),
    UNIQUE (crate_id, track_id)
);
"""


class MixxxLibrary:
    """Writable handle used by tests to populate a Mixxx database file."""

    def __init__(self, path: Path):
        self.path = path
        self.conn = sqlite3.connect(path, isolation_level=None)
        self.conn.executescript(MIXXX_SCHEMA)

    def add_track(
        self,
        artist: Optional[str] = "Artist",
        title: Optional[str] = "Title",
        bpm: Optional[float] = 120.0,
        duration: Optional[float] = 180.0,
    ) -> int:
        cursor = self.conn.execute(
            "INSERT INTO library (artist, title, bpm, duration) VALUES (?, ?, ?, ?)",
            (artist, title, bpm, duration),
        )
        return cursor.lastrowid

    def add_playlist(
        self, name: str, created: str = "2024-01-01 20:00:00", hidden: int = 0
    ) -> int:
        cursor = self.conn.execute(
            "INSERT INTO Playlists (name, hidden, date_created, date_modified) "
            "VALUES (?, ?, ?, ?)",
            (name, hidden, created, created),
        )
        return cursor.lastrowid

    def add_to_playlist(
        self, playlist_id: int, track_id: int, position: Optional[int] = None
    ) -> None:
        if position is None:
            row = self.conn.execute(
                "SELECT COALESCE(MAX(position), 0) FROM PlaylistTracks WHERE playlist_id = ?",
                (playlist_id,),
            ).fetchone()
            position = row[0] + 1
        self.conn.execute(
            "INSERT INTO PlaylistTracks (playlist_id, track_id, position) VALUES (?, ?, ?)",
            (playlist_id, track_id, position),
        )

    def add_crate(self, name: str) -> int:
        cursor = self.conn.execute("INSERT INTO crates (name) VALUES (?)", (name,))
        return cursor.lastrowid

    def add_to_crate(self, crate_id: int, track_id: int) -> None:
        self.conn.execute(
            "INSERT INTO crate_tracks (crate_id, track_id) VALUES (?, ?)",
            (crate_id, track_id),
        )

    def close(self) -> None:
        self.conn.close()


@pytest.fixture
def mixxx_library(tmp_path: Path) -> Iterator[MixxxLibrary]:
    """Empty Mixxx database on disk."""
    library = MixxxLibrary(tmp_path / "mixxxdb.sqlite")
    yield library
    library.close()


@pytest.fixture
def readonly_conn(mixxx_library: MixxxLibrary) -> Iterator[sqlite3.Connection]:
    """Read-only connection to the test library, as the app opens it."""
    conn = open_readonly(mixxx_library.path)
    yield conn
    conn.close()


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Capture loguru messages emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]))
    yield messages
    logger.remove(handler_id)
