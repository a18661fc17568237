"""Tests for Mixxx database discovery and read-only access."""

import sqlite3
from pathlib import Path

import pytest

from mixxx_buddy.core.database import (
    DatabaseNotFoundError,
    find_mixxx_database,
    get_candidate_paths,
    open_readonly,
    resolve_database_path,
)


class TestCandidatePaths:
    def test_linux(self):
        paths = get_candidate_paths("linux", home=Path("/home/dj"))

        assert paths == [Path("/home/dj/.mixxx/mixxxdb.sqlite")]

    def test_macos(self):
        paths = get_candidate_paths("darwin", home=Path("/Users/dj"))

        assert paths == [
            Path("/Users/dj/Library/Application Support/Mixxx/mixxxdb.sqlite")
        ]

    def test_windows_uses_local_app_data(self):
        paths = get_candidate_paths(
            "win32", home=Path("/home/dj"), env={"LOCALAPPDATA": "/appdata"}
        )

        assert paths == [Path("/appdata/Mixxx/mixxxdb.sqlite")]

    def test_windows_without_local_app_data(self):
        assert get_candidate_paths("win32", home=Path("/home/dj"), env={}) == []

    def test_unknown_platform(self):
        assert get_candidate_paths("sunos5", home=Path("/home/dj")) == []


class TestFindMixxxDatabase:
    def test_finds_existing_file(self, tmp_path):
        db_file = tmp_path / ".mixxx" / "mixxxdb.sqlite"
        db_file.parent.mkdir()
        db_file.touch()

        assert find_mixxx_database("linux", home=tmp_path) == db_file

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(DatabaseNotFoundError, match="mixxxdb.sqlite not found"):
            find_mixxx_database("linux", home=tmp_path)


class TestResolveDatabasePath:
    def test_configured_path_is_used(self, mixxx_library):
        assert resolve_database_path(str(mixxx_library.path)) == mixxx_library.path

    def test_missing_configured_path_raises(self, tmp_path):
        with pytest.raises(DatabaseNotFoundError, match="Configured database not found"):
            resolve_database_path(str(tmp_path / "nope.sqlite"))


class TestOpenReadonly:
    def test_reads_rows_by_name(self, mixxx_library):
        mixxx_library.add_playlist("2024-01-01")
        conn = open_readonly(mixxx_library.path)
        try:
            row = conn.execute("SELECT name FROM Playlists").fetchone()
            assert row["name"] == "2024-01-01"
        finally:
            conn.close()

    def test_rejects_writes(self, mixxx_library):
        conn = open_readonly(mixxx_library.path)
        try:
            with pytest.raises(sqlite3.OperationalError, match="readonly"):
                conn.execute("INSERT INTO crates (name) VALUES ('nope')")
        finally:
            conn.close()

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(DatabaseNotFoundError):
            open_readonly(tmp_path / "missing.sqlite")
