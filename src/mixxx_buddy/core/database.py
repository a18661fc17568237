"""
Read-only SQLite access to the Mixxx library database
"""

import os
import sqlite3
import sys
from pathlib import Path
from typing import List, Mapping, Optional

from loguru import logger

DATABASE_FILENAME = "mixxxdb.sqlite"


class DatabaseNotFoundError(Exception):
    """Raised when the Mixxx database cannot be located or opened."""


def get_candidate_paths(
    platform: Optional[str] = None,
    home: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> List[Path]:
    """Return the standard Mixxx database locations for a platform.

    Args:
        platform: sys.platform style identifier (defaults to the running platform)
        home: User home directory (defaults to Path.home())
        env: Environment mapping (defaults to os.environ)

    Returns:
        Candidate paths in lookup order (may be empty on unknown platforms)
    """
    platform = platform or sys.platform
    home = home or Path.home()
    env = os.environ if env is None else env

    if platform == "darwin":
        return [home / "Library" / "Application Support" / "Mixxx" / DATABASE_FILENAME]
    if platform.startswith("linux"):
        return [home / ".mixxx" / DATABASE_FILENAME]
    if platform in ("win32", "cygwin"):
        local_app_data = env.get("LOCALAPPDATA")
        if local_app_data:
            return [Path(local_app_data) / "Mixxx" / DATABASE_FILENAME]
    return []


def find_mixxx_database(
    platform: Optional[str] = None,
    home: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Path:
    """Locate mixxxdb.sqlite in the standard locations.

    Raises:
        DatabaseNotFoundError: If no candidate path exists
    """
    candidates = get_candidate_paths(platform, home, env)
    for path in candidates:
        if path.is_file():
            return path

    searched = ", ".join(str(p) for p in candidates) or "no known locations"
    raise DatabaseNotFoundError(f"{DATABASE_FILENAME} not found (searched: {searched})")


def resolve_database_path(configured: Optional[str] = None) -> Path:
    """Use the configured path when set, otherwise auto-detect.

    Raises:
        DatabaseNotFoundError: If the configured file is missing or detection fails
    """
    if configured:
        path = Path(configured).expanduser()
        if not path.is_file():
            raise DatabaseNotFoundError(f"Configured database not found: {path}")
        return path
    return find_mixxx_database()


def open_readonly(db_path: Path) -> sqlite3.Connection:
    """Open the Mixxx database in read-only mode.

    The connection is opened on the startup thread and then handed to the
    poller thread, so same-thread checking is disabled. Only one thread
    ever uses it.

    Raises:
        DatabaseNotFoundError: If SQLite cannot open the file
    """
    uri = f"{Path(db_path).resolve().as_uri()}?mode=ro"
    try:
        conn = sqlite3.connect(uri, uri=True, check_same_thread=False)
    except sqlite3.Error as e:
        raise DatabaseNotFoundError(f"Could not open {db_path}: {e}") from e

    conn.row_factory = sqlite3.Row  # Enable dict-like access
    logger.info(f"Opened Mixxx database read-only: {db_path}")
    return conn
