"""Core infrastructure layer - no business logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML)
- Read-only access to the Mixxx database (SQLite)
- Logging (Loguru)
"""

from .config import (
    Config,
    DatabaseConfig,
    LoggingConfig,
    PollerConfig,
    WebConfig,
    get_config_dir,
    get_config_path,
    get_data_dir,
    load_config,
)
from .database import (
    DatabaseNotFoundError,
    find_mixxx_database,
    get_candidate_paths,
    open_readonly,
    resolve_database_path,
)
from .logging import setup_logging

__all__ = [
    "Config",
    "DatabaseConfig",
    "LoggingConfig",
    "PollerConfig",
    "WebConfig",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "load_config",
    "DatabaseNotFoundError",
    "find_mixxx_database",
    "get_candidate_paths",
    "open_readonly",
    "resolve_database_path",
    "setup_logging",
]
