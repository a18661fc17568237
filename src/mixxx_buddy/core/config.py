"""
Configuration management for Mixxx Buddy
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class DatabaseConfig:
    """Configuration for locating the Mixxx library database."""

    path: Optional[str] = None  # Auto-detected per platform when unset


@dataclass
class PollerConfig:
    """Configuration for the background session poller."""

    interval_seconds: float = 2.0
    error_backoff_seconds: float = 5.0

    def validate(self) -> None:
        """Validate poller timing values.

        Raises:
            ValueError: If an interval is not positive, or the error backoff
                is shorter than the normal interval
        """
        if self.interval_seconds <= 0:
            raise ValueError(
                f"poller.interval_seconds must be positive, got {self.interval_seconds}"
            )
        if self.error_backoff_seconds <= 0:
            raise ValueError(
                "poller.error_backoff_seconds must be positive, "
                f"got {self.error_backoff_seconds}"
            )
        if self.error_backoff_seconds < self.interval_seconds:
            raise ValueError(
                "poller.error_backoff_seconds must not be shorter than "
                f"poller.interval_seconds ({self.error_backoff_seconds} < "
                f"{self.interval_seconds})"
            )


@dataclass
class WebConfig:
    """Configuration for the local HTTP server."""

    host: str = "127.0.0.1"
    port: int = 8080
    static_dir: Optional[str] = None  # Display bundle served at "/" when set
    allowed_origins: List[str] = field(default_factory=list)

    def validate(self) -> None:
        """Validate web server values.

        Raises:
            ValueError: If the port is out of range
        """
        if not 1 <= self.port <= 65535:
            raise ValueError(f"web.port must be between 1 and 65535, got {self.port}")


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # TRACE, DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = (
        None  # Custom log file path (default: ~/.local/share/mixxx-buddy/mixxx-buddy.log)
    )
    rotation: str = "10 MB"
    retention: int = 5  # Number of rotated files to keep
    console_output: bool = True

    def validate(self) -> None:
        """Validate logging values.

        Raises:
            ValueError: If the level is not a known log level
        """
        if self.level.upper() not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {self.level}. Valid levels are: {sorted(LOG_LEVELS)}"
            )


@dataclass
class Config:
    """Main configuration container."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    poller: PollerConfig = field(default_factory=PollerConfig)
    web: WebConfig = field(default_factory=WebConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> None:
        """Validate every section, raising ValueError on the first problem."""
        self.poller.validate()
        self.web.validate()
        self.logging.validate()


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "mixxx-buddy"
    return Path.home() / ".config" / "mixxx-buddy"


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Current working directory
    2. XDG_CONFIG_HOME/mixxx-buddy (or ~/.config/mixxx-buddy)
    """
    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "mixxx-buddy"
    return Path.home() / ".local" / "share" / "mixxx-buddy"


def _apply_env_overrides(config: Config) -> None:
    """Environment variables win over values read from TOML."""
    db_path = os.environ.get("MIXXX_DB_PATH")
    if db_path:
        config.database.path = db_path

    host = os.environ.get("MIXXX_BUDDY_HOST")
    if host:
        config.web.host = host

    port = os.environ.get("MIXXX_BUDDY_PORT")
    if port:
        try:
            config.web.port = int(port)
        except ValueError:
            raise ValueError(f"MIXXX_BUDDY_PORT must be an integer, got {port!r}") from None

    log_level = os.environ.get("MIXXX_BUDDY_LOG_LEVEL")
    if log_level:
        config.logging.level = log_level


def _parse_config(toml_data: dict) -> Config:
    """Build a Config from parsed TOML, keeping defaults for missing keys."""
    config = Config()

    if "database" in toml_data:
        database_data = toml_data["database"]
        path = database_data.get("path")
        config.database = DatabaseConfig(
            path=str(Path(path).expanduser()) if path else None,
        )

    if "poller" in toml_data:
        poller_data = toml_data["poller"]
        config.poller = PollerConfig(
            interval_seconds=float(
                poller_data.get("interval_seconds", config.poller.interval_seconds)
            ),
            error_backoff_seconds=float(
                poller_data.get(
                    "error_backoff_seconds", config.poller.error_backoff_seconds
                )
            ),
        )

    if "web" in toml_data:
        web_data = toml_data["web"]
        static_dir = web_data.get("static_dir")
        config.web = WebConfig(
            host=web_data.get("host", config.web.host),
            port=int(web_data.get("port", config.web.port)),
            static_dir=str(Path(static_dir).expanduser()) if static_dir else None,
            allowed_origins=list(
                web_data.get("allowed_origins", config.web.allowed_origins)
            ),
        )

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level),
            log_file=logging_data.get("log_file"),
            rotation=logging_data.get("rotation", config.logging.rotation),
            retention=int(logging_data.get("retention", config.logging.retention)),
            console_output=logging_data.get(
                "console_output", config.logging.console_output
            ),
        )

    return config


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file, falling back to defaults.

    Environment variables override TOML values:
    - MIXXX_DB_PATH
    - MIXXX_BUDDY_HOST
    - MIXXX_BUDDY_PORT
    - MIXXX_BUDDY_LOG_LEVEL

    Raises:
        ValueError: If the resulting configuration is invalid
    """
    # Load .env file from config directory if it exists
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    if config_path is None:
        config_path = get_config_path()

    config = Config()
    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                toml_data = tomllib.load(f)
            config = _parse_config(toml_data)
        except (tomllib.TOMLDecodeError, TypeError, ValueError) as e:
            print(f"Error loading configuration from {config_path}: {e}")
            print("Using default configuration.")
            config = Config()

    _apply_env_overrides(config)
    config.validate()
    return config
