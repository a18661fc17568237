"""
Mixxx Buddy CLI - Entry point

Loads configuration, opens the Mixxx database read-only, and serves the
current session snapshot over HTTP until interrupted.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from mixxx_buddy.core.config import Config, load_config
from mixxx_buddy.core.database import (
    DatabaseNotFoundError,
    open_readonly,
    resolve_database_path,
)
from mixxx_buddy.core.logging import setup_logging

UVICORN_LOG_LEVELS = {"trace", "debug", "info", "warning", "error", "critical"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mixxx-buddy",
        description="Mixxx Buddy - publish the current Mixxx session playlist as JSON",
    )
    parser.add_argument("--config", type=Path, help="Path to config.toml")
    parser.add_argument("--db", help="Path to mixxxdb.sqlite (auto-detected by default)")
    parser.add_argument("--host", help="Interface to bind the HTTP server to")
    parser.add_argument("--port", type=int, help="Port for the HTTP server")
    parser.add_argument(
        "--log-level",
        help="Log level (TRACE, DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL)",
    )
    return parser


def apply_cli_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Command line flags win over config file and environment values."""
    if args.db:
        config.database.path = args.db
    if args.host:
        config.web.host = args.host
    if args.port is not None:
        config.web.port = args.port
    if args.log_level:
        config.logging.level = args.log_level
    config.validate()
    return config


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the mixxx-buddy command."""
    args = build_parser().parse_args(argv)

    try:
        config = apply_cli_overrides(load_config(args.config), args)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(config.logging)
    logger.info("Starting Mixxx history analyzer...")

    try:
        db_path = resolve_database_path(config.database.path)
        conn = open_readonly(db_path)
    except DatabaseNotFoundError as e:
        logger.error(f"Could not find the Mixxx database: {e}")
        print(f"Fatal: could not find the Mixxx database: {e}", file=sys.stderr)
        sys.exit(1)

    import uvicorn

    from mixxx_buddy.web.main import create_app

    app = create_app(config, conn=conn)
    level = config.logging.level.lower()
    logger.info(f"Serving on http://{config.web.host}:{config.web.port}")
    try:
        uvicorn.run(
            app,
            host=config.web.host,
            port=config.web.port,
            log_level=level if level in UVICORN_LOG_LEVELS else "info",
        )
    finally:
        conn.close()


if __name__ == "__main__":
    main()
