"""Runtime settings: defaults, then environment (and .env), then command line flags."""

import argparse
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_PORT = "3000"
DEFAULT_HOST = ""  # all interfaces
DEFAULT_DB_PATH = "./links.db"
DEFAULT_LOG_LEVEL = "INFO"

USAGE_EPILOG = """\
Environment Variables:
  PORT       Server port (default: 3000)
  HOST       Server host (default: all interfaces)
  DB_PATH    Database file path (default: ./links.db)
  LOG_LEVEL  Logging level (default: INFO)

Examples:
  golinks --port 8080 --db-path /data/links.db
  PORT=8080 golinks
  golinks -p 8080 -d /tmp/links.db
"""


class ConfigError(Exception):
    """Settings failed validation."""


@dataclass
class Settings:
    port: int = int(DEFAULT_PORT)
    host: str = DEFAULT_HOST
    db_path: str = DEFAULT_DB_PATH
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


def build_parser() -> argparse.ArgumentParser:
    # -h is the host shorthand, so help is only reachable as --help
    parser = argparse.ArgumentParser(
        prog="golinks",
        description="Go Links - a simple URL shortener",
        epilog=USAGE_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("-p", "--port", help="Server port (can also be set via PORT env var)")
    parser.add_argument("-h", "--host", help="Server host (can also be set via HOST env var)")
    parser.add_argument("-d", "--db-path", dest="db_path", help="Database file path (can also be set via DB_PATH env var)")
    parser.add_argument("--log-level", dest="log_level", help="Logging level (can also be set via LOG_LEVEL env var)")
    parser.add_argument("--help", action="help", help="Show help information")
    return parser


def load_settings(argv: list[str] | None = None, environ: dict | None = None, dotenv: bool = True) -> Settings:
    if dotenv:
        load_dotenv()
    env = os.environ if environ is None else environ
    args = build_parser().parse_args(argv)

    port = args.port or env.get("PORT") or DEFAULT_PORT
    # HOST="" in the environment still means all interfaces
    host = args.host if args.host is not None else env.get("HOST", DEFAULT_HOST)
    db_path = args.db_path if args.db_path is not None else env.get("DB_PATH") or DEFAULT_DB_PATH
    log_level = args.log_level or env.get("LOG_LEVEL") or DEFAULT_LOG_LEVEL

    return validate(port, host, db_path, log_level)


def validate(port: str, host: str, db_path: str, log_level: str) -> Settings:
    try:
        port_num = int(port)
    except (TypeError, ValueError):
        raise ConfigError(f"invalid port '{port}': must be a number")
    if not 1 <= port_num <= 65535:
        raise ConfigError(f"invalid port {port_num}: must be between 1 and 65535")

    if not db_path:
        raise ConfigError("database path cannot be empty")

    if not isinstance(logging.getLevelName(str(log_level).upper()), int):
        raise ConfigError(f"invalid log level '{log_level}'")

    db_dir = Path(db_path).parent
    if not db_dir.exists():
        try:
            db_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigError(f"cannot create database directory '{db_dir}': {e}") from e

    return Settings(port=port_num, host=host, db_path=db_path, log_level=log_level.upper())
