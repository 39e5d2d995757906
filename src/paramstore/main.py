"""Command-line entry point for paramstore."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from paramstore.config import Settings

logger = logging.getLogger(__name__)


def setup_logging(
    level: str = "WARNING",
    debug: bool = False,
    log_format: str = "text",
    log_to_file: bool = False,
    log_file_path: Path | None = None,
    log_file_max_bytes: int = 10 * 1024 * 1024,
    log_file_backup_count: int = 5,
) -> None:
    """Configure logging with console and optional rotating file output.

    Console output goes to stderr so it never mixes with values printed by
    ``paramstore get``.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR)
        debug: If True, overrides level to DEBUG
        log_format: "text" or "json"
        log_to_file: Enable file logging in addition to console
        log_file_path: Path to log file (required for file logging)
        log_file_max_bytes: Maximum size per log file before rotation
        log_file_backup_count: Number of rotated backup files to keep
    """
    effective_level = logging.DEBUG if debug else getattr(logging, level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(effective_level)
    root_logger.handlers.clear()

    from paramstore.utils.logging import JSONFormatter, LogSanitizer, SanitizingFormatter

    formatter: logging.Formatter
    if log_format == "json":
        formatter = JSONFormatter()
    else:
        formatter = SanitizingFormatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(effective_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(LogSanitizer())
    root_logger.addHandler(console_handler)

    if log_to_file and log_file_path:
        try:
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_file_path,
                maxBytes=log_file_max_bytes,
                backupCount=log_file_backup_count,
                encoding="utf-8",
            )
            file_handler.setLevel(effective_level)
            file_handler.setFormatter(formatter)
            file_handler.addFilter(LogSanitizer())
            root_logger.addHandler(file_handler)
            logging.debug(f"File logging enabled: {log_file_path}")
        except OSError as e:
            # Graceful degradation - continue with console-only logging
            logging.warning(f"Failed to initialize file logging: {e}. Using console-only logging.")


def build_parser(defaults: Settings) -> argparse.ArgumentParser:
    """Build the argument parser, showing ``defaults`` in the help text."""
    from paramstore import __version__

    parser = argparse.ArgumentParser(
        prog="paramstore",
        description="paramstore - flat-file parameter storage",
    )
    parser.add_argument(
        "--file",
        default=None,
        help=f"Parameter file (default: {defaults.params_path}, env: PARAMSTORE_PARAMS_FILE)",
    )
    parser.add_argument(
        "--mode",
        default=None,
        choices=["plain", "compressed", "encrypted"],
        help=f"Value encoding (default: {defaults.mode.name.lower()}, env: PARAMSTORE_MODE)",
    )
    parser.add_argument(
        "--passphrase",
        default=None,
        help="Passphrase for encrypted mode (env: PARAMSTORE_PASSPHRASE)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {defaults.log_level}, env: PARAMSTORE_LOG_LEVEL)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Enable debug logging (env: PARAMSTORE_DEBUG)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"paramstore {__version__}",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("init", help="Create the parameter file (or check its mode)")

    get_cmd = commands.add_parser("get", help="Print the value of a parameter")
    get_cmd.add_argument("name")

    set_cmd = commands.add_parser("set", help="Store a parameter")
    set_cmd.add_argument("name")
    set_cmd.add_argument("value")

    delete_cmd = commands.add_parser("delete", help="Remove a parameter")
    delete_cmd.add_argument("name")

    commands.add_parser("show-config", help="Print the effective configuration")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the paramstore CLI.

    Returns:
        Process exit code (0 on success, 1 on storage errors)
    """
    from paramstore.config import Settings, get_settings, reset_settings
    from paramstore.storage import StorageError

    env_settings = get_settings()
    args = build_parser(env_settings).parse_args(argv)

    cli_overrides: dict[str, object] = {}
    if args.file is not None:
        cli_overrides["params_file"] = Path(args.file)
    if args.mode is not None:
        cli_overrides["mode"] = args.mode
    if args.passphrase is not None:
        cli_overrides["passphrase"] = args.passphrase
    if args.log_level is not None:
        cli_overrides["log_level"] = args.log_level
    if args.debug:
        cli_overrides["debug"] = True

    reset_settings()
    settings = Settings(**cli_overrides)

    setup_logging(
        level=settings.log_level,
        debug=settings.debug,
        log_format=settings.log_format,
        log_to_file=settings.log_to_file,
        log_file_path=settings.log_file_path if settings.log_to_file else None,
        log_file_max_bytes=settings.log_file_max_bytes,
        log_file_backup_count=settings.log_file_backup_count,
    )

    if args.command == "show-config":
        settings.print_config()
        return 0

    try:
        store = settings.open_store()
        if args.command == "init":
            print(f"Parameter file ready: {store.path} ({store.mode.name.lower()})")
        elif args.command == "get":
            print(store.get(args.name))
        elif args.command == "set":
            store.set(args.name, args.value)
        elif args.command == "delete":
            store.delete(args.name)
    except StorageError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
