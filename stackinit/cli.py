"""Command-line entry point for provisioning the stack."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from pydantic import ValidationError

from stackinit.core.config import Settings
from stackinit.core.logging import configure_logging
from stackinit.provision import provision
from stackinit.utils.paths import find_repo_root

_LOGGER = logging.getLogger(__name__)

SIGINT_EXIT_CODE = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stackinit",
        description=(
            "Start the compose services, wait for the database, prepare .env, "
            "install dependencies, migrate and seed."
        ),
    )
    parser.add_argument("--app-url", help="Base URL written to APP_URL (default: $APP_URL or http://web.localhost)")
    parser.add_argument("--project-root", type=Path, help="Use this directory instead of searching for docker-compose.yml")
    parser.add_argument("--db-timeout", type=float, help="Seconds to wait for the database (default: 60)")
    parser.add_argument("--db-interval", type=float, help="Seconds between database pings (default: 2)")
    parser.add_argument("--log-level", help="Logging level (default: INFO)")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    overrides: dict[str, Any] = {}
    if args.app_url:
        overrides["app_url"] = args.app_url
    if args.db_timeout is not None:
        overrides["db_wait_timeout"] = args.db_timeout
    if args.db_interval is not None:
        overrides["db_wait_interval"] = args.db_interval
    if args.log_level:
        overrides["log_level"] = args.log_level
    return Settings(**overrides)


def main(argv: Sequence[str] | None = None, *, start_dir: Path | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = settings_from_args(args)
    except ValidationError as exc:
        configure_logging("INFO", stream=sys.stderr)
        _LOGGER.error("Invalid configuration:\n%s", exc)
        return 2

    configure_logging(settings.log_level)

    if args.project_root is not None:
        repo_root = args.project_root.resolve()
    else:
        repo_root = find_repo_root(start_dir or Path.cwd(), settings.marker_file)

    try:
        return provision(settings, repo_root)
    except KeyboardInterrupt:
        _LOGGER.error("Interrupted.")
        return SIGINT_EXIT_CODE


if __name__ == "__main__":
    sys.exit(main())
