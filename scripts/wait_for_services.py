"""Utility script to wait for the database before running anything else."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Sequence

from stackinit.core.config import get_settings
from stackinit.core.logging import configure_logging
from stackinit.provision import wait_for_database
from stackinit.services.compose import ComposeClient
from stackinit.utils.paths import find_repo_root


def main(argv: Sequence[str] | None = None) -> int:
    settings = get_settings()
    configure_logging(settings.log_level)

    start = Path(argv[0]) if argv else Path(__file__).resolve().parent
    compose = ComposeClient(settings, find_repo_root(start, settings.marker_file))
    outcome = wait_for_database(compose, settings)
    return 0 if outcome.ready else 1


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
