"""Console logging with bracketed progress markers."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

_LEVEL_MARKERS = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warn",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}


class MarkerFormatter(logging.Formatter):
    """Render records as ``[marker] message``.

    A record may carry its own marker through ``extra={"marker": "step"}``;
    otherwise the marker is derived from the level.
    """

    def __init__(self) -> None:
        super().__init__("[%(marker)s] %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        if not getattr(record, "marker", None):
            record.marker = _LEVEL_MARKERS.get(record.levelno, record.levelname.lower())
        return super().format(record)


def configure_logging(level: str | int = "INFO", stream: TextIO | None = None) -> logging.Handler:
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(MarkerFormatter())

    root = logging.getLogger("stackinit")
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False
    return handler


def marker(name: str) -> dict[str, str]:
    """Build the ``extra`` mapping that tags a record with ``name``."""
    return {"marker": name}
