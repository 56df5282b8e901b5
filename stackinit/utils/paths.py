"""Project root discovery."""

from __future__ import annotations

from pathlib import Path


def find_repo_root(start: Path, marker: str = "docker-compose.yml") -> Path:
    """Return the first of ``start`` and its ancestors that contains ``marker``.

    Falls back to the parent of ``start`` when no ancestor has the marker.
    """
    start = start.resolve()
    for candidate in (start, *start.parents):
        if (candidate / marker).is_file():
            return candidate
    return start.parent
