"""Helpers for maintaining ``KEY=value`` dotenv files in place."""

from __future__ import annotations

import enum
import shutil
from pathlib import Path


class EnvTemplateMissingError(FileNotFoundError):
    """Raised when neither the env file nor its template exists."""


class UpsertResult(str, enum.Enum):
    CREATED = "created"
    APPENDED = "appended"
    REPLACED = "replaced"
    UNCHANGED = "unchanged"


def _key_prefix(key: str) -> str:
    return f"{key}="


def _split_lines(text: str) -> list[str]:
    # only "\n" separates entries; other Unicode line breaks belong to the value
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def read_env_value(path: Path, key: str) -> str | None:
    if not path.exists():
        return None
    prefix = _key_prefix(key)
    for line in _split_lines(path.read_text(encoding="utf-8")):
        if line.startswith(prefix):
            return line[len(prefix):]
    return None


def ensure_env_file(path: Path, template: Path | None) -> bool:
    """Copy ``template`` to ``path`` when ``path`` is missing.

    Returns ``True`` when the file was created.
    """
    if path.exists():
        return False
    if template is None or not template.is_file():
        raise EnvTemplateMissingError(f"{path} does not exist and no template found at {template}")
    path.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(template, path)
    return True


def upsert_env_value(path: Path, key: str, value: str, template: Path | None = None) -> UpsertResult:
    """Make ``path`` contain exactly one ``key=value`` line.

    The first existing ``key=`` line is rewritten in place and later duplicates
    are dropped; without one the pair is appended. All other lines keep their
    content and order.
    """
    if not key or "=" in key or any(ch in key + value for ch in "\r\n"):
        raise ValueError(f"Cannot write {key!r}={value!r} as a single env line")

    created = ensure_env_file(path, template)

    prefix = _key_prefix(key)
    wanted = f"{prefix}{value}"
    original = path.read_text(encoding="utf-8")
    lines = _split_lines(original)

    updated: list[str] = []
    found = False
    for line in lines:
        if line.startswith(prefix):
            if not found:
                updated.append(wanted)
                found = True
            continue
        updated.append(line)

    if not found:
        updated.append(wanted)

    content = "\n".join(updated) + "\n"
    if content != original:
        path.write_text(content, encoding="utf-8")

    if created:
        return UpsertResult.CREATED
    if not found:
        return UpsertResult.APPENDED
    if content == original:
        return UpsertResult.UNCHANGED
    return UpsertResult.REPLACED
