"""Thin wrapper around the ``docker compose`` CLI."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Sequence

from stackinit.core.config import Settings
from stackinit.services.pipeline import Stage, StageFailedError

_LOGGER = logging.getLogger(__name__)


def _exit_code(returncode: int) -> int:
    # subprocess reports signal deaths as -N; shells report 128 + N
    if returncode < 0:
        return 128 - returncode
    return returncode


class ComposeClient:
    def __init__(self, settings: Settings, project_dir: Path) -> None:
        self._settings = settings
        self._project_dir = project_dir

    @property
    def project_dir(self) -> Path:
        return self._project_dir

    def command(self, *args: str) -> list[str]:
        return [*self._settings.compose_command, *args]

    def _run(self, args: Sequence[str], *, quiet: bool = False) -> int:
        cmd = self.command(*args)
        _LOGGER.debug("Running: %s", " ".join(cmd))
        output = subprocess.DEVNULL if quiet else None
        completed = subprocess.run(
            cmd,
            cwd=str(self._project_dir),
            stdout=output,
            stderr=output,
            check=False,
        )
        return _exit_code(completed.returncode)

    # Services -----------------------------------------------------------

    def is_running(self, service: str) -> bool:
        try:
            completed = subprocess.run(
                self.command("ps", "-q", service),
                cwd=str(self._project_dir),
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                check=False,
            )
        except OSError as exc:
            _LOGGER.debug("Could not query %s status", service, exc_info=exc)
            return False
        return completed.returncode == 0 and bool(completed.stdout.strip())

    def ensure_running(self, service: str) -> None:
        if self.is_running(service):
            _LOGGER.debug("Service %s already running", service)
            return

        try:
            returncode = self._run(["up", "-d", service])
        except OSError as exc:
            raise StageFailedError(f"Could not start {service}: {exc}", returncode=127) from exc
        if returncode != 0:
            raise StageFailedError(f"Could not start {service}", returncode=returncode)

    # Exec ---------------------------------------------------------------

    def exec(
        self,
        service: str,
        command: Sequence[str],
        *,
        user: str | None = None,
        workdir: str | None = None,
        quiet: bool = False,
    ) -> int:
        args = ["exec", "-T"]
        if user:
            args += ["-u", user]
        if workdir:
            args += ["-w", workdir]
        args += [service, *command]
        return self._run(args, quiet=quiet)

    def run_stage(self, stage: Stage) -> int:
        return self.exec(
            stage.service,
            stage.command,
            user=self._settings.exec_user,
            workdir=self._settings.container_app_dir,
        )

    def ping_database(self) -> bool:
        settings = self._settings
        try:
            returncode = self.exec(
                settings.web_service,
                [
                    "mysqladmin",
                    "ping",
                    "-h",
                    settings.db_host,
                    f"-u{settings.db_user}",
                    f"-p{settings.db_password}",
                    "--silent",
                ],
                user=settings.exec_user,
                quiet=True,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            _LOGGER.debug("Database ping could not run", exc_info=exc)
            return False
        return returncode == 0


__all__ = ["ComposeClient"]
