"""Sequential execution of typed provisioning stages."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Sequence

from pydantic import BaseModel, ConfigDict, Field

from stackinit.core.logging import marker

_LOGGER = logging.getLogger(__name__)

COMMAND_NOT_FOUND = 127


class StageFailedError(Exception):
    """Raised when a critical step outside the stage list fails."""

    def __init__(self, message: str, *, returncode: int = 1) -> None:
        super().__init__(message)
        self.returncode = returncode or 1


class Stage(BaseModel):
    label: str
    command: list[str] = Field(min_length=1)
    service: str = "web"
    critical: bool = True

    model_config = ConfigDict(frozen=True)


StageExecutor = Callable[[Stage], int]


@dataclass
class PipelineReport:
    returncode: int = 0
    executed: list[str] = field(default_factory=list)
    tolerated: list[str] = field(default_factory=list)
    failed_stage: str | None = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _execute(stage: Stage, executor: StageExecutor) -> int:
    try:
        return executor(stage)
    except OSError as exc:
        _LOGGER.error("Could not launch %r: %s", stage.command[0], exc)
        return COMMAND_NOT_FOUND


def run_stages(stages: Sequence[Stage], executor: StageExecutor) -> PipelineReport:
    """Run ``stages`` in order.

    A failing critical stage stops the run and its return code is reported.
    Best-effort failures are logged and the run continues.
    """
    report = PipelineReport()
    for stage in stages:
        _LOGGER.info("%s", stage.label, extra=marker("step"))
        returncode = _execute(stage, executor)
        report.executed.append(stage.label)

        if returncode == 0:
            continue

        if stage.critical:
            _LOGGER.error("%s failed with exit code %d; aborting.", stage.label, returncode)
            report.returncode = returncode
            report.failed_stage = stage.label
            return report

        _LOGGER.warning("%s failed with exit code %d; continuing.", stage.label, returncode)
        report.tolerated.append(stage.label)
    return report


__all__ = [
    "PipelineReport",
    "Stage",
    "StageExecutor",
    "StageFailedError",
    "run_stages",
]
