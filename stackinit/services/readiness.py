"""Bounded polling until a dependent service answers its liveness probe."""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Callable

_LOGGER = logging.getLogger(__name__)

Probe = Callable[[], bool]


class WaitState(str, enum.Enum):
    POLLING = "polling"
    READY = "ready"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class WaitOutcome:
    state: WaitState
    attempts: int
    elapsed: float

    @property
    def ready(self) -> bool:
        return self.state is WaitState.READY


def _probe_once(probe: Probe) -> bool:
    try:
        return bool(probe())
    except Exception as exc:  # noqa: BLE001
        _LOGGER.debug("Liveness probe raised, treating as not ready", exc_info=exc)
        return False


def wait_until_ready(
    probe: Probe,
    *,
    interval: float,
    timeout: float,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> WaitOutcome:
    """Poll ``probe`` every ``interval`` seconds until it succeeds or ``timeout`` elapses.

    The clock is read after every attempt, so a slow probe still gets the
    timeout check. Running out of time yields ``TIMED_OUT`` rather than an
    exception.
    """
    if interval <= 0:
        raise ValueError("interval must be positive")
    if timeout < 0:
        raise ValueError("timeout cannot be negative")

    started = clock()
    attempts = 0
    state = WaitState.POLLING

    while state is WaitState.POLLING:
        attempts += 1
        if _probe_once(probe):
            state = WaitState.READY
            break

        elapsed = clock() - started
        if elapsed > timeout:
            state = WaitState.TIMED_OUT
            break

        _LOGGER.debug("Not ready after attempt %d (%.1fs elapsed)", attempts, elapsed)
        sleep(interval)

    return WaitOutcome(state=state, attempts=attempts, elapsed=clock() - started)


__all__ = ["Probe", "WaitOutcome", "WaitState", "wait_until_ready"]
