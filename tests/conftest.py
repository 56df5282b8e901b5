"""Shared pytest fixtures for provisioning tests."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from stackinit.core.config import Settings, get_settings

SETTINGS_ENV_KEYS = (
    "APP_URL",
    "STACKINIT_APP_URL",
    "STACKINIT_DB_WAIT_TIMEOUT",
    "STACKINIT_DB_WAIT_INTERVAL",
    "STACKINIT_LOG_LEVEL",
    "STACKINIT_COMPOSE_COMMAND",
)


@pytest.fixture(autouse=True)
def settings_env(monkeypatch: pytest.MonkeyPatch):
    for key in SETTINGS_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()  # type: ignore[attr-defined]
    yield
    get_settings.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture
def settings() -> Settings:
    return Settings(db_wait_timeout=6, db_wait_interval=2)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """
    creates a fake project: docker-compose.yml at the root and a laravel app
    directory holding only .env.example.
    """
    root = tmp_path / "project"
    app_dir = root / "laravel"
    app_dir.mkdir(parents=True)
    (root / "docker-compose.yml").write_text("services: {}\n", encoding="utf-8")
    (app_dir / ".env.example").write_text(
        "APP_NAME=Laravel\nAPP_ENV=local\nAPP_URL=http://localhost\nDB_HOST=db\n",
        encoding="utf-8",
    )
    return root


class FakeClock:
    """Monotonic clock advanced by sleeps and by simulated probe time."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def reset_stackinit_logger():
    yield
    logger = logging.getLogger("stackinit")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
