"""First-time provisioning of the Laravel stack running under Docker Compose."""

from __future__ import annotations

import logging
from pathlib import Path

from stackinit.core.config import Settings
from stackinit.core.logging import marker
from stackinit.services.compose import ComposeClient
from stackinit.services.pipeline import PipelineReport, Stage, StageFailedError, run_stages
from stackinit.services.readiness import WaitOutcome, wait_until_ready
from stackinit.utils.env_file import EnvTemplateMissingError, UpsertResult, upsert_env_value

_LOGGER = logging.getLogger(__name__)

SEED_LABEL = "Seed database"


def build_stages(settings: Settings) -> list[Stage]:
    web = settings.web_service
    artisan = ["php", "artisan"]
    return [
        Stage(
            label="Composer install",
            command=["composer", "install", "--no-interaction", "--prefer-dist"],
            service=web,
        ),
        Stage(label="Generate application key", command=[*artisan, "key:generate", "--force"], service=web, critical=False),
        Stage(label="Run migrations", command=[*artisan, "migrate", "--force"], service=web),
        Stage(label=SEED_LABEL, command=[*artisan, "db:seed", "--force"], service=web, critical=False),
        Stage(label="Link storage", command=[*artisan, "storage:link"], service=web, critical=False),
        Stage(label="Clear optimisation caches", command=[*artisan, "optimize:clear"], service=web, critical=False),
    ]


def ensure_services(compose: ComposeClient, settings: Settings) -> None:
    _LOGGER.info(
        "Starting required services (%s, %s) if needed",
        settings.db_service,
        settings.web_service,
        extra=marker("step"),
    )
    compose.ensure_running(settings.db_service)
    compose.ensure_running(settings.web_service)


def wait_for_database(compose: ComposeClient, settings: Settings) -> WaitOutcome:
    _LOGGER.info("Waiting for database to be ready", extra=marker("step"))
    outcome = wait_until_ready(
        compose.ping_database,
        interval=settings.db_wait_interval,
        timeout=settings.db_wait_timeout,
    )
    if outcome.ready:
        _LOGGER.info("Database is ready.", extra=marker("ok"))
    else:
        _LOGGER.warning(
            "Database not ready after %ss; continuing anyway.",
            f"{settings.db_wait_timeout:g}",
        )
    return outcome


def prepare_env(repo_root: Path, settings: Settings, app_url: str) -> UpsertResult:
    app_dir = repo_root / settings.host_app_dir
    env_path = app_dir / settings.env_file
    _LOGGER.info("Preparing %s", settings.env_file, extra=marker("step"))
    try:
        result = upsert_env_value(env_path, "APP_URL", app_url, template=app_dir / settings.env_template)
    except EnvTemplateMissingError as exc:
        raise StageFailedError(str(exc), returncode=1) from exc
    except (OSError, ValueError) as exc:
        raise StageFailedError(f"Could not update {env_path}: {exc}", returncode=1) from exc

    _LOGGER.debug("APP_URL %s in %s", result.value, env_path)
    return result


def _summary(settings: Settings, app_url: str, report: PipelineReport) -> None:
    _LOGGER.info("Laravel ready at: %s", app_url, extra=marker("done"))
    _LOGGER.info("Filament admin: %s", settings.admin_url)
    if SEED_LABEL in report.tolerated:
        _LOGGER.warning("Seeding failed; default login is unavailable.")
    else:
        _LOGGER.info("Default login: admin@example.com / password (if seed applied).")


def provision(settings: Settings, repo_root: Path, compose: ComposeClient | None = None) -> int:
    """Run every provisioning step and return the process exit code."""
    app_url = settings.app_url
    compose = compose or ComposeClient(settings, repo_root)

    _LOGGER.info("Laravel initialization starting", extra=marker("init"))
    _LOGGER.info("Repository root: %s", repo_root)

    try:
        ensure_services(compose, settings)
        wait_for_database(compose, settings)
        prepare_env(repo_root, settings, app_url)
    except StageFailedError as exc:
        _LOGGER.error("%s (exit code %d)", exc, exc.returncode)
        return exc.returncode

    report = run_stages(build_stages(settings), compose.run_stage)
    if not report.ok:
        return report.returncode

    _summary(settings, app_url, report)
    return 0
