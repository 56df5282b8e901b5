from __future__ import annotations

import pytest
from pydantic import ValidationError

from stackinit.services.pipeline import Stage, StageFailedError, run_stages


def _stages() -> list[Stage]:
    return [
        Stage(label="install", command=["composer", "install"]),
        Stage(label="key", command=["php", "artisan", "key:generate"], critical=False),
        Stage(label="migrate", command=["php", "artisan", "migrate"]),
        Stage(label="seed", command=["php", "artisan", "db:seed"], critical=False),
    ]


def _executor(results: dict[str, int], calls: list[str]):
    def execute(stage: Stage) -> int:
        calls.append(stage.label)
        return results.get(stage.label, 0)

    return execute


def test_all_stages_succeed() -> None:
    calls: list[str] = []

    report = run_stages(_stages(), _executor({}, calls))

    assert report.ok
    assert calls == ["install", "key", "migrate", "seed"]
    assert report.tolerated == []
    assert report.failed_stage is None


def test_critical_failure_stops_pipeline() -> None:
    calls: list[str] = []

    report = run_stages(_stages(), _executor({"migrate": 3}, calls))

    assert not report.ok
    assert report.returncode == 3
    assert report.failed_stage == "migrate"
    assert calls == ["install", "key", "migrate"]


def test_best_effort_failure_continues() -> None:
    calls: list[str] = []

    report = run_stages(_stages(), _executor({"key": 1, "seed": 5}, calls))

    assert report.ok
    assert report.returncode == 0
    assert calls == ["install", "key", "migrate", "seed"]
    assert report.tolerated == ["key", "seed"]


def test_executor_oserror_is_command_not_found() -> None:
    def missing(stage: Stage) -> int:
        raise FileNotFoundError("docker")

    report = run_stages(_stages(), missing)

    assert report.returncode == 127
    assert report.executed == ["install"]


def test_stage_logs_label_before_running(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level("INFO", logger="stackinit")

    run_stages(_stages()[:1], lambda stage: 0)

    records = [r for r in caplog.records if getattr(r, "marker", None) == "step"]
    assert [r.getMessage() for r in records] == ["install"]


def test_stage_requires_command() -> None:
    with pytest.raises(ValidationError):
        Stage(label="empty", command=[])


def test_stage_failed_error_never_reports_success() -> None:
    assert StageFailedError("boom", returncode=0).returncode == 1
    assert StageFailedError("boom", returncode=4).returncode == 4


def test_stage_label_with_percent_sign_is_logged_verbatim(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level("INFO", logger="stackinit")

    run_stages([Stage(label="Warm 100% of caches %s", command=["true"])], lambda stage: 0)

    assert [r.getMessage() for r in caplog.records if getattr(r, "marker", None) == "step"] == [
        "Warm 100% of caches %s"
    ]
