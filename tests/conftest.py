"""
Shared pytest fixtures for the Fleet Advisor test suite.

Provides:
  - ``make_snapshot``: factory for ``TrainsetSnapshot`` with healthy defaults
    (ready, 95% availability, no job cards, certificate valid for 200 days)
    that individual tests override field by field.
  - ``sample_record``: a data-store ``TrainsetRecord`` with two certificates
    and a mix of job cards.
  - ``quiet_config_file``: a TOML config that logs nowhere but the console,
    for CLI tests.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Callable

import pytest

from fleet_advisor.models.trainset import (
    FitnessCertificate,
    JobCard,
    TrainsetRecord,
    TrainsetSnapshot,
)
from fleet_advisor.taxonomy.status_taxonomy import JobCardStatus, TrainsetStatus

AS_OF = date(2026, 10, 19)

HEALTHY_DEFAULTS: dict = {
    "status":                  TrainsetStatus.READY,
    "availability_percentage": 95.0,
    "branding_priority":       5,
    "open_job_cards":          0,
    "has_critical_jobs":       False,
    "fitness_expiry_days":     200,
    "mileage":                 12_000.0,
}


def build_snapshot(**overrides) -> TrainsetSnapshot:
    """Build a ``TrainsetSnapshot`` from ``HEALTHY_DEFAULTS`` plus overrides."""
    return TrainsetSnapshot(**{**HEALTHY_DEFAULTS, **overrides})


@pytest.fixture
def make_snapshot() -> Callable[..., TrainsetSnapshot]:
    return build_snapshot


@pytest.fixture
def sample_record() -> TrainsetRecord:
    """KMRL-009: three open job cards, one closed, two certificates."""
    return TrainsetRecord(
        trainset_id="3",
        number="KMRL-009",
        status=TrainsetStatus.MAINTENANCE,
        bay_position=9,
        mileage=16_890.3,
        last_cleaning=date(2026, 10, 12),
        branding_priority=7,
        availability_percentage=88.5,
        fitness_certificates=(
            FitnessCertificate(expiry_date=date(2027, 1, 30)),
            FitnessCertificate(certificate_type="Brake Test", expiry_date=date(2026, 11, 8)),
        ),
        job_cards=(
            JobCard(description="Door sensor calibration", priority=3),
            JobCard(description="Brake pad replacement", priority=3),
            JobCard(description="Routine inspection", priority=2, status=JobCardStatus.IN_PROGRESS),
            JobCard(description="Bogie repair", priority=5, status=JobCardStatus.CLOSED),
        ),
    )


@pytest.fixture
def quiet_config_file(tmp_path: Path) -> Path:
    """Config TOML with no log file and output under ``tmp_path``."""
    path = tmp_path / "config" / "test.toml"
    path.parent.mkdir(parents=True, exist_ok=True)
    out_dir = (tmp_path / "outputs").as_posix()
    path.write_text(
        "[data]\n"
        'fleet_file = "config/fleet/sample_fleet.json"\n'
        f'output_dir = "{out_dir}"\n'
        "\n[logging]\n"
        'level = "WARNING"\n'
        'log_file = ""\n',
        encoding="utf-8",
    )
    return path
