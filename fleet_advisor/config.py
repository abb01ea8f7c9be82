"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local env overrides (gitignored)
  4. Environment variables        — ``FLEET_ADVISOR_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The classifier's thresholds are deliberately absent: they are fixed by the
rule table in ``fleet_advisor.recommendations.classifier``.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

from fleet_advisor.recommendations.fleet import FleetTargets

# ── Sub-config models ─────────────────────────────────────────────────────────


class DataConfig(BaseModel):
    """Filesystem paths for fleet input and report output."""

    model_config = ConfigDict(frozen=True)

    fleet_file: str = "config/fleet/sample_fleet.json"
    output_dir: str = "data/outputs"


class AdvisorConfig(BaseModel):
    """How data-store records are reduced to classifier snapshots."""

    model_config = ConfigDict(frozen=True)

    critical_job_priority: int = 4

    @field_validator("critical_job_priority")
    @classmethod
    def validate_job_priority(cls, v: int) -> int:
        if not 1 <= v <= 5:
            raise ValueError(f"critical_job_priority must be in [1, 5], got {v}.")
        return v


class TargetsConfig(BaseModel):
    """Fleet operating targets checked by the fleet summary."""

    model_config = ConfigDict(frozen=True)

    service_availability_pct: float = 90.0
    max_critical: int = 2
    min_avg_confidence: float = 0.80

    @field_validator("service_availability_pct")
    @classmethod
    def validate_availability(cls, v: float) -> float:
        if not 0.0 <= v <= 100.0:
            raise ValueError(f"service_availability_pct must be in [0, 100], got {v}.")
        return v

    @field_validator("min_avg_confidence")
    @classmethod
    def validate_confidence(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"min_avg_confidence must be in [0, 1], got {v}.")
        return v

    def to_fleet_targets(self) -> FleetTargets:
        return FleetTargets(
            service_availability_pct=self.service_availability_pct,
            max_critical=self.max_critical,
            min_avg_confidence=self.min_avg_confidence,
        )


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = "data/logs/fleet_advisor.log"
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    data: DataConfig = DataConfig()
    advisor: AdvisorConfig = AdvisorConfig()
    targets: TargetsConfig = TargetsConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    load_dotenv(dotenv_path=root / ".env", override=False)

    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    raw = _apply_env_overrides(raw)

    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply FLEET_ADVISOR_* env vars to the raw config dict.

    Supported overrides:
      FLEET_ADVISOR_FLEET_FILE  → raw["data"]["fleet_file"]
      FLEET_ADVISOR_OUTPUT_DIR  → raw["data"]["output_dir"]
      FLEET_ADVISOR_LOG_LEVEL   → raw["logging"]["level"]
      FLEET_ADVISOR_DEBUG       → raw["debug"]
    """
    if fleet_file := os.environ.get("FLEET_ADVISOR_FLEET_FILE"):
        raw.setdefault("data", {})["fleet_file"] = fleet_file

    if output_dir := os.environ.get("FLEET_ADVISOR_OUTPUT_DIR"):
        raw.setdefault("data", {})["output_dir"] = output_dir

    if log_level := os.environ.get("FLEET_ADVISOR_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("FLEET_ADVISOR_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        data=DataConfig(**raw.get("data", {})),
        advisor=AdvisorConfig(**raw.get("advisor", {})),
        targets=TargetsConfig(**raw.get("targets", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
