"""
CSV import parser for flat trainset snapshots.

Format — comma delimited, with a header row.
Required columns:
  trainset_id, number, status, availability_percentage, branding_priority,
  open_job_cards, has_critical_jobs, fitness_expiry_days, mileage

Valid enum values:
  status → any TrainsetStatus.value ("ready", "standby", "maintenance", "critical")

Boolean columns (has_critical_jobs):
  true/1/yes/t/y  → True
  false/0/no/f/n  → False (default if empty)
  anything else    → row error

Numbers are parsed but not range-checked here; out-of-range values surface as
``InvalidSnapshot`` when the snapshot is classified.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from pydantic import ValidationError

from fleet_advisor.models.trainset import TrainsetSnapshot
from fleet_advisor.recommendations.fleet import FleetEntry
from fleet_advisor.taxonomy.status_taxonomy import TrainsetStatus

logger = logging.getLogger(__name__)

REQUIRED_CSV_COLUMNS = frozenset({
    "trainset_id", "number", "status", "availability_percentage",
    "branding_priority", "open_job_cards", "has_critical_jobs",
    "fitness_expiry_days", "mileage",
})

_TRUE_VALUES = frozenset({"true", "1", "yes", "t", "y"})
_FALSE_VALUES = frozenset({"false", "0", "no", "f", "n"})


def parse_snapshot_csv(path: Path) -> list[FleetEntry]:
    """Parse a CSV file of trainset snapshots into :class:`FleetEntry` objects.

    All rows are parsed before any are returned. If **any** row fails,
    a single :class:`ValueError` is raised listing the first 10 failures.

    Args:
        path: Path to the CSV file (must exist).

    Returns:
        Entries in file order.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If required columns are missing or any row fails to parse.
    """
    if not path.exists():
        raise FileNotFoundError(f"Snapshot CSV file not found: {path}")

    with open(path, encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)

        if reader.fieldnames is None:
            raise ValueError(f"CSV file is empty or has no header row: {path}")

        actual_cols = {c.strip() for c in reader.fieldnames}
        missing = REQUIRED_CSV_COLUMNS - actual_cols
        if missing:
            raise ValueError(
                f"CSV missing required columns: {sorted(missing)}\n"
                f"Found columns: {sorted(actual_cols)}"
            )

        rows = list(reader)

    if not rows:
        logger.warning("Snapshot CSV is empty (header only): %s", path)
        return []

    entries: list[FleetEntry] = []
    errors: list[tuple[int, str]] = []

    for i, row in enumerate(rows):
        line_no = i + 2  # 1-based, skip header row
        try:
            entries.append(_row_to_entry({k.strip(): v for k, v in row.items() if k}))
        except (ValueError, ValidationError) as exc:
            errors.append((line_no, str(exc)))

    if errors:
        max_shown = 10
        detail = "\n".join(f"  Row {ln}: {msg}" for ln, msg in errors[:max_shown])
        suffix = f"\n  … and {len(errors) - max_shown} more" if len(errors) > max_shown else ""
        raise ValueError(
            f"{len(errors)} row(s) failed validation in {path.name}:\n{detail}{suffix}"
        )

    logger.info("Parsed %d snapshots from %s", len(entries), path.name)
    return entries


# ── Private helpers ────────────────────────────────────────────────────────────

def _row_to_entry(row: dict[str, str]) -> FleetEntry:
    """Convert a CSV row dict to a :class:`FleetEntry`."""
    snapshot = TrainsetSnapshot(
        status=_parse_status(row),
        availability_percentage=_parse_float(row, "availability_percentage"),
        branding_priority=_parse_int(row, "branding_priority"),
        open_job_cards=_parse_int(row, "open_job_cards"),
        has_critical_jobs=_parse_bool(row, "has_critical_jobs"),
        fitness_expiry_days=_parse_int(row, "fitness_expiry_days"),
        mileage=_parse_float(row, "mileage", default=0.0),
    )
    return FleetEntry(
        trainset_id=_req(row, "trainset_id"),
        number=_req(row, "number"),
        snapshot=snapshot,
    )


def _req(row: dict[str, str], key: str) -> str:
    """Return a required string field, stripped; raise if empty."""
    v = (row.get(key) or "").strip()
    if not v:
        raise ValueError(f"Required field '{key}' is empty.")
    return v


def _parse_float(row: dict[str, str], key: str, default: float | None = None) -> float:
    v = (row.get(key) or "").strip()
    if not v:
        if default is not None:
            return default
        raise ValueError(f"Required numeric field '{key}' is empty.")
    try:
        return float(v)
    except ValueError:
        raise ValueError(f"Invalid number for '{key}': '{v}'.")


def _parse_int(row: dict[str, str], key: str) -> int:
    v = _req(row, key)
    try:
        return int(v)
    except ValueError:
        raise ValueError(f"Invalid integer for '{key}': '{v}'.")


def _parse_bool(row: dict[str, str], key: str, default: bool = False) -> bool:
    """Parse a boolean-ish string from a CSV row field."""
    v = (row.get(key) or "").strip()
    if not v:
        return default
    flag = v.lower()
    if flag in _TRUE_VALUES:
        return True
    if flag in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean for '{key}': '{v}'.")


def _parse_status(row: dict[str, str]) -> TrainsetStatus:
    raw = _req(row, "status").lower()
    try:
        return TrainsetStatus(raw)
    except ValueError:
        valid = sorted(s.value for s in TrainsetStatus)
        raise ValueError(f"Invalid status value '{raw}'. Valid values: {valid}")
