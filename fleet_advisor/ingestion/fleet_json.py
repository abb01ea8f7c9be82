"""
JSON fleet loader: data-store trainset records → ``TrainsetRecord`` →
``FleetEntry``.

Accepted shapes
---------------
Either a document with a ``trainsets`` array::

    {"trainsets": [{"id": "1", "number": "KMRL-001", ...}, ...]}

or a bare array of trainset objects.  Each object follows the data store's
field names; ``id`` is accepted as an alias for ``trainset_id``::

    {
      "id": "1",
      "number": "KMRL-001",
      "status": "ready",
      "bay_position": 1,
      "mileage": 15420.5,
      "last_cleaning": "2024-01-15T08:00:00Z",
      "branding_priority": 9,
      "availability_percentage": 98.2,
      "fitness_certificates": [
        {"certificate_type": "Annual Fitness", "expiry_date": "2025-06-15", "status": "active"}
      ],
      "job_cards": [
        {"status": "open", "priority": 2, "description": "Interior LED light replacement"}
      ]
    }

Validation rules
----------------
- Duplicate ``number`` values are rejected.
- Every record must pass ``TrainsetRecord`` validation; failures are
  aggregated into one ``ValueError`` (first 10 shown).

Usage
-----
    from fleet_advisor.ingestion.fleet_json import load_fleet_records, records_to_entries

    records = load_fleet_records(Path("config/fleet/sample_fleet.json"))
    entries = records_to_entries(records, as_of=date(2024, 10, 1))
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from fleet_advisor.models.trainset import DEFAULT_CRITICAL_JOB_PRIORITY, TrainsetRecord
from fleet_advisor.recommendations.fleet import FleetEntry

log = logging.getLogger(__name__)


def load_fleet_records(path: Path) -> list[TrainsetRecord]:
    """Load and validate trainset records from a JSON file.

    Args:
        path: Path to the JSON file (must exist).

    Returns:
        Records in file order.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: On malformed JSON, an unexpected top-level shape,
            duplicate fleet numbers, or invalid records.
    """
    if not path.exists():
        raise FileNotFoundError(f"Fleet JSON file not found: {path}")

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Malformed JSON in {path.name}: {exc}") from exc

    items = raw.get("trainsets") if isinstance(raw, dict) else raw
    if not isinstance(items, list):
        raise ValueError(
            f"{path.name}: expected a list of trainsets or an object with a 'trainsets' list."
        )

    records: list[TrainsetRecord] = []
    errors: list[tuple[int, str]] = []
    seen: set[str] = set()

    for i, item in enumerate(items):
        try:
            record = _item_to_record(item)
        except (ValueError, ValidationError) as exc:
            errors.append((i, str(exc)))
            continue
        if record.number in seen:
            errors.append((i, f"Duplicate trainset number '{record.number}'."))
            continue
        seen.add(record.number)
        records.append(record)

    if errors:
        max_shown = 10
        detail = "\n".join(f"  Trainset[{idx}]: {msg}" for idx, msg in errors[:max_shown])
        suffix = f"\n  … and {len(errors) - max_shown} more" if len(errors) > max_shown else ""
        raise ValueError(
            f"{len(errors)} trainset(s) failed validation in {path.name}:\n{detail}{suffix}"
        )

    log.info("Loaded %d trainset records from %s", len(records), path.name)
    return records


def records_to_entries(
    records: list[TrainsetRecord],
    as_of: date,
    critical_job_priority: int = DEFAULT_CRITICAL_JOB_PRIORITY,
) -> list[FleetEntry]:
    """Derive classifier inputs from records, preserving order."""
    return [
        FleetEntry(
            trainset_id=r.trainset_id,
            number=r.number,
            snapshot=r.to_snapshot(as_of, critical_job_priority=critical_job_priority),
        )
        for r in records
    ]


# ── Private helpers ────────────────────────────────────────────────────────────

def _item_to_record(item: Any) -> TrainsetRecord:
    if not isinstance(item, dict):
        raise ValueError(f"Expected an object, got {type(item).__name__}.")

    data = dict(item)
    if "trainset_id" not in data and "id" in data:
        data["trainset_id"] = data.pop("id")
    if data.get("trainset_id") is not None:
        data["trainset_id"] = str(data["trainset_id"])
    if data.get("last_cleaning"):
        data["last_cleaning"] = _parse_day(data["last_cleaning"], "last_cleaning")

    raw_certs = data.get("fitness_certificates") or []
    if not isinstance(raw_certs, list):
        raise ValueError(
            f"'fitness_certificates' must be a list, got {type(raw_certs).__name__}."
        )

    certs = []
    for cert in raw_certs:
        if not isinstance(cert, dict):
            raise ValueError(
                f"Expected a fitness certificate object, got {type(cert).__name__}."
            )
        cert = dict(cert)
        cert["expiry_date"] = _parse_day(cert.get("expiry_date"), "expiry_date")
        certs.append(cert)
    data["fitness_certificates"] = certs
    data["job_cards"] = data.get("job_cards") or []

    return TrainsetRecord.model_validate(data)


def _parse_day(value: Any, key: str) -> date:
    """Accept ``YYYY-MM-DD`` or an ISO 8601 timestamp; return the calendar date."""
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Required date field '{key}' is empty.")
    v = value.strip()
    try:
        if "T" in v:
            return datetime.fromisoformat(v.replace("Z", "+00:00")).date()
        return date.fromisoformat(v)
    except ValueError:
        raise ValueError(
            f"Invalid date for '{key}': '{v}'. Expected YYYY-MM-DD or ISO 8601."
        )
