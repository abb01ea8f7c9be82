"""
Format dispatch for fleet input files.

``.csv`` files hold flat snapshots (see ``fleet_csv``); anything else is read
as data-store JSON records (see ``fleet_json``) and reduced to snapshots as of
the given date.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

from fleet_advisor.ingestion.fleet_csv import parse_snapshot_csv
from fleet_advisor.ingestion.fleet_json import load_fleet_records, records_to_entries
from fleet_advisor.models.trainset import DEFAULT_CRITICAL_JOB_PRIORITY
from fleet_advisor.recommendations.fleet import FleetEntry


def load_fleet_entries(
    path: Path,
    as_of: date | None = None,
    critical_job_priority: int = DEFAULT_CRITICAL_JOB_PRIORITY,
) -> list[FleetEntry]:
    """Load classifier inputs from a CSV or JSON fleet file.

    Args:
        path:                  Fleet file.
        as_of:                 Reference date for certificate expiry (JSON
                               only). Defaults to today.
        critical_job_priority: Job card priority counted as safety-critical
                               (JSON only).

    Returns:
        Fleet entries in file order.
    """
    if path.suffix.lower() == ".csv":
        return parse_snapshot_csv(path)

    records = load_fleet_records(path)
    return records_to_entries(
        records,
        as_of=as_of or date.today(),
        critical_job_priority=critical_job_priority,
    )
