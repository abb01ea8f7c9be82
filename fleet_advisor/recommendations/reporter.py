"""
Recommendation report writer: CSV and JSON output for classified fleets.

All functions are pure I/O.  They consume in-memory ``AdvisedTrainset`` lists
and ``FleetSummary`` objects and write human-readable + machine-readable files.

Output files
------------
  data/outputs/
    recommendations_{date}.csv   -- one row per trainset, input order
    recommendations_{date}.json  -- same data, structured JSON
    fleet_summary_{date}.json    -- FleetSummary.to_dict() + provenance
"""

from __future__ import annotations

import csv
import json
import logging
from datetime import date
from pathlib import Path

from fleet_advisor.recommendations.fleet import AdvisedTrainset, FleetSummary

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "v1.0.0"


def write_recommendation_csv(
    advised: list[AdvisedTrainset],
    output_dir: Path,
    run_date: date | None = None,
) -> Path:
    """Write one CSV row per classified trainset.

    Columns: number, trainset_id, current_status, recommended_status,
             status_changed, confidence, priority, readiness_score,
             reasons, risk_factors.  List columns are joined with ``"; "``.

    Args:
        advised:    Output of ``classify_fleet()``.
        output_dir: Directory to write the file (created if missing).
        run_date:   Date label for the filename. Defaults to today.

    Returns:
        Path to the written CSV file.
    """
    if run_date is None:
        run_date = date.today()

    output_dir.mkdir(parents=True, exist_ok=True)
    csv_path = output_dir / f"recommendations_{run_date}.csv"

    fieldnames = [
        "number", "trainset_id", "current_status", "recommended_status",
        "status_changed", "confidence", "priority", "readiness_score",
        "reasons", "risk_factors",
    ]

    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for a in advised:
            rec = a.recommendation
            writer.writerow(
                {
                    "number":             a.number,
                    "trainset_id":        a.trainset_id,
                    "current_status":     a.current_status.value,
                    "recommended_status": rec.recommended_status.value,
                    "status_changed":     a.status_changed,
                    "confidence":         rec.confidence,
                    "priority":           rec.priority,
                    "readiness_score":    rec.readiness_score,
                    "reasons":            "; ".join(rec.reasons),
                    "risk_factors":       "; ".join(rec.risk_factors),
                }
            )

    logger.info("Recommendation CSV written: %s (%d rows)", csv_path, len(advised))
    return csv_path


def write_recommendation_json(
    advised: list[AdvisedTrainset],
    output_dir: Path,
    run_date: date | None = None,
    as_of: date | None = None,
) -> Path:
    """Write classified trainsets to a structured JSON file.

    Args:
        advised:    Output of ``classify_fleet()``.
        output_dir: Target directory.
        run_date:   Date label. Defaults to today.
        as_of:      Reference date the snapshots were derived for.

    Returns:
        Path to the written JSON file.
    """
    if run_date is None:
        run_date = date.today()

    output_dir.mkdir(parents=True, exist_ok=True)
    json_path = output_dir / f"recommendations_{run_date}.json"

    payload: dict = {
        "schema_version": SCHEMA_VERSION,
        "generated_at":   run_date.isoformat(),
        "as_of":          (as_of or run_date).isoformat(),
        "trainsets": [
            {
                "number":             a.number,
                "trainset_id":        a.trainset_id,
                "current_status":     a.current_status.value,
                "status_changed":     a.status_changed,
                **a.recommendation.model_dump(mode="json"),
            }
            for a in advised
        ],
    }

    json_path.write_text(json.dumps(payload, indent=2, default=str), encoding="utf-8")
    logger.info("Recommendation JSON written: %s", json_path)
    return json_path


def write_summary_json(
    summary: FleetSummary,
    output_dir: Path,
    run_date: date | None = None,
) -> Path:
    """Write a ``FleetSummary`` to ``fleet_summary_{date}.json``."""
    if run_date is None:
        run_date = date.today()

    output_dir.mkdir(parents=True, exist_ok=True)
    json_path = output_dir / f"fleet_summary_{run_date}.json"

    payload = {
        "schema_version": SCHEMA_VERSION,
        "generated_at":   run_date.isoformat(),
        **summary.to_dict(),
    }
    json_path.write_text(json.dumps(payload, indent=2, default=str), encoding="utf-8")
    logger.info("Fleet summary JSON written: %s", json_path)
    return json_path
