"""
Tests for fleet_advisor/recommendations/reporter.py.

What we test
------------
write_recommendation_csv():
  - File name carries the run date; directory is created.
  - One row per trainset in input order; list columns joined with "; ".

write_recommendation_json():
  - Schema version, as_of, and one object per trainset with the
    recommendation fields.

write_summary_json():
  - FleetSummary.to_dict() fields plus provenance.
"""

from __future__ import annotations

import csv
import json
from datetime import date

import pytest

from fleet_advisor.recommendations.fleet import FleetEntry, classify_fleet, summarize_fleet
from fleet_advisor.recommendations.reporter import (
    SCHEMA_VERSION,
    write_recommendation_csv,
    write_recommendation_json,
    write_summary_json,
)
from fleet_advisor.taxonomy.status_taxonomy import TrainsetStatus

RUN_DATE = date(2026, 10, 19)


@pytest.fixture
def advised(make_snapshot):
    return classify_fleet([
        FleetEntry("1", "KMRL-001", make_snapshot(branding_priority=9)),
        FleetEntry("2", "KMRL-017", make_snapshot(
            status=TrainsetStatus.CRITICAL,
            availability_percentage=68.5,
            fitness_expiry_days=17,
            mileage=20_450.0,
            open_job_cards=2,
        )),
    ])


class TestRecommendationCsv:
    def test_path_and_directory(self, tmp_path, advised):
        out_dir = tmp_path / "nested" / "out"
        path = write_recommendation_csv(advised, out_dir, run_date=RUN_DATE)
        assert path == out_dir / "recommendations_2026-10-19.csv"
        assert path.exists()

    def test_rows_in_input_order(self, tmp_path, advised):
        path = write_recommendation_csv(advised, tmp_path, run_date=RUN_DATE)
        with path.open(encoding="utf-8", newline="") as f:
            rows = list(csv.DictReader(f))
        assert [r["number"] for r in rows] == ["KMRL-001", "KMRL-017"]
        assert rows[0]["recommended_status"] == "ready"
        assert rows[0]["status_changed"] == "False"
        assert rows[1]["priority"] == "9"

    def test_risk_factors_joined(self, tmp_path, advised):
        path = write_recommendation_csv(advised, tmp_path, run_date=RUN_DATE)
        with path.open(encoding="utf-8", newline="") as f:
            rows = list(csv.DictReader(f))
        assert rows[1]["risk_factors"] == (
            "certificate expires in 17 days; high mileage — increased wear; 2 pending job cards"
        )
        assert rows[0]["risk_factors"] == ""

    def test_empty_fleet_writes_header_only(self, tmp_path):
        path = write_recommendation_csv([], tmp_path, run_date=RUN_DATE)
        assert path.read_text(encoding="utf-8").strip().startswith("number,trainset_id")
        assert len(path.read_text(encoding="utf-8").strip().splitlines()) == 1


class TestRecommendationJson:
    def test_payload(self, tmp_path, advised):
        path = write_recommendation_json(
            advised, tmp_path, run_date=RUN_DATE, as_of=date(2026, 10, 1)
        )
        payload = json.loads(path.read_text(encoding="utf-8"))
        assert payload["schema_version"] == SCHEMA_VERSION
        assert payload["generated_at"] == "2026-10-19"
        assert payload["as_of"] == "2026-10-01"
        assert len(payload["trainsets"]) == 2

    def test_trainset_fields(self, tmp_path, advised):
        path = write_recommendation_json(advised, tmp_path, run_date=RUN_DATE)
        first = json.loads(path.read_text(encoding="utf-8"))["trainsets"][0]
        assert first["number"] == "KMRL-001"
        assert first["recommended_status"] == "ready"
        assert first["confidence"] == 0.90
        assert first["priority"] == 2
        assert first["readiness_score"] == pytest.approx(9.55)
        assert isinstance(first["reasons"], list) and first["reasons"]

    def test_as_of_defaults_to_run_date(self, tmp_path, advised):
        path = write_recommendation_json(advised, tmp_path, run_date=RUN_DATE)
        assert json.loads(path.read_text(encoding="utf-8"))["as_of"] == "2026-10-19"


class TestSummaryJson:
    def test_payload(self, tmp_path, advised):
        path = write_summary_json(summarize_fleet(advised), tmp_path, run_date=RUN_DATE)
        assert path.name == "fleet_summary_2026-10-19.json"
        payload = json.loads(path.read_text(encoding="utf-8"))
        assert payload["total"] == 2
        assert payload["status_counts"]["critical"] == 1
        assert payload["status_changes"] == 0
        assert payload["service_availability_pct"] == pytest.approx(50.0)
        assert "checks" in payload
