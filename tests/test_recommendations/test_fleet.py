"""
Tests for fleet_advisor/recommendations/fleet.py.

What we test
------------
classify_fleet():
  - One AdvisedTrainset per entry, in input order.
  - current_status comes from the snapshot; status_changed compares it with
    the recommendation.
  - An invalid snapshot anywhere raises InvalidSnapshot and is logged with the
    trainset number and offending field.

summarize_fleet():
  - Counts per status include all four statuses (zeros included).
  - Average confidence, status changes, average readiness over non-critical
    trainsets, at-risk count, service availability.
  - Target checks against FleetTargets.
  - Empty fleet -> zeros and None averages.
"""

from __future__ import annotations

import logging

import pytest

from fleet_advisor.recommendations.classifier import InvalidSnapshot
from fleet_advisor.recommendations.fleet import (
    AdvisedTrainset,
    FleetEntry,
    FleetTargets,
    classify_fleet,
    summarize_fleet,
)
from fleet_advisor.taxonomy.status_taxonomy import TrainsetStatus


@pytest.fixture
def mixed_entries(make_snapshot) -> list[FleetEntry]:
    """Four trainsets, one per recommended status, two of them changing."""
    return [
        # ready, premium (9.55), unchanged
        FleetEntry("1", "KMRL-001", make_snapshot(branding_priority=9)),
        # critical (availability 65), was standby
        FleetEntry("2", "KMRL-002", make_snapshot(
            status=TrainsetStatus.STANDBY, availability_percentage=65.0,
        )),
        # maintenance (availability 88, readiness 8.27), unchanged
        FleetEntry("3", "KMRL-003", make_snapshot(
            status=TrainsetStatus.MAINTENANCE, availability_percentage=88.0,
        )),
        # standby (readiness 7.43, one pending job card), was ready
        FleetEntry("4", "KMRL-004", make_snapshot(
            availability_percentage=90.0, branding_priority=4, open_job_cards=1,
        )),
    ]


class TestClassifyFleet:
    def test_preserves_input_order(self, mixed_entries):
        advised = classify_fleet(mixed_entries)
        assert [a.number for a in advised] == ["KMRL-001", "KMRL-002", "KMRL-003", "KMRL-004"]

    def test_reversed_input_gives_reversed_output(self, mixed_entries):
        forward = classify_fleet(mixed_entries)
        backward = classify_fleet(list(reversed(mixed_entries)))
        assert backward == list(reversed(forward))

    def test_recommended_statuses(self, mixed_entries):
        advised = classify_fleet(mixed_entries)
        assert [a.recommendation.recommended_status for a in advised] == [
            TrainsetStatus.READY,
            TrainsetStatus.CRITICAL,
            TrainsetStatus.MAINTENANCE,
            TrainsetStatus.STANDBY,
        ]

    def test_status_changed(self, mixed_entries):
        advised = classify_fleet(mixed_entries)
        assert [a.status_changed for a in advised] == [False, True, False, True]

    def test_returns_advised_trainsets(self, mixed_entries):
        advised = classify_fleet(mixed_entries)
        assert all(isinstance(a, AdvisedTrainset) for a in advised)
        assert advised[1].current_status == TrainsetStatus.STANDBY
        assert advised[1].trainset_id == "2"

    def test_accepts_generator(self, mixed_entries):
        advised = classify_fleet(e for e in mixed_entries)
        assert len(advised) == 4

    def test_empty_fleet(self):
        assert classify_fleet([]) == []

    def test_invalid_entry_raises(self, mixed_entries, make_snapshot):
        bad = FleetEntry("9", "KMRL-099", make_snapshot(availability_percentage=150.0))
        with pytest.raises(InvalidSnapshot):
            classify_fleet(mixed_entries + [bad])

    def test_invalid_entry_logged_with_trainset_and_field(self, mixed_entries, make_snapshot, caplog):
        bad = FleetEntry("9", "KMRL-099", make_snapshot(branding_priority=12))
        with caplog.at_level(logging.ERROR, logger="fleet_advisor.recommendations.fleet"):
            with pytest.raises(InvalidSnapshot):
                classify_fleet(mixed_entries + [bad])
        record = next(r for r in caplog.records if r.levelno == logging.ERROR)
        assert record.trainset == "KMRL-099"
        assert record.field == "branding_priority"


class TestSummarizeFleet:
    def test_status_counts(self, mixed_entries):
        summary = summarize_fleet(classify_fleet(mixed_entries))
        assert summary.total == 4
        assert summary.status_counts == {
            TrainsetStatus.READY: 1,
            TrainsetStatus.STANDBY: 1,
            TrainsetStatus.MAINTENANCE: 1,
            TrainsetStatus.CRITICAL: 1,
        }

    def test_counts_include_zero_statuses(self, make_snapshot):
        summary = summarize_fleet(classify_fleet([FleetEntry("1", "A", make_snapshot())]))
        assert set(summary.status_counts) == set(TrainsetStatus)
        assert summary.status_counts[TrainsetStatus.CRITICAL] == 0

    def test_average_confidence(self, mixed_entries):
        summary = summarize_fleet(classify_fleet(mixed_entries))
        # (0.90 + 0.95 + 0.80 + 0.80) / 4
        assert summary.avg_confidence == pytest.approx(0.8625)

    def test_status_changes(self, mixed_entries):
        assert summarize_fleet(classify_fleet(mixed_entries)).status_changes == 2

    def test_average_readiness_excludes_critical(self, mixed_entries):
        summary = summarize_fleet(classify_fleet(mixed_entries))
        # (9.55 + 8.27 + 7.43) / 3
        assert summary.avg_readiness == pytest.approx(8.42, abs=0.01)

    def test_at_risk(self, mixed_entries):
        assert summarize_fleet(classify_fleet(mixed_entries)).at_risk == 1

    def test_service_availability(self, mixed_entries):
        summary = summarize_fleet(classify_fleet(mixed_entries))
        assert summary.service_availability_pct == pytest.approx(50.0)

    def test_default_targets(self, mixed_entries):
        summary = summarize_fleet(classify_fleet(mixed_entries))
        assert summary.meets_availability_target is False
        assert summary.meets_critical_target is True
        assert summary.meets_confidence_target is True

    def test_custom_targets(self, mixed_entries):
        targets = FleetTargets(service_availability_pct=50.0, max_critical=0, min_avg_confidence=0.9)
        summary = summarize_fleet(classify_fleet(mixed_entries), targets)
        assert summary.meets_availability_target is True
        assert summary.meets_critical_target is False
        assert summary.meets_confidence_target is False

    def test_empty_fleet(self):
        summary = summarize_fleet([])
        assert summary.total == 0
        assert all(n == 0 for n in summary.status_counts.values())
        assert summary.avg_confidence is None
        assert summary.avg_readiness is None
        assert summary.service_availability_pct == 0.0
        assert summary.meets_availability_target is False
        assert summary.meets_confidence_target is False

    def test_all_critical_has_no_average_readiness(self, make_snapshot):
        entries = [
            FleetEntry(str(i), f"T-{i}", make_snapshot(fitness_expiry_days=-i))
            for i in range(3)
        ]
        summary = summarize_fleet(classify_fleet(entries))
        assert summary.avg_readiness is None
        assert summary.status_counts[TrainsetStatus.CRITICAL] == 3

    def test_to_dict_uses_plain_status_keys(self, mixed_entries):
        d = summarize_fleet(classify_fleet(mixed_entries)).to_dict()
        assert d["status_counts"] == {"ready": 1, "standby": 1, "maintenance": 1, "critical": 1}
        assert d["checks"] == {"availability": False, "critical": True, "confidence": True}
        assert d["targets"]["max_critical"] == 2
