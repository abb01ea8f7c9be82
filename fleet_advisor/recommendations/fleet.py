"""
Fleet processing: classify a whole fleet and reduce the results to KPIs.

Usage flow
----------
1. classify_fleet(entries)
   -> list[AdvisedTrainset]  (same order as ``entries``)

2. summarize_fleet(advised, targets)
   -> FleetSummary  (counts per status, averages, status changes, target checks)

Each trainset is classified independently; nothing in the summary feeds back
into a classification.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from fleet_advisor.models.recommendation import Recommendation
from fleet_advisor.models.trainset import TrainsetSnapshot
from fleet_advisor.recommendations.classifier import InvalidSnapshot, classify
from fleet_advisor.taxonomy.status_taxonomy import SERVICEABLE_STATUSES, TrainsetStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FleetEntry:
    """A snapshot tagged with the trainset it belongs to."""

    trainset_id: str
    number:      str
    snapshot:    TrainsetSnapshot


@dataclass(frozen=True)
class AdvisedTrainset:
    """A trainset paired with its recommendation.

    Attributes:
        trainset_id:    Store identifier.
        number:         Fleet number, e.g. ``"KMRL-001"``.
        current_status: Status the trainset is in now.
        recommendation: Classifier output.
    """

    trainset_id:    str
    number:         str
    current_status: TrainsetStatus
    recommendation: Recommendation

    @property
    def status_changed(self) -> bool:
        return self.recommendation.recommended_status != self.current_status


@dataclass(frozen=True)
class FleetTargets:
    """Operating targets the fleet summary is checked against."""

    service_availability_pct: float = 90.0
    max_critical:             int   = 2
    min_avg_confidence:       float = 0.80


@dataclass
class FleetSummary:
    """Aggregate view over a classified fleet.

    Attributes:
        total:                    Number of trainsets classified.
        status_counts:            Recommended status -> count (all four keys).
        avg_confidence:           Mean confidence; ``None`` for an empty fleet.
        status_changes:           Trainsets whose recommendation differs
                                  from their current status.
        avg_readiness:            Mean readiness over non-critical trainsets;
                                  ``None`` when there are none.
        at_risk:                  Trainsets with at least one risk factor.
        service_availability_pct: (ready + standby) / total * 100.
        targets:                  Targets used for the checks below.
    """

    total:                    int
    status_counts:            dict[TrainsetStatus, int]
    avg_confidence:           Optional[float]
    status_changes:           int
    avg_readiness:            Optional[float]
    at_risk:                  int
    service_availability_pct: float
    targets:                  FleetTargets = field(default_factory=FleetTargets)

    @property
    def meets_availability_target(self) -> bool:
        return self.total > 0 and self.service_availability_pct >= self.targets.service_availability_pct

    @property
    def meets_critical_target(self) -> bool:
        return self.status_counts[TrainsetStatus.CRITICAL] <= self.targets.max_critical

    @property
    def meets_confidence_target(self) -> bool:
        return (
            self.avg_confidence is not None
            and self.avg_confidence >= self.targets.min_avg_confidence
        )

    def to_dict(self) -> dict:
        return {
            "total":                    self.total,
            "status_counts":            {s.value: n for s, n in self.status_counts.items()},
            "avg_confidence":           self.avg_confidence,
            "status_changes":           self.status_changes,
            "avg_readiness":            self.avg_readiness,
            "at_risk":                  self.at_risk,
            "service_availability_pct": self.service_availability_pct,
            "targets": {
                "service_availability_pct": self.targets.service_availability_pct,
                "max_critical":             self.targets.max_critical,
                "min_avg_confidence":       self.targets.min_avg_confidence,
            },
            "checks": {
                "availability": self.meets_availability_target,
                "critical":     self.meets_critical_target,
                "confidence":   self.meets_confidence_target,
            },
        }


def classify_fleet(entries: Iterable[FleetEntry]) -> list[AdvisedTrainset]:
    """Classify every entry, preserving input order.

    Args:
        entries: Fleet entries in reporting order.

    Returns:
        One ``AdvisedTrainset`` per entry, in the same order.

    Raises:
        InvalidSnapshot: From the first entry whose snapshot is invalid.
    """
    advised: list[AdvisedTrainset] = []
    for entry in entries:
        try:
            rec = classify(entry.snapshot)
        except InvalidSnapshot as exc:
            logger.error(
                "Trainset %s has an invalid snapshot",
                entry.number,
                extra={"trainset": entry.number, "field": exc.field},
            )
            raise
        advised.append(
            AdvisedTrainset(
                trainset_id=entry.trainset_id,
                number=entry.number,
                current_status=entry.snapshot.status,
                recommendation=rec,
            )
        )

    logger.info(
        "Classified %d trainsets (%d status changes)",
        len(advised), sum(1 for a in advised if a.status_changed),
    )
    return advised


def summarize_fleet(
    advised: list[AdvisedTrainset],
    targets: FleetTargets | None = None,
) -> FleetSummary:
    """Reduce classified trainsets to fleet KPIs.  No new rules are applied."""
    targets = targets or FleetTargets()
    total = len(advised)

    counts: dict[TrainsetStatus, int] = {s: 0 for s in TrainsetStatus}
    for a in advised:
        counts[a.recommendation.recommended_status] += 1

    avg_confidence: Optional[float] = None
    if total:
        avg_confidence = round(
            sum(a.recommendation.confidence for a in advised) / total, 4
        )

    non_critical = [a for a in advised if not a.recommendation.is_critical]
    avg_readiness: Optional[float] = None
    if non_critical:
        avg_readiness = round(
            sum(a.recommendation.readiness_score for a in non_critical) / len(non_critical), 2
        )

    serviceable = sum(counts[s] for s in SERVICEABLE_STATUSES)
    service_pct = round(serviceable / total * 100.0, 1) if total else 0.0

    return FleetSummary(
        total=total,
        status_counts=counts,
        avg_confidence=avg_confidence,
        status_changes=sum(1 for a in advised if a.status_changed),
        avg_readiness=avg_readiness,
        at_risk=sum(1 for a in advised if a.recommendation.risk_factors),
        service_availability_pct=service_pct,
        targets=targets,
    )
