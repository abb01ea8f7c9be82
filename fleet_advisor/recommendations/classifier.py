"""
Status classifier: converts a ``TrainsetSnapshot`` into a ``Recommendation``
with recommended status, confidence, priority, reasoning and risk factors.

Decision table (evaluated in order — first match wins)
-------------------------------------------------------
     #  condition                              status       conf  prio
     1  fitness_expiry_days <= 0               critical     0.98   10
     2  availability < 70                      critical     0.95    9
     3  has_critical_jobs                      critical     0.90    8
     4  availability < 85                      maintenance  0.85    7
     5  open_job_cards > 2                     maintenance  0.82    6
     6  availability < 90                      maintenance  0.80    5
     7  branding >= 8 and readiness > 8.5      ready        0.90    2
     8  readiness > 8.0                        ready        0.85    3
     9  readiness > 7.0                        standby      0.80    4
    10  (always)                               standby      0.75    4

Safety rules come first, then maintenance load, then the ready/standby split.
Rule 10 always matches, so every valid snapshot gets exactly one status.
The table is data (``STATUS_RULES``) so tests can enumerate it.

Readiness score (0–10, weighted sum, capped at 10)
---------------------------------------------------
    readiness = availability / 100 * 4.0            # 40%
              + branding / 10 * 2.5                 # 25%
              + max(0, (3 - open_jobs) / 3) * 2.0   # 20%
              + (1.0 if expiry_days > 30 else 0.5)  # 10%
              + (0 if critical_jobs else 1) * 0.5   #  5%

Only rules 7–10 consult it.  It is reported for every non-critical
trainset; critical trainsets report 0.

Risk factors (appended after the rule fires, independent of it)
----------------------------------------------------------------
    0 < expiry_days <= 30                 -> "certificate expires in N days"
    mileage > 18000                       -> "high mileage — increased wear"
    open_jobs > 0 and status != maint.    -> "N pending job cards"
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable

from fleet_advisor.models.recommendation import Recommendation
from fleet_advisor.models.trainset import TrainsetSnapshot
from fleet_advisor.taxonomy.status_taxonomy import TrainsetStatus

logger = logging.getLogger(__name__)

READINESS_MAX = 10.0
CERTIFICATE_WARNING_DAYS = 30
HIGH_MILEAGE_KM = 18_000.0


class InvalidSnapshot(ValueError):
    """Raised when a snapshot field is outside its declared domain.

    Attributes:
        field: Name of the offending ``TrainsetSnapshot`` field.
        value: The rejected value.
    """

    def __init__(self, field: str, value: object, expected: str = "") -> None:
        self.field = field
        self.value = value
        detail = f" (expected {expected})" if expected else ""
        super().__init__(f"Invalid snapshot: {field}={value!r}{detail}.")


@dataclass(frozen=True)
class StatusRule:
    """One row of the decision table.

    Attributes:
        order:      1-based position in the cascade.
        name:       Machine-readable rule identifier.
        status:     Status recommended when the rule fires.
        confidence: Confidence reported when the rule fires.
        priority:   Urgency reported when the rule fires (10 = most urgent).
        reason:     Short reason label; first token of the reason string.
        condition:  ``(snapshot, readiness) -> bool``.
        detail:     ``(snapshot, readiness) -> str`` with triggering values.
    """

    order:      int
    name:       str
    status:     TrainsetStatus
    confidence: float
    priority:   int
    reason:     str
    condition:  Callable[[TrainsetSnapshot, float], bool]
    detail:     Callable[[TrainsetSnapshot, float], str]

    def explain(self, snapshot: TrainsetSnapshot, readiness: float) -> str:
        return f"{self.reason}: {self.detail(snapshot, readiness)}"


# ── Rule details ──────────────────────────────────────────────────────────────

def _expired_detail(s: TrainsetSnapshot, _r: float) -> str:
    if s.fitness_expiry_days == 0:
        return "fitness certificate expires today"
    return f"fitness certificate expired {_plural(-s.fitness_expiry_days, 'day')} ago"


def _availability_detail(threshold: float, label: str) -> Callable[[TrainsetSnapshot, float], str]:
    def _detail(s: TrainsetSnapshot, _r: float) -> str:
        return f"availability {s.availability_percentage:.1f}% is below the {threshold:.0f}% {label}"
    return _detail


def _readiness_detail(s: TrainsetSnapshot, r: float) -> str:
    return f"readiness {r:.1f}/10"


def _premium_detail(s: TrainsetSnapshot, r: float) -> str:
    return f"readiness {r:.1f}/10 with branding priority {s.branding_priority}/10"


STATUS_RULES: tuple[StatusRule, ...] = (
    StatusRule(
        order=1, name="certificate_expired",
        status=TrainsetStatus.CRITICAL, confidence=0.98, priority=10,
        reason="certificate expired",
        condition=lambda s, r: s.fitness_expiry_days <= 0,
        detail=_expired_detail,
    ),
    StatusRule(
        order=2, name="availability_critical",
        status=TrainsetStatus.CRITICAL, confidence=0.95, priority=9,
        reason="availability critical",
        condition=lambda s, r: s.availability_percentage < 70.0,
        detail=_availability_detail(70.0, "floor"),
    ),
    StatusRule(
        order=3, name="critical_jobs",
        status=TrainsetStatus.CRITICAL, confidence=0.90, priority=8,
        reason="safety-critical maintenance pending",
        condition=lambda s, r: s.has_critical_jobs,
        detail=lambda s, r: "open safety-critical job cards must be cleared before service",
    ),
    StatusRule(
        order=4, name="availability_below_target",
        status=TrainsetStatus.MAINTENANCE, confidence=0.85, priority=7,
        reason="availability below target",
        condition=lambda s, r: s.availability_percentage < 85.0,
        detail=_availability_detail(85.0, "target"),
    ),
    StatusRule(
        order=5, name="multiple_job_cards",
        status=TrainsetStatus.MAINTENANCE, confidence=0.82, priority=6,
        reason="multiple job cards open",
        condition=lambda s, r: s.open_job_cards > 2,
        detail=lambda s, r: f"{_plural(s.open_job_cards, 'job card')} awaiting work",
    ),
    StatusRule(
        order=6, name="preventive_maintenance",
        status=TrainsetStatus.MAINTENANCE, confidence=0.80, priority=5,
        reason="preventive maintenance due",
        condition=lambda s, r: s.availability_percentage < 90.0,
        detail=_availability_detail(90.0, "preventive threshold"),
    ),
    StatusRule(
        order=7, name="premium_service",
        status=TrainsetStatus.READY, confidence=0.90, priority=2,
        reason="premium service fit",
        condition=lambda s, r: s.branding_priority >= 8 and r > 8.5,
        detail=_premium_detail,
    ),
    StatusRule(
        order=8, name="good_condition",
        status=TrainsetStatus.READY, confidence=0.85, priority=3,
        reason="good service condition",
        condition=lambda s, r: r > 8.0,
        detail=_readiness_detail,
    ),
    StatusRule(
        order=9, name="suitable_backup",
        status=TrainsetStatus.STANDBY, confidence=0.80, priority=4,
        reason="suitable backup",
        condition=lambda s, r: r > 7.0,
        detail=_readiness_detail,
    ),
    StatusRule(
        order=10, name="basic_backup",
        status=TrainsetStatus.STANDBY, confidence=0.75, priority=4,
        reason="basic backup service",
        condition=lambda s, r: True,
        detail=_readiness_detail,
    ),
)


# ── Public API ────────────────────────────────────────────────────────────────

def validate_snapshot(snapshot: TrainsetSnapshot) -> None:
    """Check every field of ``snapshot`` against its domain.

    Raises:
        InvalidSnapshot: On the first field found out of range.
    """
    try:
        TrainsetStatus(snapshot.status)
    except ValueError:
        raise InvalidSnapshot(
            "status", snapshot.status, "one of ready/standby/maintenance/critical"
        ) from None

    _check_number(snapshot, "availability_percentage", 0.0, 100.0)
    _check_number(snapshot, "branding_priority", 0, 10, integral=True)
    _check_number(snapshot, "open_job_cards", 0, None, integral=True)
    _check_number(snapshot, "fitness_expiry_days", None, None, integral=True)
    _check_number(snapshot, "mileage", 0.0, None)

    if not isinstance(snapshot.has_critical_jobs, bool):
        raise InvalidSnapshot("has_critical_jobs", snapshot.has_critical_jobs, "a bool")


def compute_readiness_score(snapshot: TrainsetSnapshot) -> float:
    """Weighted 0–10 readiness for service.  Assumes a valid snapshot."""
    score = (
        snapshot.availability_percentage / 100.0 * 4.0
        + snapshot.branding_priority / 10.0 * 2.5
        + max(0.0, (3 - snapshot.open_job_cards) / 3.0) * 2.0
        + (1.0 if snapshot.fitness_expiry_days > CERTIFICATE_WARNING_DAYS else 0.5)
        + (0.0 if snapshot.has_critical_jobs else 1.0) * 0.5
    )
    return min(score, READINESS_MAX)


def matching_rules(snapshot: TrainsetSnapshot) -> list[StatusRule]:
    """Return every rule whose condition holds, in cascade order.

    ``classify`` uses only the first; the rest show which later rules the
    first one shadowed.
    """
    validate_snapshot(snapshot)
    readiness = compute_readiness_score(snapshot)
    return [rule for rule in STATUS_RULES if rule.condition(snapshot, readiness)]


def build_risk_factors(
    snapshot: TrainsetSnapshot,
    recommended_status: TrainsetStatus,
) -> list[str]:
    """Flag latent risks that did not necessarily drive the decision."""
    risks: list[str] = []

    days = snapshot.fitness_expiry_days
    if 0 < days <= CERTIFICATE_WARNING_DAYS:
        risks.append(f"certificate expires in {_plural(days, 'day')}")

    if snapshot.mileage > HIGH_MILEAGE_KM:
        risks.append("high mileage — increased wear")

    if snapshot.open_job_cards > 0 and recommended_status != TrainsetStatus.MAINTENANCE:
        risks.append(f"{_plural(snapshot.open_job_cards, 'pending job card')}")

    return risks


def classify(snapshot: TrainsetSnapshot) -> Recommendation:
    """Recommend an operational status for one trainset.

    Pure and deterministic: the same snapshot always yields an equal
    ``Recommendation``.

    Args:
        snapshot: Current operational attributes of the trainset.

    Returns:
        Frozen ``Recommendation``.

    Raises:
        InvalidSnapshot: If any field is outside its domain.
    """
    validate_snapshot(snapshot)
    readiness = compute_readiness_score(snapshot)

    rule = next(r for r in STATUS_RULES if r.condition(snapshot, readiness))
    logger.debug(
        "Rule %d (%s) fired: %s -> %s", rule.order, rule.name, snapshot.status, rule.status
    )

    return Recommendation(
        recommended_status=rule.status,
        confidence=rule.confidence,
        priority=rule.priority,
        reasons=(rule.explain(snapshot, readiness),),
        risk_factors=tuple(build_risk_factors(snapshot, rule.status)),
        readiness_score=0.0 if rule.status == TrainsetStatus.CRITICAL else round(readiness, 2),
    )


# ── Helpers ───────────────────────────────────────────────────────────────────

def _check_number(
    snapshot: TrainsetSnapshot,
    field: str,
    lo: float | None,
    hi: float | None,
    integral: bool = False,
) -> None:
    value = getattr(snapshot, field)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidSnapshot(field, value, "a number")
    if integral and not float(value).is_integer():
        raise InvalidSnapshot(field, value, "an integer")
    if not math.isfinite(value):
        raise InvalidSnapshot(field, value, "a finite number")
    if lo is not None and value < lo:
        raise InvalidSnapshot(field, value, _range_text(lo, hi))
    if hi is not None and value > hi:
        raise InvalidSnapshot(field, value, _range_text(lo, hi))


def _range_text(lo: float | None, hi: float | None) -> str:
    if hi is None:
        return f">= {lo}"
    return f"in [{lo}, {hi}]"


def _plural(n: int, noun: str) -> str:
    return f"{n} {noun}" if n == 1 else f"{n} {noun}s"
