"""
Operational status taxonomy for trainsets.

Three enumerations describe a trainset's state and the work attached to it:
  - ``TrainsetStatus``  — the operational state a trainset is in (or should be).
  - ``JobCardStatus``   — lifecycle of a maintenance work order.
  - ``CertificateStatus`` — lifecycle of a fitness certificate, as reported
    by the data store (informational; expiry dates are authoritative).

``URGENCY_RANK`` orders statuses into urgency buckets::

    critical (2)  >  maintenance (1)  >  ready / standby (0)

The bucket rank is what "more urgent" means throughout the project: a change
in input that moves a trainset from rank 0 to rank 1 is an escalation.

This module has NO imports from any other ``fleet_advisor`` package.
"""

from enum import StrEnum


class TrainsetStatus(StrEnum):
    """Operational state of a trainset."""

    READY = "ready"
    """Fit for revenue service today."""

    STANDBY = "standby"
    """Serviceable backup held for disruptions."""

    MAINTENANCE = "maintenance"
    """Withdrawn for preventive or corrective maintenance."""

    CRITICAL = "critical"
    """Must not run; needs immediate attention."""


class JobCardStatus(StrEnum):
    """Lifecycle of a maintenance job card."""

    OPEN = "open"
    IN_PROGRESS = "in_progress"
    CLOSED = "closed"


class CertificateStatus(StrEnum):
    """Lifecycle label of a fitness certificate."""

    ACTIVE = "active"
    EXPIRING = "expiring"
    EXPIRED = "expired"


URGENCY_RANK: dict[TrainsetStatus, int] = {
    TrainsetStatus.READY:       0,
    TrainsetStatus.STANDBY:     0,
    TrainsetStatus.MAINTENANCE: 1,
    TrainsetStatus.CRITICAL:    2,
}

# Statuses that count towards service availability.
SERVICEABLE_STATUSES: frozenset[TrainsetStatus] = frozenset({
    TrainsetStatus.READY,
    TrainsetStatus.STANDBY,
})


def urgency_rank(status: TrainsetStatus) -> int:
    """Return the urgency bucket for ``status`` (higher = more urgent)."""
    return URGENCY_RANK[TrainsetStatus(status)]
