"""
Trainset models: the classifier input and the data-store record it is
derived from.

``TrainsetSnapshot`` is the flat, immutable view the classifier consumes.
It only enforces field *types*; value domains (availability in [0, 100],
branding priority in [0, 10], ...) are checked by
``fleet_advisor.recommendations.classifier.validate_snapshot`` so that a bad
value surfaces as ``InvalidSnapshot`` at classification time, carrying the
offending field name.

``TrainsetRecord`` mirrors what the trainset data store exposes: current
status, bay, mileage, certificates and job cards.  ``to_snapshot(as_of)``
reduces a record to a snapshot for a given reference date:

  - ``open_job_cards``      = job cards whose status is not ``closed``.
  - ``has_critical_jobs``   = any open job card with
    ``priority >= critical_job_priority`` (default 4).
  - ``fitness_expiry_days`` = days from ``as_of`` to the *earliest*
    certificate expiry.  A record without any certificate has nothing
    authorising service and is treated as expired (0 days).

All models are frozen.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fleet_advisor.taxonomy.status_taxonomy import (
    CertificateStatus,
    JobCardStatus,
    TrainsetStatus,
)

DEFAULT_CRITICAL_JOB_PRIORITY = 4


class TrainsetSnapshot(BaseModel):
    """Operational attributes of one trainset at classification time.

    Attributes:
        status: Current operational state.
        availability_percentage: Technical availability, 0–100.
        branding_priority: Revenue / branding importance, 0–10.
        open_job_cards: Count of unresolved maintenance job cards.
        has_critical_jobs: True if any open job card is safety-critical.
        fitness_expiry_days: Days until the fitness certificate expires;
            zero or negative means already expired.
        mileage: Cumulative distance in km (risk annotation only).
    """

    model_config = ConfigDict(frozen=True)

    status: TrainsetStatus
    availability_percentage: float
    branding_priority: int
    open_job_cards: int
    has_critical_jobs: bool
    fitness_expiry_days: int
    mileage: float = 0.0


class FitnessCertificate(BaseModel):
    """A regulatory fitness certificate attached to a trainset."""

    model_config = ConfigDict(frozen=True)

    certificate_type: str = "Annual Fitness"
    expiry_date: date
    status: CertificateStatus = CertificateStatus.ACTIVE

    def days_to_expiry(self, as_of: date) -> int:
        """Whole days from ``as_of`` until expiry (negative once expired)."""
        return (self.expiry_date - as_of).days


class JobCard(BaseModel):
    """A maintenance work order.

    ``priority`` runs from 1 (routine) to 5 (safety-critical).
    """

    model_config = ConfigDict(frozen=True)

    description: str = ""
    status: JobCardStatus = JobCardStatus.OPEN
    priority: int = Field(default=3, ge=1, le=5)

    @property
    def is_open(self) -> bool:
        return self.status != JobCardStatus.CLOSED


class TrainsetRecord(BaseModel):
    """A trainset as persisted by the fleet data store.

    Attributes:
        trainset_id: Store identifier.
        number: Fleet number, e.g. ``"KMRL-001"``.
        status: Current operational state.
        bay_position: Stabling bay (>= 1).
        mileage: Cumulative distance in km.
        last_cleaning: Date of the last interior cleaning, if known.
        branding_priority: Revenue / branding importance, 0–10.
        availability_percentage: Technical availability, 0–100.
        fitness_certificates: Certificates on file.
        job_cards: Maintenance job cards (any status).
    """

    model_config = ConfigDict(frozen=True)

    trainset_id: str
    number: str
    status: TrainsetStatus
    bay_position: int = Field(default=1, ge=1)
    mileage: float = Field(default=0.0, ge=0.0)
    last_cleaning: Optional[date] = None
    branding_priority: int
    availability_percentage: float
    fitness_certificates: tuple[FitnessCertificate, ...] = ()
    job_cards: tuple[JobCard, ...] = ()

    @field_validator("number")
    @classmethod
    def validate_number_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("number must not be empty.")
        return v.strip()

    @property
    def open_job_cards(self) -> list[JobCard]:
        return [jc for jc in self.job_cards if jc.is_open]

    def fitness_expiry_days(self, as_of: date) -> int:
        """Days until the earliest certificate expires (0 when none on file)."""
        if not self.fitness_certificates:
            return 0
        return min(cert.days_to_expiry(as_of) for cert in self.fitness_certificates)

    def to_snapshot(
        self,
        as_of: date,
        critical_job_priority: int = DEFAULT_CRITICAL_JOB_PRIORITY,
    ) -> TrainsetSnapshot:
        """Reduce this record to a ``TrainsetSnapshot`` as of ``as_of``.

        Args:
            as_of: Reference date for certificate expiry.
            critical_job_priority: Minimum job card priority that counts as
                safety-critical.

        Returns:
            A frozen ``TrainsetSnapshot``.
        """
        open_cards = self.open_job_cards
        return TrainsetSnapshot(
            status=self.status,
            availability_percentage=self.availability_percentage,
            branding_priority=self.branding_priority,
            open_job_cards=len(open_cards),
            has_critical_jobs=any(
                jc.priority >= critical_job_priority for jc in open_cards
            ),
            fitness_expiry_days=self.fitness_expiry_days(as_of),
            mileage=self.mileage,
        )
