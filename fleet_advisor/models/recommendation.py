"""
Recommendation output model.

``Recommendation`` is the classifier's verdict for one trainset: the status it
should be in, how sure the rule table is, how urgently it needs attention, and
why.  Priority runs from 1 to 10 with **10 = most urgent** (an expired
certificate), the inverse of a rank.

Frozen — a recommendation is a value, constructed fresh per classification.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from fleet_advisor.taxonomy.status_taxonomy import TrainsetStatus


class Recommendation(BaseModel):
    """A recommended operational status with its justification.

    Attributes:
        recommended_status: Status the trainset should be placed in.
        confidence: Confidence of the rule that fired, in [0, 1].
        priority: Urgency from 1 (least) to 10 (most urgent).
        reasons: Ordered explanation of the decision; never empty.
        risk_factors: Latent risks that did not drive the decision.
        readiness_score: Weighted 0–10 service readiness.  Critical
            trainsets report 0.0.
    """

    model_config = ConfigDict(frozen=True)

    recommended_status: TrainsetStatus
    confidence: float
    priority: int
    reasons: tuple[str, ...]
    risk_factors: tuple[str, ...] = ()
    readiness_score: float = 0.0

    @field_validator("confidence")
    @classmethod
    def validate_confidence_range(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"confidence must be in [0, 1], got {v}.")
        return v

    @field_validator("priority")
    @classmethod
    def validate_priority_range(cls, v: int) -> int:
        if not 1 <= v <= 10:
            raise ValueError(f"priority must be in [1, 10], got {v}.")
        return v

    @field_validator("reasons")
    @classmethod
    def validate_reasons_not_empty(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v or not all(r and r.strip() for r in v):
            raise ValueError("reasons must contain at least one non-empty string.")
        return v

    @field_validator("readiness_score")
    @classmethod
    def validate_readiness_range(cls, v: float) -> float:
        if not 0.0 <= v <= 10.0:
            raise ValueError(f"readiness_score must be in [0, 10], got {v}.")
        return v

    @property
    def is_critical(self) -> bool:
        return self.recommended_status == TrainsetStatus.CRITICAL
