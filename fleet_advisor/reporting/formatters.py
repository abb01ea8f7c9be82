"""
ASCII terminal formatters for CLI reporting commands.

All formatters accept classified trainsets / fleet summaries and return
plain multi-line strings suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).

Status tags
-----------
Each status has a fixed-width tag so columns line up in plain terminals::

  [READY]   [STANDBY]   [MAINT]   [CRITICAL]

Target markers
--------------
Fleet summary target lines end with ``[OK]`` or ``[MISS]``.
"""

from __future__ import annotations

from fleet_advisor.recommendations.fleet import AdvisedTrainset, FleetSummary
from fleet_advisor.models.recommendation import Recommendation
from fleet_advisor.taxonomy.status_taxonomy import TrainsetStatus

STATUS_TAGS: dict[TrainsetStatus, str] = {
    TrainsetStatus.READY:       "[READY]",
    TrainsetStatus.STANDBY:     "[STANDBY]",
    TrainsetStatus.MAINTENANCE: "[MAINT]",
    TrainsetStatus.CRITICAL:    "[CRITICAL]",
}


def status_tag(status: TrainsetStatus) -> str:
    return STATUS_TAGS[TrainsetStatus(status)]


def _mark(ok: bool) -> str:
    return "[OK]" if ok else "[MISS]"


# ── Single recommendation ─────────────────────────────────────────────────────


def format_recommendation(
    rec: Recommendation,
    title: str = "Recommendation",
    current_status: TrainsetStatus | None = None,
) -> str:
    """Format one recommendation as an indented block.

    Example::

        KMRL-017
          Current: critical -> Recommended: [CRITICAL] critical  (MAINTAIN)
          Confidence: 95%   Priority: 9/10   Readiness: 0.0/10
          Reasons:
            - availability critical: availability 68.5% is below the 70% floor
          Risk factors:
            ! certificate expires in 17 days

    Args:
        rec:            Classifier output.
        title:          Heading line (usually the fleet number).
        current_status: When given, shows the transition and CHANGE/MAINTAIN.

    Returns:
        Multi-line string.
    """
    status = rec.recommended_status
    lines = [title]
    if current_status is not None:
        action = "CHANGE" if current_status != status else "MAINTAIN"
        lines.append(
            f"  Current: {current_status.value} -> Recommended: "
            f"{status_tag(status)} {status.value}  ({action})"
        )
    else:
        lines.append(f"  Recommended: {status_tag(status)} {status.value}")

    lines.append(
        f"  Confidence: {rec.confidence:.0%}   Priority: {rec.priority}/10   "
        f"Readiness: {rec.readiness_score:.1f}/10"
    )
    lines.append("  Reasons:")
    lines.extend(f"    - {r}" for r in rec.reasons)
    if rec.risk_factors:
        lines.append("  Risk factors:")
        lines.extend(f"    ! {r}" for r in rec.risk_factors)
    return "\n".join(lines)


def format_advised_trainset(advised: AdvisedTrainset) -> str:
    return format_recommendation(
        advised.recommendation,
        title=advised.number,
        current_status=advised.current_status,
    )


# ── Fleet table ───────────────────────────────────────────────────────────────


def format_fleet_table(advised: list[AdvisedTrainset]) -> str:
    """Format classified trainsets as an ASCII table in input order.

    Columns: #, Number, Current, Recommended, Conf, Prio, Ready, Risks.
    Rows whose recommendation differs from the current status are marked ``*``.
    """
    lines: list[str] = []
    lines.append("")
    lines.append("=== Fleet Recommendations ===")

    if not advised:
        lines.append("  (no trainsets to classify)")
        return "\n".join(lines)

    header = (
        f"  {'#':>3}  {'Number':<12}  {'Current':<11}  {'Recommended':<22}  "
        f"{'Conf':>5}  {'Prio':>4}  {'Ready':>5}  {'Risks':>5}"
    )
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for idx, a in enumerate(advised, start=1):
        rec = a.recommendation
        changed = "*" if a.status_changed else " "
        recommended = f"{changed}{status_tag(rec.recommended_status)} {rec.recommended_status.value}"
        lines.append(
            f"  {idx:>3}  {a.number[:12]:<12}  {a.current_status.value:<11}  "
            f"{recommended:<22}  {rec.confidence:>5.0%}  {rec.priority:>4}  "
            f"{rec.readiness_score:>5.1f}  {len(rec.risk_factors):>5}"
        )
    lines.append("")
    lines.append("  * recommended status differs from current status")
    return "\n".join(lines)


# ── Fleet summary ─────────────────────────────────────────────────────────────


def format_fleet_summary(summary: FleetSummary) -> str:
    """Format fleet KPIs with per-status distribution and target checks."""
    t = summary.targets
    lines: list[str] = []
    lines.append("")
    lines.append("=== Fleet Summary ===")
    lines.append(f"  Total trainsets:      {summary.total}")

    if summary.total == 0:
        lines.append("  (empty fleet — nothing to summarise)")
        return "\n".join(lines)

    avg_conf = f"{summary.avg_confidence:.0%}" if summary.avg_confidence is not None else "N/A"
    avg_ready = f"{summary.avg_readiness:.1f}/10" if summary.avg_readiness is not None else "N/A"
    lines.append(f"  Average confidence:   {avg_conf}")
    lines.append(f"  Average readiness:    {avg_ready}")
    lines.append(f"  Recommended changes:  {summary.status_changes}")
    lines.append(f"  Trainsets at risk:    {summary.at_risk}")
    lines.append(f"  Service availability: {summary.service_availability_pct:.1f}%")

    lines.append("")
    lines.append("  Distribution:")
    for status in TrainsetStatus:
        count = summary.status_counts.get(status, 0)
        pct = count / summary.total * 100.0
        lines.append(f"    {status_tag(status):<10}  {count:>4}  ({pct:.0f}%)")

    lines.append("")
    lines.append("  Targets:")
    lines.append(
        f"    Service availability >= {t.service_availability_pct:.0f}%   "
        f"{_mark(summary.meets_availability_target)}"
    )
    lines.append(
        f"    Critical trainsets   <= {t.max_critical:<4}  "
        f"{_mark(summary.meets_critical_target)}"
    )
    lines.append(
        f"    Average confidence   >= {t.min_avg_confidence:.0%}   "
        f"{_mark(summary.meets_confidence_target)}"
    )
    return "\n".join(lines)
