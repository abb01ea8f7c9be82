"""
Fleet Advisor — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Execute action (classify one snapshot, classify a fleet, summarise).
  5. Report result to stdout.

Install and run::

    pip install -e .
    fleet-advisor --help
    fleet-advisor validate-config
    fleet-advisor classify --status ready --availability 95 --branding 9 \\
        --open-jobs 0 --expiry-days 200
    fleet-advisor advise-fleet --fleet config/fleet/sample_fleet.json --export
    fleet-advisor fleet-summary --as-of 2026-10-19
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="fleet-advisor",
    help="Fleet Advisor — rule-based trainset status recommendations.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from fleet_advisor.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from fleet_advisor.utils.logging import configure_logging
    configure_logging(config.logging)


def _parse_as_of(as_of: Optional[str]) -> date:
    if not as_of:
        return date.today()
    try:
        return date.fromisoformat(as_of)
    except ValueError as exc:
        typer.echo(f"[ERROR] Invalid --as-of date: {exc}", err=True)
        raise typer.Exit(code=1)


def _classify_fleet_or_exit(config, fleet_file: Optional[str], as_of: date):
    """Load the fleet file and classify it, exiting with code 1 on bad input."""
    from fleet_advisor.ingestion.loader import load_fleet_entries
    from fleet_advisor.recommendations.classifier import InvalidSnapshot
    from fleet_advisor.recommendations.fleet import classify_fleet

    fleet_path = Path(fleet_file) if fleet_file else Path(config.data.fleet_file)
    if not fleet_path.exists():
        typer.echo(f"[ERROR] Fleet file not found: {fleet_path}", err=True)
        raise typer.Exit(code=1)

    try:
        entries = load_fleet_entries(
            fleet_path,
            as_of=as_of,
            critical_job_priority=config.advisor.critical_job_priority,
        )
        return classify_fleet(entries)
    except InvalidSnapshot as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except ValueError as exc:
        typer.echo(f"[ERROR] Fleet file failed validation:\n{exc}", err=True)
        raise typer.Exit(code=1)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Fleet file:            {config.data.fleet_file}")
    typer.echo(f"  Output dir:            {config.data.output_dir}")
    typer.echo(f"  Critical job priority: {config.advisor.critical_job_priority}")
    typer.echo(f"  Availability target:   {config.targets.service_availability_pct}%")
    typer.echo(f"  Log level:             {config.logging.level}")
    typer.echo(f"  Debug mode:            {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("classify")
def classify_one(
    status: str = typer.Option(..., "--status", help="Current status (ready/standby/maintenance/critical)."),
    availability: float = typer.Option(..., "--availability", help="Availability percentage, 0-100."),
    branding: int = typer.Option(..., "--branding", help="Branding priority, 0-10."),
    open_jobs: int = typer.Option(0, "--open-jobs", help="Open job card count."),
    critical_jobs: bool = typer.Option(
        False, "--critical-jobs/--no-critical-jobs", help="Any open safety-critical job card."
    ),
    expiry_days: int = typer.Option(..., "--expiry-days", help="Days until fitness certificate expiry."),
    mileage: float = typer.Option(0.0, "--mileage", help="Cumulative mileage in km."),
    as_json: bool = typer.Option(False, "--json", help="Print the recommendation as JSON."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Classify a single trainset snapshot given on the command line."""
    from pydantic import ValidationError

    from fleet_advisor.models.trainset import TrainsetSnapshot
    from fleet_advisor.recommendations.classifier import InvalidSnapshot, classify
    from fleet_advisor.reporting.formatters import format_recommendation

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        snapshot = TrainsetSnapshot(
            status=status.lower(),
            availability_percentage=availability,
            branding_priority=branding,
            open_job_cards=open_jobs,
            has_critical_jobs=critical_jobs,
            fitness_expiry_days=expiry_days,
            mileage=mileage,
        )
        rec = classify(snapshot)
    except (InvalidSnapshot, ValidationError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(rec.model_dump(mode="json"), indent=2))
    else:
        typer.echo(format_recommendation(rec, current_status=snapshot.status))


@app.command("advise-fleet")
def advise_fleet(
    fleet_file: Optional[str] = typer.Option(
        None,
        "--fleet",
        "-f",
        help=(
            "Fleet file (.json data-store records or .csv snapshots). "
            "Defaults to config.data.fleet_file."
        ),
    ),
    as_of: Optional[str] = typer.Option(
        None,
        "--as-of",
        help="Reference date for certificate expiry (ISO date). Defaults to today.",
    ),
    export: bool = typer.Option(
        False,
        "--export",
        help="Write CSV/JSON reports to config.data.output_dir.",
    ),
    brief: bool = typer.Option(
        False,
        "--brief",
        help="Print the fleet table only, without per-trainset detail.",
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Classify every trainset in a fleet file and print recommendations.

    Accepts two file formats (detected by extension):

    \b
      .json — Data-store trainset records with certificates and job cards.
              See config/fleet/sample_fleet.json for an example.

      .csv  — One flat snapshot per row; see fleet_advisor.ingestion.fleet_csv.
    """
    from fleet_advisor.recommendations.fleet import summarize_fleet
    from fleet_advisor.recommendations.reporter import (
        write_recommendation_csv,
        write_recommendation_json,
        write_summary_json,
    )
    from fleet_advisor.reporting.formatters import (
        format_advised_trainset,
        format_fleet_summary,
        format_fleet_table,
    )

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    ref_date = _parse_as_of(as_of)

    advised = _classify_fleet_or_exit(config, fleet_file, ref_date)
    summary = summarize_fleet(advised, config.targets.to_fleet_targets())

    typer.echo(format_fleet_table(advised))
    if not brief:
        for a in advised:
            typer.echo("")
            typer.echo(format_advised_trainset(a))
    typer.echo(format_fleet_summary(summary))

    if export:
        out_dir = Path(config.data.output_dir)
        csv_path = write_recommendation_csv(advised, out_dir)
        json_path = write_recommendation_json(advised, out_dir, as_of=ref_date)
        summary_path = write_summary_json(summary, out_dir)
        typer.echo("")
        typer.echo(f"  Reports written: {csv_path}, {json_path}, {summary_path}")


@app.command("fleet-summary")
def fleet_summary(
    fleet_file: Optional[str] = typer.Option(None, "--fleet", "-f", help="Fleet file (.json or .csv)."),
    as_of: Optional[str] = typer.Option(None, "--as-of", help="Reference date (ISO date)."),
    as_json: bool = typer.Option(False, "--json", help="Print the summary as JSON."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Print fleet KPIs (status distribution, confidence, changes, targets)."""
    from fleet_advisor.recommendations.fleet import summarize_fleet
    from fleet_advisor.reporting.formatters import format_fleet_summary

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    ref_date = _parse_as_of(as_of)

    advised = _classify_fleet_or_exit(config, fleet_file, ref_date)
    summary = summarize_fleet(advised, config.targets.to_fleet_targets())

    if as_json:
        typer.echo(json.dumps(summary.to_dict(), indent=2))
    else:
        typer.echo(format_fleet_summary(summary))


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
