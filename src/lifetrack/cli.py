"""CLI interface using Typer."""

from __future__ import annotations

import dataclasses
import json
import logging
from datetime import date, datetime, time
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from lifetrack.config import ProjectionConfig, Settings, get_settings, reload_settings
from lifetrack.db import get_db
from lifetrack.projection import InvalidSeriesError, MetricOutlook
from lifetrack.tracking.models import BodyMeasurement, Metric

app = typer.Typer(
    help="lifetrack: log body measurements and project where they are heading",
    no_args_is_help=True,
)
console = Console()

# Subcommand groups
measure_app = typer.Typer(help="Log and list body measurements")
trend_app = typer.Typer(help="Trend analysis, projections and goal dates")
config_app = typer.Typer(help="Show and edit settings")

app.add_typer(measure_app, name="measure")
app.add_typer(trend_app, name="trend")
app.add_typer(config_app, name="config")

# Set by --config; None means the default location
_config_path: Optional[Path] = None


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: dict, file=None) -> None:
    """Output JSON response to stdout or file."""
    json_str = json.dumps(response, indent=2)
    if file:
        file.write(json_str)
    else:
        print(json_str)


def fail(
    command: str,
    message: str,
    json_output: bool,
    suggestions: Optional[list[str]] = None,
) -> NoReturn:
    """Report an error in the requested format and exit with status 1."""
    if json_output:
        response: dict = {"success": False, "command": command, "errors": [message]}
        if suggestions:
            response["suggestions"] = suggestions
        output_json(response)
    else:
        console.print(f"[red]{message}[/red]")
        for suggestion in suggestions or []:
            console.print(suggestion)
    raise typer.Exit(1)


def ensure_tables() -> None:
    """Ensure measurement tables exist (idempotent)."""
    get_db().initialize_schema()


def parse_metric(name: str) -> Metric:
    try:
        return Metric.parse(name)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def parse_day(date_str: Optional[str]) -> Optional[date]:
    if date_str is None:
        return None
    try:
        return date.fromisoformat(date_str)
    except ValueError as e:
        raise typer.BadParameter(f"Invalid date '{date_str}', expected YYYY-MM-DD") from e


def projection_config(
    settings: Settings,
    horizon: Optional[int] = None,
    step: Optional[int] = None,
    band: Optional[float] = None,
) -> ProjectionConfig:
    """Apply command-line overrides on top of the configured projection settings."""
    overrides = {
        key: value
        for key, value in (
            ("horizon_days", horizon),
            ("step_days", step),
            ("band_rate_factor", band),
        )
        if value is not None
    }
    try:
        return dataclasses.replace(settings.projection, **overrides)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def load_outlook(
    command: str,
    metric: Metric,
    settings: Settings,
    json_output: bool,
    goal: Optional[float] = None,
    config: Optional[ProjectionConfig] = None,
) -> MetricOutlook:
    """Build a metric outlook, turning bad data into a CLI error."""
    from lifetrack.tracking.diagnostics import generate_metric_report

    if config is not None:
        settings = dataclasses.replace(settings, projection=config)

    try:
        with get_db().get_connection() as conn:
            return generate_metric_report(conn, metric, settings, goal_value=goal)
    except InvalidSeriesError as e:
        fail(command, f"Invalid {metric.value} data: {e}", json_output)


# ============================================================================
# Callbacks
# ============================================================================


@app.callback()
def main(
    config: Optional[Path] = typer.Option(
        None, "--config", help="Path to config.yaml (default: ~/.lifetrack/config.yaml)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Personal body-metric tracking with linear trend projections."""
    global _config_path

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    _config_path = config
    try:
        reload_settings(config)
    except (ValueError, TypeError) as e:
        console.print(f"[red]Invalid config {config or '~/.lifetrack/config.yaml'}: {e}[/red]")
        raise typer.Exit(1)


@measure_app.callback()
def measure_callback() -> None:
    """Ensure tables exist before any measure command."""
    ensure_tables()


@trend_app.callback()
def trend_callback() -> None:
    """Ensure tables exist before any trend command."""
    ensure_tables()


# ============================================================================
# Main Commands
# ============================================================================


@app.command()
def init(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Create the measurement database."""
    db = get_db()
    db.initialize_schema()

    if json_output:
        output_json({
            "success": True,
            "command": "init",
            "data": {"db_path": str(db.db_path)},
            "human_summary": f"Database ready at {db.db_path}",
        })
    else:
        console.print(f"[green]Database ready:[/green] {db.db_path}")


# ============================================================================
# Measurement Commands
# ============================================================================


@measure_app.command("add")
def measure_add(
    weight: Optional[float] = typer.Option(None, "--weight", "-w", help="Weight in kg"),
    waist: Optional[float] = typer.Option(None, "--waist", help="Waist in cm"),
    body_fat: Optional[float] = typer.Option(None, "--body-fat", help="Body fat %"),
    bmi: Optional[float] = typer.Option(None, "--bmi", help="Body mass index"),
    muscle: Optional[float] = typer.Option(None, "--muscle", help="Muscle mass in kg"),
    date_str: Optional[str] = typer.Option(
        None, "--date", "-d", help="Date (YYYY-MM-DD, default: now)"
    ),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="Optional notes"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Log a body measurement (any combination of metrics)."""
    from lifetrack.tracking.queries import MeasurementQueries

    day = parse_day(date_str)
    # Backdated entries sit at noon; a later entry for the same day still wins
    measured_at = (
        datetime.combine(day, time(12)) if day else datetime.now().replace(microsecond=0)
    )

    try:
        measurement = BodyMeasurement(
            measurement_id=None,
            measured_at=measured_at,
            weight_kg=weight,
            waist_cm=waist,
            body_fat_pct=body_fat,
            bmi=bmi,
            muscle_mass_kg=muscle,
            notes=notes,
        )
    except ValueError as e:
        fail(
            "measure add",
            str(e),
            json_output,
            suggestions=["Example: lifetrack measure add --weight 80.5 --waist 90"],
        )

    with get_db().get_connection() as conn:
        entry = MeasurementQueries.add_measurement(conn, measurement)

    logged = {m.value: entry.value_of(m) for m in Metric if entry.value_of(m) is not None}
    summary = ", ".join(f"{Metric(k).label.lower()} {v:g}{Metric(k).unit}" for k, v in logged.items())

    if json_output:
        output_json({
            "success": True,
            "command": "measure add",
            "data": {
                "measurement_id": entry.measurement_id,
                "measured_at": entry.measured_at.isoformat(),
                **logged,
            },
            "human_summary": f"Logged {summary}",
        })
    else:
        console.print(f"[green]Logged:[/green] {summary} on {entry.measured_at.date()}")


@measure_app.command("list")
def measure_list(
    days: int = typer.Option(30, "--days", "-d", help="Number of days to show"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List recent measurements."""
    from lifetrack.tracking.queries import MeasurementQueries

    with get_db().get_connection() as conn:
        history = MeasurementQueries.list_measurements(conn, days=days)

    if not history:
        if json_output:
            output_json({
                "success": True,
                "command": "measure list",
                "data": {"entries": []},
                "human_summary": "No measurements found",
            })
        else:
            console.print("No measurements found")
        return

    if json_output:
        output_json({
            "success": True,
            "command": "measure list",
            "data": {
                "entries": [
                    {
                        "measurement_id": m.measurement_id,
                        "measured_at": m.measured_at.isoformat(),
                        **{metric.value: m.value_of(metric) for metric in Metric},
                        "notes": m.notes,
                    }
                    for m in history
                ]
            },
            "human_summary": f"{len(history)} measurements over {days} days",
        })
        return

    table = Table(title=f"Measurements (last {days} days)")
    table.add_column("Date", style="cyan")
    for metric in Metric:
        unit = f" ({metric.unit})" if metric.unit else ""
        table.add_column(f"{metric.label}{unit}", justify="right")
    table.add_column("Notes", style="dim")

    for m in history:
        cells = [
            "" if m.value_of(metric) is None else f"{m.value_of(metric):.1f}"
            for metric in Metric
        ]
        table.add_row(m.measured_at.strftime("%Y-%m-%d %H:%M"), *cells, m.notes or "")

    console.print(table)


# ============================================================================
# Trend Commands
# ============================================================================


@trend_app.command("show")
def trend_show(
    metric_name: str = typer.Argument("weight", help="Metric (weight, waist, body-fat, bmi, muscle)"),
    days: Optional[int] = typer.Option(None, "--days", "-d", help="History window in days"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the fitted trend for a metric."""
    from lifetrack.tracking.diagnostics import format_metric_report, outlook_to_dict

    metric = parse_metric(metric_name)
    settings = get_settings()
    config = settings.projection
    if days is not None:
        try:
            config = dataclasses.replace(config, history_days=days)
        except ValueError as e:
            raise typer.BadParameter(str(e)) from e

    outlook = load_outlook("trend show", metric, settings, json_output, config=config)

    if outlook.model is None:
        fail("trend show", "Not enough data for trend analysis", json_output,
             suggestions=["Log measurements on at least two different days"])

    if json_output:
        data = outlook_to_dict(outlook, settings.display.decimals)
        data.pop("projections")
        output_json({
            "success": True,
            "command": "trend show",
            "data": data,
            "human_summary": (
                f"{metric.label}: {outlook.current_value:.1f}{metric.unit}, "
                f"{outlook.rate_per_week:+.2f}{metric.unit}/week"
            ),
        })
    else:
        console.print(format_metric_report(outlook, settings.display.decimals))


@trend_app.command("project")
def trend_project(
    metric_name: str = typer.Argument("weight", help="Metric (weight, waist, body-fat, bmi, muscle)"),
    horizon: Optional[int] = typer.Option(None, "--horizon", help="Days to project ahead"),
    step: Optional[int] = typer.Option(None, "--step", help="Days between projected points"),
    band: Optional[float] = typer.Option(None, "--band", help="Band growth factor (× |rate|)"),
    goal: Optional[float] = typer.Option(None, "--goal", "-g", help="Goal value (default: from config)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Project a metric forward with an optimistic/pessimistic band."""
    from lifetrack.tracking.diagnostics import describe_goal, outlook_to_dict

    metric = parse_metric(metric_name)
    settings = get_settings()
    config = projection_config(settings, horizon, step, band)

    outlook = load_outlook("trend project", metric, settings, json_output, goal=goal, config=config)

    if outlook.model is None:
        fail("trend project", "Not enough data for a projection", json_output,
             suggestions=["Log measurements on at least two different days"])

    decimals = settings.display.decimals
    if json_output:
        output_json({
            "success": True,
            "command": "trend project",
            "data": outlook_to_dict(outlook, decimals),
            "human_summary": (
                f"{len(outlook.projections)} points over {config.horizon_days} days; "
                f"goal: {describe_goal(outlook.goal_estimate, outlook.goal_value)}"
            ),
        })
        return

    unit = metric.unit
    table = Table(title=f"{metric.label} projection ({config.horizon_days} days)")
    table.add_column("Date", style="cyan")
    table.add_column("Days", justify="right")
    table.add_column(f"Projected {unit}".rstrip(), justify="right", style="blue")
    table.add_column("Optimistic", justify="right", style="green")
    table.add_column("Pessimistic", justify="right", style="yellow")

    for point in outlook.projections:
        table.add_row(
            point.date.isoformat(),
            str(point.days_ahead),
            f"{point.projected_value:.{decimals}f}",
            f"{point.optimistic_value:.{decimals}f}",
            f"{point.pessimistic_value:.{decimals}f}",
        )

    console.print(table)
    console.print(f"[blue]Rate:[/blue] {outlook.rate_per_week:+.2f} {unit}/week")
    if outlook.goal_value is not None:
        console.print(
            f"[blue]Goal {outlook.goal_value:g}{unit}:[/blue] "
            f"{describe_goal(outlook.goal_estimate, outlook.goal_value)}"
        )


@trend_app.command("goal")
def trend_goal(
    metric_name: str = typer.Argument(..., help="Metric (weight, waist, body-fat, bmi, muscle)"),
    target: float = typer.Argument(..., help="Target value"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Estimate when a metric reaches a target value."""
    from lifetrack.tracking.diagnostics import describe_goal

    metric = parse_metric(metric_name)
    settings = get_settings()
    outlook = load_outlook("trend goal", metric, settings, json_output, goal=target)

    if outlook.model is None:
        fail("trend goal", "Not enough data for a goal estimate", json_output,
             suggestions=["Log measurements on at least two different days"])

    estimate = outlook.goal_estimate
    if estimate is None:
        status = "no_estimate"
    elif estimate.already_reached:
        status = "already_reached"
    else:
        status = "estimated"

    description = describe_goal(estimate, target)
    if json_output:
        output_json({
            "success": True,
            "command": "trend goal",
            "data": {
                "metric": metric.value,
                "target": target,
                "status": status,
                "estimated_date": estimate.date.isoformat() if estimate and estimate.date else None,
                "days_remaining": estimate.days_remaining if estimate else None,
                "current_value": outlook.current_value,
                "rate_per_week": round(outlook.rate_per_week, 2),
            },
            "human_summary": f"{metric.label} goal {target:g}{metric.unit}: {description}",
        })
    else:
        color = {"estimated": "green", "already_reached": "green", "no_estimate": "yellow"}[status]
        console.print(f"[{color}]{metric.label} goal {target:g}{metric.unit}: {description}[/{color}]")


@trend_app.command("outlook")
def trend_outlook(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Summarize every logged metric with its projection and goal."""
    from lifetrack.tracking.diagnostics import (
        format_metric_report,
        generate_outlook,
        outlook_to_dict,
    )

    settings = get_settings()
    try:
        with get_db().get_connection() as conn:
            outlooks = generate_outlook(conn, settings)
    except InvalidSeriesError as e:
        fail("trend outlook", f"Invalid measurement data: {e}", json_output)

    decimals = settings.display.decimals
    if json_output:
        output_json({
            "success": True,
            "command": "trend outlook",
            "data": {
                metric.value: outlook_to_dict(outlook, decimals)
                for metric, outlook in outlooks.items()
            },
            "human_summary": f"{len(outlooks)} metrics with data",
        })
        return

    if not outlooks:
        console.print("No measurements found")
        return

    for outlook in outlooks.values():
        console.print(Panel(format_metric_report(outlook, decimals)))


# ============================================================================
# Config Commands
# ============================================================================


@config_app.command("show")
def config_show(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show current settings."""
    settings = get_settings()
    proj = settings.projection
    data = {
        "database": str(settings.database.path),
        "projection": dataclasses.asdict(proj),
        "goals": settings.goals.as_dict(),
    }

    if json_output:
        output_json({"success": True, "command": "config show", "data": data})
        return

    console.print(f"[bold]Database:[/bold] {settings.database.path}")
    console.print("[bold]Projection[/bold]")
    console.print(f"  History:     {proj.history_days} days")
    console.print(f"  Horizon:     {proj.horizon_days} days, every {proj.step_days} days")
    console.print(f"  Band factor: {proj.band_rate_factor}")
    console.print(f"  Goal limit:  {proj.goal_max_days or 'none'} days")
    console.print("[bold]Goals[/bold]")
    for name, value in settings.goals.as_dict().items():
        metric = Metric(name)
        shown = "-" if value is None else f"{value:g}{metric.unit}"
        console.print(f"  {metric.label}: {shown}")


@config_app.command("set-goal")
def config_set_goal(
    metric_name: str = typer.Argument(..., help="Metric (weight, waist, body-fat, bmi, muscle)"),
    value: float = typer.Argument(..., help="Target value"),
) -> None:
    """Set the goal for a metric and save the config."""
    metric = parse_metric(metric_name)
    settings = get_settings()
    try:
        settings.goals.set(metric.value, value)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="VALUE") from e
    settings.save(_config_path)
    console.print(f"[green]Goal set:[/green] {metric.label} {value:g}{metric.unit}")


@config_app.command("clear-goal")
def config_clear_goal(
    metric_name: str = typer.Argument(..., help="Metric (weight, waist, body-fat, bmi, muscle)"),
) -> None:
    """Remove the goal for a metric and save the config."""
    metric = parse_metric(metric_name)
    settings = get_settings()
    settings.goals.set(metric.value, None)
    settings.save(_config_path)
    console.print(f"[green]Goal cleared:[/green] {metric.label}")


if __name__ == "__main__":
    app()
