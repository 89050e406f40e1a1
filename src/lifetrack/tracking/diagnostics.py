"""Trend reports for tracked body metrics."""

from __future__ import annotations

import sqlite3
from datetime import date
from typing import Any, Optional

from lifetrack.config.settings import Settings
from lifetrack.projection.models import GoalEstimate
from lifetrack.projection.summary import MetricOutlook, build_metric_outlook
from lifetrack.tracking.models import Metric
from lifetrack.tracking.queries import MeasurementQueries


def generate_metric_report(
    conn: sqlite3.Connection,
    metric: Metric,
    settings: Settings,
    goal_value: Optional[float] = None,
    end: Optional[date] = None,
) -> MetricOutlook:
    """
    Build the outlook for one metric from logged measurements.

    Args:
        metric: Metric to analyze
        settings: Supplies the history window, projection parameters and,
                  when goal_value is None, the configured goal
        goal_value: Overrides the configured goal
        end: Last day of history to use (default: today)
    """
    series = MeasurementQueries.get_series(
        conn, metric, days=settings.projection.history_days, end=end
    )
    if goal_value is None:
        goal_value = settings.goals.get(metric.value)

    return build_metric_outlook(
        metric.value, series, goal_value=goal_value, config=settings.projection
    )


def generate_outlook(
    conn: sqlite3.Connection,
    settings: Settings,
    end: Optional[date] = None,
) -> dict[Metric, MetricOutlook]:
    """Build outlooks for every metric that has at least one measurement."""
    outlooks = {}
    for metric in Metric:
        outlook = generate_metric_report(conn, metric, settings, end=end)
        if outlook.sample_count > 0:
            outlooks[metric] = outlook
    return outlooks


def describe_goal(estimate: Optional[GoalEstimate], goal_value: Optional[float]) -> str:
    """One-line description of goal progress."""
    if goal_value is None:
        return "No goal set"
    if estimate is None:
        return "No estimate at the current trend"
    if estimate.already_reached:
        return "Goal already reached"
    return f"{estimate.date.isoformat()} (~{estimate.days_remaining} days)"


def _fmt(value: float, unit: str, decimals: int) -> str:
    return f"{value:.{decimals}f} {unit}".rstrip()


def _fmt_rate(rate_per_week: float, unit: str) -> str:
    per_week = f"{unit}/week" if unit else "per week"
    return f"{rate_per_week:+.2f} {per_week}"


def format_metric_report(outlook: MetricOutlook, decimals: int = 1) -> str:
    """Format a metric outlook as text."""
    metric = Metric(outlook.metric)
    unit = metric.unit

    lines = [
        f"{metric.label} trend",
        "=" * 45,
    ]

    if outlook.current_value is None:
        lines.append("No measurements logged")
        return "\n".join(lines)

    lines.append(f"Current:   {_fmt(outlook.current_value, unit, decimals)}")

    model = outlook.model
    if model is None:
        lines.append(f"Not enough data for a trend (only {outlook.sample_count} day logged)")
        return "\n".join(lines)

    direction = "falling" if model.slope_per_day < 0 else "rising"
    if model.slope_per_day == 0:
        direction = "flat"
    lines.extend([
        f"Rate:      {_fmt_rate(model.rate_per_week, unit)} ({direction})",
        f"History:   {model.sample_count} measurements over {model.span_days} days "
        f"(R² {model.r_squared:.2f})",
    ])

    if outlook.projections:
        last = outlook.projections[-1]
        lines.append(
            f"In {last.days_ahead} days: {_fmt(last.projected_value, unit, decimals)} "
            f"(range {last.optimistic_value:.{decimals}f} to {last.pessimistic_value:.{decimals}f})"
        )

    if outlook.goal_value is not None:
        lines.append("")
        lines.append(f"Goal ({_fmt(outlook.goal_value, unit, decimals)})")
        lines.append("-" * 45)
        lines.append(f"  {describe_goal(outlook.goal_estimate, outlook.goal_value)}")

    return "\n".join(lines)


def outlook_to_dict(outlook: MetricOutlook, decimals: int = 1) -> dict[str, Any]:
    """Serialize an outlook for JSON output. Values are rounded here only."""
    model = outlook.model
    estimate = outlook.goal_estimate

    goal: Optional[dict[str, Any]] = None
    if outlook.goal_value is not None:
        goal = {
            "target": outlook.goal_value,
            "already_reached": bool(estimate and estimate.already_reached),
            "estimated_date": estimate.date.isoformat() if estimate and estimate.date else None,
            "days_remaining": estimate.days_remaining if estimate else None,
        }

    return {
        "metric": outlook.metric,
        "current_value": outlook.current_value,
        "rate_per_week": round(outlook.rate_per_week, 2),
        "sample_count": outlook.sample_count,
        "trend": None if model is None else {
            "slope_per_day": round(model.slope_per_day, 6),
            "intercept_value": round(model.intercept_value, 4),
            "first_observed_date": model.first_observed_date.isoformat(),
            "last_observed_date": model.last_observed_date.isoformat(),
            "last_observed_value": model.last_observed_value,
            "residual_std": round(model.residual_std, 4),
            "r_squared": round(model.r_squared, 4),
        },
        "historical": [
            {"date": s.timestamp.isoformat(), "value": s.value} for s in outlook.history
        ],
        "projections": [
            {
                "date": p.date.isoformat(),
                "projected": round(p.projected_value, decimals),
                "optimistic": round(p.optimistic_value, decimals),
                "pessimistic": round(p.pessimistic_value, decimals),
            }
            for p in outlook.projections
        ],
        "goal": goal,
    }
