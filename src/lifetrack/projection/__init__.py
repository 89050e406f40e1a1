"""Trend projection engine.

Turns a time-ordered series of body measurements into:

- a least-squares linear trend (rate of change per day)
- a forward projection with an optimistic/pessimistic band that widens
  with distance into the future
- an estimate of the date a goal value will be reached

Not having enough data is a normal state and yields None or an empty list.
Only malformed input (NaN, infinity, non-numeric values) raises
InvalidSeriesError.
"""

from __future__ import annotations

from lifetrack.projection.goal import estimate_goal_date
from lifetrack.projection.models import (
    GoalEstimate,
    InvalidSeriesError,
    ProjectionPoint,
    Sample,
    TrendModel,
)
from lifetrack.projection.projector import project
from lifetrack.projection.regression import fit_trend
from lifetrack.projection.series import prepare_series
from lifetrack.projection.summary import MetricOutlook, build_metric_outlook, build_outlook

__all__ = [
    "GoalEstimate",
    "InvalidSeriesError",
    "MetricOutlook",
    "ProjectionPoint",
    "Sample",
    "TrendModel",
    "build_metric_outlook",
    "build_outlook",
    "estimate_goal_date",
    "fit_trend",
    "prepare_series",
    "project",
]
