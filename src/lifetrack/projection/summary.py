"""Per-metric outlook: current value, weekly rate, projections and goal date."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from lifetrack.config.settings import ProjectionConfig
from lifetrack.projection.goal import estimate_goal_date
from lifetrack.projection.models import GoalEstimate, ProjectionPoint, Sample, TrendModel
from lifetrack.projection.projector import project
from lifetrack.projection.regression import fit_trend
from lifetrack.projection.series import SampleLike, prepare_series

# Recent observations kept on an outlook for charting alongside the projection
HISTORY_POINTS = 30


@dataclass
class MetricOutlook:
    """Everything a report needs to describe where one metric is heading."""

    metric: str
    current_value: Optional[float]
    rate_per_week: float
    sample_count: int
    model: Optional[TrendModel] = None
    projections: list[ProjectionPoint] = field(default_factory=list)
    goal_value: Optional[float] = None
    goal_estimate: Optional[GoalEstimate] = None
    history: list[Sample] = field(default_factory=list)

    @property
    def has_trend(self) -> bool:
        return self.model is not None


def build_metric_outlook(
    metric: str,
    series: Iterable[SampleLike],
    goal_value: Optional[float] = None,
    config: Optional[ProjectionConfig] = None,
) -> MetricOutlook:
    """
    Fit, project and estimate the goal date for one metric.

    Args:
        metric: Metric name carried through to the result
        series: Observations for the metric
        goal_value: Optional target value
        config: Projection parameters (defaults if None)

    Returns:
        MetricOutlook. With fewer than two days of data the outlook has no
        model, no projections and no goal estimate, but still reports the
        latest value when there is one. ``history`` holds the last
        HISTORY_POINTS daily samples.

    Raises:
        InvalidSeriesError: If the series or goal holds non-finite values.
    """
    if config is None:
        config = ProjectionConfig()

    samples = prepare_series(series)
    current_value = samples[-1].value if samples else None

    model = fit_trend(samples)
    projections = project(
        model,
        horizon_days=config.horizon_days,
        step_days=config.step_days,
        band_rate_factor=config.band_rate_factor,
    )

    goal_estimate = None
    if goal_value is not None:
        goal_estimate = estimate_goal_date(model, goal_value, max_days=config.goal_max_days)

    return MetricOutlook(
        metric=metric,
        current_value=current_value,
        rate_per_week=model.rate_per_week if model else 0.0,
        sample_count=len(samples),
        model=model,
        projections=projections,
        goal_value=goal_value,
        goal_estimate=goal_estimate,
        history=samples[-HISTORY_POINTS:],
    )


def build_outlook(
    series_by_metric: Mapping[str, Iterable[SampleLike]],
    goals: Optional[Mapping[str, Optional[float]]] = None,
    config: Optional[ProjectionConfig] = None,
) -> dict[str, MetricOutlook]:
    """Build an outlook for every metric supplied, in the order given."""
    goals = goals or {}
    return {
        metric: build_metric_outlook(metric, series, goals.get(metric), config)
        for metric, series in series_by_metric.items()
    }
