"""Data models for trend fitting and projection."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


class InvalidSeriesError(ValueError):
    """Raised when a series contains values that cannot be used numerically.

    Not-enough-data situations never raise; they produce empty results.
    This error signals an upstream data-integrity problem (NaN, infinity,
    non-numeric values).
    """


@dataclass(frozen=True)
class Sample:
    """A single observation of a tracked metric on a calendar day."""

    timestamp: date
    value: float


@dataclass(frozen=True)
class TrendModel:
    """Least-squares linear trend fitted to a series.

    The line is ``value = intercept_value + slope_per_day * days_since_t0``
    where t0 is ``first_observed_date``.
    """

    slope_per_day: float
    intercept_value: float
    first_observed_date: date
    last_observed_date: date
    last_observed_value: float
    first_observed_value: float
    sample_count: int
    span_days: int
    residual_std: float
    r_squared: float

    @property
    def rate_per_week(self) -> float:
        """Slope expressed per 7 days."""
        return self.slope_per_day * 7

    def fitted_value(self, on: date) -> float:
        """Value of the statistical regression line on a given day."""
        return self.intercept_value + self.slope_per_day * (on - self.first_observed_date).days


@dataclass(frozen=True)
class ProjectionPoint:
    """One future point on the projected line with its confidence band."""

    date: date
    days_ahead: int
    projected_value: float
    optimistic_value: float
    pessimistic_value: float

    @property
    def band_width(self) -> float:
        """Distance between the optimistic and pessimistic values."""
        return abs(self.optimistic_value - self.pessimistic_value)


@dataclass(frozen=True)
class GoalEstimate:
    """Result of a goal-date search.

    Either ``already_reached`` is True (and ``date`` is None), or ``date``
    holds the projected day the target is reached.
    """

    target_value: float
    already_reached: bool
    date: Optional[date] = None
    days_remaining: Optional[int] = None
