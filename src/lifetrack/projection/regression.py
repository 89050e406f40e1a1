"""Least-squares trend fitting over elapsed calendar days.

Values are regressed against whole days since the first sample (t0):

    value ≈ intercept + slope × days_since_t0

The fit uses every sample, so a single noisy weigh-in at either end of an
irregularly logged series does not set the rate of change on its own.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

import numpy as np

from lifetrack.projection.models import TrendModel
from lifetrack.projection.series import SampleLike, elapsed_days, prepare_series

logger = logging.getLogger(__name__)

# Fewer samples than this cannot define a line
MIN_SAMPLES = 2


def fit_trend(series: Iterable[SampleLike]) -> Optional[TrendModel]:
    """
    Fit an ordinary least-squares line to a series.

    Args:
        series: Samples or (date, value) tuples. The series is validated,
                sorted and deduplicated by day before fitting.

    Returns:
        TrendModel, or None when there is no trend to fit (fewer than two
        distinct days of data).

    Raises:
        InvalidSeriesError: If any value is NaN, infinite or non-numeric.

    Example:
        >>> from datetime import date
        >>> model = fit_trend([(date(2025, 1, 1), 80.0), (date(2025, 1, 8), 79.0)])
        >>> round(model.rate_per_week, 3)
        -1.0
    """
    samples = prepare_series(series)
    if len(samples) < MIN_SAMPLES:
        logger.debug("No trend: %d usable sample(s)", len(samples))
        return None

    x = np.array(elapsed_days(samples), dtype=float)
    y = np.array([s.value for s in samples], dtype=float)
    n = len(samples)

    x_mean = x.mean()
    y_mean = y.mean()
    dx = x - x_mean
    dy = y - y_mean

    # Zero variance in elapsed days: all samples on one day, slope undefined
    sxx = float(np.dot(dx, dx))
    if sxx == 0.0:
        logger.debug("No trend: %d samples span zero days", n)
        return None

    slope = float(np.dot(dx, dy)) / sxx
    intercept = float(y_mean - slope * x_mean)

    residuals = y - (intercept + slope * x)
    ss_res = float(np.dot(residuals, residuals))
    ss_tot = float(np.dot(dy, dy))

    dof = n - 2
    residual_std = float(np.sqrt(ss_res / dof)) if dof > 0 else 0.0
    r_squared = 1.0 - ss_res / ss_tot if ss_tot > 0 else 0.0

    model = TrendModel(
        slope_per_day=slope,
        intercept_value=intercept,
        first_observed_date=samples[0].timestamp,
        last_observed_date=samples[-1].timestamp,
        last_observed_value=samples[-1].value,
        first_observed_value=samples[0].value,
        sample_count=n,
        span_days=int(x[-1]),
        residual_std=residual_std,
        r_squared=r_squared,
    )
    logger.debug(
        "Fitted trend over %d samples / %d days: slope=%.6f/day, r2=%.3f",
        n,
        model.span_days,
        slope,
        r_squared,
    )
    return model
