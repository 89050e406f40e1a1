"""Forward projection of a fitted trend with a widening confidence band."""

from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Optional

from lifetrack.projection.models import ProjectionPoint, TrendModel

DEFAULT_HORIZON_DAYS = 90
DEFAULT_STEP_DAYS = 7

# Band half-width grows by this fraction of the daily rate for every day ahead
DEFAULT_BAND_RATE_FACTOR = 0.5

# Slowest rate the band assumes, as a fraction of the last value per day,
# so a flat trend still gets a band
MIN_BAND_RATE_FRACTION = 0.001

# Residual standard deviations added to the band once a full fitted span ahead
RESIDUAL_BAND_Z = 1.5


def band_half_width(model: TrendModel, days_ahead: int, band_rate_factor: float) -> float:
    """
    Half-width of the confidence band at a given distance into the future.

    The sum of a rate term, ``band_rate_factor × rate × d`` where rate is
    |slope| floored at a small fraction of the last value, and a noise term,
    ``RESIDUAL_BAND_Z × residual_std × sqrt(d / span_days)``, so noisier
    history gets a wider band.

    Non-negative, non-decreasing in ``days_ahead`` and zero at day 0.
    """
    if days_ahead <= 0:
        return 0.0
    rate = max(abs(model.slope_per_day), MIN_BAND_RATE_FRACTION * abs(model.last_observed_value))
    noise = RESIDUAL_BAND_Z * model.residual_std * math.sqrt(days_ahead / max(model.span_days, 1))
    return band_rate_factor * rate * days_ahead + noise


def project(
    model: Optional[TrendModel],
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    step_days: int = DEFAULT_STEP_DAYS,
    band_rate_factor: float = DEFAULT_BAND_RATE_FACTOR,
) -> list[ProjectionPoint]:
    """
    Project a trend forward in fixed steps.

    The projected line uses the fitted slope but passes through the last
    real observation, so a chart of actual values followed by projected
    values has no jump at the join.

    Args:
        model: Fitted trend, or None when there was not enough data
        horizon_days: How far past the last observation to project
        step_days: Spacing between projected points
        band_rate_factor: Band growth per day as a multiple of the rate

    Returns:
        Points at step, 2×step, ... up to the horizon, in date order.
        Points that would fall past the last representable date are left out.
        Empty when ``model`` is None, whatever the other arguments.

    Raises:
        ValueError: If step_days is not positive, or horizon_days or
            band_rate_factor is negative.

    Example:
        >>> points = project(model, horizon_days=14, step_days=7)
        >>> [round(p.projected_value, 1) for p in points]
        [77.0, 76.0]
    """
    if model is None:
        return []

    if step_days <= 0:
        raise ValueError(f"step_days must be positive, got {step_days}")
    if horizon_days < 0:
        raise ValueError(f"horizon_days must be non-negative, got {horizon_days}")
    if band_rate_factor < 0:
        raise ValueError(f"band_rate_factor must be non-negative, got {band_rate_factor}")

    horizon_days = min(horizon_days, (date.max - model.last_observed_date).days)

    # Optimistic = further along the direction of travel; flat counts as falling
    direction = 1.0 if model.slope_per_day > 0 else -1.0

    points = []
    for days_ahead in range(step_days, horizon_days + 1, step_days):
        projected = model.last_observed_value + model.slope_per_day * days_ahead
        band = band_half_width(model, days_ahead, band_rate_factor)
        points.append(
            ProjectionPoint(
                date=model.last_observed_date + timedelta(days=days_ahead),
                days_ahead=days_ahead,
                projected_value=projected,
                optimistic_value=projected + direction * band,
                pessimistic_value=projected - direction * band,
            )
        )

    return points
