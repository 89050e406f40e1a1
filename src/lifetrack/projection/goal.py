"""Goal-date estimation along a continuity-anchored trend line."""

from __future__ import annotations

import logging
import math
from datetime import date, timedelta
from typing import Optional

from lifetrack.projection.models import GoalEstimate, InvalidSeriesError, TrendModel

logger = logging.getLogger(__name__)


def _round_half_up(days: float) -> int:
    return int(math.floor(days + 0.5))


def _crossed_target(model: TrendModel, target_value: float) -> bool:
    """True if the observed series has passed through the target value."""
    low = min(model.first_observed_value, model.last_observed_value)
    high = max(model.first_observed_value, model.last_observed_value)
    return low <= target_value <= high


def estimate_goal_date(
    model: Optional[TrendModel],
    target_value: float,
    max_days: Optional[int] = None,
) -> Optional[GoalEstimate]:
    """
    Estimate when the trend reaches a target value.

    Solves ``last_observed_value + slope_per_day × d = target_value`` for d,
    using the same anchored line as the projector.

    Args:
        model: Fitted trend, or None when there was not enough data
        target_value: Goal value in the series' units
        max_days: If set, estimates this many days out or further are dropped

    Returns:
        - GoalEstimate with a date when the target lies ahead on the trend
        - GoalEstimate with already_reached=True when the series sits on
          the target or has already crossed it heading the way it trends
        - None when there is no finite estimate: no model, a flat trend, a
          trend heading away from a target never reached, or a crossing
          at or beyond max_days

    Raises:
        InvalidSeriesError: If target_value is not a finite number.

    Example:
        >>> estimate = estimate_goal_date(model, 75.0)  # 78 kg, -1 kg/week
        >>> estimate.days_remaining
        21
    """
    if model is None:
        return None

    target_value = float(target_value)
    if not math.isfinite(target_value):
        raise InvalidSeriesError(f"Goal target is not finite: {target_value}")

    remaining = target_value - model.last_observed_value
    if remaining == 0:
        return GoalEstimate(target_value=target_value, already_reached=True)

    if model.slope_per_day == 0:
        logger.debug("No goal estimate: flat trend")
        return None

    days_to_goal = remaining / model.slope_per_day

    if days_to_goal <= 0:
        if _crossed_target(model, target_value):
            return GoalEstimate(target_value=target_value, already_reached=True)
        logger.debug("No goal estimate: trend moving away from %.2f", target_value)
        return None

    # Beyond the representable calendar there is no meaningful date
    if days_to_goal > (date.max - model.last_observed_date).days:
        return None
    if max_days is not None and days_to_goal >= max_days:
        logger.debug("No goal estimate: %.0f days reaches limit of %d", days_to_goal, max_days)
        return None

    days = max(1, _round_half_up(days_to_goal))
    return GoalEstimate(
        target_value=target_value,
        already_reached=False,
        date=model.last_observed_date + timedelta(days=days),
        days_remaining=days,
    )
