"""Series preparation: validation, ordering and per-day deduplication."""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Iterable, Union

from lifetrack.projection.models import InvalidSeriesError, Sample

SampleLike = Union[Sample, tuple[Union[date, datetime], float]]


def to_sample(item: SampleLike) -> Sample:
    """
    Coerce a sample or a (date, value) tuple into a validated Sample.

    Datetimes are reduced to their calendar day.

    Raises:
        InvalidSeriesError: If the value is not a finite number or the
            timestamp is not a date.
    """
    if isinstance(item, Sample):
        timestamp, raw_value = item.timestamp, item.value
    else:
        try:
            timestamp, raw_value = item
        except (TypeError, ValueError) as e:
            raise InvalidSeriesError(f"Expected (date, value) pair, got {item!r}") from e

    if isinstance(timestamp, datetime):
        timestamp = timestamp.date()
    elif not isinstance(timestamp, date):
        raise InvalidSeriesError(f"Sample timestamp must be a date, got {timestamp!r}")

    try:
        value = float(raw_value)
    except (TypeError, ValueError) as e:
        raise InvalidSeriesError(f"Sample value on {timestamp} is not numeric: {raw_value!r}") from e

    if not math.isfinite(value):
        raise InvalidSeriesError(f"Sample value on {timestamp} is not finite: {value}")

    return Sample(timestamp=timestamp, value=value)


def prepare_series(samples: Iterable[SampleLike]) -> list[Sample]:
    """
    Validate, sort and deduplicate a series by calendar day.

    When several samples fall on the same day the one appearing latest in
    the input wins, matching how repeated same-day logs overwrite each other.

    Args:
        samples: Samples or (date, value) tuples in any order

    Returns:
        New list of samples, one per day, in ascending date order

    Example:
        >>> from datetime import date
        >>> prepare_series([(date(2025, 1, 2), 80.0), (date(2025, 1, 1), 81.0),
        ...                 (date(2025, 1, 2), 79.5)])
        [Sample(timestamp=datetime.date(2025, 1, 1), value=81.0),
         Sample(timestamp=datetime.date(2025, 1, 2), value=79.5)]
    """
    by_day: dict[date, Sample] = {}
    for item in samples:
        sample = to_sample(item)
        by_day[sample.timestamp] = sample

    return [by_day[day] for day in sorted(by_day)]


def elapsed_days(series: list[Sample]) -> list[int]:
    """Whole days elapsed from the first sample for each sample."""
    if not series:
        return []
    t0 = series[0].timestamp
    return [(s.timestamp - t0).days for s in series]
