"""Body measurement tracking.

Measurements are logged to SQLite, read back as one series per metric
(deduplicated by day, latest entry wins) and fed to the projection engine
to build trend reports.
"""

from __future__ import annotations

from lifetrack.tracking.models import BodyMeasurement, Metric
from lifetrack.tracking.queries import MeasurementQueries

__all__ = [
    "BodyMeasurement",
    "MeasurementQueries",
    "Metric",
]
