"""Pytest fixtures for lifetrack tests."""

from __future__ import annotations

import tempfile
from datetime import date, datetime, timedelta
from pathlib import Path

import pytest

from lifetrack.db.connection import DatabaseConnection
from lifetrack.projection.models import Sample
from lifetrack.tracking.models import BodyMeasurement
from lifetrack.tracking.queries import MeasurementQueries

DAY0 = date(2025, 3, 1)


@pytest.fixture
def day0() -> date:
    return DAY0


@pytest.fixture
def weekly_loss_series() -> list[Sample]:
    """80 → 79 → 78 kg at weekly intervals (losing 1 kg/week)."""
    return [
        Sample(DAY0, 80.0),
        Sample(DAY0 + timedelta(days=7), 79.0),
        Sample(DAY0 + timedelta(days=14), 78.0),
    ]


@pytest.fixture
def temp_db():
    """Create a temporary database with schema."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    db = DatabaseConnection(db_path)
    db.initialize_schema()

    yield db

    # Cleanup
    db_path.unlink(missing_ok=True)


@pytest.fixture
def sample_measurements(temp_db):
    """Log three weekly weight/waist measurements starting on DAY0."""
    rows = [
        (0, 80.0, 92.0),
        (7, 79.0, 91.5),
        (14, 78.0, 91.0),
    ]
    with temp_db.get_connection() as conn:
        for offset, weight, waist in rows:
            MeasurementQueries.add_measurement(
                conn,
                BodyMeasurement(
                    measurement_id=None,
                    measured_at=datetime.combine(DAY0 + timedelta(days=offset), datetime.min.time())
                    + timedelta(hours=8),
                    weight_kg=weight,
                    waist_cm=waist,
                ),
            )
    return temp_db
