"""Database queries for body measurements."""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime, time, timedelta
from typing import Optional

from lifetrack.projection.models import Sample
from lifetrack.projection.series import prepare_series
from lifetrack.tracking.models import BodyMeasurement, Metric

logger = logging.getLogger(__name__)

_COLUMNS = (
    "measurement_id, measured_at, weight_kg, waist_cm, body_fat_pct, "
    "bmi, muscle_mass_kg, notes"
)


def _row_to_measurement(row: sqlite3.Row) -> BodyMeasurement:
    return BodyMeasurement(
        measurement_id=row[0],
        measured_at=datetime.fromisoformat(row[1]),
        weight_kg=row[2],
        waist_cm=row[3],
        body_fat_pct=row[4],
        bmi=row[5],
        muscle_mass_kg=row[6],
        notes=row[7],
    )


def _window_start(days: Optional[int], end: date) -> Optional[datetime]:
    if not days:
        return None
    return datetime.combine(end - timedelta(days=days), time.min)


class MeasurementQueries:
    """Database queries for body measurement entries."""

    @staticmethod
    def add_measurement(
        conn: sqlite3.Connection, measurement: BodyMeasurement
    ) -> BodyMeasurement:
        """Insert a measurement and return it with its new ID."""
        cursor = conn.execute(
            """
            INSERT INTO body_measurements (measured_at, weight_kg, waist_cm,
                                           body_fat_pct, bmi, muscle_mass_kg, notes)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                measurement.measured_at.isoformat(),
                measurement.weight_kg,
                measurement.waist_cm,
                measurement.body_fat_pct,
                measurement.bmi,
                measurement.muscle_mass_kg,
                measurement.notes,
            ),
        )
        conn.commit()

        return BodyMeasurement(
            measurement_id=cursor.lastrowid,
            measured_at=measurement.measured_at,
            weight_kg=measurement.weight_kg,
            waist_cm=measurement.waist_cm,
            body_fat_pct=measurement.body_fat_pct,
            bmi=measurement.bmi,
            muscle_mass_kg=measurement.muscle_mass_kg,
            notes=measurement.notes,
        )

    @staticmethod
    def list_measurements(
        conn: sqlite3.Connection,
        days: Optional[int] = None,
        end: Optional[date] = None,
    ) -> list[BodyMeasurement]:
        """
        List measurements in chronological order.

        Args:
            days: If set, only entries from the last N days before ``end``
            end: Last day of the window (default: today)
        """
        end = end or date.today()
        query = f"SELECT {_COLUMNS} FROM body_measurements WHERE measured_at < ?"
        params: list = [datetime.combine(end + timedelta(days=1), time.min).isoformat()]

        start = _window_start(days, end)
        if start is not None:
            query += " AND measured_at >= ?"
            params.append(start.isoformat())

        query += " ORDER BY measured_at ASC, measurement_id ASC"
        rows = conn.execute(query, params).fetchall()
        return [_row_to_measurement(row) for row in rows]

    @staticmethod
    def get_series(
        conn: sqlite3.Connection,
        metric: Metric,
        days: Optional[int] = None,
        end: Optional[date] = None,
    ) -> list[Sample]:
        """
        Get one metric as a series, one sample per day.

        Rows without a value for the metric are skipped. When a day has
        several entries the latest one wins.
        """
        measurements = MeasurementQueries.list_measurements(conn, days=days, end=end)
        raw = [
            (m.measured_at, m.value_of(metric))
            for m in measurements
            if m.value_of(metric) is not None
        ]
        series = prepare_series(raw)
        logger.debug(
            "Loaded %s series: %d entries -> %d days", metric.value, len(raw), len(series)
        )
        return series
