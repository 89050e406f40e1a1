"""Data models for body measurement tracking."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class Metric(Enum):
    """Tracked body metrics. Values double as database column names."""
    WEIGHT = "weight_kg"
    WAIST = "waist_cm"
    BODY_FAT = "body_fat_pct"
    BMI = "bmi"
    MUSCLE_MASS = "muscle_mass_kg"

    @property
    def label(self) -> str:
        return METRIC_LABELS[self]

    @property
    def unit(self) -> str:
        return METRIC_UNITS[self]

    @classmethod
    def parse(cls, name: str) -> "Metric":
        """
        Resolve a metric from its column name or a short alias.

        Example:
            >>> Metric.parse("weight")
            <Metric.WEIGHT: 'weight_kg'>
            >>> Metric.parse("body-fat")
            <Metric.BODY_FAT: 'body_fat_pct'>
        """
        key = name.strip().lower().replace("-", "_")
        for metric in cls:
            if key == metric.value:
                return metric
        if key in METRIC_ALIASES:
            return METRIC_ALIASES[key]
        valid = ", ".join(m.value for m in cls)
        raise ValueError(f"Unknown metric '{name}'. Valid metrics: {valid}")


METRIC_LABELS = {
    Metric.WEIGHT: "Weight",
    Metric.WAIST: "Waist",
    Metric.BODY_FAT: "Body fat",
    Metric.BMI: "BMI",
    Metric.MUSCLE_MASS: "Muscle mass",
}

METRIC_UNITS = {
    Metric.WEIGHT: "kg",
    Metric.WAIST: "cm",
    Metric.BODY_FAT: "%",
    Metric.BMI: "",
    Metric.MUSCLE_MASS: "kg",
}

METRIC_ALIASES = {
    "weight": Metric.WEIGHT,
    "waist": Metric.WAIST,
    "body_fat": Metric.BODY_FAT,
    "bodyfat": Metric.BODY_FAT,
    "fat": Metric.BODY_FAT,
    "muscle": Metric.MUSCLE_MASS,
    "muscle_mass": Metric.MUSCLE_MASS,
}


@dataclass
class BodyMeasurement:
    """A single measurement log entry. Any subset of metrics may be set."""

    measurement_id: Optional[int]
    measured_at: datetime
    weight_kg: Optional[float] = None
    waist_cm: Optional[float] = None
    body_fat_pct: Optional[float] = None
    bmi: Optional[float] = None
    muscle_mass_kg: Optional[float] = None
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        if all(self.value_of(m) is None for m in Metric):
            raise ValueError("A measurement needs at least one metric value")
        for metric in Metric:
            value = self.value_of(metric)
            if value is not None and not (math.isfinite(value) and value > 0):
                raise ValueError(f"{metric.value} must be a positive number, got {value}")

    def value_of(self, metric: Metric) -> Optional[float]:
        return getattr(self, metric.value)
