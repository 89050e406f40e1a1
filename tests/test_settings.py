"""Tests for YAML-backed settings."""

from __future__ import annotations

import math
from pathlib import Path

import pytest
import yaml

from lifetrack.config.settings import GoalsConfig, ProjectionConfig, Settings


class TestProjectionConfig:
    """Tests for ProjectionConfig validation."""

    def test_defaults(self) -> None:
        config = ProjectionConfig()
        assert config.horizon_days == 90
        assert config.step_days == 7
        assert config.goal_max_days == 365

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"step_days": 0},
            {"horizon_days": -1},
            {"band_rate_factor": -0.1},
            {"history_days": 0},
            {"goal_max_days": 0},
        ],
    )
    def test_rejects_out_of_range(self, kwargs: dict) -> None:
        with pytest.raises(ValueError):
            ProjectionConfig(**kwargs)


class TestGoalsConfig:
    """Tests for GoalsConfig."""

    def test_set_and_get(self) -> None:
        goals = GoalsConfig()
        goals.set("weight_kg", 75)
        assert goals.get("weight_kg") == 75.0
        goals.set("weight_kg", None)
        assert goals.get("weight_kg") is None

    def test_unknown_metric(self) -> None:
        with pytest.raises(ValueError):
            GoalsConfig().get("height_cm")

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_rejects_non_finite_goal(self, value: float) -> None:
        goals = GoalsConfig()
        goals.set("weight_kg", 75.0)

        with pytest.raises(ValueError):
            goals.set("weight_kg", value)
        assert goals.weight_kg == 75.0


class TestSettingsFile:
    """Tests for Settings.load and Settings.save."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        settings = Settings.load(tmp_path / "missing.yaml")
        assert settings.projection == ProjectionConfig()
        assert settings.goals.weight_kg is None

    def test_save_and_load(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.yaml"
        settings = Settings()
        settings.database.path = tmp_path / "data.db"
        settings.projection = ProjectionConfig(horizon_days=60, step_days=3, goal_max_days=None)
        settings.goals.set("waist_cm", 85.0)
        settings.display.decimals = 2
        settings.save(config_path)

        loaded = Settings.load(config_path)

        assert loaded.database.path == tmp_path / "data.db"
        assert loaded.projection.horizon_days == 60
        assert loaded.projection.step_days == 3
        assert loaded.projection.goal_max_days is None
        assert loaded.goals.waist_cm == 85.0
        assert loaded.goals.weight_kg is None
        assert loaded.display.decimals == 2

    def test_partial_file(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.dump({"goals": {"weight_kg": 72.5}}))

        settings = Settings.load(config_path)

        assert settings.goals.weight_kg == 72.5
        assert settings.projection.horizon_days == 90

    def test_non_finite_goal_in_file(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.yaml"
        config_path.write_text("goals:\n  weight_kg: .nan\n")

        with pytest.raises(ValueError):
            Settings.load(config_path)

    def test_invalid_projection_values(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.dump({"projection": {"step_days": 0}}))

        with pytest.raises(ValueError):
            Settings.load(config_path)
