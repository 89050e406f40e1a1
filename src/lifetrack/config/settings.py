"""Application settings and configuration management."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

import yaml


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".lifetrack"


def _default_db_path() -> Path:
    """Return the default database path."""
    return _default_config_dir() / "lifetrack.db"


@dataclass
class DatabaseConfig:
    """Database configuration."""

    path: Path = field(default_factory=_default_db_path)


@dataclass
class ProjectionConfig:
    """Trend projection parameters."""

    history_days: int = 90  # how much history feeds the fit
    horizon_days: int = 90
    step_days: int = 7
    band_rate_factor: float = 0.5
    goal_max_days: Optional[int] = 365  # None = no cap on goal estimates

    def __post_init__(self) -> None:
        if self.history_days <= 0:
            raise ValueError(f"history_days must be positive, got {self.history_days}")
        if self.horizon_days < 0:
            raise ValueError(f"horizon_days must be non-negative, got {self.horizon_days}")
        if self.step_days <= 0:
            raise ValueError(f"step_days must be positive, got {self.step_days}")
        if self.band_rate_factor < 0:
            raise ValueError(
                f"band_rate_factor must be non-negative, got {self.band_rate_factor}"
            )
        if self.goal_max_days is not None and self.goal_max_days <= 0:
            raise ValueError(f"goal_max_days must be positive, got {self.goal_max_days}")


@dataclass
class GoalsConfig:
    """Target values per tracked metric (None = no goal)."""

    weight_kg: Optional[float] = None
    waist_cm: Optional[float] = None
    body_fat_pct: Optional[float] = None
    bmi: Optional[float] = None
    muscle_mass_kg: Optional[float] = None

    def get(self, metric: str) -> Optional[float]:
        """Return the goal for a metric name."""
        if metric not in self.names():
            raise ValueError(f"Unknown metric '{metric}'")
        return getattr(self, metric)

    def set(self, metric: str, value: Optional[float]) -> None:
        """Set (or clear, with None) the goal for a metric name."""
        if metric not in self.names():
            raise ValueError(f"Unknown metric '{metric}'")
        if value is not None:
            value = float(value)
            if not math.isfinite(value):
                raise ValueError(f"Goal for {metric} must be a finite number, got {value}")
        setattr(self, metric, value)

    def as_dict(self) -> dict[str, Optional[float]]:
        return {name: getattr(self, name) for name in self.names()}

    @classmethod
    def names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))


@dataclass
class DisplayConfig:
    """Output preferences."""

    decimals: int = 1


@dataclass
class Settings:
    """Main application settings."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    projection: ProjectionConfig = field(default_factory=ProjectionConfig)
    goals: GoalsConfig = field(default_factory=GoalsConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.lifetrack/config.yaml

        Returns:
            Settings instance

        Raises:
            ValueError: If a projection parameter or goal is out of range
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        if "database" in data:
            db_data = data["database"] or {}
            if db_data.get("path"):
                settings.database.path = Path(db_data["path"]).expanduser()

        if "projection" in data:
            proj_data = data["projection"] or {}
            current = settings.projection
            goal_max_days = proj_data.get("goal_max_days", current.goal_max_days)
            # Rebuild so __post_init__ validates the loaded values
            settings.projection = ProjectionConfig(
                history_days=int(proj_data.get("history_days", current.history_days)),
                horizon_days=int(proj_data.get("horizon_days", current.horizon_days)),
                step_days=int(proj_data.get("step_days", current.step_days)),
                band_rate_factor=float(
                    proj_data.get("band_rate_factor", current.band_rate_factor)
                ),
                goal_max_days=int(goal_max_days) if goal_max_days is not None else None,
            )

        if "goals" in data:
            goals_data = data["goals"] or {}
            for name in GoalsConfig.names():
                if goals_data.get(name) is not None:
                    settings.goals.set(name, goals_data[name])

        if "display" in data:
            disp_data = data["display"] or {}
            if "decimals" in disp_data:
                settings.display.decimals = int(disp_data["decimals"])

        return settings

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.lifetrack/config.yaml
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "database": {
                "path": str(self.database.path),
            },
            "projection": {
                "history_days": self.projection.history_days,
                "horizon_days": self.projection.horizon_days,
                "step_days": self.projection.step_days,
                "band_rate_factor": self.projection.band_rate_factor,
                "goal_max_days": self.projection.goal_max_days,
            },
            "goals": self.goals.as_dict(),
            "display": {
                "decimals": self.display.decimals,
            },
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings(config_path: Optional[Path] = None) -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load(config_path)
    return _settings


def set_settings(settings: Settings) -> None:
    """Replace the global settings instance (used by tests)."""
    global _settings
    _settings = settings
