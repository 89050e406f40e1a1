"""Configuration management."""

from lifetrack.config.settings import (
    DatabaseConfig,
    DisplayConfig,
    GoalsConfig,
    ProjectionConfig,
    Settings,
    get_settings,
    reload_settings,
    set_settings,
)

__all__ = [
    "DatabaseConfig",
    "DisplayConfig",
    "GoalsConfig",
    "ProjectionConfig",
    "Settings",
    "get_settings",
    "reload_settings",
    "set_settings",
]
