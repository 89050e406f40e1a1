"""Tests for CLI commands."""

from __future__ import annotations

import json
from datetime import date, timedelta

import pytest
import yaml
from typer.testing import CliRunner

from lifetrack.cli import app
from lifetrack.db import set_db

runner = CliRunner()


@pytest.fixture
def cli(temp_db, tmp_path):
    """Invoke the CLI against a temporary database and config file."""
    set_db(temp_db)
    config_path = tmp_path / "config.yaml"

    def invoke(*args: str):
        return runner.invoke(app, ["--config", str(config_path), *args])

    invoke.config_path = config_path
    yield invoke
    set_db(None)


def _log_weekly_loss(cli) -> date:
    """Log 80 → 79 → 78 kg ending today; return today."""
    today = date.today()
    for offset, weight in ((14, 80.0), (7, 79.0), (0, 78.0)):
        day = today - timedelta(days=offset)
        result = cli("measure", "add", "--weight", str(weight), "--date", day.isoformat())
        assert result.exit_code == 0, result.output
    return today


class TestMainCommands:
    """Tests for top-level commands."""

    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "lifetrack" in result.output.lower()

    def test_init(self, cli, temp_db):
        result = cli("init", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["success"] is True
        assert data["data"]["db_path"] == str(temp_db.db_path)


class TestMeasureCommands:
    """Tests for measure subcommands."""

    def test_add_requires_a_value(self, cli):
        result = cli("measure", "add")
        assert result.exit_code == 1

    def test_add_rejects_bad_date(self, cli):
        result = cli("measure", "add", "--weight", "80", "--date", "yesterday")
        assert result.exit_code != 0

    def test_add_and_list(self, cli):
        result = cli("measure", "add", "--weight", "80.5", "--waist", "91", "--json")
        assert result.exit_code == 0
        added = json.loads(result.output)
        assert added["data"]["weight_kg"] == 80.5
        assert added["data"]["waist_cm"] == 91.0

        result = cli("measure", "list", "--json")
        assert result.exit_code == 0
        entries = json.loads(result.output)["data"]["entries"]
        assert len(entries) == 1
        assert entries[0]["weight_kg"] == 80.5
        assert entries[0]["body_fat_pct"] is None

    def test_list_empty(self, cli):
        result = cli("measure", "list")
        assert result.exit_code == 0
        assert "No measurements found" in result.output


class TestTrendCommands:
    """Tests for trend subcommands."""

    def test_project_weekly_loss(self, cli):
        today = _log_weekly_loss(cli)

        result = cli("trend", "project", "weight", "--horizon", "14", "--step", "7",
                     "--goal", "75", "--json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)["data"]

        assert data["rate_per_week"] == -1.0
        assert [p["projected"] for p in data["projections"]] == [77.0, 76.0]
        assert data["projections"][0]["date"] == (today + timedelta(days=7)).isoformat()
        assert data["goal"]["estimated_date"] == (today + timedelta(days=21)).isoformat()

    def test_project_table_output(self, cli):
        _log_weekly_loss(cli)
        result = cli("trend", "project", "weight", "--horizon", "14", "--step", "7")
        assert result.exit_code == 0
        assert "77.0" in result.output
        assert "76.0" in result.output

    def test_project_without_data(self, cli):
        result = cli("trend", "project", "weight", "--json")
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["success"] is False
        assert "Not enough data" in data["errors"][0]

    def test_project_rejects_bad_step(self, cli):
        _log_weekly_loss(cli)
        result = cli("trend", "project", "weight", "--step", "0")
        assert result.exit_code != 0

    def test_project_huge_horizon(self, cli):
        _log_weekly_loss(cli)
        result = cli("trend", "project", "weight", "--horizon", "4000000",
                     "--step", "1000000", "--json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)["data"]
        assert len(data["projections"]) == 2

    def test_show(self, cli):
        _log_weekly_loss(cli)
        result = cli("trend", "show", "weight", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        assert data["current_value"] == 78.0
        assert data["trend"]["last_observed_value"] == 78.0
        assert "projections" not in data
        assert data["sample_count"] == 3

    def test_show_unknown_metric(self, cli):
        result = cli("trend", "show", "height")
        assert result.exit_code != 0

    @pytest.mark.parametrize(
        "target, status",
        [("75", "estimated"), ("79", "already_reached"), ("85", "no_estimate")],
    )
    def test_goal_states(self, cli, target, status):
        _log_weekly_loss(cli)
        result = cli("trend", "goal", "weight", target, "--json")
        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["status"] == status

    def test_outlook(self, cli):
        _log_weekly_loss(cli)
        cli("measure", "add", "--waist", "90")

        result = cli("trend", "outlook", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        assert set(data) == {"weight_kg", "waist_cm"}
        assert data["waist_cm"]["trend"] is None


class TestConfigCommands:
    """Tests for config subcommands."""

    def test_set_goal_saves_config(self, cli):
        result = cli("config", "set-goal", "weight", "72.5")
        assert result.exit_code == 0

        saved = yaml.safe_load(cli.config_path.read_text())
        assert saved["goals"]["weight_kg"] == 72.5

        result = cli("config", "show", "--json")
        assert json.loads(result.output)["data"]["goals"]["weight_kg"] == 72.5

    @pytest.mark.parametrize("value", ["nan", "inf"])
    def test_set_goal_rejects_non_finite(self, cli, value):
        result = cli("config", "set-goal", "weight", value)
        assert result.exit_code != 0
        assert not cli.config_path.exists()

        _log_weekly_loss(cli)
        assert cli("trend", "show", "weight", "--json").exit_code == 0

    def test_clear_goal(self, cli):
        cli("config", "set-goal", "waist", "85")
        result = cli("config", "clear-goal", "waist")
        assert result.exit_code == 0

        saved = yaml.safe_load(cli.config_path.read_text())
        assert saved["goals"]["waist_cm"] is None

    def test_configured_goal_used_by_trend(self, cli):
        today = _log_weekly_loss(cli)
        cli("config", "set-goal", "weight", "75")

        result = cli("trend", "project", "weight", "--json")
        data = json.loads(result.output)["data"]
        assert data["goal"]["target"] == 75.0
        assert data["goal"]["estimated_date"] == (today + timedelta(days=21)).isoformat()


def test_bad_default_config_reports_error(tmp_path, monkeypatch):
    from lifetrack.config import settings as settings_module

    (tmp_path / "config.yaml").write_text("projection:\n  step_days: 0\n")
    monkeypatch.setattr(settings_module, "_default_config_dir", lambda: tmp_path)

    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 1
    assert "Invalid config" in result.output
    assert result.exception is None or isinstance(result.exception, SystemExit)
