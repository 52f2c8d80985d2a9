"""Tests for the settings and db CLI commands."""

from __future__ import annotations

from pathlib import Path

import pytest
import structlog
from typer.testing import CliRunner

from scoped_settings.cli.app import app
from scoped_settings.config.settings import AppSettings, StorageSettings

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> AppSettings:
    settings = AppSettings(
        settings={"theme": "all", "locale": "user", "motd": "global"},
        log_level="WARNING",
        storage=StorageSettings(data_root=tmp_path / "data"),
    )
    monkeypatch.setattr("scoped_settings.config.loader.get_settings", lambda: settings)
    return settings


def test_set_then_get():
    result = runner.invoke(app, ["settings", "set", "theme", "dark"])
    assert result.exit_code == 0
    assert "theme = 'dark'" in result.output

    result = runner.invoke(app, ["settings", "get", "theme"])
    assert result.exit_code == 0
    assert "'dark'" in result.output


def test_values_are_parsed_as_literals():
    runner.invoke(app, ["settings", "set", "locale", "['en', 'de']", "--user", "alice"])

    result = runner.invoke(app, ["settings", "get", "locale", "-u", "alice"])
    assert "['en', 'de']" in result.output


def test_clear():
    runner.invoke(app, ["settings", "set", "motd", "hello"])
    result = runner.invoke(app, ["settings", "clear", "motd"])
    assert result.exit_code == 0

    result = runner.invoke(app, ["settings", "get", "motd"])
    assert "None" in result.output


def test_wrong_scope_exits_with_error():
    result = runner.invoke(app, ["settings", "get", "locale"])
    assert result.exit_code == 1
    assert 'Wrong scope "user" for setting "locale"' in result.output


def test_unknown_setting_exits_with_error():
    result = runner.invoke(app, ["settings", "set", "colour", "red"])
    assert result.exit_code == 1
    assert "Unknown setting" in result.output


def test_list_and_definitions():
    runner.invoke(app, ["settings", "set", "theme", "dark", "--user", "bob"])

    result = runner.invoke(app, ["settings", "list", "--user", "bob"])
    assert result.exit_code == 0
    assert "locale" in result.output
    assert "'dark'" in result.output

    result = runner.invoke(app, ["settings", "definitions"])
    assert "global" in result.output
    assert "native" in result.output


def test_db_commands(tmp_path: Path):
    result = runner.invoke(app, ["db", "init"])
    assert result.exit_code == 0
    assert (tmp_path / "data" / "settings.duckdb").exists()

    result = runner.invoke(app, ["db", "info"])
    assert "No settings stored yet" in result.output

    runner.invoke(app, ["settings", "set", "theme", "dark"])
    runner.invoke(app, ["settings", "set", "locale", "en", "--user", "alice"])

    result = runner.invoke(app, ["db", "info"])
    assert "<global>" in result.output
    assert "alice" in result.output

    out = tmp_path / "dump.csv"
    result = runner.invoke(app, ["db", "dump", "--csv", str(out)])
    assert result.exit_code == 0
    assert "Exported 2 records" in result.output
    assert "locale,alice,'en'" in out.read_text()


def test_config_option(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """--config points the loader at another file before any command runs."""
    seen = []
    monkeypatch.setattr(
        "scoped_settings.config.loader.use_config_file", lambda path: seen.append(path)
    )
    config = tmp_path / "other.toml"

    result = runner.invoke(app, ["--config", str(config), "settings", "definitions"])
    assert result.exit_code == 0
    assert seen == [config]


def test_empty_user_is_rejected():
    runner.invoke(app, ["settings", "set", "theme", "dark"])

    result = runner.invoke(app, ["settings", "set", "theme", "light", "--user", ""])
    assert result.exit_code == 1
    assert "non-empty" in result.output

    result = runner.invoke(app, ["settings", "get", "theme"])
    assert "'dark'" in result.output


def test_owner_is_not_left_in_log_context():
    runner.invoke(app, ["settings", "list", "--user", "alice"])
    assert "owner" not in structlog.contextvars.get_contextvars()
