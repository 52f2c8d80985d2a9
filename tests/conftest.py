"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from scoped_settings.manager.identity import User
from scoped_settings.manager.models import Scope, SettingDefinition
from scoped_settings.manager.settings_manager import SettingsManager
from scoped_settings.storage.duckdb_store import DuckDBSettingStore
from scoped_settings.storage.memory_store import InMemorySettingStore


@pytest.fixture
def definitions() -> dict[str, SettingDefinition]:
    """theme is valid everywhere, locale per user, motd global only."""
    return {
        "theme": SettingDefinition(scope=Scope.ALL),
        "locale": SettingDefinition(scope=Scope.USER),
        "motd": SettingDefinition(scope=Scope.GLOBAL),
    }


@pytest.fixture
def alice() -> User:
    return User("alice")


@pytest.fixture
def bob() -> User:
    return User("bob")


@pytest.fixture
def memory_store() -> InMemorySettingStore:
    return InMemorySettingStore()


@pytest.fixture
def manager(memory_store: InMemorySettingStore, definitions) -> SettingsManager:
    return SettingsManager(memory_store, definitions)


@pytest.fixture
def duckdb_path(tmp_path: Path) -> Path:
    """Database file inside a not-yet-existing directory."""
    return tmp_path / "data" / "settings.duckdb"


@pytest.fixture
def duckdb_store(duckdb_path: Path):
    store = DuckDBSettingStore(duckdb_path)
    with store.connect():
        yield store
