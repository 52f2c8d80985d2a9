"""Typed configuration models using pydantic-settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict, TomlConfigSettingsSource

from scoped_settings.manager.models import SettingDefinition


class StorageSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_root: Path = Field(default=Path("data"), description="Root directory for the database")
    duckdb_filename: str = Field(default="settings.duckdb")

    @property
    def duckdb_path(self) -> Path:
        return self.data_root / self.duckdb_filename


class AppSettings(BaseSettings):
    """Top-level settings: setting definitions, codec choice, storage and logging."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        toml_file="config.toml",
    )

    settings: dict[str, SettingDefinition] = Field(
        default_factory=dict,
        description="Setting name -> definition, e.g. [settings.theme] scope = 'all'",
    )
    serialization: Literal["native", "json"] = Field(
        default="native",
        description="Codec used to persist setting values",
    )
    storage: StorageSettings = Field(default_factory=StorageSettings)
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False, description="Render logs as JSON lines")

    @classmethod
    def settings_customise_sources(cls, settings_cls, **kwargs):  # type: ignore[override]
        return (
            kwargs["init_settings"],
            kwargs["env_settings"],
            kwargs["dotenv_settings"],
            TomlConfigSettingsSource(settings_cls),
        )
