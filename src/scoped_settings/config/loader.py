"""Config loading with layered resolution: env > .env > config.toml > defaults."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import TomlConfigSettingsSource

from scoped_settings.config.settings import AppSettings

_config_file: Path | None = None


def use_config_file(path: Path | None) -> None:
    """Read settings from ``path`` instead of ./config.toml on the next load."""
    global _config_file
    _config_file = path
    get_settings.cache_clear()


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Load and cache application settings.

    Values from an explicit config file take precedence over the environment.
    """
    if _config_file is None:
        return AppSettings()
    if not _config_file.is_file():
        raise FileNotFoundError(f"Config file not found: {_config_file}")
    return AppSettings(**TomlConfigSettingsSource(AppSettings, toml_file=_config_file)())
