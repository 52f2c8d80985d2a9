"""Exceptions raised by the settings manager and its collaborators."""

from __future__ import annotations

from scoped_settings.manager.models import Scope


class SettingsError(Exception):
    """Base exception for all settings failures."""


class UnknownSettingError(SettingsError):
    """Raised when a setting name is absent from the configuration."""

    def __init__(self, name: object) -> None:
        self.name = name
        super().__init__(f'Unknown setting "{name}"')


class WrongScopeError(SettingsError):
    """Raised when a setting is accessed with or without a user against its scope."""

    def __init__(self, scope: Scope, name: str) -> None:
        self.scope = scope
        self.name = name
        super().__init__(f'Wrong scope "{scope.value}" for setting "{name}"')


class CodecError(SettingsError):
    """Raised for unknown codecs and values a codec cannot encode or decode."""


class StoreError(SettingsError):
    """Raised when a setting store is used outside of an open connection."""
