"""Scoped global and per-user settings over a persistent store."""

from scoped_settings.manager.codecs import JsonCodec, NativeCodec, available_codecs, get_codec
from scoped_settings.manager.errors import (
    CodecError,
    SettingsError,
    StoreError,
    UnknownSettingError,
    WrongScopeError,
)
from scoped_settings.manager.identity import Principal, User
from scoped_settings.manager.models import Scope, SettingDefinition, SettingRecord
from scoped_settings.manager.settings_manager import SettingsManager
from scoped_settings.storage.memory_store import InMemorySettingStore

__all__ = [
    "CodecError",
    "InMemorySettingStore",
    "JsonCodec",
    "NativeCodec",
    "Principal",
    "Scope",
    "SettingDefinition",
    "SettingRecord",
    "SettingsError",
    "SettingsManager",
    "StoreError",
    "UnknownSettingError",
    "User",
    "WrongScopeError",
    "available_codecs",
    "get_codec",
]
