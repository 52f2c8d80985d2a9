"""Settings manager: scoped, lazily loaded settings over a setting store."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Iterable, Mapping

from scoped_settings.manager.codecs import Codec, get_codec
from scoped_settings.manager.errors import UnknownSettingError, WrongScopeError
from scoped_settings.manager.identity import Principal, owner_of
from scoped_settings.manager.models import Scope, SettingDefinition, SettingRecord
from scoped_settings.storage.base import SettingStore
from scoped_settings.utils.logging import get_logger

if TYPE_CHECKING:
    from scoped_settings.config.settings import AppSettings

logger = get_logger(__name__)


class SettingsManager:
    """Reads and writes global and per-user settings through a store.

    Values are cached per scope on first access and written back on every
    ``set``; ``set_many`` writes a whole batch with a single store flush.
    One manager is meant to serve one request or session.
    """

    def __init__(
        self,
        store: SettingStore,
        definitions: Mapping[str, SettingDefinition | Scope | str | Mapping[str, Any]],
        codec: Codec | str = "native",
    ) -> None:
        self._store = store
        self._definitions: Mapping[str, SettingDefinition] = MappingProxyType(
            {name: SettingDefinition.model_validate(d) for name, d in definitions.items()}
        )
        self._codec = get_codec(codec) if isinstance(codec, str) else codec

        self._global_settings: dict[str, Any] = {}
        self._global_loaded = False
        self._user_settings: dict[str, dict[str, Any]] = {}

    @classmethod
    def from_settings(cls, settings: AppSettings, store: SettingStore) -> SettingsManager:
        """Build a manager from the application configuration."""
        return cls(store, settings.settings, settings.serialization)

    @property
    def definitions(self) -> Mapping[str, SettingDefinition]:
        return self._definitions

    @property
    def codec(self) -> Codec:
        return self._codec

    # -- public API ---------------------------------------------------------

    def get(self, name: str, user: Principal | None = None) -> Any:
        """Current value of ``name``; None when it was never set or was cleared."""
        self._validate(name, user)
        return self._load(user).get(name)

    def all(self, user: Principal | None = None) -> dict[str, Any]:
        """Every setting visible in the given scope, as a fresh dict."""
        return dict(self._load(user))

    def set(self, name: str, value: Any, user: Principal | None = None) -> SettingsManager:
        self._set_without_flush(name, value, user)
        return self.flush([name], user)

    def set_many(
        self, settings: Mapping[str, Any], user: Principal | None = None
    ) -> SettingsManager:
        """Set several values and persist them with one store flush."""
        # Every entry is checked before the cache changes so a rejected batch
        # leaves nothing behind.
        for name, value in settings.items():
            self._check_value(name, value, user)
        cache = self._load(user)
        cache.update(settings)
        return self.flush(list(settings), user)

    def clear(self, name: str, user: Principal | None = None) -> SettingsManager:
        return self.set(name, None, user)

    def flush(self, names: Iterable[str] | str, user: Principal | None = None) -> SettingsManager:
        """Write the cached values of ``names`` to the store.

        Names outside the configuration are ignored and names whose scope
        does not match the user context are skipped, so a mixed batch
        persists whatever is valid for that context.
        """
        if isinstance(names, str):
            names = [names]
        requested = set(names)
        owner = owner_of(user)

        existing = {r.name: r for r in self._store.find_by(names=sorted(requested), owner=owner)}

        pending: list[tuple[str, SettingRecord | None, str]] = []
        for name in self._definitions:
            if name not in requested:
                continue
            try:
                value = self.get(name, user)
            except WrongScopeError:
                logger.debug("setting_skipped_wrong_scope", name=name, owner=owner)
                continue

            pending.append((name, existing.get(name), self._codec.encode(value)))

        # Nothing is staged until every value has been encoded
        for name, record, encoded in pending:
            if record is None:
                self._store.persist(SettingRecord(name=name, owner=owner, value=encoded))
                logger.debug("setting_record_created", name=name, owner=owner)
            else:
                record.value = encoded

        self._store.flush()
        logger.info(
            "settings_flushed",
            names=[name for name, _, _ in pending],
            owner=owner,
            codec=self._codec.name,
        )
        return self

    # -- internals ----------------------------------------------------------

    def _set_without_flush(self, name: str, value: Any, user: Principal | None) -> None:
        self._check_value(name, value, user)
        self._load(user)[name] = value

    def _check_value(self, name: str, value: Any, user: Principal | None) -> None:
        """Raise before caching a value the store could never receive."""
        self._validate(name, user)
        owner_of(user)
        self._codec.encode(value)

    def _validate(self, name: str, user: Principal | None) -> None:
        if not isinstance(name, str) or name not in self._definitions:
            raise UnknownSettingError(name)

        scope = self._definitions[name].scope
        if not scope.allows(user is not None):
            raise WrongScopeError(scope, name)

    def _load(self, user: Principal | None) -> dict[str, Any]:
        """Return the cache for the user's scope, loading it from the store once."""
        if not self._global_loaded:
            self._global_settings = self._read_from_store(None)
            self._global_loaded = True

        if user is None:
            return self._global_settings

        owner = owner_of(user)
        if owner not in self._user_settings:
            self._user_settings[owner] = self._read_from_store(user)
        return self._user_settings[owner]

    def _read_from_store(self, user: Principal | None) -> dict[str, Any]:
        has_user = user is not None
        settings: dict[str, Any] = {
            name: None
            for name, definition in self._definitions.items()
            if definition.scope.allows(has_user)
        }

        for record in self._store.find_by(owner=owner_of(user)):
            if record.name in settings and record.value is not None:
                settings[record.name] = self._codec.decode(record.value)

        logger.debug(
            "settings_loaded",
            scope="user" if has_user else "global",
            owner=owner_of(user),
            count=len(settings),
        )
        return settings
