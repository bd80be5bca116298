"""
Settings store for the Loki desktop application.

Owns the single persisted settings record. Every mutation runs as a
read-modify-write cycle under one lock and is committed to the backing
file before the method returns.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ValidationError

from core.config import get_data_dir
from core.constants import (
    EXPORT_VERSION,
    SETTINGS_CATEGORY,
    SETTINGS_FILE_NAME,
    SETTINGS_KEY,
)
from core.exceptions import (
    DeserializationError,
    ImportParseError,
    PersistenceError,
    SerializationError,
    StorageNotInitializedError,
)
from core.infrastructure.keyring_service import KeyringService
from core.persistence import Database, SettingsRepository
from core.types import (
    PROVIDER_PATCH_FIELDS,
    SETTINGS_PATCH_FIELDS,
    AppSettings,
    SettingsExport,
    create_default_settings,
    default_providers,
)

logger = logging.getLogger(__name__)


class SettingsStore:
    """
    Sole owner of the persisted settings record.

    API keys live inside the record by default. When constructed with an
    available KeyringService, they are kept in the OS keyring instead and
    stripped from the settings file; the observable record is the same.
    """

    def __init__(self, credentials: Optional[KeyringService] = None):
        self._lock = threading.RLock()
        self._db: Optional[Database] = None
        self._repo: Optional[SettingsRepository] = None
        self._settings: Optional[AppSettings] = None
        self._credentials = credentials
        self._last_skipped_fields: list[str] = []
        # Providers whose current API key is held by the keyring
        self._vaulted: set[str] = set()
        self._owns_db = False

    # ----- Lifecycle -----

    def initialize(self, handle: Union[Database, Path, str, None] = None) -> None:
        """
        Bind the store to a persistence backend.

        Args:
            handle: An open Database, or a data directory in which the
                settings file is created. Defaults to the configured data dir.

        Raises:
            StorageInitError: The settings file cannot be opened or created
        """
        owns_db = not isinstance(handle, Database)
        if owns_db:
            data_dir = Path(handle) if handle is not None else get_data_dir()
            database = Database(data_dir / SETTINGS_FILE_NAME)
        else:
            database = handle

        with self._lock:
            if self._db is not None and self._db is not database:
                self._release_db()
            self._db = database
            self._owns_db = owns_db
            self._repo = SettingsRepository(database)
            self._settings = None
            self._vaulted = set()
        logger.info(f"Settings store bound to {database.db_path}")

    def close(self) -> None:
        """Unbind the store, closing the settings file if the store opened it."""
        with self._lock:
            self._release_db()
            self._db = None
            self._repo = None
            self._settings = None
            self._vaulted = set()

    @property
    def is_initialized(self) -> bool:
        return self._repo is not None

    @property
    def last_skipped_fields(self) -> list[str]:
        """Names of recognized fields the most recent patch could not apply."""
        return list(self._last_skipped_fields)

    # ----- Reads -----

    def get(self) -> AppSettings:
        """
        Get the current settings record.

        Returns:
            A copy of the record; defaults when nothing is persisted yet

        Raises:
            StorageNotInitializedError: initialize() has not been called
            DeserializationError: The persisted value is structurally invalid
        """
        with self._lock:
            return self._current().model_copy(deep=True)

    def get_api_key(self, provider_id: str) -> Optional[str]:
        """
        Get a provider's API key.

        With a credential service configured, an absent key falls back to
        the provider's environment variable.
        """
        with self._lock:
            provider = self._current().providers.get(provider_id)
            api_key = provider.api_key if provider is not None else None
        if api_key is None and self._credentials is not None:
            return self._credentials.get_credential(provider_id)
        return api_key

    def export_settings(self) -> SettingsExport:
        """Snapshot the record with every provider API key removed."""
        with self._lock:
            settings = self._current()
            export = SettingsExport(
                version=EXPORT_VERSION,
                timestamp=datetime.now(timezone.utc).isoformat(),
                settings=settings.to_export(),
            )
        logger.info("Exported settings")
        return export

    # ----- Mutations -----

    def patch(self, fields: Mapping[str, Any]) -> AppSettings:
        """
        Apply a partial update to the top-level settings.

        Unknown field names are ignored. A value that cannot be coerced to
        its field's type is skipped without affecting the other fields.

        Returns:
            The updated record, already persisted
        """
        with self._lock:
            settings = self._current().model_copy(deep=True)
            skipped = _apply_fields(settings, fields, SETTINGS_PATCH_FIELDS)
            return self._commit(settings, skipped)

    def patch_provider(self, provider_id: str, fields: Mapping[str, Any]) -> AppSettings:
        """
        Apply a partial update to one provider's settings.

        Empty strings clear api_key, custom_endpoint and default_model;
        None values are skipped. An unknown provider_id leaves the record
        unchanged, which is still persisted.
        """
        with self._lock:
            settings = self._current().model_copy(deep=True)
            skipped: list[str] = []
            provider = settings.providers.get(provider_id)
            if provider is not None:
                present = {name: value for name, value in fields.items() if value is not None}
                skipped = [name for name, value in fields.items()
                           if value is None and name in PROVIDER_PATCH_FIELDS]
                skipped += _apply_fields(provider, present, PROVIDER_PATCH_FIELDS)
            else:
                logger.debug(f"Ignoring update for unknown provider {provider_id!r}")
            return self._commit(settings, skipped)

    def set_api_key(self, provider_id: str, api_key: Optional[str]) -> AppSettings:
        """Replace a provider's API key; an empty string or None clears it."""
        with self._lock:
            settings = self._current().model_copy(deep=True)
            provider = settings.providers.get(provider_id)
            if provider is not None:
                provider.api_key = api_key
            else:
                logger.debug(f"Ignoring API key for unknown provider {provider_id!r}")
            return self._commit(settings, [])

    def reset(self) -> AppSettings:
        """Replace the whole record with defaults."""
        with self._lock:
            settings = self._commit(create_default_settings(), [])
        logger.info("Settings reset to defaults")
        return settings

    def import_settings(self, payload: Union[str, bytes]) -> AppSettings:
        """
        Apply an export payload to the current record.

        All non-provider fields are overwritten. For providers known to both
        sides, everything except the API key is overwritten; local API keys
        always survive.

        Raises:
            ImportParseError: The payload is not a valid settings export
        """
        try:
            export = SettingsExport.model_validate_json(payload)
        except ValidationError as e:
            raise ImportParseError(
                f"Failed to parse settings export: {_describe(e)}"
            ) from e

        imported = export.settings
        with self._lock:
            settings = self._current().model_copy(deep=True)
            for name in SETTINGS_PATCH_FIELDS:
                setattr(settings, name, getattr(imported, name))

            for provider_id, incoming in imported.providers.items():
                provider = settings.providers.get(provider_id)
                if provider is None:
                    continue
                provider.custom_endpoint = incoming.custom_endpoint
                provider.default_model = incoming.default_model
                provider.rate_limit_rpm = incoming.rate_limit_rpm
                provider.enabled = incoming.enabled

            settings = self._commit(settings, [])
        logger.info(f"Imported settings (export version {export.version})")
        return settings

    # ----- Internals -----

    def _release_db(self) -> None:
        if self._db is not None and self._owns_db:
            self._db.close()
            logger.debug(f"Closed settings file {self._db.db_path}")
        self._owns_db = False

    def _require_repo(self) -> SettingsRepository:
        if self._repo is None:
            raise StorageNotInitializedError()
        return self._repo

    def _current(self) -> AppSettings:
        """Return the cached record, loading it on first use. Lock must be held."""
        if self._settings is None:
            self._settings = self._load()
        return self._settings

    def _load(self) -> AppSettings:
        repo = self._require_repo()
        try:
            row = repo.get(SETTINGS_KEY)
        except sqlite3.Error as e:
            logger.error(f"Failed to read settings: {e}")
            raise PersistenceError(f"Failed to read settings: {e}") from e

        if row is None:
            logger.debug("No persisted settings, using defaults")
            settings = create_default_settings()
        else:
            try:
                settings = AppSettings.model_validate_json(row.value)
            except ValidationError as e:
                logger.error("Persisted settings are invalid")
                raise DeserializationError(
                    f"Failed to deserialize settings: {_describe(e)}"
                ) from e

            # Keep the provider table equal to the seeded set
            settings.providers = {
                provider_id: settings.providers.get(provider_id, seeded)
                for provider_id, seeded in default_providers().items()
            }

        self._vaulted = set()
        if self._vault_enabled():
            for provider_id, provider in settings.providers.items():
                if provider.api_key is None:
                    provider.api_key = self._credentials.get_credential(
                        provider_id, use_env=False
                    )
                    if provider.api_key is not None:
                        self._vaulted.add(provider_id)
        return settings

    def _commit(self, settings: AppSettings, skipped: list[str]) -> AppSettings:
        """Persist a record and make it current. Lock must be held."""
        self._save(settings)
        self._settings = settings
        self._last_skipped_fields = skipped
        return settings.model_copy(deep=True)

    def _save(self, settings: AppSettings) -> None:
        repo = self._require_repo()
        previous_keys: dict[str, Optional[str]] = {}
        vaulted = set(self._vaulted)
        try:
            data = settings.model_dump(mode="json")
            if self._vault_enabled():
                previous_keys, vaulted = self._move_keys_to_vault(settings, data)
            value = json.dumps(data)
        except (TypeError, ValueError) as e:
            self._restore_vault(previous_keys)
            raise SerializationError(f"Failed to serialize settings: {e}") from e

        try:
            repo.set(SETTINGS_KEY, value, SETTINGS_CATEGORY)
        except sqlite3.Error as e:
            logger.error(f"Failed to save settings: {e}")
            self._restore_vault(previous_keys)
            raise PersistenceError(f"Failed to save settings: {e}") from e
        self._vaulted = vaulted
        logger.debug("Settings persisted")

    def _vault_enabled(self) -> bool:
        return self._credentials is not None and self._credentials.is_available

    def _move_keys_to_vault(
        self, settings: AppSettings, data: dict
    ) -> tuple[dict[str, Optional[str]], set[str]]:
        """
        Strip API keys from the serialized record, writing changed ones to the keyring.

        Returns:
            The keyring value each written provider had before, and the
            providers whose key now lives in the keyring
        """
        current = self._settings
        previous_keys: dict[str, Optional[str]] = {}
        vaulted = set(self._vaulted)
        for provider_id, provider in settings.providers.items():
            stored = data["providers"][provider_id]
            old = current.providers.get(provider_id) if current is not None else None
            unchanged = old is not None and old.api_key == provider.api_key
            if unchanged and (provider.api_key is None or provider_id in vaulted):
                stored.pop("api_key", None)
                continue

            previous_keys[provider_id] = self._credentials.get_credential(
                provider_id, use_env=False
            )
            if provider.api_key is None:
                self._credentials.delete_credential(provider_id)
                stored.pop("api_key", None)
                vaulted.discard(provider_id)
            elif self._credentials.store_credential(provider_id, provider.api_key):
                stored.pop("api_key", None)
                vaulted.add(provider_id)
            else:
                vaulted.discard(provider_id)
                logger.warning(
                    f"Keeping {provider_id} API key in the settings file, keyring write failed"
                )
        return previous_keys, vaulted

    def _restore_vault(self, previous_keys: Mapping[str, Optional[str]]) -> None:
        """Put back keyring values overwritten by a save that did not commit."""
        for provider_id, api_key in previous_keys.items():
            if api_key is None:
                self._credentials.delete_credential(provider_id)
            elif not self._credentials.store_credential(provider_id, api_key):
                logger.error(f"Failed to restore {provider_id} API key in the keyring")


def _apply_fields(target: BaseModel, fields: Mapping[str, Any], recognized: frozenset) -> list[str]:
    """Assign recognized fields one by one, collecting names that failed validation."""
    skipped: list[str] = []
    for name, value in fields.items():
        if name not in recognized:
            logger.debug(f"Ignoring unknown settings field {name!r}")
            continue
        try:
            setattr(target, name, value)
        except ValidationError as e:
            # Never log the value itself, it may be a credential
            logger.warning(f"Skipping settings field {name!r}: {_describe(e)}")
            skipped.append(name)
    return skipped


def _describe(error: ValidationError) -> str:
    """Summarize a validation error without echoing input values."""
    parts = []
    for item in error.errors(include_input=False, include_url=False):
        location = ".".join(str(part) for part in item.get("loc", ())) or "value"
        parts.append(f"{location}: {item.get('msg', 'invalid')}")
    return "; ".join(parts) or "invalid value"
