"""Error taxonomy for the settings subsystem."""

from __future__ import annotations

from typing import Optional


class SettingsError(Exception):
    """Base class for all settings failures surfaced to the command layer."""


class StorageInitError(SettingsError):
    """The persistence backend could not be opened or created."""


class StorageNotInitializedError(SettingsError):
    """An operation was invoked before the store was bound to a backend."""

    def __init__(self, message: str = "Store not initialized"):
        super().__init__(message)


class PersistenceError(SettingsError):
    """The backend rejected a read or write after initialization."""


class DeserializationError(SettingsError):
    """The persisted settings value is structurally invalid."""


class SerializationError(SettingsError):
    """A settings record could not be encoded."""


class ImportParseError(SettingsError):
    """An export payload handed to import could not be parsed."""


class ConnectionTestError(SettingsError):
    """Base class for provider connection check failures."""

    def __init__(self, message: str, provider_id: Optional[str] = None):
        super().__init__(message)
        self.provider_id = provider_id


class MissingCredentialError(ConnectionTestError):
    """The candidate configuration lacks the field the provider requires."""


class UnknownProviderError(ConnectionTestError):
    """No connection check exists for the provider identifier."""

    def __init__(self, provider_id: str):
        super().__init__(f"Unknown provider: {provider_id}", provider_id)
