"""SettingsCoordinator - Command facade over the settings store.

Every command forwards to the SettingsStore or the connection checker,
broadcasts change signals on success, and pushes a best-effort desktop
notification. Store errors are reported and then re-raised unchanged.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Protocol, Union

from pydantic import ValidationError
from PySide6.QtCore import QObject, Signal

from core.exceptions import (
    ConnectionTestError,
    SerializationError,
    SettingsError,
    UnknownProviderError,
)
from core.persistence import Database
from core.providers import (
    ConnectionChecker,
    ProviderMetadata,
    SimulatedConnectionChecker,
    get_provider_metadata,
)
from core.store import SettingsStore
from core.types import AppSettings, ProviderSettings, validate_settings
from ui.widgets.settings_dialog import SettingsDialogController

logger = logging.getLogger(__name__)

SUCCESS_TITLE = "Settings"
ERROR_TITLE = "Settings Error"


class Notifier(Protocol):
    def notify(self, title: str, message: str, error: bool = False) -> Any: ...


class SettingsCoordinator(QObject):
    """
    Facade exposing settings commands to the GUI host.

    Signals:
        settings_updated: The record after any successful mutation
        provider_test_started: Provider id
        provider_test_completed: Provider id, whether the check passed
        provider_test_failed: Provider id, error message
        error_occurred: Error message of a failed command
    """

    settings_updated = Signal(object)
    provider_test_started = Signal(str)
    provider_test_completed = Signal(str, bool)
    provider_test_failed = Signal(str, str)
    error_occurred = Signal(str)

    def __init__(
        self,
        store: SettingsStore,
        checker: Optional[ConnectionChecker] = None,
        notifier: Optional[Notifier] = None,
        dialog: Optional[SettingsDialogController] = None,
        storage: Union[Database, Path, str, None] = None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self._store = store
        self._checker = checker or SimulatedConnectionChecker()
        self._notifier = notifier
        self._dialog = dialog or SettingsDialogController()
        self._storage = storage

    # ----- Settings commands -----

    def init_settings(self) -> None:
        """Bind the store to its persistence file."""
        try:
            self._store.initialize(self._storage)
        except SettingsError as exc:
            self._report_error("Failed to initialize settings", exc)
            raise

    def get_settings(self) -> AppSettings:
        try:
            return self._store.get()
        except SettingsError as exc:
            self._report_error("Failed to load settings", exc)
            raise

    def update_settings(self, fields: Mapping[str, Any]) -> AppSettings:
        try:
            settings = self._store.patch(fields)
        except SettingsError as exc:
            self._report_error("Failed to update settings", exc)
            raise
        self.settings_updated.emit(settings)
        return settings

    def update_provider_settings(
        self, provider_id: str, fields: Mapping[str, Any]
    ) -> AppSettings:
        try:
            settings = self._store.patch_provider(provider_id, fields)
        except SettingsError as exc:
            self._report_error("Failed to update provider settings", exc)
            raise
        self.settings_updated.emit(settings)
        return settings

    def reset_settings(self) -> AppSettings:
        try:
            settings = self._store.reset()
        except SettingsError as exc:
            self._report_error("Failed to reset settings", exc)
            raise
        self.settings_updated.emit(settings)
        self._notify(SUCCESS_TITLE, "Settings have been reset to default")
        return settings

    def export_settings(self) -> str:
        """Export settings as pretty-printed JSON without API keys."""
        try:
            export = self._store.export_settings()
            try:
                text = export.model_dump_json(indent=2)
            except ValueError as exc:
                raise SerializationError(
                    f"Failed to serialize settings export: {exc}"
                ) from exc
        except SettingsError as exc:
            self._report_error("Failed to export settings", exc)
            raise
        self._notify(SUCCESS_TITLE, "Settings exported successfully")
        return text

    def import_settings(self, export_data: Union[str, bytes]) -> AppSettings:
        try:
            settings = self._store.import_settings(export_data)
        except SettingsError as exc:
            self._report_error("Failed to import settings", exc)
            raise
        self.settings_updated.emit(settings)
        self._notify(SUCCESS_TITLE, "Settings imported successfully")
        return settings

    def get_api_key(self, provider_id: str) -> Optional[str]:
        try:
            return self._store.get_api_key(provider_id)
        except SettingsError as exc:
            self._report_error("Failed to read API key", exc)
            raise

    def set_api_key(self, provider_id: str, api_key: Optional[str]) -> AppSettings:
        try:
            settings = self._store.set_api_key(provider_id, api_key)
        except SettingsError as exc:
            self._report_error("Failed to update API key", exc)
            raise
        self.settings_updated.emit(settings)
        self._notify(SUCCESS_TITLE, f"API key updated for {provider_id}")
        return settings

    def validate_settings(self) -> list[str]:
        """List range problems in the current settings."""
        return validate_settings(self.get_settings())

    # ----- Providers -----

    def get_provider_metadata(self) -> dict[str, ProviderMetadata]:
        return get_provider_metadata()

    async def test_provider_connection(
        self,
        provider_id: str,
        config: Union[ProviderSettings, Mapping[str, Any]],
    ) -> bool:
        """
        Check a candidate provider configuration.

        The store lock is never held while the check is pending.

        Raises:
            MissingCredentialError: The required field is empty
            UnknownProviderError: No check exists for provider_id
        """
        self.provider_test_started.emit(provider_id)
        try:
            if not self._checker.supports(provider_id):
                raise UnknownProviderError(provider_id)
            candidate = _as_provider_settings(provider_id, config)
            passed = await self._checker.check(provider_id, candidate)
        except ConnectionTestError as exc:
            logger.error(f"{provider_id} connection test error: {exc}")
            self.provider_test_failed.emit(provider_id, str(exc))
            self._notify(ERROR_TITLE, f"{provider_id} connection test error: {exc}", error=True)
            raise

        self.provider_test_completed.emit(provider_id, passed)
        if passed:
            self._notify(SUCCESS_TITLE, f"{provider_id} connection test successful")
        else:
            self._notify(ERROR_TITLE, f"{provider_id} connection test failed", error=True)
        return passed

    async def provider_status(self) -> dict[str, bool]:
        """Run the connection check for every configured provider."""
        status: dict[str, bool] = {}
        for provider_id, provider in self.get_settings().providers.items():
            try:
                status[provider_id] = await self._checker.check(provider_id, provider)
            except ConnectionTestError as exc:
                logger.debug(f"{provider_id} status check failed: {exc}")
                status[provider_id] = False
        return status

    # ----- Dialog -----

    def open_settings_dialog(self) -> None:
        self._dialog.open()

    def close_settings_dialog(self) -> None:
        self._dialog.close()

    def is_settings_dialog_open(self) -> bool:
        return self._dialog.is_open()

    # ----- Internals -----

    def _report_error(self, context: str, exc: SettingsError) -> None:
        message = f"{context}: {exc}"
        logger.error(message)
        self.error_occurred.emit(message)
        self._notify(ERROR_TITLE, message, error=True)

    def _notify(self, title: str, message: str, error: bool = False) -> None:
        """Deliver a notification; failures are logged and dropped."""
        if self._notifier is None:
            return
        try:
            self._notifier.notify(title, message, error=error)
        except Exception as exc:
            logger.debug(f"Notification failed: {exc}")


def _as_provider_settings(
    provider_id: str, config: Union[ProviderSettings, Mapping[str, Any]]
) -> ProviderSettings:
    if isinstance(config, ProviderSettings):
        return config
    try:
        return ProviderSettings.model_validate(dict(config))
    except ValidationError as exc:
        raise ConnectionTestError(
            f"Invalid configuration for {provider_id}", provider_id
        ) from exc
