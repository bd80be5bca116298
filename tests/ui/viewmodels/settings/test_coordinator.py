"""Unit tests for SettingsCoordinator commands and signals."""

import json

import pytest
from PySide6.QtWidgets import QWidget

from core.exceptions import (
    ImportParseError,
    MissingCredentialError,
    StorageNotInitializedError,
    UnknownProviderError,
)
from core.persistence import Database
from core.providers import SimulatedConnectionChecker
from core.store import SettingsStore
from core.types import create_default_settings
from ui.viewmodels.settings import SettingsCoordinator
from ui.widgets.settings_dialog import SettingsDialogController


class RecordingNotifier:
    """Collects notifications instead of showing them."""

    def __init__(self):
        self.messages = []

    def notify(self, title, message, error=False):
        self.messages.append((title, message, error))


class BrokenNotifier:
    def notify(self, title, message, error=False):
        raise RuntimeError("tray gone")


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def coordinator(tmp_path, notifier, qapp):
    """Create an initialized SettingsCoordinator."""
    coordinator = SettingsCoordinator(
        SettingsStore(),
        checker=SimulatedConnectionChecker(cloud_latency=0, local_latency=0),
        notifier=notifier,
        dialog=SettingsDialogController(QWidget),
        storage=Database(tmp_path / "settings.db"),
    )
    coordinator.init_settings()
    return coordinator


def test_get_settings_defaults(coordinator):
    assert coordinator.get_settings() == create_default_settings()


def test_update_settings_emits_signal(coordinator, qtbot):
    with qtbot.waitSignal(coordinator.settings_updated) as blocker:
        result = coordinator.update_settings({"sidebar_width": 480})

    assert result.sidebar_width == 480
    assert blocker.args[0] == result
    assert coordinator.get_settings().sidebar_width == 480


def test_update_provider_settings_emits_signal(coordinator, qtbot):
    with qtbot.waitSignal(coordinator.settings_updated) as blocker:
        coordinator.update_provider_settings("google", {"enabled": True})

    assert blocker.args[0].providers["google"].enabled is True


def test_reset_settings_notifies(coordinator, notifier, qtbot):
    coordinator.update_settings({"compact_mode": True})

    with qtbot.waitSignal(coordinator.settings_updated):
        result = coordinator.reset_settings()

    assert result == create_default_settings()
    assert notifier.messages[-1] == ("Settings", "Settings have been reset to default", False)


def test_export_settings_is_pretty_json_without_keys(coordinator, notifier):
    coordinator.set_api_key("openai", "sk-very-secret")

    text = coordinator.export_settings()
    data = json.loads(text)

    assert "\n  " in text
    assert data["version"] == "1.0.0"
    assert "sk-very-secret" not in text
    assert "api_key" not in data["settings"]["providers"]["openai"]
    assert notifier.messages[-1] == ("Settings", "Settings exported successfully", False)


def test_import_settings_roundtrip(coordinator, notifier, qtbot):
    coordinator.update_settings({"theme": "dark"})
    coordinator.set_api_key("anthropic", "sk-ant-local")
    exported = coordinator.export_settings()
    coordinator.reset_settings()
    coordinator.set_api_key("anthropic", "sk-ant-local")

    with qtbot.waitSignal(coordinator.settings_updated):
        result = coordinator.import_settings(exported)

    assert result.theme.value == "dark"
    assert result.providers["anthropic"].api_key == "sk-ant-local"
    assert notifier.messages[-1] == ("Settings", "Settings imported successfully", False)


def test_import_settings_error_is_reported_and_raised(coordinator, notifier, qtbot):
    with qtbot.waitSignal(coordinator.error_occurred) as blocker:
        with pytest.raises(ImportParseError):
            coordinator.import_settings("{broken")

    assert blocker.args[0].startswith("Failed to import settings:")
    title, message, error = notifier.messages[-1]
    assert title == "Settings Error"
    assert error is True


def test_api_key_commands(coordinator, notifier):
    assert coordinator.get_api_key("google") is None

    result = coordinator.set_api_key("google", "google-key-123")

    assert result.providers["google"].api_key == "google-key-123"
    assert coordinator.get_api_key("google") == "google-key-123"
    assert notifier.messages[-1] == ("Settings", "API key updated for google", False)


def test_validate_settings(coordinator):
    assert coordinator.validate_settings() == []

    coordinator.update_settings({"sidebar_width": 100})

    assert coordinator.validate_settings() == ["Sidebar width must be between 200-600 pixels"]


def test_get_provider_metadata(coordinator):
    metadata = coordinator.get_provider_metadata()
    assert set(metadata) == {"openai", "anthropic", "google", "ollama"}


def test_uninitialized_store_reports_error(tmp_path, notifier, qapp):
    coordinator = SettingsCoordinator(SettingsStore(), notifier=notifier)
    errors = []
    coordinator.error_occurred.connect(errors.append)

    with pytest.raises(StorageNotInitializedError):
        coordinator.get_settings()

    assert errors == ["Failed to load settings: Store not initialized"]
    assert notifier.messages[-1][0] == "Settings Error"


def test_notification_failures_are_swallowed(tmp_path, qapp):
    coordinator = SettingsCoordinator(
        SettingsStore(),
        notifier=BrokenNotifier(),
        storage=tmp_path,
    )
    coordinator.init_settings()

    assert coordinator.reset_settings() == create_default_settings()


def test_dialog_commands(coordinator):
    assert not coordinator.is_settings_dialog_open()

    coordinator.open_settings_dialog()
    assert coordinator.is_settings_dialog_open()

    coordinator.close_settings_dialog()
    assert not coordinator.is_settings_dialog_open()


class TestProviderConnection:
    @pytest.fixture
    def events(self, coordinator):
        recorded = {"started": [], "completed": [], "failed": []}
        coordinator.provider_test_started.connect(recorded["started"].append)
        coordinator.provider_test_completed.connect(
            lambda provider, ok: recorded["completed"].append((provider, ok))
        )
        coordinator.provider_test_failed.connect(
            lambda provider, error: recorded["failed"].append((provider, error))
        )
        return recorded

    @pytest.mark.asyncio
    async def test_successful_check(self, coordinator, notifier, events):
        assert await coordinator.test_provider_connection("openai", {"api_key": "sk-abc"})

        assert events["started"] == ["openai"]
        assert events["completed"] == [("openai", True)]
        assert notifier.messages[-1] == ("Settings", "openai connection test successful", False)

    @pytest.mark.asyncio
    async def test_failed_check(self, coordinator, notifier, events):
        assert not await coordinator.test_provider_connection("openai", {"api_key": "abc"})

        assert events["completed"] == [("openai", False)]
        assert notifier.messages[-1] == ("Settings Error", "openai connection test failed", True)

    @pytest.mark.asyncio
    async def test_missing_credential(self, coordinator, notifier, events):
        with pytest.raises(MissingCredentialError):
            await coordinator.test_provider_connection("openai", {"api_key": None})

        assert events["failed"] == [("openai", "API key is required for OpenAI")]
        assert events["completed"] == []
        assert notifier.messages[-1] == (
            "Settings Error",
            "openai connection test error: API key is required for OpenAI",
            True,
        )

    @pytest.mark.asyncio
    async def test_unknown_provider(self, coordinator, events):
        with pytest.raises(UnknownProviderError):
            await coordinator.test_provider_connection("unknown", {})

        assert events["started"] == ["unknown"]
        assert events["failed"] == [("unknown", "Unknown provider: unknown")]

    @pytest.mark.asyncio
    async def test_unknown_provider_wins_over_invalid_config(self, coordinator, events):
        with pytest.raises(UnknownProviderError):
            await coordinator.test_provider_connection("unknown", {"rate_limit_rpm": -1})

        assert events["failed"] == [("unknown", "Unknown provider: unknown")]
        assert events["completed"] == []

    @pytest.mark.asyncio
    async def test_accepts_provider_settings(self, coordinator):
        candidate = coordinator.get_settings().providers["ollama"]
        assert await coordinator.test_provider_connection("ollama", candidate)

    @pytest.mark.asyncio
    async def test_provider_status(self, coordinator):
        coordinator.set_api_key("openai", "sk-abc")
        coordinator.set_api_key("google", "short")

        status = await coordinator.provider_status()

        assert status == {
            "openai": True,
            "anthropic": False,
            "google": False,
            "ollama": True,
        }
