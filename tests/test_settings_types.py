"""Tests for settings models, defaults and range validation."""

import pytest
from pydantic import ValidationError

from core.models import ThemeMode
from core.types import (
    AppSettings,
    ProviderSettings,
    create_default_settings,
    validate_settings,
)


def test_default_settings_values() -> None:
    settings = create_default_settings()

    assert settings.theme == ThemeMode.SYSTEM
    assert settings.sidebar_width == 320
    assert settings.auto_save_interval == 30
    assert settings.default_temperature == pytest.approx(0.7)
    assert settings.default_max_tokens == 150
    assert settings.enable_analytics is False
    assert settings.debug_mode is False
    assert settings.compact_mode is False


@pytest.mark.parametrize(
    ("provider_id", "enabled", "model", "rate_limit", "endpoint"),
    [
        ("openai", True, "gpt-4o", 60, None),
        ("anthropic", False, "claude-sonnet-4-20250514", 60, None),
        ("google", False, "gemini-2.5-pro", 60, None),
        ("ollama", False, "llama2", 0, "http://localhost:11434"),
    ],
)
def test_default_provider_table(provider_id, enabled, model, rate_limit, endpoint) -> None:
    provider = create_default_settings().providers[provider_id]

    assert provider.enabled is enabled
    assert provider.default_model == model
    assert provider.rate_limit_rpm == rate_limit
    assert provider.custom_endpoint == endpoint
    assert provider.api_key is None


def test_default_settings_are_independent() -> None:
    first = create_default_settings()
    second = create_default_settings()

    first.providers["openai"].enabled = False
    assert second.providers["openai"].enabled is True
    assert AppSettings() == create_default_settings()


def test_provider_empty_strings_become_absent() -> None:
    provider = ProviderSettings(api_key="", custom_endpoint="", default_model="")
    assert provider.api_key is None
    assert provider.custom_endpoint is None
    assert provider.default_model is None


def test_assignment_is_validated() -> None:
    settings = create_default_settings()

    with pytest.raises(ValidationError):
        settings.sidebar_width = -1
    with pytest.raises(ValidationError):
        settings.theme = "purple"
    with pytest.raises(ValidationError):
        settings.default_temperature = float("nan")

    assert settings.sidebar_width == 320
    assert settings.theme == ThemeMode.SYSTEM


def test_to_export_drops_api_keys() -> None:
    settings = create_default_settings()
    settings.providers["openai"].api_key = "sk-secret"

    export = settings.to_export()
    dumped = export.model_dump()

    for provider in dumped["providers"].values():
        assert "api_key" not in provider
    assert dumped["providers"]["openai"]["default_model"] == "gpt-4o"
    assert dumped["sidebar_width"] == 320


def test_validate_settings_defaults_are_clean() -> None:
    assert validate_settings(create_default_settings()) == []


def test_validate_settings_reports_out_of_range_fields() -> None:
    settings = create_default_settings()
    settings.auto_save_interval = 1
    settings.default_temperature = 2.5
    settings.default_max_tokens = 0
    settings.sidebar_width = 900

    errors = validate_settings(settings)

    assert errors == [
        "Auto-save interval must be between 5-300 seconds",
        "Temperature must be between 0-2",
        "Max tokens must be between 1-4000",
        "Sidebar width must be between 200-600 pixels",
    ]
