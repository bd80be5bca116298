"""
Type definitions for Loki settings.
All types are Pydantic models mirroring the persisted JSON shape.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator

from core.constants import (
    ANTHROPIC,
    AUTO_SAVE_INTERVAL_RANGE,
    DEFAULT_OLLAMA_ENDPOINT,
    GOOGLE,
    MAX_TOKENS_RANGE,
    OLLAMA,
    OPENAI,
    SIDEBAR_WIDTH_RANGE,
    TEMPERATURE_RANGE,
)
from core.models import ThemeMode


# Fields a general settings patch may touch
SETTINGS_PATCH_FIELDS = frozenset({
    "theme",
    "sidebar_width",
    "auto_save_interval",
    "default_temperature",
    "default_max_tokens",
    "enable_analytics",
    "debug_mode",
    "compact_mode",
})

# Fields a provider patch may touch
PROVIDER_PATCH_FIELDS = frozenset({
    "enabled",
    "api_key",
    "custom_endpoint",
    "default_model",
    "rate_limit_rpm",
})


def _reject_bool(value: Any) -> Any:
    # bool is an int subclass, a JSON true must not become 1
    if isinstance(value, bool):
        raise ValueError("expected a number, got a boolean")
    return value


# ----- Provider Settings -----

class ProviderSettings(BaseModel):
    """Configuration for a single LLM provider."""

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    api_key: Optional[str] = None
    custom_endpoint: Optional[str] = None
    default_model: Optional[str] = None
    rate_limit_rpm: Optional[NonNegativeInt] = None  # 0 = unlimited
    enabled: bool = False

    @field_validator("api_key", "custom_endpoint", "default_model", mode="before")
    @classmethod
    def _empty_string_is_absent(cls, value: Any) -> Any:
        if value == "":
            return None
        return value

    @field_validator("rate_limit_rpm", mode="before")
    @classmethod
    def _rate_limit_is_not_bool(cls, value: Any) -> Any:
        return _reject_bool(value)


class ProviderSettingsExport(BaseModel):
    """Export-safe provider settings. Has no credential field at all."""

    model_config = ConfigDict(extra="ignore")

    custom_endpoint: Optional[str] = None
    default_model: Optional[str] = None
    rate_limit_rpm: Optional[NonNegativeInt] = None
    enabled: bool


# ----- App Settings -----

class AppSettings(BaseModel):
    """The full persisted settings record."""

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    # LLM provider settings
    providers: dict[str, ProviderSettings] = Field(default_factory=lambda: default_providers())

    # UI/UX settings
    theme: ThemeMode = ThemeMode.SYSTEM
    sidebar_width: NonNegativeInt = 320
    auto_save_interval: NonNegativeInt = 30  # seconds

    # Default model parameters
    default_temperature: float = Field(default=0.7, allow_inf_nan=False)
    default_max_tokens: NonNegativeInt = 150

    # Advanced settings
    enable_analytics: bool = False
    debug_mode: bool = False
    compact_mode: bool = False

    @field_validator(
        "sidebar_width",
        "auto_save_interval",
        "default_temperature",
        "default_max_tokens",
        mode="before",
    )
    @classmethod
    def _numbers_are_not_bool(cls, value: Any) -> Any:
        return _reject_bool(value)

    def to_export(self) -> "AppSettingsExport":
        """Copy of this record with every provider credential removed."""
        providers = {
            provider_id: ProviderSettingsExport.model_validate(
                provider.model_dump(exclude={"api_key"})
            )
            for provider_id, provider in self.providers.items()
        }
        return AppSettingsExport(
            providers=providers,
            **self.model_dump(exclude={"providers"}),
        )


class AppSettingsExport(BaseModel):
    """Export-safe settings payload."""

    model_config = ConfigDict(extra="ignore")

    providers: dict[str, ProviderSettingsExport]
    theme: ThemeMode
    sidebar_width: NonNegativeInt
    auto_save_interval: NonNegativeInt
    default_temperature: float = Field(allow_inf_nan=False)
    default_max_tokens: NonNegativeInt
    enable_analytics: bool
    debug_mode: bool
    compact_mode: bool


class SettingsExport(BaseModel):
    """Versioned export/import envelope (excluding API keys for security)."""

    version: str
    timestamp: str
    settings: AppSettingsExport


# ----- Defaults -----

def default_providers() -> dict[str, ProviderSettings]:
    """Build the seeded provider table."""
    return {
        OPENAI: ProviderSettings(
            default_model="gpt-4o",
            rate_limit_rpm=60,
            enabled=True,
        ),
        ANTHROPIC: ProviderSettings(
            default_model="claude-sonnet-4-20250514",
            rate_limit_rpm=60,
            enabled=False,
        ),
        GOOGLE: ProviderSettings(
            default_model="gemini-2.5-pro",
            rate_limit_rpm=60,
            enabled=False,
        ),
        OLLAMA: ProviderSettings(
            custom_endpoint=DEFAULT_OLLAMA_ENDPOINT,
            default_model="llama2",
            rate_limit_rpm=0,  # No rate limit for local models
            enabled=False,
        ),
    }


def create_default_settings() -> AppSettings:
    """Build a fresh default settings record."""
    return AppSettings(providers=default_providers())


# ----- Validation -----

def validate_settings(settings: AppSettings) -> list[str]:
    """
    Check a settings record against the recommended ranges.

    Args:
        settings: Record to inspect

    Returns:
        Human-readable problems, empty when the record is within bounds
    """
    errors: list[str] = []

    low, high = AUTO_SAVE_INTERVAL_RANGE
    if not low <= settings.auto_save_interval <= high:
        errors.append(f"Auto-save interval must be between {low}-{high} seconds")

    low, high = TEMPERATURE_RANGE
    if not low <= settings.default_temperature <= high:
        errors.append(f"Temperature must be between {low:g}-{high:g}")

    low, high = MAX_TOKENS_RANGE
    if not low <= settings.default_max_tokens <= high:
        errors.append(f"Max tokens must be between {low}-{high}")

    low, high = SIDEBAR_WIDTH_RANGE
    if not low <= settings.sidebar_width <= high:
        errors.append(f"Sidebar width must be between {low}-{high} pixels")

    return errors
