# Loki - Core Package
"""
Core package for the Loki desktop settings subsystem.
This package contains the settings model, persistence, provider catalog
and connection checks, and can be used independently of the UI layer.
"""

from core.exceptions import SettingsError
from core.models import ThemeMode
from core.types import (
    AppSettings,
    ProviderSettings,
    SettingsExport,
    create_default_settings,
)

__all__ = [
    "SettingsError",
    "ThemeMode",
    "AppSettings",
    "ProviderSettings",
    "SettingsExport",
    "create_default_settings",
]
