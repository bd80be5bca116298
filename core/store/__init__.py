"""Store package for Loki settings."""

from core.store.settings_store import SettingsStore

__all__ = ["SettingsStore"]
