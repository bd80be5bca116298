"""Settings subsystem - command facade for the settings store."""

from .coordinator import SettingsCoordinator

__all__ = [
    "SettingsCoordinator",
]
