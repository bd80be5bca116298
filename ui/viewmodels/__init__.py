"""ViewModels package for Loki UI."""

from ui.viewmodels.settings.coordinator import SettingsCoordinator

__all__ = [
    "SettingsCoordinator",
]
