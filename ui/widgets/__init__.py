"""UI Widgets package."""

from ui.widgets.settings_dialog import SettingsDialog, SettingsDialogController

__all__ = ["SettingsDialog", "SettingsDialogController"]
