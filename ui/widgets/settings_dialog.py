"""
Settings dialog window management.
Opens a single settings window, focusing it when it is already open.
"""

from typing import Callable, Optional

from PySide6.QtWidgets import QDialog, QLabel, QVBoxLayout, QWidget


DIALOG_TITLE = "Settings"
DIALOG_SIZE = (800, 600)
DIALOG_MIN_SIZE = (600, 400)


class SettingsDialog(QDialog):
    """Top-level settings window. Page contents are provided by the host."""

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 20, 20, 20)
        layout.addWidget(QLabel(DIALOG_TITLE))
        layout.addStretch()


class SettingsDialogController:
    """Owns at most one settings window at a time."""

    def __init__(self, factory: Optional[Callable[[], QWidget]] = None):
        self._factory = factory or SettingsDialog
        self._window: Optional[QWidget] = None

    @property
    def window(self) -> Optional[QWidget]:
        return self._window

    def is_open(self) -> bool:
        return self._window is not None and self._window.isVisible()

    def open(self) -> QWidget:
        """Show the settings window, or focus it if already open."""
        if self.is_open():
            self._focus(self._window)
            return self._window

        if self._window is not None:
            self._window.deleteLater()

        window = self._factory()
        window.setWindowTitle(DIALOG_TITLE)
        window.resize(*DIALOG_SIZE)
        window.setMinimumSize(*DIALOG_MIN_SIZE)
        window.show()
        self._focus(window)
        self._window = window
        return window

    def close(self) -> None:
        """Close the settings window if one is open."""
        if self._window is None:
            return
        self._window.close()
        self._window.deleteLater()
        self._window = None

    @staticmethod
    def _focus(window: QWidget) -> None:
        window.raise_()
        window.activateWindow()
