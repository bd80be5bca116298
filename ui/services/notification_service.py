"""Desktop notifications through the system tray."""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QObject
from PySide6.QtGui import QGuiApplication, QIcon
from PySide6.QtWidgets import QSystemTrayIcon

logger = logging.getLogger(__name__)


class NotificationService(QObject):
    """Shows titled balloon messages when the platform has a system tray."""

    MESSAGE_TIMEOUT_MS = 5000

    def __init__(self, icon: Optional[QIcon] = None, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._icon = icon
        self._tray: Optional[QSystemTrayIcon] = None

    @property
    def is_available(self) -> bool:
        """Check if notifications can be delivered."""
        if QGuiApplication.instance() is None:
            return False
        return QSystemTrayIcon.isSystemTrayAvailable() and QSystemTrayIcon.supportsMessages()

    def _get_tray(self) -> QSystemTrayIcon:
        if self._tray is None:
            self._tray = QSystemTrayIcon(self._icon or QIcon(), self)
            self._tray.show()
        return self._tray

    def notify(self, title: str, message: str, error: bool = False) -> bool:
        """
        Show a notification.

        Returns:
            True if the message was handed to the tray, False if dropped
        """
        if not self.is_available:
            logger.debug(f"Notification dropped, no system tray: {title}: {message}")
            return False

        icon = (
            QSystemTrayIcon.MessageIcon.Critical
            if error
            else QSystemTrayIcon.MessageIcon.Information
        )
        self._get_tray().showMessage(title, message, icon, self.MESSAGE_TIMEOUT_MS)
        return True
