"""
Main entry point for the Loki settings application.
"""

import logging
import sys

from PySide6.QtWidgets import QApplication

from core.config import apply_debug_mode, configure_logging
from core.exceptions import SettingsError
from core.infrastructure import KeyringService
from core.providers import SimulatedConnectionChecker
from core.store import SettingsStore
from ui.services.notification_service import NotificationService
from ui.viewmodels import SettingsCoordinator
from ui.widgets import SettingsDialogController

logger = logging.getLogger(__name__)


def build_coordinator(store: SettingsStore) -> SettingsCoordinator:
    """Wire the command facade to its collaborators."""
    return SettingsCoordinator(
        store,
        checker=SimulatedConnectionChecker(),
        notifier=NotificationService(),
        dialog=SettingsDialogController(),
    )


def main():
    """Main entry point for the application."""
    configure_logging()

    # Create application
    app = QApplication(sys.argv)
    app.setApplicationName("Loki")
    app.setOrganizationName("Loki")
    app.setQuitOnLastWindowClosed(True)

    store = SettingsStore(credentials=KeyringService())
    coordinator = build_coordinator(store)

    try:
        coordinator.init_settings()
        settings = coordinator.get_settings()
    except SettingsError as e:
        logger.error("Settings unavailable: %s", e)
        sys.exit(1)

    apply_debug_mode(settings.debug_mode)
    coordinator.settings_updated.connect(
        lambda updated: apply_debug_mode(updated.debug_mode)
    )

    coordinator.open_settings_dialog()

    # Run event loop
    exit_code = app.exec()
    store.close()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
