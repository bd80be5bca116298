"""Tests for the settings dialog controller."""

from PySide6.QtWidgets import QWidget

from ui.widgets.settings_dialog import SettingsDialog, SettingsDialogController


def test_open_creates_single_window(qtbot):
    controller = SettingsDialogController(QWidget)

    window = controller.open()

    assert controller.is_open()
    assert window.windowTitle() == "Settings"
    assert window.minimumWidth() == 600
    assert window.minimumHeight() == 400
    assert controller.open() is window

    controller.close()


def test_close_then_reopen_creates_new_window(qtbot):
    controller = SettingsDialogController(QWidget)
    first = controller.open()

    controller.close()
    assert not controller.is_open()
    assert controller.window is None

    second = controller.open()
    assert second is not first
    controller.close()


def test_close_without_window_is_noop(qtbot):
    controller = SettingsDialogController()
    controller.close()
    assert not controller.is_open()


def test_default_factory_builds_settings_dialog(qtbot):
    controller = SettingsDialogController()
    window = controller.open()

    assert isinstance(window, SettingsDialog)
    controller.close()
