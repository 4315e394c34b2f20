"""
Tests for the wallpaper mode controller with an in-memory backend.
"""
import pytest
from PySide6.QtCore import QObject

from wobblewall.app.wallpaper import (
    ProgmanNotFoundError,
    WallpaperModeController,
)


class FakeBackend:
    def __init__(self, fail_with=None):
        self.active = False
        self.fail_with = fail_with
        self.calls = []

    def is_active(self):
        return self.active

    def enable(self, window):
        self.calls.append("enable")
        if self.fail_with is not None:
            raise self.fail_with
        self.active = True

    def disable(self, window):
        self.calls.append("disable")
        self.active = False


@pytest.fixture
def window():
    return QObject()


class TestWallpaperModeController:

    def test_enable_and_disable_emit_changes(self, window):
        backend = FakeBackend()
        controller = WallpaperModeController(window, backend)
        changes = []
        controller.mode_changed.connect(changes.append)

        assert controller.set_wallpaper_mode(True) is True
        assert controller.is_wallpaper_mode()
        assert controller.set_wallpaper_mode(False) is True
        assert changes == [True, False]

    def test_setting_current_mode_is_a_no_op(self, window):
        backend = FakeBackend()
        controller = WallpaperModeController(window, backend)
        assert controller.set_wallpaper_mode(False) is True
        assert backend.calls == []

    def test_toggle(self, window):
        controller = WallpaperModeController(window, FakeBackend())
        controller.toggle_wallpaper_mode()
        assert controller.is_wallpaper_mode()
        controller.toggle_wallpaper_mode()
        assert not controller.is_wallpaper_mode()

    def test_backend_failure_keeps_mode(self, window, caplog):
        backend = FakeBackend(fail_with=ProgmanNotFoundError("no Progman window"))
        controller = WallpaperModeController(window, backend)
        changes = []
        controller.mode_changed.connect(changes.append)

        assert controller.set_wallpaper_mode(True) is False
        assert not controller.is_wallpaper_mode()
        assert changes == []
        assert "no Progman window" in caplog.text
