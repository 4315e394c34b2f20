"""
Main Application Window
=======================
Full-window animation canvas with the control panels overlaid at the bottom.

Why is this file needed?
------------------------
1. Layout: it stacks the Left / Global / Right panels over the canvas and
   hides them while wallpaper mode is active.
2. Routing: it connects the store to persistence (debounced save), the
   wallpaper controller to the panels, the Escape key and the tray menu.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QTimer, Qt, Slot
from PySide6.QtGui import QAction, QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QApplication, QHBoxLayout, QMainWindow, QMenu, QStyle, QSystemTrayIcon, QWidget
)

from wobblewall.app.persistence import SettingsRepository
from wobblewall.app.state import Store
from wobblewall.app.ui.canvas import WobbleCanvas
from wobblewall.app.ui.panels.global_panel import GlobalPanel
from wobblewall.app.ui.panels.group import GroupPanel
from wobblewall.app.wallpaper import WallpaperBackend, WallpaperModeController
from wobblewall.config import VISIBLE_APP_NAME

logger = logging.getLogger(__name__)

SAVE_DEBOUNCE_MS = 250

CONTROLS_STYLE = """
    QWidget#controls { background: rgba(20, 20, 20, 200); border-radius: 8px; }
    QWidget#controls QLabel, QWidget#controls QGroupBox { color: #e0e0e0; }
    QWidget#controls QPushButton:checked { background: #4a90d9; color: white; }
"""


class ControlsOverlay(QWidget):
    """Left, Global and Right panels side by side."""
    def __init__(self, store: Store, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("controls")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground)
        self.setStyleSheet(CONTROLS_STYLE)

        self.left_panel = GroupPanel(store, "left", self.tr("Left"), self)
        self.global_panel = GlobalPanel(store, self)
        self.right_panel = GroupPanel(store, "right", self.tr("Right"), self)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(12)
        layout.addWidget(self.left_panel)
        layout.addWidget(self.global_panel)
        layout.addWidget(self.right_panel)

        self.right_panel.setVisible(store.settings.split_view)
        store.settings_changed.connect(lambda s: self.right_panel.setVisible(s.split_view))


class MainWindow(QMainWindow):
    def __init__(
        self,
        store: Store,
        repository: Optional[SettingsRepository] = None,
        wallpaper_backend: Optional[WallpaperBackend] = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1400, 900)

        self.store = store
        self.repository = repository

        # ---- Central: canvas with overlaid controls ----
        self.canvas = WobbleCanvas(store, self)
        self.setCentralWidget(self.canvas)
        self.controls = ControlsOverlay(store, self.canvas)

        # ---- Wallpaper mode ----
        self.wallpaper = WallpaperModeController(self, wallpaper_backend)
        self.wallpaper.mode_changed.connect(self._on_wallpaper_mode_changed)
        self.controls.global_panel.wallpaper_requested.connect(self.wallpaper.toggle_wallpaper_mode)

        self._esc = QShortcut(QKeySequence(Qt.Key.Key_Escape), self)
        self._esc.activated.connect(self._on_escape)

        # ---- Persistence (debounced) ----
        self._save_timer = QTimer(self)
        self._save_timer.setSingleShot(True)
        self._save_timer.setInterval(SAVE_DEBOUNCE_MS)
        self._save_timer.timeout.connect(self._save_settings)
        self.store.settings_changed.connect(lambda *_: self._save_timer.start())
        self.store.settings_changed.connect(lambda *_: self._place_controls())

        self._create_tray()

    # ------------------------------------------------------------------------------
    # Tray
    # ------------------------------------------------------------------------------

    def _create_tray(self) -> None:
        self.tray: Optional[QSystemTrayIcon] = None
        if not QSystemTrayIcon.isSystemTrayAvailable():
            logger.info("System tray not available; tray menu disabled.")
            return

        self.act_show = QAction(self.tr("Show Controls"), self)
        self.act_show.triggered.connect(self.on_show_controls)
        self.act_hide = QAction(self.tr("Hide Controls"), self)
        self.act_hide.triggered.connect(self.on_hide_controls)
        self.act_exit = QAction(self.tr("Exit"), self)
        self.act_exit.triggered.connect(self.on_exit)

        menu = QMenu(self)
        menu.addAction(self.act_show)
        menu.addAction(self.act_hide)
        menu.addSeparator()
        menu.addAction(self.act_exit)

        icon = self.windowIcon()
        if icon.isNull():
            icon = self.style().standardIcon(QStyle.StandardPixmap.SP_DesktopIcon)
        self.tray = QSystemTrayIcon(icon, self)
        self.tray.setToolTip(VISIBLE_APP_NAME)
        self.tray.setContextMenu(menu)
        self.tray.show()

    @Slot()
    def on_show_controls(self) -> None:
        self.wallpaper.set_wallpaper_mode(False)
        self.show()
        self.raise_()
        self.activateWindow()

    @Slot()
    def on_hide_controls(self) -> None:
        self.wallpaper.set_wallpaper_mode(True)

    @Slot()
    def on_exit(self) -> None:
        self.wallpaper.set_wallpaper_mode(False)
        QApplication.quit()

    # ------------------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------------------

    @Slot()
    def _on_escape(self) -> None:
        if self.wallpaper.is_wallpaper_mode():
            self.wallpaper.set_wallpaper_mode(False)

    @Slot(bool)
    def _on_wallpaper_mode_changed(self, active: bool) -> None:
        logger.info(f"Wallpaper mode {'enabled' if active else 'disabled'}")
        self.controls.setVisible(not active)
        self._place_controls()

    def _save_settings(self) -> None:
        if self.repository is not None:
            self.repository.save(self.store.settings)

    def _place_controls(self) -> None:
        hint = self.controls.sizeHint()
        width = min(hint.width(), self.canvas.width())
        height = min(hint.height(), self.canvas.height())
        x = (self.canvas.width() - width) // 2
        y = self.canvas.height() - height - 16
        self.controls.setGeometry(x, max(0, y), width, height)

    # ------------------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------------------

    def showEvent(self, event) -> None:
        super().showEvent(event)
        self._place_controls()
        if not self.canvas.scheduler.is_scheduled:
            self.canvas.start()

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        self._place_controls()

    def closeEvent(self, event) -> None:
        self.canvas.stop()
        self.wallpaper.set_wallpaper_mode(False)
        if self._save_timer.isActive():
            self._save_timer.stop()
        self._save_settings()
        if self.tray is not None:
            self.tray.hide()
        super().closeEvent(event)

