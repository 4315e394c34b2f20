from __future__ import annotations

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QPushButton, QWidget

from wobblewall.app.state import Store
from wobblewall.app.ui.panels.base import BasePanel
from wobblewall.config import FPS_RANGE
from wobblewall.model.settings import AppSettings


class GlobalPanel(BasePanel):
    """Frame rate, layout and the wallpaper-mode button."""
    TITLE = "Global"

    wallpaper_requested = Signal()

    def __init__(self, store: Store, parent: QWidget | None = None) -> None:
        super().__init__(store, parent)
        settings = store.settings

        low, high = FPS_RANGE
        self.sl_fps = self._add_slider(
            "target_fps", "Frame Rate", min_value=low, max_value=high, step=1,
            default=settings.target_fps, fmt=lambda v: f"{v:.0f} fps")
        self.tg_split = self._add_toggle("split_view", "Left / Right", default=settings.split_view)

        self.btn_wallpaper = QPushButton(self.tr("Set as Wallpaper"), self.box)
        self.grid.addWidget(self.btn_wallpaper, self._next_row(), 0, 1, 2)

        self.sl_fps.valueChanged.connect(lambda v: self.store.set_target_fps(int(round(v))))
        self.tg_split.toggled.connect(self.store.set_split_view)
        self.btn_wallpaper.clicked.connect(self.wallpaper_requested.emit)
        self.store.settings_changed.connect(self.sync_from)

    def sync_from(self, settings: AppSettings) -> None:
        self.sl_fps.set_value(settings.target_fps)
        self.tg_split.set_checked_silently(settings.split_view)
