from __future__ import annotations

import logging

from PySide6.QtCore import QObject, Signal

from wobblewall.model.settings import AppSettings, CurveGroupSettings

logger = logging.getLogger(__name__)


class Store(QObject):
    """
    Central state store with signals for panel/canvas sync.

    Holds the current `AppSettings` snapshot. Every edit replaces the
    snapshot and emits `settings_changed` with the new object.
    """
    settings_changed = Signal(object)
    group_changed = Signal(str, object)

    def __init__(self, settings: AppSettings | None = None) -> None:
        super().__init__()
        self._settings = (settings or AppSettings()).clamped()

    @property
    def settings(self) -> AppSettings:
        return self._settings

    def replace(self, settings: AppSettings) -> None:
        """Swap in a whole new snapshot."""
        settings = settings.clamped()
        if settings == self._settings:
            return
        self._settings = settings
        self.settings_changed.emit(self._settings)

    def set_group(self, name: str, group: CurveGroupSettings) -> None:
        new = self._settings.with_group(name, group)
        if new == self._settings:
            return
        self._settings = new
        self.group_changed.emit(name, new.group(name))
        self.settings_changed.emit(self._settings)

    def update_group(self, name: str, **changes) -> None:
        """Replace one group with a copy carrying `changes`."""
        self.set_group(name, self._settings.group(name).with_changes(**changes))

    def set_target_fps(self, fps: int) -> None:
        self.replace(self._settings.with_changes(target_fps=fps))

    def set_split_view(self, enabled: bool) -> None:
        self.replace(self._settings.with_changes(split_view=enabled))
