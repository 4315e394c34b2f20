"""
Settings Persistence
====================
Loads and saves the full settings object graph (two groups + frame rate) in a
QSettings key-value store.

Why is this file needed?
------------------------
1. Restore on startup: the last used parameters come back when the
   application is launched again.
2. Isolation: storage failures are logged here and turned into "use
   defaults" (load) or a no-op (save). Nothing raised by the store can reach
   the frame loop.

Group settings are stored as JSON text so that the INI backend keeps the
nested structure and value types intact.
"""
from __future__ import annotations

import json
import logging
from typing import Optional

from PySide6.QtCore import QSettings

from wobblewall.config import KEY_LEFT, KEY_RIGHT, KEY_TARGET_FPS, KEY_SPLIT_VIEW, DEFAULT_TARGET_FPS
from wobblewall.model.settings import AppSettings

logger = logging.getLogger(__name__)


def _as_bool(value: object, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


class SettingsRepository:
    """
    QSettings-backed store for `AppSettings`.

    Args:
        qsettings: Store to use. Defaults to the application's QSettings
            (organisation/application names set in `create_app`).
    """
    def __init__(self, qsettings: Optional[QSettings] = None) -> None:
        self._qsettings = qsettings if qsettings is not None else QSettings()

    @property
    def location(self) -> str:
        return self._qsettings.fileName()

    def load(self) -> AppSettings:
        """Read the stored settings; any failure yields the defaults."""
        logger.info(f"Loading settings from: {self.location}")
        try:
            fps_raw = self._qsettings.value(KEY_TARGET_FPS)
            settings = AppSettings.from_dict({
                KEY_LEFT: self._load_group(KEY_LEFT),
                KEY_RIGHT: self._load_group(KEY_RIGHT),
                KEY_TARGET_FPS: int(fps_raw) if fps_raw not in (None, "") else DEFAULT_TARGET_FPS,
                KEY_SPLIT_VIEW: _as_bool(self._qsettings.value(KEY_SPLIT_VIEW), True),
            })
        except Exception as e:
            logger.error(f"Failed to load settings: {e}")
            return AppSettings()

        logger.debug(f"Settings loaded: {settings}")
        return settings

    def _load_group(self, key: str) -> Optional[dict]:
        raw = self._qsettings.value(key)
        if raw in (None, ""):
            return None
        data = json.loads(raw) if isinstance(raw, str) else raw
        if not isinstance(data, dict):
            raise ValueError(f"'{key}' does not hold an object: {raw!r}")
        return data

    def save(self, settings: AppSettings) -> bool:
        """Write the settings; returns False (after logging) on failure."""
        try:
            data = settings.to_dict()
            self._qsettings.setValue(KEY_LEFT, json.dumps(data["left"]))
            self._qsettings.setValue(KEY_RIGHT, json.dumps(data["right"]))
            self._qsettings.setValue(KEY_TARGET_FPS, int(data["target_fps"]))
            self._qsettings.setValue(KEY_SPLIT_VIEW, bool(data["split_view"]))
            self._qsettings.sync()
            status = self._qsettings.status()
            if status != QSettings.Status.NoError:
                raise OSError(f"QSettings reported {status}")
        except Exception as e:
            logger.error(f"Failed to save settings: {e}")
            return False

        logger.debug(f"Settings saved to: {self.location}")
        return True
