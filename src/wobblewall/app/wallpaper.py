"""
Wallpaper Mode
==============
Embeds the main window behind the desktop icons (Windows) or turns it into a
frameless, stays-on-bottom window covering the virtual screen (elsewhere).

Why is this file needed?
------------------------
1. Platform code: the Win32 Progman/WorkerW trick is isolated here behind a
   small backend interface.
2. Safety: backend failures are raised as `WallpaperError`, caught by
   `WallpaperModeController`, logged, and the previous mode is kept. The
   renderer only ever reads the resulting boolean.

Classes:
    WallpaperModeController: Query/enable/disable plus `mode_changed` signal.
    Win32WallpaperBackend, WindowFlagsBackend: Platform implementations.
"""
from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass
from typing import Optional, Protocol

from PySide6.QtCore import QObject, QRect, Qt, Signal
from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QWidget

logger = logging.getLogger(__name__)


class WallpaperError(Exception):
    """Base class for wallpaper-mode failures."""


class UnsupportedPlatformError(WallpaperError):
    pass


class ProgmanNotFoundError(WallpaperError):
    pass


class WorkerWNotFoundError(WallpaperError):
    pass


class AlreadyWallpaperModeError(WallpaperError):
    pass


class NotWallpaperModeError(WallpaperError):
    pass


@dataclass(frozen=True)
class MonitorInfo:
    index: int
    x: int
    y: int
    width: int
    height: int
    is_primary: bool


def virtual_screen_rect() -> QRect:
    """Geometry spanning all screens."""
    screen = QGuiApplication.primaryScreen()
    if screen is None:
        raise WallpaperError("No screen available")
    return screen.virtualGeometry()


def list_monitors() -> list[MonitorInfo]:
    """All screens in virtual-desktop coordinates, primary flagged."""
    primary = QGuiApplication.primaryScreen()
    monitors = []
    for index, screen in enumerate(QGuiApplication.screens()):
        geo = screen.geometry()
        is_primary = primary is not None and screen.name() == primary.name()
        monitors.append(MonitorInfo(index, geo.x(), geo.y(), geo.width(), geo.height(), is_primary))
    return monitors


def covering_rect() -> QRect:
    """Virtual screen geometry, logging the monitors it spans."""
    for m in list_monitors():
        logger.debug(f"Monitor {m.index}: {m.width}x{m.height} at ({m.x}, {m.y})"
                     f"{' (primary)' if m.is_primary else ''}")
    return virtual_screen_rect()


class WallpaperBackend(Protocol):
    def enable(self, window: QWidget) -> None: ...
    def disable(self, window: QWidget) -> None: ...
    def is_active(self) -> bool: ...


# ------------------------------------------------------------------------------
# Windows: reparent into the WorkerW behind the desktop icons
# ------------------------------------------------------------------------------

GWL_STYLE = -16
GWL_EXSTYLE = -20
WS_CAPTION = 0x00C00000
WS_THICKFRAME = 0x00040000
WS_MINIMIZEBOX = 0x00020000
WS_MAXIMIZEBOX = 0x00010000
WS_SYSMENU = 0x00080000
WS_EX_DLGMODALFRAME = 0x00000001
WS_EX_CLIENTEDGE = 0x00000200
WS_EX_STATICEDGE = 0x00020000
SWP_FRAMECHANGED = 0x0020
SWP_SHOWWINDOW = 0x0040
HWND_TOP = 0
SMTO_NORMAL = 0x0000
SPAWN_WORKERW = 0x052C


class Win32WallpaperBackend:
    def __init__(self) -> None:
        try:
            import ctypes
            from ctypes import wintypes
            user32 = ctypes.windll.user32
        except (AttributeError, ImportError) as e:
            raise UnsupportedPlatformError("Wallpaper embedding needs the Win32 API") from e

        self._ctypes = ctypes
        self._wintypes = wintypes
        self._user32 = user32
        self._declare_signatures()

        self._active = False
        self._original_style = 0
        self._original_ex_style = 0
        self._original_rect: Optional[tuple[int, int, int, int]] = None
        self._worker_w: Optional[int] = None

    def _declare_signatures(self) -> None:
        w = self._wintypes
        u = self._user32
        u.FindWindowW.argtypes = [w.LPCWSTR, w.LPCWSTR]
        u.FindWindowW.restype = w.HWND
        u.FindWindowExW.argtypes = [w.HWND, w.HWND, w.LPCWSTR, w.LPCWSTR]
        u.FindWindowExW.restype = w.HWND
        u.SendMessageTimeoutW.argtypes = [w.HWND, w.UINT, w.WPARAM, w.LPARAM, w.UINT, w.UINT, self._ctypes.c_void_p]
        u.GetWindowLongW.argtypes = [w.HWND, self._ctypes.c_int]
        u.GetWindowLongW.restype = w.LONG
        u.SetWindowLongW.argtypes = [w.HWND, self._ctypes.c_int, w.LONG]
        u.GetWindowRect.argtypes = [w.HWND, self._ctypes.POINTER(w.RECT)]
        u.SetParent.argtypes = [w.HWND, w.HWND]
        u.SetParent.restype = w.HWND
        u.SetWindowPos.argtypes = [w.HWND, w.HWND, self._ctypes.c_int, self._ctypes.c_int,
                                   self._ctypes.c_int, self._ctypes.c_int, w.UINT]

    def is_active(self) -> bool:
        return self._active

    def _find_worker_w(self) -> int:
        u = self._user32
        progman = u.FindWindowW("Progman", None)
        if not progman:
            raise ProgmanNotFoundError("Progman window not found")

        # Ask Progman to spawn the WorkerW that sits behind the icons
        u.SendMessageTimeoutW(progman, SPAWN_WORKERW, 0xD, 0x1, SMTO_NORMAL, 1000, None)
        time.sleep(0.1)

        hwnd = None
        while True:
            hwnd = u.FindWindowExW(None, hwnd, "WorkerW", None)
            if not hwnd:
                break
            if u.FindWindowExW(hwnd, None, "SHELLDLL_DefView", None):
                worker_w = u.FindWindowExW(None, hwnd, "WorkerW", None)
                if worker_w:
                    return worker_w
                break
        raise WorkerWNotFoundError("WorkerW window not found")

    def enable(self, window: QWidget) -> None:
        if self._active:
            raise AlreadyWallpaperModeError("Already in wallpaper mode")

        u = self._user32
        hwnd = int(window.winId())
        worker_w = self._find_worker_w()

        self._original_style = u.GetWindowLongW(hwnd, GWL_STYLE)
        self._original_ex_style = u.GetWindowLongW(hwnd, GWL_EXSTYLE)
        rect = self._wintypes.RECT()
        u.GetWindowRect(hwnd, self._ctypes.byref(rect))
        self._original_rect = (rect.left, rect.top, rect.right - rect.left, rect.bottom - rect.top)

        style = self._original_style & ~(WS_CAPTION | WS_THICKFRAME | WS_MINIMIZEBOX | WS_MAXIMIZEBOX | WS_SYSMENU)
        ex_style = self._original_ex_style & ~(WS_EX_DLGMODALFRAME | WS_EX_CLIENTEDGE | WS_EX_STATICEDGE)
        u.SetWindowLongW(hwnd, GWL_STYLE, style)
        u.SetWindowLongW(hwnd, GWL_EXSTYLE, ex_style)
        u.SetParent(hwnd, worker_w)

        v = covering_rect()
        u.SetWindowPos(hwnd, HWND_TOP, v.x(), v.y(), v.width(), v.height(), SWP_FRAMECHANGED | SWP_SHOWWINDOW)

        self._worker_w = worker_w
        self._active = True
        logger.info("Window embedded behind the desktop icons.")

    def disable(self, window: QWidget) -> None:
        if not self._active:
            raise NotWallpaperModeError("Not in wallpaper mode")

        u = self._user32
        hwnd = int(window.winId())
        u.SetParent(hwnd, None)
        u.SetWindowLongW(hwnd, GWL_STYLE, self._original_style)
        u.SetWindowLongW(hwnd, GWL_EXSTYLE, self._original_ex_style)
        if self._original_rect is not None:
            x, y, width, height = self._original_rect
            u.SetWindowPos(hwnd, HWND_TOP, x, y, width, height, SWP_FRAMECHANGED | SWP_SHOWWINDOW)

        self._active = False
        self._original_rect = None
        self._worker_w = None
        logger.info("Window restored from wallpaper mode.")


# ------------------------------------------------------------------------------
# Other platforms: frameless window kept below all others
# ------------------------------------------------------------------------------

class WindowFlagsBackend:
    def __init__(self) -> None:
        self._active = False
        self._original_flags: Optional[Qt.WindowType] = None
        self._original_geometry: Optional[QRect] = None

    def is_active(self) -> bool:
        return self._active

    def enable(self, window: QWidget) -> None:
        if self._active:
            raise AlreadyWallpaperModeError("Already in wallpaper mode")

        self._original_flags = window.windowFlags()
        self._original_geometry = window.geometry()

        window.setWindowFlags(
            Qt.WindowType.FramelessWindowHint
            | Qt.WindowType.WindowStaysOnBottomHint
            | Qt.WindowType.Tool
        )
        window.setGeometry(covering_rect())
        window.show()
        self._active = True
        logger.info("Window switched to frameless background mode.")

    def disable(self, window: QWidget) -> None:
        if not self._active:
            raise NotWallpaperModeError("Not in wallpaper mode")

        if self._original_flags is not None:
            window.setWindowFlags(self._original_flags)
        if self._original_geometry is not None:
            window.setGeometry(self._original_geometry)
        window.show()
        self._active = False
        logger.info("Window restored from background mode.")


def default_backend() -> WallpaperBackend:
    if sys.platform == "win32":
        try:
            return Win32WallpaperBackend()
        except UnsupportedPlatformError as e:
            logger.warning(f"Falling back to window flags: {e}")
    return WindowFlagsBackend()


class WallpaperModeController(QObject):
    """
    Owns the wallpaper-mode flag of one window.

    `mode_changed` fires on every effective change, including changes made
    from outside the controls (tray menu, Escape key).
    """
    mode_changed = Signal(bool)

    def __init__(self, window: QWidget, backend: Optional[WallpaperBackend] = None) -> None:
        super().__init__(window)
        self._window = window
        self._backend = backend if backend is not None else default_backend()

    def is_wallpaper_mode(self) -> bool:
        return self._backend.is_active()

    def set_wallpaper_mode(self, enabled: bool) -> bool:
        """
        Enable or disable wallpaper mode.

        Returns:
            True if the requested mode is now active. Failures are logged and
            leave the current mode unchanged.
        """
        if enabled == self.is_wallpaper_mode():
            return True
        try:
            if enabled:
                self._backend.enable(self._window)
            else:
                self._backend.disable(self._window)
        except (WallpaperError, OSError) as e:
            logger.error(f"Failed to set wallpaper mode: {e}")
            return False

        self.mode_changed.emit(enabled)
        return True

    def toggle_wallpaper_mode(self) -> bool:
        return self.set_wallpaper_mode(not self.is_wallpaper_mode())
