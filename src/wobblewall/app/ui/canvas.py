"""
Canvas Widget
=============
Qt implementations of the collaborators the frame scheduler needs:

- `ImageSurface`: the drawing surface (QImage + QPainterPath + QPen).
- `QtFrameHost`: frame callbacks from a single-shot precise QTimer, with
  millisecond timestamps from a QElapsedTimer.
- `WobbleCanvas`: the widget that owns both, samples the pointer and blits
  the finished image in `paintEvent`.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QElapsedTimer, QObject, QPoint, Qt, QTimer, Signal
from PySide6.QtGui import QColor, QCursor, QImage, QPainter, QPainterPath, QPen
from PySide6.QtWidgets import QWidget

from wobblewall.app.state import Store
from wobblewall.config import BACKGROUND_RGB, HOST_REFRESH_HZ
from wobblewall.model.clock import FrameCallback, FrameScheduler
from wobblewall.model.compositor import Rgba

logger = logging.getLogger(__name__)


class ImageSurface:
    """Immediate-mode drawing surface backed by a QImage."""
    def __init__(self, background: tuple[int, int, int] = BACKGROUND_RGB) -> None:
        self._background = QColor(*background)
        self._image = QImage(1, 1, QImage.Format.Format_ARGB32_Premultiplied)
        self._image.fill(self._background)
        self._path = QPainterPath()
        self._pen = QPen(QColor(255, 255, 255))

    @property
    def image(self) -> QImage:
        return self._image

    def resize_to(self, width: int, height: int) -> None:
        """Replace the image with a blank one of the given size."""
        self._image = QImage(max(1, int(width)), max(1, int(height)), QImage.Format.Format_ARGB32_Premultiplied)
        self._image.fill(self._background)

    def begin_path(self) -> None:
        self._path = QPainterPath()

    def move_to(self, x: float, y: float) -> None:
        self._path.moveTo(x, y)

    def line_to(self, x: float, y: float) -> None:
        self._path.lineTo(x, y)

    def close_path(self) -> None:
        self._path.closeSubpath()

    def set_stroke(self, color: Rgba, width: float) -> None:
        qcolor = QColor(color.r, color.g, color.b)
        qcolor.setAlphaF(min(max(color.a, 0.0), 1.0))
        self._pen = QPen(qcolor)
        self._pen.setWidthF(width)
        self._pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)

    def stroke(self) -> None:
        painter = QPainter(self._image)
        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
            painter.setPen(self._pen)
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.drawPath(self._path)
        finally:
            painter.end()


class QtFrameHost(QObject):
    """
    Frame callback host with requestAnimationFrame semantics: one pending
    callback at a time, fired once, receiving a monotonic timestamp in ms.
    """
    fired = Signal()

    def __init__(self, parent: Optional[QObject] = None, refresh_hz: float = HOST_REFRESH_HZ) -> None:
        super().__init__(parent)
        self._clock = QElapsedTimer()
        self._clock.start()

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.timeout.connect(self._fire)

        self._pending: Optional[tuple[int, FrameCallback]] = None
        self._next_handle = 0
        self._interval_ms = 16
        self.set_refresh_rate(refresh_hz)

    def set_refresh_rate(self, hz: float) -> None:
        if hz <= 0:
            hz = HOST_REFRESH_HZ
        self._interval_ms = max(1, int(round(1000.0 / hz)))
        logger.debug(f"Frame host refresh interval: {self._interval_ms} ms")

    def now(self) -> float:
        return self._clock.nsecsElapsed() / 1_000_000.0

    def request_callback(self, fn: FrameCallback) -> int:
        self._next_handle += 1
        self._pending = (self._next_handle, fn)
        if not self._timer.isActive():
            self._timer.start(self._interval_ms)
        return self._next_handle

    def cancel(self, handle: int) -> None:
        # The tick keeps running: a request made right after a cancel must
        # fire on the current cadence, not one full interval later.
        if self._pending is not None and self._pending[0] == handle:
            self._pending = None

    def _fire(self) -> None:
        pending, self._pending = self._pending, None
        if pending is None:
            return
        pending[1](self.now())
        self.fired.emit()


class WobbleCanvas(QWidget):
    """Full-window animation surface."""
    def __init__(self, store: Store, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.store = store
        self.setAttribute(Qt.WidgetAttribute.WA_OpaquePaintEvent)
        self.setMouseTracking(True)

        self.surface = ImageSurface()
        self.host = QtFrameHost(self)
        self.scheduler = FrameScheduler(self.host, self.surface, self.viewport_size, self.pointer_position)

        # Pointer stays at the origin until the cursor actually moves
        self._initial_cursor: QPoint = QCursor.pos()
        self._pointer_seen = False
        self._painted_frames = 0

        self.host.fired.connect(self._after_frame)
        self.store.settings_changed.connect(self._on_settings_changed)

    # ---- lifecycle ----

    def start(self) -> None:
        screen = self.screen()
        if screen is not None:
            self.host.set_refresh_rate(screen.refreshRate())
        self.scheduler.install(self.store.settings)
        logger.info(f"Animation started at {self.store.settings.target_fps} fps")

    def stop(self) -> None:
        self.scheduler.teardown()
        logger.info("Animation stopped")

    def _on_settings_changed(self, settings) -> None:
        if self.scheduler.is_scheduled:
            self.scheduler.reinstall(settings)

    # ---- collaborators ----

    def viewport_size(self) -> tuple[int, int]:
        return self.width(), self.height()

    def pointer_position(self) -> tuple[float, float]:
        global_pos = QCursor.pos()
        if not self._pointer_seen:
            if global_pos == self._initial_cursor:
                return 0.0, 0.0
            self._pointer_seen = True
        local = self.mapFromGlobal(global_pos)
        return float(local.x()), float(local.y())

    # ---- painting ----

    def _after_frame(self) -> None:
        if self.scheduler.frames_admitted != self._painted_frames:
            self._painted_frames = self.scheduler.frames_admitted
            self.update()

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        try:
            painter.fillRect(self.rect(), QColor(*BACKGROUND_RGB))
            painter.drawImage(0, 0, self.surface.image)
        finally:
            painter.end()
