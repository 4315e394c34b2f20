"""
Animation Clock / Frame Scheduler
=================================
Turns host frame callbacks into admitted frames at a bounded rate and keeps
one simulation-time accumulator per group.

Why is this file needed?
------------------------
1. Frame pacing: the host may call back at the display refresh rate; frames
   closer together than 1000 / target_fps ms are dropped (never queued).
2. Frame-rate independence: simulation time advances by the real wall time
   between admitted frames scaled by each group's speed, so visual speed does
   not depend on the refresh rate.
3. Decoupling: the host, the surface, the viewport and the pointer are all
   injected, so this module has no knowledge of Qt.

State machine: Scheduled -> Evaluating -> Scheduled, until `teardown()`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

from wobblewall.config import FPS_RANGE
from wobblewall.model.compositor import DrawingSurface, draw_group, split_regions
from wobblewall.model.settings import AppSettings

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]
PointerSource = Callable[[], "tuple[float, float]"]
ViewportSource = Callable[[], "tuple[int, int]"]


class FrameCallbackHost(Protocol):
    """Host-side frame callback mechanism (timestamps in milliseconds)."""
    def request_callback(self, fn: FrameCallback) -> Any: ...
    def cancel(self, handle: Any) -> None: ...
    def now(self) -> float: ...


@dataclass
class GroupClock:
    """Simulation-time accumulator of one group."""
    simulation_time: float = 0.0

    def advance(self, delta: float, speed: float) -> None:
        self.simulation_time += delta * speed


def frame_interval(target_fps: int) -> float:
    """Minimum spacing in ms between admitted frames."""
    low, high = FPS_RANGE
    fps = min(max(int(target_fps), low), high)
    return 1000.0 / fps


class FrameScheduler:
    """
    Self-resubmitting frame loop driving the compositor.

    Args:
        host: Frame callback provider.
        surface: Drawing surface, resized and redrawn on every admitted frame.
        viewport: Returns the current (width, height) of the surface.
        pointer: Returns the latest pointer position in surface coordinates.
    """
    def __init__(
        self,
        host: FrameCallbackHost,
        surface: DrawingSurface,
        viewport: ViewportSource,
        pointer: PointerSource,
    ) -> None:
        self._host = host
        self._surface = surface
        self._viewport = viewport
        self._pointer = pointer

        self._settings: Optional[AppSettings] = None
        self._handle: Any = None
        self._interval: float = frame_interval(FPS_RANGE[1])

        # Both survive reinstalls; only the wall base is rebuilt on install
        self._last_admitted: float = 0.0
        self._last_wall: float = 0.0
        self._clocks: dict[str, GroupClock] = {}

        self.frames_admitted: int = 0
        self.frames_dropped: int = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_scheduled(self) -> bool:
        return self._handle is not None

    @property
    def settings(self) -> Optional[AppSettings]:
        return self._settings

    def install(self, settings: AppSettings) -> None:
        """Start the loop with an immutable settings snapshot."""
        self.teardown()
        self._settings = settings
        self._interval = frame_interval(settings.target_fps)
        self._last_wall = self._host.now()
        for name, _ in settings.groups():
            self._clocks.setdefault(name, GroupClock())
        self._handle = self._host.request_callback(self._on_frame)
        logger.debug(f"Scheduler installed at {settings.target_fps} fps "
                     f"with {len(settings.groups())} group(s)")

    def teardown(self) -> None:
        """Cancel the pending callback request, if any."""
        if self._handle is not None:
            self._host.cancel(self._handle)
            self._handle = None

    def reinstall(self, settings: AppSettings) -> None:
        """Apply new settings: tear down and install again."""
        self.teardown()
        self.install(settings)

    # ------------------------------------------------------------------
    # Frame evaluation
    # ------------------------------------------------------------------

    def _on_frame(self, timestamp: float) -> None:
        self._handle = self._host.request_callback(self._on_frame)
        self.advance(timestamp)

    def advance(self, timestamp: float) -> bool:
        """
        Evaluate one host callback.

        Returns:
            True when the frame passed the throttle and was drawn.
        """
        settings = self._settings
        if settings is None:
            return False

        elapsed = timestamp - self._last_admitted
        if elapsed < self._interval:
            self.frames_dropped += 1
            return False

        # Phase-locked: keep the sub-interval remainder to avoid drift
        self._last_admitted = timestamp - (elapsed % self._interval)

        delta = (timestamp - self._last_wall) / 1000.0
        self._last_wall = timestamp

        groups = settings.groups()
        for name, group in groups:
            self._clocks.setdefault(name, GroupClock()).advance(delta, group.speed)

        width, height = self._viewport()
        self._surface.resize_to(width, height)

        pointer = self._pointer()
        regions = split_regions(width, height, len(groups))
        for (name, group), region in zip(groups, regions):
            draw_group(self._surface, group, self._clocks[name].simulation_time, region, pointer)

        self.frames_admitted += 1
        return True

    def simulation_time(self, name: str) -> float:
        clock = self._clocks.get(name)
        return clock.simulation_time if clock else 0.0
