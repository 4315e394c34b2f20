"""
Render Group Compositor
=======================
Draws one complete group of concentric curves into a rectangular region of
an immediate-mode drawing surface.

The surface is anything that satisfies `DrawingSurface`; the Qt
implementation lives in `wobblewall.app.ui.canvas`, tests use a recorder.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple, Protocol

from wobblewall.config import STROKE_RGB
from wobblewall.model.harmonics import allocate_group
from wobblewall.model.settings import CurveGroupSettings
from wobblewall.model.wobble import SEGMENTS, curve_base_radius, sample_curve


class Rgba(NamedTuple):
    """Stroke colour: 0..255 channels, alpha in 0..1."""
    r: int
    g: int
    b: int
    a: float = 1.0


class DrawingSurface(Protocol):
    """2D immediate-mode surface used by the compositor and the scheduler."""
    def resize_to(self, width: int, height: int) -> None: ...
    def begin_path(self) -> None: ...
    def move_to(self, x: float, y: float) -> None: ...
    def line_to(self, x: float, y: float) -> None: ...
    def close_path(self) -> None: ...
    def set_stroke(self, color: Rgba, width: float) -> None: ...
    def stroke(self) -> None: ...


@dataclass(frozen=True)
class Region:
    """Axis-aligned viewport region of the surface owned by one group."""
    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2

    @property
    def half_diagonal(self) -> float:
        return math.sqrt((self.width / 2) ** 2 + (self.height / 2) ** 2)

    def base_radius(self, radius_scale: float) -> float:
        """Radius of the outermost curve."""
        return min(self.width / 2, self.height / 2) * radius_scale


def split_regions(width: float, height: float, count: int) -> list[Region]:
    """Split the surface into `count` equal columns, left to right."""
    count = max(1, count)
    column = width / count
    return [Region(i * column, 0.0, column, height) for i in range(count)]


def pointer_offset(region: Region, pointer: tuple[float, float]) -> tuple[float, float, float]:
    """
    Direction and strength of the pointer pull for a region.

    Returns:
        (unit_x, unit_y, dist_factor). The unit vector is zero when the
        pointer sits on the centre. `dist_factor` is the pointer distance
        over the region's half diagonal and is not clamped to 1.
    """
    cx, cy = region.center
    dx = pointer[0] - cx
    dy = pointer[1] - cy
    dist = math.sqrt(dx * dx + dy * dy)
    if dist > 0:
        ux, uy = dx / dist, dy / dist
    else:
        ux, uy = 0.0, 0.0
    max_dist = region.half_diagonal
    factor = dist / max_dist if max_dist > 0 else 0.0
    return ux, uy, factor


def curve_offset(
    index: int,
    count: int,
    mouse_offset: float,
    pull: tuple[float, float, float],
) -> tuple[float, float]:
    """Lateral displacement of curve `index`; the outermost never moves."""
    ux, uy, factor = pull
    fraction = index / (count - 1) if count > 1 else 0.0
    scale = mouse_offset * fraction * factor
    return ux * scale, uy * scale


def curve_opacity(index: int, count: int, opacity_fade: float) -> float:
    count = count if count > 0 else 1
    return 1.0 - (index / count) * opacity_fade


def draw_group(
    surface: DrawingSurface,
    settings: CurveGroupSettings,
    time: float,
    region: Region,
    pointer: tuple[float, float],
    color: tuple[int, int, int] = STROKE_RGB,
    segments: int = SEGMENTS,
) -> int:
    """
    Stroke every curve of a group, outermost (index 0) first.

    Args:
        surface: Target surface. Only written to.
        settings: Snapshot of the group's settings.
        time: The group's simulation time.
        region: Part of the surface the group occupies.
        pointer: Current pointer position in surface coordinates.
        color: RGB of the strokes; alpha comes from the opacity fade.
        segments: Samples per curve.

    Returns:
        The number of curves drawn.
    """
    count = max(1, int(settings.circle_count))
    base_radius = region.base_radius(settings.radius_scale)
    pull = pointer_offset(region, pointer)
    center = region.center

    for harmonics in allocate_group(count, settings.wobble_frequency, settings.individual_frequency):
        c = harmonics.index
        base = curve_base_radius(base_radius, c, settings.radius_step, settings.sphere_mode)
        offset = curve_offset(c, count, settings.mouse_offset, pull)
        points = sample_curve(center, offset, base, time, settings.wobble_amount, harmonics, segments)

        surface.begin_path()
        (x0, y0), *rest = points.tolist()
        surface.move_to(x0, y0)
        for x, y in rest:
            surface.line_to(x, y)
        surface.close_path()
        surface.set_stroke(Rgba(*color, curve_opacity(c, count, settings.opacity_fade)), settings.line_width)
        surface.stroke()

    return count
