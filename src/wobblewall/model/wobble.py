"""
Wobble Curve Evaluator
======================
Polar radius law of a single curve: a base radius plus three integer
harmonics of the sample angle, each drifting at its own rate over time.

All functions accept scalar angles or numpy arrays of angles.
"""
from __future__ import annotations

import math
from typing import TYPE_CHECKING, Union

import numpy as np

from wobblewall.model.harmonics import CurveHarmonics, TAU

if TYPE_CHECKING:
    import numpy.typing as npt

SEGMENTS = 360

# Contribution of each harmonic (fundamental dominates)
WEIGHTS: tuple[float, float, float] = (0.5, 0.3, 0.2)

# Angular drift of each harmonic per unit of simulation time
TIME_RATES: tuple[float, float, float] = (2.0, -1.5, 0.8)

Angle = Union[float, "npt.NDArray[np.float64]"]


def sample_angles(segments: int = SEGMENTS) -> npt.NDArray[np.float64]:
    """Equally spaced angles i / segments * 2*pi, endpoint excluded."""
    return np.arange(segments, dtype=np.float64) / segments * TAU


def wobble(theta: Angle, t: float, amount: float, harmonics: CurveHarmonics) -> Angle:
    """Combined radial displacement at angle(s) `theta` and time `t`."""
    w1, w2, w3 = WEIGHTS
    k1, k2, k3 = TIME_RATES
    h = harmonics
    return (
        amount * w1 * np.sin(h.h1 * theta + k1 * t + h.group_phase + h.phase1)
        + amount * w2 * np.sin(h.h2 * theta + k2 * t + h.group_phase + h.phase2)
        + amount * w3 * np.sin(h.h3 * theta + k3 * t + h.third_phase)
    )


def curve_base_radius(base_radius: float, index: int, radius_step: float, sphere_mode: bool) -> float:
    """
    Radius of curve `index` before wobble.

    Flat mode insets linearly by `radius_step` pixels. Sphere mode treats
    `radius_step` as degrees of latitude and foreshortens with a cosine.
    Either law may go to zero or below for large indices; that is drawn as is.
    """
    if sphere_mode:
        return base_radius * math.cos(index * math.radians(radius_step))
    return base_radius - index * radius_step


def curve_radius(theta: Angle, t: float, base: float, amount: float, harmonics: CurveHarmonics) -> Angle:
    return base + wobble(theta, t, amount, harmonics)


def sample_curve(
    center: tuple[float, float],
    offset: tuple[float, float],
    base: float,
    t: float,
    amount: float,
    harmonics: CurveHarmonics,
    segments: int = SEGMENTS,
) -> npt.NDArray[np.float64]:
    """
    Cartesian samples of one curve.

    Args:
        center: Group centre (x, y).
        offset: Pointer-reactive displacement (dx, dy) of this curve.
        base: Base radius from `curve_base_radius`.
        t: Group simulation time.
        amount: Wobble amplitude in pixels.
        harmonics: Allocation for this curve.
        segments: Number of samples per revolution.

    Returns:
        An array of shape (segments, 2). The ring is open; the caller closes
        the path back to the first sample.
    """
    theta = sample_angles(segments)
    r = curve_radius(theta, t, base, amount, harmonics)
    cx = center[0] + offset[0]
    cy = center[1] + offset[1]
    return np.c_[cx + r * np.cos(theta), cy + r * np.sin(theta)]
