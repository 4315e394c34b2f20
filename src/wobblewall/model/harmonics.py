"""
Deterministic Harmonic Allocator
================================
Assigns harmonic numbers and phase offsets to every curve of a group so that
concentric curves stay visually distinct instead of collapsing into copies.

Everything here is a pure function of (base frequency, curve count, curve
index): there is no random state, so resizing the window or toggling a
control never makes a curve jump to a different phase.

Classes:
    CurveHarmonics: Harmonics and phases for one curve.

Functions:
    allocate_group: Harmonics for every curve of a group, in drawing order.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import AbstractSet

TAU = 2.0 * math.pi

# Nominal harmonic ratios: fundamental + two overtones
HARMONIC_RATIOS: tuple[int, int, int] = (1, 2, 4)

# Preferred coprime steps, tried in this order before a linear scan
STEP_CANDIDATES: tuple[int, ...] = (7, 11, 13, 17, 19, 5, 3, 2)

# Decorrelates the third term between curves when phases are shared
LEGACY_THIRD_PHASE = 1.3

_U32 = 0xFFFFFFFF


@dataclass(frozen=True)
class CurveHarmonics:
    """
    Harmonic numbers and phase offsets of one curve.

    Attributes:
        index: Curve index within the group (0 = outermost).
        count: Number of curves in the group.
        h1, h2, h3: Integer harmonics of the three sine terms.
        phase1, phase2, phase3: Per-curve phase offsets in radians.
        group_phase: Even angular spacing offset (index / count turns).
        third_phase: Phase added to the third sine term.
    """
    index: int
    count: int
    h1: int
    h2: int
    h3: int
    phase1: float
    phase2: float
    phase3: float
    group_phase: float
    third_phase: float


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return int(math.floor(value + 0.5))


def gcd_int(a: int, b: int) -> int:
    x = abs(int(a))
    y = abs(int(b))
    while y != 0:
        x, y = y, x % y
    return x


def _safe_count(count: int) -> int:
    return count if count > 0 else 1


def pick_coprime_step(mod: int, avoid: AbstractSet[int] = frozenset()) -> int:
    """
    Pick a step `s` with gcd(s, mod) == 1 so that (c * s) % mod visits every
    residue exactly once as c runs over range(mod).

    Args:
        mod: The group size.
        avoid: Steps that were already handed out for this group.

    Returns:
        The first qualifying preferred step, else the smallest qualifying
        value in 2..mod-1, else 1.
    """
    mod = _safe_count(mod)
    if mod <= 2:
        return 1

    for candidate in STEP_CANDIDATES:
        step = candidate % mod
        if step <= 1 or step in avoid:
            continue
        if gcd_int(step, mod) == 1:
            return step

    for step in range(2, mod):
        if step in avoid:
            continue
        if gcd_int(step, mod) == 1:
            return step

    return 1


def pick_group_steps(count: int, individual: bool) -> tuple[int, int]:
    """Steps for the 2nd and 3rd harmonic, chosen once per group."""
    count = _safe_count(count)
    if not individual or count <= 1:
        return 1, 1
    step2 = pick_coprime_step(count)
    step3 = pick_coprime_step(count, frozenset({step2}))
    return step2, step3


def hash32(seed: int) -> int:
    """32-bit integer mix (xor-shift / odd-constant multiply)."""
    x = int(seed) & _U32
    x = ((x ^ (x >> 16)) * 0x7FEB352D) & _U32
    x = ((x ^ (x >> 15)) * 0x846CA68B) & _U32
    x ^= x >> 16
    return x & _U32


def rand01(seed: int) -> float:
    """Map a seed to [0, 1)."""
    return hash32(seed) / 4294967296.0


def phase_seed(base_frequency: int, count: int, index: int) -> int:
    return base_frequency * 100_000 + count * 1_000 + index


def phase_offset(base_frequency: int, count: int, index: int, component: int) -> float:
    """Phase in [0, 2*pi) for one sine component (1, 2 or 3) of one curve."""
    return rand01(phase_seed(base_frequency, count, index) + component) * TAU


def allocate_curve(
    index: int,
    count: int,
    base_frequency: int,
    individual: bool,
    steps: tuple[int, int] = (1, 1),
) -> CurveHarmonics:
    """
    Harmonics for curve `index` of a group of `count` curves.

    Args:
        index: Curve index, 0 <= index < count.
        count: Group size (values <= 0 are treated as 1).
        base_frequency: Already rounded wobble frequency.
        individual: Whether per-curve diversification is enabled.
        steps: (step2, step3) from `pick_group_steps`.
    """
    count = _safe_count(count)
    r1, r2, r3 = HARMONIC_RATIOS
    group_phase = index / count * TAU

    if not individual:
        return CurveHarmonics(
            index=index,
            count=count,
            h1=r1 * base_frequency,
            h2=r2 * base_frequency,
            h3=r3 * base_frequency,
            phase1=0.0,
            phase2=0.0,
            phase3=0.0,
            group_phase=group_phase,
            third_phase=index * LEGACY_THIRD_PHASE,
        )

    step2, step3 = steps
    phase3 = phase_offset(base_frequency, count, index, 3)
    return CurveHarmonics(
        index=index,
        count=count,
        h1=r1 * base_frequency + index,
        h2=r2 * base_frequency + (index * step2) % count,
        h3=r3 * base_frequency + (index * step3) % count,
        phase1=phase_offset(base_frequency, count, index, 1),
        phase2=phase_offset(base_frequency, count, index, 2),
        phase3=phase3,
        group_phase=group_phase,
        third_phase=group_phase + phase3,
    )


def allocate_group(count: int, wobble_frequency: float, individual: bool) -> list[CurveHarmonics]:
    """Allocate every curve of a group, outermost first."""
    count = _safe_count(count)
    base = round_half_up(wobble_frequency)
    steps = pick_group_steps(count, individual)
    return [allocate_curve(c, count, base, individual, steps) for c in range(count)]
