"""
Settings (Data Model)
=====================
Immutable value objects describing what the renderer draws.

Why is this file needed?
------------------------
1. Snapshot semantics: the frame scheduler reads one settings object at the
   top of a frame. Edits never mutate it; the UI builds a new object and
   replaces the old one wholesale.
2. Persistence: these objects are what gets serialized to the settings store.
3. Validation: every constructor path used by the UI or by persistence goes
   through `clamped()`, so the core never sees an out-of-range value.

Classes:
    CurveGroupSettings: Parameters of one group of concentric curves.
    AppSettings: Both groups plus the global frame rate.
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field, asdict
from typing import Any, Mapping, Optional

from wobblewall.config import DEFAULT_TARGET_FPS, FPS_RANGE

logger = logging.getLogger(__name__)

# Hard limits enforced by the model (None = unbounded on that side)
_LIMITS: dict[str, tuple[Optional[float], Optional[float]]] = {
    "speed": (0.0, None),
    "wobble_amount": (0.0, None),
    "wobble_frequency": (1.0, 30.0),
    "radius_scale": (0.1, 0.95),
    "line_width": (0.0, None),
    "circle_count": (1, 20),
    "opacity_fade": (0.0, 1.0),
    "mouse_offset": (0.0, None),
}

# camelCase keys written by earlier releases
_LEGACY_KEYS: dict[str, str] = {
    "wobbleAmount": "wobble_amount",
    "wobbleFrequency": "wobble_frequency",
    "radiusScale": "radius_scale",
    "lineWidth": "line_width",
    "circleCount": "circle_count",
    "radiusStep": "radius_step",
    "individualFrequency": "individual_frequency",
    "opacityFade": "opacity_fade",
    "mouseOffset": "mouse_offset",
    "sphereMode": "sphere_mode",
}


def _clamp(value: float, low: Optional[float], high: Optional[float]) -> float:
    if low is not None and value < low:
        return low
    if high is not None and value > high:
        return high
    return value


@dataclass(frozen=True)
class CurveGroupSettings:
    """
    Parameters for one independently configured group of curves.

    `radius_step` is a pixel inset in flat mode and an angle in degrees
    when `sphere_mode` is enabled.
    """
    speed: float = 1.0
    wobble_amount: float = 3.0
    wobble_frequency: float = 8.0
    radius_scale: float = 0.8
    line_width: float = 1.0
    circle_count: int = 1
    radius_step: float = 15.0
    individual_frequency: bool = False
    opacity_fade: float = 0.5
    mouse_offset: float = 50.0
    sphere_mode: bool = False

    def clamped(self) -> CurveGroupSettings:
        """Return a copy with every numeric field inside its valid range."""
        changes: dict[str, Any] = {}
        for name, (low, high) in _LIMITS.items():
            changes[name] = float(_clamp(float(getattr(self, name)), low, high))
        changes["circle_count"] = int(round(changes["circle_count"]))
        changes["radius_step"] = float(self.radius_step)
        changes["individual_frequency"] = bool(self.individual_frequency)
        changes["sphere_mode"] = bool(self.sphere_mode)
        return dataclasses.replace(self, **changes)

    def with_changes(self, **changes: Any) -> CurveGroupSettings:
        """Whole-object replacement used by the UI layer."""
        return dataclasses.replace(self, **changes).clamped()

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CurveGroupSettings:
        """
        Build settings from a (possibly partial or foreign) mapping.

        Unknown keys are ignored, missing keys take defaults and camelCase
        keys from older presets are translated.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        values: dict[str, Any] = {}
        for key, val in data.items():
            name = _LEGACY_KEYS.get(key, key)
            if name in known:
                values[name] = val
            else:
                logger.debug(f"Ignoring unknown settings key '{key}'")
        return cls(**values).clamped()


def _default_group() -> CurveGroupSettings:
    return CurveGroupSettings()


@dataclass(frozen=True)
class AppSettings:
    """
    The full settings object graph: two groups and the global frame rate.

    With `split_view` disabled only the left group is rendered and it fills
    the whole surface.
    """
    left: CurveGroupSettings = field(default_factory=_default_group)
    right: CurveGroupSettings = field(default_factory=_default_group)
    target_fps: int = DEFAULT_TARGET_FPS
    split_view: bool = True

    def groups(self) -> list[tuple[str, CurveGroupSettings]]:
        """Ordered (name, settings) list of the groups to render."""
        if self.split_view:
            return [("left", self.left), ("right", self.right)]
        return [("left", self.left)]

    def group(self, name: str) -> CurveGroupSettings:
        if name == "left":
            return self.left
        if name == "right":
            return self.right
        raise KeyError(f"Unknown group '{name}'")

    def clamped(self) -> AppSettings:
        low, high = FPS_RANGE
        fps = int(_clamp(int(round(self.target_fps)), low, high))
        return dataclasses.replace(
            self,
            left=self.left.clamped(),
            right=self.right.clamped(),
            target_fps=fps,
            split_view=bool(self.split_view),
        )

    def with_changes(self, **changes: Any) -> AppSettings:
        return dataclasses.replace(self, **changes).clamped()

    def with_group(self, name: str, settings: CurveGroupSettings) -> AppSettings:
        """Replace one group by name."""
        if name not in ("left", "right"):
            raise KeyError(f"Unknown group '{name}'")
        return self.with_changes(**{name: settings})

    def to_dict(self) -> dict[str, Any]:
        return {
            "left": self.left.to_dict(),
            "right": self.right.to_dict(),
            "target_fps": self.target_fps,
            "split_view": self.split_view,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AppSettings:
        left = data.get("left", data.get("leftSettings"))
        right = data.get("right", data.get("rightSettings"))
        fps = data.get("target_fps", data.get("targetFps", DEFAULT_TARGET_FPS))
        return cls(
            left=CurveGroupSettings.from_dict(left) if left else CurveGroupSettings(),
            right=CurveGroupSettings.from_dict(right) if right else CurveGroupSettings(),
            target_fps=fps or DEFAULT_TARGET_FPS,
            split_view=data.get("split_view", data.get("splitView", True)),
        ).clamped()
