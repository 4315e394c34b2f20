from __future__ import annotations

from PySide6.QtWidgets import QWidget

from wobblewall.app.state import Store
from wobblewall.app.ui.panels.base import BasePanel
from wobblewall.config import PARAMETER_RANGES, SPHERE_ANGLE_STEP_RANGE
from wobblewall.model.settings import CurveGroupSettings


def _radius_step_format(sphere_mode: bool):
    suffix = "°" if sphere_mode else "px"
    return lambda v: f"{v:.0f}{suffix}"


class GroupPanel(BasePanel):
    """Sliders and toggles for one curve group ("left" or "right")."""
    def __init__(self, store: Store, group_name: str, title: str, parent: QWidget | None = None) -> None:
        super().__init__(store, parent, title=title)
        self.group_name = group_name
        settings = store.settings.group(group_name)

        def rng(key: str) -> dict[str, float]:
            low, high, step = PARAMETER_RANGES[key]
            return {"min_value": low, "max_value": high, "step": step}

        self.sl_count = self._add_slider(
            "circle_count", "Circles", **rng("circle_count"),
            default=settings.circle_count, fmt=lambda v: f"{v:.0f}")
        self.tg_sphere = self._add_toggle("sphere_mode", "Sphere Mode", default=settings.sphere_mode)
        self.sl_radius_step = self._add_slider(
            "radius_step", "Radius Step", **rng("radius_step"),
            default=settings.radius_step, fmt=_radius_step_format(False))
        self.sl_fade = self._add_slider(
            "opacity_fade", "Opacity Fade", **rng("opacity_fade"),
            default=settings.opacity_fade, fmt=lambda v: f"{v * 100:.0f}%")
        self.sl_mouse = self._add_slider(
            "mouse_offset", "Mouse Offset", **rng("mouse_offset"),
            default=settings.mouse_offset, fmt=lambda v: f"{v:.0f}px")
        self.tg_individual = self._add_toggle(
            "individual_frequency", "Individual Frequency", default=settings.individual_frequency)
        self.sl_speed = self._add_slider(
            "speed", "Speed", **rng("speed"),
            default=settings.speed, fmt=lambda v: f"{v:.1f}x")
        self.sl_amount = self._add_slider(
            "wobble_amount", "Wobble Amount", **rng("wobble_amount"),
            default=settings.wobble_amount, fmt=lambda v: f"{v:.1f}px")
        self.sl_frequency = self._add_slider(
            "wobble_frequency", "Wobble Frequency", **rng("wobble_frequency"),
            default=settings.wobble_frequency, fmt=lambda v: f"{v:.0f}")
        self.sl_radius = self._add_slider(
            "radius_scale", "Radius", **rng("radius_scale"),
            default=settings.radius_scale, fmt=lambda v: f"{v * 100:.0f}%")
        self.sl_width = self._add_slider(
            "line_width", "Line Width", **rng("line_width"),
            default=settings.line_width, fmt=lambda v: f"{v:.1f}px")

        self._sliders = {
            "circle_count": self.sl_count,
            "radius_step": self.sl_radius_step,
            "opacity_fade": self.sl_fade,
            "mouse_offset": self.sl_mouse,
            "speed": self.sl_speed,
            "wobble_amount": self.sl_amount,
            "wobble_frequency": self.sl_frequency,
            "radius_scale": self.sl_radius,
            "line_width": self.sl_width,
        }
        self._toggles = {
            "sphere_mode": self.tg_sphere,
            "individual_frequency": self.tg_individual,
        }

        for key, w in self._sliders.items():
            w.valueChanged.connect(lambda value, k=key: self._on_value(k, value))
        for key, w in self._toggles.items():
            w.toggled.connect(lambda checked, k=key: self._on_value(k, checked))

        self._apply_sphere_mode(settings.sphere_mode)
        self.sl_radius_step.set_value(settings.radius_step)
        self.store.group_changed.connect(self._on_group_changed)

    def _on_value(self, key: str, value) -> None:
        if key == "circle_count":
            value = int(round(value))
        self.store.update_group(self.group_name, **{key: value})

    def _apply_sphere_mode(self, sphere_mode: bool) -> None:
        low, high, step = SPHERE_ANGLE_STEP_RANGE if sphere_mode else PARAMETER_RANGES["radius_step"]
        self.sl_radius_step.set_range(low, high, step)
        self.sl_radius_step.set_formatter(_radius_step_format(sphere_mode))
        self._labels["radius_step"].setText(self.tr("Angle Step") if sphere_mode else self.tr("Radius Step"))

    def _on_group_changed(self, name: str, settings: CurveGroupSettings) -> None:
        if name != self.group_name:
            return
        self.sync_from(settings)

    def sync_from(self, settings: CurveGroupSettings) -> None:
        """Reflect a settings snapshot in the widgets without feeding back."""
        self._apply_sphere_mode(settings.sphere_mode)
        for key, w in self._sliders.items():
            w.set_value(getattr(settings, key))
        for key, w in self._toggles.items():
            w.set_checked_silently(getattr(settings, key))
