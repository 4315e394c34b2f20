from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QGroupBox, QLabel, QGridLayout, QSizePolicy, QSlider, QPushButton
)

from wobblewall.app.state import Store


class LabeledSlider(QWidget):
    """Integer QSlider mapped onto a float range with a live value label."""
    valueChanged = Signal(float)

    def __init__(
        self,
        min_value: float,
        max_value: float,
        step: float,
        fmt: Callable[[float], str],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._fmt = fmt
        self._min = min_value
        self._step = step

        self.slider = QSlider(Qt.Orientation.Horizontal, self)
        self.slider.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
        self.value_label = QLabel(self)
        self.value_label.setAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
        self.value_label.setMinimumWidth(48)

        layout = QGridLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.slider, 0, 0)
        layout.addWidget(self.value_label, 0, 1)

        self.set_range(min_value, max_value, step)
        self.slider.valueChanged.connect(self._on_slider)

    def set_range(self, min_value: float, max_value: float, step: float) -> None:
        current = self.value()
        self._min = min_value
        self._step = step
        self.slider.blockSignals(True)
        self.slider.setRange(0, int(round((max_value - min_value) / step)))
        self.slider.blockSignals(False)
        self.set_value(min(max(current, min_value), max_value))

    def value(self) -> float:
        return self._min + self.slider.value() * self._step

    def set_value(self, value: float) -> None:
        """Move the slider without emitting `valueChanged`."""
        self.slider.blockSignals(True)
        self.slider.setValue(int(round((value - self._min) / self._step)))
        self.slider.blockSignals(False)
        self.value_label.setText(self._fmt(value))

    def set_formatter(self, fmt: Callable[[float], str]) -> None:
        self._fmt = fmt
        self.value_label.setText(self._fmt(self.value()))

    def _on_slider(self, _position: int) -> None:
        value = round(self.value(), 6)
        self.value_label.setText(self._fmt(value))
        self.valueChanged.emit(value)


class ToggleButton(QPushButton):
    """Checkable ON/OFF button."""
    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setCheckable(True)
        self.toggled.connect(self._sync_text)
        self._sync_text(False)

    def _sync_text(self, checked: bool) -> None:
        self.setText(self.tr("ON") if checked else self.tr("OFF"))

    def set_checked_silently(self, checked: bool) -> None:
        self.blockSignals(True)
        self.setChecked(checked)
        self.blockSignals(False)
        self._sync_text(checked)


class BasePanel(QWidget):
    """
    Base class for the control panels. Holds a reference to the global store
    and offers grid helpers for sliders and toggles.
    """
    TITLE: str = "Controls"

    def __init__(self, store: Store, parent: QWidget | None = None, title: str | None = None) -> None:
        super().__init__(parent)
        self.store = store

        self.box = QGroupBox(self.tr(title or self.TITLE), self)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.box)
        layout.addStretch()
        self.grid = QGridLayout(self.box)
        self.grid.setVerticalSpacing(8)
        self._labels: dict[str, QLabel] = {}
        self._row = 0

    def _next_row(self) -> int:
        r = self._row
        self._row += 1
        return r

    def _add_slider(
        self,
        key: str,
        label: str,
        *,
        min_value: float,
        max_value: float,
        step: float,
        default: float,
        fmt: Callable[[float], str] = lambda v: f"{v:g}",
    ) -> LabeledSlider:
        row = self._next_row()
        lab = QLabel(self.tr(label), self.box)
        self.grid.addWidget(lab, row, 0)
        w = LabeledSlider(min_value, max_value, step, fmt, self.box)
        w.set_value(default)
        self.grid.addWidget(w, row, 1)
        self._labels[key] = lab
        return w

    def _add_toggle(self, key: str, label: str, *, default: bool = False) -> ToggleButton:
        row = self._next_row()
        lab = QLabel(self.tr(label), self.box)
        self.grid.addWidget(lab, row, 0)
        w = ToggleButton(self.box)
        w.set_checked_silently(default)
        self.grid.addWidget(w, row, 1)
        self._labels[key] = lab
        return w
