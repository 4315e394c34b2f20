"""
Configuration & Global Constants
================================
This module serves as the central registry for identifiers, colours and
parameter ranges shared by the model and the UI.

Why is this file needed?
------------------------
1. Single source of truth: the settings model clamps to the same ranges the
   sliders expose, so persisted presets can never hold values the UI could
   not produce.
2. Identity: QSettings derives its storage location from the organisation
   and application names defined here.

Exports:
    ORG_ID, APP_ID, VISIBLE_APP_NAME: Qt application identity.
    PARAMETER_RANGES (dict): (min, max, step) per curve-group field.
"""
from __future__ import annotations

ORG_ID = "wobblewall"
APP_ID = "wobblewall"
VISIBLE_APP_NAME = "Wobble Wall"

# Persistence keys (camelCase, shared with presets from earlier releases)
KEY_LEFT = "leftSettings"
KEY_RIGHT = "rightSettings"
KEY_TARGET_FPS = "targetFps"
KEY_SPLIT_VIEW = "splitView"

# Rendering
BACKGROUND_RGB: tuple[int, int, int] = (0, 0, 0)
STROKE_RGB: tuple[int, int, int] = (255, 255, 255)

DEFAULT_TARGET_FPS = 60
FPS_RANGE: tuple[int, int] = (1, 120)

# Fallback host refresh interval when the screen does not report a rate
HOST_REFRESH_HZ = 60.0

# (min, max, step) for every CurveGroupSettings field driven by a slider
PARAMETER_RANGES: dict[str, tuple[float, float, float]] = {
    "speed": (0.0, 5.0, 0.1),
    "wobble_amount": (0.0, 20.0, 0.5),
    "wobble_frequency": (1.0, 30.0, 1.0),
    "radius_scale": (0.1, 0.95, 0.05),
    "line_width": (0.5, 10.0, 0.5),
    "circle_count": (1, 20, 1),
    "radius_step": (1.0, 50.0, 1.0),
    "opacity_fade": (0.0, 1.0, 0.05),
    "mouse_offset": (0.0, 200.0, 5.0),
}

# Sphere mode reinterprets radius_step as degrees with a narrower slider
SPHERE_ANGLE_STEP_RANGE: tuple[float, float, float] = (1.0, 30.0, 1.0)
