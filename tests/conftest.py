"""Shared fakes for the drawing surface and the frame callback host."""
from __future__ import annotations

from typing import Any, Callable, Optional

import pytest

from wobblewall.model.compositor import Rgba


class RecordingSurface:
    """DrawingSurface that records every call as a tuple."""

    def __init__(self) -> None:
        self.ops: list[tuple] = []

    def resize_to(self, width: int, height: int) -> None:
        self.ops.append(("resize_to", width, height))

    def begin_path(self) -> None:
        self.ops.append(("begin_path",))

    def move_to(self, x: float, y: float) -> None:
        self.ops.append(("move_to", x, y))

    def line_to(self, x: float, y: float) -> None:
        self.ops.append(("line_to", x, y))

    def close_path(self) -> None:
        self.ops.append(("close_path",))

    def set_stroke(self, color: Rgba, width: float) -> None:
        self.ops.append(("set_stroke", color, width))

    def stroke(self) -> None:
        self.ops.append(("stroke",))

    # ---- helpers ----

    def names(self) -> list[str]:
        return [op[0] for op in self.ops]

    def count(self, name: str) -> int:
        return sum(1 for op in self.ops if op[0] == name)

    def paths(self) -> list[list[tuple[float, float]]]:
        """Vertices of every path, in drawing order."""
        result: list[list[tuple[float, float]]] = []
        for op in self.ops:
            if op[0] == "begin_path":
                result.append([])
            elif op[0] in ("move_to", "line_to"):
                result[-1].append((op[1], op[2]))
        return result

    def strokes(self) -> list[tuple[Rgba, float]]:
        return [(op[1], op[2]) for op in self.ops if op[0] == "set_stroke"]

    def clear(self) -> None:
        self.ops.clear()


class FakeHost:
    """Frame callback host driven by hand from the tests."""

    def __init__(self, start: float = 0.0) -> None:
        self.time = start
        self.pending: Optional[tuple[int, Callable[[float], None]]] = None
        self.requests = 0
        self.cancelled: list[Any] = []
        self._next = 0

    def now(self) -> float:
        return self.time

    def request_callback(self, fn: Callable[[float], None]) -> int:
        self._next += 1
        self.requests += 1
        self.pending = (self._next, fn)
        return self._next

    def cancel(self, handle: Any) -> None:
        self.cancelled.append(handle)
        if self.pending is not None and self.pending[0] == handle:
            self.pending = None

    def fire(self, timestamp: float) -> None:
        """Deliver the pending callback at `timestamp` ms."""
        assert self.pending is not None, "no callback requested"
        self.time = timestamp
        _, fn = self.pending
        self.pending = None
        fn(timestamp)


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()
