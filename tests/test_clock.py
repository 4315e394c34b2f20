"""
Tests for the frame scheduler.

Tests cover:
- Throttling below the target frame rate (dropped frames draw nothing)
- Phase-locked admission
- Exact simulation-time accumulation per group
- Self-resubmission, teardown and reinstall
"""
import math

import numpy as np
import pytest

from wobblewall.model.clock import FrameScheduler, GroupClock, frame_interval
from wobblewall.model.settings import AppSettings, CurveGroupSettings

VIEWPORT = (1000, 500)


def make_settings(fps=50, left_speed=1.0, right_speed=2.0, split=True):
    return AppSettings(
        left=CurveGroupSettings(speed=left_speed, circle_count=2),
        right=CurveGroupSettings(speed=right_speed, circle_count=3),
        target_fps=fps,
        split_view=split,
    )


@pytest.fixture
def pointer():
    return {"pos": (0.0, 0.0)}


@pytest.fixture
def scheduler(host, surface, pointer):
    return FrameScheduler(host, surface, lambda: VIEWPORT, lambda: pointer["pos"])


class TestFrameInterval:

    def test_interval(self):
        assert frame_interval(50) == pytest.approx(20.0)
        assert frame_interval(120) == pytest.approx(1000 / 120)

    def test_interval_clamps_fps(self):
        assert frame_interval(0) == pytest.approx(1000.0)
        assert frame_interval(500) == pytest.approx(1000 / 120)

    def test_group_clock(self):
        clock = GroupClock()
        clock.advance(0.5, 2.0)
        clock.advance(0.25, 0.0)
        assert clock.simulation_time == pytest.approx(1.0)


class TestLifecycle:

    def test_install_requests_a_callback(self, scheduler, host):
        scheduler.install(make_settings())
        assert scheduler.is_scheduled
        assert host.requests == 1

    def test_callback_resubmits_even_when_dropped(self, scheduler, host, surface):
        scheduler.install(make_settings(fps=50))
        host.fire(5.0)
        assert host.pending is not None
        assert host.requests == 2
        assert surface.ops == []

    def test_teardown_cancels_pending_request(self, scheduler, host):
        scheduler.install(make_settings())
        scheduler.teardown()
        assert not scheduler.is_scheduled
        assert host.pending is None
        assert host.cancelled == [1]

    def test_advance_without_settings_does_nothing(self, scheduler, surface):
        assert scheduler.advance(1000.0) is False
        assert surface.ops == []


class TestThrottle:

    def test_frames_inside_interval_never_draw_or_advance(self, scheduler, host, surface):
        scheduler.install(make_settings(fps=50))
        for ts in (1.0, 5.0, 10.0, 15.0, 19.9):
            host.fire(ts)
        assert surface.ops == []
        assert scheduler.simulation_time("left") == 0.0
        assert scheduler.simulation_time("right") == 0.0
        assert scheduler.frames_admitted == 0
        assert scheduler.frames_dropped == 5

    def test_admitted_frame_redraws_from_blank(self, scheduler, host, surface):
        scheduler.install(make_settings(fps=50))
        host.fire(20.0)
        assert surface.ops[0] == ("resize_to", 1000, 500)
        assert surface.count("resize_to") == 1
        # two curves on the left, three on the right
        assert surface.count("stroke") == 5

    def test_phase_locked_admission(self, scheduler, host):
        scheduler.install(make_settings(fps=50))
        host.fire(25.0)
        # last admitted = 25 - (25 % 20) = 20, so 39 is early and 40 is due
        host.fire(39.0)
        assert scheduler.frames_admitted == 1
        host.fire(40.0)
        assert scheduler.frames_admitted == 2

    def test_single_group_layout(self, scheduler, host, surface):
        scheduler.install(make_settings(split=False))
        host.fire(100.0)
        assert surface.count("stroke") == 2
        assert scheduler.simulation_time("right") == 0.0


class TestSimulationTime:

    def test_accumulates_wall_delta_times_speed(self, scheduler, host):
        host.time = 0.0
        scheduler.install(make_settings(fps=50, left_speed=1.5, right_speed=0.5))

        admitted = []
        for ts in (20.0, 33.0, 41.0, 60.0, 61.0, 100.0, 250.0):
            before = scheduler.frames_admitted
            host.fire(ts)
            if scheduler.frames_admitted > before:
                admitted.append(ts)

        # wall time elapsed from install to the last admitted frame
        elapsed_s = admitted[-1] / 1000.0
        assert scheduler.simulation_time("left") == pytest.approx(elapsed_s * 1.5)
        assert scheduler.simulation_time("right") == pytest.approx(elapsed_s * 0.5)

    def test_time_is_non_decreasing(self, scheduler, host):
        scheduler.install(make_settings(fps=30))
        previous = 0.0
        for ts in range(0, 2000, 7):
            host.fire(float(ts))
            current = scheduler.simulation_time("left")
            assert current >= previous
            previous = current

    def test_zero_speed_freezes_a_group(self, scheduler, host):
        scheduler.install(make_settings(left_speed=0.0))
        host.fire(100.0)
        host.fire(200.0)
        assert scheduler.simulation_time("left") == 0.0
        assert scheduler.simulation_time("right") == pytest.approx(0.4)

    def test_reinstall_keeps_time_and_rebases_wall_clock(self, scheduler, host):
        scheduler.install(make_settings(fps=50, left_speed=1.0))
        host.fire(100.0)
        assert scheduler.simulation_time("left") == pytest.approx(0.1)

        # a settings change at t = 500 ms rebuilds the wall-clock base
        host.time = 500.0
        scheduler.reinstall(make_settings(fps=50, left_speed=2.0))
        assert host.cancelled
        host.fire(520.0)
        assert scheduler.simulation_time("left") == pytest.approx(0.1 + 0.02 * 2.0)

    def test_pointer_sampled_each_admitted_frame(self, scheduler, host, surface, pointer):
        settings = AppSettings(
            left=CurveGroupSettings(circle_count=2, mouse_offset=100.0, wobble_amount=0.0),
            right=CurveGroupSettings(circle_count=2, mouse_offset=100.0, wobble_amount=0.0),
            target_fps=50,
        )
        scheduler.install(settings)

        # on the shared edge of both halves
        pointer["pos"] = (500.0, 250.0)
        host.fire(20.0)
        _, inner_left, _, inner_right = surface.paths()
        shift = 100.0 * 250.0 / math.hypot(250.0, 250.0)
        assert tuple(np.array(inner_left).mean(axis=0)) == pytest.approx((250.0 + shift, 250.0))
        assert tuple(np.array(inner_right).mean(axis=0)) == pytest.approx((750.0 - shift, 250.0))

        surface.clear()
        pointer["pos"] = (250.0, 250.0)
        host.fire(40.0)
        inner_left = surface.paths()[1]
        assert tuple(np.array(inner_left).mean(axis=0)) == pytest.approx((250.0, 250.0))
