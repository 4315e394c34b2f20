"""
Tests for settings persistence in a QSettings INI file.
"""
import json

import pytest
from PySide6.QtCore import QSettings

from wobblewall.app.persistence import SettingsRepository
from wobblewall.config import KEY_LEFT, KEY_RIGHT, KEY_SPLIT_VIEW, KEY_TARGET_FPS
from wobblewall.model.settings import AppSettings, CurveGroupSettings


@pytest.fixture
def ini_path(tmp_path):
    return str(tmp_path / "wobblewall.ini")


@pytest.fixture
def repository(ini_path):
    return SettingsRepository(QSettings(ini_path, QSettings.Format.IniFormat))


class TestSettingsRepository:

    def test_empty_store_gives_defaults(self, repository):
        assert repository.load() == AppSettings()

    def test_round_trip(self, repository, ini_path):
        settings = AppSettings(
            left=CurveGroupSettings(circle_count=5, individual_frequency=True, radius_step=22.0),
            right=CurveGroupSettings(speed=0.25, sphere_mode=True),
            target_fps=30,
            split_view=False,
        )
        assert repository.save(settings) is True

        reopened = SettingsRepository(QSettings(ini_path, QSettings.Format.IniFormat))
        assert reopened.load() == settings

    def test_corrupt_group_falls_back_to_defaults(self, ini_path):
        qs = QSettings(ini_path, QSettings.Format.IniFormat)
        qs.setValue(KEY_LEFT, "{not json")
        qs.sync()

        assert SettingsRepository(qs).load() == AppSettings()

    def test_bad_frame_rate_falls_back_to_defaults(self, ini_path):
        qs = QSettings(ini_path, QSettings.Format.IniFormat)
        qs.setValue(KEY_TARGET_FPS, "fast")
        qs.sync()

        assert SettingsRepository(qs).load() == AppSettings()

    def test_out_of_range_values_are_clamped(self, ini_path):
        qs = QSettings(ini_path, QSettings.Format.IniFormat)
        qs.setValue(KEY_LEFT, '{"circleCount": 80}')
        qs.setValue(KEY_TARGET_FPS, 999)
        qs.sync()

        loaded = SettingsRepository(qs).load()
        assert loaded.left.circle_count == 20
        assert loaded.target_fps == 120

    def test_location(self, repository, ini_path):
        assert repository.location.endswith("wobblewall.ini")

    def test_store_written_by_earlier_releases(self, ini_path):
        qs = QSettings(ini_path, QSettings.Format.IniFormat)
        qs.setValue(KEY_LEFT, '{"circleCount": 4, "sphereMode": true, "radiusStep": 20}')
        qs.setValue(KEY_RIGHT, '{"wobbleAmount": 6, "mouseOffset": 0}')
        qs.setValue(KEY_TARGET_FPS, "24")
        qs.setValue(KEY_SPLIT_VIEW, "false")
        qs.sync()

        loaded = SettingsRepository(qs).load()
        assert loaded == AppSettings.from_dict({
            "leftSettings": {"circleCount": 4, "sphereMode": True, "radiusStep": 20},
            "rightSettings": {"wobbleAmount": 6, "mouseOffset": 0},
            "targetFps": 24,
            "splitView": False,
        })
        assert loaded.left.sphere_mode is True
        assert loaded.split_view is False

    def test_saved_values_match_the_settings_mapping(self, repository, ini_path):
        settings = AppSettings(left=CurveGroupSettings(speed=2.0), target_fps=45)
        repository.save(settings)

        qs = QSettings(ini_path, QSettings.Format.IniFormat)
        data = settings.to_dict()
        assert json.loads(qs.value(KEY_LEFT)) == data["left"]
        assert int(qs.value(KEY_TARGET_FPS)) == data["target_fps"]
