"""
Tests for capture timestamps, model asset lookup, landmark conversion and logging setup.
"""

import logging
from types import SimpleNamespace

import cv2
import numpy as np
import pytest

import facecaption.model_assets as assets
from facecaption.capture import FrameSource
from facecaption.detector import _to_landmark_set
from facecaption.errors import DetectorUnavailableError
from facecaption.logging_setup import setup_logging
from facecaption.model_assets import ensure_face_landmarker_task
from facecaption.types import LandmarkPoint


class _FakeCap:
    def __init__(self, frames, pos_ms):
        self._frames = list(frames)
        self._pos_ms = pos_ms
        self.released = False

    def read(self):
        if not self._frames:
            return False, None
        return True, self._frames.pop(0)

    def get(self, prop):
        assert prop == cv2.CAP_PROP_POS_MSEC
        return self._pos_ms

    def release(self):
        self.released = True


class TestFrameSource:
    def test_uses_backend_position(self):
        frame = np.zeros((2, 2, 3), dtype=np.uint8)
        with FrameSource(_FakeCap([frame], pos_ms=1234.7)) as src:
            ok, got, ts = src.read()
        assert ok and got is frame
        assert ts == 1234

    def test_falls_back_to_monotonic_time(self):
        src = FrameSource(_FakeCap([np.zeros((2, 2, 3), dtype=np.uint8)], pos_ms=0.0))
        ok, _, ts = src.read()
        assert ok
        assert ts > 0

    def test_end_of_stream(self):
        cap = _FakeCap([], pos_ms=0.0)
        with FrameSource(cap) as src:
            assert src.read() == (False, None, -1)
        assert cap.released


class TestModelAssets:
    def test_existing_model_is_returned_untouched(self, tmp_path):
        model = tmp_path / "face_landmarker.task"
        model.write_bytes(b"model")
        assert ensure_face_landmarker_task(str(model)) == str(model)
        assert model.read_bytes() == b"model"


class TestLandmarkConversion:
    def test_drops_depth_and_keeps_order(self):
        raw = [SimpleNamespace(x=0.1, y=0.2, z=-0.3), SimpleNamespace(x=0.4, y=0.5, z=0.0)]
        assert _to_landmark_set(raw) == [LandmarkPoint(0.1, 0.2), LandmarkPoint(0.4, 0.5)]


class TestLogging:
    def test_level_from_argument(self):
        logger = setup_logging("debug")
        assert logger.name == "facecaption"
        assert logger.level == logging.DEBUG

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        assert setup_logging().level == logging.WARNING

    @pytest.mark.parametrize("level", ["nonsense", "INFO"])
    def test_unknown_level_falls_back_to_info(self, level):
        assert setup_logging(level).level == logging.INFO


class TestModelDownloadFailure:
    def test_failed_download_raises_detector_unavailable(self, tmp_path, monkeypatch):
        def fail(url, dest, timeout_s):
            with open(dest, "wb") as f:
                f.write(b"partial")
            raise OSError("offline")

        monkeypatch.setattr(assets, "_fetch_urllib", fail)
        monkeypatch.setattr(assets, "_fetch_curl", fail)
        target = tmp_path / "models" / "face_landmarker.task"

        with pytest.raises(DetectorUnavailableError, match="offline"):
            assets.ensure_face_landmarker_task(str(target))
        assert not target.exists()
