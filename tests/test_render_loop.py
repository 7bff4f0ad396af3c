"""
Tests for facecaption.render_loop.RenderLoop.
"""

import numpy as np
import pytest

from facecaption.display import OverlayView
from facecaption.render_loop import RenderLoop

from conftest import FakeDetector, face

FRAME = np.zeros((72, 128, 3), dtype=np.uint8)


class TestRenderLoop:
    def test_detects_once_per_timestamp(self):
        detector = FakeDetector([[face((0.4, 0.2))], [face((0.5, 0.3))]])
        loop = RenderLoop(detector, OverlayView())
        loop.step(FRAME, 10)
        loop.step(FRAME, 10)
        loop.step(FRAME, 10)
        loop.step(FRAME, 20)
        assert detector.calls == [10, 20]
        assert loop.last_timestamp_ms == 20

    def test_repeated_timestamp_reuses_position(self):
        detector = FakeDetector([[face((0.4, 0.2))]])
        view = OverlayView()
        loop = RenderLoop(detector, view)
        first = loop.step(FRAME, 5)
        second = loop.step(FRAME, 5)
        assert first == second
        assert view.visible

    def test_shows_overlay_at_computed_position(self):
        view = OverlayView()
        loop = RenderLoop(FakeDetector([[face((0.4, 0.2), (0.6, 0.5))]]), view, offset_percent=2.0)
        pos = loop.step(FRAME, 1)
        assert view.position == pos
        assert pos.left_percent == pytest.approx(62.0)
        assert pos.top_percent == pytest.approx(20.0)

    def test_no_face_hides_overlay(self):
        view = OverlayView()
        loop = RenderLoop(FakeDetector([[face((0.4, 0.2))], []]), view)
        loop.step(FRAME, 1)
        assert view.visible
        assert loop.step(FRAME, 2) is None
        assert not view.visible

    def test_only_first_face_is_used(self):
        view = OverlayView()
        loop = RenderLoop(FakeDetector([[face((0.1, 0.1)), face((0.9, 0.9))]]), view)
        pos = loop.step(FRAME, 1)
        assert pos.left_percent == pytest.approx(92.0)
