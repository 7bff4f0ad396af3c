"""
Tests for the overlay view, drawing helpers and snapshot export.
"""

import os

import cv2
import numpy as np
import pytest

from facecaption.display import OverlayView
from facecaption.drawing import draw_rounded_box
from facecaption.export import compose_snapshot, save_snapshot
from facecaption.types import OverlayPosition


def _frame(w=320, h=180):
    frame = np.zeros((h, w, 3), dtype=np.uint8)
    frame[:, : w // 2] = (255, 0, 0)  # left half blue in source space
    return frame


class TestOverlayView:
    def test_hidden_by_default(self):
        view = OverlayView()
        assert not view.visible
        assert view.box_rect(640, 360) is None

    def test_box_rect_from_percentages(self):
        view = OverlayView()
        view.show_at(OverlayPosition(left_percent=50.0, top_percent=25.0))
        x, y, w, h = view.box_rect(640, 360)
        assert (x, y) == (320, 90)
        assert w > 0 and h > 0

    def test_box_grows_with_caption(self):
        view = OverlayView(caption_width_px=200)
        _, empty_h = view.box_size()
        view.set_caption("a fairly long caption that needs to wrap over more than one line")
        w, h = view.box_size()
        assert h > empty_h
        assert h - empty_h == view.line_count(view.caption) * view.line_height_px

    def test_wrap_respects_width(self):
        view = OverlayView(caption_width_px=120)
        lines = view.wrap("one two three four five six seven eight nine ten")
        assert len(lines) > 1
        assert " ".join(lines) == "one two three four five six seven eight nine ten"

    def test_line_count_empty(self):
        assert OverlayView().line_count("") == 0

    def test_draw_changes_pixels_only_when_visible(self):
        view = OverlayView()
        frame = np.zeros((360, 640, 3), dtype=np.uint8)
        assert not view.draw(frame).any()
        view.show_at(OverlayPosition(10.0, 10.0))
        view.set_caption("Hello world")
        assert view.draw(frame).any()


class TestRoundedBox:
    def test_clipped_to_frame(self):
        frame = np.zeros((50, 50, 3), dtype=np.uint8)
        draw_rounded_box(frame, (40, 40, 100, 100))
        assert frame.shape == (50, 50, 3)

    def test_offscreen_is_noop(self):
        frame = np.zeros((50, 50, 3), dtype=np.uint8)
        draw_rounded_box(frame, (60, 60, 10, 10))
        assert not frame.any()


class TestSnapshot:
    def test_rgba_same_size_as_source(self):
        out = compose_snapshot(_frame(), OverlayView())
        assert out.shape == (180, 320, 4)
        assert out.dtype == np.uint8
        assert (out[..., 3] == 255).all()

    def test_frame_is_mirrored(self):
        out = compose_snapshot(_frame(), OverlayView())
        # Source left half is blue; after mirroring it lands on the right, and RGBA puts blue in channel 2.
        assert out[90, 300, 2] == 255
        assert out[90, 10, 2] == 0

    def test_unmirrored_option(self):
        out = compose_snapshot(_frame(), OverlayView(), mirror=False)
        assert out[90, 10, 2] == 255

    def test_overlay_drawn_at_view_position(self):
        frame = np.zeros((360, 640, 3), dtype=np.uint8)
        view = OverlayView()
        view.show_at(OverlayPosition(50.0, 10.0))
        out = compose_snapshot(frame, view)
        assert out[:36, :, :3].sum() == 0
        assert out[36:, 320:, :3].any()
        assert not out[:, :300, :3].any()

    def test_save_snapshot_writes_png(self, tmp_path):
        path = save_snapshot(_frame(), OverlayView(), str(tmp_path), now_ms=1234)
        assert os.path.basename(path) == "face-stalker-1234.png"
        img = cv2.imread(path, cv2.IMREAD_UNCHANGED)
        assert img.shape == (180, 320, 4)
