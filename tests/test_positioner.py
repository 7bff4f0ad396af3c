"""
Tests for facecaption.positioner and the bounding-box helper.
"""

import pytest

from facecaption.positioner import compute_position
from facecaption.types import BoundingBox, LandmarkPoint
from facecaption.utils import bbox_from_landmarks

from conftest import face


class TestBoundingBox:
    def test_empty_is_none(self):
        assert bbox_from_landmarks([]) is None

    def test_min_max_reduction(self):
        pts = face((0.4, 0.3), (0.6, 0.2), (0.5, 0.7), (0.35, 0.5))
        assert bbox_from_landmarks(pts) == BoundingBox(min_x=0.35, min_y=0.2, max_x=0.6, max_y=0.7)

    def test_accepts_generator(self):
        pts = (LandmarkPoint(x / 10, 0.5) for x in range(1, 4))
        box = bbox_from_landmarks(pts)
        assert box.min_x == pytest.approx(0.1)
        assert box.max_x == pytest.approx(0.3)


class TestComputePosition:
    def test_empty_is_hidden(self):
        assert compute_position([]) is None

    def test_mirrored_right_edge_plus_offset(self):
        """The visual right edge of a mirrored face is the source-frame min x."""
        pos = compute_position(face((0.30, 0.25), (0.50, 0.60)))
        assert pos.left_percent == pytest.approx((1 - 0.30) * 100 + 2)
        assert pos.top_percent == pytest.approx(25.0)

    def test_custom_offset(self):
        pos = compute_position(face((0.5, 0.1)), offset_percent=5.0)
        assert pos.left_percent == pytest.approx(55.0)
        assert pos.top_percent == pytest.approx(10.0)

    def test_point_order_does_not_matter(self):
        pts = face((0.2, 0.9), (0.7, 0.1), (0.4, 0.4))
        assert compute_position(pts) == compute_position(list(reversed(pts)))

    def test_deterministic(self):
        pts = face((0.21, 0.33), (0.42, 0.55))
        assert compute_position(pts) == compute_position(pts)
