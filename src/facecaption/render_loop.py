from __future__ import annotations

from typing import List, Optional

from .detector import FaceDetector
from .display import OverlayView
from .positioner import DEFAULT_OFFSET_PERCENT, compute_position
from .types import LandmarkSet, OverlayPosition


class RenderLoop:
    """
    Per-frame driver between the detector and the overlay view.

    The detector runs at most once per distinct frame timestamp; a repeated
    timestamp reuses the previous detection.
    """

    def __init__(self, detector: FaceDetector, view: OverlayView, offset_percent: float = DEFAULT_OFFSET_PERCENT) -> None:
        self._detector = detector
        self._view = view
        self._offset_percent = offset_percent
        self._last_timestamp_ms: Optional[int] = None
        self._faces: List[LandmarkSet] = []

    @property
    def last_timestamp_ms(self) -> Optional[int]:
        return self._last_timestamp_ms

    def step(self, frame_bgr, timestamp_ms: int) -> Optional[OverlayPosition]:
        if timestamp_ms != self._last_timestamp_ms:
            self._last_timestamp_ms = timestamp_ms
            self._faces = self._detector.detect(frame_bgr, timestamp_ms)

        # Configured for a single face; any extra are ignored.
        position = compute_position(self._faces[0], self._offset_percent) if self._faces else None
        if position is None:
            self._view.hide()
        else:
            self._view.show_at(position)
        return position
