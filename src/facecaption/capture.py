from __future__ import annotations

import logging
import platform
import time
from typing import Optional, Tuple

import cv2

from .errors import CaptureError

logger = logging.getLogger(__name__)


class FrameSource:
    """
    Camera frames with a playback timestamp.

    Uses the capture's own position when the backend reports one, otherwise the
    monotonic read time, so repeated reads of the same decoded frame keep the
    same timestamp only when the backend says so.
    """

    def __init__(self, cap) -> None:
        self._cap = cap

    def read(self) -> Tuple[bool, Optional[object], int]:
        ok, frame = self._cap.read()
        if not ok:
            return False, None, -1
        pos_ms = self._cap.get(cv2.CAP_PROP_POS_MSEC)
        if pos_ms and pos_ms > 0:
            return True, frame, int(pos_ms)
        return True, frame, int(time.monotonic() * 1000)

    def release(self) -> None:
        self._cap.release()

    def __enter__(self) -> "FrameSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


def open_capture(camera: int = 0, width: int = 1280, height: int = 720) -> FrameSource:
    """Open a camera at the requested resolution (best effort). No retry on failure."""
    if platform.system() == "Darwin":
        cap = cv2.VideoCapture(camera, cv2.CAP_AVFOUNDATION)
    else:
        cap = cv2.VideoCapture(camera)
    if not cap.isOpened():
        raise CaptureError(
            f"Could not open camera index {camera}. "
            "On macOS: System Settings -> Privacy & Security -> Camera -> allow your terminal."
        )

    cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
    logger.info(
        "Camera %d opened at %dx%d",
        camera,
        int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
        int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
    )
    return FrameSource(cap)
