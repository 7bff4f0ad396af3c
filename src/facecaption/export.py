from __future__ import annotations

import logging
import os
import time
from typing import Optional, Sequence

import cv2
import numpy as np

from .display import LABEL_SCALE, PADDING_PX, OverlayView
from .drawing import ACCENT_BGR, draw_rounded_box, draw_text

logger = logging.getLogger(__name__)


SNAPSHOT_LINES = ("ID: 8472-A", "STATUS: TRACKING", "THREAT: LOW")


def compose_snapshot(frame_bgr, view: OverlayView, lines: Sequence[str] = SNAPSHOT_LINES, mirror: bool = True) -> np.ndarray:
    """
    Composite the current camera frame and the overlay box into one RGBA image.

    `frame_bgr` is the raw camera frame; it is flipped so the result matches
    what is on screen. The box uses the view's current anchor and size and is
    omitted when the view is hidden. Output size equals the source frame size.
    """
    canvas = cv2.flip(frame_bgr, 1) if mirror else frame_bgr.copy()
    canvas = cv2.cvtColor(canvas, cv2.COLOR_BGR2BGRA)

    h, w = canvas.shape[:2]
    rect = view.box_rect(w, h)
    if rect is not None:
        x, y, bw, bh = rect
        # Tall enough for the fixed lines even when the live caption is empty.
        rect = (x, y, bw, max(bh, 70 + len(lines) * 25))
        draw_rounded_box(canvas, rect)
        draw_text(canvas, view.label, (x + PADDING_PX, y + 40), ACCENT_BGR + (255,), LABEL_SCALE, 2)
        for i, line in enumerate(lines):
            draw_text(canvas, line, (x + PADDING_PX, y + 70 + i * 25), (255, 255, 255, 255), 0.6, 1)

    return cv2.cvtColor(canvas, cv2.COLOR_BGRA2RGBA)


def save_snapshot(frame_bgr, view: OverlayView, out_dir: str = ".", now_ms: Optional[int] = None, mirror: bool = True) -> str:
    """Write the composite as `face-stalker-<epoch ms>.png` into `out_dir` and return its path."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    os.makedirs(out_dir, exist_ok=True)
    path = os.path.join(out_dir, f"face-stalker-{now_ms}.png")

    rgba = compose_snapshot(frame_bgr, view, mirror=mirror)
    ok = cv2.imwrite(path, cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA))
    if not ok:
        raise OSError(f"Could not write snapshot: {path}")
    logger.info("Saved snapshot %s", path)
    return path
