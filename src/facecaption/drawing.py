from __future__ import annotations

from typing import Tuple

import cv2
import numpy as np

from .types import Rect2


FONT = cv2.FONT_HERSHEY_SIMPLEX
ACCENT_BGR = (157, 255, 0)  # #00ff9d


def text_width(text: str, scale: float = 0.6, thickness: int = 1) -> int:
    return cv2.getTextSize(text, FONT, scale, thickness)[0][0]


def draw_text(frame, text: str, org: Tuple[int, int], color=(255, 255, 255), scale=0.6, thickness=2):
    cv2.putText(frame, text, org, FONT, scale, (0, 0, 0, 255), thickness + 2, cv2.LINE_AA)
    cv2.putText(frame, text, org, FONT, scale, color, thickness, cv2.LINE_AA)
    return frame


def _rounded_mask(w: int, h: int, radius: int) -> np.ndarray:
    mask = np.zeros((h, w), dtype=np.uint8)
    r = max(0, min(radius, w // 2, h // 2))
    cv2.rectangle(mask, (r, 0), (w - 1 - r, h - 1), 255, -1)
    cv2.rectangle(mask, (0, r), (w - 1, h - 1 - r), 255, -1)
    for cx, cy in ((r, r), (w - 1 - r, r), (r, h - 1 - r), (w - 1 - r, h - 1 - r)):
        cv2.circle(mask, (cx, cy), r, 255, -1, cv2.LINE_AA)
    return mask


def draw_rounded_box(
    frame,
    rect: Rect2,
    fill_bgr=(0, 0, 0),
    fill_alpha: float = 0.8,
    border_bgr=ACCENT_BGR,
    border_thickness: int = 2,
    radius: int = 16,
):
    """Translucent rounded rectangle with a solid border, clipped to the frame."""
    x, y, w, h = rect
    fh, fw = frame.shape[:2]
    x0, y0 = max(0, x), max(0, y)
    x1, y1 = min(fw, x + w), min(fh, y + h)
    if x1 <= x0 or y1 <= y0:
        return frame

    mask = _rounded_mask(w, h, radius)
    border = np.zeros_like(mask)
    cv2.drawContours(
        border,
        cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)[0],
        -1,
        255,
        border_thickness,
    )

    mask = mask[y0 - y : y1 - y, x0 - x : x1 - x]
    border = border[y0 - y : y1 - y, x0 - x : x1 - x]

    roi = frame[y0:y1, x0:x1]
    channels = roi.shape[2]
    fill = np.zeros_like(roi)
    fill[:] = tuple(fill_bgr)[:channels] + (255,) * max(0, channels - 3)
    a = (mask.astype(np.float32) / 255.0 * fill_alpha)[..., None]
    blended = roi.astype(np.float32) * (1.0 - a) + fill.astype(np.float32) * a
    roi[:] = blended.astype(frame.dtype)

    border_color = tuple(border_bgr)[:channels] + (255,) * max(0, channels - 3)
    roi[border > 0] = border_color
    return frame
