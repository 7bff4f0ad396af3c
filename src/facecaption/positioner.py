from __future__ import annotations

from typing import Optional

from .types import LandmarkSet, OverlayPosition
from .utils import bbox_from_landmarks


DEFAULT_OFFSET_PERCENT = 2.0


def compute_position(landmarks: LandmarkSet, offset_percent: float = DEFAULT_OFFSET_PERCENT) -> Optional[OverlayPosition]:
    """
    Anchor the overlay just outside the visual right edge of the face, top-aligned.

    Landmarks come in unmirrored source coordinates while the frame is shown
    mirrored, so the visual right edge of the face is the source-frame `min_x`.
    Returns None (overlay hidden) when no landmarks were detected.
    """

    bbox = bbox_from_landmarks(landmarks)
    if bbox is None:
        return None

    right_edge_percent = (1.0 - bbox.min_x) * 100.0
    top_percent = bbox.min_y * 100.0
    return OverlayPosition(left_percent=right_edge_percent + offset_percent, top_percent=top_percent)
