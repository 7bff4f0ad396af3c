from __future__ import annotations

from typing import Iterable, Optional

from .types import BoundingBox, LandmarkPoint


def bbox_from_landmarks(points: Iterable[LandmarkPoint]) -> Optional[BoundingBox]:
    """Single-pass min/max reduction. Returns None for an empty input."""
    min_x = min_y = float("inf")
    max_x = max_y = float("-inf")
    seen = False
    for p in points:
        seen = True
        if p.x < min_x:
            min_x = p.x
        if p.x > max_x:
            max_x = p.x
        if p.y < min_y:
            min_y = p.y
        if p.y > max_y:
            max_y = p.y
    if not seen:
        return None
    return BoundingBox(min_x=min_x, min_y=min_y, max_x=max_x, max_y=max_y)


def percent_to_px(percent: float, extent: int) -> int:
    return int(round(percent / 100.0 * extent))
