from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence, Tuple


Rect2 = Tuple[int, int, int, int]  # (x, y, width, height) in pixels


@dataclass(frozen=True)
class LandmarkPoint:
    """A single face landmark in normalized, unmirrored source-frame coordinates."""

    x: float
    y: float


LandmarkSet = Sequence[LandmarkPoint]


@dataclass(frozen=True)
class BoundingBox:
    """Normalized min/max extent of one landmark set."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float


@dataclass(frozen=True)
class OverlayPosition:
    """Overlay anchor in mirrored screen space, as percentages of the frame."""

    left_percent: float
    top_percent: float


@dataclass(frozen=True)
class HypothesisEvent:
    """Every segment the recognizer holds, in order; a segment's index is its position."""

    segments: List[str]


@dataclass(frozen=True)
class RecognizerError:
    message: str


@dataclass(frozen=True)
class SessionEnded:
    pass


class CaptionPhase(Enum):
    IDLE = "idle"
    LIVE = "live"
    FINALIZING = "finalizing"
