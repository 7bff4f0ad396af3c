from .positioner import compute_position
from .transcript import TranscriptBuffer
from .types import LandmarkPoint, OverlayPosition

__all__ = ["compute_position", "TranscriptBuffer", "LandmarkPoint", "OverlayPosition"]
