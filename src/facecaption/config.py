from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class OverlayConfig:
    """All tunables of the overlay app. Scripts build one from their CLI flags."""

    # Capture
    camera: int = 0
    width: int = 1280
    height: int = 720

    # Face overlay
    offset_percent: float = 2.0
    face_model_path: str = "models/face_landmarker.task"
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5

    # Caption
    silence_timeout_s: float = 1.5
    clear_timeout_s: float = 1.0
    max_lines: int = 5
    line_height_px: int = 24
    caption_width_px: int = 360

    # Speech recognition
    captions_enabled: bool = True
    vosk_model_path: Optional[str] = None  # None lets vosk fetch the model for vosk_lang
    vosk_lang: str = "en-us"
    sample_rate: int = 16000
    audio_device: Optional[int] = None

    # Export
    snapshot_dir: str = "."
