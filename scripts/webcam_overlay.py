#!/usr/bin/env python3
"""
Mirrored webcam feed with a face-anchored annotation box and live speech captions.

Keys: 's' saves a snapshot PNG, 'q' or ESC quits.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

# Allow running without installing the package (repo-local usage).
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC_ROOT = os.path.join(REPO_ROOT, "src")
if SRC_ROOT not in sys.path:
    sys.path.insert(0, SRC_ROOT)

from facecaption.app import OverlayApp  # noqa: E402
from facecaption.capture import open_capture  # noqa: E402
from facecaption.config import OverlayConfig  # noqa: E402
from facecaption.detector import MediaPipeFaceDetector  # noqa: E402
from facecaption.errors import CaptureError, DetectorUnavailableError  # noqa: E402
from facecaption.logging_setup import setup_logging  # noqa: E402
from facecaption.recognizer import VoskSpeechRecognizer  # noqa: E402

logger = logging.getLogger("facecaption.webcam_overlay")


def build_config(args: argparse.Namespace) -> OverlayConfig:
    return OverlayConfig(
        camera=args.camera,
        width=args.width,
        height=args.height,
        offset_percent=args.offset,
        face_model_path=args.face_model,
        silence_timeout_s=args.silence,
        clear_timeout_s=args.clear,
        max_lines=args.max_lines,
        captions_enabled=not args.no_captions,
        vosk_model_path=args.vosk_model,
        vosk_lang=args.lang,
        audio_device=args.audio_device,
        snapshot_dir=args.snapshot_dir,
    )


def main() -> int:
    ap = argparse.ArgumentParser(description="Face-anchored overlay with live speech captions.")
    ap.add_argument("--camera", type=int, default=0, help="Camera index (default: 0)")
    ap.add_argument("--width", type=int, default=1280, help="Capture width (best effort)")
    ap.add_argument("--height", type=int, default=720, help="Capture height (best effort)")
    ap.add_argument("--offset", type=float, default=2.0, help="Gap between face and box, in percent of width")
    ap.add_argument(
        "--face-model",
        default="models/face_landmarker.task",
        help="Path to MediaPipe Tasks face model (auto-downloaded if missing)",
    )
    ap.add_argument("--silence", type=float, default=1.5, help="Seconds of silence before a caption is finalized")
    ap.add_argument("--clear", type=float, default=1.0, help="Seconds a finalized caption stays on screen")
    ap.add_argument("--max-lines", type=int, default=5, help="Caption lines before the box is cleared early")
    ap.add_argument("--no-captions", action="store_true", help="Disable speech recognition")
    ap.add_argument("--vosk-model", default=None, help="Path to a Vosk model directory")
    ap.add_argument("--lang", default="en-us", help="Vosk model language when no path is given")
    ap.add_argument("--audio-device", type=int, default=None, help="sounddevice input device index")
    ap.add_argument("--snapshot-dir", default=".", help="Where 's' writes snapshots")
    ap.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING... (default: $LOG_LEVEL or INFO)")
    args = ap.parse_args()

    setup_logging(args.log_level)
    config = build_config(args)

    try:
        detector = MediaPipeFaceDetector(
            max_num_faces=1,
            min_detection_confidence=config.min_detection_confidence,
            min_tracking_confidence=config.min_tracking_confidence,
            tasks_model_path=config.face_model_path,
        )
    except DetectorUnavailableError as e:
        logger.error("Face detector unavailable, not starting the camera: %s", e)
        return 1

    recognizer = None
    if config.captions_enabled:
        recognizer = VoskSpeechRecognizer(
            model_path=config.vosk_model_path,
            lang=config.vosk_lang,
            sample_rate=config.sample_rate,
            device=config.audio_device,
        )

    with detector:
        try:
            source = open_capture(config.camera, config.width, config.height)
        except CaptureError as e:
            logger.error("%s", e)
            return 1
        with source:
            return OverlayApp(config, detector, recognizer).run(source)


if __name__ == "__main__":
    raise SystemExit(main())
