from __future__ import annotations

import logging
from typing import Optional

import cv2

from .capture import FrameSource
from .config import OverlayConfig
from .detector import FaceDetector
from .display import OverlayView
from .errors import RecognitionUnavailableError
from .export import save_snapshot
from .recognizer import SpeechRecognizer
from .render_loop import RenderLoop
from .timers import Scheduler
from .transcript import TranscriptBuffer

logger = logging.getLogger(__name__)

WINDOW_TITLE = "facecaption"


class OverlayApp:
    """
    Wires capture, detection, captions and display into one cooperative loop.

    Each iteration: read a frame, run the render loop, drain recognizer events
    into the transcript buffer, fire due timers, draw, handle keys.
    """

    def __init__(
        self,
        config: OverlayConfig,
        detector: FaceDetector,
        recognizer: Optional[SpeechRecognizer] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self.config = config
        self.scheduler = scheduler or Scheduler()
        self.view = OverlayView(line_height_px=config.line_height_px, caption_width_px=config.caption_width_px)
        self.render_loop = RenderLoop(detector, self.view, offset_percent=config.offset_percent)
        self.recognizer = recognizer
        self.transcript = TranscriptBuffer(
            self.scheduler,
            on_caption=self.view.set_caption,
            line_counter=self.view.line_count,
            restart=self._restart_recognizer,
            silence_timeout_s=config.silence_timeout_s,
            clear_timeout_s=config.clear_timeout_s,
            max_lines=config.max_lines,
        )

    def start_captions(self) -> None:
        if self.recognizer is None:
            return
        try:
            self.recognizer.start()
        except RecognitionUnavailableError as e:
            logger.warning("Captions disabled: %s", e)
            self.recognizer = None

    def _restart_recognizer(self) -> None:
        if self.recognizer is None:
            return
        try:
            self.recognizer.restart()
        except RecognitionUnavailableError as e:
            logger.warning("Could not restart speech recognition, captions disabled: %s", e)
            self.recognizer = None

    def pump_captions(self) -> None:
        if self.recognizer is not None:
            for event in self.recognizer.poll():
                self.transcript.handle(event)
        self.scheduler.run_due()

    def process_frame(self, frame_bgr, timestamp_ms: int):
        """Advance one display frame and return the image to show."""
        self.render_loop.step(frame_bgr, timestamp_ms)
        self.pump_captions()
        return self.view.draw(cv2.flip(frame_bgr, 1))

    def snapshot(self, frame_bgr) -> str:
        return save_snapshot(frame_bgr, self.view, self.config.snapshot_dir)

    def run(self, source: FrameSource) -> int:
        self.start_captions()
        logger.info("Running. Press 's' for a snapshot, 'q' or ESC to quit.")
        try:
            while True:
                ok, frame, timestamp_ms = source.read()
                if not ok:
                    logger.warning("Camera stopped delivering frames")
                    break

                shown = self.process_frame(frame, timestamp_ms)
                cv2.imshow(WINDOW_TITLE, shown)

                key = cv2.waitKey(1) & 0xFF
                if key in (ord("q"), 27):
                    break
                if key == ord("s"):
                    try:
                        self.snapshot(frame)
                    except OSError as e:
                        logger.error("Snapshot failed: %s", e)
        finally:
            if self.recognizer is not None:
                self.recognizer.close()
            cv2.destroyAllWindows()
        return 0
