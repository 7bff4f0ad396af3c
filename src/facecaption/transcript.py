from __future__ import annotations

import logging
import textwrap
from typing import Callable, FrozenSet, Optional, Sequence

from .timers import ScheduledCallback, Scheduler
from .types import CaptionPhase, HypothesisEvent, RecognizerError, SessionEnded

logger = logging.getLogger(__name__)


QUESTION_WORDS: FrozenSet[str] = frozenset(
    {"who", "what", "where", "when", "why", "how", "is", "are", "do", "does", "can", "could", "would", "will"}
)
TERMINATORS = (".", "?", "!")

DEFAULT_SILENCE_TIMEOUT_S = 1.5
DEFAULT_CLEAR_TIMEOUT_S = 1.0
DEFAULT_MAX_LINES = 5


def wrapped_line_count(text: str, chars_per_line: int = 32) -> int:
    """Rough rendered line count for callers without a display to measure against."""
    if not text:
        return 0
    return len(textwrap.wrap(text, width=chars_per_line)) or 1


def capitalize_first(text: str) -> str:
    if not text:
        return text
    return text[0].upper() + text[1:]


def is_question(text: str) -> bool:
    tokens = text.split(None, 1)
    return bool(tokens) and tokens[0].lower() in QUESTION_WORDS


class TranscriptBuffer:
    """
    Turns a revisable stream of recognizer hypotheses into a stable caption.

    The recognizer hands over its whole segment list on every update. Only the
    segments from `cursor` onward form the current utterance. After a silence
    gap the caption is punctuated; after a further delay it is cleared and the
    cursor moves past the utterance. An utterance that grows past `max_lines`
    is evicted immediately.

    Every handler runs on the owner's thread; timers come from the shared
    `Scheduler` and are pumped by the main loop.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        on_caption: Callable[[str], None],
        line_counter: Callable[[str], int] = wrapped_line_count,
        restart: Optional[Callable[[], None]] = None,
        silence_timeout_s: float = DEFAULT_SILENCE_TIMEOUT_S,
        clear_timeout_s: float = DEFAULT_CLEAR_TIMEOUT_S,
        max_lines: int = DEFAULT_MAX_LINES,
    ) -> None:
        self._on_caption = on_caption
        self._line_counter = line_counter
        self._restart = restart
        self.silence_timeout_s = silence_timeout_s
        self.clear_timeout_s = clear_timeout_s
        self.max_lines = max_lines

        self.cursor = 0
        self.live_text = ""
        self.is_question = False
        self.phase = CaptionPhase.IDLE
        # Segment count seen by the hypothesis that armed the current timers.
        self._pending_count = 0

        self.silence_timer = ScheduledCallback(scheduler, "silence")
        self.clear_timer = ScheduledCallback(scheduler, "clear")

    def handle(self, event) -> None:
        if isinstance(event, HypothesisEvent):
            self.on_hypothesis(event.segments)
        elif isinstance(event, RecognizerError):
            self.on_error(event.message)
        elif isinstance(event, SessionEnded):
            self.on_session_end()
        else:
            raise TypeError(f"Unknown recognizer event: {event!r}")

    def on_hypothesis(self, segments: Sequence[str]) -> None:
        if len(segments) < self.cursor:
            logger.debug("segment list shrank below cursor (%d < %d), resetting", len(segments), self.cursor)
            self.cursor = 0

        raw = "".join(segments[self.cursor :]).strip()
        if not raw:
            # Revised down to nothing: keep whatever is on screen.
            return

        text = capitalize_first(raw)
        self.is_question = is_question(raw)
        self._pending_count = len(segments)
        self._publish(text)
        self.phase = CaptionPhase.LIVE

        self.clear_timer.cancel()
        self.silence_timer.arm(self.silence_timeout_s, self.on_silence_elapsed)

        lines = self._line_counter(text)
        if lines > self.max_lines:
            logger.debug("caption overflow (%d lines > %d), evicting", lines, self.max_lines)
            self.cursor = len(segments)
            self.silence_timer.cancel()
            self._publish("")
            self.phase = CaptionPhase.IDLE

    def on_silence_elapsed(self) -> None:
        if not self.live_text:
            return
        text = self.live_text
        if not text.endswith(TERMINATORS):
            text += "?" if self.is_question else "."
        self._publish(text)
        self.phase = CaptionPhase.FINALIZING
        self.clear_timer.arm(self.clear_timeout_s, self.on_clear_elapsed)

    def on_clear_elapsed(self) -> None:
        self.cursor = max(self.cursor, self._pending_count)
        self._publish("")
        self.phase = CaptionPhase.IDLE

    def on_session_end(self) -> None:
        logger.info("speech recognition session ended, restarting")
        self.cursor = 0
        self._pending_count = 0
        if self._restart is not None:
            self._restart()

    def on_error(self, message: str) -> None:
        logger.error("Speech recognition error: %s", message)

    def _publish(self, text: str) -> None:
        self.live_text = text
        self._on_caption(text)
