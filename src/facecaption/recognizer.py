from __future__ import annotations

import json
import logging
import queue
from typing import Iterable, List, Optional, Sequence, Union

from .errors import RecognitionUnavailableError
from .types import HypothesisEvent, RecognizerError, SessionEnded

logger = logging.getLogger(__name__)

RecognizerEvent = Union[HypothesisEvent, RecognizerError, SessionEnded]


class SpeechRecognizer:
    """
    Continuous speech-to-text as a polled event source.

    `poll()` is called from the main loop and returns whatever events became
    available since the last call, in order. Implementations never call back
    into the caller from another thread.
    """

    def start(self) -> None:
        raise NotImplementedError

    def restart(self) -> None:
        self.close()
        self.start()

    def poll(self) -> List[RecognizerEvent]:
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self) -> "SpeechRecognizer":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class ScriptedRecognizer(SpeechRecognizer):
    """Replays fixed batches of events, one batch per `poll()`."""

    def __init__(self, batches: Iterable[Sequence[RecognizerEvent]]) -> None:
        self._batches = [list(b) for b in batches]
        self.started = 0
        self.closed = 0

    def start(self) -> None:
        self.started += 1

    def close(self) -> None:
        self.closed += 1

    def poll(self) -> List[RecognizerEvent]:
        if not self._batches:
            return []
        return self._batches.pop(0)


class SegmentTracker:
    """
    Keeps the ordered segment list a streaming decoder builds up.

    Partial results overwrite the trailing uncommitted segment; a final result
    commits it and opens a new one.
    """

    def __init__(self) -> None:
        self._committed: List[str] = []
        self._interim: str = ""

    def update_partial(self, text: str) -> bool:
        text = text.strip()
        if text == self._interim:
            return False
        self._interim = text
        return True

    def commit(self, text: str) -> bool:
        """Returns whether the visible segment list changed."""
        text = text.strip()
        previous = self._interim
        self._interim = ""
        if not text:
            return bool(previous)
        self._committed.append(text + " ")
        return text != previous

    def segments(self) -> List[str]:
        out = list(self._committed)
        if self._interim:
            out.append(self._interim + " ")
        return out

    def reset(self) -> None:
        self._committed = []
        self._interim = ""


class VoskSpeechRecognizer(SpeechRecognizer):
    """
    Vosk streaming recognizer fed from a sounddevice microphone stream.

    The audio callback runs on the PortAudio thread and only queues raw PCM;
    decoding happens in `poll()` on the caller's thread.
    """

    def __init__(
        self,
        model_path: Optional[str] = None,
        lang: str = "en-us",
        sample_rate: int = 16000,
        device: Optional[int] = None,
        blocksize: int = 8000,
    ) -> None:
        self.model_path = model_path
        self.lang = lang
        self.sample_rate = sample_rate
        self.device = device
        self.blocksize = blocksize

        self._model = None
        self._recognizer = None
        self._stream = None
        self._audio: "queue.Queue[bytes]" = queue.Queue()
        self._status: "queue.Queue[str]" = queue.Queue()
        self._tracker = SegmentTracker()

    def _load_model(self):
        try:
            from vosk import Model, SetLogLevel  # type: ignore
        except ImportError as e:
            raise RecognitionUnavailableError("The `vosk` package is not installed.") from e

        SetLogLevel(-1)
        if self._model is None:
            try:
                if self.model_path:
                    logger.info("Loading Vosk model from %s", self.model_path)
                    self._model = Model(self.model_path)
                else:
                    logger.info("Loading Vosk model for language %s", self.lang)
                    self._model = Model(lang=self.lang)
            except Exception as e:
                raise RecognitionUnavailableError(f"Could not load Vosk model: {e}") from e
        return self._model

    def start(self) -> None:
        if self._stream is not None:
            return

        model = self._load_model()
        from vosk import KaldiRecognizer  # type: ignore

        try:
            import sounddevice as sd
        except (ImportError, OSError) as e:
            raise RecognitionUnavailableError(f"Audio input is unavailable: {e}") from e

        self._recognizer = KaldiRecognizer(model, self.sample_rate)
        self._tracker.reset()

        try:
            self._stream = sd.RawInputStream(
                samplerate=self.sample_rate,
                blocksize=self.blocksize,
                device=self.device,
                dtype="int16",
                channels=1,
                callback=self._audio_callback,
            )
            self._stream.start()
        except Exception as e:
            self._stream = None
            raise RecognitionUnavailableError(f"Could not open microphone: {e}") from e
        logger.info("Speech recognition started (%d Hz)", self.sample_rate)

    def close(self) -> None:
        if self._stream is not None:
            try:
                self._stream.stop()
                self._stream.close()
            finally:
                self._stream = None
        self._recognizer = None
        while not self._audio.empty():
            self._audio.get_nowait()

    def _audio_callback(self, indata, frames, time_info, status) -> None:
        if status:
            self._status.put(str(status))
        self._audio.put(bytes(indata))

    def poll(self) -> List[RecognizerEvent]:
        events: List[RecognizerEvent] = []

        while not self._status.empty():
            events.append(RecognizerError(self._status.get_nowait()))

        if self._recognizer is None:
            return events

        while True:
            try:
                chunk = self._audio.get_nowait()
            except queue.Empty:
                break

            if self._recognizer.AcceptWaveform(chunk):
                result = json.loads(self._recognizer.Result())
                changed = self._tracker.commit(result.get("text", ""))
            else:
                partial = json.loads(self._recognizer.PartialResult())
                changed = self._tracker.update_partial(partial.get("partial", ""))

            if changed:
                events.append(HypothesisEvent(self._tracker.segments()))

        if self._stream is not None and not self._stream.active:
            events.append(SessionEnded())

        return events
