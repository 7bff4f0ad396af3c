from __future__ import annotations


class FaceCaptionError(Exception):
    """Base class for every error raised by this package."""


class DetectorUnavailableError(FaceCaptionError):
    """The face landmark model could not be loaded or initialized."""


class CaptureError(FaceCaptionError):
    """The camera could not be opened or stopped delivering frames."""


class RecognitionUnavailableError(FaceCaptionError):
    """Speech recognition is not available on this machine (missing engine, model or audio input)."""
