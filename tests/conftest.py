"""Shared fixtures: a hand-driven clock and a scripted face detector."""

from typing import List, Sequence

import pytest

from facecaption.detector import FaceDetector
from facecaption.timers import Scheduler
from facecaption.types import LandmarkPoint


class ManualClock:
    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeDetector(FaceDetector):
    """Returns the next scripted result on each call and records timestamps."""

    def __init__(self, results: Sequence[List[List[LandmarkPoint]]] = ()):
        self._results = list(results)
        self.calls: List[int] = []

    def detect(self, frame_bgr, timestamp_ms):
        self.calls.append(timestamp_ms)
        if not self._results:
            return []
        return self._results.pop(0)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def scheduler(clock):
    return Scheduler(clock=clock)


def face(*points):
    return [LandmarkPoint(x, y) for x, y in points]
