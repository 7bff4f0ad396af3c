from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import cv2

from .errors import DetectorUnavailableError
from .model_assets import ensure_face_landmarker_task
from .types import LandmarkPoint, LandmarkSet

logger = logging.getLogger(__name__)


class FaceDetector:
    """Detects one frame: BGR image + timestamp -> list of landmark sets (one per face)."""

    def detect(self, frame_bgr, timestamp_ms: int) -> List[LandmarkSet]:
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self) -> "FaceDetector":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


@dataclass(frozen=True)
class _SolutionsBackend:
    mp: object
    face_mesh: object


@dataclass(frozen=True)
class _TasksBackend:
    mp: object
    landmarker: object


def _try_create_solutions_backend(
    max_num_faces: int,
    min_detection_confidence: float,
    min_tracking_confidence: float,
) -> Optional[_SolutionsBackend]:
    import mediapipe as mp  # type: ignore

    if not hasattr(mp, "solutions"):
        return None
    face_mesh = mp.solutions.face_mesh.FaceMesh(
        static_image_mode=False,
        max_num_faces=max_num_faces,
        refine_landmarks=False,
        min_detection_confidence=min_detection_confidence,
        min_tracking_confidence=min_tracking_confidence,
    )
    return _SolutionsBackend(mp=mp, face_mesh=face_mesh)


def _try_create_tasks_backend(
    model_path: str,
    max_num_faces: int,
    min_detection_confidence: float,
    min_tracking_confidence: float,
) -> _TasksBackend:
    """
    Fallback for MediaPipe distributions that do not include `mp.solutions`.

    Uses the Tasks FaceLandmarker API in VIDEO mode with GPU delegate when the
    build supports it, which needs a `.task` model asset on disk.
    """

    import mediapipe as mp  # type: ignore

    # Import locations can differ slightly across builds.
    try:
        from mediapipe.tasks.python import BaseOptions  # type: ignore
        from mediapipe.tasks.python.vision import FaceLandmarker, FaceLandmarkerOptions, RunningMode  # type: ignore
    except ImportError:  # pragma: no cover
        from mediapipe.tasks import python as mp_python  # type: ignore

        BaseOptions = mp_python.BaseOptions
        vision = mp_python.vision
        FaceLandmarker = vision.FaceLandmarker
        FaceLandmarkerOptions = vision.FaceLandmarkerOptions
        RunningMode = vision.RunningMode

    model_path = ensure_face_landmarker_task(model_path)

    def _options(delegate):
        return FaceLandmarkerOptions(
            base_options=BaseOptions(model_asset_path=model_path, delegate=delegate),
            running_mode=RunningMode.VIDEO,
            num_faces=max_num_faces,
            min_face_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
            output_face_blendshapes=True,
        )

    try:
        landmarker = FaceLandmarker.create_from_options(_options(BaseOptions.Delegate.GPU))
    except (RuntimeError, NotImplementedError) as e:
        logger.info("GPU delegate unavailable (%s), using CPU", e)
        landmarker = FaceLandmarker.create_from_options(_options(BaseOptions.Delegate.CPU))
    return _TasksBackend(mp=mp, landmarker=landmarker)


def _to_landmark_set(landmarks) -> List[LandmarkPoint]:
    return [LandmarkPoint(x=float(lm.x), y=float(lm.y)) for lm in landmarks]


class MediaPipeFaceDetector(FaceDetector):
    """
    Face landmark detector using MediaPipe FaceMesh (or the Tasks FaceLandmarker).

    Input frames are expected as **BGR** images (OpenCV default) and must be the
    raw, unmirrored camera frames.
    """

    def __init__(
        self,
        max_num_faces: int = 1,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
        tasks_model_path: str = "models/face_landmarker.task",
        prefer_tasks: bool = False,
    ) -> None:
        self._solutions: Optional[_SolutionsBackend] = None
        self._tasks: Optional[_TasksBackend] = None
        self._last_ts = -1

        try:
            if not prefer_tasks:
                self._solutions = _try_create_solutions_backend(
                    max_num_faces=max_num_faces,
                    min_detection_confidence=min_detection_confidence,
                    min_tracking_confidence=min_tracking_confidence,
                )
            if self._solutions is None:
                self._tasks = _try_create_tasks_backend(
                    model_path=tasks_model_path,
                    max_num_faces=max_num_faces,
                    min_detection_confidence=min_detection_confidence,
                    min_tracking_confidence=min_tracking_confidence,
                )
        except ImportError as e:
            raise DetectorUnavailableError(f"MediaPipe is not installed or is incomplete: {e}") from e
        except (RuntimeError, ValueError, AttributeError) as e:
            raise DetectorUnavailableError(f"Could not initialize MediaPipe face landmarks: {e}") from e

        backend = "solutions.face_mesh" if self._solutions is not None else "tasks.FaceLandmarker"
        logger.info("Face detector ready (%s, max faces=%d)", backend, max_num_faces)

    def close(self) -> None:
        if self._solutions is not None:
            self._solutions.face_mesh.close()
        if self._tasks is not None:
            self._tasks.landmarker.close()

    def detect(self, frame_bgr, timestamp_ms: int) -> List[LandmarkSet]:
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)

        if self._solutions is not None:
            results = self._solutions.face_mesh.process(frame_rgb)
            if not results.multi_face_landmarks:
                return []
            return [_to_landmark_set(face.landmark) for face in results.multi_face_landmarks]

        mp = self._tasks.mp
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=frame_rgb)

        # VIDEO mode rejects timestamps that don't strictly increase.
        ts = max(int(timestamp_ms), self._last_ts + 1)
        self._last_ts = ts

        result = self._tasks.landmarker.detect_for_video(mp_image, ts)
        faces = getattr(result, "face_landmarks", None) or []
        return [_to_landmark_set(face) for face in faces]
