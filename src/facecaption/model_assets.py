from __future__ import annotations

import logging
import os
import ssl
import subprocess
import urllib.request

from .errors import DetectorUnavailableError

logger = logging.getLogger(__name__)


FACE_LANDMARKER_TASK_URL = (
    "https://storage.googleapis.com/mediapipe-models/face_landmarker/face_landmarker/float16/1/face_landmarker.task"
)


def _fetch_urllib(url: str, dest: str, timeout_s: int) -> None:
    # python.org macOS builds can lack root certificates; certifi fixes that when present.
    try:
        import certifi  # type: ignore

        ctx = ssl.create_default_context(cafile=certifi.where())
    except ImportError:
        ctx = ssl.create_default_context()

    with urllib.request.urlopen(url, context=ctx, timeout=timeout_s) as r, open(dest, "wb") as f:
        f.write(r.read())


def _fetch_curl(url: str, dest: str, timeout_s: int) -> None:
    proc = subprocess.run(
        ["curl", "-fsSL", "--max-time", str(timeout_s), "-o", dest, url],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )
    if proc.returncode != 0:
        raise OSError(proc.stderr.strip() or f"curl exited with {proc.returncode}")


def ensure_face_landmarker_task(model_path: str, *, url: str = FACE_LANDMARKER_TASK_URL, timeout_s: int = 30) -> str:
    """Return `model_path`, downloading the face landmarker model there first if it is missing."""

    if os.path.exists(model_path):
        return model_path

    os.makedirs(os.path.dirname(model_path) or ".", exist_ok=True)
    logger.info("Downloading face landmarker model to %s", model_path)

    errors = []
    for fetch in (_fetch_urllib, _fetch_curl):
        try:
            fetch(url, model_path, timeout_s)
        except (OSError, ValueError) as e:
            logger.warning("%s failed: %s", fetch.__name__.lstrip("_"), e)
            errors.append(str(e))
        else:
            if os.path.getsize(model_path) > 0:
                return model_path
            errors.append("empty download")
        if os.path.exists(model_path):
            os.remove(model_path)

    raise DetectorUnavailableError(
        f"Face landmarker model missing at {model_path} and could not be downloaded "
        f"({'; '.join(errors)}). Fetch it manually from {url}"
    )
