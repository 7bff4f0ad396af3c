from __future__ import annotations

import argparse
import os
import sys

import cv2

# Allow running without installing the package (repo-local usage).
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC_ROOT = os.path.join(REPO_ROOT, "src")
if SRC_ROOT not in sys.path:
    sys.path.insert(0, SRC_ROOT)

from facecaption.detector import MediaPipeFaceDetector  # noqa: E402
from facecaption.display import OverlayView  # noqa: E402
from facecaption.export import compose_snapshot  # noqa: E402
from facecaption.positioner import compute_position  # noqa: E402


def main() -> int:
    ap = argparse.ArgumentParser(description="Run the face overlay on a still image and write the composite.")
    ap.add_argument("--image", required=True, help="Path to input image")
    ap.add_argument("--out", required=True, help="Path to output PNG")
    ap.add_argument("--caption", default="", help="Caption text to size the box with")
    args = ap.parse_args()

    frame = cv2.imread(args.image)
    if frame is None:
        raise RuntimeError(f"Could not read image: {args.image}")

    view = OverlayView()
    view.set_caption(args.caption)
    with MediaPipeFaceDetector(max_num_faces=1) as detector:
        faces = detector.detect(frame, 0)

    position = compute_position(faces[0]) if faces else None
    if position is not None:
        view.show_at(position)

    rgba = compose_snapshot(frame, view)
    ok = cv2.imwrite(args.out, cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA))
    if not ok:
        raise RuntimeError(f"Could not write output image: {args.out}")

    print(f"faces: {len(faces)}")
    if position is not None:
        print(f"overlay left={position.left_percent:.1f}% top={position.top_percent:.1f}%")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
