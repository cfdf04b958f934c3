from __future__ import annotations

import argparse
import logging
import os
import platform
import sys

import cv2

# Allow running without installing the package (repo-local usage).
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC_ROOT = os.path.join(REPO_ROOT, "src")
if SRC_ROOT not in sys.path:
    sys.path.insert(0, SRC_ROOT)

from tryon_hand.config import load_config  # noqa: E402
from tryon_hand.coords import aspect_ratio_from_size  # noqa: E402
from tryon_hand.detector import MediaPipeHandSource  # noqa: E402
from tryon_hand.drawing import draw_hands, draw_placement, draw_text  # noqa: E402
from tryon_hand.session import TryOnSession  # noqa: E402
from tryon_hand.types import FingerSelector  # noqa: E402


def main() -> int:
    ap = argparse.ArgumentParser(description="Webcam ring try-on overlay.")
    ap.add_argument("--camera", type=int, default=0, help="Camera index (default: 0)")
    ap.add_argument("--width", type=int, default=1280, help="Capture width (best effort)")
    ap.add_argument("--height", type=int, default=720, help="Capture height (best effort)")
    ap.add_argument("--config", default="configs/tryon.yaml", help="YAML config (defaults used if missing)")
    ap.add_argument("--finger", choices=[f.value for f in FingerSelector], help="Finger to place the ring on")
    ap.add_argument("--hand", choices=["left", "right"], help="Preferred hand")
    ap.add_argument("--scale-factor", type=float, help="Ring size relative to the knuckle segment")
    ap.add_argument(
        "--no-mirror",
        action="store_true",
        help="Disable horizontal mirroring (default is mirrored/selfie mode)",
    )
    ap.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    args = ap.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    config = load_config(args.config).with_overrides(
        finger=args.finger,
        preferred_hand=args.hand,
        scale_factor=args.scale_factor,
    )

    if platform.system() == "Darwin":
        cap = cv2.VideoCapture(args.camera, cv2.CAP_AVFOUNDATION)
    else:
        cap = cv2.VideoCapture(args.camera)
    if not cap.isOpened():
        raise RuntimeError(
            f"Could not open camera index {args.camera}. "
            "On macOS: System Settings -> Privacy & Security -> Camera -> allow your terminal."
        )

    cap.set(cv2.CAP_PROP_FRAME_WIDTH, args.width)
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, args.height)

    with TryOnSession(MediaPipeHandSource.from_config(config), config) as session:
        while True:
            ok, frame = cap.read()
            if not ok:
                break

            if not args.no_mirror:
                frame = cv2.flip(frame, 1)

            h, w = frame.shape[:2]
            aspect = aspect_ratio_from_size(w, h)
            result = session.step(frame, aspect_ratio=aspect)

            draw_hands(frame, result.hands)
            if result.placement is not None:
                draw_placement(frame, result.placement, aspect, color=(0, 140, 255) if result.stale else (0, 200, 255))

            status = "show your hand" if result.hand is None else f"{result.handedness} | {result.orientation.value if result.orientation else '-'}"
            draw_text(frame, f"{config.finger.value} finger | {status} | q to quit", (12, 28))

            cv2.imshow("tryon - ring overlay", frame)
            key = cv2.waitKey(1) & 0xFF
            if key in (ord("q"), 27):
                break

    cap.release()
    cv2.destroyAllWindows()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
