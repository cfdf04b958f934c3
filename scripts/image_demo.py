from __future__ import annotations

import argparse
import logging
import os
import sys

import cv2

# Allow running without installing the package (repo-local usage).
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC_ROOT = os.path.join(REPO_ROOT, "src")
if SRC_ROOT not in sys.path:
    sys.path.insert(0, SRC_ROOT)

from tryon_hand.classify import determine_handedness, get_hand_orientation  # noqa: E402
from tryon_hand.config import load_config  # noqa: E402
from tryon_hand.coords import aspect_ratio_from_size  # noqa: E402
from tryon_hand.detector import MediaPipeHandSource  # noqa: E402
from tryon_hand.drawing import draw_hands, draw_placement  # noqa: E402
from tryon_hand.errors import MissingLandmarks  # noqa: E402
from tryon_hand.placement import compute_placement  # noqa: E402
from tryon_hand.types import FingerSelector  # noqa: E402


def main() -> int:
    ap = argparse.ArgumentParser(description="Place a ring on every hand in a still image.")
    ap.add_argument("--image", required=True, help="Path to input image")
    ap.add_argument("--out", required=True, help="Path to output image (annotated)")
    ap.add_argument("--config", default="configs/tryon.yaml", help="YAML config (defaults used if missing)")
    ap.add_argument("--finger", choices=[f.value for f in FingerSelector], help="Finger to place the ring on")
    ap.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    args = ap.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    config = load_config(args.config).with_overrides(finger=args.finger)

    frame = cv2.imread(args.image)
    if frame is None:
        raise RuntimeError(f"Could not read image: {args.image}")
    h, w = frame.shape[:2]
    aspect = aspect_ratio_from_size(w, h)

    with MediaPipeHandSource.from_config(config, static_image_mode=True) as source:
        hands = source.read(frame)

    draw_hands(frame, hands)
    print(f"hands: {len(hands)}")
    for i, hand in enumerate(hands):
        try:
            placement = compute_placement(hand, config.finger, aspect_ratio=aspect, scale_factor=config.scale_factor)
        except MissingLandmarks as e:
            print(f"[{i}] {determine_handedness(hand)}: no placement ({e})")
            continue
        draw_placement(frame, placement, aspect)
        print(
            f"[{i}] {determine_handedness(hand)} {getattr(get_hand_orientation(hand, aspect_ratio=aspect), 'value', None)} "
            f"position={placement.position} rotation={placement.rotation} scale={placement.scale:.4f}"
        )

    ok = cv2.imwrite(args.out, frame)
    if not ok:
        raise RuntimeError(f"Could not write output image: {args.out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
