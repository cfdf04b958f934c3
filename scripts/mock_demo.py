from __future__ import annotations

import argparse
import logging
import os
import sys

import cv2
import numpy as np

# Allow running without installing the package (repo-local usage).
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC_ROOT = os.path.join(REPO_ROOT, "src")
if SRC_ROOT not in sys.path:
    sys.path.insert(0, SRC_ROOT)

from tryon_hand.config import load_config  # noqa: E402
from tryon_hand.coords import aspect_ratio_from_size  # noqa: E402
from tryon_hand.drawing import draw_hands, draw_placement, draw_text  # noqa: E402
from tryon_hand.mock import MockHandSource  # noqa: E402
from tryon_hand.session import TryOnSession  # noqa: E402
from tryon_hand.types import FingerSelector  # noqa: E402


WINDOW = "tryon - mock hand (move the mouse)"


def main() -> int:
    ap = argparse.ArgumentParser(description="Ring overlay on a synthetic hand that follows the mouse.")
    ap.add_argument("--width", type=int, default=960, help="Canvas width")
    ap.add_argument("--height", type=int, default=720, help="Canvas height")
    ap.add_argument("--config", default="configs/tryon.yaml", help="YAML config (defaults used if missing)")
    ap.add_argument("--finger", choices=[f.value for f in FingerSelector], help="Finger to place the ring on")
    ap.add_argument("--left", action="store_true", help="Mirror the synthetic hand into a left hand")
    ap.add_argument("--jitter", type=float, default=0.002, help="Landmark noise (normalized units)")
    ap.add_argument("--seed", type=int, default=None, help="Noise seed")
    ap.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    args = ap.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    config = load_config(args.config).with_overrides(finger=args.finger)

    source = MockHandSource(
        label="left" if args.left else "right",
        mirror=args.left,
        jitter=args.jitter,
        seed=args.seed,
    )
    aspect = aspect_ratio_from_size(args.width, args.height)

    def on_mouse(event, x, y, flags, param) -> None:
        if event == cv2.EVENT_MOUSEMOVE:
            source.set_pointer(x / args.width, y / args.height)

    cv2.namedWindow(WINDOW)
    cv2.setMouseCallback(WINDOW, on_mouse)

    with TryOnSession(source, config) as session:
        while True:
            canvas = np.full((args.height, args.width, 3), 24, dtype=np.uint8)
            result = session.step(canvas, aspect_ratio=aspect)

            draw_hands(canvas, result.hands, labels=[result.handedness] if result.hand is not None else None)
            if result.placement is not None:
                draw_placement(canvas, result.placement, aspect)
            draw_text(canvas, f"{config.finger.value} | {result.orientation.value if result.orientation else '-'} | q to quit", (12, 28))

            cv2.imshow(WINDOW, canvas)
            key = cv2.waitKey(16) & 0xFF
            if key in (ord("q"), 27):
                break

    cv2.destroyAllWindows()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
