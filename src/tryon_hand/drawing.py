from __future__ import annotations

import math
from typing import Iterable, Optional, Tuple

import cv2

from .coords import from_render_space
from .landmarks import HAND_CONNECTIONS
from .types import Hand, Placement, Vec3
from .utils import clamp_int


def _to_px(x: float, y: float, w: int, h: int) -> Tuple[int, int]:
    return (clamp_int(int(round(x * w)), 0, w - 1), clamp_int(int(round(y * h)), 0, h - 1))


def draw_text(frame, text: str, org: Tuple[int, int], color=(255, 255, 255), scale=0.6, thickness=2):
    cv2.putText(frame, text, org, cv2.FONT_HERSHEY_SIMPLEX, scale, (0, 0, 0), thickness + 2, cv2.LINE_AA)
    cv2.putText(frame, text, org, cv2.FONT_HERSHEY_SIMPLEX, scale, color, thickness, cv2.LINE_AA)
    return frame


def draw_hands(frame_bgr, hands: Iterable[Hand], labels: Optional[Iterable[str]] = None):
    h, w = frame_bgr.shape[:2]
    labels = list(labels) if labels is not None else None

    for i, hand in enumerate(hands):
        pts = {kp.index: _to_px(kp.x, kp.y, w, h) for kp in hand.keypoints}
        for a, b in HAND_CONNECTIONS:
            if a in pts and b in pts:
                cv2.line(frame_bgr, pts[a], pts[b], (0, 255, 255), 2, cv2.LINE_AA)
        for p in pts.values():
            cv2.circle(frame_bgr, p, 3, (40, 255, 120), -1, lineType=cv2.LINE_AA)

        if not pts:
            continue
        xs = [p[0] for p in pts.values()]
        ys = [p[1] for p in pts.values()]
        label = labels[i] if labels is not None and i < len(labels) else None
        if label is None and hand.handedness is not None:
            label = hand.handedness.label
        if label:
            draw_text(frame_bgr, label, (min(xs), max(0, min(ys) - 8)))
    return frame_bgr


def draw_placement(frame_bgr, placement: Placement, aspect_ratio: float, color=(0, 200, 255)):
    """Draw the ring as an ellipse seen edge-on across the finger."""

    h, w = frame_bgr.shape[:2]
    center = from_render_space(placement.position, aspect_ratio=aspect_ratio)
    cx, cy = _to_px(center.x, center.y, w, h)

    scale = placement.scale.x if isinstance(placement.scale, Vec3) else placement.scale
    # Render-space Y spans 2 units over the frame height.
    radius_px = max(2, int(round(scale * h / 2.0)))

    # rotation.z is counter-clockwise in a Y-up space; OpenCV angles run clockwise.
    finger_angle = -math.degrees(placement.rotation.z)
    # The band crosses the finger axis; foreshorten it by the out-of-plane tilt.
    minor = max(1, int(round(radius_px * abs(math.sin(placement.rotation.y)) + radius_px * 0.35)))
    cv2.ellipse(frame_bgr, (cx, cy), (minor, radius_px), finger_angle, 0, 360, color, 2, cv2.LINE_AA)
    cv2.circle(frame_bgr, (cx, cy), 2, color, -1)
    return frame_bgr

