"""
Handedness and palm-orientation classification.

Both work on a single `Hand` and return a value rather than raising when the
hand lacks the landmarks they need: "unknown" / `Orientation.UNKNOWN` means
there is not enough signal this frame.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from .coords import keypoint_to_render_space
from .landmarks import MIDDLE_FINGER_MCP, MIDDLE_FINGER_TIP, PINKY_MCP, THUMB_TIP, WRIST
from .types import Hand, Orientation


logger = logging.getLogger(__name__)

HANDEDNESS_LABELS = ("left", "right")

# Minimum |component| of the unit palm normal for an axis to count as dominant.
DOMINANT_AXIS_THRESHOLD = 0.7

# Cross products below this length are treated as collinear landmarks.
DEGENERATE_NORMAL_EPS = 1e-12


def determine_handedness(hand: Hand) -> str:
    """
    Return "left", "right" or "unknown".

    A label from the detector wins. Without one, the sign of the 2D cross
    product wrist->pinky base x wrist->thumb tip decides: positive is left,
    negative is right. This geometric fallback is approximate and only holds
    for an upright hand with the palm towards a mirrored (selfie) camera.
    """

    if hand.handedness is not None and hand.handedness.label:
        label = hand.handedness.label.strip().lower()
        if label in HANDEDNESS_LABELS:
            return label
        logger.debug(f"ignoring unrecognised handedness label {hand.handedness.label!r}")

    wrist = hand.keypoint(WRIST)
    thumb = hand.keypoint(THUMB_TIP)
    pinky = hand.keypoint(PINKY_MCP)
    if wrist is None or thumb is None or pinky is None:
        return "unknown"

    to_pinky_x = pinky.x - wrist.x
    to_pinky_y = pinky.y - wrist.y
    to_thumb_x = thumb.x - wrist.x
    to_thumb_y = thumb.y - wrist.y

    cross = (to_pinky_x * to_thumb_y) - (to_pinky_y * to_thumb_x)
    if cross > 0:
        return "left"
    if cross < 0:
        return "right"
    return "unknown"


def palm_normal(hand: Hand, aspect_ratio: float = 1.0) -> Optional[np.ndarray]:
    """
    Unit normal of the palm plane in render space, or None if degenerate.

    normal = (wrist -> middle base) x (wrist -> pinky base). Expects the
    landmarks to be present.
    """

    wrist, middle_base, pinky_base = (
        keypoint_to_render_space(hand.keypoint(i), aspect_ratio=aspect_ratio)
        for i in (WRIST, MIDDLE_FINGER_MCP, PINKY_MCP)
    )
    w = np.array([wrist.x, wrist.y, wrist.z], dtype=np.float64)
    v1 = np.array([middle_base.x, middle_base.y, middle_base.z], dtype=np.float64) - w
    v2 = np.array([pinky_base.x, pinky_base.y, pinky_base.z], dtype=np.float64) - w

    normal = np.cross(v1, v2)
    length = float(np.linalg.norm(normal))
    if length <= DEGENERATE_NORMAL_EPS:
        return None
    return normal / length


def get_hand_orientation(hand: Hand, aspect_ratio: float = 1.0) -> Optional[Orientation]:
    """
    Classify which way the palm faces.

    Sign convention, checked against a reference pose: an upright right hand
    with the palm towards a mirrored camera gives a normal with z < 0 and is
    `PALM_UP`; the back of the same hand towards the camera is `PALM_DOWN`.

    The normal is taken in render space (Y flipped, X scaled by
    `aspect_ratio`), so an oblique palm can change class with the aspect
    ratio. Compared with a normal taken in raw image coordinates, x and z
    change sign, so `PALM_LEFT` / `PALM_RIGHT` are swapped the same way
    `PALM_UP` / `PALM_DOWN` are; forward/backward keep their sign.

    Returns `Orientation.UNKNOWN` when wrist, middle base, middle tip or pinky
    base is missing, and None when they are collinear.
    """

    required = (WRIST, MIDDLE_FINGER_MCP, MIDDLE_FINGER_TIP, PINKY_MCP)
    if any(hand.keypoint(i) is None for i in required):
        return Orientation.UNKNOWN

    normal = palm_normal(hand, aspect_ratio=aspect_ratio)
    if normal is None:
        return None
    nx, ny, nz = (float(c) for c in normal)

    if abs(nz) > DOMINANT_AXIS_THRESHOLD:
        return Orientation.PALM_DOWN if nz > 0 else Orientation.PALM_UP
    if abs(ny) > DOMINANT_AXIS_THRESHOLD:
        return Orientation.PALM_FORWARD if ny > 0 else Orientation.PALM_BACKWARD
    if abs(nx) > DOMINANT_AXIS_THRESHOLD:
        return Orientation.PALM_RIGHT if nx > 0 else Orientation.PALM_LEFT
    return Orientation.PALM_ANGLED
