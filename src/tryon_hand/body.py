from __future__ import annotations

from typing import Dict, Iterable

from .coords import to_render_space
from .errors import MissingLandmarks
from .types import Placement, Vec3
from .utils import require_positive_finite


NECK_LANDMARKS = ("nose", "left_shoulder", "right_shoulder")


def compute_necklace_placement(
    keypoints: Iterable,
    *,
    aspect_ratio: float,
    neck_ratio: float = 0.3,
    scale_factor: float = 1.2,
) -> Placement:
    """
    Anchor a necklace below the chin from body pose keypoints.

    `keypoints` are objects with `name`, `x`, `y` and optionally `z` in
    image-normalized space (e.g. MoveNet output). The anchor is the shoulder
    midpoint moved `neck_ratio` of the way towards the nose; the scale follows
    the horizontal shoulder span.
    """

    scale_factor = require_positive_finite(scale_factor, "scale_factor")
    by_name: Dict[str, object] = {}
    for kp in keypoints:
        name = getattr(kp, "name", None)
        if name:
            by_name[name] = kp

    missing = [n for n in NECK_LANDMARKS if n not in by_name]
    if missing:
        raise MissingLandmarks(missing, what="necklace")
    nose = by_name["nose"]
    left = by_name["left_shoulder"]
    right = by_name["right_shoulder"]

    def z_of(kp) -> float:
        return getattr(kp, "z", 0.0) or 0.0

    mid_x = (left.x + right.x) / 2.0
    mid_y = (left.y + right.y) / 2.0
    mid_z = (z_of(left) + z_of(right)) / 2.0

    neck_x = mid_x + (nose.x - mid_x) * neck_ratio
    neck_y = mid_y + (nose.y - mid_y) * neck_ratio
    neck_z = mid_z + (z_of(nose) - mid_z) * neck_ratio

    span = abs(right.x - left.x) * scale_factor
    return Placement(
        position=to_render_space(neck_x, neck_y, neck_z, aspect_ratio=aspect_ratio),
        rotation=Vec3(0.0, 0.0, 0.0),
        scale=Vec3(span, span, span),
        finger=None,
    )
