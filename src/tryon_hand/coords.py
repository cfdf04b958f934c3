"""
Image space <-> render space.

Image space is what detectors report: x, y in [0, 1], origin top-left, Y down.
Render space is centered on the frame, Y up, and aspect-corrected so X spans
[-aspect_ratio, aspect_ratio] and Y spans [-1, 1]. Z is passed through.
"""

from __future__ import annotations

import math

from .types import Keypoint, Vec3
from .utils import require_positive_finite


def to_render_space(x: float, y: float, z: float = 0.0, *, aspect_ratio: float) -> Vec3:
    a = require_positive_finite(aspect_ratio, "aspect_ratio")
    return Vec3(x=(2.0 * x - 1.0) * a, y=-(2.0 * y - 1.0), z=z)


def from_render_space(point: Vec3, *, aspect_ratio: float) -> Vec3:
    """Inverse of `to_render_space`."""
    a = require_positive_finite(aspect_ratio, "aspect_ratio")
    return Vec3(x=(point.x / a + 1.0) / 2.0, y=(1.0 - point.y) / 2.0, z=point.z)


def keypoint_to_render_space(kp: Keypoint, *, aspect_ratio: float) -> Vec3:
    return to_render_space(kp.x, kp.y, kp.z or 0.0, aspect_ratio=aspect_ratio)


def aspect_ratio_from_size(width: float, height: float) -> float:
    w = require_positive_finite(width, "width")
    h = require_positive_finite(height, "height")
    return w / h


def midpoint(a: Vec3, b: Vec3) -> Vec3:
    return Vec3(x=(a.x + b.x) / 2.0, y=(a.y + b.y) / 2.0, z=(a.z + b.z) / 2.0)


def distance(a: Vec3, b: Vec3) -> float:
    return math.sqrt((a.x - b.x) ** 2 + (a.y - b.y) ** 2 + (a.z - b.z) ** 2)
