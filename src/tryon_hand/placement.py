from __future__ import annotations

import logging
import math
from typing import Union

from .coords import distance, keypoint_to_render_space, midpoint
from .errors import InvalidArgument
from .landmarks import resolve_finger_chain
from .types import FingerSelector, Hand, Placement, Vec3
from .utils import require_positive_finite


logger = logging.getLogger(__name__)

# Ring thickness relative to the knuckle segment. Calibrate per asset.
DEFAULT_SCALE_FACTOR = 0.23
SCALE_FACTOR_RANGE = (0.2, 1.2)

# Ring plane perpendicular to the finger axis.
RING_TILT = math.pi / 2


def validate_scale_factor(scale_factor: float) -> float:
    s = require_positive_finite(scale_factor, "scale_factor")
    lo, hi = SCALE_FACTOR_RANGE
    if not (lo <= s <= hi):
        raise InvalidArgument(f"scale_factor must be in [{lo}, {hi}], got {scale_factor}")
    return s


def compute_placement(
    hand: Hand,
    finger: Union[FingerSelector, str, int] = FingerSelector.RING,
    *,
    aspect_ratio: float,
    scale_factor: float = DEFAULT_SCALE_FACTOR,
) -> Placement:
    """
    Place a ring-like object on the proximal segment of `finger`.

    The object sits halfway between the finger base and the proximal joint,
    its long axis follows base -> tip, and its size follows the base -> proximal
    segment length so it grows as the hand approaches the camera.

    Raises `MissingLandmarks` if base, proximal joint or tip are absent and
    `InvalidArgument` for a bad aspect ratio or scale factor.
    """

    finger = FingerSelector.parse(finger)
    scale_factor = validate_scale_factor(scale_factor)
    chain = resolve_finger_chain(hand, finger, require_distal=False)

    base = keypoint_to_render_space(chain.base, aspect_ratio=aspect_ratio)
    mid = keypoint_to_render_space(chain.mid, aspect_ratio=aspect_ratio)
    tip = keypoint_to_render_space(chain.tip, aspect_ratio=aspect_ratio)

    dx = tip.x - base.x
    dy = tip.y - base.y
    dz = tip.z - base.z

    rotation = Vec3(
        x=RING_TILT,
        y=math.atan2(dz, math.sqrt(dx * dx + dy * dy)),
        z=math.atan2(dy, dx),
    )
    placement = Placement(
        position=midpoint(mid, base),
        rotation=rotation,
        scale=distance(mid, base) * scale_factor,
        finger=finger,
    )
    logger.debug(f"{finger.value} placement: {placement}")
    return placement
