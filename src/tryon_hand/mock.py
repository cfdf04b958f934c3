from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .errors import InvalidArgument
from .types import Hand


logger = logging.getLogger(__name__)

# Upright right hand, palm towards a mirrored camera, in units of hand size.
# Offsets are image-space (Y down) relative to the middle finger base (landmark 9).
RIGHT_HAND_TEMPLATE: Tuple[Tuple[float, float, float], ...] = (
    (0.0, 0.26, 0.0),  # wrist
    (-0.08, 0.21, 0.0),
    (-0.14, 0.16, 0.0),
    (-0.18, 0.10, 0.0),
    (-0.21, 0.05, 0.0),  # thumb tip
    (-0.07, 0.01, 0.0),  # index base
    (-0.08, -0.10, 0.0),
    (-0.085, -0.17, 0.0),
    (-0.09, -0.23, 0.0),
    (0.0, 0.0, 0.0),  # middle base
    (0.0, -0.12, 0.0),
    (0.0, -0.20, 0.0),
    (0.0, -0.27, 0.0),
    (0.065, 0.02, 0.0),  # ring base
    (0.07, -0.09, 0.0),
    (0.075, -0.16, 0.0),
    (0.08, -0.22, 0.0),
    (0.12, 0.06, 0.0),  # pinky base
    (0.135, -0.02, 0.0),
    (0.145, -0.07, 0.0),
    (0.155, -0.12, 0.0),
)


def synthetic_hand(
    center: Sequence[float] = (0.5, 0.5),
    size: float = 0.4,
    label: Optional[str] = "right",
    *,
    mirror: bool = False,
    jitter: float = 0.0,
    rng: Optional[np.random.Generator] = None,
) -> Hand:
    """
    Build a plausible 21-landmark hand with its middle finger base at `center`.

    `mirror` flips the template horizontally, which turns the palm-facing right
    hand into a palm-facing left hand (or the back of a right hand).
    `jitter` adds gaussian noise (std dev, normalized units) to x and y.
    """

    if size <= 0:
        raise InvalidArgument(f"size must be positive, got {size}")

    template = np.asarray(RIGHT_HAND_TEMPLATE, dtype=np.float64) * size
    if mirror:
        template[:, 0] = -template[:, 0]
    points = template + np.array([center[0], center[1], 0.0])

    if jitter > 0:
        rng = rng if rng is not None else np.random.default_rng()
        points[:, :2] += rng.normal(0.0, jitter, size=(points.shape[0], 2))

    return Hand.from_points(points.tolist(), label=label)


class MockHandSource:
    """
    Synthetic landmark source that follows a pointer instead of running a model.

    Useful for demos without a camera model and for tests. `read()` ignores the
    frame and emits one hand centered at the last pointer position, or no hand
    when the pointer has been cleared.
    """

    def __init__(
        self,
        size: float = 0.4,
        label: Optional[str] = "right",
        mirror: bool = False,
        jitter: float = 0.0,
        seed: Optional[int] = None,
    ) -> None:
        self._size = size
        self._label = label
        self._mirror = mirror
        self._jitter = jitter
        self._seed = seed
        self._rng: Optional[np.random.Generator] = None
        self._pointer: Optional[Tuple[float, float]] = None

    def start(self) -> None:
        self._rng = np.random.default_rng(self._seed)

    def stop(self) -> None:
        self._rng = None

    def __enter__(self) -> "MockHandSource":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def set_pointer(self, x: float, y: float) -> None:
        """Pointer position in image-normalized coordinates."""
        self._pointer = (float(x), float(y))

    def clear_pointer(self) -> None:
        self._pointer = None

    def read(self, frame=None) -> List[Hand]:
        if self._rng is None:
            raise RuntimeError("MockHandSource.read() called before start()")
        if self._pointer is None:
            return []
        hand = synthetic_hand(
            self._pointer,
            size=self._size,
            label=self._label,
            mirror=self._mirror,
            jitter=self._jitter,
            rng=self._rng,
        )
        logger.debug(f"mock hand at {self._pointer}")
        return [hand]
