from __future__ import annotations

from typing import Dict, Sequence

import pytest

from tryon_hand.mock import synthetic_hand
from tryon_hand.types import Hand, Handedness, Keypoint


def make_hand(points: Dict[int, Sequence[float]], label=None) -> Hand:
    """Hand from a sparse {index: (x, y[, z])} mapping."""
    kps = tuple(
        Keypoint(index=i, x=p[0], y=p[1], z=p[2] if len(p) > 2 else 0.0) for i, p in sorted(points.items())
    )
    return Hand(keypoints=kps, handedness=Handedness(label) if label else None)


@pytest.fixture
def right_hand() -> Hand:
    return synthetic_hand((0.5, 0.5), size=0.4, label=None)


@pytest.fixture
def left_hand() -> Hand:
    return synthetic_hand((0.5, 0.5), size=0.4, label=None, mirror=True)
