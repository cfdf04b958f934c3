import math
import random

import numpy as np
import pytest

from tryon_hand.errors import InvalidArgument, MissingLandmarks
from tryon_hand.landmarks import FINGER_CHAINS, resolve_finger_chain
from tryon_hand.types import FingerSelector, Hand, Keypoint


EXPECTED_CHAINS = {
    "thumb": (1, 2, 3, 4),
    "index": (5, 6, 7, 8),
    "middle": (9, 10, 11, 12),
    "ring": (13, 14, 15, 16),
    "pinky": (17, 18, 19, 20),
}


@pytest.mark.parametrize("finger,ids", EXPECTED_CHAINS.items())
def test_chain_indices(right_hand, finger, ids):
    assert FINGER_CHAINS[FingerSelector(finger)] == ids
    chain = resolve_finger_chain(right_hand, finger)
    assert (chain.base.index, chain.mid.index, chain.distal.index, chain.tip.index) == ids


def test_lookup_is_by_index_not_position(right_hand):
    shuffled = list(right_hand.keypoints)
    random.Random(7).shuffle(shuffled)
    hand = Hand(keypoints=tuple(shuffled))

    chain = resolve_finger_chain(hand, FingerSelector.RING)
    assert chain.base == right_hand.keypoint(13)
    assert chain.tip == right_hand.keypoint(16)


def test_missing_proximal_joint(right_hand):
    hand = Hand(keypoints=tuple(kp for kp in right_hand.keypoints if kp.index != 14))
    with pytest.raises(MissingLandmarks) as exc:
        resolve_finger_chain(hand, FingerSelector.RING)
    assert exc.value.missing == (14,)


def test_missing_distal_tolerated_on_request(right_hand):
    hand = Hand(keypoints=tuple(kp for kp in right_hand.keypoints if kp.index != 15))
    with pytest.raises(MissingLandmarks):
        resolve_finger_chain(hand, FingerSelector.RING)

    chain = resolve_finger_chain(hand, FingerSelector.RING, require_distal=False)
    assert chain.distal is None
    assert chain.mid.index == 14


def test_lists_all_missing_indices():
    with pytest.raises(MissingLandmarks) as exc:
        resolve_finger_chain(Hand(keypoints=()), "pinky")
    assert exc.value.missing == (17, 18, 19, 20)


def test_finger_selector_parse():
    assert FingerSelector.parse("Ring") is FingerSelector.RING
    assert FingerSelector.parse(3) is FingerSelector.RING
    assert FingerSelector.parse(0) is FingerSelector.THUMB
    assert FingerSelector.parse(FingerSelector.PINKY) is FingerSelector.PINKY
    for bad in ("toe", 5, -1, True, None):
        with pytest.raises(InvalidArgument):
            FingerSelector.parse(bad)


def test_finger_selector_parse_numpy_integers():
    assert FingerSelector.parse(np.int64(3)) is FingerSelector.RING
    assert FingerSelector.parse(np.uint8(4)) is FingerSelector.PINKY
    with pytest.raises(InvalidArgument):
        FingerSelector.parse(np.int32(7))


def test_keypoint_index_range():
    with pytest.raises(InvalidArgument):
        Keypoint(index=21, x=0.5, y=0.5)
    with pytest.raises(InvalidArgument):
        Keypoint(index=-1, x=0.5, y=0.5)


@pytest.mark.parametrize(
    "coords",
    [
        {"x": math.nan, "y": 0.5},
        {"x": 0.5, "y": math.inf},
        {"x": 0.5, "y": 0.5, "z": -math.inf},
        {"x": 0.5, "y": 0.5, "z": float("nan")},
    ],
)
def test_keypoint_rejects_non_finite_coordinates(coords):
    with pytest.raises(InvalidArgument):
        Keypoint(index=13, **coords)


def test_hand_from_points_center():
    hand = Hand.from_points([(0.0, 0.0), (1.0, 0.5, 0.2)], label="Left", score=0.9)
    assert hand.center == (0.5, 0.25)
    assert hand.keypoint(1).z == 0.2
    assert hand.keypoint(0).z == 0.0
    assert hand.handedness.label == "Left"
    assert hand.keypoint(2) is None
