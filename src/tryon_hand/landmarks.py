from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from .errors import MissingLandmarks
from .types import FingerSelector, Hand, Keypoint


WRIST = 0
THUMB_CMC = 1
THUMB_MCP = 2
THUMB_IP = 3
THUMB_TIP = 4
INDEX_FINGER_MCP = 5
INDEX_FINGER_PIP = 6
INDEX_FINGER_DIP = 7
INDEX_FINGER_TIP = 8
MIDDLE_FINGER_MCP = 9
MIDDLE_FINGER_PIP = 10
MIDDLE_FINGER_DIP = 11
MIDDLE_FINGER_TIP = 12
RING_FINGER_MCP = 13
RING_FINGER_PIP = 14
RING_FINGER_DIP = 15
RING_FINGER_TIP = 16
PINKY_MCP = 17
PINKY_PIP = 18
PINKY_DIP = 19
PINKY_TIP = 20

# base, mid (proximal joint), distal, tip
FINGER_CHAINS: Dict[FingerSelector, Tuple[int, int, int, int]] = {
    FingerSelector.THUMB: (THUMB_CMC, THUMB_MCP, THUMB_IP, THUMB_TIP),
    FingerSelector.INDEX: (INDEX_FINGER_MCP, INDEX_FINGER_PIP, INDEX_FINGER_DIP, INDEX_FINGER_TIP),
    FingerSelector.MIDDLE: (MIDDLE_FINGER_MCP, MIDDLE_FINGER_PIP, MIDDLE_FINGER_DIP, MIDDLE_FINGER_TIP),
    FingerSelector.RING: (RING_FINGER_MCP, RING_FINGER_PIP, RING_FINGER_DIP, RING_FINGER_TIP),
    FingerSelector.PINKY: (PINKY_MCP, PINKY_PIP, PINKY_DIP, PINKY_TIP),
}

HAND_CONNECTIONS: List[Tuple[int, int]] = [
    # thumb
    (0, 1),
    (1, 2),
    (2, 3),
    (3, 4),
    # index
    (0, 5),
    (5, 6),
    (6, 7),
    (7, 8),
    # middle
    (5, 9),
    (9, 10),
    (10, 11),
    (11, 12),
    # ring
    (9, 13),
    (13, 14),
    (14, 15),
    (15, 16),
    # pinky
    (13, 17),
    (17, 18),
    (18, 19),
    (19, 20),
    # palm base
    (0, 17),
]


@dataclass(frozen=True)
class FingerChain:
    base: Keypoint
    mid: Keypoint
    distal: Optional[Keypoint]
    tip: Keypoint


def resolve_finger_chain(
    hand: Hand,
    finger: Union[FingerSelector, str, int],
    *,
    require_distal: bool = True,
) -> FingerChain:
    """
    Look up the four landmarks of `finger` on `hand` by landmark index.

    Raises `MissingLandmarks` listing every absent index. With
    `require_distal=False` a missing distal joint is tolerated and left as None.
    """

    finger = FingerSelector.parse(finger)
    ids = FINGER_CHAINS[finger]
    found = [hand.keypoint(i) for i in ids]

    missing = [i for i, kp in zip(ids, found) if kp is None and (require_distal or i != ids[2])]
    if missing:
        raise MissingLandmarks(missing, what=f"{finger.value} finger")

    base, mid, distal, tip = found
    return FingerChain(base=base, mid=mid, distal=distal, tip=tip)
