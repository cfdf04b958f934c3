from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Protocol, Sequence, Tuple, Union

from .errors import InvalidArgument
from .utils import center_from_points


NUM_HAND_LANDMARKS = 21

Point2 = Tuple[float, float]


@dataclass(frozen=True)
class Keypoint:
    """A single detected landmark in image-normalized coordinates (origin top-left)."""

    index: int
    x: float
    y: float
    z: float = 0.0
    name: Optional[str] = None
    score: Optional[float] = None

    def __post_init__(self) -> None:
        if not (0 <= self.index < NUM_HAND_LANDMARKS):
            raise InvalidArgument(f"keypoint index must be in 0..{NUM_HAND_LANDMARKS - 1}, got {self.index}")
        if not all(math.isfinite(v) for v in (self.x, self.y, self.z)):
            raise InvalidArgument(f"keypoint {self.index} has non-finite coordinates ({self.x}, {self.y}, {self.z})")


@dataclass(frozen=True)
class Handedness:
    label: str  # "Left" / "Right" as reported by the backend
    score: Optional[float] = None


@dataclass(frozen=True)
class Hand:
    """One detected hand for a single frame. Keypoints are looked up by `index`."""

    keypoints: Tuple[Keypoint, ...]
    handedness: Optional[Handedness] = None
    center: Optional[Point2] = None

    def keypoint(self, index: int) -> Optional[Keypoint]:
        for kp in self.keypoints:
            if kp.index == index:
                return kp
        return None

    @classmethod
    def from_points(
        cls,
        points: Sequence[Sequence[float]],
        label: Optional[str] = None,
        score: Optional[float] = None,
    ) -> "Hand":
        """
        Build a hand from an ordered sequence of `(x, y)` or `(x, y, z)` values.

        Position in the sequence becomes the landmark index.
        """

        if len(points) > NUM_HAND_LANDMARKS:
            raise InvalidArgument(f"expected at most {NUM_HAND_LANDMARKS} points, got {len(points)}")
        kps = tuple(
            Keypoint(index=i, x=float(p[0]), y=float(p[1]), z=float(p[2]) if len(p) > 2 else 0.0)
            for i, p in enumerate(points)
        )
        handedness = Handedness(label=label, score=score) if label else None
        return cls(
            keypoints=kps,
            handedness=handedness,
            center=center_from_points((kp.x, kp.y) for kp in kps) if kps else None,
        )


class FingerSelector(str, Enum):
    THUMB = "thumb"
    INDEX = "index"
    MIDDLE = "middle"
    RING = "ring"
    PINKY = "pinky"

    @classmethod
    def parse(cls, value: Union["FingerSelector", str, int]) -> "FingerSelector":
        """Accept an enum member, its name ("ring") or a finger number (0=thumb .. 4=pinky)."""

        if isinstance(value, cls):
            return value
        if isinstance(value, numbers.Integral) and not isinstance(value, bool):
            members = list(cls)
            if 0 <= value < len(members):
                return members[int(value)]
            raise InvalidArgument(f"finger number must be in 0..{len(members) - 1}, got {value}")
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidArgument(f"unknown finger: {value!r}")


class Orientation(str, Enum):
    PALM_UP = "palm_up"
    PALM_DOWN = "palm_down"
    PALM_FORWARD = "palm_forward"
    PALM_BACKWARD = "palm_backward"
    PALM_LEFT = "palm_left"
    PALM_RIGHT = "palm_right"
    PALM_ANGLED = "palm_angled"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Vec3:
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class Placement:
    """Transform for a 3D asset in render space (origin at frame center, Y up)."""

    position: Vec3
    rotation: Vec3  # Euler angles, radians
    scale: Union[float, Vec3]
    finger: Optional[FingerSelector]  # None for body anchors


@dataclass(frozen=True)
class FrameResult:
    """What a session produced for one frame."""

    hands: List[Hand] = field(default_factory=list)
    hand: Optional[Hand] = None
    placement: Optional[Placement] = None
    handedness: str = "unknown"
    orientation: Optional[Orientation] = None
    stale: bool = False  # placement carried over from an earlier frame


class HandLandmarkSource(Protocol):
    """Anything that turns a frame into zero or more `Hand` values."""

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def read(self, frame) -> List[Hand]: ...
