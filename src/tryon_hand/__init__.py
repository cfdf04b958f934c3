from .classify import determine_handedness, get_hand_orientation
from .coords import from_render_space, to_render_space
from .errors import InvalidArgument, MissingLandmarks, TryOnError
from .landmarks import resolve_finger_chain
from .placement import compute_placement
from .session import TryOnSession
from .types import FingerSelector, Hand, Handedness, Keypoint, Orientation, Placement, Vec3

__all__ = [
    "compute_placement",
    "determine_handedness",
    "get_hand_orientation",
    "resolve_finger_chain",
    "to_render_space",
    "from_render_space",
    "TryOnSession",
    "FingerSelector",
    "Hand",
    "Handedness",
    "Keypoint",
    "Orientation",
    "Placement",
    "Vec3",
    "TryOnError",
    "InvalidArgument",
    "MissingLandmarks",
]
