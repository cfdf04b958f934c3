from __future__ import annotations

import logging
from typing import List, Optional

from .classify import determine_handedness, get_hand_orientation
from .config import EstimatorConfig
from .coords import aspect_ratio_from_size
from .errors import InvalidArgument, MissingLandmarks
from .placement import compute_placement
from .types import FrameResult, Hand, HandLandmarkSource, Placement


logger = logging.getLogger(__name__)


def select_hand(hands: List[Hand], preferred_hand: Optional[str]) -> Optional[Hand]:
    """Pick the first hand classified as `preferred_hand`, else the first hand."""
    if not hands:
        return None
    if preferred_hand is not None:
        for hand in hands:
            if determine_handedness(hand) == preferred_hand:
                return hand
    return hands[0]


class TryOnSession:
    """
    Per-frame driver: landmark source in, placement out.

    The session owns the source lifecycle. `step()` is called once per frame;
    when the selected hand lacks the finger landmarks the last good placement
    is returned again with `stale=True`, so the renderer keeps the object in
    place until the next good detection.
    """

    def __init__(self, source: HandLandmarkSource, config: Optional[EstimatorConfig] = None) -> None:
        self.source = source
        self.config = config or EstimatorConfig()
        self._running = False
        self._last_placement: Optional[Placement] = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def last_placement(self) -> Optional[Placement]:
        return self._last_placement

    def start(self) -> None:
        if self._running:
            return
        self.source.start()
        self._running = True
        logger.debug(f"session started with {type(self.source).__name__}")

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        self._last_placement = None
        self.source.stop()
        logger.debug("session stopped")

    def reset(self) -> None:
        self._last_placement = None

    def __enter__(self) -> "TryOnSession":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def step(self, frame=None, aspect_ratio: Optional[float] = None) -> FrameResult:
        if not self._running:
            raise RuntimeError("TryOnSession.step() called before start()")

        if aspect_ratio is None:
            if frame is None:
                raise InvalidArgument("step() needs a frame or an explicit aspect_ratio")
            h, w = frame.shape[:2]
            aspect_ratio = aspect_ratio_from_size(w, h)

        hands = self.source.read(frame)
        hand = select_hand(hands, self.config.preferred_hand)
        if hand is None:
            return FrameResult(hands=hands)

        handedness = determine_handedness(hand)
        orientation = get_hand_orientation(hand, aspect_ratio=aspect_ratio)

        try:
            placement = compute_placement(
                hand,
                self.config.finger,
                aspect_ratio=aspect_ratio,
                scale_factor=self.config.scale_factor,
            )
        except MissingLandmarks as e:
            logger.debug(f"keeping previous placement: {e}")
            return FrameResult(
                hands=hands,
                hand=hand,
                placement=self._last_placement,
                handedness=handedness,
                orientation=orientation,
                stale=self._last_placement is not None,
            )

        self._last_placement = placement
        return FrameResult(
            hands=hands,
            hand=hand,
            placement=placement,
            handedness=handedness,
            orientation=orientation,
        )
