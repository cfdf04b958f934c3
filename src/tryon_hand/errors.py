from __future__ import annotations

from typing import Iterable, Tuple, Union


class TryOnError(Exception):
    """Base class for errors raised by the try-on geometry core."""


class InvalidArgument(TryOnError, ValueError):
    """Malformed input (aspect ratio, sizes, config values, landmark ids)."""


class MissingLandmarks(TryOnError, LookupError):
    """
    Landmarks needed for an estimate are absent from the hand.

    Expected during partial detections or occlusion. Callers skip the update
    for this frame and try again with the next detection.
    """

    def __init__(self, missing: Iterable[Union[int, str]], what: str = "placement") -> None:
        self.missing: Tuple[Union[int, str], ...] = tuple(missing)
        self.what = what
        super().__init__(f"missing landmarks for {what}: {list(self.missing)}")
