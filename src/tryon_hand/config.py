from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import InvalidArgument
from .placement import DEFAULT_SCALE_FACTOR, validate_scale_factor
from .types import FingerSelector


logger = logging.getLogger(__name__)

DEFAULT_MODEL_PATH = "models/hand_landmarker.task"


@dataclass(frozen=True)
class EstimatorConfig:
    finger: FingerSelector = FingerSelector.RING
    scale_factor: float = DEFAULT_SCALE_FACTOR
    preferred_hand: Optional[str] = None  # "left" / "right" / None (first detected)
    max_hands: int = 2
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    model_path: str = DEFAULT_MODEL_PATH

    def __post_init__(self) -> None:
        object.__setattr__(self, "finger", FingerSelector.parse(self.finger))
        object.__setattr__(self, "scale_factor", validate_scale_factor(self.scale_factor))

        if self.preferred_hand is not None:
            hand = str(self.preferred_hand).strip().lower()
            if hand not in ("left", "right"):
                raise InvalidArgument(f"preferred_hand must be 'left', 'right' or null, got {self.preferred_hand!r}")
            object.__setattr__(self, "preferred_hand", hand)

        if isinstance(self.max_hands, bool) or not isinstance(self.max_hands, int) or self.max_hands < 1:
            raise InvalidArgument(f"max_hands must be a positive integer, got {self.max_hands!r}")

        for name in ("min_detection_confidence", "min_tracking_confidence"):
            v = getattr(self, name)
            if not isinstance(v, (int, float)) or not (0.0 <= v <= 1.0):
                raise InvalidArgument(f"{name} must be in [0, 1], got {v!r}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "EstimatorConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidArgument(f"unknown config keys: {unknown}")
        return cls(**dict(data))

    def with_overrides(self, **overrides: Any) -> "EstimatorConfig":
        """Copy with the non-None overrides applied (argparse leaves unset flags as None)."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_config(path: str) -> EstimatorConfig:
    """Read an `EstimatorConfig` from YAML; a missing file gives the defaults."""

    if not os.path.exists(path):
        logger.info(f"Config not found at {path}, using defaults.")
        return EstimatorConfig()
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise InvalidArgument(f"config root must be a mapping, got {type(data).__name__}")
    return EstimatorConfig.from_mapping(data)


def write_config(path: str, config: EstimatorConfig) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    data: Dict[str, Any] = {f.name: getattr(config, f.name) for f in fields(config)}
    data["finger"] = config.finger.value
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, sort_keys=False)
