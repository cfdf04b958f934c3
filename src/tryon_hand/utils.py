from __future__ import annotations

import math
from typing import Iterable, Tuple

from .errors import InvalidArgument


def clamp_int(v: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, v))


def center_from_points(points: Iterable[Tuple[float, float]]) -> Tuple[float, float]:
    xs = []
    ys = []
    for x, y in points:
        xs.append(x)
        ys.append(y)
    if not xs:
        return (0.0, 0.0)
    return (sum(xs) / len(xs), sum(ys) / len(ys))


def require_positive_finite(value: float, name: str) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidArgument(f"{name} must be a number, got {value!r}") from e
    if not (math.isfinite(v) and v > 0):
        raise InvalidArgument(f"{name} must be a positive finite number, got {value!r}")
    return v
