# -----------------------------------------------------------------------------
# Types module: Shared value types for the divide & conquer engines
# Purpose:
#   Define the immutable point representation and the distance metric used
#   by the closest-pair engine, the player, and the API layer.
# -----------------------------------------------------------------------------

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Iterable, Tuple, Union

@dataclass(frozen=True)
class Point:
    """
    Immutable 2-D point. Equality and hashing are by coordinate value.
    Example: Point(3, 4) == Point(3.0, 4.0)
    """
    x: float
    y: float

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

# Ordered sequence of points as supplied by the caller (duplicates allowed)
PointSet = Tuple[Point, ...]

PointLike = Union[Point, Tuple[float, float]]

def as_point(p: PointLike) -> Point:
    # Accept plain (x, y) pairs from callers as well as Point instances
    if isinstance(p, Point):
        return p
    x, y = p
    return Point(x, y)

def as_point_set(points: Iterable[PointLike]) -> PointSet:
    return tuple(as_point(p) for p in points)

def euclidean(p1: Point, p2: Point) -> float:
    """
    Plain floating-point Euclidean distance (no epsilon tolerance).
    hypot scales internally: no OverflowError for far-apart finite points and
    no underflow to 0 for distinct points a few ulps apart.
    """
    return math.hypot(p1.x - p2.x, p1.y - p2.y)
