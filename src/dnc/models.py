from __future__ import annotations
from typing import Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict

from .types import Point

ClosestPairKind = Literal[
    "error",
    "special-case",
    "divide",
    "compare",
    "result",
]

KaratsubaKind = Literal[
    "start",
    "base-case",
    "split",
    "combine",
    "result",
]

class ClosestPairEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ClosestPairKind
    points: Tuple[Point, ...]
    pair: Optional[Tuple[Point, Point]] = None
    distance: Optional[float] = None
    midpoint: Optional[float] = None
    message: str

class KaratsubaEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: KaratsubaKind
    level: int
    num1: int
    num2: int
    m: Optional[int] = None  # split width (digits peeled off at this level)
    high1: Optional[int] = None
    low1: Optional[int] = None
    high2: Optional[int] = None
    low2: Optional[int] = None
    z0: Optional[int] = None
    z1: Optional[int] = None
    z2: Optional[int] = None
    result: Optional[int] = None
    message: str
