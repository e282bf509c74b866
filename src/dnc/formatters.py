from __future__ import annotations
from typing import Tuple

from .types import Point

def fmt_num(v: float) -> str:
    # Integral floats print without the trailing ".0": 3.0 -> "3", 0.1 -> "0.1"
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)

def fmt_point(p: Point) -> str:
    return f"({fmt_num(p.x)},{fmt_num(p.y)})"

def fmt_pair(pair: Tuple[Point, Point]) -> str:
    return f"{fmt_point(pair[0])} and {fmt_point(pair[1])}"

def fmt_dist(d: float) -> str:
    return f"{d:.2f}"
