# -----------------------------------------------------------------------------
# Step player
# Purpose:
#   Cursor over a fully materialized trace, the way the UI's
#   play / pause / next / reset controls consume it. Event k is the state
#   after exactly k+1 emitted steps; the player never touches the engines.
# -----------------------------------------------------------------------------

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Generic, Iterator, List, Optional, Sequence, Tuple, TypeVar

from .karatsuba import KaratsubaNode
from .models import ClosestPairEvent
from .tracer import find_result
from .types import Point

E = TypeVar("E")


class TracePlayer(Generic[E]):
    def __init__(self, trace: Sequence[E]):
        if not trace:
            raise ValueError("Cannot play an empty trace.")
        self._trace: Tuple[E, ...] = tuple(trace)
        self._index = 0

    def __len__(self) -> int:
        return len(self._trace)

    @property
    def trace(self) -> Tuple[E, ...]:
        return self._trace

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> E:
        return self._trace[self._index]

    @property
    def at_end(self) -> bool:
        return self._index == len(self._trace) - 1

    def visible(self) -> Tuple[E, ...]:
        return self._trace[: self._index + 1]

    def step_forward(self) -> E:
        if not self.at_end:
            self._index += 1
        return self.current

    def step_back(self) -> E:
        if self._index > 0:
            self._index -= 1
        return self.current

    def reset(self) -> E:
        self._index = 0
        return self.current

    def jump_to(self, k: int) -> E:
        if not 0 <= k < len(self._trace):
            raise IndexError(f"Step {k} outside 0..{len(self._trace) - 1}")
        self._index = k
        return self.current

    def jump_to_result(self) -> E:
        idx, _ = find_result(self._trace)
        return self.jump_to(idx)

    def play(self) -> Iterator[E]:
        # Yields the steps after the cursor, advancing it as it goes.
        while not self.at_end:
            yield self.step_forward()


@dataclass
class ClosestPairSnapshot:
    # What a renderer needs to draw step `index` of a closest-pair trace.
    index: int
    event: ClosestPairEvent
    best_pair: Optional[Tuple[Point, Point]] = None
    best_distance: Optional[float] = None
    dividers: List[float] = field(default_factory=list)
    strip_x: Optional[float] = None
    strip_delta: Optional[float] = None
    comparisons: int = 0

def closest_pair_snapshot(trace: Sequence[ClosestPairEvent], k: int) -> ClosestPairSnapshot:
    """
    Summarise the closest-pair state after step k:
      - best_pair/best_distance: smallest compared distance so far
        (the result event's pair once reached)
      - dividers: every split x seen so far, in order
      - strip_x/strip_delta: centre and half-width of the most recent strip
        check, if any
    """
    if not 0 <= k < len(trace):
        raise IndexError(f"Step {k} outside 0..{len(trace) - 1}")
    snap = ClosestPairSnapshot(index=k, event=trace[k])
    for ev in trace[: k + 1]:
        if ev.kind == "compare":
            snap.comparisons += 1
            if snap.best_distance is None or ev.distance < snap.best_distance:
                snap.best_distance, snap.best_pair = ev.distance, ev.pair
        elif ev.kind == "divide":
            if ev.distance is None:
                snap.dividers.append(ev.midpoint)
            else:
                snap.strip_x, snap.strip_delta = ev.midpoint, ev.distance
        elif ev.kind == "result":
            snap.best_distance, snap.best_pair = ev.distance, ev.pair
    return snap

def step_summary(ev: Any) -> str:
    # One-line label for step lists: "[compare] Comparing points ..."
    first = ev.message.splitlines()[0] if ev.message else ""
    return f"[{ev.kind}] {first}"

def call_tree_lines(node: KaratsubaNode, indent: str = "    ") -> List[str]:
    """
    Indented outline of a Karatsuba call tree, one line per call, parents
    before children (z0, z1, z2):
        12 × 34 = 408  (m=1)
            2 × 4 = 8
            3 × 7 = 21
            1 × 3 = 3
    """
    lines: List[str] = []
    stack = [(node, 0)]
    while stack:
        cur, depth = stack.pop()
        label = f"{cur.num1} × {cur.num2} = {cur.result}"
        if cur.m is not None:
            label += f"  (m={cur.m})"
        lines.append(indent * depth + label)
        stack.extend((child, depth + 1) for child in reversed(cur.children))
    return lines
