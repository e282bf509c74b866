# -----------------------------------------------------------------------------
# Closest Pair Engine: instrumented divide & conquer over a point set
# Responsibilities:
#   • Validate the point set (too few points, duplicates) and report problems
#     as trace events rather than exceptions
#   • Flag collinear (horizontal / vertical) input as an advisory event
#   • Sort into x-order and y-order views and recurse, brute-forcing small sets
#   • Check the strip around each dividing line against the next 6 candidates
#   • Finish with exactly one `result` event carrying the global minimum
# -----------------------------------------------------------------------------

from __future__ import annotations
import logging
from typing import Iterable, Tuple

from .formatters import fmt_dist, fmt_num, fmt_pair
from .models import ClosestPairEvent
from .tracer import Tracer
from .types import Point, PointLike, PointSet, as_point_set, euclidean

logger = logging.getLogger(__name__)

# Points per recursion leaf; at or below this the set is brute-forced.
BRUTE_FORCE_MAX = 3
# Each strip point is compared with at most this many successors in y-order.
STRIP_WINDOW = 6

Pair = Tuple[Point, Point]
Best = Tuple[float, Pair]


class ClosestPairEngine:
    """
    Stateless engine: every `solve` call builds its own Tracer and returns an
    immutable tuple of ClosestPairEvent.
    """

    # ---------------- internal helpers ----------------

    def _brute_force(self, pts: PointSet, trace: Tracer[ClosestPairEvent]) -> Best:
        best_d = float("inf")
        best_pair: Pair = (pts[0], pts[1])
        for i in range(len(pts)):
            for j in range(i + 1, len(pts)):
                d = euclidean(pts[i], pts[j])
                trace.add(ClosestPairEvent(
                    kind="compare",
                    points=pts,
                    pair=(pts[i], pts[j]),
                    distance=d,
                    message=f"Comparing points {fmt_pair((pts[i], pts[j]))}. Distance: {fmt_dist(d)}",
                ))
                # strict: first pair found wins exact ties
                if d < best_d:
                    best_d, best_pair = d, (pts[i], pts[j])
        return best_d, best_pair

    def _split_pairs(self, py: PointSet, mid_x: float, best: Best,
                     trace: Tracer[ClosestPairEvent]) -> Best:
        """
        Strip check: only points within delta of the dividing line can beat
        delta, and in y-order each one needs at most STRIP_WINDOW successors.
        """
        delta, best_pair = best
        sy = tuple(p for p in py if mid_x - delta <= p.x <= mid_x + delta)
        trace.add(ClosestPairEvent(
            kind="divide",
            points=sy,
            midpoint=mid_x,
            distance=delta,
            message=f"Checking split pairs around x = {fmt_num(mid_x)} with delta = {fmt_dist(delta)}",
        ))
        for i in range(len(sy)):
            for j in range(i + 1, min(i + 1 + STRIP_WINDOW, len(sy))):
                d = euclidean(sy[i], sy[j])
                trace.add(ClosestPairEvent(
                    kind="compare",
                    points=sy,
                    pair=(sy[i], sy[j]),
                    distance=d,
                    message=f"Comparing split pair {fmt_pair((sy[i], sy[j]))}. Distance: {fmt_dist(d)}",
                ))
                if d < delta:
                    delta, best_pair = d, (sy[i], sy[j])
        return delta, best_pair

    def _closest(self, px: PointSet, py: PointSet, trace: Tracer[ClosestPairEvent]) -> Best:
        if len(px) <= BRUTE_FORCE_MAX:
            return self._brute_force(px, trace)

        mid = len(px) // 2
        qx, rx = px[:mid], px[mid:]
        mid_x = px[mid].x
        trace.add(ClosestPairEvent(
            kind="divide",
            points=px,
            midpoint=mid_x,
            message=f"Dividing points at x = {fmt_num(mid_x)}",
        ))

        # y-ordered views of exactly the two halves; with a unique split x this
        # is the same as x <= mid_x / x > mid_x
        left = set(qx)
        qy = tuple(p for p in py if p in left)
        ry = tuple(p for p in py if p not in left)

        d_left, pair_left = self._closest(qx, qy, trace)
        d_right, pair_right = self._closest(rx, ry, trace)
        best: Best = (d_left, pair_left) if d_left <= d_right else (d_right, pair_right)

        return self._split_pairs(py, mid_x, best, trace)

    @staticmethod
    def _validate(points: PointSet) -> None:
        # Non-finite coordinates have no defined distance; reject before tracing.
        for p in points:
            if not p.is_finite():
                raise ValueError(f"Non-finite coordinate in point {p!r}")

    # ---------------- main entry ----------------

    def solve(self, points: Iterable[PointLike]) -> Tuple[ClosestPairEvent, ...]:
        """
        Run the instrumented closest-pair algorithm.
          0) < 2 points or duplicate coordinates → single `error` event.
          1) exactly 2 points → single `result` event.
          2) collinear input → one advisory `special-case` event, then continue.
          3) divide & conquer, then one final `result` event.
        """
        pts = as_point_set(points)
        self._validate(pts)
        trace: Tracer[ClosestPairEvent] = Tracer()
        logger.debug("closest-pair: %d points", len(pts))

        if len(pts) < 2:
            trace.add(ClosestPairEvent(
                kind="error",
                points=pts,
                message="Insufficient points: At least two points are required.",
            ))
            return trace.steps()

        if len(set(pts)) != len(pts):
            trace.add(ClosestPairEvent(
                kind="error",
                points=pts,
                message="Duplicate points detected.",
            ))
            return trace.steps()

        if len(pts) == 2:
            d = euclidean(pts[0], pts[1])
            pair: Pair = (pts[0], pts[1])
            trace.add(ClosestPairEvent(
                kind="result",
                points=pts,
                pair=pair,
                distance=d,
                message=f"Found closest pair: {fmt_pair(pair)} with distance {fmt_dist(d)}",
            ))
            return trace.steps()

        if all(p.y == pts[0].y for p in pts):
            trace.add(ClosestPairEvent(
                kind="special-case",
                points=pts,
                message="All points lie on the same horizontal line (x-axis).",
            ))
        elif all(p.x == pts[0].x for p in pts):
            trace.add(ClosestPairEvent(
                kind="special-case",
                points=pts,
                message="All points lie on the same vertical line (y-axis).",
            ))

        # sorted() is stable: ties keep the caller's relative order
        px = tuple(sorted(pts, key=lambda p: p.x))
        py = tuple(sorted(pts, key=lambda p: p.y))

        distance, pair = self._closest(px, py, trace)
        trace.add(ClosestPairEvent(
            kind="result",
            points=pts,
            pair=pair,
            distance=distance,
            message=f"Found closest pair: {fmt_pair(pair)} with distance {fmt_dist(distance)}",
        ))
        logger.debug("closest-pair: %d events, distance=%s", len(trace), distance)
        return trace.steps()


def closest_pair(points: Iterable[PointLike]) -> Tuple[ClosestPairEvent, ...]:
    # Convenience wrapper; each call gets a fresh engine.
    return ClosestPairEngine().solve(points)
