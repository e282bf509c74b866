# -----------------------------------------------------------------------------
# Karatsuba Engine: instrumented recursive integer multiplication
# Responsibilities:
#   • Shortcut single-digit operand pairs to one direct product
#   • Recurse on absolute values: split by decimal digits, compute z0/z1/z2,
#     combine as z2*10^(2m) + (z1 - z2 - z0)*10^m + z0
#   • Re-apply the sign once, as the last (`result`) event
#   • Drive a flat list of operands pairwise, and chain a full product
#   • Rebuild the recursion tree from a trace for tree-style rendering
# -----------------------------------------------------------------------------

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from .models import KaratsubaEvent
from .tracer import Tracer

logger = logging.getLogger(__name__)

# Operands below this are multiplied directly.
BASE = 10


def _sign(v: int) -> int:
    return (v > 0) - (v < 0)

def digit_count(v: int) -> int:
    return len(str(abs(v)))

def combine(z0: int, z1: int, z2: int, m: int) -> int:
    return z2 * 10 ** (2 * m) + (z1 - z2 - z0) * 10 ** m + z0

def _check_operand(v: object) -> int:
    # bool is an int subclass but never a meaningful operand here
    if not isinstance(v, int) or isinstance(v, bool):
        raise TypeError(f"Karatsuba operands must be integers, got {v!r}")
    return v


class KaratsubaEngine:
    """
    Stateless engine: every `multiply` call builds its own Tracer and returns
    an immutable tuple of KaratsubaEvent ending in exactly one `result` event.
    """

    def _karatsuba(self, x: int, y: int, level: int, trace: Tracer[KaratsubaEvent]) -> int:
        trace.add(KaratsubaEvent(
            kind="start", level=level, num1=x, num2=y, result=x * y,
            message=f"Starting multiplication of {x} and {y}",
        ))

        x, y = abs(x), abs(y)

        if x < BASE or y < BASE:
            result = x * y
            trace.add(KaratsubaEvent(
                kind="base-case", level=level, num1=x, num2=y, result=result,
                message=f"Base case: {x} × {y} = {result}",
            ))
            return result

        n = max(digit_count(x), digit_count(y))
        m = n // 2
        p = 10 ** m
        high1, low1 = divmod(x, p)
        high2, low2 = divmod(y, p)
        trace.add(KaratsubaEvent(
            kind="split", level=level, num1=x, num2=y, m=m,
            high1=high1, low1=low1, high2=high2, low2=low2,
            message=(f"Split numbers:\n{x} = {high1} × 10^{m} + {low1}\n"
                     f"{y} = {high2} × 10^{m} + {low2}"),
        ))

        z0 = self._karatsuba(low1, low2, level + 1, trace)
        z1 = self._karatsuba(low1 + high1, low2 + high2, level + 1, trace)
        z2 = self._karatsuba(high1, high2, level + 1, trace)

        result = combine(z0, z1, z2, m)
        trace.add(KaratsubaEvent(
            kind="combine", level=level, num1=x, num2=y, m=m,
            high1=high1, low1=low1, high2=high2, low2=low2,
            z0=z0, z1=z1, z2=z2, result=result,
            message=f"Combining results:\nz0 = {z0}\nz1 = {z1}\nz2 = {z2}\nResult = {result}",
        ))
        return result

    # ---------------- main entries ----------------

    def multiply(self, a: int, b: int) -> Tuple[KaratsubaEvent, ...]:
        a, b = _check_operand(a), _check_operand(b)
        trace: Tracer[KaratsubaEvent] = Tracer()
        sign = _sign(a) * _sign(b)

        if abs(a) < BASE and abs(b) < BASE:
            result = a * b
            trace.add(KaratsubaEvent(
                kind="result", level=0, num1=a, num2=b, result=result,
                message=f"Simple multiplication for single-digit numbers: {a} × {b} = {result}",
            ))
            return trace.steps()

        result = sign * self._karatsuba(a, b, 0, trace)
        trace.add(KaratsubaEvent(
            kind="result", level=0, num1=a, num2=b, result=result,
            message=f"Final result after applying sign: {result}",
        ))
        logger.debug("karatsuba: %d x %d -> %d events", a, b, len(trace))
        return trace.steps()

    def multiply_pairs(self, numbers: Sequence[int]) -> List[Tuple[KaratsubaEvent, ...]]:
        """
        Consume a flat operand list two at a time: (n0, n1), (n2, n3), ...
        A trailing odd operand has no partner and is skipped.
        """
        if len(numbers) % 2:
            logger.warning("karatsuba: ignoring unpaired trailing operand %r", numbers[-1])
        return [self.multiply(numbers[i], numbers[i + 1]) for i in range(0, len(numbers) - 1, 2)]

    def product(self, numbers: Iterable[int]) -> int:
        """Multiply every operand left to right, each step through `multiply`."""
        nums = [_check_operand(v) for v in numbers]
        if not nums:
            raise ValueError("product() needs at least one operand")
        acc = nums[0]
        for v in nums[1:]:
            acc = final_result(self.multiply(acc, v))
        return acc


def karatsuba(a: int, b: int) -> Tuple[KaratsubaEvent, ...]:
    return KaratsubaEngine().multiply(a, b)

def final_result(trace: Sequence[KaratsubaEvent]) -> int:
    # The result event is always last in a Karatsuba trace.
    return trace[-1].result


# ---------------- call-tree reconstruction ----------------

@dataclass
class KaratsubaNode:
    # One recursive call, rebuilt from its start..base-case / start..combine span.
    level: int
    num1: int
    num2: int
    m: Optional[int] = None
    high1: Optional[int] = None
    low1: Optional[int] = None
    high2: Optional[int] = None
    low2: Optional[int] = None
    result: Optional[int] = None
    children: List["KaratsubaNode"] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children


def build_call_tree(trace: Sequence[KaratsubaEvent]) -> Optional[KaratsubaNode]:
    """
    Rebuild the recursion tree from a trace. Returns None for a single-digit
    shortcut trace, which has no recursion.

    Children are ordered z0, z1, z2 (the order the calls were made).
    """
    root: Optional[KaratsubaNode] = None
    stack: List[KaratsubaNode] = []
    for ev in trace:
        if ev.kind == "start":
            node = KaratsubaNode(level=ev.level, num1=abs(ev.num1), num2=abs(ev.num2))
            if stack:
                stack[-1].children.append(node)
            else:
                root = node
            stack.append(node)
        elif ev.kind == "split":
            node = stack[-1]
            node.m = ev.m
            node.high1, node.low1, node.high2, node.low2 = ev.high1, ev.low1, ev.high2, ev.low2
        elif ev.kind in ("base-case", "combine"):
            stack.pop().result = ev.result
    if stack:
        raise ValueError("Truncated trace: unfinished recursive call")
    return root


def evaluate(node: KaratsubaNode) -> int:
    """Re-apply the combination formula bottom-up from the leaf products."""
    if node.is_leaf:
        return node.result
    z0, z1, z2 = (evaluate(c) for c in node.children)
    return combine(z0, z1, z2, node.m)
