# -----------------------------------------------------------------------------
# Input parsing
# Purpose: Turn uploaded/pasted text into engine input.
#   closest-pair : one "x y" pair per line
#   karatsuba    : whitespace/newline-separated integers, consumed pairwise
# Raises InputError with the offending line for anything malformed.
# -----------------------------------------------------------------------------

from __future__ import annotations
import math
import re
from typing import List, Literal

from .types import Point

Algorithm = Literal["closest-pair", "karatsuba"]

# Domain-specific error for malformed user input (bad tokens, wrong arity, etc.)
class InputError(ValueError): pass

_INT = re.compile(r"[-+]?\d+")

def parse_points(text: str) -> List[Point]:
    """
    Parse newline-separated "x y" lines into points. Blank lines are skipped.
    Example:
        2 3
        4 5
    """
    points: List[Point] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        parts = line.split()
        if len(parts) != 2:
            raise InputError(f"Line {lineno}: expected 2 numbers 'x y', got {len(parts)}: {line!r}")
        try:
            x, y = float(parts[0]), float(parts[1])
        except ValueError:
            raise InputError(f"Line {lineno}: not a number: {line!r}") from None
        if not (math.isfinite(x) and math.isfinite(y)):
            raise InputError(f"Line {lineno}: coordinates must be finite: {line!r}")
        points.append(Point(x, y))
    return points

def parse_integers(text: str) -> List[int]:
    """Parse whitespace/newline-separated base-10 integers (optional sign)."""
    numbers: List[int] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        for tok in raw.split():
            if not _INT.fullmatch(tok):
                raise InputError(f"Line {lineno}: not an integer: {tok!r}")
            try:
                numbers.append(int(tok))
            except ValueError as e:
                # int() refuses very long digit strings
                raise InputError(f"Line {lineno}: {e}") from None
    return numbers

def parse_input(text: str, algorithm: Algorithm):
    if algorithm == "closest-pair":
        return parse_points(text)
    if algorithm == "karatsuba":
        return parse_integers(text)
    raise InputError(f"Unknown algorithm: {algorithm}")
