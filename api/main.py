# --- Divide & Conquer Visualizer: Trace API (FastAPI) --------------------------
# Purpose: Thin HTTP layer that (1) accepts structured or raw-text input,
# (2) runs the instrumented engines, and (3) returns the full trace plus the
# index of its terminal result event for "jump to final answer".
# ------------------------------------------------------------------------------

from __future__ import annotations
import logging
import math
from typing import Any, Dict, List, Optional
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from dnc.closest_pair import ClosestPairEngine
from dnc.config import DEFAULT_CONFIG
from dnc.karatsuba import KaratsubaEngine, digit_count, final_result
from dnc.parsing import InputError, parse_input
from dnc.tracer import dump_trace, find_result
from dnc.types import Point

_config = DEFAULT_CONFIG
logging.basicConfig(level=_config.log_level.upper(),
                    format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Divide & Conquer Trace API")

# Engines are stateless; one instance of each serves every request
_closest = ClosestPairEngine()
_karatsuba = KaratsubaEngine()

# ----------------------------- Schemas ----------------------------------------
class PointIn(BaseModel):
    x: float
    y: float

class ClosestPairRequest(BaseModel):
    # Either structured points or the raw "x y" per line text.
    points: Optional[List[PointIn]] = None
    text: Optional[str] = None

class KaratsubaRequest(BaseModel):
    a: int
    b: int

class KaratsubaBatchRequest(BaseModel):
    # Either structured operands or whitespace-separated integer text.
    numbers: Optional[List[int]] = None
    text: Optional[str] = None

# ----------------------------- Helpers ----------------------------------------
def _user_error(message: str) -> HTTPException:
    # 400: input the engines cannot accept (parse failure, limits, bad values).
    return HTTPException(status_code=400, detail={"error": message, "error_kind": "user_input"})

def _trace_payload(trace) -> Dict[str, Any]:
    """
    Shared response shape: full trace + result locator.
    ok is False only for input-error traces (which have no result event).
    """
    try:
        idx, ev = find_result(trace)
    except LookupError:
        return {"ok": False, "steps": dump_trace(trace), "result_index": None, "result": None,
                "error": trace[0].message}
    return {"ok": True, "steps": dump_trace(trace), "result_index": idx, "result": ev.model_dump()}

def _check_operands(numbers: List[int]) -> None:
    for n in numbers:
        if digit_count(n) > _config.max_digits:
            raise _user_error(f"Operand has more than {_config.max_digits} digits.")

def _check_extent(points: List[Point]) -> None:
    # Every pairwise distance is bounded by the bounding-box diagonal; past
    # float range it would be inf, which JSON cannot carry.
    if len(points) < 2 or not all(p.is_finite() for p in points):
        return
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    if not math.isfinite(math.hypot(max(xs) - min(xs), max(ys) - min(ys))):
        raise _user_error("Points are too far apart: distances exceed the floating-point range.")

def _pair_payload(trace) -> Dict[str, Any]:
    # the last event carries the caller's signed operands
    last = trace[-1]
    return {"a": last.num1, "b": last.num2, "steps": dump_trace(trace), "result": final_result(trace)}

# ----------------------------- Routes -----------------------------------------
@app.get("/health")
def health(): return {"ok": True}

@app.post("/closest-pair")
def closest_pair(req: ClosestPairRequest):
    """
    Run closest-pair on the given points.
    - `text` wins when both forms are present (it is what the UI uploads).
    - Input errors (too few / duplicate points) come back as an error trace
      with ok=False and HTTP 200; malformed input is a 400.
    """
    if req.text is not None:
        try:
            points = parse_input(req.text, "closest-pair")
        except InputError as e:
            raise _user_error(str(e))
    elif req.points is not None:
        points = [Point(p.x, p.y) for p in req.points]
    else:
        raise _user_error("Provide 'points' or 'text'.")

    if len(points) > _config.max_points:
        raise _user_error(f"At most {_config.max_points} points are accepted.")
    _check_extent(points)
    try:
        trace = _closest.solve(points)
    except ValueError as e:
        raise _user_error(str(e))
    logger.info("closest-pair: %d points -> %d steps", len(points), len(trace))
    return _trace_payload(trace)

@app.post("/karatsuba")
def karatsuba(req: KaratsubaRequest):
    _check_operands([req.a, req.b])
    trace = _karatsuba.multiply(req.a, req.b)
    logger.info("karatsuba: %d x %d -> %d steps", req.a, req.b, len(trace))
    return _trace_payload(trace)

@app.post("/karatsuba/batch")
def karatsuba_batch(req: KaratsubaBatchRequest):
    """
    Multiply a flat operand list pairwise, plus the product of all operands.
    A trailing odd operand contributes to the product but forms no pair.
    """
    if req.text is not None:
        try:
            numbers = parse_input(req.text, "karatsuba")
        except InputError as e:
            raise _user_error(str(e))
    elif req.numbers is not None:
        numbers = list(req.numbers)
    else:
        raise _user_error("Provide 'numbers' or 'text'.")

    if not numbers:
        raise _user_error("No operands given.")
    _check_operands(numbers)
    # the running product grows with every operand
    if sum(digit_count(n) for n in numbers) > 2 * _config.max_digits:
        raise _user_error(f"Operands total more than {2 * _config.max_digits} digits.")

    traces = _karatsuba.multiply_pairs(numbers)
    return {
        "pairs": [_pair_payload(trace) for trace in traces],
        "product": _karatsuba.product(numbers),
    }
