# -----------------------------------------------------------------------------
# Tracing utility
# Purpose:
#   Append-only trace builder handed down the recursion by the top-level call
#   of each engine. The owner materializes it once into an immutable tuple
#   suitable for step-by-step playback and JSON responses.
# -----------------------------------------------------------------------------

from __future__ import annotations
from typing import Any, Dict, Generic, List, Sequence, Tuple, TypeVar

E = TypeVar("E")

class Tracer(Generic[E]):
    def __init__(self): self._steps: List[E] = []
    def add(self, event: E) -> E:
        self._steps.append(event)
        return event
    def __len__(self) -> int: return len(self._steps)
    def steps(self) -> Tuple[E, ...]:
        # Snapshot as a tuple; later appends never leak into a returned trace.
        return tuple(self._steps)

def find_result(trace: Sequence[Any]) -> Tuple[int, Any]:
    """
    Locate the terminal `result` event ("jump to final answer").
    Returns (index, event); raises LookupError for traces without one
    (closest-pair input errors).
    """
    for idx, ev in enumerate(trace):
        if ev.kind == "result":
            return idx, ev
    raise LookupError("Trace has no result event.")

def dump_trace(trace: Sequence[Any]) -> List[Dict[str, Any]]:
    # Export in plain dict form for easy JSON serialization.
    return [ev.model_dump() for ev in trace]
