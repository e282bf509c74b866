import pytest
from dnc.closest_pair import closest_pair
from dnc.karatsuba import build_call_tree, karatsuba
from dnc.player import TracePlayer, call_tree_lines, closest_pair_snapshot, step_summary
from dnc.tracer import Tracer, find_result
from dnc.types import Point

HORIZONTAL = [(0, 0), (1, 0), (3, 0), (7, 0)]
SPLIT = [(0, 0), (1, 10), (4, 0), (5, 0), (9, 10), (10, 0)]

def test_cursor_moves_and_clamps():
    player = TracePlayer(closest_pair(HORIZONTAL))
    assert len(player) == 6
    assert player.index == 0 and player.current.kind == "special-case"
    assert player.step_back().kind == "special-case"
    assert player.step_forward().kind == "divide"
    assert len(player.visible()) == 2
    for _ in range(10):
        player.step_forward()
    assert player.at_end and player.index == 5
    assert player.reset().kind == "special-case"
    assert player.trace == closest_pair(HORIZONTAL)

def test_jump_to_result_and_bounds():
    player = TracePlayer(closest_pair(HORIZONTAL))
    assert player.jump_to_result().kind == "result"
    assert player.index == 5
    with pytest.raises(IndexError):
        player.jump_to(6)

def test_play_yields_remaining_steps():
    trace = karatsuba(12, 34)
    player = TracePlayer(trace)
    player.jump_to(3)
    assert list(player.play()) == list(trace[4:])
    assert player.at_end

def test_error_trace_has_no_result():
    trace = closest_pair([(1, 1)])
    with pytest.raises(LookupError):
        find_result(trace)
    with pytest.raises(LookupError):
        TracePlayer(trace).jump_to_result()

def test_empty_trace_rejected():
    with pytest.raises(ValueError):
        TracePlayer(())

def test_tracer_snapshot_is_detached():
    tracer = Tracer()
    tracer.add("a")
    snap = tracer.steps()
    tracer.add("b")
    assert snap == ("a",)
    assert len(tracer) == 2

def test_closest_pair_snapshot_progression():
    trace = closest_pair(SPLIT)
    first = closest_pair_snapshot(trace, 0)
    assert first.event.kind == "divide"
    assert first.comparisons == 0 and first.best_pair is None
    assert first.dividers == [5]
    assert first.strip_x is None and first.strip_delta is None

    last = closest_pair_snapshot(trace, len(trace) - 1)
    assert last.best_pair == (Point(4, 0), Point(5, 0))
    assert last.best_distance == 1.0
    assert last.strip_delta == 4.0
    assert last.strip_x == 5
    assert last.dividers == [5]
    assert last.comparisons == sum(1 for ev in trace if ev.kind == "compare")

    with pytest.raises(IndexError):
        closest_pair_snapshot(trace, len(trace))

def test_step_summary_uses_first_message_line():
    trace = karatsuba(12, 34)
    assert step_summary(trace[1]) == "[split] Split numbers:"

def test_call_tree_lines_outline():
    lines = call_tree_lines(build_call_tree(karatsuba(12, 34)))
    assert lines == [
        "12 × 34 = 408  (m=1)",
        "    2 × 4 = 8",
        "    3 × 7 = 21",
        "    1 × 3 = 3",
    ]

def test_call_tree_lines_nest_by_level():
    root = build_call_tree(karatsuba(1234, 5678))
    lines = call_tree_lines(root, indent="-")
    assert lines[0].startswith("1234 × 5678 = 7006652")
    depths = [len(line) - len(line.lstrip("-")) for line in lines]
    assert depths[0] == 0 and max(depths) >= 2
    assert len(lines) == sum(1 for ev in karatsuba(1234, 5678) if ev.kind == "start")
