import logging
import pytest
from dnc.karatsuba import (
    KaratsubaEngine, build_call_tree, combine, digit_count, evaluate, final_result, karatsuba,
)

def _kinds(trace):
    return [ev.kind for ev in trace]

def test_example_1234_by_5678():
    assert final_result(karatsuba(1234, 5678)) == 7006652

def test_two_digit_trace_shape():
    trace = karatsuba(12, 34)
    assert _kinds(trace) == [
        "start", "split",
        "start", "base-case",
        "start", "base-case",
        "start", "base-case",
        "combine", "result",
    ]
    split = trace[1]
    assert (split.m, split.high1, split.low1, split.high2, split.low2) == (1, 1, 2, 3, 4)
    assert split.result is None
    comb = trace[-2]
    assert (comb.z0, comb.z1, comb.z2) == (8, 21, 3)
    assert comb.result == 408
    assert [ev.level for ev in trace[2:8]] == [1] * 6
    assert trace[-1].message == "Final result after applying sign: 408"

def test_start_event_shows_unsplit_product():
    trace = karatsuba(-12, 34)
    assert trace[0].kind == "start"
    assert (trace[0].num1, trace[0].num2, trace[0].result) == (-12, 34, -408)
    # recursion works on absolute values
    assert trace[1].num1 == 12

@pytest.mark.parametrize("a,b", [(3, -4), (0, 9), (-7, -8), (9, 9)])
def test_single_digit_shortcut(a, b):
    trace = karatsuba(a, b)
    assert len(trace) == 1
    assert trace[0].kind == "result"
    assert trace[0].result == a * b
    assert trace[0].message.startswith("Simple multiplication")

@pytest.mark.parametrize("a,b", [(-12, 34), (12, -34), (-1234, -5678), (0, 12345), (7, 100)])
def test_sign_applied_once_at_end(a, b):
    trace = karatsuba(a, b)
    assert final_result(trace) == a * b
    # only the final event may be negative among computed results
    assert all(ev.result >= 0 for ev in trace[1:-1] if ev.result is not None)

def test_every_combine_matches_formula():
    for ev in karatsuba(987654, 123456):
        if ev.kind == "combine":
            assert ev.result == combine(ev.z0, ev.z1, ev.z2, ev.m)
            assert ev.result == ev.num1 * ev.num2

def test_exactly_one_result_event_last():
    trace = karatsuba(31415926, 27182818)
    assert [i for i, ev in enumerate(trace) if ev.kind == "result"] == [len(trace) - 1]

def test_call_tree_reconstruction():
    root = build_call_tree(karatsuba(12, 34))
    assert (root.num1, root.num2, root.m) == (12, 34, 1)
    assert [(c.num1, c.num2) for c in root.children] == [(2, 4), (3, 7), (1, 3)]
    assert all(c.is_leaf for c in root.children)
    assert evaluate(root) == 408

def test_call_tree_none_for_shortcut():
    assert build_call_tree(karatsuba(3, 4)) is None

def test_truncated_trace_rejected():
    trace = karatsuba(12, 34)
    with pytest.raises(ValueError):
        build_call_tree(trace[:4])

@pytest.mark.parametrize("bad", [1.5, "12", True, None])
def test_non_integer_operands_rejected(bad):
    with pytest.raises(TypeError):
        karatsuba(bad, 12)

def test_multiply_pairs_consumes_two_at_a_time():
    traces = KaratsubaEngine().multiply_pairs([12, 34, -5, 6])
    assert [final_result(t) for t in traces] == [408, -30]

def test_multiply_pairs_skips_unpaired_operand(caplog):
    with caplog.at_level(logging.WARNING, logger="dnc.karatsuba"):
        traces = KaratsubaEngine().multiply_pairs([12, 34, 99])
    assert len(traces) == 1
    assert "unpaired" in caplog.text

def test_product_of_all_numbers():
    engine = KaratsubaEngine()
    assert engine.product([12, 34, -5]) == -2040
    assert engine.product([7]) == 7
    assert engine.product([987654, 123456, 789123, 456789]) == 987654 * 123456 * 789123 * 456789
    with pytest.raises(ValueError):
        engine.product([])

def test_digit_count():
    assert digit_count(0) == 1
    assert digit_count(-12345) == 5

def test_engine_is_deterministic():
    engine = KaratsubaEngine()
    assert engine.multiply(-98765, 4321) == engine.multiply(-98765, 4321)
