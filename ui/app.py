# -----------------------------------------------------------------------------
# Streamlit Frontend for the Divide & Conquer Visualizer
# Purpose:
#   Step player: (1) pick an algorithm, (2) upload or paste input,
#   (3) fetch the full trace from the API once, then walk it with a
#   TracePlayer kept in session state.
# -----------------------------------------------------------------------------

import time
import requests, streamlit as st

from dnc.config import DEFAULT_CONFIG
from dnc.karatsuba import build_call_tree, evaluate
from dnc.models import ClosestPairEvent, KaratsubaEvent
from dnc.player import TracePlayer, call_tree_lines, closest_pair_snapshot, step_summary

API_URL = DEFAULT_CONFIG.api_url
PLAY_DELAY = 0.4  # seconds between auto-played steps

EXAMPLES = {
    "closest-pair": "2 3\n4 5\n6 7\n8 9",
    "karatsuba": "987654\n123456\n789123\n456789",
}

st.set_page_config(page_title="Divide & Conquer Visualizer", layout="centered")
st.title("Divide & Conquer — Step by Step")

# ---------------- Sidebar: algorithm + input ----------------------------------
with st.sidebar:
    algorithm = st.radio("Algorithm", ["closest-pair", "karatsuba"],
                         format_func=lambda a: "Closest Pair" if a == "closest-pair" else "Karatsuba Multiplication")
    upload = st.file_uploader("Upload input (.txt)", type=["txt"])
    st.caption("Expected format:")
    st.code(EXAMPLES[algorithm], language="text")

text = upload.getvalue().decode("utf-8") if upload else EXAMPLES[algorithm]
text = st.text_area("Input", value=text, height=150)

def _post(path: str, payload: dict):
    r = requests.post(f"{API_URL}{path}", json=payload, timeout=30)
    if r.status_code != 200:
        # Render API error as-is (400 carries {"error", "error_kind"})
        try:
            detail = r.json().get("detail", {})
            st.error(f"{detail.get('error_kind', 'error')}: {detail.get('error', r.text)}")
        except ValueError:
            st.error(r.text)
        st.stop()
    return r.json()

# Traces are fetched once per input; players are rebuilt from them lazily.
if st.button("Run", type="primary"):
    path = "/closest-pair" if algorithm == "closest-pair" else "/karatsuba/batch"
    st.session_state["run"] = {"algorithm": algorithm, "data": _post(path, {"text": text})}
    for key in [k for k in st.session_state if str(k).startswith("player-")]:
        del st.session_state[key]

run = st.session_state.get("run")
if not run or run["algorithm"] != algorithm:
    st.stop()

def _player(key: str, steps: list, model) -> TracePlayer:
    # One TracePlayer per trace, surviving reruns; API dicts back to frozen events.
    if key not in st.session_state:
        st.session_state[key] = TracePlayer([model.model_validate(s) for s in steps])
    return st.session_state[key]

def _controls(player: TracePlayer, key: str) -> bool:
    """Reset / back / next / jump-to-result buttons; returns True when Play was pressed."""
    cols = st.columns(5)
    if cols[0].button("⏮ Reset", key=f"{key}-reset"):
        player.reset()
    if cols[1].button("◀ Back", key=f"{key}-back"):
        player.step_back()
    if cols[2].button("Next ▶", key=f"{key}-next"):
        player.step_forward()
    if cols[3].button("Result ⏭", key=f"{key}-result"):
        player.jump_to_result()
    return cols[4].button("▶ Play", key=f"{key}-play", disabled=player.at_end)

def _run_player(player: TracePlayer, key: str, render):
    play = _controls(player, key)
    view = st.empty()
    with view.container():
        render(player)
    if play:
        for _ in player.play():
            time.sleep(PLAY_DELAY)
            with view.container():
                render(player)
    with st.expander("Steps so far"):
        st.code("\n".join(step_summary(ev) for ev in player.visible()), language="text")

# ---------------- Closest pair ---------------------------------------------------
def _xy(p) -> dict:
    return {"x": p.x, "y": p.y}

def _enc(color: str, **mark) -> dict:
    return {"mark": dict(mark, color=color),
            "encoding": {"x": {"field": "x", "type": "quantitative"}, "y": {"field": "y", "type": "quantitative"}}}

def _point_chart(player: TracePlayer, all_points: list):
    snap = closest_pair_snapshot(player.trace, player.index)
    ev = snap.event
    layers = [
        dict(_enc("#9ca3af", type="point"), data={"values": all_points}),
        dict(_enc("#2563eb", type="point", filled=True), data={"values": [_xy(p) for p in ev.points]}),
    ]
    if snap.strip_delta is not None:
        band = [{"x": snap.strip_x - snap.strip_delta, "x2": snap.strip_x + snap.strip_delta}]
        layers.append({"data": {"values": band}, "mark": {"type": "rect", "color": "#fde68a", "opacity": 0.35},
                       "encoding": {"x": {"field": "x", "type": "quantitative"}, "x2": {"field": "x2"}}})
    if snap.dividers:
        layers.append({"data": {"values": [{"x": x} for x in snap.dividers]},
                       "mark": {"type": "rule", "color": "#16a34a", "strokeDash": [4, 3]},
                       "encoding": {"x": {"field": "x", "type": "quantitative"}}})
    if ev.kind == "compare":
        layers.append(dict(_enc("#f97316", type="line", point=True), data={"values": [_xy(p) for p in ev.pair]}))
    if snap.best_pair:
        layers.append(dict(_enc("#dc2626", type="line", point=True, strokeWidth=3),
                           data={"values": [_xy(p) for p in snap.best_pair]}))
    st.vega_lite_chart({"layer": layers, "height": 360}, use_container_width=True)

    cols = st.columns(3)
    cols[0].metric("Comparisons", snap.comparisons)
    cols[1].metric("Best distance", "—" if snap.best_distance is None else f"{snap.best_distance:.2f}")
    cols[2].metric("Strip δ", "—" if snap.strip_delta is None else f"{snap.strip_delta:.2f}")
    st.caption(f"Step {player.index + 1} of {len(player)} · {ev.kind}")
    (st.success if ev.kind == "result" else st.info)(ev.message)

if algorithm == "closest-pair":
    data = run["data"]
    if not data["ok"]:
        st.error(data["error"])
        st.stop()
    player = _player("player-closest", data["steps"], ClosestPairEvent)
    all_points = data["result"]["points"]
    _run_player(player, "closest", lambda p: _point_chart(p, all_points))

# ---------------- Karatsuba ----------------------------------------------------------
else:
    def _karatsuba_step(player: TracePlayer):
        ev = player.current
        st.caption(f"Step {player.index + 1} of {len(player)} · level {ev.level} · {ev.kind}")
        cols = st.columns(3)
        cols[0].metric("num1", ev.num1)
        cols[1].metric("num2", ev.num2)
        cols[2].metric("result", "—" if ev.result is None else ev.result)
        if ev.z0 is not None:
            st.table([{"z0": ev.z0, "z1": ev.z1, "z2": ev.z2, "m": ev.m}])
        (st.success if ev.kind == "result" else st.info)(ev.message)

    data = run["data"]
    st.subheader("Final Result")
    st.code(str(data["product"]))
    if not data["pairs"]:
        st.warning("Need at least two numbers to show a multiplication.")
        st.stop()
    labels = [f"{p['a']} × {p['b']}" for p in data["pairs"]]
    i = st.selectbox("Pair", range(len(labels)), format_func=lambda j: labels[j])
    player = _player(f"player-karatsuba-{i}", data["pairs"][i]["steps"], KaratsubaEvent)
    _run_player(player, f"karatsuba-{i}", _karatsuba_step)

    tree = build_call_tree(player.trace)
    with st.expander("Recursion tree"):
        if tree is None:
            st.write("Single-digit operands: multiplied directly, no recursion.")
        else:
            st.code("\n".join(call_tree_lines(tree)), language="text")
            st.caption(f"Recombined from the leaf products: {evaluate(tree)}")
