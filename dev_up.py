# -----------------------------------------------------------------------------
# dev_up.py — Local launcher for the Divide & Conquer Visualizer
# Starts the trace API (uvicorn) and the Streamlit step player from one
# DnCConfig, smoke-tests both engines over HTTP, then streams their logs.
# Key details:
#   - Ports, bind host and log level come from DnCConfig (.env aware)
#   - The UI gets API_URL set to the API this script just started, which its
#     own DnCConfig then reads
#   - Readiness means /health answers {"ok": true}, not merely HTTP 200
# -----------------------------------------------------------------------------

from __future__ import annotations
import atexit
import os
import socket
import subprocess
import sys
import time
from pathlib import Path
from typing import Dict, List

PROJECT_ROOT = Path(__file__).parent.resolve()
SRC_DIR = PROJECT_ROOT / "src"
UI_FILE = PROJECT_ROOT / "ui" / "app.py"
API_APP = "api.main:app"

# the launcher runs from a checkout, where src/ may not be installed yet
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from dnc.config import DnCConfig  # noqa: E402

# Inputs the smoke test sends; small enough to answer instantly.
SMOKE_POINTS = "0 0\n3 4\n0 0.1"
SMOKE_OPERANDS = {"a": 1234, "b": 5678}

# ---------------------- HELPERS ----------------------
def echo(msg: str): print(f"[dev_up] {msg}", flush=True)
def fail(msg: str, code: int = 1): echo(f"❌ {msg}"); sys.exit(code)

def port_in_use(host: str, port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.settimeout(0.5)
        return s.connect_ex((host, port)) == 0

def require(module: str, hint: str):
    try:
        __import__(module)
    except ImportError:
        fail(f"{module} missing → {hint}")

def child_env(cfg: DnCConfig, api_url: str) -> Dict[str, str]:
    # Both children import dnc.* and read the same settings this process resolved.
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(p for p in (str(SRC_DIR), str(PROJECT_ROOT), env.get("PYTHONPATH")) if p)
    env["DNC_LOG_LEVEL"] = cfg.log_level
    env["API_URL"] = api_url
    return env

def wait_until_healthy(api_url: str, timeout: float = 60.0) -> bool:
    import requests
    deadline = time.time() + timeout
    while time.time() < deadline:
        try:
            r = requests.get(f"{api_url}/health", timeout=2)
            if r.status_code == 200 and r.json() == {"ok": True}:
                return True
        except (requests.RequestException, ValueError):
            pass
        time.sleep(0.4)
    return False

def smoke_test(api_url: str) -> List[str]:
    """
    One request per engine; returns the problems found (empty when both
    traces end in their result event).
    """
    import requests
    problems: List[str] = []
    checks = [
        ("/closest-pair", {"text": SMOKE_POINTS}),
        ("/karatsuba", SMOKE_OPERANDS),
    ]
    for path, payload in checks:
        try:
            r = requests.post(f"{api_url}{path}", json=payload, timeout=10)
            out = r.json()
        except (requests.RequestException, ValueError) as e:
            problems.append(f"{path}: {e}")
            continue
        if r.status_code != 200 or not out.get("ok"):
            problems.append(f"{path}: HTTP {r.status_code} {out}")
        elif out["result_index"] != len(out["steps"]) - 1:
            problems.append(f"{path}: result is not the last step")
        else:
            echo(f"   {path}: {len(out['steps'])} steps")
    return problems

# ---------------------- STARTERS ----------------------
def start_api(cfg: DnCConfig, env: Dict[str, str]) -> subprocess.Popen:
    cmd = [
        sys.executable, "-m", "uvicorn", API_APP,
        "--host", cfg.api_host, "--port", str(cfg.api_port),
        "--log-level", cfg.log_level.lower(), "--reload",
    ]
    echo(f"▶ API → {' '.join(cmd)}")
    return subprocess.Popen(cmd, cwd=str(PROJECT_ROOT), env=env,
                            stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True)

def start_ui(cfg: DnCConfig, env: Dict[str, str]) -> subprocess.Popen:
    env = dict(env, STREAMLIT_BROWSER_GATHER_USAGE_STATS="false")
    cmd = [
        sys.executable, "-m", "streamlit", "run", str(UI_FILE),
        "--server.port", str(cfg.ui_port),
        "--server.address", cfg.api_host,
        "--server.headless", "true",
    ]
    echo(f"▶ UI  → {' '.join(cmd)}")
    return subprocess.Popen(cmd, cwd=str(PROJECT_ROOT), env=env,
                            stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True)

# ---------------------- MAIN ----------------------
def main():
    echo("🚀 Divide & Conquer Visualizer (dev)")
    if (PROJECT_ROOT / ".env").exists():
        echo("Using settings from .env")
    cfg = DnCConfig()
    api_url = cfg.local_api_url()
    echo(f"API {api_url} · UI port {cfg.ui_port} · log level {cfg.log_level}")

    require("uvicorn", "pip install 'uvicorn[standard]'")
    require("streamlit", "pip install streamlit")
    require("requests", "pip install requests")

    for port in (cfg.api_port, cfg.ui_port):
        if port_in_use(cfg.client_host(), port):
            fail(f"Port {port} already in use.")

    env = child_env(cfg, api_url)
    procs: Dict[str, subprocess.Popen] = {"API": start_api(cfg, env)}

    def cleanup():
        for proc in procs.values():
            if proc.poll() is None:
                proc.terminate()
                try:
                    proc.wait(timeout=2)
                except subprocess.TimeoutExpired:
                    proc.kill()
    atexit.register(cleanup)

    echo("⌛ Waiting for /health ...")
    if not wait_until_healthy(api_url):
        api = procs["API"]
        if api.stdout:
            echo("Last API output:")
            for _ in range(20):
                line = api.stdout.readline()
                if not line:
                    break
                print(f"[API] {line}", end="")
        fail("API did not become healthy in time.")

    echo("🔎 Smoke-testing both engines ...")
    problems = smoke_test(api_url)
    if problems:
        for p in problems:
            echo(f"   {p}")
        fail("Engine smoke test failed.")

    procs["UI"] = start_ui(cfg, env)
    echo(f"🌐 Step player: http://localhost:{cfg.ui_port}")
    echo(f"📘 API docs:    {api_url}/docs")

    try:
        while all(proc.poll() is None for proc in procs.values()):
            for name, proc in procs.items():
                line = proc.stdout.readline() if proc.stdout else ""
                if line:
                    print(f"[{name}] {line}", end="")
            time.sleep(0.2)
    except KeyboardInterrupt:
        echo("🛑 Ctrl+C: shutting down")
    finally:
        cleanup()
        echo("✅ Stopped.")

if __name__ == "__main__":
    main()
