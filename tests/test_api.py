import pytest
from fastapi.testclient import TestClient

import api.main as api_main
from dnc.config import DnCConfig

client = TestClient(api_main.app)

def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}

def test_closest_pair_from_text():
    r = client.post("/closest-pair", json={"text": "0 0\n3 4\n0 0.1"})
    assert r.status_code == 200
    out = r.json()
    assert out["ok"] is True
    assert out["result_index"] == len(out["steps"]) - 1
    assert out["result"]["distance"] == pytest.approx(0.1)
    assert out["result"]["pair"] == [{"x": 0, "y": 0}, {"x": 0, "y": 0.1}]

def test_closest_pair_from_points():
    r = client.post("/closest-pair", json={"points": [{"x": 0, "y": 0}, {"x": 3, "y": 4}]})
    out = r.json()
    assert [s["kind"] for s in out["steps"]] == ["result"]
    assert out["result"]["distance"] == 5.0

def test_closest_pair_input_error_is_a_trace():
    r = client.post("/closest-pair", json={"points": [{"x": 1, "y": 1}]})
    assert r.status_code == 200
    out = r.json()
    assert out["ok"] is False
    assert out["result_index"] is None
    assert out["error"].startswith("Insufficient points")

@pytest.mark.parametrize("payload", [{"text": "1 2 3"}, {}])
def test_closest_pair_bad_request(payload):
    r = client.post("/closest-pair", json=payload)
    assert r.status_code == 400
    assert r.json()["detail"]["error_kind"] == "user_input"

def test_closest_pair_point_limit(monkeypatch):
    monkeypatch.setattr(api_main, "_config", DnCConfig(max_points=2))
    r = client.post("/closest-pair", json={"text": "0 0\n1 1\n2 5"})
    assert r.status_code == 400

def test_karatsuba():
    r = client.post("/karatsuba", json={"a": 1234, "b": 5678})
    assert r.status_code == 200
    out = r.json()
    assert out["ok"] is True
    assert out["result"]["result"] == 7006652
    assert out["steps"][0]["kind"] == "start"

def test_karatsuba_digit_limit(monkeypatch):
    monkeypatch.setattr(api_main, "_config", DnCConfig(max_digits=3))
    r = client.post("/karatsuba", json={"a": 1234, "b": 5})
    assert r.status_code == 400

def test_karatsuba_batch_from_text():
    r = client.post("/karatsuba/batch", json={"text": "12\n34\n-5"})
    assert r.status_code == 200
    out = r.json()
    assert [(p["a"], p["b"], p["result"]) for p in out["pairs"]] == [(12, 34, 408)]
    assert out["product"] == -2040

def test_karatsuba_batch_from_numbers():
    out = client.post("/karatsuba/batch", json={"numbers": [3, 4, -10, 10]}).json()
    assert [p["result"] for p in out["pairs"]] == [12, -100]
    assert out["product"] == -1200

@pytest.mark.parametrize("payload", [{"text": "1.5 2"}, {"numbers": []}, {}])
def test_karatsuba_batch_bad_request(payload):
    r = client.post("/karatsuba/batch", json=payload)
    assert r.status_code == 400

def test_closest_pair_far_apart_points():
    r = client.post("/closest-pair", json={"text": "1e200 0\n-1e200 0\n0 1"})
    assert r.status_code == 200
    out = r.json()
    assert out["ok"] is True
    assert out["result"]["distance"] == pytest.approx(1e200)

def test_closest_pair_distances_beyond_float_range():
    r = client.post("/closest-pair", json={"text": "1e308 0\n-1e308 0\n0 1"})
    assert r.status_code == 400
    assert "too far apart" in r.json()["detail"]["error"]
