"""
Server Tests — REST endpoints and the WebSocket handshake.

The client is used without a ``with`` block so the lifespan playback loop
never starts; every test drives a fresh controller directly.
"""

import sys
import os
import json
import asyncio

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import server
from controller import SimulationController


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(server, "ctrl", SimulationController())
    return TestClient(server.app)


class TestRest:

    def test_trajectory(self, client):
        r = client.get("/api/trajectory")
        assert r.status_code == 200
        data = r.json()
        assert data["trajectory"]["stall"]["phase"] == "RAMP"
        assert data["trajectory"]["boundaries"]["air_end"] is None
        assert data["geometry"]["ramp_base"] == [15.0, 0.0]

    def test_state_at_launch(self, client):
        r = client.get("/api/state", params={"t": 0.0})
        assert r.status_code == 200
        block = r.json()["block"]
        assert block["phase"] == "SPRING"
        assert block["position_x"] == pytest.approx(-0.5)
        assert block["net_speed"] == pytest.approx(0.0)

    def test_negative_time_rejected(self, client):
        r = client.get("/api/state", params={"t": -1.0})
        assert r.status_code == 422

    def test_post_inputs(self, client):
        r = client.post("/api/inputs", json={"friction_coefficient": 0.5})
        assert r.status_code == 200
        assert r.json()["trajectory"]["stall"]["phase"] == "SURFACE"
        assert server.ctrl.inputs.friction_coefficient == 0.5

    def test_post_bad_inputs(self, client):
        before = server.ctrl.trajectory
        r = client.post("/api/inputs", json={"ramp_angle_degrees": 95.0})
        assert r.status_code == 422
        assert server.ctrl.trajectory is before

        r = client.post("/api/inputs", json={"wheel_count": 4})
        assert r.status_code == 422

    def test_evaluate_is_stateless(self, client):
        r = client.post("/api/evaluate", json={
            "inputs": {"block_mass": 2.0, "spring_constant": 2000.0,
                       "compression_distance": 1.0, "ramp_angle_degrees": 25.0,
                       "friction_coefficient": 0.1},
            "t": 0.0,
        })
        assert r.status_code == 200
        data = r.json()
        assert data["trajectory"]["stall"] is None
        assert data["state"]["block"]["position_x"] == pytest.approx(-1.0)
        assert server.ctrl.inputs.block_mass == 1.0

    def test_evaluate_rejects_bad_time(self, client):
        r = client.post("/api/evaluate", json={"inputs": {}, "t": "later"})
        assert r.status_code == 422

    def test_evaluate_rejects_non_object_inputs(self, client):
        r = client.post("/api/evaluate", json={"inputs": [1.0, 100.0], "t": 0.0})
        assert r.status_code == 422

    def test_samples(self, client):
        r = client.get("/api/samples", params={"count": 10})
        assert r.status_code == 200
        cols = r.json()
        assert len(cols["t"]) == 10
        assert cols["t"][0] == 0.0
        assert cols["x"][0] == pytest.approx(-0.5)

    def test_samples_count_bounds(self, client):
        assert client.get("/api/samples", params={"count": 1}).status_code == 422

    def test_params(self, client):
        data = client.get("/api/params").json()
        assert data["names"] == ["GRAVITY", "SURFACE_LENGTH", "RAMP_LENGTH"]
        assert data["params"][0]["value"] == 9.8


class TestWebSocket:

    def test_handshake_and_state(self, client):
        with client.websocket_connect("/ws") as ws:
            init = json.loads(ws.receive_text())
            assert init["type"] == "init"
            assert "geometry" in init

            frame = json.loads(ws.receive_text())
            assert frame["type"] == "frame"
            assert frame["state"]["block"]["phase"] == "SPRING"

            ws.send_text(json.dumps({"cmd": "get_state"}))
            msg = json.loads(ws.receive_text())
            assert msg["type"] == "state_json"
            assert json.loads(msg["data"])["cmd"] == "set"

    def test_invalid_inputs_report_error(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.receive_text()
            ws.receive_text()
            ws.send_text(json.dumps({"cmd": "set_inputs",
                                     "inputs": {"block_mass": 0.0}}))
            msg = json.loads(ws.receive_text())
            assert msg["type"] == "error"
            assert "block_mass" in msg["message"]

    def test_adjust_param(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.receive_text()
            ws.receive_text()
            ws.send_text(json.dumps({"cmd": "adjust_param", "index": 0,
                                     "direction": -1}))
            msg = json.loads(ws.receive_text())
            assert msg == {"type": "param_update", "index": 0, "value": 9.7}

    @pytest.mark.parametrize("command, prefix", [
        ({"cmd": "step", "direction": "left"}, "step:"),
        ({"cmd": "set_speed", "speed": [2]}, "set_speed:"),
        ({"cmd": "adjust_param", "index": "gravity", "direction": 1}, "adjust_param:"),
        ({"cmd": "set_inputs", "inputs": [1, 2]}, "set_inputs:"),
        ({"cmd": "execute", "text": {"cmd": "play"}}, "execute:"),
    ])
    def test_malformed_fields_keep_session_open(self, client, command, prefix):
        with client.websocket_connect("/ws") as ws:
            ws.receive_text()
            ws.receive_text()
            ws.send_text(json.dumps(command))
            msg = json.loads(ws.receive_text())
            assert msg["type"] == "error"
            assert msg["message"].startswith(prefix)

            ws.send_text(json.dumps({"cmd": "get_state"}))
            assert json.loads(ws.receive_text())["type"] == "state_json"


class TestBroadcast:

    def test_events_dropped_without_clients(self, client):
        for mu in (0.1, 0.2, 0.3):
            assert client.post("/api/inputs", json={"friction_coefficient": mu}).status_code == 200
        assert len(server.ctrl.pending_events) == 3
        asyncio.run(server.broadcast_frame())
        assert server.ctrl.pending_events == []
