"""
Spring Launch Web Server — Layer 3 (FastAPI + WebSocket)

Runs the playback clock and streams evaluated block state to browser
clients over WebSocket. REST endpoints expose the same engine for one-off
queries: a renderer can ask for the state of any (inputs, t) pair.
"""

import asyncio
import json
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query, WebSocket, WebSocketDisconnect

from controller import SimulationController, TRACK_PARAMS
from kinematics import (
    SimulationInputs, TrackGeometry, TrajectoryError, evaluate, recompute,
)

# ── Controller ──────────────────────────────────────────────────────────────

ctrl = SimulationController()


# ── Lifespan (startup/shutdown) ─────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    task = asyncio.create_task(playback_loop())
    yield
    task.cancel()


app = FastAPI(lifespan=lifespan)

# ── Client state ────────────────────────────────────────────────────────────

clients: list[WebSocket] = []

# ── Async playback loop ─────────────────────────────────────────────────────

TARGET_FPS = 60
FRAME_DT = 1.0 / TARGET_FPS


async def playback_loop():
    """Main loop running at ~60 fps."""
    last_time = time.perf_counter()

    while True:
        now = time.perf_counter()
        dt = now - last_time
        last_time = now

        # Clamp dt so a stalled event loop does not skip whole phases
        if dt > 0.05:
            dt = 0.05

        ctrl.step(dt)
        await broadcast_frame()

        # Sleep to maintain target FPS
        elapsed = time.perf_counter() - now
        sleep_time = FRAME_DT - elapsed
        if sleep_time > 0:
            await asyncio.sleep(sleep_time)
        else:
            await asyncio.sleep(0)


async def broadcast_frame() -> None:
    """Send one frame to every client; with nobody listening, drop the events."""
    if not clients:
        ctrl.pending_events.clear()
        return
    frame_msg = _build_frame_message()
    dead: list[WebSocket] = []
    for ws in clients:
        try:
            await ws.send_text(frame_msg)
        except Exception:
            dead.append(ws)
    for ws in dead:
        if ws in clients:
            clients.remove(ws)


def _build_frame_message() -> str:
    """Serialize current state into a JSON frame message."""
    frame = {"type": "frame"}
    frame.update(ctrl.frame_data())

    events = list(ctrl.pending_events)
    ctrl.pending_events.clear()
    frame["events"] = events
    if any(ev.get("type") == "trajectory_changed" for ev in events):
        frame["init"] = ctrl.init_data()

    return json.dumps(frame, separators=(',', ':'))


def _build_init_message() -> str:
    msg = {"type": "init"}
    msg.update(ctrl.init_data())
    return json.dumps(msg)


# ── WebSocket command dispatch ──────────────────────────────────────────────

async def _send_error(ws: WebSocket, message: str) -> None:
    await ws.send_text(json.dumps({"type": "error", "message": message}))


async def _handle_command(ws: WebSocket, msg: dict) -> None:
    cmd = msg.get("cmd", "")
    if cmd == "play":
        ctrl.play()
    elif cmd == "pause":
        ctrl.pause()
    elif cmd == "toggle":
        ctrl.toggle_play()
    elif cmd == "reset":
        ctrl.reset()
    elif cmd == "step":
        ctrl.step_frame(int(msg.get("direction", 1)))
    elif cmd == "set_time":
        ctrl.set_time(msg.get("t", 0.0))
    elif cmd == "set_speed":
        ctrl.set_speed(float(msg.get("speed", 1.0)))
    elif cmd == "set_inputs":
        inputs = msg.get("inputs", {})
        if not isinstance(inputs, dict):
            await _send_error(ws, "set_inputs: 'inputs' must be an object")
        elif not ctrl.set_inputs(**inputs):
            await _send_error(ws, ctrl.status_msg)
    elif cmd == "load_scenario":
        ctrl.load_scenario(str(msg.get("key", "")))
    elif cmd == "execute":
        text = msg.get("text", "")
        if not isinstance(text, str):
            await _send_error(ws, "execute: 'text' must be a string")
        else:
            ctrl.execute_command(text)
    elif cmd == "get_state":
        await ws.send_text(json.dumps({
            "type": "state_json",
            "data": ctrl.get_state_json(),
        }))
    elif cmd == "get_params":
        await ws.send_text(json.dumps({
            "type": "params",
            "data": ctrl.get_params_data(),
        }))
    elif cmd == "adjust_param":
        idx = int(msg.get("index", 0))
        new_val = ctrl.adjust_param(idx, int(msg.get("direction", 0)),
                                    fine=bool(msg.get("fine", False)))
        if new_val is not None:
            await ws.send_text(json.dumps({
                "type": "param_update",
                "index": idx,
                "value": round(new_val, 6),
            }))
    elif cmd == "reset_params":
        ctrl.reset_params()
        await ws.send_text(json.dumps({
            "type": "params",
            "data": ctrl.get_params_data(),
        }))


# ── WebSocket endpoint ──────────────────────────────────────────────────────

@app.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    await ws.accept()
    clients.append(ws)
    print(f"[SRV] client connected ({len(clients)} total)")

    await ws.send_text(_build_init_message())
    await ws.send_text(_build_frame_message())

    try:
        while True:
            data = await ws.receive_text()
            try:
                msg = json.loads(data)
            except json.JSONDecodeError:
                continue
            if not isinstance(msg, dict):
                continue
            try:
                await _handle_command(ws, msg)
            except (TypeError, ValueError, OverflowError) as exc:
                # malformed field, e.g. {"cmd": "step", "direction": "left"}
                print(f"[SRV] bad command {msg.get('cmd')!r}: {exc}")
                await _send_error(ws, f"{msg.get('cmd')}: {exc}")
    except WebSocketDisconnect:
        pass
    finally:
        if ws in clients:
            clients.remove(ws)
        print(f"[SRV] client disconnected ({len(clients)} left)")


# ── REST endpoints ──────────────────────────────────────────────────────────

@app.get("/api/trajectory")
async def get_trajectory():
    return ctrl.init_data()


@app.get("/api/state")
async def get_state(t: float = Query(0.0)):
    try:
        snap = evaluate(ctrl.trajectory, t)
    except TrajectoryError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return snap.to_dict()


@app.post("/api/inputs")
async def post_inputs(payload: dict):
    if not ctrl.set_inputs(**payload):
        raise HTTPException(status_code=422, detail=ctrl.status_msg)
    return ctrl.init_data()


@app.post("/api/evaluate")
async def post_evaluate(payload: dict):
    """Stateless (inputs, t) → snapshot; does not touch the live run."""
    try:
        inputs = SimulationInputs.from_dict(payload.get("inputs", {}))
        trajectory = recompute(inputs)
        snap = evaluate(trajectory, payload.get("t", 0.0))
    except TrajectoryError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return {
        "trajectory": trajectory.to_dict(),
        "geometry": TrackGeometry.from_trajectory(trajectory).to_dict(),
        "state": snap.to_dict(),
    }


@app.get("/api/samples")
async def get_samples(count: int = Query(ctrl.EXPORT_SAMPLES, ge=2, le=5000)):
    return ctrl.sample_columns(count)


@app.get("/api/params")
async def get_params():
    return {"params": ctrl.get_params_data(),
            "names": [attr for attr, *_ in TRACK_PARAMS]}


# ── Run with uvicorn ────────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("server:app", host="0.0.0.0", port=8000, reload=False)
