"""
SimulationController — Layer 2 (Playback Logic)

Owns the physical inputs, the cached Trajectory and the playback clock.
Communicates with Layer 3 (server.py / browser renderer) via one queue:
  - pending_events : rendering commands (trajectory_changed, scenario_loaded,
                     session_saved, …)

Layer 3 calls:
  ctrl.step(dt)               — advance the playback clock each frame
  ctrl.snapshot()             — block / force / energy state at ctrl.time
  ctrl.pending_events         — list of dicts to consume and act on
  ctrl.<state properties>     — read-only references to time, mode, etc.

The clock only moves an absolute time cursor; every frame is evaluated in
closed form from that cursor, never from the previous frame.
"""

import csv
import json
import math
import os
from pathlib import Path
from typing import Optional

import kinematics as _kin
from kinematics import (
    DEFAULT_INPUTS, SimulationInputs, Snapshot, Trajectory, TrajectoryError,
    TrackGeometry, evaluate, recompute, sample_trajectory, default_sample_times,
)
from scenario_presets import SCENARIOS


# ── Default info-bar message ───────────────────────────────────────────────────
DEFAULT_INFO_MSG = (
    "[1-6] Scenario  [Space] Play/Pause  [←/→] Step  [R] Reset  "
    "[P] Params([/])  [Shift+S] Script"
)

# ── Track params (attr, label, min, max, step) ────────────────────────────────
TRACK_PARAMS = [
    ("GRAVITY",        "Gravity",      0.0, 30.0, 0.1),
    ("SURFACE_LENGTH", "Surface Len.", 0.0, 50.0, 0.5),
    ("RAMP_LENGTH",    "Ramp Len.",    0.0, 50.0, 0.5),
]

PARAM_DEFAULTS = {attr: getattr(_kin, attr) for attr, *_ in TRACK_PARAMS}


class SimulationController:
    """Layer 2: input handling, trajectory cache and playback clock."""

    # ── Class-level constants ─────────────────────────────────────────────────
    FRAME_STEP     = 1.0 / 60.0
    MIN_SPEED      = 0.1
    MAX_SPEED      = 4.0
    EXPORT_SAMPLES = 200

    # ── Constructor ───────────────────────────────────────────────────────────

    def __init__(self, inputs: Optional[SimulationInputs] = None):
        # Physics
        self.trajectory: Trajectory = recompute(
            inputs if inputs is not None else DEFAULT_INPUTS)
        self.inputs = self.trajectory.inputs

        # Playback state
        self.time           = 0.0
        self.mode           = "paused"      # "paused"|"playing"
        self.playback_speed = 1.0
        self.scenario_label = ""

        # Script state
        self._last_script_path = ""
        self._last_script: dict = {}

        # Session recording
        self._session_recording = False
        self._session_rows: list = []
        self._session_file  = ""

        # Status / info messages (L3 reads these to update text)
        self.status_msg = ""
        self.info_msg   = DEFAULT_INFO_MSG

        # Event queue
        self.pending_events: list[dict] = []

    # ──────────────────────────────────────────────────────────────────────────
    # Main loop
    # ──────────────────────────────────────────────────────────────────────────

    @property
    def end_time(self) -> float:
        """Playback stops once the block has landed or come to rest."""
        return self.trajectory.settle_time

    def step(self, dt_frame: float) -> None:
        """Advance the playback clock. Called every frame by L3."""
        if self.mode != "playing":
            return

        self.time = min(self.time + dt_frame * self.playback_speed, self.end_time)

        if self._session_recording:
            self._session_record_frame()

        if self.time >= self.end_time:
            self.mode = "paused"
            self._on_playback_finished()

    def _on_playback_finished(self) -> None:
        if self._session_recording:
            saved = self._session_file
            self._session_write_csv()
            self.pending_events.append({"type": "session_saved", "file": saved})

        block = self.snapshot().block
        if self.trajectory.lands:
            self.status_msg = f"Landed at x={block.position_x:.2f} m."
        else:
            self.status_msg = (
                f"Stopped on the {self.trajectory.stall_phase.name.lower()} "
                f"at x={block.position_x:.2f} m."
            )

    def snapshot(self) -> Snapshot:
        return evaluate(self.trajectory, self.time)

    # ──────────────────────────────────────────────────────────────────────────
    # Playback control
    # ──────────────────────────────────────────────────────────────────────────

    def play(self) -> None:
        if self.time >= self.end_time:
            self.time = 0.0
        self.mode = "playing"
        self.status_msg = "Playing..."

    def pause(self) -> None:
        self.mode = "paused"
        self.status_msg = f"Paused at t={self.time:.3f} s."

    def toggle_play(self) -> None:
        if self.mode == "playing":
            self.pause()
        else:
            self.play()

    def reset(self) -> None:
        """Rewind to maximum compression and pause."""
        self.mode = "paused"
        self.time = 0.0
        self.status_msg = "Reset."

    def step_frame(self, direction: int = 1) -> None:
        """Move one fixed frame forward (or backward) while paused."""
        self.mode = "paused"
        t = self.time + direction * self.FRAME_STEP
        self.time = max(0.0, min(t, self.end_time))

    def set_time(self, t) -> bool:
        try:
            evaluate(self.trajectory, t)
        except TrajectoryError as exc:
            self.status_msg = f"time: {exc}"
            return False
        self.time = float(t)
        return True

    def set_speed(self, speed: float) -> None:
        self.playback_speed = max(self.MIN_SPEED, min(self.MAX_SPEED, float(speed)))

    # ──────────────────────────────────────────────────────────────────────────
    # Inputs / params
    # ──────────────────────────────────────────────────────────────────────────

    def set_inputs(self, **fields) -> bool:
        """Replace some inputs and recompute; keeps the old run on error."""
        try:
            inputs = self.inputs.replace(**fields)
            trajectory = recompute(inputs)
        except TrajectoryError as exc:
            print(f"[SIM] rejected inputs {fields}: {exc}")
            self.status_msg = f"Invalid input: {exc}"
            return False
        self._apply(inputs, trajectory)
        self.status_msg = "Inputs updated."
        return True

    def recompute(self) -> bool:
        """Rebuild the trajectory after a track-param change."""
        return self.set_inputs()

    def _apply(self, inputs: SimulationInputs, trajectory: Trajectory) -> None:
        self.inputs = inputs
        self.trajectory = trajectory
        self.time = min(self.time, self.end_time)
        b = trajectory.boundaries
        print(f"[SIM] recompute: ends={[round(v, 4) for v in b.as_tuple()]}  "
              f"stall={trajectory.stall_phase.name if trajectory.stall_phase else None}")
        self.pending_events.append({"type": "trajectory_changed"})

    def set_params(self, params: dict) -> bool:
        """Update track constants by name, then recompute.

        All constants are restored if the new track cannot be solved.
        """
        if not isinstance(params, dict):
            self.status_msg = "params must be an object."
            return False
        allowed = {attr for attr, *_ in TRACK_PARAMS}
        previous = {attr: getattr(_kin, attr) for attr in allowed}
        updated, skipped = [], []
        for k, v in params.items():
            if k not in allowed:
                skipped.append(k)
                continue
            try:
                setattr(_kin, k, float(v))
                updated.append(f"{k}={float(v):.4g}")
            except (TypeError, ValueError) as e:
                print(f"[SIM] setattr {k} failed: {e}")
                skipped.append(k)

        if not self.recompute():
            for attr, value in previous.items():
                setattr(_kin, attr, value)
            self.recompute()
            self.status_msg = f"params rejected: {updated}"
            return False

        msg = f"params: set {updated}"
        if skipped:
            msg += f"  (unknown: {skipped})"
        print(f"[SIM] {msg}")
        self.status_msg = msg
        self.pending_events.append({"type": "refresh_params", "params": list(params.keys())})
        return True

    def adjust_param(self, index: int, direction: int, fine: bool = False) -> Optional[float]:
        """Nudge one TRACK_PARAMS entry by its step, clamped to its range."""
        if not 0 <= index < len(TRACK_PARAMS):
            return None
        attr, label, mn, mx, step = TRACK_PARAMS[index]
        s = step / 10.0 if fine else step
        new_val = max(mn, min(mx, getattr(_kin, attr) + direction * s))
        if not self.set_params({attr: new_val}):
            return None
        return new_val

    def reset_params(self) -> None:
        self.set_params(dict(PARAM_DEFAULTS))

    def get_params_data(self) -> list:
        """Return all track params with current values."""
        result = []
        for attr, label, mn, mx, step in TRACK_PARAMS:
            result.append({
                "attr": attr, "label": label,
                "value": round(getattr(_kin, attr), 6),
                "min": mn, "max": mx, "step": step,
            })
        return result

    # ──────────────────────────────────────────────────────────────────────────
    # Scenarios
    # ──────────────────────────────────────────────────────────────────────────

    def load_scenario(self, key: str) -> bool:
        """Load a preset scenario (keys 1-6)."""
        scenario_fn = SCENARIOS.get(str(key))
        if scenario_fn is None:
            self.status_msg = f"Unknown scenario '{key}'."
            return False
        try:
            result = scenario_fn()
        except TrajectoryError as exc:
            self.status_msg = f"Scenario error: {exc}"
            return False
        self.time = 0.0
        self._apply(result["inputs"], result["trajectory"])
        self.scenario_label = result["label"]
        self.pending_events.append({"type": "scenario_loaded", "label": result["label"]})
        self.mode = "playing"
        self.info_msg   = f"Scenario {result['label']}"
        self.status_msg = "Playing..."
        return True

    # ──────────────────────────────────────────────────────────────────────────
    # JSON commands
    # ──────────────────────────────────────────────────────────────────────────

    def get_state_json(self) -> str:
        """Return current run as compact single-line set-command JSON."""
        return json.dumps({
            "cmd": "set",
            "inputs": self.inputs.to_dict(),
            "time": round(self.time, 6),
        }, separators=(',', ':'))

    def frame_data(self) -> dict:
        """Current frame for renderers: clock, snapshot and status."""
        return {
            "time": self.time,
            "mode": self.mode,
            "speed": self.playback_speed,
            "end_time": self.end_time,
            "state": self.snapshot().to_dict(),
            "status": self.status_msg,
            "info": self.info_msg,
        }

    def init_data(self) -> dict:
        """Static scene + trajectory summary sent once to a new client."""
        return {
            "geometry": TrackGeometry.from_trajectory(self.trajectory).to_dict(),
            "trajectory": self.trajectory.to_dict(),
            "params": self.get_params_data(),
            "frame_step": self.FRAME_STEP,
        }

    def execute_command(self, text: str) -> None:
        """Parse a JSON command string and dispatch to handlers."""
        if not text:
            print("[SIM] execute_command: empty text")
            return
        try:
            data = json.loads(text.replace('\r', ''))
        except json.JSONDecodeError as exc:
            print(f"[SIM] JSON parse error: {exc}")
            self.status_msg = f"JSON error: {exc}"
            return
        if not isinstance(data, dict):
            self.status_msg = "Command must be a JSON object."
            return
        cmd = str(data.get("cmd", "")).lower().strip()
        print(f"[SIM] cmd={cmd}")
        if cmd == "set":
            self._cmd_set(data)
        elif cmd == "play":
            self.play()
        elif cmd == "pause":
            self.pause()
        elif cmd == "reset":
            self.reset()
        elif cmd == "save":
            self._cmd_save(data)
        elif cmd == "load":
            self._cmd_load(data)
        elif cmd == "export":
            self._cmd_export(data)
        else:
            self.status_msg = (
                f"Unknown cmd '{cmd}'. Use set/play/pause/reset/save/load/export."
            )

    def _cmd_set(self, data: dict) -> None:
        """set: update track params, inputs and/or the time cursor."""
        params = data.get("params")
        inputs = data.get("inputs")
        if params is None and inputs is None and "time" not in data:
            self.status_msg = "set: 'inputs', 'params' or 'time' field required."
            return
        for name, value in (("params", params), ("inputs", inputs)):
            if value is not None and not isinstance(value, dict):
                self.status_msg = f"set: '{name}' must be an object."
                return
        if params is not None and not self.set_params(params):
            return
        if inputs is not None and not self.set_inputs(**inputs):
            return
        if "time" in data:
            self.set_time(data["time"])

    def _cmd_save(self, data: dict) -> None:
        """save: write inputs, params and time to a JSON file."""
        file_opt = str(data.get("file") or "")
        if not file_opt:
            from datetime import datetime
            fname = datetime.now().strftime("%H%M%S") + "_run.json"
        else:
            fname = file_opt if file_opt.endswith(".json") else file_opt + ".json"

        payload = {
            "cmd": "set",
            "inputs": self.inputs.to_dict(),
            "params": {attr: getattr(_kin, attr) for attr, *_ in TRACK_PARAMS},
            "time": self.time,
        }
        try:
            with open(fname, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            print(f"[SIM] save → {fname}")
            self.status_msg = f"Saved → {fname}"
        except OSError as e:
            self.status_msg = f"Save error: {e}"

    def _cmd_load(self, data: dict) -> None:
        """load: restore a run from a JSON file written by 'save'."""
        file_opt = str(data.get("file") or "")
        if not file_opt:
            self.status_msg = "load: 'file' field required."
            return
        fname = file_opt if file_opt.endswith(".json") else file_opt + ".json"
        try:
            with open(fname, "r", encoding="utf-8") as f:
                loaded = json.load(f)
        except FileNotFoundError:
            self.status_msg = f"load: not found: {fname}"
            return
        except (OSError, json.JSONDecodeError) as e:
            self.status_msg = f"Load error: {e}"
            return
        if not isinstance(loaded, dict):
            self.status_msg = f"Load error: {fname} does not hold a JSON object"
            return
        print(f"[SIM] load ← {fname}")
        self._cmd_set(loaded)

    def _cmd_export(self, data: dict) -> None:
        """export: write a uniformly sampled trajectory to CSV."""
        fname = str(data.get("file") or "trajectory.csv")
        if not fname.endswith(".csv"):
            fname += ".csv"
        try:
            rows = self.export_csv(fname, int(data.get("samples", self.EXPORT_SAMPLES)))
        except (OSError, TypeError, ValueError) as e:
            self.status_msg = f"Export error: {e}"
            return
        self.status_msg = f"Exported {rows} rows → {fname}"

    # ──────────────────────────────────────────────────────────────────────────
    # Script system
    # ──────────────────────────────────────────────────────────────────────────

    def collect_script_files(self) -> list:
        """Return sorted list of .py files from scripts/ dir + run_script.py."""
        files = []
        scripts_dir = Path("scripts")
        if scripts_dir.is_dir():
            files.extend(sorted(scripts_dir.glob("*.py")))
        local = Path("run_script.py")
        if local.exists():
            files.insert(0, local)
        return files

    def execute_script(self, script: dict) -> bool:
        """Execute a run script dict (inputs + optional params / playback)."""
        self._last_script = script
        self.mode = "paused"

        params = script.get("params")
        if params and not self.set_params(params):
            return False
        inputs = script.get("inputs", {})
        if not isinstance(inputs, dict):
            self.status_msg = "Script error: 'inputs' must be a dict."
            return False
        if not self.set_inputs(**inputs):
            return False

        playback = script.get("playback", {})
        if not isinstance(playback, dict):
            playback = {}
        self.time = 0.0
        self.set_time(playback.get("start_time", 0.0))
        try:
            self.set_speed(playback.get("speed", 1.0))
        except (TypeError, ValueError) as exc:
            self.status_msg = f"Script error: bad playback speed: {exc}"
            return False
        self.info_msg = DEFAULT_INFO_MSG
        if playback.get("autoplay", False):
            self.play()
            self.status_msg = "Script running..."
        else:
            self.status_msg = "Script loaded."
        return True

    def load_script_file(self, path: str) -> bool:
        """Load and execute a run script from a .py file."""
        import importlib.util
        abs_path = os.path.abspath(path)
        if not os.path.exists(abs_path):
            self.status_msg = f"Script not found: {abs_path}"
            return False
        spec = importlib.util.spec_from_file_location("_user_run_script", abs_path)
        mod  = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(mod)
        except Exception as exc:
            self.status_msg = f"Script error: {exc}"
            return False
        script = getattr(mod, "SCRIPT", None)
        if script is None:
            self.status_msg = f"No SCRIPT variable in {os.path.basename(abs_path)}"
            return False
        self._last_script_path = abs_path
        return self.execute_script(script)

    def reload_script(self) -> bool:
        """Re-execute the last loaded script."""
        if self._last_script_path:
            return self.load_script_file(self._last_script_path)
        if self._last_script:
            return self.execute_script(self._last_script)
        self.status_msg = (
            "No script loaded yet.  "
            "Create run_script.py or call load_script_file(path)."
        )
        return False

    # ──────────────────────────────────────────────────────────────────────────
    # Session recording / export
    # ──────────────────────────────────────────────────────────────────────────

    _CSV_HEADER = [
        "t", "phase", "px", "py", "vx", "vy", "speed", "angle",
        "f_gravity", "f_normal", "f_spring", "f_friction",
        "spring_pe", "ke", "pe", "lost",
    ]

    def start_recording(self, fname: Optional[str] = None) -> None:
        """Record every played frame; the CSV is written when playback ends."""
        if not fname:
            from datetime import datetime
            fname = datetime.now().strftime("%H%M%S") + ".csv"
        elif not fname.endswith(".csv"):
            fname += ".csv"
        self._session_recording = True
        self._session_rows = []
        self._session_file = fname
        print(f"[REC] Recording started → {fname}")

    def _csv_row(self, snap: Snapshot) -> list:
        b, f, e = snap.block, snap.forces, snap.energy
        return [
            f"{b.time:.4f}", b.phase.name,
            f"{b.position_x:.6f}", f"{b.position_y:.6f}",
            f"{b.velocity_x:.6f}", f"{b.velocity_y:.6f}",
            f"{b.net_speed:.6f}", f"{b.angle_of_motion:.3f}",
            f"{f.gravity:.6f}", f"{f.normal:.6f}", f"{f.spring:.6f}", f"{f.friction:.6f}",
            f"{e.spring_pe:.6f}", f"{e.block_ke:.6f}", f"{e.block_pe:.6f}",
            f"{e.energy_lost_to_friction:.6f}",
        ]

    def _session_record_frame(self) -> None:
        self._session_rows.append(self._csv_row(self.snapshot()))

    def _session_write_csv(self) -> None:
        path = self._session_file
        try:
            with open(path, "w", newline="", encoding="utf-8") as f:
                writer = csv.writer(f)
                writer.writerow(self._CSV_HEADER)
                writer.writerows(self._session_rows)
            print(f"[REC] Saved {len(self._session_rows)} frames → {path}")
        except OSError as e:
            print(f"[REC] Write failed: {e}")
        self._session_recording = False
        self._session_rows.clear()
        self._session_file = ""

    def export_csv(self, path: str, samples: int = EXPORT_SAMPLES) -> int:
        """Write `samples` uniformly spaced frames of the current run."""
        if samples < 2:
            raise ValueError(f"samples must be >= 2, got {samples}")
        times = default_sample_times(self.trajectory, samples)
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(self._CSV_HEADER)
            for t in times:
                writer.writerow(self._csv_row(evaluate(self.trajectory, float(t))))
        print(f"[REC] Exported {len(times)} samples → {path}")
        return len(times)

    def sample_columns(self, samples: int = EXPORT_SAMPLES) -> dict:
        """Sampled trajectory as plain lists (JSON friendly)."""
        cols = sample_trajectory(self.trajectory,
                                 default_sample_times(self.trajectory, samples))
        return {k: [v if math.isfinite(v) else None for v in arr.tolist()]
                for k, arr in cols.items()}
