"""
Spring Launch Trajectory Engine
Closed-form phases: Spring → Surface → Ramp → Air → Landed
"""

import dataclasses
import enum
import math
import numpy as np
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

# ──────────────────────────────────────────────
# Constants (SI units)
# ──────────────────────────────────────────────
GRAVITY: float = 9.8  # m/s^2

# ── Runtime-editable track constants ─────────────────────────────────────────
# Read by name in TrackConfig.current(), so a UI can mutate them live via:
#   import kinematics as _kin;  _kin.RAMP_LENGTH = 10.0
SURFACE_LENGTH: float = 15.0  # m, spring equilibrium → ramp base
RAMP_LENGTH: float = 15.0     # m, measured along the incline (hypotenuse)

# Numerical thresholds
VELOCITY_THRESHOLD: float = 1e-9

# Sentinel end time for a phase the block never completes.
NEVER: float = math.inf


# ──────────────────────────────────────────────
# Errors
# ──────────────────────────────────────────────
class TrajectoryError(Exception):
    """Base class for every failure raised by the trajectory engine."""


class InvalidInputError(TrajectoryError, ValueError):
    """Malformed physical input, track length or query time."""


class DegenerateMotionError(TrajectoryError, ArithmeticError):
    """The closed-form solution does not exist for this configuration."""


def _require_finite(name: str, value) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(value):
        raise InvalidInputError(f"{name} must be finite, got {value}")
    return value


class Phase(enum.Enum):
    SPRING = 0
    SURFACE = 1
    RAMP = 2
    AIR = 3
    LANDED = 4


CONTACT_PHASES = (Phase.SPRING, Phase.SURFACE, Phase.RAMP)
FRICTION_PHASES = (Phase.SURFACE, Phase.RAMP)


# ──────────────────────────────────────────────
# Inputs and configuration
# ──────────────────────────────────────────────
@dataclass(frozen=True)
class SimulationInputs:
    """The five physical inputs of one run."""
    block_mass: float = 1.0             # kg
    spring_constant: float = 100.0      # N/m
    compression_distance: float = 0.5   # m
    ramp_angle_degrees: float = 30.0    # deg, [0, 90)
    friction_coefficient: float = 0.0   # μk

    def validate(self) -> "SimulationInputs":
        """Checked copy with every field coerced to float."""
        m = _require_finite("block_mass", self.block_mass)
        k = _require_finite("spring_constant", self.spring_constant)
        c = _require_finite("compression_distance", self.compression_distance)
        angle = _require_finite("ramp_angle_degrees", self.ramp_angle_degrees)
        mu = _require_finite("friction_coefficient", self.friction_coefficient)
        if m <= 0:
            raise InvalidInputError(f"block_mass must be > 0, got {m}")
        if k <= 0:
            raise InvalidInputError(f"spring_constant must be > 0, got {k}")
        if c < 0:
            raise InvalidInputError(f"compression_distance must be >= 0, got {c}")
        if not 0.0 <= angle < 90.0:
            raise InvalidInputError(f"ramp_angle_degrees must be in [0, 90), got {angle}")
        if mu < 0:
            raise InvalidInputError(f"friction_coefficient must be >= 0, got {mu}")
        return dataclasses.replace(
            self, block_mass=m, spring_constant=k, compression_distance=c,
            ramp_angle_degrees=angle, friction_coefficient=mu)

    @property
    def ramp_angle(self) -> float:
        """Ramp angle in radians."""
        return math.radians(self.ramp_angle_degrees)

    def replace(self, **changes) -> "SimulationInputs":
        unknown = set(changes) - {f.name for f in dataclasses.fields(self)}
        if unknown:
            raise InvalidInputError(f"unknown input field(s): {sorted(unknown)}")
        changes = {k: _require_finite(k, v) for k, v in changes.items()}
        return dataclasses.replace(self, **changes).validate()

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SimulationInputs":
        if not isinstance(data, dict):
            raise InvalidInputError(f"inputs must be an object, got {type(data).__name__}")
        return cls().replace(**data)


DEFAULT_INPUTS = SimulationInputs()


@dataclass(frozen=True)
class TrackConfig:
    """Scenario constants captured once per recompute."""
    gravity: float = GRAVITY
    surface_length: float = SURFACE_LENGTH
    ramp_length: float = RAMP_LENGTH

    @classmethod
    def current(cls) -> "TrackConfig":
        """Snapshot of the live module-level constants."""
        return cls(gravity=GRAVITY, surface_length=SURFACE_LENGTH,
                   ramp_length=RAMP_LENGTH)

    def validate(self) -> "TrackConfig":
        values = {}
        for name in ("gravity", "surface_length", "ramp_length"):
            values[name] = _require_finite(name, getattr(self, name))
            if values[name] < 0:
                raise InvalidInputError(f"{name} must be >= 0, got {values[name]}")
        return dataclasses.replace(self, **values)


# ──────────────────────────────────────────────
# Derived values
# ──────────────────────────────────────────────
@dataclass(frozen=True)
class SpringSolution:
    angular_frequency: float  # rad/s
    period: float             # s
    contact_duration: float   # s, one quarter period


@dataclass(frozen=True)
class KinematicState:
    """Position and velocity of the block at one instant."""
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0

    @property
    def speed(self) -> float:
        return math.hypot(self.vx, self.vy)

    @property
    def position(self) -> np.ndarray:
        return np.array([self.x, self.y])

    @property
    def velocity(self) -> np.ndarray:
        return np.array([self.vx, self.vy])

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "vx": self.vx, "vy": self.vy}


def _time_or_none(value: float) -> Optional[float]:
    return None if value == NEVER else value


@dataclass(frozen=True)
class PhaseBoundaries:
    """End time of each moving phase; NEVER once the block has stalled."""
    spring_end: float
    surface_end: float = NEVER
    ramp_end: float = NEVER
    air_end: float = NEVER

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.spring_end, self.surface_end, self.ramp_end, self.air_end)

    def phase_at(self, t: float) -> Phase:
        if t < self.spring_end:
            return Phase.SPRING
        if t < self.surface_end:
            return Phase.SURFACE
        if t < self.ramp_end:
            return Phase.RAMP
        if t < self.air_end:
            return Phase.AIR
        return Phase.LANDED

    def start_of(self, phase: Phase) -> float:
        if phase is Phase.SPRING:
            return 0.0
        return self.as_tuple()[phase.value - 1]

    def end_of(self, phase: Phase) -> float:
        if phase is Phase.LANDED:
            return NEVER
        return self.as_tuple()[phase.value]

    def completes(self, phase: Phase) -> bool:
        return self.end_of(phase) != NEVER

    def to_dict(self) -> dict:
        return {
            "spring_end": _time_or_none(self.spring_end),
            "surface_end": _time_or_none(self.surface_end),
            "ramp_end": _time_or_none(self.ramp_end),
            "air_end": _time_or_none(self.air_end),
        }


@dataclass(frozen=True)
class PhaseExitState:
    """Block state at each boundary; None for boundaries never reached."""
    from_spring: KinematicState
    from_surface: Optional[KinematicState] = None
    on_entering_ramp: Optional[KinematicState] = None
    from_ramp: Optional[KinematicState] = None
    on_landing: Optional[KinematicState] = None

    def to_dict(self) -> dict:
        return {f.name: (None if getattr(self, f.name) is None
                         else getattr(self, f.name).to_dict())
                for f in dataclasses.fields(self)}


@dataclass(frozen=True)
class Trajectory:
    """Everything recompute() derives from one set of inputs.

    Immutable: evaluate() reads it, nothing writes to it. A new set of
    inputs or a new track configuration means a new Trajectory.
    """
    inputs: SimulationInputs
    config: TrackConfig
    spring: SpringSolution
    surface_acceleration: float   # m/s^2 along the surface (<= 0)
    ramp_acceleration: float      # m/s^2 along the incline (<= 0)
    boundaries: PhaseBoundaries
    exits: PhaseExitState
    stall_phase: Optional[Phase] = None
    stall_time: Optional[float] = None
    stall_state: Optional[KinematicState] = None

    @property
    def lands(self) -> bool:
        return self.boundaries.air_end != NEVER

    @property
    def max_system_energy(self) -> float:
        return 0.5 * self.inputs.spring_constant * self.inputs.compression_distance ** 2

    @property
    def settle_time(self) -> float:
        """Time after which the block state no longer changes."""
        if self.lands:
            return self.boundaries.air_end
        return self.stall_time

    def to_dict(self) -> dict:
        return {
            "inputs": self.inputs.to_dict(),
            "config": dataclasses.asdict(self.config),
            "spring": dataclasses.asdict(self.spring),
            "boundaries": self.boundaries.to_dict(),
            "exits": self.exits.to_dict(),
            "stall": None if self.stall_phase is None else {
                "phase": self.stall_phase.name,
                "time": self.stall_time,
                "state": self.stall_state.to_dict(),
            },
        }


# ──────────────────────────────────────────────
# Spring-phase solver
# ──────────────────────────────────────────────
def solve_spring(spring_constant: float, block_mass: float) -> SpringSolution:
    """Quarter cycle of SHM from maximum compression to equilibrium."""
    k = _require_finite("spring_constant", spring_constant)
    m = _require_finite("block_mass", block_mass)
    if k <= 0 or m <= 0:
        raise InvalidInputError(
            f"spring_constant and block_mass must be > 0, got k={k}, m={m}")
    omega = math.sqrt(k / m)
    period = 2 * math.pi / omega
    return SpringSolution(angular_frequency=omega, period=period,
                          contact_duration=period / 4)


def _spring_position(t: float, compression: float, omega: float) -> float:
    return -compression * math.cos(omega * t)


def _spring_velocity(t: float, compression: float, omega: float) -> float:
    return compression * omega * math.sin(omega * t)


# ──────────────────────────────────────────────
# Phase-boundary accumulator
# ──────────────────────────────────────────────
def _work_energy_speed(v_entry: float, accel: float, distance: float) -> float:
    """Exit speed from v² = v0² + 2·a·d.

    The radicand goes negative when the block stalls before covering
    `distance`; the clamp maps that to an exit speed of 0.
    """
    return math.sqrt(max(0.0, v_entry ** 2 + 2.0 * accel * distance))


def _traversal_time(v_entry: float, v_exit: float, accel: float,
                    distance: float) -> float:
    """Δt = Δv / a, or d / v without acceleration. NEVER if the block stalls."""
    if v_exit <= 0.0:
        return NEVER
    if accel == 0.0:
        return distance / v_entry
    return (v_exit - v_entry) / accel


def _stopping(v_entry: float, accel: float) -> Tuple[float, float]:
    """(time, distance) until a decelerating block comes to rest."""
    if v_entry <= 0.0:
        return 0.0, 0.0
    if accel >= 0.0:
        raise DegenerateMotionError(
            f"block at {v_entry} m/s cannot stop under acceleration {accel}")
    return v_entry / -accel, v_entry ** 2 / (2.0 * -accel)


def _future_root(a: float, b: float, c: float) -> float:
    """Latest non-negative root of a·τ² + b·τ + c = 0."""
    if a == 0.0:
        if b == 0.0:
            # constant equation: no root at all, or every τ is one
            raise DegenerateMotionError("landing equation is ill-posed")
        tau = -c / b
    else:
        disc = b ** 2 - 4 * a * c
        if disc < 0:
            raise DegenerateMotionError(f"landing quadratic has no real root (disc={disc})")
        sq = math.sqrt(disc)
        # (-b - sq) / 2a is the larger root when a < 0
        tau = max((-b - sq) / (2 * a), (-b + sq) / (2 * a))
    if tau < 0:
        raise DegenerateMotionError(f"block never reaches the ground (τ={tau})")
    return tau


def _ramp_acceleration(angle: float, mu: float, g: float) -> float:
    """Along-slope acceleration for a block moving up the incline."""
    return -g * math.sin(angle) - mu * g * math.cos(angle)


def recompute(inputs: SimulationInputs,
              config: Optional[TrackConfig] = None) -> Trajectory:
    """Derive phase boundaries and exit states for one run."""
    inputs = inputs.validate()
    config = (config if config is not None else TrackConfig.current()).validate()

    g = config.gravity
    mu = inputs.friction_coefficient
    angle = inputs.ramp_angle
    spring = solve_spring(inputs.spring_constant, inputs.block_mass)

    surface_accel = -mu * g
    ramp_accel = _ramp_acceleration(angle, mu, g) if angle > 0 else 0.0

    # Spring → Surface: one quarter cycle ends at equilibrium with peak speed
    spring_end = spring.contact_duration
    from_spring = KinematicState(
        x=0.0, vx=inputs.compression_distance * spring.angular_frequency)

    surface_end = ramp_end = air_end = NEVER
    from_surface = on_entering_ramp = from_ramp = on_landing = None
    stall_phase = stall_time = stall_state = None

    # Surface
    v0 = from_spring.vx
    v1 = _work_energy_speed(v0, surface_accel, config.surface_length)
    dt = _traversal_time(v0, v1, surface_accel, config.surface_length)
    if dt == NEVER:
        stop_dt, stop_dist = _stopping(v0, surface_accel)
        stall_phase = Phase.SURFACE
        stall_time = spring_end + stop_dt
        stall_state = KinematicState(x=from_spring.x + stop_dist)
    else:
        surface_end = spring_end + dt
        from_surface = KinematicState(x=from_spring.x + config.surface_length, vx=v1)
        on_entering_ramp = KinematicState(
            x=from_surface.x, vx=v1 * math.cos(angle), vy=v1 * math.sin(angle))

    # Ramp (a flat ramp has zero length and zero effect)
    if on_entering_ramp is not None and angle == 0:
        ramp_end = surface_end
        from_ramp = on_entering_ramp
    elif on_entering_ramp is not None:
        v2 = _work_energy_speed(v1, ramp_accel, config.ramp_length)
        dt = _traversal_time(v1, v2, ramp_accel, config.ramp_length)
        if dt == NEVER:
            stop_dt, stop_dist = _stopping(v1, ramp_accel)
            stall_phase = Phase.RAMP
            stall_time = surface_end + stop_dt
            stall_state = KinematicState(
                x=on_entering_ramp.x + stop_dist * math.cos(angle),
                y=on_entering_ramp.y + stop_dist * math.sin(angle))
        else:
            ramp_end = surface_end + dt
            from_ramp = KinematicState(
                x=on_entering_ramp.x + config.ramp_length * math.cos(angle),
                y=on_entering_ramp.y + config.ramp_length * math.sin(angle),
                vx=v2 * math.cos(angle),
                vy=v2 * math.sin(angle),
            )

    # Air: y0 + vy·τ - ½g·τ² = 0
    if from_ramp is not None:
        tau = _future_root(-g / 2, from_ramp.vy, from_ramp.y)
        air_end = ramp_end + tau
        on_landing = KinematicState(
            x=from_ramp.x + from_ramp.vx * tau,
            y=0.0,
            vx=from_ramp.vx,
            vy=from_ramp.vy - g * tau,
        )

    return Trajectory(
        inputs=inputs,
        config=config,
        spring=spring,
        surface_acceleration=surface_accel,
        ramp_acceleration=ramp_accel,
        boundaries=PhaseBoundaries(spring_end, surface_end, ramp_end, air_end),
        exits=PhaseExitState(
            from_spring=from_spring,
            from_surface=from_surface,
            on_entering_ramp=on_entering_ramp,
            from_ramp=from_ramp,
            on_landing=on_landing,
        ),
        stall_phase=stall_phase,
        stall_time=stall_time,
        stall_state=stall_state,
    )


# ──────────────────────────────────────────────
# Instant-state evaluator
# ──────────────────────────────────────────────
@dataclass(frozen=True)
class BlockState:
    time: float
    phase: Phase
    position_x: float
    position_y: float
    velocity_x: float
    velocity_y: float
    net_speed: float
    angle_of_motion: float  # degrees

    @property
    def at_rest(self) -> bool:
        return self.net_speed <= VELOCITY_THRESHOLD

    @property
    def position(self) -> np.ndarray:
        return np.array([self.position_x, self.position_y])

    @property
    def velocity(self) -> np.ndarray:
        return np.array([self.velocity_x, self.velocity_y])

    def to_dict(self) -> dict:
        d = dataclasses.asdict(self)
        d["phase"] = self.phase.name
        return d


@dataclass(frozen=True)
class ForceState:
    """Force magnitudes (N) on the block and the contact-surface angle."""
    gravity: float
    normal: float
    spring: float
    friction: float
    contact_angle: float = 0.0  # degrees

    def vectors(self) -> Dict[str, np.ndarray]:
        """Force vectors for a free-body diagram (x right, y up)."""
        a = math.radians(self.contact_angle)
        along = np.array([math.cos(a), math.sin(a)])
        return {
            "gravity": np.array([0.0, -self.gravity]),
            "normal": self.normal * np.array([-math.sin(a), math.cos(a)]),
            "spring": np.array([self.spring, 0.0]),
            # contact phases only ever move forward / up-slope
            "friction": -self.friction * along,
        }

    def net(self) -> np.ndarray:
        return sum(self.vectors().values())

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)


@dataclass(frozen=True)
class EnergyState:
    max_system_energy: float
    spring_pe: float
    block_ke: float
    block_pe: float
    energy_lost_to_friction: float

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)


@dataclass(frozen=True)
class Snapshot:
    block: BlockState
    forces: ForceState
    energy: EnergyState

    def to_dict(self) -> dict:
        return {
            "block": self.block.to_dict(),
            "forces": self.forces.to_dict(),
            "energy": self.energy.to_dict(),
        }


def block_state_at(trajectory: Trajectory, t: float) -> BlockState:
    """Closed-form position and velocity at absolute time t."""
    b = trajectory.boundaries
    ex = trajectory.exits
    inputs = trajectory.inputs
    phase = b.phase_at(t)
    contact_angle = inputs.ramp_angle_degrees if phase is Phase.RAMP else 0.0

    if trajectory.stall_time is not None and t >= trajectory.stall_time:
        # Never progress past the point where friction / gravity stopped it
        rest = trajectory.stall_state
        x, y, vx, vy = rest.x, rest.y, 0.0, 0.0
    elif phase is Phase.SPRING:
        omega = trajectory.spring.angular_frequency
        c = inputs.compression_distance
        x, y = _spring_position(t, c, omega), 0.0
        vx, vy = _spring_velocity(t, c, omega), 0.0
    elif phase is Phase.SURFACE:
        tau = t - b.spring_end
        a = trajectory.surface_acceleration
        v0 = ex.from_spring.vx
        x = ex.from_spring.x + v0 * tau + 0.5 * a * tau ** 2
        y = 0.0
        vx, vy = max(0.0, v0 + a * tau), 0.0
    elif phase is Phase.RAMP:
        tau = t - b.surface_end
        angle = inputs.ramp_angle
        entry = ex.on_entering_ramp
        ax = trajectory.ramp_acceleration * math.cos(angle)
        ay = trajectory.ramp_acceleration * math.sin(angle)
        x = entry.x + entry.vx * tau + 0.5 * ax * tau ** 2
        y = entry.y + entry.vy * tau + 0.5 * ay * tau ** 2
        vx = max(0.0, entry.vx + ax * tau)
        vy = max(0.0, entry.vy + ay * tau)
    elif phase is Phase.AIR:
        tau = t - b.ramp_end
        g = trajectory.config.gravity
        start = ex.from_ramp
        x = start.x + start.vx * tau
        y = start.y + start.vy * tau - 0.5 * g * tau ** 2
        vx, vy = start.vx, start.vy - g * tau
    else:
        land = ex.on_landing
        x, y, vx, vy = land.x, land.y, land.vx, land.vy

    speed = math.hypot(vx, vy)
    if speed > VELOCITY_THRESHOLD:
        heading = math.degrees(math.atan2(vy, vx))
    else:
        heading = contact_angle
    return BlockState(time=t, phase=phase, position_x=x, position_y=y,
                      velocity_x=vx, velocity_y=vy, net_speed=speed,
                      angle_of_motion=heading)


def forces_on(trajectory: Trajectory, block: BlockState) -> ForceState:
    inputs = trajectory.inputs
    weight = inputs.block_mass * trajectory.config.gravity
    contact_angle = inputs.ramp_angle_degrees if block.phase is Phase.RAMP else 0.0

    normal = 0.0
    if block.phase in CONTACT_PHASES:
        normal = weight * math.cos(math.radians(contact_angle))
    friction = 0.0
    if block.phase in FRICTION_PHASES and not block.at_rest:
        friction = inputs.friction_coefficient * normal
    # Detached spring has no restoring force
    spring = inputs.spring_constant * abs(min(block.position_x, 0.0))

    return ForceState(gravity=weight, normal=normal, spring=spring,
                      friction=friction, contact_angle=contact_angle)


def energy_of(trajectory: Trajectory, block: BlockState) -> EnergyState:
    inputs = trajectory.inputs
    displacement = min(block.position_x, 0.0)
    spring_pe = 0.5 * inputs.spring_constant * displacement ** 2
    ke = 0.5 * inputs.block_mass * block.net_speed ** 2
    pe = inputs.block_mass * trajectory.config.gravity * block.position_y
    total = trajectory.max_system_energy
    # Rounding can leave a tiny negative residue; friction never adds energy
    lost = max(0.0, total - (spring_pe + ke + pe))
    return EnergyState(max_system_energy=total, spring_pe=spring_pe,
                       block_ke=ke, block_pe=pe, energy_lost_to_friction=lost)


def _validate_time(t) -> float:
    t = _require_finite("t", t)
    if t < 0:
        raise InvalidInputError(f"query time must be >= 0, got {t}")
    return t


def evaluate(trajectory: Trajectory, t: float) -> Snapshot:
    """Block, force and energy state at absolute time t."""
    t = _validate_time(t)
    block = block_state_at(trajectory, t)
    return Snapshot(block=block,
                    forces=forces_on(trajectory, block),
                    energy=energy_of(trajectory, block))


# ──────────────────────────────────────────────
# Sampling / geometry helpers for renderers
# ──────────────────────────────────────────────
def default_sample_times(trajectory: Trajectory, count: int = 200,
                         margin: float = 0.1) -> np.ndarray:
    """Uniform times from launch to a little past the settle time."""
    end = trajectory.settle_time
    end = end * (1.0 + margin) if end > 0 else 1.0
    return np.linspace(0.0, end, int(count))


def sample_trajectory(trajectory: Trajectory,
                      times: Optional[Iterable[float]] = None) -> Dict[str, np.ndarray]:
    """Evaluate a batch of times into column arrays."""
    if times is None:
        times = default_sample_times(trajectory)
    times = np.asarray(list(times), dtype=float)
    cols = {k: np.zeros(len(times)) for k in (
        "x", "y", "vx", "vy", "speed", "spring_pe", "ke", "pe", "lost")}
    phases = np.zeros(len(times), dtype=int)
    for i, t in enumerate(times):
        snap = evaluate(trajectory, t)
        blk, en = snap.block, snap.energy
        cols["x"][i], cols["y"][i] = blk.position_x, blk.position_y
        cols["vx"][i], cols["vy"][i] = blk.velocity_x, blk.velocity_y
        cols["speed"][i] = blk.net_speed
        cols["spring_pe"][i] = en.spring_pe
        cols["ke"][i] = en.block_ke
        cols["pe"][i] = en.block_pe
        cols["lost"][i] = en.energy_lost_to_friction
        phases[i] = blk.phase.value
    cols["t"] = times
    cols["phase"] = phases
    return cols


@dataclass(frozen=True)
class TrackGeometry:
    """Static scene points: spring, floor and ramp (metres)."""
    compression_start: Tuple[float, float]
    spring_rest: Tuple[float, float]
    ramp_base: Tuple[float, float]
    ramp_top: Tuple[float, float]
    floor_end: float

    @classmethod
    def from_trajectory(cls, trajectory: Trajectory) -> "TrackGeometry":
        cfg = trajectory.config
        angle = trajectory.inputs.ramp_angle
        ramp_len = cfg.ramp_length if angle > 0 else 0.0
        base = (cfg.surface_length, 0.0)
        top = (base[0] + ramp_len * math.cos(angle), ramp_len * math.sin(angle))
        floor_end = top[0]
        if trajectory.exits.on_landing is not None:
            floor_end = max(floor_end, trajectory.exits.on_landing.x)
        return cls(compression_start=(-trajectory.inputs.compression_distance, 0.0),
                   spring_rest=(0.0, 0.0), ramp_base=base, ramp_top=top,
                   floor_end=floor_end)

    def to_dict(self) -> dict:
        return {k: list(v) if isinstance(v, tuple) else v
                for k, v in dataclasses.asdict(self).items()}
