"""
Tests for Scenario Preset System
Each preset should produce the motion its name promises.
"""

import math
import pytest

from kinematics import NEVER, Phase, evaluate
from scenario_presets import SCENARIOS, ScenarioPreset


class TestScenario1Frictionless:
    """Worked example: 5 m/s launch, no losses, gravity stops it on the ramp."""

    def test_launch_speed(self):
        result = ScenarioPreset.scenario_1_frictionless()
        traj = result["trajectory"]
        assert traj.spring.angular_frequency == pytest.approx(10.0)
        assert traj.exits.from_spring.vx == pytest.approx(5.0)

    def test_stops_on_ramp_without_losing_energy(self):
        traj = ScenarioPreset.scenario_1_frictionless()["trajectory"]
        assert traj.stall_phase is Phase.RAMP
        rest = evaluate(traj, traj.stall_time + 1.0)
        assert rest.energy.energy_lost_to_friction == pytest.approx(0.0, abs=1e-9)
        assert rest.energy.block_pe == pytest.approx(12.5)


class TestScenario2Standard:
    """Strong spring clears the ramp and lands past it."""

    def test_lands_beyond_ramp(self):
        traj = ScenarioPreset.scenario_2_standard()["trajectory"]
        assert traj.lands
        ramp_top_x = 15.0 + 15.0 * math.cos(math.radians(25.0))
        assert traj.exits.on_landing.x > ramp_top_x

    def test_friction_removes_energy(self):
        traj = ScenarioPreset.scenario_2_standard()["trajectory"]
        landed = evaluate(traj, traj.boundaries.air_end)
        assert 0 < landed.energy.energy_lost_to_friction < traj.max_system_energy


class TestScenario3SurfaceStall:
    """Rough surface: the block stops before the ramp."""

    def test_never_reaches_ramp(self):
        traj = ScenarioPreset.scenario_3_surface_stall()["trajectory"]
        assert traj.boundaries.surface_end == NEVER
        assert traj.stall_phase is Phase.SURFACE
        assert traj.stall_state.x < 15.0


class TestScenario4RampStall:
    """Steep ramp: the block climbs part of the way, then stops."""

    def test_stops_part_way_up(self):
        traj = ScenarioPreset.scenario_4_ramp_stall()["trajectory"]
        assert traj.boundaries.surface_end < NEVER
        assert traj.boundaries.ramp_end == NEVER
        assert 0 < traj.stall_state.y < 15.0 * math.sin(math.radians(60.0))


class TestScenario5FlatRamp:

    def test_ramp_collapses(self):
        traj = ScenarioPreset.scenario_5_flat_ramp()["trajectory"]
        b = traj.boundaries
        assert b.ramp_end == b.surface_end == b.air_end


class TestScenario6RestingSpring:

    def test_no_energy_no_motion(self):
        traj = ScenarioPreset.scenario_6_resting_spring()["trajectory"]
        assert traj.max_system_energy == 0.0
        assert traj.stall_phase is Phase.SURFACE
        assert evaluate(traj, 10.0).block.position_x == 0.0


class TestScenarioMap:

    @pytest.mark.parametrize("key", sorted(SCENARIOS))
    def test_result_shape(self, key):
        result = SCENARIOS[key]()
        assert set(result) == {"label", "inputs", "trajectory"}
        assert result["label"].startswith(f"{key}:")
        assert result["trajectory"].inputs == result["inputs"]

    @pytest.mark.parametrize("key", sorted(SCENARIOS))
    def test_settles_in_finite_time(self, key):
        traj = SCENARIOS[key]()["trajectory"]
        assert math.isfinite(traj.settle_time)
