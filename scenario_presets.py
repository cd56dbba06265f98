"""
Scenario Preset System
Named input sets (frictionless launch, surface stall, ramp stall, flat ramp,
resting spring) that build a ready-to-evaluate trajectory.
"""

from typing import Optional

from kinematics import SimulationInputs, TrackConfig, recompute


def _build(label: str, inputs: SimulationInputs,
           config: Optional[TrackConfig] = None) -> dict:
    return {"label": label, "inputs": inputs,
            "trajectory": recompute(inputs, config)}


class ScenarioPreset:
    """Each preset picks inputs → recompute → result dict."""

    @staticmethod
    def scenario_1_frictionless(config: Optional[TrackConfig] = None) -> dict:
        """1 kg on a 100 N/m spring, 0.5 m compression: leaves at 5 m/s.

        Without friction the block coasts to the ramp at 5 m/s, then gravity
        alone stops it about 2.55 m up the incline.
        """
        inputs = SimulationInputs(
            block_mass=1.0,
            spring_constant=100.0,
            compression_distance=0.5,
            ramp_angle_degrees=30.0,
            friction_coefficient=0.0,
        )
        return _build("1: Frictionless", inputs, config)

    @staticmethod
    def scenario_2_standard(config: Optional[TrackConfig] = None) -> dict:
        """Strong spring, light friction: the block clears the ramp."""
        inputs = SimulationInputs(
            block_mass=2.0,
            spring_constant=2000.0,
            compression_distance=1.0,
            ramp_angle_degrees=25.0,
            friction_coefficient=0.1,
        )
        return _build("2: Standard", inputs, config)

    @staticmethod
    def scenario_3_surface_stall(config: Optional[TrackConfig] = None) -> dict:
        """Rough surface: friction halts the block before the ramp."""
        inputs = SimulationInputs(
            block_mass=1.0,
            spring_constant=100.0,
            compression_distance=0.5,
            ramp_angle_degrees=30.0,
            friction_coefficient=0.5,
        )
        return _build("3: Surface stall", inputs, config)

    @staticmethod
    def scenario_4_ramp_stall(config: Optional[TrackConfig] = None) -> dict:
        """Steep ramp: the block reaches the incline but stops on it."""
        inputs = SimulationInputs(
            block_mass=1.0,
            spring_constant=400.0,
            compression_distance=0.5,
            ramp_angle_degrees=60.0,
            friction_coefficient=0.05,
        )
        return _build("4: Ramp stall", inputs, config)

    @staticmethod
    def scenario_5_flat_ramp(config: Optional[TrackConfig] = None) -> dict:
        """Zero ramp angle: the ramp collapses and the block leaves at ground level."""
        inputs = SimulationInputs(
            block_mass=1.0,
            spring_constant=100.0,
            compression_distance=0.5,
            ramp_angle_degrees=0.0,
            friction_coefficient=0.0,
        )
        return _build("5: Flat ramp", inputs, config)

    @staticmethod
    def scenario_6_resting_spring(config: Optional[TrackConfig] = None) -> dict:
        """No compression: the spring stores nothing and the block never moves."""
        inputs = SimulationInputs(
            block_mass=1.0,
            spring_constant=100.0,
            compression_distance=0.0,
            ramp_angle_degrees=30.0,
            friction_coefficient=0.2,
        )
        return _build("6: Resting spring", inputs, config)


# Scenario map (keys 1-6), shared by controller and server
SCENARIOS = {
    "1": ScenarioPreset.scenario_1_frictionless,
    "2": ScenarioPreset.scenario_2_standard,
    "3": ScenarioPreset.scenario_3_surface_stall,
    "4": ScenarioPreset.scenario_4_ramp_stall,
    "5": ScenarioPreset.scenario_5_flat_ramp,
    "6": ScenarioPreset.scenario_6_resting_spring,
}
