"""Long jump — stiff spring, waxed surface, shallow ramp"""

SCRIPT = {
    "inputs": {
        "block_mass":           2.0,
        "spring_constant":   2000.0,
        "compression_distance": 1.0,
        "ramp_angle_degrees":  25.0,
        "friction_coefficient": 0.1,
    },
    "playback": {
        "start_time": 0.0,
        "speed":      1.0,
        "autoplay":   True,
    },
}
