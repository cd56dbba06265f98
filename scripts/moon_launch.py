"""Moon launch — textbook inputs under lunar gravity clear the ramp"""

SCRIPT = {
    "inputs": {
        "block_mass":           1.0,
        "spring_constant":    100.0,
        "compression_distance": 0.5,
        "ramp_angle_degrees":  30.0,
        "friction_coefficient": 0.0,
    },
    "params": {
        "GRAVITY": 1.6,
    },
    "playback": {
        "speed":    0.5,
        "autoplay": True,
    },
}
