"""Rough floor — friction stops the block short of the ramp"""

SCRIPT = {
    "inputs": {
        "block_mass":           1.0,
        "spring_constant":    100.0,
        "compression_distance": 0.5,
        "ramp_angle_degrees":  30.0,
        "friction_coefficient": 0.5,
    },
    "playback": {
        "start_time": 0.5,
        "autoplay":   False,
    },
}
