import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import kinematics as _kin

_TRACK_DEFAULTS = {
    "GRAVITY": _kin.GRAVITY,
    "SURFACE_LENGTH": _kin.SURFACE_LENGTH,
    "RAMP_LENGTH": _kin.RAMP_LENGTH,
}


@pytest.fixture(autouse=True)
def restore_track_constants():
    """Controller params mutate kinematics module constants; undo after each test."""
    yield
    for attr, value in _TRACK_DEFAULTS.items():
        setattr(_kin, attr, value)
