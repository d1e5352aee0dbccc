"""
stepmotion Python Package

Generates discrete, time-stamped motion samples between two states for
animation players, scripted actuators and input simulators.

Key components:
- move_to: constant-speed straight-line samples (2D or 3D)
- turn_to: constant-speed angle ramp, normalized to [0, 360)
- speed_up_to: straight-line samples under a trapezoidal speed profile
- rotate_vector / EulerRotationTransform: Euler rotation of 3D vectors
"""

from ._version import __version__
from .motion import (
    AccelerationConfig,
    AngleSample,
    EulerAngles,
    EulerRotationTransform,
    Point2D,
    Point3D,
    Sample,
    Trajectory,
    move_to,
    normalize_angle,
    rotate_vector,
    speed_up_to,
    turn_to,
)
from .utils.errors import InvalidArgumentError, MotionError, SampleLimitError

__all__ = [
    "__version__",
    "Point2D",
    "Point3D",
    "Sample",
    "AngleSample",
    "AccelerationConfig",
    "EulerAngles",
    "Trajectory",
    "move_to",
    "turn_to",
    "speed_up_to",
    "normalize_angle",
    "rotate_vector",
    "EulerRotationTransform",
    "MotionError",
    "InvalidArgumentError",
    "SampleLimitError",
]
