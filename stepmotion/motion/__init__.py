"""
Motion sampling for stepmotion.

- Steppers turn two endpoints and a motion model into time-stamped samples
  (constant speed in 2D/3D, angle ramps, trapezoidal acceleration).
- Profiles are the motion models (distance as a function of time).
- The rotation transform rotates 3D vectors by Euler angles.
"""

from stepmotion.motion.profiles import (
    AccelerationProfile,
    ConstantSpeedProfile,
    MotionProfile,
    Phase,
    PhaseBoundaries,
    ProfileType,
)
from stepmotion.motion.rotation import EulerRotationTransform, rotate_vector
from stepmotion.motion.steppers import (
    AcceleratedLinearStepper,
    AngularStepper,
    LinearStepper,
    move_to,
    normalize_angle,
    speed_up_to,
    turn_to,
)
from stepmotion.motion.types import (
    AccelerationConfig,
    AngleSample,
    EulerAngles,
    Point2D,
    Point3D,
    Sample,
    Trajectory,
)

__all__ = [
    # Value objects
    "Point2D",
    "Point3D",
    "Sample",
    "AngleSample",
    "AccelerationConfig",
    "EulerAngles",
    "Trajectory",
    # Motion models
    "MotionProfile",
    "ConstantSpeedProfile",
    "AccelerationProfile",
    "ProfileType",
    "Phase",
    "PhaseBoundaries",
    # Steppers
    "LinearStepper",
    "AcceleratedLinearStepper",
    "AngularStepper",
    "move_to",
    "turn_to",
    "speed_up_to",
    "normalize_angle",
    # Rotation
    "EulerRotationTransform",
    "rotate_vector",
]
