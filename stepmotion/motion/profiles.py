"""
Motion models: cumulative distance as a function of elapsed time.

A profile answers "how far along the path are we at time t". Steppers
combine a profile with path geometry to place samples; adding a model
means subclassing MotionProfile, not writing a new stepping loop.

Trapezoidal profile (AccelerationProfile), with delta = max_speed - speed:

  speed
    ^        ____________
    |       /            \\
    |      /              \\
    |_____/                \\______ (plateau: distance stops growing)
    +-----+-----+--------+--+-----> t
        start  t_acc    end t_dec
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from stepmotion.motion.types import AccelerationConfig
from stepmotion.utils.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


class ProfileType(Enum):
    """Available motion models."""

    CONSTANT = "constant"  # Fixed speed, distance-cursor stepping
    TRAPEZOID = "trapezoid"  # Accelerate, cruise, decelerate


class Phase(Enum):
    """Segments of the trapezoidal profile, in time order."""

    FLOOR = "floor"
    RAMP_UP = "ramp_up"
    CRUISE = "cruise"
    RAMP_DOWN = "ramp_down"
    COMPLETE = "complete"


class MotionProfile(ABC):
    """Base class for distance-vs-time models."""

    kind: ProfileType

    @abstractmethod
    def distance_at(self, t: float) -> float: ...

    @abstractmethod
    def speed_at(self, t: float) -> float: ...

    @abstractmethod
    def reach_time_bound(self, distance: float) -> float:
        """
        Upper bound on the time needed to cover `distance`.

        Returns math.inf if the profile never gets that far.
        """
        ...


class ConstantSpeedProfile(MotionProfile):
    kind = ProfileType.CONSTANT

    def __init__(self, speed: float):
        if not math.isfinite(speed) or speed <= 0:
            raise InvalidArgumentError(f"speed must be > 0, got {speed}")
        self.speed = float(speed)

    def distance_at(self, t: float) -> float:
        return self.speed * max(t, 0.0)

    def speed_at(self, t: float) -> float:
        return self.speed

    def reach_time_bound(self, distance: float) -> float:
        return distance / self.speed

    def __repr__(self) -> str:
        return f"ConstantSpeedProfile(speed={self.speed})"


@dataclass(frozen=True)
class PhaseBoundaries:
    """
    Phase switch times and the distance each speed-up phase adds on top of
    the floor-speed term `speed * t`.

    Attributes:
        start: Ramp-up begins
        acceleration_time: max_speed reached
        end: Ramp-down begins
        deceleration_time: Ramp-down complete
        ramp_up_distance: delta^2 / (2 * acceleration)
        cruise_distance: (end - acceleration_time) * delta
        ramp_down_distance: delta^2 / (2 * deceleration)
    """

    start: float
    acceleration_time: float
    end: float
    deceleration_time: float
    ramp_up_distance: float
    cruise_distance: float
    ramp_down_distance: float

    @classmethod
    def from_config(cls, config: AccelerationConfig) -> PhaseBoundaries:
        delta = config.speed_delta
        t_acc = config.acceleration_time
        t_dec = config.deceleration_time
        ramp_up_span = t_acc - config.start
        ramp_down_span = t_dec - config.end
        return cls(
            start=config.start,
            acceleration_time=t_acc,
            end=config.end,
            deceleration_time=t_dec,
            ramp_up_distance=0.5 * config.acceleration * ramp_up_span**2,
            cruise_distance=(config.end - t_acc) * delta,
            ramp_down_distance=0.5 * config.deceleration * ramp_down_span**2,
        )

    @property
    def extra_distance(self) -> float:
        """Distance gained over the floor speed once the profile completes."""
        return self.ramp_up_distance + self.cruise_distance + self.ramp_down_distance


class AccelerationProfile(MotionProfile):
    """
    Trapezoidal distance profile.

    The floor speed term `speed * t` runs through every phase up to
    deceleration_time. After that the distance holds at its final value
    (plateau), unless `resume_floor_speed` is set, in which case motion
    continues at the floor speed.

    Args:
        config: Validated on construction
        resume_floor_speed: Keep moving at `config.speed` after braking ends
    """

    kind = ProfileType.TRAPEZOID

    def __init__(self, config: AccelerationConfig, resume_floor_speed: bool = False):
        config.validate()
        self.config = config
        self.resume_floor_speed = resume_floor_speed
        self.boundaries = PhaseBoundaries.from_config(config)

        logger.debug(
            "AccelerationProfile: t_acc=%.4f t_dec=%.4f extra=%.4f",
            self.boundaries.acceleration_time,
            self.boundaries.deceleration_time,
            self.boundaries.extra_distance,
        )

    @property
    def final_distance(self) -> float:
        """Distance at deceleration_time (the plateau height)."""
        b = self.boundaries
        return self.config.speed * b.deceleration_time + b.extra_distance

    def phase_at(self, t: float) -> Phase:
        b = self.boundaries
        if t < b.start:
            return Phase.FLOOR
        if t < b.acceleration_time:
            return Phase.RAMP_UP
        if t < b.end:
            return Phase.CRUISE
        if t < b.deceleration_time:
            return Phase.RAMP_DOWN
        return Phase.COMPLETE

    def distance_at(self, t: float) -> float:
        """Cumulative distance at time t (negative t is treated as 0)."""
        t = max(t, 0.0)
        cfg = self.config
        b = self.boundaries
        floor = cfg.speed * t
        phase = self.phase_at(t)

        if phase is Phase.FLOOR:
            return floor
        if phase is Phase.RAMP_UP:
            span = t - b.start
            return floor + 0.5 * cfg.acceleration * span**2
        if phase is Phase.CRUISE:
            return floor + b.ramp_up_distance + (t - b.acceleration_time) * cfg.speed_delta
        if phase is Phase.RAMP_DOWN:
            tau = t - b.end
            braking = cfg.speed_delta * tau - 0.5 * cfg.deceleration * tau**2
            return floor + b.ramp_up_distance + b.cruise_distance + braking
        if self.resume_floor_speed:
            return floor + b.extra_distance
        return self.final_distance

    def speed_at(self, t: float) -> float:
        """Instantaneous speed at time t (derivative of distance_at)."""
        t = max(t, 0.0)
        cfg = self.config
        b = self.boundaries
        phase = self.phase_at(t)

        if phase is Phase.FLOOR:
            return cfg.speed
        if phase is Phase.RAMP_UP:
            return cfg.speed + cfg.acceleration * (t - b.start)
        if phase is Phase.CRUISE:
            return cfg.max_speed
        if phase is Phase.RAMP_DOWN:
            return cfg.max_speed - cfg.deceleration * (t - b.end)
        return cfg.speed if self.resume_floor_speed else 0.0

    def reach_time_bound(self, distance: float) -> float:
        final = self.final_distance
        if distance <= final:
            return self.boundaries.deceleration_time
        if self.resume_floor_speed and self.config.speed > 0:
            return self.boundaries.deceleration_time + (distance - final) / self.config.speed
        return math.inf

    def __repr__(self) -> str:
        return (
            f"AccelerationProfile({self.config!r}, "
            f"resume_floor_speed={self.resume_floor_speed})"
        )
