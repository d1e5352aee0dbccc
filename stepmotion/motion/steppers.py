"""
Steppers: turn endpoints plus a motion model into a finite list of samples.

Pipeline:
  1. Validate inputs (nothing is emitted for invalid input)
  2. Measure the path (Euclidean distance or angular span)
  3. Walk a distance cursor (constant speed) or a time cursor (any other
     MotionProfile) and emit samples
  4. Land exactly on the target

Positions are handled as numpy vectors, so one algorithm serves 2D and 3D.
"""

from __future__ import annotations

import logging
import math

import numpy as np
from numpy.typing import NDArray

from stepmotion import config as cfg
from stepmotion.motion.profiles import (
    AccelerationProfile,
    ConstantSpeedProfile,
    MotionProfile,
    ProfileType,
)
from stepmotion.motion.types import (
    AccelerationConfig,
    AngleSample,
    Point,
    Point2D,
    Point3D,
    Sample,
    Trajectory,
    point_from_array,
)
from stepmotion.utils.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


def normalize_angle(angle: float) -> float:
    """Map an angle in degrees into [0, 360)."""
    period = cfg.ANGLE_PERIOD_DEG
    a = ((angle % period) + period) % period
    # -1e-20 % 360 rounds up to 360.0
    if a >= period:
        a = 0.0
    return a


def _require_positive(**values: float) -> None:
    for name, value in values.items():
        if not math.isfinite(value) or value <= 0:
            raise InvalidArgumentError(f"{name} must be > 0, got {value!r}")


def _as_vector(point: Point, name: str) -> NDArray[np.float64]:
    if not isinstance(point, (Point2D, Point3D)):
        raise InvalidArgumentError(
            f"{name} must be a Point2D or Point3D, got {type(point).__name__}"
        )
    vec = point.as_array()
    if not np.all(np.isfinite(vec)):
        raise InvalidArgumentError(f"{name} has non-finite coordinates: {point}")
    return vec


def _split_steps(span: float, step: float) -> tuple[int, float]:
    """
    Split span into whole steps and a leftover.

    Ratios within STEP_EPSILON of an integer count as whole, so float
    noise never yields a zero-length tail sample. The tolerance is scaled
    by one step, never by the span, so long paths keep real leftovers.

    Returns:
        (n_full, remainder) with n_full * step + remainder == span
    """
    ratio = span / step
    cfg.check_sample_budget(ratio + 2, "Stepping")
    n_full = math.floor(ratio)
    if ratio - n_full > 1.0 - cfg.STEP_EPSILON:
        n_full += 1
    remainder = span - n_full * step
    if remainder <= max(cfg.STEP_EPSILON * step, 8 * math.ulp(span)):
        remainder = 0.0
    return n_full, remainder


class LinearStepper:
    """
    Samples a straight segment between two points under a motion model.

    ConstantSpeedProfile walks a distance cursor in steps of
    `duration * speed` and appends an exact end sample for any leftover.
    Every other profile walks a time cursor in steps of `duration` and
    clamps the last distance to the segment length.
    """

    def __init__(
        self,
        start: Point,
        end: Point,
        duration: float,
        profile: MotionProfile,
    ):
        """
        Args:
            start: First point (Point2D or Point3D)
            end: Last point, same dimensionality as start
            duration: Seconds between samples
            profile: Motion model
        """
        self._start_vec = _as_vector(start, "start")
        self._end_vec = _as_vector(end, "end")
        if self._start_vec.shape != self._end_vec.shape:
            raise InvalidArgumentError(
                f"start and end dimensionality differ: {start} vs {end}"
            )
        _require_positive(duration=duration)
        if not isinstance(profile, MotionProfile):
            raise InvalidArgumentError(
                f"profile must be a MotionProfile, got {type(profile).__name__}"
            )

        self.start = start
        self.end = end
        self.duration = float(duration)
        self.profile = profile

        self._delta = self._end_vec - self._start_vec
        self.distance = float(np.linalg.norm(self._delta))

    def build(self) -> Trajectory:
        """
        Generate the sample sequence.

        Returns:
            Trajectory of Sample whose last position equals `end`
        """
        if self.distance == 0.0:
            return Trajectory(samples=(Sample(self.start, 0.0),))

        if self.profile.kind is ProfileType.CONSTANT:
            trajectory = self._build_constant_speed()
        else:
            trajectory = self._build_time_sampled()

        logger.debug(
            "LinearStepper: %s distance=%.4f samples=%d duration=%.4f",
            self.profile.kind.value,
            self.distance,
            len(trajectory),
            trajectory.duration,
        )
        return trajectory

    def _build_constant_speed(self) -> Trajectory:
        speed = self.profile.speed_at(0.0)
        step_distance = self.duration * speed
        n_full, remainder = _split_steps(self.distance, step_distance)

        # Vectorized stepping along the unit direction
        k = np.arange(n_full + 1, dtype=np.float64)
        direction = self._delta / self.distance
        positions = self._start_vec + np.outer(k * step_distance, direction)
        times = k * self.duration

        if remainder == 0.0:
            # Whole number of steps: the last step is the target
            positions[-1] = self._end_vec
            final = None
        else:
            final = Sample(self.end, float(times[-1] + remainder / speed))

        samples = [
            Sample(point_from_array(p), float(t)) for p, t in zip(positions, times)
        ]
        if final is not None:
            samples.append(final)
        if cfg.TRACE_ENABLED:
            logger.trace(  # type: ignore[attr-defined]
                "constant-speed: step=%.6g full_steps=%d remainder=%.6g",
                step_distance,
                n_full,
                remainder,
            )
        return Trajectory(samples=tuple(samples))

    def _build_time_sampled(self) -> Trajectory:
        reach = self.profile.reach_time_bound(self.distance)
        if math.isinf(reach):
            raise InvalidArgumentError(
                f"{self.profile!r} never covers distance {self.distance:.6g}"
            )
        max_steps = cfg.check_sample_budget(
            math.ceil(reach / self.duration) + 2, "Time-sampled stepping"
        )

        samples: list[Sample] = []
        for k in range(max_steps + 1):
            t = k * self.duration
            current = self.profile.distance_at(t)
            if current >= self.distance:
                samples.append(Sample(self.end, t))
                break
            position = self._start_vec + (current / self.distance) * self._delta
            samples.append(Sample(point_from_array(position), t))
        else:
            # reach_time_bound guarantees termination
            raise InvalidArgumentError(
                f"{self.profile!r} did not cover {self.distance:.6g} "
                f"within {max_steps} steps"
            )
        return Trajectory(samples=tuple(samples))


class AcceleratedLinearStepper(LinearStepper):
    """
    LinearStepper driven by a trapezoidal AccelerationProfile.

    The final sample sits at the first time step whose distance reaches
    the target; its time is not corrected back to the exact crossing, so
    it may be late by up to one `duration`.
    """

    def __init__(
        self,
        start: Point,
        end: Point,
        duration: float,
        config: AccelerationConfig,
        resume_floor_speed: bool = False,
    ):
        super().__init__(
            start,
            end,
            duration,
            AccelerationProfile(config, resume_floor_speed=resume_floor_speed),
        )


class AngularStepper:
    """
    Ramps a single angle (degrees) at constant angular speed.

    Works on a bare scalar; for 3D orientation see EulerRotationTransform.
    """

    def __init__(self, start: float, end: float, duration: float, speed: float):
        for name, value in (("start", start), ("end", end)):
            if not math.isfinite(value):
                raise InvalidArgumentError(f"{name} must be finite, got {value!r}")
        _require_positive(duration=duration, speed=speed)
        self.start = float(start)
        self.end = float(end)
        self.duration = float(duration)
        self.speed = float(speed)

    @property
    def direction(self) -> float:
        return -1.0 if self.end < self.start else 1.0

    def build(self) -> Trajectory:
        """
        Returns:
            Trajectory of AngleSample, angles normalized to [0, 360)
        """
        span = abs(self.end - self.start)
        if span == 0.0:
            return Trajectory(samples=(AngleSample(normalize_angle(self.start), 0.0),))

        step = self.duration * self.speed
        n_full, remainder = _split_steps(span, step)

        samples = [
            AngleSample(
                normalize_angle(self.start + self.direction * k * step),
                k * self.duration,
            )
            for k in range(n_full + 1)
        ]
        final_angle = normalize_angle(self.end)
        if remainder == 0.0:
            samples[-1] = AngleSample(final_angle, samples[-1].t)
        else:
            samples.append(
                AngleSample(final_angle, samples[-1].t + remainder / self.speed)
            )

        logger.debug(
            "AngularStepper: span=%.4f direction=%+.0f samples=%d",
            span,
            self.direction,
            len(samples),
        )
        return Trajectory(samples=tuple(samples))


def move_to(start: Point, end: Point, duration: float, speed: float) -> Trajectory:
    """
    Constant-speed straight-line samples in 2D or 3D.

    Args:
        start: Initial position
        end: Target position (same type as start)
        duration: Seconds between samples
        speed: Units per second

    Returns:
        Trajectory of Sample ending exactly at `end`

    Example:
        >>> move_to(Point2D(1, 1), Point2D(12, 1), 0.5, 2)[-1].as_tuple()
        (12.0, 1.0, 5.5)
    """
    return LinearStepper(start, end, duration, ConstantSpeedProfile(speed)).build()


def turn_to(start: float, end: float, duration: float, speed: float) -> Trajectory:
    """
    Constant-speed angle ramp in degrees.

    Example:
        >>> turn_to(400, -400, 0.5, 60)[-1].angle
        320.0
    """
    return AngularStepper(start, end, duration, speed).build()


def speed_up_to(
    start: Point,
    end: Point,
    duration: float,
    config: AccelerationConfig,
    resume_floor_speed: bool = False,
) -> Trajectory:
    """
    Straight-line samples at fixed time steps following a trapezoidal profile.

    Args:
        start: Initial position
        end: Target position
        duration: Seconds between samples
        config: Acceleration parameters
        resume_floor_speed: Continue at config.speed after braking ends
            instead of holding the plateau distance

    Raises:
        InvalidArgumentError: If the config is invalid or the profile never
            covers the distance from start to end
    """
    return AcceleratedLinearStepper(
        start, end, duration, config, resume_floor_speed=resume_floor_speed
    ).build()
