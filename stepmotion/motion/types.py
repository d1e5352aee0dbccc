"""
Value objects shared by the steppers and the rotation transform.

Every type here is immutable and created fresh per call.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray

from stepmotion.utils.errors import InvalidArgumentError


def _require_finite(**values: float) -> None:
    for name, value in values.items():
        if not math.isfinite(value):
            raise InvalidArgumentError(f"{name} must be finite, got {value!r}")


@dataclass(frozen=True)
class Point2D:
    x: float
    y: float

    def as_array(self) -> NDArray[np.float64]:
        return np.array([self.x, self.y], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: ArrayLike) -> Point2D:
        a = np.asarray(arr, dtype=np.float64)
        return cls(float(a[0]), float(a[1]))


@dataclass(frozen=True)
class Point3D:
    x: float
    y: float
    z: float

    def as_array(self) -> NDArray[np.float64]:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: ArrayLike) -> Point3D:
        a = np.asarray(arr, dtype=np.float64)
        return cls(float(a[0]), float(a[1]), float(a[2]))


Point = Union[Point2D, Point3D]


def point_from_array(arr: ArrayLike) -> Point:
    """Build a Point2D or Point3D depending on the length of arr."""
    a = np.asarray(arr, dtype=np.float64)
    if a.shape == (2,):
        return Point2D.from_array(a)
    if a.shape == (3,):
        return Point3D.from_array(a)
    raise InvalidArgumentError(f"Expected 2 or 3 coordinates, got shape {a.shape}")


@dataclass(frozen=True)
class Sample:
    """
    One emitted trajectory point.

    Attributes:
        position: Point2D or Point3D
        t: Elapsed seconds since the start of the trajectory
    """

    position: Point
    t: float

    @property
    def x(self) -> float:
        return self.position.x

    @property
    def y(self) -> float:
        return self.position.y

    @property
    def z(self) -> float:
        if isinstance(self.position, Point3D):
            return self.position.z
        raise AttributeError("2D sample has no z coordinate")

    def as_tuple(self) -> tuple[float, ...]:
        """(x, y, t) for 2D samples, (x, y, z, t) for 3D samples."""
        return (*self.position.as_array().tolist(), self.t)


@dataclass(frozen=True)
class AngleSample:
    """Rotation sample. angle is in degrees, normalized to [0, 360)."""

    angle: float
    t: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.angle, self.t)


@dataclass(frozen=True)
class Trajectory:
    """
    Ordered, immutable sequence of samples returned by a stepper.

    Attributes:
        samples: Samples in non-decreasing time order
    """

    samples: tuple[Any, ...]

    def __len__(self) -> int:
        return len(self.samples)

    def __getitem__(self, idx: int) -> Any:
        return self.samples[idx]

    def __iter__(self) -> Iterator[Any]:
        return iter(self.samples)

    @property
    def duration(self) -> float:
        """Time of the last sample (0.0 for an empty trajectory)."""
        return self.samples[-1].t if self.samples else 0.0

    def times(self) -> NDArray[np.float64]:
        return np.array([s.t for s in self.samples], dtype=np.float64)

    def as_array(self) -> NDArray[np.float64]:
        """
        Stack samples into a float array.

        Returns:
            (N, D + 1) array; the last column is time
        """
        if not self.samples:
            return np.empty((0, 0), dtype=np.float64)
        return np.array([s.as_tuple() for s in self.samples], dtype=np.float64)


@dataclass(frozen=True)
class AccelerationConfig:
    """
    Parameters of a trapezoidal speed profile.

    Attributes:
        speed: Floor speed, held before `start` (units/s)
        start: Time acceleration begins (s)
        acceleration: Ramp-up rate (units/s^2)
        max_speed: Cruise speed reached after ramp-up (units/s)
        end: Time deceleration begins (s)
        deceleration: Ramp-down rate (units/s^2)
    """

    speed: float
    start: float
    acceleration: float
    max_speed: float
    end: float
    deceleration: float

    @property
    def speed_delta(self) -> float:
        return self.max_speed - self.speed

    @property
    def acceleration_time(self) -> float:
        """Time at which max_speed is reached."""
        return self.start + self.speed_delta / self.acceleration

    @property
    def deceleration_time(self) -> float:
        """Time at which braking back to the floor speed completes."""
        return self.end + self.speed_delta / self.deceleration

    def validate(self) -> None:
        """
        Check the ordering start <= acceleration_time <= end <= deceleration_time.

        Raises:
            InvalidArgumentError: If any field is non-finite or out of range
        """
        _require_finite(
            speed=self.speed,
            start=self.start,
            acceleration=self.acceleration,
            max_speed=self.max_speed,
            end=self.end,
            deceleration=self.deceleration,
        )
        if self.speed < 0:
            raise InvalidArgumentError(f"speed must be >= 0, got {self.speed}")
        if self.start < 0:
            raise InvalidArgumentError(f"start must be >= 0, got {self.start}")
        if self.acceleration <= 0:
            raise InvalidArgumentError(
                f"acceleration must be > 0, got {self.acceleration}"
            )
        if self.deceleration <= 0:
            raise InvalidArgumentError(
                f"deceleration must be > 0, got {self.deceleration}"
            )
        if self.max_speed < self.speed:
            raise InvalidArgumentError(
                f"max_speed ({self.max_speed}) must be >= speed ({self.speed})"
            )
        if self.start > self.end:
            raise InvalidArgumentError(
                f"start ({self.start}) must be <= end ({self.end})"
            )
        if self.acceleration_time > self.end:
            raise InvalidArgumentError(
                f"Ramp-up finishes at t={self.acceleration_time:.6g}, "
                f"after deceleration starts at end={self.end}"
            )

    @classmethod
    def from_dict(cls, options: Mapping[str, float]) -> AccelerationConfig:
        """
        Build from a mapping of the six options.

        Accepts `maxSpeed` as an alias of `max_speed`. Unknown or missing
        keys are rejected.
        """
        opts = dict(options)
        if "maxSpeed" in opts:
            if "max_speed" in opts:
                raise InvalidArgumentError("Both 'maxSpeed' and 'max_speed' given")
            opts["max_speed"] = opts.pop("maxSpeed")

        expected = {"speed", "start", "acceleration", "max_speed", "end", "deceleration"}
        missing = expected - opts.keys()
        unknown = opts.keys() - expected
        if missing:
            raise InvalidArgumentError(
                f"Missing acceleration options: {sorted(missing)}"
            )
        if unknown:
            raise InvalidArgumentError(
                f"Unknown acceleration options: {sorted(unknown)}"
            )
        return cls(**{k: float(v) for k, v in opts.items()})


@dataclass(frozen=True)
class EulerAngles:
    """Three sequential rotation parameters for Rz(gamma) @ Rx(beta) @ Rz(alpha)."""

    alpha: float
    beta: float
    gamma: float
