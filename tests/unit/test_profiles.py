"""Unit tests for the trapezoidal acceleration profile and accelerated stepping."""

import math

import numpy as np
import pytest

from stepmotion.motion import (
    AcceleratedLinearStepper,
    AccelerationConfig,
    AccelerationProfile,
    ConstantSpeedProfile,
    MotionProfile,
    Phase,
    Point2D,
    Point3D,
    ProfileType,
    speed_up_to,
)
from stepmotion.utils.errors import InvalidArgumentError


@pytest.fixture
def config() -> AccelerationConfig:
    """Floor speed 1, ramp to 5 between t=5 and t=7, brake from t=15 to t=17."""
    return AccelerationConfig(
        speed=1.0, start=5.0, acceleration=2.0, max_speed=5.0, end=15.0, deceleration=2.0
    )


@pytest.fixture
def profile(config) -> AccelerationProfile:
    return AccelerationProfile(config)


class TestPhaseBoundaries:
    def test_times(self, profile):
        b = profile.boundaries
        assert b.start == 5.0
        assert b.acceleration_time == pytest.approx(7.0)
        assert b.end == 15.0
        assert b.deceleration_time == pytest.approx(17.0)

    def test_contributions(self, profile):
        b = profile.boundaries
        assert b.ramp_up_distance == pytest.approx(4.0)
        assert b.cruise_distance == pytest.approx(32.0)
        assert b.ramp_down_distance == pytest.approx(4.0)
        assert b.extra_distance == pytest.approx(40.0)


class TestAccelerationProfile:
    """Tests for distance_at / speed_at / phase_at."""

    @pytest.mark.parametrize(
        "t, expected",
        [
            (0.0, 0.0),
            (2.0, 2.0),
            (5.0, 5.0),
            (6.0, 7.0),  # 6 + 0.5 * 2 * 1^2
            (7.0, 11.0),
            (10.0, 26.0),  # 10 + 4 + 3 * 4
            (15.0, 51.0),
            (16.0, 55.0),  # 16 + 36 + 4 * 1 - 0.5 * 2 * 1^2
            (17.0, 57.0),
            (100.0, 57.0),  # plateau
        ],
    )
    def test_distance_values(self, profile, t, expected):
        assert profile.distance_at(t) == pytest.approx(expected)

    def test_negative_time_clamped(self, profile):
        assert profile.distance_at(-3.0) == 0.0

    def test_final_distance_is_sum_of_contributions(self, profile, config):
        b = profile.boundaries
        expected = (
            config.speed * b.deceleration_time
            + b.ramp_up_distance
            + b.cruise_distance
            + b.ramp_down_distance
        )
        assert profile.final_distance == pytest.approx(expected)
        assert profile.distance_at(b.deceleration_time) == pytest.approx(expected)

    def test_continuous_at_boundaries(self, profile):
        b = profile.boundaries
        eps = 1e-9
        for boundary in (b.start, b.acceleration_time, b.end, b.deceleration_time):
            before = profile.distance_at(boundary - eps)
            at = profile.distance_at(boundary)
            assert abs(at - before) < 1e-6

    def test_non_decreasing(self, profile):
        t = np.linspace(0.0, 30.0, 3001)
        d = np.array([profile.distance_at(x) for x in t])
        assert np.all(np.diff(d) >= -1e-12)

    @pytest.mark.parametrize("t", [2.5, 6.0, 6.5, 10.0, 15.5, 16.2])
    def test_speed_is_derivative_of_distance(self, profile, t):
        h = 1e-5
        numeric = (profile.distance_at(t + h) - profile.distance_at(t - h)) / (2 * h)
        assert numeric == pytest.approx(profile.speed_at(t), rel=1e-4)

    def test_speed_values(self, profile):
        assert profile.speed_at(1.0) == 1.0
        assert profile.speed_at(6.0) == pytest.approx(3.0)
        assert profile.speed_at(10.0) == 5.0
        assert profile.speed_at(16.0) == pytest.approx(3.0)
        assert profile.speed_at(20.0) == 0.0

    def test_phase_at(self, profile):
        assert profile.phase_at(0.0) is Phase.FLOOR
        assert profile.phase_at(5.0) is Phase.RAMP_UP
        assert profile.phase_at(7.0) is Phase.CRUISE
        assert profile.phase_at(15.0) is Phase.RAMP_DOWN
        assert profile.phase_at(17.0) is Phase.COMPLETE

    def test_resume_floor_speed(self, config):
        profile = AccelerationProfile(config, resume_floor_speed=True)
        assert profile.distance_at(17.0) == pytest.approx(57.0)
        assert profile.distance_at(100.0) == pytest.approx(140.0)
        assert profile.speed_at(100.0) == 1.0

    def test_no_speed_gain(self):
        """max_speed == speed collapses the ramps: plain floor speed until end."""
        cfg = AccelerationConfig(
            speed=2.0, start=1.0, acceleration=1.0, max_speed=2.0, end=3.0, deceleration=1.0
        )
        profile = AccelerationProfile(cfg)
        assert profile.boundaries.extra_distance == 0.0
        assert profile.distance_at(2.0) == pytest.approx(4.0)
        assert profile.final_distance == pytest.approx(6.0)

    def test_kind(self, profile):
        assert profile.kind is ProfileType.TRAPEZOID
        assert ConstantSpeedProfile(1.0).kind is ProfileType.CONSTANT


class TestMotionProfileInterface:
    def test_base_is_abstract(self):
        with pytest.raises(TypeError):
            MotionProfile()

    def test_incomplete_subclass_fails_on_creation(self):
        """A model missing reach_time_bound cannot be instantiated."""

        class Partial(MotionProfile):
            kind = ProfileType.CONSTANT

            def distance_at(self, t):
                return t

            def speed_at(self, t):
                return 1.0

        with pytest.raises(TypeError):
            Partial()


class TestConfigValidation:
    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"acceleration": 0.0}, "acceleration"),
            ({"deceleration": -1.0}, "deceleration"),
            ({"max_speed": 0.5}, "max_speed"),
            ({"start": 20.0}, "start"),
            ({"speed": -1.0}, "speed"),
            ({"acceleration": 0.1}, "Ramp-up"),  # ramp-up ends at t=45 > end
            ({"end": math.nan}, "finite"),
        ],
    )
    def test_rejected(self, config, overrides, message):
        values = {
            "speed": config.speed,
            "start": config.start,
            "acceleration": config.acceleration,
            "max_speed": config.max_speed,
            "end": config.end,
            "deceleration": config.deceleration,
        }
        values.update(overrides)
        with pytest.raises(InvalidArgumentError, match=message):
            AccelerationProfile(AccelerationConfig(**values))

    def test_from_dict_accepts_camel_case(self):
        cfg = AccelerationConfig.from_dict(
            {
                "speed": 1,
                "maxSpeed": 5,
                "acceleration": 2,
                "deceleration": 2,
                "start": 5,
                "end": 15,
            }
        )
        assert cfg.max_speed == 5.0
        assert cfg.acceleration_time == pytest.approx(7.0)
        assert cfg.deceleration_time == pytest.approx(17.0)

    def test_from_dict_missing(self):
        with pytest.raises(InvalidArgumentError, match="Missing"):
            AccelerationConfig.from_dict({"speed": 1})

    def test_from_dict_unknown(self, config):
        opts = {
            "speed": 1,
            "max_speed": 5,
            "acceleration": 2,
            "deceleration": 2,
            "start": 5,
            "end": 15,
            "jerk": 3,
        }
        with pytest.raises(InvalidArgumentError, match="Unknown"):
            AccelerationConfig.from_dict(opts)

    def test_from_dict_both_spellings(self):
        with pytest.raises(InvalidArgumentError):
            AccelerationConfig.from_dict({"maxSpeed": 5, "max_speed": 5})


class TestSpeedUpTo:
    """Tests for time-sampled accelerated stepping."""

    def test_samples_follow_profile(self, config, profile):
        traj = speed_up_to(Point2D(0, 0), Point2D(50, 0), 0.5, config)

        # dist(14.5) = 48.5 < 50, dist(15) = 51 >= 50
        assert len(traj) == 31
        assert traj[-1].as_tuple() == (50.0, 0.0, 15.0)
        assert traj[-2].x == pytest.approx(48.5)
        assert np.allclose(traj.times(), np.arange(31) * 0.5)
        for s in traj[:-1]:
            assert s.x == pytest.approx(profile.distance_at(s.t))
            assert s.y == 0.0

    def test_positions_project_onto_segment(self, config):
        traj = speed_up_to(Point2D(1, 1), Point2D(31, 41), 0.25, config)
        for s in traj:
            # direction (30, 40) -> y - 1 == (x - 1) * 4 / 3
            assert s.y - 1 == pytest.approx((s.x - 1) * 4 / 3)
        assert traj[-1].position == Point2D(31, 41)

    def test_3d(self, config):
        traj = speed_up_to(Point3D(0, 0, 0), Point3D(0, 0, 50), 0.5, config)
        assert traj[-1].as_tuple() == (0.0, 0.0, 50.0, 15.0)

    def test_unreachable_target_rejected(self, config):
        """The plateau stops at 57 units; 100 is never reached."""
        with pytest.raises(InvalidArgumentError, match="never covers"):
            speed_up_to(Point2D(0, 0), Point2D(100, 0), 0.5, config)

    def test_resume_floor_speed_reaches_far_target(self, config):
        traj = speed_up_to(
            Point2D(0, 0), Point2D(100, 0), 1.0, config, resume_floor_speed=True
        )
        # speed * t + 40 = 100 at t = 60
        assert traj[-1].as_tuple() == (100.0, 0.0, 60.0)
        assert traj[-2].x == pytest.approx(99.0)

    def test_zero_distance(self, config):
        traj = speed_up_to(Point2D(3, 3), Point2D(3, 3), 0.5, config)
        assert [s.as_tuple() for s in traj] == [(3.0, 3.0, 0.0)]

    def test_invalid_duration(self, config):
        with pytest.raises(InvalidArgumentError):
            speed_up_to(Point2D(0, 0), Point2D(10, 0), 0.0, config)

    def test_invalid_config_produces_nothing(self):
        bad = AccelerationConfig(
            speed=1.0, start=5.0, acceleration=0.0, max_speed=5.0, end=15.0, deceleration=2.0
        )
        with pytest.raises(InvalidArgumentError):
            AcceleratedLinearStepper(Point2D(0, 0), Point2D(10, 0), 0.1, bad)

    def test_idempotent(self, config):
        a = speed_up_to(Point2D(0, 0), Point2D(40, 30), 1 / 30, config)
        b = speed_up_to(Point2D(0, 0), Point2D(40, 30), 1 / 30, config)
        assert a == b
