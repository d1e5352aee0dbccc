"""Unit tests for value objects and config helpers."""

import numpy as np
import pytest

from stepmotion import config as cfg
from stepmotion.motion import AngleSample, Point2D, Point3D, Sample, Trajectory
from stepmotion.motion.types import point_from_array
from stepmotion.utils.errors import InvalidArgumentError, SampleLimitError


class TestPoints:
    def test_round_trip_arrays(self):
        assert Point2D.from_array(Point2D(1.5, -2).as_array()) == Point2D(1.5, -2.0)
        assert Point3D.from_array([1, 2, 3]) == Point3D(1.0, 2.0, 3.0)

    def test_point_from_array_dispatch(self):
        assert isinstance(point_from_array([1, 2]), Point2D)
        assert isinstance(point_from_array([1, 2, 3]), Point3D)

    def test_point_from_array_bad_shape(self):
        with pytest.raises(InvalidArgumentError):
            point_from_array([1, 2, 3, 4])

    def test_frozen(self):
        p = Point2D(1, 2)
        with pytest.raises(AttributeError):
            p.x = 5


class TestSample:
    def test_accessors(self):
        s = Sample(Point3D(1, 2, 3), 0.5)
        assert (s.x, s.y, s.z, s.t) == (1, 2, 3, 0.5)
        assert s.as_tuple() == (1.0, 2.0, 3.0, 0.5)

    def test_2d_has_no_z(self):
        s = Sample(Point2D(1, 2), 0.0)
        assert s.as_tuple() == (1.0, 2.0, 0.0)
        with pytest.raises(AttributeError):
            _ = s.z


class TestTrajectory:
    def test_container(self):
        traj = Trajectory(samples=(AngleSample(0.0, 0.0), AngleSample(10.0, 0.5)))

        assert len(traj) == 2
        assert traj[1].angle == 10.0
        assert [s.t for s in traj] == [0.0, 0.5]
        assert traj.duration == 0.5
        assert np.allclose(traj.as_array(), [[0.0, 0.0], [10.0, 0.5]])

    def test_empty(self):
        traj = Trajectory(samples=())
        assert traj.duration == 0.0
        assert traj.as_array().size == 0


class TestSampleBudget:
    def test_within_budget(self, monkeypatch):
        monkeypatch.setattr(cfg, "MAX_SAMPLES", 100)
        assert cfg.check_sample_budget(99, "test") == 99

    @pytest.mark.parametrize("n", [100, 1e9, float("inf"), float("nan")])
    def test_over_budget(self, monkeypatch, n):
        monkeypatch.setattr(cfg, "MAX_SAMPLES", 100)
        with pytest.raises(SampleLimitError):
            cfg.check_sample_budget(n, "test")
