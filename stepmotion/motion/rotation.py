"""
Euler rotation of 3D vectors.

R = Rz(gamma) @ Rx(beta) @ Rz(alpha), equivalent to scipy's extrinsic
"zxz" sequence with angles [alpha, beta, gamma]. Angles are radians unless
degrees=True. This is a one-shot transform, not a trajectory generator.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.spatial.transform import Rotation

from stepmotion.motion.types import EulerAngles, Point3D
from stepmotion.utils.errors import InvalidArgumentError
from stepmotion.utils.rotation_numba import euler_zxz_matrix, mat3_vec, mat3_vec_batch


class EulerRotationTransform:
    """Precomputed rotation matrix for one set of Euler angles."""

    def __init__(self, angles: EulerAngles, degrees: bool = False):
        alpha, beta, gamma = angles.alpha, angles.beta, angles.gamma
        if not all(math.isfinite(a) for a in (alpha, beta, gamma)):
            raise InvalidArgumentError(f"Euler angles must be finite, got {angles}")
        if degrees:
            alpha, beta, gamma = np.radians([alpha, beta, gamma])

        self.angles = angles
        self.degrees = degrees
        self._matrix = np.empty((3, 3), dtype=np.float64)
        euler_zxz_matrix(float(alpha), float(beta), float(gamma), self._matrix)

    def as_matrix(self) -> NDArray[np.float64]:
        return self._matrix.copy()

    def as_rotation(self) -> Rotation:
        """The same rotation as a scipy Rotation, for composing with other frames."""
        return Rotation.from_matrix(self._matrix)

    def apply(self, vectors: ArrayLike | Point3D) -> NDArray[np.float64]:
        """
        Rotate one vector or a batch.

        Args:
            vectors: Point3D, (3,) vector or (N, 3) array

        Returns:
            Array with the same shape as the input
        """
        if isinstance(vectors, Point3D):
            vectors = vectors.as_array()
        v = np.ascontiguousarray(vectors, dtype=np.float64)

        if v.shape == (3,):
            out = np.empty(3, dtype=np.float64)
            mat3_vec(self._matrix, v, out)
            return out
        if v.ndim == 2 and v.shape[1] == 3:
            out = np.empty_like(v)
            mat3_vec_batch(self._matrix, v, out)
            return out
        raise InvalidArgumentError(f"Expected (3,) or (N, 3) vectors, got {v.shape}")


def rotate_vector(
    vector: ArrayLike | Point3D, angles: EulerAngles, degrees: bool = False
) -> NDArray[np.float64]:
    """
    Rotate a 3D vector by Euler angles.

    Example:
        >>> rotate_vector([1.0, 0.0, 0.0], EulerAngles(0.0, 0.0, 0.0))
        array([1., 0., 0.])
    """
    return EulerRotationTransform(angles, degrees=degrees).apply(vector)
