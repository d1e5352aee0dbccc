"""Numba-compatible rotation kernels.

Rotation matrices are 3x3 float64 arrays written into caller-provided
output buffers, so the kernels never allocate.
"""

import numpy as np
from numba import njit  # type: ignore[import-untyped]


@njit(cache=True)
def euler_zxz_matrix(alpha: float, beta: float, gamma: float, out: np.ndarray) -> None:
    """Fill out with R = Rz(gamma) @ Rx(beta) @ Rz(alpha). Angles in radians."""
    ca = np.cos(alpha)
    sa = np.sin(alpha)
    cb = np.cos(beta)
    sb = np.sin(beta)
    cg = np.cos(gamma)
    sg = np.sin(gamma)

    out[0, 0] = ca * cg - cb * sa * sg
    out[0, 1] = -cg * sa - ca * cb * sg
    out[0, 2] = sb * sg
    out[1, 0] = cb * cg * sa + ca * sg
    out[1, 1] = ca * cb * cg - sa * sg
    out[1, 2] = -cg * sb
    out[2, 0] = sa * sb
    out[2, 1] = ca * sb
    out[2, 2] = cb


@njit(cache=True)
def mat3_vec(R: np.ndarray, v: np.ndarray, out: np.ndarray) -> None:
    """out = R @ v for a single 3-vector."""
    for i in range(3):
        out[i] = R[i, 0] * v[0] + R[i, 1] * v[1] + R[i, 2] * v[2]


@njit(cache=True)
def mat3_vec_batch(R: np.ndarray, vs: np.ndarray, out: np.ndarray) -> None:
    """Row-wise out[k] = R @ vs[k] for an (N, 3) batch."""
    for k in range(vs.shape[0]):
        for i in range(3):
            out[k, i] = R[i, 0] * vs[k, 0] + R[i, 1] * vs[k, 1] + R[i, 2] * vs[k, 2]
