"""
JIT warmup utilities.

Call warmup_jit() before latency-sensitive use to pre-compile the numba
kernels. With cache=True this is fast if the cache exists.
"""

import logging
import time

import numpy as np

from stepmotion.utils.rotation_numba import euler_zxz_matrix, mat3_vec, mat3_vec_batch

logger = logging.getLogger(__name__)


def warmup_jit() -> float:
    """
    Compile every numba kernel with representative argument types.

    Returns:
        Elapsed seconds
    """
    t0 = time.perf_counter()

    R = np.empty((3, 3), dtype=np.float64)
    euler_zxz_matrix(0.0, 0.0, 0.0, R)

    v = np.zeros(3, dtype=np.float64)
    out = np.empty(3, dtype=np.float64)
    mat3_vec(R, v, out)

    vs = np.zeros((2, 3), dtype=np.float64)
    outs = np.empty((2, 3), dtype=np.float64)
    mat3_vec_batch(R, vs, outs)

    elapsed = time.perf_counter() - t0
    logger.debug("JIT warmup completed in %.3fs", elapsed)
    return elapsed
