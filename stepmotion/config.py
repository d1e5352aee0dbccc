"""
Central configuration for stepmotion tunables and shared constants.
"""

from __future__ import annotations

import logging
import os

from stepmotion.utils.errors import SampleLimitError

TRACE: int = 5
logging.addLevelName(TRACE, "TRACE")
# Add Logger.trace if missing
if not hasattr(logging.Logger, "trace"):

    def _trace(self, msg, *args, **kwargs):
        if self.isEnabledFor(TRACE):
            self._log(TRACE, msg, args, **kwargs)

    logging.Logger.trace = _trace  # type: ignore[attr-defined]
    logging.TRACE = TRACE  # type: ignore[attr-defined]

TRACE_ENABLED = str(os.getenv("STEPMOTION_TRACE", "0")).lower() in (
    "1",
    "true",
    "yes",
    "on",
)

logger = logging.getLogger(__name__)

# Default sampling rate (Hz) used when a caller does not pick a step duration
SAMPLE_RATE_HZ: float = float(os.getenv("STEPMOTION_SAMPLE_RATE_HZ", "30"))

# Default step duration (seconds).
INTERVAL_S: float = max(1e-6, 1.0 / max(SAMPLE_RATE_HZ, 1e-6))

# Upper bound on samples produced by a single call
MAX_SAMPLES: int = int(os.getenv("STEPMOTION_MAX_SAMPLES", "1000000"))

# Relative tolerance when deciding whether a distance is a whole number of steps
STEP_EPSILON: float = float(os.getenv("STEPMOTION_STEP_EPSILON", "1e-9"))

# Angular stepper works in degrees
ANGLE_PERIOD_DEG: float = 360.0

LOG_LEVEL_DEFAULT: str = "INFO"


def check_sample_budget(n_samples: float, what: str) -> int:
    """
    Ensure a planned sample count stays within MAX_SAMPLES.

    Args:
        n_samples: Planned number of samples (may be fractional or inf)
        what: Short description used in the error message

    Returns:
        The sample count as an int

    Raises:
        SampleLimitError: If the count exceeds MAX_SAMPLES
    """
    if not n_samples < MAX_SAMPLES:
        raise SampleLimitError(
            f"{what} would produce {n_samples} samples (limit {MAX_SAMPLES}); "
            "increase duration or set STEPMOTION_MAX_SAMPLES"
        )
    return int(n_samples)
