"""Exception types raised by stepmotion."""


class MotionError(Exception):
    """Base class for all stepmotion errors."""


class InvalidArgumentError(MotionError, ValueError):
    """Input that would break termination or monotonicity of a stepping loop."""


class SampleLimitError(InvalidArgumentError):
    """A call would emit more samples than config.MAX_SAMPLES allows."""
