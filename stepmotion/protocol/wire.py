"""
Wire formats for handing samples to external consumers.

Trajectories encode as a list of flat records:
  position samples -> {"x": .., "y": .., ["z": ..,] "t": ..}
  angle samples    -> {"angle": .., "t": ..}

Acceleration options decode from JSON or msgpack objects using the
camelCase keys animation scripts usually carry (maxSpeed).
"""

import logging
from typing import Annotated, Any, Literal

import msgspec
import numpy as np

from stepmotion.motion.types import (
    AccelerationConfig,
    AngleSample,
    Point3D,
    Sample,
    Trajectory,
)
from stepmotion.utils.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

WireFormat = Literal["json", "msgpack"]


# =============================================================================
# Numpy encoding hooks
# =============================================================================


def _enc_hook(obj: object) -> object:
    """Custom encoder hook for numpy types."""
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, (np.integer, np.floating)):
        return obj.item()
    raise NotImplementedError(f"Cannot encode {type(obj)}")


_json_encoder = msgspec.json.Encoder(enc_hook=_enc_hook)
_msgpack_encoder = msgspec.msgpack.Encoder(enc_hook=_enc_hook)


# =============================================================================
# Message Types
# =============================================================================


class AccelerationOptions(
    msgspec.Struct, rename="camel", frozen=True, forbid_unknown_fields=True
):
    """Trapezoidal profile options as they appear on the wire."""

    speed: Annotated[float, msgspec.Meta(ge=0.0)]
    start: Annotated[float, msgspec.Meta(ge=0.0)]
    acceleration: Annotated[float, msgspec.Meta(gt=0.0)]
    max_speed: Annotated[float, msgspec.Meta(ge=0.0)]
    end: Annotated[float, msgspec.Meta(ge=0.0)]
    deceleration: Annotated[float, msgspec.Meta(gt=0.0)]

    def to_config(self) -> AccelerationConfig:
        config = AccelerationConfig(
            speed=self.speed,
            start=self.start,
            acceleration=self.acceleration,
            max_speed=self.max_speed,
            end=self.end,
            deceleration=self.deceleration,
        )
        config.validate()
        return config


_options_json_decoder = msgspec.json.Decoder(AccelerationOptions)
_options_msgpack_decoder = msgspec.msgpack.Decoder(AccelerationOptions)


def sample_record(sample: Sample | AngleSample) -> dict[str, Any]:
    """Flatten one sample into a wire record."""
    if isinstance(sample, AngleSample):
        return {"angle": sample.angle, "t": sample.t}
    record: dict[str, Any] = {"x": sample.x, "y": sample.y}
    if isinstance(sample.position, Point3D):
        record["z"] = sample.z
    record["t"] = sample.t
    return record


def encode(obj: Any, fmt: WireFormat = "json") -> bytes:
    """Encode plain data (numpy values allowed)."""
    if fmt == "json":
        return _json_encoder.encode(obj)
    if fmt == "msgpack":
        return _msgpack_encoder.encode(obj)
    raise InvalidArgumentError(f"Unknown wire format '{fmt}'")


def encode_trajectory(trajectory: Trajectory, fmt: WireFormat = "json") -> bytes:
    return encode([sample_record(s) for s in trajectory], fmt)


def decode_acceleration_options(
    data: bytes | str, fmt: WireFormat = "json"
) -> AccelerationConfig:
    """
    Decode and validate acceleration options.

    Raises:
        InvalidArgumentError: On malformed payloads or an inconsistent profile
    """
    try:
        if fmt == "json":
            options = _options_json_decoder.decode(data)
        elif fmt == "msgpack":
            options = _options_msgpack_decoder.decode(data)
        else:
            raise InvalidArgumentError(f"Unknown wire format '{fmt}'")
    except msgspec.ValidationError as e:
        raise InvalidArgumentError(f"Invalid acceleration options: {e}") from e
    except msgspec.DecodeError as e:
        raise InvalidArgumentError(f"Malformed acceleration options: {e}") from e
    return options.to_config()
