"""Command-line interface for generating motion samples."""

import argparse
import logging
import sys

import msgspec

import stepmotion.config as cfg
from stepmotion.config import TRACE
from stepmotion.motion import (
    AccelerationConfig,
    EulerAngles,
    move_to,
    rotate_vector,
    speed_up_to,
    turn_to,
)
from stepmotion.motion.types import point_from_array
from stepmotion.protocol.wire import (
    decode_acceleration_options,
    encode,
    encode_trajectory,
)
from stepmotion.utils.errors import MotionError

logger = logging.getLogger("stepmotion.cli")


def _coords(text: str) -> list[float]:
    try:
        return [float(part) for part in text.split(",")]
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Expected comma-separated numbers, got '{text}'"
        ) from None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stepmotion", description="Generate time-stamped motion samples"
    )
    parser.add_argument(
        "--format", choices=["json", "msgpack"], default="json", help="Output encoding"
    )

    # Verbose logging options
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity; -v=INFO, -vv=DEBUG, -vvv=TRACE",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Enable quiet logging (ERROR level)",
    )
    parser.add_argument(
        "--log-level",
        choices=["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set specific log level",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    move = sub.add_parser("move", help="Constant-speed straight line (2D or 3D)")
    move.add_argument("--from", dest="start", type=_coords, required=True)
    move.add_argument("--to", dest="end", type=_coords, required=True)
    move.add_argument("--duration", type=float, default=cfg.INTERVAL_S)
    move.add_argument("--speed", type=float, required=True)

    turn = sub.add_parser("turn", help="Constant-speed angle ramp (degrees)")
    turn.add_argument("--from", dest="start", type=float, required=True)
    turn.add_argument("--to", dest="end", type=float, required=True)
    turn.add_argument("--duration", type=float, default=cfg.INTERVAL_S)
    turn.add_argument("--speed", type=float, required=True)

    accel = sub.add_parser("accelerate", help="Straight line with trapezoidal speed")
    accel.add_argument("--from", dest="start", type=_coords, required=True)
    accel.add_argument("--to", dest="end", type=_coords, required=True)
    accel.add_argument("--duration", type=float, default=cfg.INTERVAL_S)
    accel.add_argument(
        "--options",
        help='JSON object, e.g. {"speed":1,"start":5,"acceleration":2,'
        '"maxSpeed":5,"end":15,"deceleration":2}',
    )
    accel.add_argument("--speed", type=float)
    accel.add_argument("--start-time", type=float)
    accel.add_argument("--acceleration", type=float)
    accel.add_argument("--max-speed", type=float)
    accel.add_argument("--end-time", type=float)
    accel.add_argument("--deceleration", type=float)
    accel.add_argument(
        "--resume-floor-speed",
        action="store_true",
        help="Keep moving at the floor speed after braking ends",
    )

    rotate = sub.add_parser("rotate", help="Rotate a 3D vector by Euler angles")
    rotate.add_argument("--vector", type=_coords, required=True)
    rotate.add_argument("--alpha", type=float, default=0.0)
    rotate.add_argument("--beta", type=float, default=0.0)
    rotate.add_argument("--gamma", type=float, default=0.0)
    rotate.add_argument(
        "--degrees", action="store_true", help="Angles are in degrees (default radians)"
    )
    return parser


def _resolve_log_level(args: argparse.Namespace) -> int:
    # Precedence:
    #   1) Explicit --log-level
    #   2) Verbose / quiet flags
    #   3) Environment-driven TRACE (STEPMOTION_TRACE=1)
    #   4) Default WARNING, so stdout carries only samples
    if args.log_level:
        if args.log_level == "TRACE":
            cfg.TRACE_ENABLED = True
            return TRACE
        return getattr(logging, args.log_level)
    if args.verbose >= 3:
        cfg.TRACE_ENABLED = True
        return TRACE
    if args.verbose >= 2:
        return logging.DEBUG
    if args.verbose == 1:
        return logging.INFO
    if args.quiet:
        return logging.ERROR
    if cfg.TRACE_ENABLED:
        return TRACE
    return logging.WARNING


def _acceleration_config(args: argparse.Namespace) -> AccelerationConfig:
    if args.options:
        return decode_acceleration_options(args.options)
    return AccelerationConfig.from_dict(
        {
            name: value
            for name, value in (
                ("speed", args.speed),
                ("start", args.start_time),
                ("acceleration", args.acceleration),
                ("max_speed", args.max_speed),
                ("end", args.end_time),
                ("deceleration", args.deceleration),
            )
            if value is not None
        }
    )


def run(args: argparse.Namespace) -> bytes:
    """Execute one subcommand and return the encoded output."""
    if args.command == "move":
        trajectory = move_to(
            point_from_array(args.start),
            point_from_array(args.end),
            args.duration,
            args.speed,
        )
        return encode_trajectory(trajectory, args.format)
    if args.command == "turn":
        trajectory = turn_to(args.start, args.end, args.duration, args.speed)
        return encode_trajectory(trajectory, args.format)
    if args.command == "accelerate":
        config = _acceleration_config(args)
        trajectory = speed_up_to(
            point_from_array(args.start),
            point_from_array(args.end),
            args.duration,
            config,
            resume_floor_speed=args.resume_floor_speed,
        )
        return encode_trajectory(trajectory, args.format)
    if args.command == "rotate":
        if len(args.vector) != 3:
            raise MotionError(f"--vector needs 3 components, got {len(args.vector)}")
        from stepmotion.utils.warmup import warmup_jit

        warmup_jit()
        rotated = rotate_vector(
            args.vector,
            EulerAngles(args.alpha, args.beta, args.gamma),
            degrees=args.degrees,
        )
        return encode(rotated, args.format)
    raise MotionError(f"Unknown command '{args.command}'")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the stepmotion command."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    # -vvv / --log-level TRACE only apply to this invocation
    trace_enabled = cfg.TRACE_ENABLED
    try:
        return _main(args)
    finally:
        cfg.TRACE_ENABLED = trace_enabled


def _main(args: argparse.Namespace) -> int:
    log_level = _resolve_log_level(args)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    third_party_log_level = log_level if log_level >= logging.INFO else logging.INFO
    logging.getLogger("numba").setLevel(third_party_log_level)

    try:
        payload = run(args)
    except MotionError as e:
        logger.error("%s", e)
        return 2

    if args.format == "json":
        sys.stdout.write(msgspec.json.format(payload.decode()) + "\n")
    else:
        sys.stdout.buffer.write(payload)
    sys.stdout.flush()
    return 0


def main_entry():
    """Entry point for the stepmotion console script."""
    raise SystemExit(main())


if __name__ == "__main__":
    main_entry()
