#!/usr/bin/env python3
"""
===============================================================================
QUATLIB - Command-Line Front End
===============================================================================

Evaluate quaternion operations from the shell.

USAGE:
    quatlib info 1,2,3,4                    # magnitude, inverse, Euler, ...
    quatlib mul 1,2,3,4 5,6,7,8             # Hamilton product
    quatlib div 1,2,3,4 5,6,7,8
    quatlib compare 1,2,3,4 1,2,3,4         # exact and tolerant equality
    quatlib rotate 0.7071,0,0,0.7071 1,0,0  # rotate a vector
    quatlib slerp 1,0,0,0 0,0,0,1 0.5
    quatlib pow 2,2,3,4 2                   # integer literal -> integer power
    quatlib --degrees from-euler 30 0 90
    quatlib --degrees from-axis-angle 1,1,1 45

Quaternions are written r,x,y,z and vectors x,y,z without spaces. Put
``--`` before arguments that start with a minus sign:

    quatlib mul -- -1,2,3,4 5,6,7,8

OPTIONS:
    --config PATH     YAML file with a 'numeric' section
    --precision N     decimal places (overrides the config)
    --degrees         angles in and out in degrees
    --verbose         debug logging

===============================================================================
"""

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from quatlib.config import NumericConfig, load_config
from quatlib.core.constants import DEG2RAD, RAD2DEG
from quatlib.core.quaternion import Quaternion


logger = logging.getLogger('quatlib.cli')


# ---------------------------------------------------------------------------
# Argument parsing helpers
# ---------------------------------------------------------------------------

def _parse_numbers(text: str, count: int, what: str) -> List[float]:
    parts = [p for p in text.split(',') if p.strip()]
    if len(parts) != count:
        raise ValueError(
            f"Expected {count} comma-separated numbers for {what}, got '{text}'"
        )
    try:
        return [float(p) for p in parts]
    except ValueError:
        raise ValueError(f"Invalid number in {what}: '{text}'") from None


def parse_quaternion(text: str) -> Quaternion:
    """Parse 'r,x,y,z' into a float quaternion."""
    return Quaternion.from_vec(_parse_numbers(text, 4, 'quaternion'))


def parse_vector(text: str) -> tuple:
    """Parse 'x,y,z' into a float 3-tuple."""
    return tuple(_parse_numbers(text, 3, 'vector'))


def parse_exponent(text: str):
    """Integer literals stay int so that 'pow' uses repeated squaring."""
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        raise ValueError(f"Invalid exponent: '{text}'") from None


# ---------------------------------------------------------------------------
# Output formatting
# ---------------------------------------------------------------------------

class Formatter:
    """Renders results with a fixed number of decimals."""

    def __init__(self, precision: int, degrees: bool = False):
        self.spec = f'.{precision}f'
        self.degrees = degrees

    def quaternion(self, q: Quaternion) -> str:
        return format(q, self.spec)

    def vector(self, v: Sequence) -> str:
        return '(' + ', '.join(format(float(c), self.spec) for c in v) + ')'

    def angle(self, a: float) -> str:
        value = float(a) * RAD2DEG if self.degrees else float(a)
        unit = 'deg' if self.degrees else 'rad'
        return f"{format(value, self.spec)} {unit}"


def _angle_in(value: float, degrees: bool) -> float:
    return value * DEG2RAD if degrees else value


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_info(args, config: NumericConfig, out: Formatter) -> None:
    q = parse_quaternion(args.q)
    roll, pitch, yaw = q.normalize().to_euler()
    axis, angle = q.to_axis_angle()

    print(f"quaternion : {out.quaternion(q)}")
    print(f"square_len : {format(float(q.square_len()), out.spec)}")
    print(f"magnitude  : {format(float(q.magnitude()), out.spec)}")
    print(f"unit       : {q.is_unit(config.unit_tolerance)}")
    print(f"conjugate  : {out.quaternion(q.conjugate())}")
    print(f"inverse    : {out.quaternion(q.inv())}")
    print(f"normalized : {out.quaternion(q.normalize())}")
    print(f"euler      : roll={out.angle(roll)}, pitch={out.angle(pitch)}, "
          f"yaw={out.angle(yaw)}")
    print(f"axis-angle : axis={out.vector(axis)}, angle={out.angle(angle)}")


def _binary(op):
    def command(args, config: NumericConfig, out: Formatter) -> None:
        a = parse_quaternion(args.a)
        b = parse_quaternion(args.b)
        print(out.quaternion(op(a, b)))
    return command


def cmd_compare(args, config: NumericConfig, out: Formatter) -> None:
    a = parse_quaternion(args.a)
    b = parse_quaternion(args.b)
    print(f"equal   : {a == b}")
    print(f"isclose : {a.isclose(b, atol=config.comparison_tolerance)}")
    print(f"angle   : {out.angle(a.angle_to(b))}")


def cmd_rotate(args, config: NumericConfig, out: Formatter) -> None:
    q = parse_quaternion(args.q).normalize()
    v = parse_vector(args.v)
    print(out.vector(q.rotate(v)))


def cmd_slerp(args, config: NumericConfig, out: Formatter) -> None:
    a = parse_quaternion(args.a)
    b = parse_quaternion(args.b)
    result = Quaternion.slerp(a, b, args.t, threshold=config.slerp_threshold)
    print(out.quaternion(result))


def cmd_pow(args, config: NumericConfig, out: Formatter) -> None:
    q = parse_quaternion(args.q)
    print(out.quaternion(q ** parse_exponent(args.p)))


def cmd_from_euler(args, config: NumericConfig, out: Formatter) -> None:
    roll, pitch, yaw = (_angle_in(a, out.degrees)
                        for a in (args.roll, args.pitch, args.yaw))
    print(out.quaternion(Quaternion.from_euler(roll, pitch, yaw)))


def cmd_from_axis_angle(args, config: NumericConfig, out: Formatter) -> None:
    axis = parse_vector(args.axis)
    q = Quaternion.from_axis_angle(axis, _angle_in(args.angle, out.degrees))
    print(out.quaternion(q))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='quatlib',
        description='Evaluate quaternion operations.',
        epilog="Use '--' before arguments that start with a minus sign.",
    )
    parser.add_argument('--config', type=str, default=None,
                        help='YAML config file with a numeric section')
    parser.add_argument('--precision', type=int, default=None,
                        help='Decimal places in the output')
    parser.add_argument('--degrees', action='store_true',
                        help='Read and print angles in degrees')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable debug logging')

    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('info', help='Describe a quaternion')
    p.add_argument('q', help='r,x,y,z')
    p.set_defaults(func=cmd_info)

    binary_ops = {
        'add': (lambda a, b: a + b, 'Sum a + b'),
        'sub': (lambda a, b: a - b, 'Difference a - b'),
        'mul': (lambda a, b: a * b, 'Hamilton product a * b'),
        'div': (lambda a, b: a / b, 'Quotient a / b'),
    }
    for name, (op, text) in binary_ops.items():
        p = sub.add_parser(name, help=text)
        p.add_argument('a', help='r,x,y,z')
        p.add_argument('b', help='r,x,y,z')
        p.set_defaults(func=_binary(op))

    p = sub.add_parser('compare', help='Exact and tolerant comparison')
    p.add_argument('a', help='r,x,y,z')
    p.add_argument('b', help='r,x,y,z')
    p.set_defaults(func=cmd_compare)

    p = sub.add_parser('rotate', help='Rotate a vector by a quaternion')
    p.add_argument('q', help='r,x,y,z (normalized before use)')
    p.add_argument('v', help='x,y,z')
    p.set_defaults(func=cmd_rotate)

    p = sub.add_parser('slerp', help='Spherical linear interpolation')
    p.add_argument('a', help='r,x,y,z at t=0')
    p.add_argument('b', help='r,x,y,z at t=1')
    p.add_argument('t', type=float, help='Interpolation parameter')
    p.set_defaults(func=cmd_slerp)

    p = sub.add_parser('pow', help='Integer or real power')
    p.add_argument('q', help='r,x,y,z')
    p.add_argument('p', help='Exponent')
    p.set_defaults(func=cmd_pow)

    p = sub.add_parser('from-euler', help='Quaternion from roll, pitch, yaw')
    p.add_argument('roll', type=float)
    p.add_argument('pitch', type=float)
    p.add_argument('yaw', type=float)
    p.set_defaults(func=cmd_from_euler)

    p = sub.add_parser('from-axis-angle', help='Quaternion from axis and angle')
    p.add_argument('axis', help='x,y,z')
    p.add_argument('angle', type=float)
    p.set_defaults(func=cmd_from_axis_angle)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line; returns the process exit code."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        stream=sys.stderr,
    )

    try:
        config = load_config(args.config) if args.config else NumericConfig()
        precision = config.precision if args.precision is None else args.precision
        out = Formatter(precision, degrees=args.degrees)
        args.func(args, config, out)
    except (ValueError, FileNotFoundError) as exc:
        logger.error(str(exc))
        print(f"error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == '__main__':
    sys.exit(main())
