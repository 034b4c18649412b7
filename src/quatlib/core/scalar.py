"""
===============================================================================
QUATLIB - Scalar Capability Registry
===============================================================================

The quaternion algebra is written once and runs over any scalar type that
supplies a small capability set. Python's numeric types already provide the
ring operations (+, -, *, unary -) and equality; what they do not agree on
is how to divide, what their identity elements are called, and how to reach
the transcendental functions (sqrt, sin, cos, asin, acos, atan2, pow) that
only exist in double precision.

Those missing pieces are collected per type in a ScalarTraits record:

    zero, one       additive / multiplicative identity
    div(a, b)       division that stays inside the scalar type
    to_double(a)    exact-or-nearest float64 view of a value
    from_double(d)  back from float64 into the scalar type

Lookup walks the value's class MRO through the registry and then falls back
to the ``numbers`` ABCs, so numpy scalars and user types registered as
``numbers.Real`` work without extra registration.

When an operation mixes scalar types, common_traits() picks the widest of
them (integer, then rational, then any other real), so a literal 0 next to
a float does not force integer arithmetic on the result.

Division by zero
----------------
Floating types divide through numpy with warnings suppressed: a zero
divisor produces inf/nan, matching IEEE-754. Exact types (int, Fraction,
Decimal) keep their native behaviour and raise ZeroDivisionError.
===============================================================================
"""

import logging
import numbers
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import Any, Callable, Dict

import numpy as np


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScalarTraits:
    """
    Capability record for one scalar type.

    Attributes
    ----------
    zero : Any
        Additive identity.
    one : Any
        Multiplicative identity.
    div : callable
        ``div(a, b)`` returning ``a / b`` in the scalar type.
    to_double : callable
        Conversion to a Python float.
    from_double : callable
        Conversion from a Python float back to the scalar type.
    """
    zero: Any
    one: Any
    div: Callable[[Any, Any], Any]
    to_double: Callable[[Any], float]
    from_double: Callable[[float], Any]

    def two(self):
        """The scalar 2, built from the identities."""
        return self.one + self.one


# =============================================================================
# BUILT-IN DIVISION RULES
# =============================================================================

def _float_div(a, b) -> float:
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(np.true_divide(np.float64(a), np.float64(b)))


def _truncating_div(a, b):
    # Integer ring division truncates toward zero, unlike Python's //.
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def _numpy_float_traits(kind) -> ScalarTraits:
    def div(a, b):
        with np.errstate(divide='ignore', invalid='ignore'):
            return kind(np.true_divide(kind(a), kind(b)))

    return ScalarTraits(zero=kind(0), one=kind(1), div=div,
                        to_double=float, from_double=kind)


def _numpy_int_traits(kind) -> ScalarTraits:
    return ScalarTraits(
        zero=kind(0), one=kind(1),
        div=lambda a, b: kind(_truncating_div(int(a), int(b))),
        to_double=float,
        from_double=lambda d: kind(int(d)),
    )


FLOAT_TRAITS = ScalarTraits(zero=0.0, one=1.0, div=_float_div,
                            to_double=float, from_double=float)

INT_TRAITS = ScalarTraits(zero=0, one=1, div=_truncating_div,
                          to_double=float, from_double=int)

FRACTION_TRAITS = ScalarTraits(
    zero=Fraction(0), one=Fraction(1),
    div=lambda a, b: Fraction(a) / Fraction(b),
    to_double=float, from_double=Fraction,
)

DECIMAL_TRAITS = ScalarTraits(
    zero=Decimal(0), one=Decimal(1),
    div=lambda a, b: Decimal(a) / Decimal(b),
    to_double=float,
    from_double=lambda d: Decimal(repr(float(d))),
)


# =============================================================================
# REGISTRY
# =============================================================================

_REGISTRY: Dict[type, ScalarTraits] = {
    float: FLOAT_TRAITS,
    int: INT_TRAITS,
    Fraction: FRACTION_TRAITS,
    Decimal: DECIMAL_TRAITS,
    np.float16: _numpy_float_traits(np.float16),
    np.float32: _numpy_float_traits(np.float32),
    np.float64: _numpy_float_traits(np.float64),
    np.longdouble: _numpy_float_traits(np.longdouble),
    np.int8: _numpy_int_traits(np.int8),
    np.int16: _numpy_int_traits(np.int16),
    np.int32: _numpy_int_traits(np.int32),
    np.int64: _numpy_int_traits(np.int64),
}

# bool is an int subclass but has no business inside a quaternion.
_REJECTED = (bool, np.bool_)


def register_scalar(kind: type, traits: ScalarTraits) -> None:
    """
    Register (or replace) the capability record for a scalar type.

    Parameters
    ----------
    kind : type
        The scalar class. Subclasses inherit the record unless they are
        registered themselves.
    traits : ScalarTraits
        Capabilities for values of ``kind``.
    """
    if not isinstance(traits, ScalarTraits):
        raise TypeError(f"Expected ScalarTraits, got {type(traits).__name__}")
    logger.debug("Registering scalar traits for %s", kind.__name__)
    _REGISTRY[kind] = traits


def traits_for_type(kind: type) -> ScalarTraits:
    """
    Resolve the capability record for a scalar type.

    Parameters
    ----------
    kind : type
        A scalar class, e.g. the type of the real component of a quaternion.

    Returns
    -------
    ScalarTraits
        The registered record for the most specific class in the MRO of
        ``kind``, or the record implied by its ``numbers`` ABC.

    Raises
    ------
    TypeError
        If ``kind`` is boolean or has no registered or implied traits.
    """
    if issubclass(kind, _REJECTED):
        raise TypeError("Booleans are not valid quaternion scalars")

    for base in kind.__mro__:
        traits = _REGISTRY.get(base)
        if traits is not None:
            return traits

    if issubclass(kind, numbers.Integral):
        return INT_TRAITS
    if issubclass(kind, numbers.Rational):
        return FRACTION_TRAITS
    if issubclass(kind, numbers.Real):
        return FLOAT_TRAITS

    raise TypeError(
        f"No scalar traits registered for {kind.__name__}. "
        "Use register_scalar() to add support for this type."
    )


def traits_for(value) -> ScalarTraits:
    """Resolve the capability record for a scalar value."""
    return traits_for_type(type(value))


def _rank(value) -> int:
    if isinstance(value, numbers.Integral):
        return 0
    if isinstance(value, numbers.Rational):
        return 1
    return 2


def common_traits(*values) -> ScalarTraits:
    """
    Resolve one capability record for a mix of scalar values.

    Integers promote to rationals and rationals to any other real type, the
    same way Python's own arithmetic widens them. Among values of equal
    rank the first one wins, so ``(0, 0.5)`` resolves to float traits and
    ``(Fraction(1, 2), 1)`` to Fraction traits.

    Raises
    ------
    TypeError
        If no values are given, or any of them is not a valid scalar.
    """
    if not values:
        raise TypeError("common_traits() needs at least one value")
    for v in values:
        traits_for(v)
    widest = max(values, key=_rank)
    return traits_for(widest)
