"""
===============================================================================
QUATLIB - Quaternion Value Type
===============================================================================

Generic quaternion algebra for 3D rotation work. A quaternion is stored as a
real part and a vector part:

    q = r + x*i + y*j + z*k        r = real, vec = (x, y, z)

Quaternions are immutable values. Every operation returns a new instance,
equality and hashing are exact and component-wise, and nothing is ever
modified in place, so values can be shared freely between threads.

Scalar types
------------
The components may be any scalar type with registered capabilities (see
core.scalar): float, numpy floats and ints, int, Fraction, Decimal, or a
user type. Ring operations run in the scalar type itself; the
transcendental functions (sqrt, sin, cos, asin, acos, atan2, pow) run in
double precision through numpy and are converted back. The scalar type of
a quaternion is the widest type among its components (int, then rational,
then any other real), so Quaternion(0, (0.3, 0.0, 0.4)) is a float value.

Unit quaternions
----------------
normalize(), from_axis_angle() and from_euler() produce unit quaternions.
rotate(), slerp() and pow_by_real() expect them, but the type does not
distinguish unit from non-unit values and performs no validation.

Euler angle conventions
-----------------------
to_euler() extracts (roll, pitch, yaw) with the aerospace 3-2-1 (ZYX)
decomposition. from_euler() composes q = q_x(roll) * q_y(pitch) * q_z(yaw)
(intrinsic X-Y-Z). The two are therefore not exact inverses: only the
identity and single-axis rotations survive a round trip.

References
----------
    [1] Shoemake, "Animating Rotation with Quaternion Curves", SIGGRAPH 1985.
    [2] Markley & Crassidis, "Fundamentals of Spacecraft Attitude
        Determination and Control", Springer, 2014.
    [3] Kuipers, "Quaternions and Rotation Sequences", Princeton, 1999.

===============================================================================
"""

import logging
import numbers
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Tuple

import numpy as np

from quatlib.core import vector3 as v3
from quatlib.core.constants import (
    COMPARISON_TOLERANCE, SLERP_LINEAR_THRESHOLD, UNIT_TOLERANCE
)
from quatlib.core.scalar import (
    ScalarTraits, common_traits, traits_for, traits_for_type
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Quaternion:
    """
    Immutable quaternion r + x*i + y*j + z*k.

    Attributes
    ----------
    r : scalar
        Real part.
    vec : tuple
        Vector (imaginary) part (x, y, z), the i, j, k coefficients.

    Examples
    --------
    >>> q1 = Quaternion(1, (2, 3, 4))
    >>> q2 = Quaternion(5, (6, 7, 8))
    >>> q1 * q2
    Quaternion(r=-60, vec=(12, 30, 24))
    >>> Quaternion()            # identity
    Quaternion(r=1.0, vec=(0.0, 0.0, 0.0))
    """

    r: Any = 1.0
    vec: Tuple[Any, Any, Any] = (0.0, 0.0, 0.0)

    def __post_init__(self) -> None:
        vec = tuple(self.vec)
        if len(vec) != 3:
            raise ValueError(
                f"Quaternion vector part must have 3 components, got {len(vec)}"
            )
        object.__setattr__(self, 'vec', vec)

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    @classmethod
    def identity(cls, kind: type = float) -> 'Quaternion':
        """
        Multiplicative identity 1 + 0i + 0j + 0k.

        Parameters
        ----------
        kind : type, optional
            Scalar type of the components (default float).

        Returns
        -------
        Quaternion
            The identity, q * identity == identity * q == q.
        """
        return cls._identity_of(traits_for_type(kind))

    @classmethod
    def _identity_of(cls, traits: ScalarTraits) -> 'Quaternion':
        zero = traits.zero
        return cls(traits.one, (zero, zero, zero))

    @classmethod
    def from_vec(cls, values: Sequence) -> 'Quaternion':
        """Build from four components (r, x, y, z)."""
        s, x, y, z = values
        return cls(s, (x, y, z))

    @classmethod
    def from_array(cls, values) -> 'Quaternion':
        """
        Build a float quaternion from a length-4 array-like [r, x, y, z].

        Raises
        ------
        ValueError
            If the input does not hold exactly four components.
        """
        arr = np.asarray(values, dtype=np.float64)
        if arr.shape != (4,):
            raise ValueError(f"Expected shape (4,), got {arr.shape}")
        return cls(float(arr[0]), (float(arr[1]), float(arr[2]), float(arr[3])))

    @classmethod
    def random(cls, rng: Optional[np.random.Generator] = None) -> 'Quaternion':
        """
        Uniformly distributed random unit quaternion.

        Uses Shoemake's subgroup algorithm; normalizing a random 4-vector
        does not give a uniform distribution over rotations.

        Parameters
        ----------
        rng : numpy.random.Generator, optional
            Source of randomness. A fresh default generator is used when
            omitted.

        References
        ----------
        Shoemake, "Uniform Random Rotations", Graphics Gems III, 1992.
        """
        if rng is None:
            rng = np.random.default_rng()
        u1, u2, u3 = rng.random(3)

        sqrt_u1 = np.sqrt(u1)
        sqrt_1_minus_u1 = np.sqrt(1.0 - u1)

        w = sqrt_1_minus_u1 * np.sin(2.0 * np.pi * u2)
        x = sqrt_1_minus_u1 * np.cos(2.0 * np.pi * u2)
        y = sqrt_u1 * np.sin(2.0 * np.pi * u3)
        z = sqrt_u1 * np.cos(2.0 * np.pi * u3)

        return cls(float(w), (float(x), float(y), float(z)))

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    @property
    def traits(self) -> ScalarTraits:
        """Scalar capabilities, widened across all four components."""
        return common_traits(self.r, *self.vec)

    @property
    def components(self) -> np.ndarray:
        """Float64 array [r, x, y, z]."""
        return np.array([float(c) for c in self], dtype=np.float64)

    def __iter__(self):
        yield self.r
        yield from self.vec

    # =========================================================================
    # CORE ALGEBRA
    # =========================================================================

    def dot(self, other: 'Quaternion'):
        """Four-dimensional inner product r1*r2 + vec1 . vec2."""
        return self.r * other.r + v3.dot(self.vec, other.vec)

    def square_len(self):
        """Squared length r^2 + vec . vec, in the scalar type."""
        return self.r * self.r + v3.dot(self.vec, self.vec)

    def magnitude(self):
        """
        Euclidean length sqrt(r^2 + x^2 + y^2 + z^2).

        The square root is taken in double precision and converted back to
        the scalar type, so integer quaternions get a truncated length.
        """
        t = self.traits
        return t.from_double(np.sqrt(t.to_double(self.square_len())))

    def scale(self, s) -> 'Quaternion':
        """Multiply every component by the scalar s."""
        return Quaternion(self.r * s, v3.scale(self.vec, s))

    def map(self, f: Callable) -> 'Quaternion':
        """Apply f to each of the four components."""
        return Quaternion(f(self.r), v3.map(self.vec, f))

    def _promote(self, t: ScalarTraits) -> 'Quaternion':
        # Components already of the target scalar type are left alone.
        if all(traits_for(c) is t for c in self):
            return self
        return self.map(lambda c: t.from_double(traits_for(c).to_double(c)))

    def conjugate(self) -> 'Quaternion':
        """
        Quaternion conjugate r - x*i - y*j - z*k.

        For a unit quaternion the conjugate is the inverse and represents
        the reverse rotation.
        """
        return Quaternion(self.r, v3.neg(self.vec))

    def inv(self) -> 'Quaternion':
        """
        Multiplicative inverse conjugate / |q|^2.

        A zero quaternion has no inverse. That case is left to the scalar
        division: floats give non-finite components, exact types raise
        ZeroDivisionError.
        """
        t = self.traits
        return self.conjugate().scale(t.div(t.one, self.square_len()))

    def multiply(self, other: 'Quaternion') -> 'Quaternion':
        """
        Hamilton product self * other.

        With q1 = (r1, v1) and q2 = (r2, v2):

            r   = r1*r2 - v1 . v2
            vec = v1 x v2 + r1*v2 + r2*v1

        The product is not commutative. Composing rotations, self * other
        rotates first by other and then by self.
        """
        r1, v1 = self.r, self.vec
        r2, v2 = other.r, other.vec

        r = r1 * r2 - v3.dot(v1, v2)
        vec = v3.add(v3.add(v3.cross(v1, v2), v3.scale(v2, r1)),
                     v3.scale(v1, r2))
        return Quaternion(r, vec)

    def divide(self, other: 'Quaternion') -> 'Quaternion':
        """
        Quaternion quotient in closed form.

        Expands the product with the divisor's conjugate and divides by its
        squared length d = |other|^2:

            r = (q.r*p.r + q.vec . p.vec) / d
            x = (qx*p.r - px*q.r - py*qz + pz*qy) / d
            y = (qy*p.r + px*qz - py*q.r - pz*qx) / d
            z = (qz*p.r - px*qy + py*qx - pz*q.r) / d

        with q = self and p = other. The result equals other.inv() * self.
        A zero divisor is not guarded (see inv()).
        """
        t = common_traits(*self, *other)
        div = t.div
        qr, (qx, qy, qz) = self.r, self.vec
        pr, (px, py, pz) = other.r, other.vec
        d = other.square_len()

        r = div(qr * pr + v3.dot(self.vec, other.vec), d)
        x = div(qx * pr - px * qr - py * qz + pz * qy, d)
        y = div(qy * pr + px * qz - py * qr - pz * qx, d)
        z = div(qz * pr - px * qy + py * qx - pz * qr, d)
        return Quaternion(r, (x, y, z))

    # =========================================================================
    # NORMALIZATION AND ROTATION
    # =========================================================================

    def normalize(self) -> 'Quaternion':
        """
        Unit quaternion with the same direction.

        Returns
        -------
        Quaternion
            self / |self|, or self unchanged when the magnitude is exactly
            zero.
        """
        t = self.traits
        m = self.magnitude()
        if m == t.zero:
            logger.debug("normalize() on zero-magnitude quaternion %r", self)
            return self
        return self.scale(t.div(t.one, m))

    def is_unit(self, tolerance: float = UNIT_TOLERANCE) -> bool:
        """True if |q| is within tolerance of 1."""
        length = np.sqrt(self.traits.to_double(self.square_len()))
        return bool(abs(length - 1.0) < tolerance)

    def rotate(self, v: Sequence) -> Tuple[Any, Any, Any]:
        """
        Rotate a 3-vector by this (unit) quaternion.

        Equivalent to the sandwich product q * (0, v) * q^-1, evaluated
        with two cross products instead of two Hamilton products:

            t  = 2 * (vec x v)
            v' = v + r*t + vec x t

        The caller must normalize first; no normalization is done here.

        Parameters
        ----------
        v : sequence of 3 scalars
            Vector to rotate.

        Returns
        -------
        tuple
            Rotated vector.
        """
        t = v3.scale(v3.cross(self.vec, v), self.traits.two())
        return v3.add(v3.add(v, v3.scale(t, self.r)), v3.cross(self.vec, t))

    # =========================================================================
    # AXIS-ANGLE AND EULER CONVERSIONS
    # =========================================================================

    @classmethod
    def from_axis_angle(cls, axis: Sequence, angle) -> 'Quaternion':
        """
        Rotation by angle (radians) about axis.

            q = [cos(angle/2), sin(angle/2) * axis/|axis|]

        The scalar type is the widest among the angle and the axis
        components, so an int angle about a float axis stays float.

        Raises
        ------
        ValueError
            If the axis has zero length.
        """
        t = common_traits(angle, *axis)
        norm = t.from_double(np.sqrt(t.to_double(v3.dot(axis, axis))))
        if norm == t.zero:
            raise ValueError(
                "Rotation axis has zero magnitude. "
                "Cannot define a rotation about a zero vector."
            )
        unit_axis = v3.map(axis, lambda c: t.div(c, norm))

        half_angle = t.to_double(angle) / 2.0
        r = t.from_double(np.cos(half_angle))
        sin_half = t.from_double(np.sin(half_angle))
        return cls(r, v3.scale(unit_axis, sin_half))

    @classmethod
    def from_euler(cls, roll, pitch, yaw) -> 'Quaternion':
        """
        Compose q = q_x(roll) * q_y(pitch) * q_z(yaw).

        Parameters
        ----------
        roll, pitch, yaw : scalar
            Rotation angles about X, Y and Z in radians. The scalar type
            is the widest of the three.

        Returns
        -------
        Quaternion
            Unit quaternion for the X-Y-Z composition.
        """
        t = common_traits(roll, pitch, yaw)

        def half(angle):
            a = t.to_double(angle) / 2.0
            return t.from_double(np.cos(a)), t.from_double(np.sin(a))

        cr, sr = half(roll)
        cp, sp = half(pitch)
        cy, sy = half(yaw)

        r = cr * cp * cy - sr * sp * sy
        x = sr * cp * cy + cr * sp * sy
        y = cr * sp * cy - sr * cp * sy
        z = cr * cp * sy + sr * sp * cy
        return cls(r, (x, y, z))

    def to_euler(self) -> Tuple[Any, Any, Any]:
        """
        Decompose into 3-2-1 (ZYX) Euler angles.

            roll  = atan2(2*(r*x + y*z), 1 - 2*(x^2 + y^2))
            pitch = asin(2*(r*y - z*x))
            yaw   = atan2(2*(r*z + x*y), 1 - 2*(y^2 + z^2))

        Returns
        -------
        tuple
            (roll, pitch, yaw) in radians, in the scalar type.

        Notes
        -----
        At gimbal lock (pitch = +/-90 deg) round-off can push the asin
        argument past +/-1; it is clamped so pitch saturates at +/-pi/2
        instead of becoming NaN.
        """
        t = self.traits
        w, x, y, z = (t.to_double(c) for c in self)

        sinr_cosp = 2.0 * (w * x + y * z)
        cosr_cosp = 1.0 - 2.0 * (x * x + y * y)
        roll = np.arctan2(sinr_cosp, cosr_cosp)

        sinp = 2.0 * (w * y - z * x)
        if abs(sinp) >= 1.0:
            logger.debug("to_euler(): gimbal lock, sin(pitch) = %r", sinp)
            pitch = np.arcsin(np.clip(sinp, -1.0, 1.0))
        else:
            pitch = np.arcsin(sinp)

        siny_cosp = 2.0 * (w * z + x * y)
        cosy_cosp = 1.0 - 2.0 * (y * y + z * z)
        yaw = np.arctan2(siny_cosp, cosy_cosp)

        return (t.from_double(float(roll)), t.from_double(float(pitch)),
                t.from_double(float(yaw)))

    @property
    def rotation_angle(self) -> float:
        """
        Rotation angle in radians, in [0, pi].

        Taken from the normalized quaternion, choosing the sign with a
        non-negative real part.
        """
        w = abs(float(self.normalize().r))
        return float(2.0 * np.arccos(np.clip(w, 0.0, 1.0)))

    @property
    def rotation_axis(self) -> Tuple[float, float, float]:
        """
        Unit rotation axis in double precision.

        The axis points along the vector part of whichever of q, -q has a
        non-negative real part. (0, 0, 1) is returned when the vector part
        is zero and the axis is undefined.
        """
        vec = tuple(float(c) for c in self.vec)
        n = v3.norm(vec)
        if n == 0.0:
            return (0.0, 0.0, 1.0)
        if float(self.r) < 0.0:
            n = -n
        return v3.map(vec, lambda c: c / n)

    def to_axis_angle(self) -> Tuple[Tuple[float, float, float], float]:
        """(axis, angle) pair; see rotation_axis and rotation_angle."""
        return (self.rotation_axis, self.rotation_angle)

    @classmethod
    def from_rotation_vector(cls, rot_vec: Sequence) -> 'Quaternion':
        """
        Rotation from a rotation (Rodrigues) vector angle * axis.

        A zero vector gives the float identity.
        """
        angle = v3.norm(rot_vec)
        if angle == 0.0:
            return cls.identity()
        return cls.from_axis_angle(rot_vec, angle)

    def to_rotation_vector(self) -> Tuple[float, float, float]:
        """Rotation vector angle * axis in double precision."""
        axis, angle = self.to_axis_angle()
        return v3.scale(axis, angle)

    def angle_to(self, other: 'Quaternion') -> float:
        """
        Geodesic rotation angle between two orientations, in [0, pi].

            angle = 2 * acos(|q1 . q2|)

        evaluated on the normalized quaternions.
        """
        d = float(self.normalize().dot(other.normalize()))
        return float(2.0 * np.arccos(np.clip(abs(d), 0.0, 1.0)))

    # =========================================================================
    # INTERPOLATION
    # =========================================================================

    @staticmethod
    def slerp(q1: 'Quaternion', q2: 'Quaternion', t,
              threshold: float = SLERP_LINEAR_THRESHOLD) -> 'Quaternion':
        """
        Spherical linear interpolation along the shorter arc.

            slerp(q1, q2, t) = q1 * sin((1-t)*theta) / sin(theta)
                             + q2 * sin(t*theta) / sin(theta)

        with theta = acos(q1 . q2) on the normalized inputs.

        Parameters
        ----------
        q1 : Quaternion
            Start orientation (t = 0).
        q2 : Quaternion
            End orientation (t = 1).
        t : scalar
            Interpolation parameter, intended in [0, 1]. Not clamped.
        threshold : float, optional
            Cosine above which the inputs count as parallel and normalized
            linear interpolation is used instead.

        Returns
        -------
        Quaternion
            Interpolated unit quaternion. At t = 1 this is normalized q2 or
            its negation, whichever lies on the shorter arc from q1.
        """
        tr = common_traits(*q1, *q2, t)
        a = q1._promote(tr).normalize()
        b = q2._promote(tr).normalize()

        # q and -q are the same rotation; take the short way round.
        if tr.to_double(a.dot(b)) < 0.0:
            logger.debug("slerp(): negative dot, flipping end quaternion")
            b = -b

        dot = float(np.clip(tr.to_double(a.dot(b)), -1.0, 1.0))

        if dot > threshold:
            logger.debug("slerp(): dot %.6f above %.6f, using linear blend",
                         dot, threshold)
            return (a.scale(tr.one - t) + b.scale(t)).normalize()

        theta = np.arccos(dot)
        sin_theta = np.sin(theta)
        td = tr.to_double(t)

        weight1 = tr.from_double(float(np.sin((1.0 - td) * theta) / sin_theta))
        weight2 = tr.from_double(float(np.sin(td * theta) / sin_theta))
        return a.scale(weight1) + b.scale(weight2)

    # =========================================================================
    # EXPONENTIATION
    # =========================================================================

    def pow_by_int(self, n: int) -> 'Quaternion':
        """
        Integer power by repeated squaring.

        q^0 is the identity and q^-n is (q^-1)^n. O(log |n|) products.

        Raises
        ------
        TypeError
            If n is not an integer.
        """
        if isinstance(n, bool) or not isinstance(n, numbers.Integral):
            raise TypeError(
                f"pow_by_int() needs an integer exponent, got {type(n).__name__}"
            )
        n = int(n)

        if n == 0:
            return Quaternion._identity_of(self.traits)
        if n < 0:
            return self.inv().pow_by_int(-n)
        if n == 1:
            return self

        half = self.pow_by_int(n // 2)
        if n % 2 == 0:
            return half * half
        return self * half * half

    def pow_by_real(self, p) -> 'Quaternion':
        """
        Real power through the polar form.

        Writing q = |q| * (cos(theta/2) + axis * sin(theta/2)):

            q^p = |q|^p * (cos(p*theta/2) + axis * sin(p*theta/2))

        with theta = 2 * asin(|unit.vec|). A zero quaternion is returned
        unchanged; a purely real one gives (|q|^p, 0).

        Parameters
        ----------
        p : scalar
            Exponent.
        """
        t = common_traits(*self, p)
        q = self._promote(t)
        m = q.magnitude()
        if m == t.zero:
            logger.debug("pow_by_real() on zero-magnitude quaternion")
            return self

        unit = q.normalize()
        v_norm = t.from_double(np.sqrt(t.to_double(v3.dot(unit.vec, unit.vec))))
        new_len = t.from_double(float(np.power(t.to_double(m), t.to_double(p))))

        if v_norm == t.zero:
            return Quaternion(new_len, (t.zero, t.zero, t.zero))

        # Round-off can leave |unit.vec| a hair above 1.
        theta = 2.0 * np.arcsin(np.clip(t.to_double(v_norm), -1.0, 1.0))
        new_angle = theta * t.to_double(p)
        axis = v3.map(unit.vec, lambda c: t.div(c, v_norm))

        r = t.from_double(float(np.cos(new_angle / 2.0))) * new_len
        vec = v3.scale(v3.scale(axis, t.from_double(float(np.sin(new_angle / 2.0)))),
                       new_len)
        return Quaternion(r, vec)

    # =========================================================================
    # COMPARISON
    # =========================================================================

    def isclose(self, other: 'Quaternion',
                atol: float = COMPARISON_TOLERANCE) -> bool:
        """
        Component-wise comparison within an absolute tolerance.

        Unlike ==, this does not require exact equality. q and -q are
        treated as different values.
        """
        return bool(np.allclose(self.components, other.components,
                                rtol=0.0, atol=atol))

    # =========================================================================
    # OPERATOR OVERLOADS
    # =========================================================================

    def __add__(self, other: 'Quaternion') -> 'Quaternion':
        if isinstance(other, Quaternion):
            return Quaternion(self.r + other.r, v3.add(self.vec, other.vec))
        return NotImplemented

    def __neg__(self) -> 'Quaternion':
        return Quaternion(-self.r, v3.neg(self.vec))

    def __sub__(self, other: 'Quaternion') -> 'Quaternion':
        if isinstance(other, Quaternion):
            return self + (-other)
        return NotImplemented

    def __mul__(self, other) -> 'Quaternion':
        """
        Quaternion * Quaternion -> Hamilton product.
        Quaternion * scalar     -> scale().
        """
        if isinstance(other, Quaternion):
            return self.multiply(other)
        if _is_scalar(other):
            return self.scale(other)
        return NotImplemented

    def __rmul__(self, other) -> 'Quaternion':
        """scalar * Quaternion, the same as scale()."""
        if _is_scalar(other):
            return self.scale(other)
        return NotImplemented

    def __truediv__(self, other) -> 'Quaternion':
        """
        Quaternion / Quaternion -> divide().
        Quaternion / scalar     -> each component divided by the scalar.
        """
        if isinstance(other, Quaternion):
            return self.divide(other)
        if _is_scalar(other):
            div = common_traits(*self, other).div
            return self.map(lambda c: div(c, other))
        return NotImplemented

    def __pow__(self, exponent) -> 'Quaternion':
        """Integer exponents use pow_by_int(), anything else pow_by_real()."""
        if isinstance(exponent, bool):
            return NotImplemented
        if isinstance(exponent, numbers.Integral):
            return self.pow_by_int(exponent)
        if _is_scalar(exponent):
            return self.pow_by_real(exponent)
        return NotImplemented

    def __str__(self) -> str:
        return self._render(str)

    def __format__(self, spec: str) -> str:
        """Apply a numeric format spec to each component: f'{q:.3f}'."""
        if not spec:
            return str(self)
        return self._render(lambda c: format(c, spec))

    def _render(self, fmt: Callable[[Any], str]) -> str:
        parts = [fmt(self.r)]
        for c, unit in zip(self.vec, 'ijk'):
            text = fmt(c)
            if text.startswith('-'):
                parts.append(f"- {text[1:]}{unit}")
            else:
                parts.append(f"+ {text.lstrip('+')}{unit}")
        return ' '.join(parts)


def _is_scalar(value) -> bool:
    if isinstance(value, Quaternion):
        return False
    try:
        traits_for(value)
    except TypeError:
        return False
    return True
