"""
Helpers for plain 3-component vectors.

Vectors are any indexable sequence of length 3 (tuples, lists, numpy
arrays); results are always returned as tuples so they can live inside a
hashable Quaternion. The scalar type is whatever the inputs carry: only the
ring operations of that type are used.
"""

from typing import Any, Callable, Sequence, Tuple

import numpy as np


Vector3 = Tuple[Any, Any, Any]


def cross(a: Sequence, b: Sequence) -> Vector3:
    """Cross product a x b."""
    return (a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0])


def add(a: Sequence, b: Sequence) -> Vector3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def scale(a: Sequence, s) -> Vector3:
    return (a[0] * s, a[1] * s, a[2] * s)


def neg(a: Sequence) -> Vector3:
    return (-a[0], -a[1], -a[2])


def dot(a: Sequence, b: Sequence):
    """Inner product a . b in the scalar type of the inputs."""
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def map(a: Sequence, f: Callable) -> Vector3:
    """Apply f to each component; the result may change scalar type."""
    return (f(a[0]), f(a[1]), f(a[2]))


def norm(a: Sequence) -> float:
    """Euclidean length in double precision."""
    return float(np.sqrt(float(dot(a, a))))
