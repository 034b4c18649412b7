"""Quaternion algebra: scalar capabilities, 3-vector helpers and the value type."""

from quatlib.core.quaternion import Quaternion
from quatlib.core.scalar import (
    ScalarTraits, common_traits, register_scalar, traits_for, traits_for_type
)

__all__ = ['Quaternion', 'ScalarTraits', 'common_traits', 'register_scalar',
           'traits_for', 'traits_for_type']
