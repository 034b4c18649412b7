"""
quatlib - generic quaternion arithmetic.

Immutable quaternion values over any registered scalar type, with the
standard algebra, rotation helpers, slerp and integer/real powers.
"""

from quatlib.config import NumericConfig, load_config
from quatlib.core.quaternion import Quaternion
from quatlib.core.scalar import ScalarTraits, register_scalar, traits_for

__version__ = '0.1.0'

__all__ = ['Quaternion', 'ScalarTraits', 'register_scalar', 'traits_for',
           'NumericConfig', 'load_config', '__version__']
