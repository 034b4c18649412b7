"""
===============================================================================
QUATLIB - 3-Vector Helper Tests
===============================================================================
"""

from fractions import Fraction

import numpy as np
import pytest

from quatlib.core import vector3 as v3


class TestCross:

    @pytest.mark.parametrize("a,b,expected", [
        ((1, 0, 0), (0, 1, 0), (0, 0, 1)),
        ((0, 1, 0), (1, 0, 0), (0, 0, -1)),
        ((2, 3, 4), (6, 7, 8), (-4, 8, -4)),
    ])
    def test_cross(self, a, b, expected):
        assert v3.cross(a, b) == expected

    def test_cross_matches_numpy(self):
        a = (0.3, -1.2, 2.5)
        b = (4.0, 0.5, -0.7)
        np.testing.assert_allclose(v3.cross(a, b), np.cross(a, b), atol=1e-15)

    def test_cross_is_perpendicular(self):
        a, b = (1, 2, 3), (-4, 0, 9)
        c = v3.cross(a, b)
        assert v3.dot(c, a) == 0
        assert v3.dot(c, b) == 0


class TestElementwise:

    def test_add(self):
        assert v3.add((1, 2, 3), (10, 20, 30)) == (11, 22, 33)

    def test_scale(self):
        assert v3.scale((1, -2, 3), 3) == (3, -6, 9)

    def test_neg(self):
        assert v3.neg((1, -2, 0)) == (-1, 2, 0)

    def test_dot(self):
        assert v3.dot((2, 3, 4), (6, 7, 8)) == 65

    def test_map_changes_type(self):
        result = v3.map((1, 2, 3), Fraction)
        assert result == (Fraction(1), Fraction(2), Fraction(3))
        assert all(isinstance(c, Fraction) for c in result)

    def test_accepts_numpy_arrays(self):
        assert v3.add(np.array([1.0, 2.0, 3.0]), [1.0, 1.0, 1.0]) == (2.0, 3.0, 4.0)

    def test_norm(self):
        assert v3.norm((3, 4, 0)) == 5.0
        assert v3.norm((0, 0, 0)) == 0.0
