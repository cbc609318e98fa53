"""
Tests of weight/delay ranges and lazily evaluated maps.

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

import unittest

import numpy as np
from numpy.testing import assert_array_equal

from pySNN import errors
from pySNN.parameters import LazyArray, RangeWeight, RangeDelay, as_range_weight, as_range_delay


class TestRangeWeight(unittest.TestCase):

    def test_constructors(self):
        self.assertEqual(RangeWeight(0.5).as_tuple(), (0.0, 0.5, 0.5))
        self.assertEqual(RangeWeight(0.1, 0.5).as_tuple(), (0.0, 0.1, 0.5))
        self.assertEqual(RangeWeight(0.05, 0.1, 0.5).as_tuple(), (0.05, 0.1, 0.5))
        self.assertRaises(TypeError, RangeWeight)
        self.assertRaises(TypeError, RangeWeight, 1, 2, 3, 4)

    def test_check(self):
        RangeWeight(0.0, 0.1, 0.5).check(plastic=True)
        RangeWeight(0.5).check(plastic=False)
        self.assertRaises(errors.InvalidWeightError, RangeWeight(-0.1, 0.1, 0.5).check, True)
        self.assertRaises(errors.InvalidWeightError, RangeWeight(0.0, 0.6, 0.5).check, True)
        self.assertRaises(errors.InvalidWeightError, RangeWeight(0.2, 0.1, 0.5).check, True)
        # fixed connections keep their initial weight, which must be the maximum
        self.assertRaises(errors.InvalidWeightError, RangeWeight(0.0, 0.1, 0.5).check, False)

    def test_equality(self):
        self.assertEqual(RangeWeight(0.5), RangeWeight(0, 0.5, 0.5))
        self.assertNotEqual(RangeWeight(0.5), RangeWeight(0.4))
        self.assertNotEqual(RangeWeight(0.5), (0.0, 0.5, 0.5))

    def test_as_range_weight(self):
        w = RangeWeight(0.3)
        self.assertIs(as_range_weight(w), w)
        self.assertEqual(as_range_weight(0.3), w)
        self.assertEqual(as_range_weight((0.1, 0.3)), RangeWeight(0.1, 0.3))


class TestRangeDelay(unittest.TestCase):

    def test_constructors(self):
        self.assertEqual(RangeDelay(3).as_tuple(), (3, 3))
        self.assertEqual(RangeDelay(1, 20).as_tuple(), (1, 20))
        self.assertEqual(as_range_delay((2, 4)), RangeDelay(2, 4))
        self.assertEqual(as_range_delay(2.0), RangeDelay(2))

    def test_whole_milliseconds(self):
        self.assertRaises(errors.InvalidParameterValueError, RangeDelay, 1.5)
        self.assertRaises(errors.InvalidParameterValueError, RangeDelay, 1, 2.5)

    def test_check(self):
        RangeDelay(1, 1).check()
        self.assertRaises(errors.InvalidParameterValueError, RangeDelay(0, 5).check)
        self.assertRaises(errors.InvalidParameterValueError, RangeDelay(5, 4).check)


class TestLazyArray(unittest.TestCase):

    def test_function_map(self):
        m = LazyArray(lambda i, j: i == j, shape=(3, 3))
        assert_array_equal(m.evaluate(), np.eye(3, dtype=bool))

    def test_operations_are_queued(self):
        m = LazyArray(2.0, shape=(2, 3))
        m *= LazyArray(lambda i, j: i + j, shape=(2, 3))
        assert_array_equal(m.evaluate(), [[0, 2, 4], [2, 4, 6]])

    def test_no_string_expressions(self):
        self.assertRaises(errors.InvalidParameterValueError, LazyArray, "i == j", shape=(2, 2))
