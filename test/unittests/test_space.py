"""
Tests of the pySNN.space module.

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

import unittest

import numpy as np
from numpy.testing import assert_array_equal

from pySNN import errors
from pySNN.space import Grid3D, Point3D, RadiusRF, as_grid


class TestGrid3D(unittest.TestCase):

    def test_shape(self):
        grid = Grid3D(4, 3, 2)
        self.assertEqual(grid.N, 24)
        self.assertEqual(grid.shape, (4, 3, 2))
        self.assertEqual(as_grid(7), Grid3D(7, 1, 1))
        self.assertEqual(as_grid((2, 2, 2)), Grid3D(2, 2, 2))
        self.assertIs(as_grid(grid), grid)

    def test_invalid_dimensions(self):
        self.assertRaises(errors.InvalidDimensionsError, Grid3D, 0)
        self.assertRaises(errors.InvalidDimensionsError, Grid3D, 2, -1)
        self.assertRaises(errors.InvalidDimensionsError, Grid3D, 2.5)

    def test_locations_are_centred(self):
        grid = Grid3D(3, 2)
        self.assertEqual(grid.location(0), Point3D(-1.0, -0.5, 0.0))
        self.assertEqual(grid.location(5), Point3D(1.0, 0.5, 0.0))
        self.assertRaises(errors.InvalidIndexError, grid.location, 6)

    def test_positions_match_locations(self):
        grid = Grid3D(3, 2, 2)
        positions = grid.generate_positions()
        self.assertEqual(positions.shape, (3, 12))
        for i in range(grid.N):
            self.assertEqual(tuple(positions[:, i]), tuple(grid.location(i)))


class TestRadiusRF(unittest.TestCase):

    def setUp(self):
        self.positions = Grid3D(5).generate_positions()

    def test_unbounded(self):
        rf = RadiusRF(-1)
        self.assertTrue(rf.is_unbounded())
        self.assertFalse(rf.has_positive_radius())
        self.assertFalse(np.isinf(rf.distances(self.positions, self.positions)).any())

    def test_zero_radius(self):
        d = RadiusRF(0).distances(self.positions, self.positions)
        assert_array_equal(np.isfinite(d), np.eye(5, dtype=bool))

    def test_positive_radius(self):
        rf = RadiusRF(2, -1, -1)
        self.assertTrue(rf.has_positive_radius())
        d = rf.distances(self.positions, self.positions)
        self.assertEqual(d[0, 0], 0.0)
        self.assertEqual(d[0, 1], 0.25)
        self.assertEqual(d[0, 2], 1.0)
        self.assertTrue(np.isinf(d[0, 3]))

    def test_point_distance(self):
        self.assertEqual((Point3D(3, 4, 0) - Point3D()).norm(), 5.0)
