# encoding: utf-8
"""
Tools for laying out neuron groups on 3D grids and for calculating
receptive-field distances between them.

Classes:

  Point3D   - a point in 3D space.
  Grid3D    - represents a group of neurons distributed on a regular 3D grid.
  RadiusRF  - a (possibly unbounded) ellipsoidal receptive field.

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

from collections import namedtuple
import numpy

from . import errors


class Point3D(namedtuple("Point3D", "x y z")):
    """A point in 3D grid coordinates."""

    def __new__(cls, x=0.0, y=0.0, z=0.0):
        return super(Point3D, cls).__new__(cls, x, y, z)

    def __sub__(self, other):
        return Point3D(self.x - other.x, self.y - other.y, self.z - other.z)

    def norm(self):
        return numpy.sqrt(self.x**2 + self.y**2 + self.z**2)


class Grid3D(object):
    """
    Represents a structure with neurons distributed on a regular 3D grid.

    Neurons are numbered with x varying fastest, then y, then z. Coordinates
    are centred on the origin, so that a neuron's location along one axis is
    `index - (size - 1)/2`.
    """

    def __init__(self, x, y=1, z=1):
        for name, value in (("x", x), ("y", y), ("z", z)):
            if not isinstance(value, (int, numpy.integer)) or value <= 0:
                raise errors.InvalidDimensionsError(
                    "Grid dimension %s must be a positive integer, not %r" % (name, value))
        self.x = int(x)
        self.y = int(y)
        self.z = int(z)

    @property
    def N(self):
        return self.x * self.y * self.z

    @property
    def shape(self):
        return (self.x, self.y, self.z)

    def __eq__(self, other):
        return isinstance(other, Grid3D) and self.shape == other.shape

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash(self.shape)

    def __repr__(self):
        return "Grid3D(x=%d, y=%d, z=%d)" % self.shape

    def location(self, index):
        """Return the Point3D of the neuron with local index `index`."""
        if not 0 <= index < self.N:
            raise errors.InvalidIndexError(
                "Neuron index %d out of range for %r" % (index, self))
        ix = index % self.x
        iy = (index // self.x) % self.y
        iz = index // (self.x * self.y)
        return Point3D(ix - (self.x - 1) / 2.0,
                       iy - (self.y - 1) / 2.0,
                       iz - (self.z - 1) / 2.0)

    def generate_positions(self):
        """
        Calculate and return the positions of all neurons as an array with
        shape (3, N).
        """
        index = numpy.arange(self.N)
        ix = index % self.x
        iy = (index // self.x) % self.y
        iz = index // (self.x * self.y)
        return numpy.array((ix - (self.x - 1) / 2.0,
                            iy - (self.y - 1) / 2.0,
                            iz - (self.z - 1) / 2.0))


def as_grid(size_or_grid):
    """Accept either a neuron count or a Grid3D and return a Grid3D."""
    if isinstance(size_or_grid, Grid3D):
        return size_or_grid
    if isinstance(size_or_grid, (tuple, list)):
        return Grid3D(*size_or_grid)
    return Grid3D(size_or_grid)


class RadiusRF(object):
    """
    An ellipsoidal receptive field with radii (`x`, `y`, `z`) in grid units.

    In each dimension, a negative radius means no constraint, a radius of
    zero means that pre and post neurons must share the same coordinate and a
    positive radius bounds the normalised distance.
    """

    def __init__(self, x=-1.0, y=None, z=None):
        if y is None:
            y = x
        if z is None:
            z = x
        self.radius = (float(x), float(y), float(z))

    @property
    def x(self):
        return self.radius[0]

    @property
    def y(self):
        return self.radius[1]

    @property
    def z(self):
        return self.radius[2]

    def is_unbounded(self):
        return all(r < 0 for r in self.radius)

    def has_positive_radius(self):
        return any(r > 0 for r in self.radius)

    def __repr__(self):
        return "RadiusRF(x=%g, y=%g, z=%g)" % self.radius

    def distances(self, pre_positions, post_positions):
        """
        Return a (pre, post) array of normalised squared distances, with
        infinity for pairs lying outside the receptive field.

        Positions are arrays with shape (3, N) as produced by
        `Grid3D.generate_positions()`.
        """
        n_pre = pre_positions.shape[1]
        n_post = post_positions.shape[1]
        d = numpy.zeros((n_pre, n_post))
        outside = numpy.zeros((n_pre, n_post), dtype=bool)
        for axis, radius in enumerate(self.radius):
            diff = pre_positions[axis][:, numpy.newaxis] - post_positions[axis][numpy.newaxis, :]
            if radius < 0:
                continue
            elif radius == 0:
                outside |= numpy.abs(diff) > 1e-6
            else:
                d += (diff / radius)**2
        outside |= d > 1.0
        d[outside] = numpy.inf
        return d
