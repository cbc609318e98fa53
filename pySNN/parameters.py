"""
Parameter handling: weight and delay ranges of connections and lazily
evaluated connection/value maps.

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

import numpy as np
from lazyarray import larray

from . import errors


class LazyArray(larray):
    """
    A connection map or value map over (pre, post) index pairs.

    `value` may be a single number or bool, a NumPy array, or a function
    `f(i, j)` which accepts arrays of pre and post indices and returns an
    array. Elements are only evaluated when the array is evaluated, and any
    operations performed on the array are queued up until then.
    """

    def __init__(self, value, shape=None, dtype=None):
        if isinstance(value, str):
            raise errors.InvalidParameterValueError(
                "String expressions are not supported for connection maps")
        super(LazyArray, self).__init__(value, shape, dtype)


class RangeWeight(object):
    """
    The weight range {min, init, max} of a connection.

    `RangeWeight(w)` gives a fixed weight: min = 0, init = max = w.
    `RangeWeight(init, max)` gives min = 0.
    """

    def __init__(self, *args):
        if len(args) == 1:
            self.min, self.init, self.max = 0.0, float(args[0]), float(args[0])
        elif len(args) == 2:
            self.min, self.init, self.max = 0.0, float(args[0]), float(args[1])
        elif len(args) == 3:
            self.min, self.init, self.max = (float(a) for a in args)
        else:
            raise TypeError("RangeWeight takes 1, 2 or 3 arguments (%d given)" % len(args))

    def check(self, plastic):
        """Raise InvalidWeightError unless the range is consistent."""
        if self.min < 0 or self.init < 0 or self.max < 0:
            raise errors.InvalidWeightError(
                "Weight range values must be non-negative, got %r" % self)
        if not self.min <= self.init <= self.max:
            raise errors.InvalidWeightError(
                "Weight range must satisfy min <= init <= max, got %r" % self)
        if not plastic and self.init != self.max:
            raise errors.InvalidWeightError(
                "For fixed connections the initial weight must equal the "
                "maximum weight, got %r" % self)

    def as_tuple(self):
        return (self.min, self.init, self.max)

    def __eq__(self, other):
        return isinstance(other, RangeWeight) and self.as_tuple() == other.as_tuple()

    def __ne__(self, other):
        return not self.__eq__(other)

    def __repr__(self):
        return "RangeWeight(min=%g, init=%g, max=%g)" % self.as_tuple()


class RangeDelay(object):
    """
    The delay range {min, max} of a connection, in integer milliseconds.

    `RangeDelay(d)` gives min = max = d.
    """

    def __init__(self, min, max=None):
        if max is None:
            max = min
        for value in (min, max):
            if int(value) != value:
                raise errors.InvalidParameterValueError(
                    "Delays must be whole numbers of milliseconds, not %s" % value)
        self.min = int(min)
        self.max = int(max)

    def check(self):
        if self.min < 1:
            raise errors.InvalidParameterValueError(
                "Minimum delay must be at least 1 ms, got %r" % self)
        if self.max < self.min:
            raise errors.InvalidParameterValueError(
                "Maximum delay must not be less than the minimum, got %r" % self)

    def as_tuple(self):
        return (self.min, self.max)

    def __eq__(self, other):
        return isinstance(other, RangeDelay) and self.as_tuple() == other.as_tuple()

    def __ne__(self, other):
        return not self.__eq__(other)

    def __repr__(self):
        return "RangeDelay(min=%d, max=%d)" % self.as_tuple()


def as_range_weight(value):
    if isinstance(value, RangeWeight):
        return value
    if np.isscalar(value):
        return RangeWeight(value)
    return RangeWeight(*value)


def as_range_delay(value):
    if isinstance(value, RangeDelay):
        return value
    if np.isscalar(value):
        return RangeDelay(value)
    return RangeDelay(*value)
