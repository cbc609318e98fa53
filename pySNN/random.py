"""
Provides a wrapper for the numpy random number generator, giving it the
common interface used by connectors and spike generators in pySNN.

Classes:
    NumpyRNG - uses the numpy.random.RandomState RNG

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

from copy import deepcopy
import logging
import numpy.random

logger = logging.getLogger("pySNN")


class NumpyRNG(object):
    """Wrapper for the numpy.random.RandomState class (Mersenne Twister PRNG)."""

    def __init__(self, seed=None):
        if seed is not None:
            assert isinstance(seed, int), "`seed` must be an int, not a %s" % type(seed).__name__
        self.seed = seed
        self.rng = numpy.random.RandomState(seed)

    def next(self, n=None, distribution='uniform', parameters=None):
        """
        Return `n` random numbers from the distribution.

        If `n` is None, return a single float, otherwise a numpy array.
        """
        parameters = parameters or {}
        if n is not None and n < 0:
            raise ValueError("The sample number must be positive")
        return getattr(self.rng, distribution)(size=n, **parameters)

    def __getattr__(self, name):
        """
        This is to give NumpyRNG the same methods as the wrapped RandomState.
        """
        if name == "rng":
            raise AttributeError(name)
        return getattr(self.rng, name)

    def __repr__(self):
        return "NumpyRNG(seed=%r)" % self.seed

    def __deepcopy__(self, memo):
        obj = NumpyRNG.__new__(NumpyRNG)
        obj.seed = deepcopy(self.seed, memo)
        obj.rng = deepcopy(self.rng, memo)
        return obj

