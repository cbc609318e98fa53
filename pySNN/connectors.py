"""
Defines the built-in connector classes, which generate the synapses of a
connection when it is declared.

Every connector returns a SynapseMatrix. Except for the CallbackConnector,
synapses get the initial weight of the connection and a delay drawn
uniformly from its delay range, and only pairs inside the connection's
receptive field are considered.

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

import logging
import numpy

from . import errors
from .parameters import LazyArray, RangeWeight, RangeDelay
from .random import NumpyRNG
from .weights import SynapseMatrix

logger = logging.getLogger("pySNN")

GAUSSIAN_CUTOFF = 0.1


def _get_rng(rng):
    if isinstance(rng, NumpyRNG):
        return rng
    elif rng is None:
        return NumpyRNG(seed=151985012)
    else:
        raise Exception("rng must be either None, or a pySNN.random.NumpyRNG")


class Connector(object):
    """
    Base class for connectors.

    `rng` is used to draw delays and, for the random connectors, to decide
    which synapses exist. If it is None, the connection supplies the
    simulator's random number generator.
    """
    parameter_names = ()
    allow_multiple_connections = False
    uses_receptive_field = True

    def __init__(self, rng=None):
        self.rng = rng

    def connect(self, connection, rng=None):
        raise NotImplementedError()

    def check(self, connection):
        """Raise an exception if this connector cannot be used for `connection`."""
        pass

    def get_parameters(self):
        P = {}
        for name in self.parameter_names:
            P[name] = getattr(self, name)
        return P

    def describe(self):
        return "%s(%s)" % (self.__class__.__name__,
                           ", ".join("%s=%r" % item for item in sorted(self.get_parameters().items())))

    def _receptive_field_distances(self, connection):
        """
        Return the (pre, post) normalised squared distances, with infinity
        outside the receptive field, or None if the field is unbounded.
        """
        if connection.radius is None or connection.radius.is_unbounded():
            return None
        return connection.radius.distances(connection.pre.grid.generate_positions(),
                                           connection.post.grid.generate_positions())


class MapConnector(Connector):
    """
    Abstract base class for Connectors based on connection maps, where a map
    is a 2D lazy array containing either the (boolean) connection matrix or
    the weights.
    """

    def _connect_with_map(self, connection, connection_map, weight_map=None, rng=None):
        rng = _get_rng(self.rng or rng)
        mask = numpy.asarray(connection_map.evaluate(), dtype=bool)
        distances = self._receptive_field_distances(connection)
        if distances is not None:
            mask &= numpy.isfinite(distances)
        if weight_map is None:
            weights = numpy.full(connection.shape, connection.weight.init)
        else:
            weights = weight_map.evaluate()
        delay = connection.delay
        if delay.min == delay.max:
            delays = numpy.full(connection.shape, delay.min)
        else:
            delays = rng.randint(delay.min, delay.max + 1, size=connection.shape)
        logger.debug("%s created %d synapses for %s", self.__class__.__name__,
                     mask.sum(), connection.label)
        return SynapseMatrix(mask, weights, delays, connection.plastic)


class AllToAllConnector(MapConnector):
    """
    Connects all cells in the presynaptic group to all cells in the
    postsynaptic group.

        `allow_self_connections`:
            if the connector is used to connect a group to itself, this flag
            determines whether a neuron is allowed to connect to itself, or
            only to other neurons in the group.
    """
    parameter_names = ('allow_self_connections',)

    def __init__(self, allow_self_connections=True, rng=None):
        Connector.__init__(self, rng)
        assert isinstance(allow_self_connections, bool)
        self.allow_self_connections = allow_self_connections

    def connect(self, connection, rng=None):
        if not self.allow_self_connections and connection.pre is connection.post:
            connection_map = LazyArray(lambda i, j: i != j, shape=connection.shape)
        else:
            connection_map = LazyArray(True, shape=connection.shape)
        return self._connect_with_map(connection, connection_map, rng=rng)


class OneToOneConnector(MapConnector):
    """
    Where the pre- and postsynaptic groups have the same size, connect cell
    *i* in the presynaptic group to cell *i* in the postsynaptic group for all
    *i*.
    """
    parameter_names = ()

    def check(self, connection):
        if connection.pre.size != connection.post.size:
            raise errors.ConnectionError(
                "OneToOneConnector requires groups of equal size (%d != %d)" % (
                    connection.pre.size, connection.post.size))
        if connection.radius is not None and connection.radius.has_positive_radius():
            raise errors.ConnectionError(
                "OneToOneConnector cannot be combined with a receptive field radius %r" % connection.radius)

    def connect(self, connection, rng=None):
        connection_map = LazyArray(lambda i, j: i == j, shape=connection.shape)
        return self._connect_with_map(connection, connection_map, rng=rng)


class FixedProbabilityConnector(MapConnector):
    """
    For each pair of pre-post cells inside the receptive field, the
    connection probability is constant.

        `p_connect`:
            a float between zero and one. Each potential connection is created
            with this probability.
        `allow_self_connections`:
            if the connector is used to connect a group to itself, this flag
            determines whether a neuron is allowed to connect to itself.
    """
    parameter_names = ('allow_self_connections', 'p_connect')

    def __init__(self, p_connect, allow_self_connections=True, rng=None):
        Connector.__init__(self, rng)
        assert isinstance(allow_self_connections, bool)
        self.allow_self_connections = allow_self_connections
        self.p_connect = float(p_connect)
        if not 0 <= self.p_connect <= 1:
            raise errors.InvalidParameterValueError(
                "Connection probability must lie in [0, 1], not %g" % self.p_connect)

    def connect(self, connection, rng=None):
        rng = _get_rng(self.rng or rng)
        random_map = LazyArray(rng.next(connection.shape[0] * connection.shape[1]).reshape(connection.shape))
        connection_map = random_map < self.p_connect
        if not self.allow_self_connections and connection.pre is connection.post:
            connection_map *= LazyArray(lambda i, j: i != j, shape=connection.shape)
        return self._connect_with_map(connection, connection_map, rng=rng)


class GaussianConnector(MapConnector):
    """
    Connects cells inside the receptive field with probability `p_connect`,
    scaling the initial weight with a Gaussian of the normalised distance
    between the two cells. At the border of the receptive field the weight
    has dropped to 10% of its initial value.

    The receptive field must be bounded in at least one dimension.
    """
    parameter_names = ('p_connect',)

    def __init__(self, p_connect=1.0, rng=None):
        Connector.__init__(self, rng)
        self.p_connect = float(p_connect)
        if not 0 <= self.p_connect <= 1:
            raise errors.InvalidParameterValueError(
                "Connection probability must lie in [0, 1], not %g" % self.p_connect)

    def check(self, connection):
        if connection.radius is None or connection.radius.is_unbounded():
            raise errors.ConnectionError(
                "GaussianConnector requires a bounded receptive field")

    def connect(self, connection, rng=None):
        rng = _get_rng(self.rng or rng)
        distances = self._receptive_field_distances(connection)
        gauss = numpy.exp(-numpy.log(1.0 / GAUSSIAN_CUTOFF) * distances)
        random_map = rng.next(connection.shape[0] * connection.shape[1]).reshape(connection.shape)
        connection_map = LazyArray((gauss >= GAUSSIAN_CUTOFF - 1e-9) & (random_map < self.p_connect))
        weight_map = LazyArray(connection.weight.init * gauss)
        return self._connect_with_map(connection, connection_map, weight_map, rng=rng)


class CallbackConnector(Connector):
    """
    Connects cells according to a user-supplied function
    `function(i, j) -> (connected, weight, delay)`, called once for every
    (pre, post) pair. The function must not have side effects on the network.

    Weights are taken as absolute values. Unless the connection specifies
    them, the weight range is [0, largest weight] and the delay range spans
    the generated delays.

        `max_m`:
            maximum number of synapses per presynaptic neuron (0: no limit).
        `max_pre_m`:
            maximum number of synapses per postsynaptic neuron (0: no limit).
    """
    parameter_names = ('max_m', 'max_pre_m')
    uses_receptive_field = False

    def __init__(self, function, max_m=0, max_pre_m=0):
        Connector.__init__(self)
        if function is None or not callable(function):
            raise errors.InvalidParameterValueError(
                "CallbackConnector requires a callable, not %r" % function)
        if max_m < 0 or max_pre_m < 0:
            raise errors.InvalidParameterValueError(
                "max_m and max_pre_m must be non-negative")
        self.function = function
        self.max_m = int(max_m)
        self.max_pre_m = int(max_pre_m)

    def connect(self, connection, rng=None):
        n_pre, n_post = connection.shape
        mask = numpy.zeros((n_pre, n_post), dtype=bool)
        weights = numpy.zeros((n_pre, n_post))
        delays = numpy.zeros((n_pre, n_post), dtype=int)
        for i in range(n_pre):
            for j in range(n_post):
                connected, weight, delay = self.function(i, j)
                if connected:
                    mask[i, j] = True
                    weights[i, j] = abs(weight)
                    delays[i, j] = delay
        if self.max_m and (mask.sum(axis=1) > self.max_m).any():
            raise errors.ConnectionError(
                "Callback created more than max_m=%d synapses for a presynaptic neuron" % self.max_m)
        if self.max_pre_m and (mask.sum(axis=0) > self.max_pre_m).any():
            raise errors.ConnectionError(
                "Callback created more than max_pre_m=%d synapses for a postsynaptic neuron" % self.max_pre_m)
        if mask.any():
            generated_delays = delays[mask]
            if generated_delays.min() < 1:
                raise errors.InvalidParameterValueError(
                    "Callback returned a delay of %d ms (must be at least 1)" % generated_delays.min())
            if connection.derive_ranges:
                w_max = float(weights[mask].max())
                connection.weight = RangeWeight(0.0, w_max, w_max)
                connection.delay = RangeDelay(int(generated_delays.min()), int(generated_delays.max()))
        logger.debug("CallbackConnector created %d synapses for %s", mask.sum(), connection.label)
        return SynapseMatrix(mask, weights, delays, connection.plastic)
