# encoding: utf-8
"""
Common implementation of the Connection class: a directed relation between
two groups with shared weight and delay ranges.

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

import logging

from .. import errors
from ..connectors import CallbackConnector, Connector
from ..parameters import as_range_weight, as_range_delay
from ..space import RadiusRF

logger = logging.getLogger("pySNN")


class Connection(object):
    """
    A container for all synapses between two groups, together with their
    weight range, delay range and plasticity flag.

    Arguments:
        `id`:
            the connection id, a small integer assigned in order of creation.
        `pre`, `post`:
            Group objects. `post` must not be a spike generator group.
        `connector`:
            a Connector object, encapsulating the algorithm to use for
            generating the synapses.
        `weight`:
            a RangeWeight, or None for a CallbackConnector, in which case the
            range is derived from the generated weights.
        `delay`:
            a RangeDelay (ms), or None for a CallbackConnector.
        `radius`:
            a RadiusRF restricting which pairs may be connected.
        `plastic`:
            whether the synapses may change their weight at runtime.
        `mul_syn_fast`, `mul_syn_slow`:
            non-negative multiplication factors for the fast and slow
            receptor currents.
        `max_delay`:
            the largest delay the simulator supports.
        `rng`:
            random number generator handed to the connector.
    """

    def __init__(self, id, pre, post, connector, weight=None, delay=None,
                 radius=None, plastic=False, mul_syn_fast=1.0, mul_syn_slow=1.0,
                 max_delay=None, rng=None):
        if not isinstance(connector, Connector):
            raise errors.ConnectionError("connector must be a Connector, not a %s" % type(connector))
        if post.is_spike_generator:
            raise errors.ConnectionError(
                "Cannot connect to spike generator group '%s'" % post.label)
        self.id = id
        self.pre = pre
        self.post = post
        self.connector = connector
        self.plastic = bool(plastic)
        self.derive_ranges = isinstance(connector, CallbackConnector) and weight is None
        self.weight = as_range_weight(weight if weight is not None else 1.0)
        self.delay = as_range_delay(delay if delay is not None else 1)
        self.radius = radius if radius is not None else RadiusRF(-1)
        if mul_syn_fast < 0 or mul_syn_slow < 0:
            raise errors.InvalidParameterValueError(
                "mul_syn_fast and mul_syn_slow must be non-negative (got %g, %g)" % (mul_syn_fast, mul_syn_slow))
        self.mul_syn_fast = float(mul_syn_fast)
        self.mul_syn_slow = float(mul_syn_slow)
        self.max_delay = max_delay
        if not self.derive_ranges:
            self.check_ranges()
        connector.check(self)
        self.synapses = connector.connect(self, rng)
        self.check_ranges()
        self._check_weights()
        logger.debug("Created connection %d (%s) with %d synapses using %s",
                     id, self.label, self.n_synapses, connector.describe())

    @property
    def label(self):
        return "%s->%s" % (self.pre.label, self.post.label)

    @property
    def shape(self):
        return (self.pre.size, self.post.size)

    @property
    def n_synapses(self):
        return self.synapses.n_synapses

    def __len__(self):
        return self.n_synapses

    def __repr__(self):
        return 'Connection(%d, "%s")' % (self.id, self.label)

    def check_ranges(self):
        """Raise an exception unless the weight and delay ranges are valid."""
        self.weight.check(self.plastic)
        self.delay.check()
        if self.max_delay is not None and self.delay.max > self.max_delay:
            raise errors.InvalidParameterValueError(
                "Maximum delay %d ms exceeds the largest supported delay (%d ms)" % (
                    self.delay.max, self.max_delay))

    def _check_weights(self):
        w = self.synapses.weight[self.synapses.mask]
        if w.size and (w.min() < self.weight.min - 1e-6 or w.max() > self.weight.max + 1e-6):
            raise errors.InvalidWeightError(
                "Generated weights of %s lie outside %r" % (self.label, self.weight))
        d = self.synapses.delay[self.synapses.mask]
        if d.size and (d.min() < self.delay.min or d.max() > self.delay.max):
            raise errors.InvalidParameterValueError(
                "Generated delays of %s lie outside %r" % (self.label, self.delay))

    def replace(self, weight, delay, plastic, synapses):
        """Install the ranges and synapses of a saved connection."""
        self.weight = weight
        self.delay = delay
        self.plastic = plastic
        self.synapses = synapses
        self.check_ranges()

    def structure(self):
        return {"id": self.id, "pre": self.pre.id, "post": self.post.id,
                "connector": self.connector.__class__.__name__,
                "weight": list(self.weight.as_tuple()),
                "delay": list(self.delay.as_tuple()),
                "plastic": self.plastic,
                "mul_syn_fast": self.mul_syn_fast,
                "mul_syn_slow": self.mul_syn_slow}

