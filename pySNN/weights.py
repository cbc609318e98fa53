"""
The weight store: per-connection dense matrices of synaptic weights, delays
and plasticity flags, and the mutation operations that act on them.

Absent synapses hold NaN in the weight matrix and zero in the delay matrix.
Weights are stored as float32.

A store is owned either by the host or, for an integrator whose
`device_resident` flag is set, mirrored on the integrator's device. Copies
move across that boundary only at tick boundaries: host changes are uploaded
before the next tick, and device changes are downloaded the first time the
host reads a connection after a tick.

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

import logging
import numpy as np

from . import errors
from .core import check_index

logger = logging.getLogger("pySNN")

WEIGHT_DTYPE = np.float32
DELAY_DTYPE = np.int16


class SynapseMatrix(object):
    """
    The synapses of one connection, as (pre, post) arrays:

        `mask`:    True where a synapse exists
        `weight`:  float32 weights, NaN where no synapse exists
        `delay`:   integer delays in ms, 0 where no synapse exists
        `plastic`: True for plastic synapses
    """

    def __init__(self, mask, weight, delay, plastic):
        mask = np.asarray(mask, dtype=bool)
        self.mask = mask
        self.weight = np.where(mask, weight, np.nan).astype(WEIGHT_DTYPE)
        self.delay = np.where(mask, delay, 0).astype(DELAY_DTYPE)
        self.plastic = np.logical_and(mask, plastic)

    @property
    def shape(self):
        return self.mask.shape

    @property
    def n_synapses(self):
        return int(self.mask.sum())

    def copy(self):
        obj = SynapseMatrix.__new__(SynapseMatrix)
        obj.mask = self.mask.copy()
        obj.weight = self.weight.copy()
        obj.delay = self.delay.copy()
        obj.plastic = self.plastic.copy()
        return obj

    def __eq__(self, other):
        return (isinstance(other, SynapseMatrix)
                and np.array_equal(self.mask, other.mask)
                and np.array_equal(self.weight, other.weight, equal_nan=True)
                and np.array_equal(self.delay, other.delay)
                and np.array_equal(self.plastic, other.plastic))

    def __ne__(self, other):
        return not self.__eq__(other)


class WeightStore(object):
    """
    Holds the synapse matrices of all connections of a finalized network.

    `connections` is a list of Connection objects, each of which must have its
    `synapses` attribute set.
    """

    def __init__(self, connections, integrator=None):
        self._synapses = {}
        self._ranges = {}
        self._versions = {}
        for c in connections:
            self._synapses[c.id] = c.synapses.copy()
            self._ranges[c.id] = (c.weight, c.delay)
            self._versions[c.id] = 0
        if integrator is not None and integrator.device_resident:
            self.device = integrator
        else:
            self.device = None
        self._upload_pending = set(self._synapses) if self.device else set()
        self._download_pending = set()
        self.frozen = False
        logger.debug("Allocated weight store for %d connections (%d synapses)",
                     len(self._synapses), self.n_synapses)

    def __contains__(self, conn_id):
        return conn_id in self._synapses

    def __len__(self):
        return len(self._synapses)

    @property
    def connection_ids(self):
        return sorted(self._synapses)

    @property
    def n_synapses(self):
        return sum(s.n_synapses for s in self._synapses.values())

    def _check_connection(self, conn_id):
        if conn_id not in self._synapses:
            raise errors.InvalidIndexError(
                "Connection id %r does not exist (valid ids: 0-%d)" % (conn_id, len(self._synapses) - 1))

    # --- residency ------------------------------------------------------

    def _host(self, conn_id):
        self._check_connection(conn_id)
        if conn_id in self._download_pending:
            self.device.download(conn_id, self._synapses[conn_id])
            self._download_pending.discard(conn_id)
        return self._synapses[conn_id]

    def _host_modified(self, conn_id, mutation=True):
        if mutation:
            self._versions[conn_id] += 1
        if self.device is not None:
            self._upload_pending.add(conn_id)

    def sync_to_device(self):
        """Upload host changes. Called immediately before a tick is dispatched."""
        if self.device is None:
            return
        for conn_id in sorted(self._upload_pending):
            self._host(conn_id)
            self.device.upload(conn_id, self._synapses[conn_id])
        self._upload_pending.clear()

    def sync_from_device(self):
        """
        Mark every host copy as stale. Called immediately after a tick has
        been committed on the device.
        """
        if self.device is None:
            return
        if self.frozen:
            # discard the tick's weight changes on the device
            self._upload_pending = set(self._synapses)
        else:
            self._download_pending = set(self._synapses)

    def freeze(self, frozen=True):
        """
        While frozen, weight updates by the integrator are discarded.
        Explicit mutations (bias, scale, set_weight) still apply.
        """
        if frozen and self.device is not None:
            for conn_id in sorted(self._download_pending):
                self._host(conn_id)
        self.frozen = frozen

    # --- reads ----------------------------------------------------------

    def synapses(self, conn_id):
        """
        Return the host SynapseMatrix of a connection. Integrators that run on
        the host commit their weight updates through `write_weights()`.
        """
        return self._host(conn_id)

    def version(self, conn_id):
        """Counter that changes whenever the weights are mutated between ticks."""
        self._check_connection(conn_id)
        return self._versions[conn_id]

    def get_weight(self, conn_id, pre, post):
        syn = self._host(conn_id)
        i = check_index(pre, syn.shape[0], "pre-synaptic index")
        j = check_index(post, syn.shape[1], "post-synaptic index")
        return float(syn.weight[i, j])

    def get_weights(self, conn_id):
        """Return a copy of the weight matrix, with NaN for absent synapses."""
        return self._host(conn_id).weight.copy()

    def get_delays(self, conn_id):
        return self._host(conn_id).delay.copy()

    def get_weight_range(self, conn_id):
        self._check_connection(conn_id)
        return self._ranges[conn_id][0]

    def get_delay_range(self, conn_id):
        self._check_connection(conn_id)
        return self._ranges[conn_id][1]

    # --- writes ---------------------------------------------------------

    def _clamp(self, conn_id, syn):
        weight_range = self._ranges[conn_id][0]
        m = syn.mask
        syn.weight[m] = np.clip(syn.weight[m], weight_range.min, weight_range.max)

    def write_weights(self, conn_id, weights):
        """
        Overwrite all existing synapses of a connection with `weights`, a
        (pre, post) array. Entries for absent synapses are ignored.
        """
        if self.frozen:
            return
        syn = self._host(conn_id)
        weights = np.asarray(weights)
        if weights.shape != syn.shape:
            raise errors.InvalidDimensionsError(
                "Weight array has shape %s, connection has shape %s" % (weights.shape, syn.shape))
        syn.weight[syn.mask] = weights[syn.mask]
        self._clamp(conn_id, syn)
        self._host_modified(conn_id, mutation=False)

    def bias(self, conn_id, delta, use_absolute_value=False):
        """
        Add `delta` to every weight of the connection, or set every weight to
        `delta` if `use_absolute_value` is True. Results are clamped into the
        connection's weight range.
        """
        if not np.isfinite(delta):
            raise errors.InvalidParameterValueError("Bias must be finite, not %s" % delta)
        syn = self._host(conn_id)
        m = syn.mask
        if use_absolute_value:
            syn.weight[m] = delta
        else:
            syn.weight[m] += WEIGHT_DTYPE(delta)
        self._clamp(conn_id, syn)
        self._host_modified(conn_id)
        logger.debug("Biased weights of connection %d by %g (absolute=%s)", conn_id, delta, use_absolute_value)

    def scale(self, conn_id, factor, use_absolute_value=False):
        """
        Multiply every weight of the connection by `factor`, or set every
        weight to `factor` if `use_absolute_value` is True. Results are
        clamped into the connection's weight range.
        """
        if not np.isfinite(factor) or factor < 0:
            raise errors.InvalidParameterValueError(
                "Scaling factor must be finite and non-negative, not %g" % factor)
        syn = self._host(conn_id)
        m = syn.mask
        if use_absolute_value:
            syn.weight[m] = factor
        else:
            syn.weight[m] *= WEIGHT_DTYPE(factor)
        self._clamp(conn_id, syn)
        self._host_modified(conn_id)
        logger.debug("Scaled weights of connection %d by %g (absolute=%s)", conn_id, factor, use_absolute_value)

    def set_weight(self, conn_id, pre, post, value, use_absolute_value=False):
        """
        Set the weight of the synapse (`pre`, `post`) to `value`, clamped into
        the connection's weight range. The value is always taken as given;
        `use_absolute_value` is accepted so that all three mutation
        operations share one signature.
        """
        if not np.isfinite(value) or value < 0:
            raise errors.InvalidWeightError("Weight must be finite and non-negative, not %g" % value)
        syn = self._host(conn_id)
        i = check_index(pre, syn.shape[0], "pre-synaptic index")
        j = check_index(post, syn.shape[1], "post-synaptic index")
        if not syn.mask[i, j]:
            raise errors.ConnectionError(
                "There is no synapse from %d to %d in connection %d" % (i, j, conn_id))
        weight_range = self._ranges[conn_id][0]
        syn.weight[i, j] = min(max(value, weight_range.min), weight_range.max)
        self._host_modified(conn_id)
