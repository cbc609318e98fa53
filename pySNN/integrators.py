"""
Interfaces to the collaborators that drive a simulation: the integrator,
which advances neuron dynamics and plasticity by one tick, and the spike
generators, which tell generator groups when to fire.

Classes:
    Integrator              - base class for integrators
    StaticIntegrator        - integrator without dynamics, weights never change
    SpikeGenerator          - base class for spike generators
    PeriodicSpikeGenerator  - fires every neuron of a group at a fixed rate

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

import logging

from . import errors

logger = logging.getLogger("pySNN")


class Integrator(object):
    """
    Base class for integrators.

    `step()` is called once per tick and must return only after all of the
    tick's effects, including weight updates, have been committed. A
    host-resident integrator reads weights from
    `state.store.synapses(conn_id)` and commits updates through
    `state.store.write_weights()`, which ignores them while weights are
    frozen for testing. An integrator with `device_resident =
    True` keeps its own copy of the weights: it receives host changes
    through `upload()` before a tick and hands its copy back through
    `download()` when the host needs to read it.
    """
    device_resident = False

    def prepare(self, state):
        """Called once when the network is finalized."""
        pass

    def step(self, state, t, spikes):
        """
        Advance the network from `t` to `t + 1` ms.

        `spikes` maps the ids of spike generator groups to arrays of the
        local indices of the neurons that fire during this tick.
        """
        raise NotImplementedError

    def upload(self, conn_id, synapses):
        raise NotImplementedError

    def download(self, conn_id, synapses):
        raise NotImplementedError


class StaticIntegrator(Integrator):
    """An integrator without dynamics. Weights only change through explicit mutation."""

    def step(self, state, t, spikes):
        pass


class SpikeGenerator(object):
    """
    Base class for spike generators attached to spike generator groups.
    """

    def next_spike_time(self, group_id, neuron_id, current_time, last_scheduled, end_of_slice):
        """
        Return the time (ms) of the next spike of neuron `neuron_id`.

        `last_scheduled` is the time of the previously returned spike, or None
        on the first call. Returning a time at or beyond `end_of_slice` means
        that the neuron does not fire before then.
        """
        raise NotImplementedError


class PeriodicSpikeGenerator(SpikeGenerator):
    """
    Fires every neuron of a group with inter-spike interval `1000/rate` ms,
    the first spike at t = 0 if `spike_at_zero` is True, otherwise one
    interval later.
    """

    def __init__(self, rate, spike_at_zero=True):
        if rate <= 0:
            raise errors.InvalidParameterValueError(
                "Firing rate must be positive, not %g" % rate)
        self.rate = float(rate)
        self.spike_at_zero = spike_at_zero

    @property
    def isi(self):
        return 1000.0 / self.rate

    def next_spike_time(self, group_id, neuron_id, current_time, last_scheduled, end_of_slice):
        if last_scheduled is None:
            return 0.0 if self.spike_at_zero else self.isi
        return last_scheduled + self.isi

    def __repr__(self):
        return "PeriodicSpikeGenerator(rate=%g, spike_at_zero=%s)" % (self.rate, self.spike_at_zero)
