"""
Implementation of the simulator state: the network description, the
lifecycle, the simulation clock, the weight store and the monitors.

The state object is module-global and is reused across calls to setup(),
which clears it.

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

import logging
import warnings
import numpy as np

from . import common, errors
from .integrators import StaticIntegrator
from .random import NumpyRNG
from .serialization import save_network
from .utility.timer import Timer
from .weights import WeightStore

logger = logging.getLogger("pySNN")

name = "pySNN"
MAX_COMPARTMENT_LINKS = 4


class State(common.control.BaseState):

    def __init__(self):
        common.control.BaseState.__init__(self)
        self.monitors = {}
        self.clear()

    def clear(self, seed=common.control.DEFAULT_SEED, integrator=None):
        """Destroy the network and return to the BUILD state at t = 0."""
        for monitor in self.monitors.values():
            monitor.close()
        self.lifecycle = common.control.Lifecycle()
        self.t = 0
        self.seed = seed
        self.rng = NumpyRNG(seed=seed)
        self.integrator = integrator or StaticIntegrator()
        self.groups = []
        self.connections = []
        self.compartment_links = []
        self.monitors = {}
        self.store = None
        self.conductances = None
        self.testing = False
        self.update_weights_while_testing = True
        self.save_options = None
        self.homeostasis_state = {}
        self.staged_homeostasis = {}
        self._next_spike = {}

    # --- network description ------------------------------------------

    @property
    def num_neurons(self):
        return sum(g.size for g in self.groups)

    def get_group(self, group_id):
        if isinstance(group_id, bool) or not isinstance(group_id, (int, np.integer)) \
                or not 0 <= group_id < len(self.groups):
            raise errors.InvalidIndexError("Group id %r does not exist" % (group_id,))
        return self.groups[group_id]

    def get_connection(self, conn_id):
        if isinstance(conn_id, bool) or not isinstance(conn_id, (int, np.integer)) \
                or not 0 <= conn_id < len(self.connections):
            raise errors.InvalidIndexError("Connection id %r does not exist" % (conn_id,))
        return self.connections[conn_id]

    def find_connection(self, pre, post):
        """Return the first connection from group `pre` to group `post`, or None."""
        for c in self.connections:
            if c.pre.id == pre and c.post.id == post:
                return c
        return None

    def has_compartment_link(self, a, b):
        return (a, b) in self.compartment_links or (b, a) in self.compartment_links

    def count_compartment_links(self, group_id):
        return sum(group_id in link for link in self.compartment_links)

    # --- finalize -------------------------------------------------------

    def setup_network(self):
        """
        Validate the network description, allocate the weight store and move
        to the READY state.
        """
        for group in self.groups:
            if group.is_regular and group.celltype is None:
                raise errors.InvalidTopologyError(
                    "Neuron parameters have not been set for group '%s'" % group.label)
        for connection in self.connections:
            connection.check_ranges()
        plastic_targets = set(c.post.id for c in self.connections if c.plastic)
        for group in self.groups:
            if group.stdp is not None and group.id not in plastic_targets:
                raise errors.InvalidTopologyError(
                    "STDP is enabled for group '%s', which receives no plastic connections" % group.label)
            if group.homeostasis is not None and group.id not in plastic_targets:
                raise errors.InvalidTopologyError(
                    "Homeostasis is enabled for group '%s', which receives no plastic connections" % group.label)
        for link in self.compartment_links:
            for group_id in link:
                group = self.groups[group_id]
                if group.compartment_parameters is None:
                    raise errors.InvalidTopologyError(
                        "Compartment parameters have not been set for group '%s'" % group.label)
        self.store = WeightStore(self.connections, self.integrator)
        for group in self.groups:
            if group.homeostasis is not None:
                if group.id in self.staged_homeostasis:
                    self.homeostasis_state[group.id] = self.staged_homeostasis[group.id].copy()
                else:
                    rate = group.base_firing_rate.rate if group.base_firing_rate else 0.0
                    self.homeostasis_state[group.id] = np.full(group.size, rate, dtype=np.float32)
        self.staged_homeostasis = {}
        self._prime_spike_generators()
        self.integrator.prepare(self)
        self.lifecycle.finalize()
        logger.info("Network has %d groups, %d neurons, %d connections and %d synapses",
                    len(self.groups), self.num_neurons, len(self.connections), self.store.n_synapses)

    # --- running --------------------------------------------------------

    def run_until(self, tstop):
        n_ticks = int(round(tstop - self.t))
        if abs(self.t + n_ticks - tstop) > 1e-9:
            warnings.warn("Simulation time %g ms rounded to %d ms" % (tstop, self.t + n_ticks),
                          errors.RoundingWarning)
        self.lifecycle.start()
        timer = Timer()
        for _ in range(n_ticks):
            self._tick()
        logger.debug("Simulated %d ms in %g s (t = %d ms)", n_ticks, timer.elapsed_time(), self.t)

    def _tick(self):
        spikes = self._generate_spikes()
        self.store.sync_to_device()
        self.integrator.step(self, self.t, spikes)
        self.store.sync_from_device()
        self.t += 1
        if self.t % 1000 == 0:
            for monitor in self.monitors.values():
                monitor._on_second_elapsed(self.t)

    def _prime_spike_generators(self):
        self._next_spike = {}
        for group in self.groups:
            if group.spike_generator is not None:
                gen = group.spike_generator
                self._next_spike[group.id] = np.array(
                    [gen.next_spike_time(group.id, n, 0, None, 1000) for n in range(group.size)],
                    dtype=float)

    def _generate_spikes(self):
        t = self.t
        spikes = {}
        for group_id, next_spike in self._next_spike.items():
            firing = np.flatnonzero(next_spike < t + 1)
            if firing.size == 0:
                continue
            gen = self.groups[group_id].spike_generator
            for n in firing:
                while next_spike[n] < t + 1:
                    following = gen.next_spike_time(group_id, n, t, next_spike[n], t + 1000)
                    if following <= next_spike[n]:
                        raise errors.InvalidParameterValueError(
                            "Spike generator of group %d returned a non-increasing spike time" % group_id)
                    next_spike[n] = following
            spikes[group_id] = firing
        return spikes

    def end(self):
        """Write trailing monitor records, save if requested, close files."""
        for monitor in self.monitors.values():
            monitor._finalize(self.t)
        if self.save_options is not None and self.store is not None:
            filename, save_synapse_info = self.save_options
            save_network(self, filename, save_synapse_info)


state = State()
