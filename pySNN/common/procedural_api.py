# encoding: utf-8
"""
Procedural API for declaring, finalizing, mutating and monitoring a network.

Each `build_*()` factory takes the simulator module and returns API
functions bound to its module-global state. Every returned function is
checked against the lifecycle table in `control.LEGAL_STATES` before it
runs.

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

import logging
import numpy as np

from .. import errors
from ..connectors import CallbackConnector, Connector
from ..integrators import Integrator, SpikeGenerator
from ..recording import ConnectionMonitor, resolve_filename
from ..serialization import save_network, load_network
from ..standardmodels import StandardCellType
from ..standardmodels.synapses import Conductances, Homeostasis, HomeostaticBaseRate, SpikePairRule
from .control import build_lifecycle_check
from .populations import Group, EXCITATORY
from .projections import Connection

logger = logging.getLogger("pySNN")


def _regular_group(state, group_id, operation):
    group = state.get_group(group_id)
    if group.is_spike_generator:
        raise errors.InvalidParameterValueError(
            "%s() cannot be applied to spike generator group '%s'" % (operation, group.label))
    return group


def build_create(simulator):
    lifecycle_checked = build_lifecycle_check(simulator)

    def _create(label, size_or_grid, polarity, is_spike_generator):
        state = simulator.state
        if any(g.label == label for g in state.groups):
            raise errors.InvalidParameterValueError("A group named '%s' already exists" % label)
        group = Group(len(state.groups), label, size_or_grid, polarity,
                      is_spike_generator, first_id=state.num_neurons)
        state.groups.append(group)
        logger.debug("Created %s", group.describe())
        return group.id

    @lifecycle_checked
    def create_group(label, size_or_grid, polarity=EXCITATORY):
        """
        Create a group of neurons whose dynamics are integrated by the
        simulator and return its id. `size_or_grid` is a neuron count, an
        (x, y, z) tuple or a Grid3D.
        """
        return _create(label, size_or_grid, polarity, False)

    @lifecycle_checked
    def create_spike_generator_group(label, size_or_grid, polarity=EXCITATORY):
        """
        Create an input-only group whose spikes come from a spike generator
        and return its id.
        """
        return _create(label, size_or_grid, polarity, True)

    return create_group, create_spike_generator_group


def build_connect(simulator):
    lifecycle_checked = build_lifecycle_check(simulator)

    @lifecycle_checked
    def connect(pre, post, connector, weight=None, delay=1, radius=None,
                plastic=False, mul_syn_fast=1.0, mul_syn_slow=1.0):
        """
        Connect group `pre` to group `post` and return the connection id.

        `weight` is a RangeWeight (or a number for a fixed weight), `delay` a
        RangeDelay (or a number) in ms and `radius` a RadiusRF. With a
        CallbackConnector, `weight` and `delay` may be left out, in which case
        they are derived from the generated synapses.
        """
        state = simulator.state
        pre_group = state.get_group(pre)
        post_group = state.get_group(post)
        if state.has_compartment_link(pre, post):
            raise errors.ConnectionError(
                "Groups '%s' and '%s' are already coupled as compartments" % (
                    pre_group.label, post_group.label))
        if not isinstance(connector, Connector):
            raise errors.ConnectionError("connector must be a Connector, not a %s" % type(connector))
        existing = state.find_connection(pre, post)
        if existing is not None and not connector.allow_multiple_connections:
            raise errors.ConnectionError(
                "Groups '%s' and '%s' are already connected (connection %d)" % (
                    pre_group.label, post_group.label, existing.id))
        if weight is None and not isinstance(connector, CallbackConnector):
            raise errors.InvalidWeightError("A weight range is required for %s" % connector.describe())
        connection = Connection(len(state.connections), pre_group, post_group, connector,
                                weight=weight, delay=delay, radius=radius, plastic=plastic,
                                mul_syn_fast=mul_syn_fast, mul_syn_slow=mul_syn_slow,
                                max_delay=state.max_delay, rng=state.rng)
        state.connections.append(connection)
        return connection.id

    return connect


def build_network_description(simulator):
    lifecycle_checked = build_lifecycle_check(simulator)

    @lifecycle_checked
    def set_neuron_parameters(group_id, celltype):
        """Set the dynamics parameters of a regular group, e.g. `Izhikevich(a=0.02, ...)`."""
        group = _regular_group(simulator.state, group_id, "set_neuron_parameters")
        if not isinstance(celltype, StandardCellType):
            raise errors.InvalidParameterValueError(
                "celltype must be a StandardCellType, not %s" % type(celltype).__name__)
        group.celltype = celltype

    @lifecycle_checked
    def set_compartment_parameters(group_id, coupling_up, coupling_down):
        """Set the coupling constants of a group taking part in compartment links."""
        group = _regular_group(simulator.state, group_id, "set_compartment_parameters")
        if coupling_up < 0 or coupling_down < 0:
            raise errors.InvalidParameterValueError(
                "Coupling constants must be non-negative (got %g, %g)" % (coupling_up, coupling_down))
        group.compartment_parameters = {"coupling_up": float(coupling_up),
                                        "coupling_down": float(coupling_down)}

    @lifecycle_checked
    def connect_compartments(lower, upper):
        """
        Couple two equally sized regular groups as neighbouring compartments,
        neuron by neuron. A group may take part in at most four links.
        """
        state = simulator.state
        lower_group = _regular_group(state, lower, "connect_compartments")
        upper_group = _regular_group(state, upper, "connect_compartments")
        if lower == upper:
            raise errors.InvalidTopologyError("Cannot couple group '%s' to itself" % lower_group.label)
        if lower_group.size != upper_group.size:
            raise errors.InvalidTopologyError(
                "Compartment groups must have the same size (%d != %d)" % (lower_group.size, upper_group.size))
        if state.has_compartment_link(lower, upper):
            raise errors.InvalidTopologyError(
                "Groups '%s' and '%s' are already coupled" % (lower_group.label, upper_group.label))
        if (state.find_connection(lower, upper) is not None
                or state.find_connection(upper, lower) is not None):
            raise errors.InvalidTopologyError(
                "Groups '%s' and '%s' are connected synaptically and cannot also be coupled" % (
                    lower_group.label, upper_group.label))
        for group in (lower_group, upper_group):
            if state.count_compartment_links(group.id) >= simulator.MAX_COMPARTMENT_LINKS:
                raise errors.InvalidTopologyError(
                    "Group '%s' already takes part in %d compartment links" % (
                        group.label, simulator.MAX_COMPARTMENT_LINKS))
        state.compartment_links.append((lower, upper))

    @lifecycle_checked
    def set_conductances(enabled=True, **time_constants):
        """
        Switch between conductance-based (COBA) and current-based (CUBA)
        synapses. `time_constants` are parameters of `Conductances`.
        """
        simulator.state.conductances = Conductances(**time_constants) if enabled else None

    @lifecycle_checked
    def set_stdp(group_id, enabled=True, timing_dependence=None):
        """
        Enable STDP on the plastic connections onto a group. The group must
        receive at least one plastic connection by the time the network is
        finalized.
        """
        group = _regular_group(simulator.state, group_id, "set_stdp")
        group.stdp = (timing_dependence or SpikePairRule()) if enabled else None

    @lifecycle_checked
    def set_homeostasis(group_id, enabled=True, homeostasis=None):
        group = _regular_group(simulator.state, group_id, "set_homeostasis")
        group.homeostasis = (homeostasis or Homeostasis()) if enabled else None
        if not enabled:
            group.base_firing_rate = None

    @lifecycle_checked
    def set_homeo_base_firing_rate(group_id, rate, rate_sd=0.0):
        """Set the target firing rate of homeostasis, which must already be enabled."""
        group = _regular_group(simulator.state, group_id, "set_homeo_base_firing_rate")
        if group.homeostasis is None:
            raise errors.InvalidTopologyError(
                "Homeostasis must be enabled for group '%s' before setting its base firing rate" % group.label)
        group.base_firing_rate = HomeostaticBaseRate(rate=rate, rate_sd=rate_sd)

    @lifecycle_checked
    def set_spike_generator(group_id, generator):
        group = simulator.state.get_group(group_id)
        if not group.is_spike_generator:
            raise errors.InvalidParameterValueError(
                "Group '%s' is not a spike generator group" % group.label)
        if not isinstance(generator, SpikeGenerator):
            raise errors.InvalidParameterValueError(
                "generator must be a SpikeGenerator, not %s" % type(generator).__name__)
        group.spike_generator = generator

    @lifecycle_checked
    def set_integrator(integrator):
        if not isinstance(integrator, Integrator):
            raise errors.InvalidParameterValueError(
                "integrator must be an Integrator, not %s" % type(integrator).__name__)
        simulator.state.integrator = integrator

    @lifecycle_checked
    def set_default_save_options(filename, save_synapse_info=True):
        """Save the network to `filename` when end() is called."""
        simulator.state.save_options = (filename, save_synapse_info)

    @lifecycle_checked
    def setup_network():
        """
        Validate the network and allocate the weight store. Moves the lifecycle
        from BUILD to READY.
        """
        simulator.state.setup_network()

    return (set_neuron_parameters, set_compartment_parameters, connect_compartments,
            set_conductances, set_stdp, set_homeostasis, set_homeo_base_firing_rate,
            set_spike_generator, set_integrator, set_default_save_options, setup_network)


def build_weight_access(simulator):
    lifecycle_checked = build_lifecycle_check(simulator)

    @lifecycle_checked
    def get_weight_range(conn_id):
        """Return the RangeWeight of a connection."""
        return simulator.state.get_connection(conn_id).weight

    @lifecycle_checked
    def get_delay_range(conn_id):
        """Return the RangeDelay of a connection."""
        return simulator.state.get_connection(conn_id).delay

    @lifecycle_checked
    def get_weight(conn_id, pre, post):
        """Return the weight of one synapse, NaN if it does not exist."""
        return simulator.state.store.get_weight(conn_id, pre, post)

    @lifecycle_checked
    def get_weight_matrix(conn_id):
        """Return a copy of the (pre, post) weight matrix, NaN for absent synapses."""
        return simulator.state.store.get_weights(conn_id)

    @lifecycle_checked
    def get_num_synapses(conn_id=None):
        store = simulator.state.store
        if conn_id is None:
            return store.n_synapses
        return store.synapses(conn_id).n_synapses

    @lifecycle_checked
    def bias_weights(conn_id, delta, use_absolute_value=False):
        """
        Add `delta` to every weight of a connection, or set every weight to
        `delta` if `use_absolute_value` is True, clamping into the weight
        range.
        """
        simulator.state.store.bias(conn_id, delta, use_absolute_value)

    @lifecycle_checked
    def scale_weights(conn_id, factor, use_absolute_value=False):
        """
        Multiply every weight of a connection by `factor` (>= 0), or set every
        weight to `factor` if `use_absolute_value` is True, clamping into the
        weight range.
        """
        simulator.state.store.scale(conn_id, factor, use_absolute_value)

    @lifecycle_checked
    def set_weight(conn_id, pre, post, value, use_absolute_value=False):
        """Set the weight of one synapse to `value` (>= 0), clamped into the weight range."""
        simulator.state.store.set_weight(conn_id, pre, post, value, use_absolute_value)

    return (get_weight_range, get_delay_range, get_weight, get_weight_matrix,
            get_num_synapses, bias_weights, scale_weights, set_weight)


def build_queries(simulator):
    lifecycle_checked = build_lifecycle_check(simulator)

    @lifecycle_checked
    def get_num_groups():
        return len(simulator.state.groups)

    @lifecycle_checked
    def get_num_neurons(kind=None, polarity=None):
        """
        Return the number of neurons, optionally only those of one kind
        ('regular' or 'generator') and/or one polarity.
        """
        return sum(g.size for g in simulator.state.groups
                   if (kind is None or g.kind == kind)
                   and (polarity is None or g.polarity == polarity))

    @lifecycle_checked
    def get_group_num_neurons(group_id):
        return simulator.state.get_group(group_id).size

    @lifecycle_checked
    def get_group_name(group_id):
        return simulator.state.get_group(group_id).label

    @lifecycle_checked
    def is_spike_generator_group(group_id):
        return simulator.state.get_group(group_id).is_spike_generator

    @lifecycle_checked
    def get_connection_id(pre, post):
        """Return the id of the connection from `pre` to `post`, or None."""
        connection = simulator.state.find_connection(pre, post)
        return connection.id if connection is not None else None

    @lifecycle_checked
    def get_group_id(label):
        """Return the id of the group named `label`, or None."""
        for group in simulator.state.groups:
            if group.label == label:
                return group.id
        return None

    @lifecycle_checked
    def get_group_grid3d(group_id):
        return simulator.state.get_group(group_id).grid

    @lifecycle_checked
    def get_neuron_location3d(neuron_id, group_id=None):
        """
        Return the Point3D of a neuron, given either its global id or, if
        `group_id` is given, its index within that group.
        """
        state = simulator.state
        if group_id is not None:
            return state.get_group(group_id).location(neuron_id)
        for group in state.groups:
            if group.first_id <= neuron_id <= group.last_id:
                return group.location(neuron_id - group.first_id)
        raise errors.InvalidIndexError(
            "Neuron id %r out of range [0, %d)" % (neuron_id, state.num_neurons))

    @lifecycle_checked
    def get_group_start_neuron_id(group_id):
        return simulator.state.get_group(group_id).first_id

    @lifecycle_checked
    def get_group_end_neuron_id(group_id):
        return simulator.state.get_group(group_id).last_id

    return (get_num_groups, get_num_neurons, get_group_num_neurons, get_group_name,
            is_spike_generator_group, get_connection_id, get_group_id, get_group_grid3d,
            get_neuron_location3d, get_group_start_neuron_id, get_group_end_neuron_id)


def build_runtime_control(simulator):
    lifecycle_checked = build_lifecycle_check(simulator)

    @lifecycle_checked
    def set_external_current(group_id, current):
        """
        Inject a constant current (a single value or one value per neuron)
        into a regular group, from the next tick on.
        """
        group = _regular_group(simulator.state, group_id, "set_external_current")
        current = np.asarray(current, dtype=float)
        if current.ndim == 0:
            current = np.full(group.size, float(current))
        elif current.shape != (group.size,):
            raise errors.InvalidDimensionsError(
                "Expected %d current values, got %s" % (group.size, current.shape))
        group.external_current = current

    @lifecycle_checked
    def start_testing(update_weights=False):
        """
        Freeze plasticity: weight updates by the integrator are discarded
        until stop_testing() unless `update_weights` is True.
        """
        simulator.state.testing = True
        simulator.state.update_weights_while_testing = update_weights
        simulator.state.store.freeze(not update_weights)

    @lifecycle_checked
    def stop_testing():
        simulator.state.testing = False
        simulator.state.update_weights_while_testing = True
        simulator.state.store.freeze(False)

    return set_external_current, start_testing, stop_testing


def build_monitoring(simulator):
    lifecycle_checked = build_lifecycle_check(simulator)

    @lifecycle_checked
    def set_connection_monitor(pre, post, filename="default"):
        """
        Create a ConnectionMonitor for the connection from group `pre` to
        group `post` and return it.

        `filename` is "default" for results/conn_<pre>_<post>.dat, None or
        "NULL" to keep no weight log, or a path whose directory exists.
        """
        state = simulator.state
        connection = state.find_connection(pre, post)
        if connection is None:
            raise errors.ConnectionError(
                "Groups %d and %d are not connected" % (pre, post))
        if connection.id in state.monitors:
            raise errors.RecordingError("A connection monitor already exists", connection)
        monitor = ConnectionMonitor(connection, state, resolve_filename(filename, connection))
        state.monitors[connection.id] = monitor
        return monitor

    return set_connection_monitor


def build_persistence(simulator):
    lifecycle_checked = build_lifecycle_check(simulator)

    @lifecycle_checked
    def save_simulation(filename, save_synapse_info=True):
        """Save the network and its weights to `filename` (a path or binary file object)."""
        save_network(simulator.state, filename, save_synapse_info)

    @lifecycle_checked
    def load_simulation(filename):
        """
        Load weights saved by save_simulation() into the network being
        declared. Groups and connections must already be declared exactly as
        in the saved network; the saved synapses replace the generated ones
        when the network is finalized.
        """
        load_network(simulator.state, filename)

    return save_simulation, load_simulation
