"""
Procedural API functions bound to the pySNN simulator state.

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

from . import simulator
from .common import procedural_api as api

create_group, create_spike_generator_group = api.build_create(simulator)

connect = api.build_connect(simulator)

(set_neuron_parameters, set_compartment_parameters, connect_compartments,
 set_conductances, set_stdp, set_homeostasis, set_homeo_base_firing_rate,
 set_spike_generator, set_integrator, set_default_save_options,
 setup_network) = api.build_network_description(simulator)

(get_weight_range, get_delay_range, get_weight, get_weight_matrix,
 get_num_synapses, bias_weights, scale_weights, set_weight) = api.build_weight_access(simulator)

(get_num_groups, get_num_neurons, get_group_num_neurons, get_group_name,
 is_spike_generator_group, get_connection_id, get_group_id, get_group_grid3d,
 get_neuron_location3d, get_group_start_neuron_id,
 get_group_end_neuron_id) = api.build_queries(simulator)

set_external_current, start_testing, stop_testing = api.build_runtime_control(simulator)

set_connection_monitor = api.build_monitoring(simulator)

save_simulation, load_simulation = api.build_persistence(simulator)

__all__ = [
    "create_group", "create_spike_generator_group", "connect",
    "set_neuron_parameters", "set_compartment_parameters", "connect_compartments",
    "set_conductances", "set_stdp", "set_homeostasis", "set_homeo_base_firing_rate",
    "set_spike_generator", "set_integrator", "set_default_save_options", "setup_network",
    "get_weight_range", "get_delay_range", "get_weight", "get_weight_matrix",
    "get_num_synapses", "bias_weights", "scale_weights", "set_weight",
    "get_num_groups", "get_num_neurons", "get_group_num_neurons", "get_group_name",
    "is_spike_generator_group", "get_connection_id", "get_group_id", "get_group_grid3d",
    "get_neuron_location3d", "get_group_start_neuron_id", "get_group_end_neuron_id",
    "set_external_current", "start_testing", "stop_testing",
    "set_connection_monitor", "save_simulation", "load_simulation",
]
