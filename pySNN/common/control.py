# encoding: utf-8
"""
Common implementation of functions for simulation set-up and control

This module contains:
  * the lifecycle state machine, with a single table giving the states in
    which each API operation is legal;
  * partial implementations of API functions (in some cases only the
    docstring is intended to be reused);
  * function factories for generating API functions bound to a simulator
    module.

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

import enum
import functools
import logging

from .. import errors

DEFAULT_TIMESTEP = 1.0
DEFAULT_MIN_DELAY = 1.0
DEFAULT_MAX_DELAY = 20.0
DEFAULT_SEED = 42

logger = logging.getLogger("pySNN")


class LifecycleState(enum.Enum):
    """The phases of a simulation. No transition is reversible."""
    BUILD = 1
    READY = 2
    RUNNING = 3


BUILD, READY, RUNNING = LifecycleState.BUILD, LifecycleState.READY, LifecycleState.RUNNING

_BUILD_ONLY = frozenset([BUILD])
_READY_ONLY = frozenset([READY])
_RUNNING_ONLY = frozenset([RUNNING])
_AFTER_BUILD = frozenset([READY, RUNNING])
_ANY = frozenset(LifecycleState)

LEGAL_STATES = {
    # network description
    "create_group": _BUILD_ONLY,
    "create_spike_generator_group": _BUILD_ONLY,
    "set_neuron_parameters": _BUILD_ONLY,
    "connect": _BUILD_ONLY,
    "set_compartment_parameters": _BUILD_ONLY,
    "connect_compartments": _BUILD_ONLY,
    "set_conductances": _BUILD_ONLY,
    "set_stdp": _BUILD_ONLY,
    "set_homeostasis": _BUILD_ONLY,
    "set_homeo_base_firing_rate": _BUILD_ONLY,
    "set_spike_generator": _BUILD_ONLY,
    "set_integrator": _BUILD_ONLY,
    "set_default_save_options": _BUILD_ONLY,
    "load_simulation": _BUILD_ONLY,
    "setup_network": _BUILD_ONLY,
    # instrumentation
    "set_connection_monitor": _READY_ONLY,
    # running
    "run": _AFTER_BUILD,
    "run_until": _AFTER_BUILD,
    "save_simulation": _AFTER_BUILD,
    "set_external_current": _AFTER_BUILD,
    "start_testing": _AFTER_BUILD,
    "stop_testing": _AFTER_BUILD,
    "get_group_id": _AFTER_BUILD,
    "get_group_grid3d": _AFTER_BUILD,
    "get_neuron_location3d": _AFTER_BUILD,
    "get_group_start_neuron_id": _AFTER_BUILD,
    "get_group_end_neuron_id": _AFTER_BUILD,
    "get_num_synapses": _AFTER_BUILD,
    "get_weight": _AFTER_BUILD,
    "get_weight_matrix": _AFTER_BUILD,
    # weight mutation
    "bias_weights": _RUNNING_ONLY,
    "scale_weights": _RUNNING_ONLY,
    "set_weight": _RUNNING_ONLY,
    # queries
    "get_weight_range": _ANY,
    "get_delay_range": _ANY,
    "get_lifecycle_state": _ANY,
    "get_num_groups": _ANY,
    "get_num_neurons": _ANY,
    "get_group_num_neurons": _ANY,
    "get_group_name": _ANY,
    "is_spike_generator_group": _ANY,
    "get_connection_id": _ANY,
    "get_current_time": _ANY,
    "get_time_step": _ANY,
}


class Lifecycle(object):
    """Tracks the lifecycle state and checks operations against LEGAL_STATES."""

    def __init__(self):
        self.state = BUILD

    def check(self, operation):
        allowed = LEGAL_STATES[operation]
        if self.state not in allowed:
            raise errors.LifecycleError(operation, self.state, allowed)

    def finalize(self):
        assert self.state is BUILD
        self.state = READY
        logger.info("Network finalized, lifecycle state is now READY")

    def start(self):
        if self.state is READY:
            self.state = RUNNING
            logger.info("Simulation started, lifecycle state is now RUNNING")


def build_lifecycle_check(simulator):
    """
    Return a decorator which checks, before every call, that the decorated
    API function is legal in the simulator's current lifecycle state. The
    function's name is its key in LEGAL_STATES.
    """
    def lifecycle_checked(func):
        assert func.__name__ in LEGAL_STATES, func.__name__

        @functools.wraps(func)
        def checked_func(*args, **kwargs):
            simulator.state.lifecycle.check(func.__name__)
            return func(*args, **kwargs)
        return checked_func
    return lifecycle_checked


class BaseState(object):
    """Base class for simulator State classes."""

    def __init__(self):
        """Initialize the simulator."""
        self.t = 0
        self.dt = DEFAULT_TIMESTEP
        self.min_delay = DEFAULT_MIN_DELAY
        self.max_delay = DEFAULT_MAX_DELAY
        self.lifecycle = Lifecycle()


def setup(timestep=DEFAULT_TIMESTEP, min_delay=DEFAULT_MIN_DELAY,
          max_delay=DEFAULT_MAX_DELAY, **extra_params):
    """
    Initialises/reinitialises the simulator. Any existing network structure is
    destroyed.

    `timestep`, `min_delay` and `max_delay` should all be in milliseconds. The
    time step is fixed at 1 ms.

    `extra_params` contains any keyword arguments that are required by a given
    simulator but not by others.
    """
    invalid_extra_params = ('mindelay', 'maxdelay', 'dt', 'time_step')
    for param in invalid_extra_params:
        if param in extra_params:
            raise Exception("%s is not a valid argument for setup()" % param)
    if timestep != DEFAULT_TIMESTEP:
        raise errors.InvalidParameterValueError(
            "Only a time step of %g ms is supported, not %g" % (DEFAULT_TIMESTEP, timestep))
    if min_delay > max_delay:
        raise errors.InvalidParameterValueError("min_delay has to be less than or equal to max_delay.")
    if min_delay < timestep:
        raise errors.InvalidParameterValueError(
            "min_delay (%g) must be greater than timestep (%g)" % (min_delay, timestep))


def build_run(simulator):
    lifecycle_checked = build_lifecycle_check(simulator)

    @lifecycle_checked
    def run_until(time_point):
        """
        Run the simulation until `time_point` (in ms). The first call moves the
        lifecycle from READY to RUNNING.
        """
        now = simulator.state.t
        if time_point - now < -simulator.state.dt / 2.0:  # allow for floating point error
            raise ValueError("Time %g is in the past (current time %g)" % (time_point, now))
        simulator.state.run_until(time_point)
        return simulator.state.t

    @lifecycle_checked
    def run(simtime):
        """
        Run the simulation for `simtime` ms. The first call moves the lifecycle
        from READY to RUNNING, even if `simtime` is zero.
        """
        if simtime < 0:
            raise ValueError("Cannot run for a negative time (%g ms)" % simtime)
        simulator.state.run_until(simulator.state.t + simtime)
        return simulator.state.t

    return run, run_until


def build_state_queries(simulator):
    lifecycle_checked = build_lifecycle_check(simulator)

    @lifecycle_checked
    def get_current_time():
        """Return the current time in the simulation (in milliseconds)."""
        return float(simulator.state.t)

    @lifecycle_checked
    def get_time_step():
        """Return the integration time step (in milliseconds)."""
        return simulator.state.dt

    @lifecycle_checked
    def get_lifecycle_state():
        """Return the current LifecycleState."""
        return simulator.state.lifecycle.state

    def get_min_delay():
        """Return the minimum allowed synaptic delay (in milliseconds)."""
        return simulator.state.min_delay

    def get_max_delay():
        """Return the maximum allowed synaptic delay (in milliseconds)."""
        return simulator.state.max_delay

    return get_current_time, get_time_step, get_lifecycle_state, get_min_delay, get_max_delay
