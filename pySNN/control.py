"""
Simulation set-up and control for the pySNN simulator.

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

import logging

from . import common, simulator

logger = logging.getLogger("pySNN")


def setup(timestep=common.DEFAULT_TIMESTEP, min_delay=common.DEFAULT_MIN_DELAY,
          max_delay=common.DEFAULT_MAX_DELAY, seed=common.DEFAULT_SEED,
          integrator=None, **extra_params):
    """
    Initialises/reinitialises the simulator. Any existing network structure is
    destroyed and the lifecycle returns to BUILD.

    `seed` initialises the random number generator used by connectors.
    `integrator` is an Integrator; by default a StaticIntegrator is used.
    """
    common.setup(timestep, min_delay, max_delay, **extra_params)
    simulator.state.clear(seed=seed, integrator=integrator)
    simulator.state.dt = timestep
    simulator.state.min_delay = min_delay
    simulator.state.max_delay = max_delay
    logger.info("pySNN set up with seed %s", seed)
    return 0


def end():
    """
    Write the trailing records of all connection monitors, save the network if
    default save options were given, and close all files.
    """
    simulator.state.end()


run, run_until = common.build_run(simulator)

get_current_time, get_time_step, get_lifecycle_state, get_min_delay, get_max_delay = \
    common.build_state_queries(simulator)
