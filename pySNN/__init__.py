"""
pySNN: the lifecycle and instrumentation core of a spiking neural network
simulator.

A network is declared (groups, connections, weight and delay ranges),
finalized, and then run in discrete 1 ms ticks. Weights can be mutated while
running, and ConnectionMonitors record how the weights of a connection
evolve, optionally to a binary weight log.

Typical use::

    import pySNN as sim

    sim.setup(seed=42)
    inp = sim.create_spike_generator_group("input", 10)
    out = sim.create_group("output", 10)
    sim.set_neuron_parameters(out, sim.Izhikevich())
    c = sim.connect(inp, out, sim.AllToAllConnector(),
                    weight=sim.RangeWeight(0.0, 0.01, 0.1), plastic=True)
    sim.setup_network()
    monitor = sim.set_connection_monitor(inp, out, "results/weights.dat")
    sim.run(1000)
    sim.scale_weights(c, 0.5)
    sim.end()

The lifecycle state machine is BUILD -> READY (setup_network()) -> RUNNING
(first run()). Calling an operation outside the states listed for it in
`pySNN.common.control.LEGAL_STATES` raises LifecycleError.

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

__version__ = "0.1.0"

from . import errors, random, space                            # noqa: F401
from .common import LifecycleState, EXCITATORY, INHIBITORY      # noqa: F401
from .space import Grid3D, Point3D, RadiusRF                    # noqa: F401
from .random import NumpyRNG                                    # noqa: F401
from .parameters import RangeWeight, RangeDelay                 # noqa: F401
from .connectors import (                                       # noqa: F401
    AllToAllConnector,
    OneToOneConnector,
    FixedProbabilityConnector,
    GaussianConnector,
    CallbackConnector,
)
from .standardmodels.cells import Izhikevich, Izhikevich9       # noqa: F401
from .standardmodels.synapses import (                          # noqa: F401
    SpikePairRule,
    Homeostasis,
    Conductances,
)
from .integrators import (                                      # noqa: F401
    Integrator,
    StaticIntegrator,
    SpikeGenerator,
    PeriodicSpikeGenerator,
)
from .recording import ConnectionMonitor                        # noqa: F401
from .control import (                                          # noqa: F401
    setup,
    end,
    run,
    run_until,
    get_current_time,
    get_time_step,
    get_lifecycle_state,
    get_min_delay,
    get_max_delay,
)
from .procedural_api import *                                   # noqa: F403, F401
