# encoding: utf-8
"""
Defines the building blocks of the pySNN API that do not depend on the
simulator state.

Classes:
    Group
    Connection
    LifecycleState

Function-factories to generate API functions bound to a simulator module:
    build_run()
    build_state_queries()
    build_create()
    build_connect()
    build_network_description()
    build_weight_access()
    build_queries()
    build_runtime_control()
    build_monitoring()
    build_persistence()

Functions:
    setup()

Global constants:
    DEFAULT_MAX_DELAY
    DEFAULT_TIMESTEP
    DEFAULT_MIN_DELAY
    DEFAULT_SEED

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

from . import control                                                # noqa: F401
from .control import (setup, build_run, build_state_queries,         # noqa: F401
                      LifecycleState, LEGAL_STATES, DEFAULT_TIMESTEP,
                      DEFAULT_MIN_DELAY, DEFAULT_MAX_DELAY, DEFAULT_SEED)
from .populations import Group, EXCITATORY, INHIBITORY                # noqa: F401
from .projections import Connection                                  # noqa: F401
