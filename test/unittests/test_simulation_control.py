"""
Tests of simulation set-up and control and of the lifecycle state machine.

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

import unittest

import pySNN as sim
from pySNN import errors
from pySNN.common.control import LEGAL_STATES, LifecycleState, Lifecycle

BUILD, READY, RUNNING = LifecycleState.BUILD, LifecycleState.READY, LifecycleState.RUNNING


def build_small_network():
    inp = sim.create_spike_generator_group("input", 5)
    out = sim.create_group("output", 5)
    sim.set_neuron_parameters(out, sim.Izhikevich())
    conn = sim.connect(inp, out, sim.AllToAllConnector(),
                       weight=sim.RangeWeight(0.0, 0.5, 1.0), plastic=True)
    return inp, out, conn


class TestSimulationControl(unittest.TestCase):

    def tearDown(self):
        sim.end()

    def test_setup(self):
        self.assertRaises(Exception, sim.setup, min_delay=2.0, max_delay=1.0)
        self.assertRaises(Exception, sim.setup, mindelay=1.0)
        self.assertRaises(Exception, sim.setup, maxdelay=10.0)
        self.assertRaises(Exception, sim.setup, dt=0.1)
        self.assertRaises(errors.InvalidParameterValueError, sim.setup, timestep=0.1)

    def test_setup_clears_network(self):
        sim.setup()
        build_small_network()
        sim.setup()
        self.assertEqual(sim.get_num_groups(), 0)
        self.assertEqual(sim.get_lifecycle_state(), BUILD)

    def test_run(self):
        sim.setup()
        build_small_network()
        sim.setup_network()
        self.assertEqual(sim.run(100.0), 100)
        self.assertEqual(sim.run(100.0), 200)
        self.assertEqual(sim.get_current_time(), 200.0)

    def test_run_until(self):
        sim.setup()
        build_small_network()
        sim.setup_network()
        sim.run_until(250.0)
        self.assertEqual(sim.get_current_time(), 250.0)
        self.assertRaises(ValueError, sim.run_until, 100.0)

    def test_run_negative_time(self):
        sim.setup()
        build_small_network()
        sim.setup_network()
        self.assertRaises(ValueError, sim.run, -1)

    def test_run_rounds_fractional_time(self):
        sim.setup()
        build_small_network()
        sim.setup_network()
        with self.assertWarns(errors.RoundingWarning):
            sim.run(10.4)
        self.assertEqual(sim.get_current_time(), 10.0)

    def test_time_step(self):
        sim.setup()
        self.assertEqual(sim.get_time_step(), 1.0)


class TestLifecycle(unittest.TestCase):

    def setUp(self):
        sim.setup()

    def tearDown(self):
        sim.end()

    def test_initial_state_is_build(self):
        self.assertEqual(sim.get_lifecycle_state(), BUILD)

    def test_transitions(self):
        build_small_network()
        sim.setup_network()
        self.assertEqual(sim.get_lifecycle_state(), READY)
        sim.run(0)
        self.assertEqual(sim.get_lifecycle_state(), RUNNING)
        sim.run(10)
        self.assertEqual(sim.get_lifecycle_state(), RUNNING)

    def test_run_in_build_state(self):
        build_small_network()
        self.assertRaises(errors.LifecycleError, sim.run, 1000)

    def test_setup_network_twice(self):
        build_small_network()
        sim.setup_network()
        self.assertRaises(errors.LifecycleError, sim.setup_network)

    def test_build_operations_after_setup_network(self):
        inp, out, conn = build_small_network()
        sim.setup_network()
        self.assertRaises(errors.LifecycleError, sim.create_group, "late", 3)
        self.assertRaises(errors.LifecycleError, sim.create_spike_generator_group, "late", 3)
        self.assertRaises(errors.LifecycleError, sim.connect, out, out,
                          sim.AllToAllConnector(), weight=sim.RangeWeight(0.1))
        self.assertRaises(errors.LifecycleError, sim.set_neuron_parameters, out, sim.Izhikevich())
        self.assertRaises(errors.LifecycleError, sim.set_stdp, out)
        self.assertRaises(errors.LifecycleError, sim.set_conductances)
        self.assertRaises(errors.LifecycleError, sim.load_simulation, "network.npz")

    def test_mutation_requires_running_state(self):
        inp, out, conn = build_small_network()
        self.assertRaises(errors.LifecycleError, sim.bias_weights, conn, 0.1)
        sim.setup_network()
        self.assertRaises(errors.LifecycleError, sim.bias_weights, conn, 0.1)
        self.assertRaises(errors.LifecycleError, sim.scale_weights, conn, 0.5)
        self.assertRaises(errors.LifecycleError, sim.set_weight, conn, 0, 0, 0.5)
        sim.run(0)
        sim.bias_weights(conn, 0.1)
        sim.scale_weights(conn, 0.5)
        sim.set_weight(conn, 0, 0, 0.5)

    def test_connection_monitor_only_in_ready_state(self):
        inp, out, conn = build_small_network()
        self.assertRaises(errors.LifecycleError, sim.set_connection_monitor, inp, out, None)
        sim.setup_network()
        sim.run(0)
        self.assertRaises(errors.LifecycleError, sim.set_connection_monitor, inp, out, None)

    def test_queries_after_build(self):
        inp, out, conn = build_small_network()
        self.assertRaises(errors.LifecycleError, sim.get_group_id, "input")
        self.assertRaises(errors.LifecycleError, sim.get_group_grid3d, inp)
        self.assertRaises(errors.LifecycleError, sim.get_num_synapses)
        self.assertRaises(errors.LifecycleError, sim.save_simulation, "network.npz")
        sim.setup_network()
        self.assertEqual(sim.get_group_id("input"), inp)
        self.assertIsNone(sim.get_group_id("nonexistent"))
        self.assertEqual(sim.get_num_synapses(), 25)

    def test_ranges_queryable_in_every_state(self):
        inp, out, conn = build_small_network()
        expected = sim.RangeWeight(0.0, 0.5, 1.0)
        self.assertEqual(sim.get_weight_range(conn), expected)
        self.assertEqual(sim.get_delay_range(conn), sim.RangeDelay(1))
        sim.setup_network()
        self.assertEqual(sim.get_weight_range(conn), expected)
        sim.run(10)
        self.assertEqual(sim.get_weight_range(conn), expected)
        self.assertEqual(sim.get_delay_range(conn), sim.RangeDelay(1))

    def test_error_message(self):
        build_small_network()
        try:
            sim.run(10)
        except errors.LifecycleError as err:
            self.assertEqual(str(err), "run() cannot be called in the BUILD state (legal in: READY, RUNNING)")
        else:
            self.fail("LifecycleError not raised")


class DriftIntegrator(sim.Integrator):
    """Increases every plastic weight by a fixed amount each tick."""

    def __init__(self, drift=1e-3):
        self.drift = drift

    def step(self, state, t, spikes):
        for c in state.connections:
            if c.plastic:
                state.store.write_weights(c.id, state.store.synapses(c.id).weight + self.drift)


class TestRuntimeControl(unittest.TestCase):

    def setUp(self):
        sim.setup(integrator=DriftIntegrator())
        self.inp, self.out, self.conn = build_small_network()
        sim.setup_network()

    def tearDown(self):
        sim.end()

    def test_testing_freezes_weights(self):
        sim.run(100)
        self.assertAlmostEqual(sim.get_weight(self.conn, 0, 0), 0.6, places=4)
        sim.start_testing()
        sim.run(100)
        self.assertAlmostEqual(sim.get_weight(self.conn, 0, 0), 0.6, places=4)
        # explicit mutations still apply
        sim.bias_weights(self.conn, -0.1)
        self.assertAlmostEqual(sim.get_weight(self.conn, 0, 0), 0.5, places=4)
        sim.stop_testing()
        sim.run(100)
        self.assertAlmostEqual(sim.get_weight(self.conn, 0, 0), 0.6, places=4)

    def test_testing_with_weight_updates(self):
        sim.start_testing(update_weights=True)
        sim.run(100)
        self.assertAlmostEqual(sim.get_weight(self.conn, 0, 0), 0.6, places=4)

    def test_testing_requires_network(self):
        sim.setup(integrator=DriftIntegrator())
        build_small_network()
        self.assertRaises(errors.LifecycleError, sim.start_testing)
        self.assertRaises(errors.LifecycleError, sim.stop_testing)

    def test_external_current_scalar(self):
        sim.set_external_current(self.out, 5.0)
        group = sim.simulator.state.get_group(self.out)
        self.assertEqual(group.external_current.tolist(), [5.0] * 5)

    def test_external_current_per_neuron(self):
        sim.set_external_current(self.out, [1.0, 2.0, 3.0, 4.0, 5.0])
        group = sim.simulator.state.get_group(self.out)
        self.assertEqual(group.external_current.tolist(), [1.0, 2.0, 3.0, 4.0, 5.0])

    def test_external_current_wrong_shape(self):
        self.assertRaises(errors.InvalidDimensionsError, sim.set_external_current, self.out, [1.0, 2.0])
        self.assertRaises(errors.InvalidDimensionsError, sim.set_external_current, self.out,
                          [[1.0] * 5])

    def test_external_current_on_generator_group(self):
        self.assertRaises(errors.InvalidParameterValueError, sim.set_external_current, self.inp, 1.0)

    def test_external_current_requires_network(self):
        sim.setup()
        inp, out, conn = build_small_network()
        self.assertRaises(errors.LifecycleError, sim.set_external_current, out, 1.0)


def test_legality_table_covers_every_state():
    for operation, states in LEGAL_STATES.items():
        assert states, operation
        assert states <= set(LifecycleState)


def test_lifecycle_check():
    lifecycle = Lifecycle()
    lifecycle.check("connect")
    lifecycle.finalize()
    lifecycle.check("set_connection_monitor")
    lifecycle.start()
    assert lifecycle.state is RUNNING
    lifecycle.check("scale_weights")
    try:
        lifecycle.check("connect")
    except errors.LifecycleError as err:
        assert err.operation == "connect"
        assert err.state is RUNNING
    else:
        raise AssertionError("LifecycleError not raised")


def test_start_is_idempotent():
    lifecycle = Lifecycle()
    lifecycle.finalize()
    lifecycle.start()
    lifecycle.start()
    assert lifecycle.state is RUNNING
