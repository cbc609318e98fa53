"""
Tests of the integrator and spike generator interfaces as driven by the
simulation clock.

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

import unittest

import numpy as np
import pytest

import pySNN as sim
from pySNN import errors


class RecordingIntegrator(sim.Integrator):

    def __init__(self):
        self.prepared = False
        self.ticks = []
        self.spikes = {}

    def prepare(self, state):
        self.prepared = True

    def step(self, state, t, spikes):
        self.ticks.append(t)
        for group_id, neurons in spikes.items():
            self.spikes.setdefault(group_id, []).append((t, list(neurons)))


class BrokenGenerator(sim.SpikeGenerator):

    def next_spike_time(self, group_id, neuron_id, current_time, last_scheduled, end_of_slice):
        return 0.0


class StaggeredGenerator(sim.SpikeGenerator):
    """Neuron n fires once, at t = 2n ms."""

    def next_spike_time(self, group_id, neuron_id, current_time, last_scheduled, end_of_slice):
        if last_scheduled is None:
            return 2.0 * neuron_id
        return float("inf")


class TestSimulationClock(unittest.TestCase):

    def setUp(self):
        self.integrator = RecordingIntegrator()
        sim.setup(integrator=self.integrator)
        self.inp = sim.create_spike_generator_group("input", 3)
        self.out = sim.create_group("output", 3)
        sim.set_neuron_parameters(self.out, sim.Izhikevich())
        sim.connect(self.inp, self.out, sim.OneToOneConnector(), weight=sim.RangeWeight(0.5))

    def tearDown(self):
        sim.end()

    def test_one_step_per_tick(self):
        sim.setup_network()
        self.assertTrue(self.integrator.prepared)
        sim.run(5)
        sim.run_until(8)
        self.assertEqual(self.integrator.ticks, list(range(8)))
        self.assertEqual(sim.get_current_time(), 8.0)

    def test_periodic_generator(self):
        sim.set_spike_generator(self.inp, sim.PeriodicSpikeGenerator(rate=250.0))
        sim.setup_network()
        sim.run(13)
        self.assertEqual(self.integrator.spikes[self.inp],
                         [(0, [0, 1, 2]), (4, [0, 1, 2]), (8, [0, 1, 2]), (12, [0, 1, 2])])

    def test_periodic_generator_without_spike_at_zero(self):
        sim.set_spike_generator(self.inp, sim.PeriodicSpikeGenerator(rate=100.0, spike_at_zero=False))
        sim.setup_network()
        sim.run(35)
        self.assertEqual([t for t, neurons in self.integrator.spikes[self.inp]], [10, 20, 30])

    def test_per_neuron_spike_times(self):
        sim.set_spike_generator(self.inp, StaggeredGenerator())
        sim.setup_network()
        sim.run(10)
        self.assertEqual(self.integrator.spikes[self.inp], [(0, [0]), (2, [1]), (4, [2])])

    def test_non_increasing_spike_times(self):
        sim.set_spike_generator(self.inp, BrokenGenerator())
        sim.setup_network()
        self.assertRaises(errors.InvalidParameterValueError, sim.run, 2)

    def test_generator_only_for_generator_groups(self):
        self.assertRaises(errors.InvalidParameterValueError,
                          sim.set_spike_generator, self.out, sim.PeriodicSpikeGenerator(10.0))
        self.assertRaises(errors.InvalidParameterValueError,
                          sim.set_spike_generator, self.inp, "poisson")

    def test_set_integrator(self):
        self.assertRaises(errors.InvalidParameterValueError, sim.set_integrator, object())
        other = RecordingIntegrator()
        sim.set_integrator(other)
        sim.setup_network()
        sim.run(3)
        self.assertEqual(other.ticks, [0, 1, 2])
        self.assertEqual(self.integrator.ticks, [])


def test_periodic_generator_rate():
    with pytest.raises(errors.InvalidParameterValueError):
        sim.PeriodicSpikeGenerator(0.0)
    gen = sim.PeriodicSpikeGenerator(40.0)
    assert gen.isi == 25.0
    assert gen.next_spike_time(0, 0, 0, None, 1000) == 0.0
    assert gen.next_spike_time(0, 0, 0, 25.0, 1000) == 50.0


def test_static_integrator_leaves_weights_unchanged():
    sim.setup()
    inp = sim.create_spike_generator_group("input", 2)
    out = sim.create_group("output", 2)
    sim.set_neuron_parameters(out, sim.Izhikevich())
    conn = sim.connect(inp, out, sim.AllToAllConnector(),
                       weight=sim.RangeWeight(0.0, 0.3, 1.0), plastic=True)
    sim.setup_network()
    sim.run(100)
    assert (sim.get_weight_matrix(conn) == np.float32(0.3)).all()
    sim.end()
