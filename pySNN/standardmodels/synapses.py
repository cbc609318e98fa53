"""
Definition of plasticity and receptor parameter sets.

Classes:
    SpikePairRule   - exponential STDP window
    Homeostasis     - synaptic scaling towards a target firing rate
    Conductances    - receptor time constants for conductance-based synapses

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

from . import StandardSynapseType
from .. import errors


class SpikePairRule(StandardSynapseType):
    """
    The amplitude of the weight change depends on the time difference between
    pre- and post-synaptic spikes, decaying exponentially on both sides of the
    window.
    """

    default_parameters = {
        'tau_plus': 20.0,   # (ms)
        'tau_minus': 20.0,  # (ms)
        'A_plus': 0.01,
        'A_minus': 0.012,
    }
    positive = ('tau_plus', 'tau_minus')


class Homeostasis(StandardSynapseType):
    """
    Multiplicative scaling of all plastic weights onto a group, driving the
    average firing rate towards a base firing rate.
    """

    default_parameters = {
        'scale': 1.0,
        'avg_time_scale': 10.0,      # (s)
    }
    positive = ('avg_time_scale',)
    non_negative = ('scale',)


class HomeostaticBaseRate(StandardSynapseType):
    """Target firing rate of homeostasis, in spikes/s."""

    default_parameters = {
        'rate': 10.0,       # (Hz)
        'rate_sd': 0.0,
    }
    positive = ('rate',)
    non_negative = ('rate_sd',)


class Conductances(StandardSynapseType):
    """
    Time constants of the four receptor types. A rise time of zero means an
    instantaneous rise.
    """

    default_parameters = {
        'tau_ampa': 5.0,        # (ms)
        'tau_nmda': 150.0,      # (ms)
        'tau_gabaa': 6.0,       # (ms)
        'tau_gabab': 150.0,     # (ms)
        'tau_rise_nmda': 0.0,   # (ms)
        'tau_rise_gabab': 0.0,  # (ms)
    }
    positive = ('tau_ampa', 'tau_nmda', 'tau_gabaa', 'tau_gabab')
    non_negative = ('tau_rise_nmda', 'tau_rise_gabab')

    def check_parameters(self):
        StandardSynapseType.check_parameters(self)
        p = self.parameter_space
        if p['tau_rise_nmda'] == p['tau_nmda']:
            raise errors.InvalidParameterValueError(
                "NMDA rise and decay time constants must differ")
        if p['tau_rise_gabab'] == p['tau_gabab']:
            raise errors.InvalidParameterValueError(
                "GABAb rise and decay time constants must differ")
