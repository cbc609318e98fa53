"""
Tests of the standard neuron and plasticity parameter sets.

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

import pytest

from pySNN import errors
from pySNN.standardmodels.cells import Izhikevich, Izhikevich9
from pySNN.standardmodels.synapses import (SpikePairRule, Homeostasis, HomeostaticBaseRate,
                                           Conductances)


def test_defaults_and_overrides():
    cell = Izhikevich(a=0.1, d=8)
    assert cell.a == 0.1
    assert cell.b == 0.2
    assert cell.d == 8.0
    assert cell.a_sd == 0.0
    assert Izhikevich() == Izhikevich()
    assert cell != Izhikevich()


def test_unknown_parameter():
    with pytest.raises(errors.InvalidParameterValueError):
        Izhikevich(tau_m=10.0)
    with pytest.raises(AttributeError):
        Izhikevich().tau_m


def test_parameter_constraints():
    with pytest.raises(errors.InvalidParameterValueError):
        Izhikevich(a_sd=-0.01)
    with pytest.raises(errors.InvalidParameterValueError):
        Izhikevich9(C=0.0)
    with pytest.raises(errors.InvalidParameterValueError):
        SpikePairRule(tau_plus=0.0)
    with pytest.raises(errors.InvalidParameterValueError):
        Homeostasis(avg_time_scale=-1.0)
    with pytest.raises(errors.InvalidParameterValueError):
        HomeostaticBaseRate(rate=0.0)


def test_conductance_time_constants():
    Conductances(tau_rise_nmda=2.0, tau_rise_gabab=10.0)
    with pytest.raises(errors.InvalidParameterValueError):
        Conductances(tau_nmda=100.0, tau_rise_nmda=100.0)
    with pytest.raises(errors.InvalidParameterValueError):
        Conductances(tau_gabab=0.0)


def test_describe():
    assert SpikePairRule().describe() == \
        "SpikePairRule(A_minus=0.012, A_plus=0.01, tau_minus=20, tau_plus=20)"
