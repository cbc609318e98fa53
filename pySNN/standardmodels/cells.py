"""
Definition of the neuron dynamics parameter sets for the standard models.

Each parameter may be given a standard deviation (the `*_sd` parameters),
in which case the integrator draws per-neuron values from a normal
distribution.

Classes:
    Izhikevich    - four-parameter Izhikevich model
    Izhikevich9   - nine-parameter Izhikevich model

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

from . import StandardCellType


class Izhikevich(StandardCellType):
    """
    Izhikevich spiking model with a quadratic non-linearity according to:

    E. Izhikevich (2003), IEEE transactions on neural networks, 14(6)

       dv/dt = 0.04*v^2 + 5*v + 140 - u + I
       du/dt = a*(b*v - u)

    Synapses are modeled as Dirac delta currents (voltage step).
    """

    default_parameters = {
        'a': 0.02,       # (/ms)
        'b': 0.2,        # (/ms)
        'c': -65.0,      # (mV) aka 'v_reset'
        'd': 2.0,        # (mV/ms) Reset of the recovery variable.
        'a_sd': 0.0,
        'b_sd': 0.0,
        'c_sd': 0.0,
        'd_sd': 0.0,
    }
    units = {
        'a': '/ms',
        'b': '/ms',
        'c': 'mV',
        'd': 'mV/ms',
    }
    non_negative = ('a_sd', 'b_sd', 'c_sd', 'd_sd')


class Izhikevich9(StandardCellType):
    """
    Nine-parameter Izhikevich model (Izhikevich 2007, "Dynamical Systems in
    Neuroscience"):

       C dv/dt = k*(v - vr)*(v - vt) - u + I
       du/dt = a*(b*(v - vr) - u)
       if v >= vpeak: v = c, u = u + d
    """

    default_parameters = {
        'C': 100.0,      # (pF)
        'k': 0.7,
        'vr': -60.0,     # (mV)
        'vt': -40.0,     # (mV)
        'a': 0.03,       # (/ms)
        'b': -2.0,
        'vpeak': 35.0,   # (mV)
        'c': -50.0,      # (mV)
        'd': 100.0,
        'C_sd': 0.0,
        'k_sd': 0.0,
        'vr_sd': 0.0,
        'vt_sd': 0.0,
        'a_sd': 0.0,
        'b_sd': 0.0,
        'vpeak_sd': 0.0,
        'c_sd': 0.0,
        'd_sd': 0.0,
    }
    units = {
        'C': 'pF',
        'vr': 'mV',
        'vt': 'mV',
        'a': '/ms',
        'vpeak': 'mV',
        'c': 'mV',
    }
    positive = ('C',)
    non_negative = ('C_sd', 'k_sd', 'vr_sd', 'vt_sd', 'a_sd', 'b_sd',
                    'vpeak_sd', 'c_sd', 'd_sd')
