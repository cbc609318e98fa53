"""
Machinery for "standard models", i.e. neuron dynamics and plasticity rule
parameter sets that are handed to the integrator unchanged.

Classes:
    StandardModelType
    StandardCellType
    StandardSynapseType

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

from copy import deepcopy

from .. import errors


class StandardModelType(object):
    """Base class for standardized cell model and synapse model classes."""

    default_parameters = {}
    units = {}
    non_negative = ()
    positive = ()

    def __init__(self, **parameters):
        self.parameter_space = deepcopy(self.default_parameters)
        for name, value in parameters.items():
            if name not in self.default_parameters:
                raise errors.InvalidParameterValueError(
                    "%s is not a parameter of %s (valid parameters are: %s)" % (
                        name, self.__class__.__name__,
                        ", ".join(sorted(self.default_parameters))))
            self.parameter_space[name] = float(value)
        self.check_parameters()

    def check_parameters(self):
        for name in self.non_negative:
            if self.parameter_space[name] < 0:
                raise errors.InvalidParameterValueError(
                    "%s.%s must be non-negative, not %g" % (
                        self.__class__.__name__, name, self.parameter_space[name]))
        for name in self.positive:
            if self.parameter_space[name] <= 0:
                raise errors.InvalidParameterValueError(
                    "%s.%s must be positive, not %g" % (
                        self.__class__.__name__, name, self.parameter_space[name]))

    @classmethod
    def get_parameter_names(cls):
        return sorted(cls.default_parameters)

    def __getattr__(self, name):
        if name != "parameter_space" and name in self.default_parameters:
            return self.parameter_space[name]
        raise AttributeError(name)

    def describe(self):
        return "%s(%s)" % (self.__class__.__name__,
                           ", ".join("%s=%g" % item for item in sorted(self.parameter_space.items())))

    def __eq__(self, other):
        return type(self) is type(other) and self.parameter_space == other.parameter_space

    def __ne__(self, other):
        return not self.__eq__(other)


class StandardCellType(StandardModelType):
    """Base class for standardized neuron dynamics parameter sets."""
    pass


class StandardSynapseType(StandardModelType):
    """Base class for plasticity and receptor parameter sets."""
    pass
