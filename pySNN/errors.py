# encoding: utf-8
"""
Defines exceptions for the pySNN API

    LifecycleError
    InvalidParameterValueError
    InvalidDimensionsError
    InvalidIndexError
    ConnectionError
    InvalidTopologyError
    InvalidWeightError
    RoundingWarning
    NothingToWriteError
    RecordingError

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""


class LifecycleError(RuntimeError):
    """
    An operation was called in a lifecycle state in which it is not legal.
    """

    def __init__(self, operation, state, allowed):
        Exception.__init__(self)
        self.operation = operation
        self.state = state
        self.allowed = allowed

    def __str__(self):
        return "%s() cannot be called in the %s state (legal in: %s)" % (
            self.operation,
            self.state.name,
            ", ".join(sorted(s.name for s in self.allowed)))


class InvalidParameterValueError(ValueError):
    """Inappropriate parameter value"""
    pass


class InvalidDimensionsError(ValueError):
    """Argument has inappropriate shape/dimensions."""
    pass


class InvalidIndexError(IndexError):
    """Group, connection or neuron index out of range."""
    pass


class ConnectionError(Exception):
    """Attempt to create an invalid connection or access a non-existent connection."""
    pass


class InvalidTopologyError(Exception):
    """The network description violates a structural constraint."""
    pass


class InvalidWeightError(ValueError):
    """Invalid value for the synaptic weight."""
    pass


class RoundingWarning(Warning):
    """The argument has been rounded to a lower level of precision by the simulator."""
    pass


class NothingToWriteError(IOError):
    """There is no data available to write."""
    pass


class RecordingError(Exception):
    """Attempt to monitor a connection in a way that is not possible."""

    def __init__(self, message, connection=None):
        Exception.__init__(self, message)
        self.connection = connection

    def __str__(self):
        msg = self.args[0]
        if self.connection is not None:
            msg += " (connection %s)" % self.connection.label
        return msg
