# encoding: utf-8
"""
Common implementation of the Group class: a named set of neurons sharing
type and polarity, laid out on a 3D grid.

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

import logging

from .. import errors
from ..space import as_grid

logger = logging.getLogger("pySNN")

EXCITATORY = "excitatory"
INHIBITORY = "inhibitory"
POLARITIES = (EXCITATORY, INHIBITORY)


class Group(object):
    """
    A group of neurons.

    Arguments:
        `id`:
            the group id, a small integer assigned in order of creation.
        `label`:
            a unique, non-empty name.
        `size_or_grid`:
            number of neurons, a (x, y, z) tuple or a Grid3D.
        `polarity`:
            'excitatory' or 'inhibitory'.
        `is_spike_generator`:
            whether this is an input-only group whose spikes come from a
            spike generator rather than from neuron dynamics.
        `first_id`:
            the global id of the first neuron of the group.
    """

    def __init__(self, id, label, size_or_grid, polarity=EXCITATORY,
                 is_spike_generator=False, first_id=0):
        if not label:
            raise errors.InvalidParameterValueError("Group name must not be empty")
        if polarity not in POLARITIES:
            raise errors.InvalidParameterValueError(
                "Polarity must be one of %s, not %r" % (POLARITIES, polarity))
        self.id = id
        self.label = label
        self.grid = as_grid(size_or_grid)
        self.polarity = polarity
        self.is_spike_generator = is_spike_generator
        self.first_id = first_id
        self.celltype = None
        self.compartment_parameters = None
        self.stdp = None
        self.homeostasis = None
        self.base_firing_rate = None
        self.spike_generator = None
        self.external_current = None

    @property
    def size(self):
        return self.grid.N

    @property
    def last_id(self):
        return self.first_id + self.size - 1

    @property
    def is_regular(self):
        return not self.is_spike_generator

    @property
    def kind(self):
        return "generator" if self.is_spike_generator else "regular"

    def __len__(self):
        return self.size

    def __repr__(self):
        return 'Group(%d, "%s", %r)' % (self.id, self.label, self.grid)

    def location(self, index):
        """Return the Point3D of neuron `index` (local to the group)."""
        return self.grid.location(index)

    def describe(self):
        return "%s group %d '%s' of %d %s neurons on %r" % (
            self.kind, self.id, self.label, self.size, self.polarity, self.grid)

    def structure(self):
        """The properties that must match for a saved network to be loaded."""
        return {"id": self.id, "label": self.label, "grid": list(self.grid.shape),
                "polarity": self.polarity, "kind": self.kind}
