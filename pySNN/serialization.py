"""
Functions for saving a running network to a file and loading it back into a
freshly declared network with the same structure.

The file is a numpy .npz archive holding a JSON metadata entry (groups,
connections and their ranges, simulation time), the synapse matrices of all
connections and the homeostasis accumulators.

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

import logging

from . import errors
from .parameters import RangeWeight, RangeDelay
from .recording.files import NumpyBinaryFile
from .weights import SynapseMatrix

logger = logging.getLogger("pySNN")

MAGIC = 0x5a4e
FORMAT_VERSION = 1


def save_network(state, filename, save_synapse_info=True):
    """
    Write the network of `state` to `filename` (a path or a binary file
    object).

    If `save_synapse_info` is False, only the structure is saved and the file
    cannot be used to restore weights.
    """
    metadata = {
        "magic": MAGIC,
        "format_version": FORMAT_VERSION,
        "time_ms": state.t,
        "groups": [g.structure() for g in state.groups],
        "connections": [c.structure() for c in state.connections],
        "has_synapse_info": bool(save_synapse_info),
        "homeostasis_groups": sorted(state.homeostasis_state),
    }
    data = {}
    if save_synapse_info:
        for c in state.connections:
            synapses = state.store.synapses(c.id)
            prefix = "connection_%d_" % c.id
            data[prefix + "mask"] = synapses.mask
            data[prefix + "weight"] = synapses.weight
            data[prefix + "delay"] = synapses.delay
            data[prefix + "plastic"] = synapses.plastic
    for group_id, avg_firing in state.homeostasis_state.items():
        data["group_%d_avg_firing" % group_id] = avg_firing
    blob = NumpyBinaryFile(filename, 'wb')
    try:
        blob.write(data, metadata)
    finally:
        blob.close()
    logger.info("Saved network (%d groups, %d connections) at t = %d ms to %s",
                len(state.groups), len(state.connections), state.t, blob.name)


def load_network(state, filename):
    """
    Replace the connections of the network being declared in `state` by those
    saved in `filename` and stage their synapses and homeostasis
    accumulators. The declared groups and connections must match the saved
    ones.
    """
    blob = NumpyBinaryFile(filename, 'rb')
    try:
        metadata = blob.get_metadata()
        data = blob.read()
    finally:
        blob.close()
    if metadata.get("magic") != MAGIC:
        raise errors.InvalidTopologyError("%s is not a saved pySNN network" % blob.name)
    if metadata["format_version"] > FORMAT_VERSION:
        raise errors.InvalidTopologyError(
            "Saved network has format version %d, only up to %d is supported" % (
                metadata["format_version"], FORMAT_VERSION))
    if not metadata["has_synapse_info"]:
        raise errors.InvalidTopologyError(
            "%s was saved without synapse information and cannot be loaded" % blob.name)
    declared = [g.structure() for g in state.groups]
    if declared != metadata["groups"]:
        raise errors.InvalidTopologyError(
            "Declared groups do not match the saved network: %s != %s" % (declared, metadata["groups"]))
    saved_connections = metadata["connections"]
    if len(saved_connections) != len(state.connections):
        raise errors.InvalidTopologyError(
            "%d connections declared, but %d were saved" % (len(state.connections), len(saved_connections)))
    for c, saved in zip(state.connections, saved_connections):
        if (saved["id"], saved["pre"], saved["post"]) != (c.id, c.pre.id, c.post.id):
            raise errors.InvalidTopologyError(
                "Declared connection %d (%s) does not match the saved connection %d (%d->%d)" % (
                    c.id, c.label, saved["id"], saved["pre"], saved["post"]))
        prefix = "connection_%d_" % c.id
        synapses = SynapseMatrix(data[prefix + "mask"], data[prefix + "weight"],
                                 data[prefix + "delay"], data[prefix + "plastic"])
        c.replace(RangeWeight(*saved["weight"]), RangeDelay(*saved["delay"]),
                  saved["plastic"], synapses)
    state.staged_homeostasis = dict(
        (group_id, data["group_%d_avg_firing" % group_id])
        for group_id in metadata["homeostasis_groups"])
    logger.info("Loaded network saved at t = %d ms from %s", metadata["time_ms"], blob.name)
