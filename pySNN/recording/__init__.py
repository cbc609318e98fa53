"""
Defines the ConnectionMonitor, which tracks how the weight matrix of a
connection evolves, and functions for managing its weight log.

The monitor keeps two snapshots of the weight matrix, "current" and "last".
Every weight query first refreshes them: if the simulation clock has moved
past the current snapshot, or the weights were mutated since it was taken,
the current snapshot becomes the last one and a fresh copy becomes current.
Otherwise the staged snapshots are reused, so that queries made at the same
time return consistent results. Snapshot time queries only pick up a clock
move, never a mutation made at the current time.

Records in the weight log are keyed by simulation time: at most one record
is written per millisecond timestamp.

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

import logging
import os

import numpy as np
import neo
import quantities as pq

from .. import errors
from ..core import check_index
from .files import ConnectionMonitorFile

logger = logging.getLogger("pySNN")

NEGLIGIBLE_WEIGHT_CHANGE = 1e-5
WEIGHT_TOLERANCE = 1e-5
DEFAULT_RESULTS_DIR = "results"


def safe_makedirs(dir):
    """
    Version of makedirs not subject to race condition when two processes
    create the same directory.
    """
    if dir and not os.path.exists(dir):
        try:
            os.makedirs(dir)
        except OSError as e:
            if e.errno != 17:
                raise


def resolve_filename(filename, connection):
    """
    Return the path of the weight log for `connection`, or None if nothing
    should be written.

    "default" means results/conn_<pre>_<post>.dat, creating the results
    directory if necessary. None or "NULL" disables the log. Any other path
    is used as given; its directory must exist.
    """
    if filename is None or filename == "NULL":
        return None
    if filename.lower() == "default":
        safe_makedirs(DEFAULT_RESULTS_DIR)
        return os.path.join(DEFAULT_RESULTS_DIR,
                            "conn_%s_%s.dat" % (connection.pre.label, connection.post.label))
    dir = os.path.dirname(filename)
    if dir and not os.path.isdir(dir):
        raise errors.RecordingError(
            "Cannot write weight log %s: directory %s does not exist" % (filename, dir),
            connection)
    return filename


class ConnectionMonitor(object):
    """
    Monitors the weights of a single connection.

    Created by `set_connection_monitor()` in the READY state, at which point
    the initial snapshot is taken (current = last) and, if a log file is
    given, the header and the t = 0 record are written.
    """

    def __init__(self, connection, simulator_state, filename=None):
        self.connection = connection
        self._state = simulator_state
        self.filename = filename
        self._file = None
        self._interval = 1
        self._t_written = None
        store = self._store
        self._current = store.get_weights(connection.id)
        self._last = self._current.copy()
        self._t_current = self._t_last = simulator_state.t
        self._version = store.version(connection.id)
        if filename is not None:
            self._file = ConnectionMonitorFile(filename, 'wb')
            self._file.write_header(connection)
            self._persist(self._t_current, self._current)
        logger.debug("Created connection monitor for %s (log: %s)", connection.label, filename)

    @property
    def _store(self):
        return self._state.store

    def __repr__(self):
        return 'ConnectionMonitor("%s")' % self.connection.label

    # --- snapshot bookkeeping -----------------------------------------

    def _update_stored_weights(self, timestamps_only=False):
        """
        Advance the snapshot chain if the clock moved or the weights were
        mutated since the current snapshot. A timestamp query only advances
        on a clock move, so that the pre-mutation matrix stays current until
        the next diff.
        """
        t = self._state.t
        version = self._store.version(self.connection.id)
        advance = t > self._t_current
        if not timestamps_only:
            advance = advance or version != self._version
        if advance:
            self._last, self._t_last = self._current, self._t_current
            self._current = self._store.get_weights(self.connection.id)
            self._t_current = t
            self._version = version

    def _persist(self, t, weights):
        if self._file is None:
            return
        if self._t_written is not None and t <= self._t_written:
            return
        self._file.write_record(t, weights)
        self._t_written = t

    def _on_second_elapsed(self, t):
        """Called by the simulation clock after each completed second."""
        if self._interval > 0 and (t // 1000) % self._interval == 0:
            self._persist(t, self._store.get_weights(self.connection.id))

    def _finalize(self, t):
        """Called at teardown: write a trailing record in periodic mode."""
        if self._interval > 0 and (self._t_written is None or t > self._t_written):
            self._persist(t, self._store.get_weights(self.connection.id))
        self.close()

    def close(self):
        if self._file is not None:
            self._file.close()
            self._file = None

    # --- public API ---------------------------------------------------

    def take_snapshot(self):
        """
        Return a copy of the current weight matrix (NaN for absent synapses)
        and write it to the weight log unless a record with the same
        timestamp already exists.
        """
        self._update_stored_weights()
        self._persist(self._t_current, self._current)
        return self._current.copy()

    def get_time_ms_current_snapshot(self):
        self._update_stored_weights(timestamps_only=True)
        return self._t_current

    def get_time_ms_last_snapshot(self):
        self._update_stored_weights(timestamps_only=True)
        return self._t_last

    def get_time_ms_since_last_snapshot(self):
        self._update_stored_weights(timestamps_only=True)
        return self._t_current - self._t_last

    def calc_weight_changes(self):
        """Return the elementwise difference current - last."""
        self._update_stored_weights()
        return self._current - self._last

    def get_total_abs_weight_change(self):
        return float(np.nansum(np.abs(self.calc_weight_changes()), dtype=np.float64))

    def get_num_weights_changed(self, min_abs_change=NEGLIGIBLE_WEIGHT_CHANGE):
        delta = self.calc_weight_changes()[self._mask]
        return int(np.sum(np.abs(delta) > min_abs_change))

    def get_percent_weights_changed(self, min_abs_change=NEGLIGIBLE_WEIGHT_CHANGE):
        return self._percent(self.get_num_weights_changed(min_abs_change))

    def get_num_weights_in_range(self, min_value, max_value):
        """Number of synapses with weight in the closed interval [min_value, max_value]."""
        if min_value > max_value:
            raise errors.InvalidParameterValueError(
                "min_value (%g) must not exceed max_value (%g)" % (min_value, max_value))
        w = self._current_weights()
        return int(np.sum((w >= min_value - WEIGHT_TOLERANCE) & (w <= max_value + WEIGHT_TOLERANCE)))

    def get_percent_weights_in_range(self, min_value, max_value):
        return self._percent(self.get_num_weights_in_range(min_value, max_value))

    def get_num_weights_with_value(self, value):
        w = self._current_weights()
        return int(np.sum(np.abs(w - value) <= WEIGHT_TOLERANCE))

    def get_percent_weights_with_value(self, value):
        return self._percent(self.get_num_weights_with_value(value))

    def get_min_weight(self, plastic_only=False):
        """
        Smallest weight in the current snapshot, optionally over plastic
        synapses only. NaN if there are no such synapses.
        """
        w = self._current_weights(plastic_only)
        return float(w.min()) if w.size else float('nan')

    def get_max_weight(self, plastic_only=False):
        w = self._current_weights(plastic_only)
        return float(w.max()) if w.size else float('nan')

    def get_fan_in(self, post_index):
        j = check_index(post_index, self.get_num_neurons_post(), "post-synaptic index")
        return int(self._mask[:, j].sum())

    def get_fan_out(self, pre_index):
        i = check_index(pre_index, self.get_num_neurons_pre(), "pre-synaptic index")
        return int(self._mask[i, :].sum())

    def get_num_neurons_pre(self):
        return self.connection.pre.size

    def get_num_neurons_post(self):
        return self.connection.post.size

    def get_num_synapses(self):
        return int(self._mask.sum())

    def get_connect_id(self):
        return self.connection.id

    def set_update_time_interval_sec(self, interval):
        """
        Write a record to the weight log every `interval` seconds of
        simulated time. A negative interval disables periodic records; zero
        means every second.
        """
        if int(interval) != interval:
            raise errors.InvalidParameterValueError(
                "Update interval must be a whole number of seconds, not %g" % interval)
        self._interval = int(interval) if interval != 0 else 1

    def get_update_time_interval_sec(self):
        return self._interval

    def print_snapshot(self):
        """Log the current weight matrix."""
        weights = self.take_snapshot()
        lines = ["%s weights at t = %d ms:" % (self.connection.label, self._t_current)]
        for i, row in enumerate(weights):
            lines.append("%4d | %s" % (i, " ".join("%8.4f" % w for w in row)))
        logger.info("\n".join(lines))

    def get_data(self):
        """
        Return a neo Block containing the records of the weight log, as an
        IrregularlySampledSignal with one channel per (pre, post) pair.
        """
        if self.filename is None:
            raise errors.RecordingError("This monitor does not write a weight log", self.connection)
        if self._file is not None:
            self._file.flush()
        log = ConnectionMonitorFile(self.filename, 'rb')
        try:
            metadata = log.get_metadata()
            times, weights = log.read()
        finally:
            log.close()
        block = neo.Block(name=self.connection.label)
        segment = neo.Segment(name="weights")
        signal = neo.IrregularlySampledSignal(
            times.astype(float) * pq.ms,
            weights.reshape((len(times), -1)),
            units=pq.dimensionless,
            time_units=pq.ms,
            name="weight",
            connection_id=metadata['connection_id'],
            pre_group=metadata['pre_group'],
            post_group=metadata['post_group'])
        segment.irregularlysampledsignals.append(signal)
        block.segments.append(segment)
        return block

    # --- helpers --------------------------------------------------------

    @property
    def _mask(self):
        return self._store.synapses(self.connection.id).mask

    def _current_weights(self, plastic_only=False):
        self._update_stored_weights()
        if plastic_only:
            selection = self._store.synapses(self.connection.id).plastic
        else:
            selection = self._mask
        return self._current[selection]

    def _percent(self, count):
        n = self.get_num_synapses()
        return 100.0 * count / n if n else 0.0
