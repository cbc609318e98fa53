"""
A Timer class for measuring how long simulation steps take.

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

import time


class Timer(object):
    """
    Measures wall-clock time. Timing starts on creation of the timer.
    """

    def __init__(self):
        self.start()

    def start(self):
        """Start/restart timing."""
        self._start_time = time.perf_counter()

    def elapsed_time(self, format=None):
        """
        Return the elapsed time in seconds, or as text if ``format="long"``::

            >>> timer.elapsed_time(format='long')
            16 minutes, 27 seconds
        """
        elapsed = time.perf_counter() - self._start_time
        if format == "long":
            return Timer.time_in_words(elapsed)
        return elapsed

    @staticmethod
    def time_in_words(s):
        """
        Formats a time in seconds as a string containing the time in days,
        hours, minutes and seconds::

            >>> Timer.time_in_words(123)
            2 minutes, 3 seconds
        """
        parts = {}
        minutes, parts["second"] = divmod(int(s), 60)
        hours, parts["minute"] = divmod(minutes, 60)
        parts["day"], parts["hour"] = divmod(hours, 24)
        words = ["%d %s%s" % (parts[unit], unit, "s" if parts[unit] > 1 else "")
                 for unit in ("day", "hour", "minute", "second") if parts[unit] > 0]
        return ", ".join(words) or "0 seconds"
