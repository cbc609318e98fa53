# encoding: utf-8
"""
A collection of utility functions and classes.

Functions:
    init_logging()    - convenience function for setting up logging to file or
                        to the screen.

Classes:
    Timer    - a convenience wrapper around the time.perf_counter() function from the
               standard library.

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

import logging
import os

from .timer import Timer                                      # noqa: F401


def init_logging(logfile, debug=False, level=None):
    """
    Simple configuration of logging. If `logfile` is None, messages go to
    stderr.
    """
    if logfile:
        logfile = os.path.abspath(logfile)
    if debug:
        log_level = logging.DEBUG
    else:
        log_level = logging.INFO
    # allow user to override exact log_level
    if level:
        log_level = level
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s %(levelname)-8s [%(name)s] %(message)s (%(pathname)s[%(lineno)d]:%(funcName)s)',
        filename=logfile,
        filemode='w')
    return logging.getLogger("pySNN")
