"""
Assorted utility functions and classes.

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

import numpy as np

from . import errors


def check_index(index, size, what="index"):
    """
    Return `index` as an int, raising InvalidIndexError if it does not lie in
    [0, `size`).
    """
    if isinstance(index, (bool, np.bool_)) or not isinstance(index, (int, np.integer)):
        raise errors.InvalidIndexError("%s must be an integer, not %r" % (what, index))
    if index < 0 or index >= size:
        raise errors.InvalidIndexError("%s %d out of range [0, %d)" % (what, index, size))
    return int(index)

