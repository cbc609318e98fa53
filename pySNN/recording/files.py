"""
Provides interfaces to the binary file formats written by pySNN.

Classes:
    BaseFile
    ConnectionMonitorFile - weight log of a connection monitor
    NumpyBinaryFile       - .npz archive of named arrays plus JSON metadata

Weight log layout (little endian): a fixed 64-byte header (HEADER_DTYPE)
followed by zero or more records, each an int64 time in ms followed by the
float32 weights of the connection, row-major by pre-index then post-index,
with NaN for absent synapses.

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

import json
import numpy as np

DEFAULT_BUFFER_SIZE = 10000

WEIGHT_LOG_SIGNATURE = b"SNNW"
WEIGHT_LOG_VERSION = 1
HEADER_DTYPE = np.dtype([
    ('signature', 'S4'),
    ('version', '<i4'),
    ('connection_id', '<i4'),
    ('pre_group', '<i4'),
    ('pre_grid', '<i4', (3,)),
    ('post_group', '<i4'),
    ('post_grid', '<i4', (3,)),
    ('plastic', '<i4'),
    ('weight_min', '<f4'),
    ('weight_max', '<f4'),
    ('reserved', '<i4', (2,)),
])
HEADER_SIZE = HEADER_DTYPE.itemsize
TIME_DTYPE = np.dtype('<i8')
WEIGHT_DTYPE = np.dtype('<f4')


def record_size(n_pre, n_post):
    """Size in bytes of one weight log record."""
    return TIME_DTYPE.itemsize + WEIGHT_DTYPE.itemsize * n_pre * n_post


def expected_file_size(n_pre, n_post, n_records):
    return HEADER_SIZE + n_records * record_size(n_pre, n_post)


class BaseFile(object):
    """
    Base class for pySNN File classes.

    `filename` may also be an already open binary file object, which is then
    used as is and not closed by close().
    """

    def __init__(self, filename, mode='rb'):
        """
        Open a file with the given filename and mode.
        """
        self.mode = mode
        if hasattr(filename, 'read') or hasattr(filename, 'write'):
            self.name = getattr(filename, 'name', None)
            self.fileobj = filename
            self._owns_file = False
        else:
            self.name = filename
            self.fileobj = open(self.name, mode, DEFAULT_BUFFER_SIZE)
            self._owns_file = True

    def __del__(self):
        self.close()

    def write(self, data, metadata):
        """
        Write data and metadata to file. `data` should be a NumPy array,
        `metadata` should be a dictionary.
        """
        raise NotImplementedError

    def read(self):
        """Read data from the file and return a NumPy array."""
        raise NotImplementedError

    def get_metadata(self):
        """Read metadata from the file and return a dict."""
        raise NotImplementedError

    def flush(self):
        if hasattr(self, 'fileobj') and not self.fileobj.closed:
            self.fileobj.flush()

    def close(self):
        """Close the file."""
        if getattr(self, '_owns_file', False) and not self.fileobj.closed:
            self.fileobj.close()


class ConnectionMonitorFile(BaseFile):
    """
    The weight log of a connection monitor.
    """

    def write_header(self, connection):
        header = np.zeros(1, dtype=HEADER_DTYPE)
        header['signature'] = WEIGHT_LOG_SIGNATURE
        header['version'] = WEIGHT_LOG_VERSION
        header['connection_id'] = connection.id
        header['pre_group'] = connection.pre.id
        header['pre_grid'] = connection.pre.grid.shape
        header['post_group'] = connection.post.id
        header['post_grid'] = connection.post.grid.shape
        header['plastic'] = int(connection.plastic)
        header['weight_min'] = connection.weight.min
        header['weight_max'] = connection.weight.max
        self.fileobj.write(header.tobytes())

    def write_record(self, t, weights):
        """Append the weights `weights` (a (pre, post) array) captured at `t` ms."""
        self.fileobj.write(np.array([t], dtype=TIME_DTYPE).tobytes())
        self.fileobj.write(np.ascontiguousarray(weights, dtype=WEIGHT_DTYPE).tobytes())

    def get_metadata(self):
        self.fileobj.seek(0)
        header = np.frombuffer(self.fileobj.read(HEADER_SIZE), dtype=HEADER_DTYPE)
        if header.size != 1 or header['signature'][0] != WEIGHT_LOG_SIGNATURE:
            raise IOError("%s is not a connection monitor weight log" % self.name)
        return {
            'version': int(header['version'][0]),
            'connection_id': int(header['connection_id'][0]),
            'pre_group': int(header['pre_group'][0]),
            'pre_grid': tuple(int(x) for x in header['pre_grid'][0]),
            'post_group': int(header['post_group'][0]),
            'post_grid': tuple(int(x) for x in header['post_grid'][0]),
            'plastic': bool(header['plastic'][0]),
            'weight_min': float(header['weight_min'][0]),
            'weight_max': float(header['weight_max'][0]),
        }

    def read(self):
        """
        Return (times, weights): an int64 array of record times in ms and a
        float32 array with shape (n_records, n_pre, n_post).
        """
        metadata = self.get_metadata()
        n_pre = int(np.prod(metadata['pre_grid']))
        n_post = int(np.prod(metadata['post_grid']))
        record_dtype = np.dtype([('t', TIME_DTYPE), ('w', WEIGHT_DTYPE, (n_pre, n_post))])
        self.fileobj.seek(HEADER_SIZE)
        records = np.frombuffer(self.fileobj.read(), dtype=record_dtype)
        return records['t'].copy(), records['w'].copy()


class NumpyBinaryFile(BaseFile):
    """
    Arrays and metadata are saved in .npz format, which is a zipped archive of
    arrays. `data` is a dict of named arrays; the metadata dict is stored as a
    JSON string.
    """

    def write(self, data, metadata):
        np.savez(self.fileobj, metadata=np.array(json.dumps(metadata)), **data)

    def read(self):
        self.fileobj.seek(0)
        with np.load(self.fileobj) as archive:
            data = dict((name, archive[name]) for name in archive.files if name != 'metadata')
        self.fileobj.seek(0)
        return data

    def get_metadata(self):
        self.fileobj.seek(0)
        with np.load(self.fileobj) as archive:
            metadata = json.loads(str(archive['metadata']))
        self.fileobj.seek(0)
        return metadata

