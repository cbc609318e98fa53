"""
Tests of the binary file formats.

:copyright: Copyright 2024-2026 by the pySNN team, see AUTHORS.
:license: CeCILL, see LICENSE for details.
"""

import io
import os
import shutil
import tempfile
import unittest
from unittest.mock import Mock

import numpy as np
from numpy.testing import assert_array_equal

from pySNN.space import Grid3D
from pySNN.parameters import RangeWeight
from pySNN.recording.files import (ConnectionMonitorFile, NumpyBinaryFile, HEADER_SIZE,
                                   record_size, expected_file_size)


def mock_connection():
    connection = Mock()
    connection.id = 3
    connection.pre.id = 0
    connection.pre.grid = Grid3D(2, 3)
    connection.post.id = 1
    connection.post.grid = Grid3D(4)
    connection.plastic = True
    connection.weight = RangeWeight(0.0, 0.5, 2.0)
    return connection


def test_header_size():
    assert HEADER_SIZE == 64


def test_file_size():
    assert record_size(6, 4) == 8 + 4 * 24
    assert expected_file_size(6, 4, 0) == 64
    assert expected_file_size(6, 4, 3) == 64 + 3 * 104


class TestConnectionMonitorFile(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.filename = os.path.join(self.tmpdir, "weights.dat")

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def test_write_read(self):
        weights = np.arange(24, dtype=float).reshape((6, 4)) / 10.0
        weights[0, 1] = np.nan
        log = ConnectionMonitorFile(self.filename, 'wb')
        log.write_header(mock_connection())
        log.write_record(0, weights)
        log.write_record(1000, weights * 2)
        log.close()
        self.assertEqual(os.path.getsize(self.filename), expected_file_size(6, 4, 2))

        log = ConnectionMonitorFile(self.filename)
        metadata = log.get_metadata()
        times, data = log.read()
        log.close()
        self.assertEqual(metadata, {
            'version': 1,
            'connection_id': 3,
            'pre_group': 0,
            'pre_grid': (2, 3, 1),
            'post_group': 1,
            'post_grid': (4, 1, 1),
            'plastic': True,
            'weight_min': 0.0,
            'weight_max': 2.0,
        })
        assert_array_equal(times, [0, 1000])
        self.assertEqual(data.shape, (2, 6, 4))
        self.assertEqual(data.dtype, np.float32)
        assert_array_equal(data[1], (weights * 2).astype(np.float32))

    def test_records_are_row_major(self):
        weights = np.array([[1.0, 2.0, 3.0, 4.0]] * 6)
        weights[5] = 9.0
        log = ConnectionMonitorFile(self.filename, 'wb')
        log.write_header(mock_connection())
        log.write_record(7, weights)
        log.close()
        with open(self.filename, 'rb') as f:
            f.seek(HEADER_SIZE)
            self.assertEqual(np.frombuffer(f.read(8), dtype='<i8')[0], 7)
            values = np.frombuffer(f.read(), dtype='<f4')
        assert_array_equal(values[:4], [1.0, 2.0, 3.0, 4.0])
        assert_array_equal(values[-4:], 9.0)

    def test_not_a_weight_log(self):
        with open(self.filename, 'wb') as f:
            f.write(b"\x00" * 100)
        log = ConnectionMonitorFile(self.filename)
        self.assertRaises(IOError, log.get_metadata)
        log.close()

    def test_open_file_object(self):
        buffer = io.BytesIO()
        log = ConnectionMonitorFile(buffer, 'wb')
        log.write_header(mock_connection())
        log.write_record(0, np.zeros((6, 4)))
        log.close()
        self.assertFalse(buffer.closed)
        self.assertEqual(len(buffer.getvalue()), expected_file_size(6, 4, 1))


def test_numpy_binary_file():
    buffer = io.BytesIO()
    data = {"a": np.arange(5), "b": np.eye(2, dtype=bool)}
    NumpyBinaryFile(buffer, 'wb').write(data, {"label": "test", "values": [1, 2]})
    f = NumpyBinaryFile(buffer, 'rb')
    assert f.get_metadata() == {"label": "test", "values": [1, 2]}
    loaded = f.read()
    assert sorted(loaded) == ["a", "b"]
    assert_array_equal(loaded["a"], np.arange(5))
    assert loaded["b"].dtype == bool
