from unittest import TestCase
import unittest

import numpy as np

from keytensor import ExecutionContext, KeyTensorConfig, Tensor


class TestMakeDense(TestCase):

    def setUp(self):
        self.ctx = ExecutionContext.create(config=KeyTensorConfig(cpu_device_count=2))
        self.data = np.arange(20.0).reshape(4, 5)
        self.t = Tensor.from_numpy(self.ctx, self.data)

    def test_dense_tensor_is_returned_unchanged(self):
        self.assertIs(self.t.make_dense(self.ctx), self.t)
        v = self.t.sub_vector(3, 4)
        self.assertIs(v.make_dense(self.ctx), v)

    def test_strided_view_is_copied(self):
        window = self.t.sub_matrix(1, 2, 1, 3)
        dense = window.make_dense(self.ctx)
        self.assertTrue(dense.is_dense)
        self.assertIsNot(dense.buffer, window.buffer)
        self.assertEqual(dense.dimensions, window.dimensions)
        np.testing.assert_array_equal(
            dense.buffer.as_numpy(), self.data[1:3, 1:4].ravel()
        )

    def test_dense_copy_is_detached(self):
        dense = self.t.columns()[0].make_dense(self.ctx)
        dense.fill(self.ctx, -1.0)
        np.testing.assert_array_equal(self.t.to_vector(self.ctx), self.data.ravel())

    def test_gathered_view_is_copied(self):
        idx = Tensor.from_numpy(self.ctx, [4, 0], datatype=np.int64)
        dense = self.t.index_columns(idx).make_dense(self.ctx)
        self.assertTrue(dense.is_simple)
        np.testing.assert_array_equal(
            dense.buffer.as_numpy(), self.data[:, [4, 0]].ravel()
        )

    def test_copy_lives_on_the_source_device(self):
        other = self.ctx.on_device(self.ctx.driver.devices[1])
        t = Tensor.from_numpy(other, self.data)
        dense = t.sub_matrix(0, 2, 0, 2).make_dense(other)
        self.assertEqual(dense.device, other.device)

    def test_empty_view(self):
        dense = self.t.sub_matrix(0, 0, 0, 5).make_dense(self.ctx)
        self.assertEqual(dense.ecount, 0)


if __name__ == "__main__":
    unittest.main()
