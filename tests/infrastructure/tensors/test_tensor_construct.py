from unittest import TestCase
import unittest

import numpy as np

from keytensor import (
    CapacityError,
    Dimensions,
    ExecutionContext,
    IndexSystem,
    KeyTensorConfig,
    ShapeError,
    Tensor,
)
from keytensor.domain import ITensor


class TestTensorConstruction(TestCase):

    def setUp(self):
        self.ctx = ExecutionContext.create(config=KeyTensorConfig())
        self.driver = self.ctx.driver

    def test_dense_view_over_exact_buffer(self):
        dims = Dimensions.create(batch_size=2, height=3, width=4)
        buf = self.driver.allocate_device_buffer(24, np.float64)
        t = Tensor(self.driver, dims, None, buf)
        self.assertIsInstance(t, ITensor)
        self.assertEqual(t.shape, (2, 1, 3, 4))
        self.assertEqual(t.ecount, 24)
        self.assertEqual(len(t), 24)
        self.assertTrue(t.is_dense)
        self.assertTrue(t.is_simple)
        self.assertEqual(t.index_system.required_length, dims.ecount)

    def test_buffer_too_small_is_capacity_error(self):
        dims = Dimensions.create(height=3, width=4)
        buf = self.driver.allocate_device_buffer(11, np.float64)
        with self.assertRaises(CapacityError) as ctx:
            Tensor(self.driver, dims, None, buf)
        self.assertEqual(ctx.exception.data["required_buffer_ecount"], 12)
        self.assertEqual(ctx.exception.data["buffer_ecount"], 11)

    def test_larger_buffer_is_accepted(self):
        dims = Dimensions.create(height=3, width=4)
        buf = self.driver.allocate_device_buffer(100, np.float64)
        t = Tensor(self.driver, dims, None, buf)
        self.assertEqual(t.ecount, 12)

    def test_strided_capacity(self):
        dims = Dimensions.create(height=3, width=2)
        index_system = IndexSystem.monotonic(6).with_stride(5, 2)
        with self.assertRaises(CapacityError):
            Tensor(self.driver, dims, index_system, self.driver.allocate_device_buffer(11, np.float64))
        t = Tensor(self.driver, dims, index_system, self.driver.allocate_device_buffer(12, np.float64))
        self.assertTrue(t.is_strided)
        self.assertFalse(t.is_simple)
        self.assertEqual(t.column_stride, 5)
        self.assertEqual(t.num_columns, 2)

    def test_monotonic_length_must_match_dimensions(self):
        dims = Dimensions.create(width=4)
        buf = self.driver.allocate_device_buffer(8, np.float64)
        with self.assertRaises(ShapeError):
            Tensor(self.driver, dims, IndexSystem.monotonic(8), buf)

    def test_dimensions_type_is_checked(self):
        buf = self.driver.allocate_device_buffer(4, np.float64)
        with self.assertRaises(TypeError):
            Tensor(self.driver, (1, 1, 1, 4), None, buf)

    def test_shape_accessors(self):
        t = Tensor.zeros(
            self.ctx, Dimensions.create(batch_size=2, channels=3, height=4, width=5)
        )
        self.assertEqual(t.batch_size, 2)
        self.assertEqual(t.channels, 3)
        self.assertEqual(t.height, 4)
        self.assertEqual(t.width, 5)
        self.assertEqual(t.shape_2d, (24, 5))
        self.assertEqual(t.batch_shape, (2, 60))
        self.assertEqual(t.column_stride, 5)
        self.assertEqual(t.num_columns, 5)
        self.assertIn("Tensor(shape=(2, 3, 4, 5)", repr(t))

    def test_datatype_and_device_come_from_buffer(self):
        t = Tensor.new(self.ctx, (3,), datatype=np.float32)
        self.assertEqual(t.datatype, np.dtype(np.float32))
        self.assertEqual(t.device, self.ctx.device)
        self.assertIs(t.driver, self.ctx.driver)


class TestTensorFactories(TestCase):

    def setUp(self):
        self.ctx = ExecutionContext.create(config=KeyTensorConfig())

    def test_new_is_zero_filled_with_context_datatype(self):
        t = Tensor.new(self.ctx, (2, 3))
        self.assertEqual(t.shape, (1, 1, 2, 3))
        self.assertEqual(t.datatype, self.ctx.datatype)
        np.testing.assert_array_equal(t.to_vector(self.ctx), np.zeros(6))

    def test_new_with_batch_size(self):
        t = Tensor.new(self.ctx, (6, 2), batch_size=3)
        self.assertEqual(t.shape, (3, 1, 2, 2))

    def test_new_rejects_unsupported_rank(self):
        with self.assertRaises(ShapeError):
            Tensor.new(self.ctx, (1, 2, 3, 4))

    def test_from_numpy_round_trip(self):
        data = np.arange(12.0).reshape(3, 4)
        t = Tensor.from_numpy(self.ctx, data)
        self.assertEqual(t.shape, (1, 1, 3, 4))
        np.testing.assert_array_equal(t.to_numpy(self.ctx).reshape(3, 4), data)
        np.testing.assert_array_equal(t.to_vector(self.ctx), data.ravel())

    def test_from_numpy_converts_to_requested_datatype(self):
        t = Tensor.from_numpy(self.ctx, [1, 2, 3], datatype=np.int32)
        self.assertEqual(t.datatype, np.dtype(np.int32))
        out = t.to_vector(self.ctx)
        self.assertEqual(out.dtype, np.dtype(np.int32))
        np.testing.assert_array_equal(out, [1, 2, 3])

    def test_from_numpy_uses_context_datatype_by_default(self):
        ctx = self.ctx.with_datatype(np.float32)
        t = Tensor.from_numpy(ctx, np.arange(3, dtype=np.int64))
        self.assertEqual(t.datatype, np.dtype(np.float32))

    def test_from_numpy_scalar_and_4d(self):
        self.assertEqual(Tensor.from_numpy(self.ctx, 5.0).shape, (1, 1, 1, 1))
        data = np.arange(24.0).reshape(2, 3, 2, 2)
        t = Tensor.from_numpy(self.ctx, data)
        self.assertEqual(t.shape, (2, 3, 2, 2))
        np.testing.assert_array_equal(t.to_numpy(self.ctx), data)

    def test_from_numpy_with_batch_size(self):
        t = Tensor.from_numpy(self.ctx, np.ones((4, 3)), batch_size=2)
        self.assertEqual(t.shape, (2, 1, 2, 3))

    def test_empty_tensor(self):
        t = Tensor.from_numpy(self.ctx, np.zeros((0, 3)))
        self.assertEqual(t.ecount, 0)
        self.assertEqual(t.to_vector(self.ctx).size, 0)

    def test_to_numpy_returns_a_copy(self):
        t = Tensor.from_numpy(self.ctx, [1.0, 2.0])
        out = t.to_vector(self.ctx)
        out[0] = 100.0
        np.testing.assert_array_equal(t.to_vector(self.ctx), [1.0, 2.0])


if __name__ == "__main__":
    unittest.main()
