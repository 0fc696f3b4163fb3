from unittest import TestCase
import unittest

import numpy as np

from keytensor import (
    CompatibilityError,
    CpuDriver,
    DeviceMismatchError,
    Dimensions,
    ExecutionContext,
    IndexStrategy,
    IndexSystemError,
    KeyTensorConfig,
    Tensor,
)


class TestIndexedViews(TestCase):

    def setUp(self):
        self.ctx = ExecutionContext.create(config=KeyTensorConfig())
        self.data = np.arange(16.0).reshape(4, 4)
        self.t = Tensor.from_numpy(self.ctx, self.data)

    def idx(self, values):
        return Tensor.from_numpy(self.ctx, np.asarray(values), datatype=np.int64)

    def read(self, t, shape=None):
        out = t.to_vector(self.ctx)
        return out if shape is None else out.reshape(shape)

    def test_index_columns_example(self):
        picked = self.t.index_columns(self.idx([3, 1]))
        self.assertEqual(picked.shape, (1, 1, 4, 2))
        self.assertIs(picked.index_system.strategy, IndexStrategy.INDEXED)
        self.assertIs(picked.buffer, self.t.buffer)
        out = self.read(picked, (4, 2))
        np.testing.assert_array_equal(out[:, 0], self.data[:, 3])
        np.testing.assert_array_equal(out[:, 1], self.data[:, 1])

    def test_index_columns_allows_repeats_and_any_count(self):
        picked = self.t.index_columns(self.idx([0, 0, 2, 3, 1]))
        np.testing.assert_array_equal(
            self.read(picked, (4, 5)), self.data[:, [0, 0, 2, 3, 1]]
        )

    def test_index_rows(self):
        picked = self.t.index_rows(self.idx([2, 0, 2]))
        self.assertEqual(picked.shape, (1, 1, 3, 4))
        self.assertTrue(picked.is_indexed_rows)
        self.assertFalse(picked.is_indexed_columns)
        np.testing.assert_array_equal(self.read(picked, (3, 4)), self.data[[2, 0, 2]])

    def test_index_rows_of_padded_window(self):
        window = self.t.sub_matrix(0, 4, 1, 2)
        picked = window.index_rows(self.idx([3, 1]))
        np.testing.assert_array_equal(
            self.read(picked, (2, 2)), self.data[[3, 1]][:, 1:3]
        )

    def test_index_columns_of_padded_window(self):
        window = self.t.sub_matrix(1, 3, 1, 3)
        picked = window.index_columns(self.idx([2, 0]))
        np.testing.assert_array_equal(
            self.read(picked, (3, 2)), self.data[1:4, 1:4][:, [2, 0]]
        )

    def test_index_elements(self):
        picked = self.t.index_elements(self.idx([15, 0, 5]))
        self.assertEqual(picked.shape, (1, 1, 1, 3))
        self.assertTrue(picked.is_indexed_elements)
        np.testing.assert_array_equal(self.read(picked), [15.0, 0.0, 5.0])

    def test_index_elements_requires_dense_source(self):
        window = self.t.sub_matrix(0, 2, 0, 2)
        with self.assertRaises(IndexSystemError):
            window.index_elements(self.idx([0]))

    def test_predicates(self):
        cols = self.t.index_columns(self.idx([1, 2]))
        self.assertTrue(cols.is_indexed)
        self.assertTrue(cols.is_indexed_columns)
        self.assertFalse(cols.is_indexed_rows)
        self.assertFalse(cols.is_dense)
        self.assertFalse(cols.is_simple)
        self.assertFalse(self.t.is_indexed)

    def test_index_tensor_must_be_integer(self):
        with self.assertRaises(IndexSystemError):
            self.t.index_columns(Tensor.from_numpy(self.ctx, [0.0, 1.0]))

    def test_index_tensor_must_be_dense(self):
        backing = Tensor.from_numpy(
            self.ctx, np.arange(8).reshape(2, 4), datatype=np.int64
        )
        strided = backing.sub_matrix(0, 2, 0, 1)
        with self.assertRaises(IndexSystemError):
            self.t.index_rows(strided)

    def test_index_tensor_cannot_itself_be_indexed(self):
        indexes = self.idx([0, 1, 2])
        gathered = indexes.index_elements(self.idx([0, 1]))
        with self.assertRaises(IndexSystemError):
            self.t.index_rows(gathered)

    def test_gathered_views_cannot_be_gathered_again(self):
        picked = self.t.index_rows(self.idx([0]))
        with self.assertRaises(IndexSystemError):
            picked.index_columns(self.idx([0]))

    def test_out_of_range_index_fails_at_read(self):
        picked = self.t.index_elements(self.idx([16]))
        with self.assertRaises(IndexSystemError):
            self.read(picked)

    def test_indexes_past_the_view_are_read_from_the_buffer(self):
        top = self.t.reinterpret(Dimensions.create(height=2, width=4))
        picked = top.index_rows(self.idx([3]))
        np.testing.assert_array_equal(self.read(picked), self.data[3])


class TestIndexTensorPlacement(TestCase):

    def setUp(self):
        self.ctx = ExecutionContext.create(config=KeyTensorConfig(cpu_device_count=2))
        self.t = Tensor.from_numpy(self.ctx, np.arange(16.0).reshape(4, 4))

    def gathers(self):
        return (self.t.index_columns, self.t.index_rows, self.t.index_elements)

    def test_indexes_from_another_driver(self):
        foreign_ctx = ExecutionContext(CpuDriver().create_stream())
        indexes = Tensor.from_numpy(foreign_ctx, [3, 1], datatype=np.int64)
        for gather in self.gathers():
            with self.subTest(gather=gather.__name__):
                with self.assertRaises(CompatibilityError):
                    gather(indexes)

    def test_indexes_on_another_device(self):
        other = self.ctx.on_device(self.ctx.driver.devices[1])
        indexes = Tensor.from_numpy(other, [3, 1], datatype=np.int64)
        for gather in self.gathers():
            with self.subTest(gather=gather.__name__):
                with self.assertRaises(DeviceMismatchError):
                    gather(indexes)

    def test_foreign_indexes_never_reach_an_assignment(self):
        foreign_ctx = ExecutionContext(CpuDriver().create_stream())
        indexes = Tensor.from_numpy(foreign_ctx, [3, 1], datatype=np.int64)
        dest = Tensor.new(self.ctx, (4, 2))
        with self.assertRaises(CompatibilityError):
            dest.assign(self.ctx, self.t.index_columns(indexes))
        np.testing.assert_array_equal(dest.to_vector(self.ctx), np.zeros(8))


if __name__ == "__main__":
    unittest.main()
