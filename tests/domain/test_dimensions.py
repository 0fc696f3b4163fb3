from unittest import TestCase
import unittest

import numpy as np

from keytensor.domain import AXIS_NAMES, Dimensions, ErrorKind, ShapeError


class TestDimensionsConstruction(TestCase):

    def test_create_defaults_to_ones(self):
        dims = Dimensions.create()
        self.assertEqual(dims.shape, (1, 1, 1, 1))
        self.assertEqual(dims.order, AXIS_NAMES)
        self.assertEqual(dims.ecount, 1)

    def test_create_orders_outer_to_inner(self):
        dims = Dimensions.create(batch_size=2, channels=3, height=4, width=5)
        self.assertEqual(dims.shape, (2, 3, 4, 5))
        self.assertEqual(dims.batch_size, 2)
        self.assertEqual(dims.channels, 3)
        self.assertEqual(dims.height, 4)
        self.assertEqual(dims.width, 5)
        self.assertEqual(dims.ecount, 120)

    def test_numpy_integers_are_accepted(self):
        dims = Dimensions((np.int64(1), 1, np.int32(3), 4))
        self.assertEqual(dims.shape, (1, 1, 3, 4))
        self.assertIsInstance(dims.shape[0], int)

    def test_negative_extent_is_shape_error(self):
        with self.assertRaises(ShapeError) as ctx:
            Dimensions.create(width=-1)
        self.assertIs(ctx.exception.kind, ErrorKind.SHAPE)
        self.assertEqual(ctx.exception.data["size"], -1)

    def test_non_integer_extents_are_rejected(self):
        for bad in (1.5, "3", True, None):
            with self.subTest(bad=bad):
                with self.assertRaises(ShapeError):
                    Dimensions.create(height=bad)

    def test_shape_error_is_value_error(self):
        with self.assertRaises(ValueError):
            Dimensions((1, 2, 3))

    def test_zero_extents_are_legal(self):
        dims = Dimensions.create(height=0, width=4)
        self.assertEqual(dims.ecount, 0)
        self.assertEqual(dims.shape_2d, (0, 4))

    def test_order_must_be_permutation(self):
        with self.assertRaises(ShapeError):
            Dimensions((1, 1, 1, 1), order=("a", "b", "c", "d"))

    def test_dimensions_are_immutable_values(self):
        a = Dimensions.create(height=2, width=3)
        b = Dimensions.create(height=2, width=3)
        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))
        with self.assertRaises(Exception):
            a.shape = (1, 1, 1, 1)


class TestDimensionsMaps(TestCase):

    def test_map_round_trip(self):
        dims = Dimensions.create(batch_size=2, height=3, width=4)
        mapping = dims.to_map()
        self.assertEqual(mapping["width"], 4)
        self.assertEqual(mapping["order"], AXIS_NAMES)
        self.assertEqual(Dimensions.from_map(mapping), dims)

    def test_from_map_missing_axes_default_to_one(self):
        dims = Dimensions.from_map({"width": 7})
        self.assertEqual(dims.shape, (1, 1, 1, 7))

    def test_from_map_unknown_axis(self):
        with self.assertRaises(ShapeError):
            Dimensions.from_map({"depth": 2})

    def test_from_map_with_custom_order(self):
        order = ("batch_size", "height", "width", "channels")
        dims = Dimensions.from_map(
            {"channels": 3, "height": 4, "width": 5, "order": order}
        )
        self.assertEqual(dims.shape, (1, 4, 5, 3))
        self.assertEqual(dims.channels, 3)
        self.assertEqual(dims.height, 4)
        self.assertEqual(dims.most_rapidly_changing, 3)


class TestDimensionsDerivedShapes(TestCase):

    def test_shape_2d_folds_all_but_innermost(self):
        dims = Dimensions.create(batch_size=2, channels=3, height=4, width=5)
        self.assertEqual(dims.shape_2d, (24, 5))

    def test_batch_shape_folds_all_but_outermost(self):
        dims = Dimensions.create(batch_size=2, channels=3, height=4, width=5)
        self.assertEqual(dims.batch_shape, (2, 60))

    def test_rapidly_changing_axes(self):
        dims = Dimensions.create(batch_size=6, width=9)
        self.assertEqual(dims.least_rapidly_changing, 6)
        self.assertEqual(dims.most_rapidly_changing, 9)

    def test_unknown_axis_lookup(self):
        with self.assertRaises(ShapeError):
            Dimensions.create().axis("depth")


class TestDimensionsFromShape(TestCase):

    def test_rank_one(self):
        self.assertEqual(Dimensions.from_shape((8,)).shape, (1, 1, 1, 8))

    def test_rank_two(self):
        self.assertEqual(Dimensions.from_shape((3, 4)).shape, (1, 1, 3, 4))

    def test_rank_three(self):
        self.assertEqual(Dimensions.from_shape((2, 3, 4)).shape, (1, 2, 3, 4))

    def test_batch_size_splits_outer_entry(self):
        dims = Dimensions.from_shape((6, 4), batch_size=3)
        self.assertEqual(dims.shape, (3, 1, 2, 4))
        self.assertEqual(dims.ecount, 24)

    def test_unsupported_ranks(self):
        for shape in ((), (1, 2, 3, 4)):
            with self.subTest(shape=shape):
                with self.assertRaises(ShapeError):
                    Dimensions.from_shape(shape)

    def test_batch_size_must_divide_outer_entry(self):
        with self.assertRaises(ShapeError):
            Dimensions.from_shape((5, 4), batch_size=2)

    def test_batch_size_must_be_positive(self):
        with self.assertRaises(ShapeError):
            Dimensions.from_shape((4,), batch_size=0)


if __name__ == "__main__":
    unittest.main()
