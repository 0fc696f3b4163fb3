"""
Logical tensor dimensions.

A tensor's logical shape is always a 4-tuple ordered from the least rapidly
changing axis to the most rapidly changing one. The conventional axis names
are ``batch_size, channels, height, width``; the order in which those names
map onto tuple positions is a permutation tag stored next to the shape.

`Dimensions` values are immutable. Every "change" produces a new instance.

Derived shapes
--------------
- ``shape_2d``: the innermost axis is kept and every other axis is folded
  into rows, i.e. ``(product(shape[:-1]), shape[-1])``.
- ``batch_shape``: the outermost axis is kept and every other axis is folded
  into columns, i.e. ``(shape[0], product(shape[1:]))``.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import prod
import operator
from typing import Any, Mapping, Sequence

from ._errors import ShapeError

AXIS_NAMES: tuple[str, ...] = ("batch_size", "channels", "height", "width")
"""Default outer-to-inner axis order."""


def _check_extent(name: str, value: Any) -> int:
    if isinstance(value, bool) or not hasattr(value, "__index__"):
        raise ShapeError("Dimension sizes must be integers", axis=name, size=value)
    value = operator.index(value)
    if value < 0:
        raise ShapeError("Dimension sizes must be non-negative", axis=name, size=value)
    return value


def _check_order(order: Sequence[str]) -> tuple[str, ...]:
    order = tuple(order)
    if sorted(order) != sorted(AXIS_NAMES):
        raise ShapeError(
            "Dimension order must be a permutation of the four axis names",
            order=order,
            expected=AXIS_NAMES,
        )
    return order


@dataclass(frozen=True)
class Dimensions:
    """
    Immutable 4-axis logical shape.

    Attributes
    ----------
    shape : tuple[int, int, int, int]
        Extents from outermost to innermost.
    order : tuple[str, ...]
        Axis name stored at each position of `shape`.
    """

    shape: tuple[int, int, int, int]
    order: tuple[str, ...] = AXIS_NAMES

    def __post_init__(self) -> None:
        if len(self.shape) != 4:
            raise ShapeError("Dimensions must have exactly four axes", shape=self.shape)
        checked = tuple(
            _check_extent(name, v) for name, v in zip(AXIS_NAMES, self.shape)
        )
        object.__setattr__(self, "shape", checked)
        object.__setattr__(self, "order", _check_order(self.order))

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        *,
        width: int = 1,
        height: int = 1,
        channels: int = 1,
        batch_size: int = 1,
    ) -> "Dimensions":
        """
        Build dimensions from explicit per-axis sizes (all default to 1).

        Raises
        ------
        ShapeError
            If any size is negative or not an integer.
        """
        return cls((batch_size, channels, height, width))

    @classmethod
    def from_map(cls, mapping: Mapping[str, Any]) -> "Dimensions":
        """
        Build dimensions from a ``{axis_name: size, "order": ...}`` mapping.

        Missing axes default to 1. The optional ``order`` entry decides which
        tuple position each axis name occupies.
        """
        order = _check_order(mapping.get("order", AXIS_NAMES))
        unknown = set(mapping) - set(AXIS_NAMES) - {"order"}
        if unknown:
            raise ShapeError("Unknown dimension axes", axes=sorted(unknown))
        return cls(tuple(mapping.get(name, 1) for name in order), order)

    @classmethod
    def from_shape(cls, shape: Sequence[int], batch_size: int = 1) -> "Dimensions":
        """
        Infer dimensions from a flat host shape and a batch size.

        The outermost entry of `shape` is divided by `batch_size`; the
        remaining entries fill the inner axes. Only ranks 1 to 3 are
        supported.

        Parameters
        ----------
        shape : Sequence[int]
            Host-side shape, e.g. ``(rows, cols)``.
        batch_size : int, optional
            Number of batches folded into the outer entry. Defaults to 1.

        Raises
        ------
        ShapeError
            For ranks outside 1..3, non-positive batch sizes, or an outer
            entry not divisible by `batch_size`.
        """
        shape = tuple(int(s) for s in shape)
        batch_size = int(batch_size)
        if batch_size <= 0:
            raise ShapeError("Batch size must be positive", batch_size=batch_size)
        if len(shape) not in (1, 2, 3):
            raise ShapeError("Unexpected shape", shape=shape, batch_size=batch_size)
        outer = shape[0]
        if outer < 0 or outer % batch_size != 0:
            raise ShapeError(
                "Outer dimension must be divisible by the batch size",
                shape=shape,
                batch_size=batch_size,
            )
        outer //= batch_size
        if len(shape) == 1:
            return cls.create(batch_size=batch_size, width=outer)
        if len(shape) == 2:
            return cls.create(batch_size=batch_size, height=outer, width=shape[1])
        return cls.create(
            batch_size=batch_size, channels=outer, height=shape[1], width=shape[2]
        )

    def to_map(self) -> dict[str, Any]:
        """Return ``{axis_name: size, ..., "order": order}``."""
        out: dict[str, Any] = dict(zip(self.order, self.shape))
        out["order"] = self.order
        return out

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def ecount(self) -> int:
        """Total number of logical elements."""
        return prod(self.shape)

    @property
    def shape_2d(self) -> tuple[int, int]:
        """``(rows, columns)`` with every axis but the innermost folded into rows."""
        return prod(self.shape[:-1]), self.shape[-1]

    @property
    def batch_shape(self) -> tuple[int, int]:
        """``(batch, rest)`` with every axis but the outermost folded into columns."""
        return self.shape[0], prod(self.shape[1:])

    @property
    def least_rapidly_changing(self) -> int:
        return self.shape[0]

    @property
    def most_rapidly_changing(self) -> int:
        return self.shape[-1]

    def axis(self, name: str) -> int:
        """Return the extent of the axis called `name`."""
        try:
            return self.shape[self.order.index(name)]
        except ValueError:
            raise ShapeError("Unknown dimension axis", axis=name) from None

    @property
    def batch_size(self) -> int:
        return self.axis("batch_size")

    @property
    def channels(self) -> int:
        return self.axis("channels")

    @property
    def height(self) -> int:
        return self.axis("height")

    @property
    def width(self) -> int:
        return self.axis("width")
