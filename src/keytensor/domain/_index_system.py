"""
Addressing strategies.

An `IndexSystem` translates a logical, row-major element position into a
physical offset inside a buffer. Keeping the strategy separate from the buffer
lets every view derivation (sub-matrix, row/column extraction, gathers) be
expressed as "replace the index system, keep the buffer".

Strategies
----------
Monotonic
    Position ``i`` maps to
    ``(i // num_columns) * column_stride + i % num_columns``.
    Without a stride this is the identity (a *dense* layout). With a stride
    larger than `num_columns` it describes padded rows, e.g. a sub-matrix
    window of a wider matrix.

Indexed (gather)
    An auxiliary integer index buffer of `index_count` entries selects blocks
    of `elements_per_index` contiguous elements. Position ``i`` maps to::

        block, within = divmod(i, elements_per_index)
        turn, entry = divmod(block, index_count)
        turn * outer_stride + index[entry] * index_stride + within

    With the default ``index_stride = elements_per_index`` and
    ``outer_stride = 0`` each index value selects the run starting at
    ``index * elements_per_index``. Row gathers use the source's column
    stride as `index_stride`; column gathers use ``elements_per_index = 1``
    and the source's column stride as `outer_stride`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

from ._errors import CapacityError, IndexSystemError, ShapeError
from .types._datatype import is_integer_datatype

if TYPE_CHECKING:
    from ._driver import IBuffer
    from ._tensor import ITensor


class IndexStrategy(Enum):
    """Addressing strategy tag."""

    MONOTONIC = "monotonically-increasing"
    INDEXED = "indexed"


def _non_negative(name: str, value: int) -> int:
    value = int(value)
    if value < 0:
        raise ShapeError(f"{name} must be non-negative", **{name: value})
    return value


@dataclass(frozen=True)
class IndexSystem:
    """
    Immutable addressing strategy.

    Attributes
    ----------
    strategy : IndexStrategy
        Monotonic or indexed.
    length : int
        Monotonic: number of logical elements addressed. Indexed: elements
        addressed by one pass over the index list
        (``index_count * elements_per_index``).
    column_stride : Optional[int]
        Physical distance between successive rows (monotonic only).
    num_columns : Optional[int]
        Valid elements per row; never larger than `column_stride`.
    index_buffer : Optional[IBuffer]
        Dense integer buffer holding gather indexes (indexed only).
    index_count : int
        Number of entries in `index_buffer`.
    elements_per_index : int
        Contiguous run length materialized per index entry.
    index_stride : int
        Physical distance represented by one unit of an index value.
    outer_stride : int
        Physical distance added every time the index list is exhausted.
    """

    strategy: IndexStrategy
    length: int
    column_stride: Optional[int] = None
    num_columns: Optional[int] = None
    index_buffer: Optional["IBuffer"] = None
    index_count: int = 0
    elements_per_index: int = 1
    index_stride: int = 1
    outer_stride: int = 0

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------
    @classmethod
    def monotonic(cls, n: int) -> "IndexSystem":
        """Dense identity addressing over `n` elements."""
        return cls(IndexStrategy.MONOTONIC, _non_negative("length", n))

    def with_stride(self, column_stride: int, num_columns: int) -> "IndexSystem":
        """
        Return a padded-row variant of this monotonic strategy.

        Parameters
        ----------
        column_stride : int
            Distance between the starts of successive rows.
        num_columns : int
            Number of valid elements at the start of each row.

        Raises
        ------
        IndexSystemError
            If this strategy is indexed.
        CapacityError
            If ``num_columns > column_stride``.
        ShapeError
            If either value is negative, or rows have zero columns while
            elements are addressed.
        """
        if self.is_indexed:
            raise IndexSystemError(
                "Only monotonic index systems can be strided",
                strategy=self.strategy.value,
            )
        column_stride = _non_negative("column_stride", column_stride)
        num_columns = _non_negative("num_columns", num_columns)
        if num_columns > column_stride:
            raise CapacityError(
                "Tensor buffer column-count is greater than supplied column stride",
                num_columns=num_columns,
                column_stride=column_stride,
            )
        if num_columns == 0 and self.length > 0:
            raise ShapeError(
                "Strided rows must hold at least one column",
                length=self.length,
                num_columns=num_columns,
            )
        if num_columns == column_stride:
            # Unpadded rows are a dense layout.
            return IndexSystem.monotonic(self.length)
        return IndexSystem(
            IndexStrategy.MONOTONIC,
            self.length,
            column_stride=column_stride,
            num_columns=num_columns,
        )

    @classmethod
    def indexed(
        cls,
        indexes: "ITensor",
        elements_per_index: int = 1,
        *,
        index_stride: Optional[int] = None,
        outer_stride: int = 0,
    ) -> "IndexSystem":
        """
        Gather addressing keyed by the integer tensor `indexes`.

        Parameters
        ----------
        indexes : ITensor
            Dense, integer-typed, simply monotonic view holding the indexes.
            Indexes cannot themselves be indexed.
        elements_per_index : int, optional
            Run length materialized per index entry. Defaults to 1.
        index_stride : Optional[int], optional
            Distance per index unit. Defaults to `elements_per_index`.
        outer_stride : int, optional
            Distance added per full pass over the indexes. Defaults to 0.

        Raises
        ------
        IndexSystemError
            If `indexes` is not integer, dense and simply monotonic.
        CapacityError
            If ``elements_per_index > index_stride``.
        """
        ensure_index_tensor(indexes)
        elements_per_index = int(elements_per_index)
        if elements_per_index < 1:
            raise ShapeError(
                "elements_per_index must be positive",
                elements_per_index=elements_per_index,
            )
        if index_stride is None:
            index_stride = elements_per_index
        index_stride = _non_negative("index_stride", index_stride)
        if elements_per_index > index_stride:
            raise CapacityError(
                "Elements per index exceed the index stride",
                elements_per_index=elements_per_index,
                index_stride=index_stride,
            )
        index_count = int(indexes.ecount)
        return cls(
            IndexStrategy.INDEXED,
            index_count * elements_per_index,
            index_buffer=indexes.buffer,
            index_count=index_count,
            elements_per_index=elements_per_index,
            index_stride=index_stride,
            outer_stride=_non_negative("outer_stride", outer_stride),
        )

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------
    @property
    def is_monotonic(self) -> bool:
        return self.strategy is IndexStrategy.MONOTONIC

    @property
    def is_indexed(self) -> bool:
        return self.strategy is IndexStrategy.INDEXED

    @property
    def is_simple_monotonic(self) -> bool:
        """Monotonically increasing without repetition; strides are ignored."""
        return self.is_monotonic

    @property
    def is_strided(self) -> bool:
        return (
            self.is_monotonic
            and self.column_stride is not None
            and self.num_columns is not None
            and self.column_stride != self.num_columns
        )

    @property
    def is_dense(self) -> bool:
        """Unpadded monotonic addressing: offset equals logical position."""
        return self.is_monotonic and not self.is_strided

    @property
    def required_length(self) -> int:
        """Minimum buffer element count this strategy may touch."""
        if self.is_indexed:
            return self.index_count * self.elements_per_index
        if self.length == 0:
            return 0
        if self.is_dense:
            return self.length
        last_row, last_col = divmod(self.length - 1, self.num_columns)
        return last_row * self.column_stride + last_col + 1


def ensure_index_tensor(indexes: "ITensor") -> None:
    """
    Validate that `indexes` may key a gather strategy.

    Raises
    ------
    IndexSystemError
        If the tensor is not integer-typed, not dense, or not simply
        monotonic.
    """
    if not is_integer_datatype(indexes.datatype):
        raise IndexSystemError(
            "Index tensors must have an integer datatype",
            datatype=str(indexes.datatype),
        )
    index_system = indexes.index_system
    if not (index_system.is_dense and index_system.is_simple_monotonic):
        raise IndexSystemError(
            "Indexes must be simply indexed which means simple monotonically "
            "increasing with no repetition",
            strategy=index_system.strategy.value,
            dense=index_system.is_dense,
        )
