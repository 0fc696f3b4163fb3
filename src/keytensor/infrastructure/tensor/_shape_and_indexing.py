"""
Tensor reinterpretation, windowing and gather mixin.

This module defines `TensorShapeAndIndexingMixin`, which implements every
view derivation of the concrete `Tensor`. None of these methods copy data:
each returns a new tensor over the same buffer (or over a zero-copy
sub-buffer of it) with new dimensions and/or a new index system.

Design notes
------------
- To avoid circular imports the implementation never imports `Tensor`;
  new views are built through the host class (`self._derive`, which calls
  `self.__class__`).
- Windows (`sub_vector`, `sub_matrix`, `rows`, `columns`) use
  `driver.sub_buffer` so that the backend can see and report aliasing.
- Gathers (`index_columns`, `index_rows`, `index_elements`) keep the buffer
  and swap in an indexed strategy. Gather views take the generic kernel path
  in every operation; consumers that need dense or strided operands (e.g.
  matrix multiply) must reject them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ...domain._dimensions import Dimensions
from ...domain._errors import IndexSystemError, ShapeError
from ...domain._index_system import IndexSystem
from ._compat import ensure_indexable_tensor, ensure_indexes, ensure_same_device

if TYPE_CHECKING:
    from ._tensor import Tensor


class TensorShapeAndIndexingMixin:
    """
    View derivations for the concrete Tensor implementation.

    Notes
    -----
    Methods assume the host class provides `driver`, `dimensions`,
    `index_system`, `buffer`, `ecount`, `shape_2d`, `column_stride`,
    `num_columns`, `is_dense` and `_derive(...)`.
    """

    # ------------------------------------------------------------------
    # Reinterpretation
    # ------------------------------------------------------------------
    def reinterpret(self, new_dimensions: Dimensions) -> "Tensor":
        """
        View the same memory through different dimensions.

        Dense tensors get a fresh dense index system over the new element
        count (the buffer capacity check still applies). Strided and gathered
        tensors keep their index system, so the element count must not
        change.

        Raises
        ------
        ShapeError
            If a non-dense tensor is reinterpreted with a different element
            count.
        CapacityError
            If the buffer cannot hold the new dense element count.
        """
        if not isinstance(new_dimensions, Dimensions):
            raise TypeError(
                f"new_dimensions must be Dimensions, got {type(new_dimensions).__name__}"
            )
        if self.is_dense:
            return self._derive(
                new_dimensions, IndexSystem.monotonic(new_dimensions.ecount)
            )
        if new_dimensions.ecount != self.ecount:
            raise ShapeError(
                "Strided or indexed tensors can only be reinterpreted with the "
                "same element count",
                ecount=self.ecount,
                new_ecount=new_dimensions.ecount,
            )
        return self._derive(new_dimensions, self.index_system)

    def as_vector(self) -> "Tensor":
        return self.reinterpret(Dimensions.create(width=self.ecount))

    def _ensure_vector_compatible(self, kind: str) -> None:
        if not (self.is_dense or self.num_columns == 1):
            raise ShapeError(
                f"{kind} vectors must either be dense or have num-columns = 1",
                dense=self.is_dense,
                num_columns=self.num_columns,
            )

    def as_row_vector(self) -> "Tensor":
        self._ensure_vector_compatible("Row")
        return self.reinterpret(Dimensions.create(width=self.ecount))

    def as_column_vector(self) -> "Tensor":
        self._ensure_vector_compatible("Column")
        return self.reinterpret(Dimensions.create(height=self.ecount, width=1))

    def as_2d_matrix(self) -> "Tensor":
        """As a matrix of shape ``[everything-else, width]``."""
        n_rows, n_cols = self.shape_2d
        return self.reinterpret(Dimensions.create(height=n_rows, width=n_cols))

    def as_batch_matrix(self) -> "Tensor":
        """As a matrix of shape ``[batch-size, everything-else]``."""
        batch, rest = self.dimensions.batch_shape
        return self.reinterpret(Dimensions.create(height=batch, width=rest))

    # ------------------------------------------------------------------
    # Windows
    # ------------------------------------------------------------------
    def _ensure_row_layout(self) -> None:
        """Windows need monotonic addressing whose rows match the 2D shape."""
        ensure_indexable_tensor(self)
        if self.is_strided and self.num_columns != self.shape_2d[1]:
            raise ShapeError(
                "Strided tensor rows do not match its innermost dimension",
                num_columns=self.num_columns,
                shape_2d=self.shape_2d,
            )

    def sub_vector(self, offset: int, length: Optional[int] = None) -> "Tensor":
        """
        Dense 1D window of `length` elements starting at `offset`.

        Parameters
        ----------
        offset : int
            First logical element of the window.
        length : Optional[int]
            Window length. Defaults to everything after `offset`.

        Raises
        ------
        ShapeError
            If ``offset < 0``, the resulting length is negative, or the window
            runs past the end of the tensor.
        IndexSystemError
            If the tensor is not dense.
        """
        offset = int(offset)
        if offset < 0:
            raise ShapeError("Offset must be >= 0", offset=offset)
        if not self.is_dense:
            raise IndexSystemError(
                "Sub-vectors can only be taken from dense tensors",
                strategy=self.index_system.strategy.value,
            )
        ecount = self.ecount
        new_len = ecount - offset if length is None else int(length)
        if new_len < 0:
            raise ShapeError(
                "New length of tensor is < 0",
                tensor_ecount=ecount,
                offset=offset,
                new_length=new_len,
            )
        if offset + new_len > ecount:
            raise ShapeError(
                "Sub-vector runs past the end of the tensor",
                tensor_ecount=ecount,
                offset=offset,
                new_length=new_len,
            )
        new_buf = self.driver.sub_buffer(self.buffer, offset, new_len)
        return self._derive(Dimensions.create(width=new_len), None, new_buf)

    def sub_matrix(
        self, row_start: int, row_length: int, col_start: int, col_length: int
    ) -> "Tensor":
        """
        Window of the 2D-folded tensor.

        The window starts at ``row_start * column_stride + col_start``, keeps
        the parent's column stride and has `col_length` valid columns.

        Raises
        ------
        ShapeError
            If a start or length is negative or a range exceeds the folded
            2D shape.
        IndexSystemError
            If the tensor is gathered.
        """
        self._ensure_row_layout()
        row_start, row_length = int(row_start), int(row_length)
        col_start, col_length = int(col_start), int(col_length)
        n_rows, n_cols = self.shape_2d
        if row_start < 0 or col_start < 0:
            raise ShapeError(
                "Row and column starts must be >= 0",
                row_start=row_start,
                col_start=col_start,
            )
        if row_length < 0 or col_length < 0:
            raise ShapeError(
                "Row and column lengths must be >= 0",
                row_length=row_length,
                col_length=col_length,
            )
        if row_start + row_length > n_rows:
            raise ShapeError(
                "Required row length out of bounds",
                existing_row_length=n_rows,
                row_start=row_start,
                row_length=row_length,
            )
        if col_start + col_length > n_cols:
            raise ShapeError(
                "Required col length out of bounds",
                existing_col_length=n_cols,
                col_start=col_start,
                col_length=col_length,
            )

        column_stride = self.column_stride
        index_system = IndexSystem.monotonic(row_length * col_length).with_stride(
            column_stride, col_length
        )
        required = index_system.required_length
        start_offset = row_start * column_stride + col_start
        if required == 0:
            start_offset = min(start_offset, self.buffer.ecount)
        sub_buffer = self.driver.sub_buffer(self.buffer, start_offset, required)
        return self._derive(
            Dimensions.create(height=row_length, width=col_length),
            index_system,
            sub_buffer,
        )

    def rows(self) -> list["Tensor"]:
        """One dense 1D view per row of the 2D-folded tensor."""
        self._ensure_row_layout()
        n_rows, n_cols = self.shape_2d
        column_stride = self.column_stride
        dims = Dimensions.create(width=n_cols)
        return [
            self._derive(
                dims,
                None,
                self.driver.sub_buffer(self.buffer, idx * column_stride, n_cols),
            )
            for idx in range(n_rows)
        ]

    def columns(self) -> list["Tensor"]:
        """One 1D view per column, striding by the column stride."""
        self._ensure_row_layout()
        n_rows, n_cols = self.shape_2d
        column_stride = self.column_stride
        col_required = (n_rows - 1) * column_stride + 1 if n_rows > 0 else 0
        index_system = IndexSystem.monotonic(n_rows).with_stride(column_stride, 1)
        dims = Dimensions.create(width=n_rows)
        return [
            self._derive(
                dims,
                index_system,
                self.driver.sub_buffer(self.buffer, offset, col_required),
            )
            for offset in range(n_cols)
        ]

    # ------------------------------------------------------------------
    # Gathers
    # ------------------------------------------------------------------
    def index_columns(self, indexes: "Tensor") -> "Tensor":
        """
        Select columns of the 2D-folded tensor by the integer tensor `indexes`.

        The result has the same number of rows and one column per index;
        column ``j`` of the result reads column ``indexes[j]`` of this tensor.
        Operations on the result are restricted to non-gemm operations.

        Index values are not range-checked here. A value past the valid
        columns reads row padding (or the next row) as long as it stays inside
        the buffer; offsets outside the buffer fail when the view is read.

        Raises
        ------
        IndexSystemError
            If `indexes` is not a valid index tensor or this tensor is gathered.
        CompatibilityError
            If `indexes` belongs to another driver.
        DeviceMismatchError
            If `indexes` lives on another device.
        """
        ensure_indexes(indexes)
        ensure_same_device(self, indexes)
        self._ensure_row_layout()
        n_rows, _ = self.shape_2d
        index_system = IndexSystem.indexed(
            indexes, 1, index_stride=1, outer_stride=self.column_stride
        )
        return self._derive(
            Dimensions.create(height=n_rows, width=indexes.ecount), index_system
        )

    def index_rows(self, indexes: "Tensor") -> "Tensor":
        """
        Select rows of the 2D-folded tensor by the integer tensor `indexes`.

        Row ``i`` of the result reads row ``indexes[i]`` of this tensor.
        Operations on the result are restricted to non-gemm operations.

        Index values are not range-checked against the row count; rows past
        the end are only caught if they fall outside the buffer when read.

        Raises
        ------
        IndexSystemError
            If `indexes` is not a valid index tensor or this tensor is gathered.
        CompatibilityError
            If `indexes` belongs to another driver or device.
        """
        ensure_indexes(indexes)
        ensure_same_device(self, indexes)
        self._ensure_row_layout()
        _, n_cols = self.shape_2d
        if n_cols == 0:
            raise ShapeError("Cannot index rows of a tensor with no columns")
        index_system = IndexSystem.indexed(
            indexes, n_cols, index_stride=self.column_stride
        )
        return self._derive(
            Dimensions.create(height=indexes.ecount, width=n_cols), index_system
        )

    def index_elements(self, indexes: "Tensor") -> "Tensor":
        """
        Select individual elements by the integer tensor `indexes`.

        The result is a vector whose element ``i`` reads element
        ``indexes[i]`` of this (dense) tensor.

        Raises
        ------
        IndexSystemError
            If `indexes` is invalid or this tensor is not dense.
        CompatibilityError
            If `indexes` belongs to another driver or device.
        """
        ensure_indexes(indexes)
        ensure_same_device(self, indexes)
        ensure_indexable_tensor(self)
        if not self.is_dense:
            raise IndexSystemError(
                "Elements can only be indexed on dense tensors",
                column_stride=self.column_stride,
                num_columns=self.num_columns,
            )
        index_system = IndexSystem.indexed(indexes, 1)
        return self._derive(Dimensions.create(width=indexes.ecount), index_system)
