"""
Tensor memory / construction mixin.

This module defines `TensorMixinMemory`, a focused mixin that provides
factory constructors (`new`, `zeros`, `from_numpy`), host read-back
(`to_numpy`, `to_vector`) and the writing entry points (`assign`, `fill`,
`assign_indexed`, `make_dense`) of the concrete `Tensor`.

Design intent
-------------
- Keep object creation and memory movement centralized in the tensor
  implementation (infrastructure layer), while the domain layer stays free
  of any backend or NumPy dependency.
- Every side-effecting method takes the caller's `ExecutionContext` as its
  first argument; nothing reads ambient stream or datatype state.
- Host transfers go through a staging host buffer and block on a stream
  event before the staging memory is released or read.

Notes
-----
- The mixin assumes the concrete `Tensor` class provides `driver`,
  `dimensions`, `index_system`, `buffer`, `datatype`, `device`, `ecount`,
  `is_dense` and `index_rows(...)`.
- Assignment dispatch lives in `_tensor_assign`; this mixin only builds the
  request.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Sequence, Type, TypeVar, Union

import numpy as np

from .....domain._dimensions import Dimensions
from ..._compat import (
    check_partial_alias,
    ensure_commensurate,
    ensure_context_driver,
    ensure_indexes,
    ensure_matching_datatypes,
    ensure_same_device,
)
from ._tensor_assign import Assignment

if TYPE_CHECKING:
    from ..._tensor import Tensor
    from ..._tensor_context import ExecutionContext

logger = logging.getLogger(__name__)

Number = Union[int, float]

T = TypeVar("T", bound="TensorMixinMemory")


class TensorMixinMemory:
    """
    Mixin that implements tensor construction and memory-management helpers.

    Provides:

    - Factory constructors: `new`, `zeros`, `from_numpy`
    - Host read-back: `to_numpy`, `to_vector`
    - Writes: `assign`, `fill`, `assign_indexed`
    - Densification: `make_dense`
    """

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def zeros(
        cls: Type[T],
        ctx: "ExecutionContext",
        dimensions: Dimensions,
        *,
        datatype: Any = None,
    ) -> T:
        """
        Allocate a zero-filled dense tensor on the context's device.

        Parameters
        ----------
        ctx : ExecutionContext
            Context providing the driver, device, stream and default datatype.
        dimensions : Dimensions
            Logical shape of the new tensor.
        datatype : Any, optional
            Element datatype. Defaults to ``ctx.datatype``.
        """
        datatype = ctx.datatype if datatype is None else np.dtype(datatype)
        ecount = dimensions.ecount
        buffer = ctx.driver.allocate_device_buffer(ecount, datatype, ctx.device)
        if ecount > 0:
            ctx.stream.memset(buffer, 0, 0, ecount)
        return cls(ctx.driver, dimensions, None, buffer)

    @classmethod
    def new(
        cls: Type[T],
        ctx: "ExecutionContext",
        shape: Sequence[int],
        *,
        batch_size: int = 1,
        datatype: Any = None,
    ) -> T:
        """
        Allocate a zero-filled tensor from a host-style shape.

        The outermost entry of `shape` is split by `batch_size` (see
        `Dimensions.from_shape`).

        Raises
        ------
        ShapeError
            For shapes of rank other than 1 to 3, or an outer entry not
            divisible by `batch_size`.
        """
        return cls.zeros(
            ctx, Dimensions.from_shape(shape, batch_size), datatype=datatype
        )

    @classmethod
    def from_numpy(
        cls: Type[T],
        ctx: "ExecutionContext",
        data: Any,
        *,
        batch_size: int = 1,
        datatype: Any = None,
    ) -> T:
        """
        Upload host data into a new dense tensor.

        The data is converted to the target datatype, staged in a host buffer,
        copied to the device and the call blocks until the copy has completed
        so the staging buffer can be released.

        Parameters
        ----------
        ctx : ExecutionContext
            Execution context.
        data : array_like
            Host values. Scalars become a 1-element vector; 4D arrays map to
            ``(batch, channels, height, width)`` directly.
        batch_size : int, optional
            Batch size folded into the outermost entry for ranks 1 to 3.
        datatype : Any, optional
            Element datatype. Defaults to ``ctx.datatype``.
        """
        datatype = ctx.datatype if datatype is None else np.dtype(datatype)
        arr = np.asarray(data, dtype=datatype)
        if arr.ndim == 0:
            arr = arr.reshape(1)
        if arr.ndim == 4 and batch_size == 1:
            dimensions = Dimensions(arr.shape)
        else:
            dimensions = Dimensions.from_shape(arr.shape, batch_size)

        out = cls.zeros(ctx, dimensions, datatype=datatype)
        ecount = dimensions.ecount
        if ecount == 0:
            return out

        host = ctx.driver.allocate_host_buffer(ecount, datatype)
        host.as_numpy()[...] = arr.reshape(-1)
        logger.debug("from_numpy: host -> %s, %d elements", ctx.device, ecount)
        ctx.stream.copy_host_to_device(host, 0, out.buffer, 0, ecount)
        ctx.wait()
        return out

    # ------------------------------------------------------------------
    # Read-back
    # ------------------------------------------------------------------
    def to_vector(self, ctx: "ExecutionContext") -> np.ndarray:
        """
        Copy the logical contents to host memory as a flat row-major array.

        Strided and gathered views are densified first, so the result is
        always the logical read-out, never the raw buffer.
        """
        dense = self.make_dense(ctx)
        ecount = dense.ecount
        host = ctx.driver.allocate_host_buffer(ecount, dense.datatype)
        if ecount > 0:
            logger.debug("to_vector: %s -> host, %d elements", dense.device, ecount)
            ctx.stream.copy_device_to_host(dense.buffer, 0, host, 0, ecount)
            ctx.wait()
        return np.array(host.as_numpy()[:ecount], copy=True)

    def to_numpy(self, ctx: "ExecutionContext") -> np.ndarray:
        """Host copy shaped ``(batch, channels, height, width)``."""
        return self.to_vector(ctx).reshape(self.dimensions.shape)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def assign(self, ctx: "ExecutionContext", src: Union["Tensor", Number]) -> None:
        """
        Overwrite this tensor's logical elements with `src`.

        Parameters
        ----------
        ctx : ExecutionContext
            Execution context receiving the backend calls.
        src : Union[Tensor, Number]
            A scalar (broadcast to every element) or a tensor whose element
            count evenly divides this tensor's. A smaller source is replayed
            back-to-back until the destination is covered.

        Raises
        ------
        TypeError
            If `src` is neither a tensor nor a scalar.
        CommensurabilityError
            If the source is larger or does not evenly divide the destination.
        CompatibilityError
            On driver or datatype mismatch.
        AliasError
            If the buffers partially overlap.
        """
        Assignment(ctx, self, src).run()

    def fill(self, ctx: "ExecutionContext", value: Number) -> None:
        """Assign the scalar `value` to every logical element."""
        self.assign(ctx, value)

    def assign_indexed(
        self,
        ctx: "ExecutionContext",
        dest_indexes: "Tensor",
        src: "Tensor",
        src_indexes: "Tensor",
    ) -> None:
        """
        Row-indexed assignment ``self[dest_indexes] = src[src_indexes]``.

        Row ``dest_indexes[i]`` of this tensor receives row ``src_indexes[i]``
        of `src`. The element counts involved are
        ``num_columns * index_count`` on each side and must be commensurate;
        the smaller side is replayed cyclically.

        Notes
        -----
        Writing the same destination row more than once (repeated entries in
        `dest_indexes`) gives an undefined result. This is not detected.

        Raises
        ------
        IndexSystemError
            If the index tensors are not integer, dense and simply monotonic,
            differ in length, or a tensor cannot be row-indexed.
        CommensurabilityError
            If the indexed element counts are not commensurate.
        """
        ensure_indexes(dest_indexes, src_indexes)
        dest_view = self.index_rows(dest_indexes)
        src_view = src.index_rows(src_indexes)
        dest_ecount, src_ecount = dest_view.ecount, src_view.ecount
        ensure_commensurate(dest_ecount, src_ecount)
        ensure_context_driver(ctx, self, dest_indexes, src, src_indexes)
        ensure_same_device(self, dest_indexes, src, src_indexes)
        ensure_matching_datatypes(self, src)
        check_partial_alias(self, src)
        if min(dest_ecount, src_ecount) == 0:
            return
        logger.debug(
            "assign indexed: %d rows, %d -> %d elements",
            dest_indexes.ecount,
            src_ecount,
            dest_ecount,
        )
        ctx.stream.assign(
            dest_view.buffer,
            dest_view.index_system,
            dest_ecount,
            src_view.buffer,
            src_view.index_system,
            src_ecount,
        )

    # ------------------------------------------------------------------
    # Densification
    # ------------------------------------------------------------------
    def make_dense(self: T, ctx: "ExecutionContext") -> T:
        """
        Return a dense tensor with the same logical contents.

        Dense tensors are returned as-is (no allocation). Anything else is
        copied element by element, in row-major logical order, into a fresh
        buffer allocated on this tensor's device.
        """
        if self.is_dense:
            return self
        datatype = self.datatype
        ecount = self.ecount
        buffer = self.driver.allocate_device_buffer(ecount, datatype, self.device)
        out = self.__class__(self.driver, self.dimensions, None, buffer)
        logger.debug(
            "make_dense: %d elements from %s view",
            ecount,
            self.index_system.strategy.value,
        )
        out.assign(ctx, self)
        return out
