"""
Concrete tensor view.

`Tensor` is a typed window onto a backend buffer it does not own:

    Tensor = (driver, dimensions, index_system, buffer)

The driver is only compared for identity, the dimensions give the logical
4-axis shape, the index system maps logical positions to buffer offsets, and
the buffer is opaque backend memory. Many tensors may share one buffer.

Tensors are immutable value objects. Operations that derive views
(`reinterpret`, `sub_matrix`, `rows`, `index_columns`, ...) return new tensors
over the same buffer; operations that write (`assign`, `accumulate`, ...)
mutate buffer contents, never the view.

The class is assembled from mixins, following the same layout as the other
tensor operations:

- `TensorShapeAndIndexingMixin`: reinterpretation, windows and gathers
- `TensorMixinMemory`: allocation, host transfer, assignment, `make_dense`
- `TensorMixinArithmetic`: element-wise binary forms
"""

from __future__ import annotations

from typing import Any, Optional

from ...domain._dimensions import Dimensions
from ...domain._driver import IBuffer, IDriver
from ...domain._errors import CapacityError, ShapeError
from ...domain._index_system import IndexSystem
from ...domain.device._device_protocol import DeviceLike
from ._compat import is_simple_tensor
from ._shape_and_indexing import TensorShapeAndIndexingMixin
from .mixins.arithmetic import TensorMixinArithmetic
from .mixins.memory import TensorMixinMemory


class Tensor(TensorShapeAndIndexingMixin, TensorMixinMemory, TensorMixinArithmetic):
    """
    Immutable view of a logical 4-axis tensor over a backend buffer.

    Parameters
    ----------
    driver : IDriver
        Backend driver owning `buffer`.
    dimensions : Dimensions
        Logical shape.
    index_system : Optional[IndexSystem]
        Addressing strategy. ``None`` means dense addressing of
        ``dimensions.ecount`` elements.
    buffer : IBuffer
        Backend memory viewed by the tensor.

    Raises
    ------
    ShapeError
        If a monotonic index system does not address exactly
        ``dimensions.ecount`` elements.
    CapacityError
        If the buffer is smaller than the index system's required length.
    """

    def __init__(
        self,
        driver: IDriver,
        dimensions: Dimensions,
        index_system: Optional[IndexSystem],
        buffer: IBuffer,
    ) -> None:
        if not isinstance(dimensions, Dimensions):
            raise TypeError(
                f"dimensions must be Dimensions, got {type(dimensions).__name__}"
            )
        if index_system is None:
            index_system = IndexSystem.monotonic(dimensions.ecount)

        if index_system.is_monotonic and index_system.length != dimensions.ecount:
            raise ShapeError(
                "Index system length does not match declared dimensions",
                index_length=index_system.length,
                dimensions_ecount=dimensions.ecount,
                shape=dimensions.shape,
            )

        buffer_ecount = int(buffer.ecount)
        required = index_system.required_length
        if required > buffer_ecount:
            raise CapacityError(
                "Supplied buffer does not have enough capacity for declared dimensions",
                buffer_ecount=buffer_ecount,
                required_buffer_ecount=required,
                shape=dimensions.shape,
                column_stride=index_system.column_stride,
                strategy=index_system.strategy.value,
            )

        self._driver = driver
        self._dimensions = dimensions
        self._index_system = index_system
        self._buffer = buffer

    def __repr__(self) -> str:
        return (
            f"Tensor(shape={self.shape}, datatype={self.datatype}, "
            f"device={self.device}, strategy={self._index_system.strategy.value})"
        )

    def _derive(
        self,
        dimensions: Dimensions,
        index_system: Optional[IndexSystem] = None,
        buffer: Optional[IBuffer] = None,
    ) -> "Tensor":
        """New view sharing this tensor's driver (and, by default, buffer)."""
        return self.__class__(
            self._driver,
            dimensions,
            index_system,
            self._buffer if buffer is None else buffer,
        )

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------
    @property
    def driver(self) -> IDriver:
        return self._driver

    @property
    def dimensions(self) -> Dimensions:
        return self._dimensions

    @property
    def index_system(self) -> IndexSystem:
        return self._index_system

    @property
    def buffer(self) -> IBuffer:
        return self._buffer

    @property
    def datatype(self) -> Any:
        return self._buffer.dtype

    @property
    def device(self) -> DeviceLike:
        return self._buffer.device

    # ------------------------------------------------------------------
    # Shape queries
    # ------------------------------------------------------------------
    @property
    def shape(self) -> tuple[int, int, int, int]:
        return self._dimensions.shape

    @property
    def ecount(self) -> int:
        return self._dimensions.ecount

    def __len__(self) -> int:
        return self.ecount

    @property
    def shape_2d(self) -> tuple[int, int]:
        return self._dimensions.shape_2d

    @property
    def batch_shape(self) -> tuple[int, int]:
        return self._dimensions.batch_shape

    @property
    def batch_size(self) -> int:
        return self._dimensions.batch_size

    @property
    def channels(self) -> int:
        return self._dimensions.channels

    @property
    def height(self) -> int:
        return self._dimensions.height

    @property
    def width(self) -> int:
        return self._dimensions.width

    @property
    def column_stride(self) -> int:
        """Physical distance between rows; the row width unless padded."""
        stride = self._index_system.column_stride
        if stride is None or self._index_system.is_dense:
            return self._dimensions.most_rapidly_changing
        return stride

    @property
    def num_columns(self) -> int:
        """Valid elements per physical row."""
        cols = self._index_system.num_columns
        if cols is None or self._index_system.is_dense:
            return self._dimensions.most_rapidly_changing
        return cols

    # ------------------------------------------------------------------
    # Addressing predicates
    # ------------------------------------------------------------------
    @property
    def is_dense(self) -> bool:
        return self._index_system.is_dense

    @property
    def is_strided(self) -> bool:
        return not self._index_system.is_dense

    @property
    def is_simple(self) -> bool:
        """Eligible for raw memset/memcpy fast paths."""
        return is_simple_tensor(self)

    @property
    def is_indexed(self) -> bool:
        return self._index_system.is_indexed

    @property
    def is_indexed_columns(self) -> bool:
        index_system = self._index_system
        return (
            index_system.is_indexed
            and index_system.elements_per_index == 1
            and self.shape_2d[1] == index_system.index_count
        )

    @property
    def is_indexed_rows(self) -> bool:
        index_system = self._index_system
        n_rows, n_cols = self.shape_2d
        return (
            index_system.is_indexed
            and index_system.elements_per_index == n_cols
            and n_rows == index_system.index_count
        )

    @property
    def is_indexed_elements(self) -> bool:
        index_system = self._index_system
        return (
            index_system.is_indexed
            and index_system.elements_per_index == 1
            and self.ecount == index_system.index_count
        )
