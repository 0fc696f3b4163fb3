"""
Backend contract for KeyTensor.

The engine never allocates, frees, copies or computes on memory itself. It
validates requests and then issues calls against the protocols below, which
any compute backend (the NumPy reference driver, a CUDA driver, ...) must
satisfy structurally.

Roles
-----
- `IBuffer`: an opaque, typed span of elements on one device.
- `IHostBuffer`: a buffer in host memory whose contents can be viewed as a
  NumPy-like array (used only for staging transfers).
- `IDriver`: allocation, zero-copy sub-buffers and overlap queries.
- `IStream`: an execution context. Calls issued on one stream execute in
  issue order; `create_event` / `wait_for_event` are the only blocking
  synchronization points.

Kernel entry points (`assign_constant`, `assign`, `binary_op`) receive index
systems instead of shapes. They are unchecked: every precondition has
already been enforced by the engine by the time they are called.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Protocol, Sequence, runtime_checkable

from .device._device_protocol import DeviceLike
from .types._datatype import DatatypeLike
from .types._numpy import NDArrayLike

if TYPE_CHECKING:
    from ._index_system import IndexSystem
    from ._binary_op import BinaryOp


@runtime_checkable
class IBuffer(Protocol):
    """Opaque element buffer owned by a backend."""

    @property
    def ecount(self) -> int:
        """Number of elements in the buffer."""
        ...

    @property
    def dtype(self) -> DatatypeLike:
        """Element datatype."""
        ...

    @property
    def device(self) -> DeviceLike:
        """Device holding the buffer."""
        ...


@runtime_checkable
class IHostBuffer(IBuffer, Protocol):
    """Host-resident staging buffer."""

    def as_numpy(self) -> NDArrayLike:
        """Return a writable 1D array view over the buffer's elements."""
        ...


class IEvent(Protocol):
    """Marker placed on a stream; complete once prior work has finished."""

    def is_complete(self) -> bool: ...


@runtime_checkable
class IStream(Protocol):
    """Issue-ordered execution context of a single device."""

    @property
    def driver(self) -> "IDriver": ...

    @property
    def device(self) -> DeviceLike: ...

    def memset(self, buffer: IBuffer, offset: int, value: Any, ecount: int) -> None:
        """Raw fill of `ecount` elements starting at `offset`."""
        ...

    def copy_host_to_device(
        self,
        host_buffer: IHostBuffer,
        host_offset: int,
        device_buffer: IBuffer,
        device_offset: int,
        ecount: int,
    ) -> None: ...

    def copy_device_to_host(
        self,
        device_buffer: IBuffer,
        device_offset: int,
        host_buffer: IHostBuffer,
        host_offset: int,
        ecount: int,
    ) -> None: ...

    def copy_device_to_device(
        self,
        src_buffer: IBuffer,
        src_offset: int,
        dst_buffer: IBuffer,
        dst_offset: int,
        ecount: int,
    ) -> None:
        """Raw bulk copy; the buffers may live on different devices."""
        ...

    def assign_constant(
        self,
        buffer: IBuffer,
        index_system: "IndexSystem",
        ecount: int,
        value: Any,
    ) -> None:
        """Write `value` to the `ecount` logical positions of `index_system`."""
        ...

    def assign(
        self,
        dest: IBuffer,
        dest_index_system: "IndexSystem",
        dest_ecount: int,
        src: IBuffer,
        src_index_system: "IndexSystem",
        src_ecount: int,
    ) -> None:
        """Generic strided/gather copy replaying the source `dest/src` times."""
        ...

    def binary_op(
        self,
        dest: IBuffer,
        dest_index_system: "IndexSystem",
        dest_ecount: int,
        x: IBuffer,
        x_index_system: "IndexSystem",
        x_ecount: int,
        alpha: Any,
        y: IBuffer,
        y_index_system: "IndexSystem",
        y_ecount: int,
        beta: Any,
        op: "BinaryOp",
    ) -> None:
        """Compute ``dest = alpha*x op beta*y`` with cyclic operand reuse."""
        ...

    def create_event(self) -> IEvent: ...

    def wait_for_event(self, event: IEvent) -> None: ...

    def sync(self) -> None: ...


@runtime_checkable
class IDriver(Protocol):
    """Backend entry point: allocation, sub-buffers and overlap queries."""

    @property
    def devices(self) -> Sequence[DeviceLike]: ...

    def allocate_host_buffer(self, ecount: int, datatype: Any) -> IHostBuffer: ...

    def allocate_device_buffer(
        self, ecount: int, datatype: Any, device: Optional[DeviceLike] = None
    ) -> IBuffer: ...

    def sub_buffer(self, buffer: IBuffer, offset: int, length: int) -> IBuffer:
        """Zero-copy window of `length` elements starting at `offset`."""
        ...

    def partially_alias(self, lhs: IBuffer, rhs: IBuffer) -> bool:
        """True when the buffers overlap but are neither identical nor disjoint."""
        ...

    def create_stream(self, device: Optional[DeviceLike] = None) -> IStream: ...
