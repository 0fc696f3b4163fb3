"""
Tensor view interface.

A tensor in KeyTensor is a view: a ``(driver, dimensions, index_system,
buffer)`` tuple describing how a logical 4-axis array is read from and written
to a backend buffer it does not own.

This protocol captures the members the domain layer (index systems,
compatibility checks, assignment dispatch) needs, so those pieces can be typed
without importing the concrete infrastructure `Tensor` and risking circular
imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from .device._device_protocol import DeviceLike

if TYPE_CHECKING:
    from ._dimensions import Dimensions
    from ._driver import IBuffer, IDriver
    from ._index_system import IndexSystem


@runtime_checkable
class ITensor(Protocol):
    """
    Structural contract of a tensor view.

    Notes
    -----
    - `driver` is used for identity comparison only.
    - `datatype` and `device` are those of the underlying buffer.
    - `ecount` is the element count of the logical dimensions, which may be
      smaller than the buffer (padded or windowed views).
    """

    @property
    def driver(self) -> "IDriver": ...

    @property
    def dimensions(self) -> "Dimensions": ...

    @property
    def index_system(self) -> "IndexSystem": ...

    @property
    def buffer(self) -> "IBuffer": ...

    @property
    def datatype(self) -> Any: ...

    @property
    def device(self) -> DeviceLike: ...

    @property
    def ecount(self) -> int: ...

    @property
    def is_dense(self) -> bool: ...
