"""
Domain-level structural typing for NumPy-like arrays.

Host staging buffers expose their contents as array-like objects. The domain
layer types against this protocol so it never has to import NumPy itself;
infrastructure code hands out real `numpy.ndarray` instances.
"""

from __future__ import annotations

from typing import Any, Protocol, Tuple, runtime_checkable


@runtime_checkable
class NDArrayLike(Protocol):
    """
    Minimal ndarray surface used by the engine.

    Notes
    -----
    Only the members needed to stage host data are modelled: shape and size
    queries, flat reshaping, element access and copying.
    """

    @property
    def shape(self) -> Tuple[int, ...]: ...

    @property
    def size(self) -> int: ...

    @property
    def dtype(self) -> Any: ...

    def reshape(self, *shape: Any) -> "NDArrayLike": ...

    def ravel(self) -> "NDArrayLike": ...

    def copy(self) -> "NDArrayLike": ...

    def __getitem__(self, key: Any) -> Any: ...

    def __setitem__(self, key: Any, value: Any) -> None: ...
