"""
Duck-typed device contract.

Backends are free to describe their devices with their own classes. The
engine only needs to compare devices and print them, so it types against this
structural protocol instead of the concrete `Device` class.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class DeviceLike(Protocol):
    """
    Any object usable as a device descriptor.

    Notes
    -----
    Equality is the only operation the compatibility checker performs on
    devices; implementations must define `__eq__` accordingly.
    """

    type: object
    index: int

    def is_cpu(self) -> bool: ...
    def is_cuda(self) -> bool: ...
    def __str__(self) -> str: ...
