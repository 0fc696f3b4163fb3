"""
Host-memory buffers of the reference CPU driver.

A `CpuBuffer` is a window ``[offset, offset + length)`` onto a flat NumPy
*root* allocation. Sub-buffers share the root of the buffer they were cut
from, which is what makes aliasing observable: two buffers overlap exactly
when they share a root and their element ranges intersect.

Lifetime
--------
The root array is owned jointly by every buffer cut from it and released by
Python's garbage collector once the last one is dropped. No explicit free
exists; the engine never frees memory itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from ....domain.device._device import Device


@dataclass(eq=False)
class CpuBuffer:
    """
    Window onto a flat NumPy allocation.

    Attributes
    ----------
    root : np.ndarray
        1D allocation shared by every buffer cut from it.
    offset : int
        First element of the window inside `root`.
    length : int
        Number of elements in the window.
    device : Device
        Device the allocation belongs to.
    is_host : bool
        True for host staging buffers.

    Notes
    -----
    Equality is identity (``eq=False``); two distinct windows over the same
    range are different buffers that fully alias each other.
    """

    root: np.ndarray = field(repr=False)
    offset: int
    length: int
    device: Device
    is_host: bool = False

    @property
    def ecount(self) -> int:
        return self.length

    @property
    def dtype(self) -> np.dtype:
        return self.root.dtype

    def __len__(self) -> int:
        return self.length

    def as_numpy(self) -> np.ndarray:
        """Return a writable view of the window (no copy)."""
        return self.root[self.offset : self.offset + self.length]

    def address_range(self) -> tuple[int, int]:
        """Half-open element range ``(start, end)`` inside the root."""
        return self.offset, self.offset + self.length
