"""
Index-system address generation for the NumPy reference backend.

Backend kernels never see shapes. They receive an `IndexSystem` and an element
count and translate every logical position into a physical buffer offset.
This module performs that translation with vectorized NumPy arithmetic and
returns the offsets as an ``int64`` array, which kernels then use for fancy
indexing into the flat buffer.
"""

from __future__ import annotations

from typing import Callable

import numpy as np

from ...domain._errors import IndexSystemError
from ...domain._index_system import IndexSystem

IndexReader = Callable[[object, int], np.ndarray]
"""``(index_buffer, index_count) -> int array`` accessor supplied by the driver."""


def physical_offsets(
    index_system: IndexSystem,
    ecount: int,
    read_indexes: IndexReader,
) -> np.ndarray:
    """
    Translate logical positions ``0..ecount-1`` into physical offsets.

    Parameters
    ----------
    index_system : IndexSystem
        Addressing strategy of the view.
    ecount : int
        Number of logical positions to translate.
    read_indexes : IndexReader
        Reads the contents of a gather index buffer.

    Returns
    -------
    np.ndarray
        ``int64`` offsets of shape ``(ecount,)``.

    Raises
    ------
    IndexSystemError
        If a gather strategy with an empty index list must address elements.
    """
    positions = np.arange(int(ecount), dtype=np.int64)
    if ecount == 0:
        return positions

    if index_system.is_monotonic:
        if index_system.is_dense:
            return positions
        rows, cols = np.divmod(positions, index_system.num_columns)
        return rows * index_system.column_stride + cols

    if index_system.index_count == 0:
        raise IndexSystemError(
            "Cannot address elements through an empty index list", ecount=ecount
        )
    indexes = np.asarray(
        read_indexes(index_system.index_buffer, index_system.index_count),
        dtype=np.int64,
    )
    block, within = np.divmod(positions, index_system.elements_per_index)
    turn, entry = np.divmod(block, index_system.index_count)
    return (
        turn * index_system.outer_stride
        + indexes[entry] * index_system.index_stride
        + within
    )


def check_bounds(offsets: np.ndarray, buffer_ecount: int) -> None:
    """Raise `IndexSystemError` if any offset falls outside the buffer."""
    if offsets.size == 0:
        return
    lo, hi = int(offsets.min()), int(offsets.max())
    if lo < 0 or hi >= buffer_ecount:
        raise IndexSystemError(
            "Computed offsets fall outside the buffer",
            min_offset=lo,
            max_offset=hi,
            buffer_ecount=buffer_ecount,
        )
