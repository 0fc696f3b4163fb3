"""
Element-wise kernels of the NumPy reference backend.

Each kernel works on flat NumPy arrays plus pre-computed offset arrays (see
`_addressing_cpu.physical_offsets`). Operand counts that differ are handled
by cyclic reuse of the smaller operand; the engine has already verified that
all counts are commensurate.

These functions are unchecked. Repeated destination offsets produce whatever
NumPy's fancy assignment produces (last write wins), which callers must treat
as undefined.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from ...domain._binary_op import BinaryOp

_UFUNCS = {
    BinaryOp.ADD: np.add,
    BinaryOp.SUBTRACT: np.subtract,
    BinaryOp.MULTIPLY: np.multiply,
    BinaryOp.DIVIDE: np.divide,
}


def assign_constant(dest: np.ndarray, dest_offsets: np.ndarray, value: Any) -> None:
    """Write `value` at every offset of `dest_offsets`."""
    dest[dest_offsets] = value


def assign(
    dest: np.ndarray,
    dest_offsets: np.ndarray,
    src: np.ndarray,
    src_offsets: np.ndarray,
) -> None:
    """
    Copy the source pattern into the destination, replayed to fill it.

    Both offset lists are walked cyclically over ``max(len(dest), len(src))``
    positions. A larger source (only reachable through indexed assignment)
    therefore writes some destination offsets more than once.

    Notes
    -----
    The source is gathered into a temporary before writing, so fully aliased
    (in-place) assignments read the original values.
    """
    n_dest, n_src = dest_offsets.size, src_offsets.size
    if n_src == 0 or n_dest == 0:
        return
    if n_dest == n_src:
        dest[dest_offsets] = src[src_offsets]
        return
    positions = np.arange(max(n_dest, n_src), dtype=np.int64)
    dest[dest_offsets[positions % n_dest]] = src[src_offsets[positions % n_src]]


def binary_op(
    dest: np.ndarray,
    dest_offsets: np.ndarray,
    x: np.ndarray,
    x_offsets: np.ndarray,
    alpha: Any,
    y: np.ndarray,
    y_offsets: np.ndarray,
    beta: Any,
    op: BinaryOp,
) -> None:
    """
    Compute ``dest = alpha*x op beta*y`` element-wise.

    When the destination is smaller than the largest operand (in-place
    accumulation into a shared buffer), the operation runs in successive
    passes of ``dest`` elements; every pass re-reads the operands, so values
    written by one pass feed the next.
    """
    n_x, n_y, n_dest = x_offsets.size, y_offsets.size, dest_offsets.size
    total = max(n_x, n_y)
    if min(n_x, n_y, n_dest) == 0:
        return
    ufunc = _UFUNCS[op]
    passes = max(1, total // n_dest)
    with np.errstate(divide="ignore", invalid="ignore"):
        for p in range(passes):
            positions = np.arange(p * n_dest, (p + 1) * n_dest, dtype=np.int64)
            xv = x[x_offsets[positions % n_x]]
            yv = y[y_offsets[positions % n_y]]
            dest[dest_offsets] = ufunc(alpha * xv, beta * yv)
