"""
NumPy kernels of the reference CPU backend.

The engine never calls these directly; `CpuStream` does, after the engine has
validated every precondition.
"""

from ._addressing_cpu import check_bounds, physical_offsets
from ._elementwise_cpu import assign, assign_constant, binary_op

__all__ = [
    assign.__name__,
    assign_constant.__name__,
    binary_op.__name__,
    check_bounds.__name__,
    physical_offsets.__name__,
]
