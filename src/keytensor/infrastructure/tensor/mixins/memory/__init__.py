"""
Tensor memory operations for KeyTensor.

This package groups the construction, host transfer and assignment entry
points of the concrete `Tensor`:

- `new` / `zeros` / `from_numpy`  : zero-filled or host-initialized tensors
- `to_numpy` / `to_vector`        : logical read-back into host memory
- `assign` / `fill`               : scalar or tensor assignment
- `assign_indexed`                : row-indexed assignment
- `make_dense`                    : densify strided or gathered views

`_tensor_assign` is imported for its side effects: it registers the
assignment control paths for each supported operand pair.

Public API
----------
Only `TensorMixinMemory` is re-exported as part of the public interface.
"""

from ._tensor_assign import *
from ._base import TensorMixinMemory

__all__ = [
    TensorMixinMemory.__name__,
]
