"""
Element-wise binary operations for Tensor.

The base mixin implements the four binary forms (in-place, separate result,
and their row-indexed counterparts) on top of the backend `binary_op`
kernel. Validation of counts, placement and aliasing happens in the mixin so
that every backend shares the same edge-case behavior.

Public API
----------
Only the base mixin class is exported as part of the public interface:

- ``TensorMixinArithmetic``
"""

from ._base import TensorMixinArithmetic

__all__ = [
    TensorMixinArithmetic.__name__,
]
