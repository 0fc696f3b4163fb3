"""
Tensor mixins grouped by concern.

- `memory`     : construction, host transfer, assignment and densification
- `arithmetic` : element-wise binary forms
"""

from .arithmetic import TensorMixinArithmetic
from .memory import TensorMixinMemory

__all__ = [
    TensorMixinArithmetic.__name__,
    TensorMixinMemory.__name__,
]
