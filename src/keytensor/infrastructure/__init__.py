"""
Infrastructure layer of KeyTensor.

Concrete implementations of the domain contracts: the `Tensor` view and its
mixins, the `ExecutionContext`, the NumPy reference driver and its kernels,
and environment-driven configuration.
"""

from ._config import KeyTensorConfig, configure_logging
from .driver import CpuBuffer, CpuDriver, CpuEvent, CpuStream
from .tensor import ExecutionContext, Tensor

__all__ = [
    CpuBuffer.__name__,
    CpuDriver.__name__,
    CpuEvent.__name__,
    CpuStream.__name__,
    ExecutionContext.__name__,
    KeyTensorConfig.__name__,
    Tensor.__name__,
    configure_logging.__name__,
]
