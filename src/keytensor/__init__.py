"""
KeyTensor: device-agnostic tensor addressing and assignment.

A tensor is a view ``(driver, dimensions, index_system, buffer)`` over memory
owned by a compute backend. KeyTensor derives views (reshapes, sub-matrices,
row/column extraction, gathers) without copying, and validates and dispatches
assignments and element-wise binary operations to the backend.

Quick start::

    import numpy as np
    from keytensor import ExecutionContext, Tensor

    ctx = ExecutionContext.create()
    t = Tensor.from_numpy(ctx, np.arange(16.0).reshape(4, 4))
    window = t.sub_matrix(1, 2, 1, 2)
    window.fill(ctx, 0.0)
"""

import logging

from .domain import (
    AXIS_NAMES,
    AliasError,
    BinaryOp,
    CapacityError,
    CommensurabilityError,
    CompatibilityError,
    Device,
    DeviceMismatchError,
    DeviceNotSupportedError,
    Dimensions,
    ErrorKind,
    IndexStrategy,
    IndexSystem,
    IndexSystemError,
    ShapeError,
    TensorError,
)
from .infrastructure import (
    CpuDriver,
    ExecutionContext,
    KeyTensorConfig,
    Tensor,
    configure_logging,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "AXIS_NAMES",
    AliasError.__name__,
    BinaryOp.__name__,
    CapacityError.__name__,
    CommensurabilityError.__name__,
    CompatibilityError.__name__,
    CpuDriver.__name__,
    Device.__name__,
    DeviceMismatchError.__name__,
    DeviceNotSupportedError.__name__,
    Dimensions.__name__,
    ErrorKind.__name__,
    ExecutionContext.__name__,
    IndexStrategy.__name__,
    IndexSystem.__name__,
    IndexSystemError.__name__,
    KeyTensorConfig.__name__,
    ShapeError.__name__,
    Tensor.__name__,
    TensorError.__name__,
    configure_logging.__name__,
]
