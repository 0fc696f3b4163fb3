from ._errors import (
    AliasError,
    CapacityError,
    CommensurabilityError,
    CompatibilityError,
    DeviceMismatchError,
    DeviceNotSupportedError,
    ErrorKind,
    IndexSystemError,
    ShapeError,
    TensorError,
)
from ._binary_op import BinaryOp
from ._dimensions import AXIS_NAMES, Dimensions
from ._index_system import IndexStrategy, IndexSystem, ensure_index_tensor
from ._driver import IBuffer, IDriver, IEvent, IHostBuffer, IStream
from ._tensor import ITensor
from .device import Device, DeviceLike, DeviceType

__all__ = [
    "AXIS_NAMES",
    AliasError.__name__,
    BinaryOp.__name__,
    CapacityError.__name__,
    CommensurabilityError.__name__,
    CompatibilityError.__name__,
    Device.__name__,
    DeviceLike.__name__,
    DeviceMismatchError.__name__,
    DeviceNotSupportedError.__name__,
    DeviceType.__name__,
    Dimensions.__name__,
    ErrorKind.__name__,
    IBuffer.__name__,
    IDriver.__name__,
    IEvent.__name__,
    IHostBuffer.__name__,
    IStream.__name__,
    ITensor.__name__,
    IndexStrategy.__name__,
    IndexSystem.__name__,
    IndexSystemError.__name__,
    ShapeError.__name__,
    TensorError.__name__,
    ensure_index_tensor.__name__,
]
